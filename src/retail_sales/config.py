"""Configuration for a report run.

This module provides a single configuration class used by the runner,
the registry and the CLI.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

OUTPUT_DIR_ENV = "RETAIL_SALES_OUTPUT_DIR"


@dataclass
class ReportConfig:
    """Dataset location, output location and report parameters.

    The parameter defaults reproduce the standard retail
    sales questions (November 2022 clothing orders, beauty customers, etc.).

    Attributes:
        dataset: Path to the sales CSV file.
        output_dir: Directory for exported results and run metadata.
            When None, results are only returned/printed.
        report_date: Date used by ``sales_on_date`` (YYYY-MM-DD).
        filter_category: Category used by ``filter_category_qty_month``.
        filter_month: Year-month used by ``filter_category_qty_month`` (YYYY-MM).
        min_quantity: Inclusive quantity threshold for ``filter_category_qty_month``.
        age_category: Category used by ``avg_age_for_category``.
        high_value_threshold: Strict lower bound for ``high_value_transactions``.
        top_n: Number of customers returned by ``top_customers``.

    Directory Structure:
        output_dir/
        ├── <report_name>.csv   # one file per DataFrame result
        ├── scalars.json        # scalar results (averages, single category)
        └── _meta/              # run metadata
    """

    dataset: Path
    output_dir: Path | None = None
    report_date: str = "2022-11-05"
    filter_category: str = "Clothing"
    filter_month: str = "2022-11"
    min_quantity: int = 4
    age_category: str = "Beauty"
    high_value_threshold: float = 1000.0
    top_n: int = 5

    @classmethod
    def from_path(
        cls,
        dataset: str | Path,
        output_dir: str | Path | None = None,
        **params: object,
    ) -> ReportConfig:
        """Create a ReportConfig from a dataset path.

        If ``output_dir`` is not given, the ``RETAIL_SALES_OUTPUT_DIR``
        environment variable is used when set.

        Args:
            dataset: Path to the sales CSV file.
            output_dir: Optional directory for exported results.
            **params: Report parameter overrides (see class attributes).

        Returns:
            ReportConfig instance.

        Examples:
            >>> config = ReportConfig.from_path("data/sales.csv")
            >>> config.dataset
            PosixPath('data/sales.csv')
        """
        if isinstance(dataset, str):
            dataset = Path(dataset)
        if output_dir is None:
            env_dir = os.environ.get(OUTPUT_DIR_ENV)
            output_dir = Path(env_dir) if env_dir else None
        elif isinstance(output_dir, str):
            output_dir = Path(output_dir)

        return cls(dataset=dataset, output_dir=output_dir, **params)  # type: ignore[arg-type]

    @property
    def meta_dir(self) -> Path | None:
        """Directory holding run metadata files."""
        if self.output_dir is None:
            return None
        return self.output_dir / "_meta"

    def ensure_dirs(self) -> None:
        """Create the output directories, if an output directory is configured."""
        if self.output_dir is None:
            return
        self.output_dir.mkdir(parents=True, exist_ok=True)
        self.meta_dir.mkdir(parents=True, exist_ok=True)  # type: ignore[union-attr]
