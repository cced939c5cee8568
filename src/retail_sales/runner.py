"""Report Runner: load, clean, then run reports sequentially.

Example:
    >>> from retail_sales.config import ReportConfig
    >>> from retail_sales.runner import run_reports
    >>> config = ReportConfig.from_path("data/retail_sales.csv")
    >>> run = run_reports(config, ["totals_by_category", "top_customers"])
    >>> run.results["top_customers"]
"""

from __future__ import annotations

import logging
import warnings
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Iterable, Optional

import pandas as pd

from retail_sales.cleaning import purge_incomplete
from retail_sales.config import ReportConfig
from retail_sales.exceptions import ConfigError, EmptyResultWarning, ReportArgumentError
from retail_sales.formatters.export import write_results
from retail_sales.metadata import RUN_VERSION, RunMetadata, write_metadata
from retail_sales.reports.registry import REPORTS, ReportDefinition, get_report
from retail_sales.store.readers import load_table
from retail_sales.store.table import TableStore

logger = logging.getLogger(__name__)


@dataclass
class RunResult:
    """Outcome of a report run.

    Attributes:
        dataset: Dataset that was loaded.
        rows_loaded: Records inserted by the load.
        rows_purged: Records removed by the Cleaner.
        results: Report name -> result, in the order the reports ran.
        empty_reports: Names of reports whose result was empty.
    """

    dataset: Path
    rows_loaded: int
    rows_purged: int
    results: dict[str, Any] = field(default_factory=dict)
    empty_reports: list[str] = field(default_factory=list)

    @property
    def rows_live(self) -> int:
        return self.rows_loaded - self.rows_purged


def is_empty_result(result: Any) -> bool:
    """True for an empty DataFrame, None, an empty collection, or all-zero buckets."""
    if result is None:
        return True
    if isinstance(result, pd.DataFrame):
        if result.empty:
            return True
        return "total_orders" in result.columns and int(result["total_orders"].sum()) == 0
    if isinstance(result, (list, tuple, set, dict)):
        return len(result) == 0
    return False


def _select_reports(names: Optional[Iterable[str]]) -> list[ReportDefinition]:
    if not names:
        return list(REPORTS.values())
    selected: list[ReportDefinition] = []
    for name in names:
        definition = get_report(name)
        if definition not in selected:
            selected.append(definition)
    return selected


def run_catalog(
    table: TableStore,
    config: ReportConfig,
    names: Optional[Iterable[str]] = None,
) -> dict[str, Any]:
    """Run reports against an already-cleaned table.

    Args:
        table: Cleaned Table Store; it is only read.
        config: Supplies the parameters of parameterised reports.
        names: Reports to run; all reports in catalog order when None/empty.

    Returns:
        Mapping of report name -> result.

    Raises:
        ConfigError: If a name is unknown or a configured parameter is invalid.
    """
    results: dict[str, Any] = {}
    for definition in _select_reports(names):
        logger.debug("Running report %s", definition.name)
        try:
            result = definition.run(table, config)
        except ReportArgumentError as e:
            raise ConfigError(f"Report '{definition.name}': {e}") from e
        if is_empty_result(result):
            logger.info("Report %s returned an empty result", definition.name)
            warnings.warn(
                f"Report '{definition.name}' matched no rows", EmptyResultWarning, stacklevel=2
            )
        results[definition.name] = result
    return results


def run_reports(config: ReportConfig, names: Optional[Iterable[str]] = None) -> RunResult:
    """Load the dataset, purge incomplete records and run reports.

    When ``config.output_dir`` is set, DataFrame results are written as CSV,
    scalar results to ``scalars.json``, and run metadata to ``_meta/``
    (also on failure, with status "failed").

    Raises:
        FileNotFoundError: If the dataset does not exist.
        SchemaError: If the dataset does not match the table schema.
        ConfigError: If a report name or parameter is invalid.
    """
    names = list(names) if names else None
    rows_loaded = rows_purged = 0
    try:
        # Resolve names up front so a typo fails before the load
        _select_reports(names)

        logger.info("Loading dataset %s", config.dataset)
        table = load_table(config.dataset)
        rows_loaded = table.count()
        rows_purged = purge_incomplete(table)

        results = run_catalog(table, config, names)
        run = RunResult(
            dataset=config.dataset,
            rows_loaded=rows_loaded,
            rows_purged=rows_purged,
            results=results,
            empty_reports=[n for n, r in results.items() if is_empty_result(r)],
        )
    except Exception as e:
        logger.error("Report run failed: %s", e)
        _record_run(config, rows_loaded, rows_purged, [], [], status="failed", error=str(e))
        raise

    if config.output_dir is not None:
        config.ensure_dirs()
        write_results(config.output_dir, run.results)
    _record_run(config, rows_loaded, rows_purged, list(run.results), run.empty_reports)
    logger.info(
        "Ran %d report(s) over %d record(s) (%d purged)",
        len(run.results),
        run.rows_live,
        rows_purged,
    )
    return run


def _record_run(
    config: ReportConfig,
    rows_loaded: int,
    rows_purged: int,
    reports: list[str],
    empty_reports: list[str],
    status: str = "ok",
    error: Optional[str] = None,
) -> None:
    if config.meta_dir is None:
        return
    write_metadata(
        config.meta_dir,
        RunMetadata(
            dataset=str(config.dataset),
            rows_loaded=rows_loaded,
            rows_purged=rows_purged,
            reports=reports,
            version=RUN_VERSION,
            last_run=datetime.now().isoformat(),
            status=status,
            empty_reports=empty_reports,
            error=error,
        ),
    )
