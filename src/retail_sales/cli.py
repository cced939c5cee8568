r"""Run retail sales reports from the command line.

Usage
-----
Full catalog:
    retail-sales data/retail_sales.csv

Selected reports, JSON output:
    retail-sales data/retail_sales.csv -r top_customers -r orders_by_shift --format json

Export results and run metadata:
    retail-sales data/retail_sales.csv --output-dir out/

Override report parameters:
    retail-sales data/retail_sales.csv -r filter_category_qty_month \
        --category Beauty --month 2022-12 --min-quantity 3

Exit codes:
    0 on success
    1 when the dataset file does not exist or cannot be opened
    2 on schema/argument errors
"""

from __future__ import annotations

import argparse
import logging
import sys
import warnings
from dataclasses import MISSING, fields
from typing import Any, Sequence

from retail_sales.config import ReportConfig
from retail_sales.exceptions import ConfigError, EmptyResultWarning, SchemaError
from retail_sales.formatters.console import format_results
from retail_sales.formatters.export import results_to_json
from retail_sales.reports.registry import REPORTS
from retail_sales.runner import run_reports

logger = logging.getLogger(__name__)


def _config_defaults() -> dict[str, Any]:
    """Default report parameters declared on ReportConfig."""
    return {f.name: f.default for f in fields(ReportConfig) if f.default is not MISSING}


def _build_parser() -> argparse.ArgumentParser:
    defaults = _config_defaults()
    p = argparse.ArgumentParser(
        prog="retail-sales",
        description=(
            "Load a retail sales CSV, remove incomplete rows and print aggregate reports."
        ),
    )
    p.add_argument("dataset", nargs="?", help="Path (or glob) of the sales CSV file.")
    p.add_argument(
        "-r",
        "--report",
        action="append",
        dest="reports",
        metavar="NAME",
        help="Report to run; repeatable. Runs the full catalog when omitted.",
    )
    p.add_argument(
        "-o",
        "--output-dir",
        default=None,
        help="Write each result as CSV plus run metadata to this directory.",
    )
    p.add_argument(
        "--format",
        choices=["text", "json"],
        default="text",
        help="Output format for printed results (default: text).",
    )
    p.add_argument("--date", default=defaults["report_date"], help="Date for sales_on_date.")
    p.add_argument(
        "--category",
        default=defaults["filter_category"],
        help="Category for filter_category_qty_month.",
    )
    p.add_argument(
        "--month", default=defaults["filter_month"], help="YYYY-MM for filter_category_qty_month."
    )
    p.add_argument(
        "--min-quantity",
        type=int,
        default=defaults["min_quantity"],
        help="Inclusive quantity threshold for filter_category_qty_month.",
    )
    p.add_argument(
        "--age-category",
        default=defaults["age_category"],
        help="Category for avg_age_for_category.",
    )
    p.add_argument(
        "--threshold",
        type=float,
        default=defaults["high_value_threshold"],
        help="total_sale threshold for high_value_transactions.",
    )
    p.add_argument(
        "--top", type=int, default=defaults["top_n"], help="Number of customers in top_customers."
    )
    p.add_argument(
        "--list-reports", action="store_true", help="List available reports and exit."
    )
    p.add_argument(
        "--verbose",
        "--debug",
        action="store_true",
        dest="verbose",
        help="Verbose/debug logging output.",
    )
    return p


def _list_reports() -> str:
    width = max(len(name) for name in REPORTS)
    return "\n".join(f"{name:<{width}}  {d.description}" for name, d in REPORTS.items())


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    log_level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(level=log_level, format="%(levelname)s: %(message)s")
    # Empty results are logged by the runner
    warnings.simplefilter("ignore", EmptyResultWarning)

    if args.list_reports:
        print(_list_reports())
        return 0
    if not args.dataset:
        parser.print_usage(sys.stderr)
        print("ERROR: a dataset path is required.", file=sys.stderr)
        return 2

    config = ReportConfig.from_path(
        args.dataset,
        args.output_dir,
        report_date=args.date,
        filter_category=args.category,
        filter_month=args.month,
        min_quantity=args.min_quantity,
        age_category=args.age_category,
        high_value_threshold=args.threshold,
        top_n=args.top,
    )

    try:
        run = run_reports(config, args.reports)
    except OSError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1
    except (SchemaError, ConfigError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 2

    if args.format == "json":
        print(results_to_json(run.results))
    else:
        print(format_results(run.results))
    if config.output_dir is not None:
        print(f"\nWrote: {config.output_dir}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
