"""Retail sales reporting engine.

Loads a single retail sales table from CSV, removes incomplete records and
runs a fixed catalog of aggregate reports over it.

Module Structure:
    retail_sales.store: Table Store, Record, schema and CSV reader
    retail_sales.cleaning: Cleaner (purge of incomplete records)
    retail_sales.reports: Report catalog and registry
    retail_sales.runner: Report Runner (load -> clean -> report)
    retail_sales.cli: Command line entry point

Quick Start:
    >>> from retail_sales import ReportConfig, run_reports
    >>> config = ReportConfig.from_path("data/retail_sales.csv")
    >>> run = run_reports(config)
    >>> run.results["totals_by_category"]
"""

__version__ = "0.1.0"

from retail_sales.config import ReportConfig
from retail_sales.exceptions import (
    ConfigError,
    DataQualityError,
    EmptyResultWarning,
    ReportArgumentError,
    RetailSalesError,
    SchemaError,
)
from retail_sales.runner import RunResult, run_reports
from retail_sales.store import Record, TableStore

__all__ = [
    "ConfigError",
    "DataQualityError",
    "EmptyResultWarning",
    "Record",
    "ReportArgumentError",
    "ReportConfig",
    "RetailSalesError",
    "RunResult",
    "SchemaError",
    "TableStore",
    "__version__",
    "run_reports",
]
