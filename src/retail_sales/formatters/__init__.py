"""Formatters for report results: console text and file/JSON export."""

from retail_sales.formatters.console import format_report, format_results
from retail_sales.formatters.export import presentable, results_to_json, write_results

__all__ = ["format_report", "format_results", "presentable", "results_to_json", "write_results"]
