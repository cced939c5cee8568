"""Aggregate reports over the cleaned sales table.

Example:
    >>> from retail_sales.reports import catalog, get_report
    >>> catalog.top_customers(table, 5)
    >>> get_report("orders_by_shift").func(table)
"""

from retail_sales.reports.registry import REPORTS, ReportDefinition, get_report, report_names

__all__ = ["REPORTS", "ReportDefinition", "get_report", "report_names"]
