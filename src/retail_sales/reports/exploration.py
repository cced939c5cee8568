"""Dataset overview reports: how many sales, customers and categories."""

from __future__ import annotations

from retail_sales.store.table import TableStore


def record_count(table: TableStore) -> int:
    """Total number of sales records."""
    return table.count()


def customer_count(table: TableStore) -> int:
    """Number of distinct customers."""
    return len(table.distinct_values("customer_id"))


def category_list(table: TableStore) -> list[str]:
    """Distinct categories, sorted alphabetically."""
    return sorted(table.distinct_values("category"))
