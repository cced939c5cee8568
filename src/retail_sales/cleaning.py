"""Cleaner: remove incomplete sales records.

A record is incomplete when any of ``CHECKED_FIELDS`` is null. The Cleaner
deletes such records from the Table Store; it never fills or mutates values.
``total_sale`` is not part of the check.
"""

from __future__ import annotations

import logging

import pandas as pd

from retail_sales.store.schema import CHECKED_FIELDS, COLUMNS
from retail_sales.store.table import TableStore

logger = logging.getLogger(__name__)


def incomplete_mask(df: pd.DataFrame) -> pd.Series:
    """Frame predicate: True for rows with a null in any checked field."""
    return df[CHECKED_FIELDS].isna().any(axis=1)


def purge_incomplete(table: TableStore) -> int:
    """Delete every incomplete record from ``table``.

    Idempotent: a second call removes nothing.

    Returns:
        Number of records removed.
    """
    before = table.count()
    removed = table.delete_where(incomplete_mask)
    if removed:
        logger.info(
            "Purged %d incomplete record(s) of %d; %d remain", removed, before, table.count()
        )
    else:
        logger.info("No incomplete records found (%d live)", before)
    return removed


def null_profile(table: TableStore) -> pd.DataFrame:
    """Null count per column, for inspecting a table before purging.

    Returns:
        DataFrame with columns ``column``, ``null_count`` and ``checked``
        (whether the column is part of the completeness check), one row
        per table column in schema order.
    """
    counts = table.frame[COLUMNS].isna().sum()
    return pd.DataFrame(
        {
            "column": COLUMNS,
            "null_count": [int(counts[c]) for c in COLUMNS],
            "checked": [c in CHECKED_FIELDS for c in COLUMNS],
        }
    )
