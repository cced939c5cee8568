"""Report catalog: the fixed set of aggregate reports over the sales table.

Every report is a pure function of a ``TableStore``: it reads
``table.frame`` (a copy) and never mutates the store. Reports return

- a DataFrame of matching records, in load order (record reports),
- a DataFrame with named columns (grouped and ranked reports), or
- a Python scalar, None when undefined (single-value reports).

An empty table yields empty DataFrames, zero counts or None, never an error.
Averages are rounded half-up to 2 decimals after ranking, so ranking and
tie-breaks always use the exact values.
"""

from __future__ import annotations

import logging
import re
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Optional

import numpy as np
import pandas as pd

from retail_sales.exceptions import ReportArgumentError
from retail_sales.store.parsing import to_date
from retail_sales.store.table import TableStore

logger = logging.getLogger(__name__)

SHIFTS = ["Morning", "Afternoon", "Evening"]
DAY_TYPES = ["Weekend", "Weekday"]
AGE_GROUPS = ["<20", "20-29", "30-39", "40-49", "50+"]

_YEAR_MONTH_RE = re.compile(r"^(\d{4})-(\d{1,2})$")


# ---------- helpers ----------


def round_half_up(value: Any, places: int = 2) -> Optional[float]:
    """Round half away from zero (SQL ROUND semantics), None for missing.

    Examples:
        >>> round_half_up(2.675)
        2.68
        >>> round_half_up(0.125)
        0.13
    """
    if value is None or pd.isna(value):
        return None
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(repr(float(value))).quantize(quantum, rounding=ROUND_HALF_UP))


def _round_columns(df: pd.DataFrame, columns: list[str]) -> pd.DataFrame:
    for col in columns:
        df[col] = df[col].map(round_half_up).astype("float64")
    return df


def _select(df: pd.DataFrame, mask: pd.Series) -> pd.DataFrame:
    """Rows where ``mask`` is True; null mask entries count as False."""
    return df[mask.fillna(False).astype(bool)].reset_index(drop=True)


def _parse_year_month(year_month: str) -> tuple[int, int]:
    match = _YEAR_MONTH_RE.match(str(year_month).strip())
    if not match or not 1 <= int(match.group(2)) <= 12:
        raise ReportArgumentError(f"Invalid year-month '{year_month}'. Expected YYYY-MM.")
    return int(match.group(1)), int(match.group(2))


def _whole_number(value: Any, name: str, minimum: Optional[int] = None) -> int:
    """Validate an integral report argument; 4.0 is accepted, 3.5 is not."""
    numeric = isinstance(value, (int, float, np.integer, np.floating)) and not isinstance(value, bool)
    if not numeric or not float(value).is_integer():
        raise ReportArgumentError(f"{name} must be a whole number, got {value!r}")
    if minimum is not None and value < minimum:
        raise ReportArgumentError(f"{name} must be >= {minimum}, got {value}")
    return int(value)


def _hours(df: pd.DataFrame) -> pd.Series:
    """Hour of day of every non-null sale_time."""
    return (df["sale_time"].dropna() // pd.Timedelta(hours=1)).astype("int64")


def _bucket_counts(labels: np.ndarray, order: list[str], key: str) -> pd.DataFrame:
    counts = pd.Series(labels, dtype=object).value_counts().reindex(order, fill_value=0)
    return pd.DataFrame({key: order, "total_orders": [int(counts[k]) for k in order]})


# ---------- record reports ----------


def sales_on_date(table: TableStore, sale_date: str | date) -> pd.DataFrame:
    """All records sold on ``sale_date``.

    Raises:
        ValueError: If ``sale_date`` is not a valid date.
    """
    try:
        ts = to_date(sale_date)
    except ValueError as e:
        raise ReportArgumentError(f"Invalid date: {e}") from e
    if ts is None:
        raise ReportArgumentError(f"Invalid date: {sale_date!r}")
    df = table.frame
    return _select(df, df["sale_date"] == ts)


def filter_category_qty_month(
    table: TableStore,
    category: str,
    year_month: str,
    min_quantity: int,
) -> pd.DataFrame:
    """Records of ``category`` sold in ``year_month`` with quantity >= ``min_quantity``.

    Args:
        table: Cleaned table.
        category: Exact category name, e.g. "Clothing".
        year_month: Month in YYYY-MM format.
        min_quantity: Inclusive quantity threshold.

    Raises:
        ValueError: If ``year_month`` is malformed or ``min_quantity`` is not
            a whole number.
    """
    year, month = _parse_year_month(year_month)
    min_quantity = _whole_number(min_quantity, "min_quantity")
    df = table.frame
    mask = (
        (df["category"] == category)
        & (df["sale_date"].dt.year == year)
        & (df["sale_date"].dt.month == month)
        & (df["quantity"] >= min_quantity)
    )
    return _select(df, mask)


def high_value_transactions(table: TableStore, threshold: float) -> pd.DataFrame:
    """Records with total_sale strictly greater than ``threshold``.

    Raises:
        ValueError: If ``threshold`` is negative.
    """
    if threshold < 0:
        raise ReportArgumentError(f"threshold must be >= 0, got {threshold}")
    df = table.frame
    return _select(df, df["total_sale"] > threshold)


# ---------- grouped reports ----------


def totals_by_category(table: TableStore) -> pd.DataFrame:
    """Net sales and order count per category.

    Returns:
        DataFrame with columns ``category``, ``net_sale``, ``total_orders``,
        ordered by category. Categories without records are absent.
    """
    out = (
        table.frame.groupby("category")
        .agg(net_sale=("total_sale", "sum"), total_orders=("transaction_id", "count"))
        .reset_index()
    )
    out["total_orders"] = out["total_orders"].astype("int64")
    return _round_columns(out, ["net_sale"])


def avg_age_for_category(table: TableStore, category: str) -> Optional[float]:
    """Average customer age for ``category``, rounded to 2 decimals.

    Returns:
        The average, or None when the category has no records.
    """
    df = table.frame
    ages = df.loc[df["category"] == category, "age"].dropna()
    if ages.empty:
        logger.debug("No records for category %r", category)
        return None
    return round_half_up(float(ages.astype("float64").mean()))


def count_by_gender_category(table: TableStore) -> pd.DataFrame:
    """Transaction count per (category, gender), ordered by category then gender."""
    out = (
        table.frame.groupby(["category", "gender"])
        .size()
        .reset_index(name="total_transactions")
        .sort_values(["category", "gender"], kind="mergesort")
        .reset_index(drop=True)
    )
    out["total_transactions"] = out["total_transactions"].astype("int64")
    return out


def best_month_per_year(table: TableStore) -> pd.DataFrame:
    """For each year, the month with the highest average total_sale.

    Ties on the average go to the lowest month number.

    Returns:
        DataFrame with columns ``year``, ``month``, ``avg_sale``, one row per
        year, ordered by year.
    """
    df = table.frame.dropna(subset=["sale_date"])
    df = df.assign(
        year=df["sale_date"].dt.year.astype("int64"),
        month=df["sale_date"].dt.month.astype("int64"),
    )
    monthly = (
        df.groupby(["year", "month"])["total_sale"]
        .mean()
        .reset_index(name="avg_sale")
        .dropna(subset=["avg_sale"])
    )
    best = (
        monthly.sort_values(
            ["year", "avg_sale", "month"], ascending=[True, False, True], kind="mergesort"
        )
        .groupby("year")
        .head(1)
        .reset_index(drop=True)
    )
    return _round_columns(best, ["avg_sale"])


def top_customers(table: TableStore, n: int = 5) -> pd.DataFrame:
    """Top ``n`` customers by summed total_sale.

    Ordered by total descending; equal totals are ordered by ascending
    customer_id.

    Returns:
        DataFrame with columns ``customer_id`` and ``total_sales``, at most
        ``n`` rows.

    Raises:
        ValueError: If ``n`` < 1.
    """
    n = _whole_number(n, "n", minimum=1)
    totals = table.frame.groupby("customer_id")["total_sale"].sum().reset_index(name="total_sales")
    top = (
        totals.sort_values(["total_sales", "customer_id"], ascending=[False, True], kind="mergesort")
        .head(n)
        .reset_index(drop=True)
    )
    top["customer_id"] = top["customer_id"].astype("int64")
    return _round_columns(top, ["total_sales"])


def unique_customers_by_category(table: TableStore) -> pd.DataFrame:
    """Distinct customer count per category."""
    out = (
        table.frame.groupby("category")["customer_id"]
        .nunique()
        .reset_index(name="unique_customers")
    )
    out["unique_customers"] = out["unique_customers"].astype("int64")
    return out


def orders_by_shift(table: TableStore) -> pd.DataFrame:
    """Order count per shift of day.

    Morning is hour < 12, Afternoon 12 <= hour <= 17, Evening hour >= 18.
    All three shifts are always present, with 0 when empty.
    """
    hours = _hours(table.frame).to_numpy()
    labels = np.select([hours < 12, hours <= 17], SHIFTS[:2], default=SHIFTS[2])
    return _bucket_counts(labels, SHIFTS, "shift")


def avg_purchase_by_gender(table: TableStore) -> pd.DataFrame:
    """Average total_sale per gender, highest first, rounded to 2 decimals."""
    out = (
        table.frame.groupby("gender")["total_sale"]
        .mean()
        .dropna()
        .reset_index(name="avg_sale")
        .sort_values("avg_sale", ascending=False, kind="mergesort")
        .reset_index(drop=True)
    )
    return _round_columns(out, ["avg_sale"])


def top_priced_category(table: TableStore) -> Optional[str]:
    """Category with the highest average price_per_unit.

    On a tie, the category seen first in load order wins. None when the
    table is empty.
    """
    means = table.frame.groupby("category", sort=False)["price_per_unit"].mean().dropna()
    if means.empty:
        return None
    return str(means.idxmax())


def weekend_vs_weekday(table: TableStore) -> pd.DataFrame:
    """Order count on weekends (Saturday, Sunday) versus weekdays.

    Day of week is computed from the calendar date, independent of locale.
    """
    dow = table.frame["sale_date"].dropna().dt.dayofweek.to_numpy()
    labels = np.where(dow >= 5, DAY_TYPES[0], DAY_TYPES[1])
    return _bucket_counts(labels, DAY_TYPES, "day_type")


def age_group_distribution(table: TableStore) -> pd.DataFrame:
    """Customer count per age bucket, in bucket order.

    Buckets: <20, 20-29, 30-39, 40-49, 50+. Every bucket is present.
    """
    ages = table.frame["age"].dropna().astype("int64").to_numpy()
    labels = np.select(
        [ages < 20, ages < 30, ages < 40, ages < 50], AGE_GROUPS[:4], default=AGE_GROUPS[4]
    )
    return _bucket_counts(labels, AGE_GROUPS, "age_group")


def profit_margin_by_category(table: TableStore) -> pd.DataFrame:
    """Profit per category, highest total profit first.

    Profit of a record is total_sale - cogs; records with a null total_sale
    contribute no profit.

    Returns:
        DataFrame with columns ``category``, ``net_sale``, ``total_cogs``,
        ``total_profit``, ``avg_profit`` (per transaction) and
        ``margin_pct`` (total_profit / net_sale * 100, null when net_sale is 0).
    """
    df = table.frame
    df = df.assign(profit=df["total_sale"] - df["cogs"])
    out = (
        df.groupby("category")
        .agg(
            net_sale=("total_sale", "sum"),
            total_cogs=("cogs", "sum"),
            total_profit=("profit", "sum"),
            avg_profit=("profit", "mean"),
        )
        .reset_index()
        .sort_values("total_profit", ascending=False, kind="mergesort")
        .reset_index(drop=True)
    )
    out["margin_pct"] = (out["total_profit"] / out["net_sale"] * 100).where(out["net_sale"] > 0)
    return _round_columns(
        out, ["net_sale", "total_cogs", "total_profit", "avg_profit", "margin_pct"]
    )
