"""Record: one retail sales transaction line."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, time
from typing import Any, Optional

import pandas as pd


def _opt(value: Any) -> Any:
    """Map pandas missing markers (NaN, NaT, NA) to None."""
    if value is None or value is pd.NA or value is pd.NaT:
        return None
    try:
        if pd.isna(value):
            return None
    except (TypeError, ValueError):
        pass
    return value


@dataclass(frozen=True)
class Record:
    """A single sales transaction.

    Before the Cleaner has run, any field except ``transaction_id`` may be
    None. After ``purge_incomplete`` only ``total_sale`` may still be None.

    Attributes:
        transaction_id: Unique transaction identifier.
        sale_date: Calendar date of the sale.
        sale_time: Time of day of the sale.
        customer_id: Customer identifier (one customer, many records).
        gender: "Male" or "Female".
        age: Customer age in years.
        category: Product category, e.g. "Clothing".
        quantity: Units sold.
        price_per_unit: Unit price.
        cogs: Cost of goods sold for the line.
        total_sale: Realized revenue for the line.
    """

    transaction_id: int
    sale_date: Optional[date]
    sale_time: Optional[time]
    customer_id: Optional[int]
    gender: Optional[str]
    age: Optional[int]
    category: Optional[str]
    quantity: Optional[int]
    price_per_unit: Optional[float]
    cogs: Optional[float]
    total_sale: Optional[float]

    @property
    def hour(self) -> Optional[int]:
        """Hour of the sale, used for shift buckets."""
        return None if self.sale_time is None else self.sale_time.hour

    @property
    def profit(self) -> Optional[float]:
        """Line profit (total_sale - cogs)."""
        if self.total_sale is None or self.cogs is None:
            return None
        return self.total_sale - self.cogs

    @classmethod
    def from_row(cls, row: Any) -> Record:
        """Build a Record from a row of the table's typed DataFrame.

        ``row`` is anything exposing the column names as attributes, such as
        the namedtuples produced by ``DataFrame.itertuples``.
        """
        sale_date = _opt(row.sale_date)
        sale_time = _opt(row.sale_time)
        if sale_time is not None:
            sale_time = (pd.Timestamp(0) + pd.Timedelta(sale_time)).time()
        return cls(
            transaction_id=int(row.transaction_id),
            sale_date=None if sale_date is None else pd.Timestamp(sale_date).date(),
            sale_time=sale_time,
            customer_id=_int_or_none(row.customer_id),
            gender=_opt(row.gender),
            age=_int_or_none(row.age),
            category=_opt(row.category),
            quantity=_int_or_none(row.quantity),
            price_per_unit=_float_or_none(row.price_per_unit),
            cogs=_float_or_none(row.cogs),
            total_sale=_float_or_none(row.total_sale),
        )


def _int_or_none(value: Any) -> Optional[int]:
    value = _opt(value)
    return None if value is None else int(value)


def _float_or_none(value: Any) -> Optional[float]:
    value = _opt(value)
    return None if value is None else float(value)
