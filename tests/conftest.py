"""Shared fixtures for the retail sales tests."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable

import pandas as pd
import pytest

from retail_sales.store.table import TableStore

COLUMNS = [
    "transaction_id",
    "sale_date",
    "sale_time",
    "customer_id",
    "gender",
    "age",
    "category",
    "quantity",
    "price_per_unit",
    "cogs",
    "total_sale",
]


def make_row(transaction_id: int, **overrides: Any) -> dict[str, Any]:
    """A complete sales row; keyword arguments override single fields."""
    row: dict[str, Any] = {
        "transaction_id": transaction_id,
        "sale_date": "2022-11-05",
        "sale_time": "10:15:00",
        "customer_id": 100 + (transaction_id or 0),
        "gender": "Female",
        "age": 30,
        "category": "Beauty",
        "quantity": 2,
        "price_per_unit": 50.0,
        "cogs": 20.0,
        "total_sale": 100.0,
    }
    row.update(overrides)
    return row


# id, date, time, customer, gender, age, category, qty, price, cogs, total
_SAMPLE = [
    (1, "2022-11-05", "09:00:00", 1, "Male", 18, "Clothing", 4, 50.0, 60.0, 200.0),
    (2, "2022-11-05", "13:30:00", 2, "Female", 25, "Beauty", 1, 300.0, 90.0, 300.0),
    (3, "2022-11-08", "18:30:00", 1, "Male", 34, "Electronics", 2, 500.0, 400.0, 1000.0),
    (4, "2022-11-20", "11:59:00", 3, "Female", 45, "Clothing", 3, 100.0, 120.0, 300.0),
    (5, "2022-12-01", "17:59:00", 2, "Female", 52, "Beauty", 2, 25.0, 20.0, 50.0),
    (6, "2023-01-10", "12:00:00", 4, "Male", 29, "Electronics", 4, 300.0, 500.0, 1200.0),
    (7, "2023-02-14", "20:00:00", 3, "Female", 39, "Clothing", 4, 30.0, 40.0, 120.0),
    (8, "2023-02-18", "08:00:00", 5, "Male", 60, "Beauty", 1, 500.0, 150.0, 500.0),
]


@pytest.fixture
def row_factory() -> Callable[..., dict[str, Any]]:
    return make_row


@pytest.fixture
def sample_rows() -> list[dict[str, Any]]:
    """Eight complete sales rows across three categories, two years and all shifts.

    Dates: 2022-11-05 and 2023-02-18 are Saturdays, 2022-11-20 is a Sunday,
    the rest are weekdays.
    """
    return [dict(zip(COLUMNS, values)) for values in _SAMPLE]


@pytest.fixture
def sample_table(sample_rows: list[dict[str, Any]]) -> TableStore:
    return TableStore.from_rows(sample_rows)


@pytest.fixture
def write_csv(tmp_path: Path) -> Callable[..., Path]:
    """Write rows to a CSV file under tmp_path and return its path."""

    def _write(rows: list[dict[str, Any]], name: str = "retail_sales.csv") -> Path:
        path = tmp_path / name
        pd.DataFrame(rows).to_csv(path, index=False)
        return path

    return _write


@pytest.fixture
def sample_csv(write_csv: Callable[..., Path], sample_rows: list[dict[str, Any]]) -> Path:
    """Sample rows plus one incomplete row (id 9, no gender) in a CSV file."""
    incomplete = make_row(9, gender=None)
    return write_csv(sample_rows + [incomplete])
