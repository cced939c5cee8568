"""Tests for the report catalog.

Expected values are computed by hand from the ``sample_rows`` fixture:

    id  date        time   cust gender age category     qty price  cogs  total
    1   2022-11-05  09:00  1    Male    18  Clothing     4   50     60    200
    2   2022-11-05  13:30  2    Female  25  Beauty       1   300    90    300
    3   2022-11-08  18:30  1    Male    34  Electronics  2   500    400   1000
    4   2022-11-20  11:59  3    Female  45  Clothing     3   100    120   300
    5   2022-12-01  17:59  2    Female  52  Beauty       2   25     20    50
    6   2023-01-10  12:00  4    Male    29  Electronics  4   300    500   1200
    7   2023-02-14  20:00  3    Female  39  Clothing     4   30     40    120
    8   2023-02-18  08:00  5    Male    60  Beauty       1   500    150   500
"""

from typing import Any, Callable

import pandas as pd
import pytest

from retail_sales.cleaning import purge_incomplete
from retail_sales.exceptions import ConfigError, ReportArgumentError
from retail_sales.reports import catalog, exploration
from retail_sales.reports.catalog import round_half_up
from retail_sales.store import TableStore


def _ids(df: pd.DataFrame) -> list[int]:
    return df["transaction_id"].tolist()


# ---------- rounding ----------


@pytest.mark.parametrize(
    ("value", "expected"),
    [(2.675, 2.68), (0.125, 0.13), (1.005, 1.01), (-2.675, -2.68), (45.666666, 45.67)],
)
def test_round_half_up(value: float, expected: float) -> None:
    """Halves round away from zero, including values binary floats store just below .5."""
    assert round_half_up(value) == expected


def test_round_half_up_missing_is_none() -> None:
    assert round_half_up(None) is None
    assert round_half_up(float("nan")) is None


# ---------- record reports ----------


def test_sales_on_date(sample_table: TableStore) -> None:
    """Records sold on the date are returned in load order."""
    assert _ids(catalog.sales_on_date(sample_table, "2022-11-05")) == [1, 2]


def test_sales_on_date_without_sales_is_empty(sample_table: TableStore) -> None:
    assert catalog.sales_on_date(sample_table, "2022-11-06").empty


@pytest.mark.parametrize("raw", ["not-a-date", "now", "today", "2022"])
def test_sales_on_date_rejects_invalid_date(sample_table: TableStore, raw: str) -> None:
    """Relative words and partial dates are invalid arguments, not the current date."""
    with pytest.raises(ValueError):
        catalog.sales_on_date(sample_table, raw)


def test_filter_category_qty_month_threshold_is_inclusive(sample_table: TableStore) -> None:
    """Quantity equal to the threshold matches."""
    assert _ids(catalog.filter_category_qty_month(sample_table, "Clothing", "2022-11", 4)) == [1]
    assert _ids(catalog.filter_category_qty_month(sample_table, "Clothing", "2022-11", 3)) == [
        1,
        4,
    ]
    assert _ids(catalog.filter_category_qty_month(sample_table, "Clothing", "2023-02", 4)) == [7]


def test_filter_category_qty_month_accepts_integral_float(sample_table: TableStore) -> None:
    assert _ids(catalog.filter_category_qty_month(sample_table, "Clothing", "2022-11", 3.0)) == [
        1,
        4,
    ]


@pytest.mark.parametrize("min_quantity", [3.5, "4", None, True])
def test_filter_category_qty_month_rejects_non_integral_threshold(
    sample_table: TableStore, min_quantity: Any
) -> None:
    """A fractional threshold is an error; it must not silently match quantity 3."""
    with pytest.raises(ReportArgumentError, match="min_quantity"):
        catalog.filter_category_qty_month(sample_table, "Clothing", "2022-11", min_quantity)


@pytest.mark.parametrize("year_month", ["2022-13", "Nov 2022", "2022"])
def test_filter_category_qty_month_rejects_bad_month(
    sample_table: TableStore, year_month: str
) -> None:
    with pytest.raises(ValueError):
        catalog.filter_category_qty_month(sample_table, "Clothing", year_month, 4)


def test_high_value_is_strictly_greater(sample_table: TableStore) -> None:
    """A total exactly at the threshold is not high value."""
    # id 3 has total_sale exactly 1000
    assert _ids(catalog.high_value_transactions(sample_table, 1000)) == [6]
    assert _ids(catalog.high_value_transactions(sample_table, 999.99)) == [3, 6]


def test_high_value_rejects_negative_threshold(sample_table: TableStore) -> None:
    with pytest.raises(ValueError):
        catalog.high_value_transactions(sample_table, -1)


def test_argument_errors_are_config_and_value_errors(sample_table: TableStore) -> None:
    """Invalid report arguments can be caught either as ValueError or as ConfigError."""
    with pytest.raises(ReportArgumentError) as exc_info:
        catalog.top_customers(sample_table, 0)
    assert isinstance(exc_info.value, ValueError)
    assert isinstance(exc_info.value, ConfigError)


# ---------- grouped reports ----------


def test_totals_by_category(sample_table: TableStore) -> None:
    """Net sales and order counts per category, ordered by category."""
    out = catalog.totals_by_category(sample_table)
    assert out["category"].tolist() == ["Beauty", "Clothing", "Electronics"]
    assert out["net_sale"].tolist() == [850.0, 620.0, 2200.0]
    assert out["total_orders"].tolist() == [3, 3, 2]


def test_totals_sum_to_total_sales(sample_table: TableStore) -> None:
    """The per-category totals add up to the table's total sales."""
    total = catalog.totals_by_category(sample_table)["net_sale"].sum()
    assert total == pytest.approx(sample_table.frame["total_sale"].sum())
    assert total == pytest.approx(3670.0)


def test_avg_age_for_category(sample_table: TableStore) -> None:
    """Averages are rounded to 2 decimals; unknown categories give None."""
    assert catalog.avg_age_for_category(sample_table, "Beauty") == 45.67
    assert catalog.avg_age_for_category(sample_table, "Clothing") == 34.0
    assert catalog.avg_age_for_category(sample_table, "Toys") is None


def test_count_by_gender_category(sample_table: TableStore) -> None:
    """Only observed (category, gender) pairs are listed, ordered by both keys."""
    out = catalog.count_by_gender_category(sample_table)
    assert list(out.itertuples(index=False, name=None)) == [
        ("Beauty", "Female", 2),
        ("Beauty", "Male", 1),
        ("Clothing", "Female", 2),
        ("Clothing", "Male", 1),
        ("Electronics", "Male", 2),
    ]


def test_best_month_per_year(sample_table: TableStore) -> None:
    """One row per year holding the month with the highest average sale."""
    out = catalog.best_month_per_year(sample_table)
    assert list(out.itertuples(index=False, name=None)) == [
        (2022, 11, 450.0),
        (2023, 1, 1200.0),
    ]


def test_best_month_tie_goes_to_lowest_month(
    row_factory: Callable[..., dict[str, Any]],
) -> None:
    store = TableStore.from_rows(
        [
            row_factory(1, sale_date="2022-05-03", total_sale=100.0),
            row_factory(2, sale_date="2022-03-09", total_sale=100.0),
            row_factory(3, sale_date="2022-08-01", total_sale=50.0),
        ]
    )
    out = catalog.best_month_per_year(store)
    assert out["month"].tolist() == [3]


def test_top_customers_ties_by_customer_id(sample_table: TableStore) -> None:
    """Equal totals are ordered by ascending customer_id."""
    out = catalog.top_customers(sample_table, 3)
    # customers 1 and 4 both total 1200
    assert out["customer_id"].tolist() == [1, 4, 5]
    assert out["total_sales"].tolist() == [1200.0, 1200.0, 500.0]


def test_top_customers_returns_at_most_n(sample_table: TableStore) -> None:
    """Asking for more customers than exist returns all of them, highest first."""
    out = catalog.top_customers(sample_table, 50)
    assert len(out) == 5
    totals = out["total_sales"].tolist()
    assert totals == sorted(totals, reverse=True)


@pytest.mark.parametrize("n", [0, -1, 2.5])
def test_top_customers_rejects_invalid_n(sample_table: TableStore, n: Any) -> None:
    with pytest.raises(ValueError):
        catalog.top_customers(sample_table, n)


def test_unique_customers_by_category(
    sample_table: TableStore, row_factory: Callable[..., dict[str, Any]]
) -> None:
    """Repeat purchases by one customer count once per category."""
    sample_table.load([row_factory(40, category="Electronics", customer_id=9)])
    out = catalog.unique_customers_by_category(sample_table).set_index("category")
    assert out["unique_customers"].to_dict() == {"Beauty": 2, "Clothing": 2, "Electronics": 3}


def test_orders_by_shift(sample_table: TableStore) -> None:
    out = catalog.orders_by_shift(sample_table)
    assert dict(zip(out["shift"], out["total_orders"])) == {
        "Morning": 3,
        "Afternoon": 3,
        "Evening": 2,
    }


@pytest.mark.parametrize(
    ("sale_time", "shift"),
    [
        ("00:00:00", "Morning"),
        ("11:59:59", "Morning"),
        ("12:00:00", "Afternoon"),
        ("17:59:59", "Afternoon"),
        ("18:00:00", "Evening"),
        ("23:59:59", "Evening"),
    ],
)
def test_shift_boundaries(
    row_factory: Callable[..., dict[str, Any]], sale_time: str, shift: str
) -> None:
    """Shifts are decided by the hour: before 12, 12 through 17, 18 and later."""
    store = TableStore.from_rows([row_factory(1, sale_time=sale_time)])
    out = catalog.orders_by_shift(store).set_index("shift")
    assert out.loc[shift, "total_orders"] == 1


def test_avg_purchase_by_gender(sample_table: TableStore) -> None:
    """Average sale per gender, highest average first."""
    out = catalog.avg_purchase_by_gender(sample_table)
    assert list(out.itertuples(index=False, name=None)) == [
        ("Male", 725.0),
        ("Female", 192.5),
    ]


def test_top_priced_category(sample_table: TableStore) -> None:
    assert catalog.top_priced_category(sample_table) == "Electronics"


def test_top_priced_category_tie_goes_to_first_seen(
    row_factory: Callable[..., dict[str, Any]],
) -> None:
    """On equal average prices the category loaded first wins."""
    store = TableStore.from_rows(
        [
            row_factory(1, category="Toys", price_per_unit=80.0),
            row_factory(2, category="Books", price_per_unit=80.0),
        ]
    )
    assert catalog.top_priced_category(store) == "Toys"


def test_weekend_vs_weekday(sample_table: TableStore) -> None:
    """Saturdays and Sundays are weekend days."""
    out = catalog.weekend_vs_weekday(sample_table)
    assert dict(zip(out["day_type"], out["total_orders"])) == {"Weekend": 4, "Weekday": 4}


def test_age_group_distribution(sample_table: TableStore) -> None:
    """Every bucket is listed in bucket order."""
    out = catalog.age_group_distribution(sample_table)
    assert out["age_group"].tolist() == ["<20", "20-29", "30-39", "40-49", "50+"]
    assert out["total_orders"].tolist() == [1, 2, 2, 1, 2]


@pytest.mark.parametrize(
    ("age", "group"),
    [(0, "<20"), (19, "<20"), (20, "20-29"), (29, "20-29"), (49, "40-49"), (50, "50+")],
)
def test_age_group_boundaries(
    row_factory: Callable[..., dict[str, Any]], age: int, group: str
) -> None:
    out = catalog.age_group_distribution(TableStore.from_rows([row_factory(1, age=age)]))
    assert out.set_index("age_group").loc[group, "total_orders"] == 1


def test_profit_margin_by_category(sample_table: TableStore) -> None:
    """Profit columns per category, highest total profit first."""
    out = catalog.profit_margin_by_category(sample_table)
    assert out["category"].tolist() == ["Electronics", "Beauty", "Clothing"]
    assert out["total_profit"].tolist() == [1300.0, 590.0, 400.0]
    assert out["avg_profit"].tolist() == [650.0, 196.67, 133.33]
    assert out["total_cogs"].tolist() == [900.0, 260.0, 220.0]
    assert out["margin_pct"].tolist() == [59.09, 69.41, 64.52]


def test_profit_margin_reconciles_with_totals(sample_table: TableStore) -> None:
    """The net_sale column matches totals_by_category for every category."""
    totals = catalog.totals_by_category(sample_table).set_index("category")["net_sale"]
    margin = catalog.profit_margin_by_category(sample_table).set_index("category")["net_sale"]
    pd.testing.assert_series_equal(totals.sort_index(), margin.sort_index())


# ---------- exploration ----------


def test_exploration_overview(sample_table: TableStore) -> None:
    """Record count, distinct customers and the sorted category list."""
    assert exploration.record_count(sample_table) == 8
    assert exploration.customer_count(sample_table) == 5
    assert exploration.category_list(sample_table) == ["Beauty", "Clothing", "Electronics"]


# ---------- empty table ----------


def test_record_reports_on_empty_table() -> None:
    """Record reports return empty frames on an empty table."""
    table = TableStore()
    assert catalog.sales_on_date(table, "2022-11-05").empty
    assert catalog.filter_category_qty_month(table, "Clothing", "2022-11", 4).empty
    assert catalog.high_value_transactions(table, 0).empty


def test_grouped_reports_on_empty_table() -> None:
    """Grouped reports return empty frames and scalar reports return None."""
    table = TableStore()
    assert catalog.totals_by_category(table).empty
    assert catalog.count_by_gender_category(table).empty
    assert catalog.best_month_per_year(table).empty
    assert catalog.top_customers(table, 5).empty
    assert catalog.unique_customers_by_category(table).empty
    assert catalog.avg_purchase_by_gender(table).empty
    assert catalog.profit_margin_by_category(table).empty
    assert catalog.avg_age_for_category(table, "Beauty") is None
    assert catalog.top_priced_category(table) is None


def test_bucket_reports_on_empty_table_are_zero() -> None:
    """Fixed-bucket reports keep every bucket with a zero count."""
    table = TableStore()
    assert catalog.orders_by_shift(table)["total_orders"].tolist() == [0, 0, 0]
    assert catalog.weekend_vs_weekday(table)["total_orders"].tolist() == [0, 0]
    assert catalog.age_group_distribution(table)["total_orders"].tolist() == [0] * 5


def test_exploration_on_empty_table() -> None:
    table = TableStore()
    assert exploration.record_count(table) == 0
    assert exploration.customer_count(table) == 0
    assert exploration.category_list(table) == []


# ---------- end-to-end scenarios ----------


def test_three_row_dataset(row_factory: Callable[..., dict[str, Any]]) -> None:
    """An incomplete row is purged and does not reach the category totals."""
    incomplete = {
        "transaction_id": 2,
        "sale_date": None,
        "sale_time": None,
        "customer_id": None,
        "gender": None,
        "age": 35,
        "category": "Beauty",
        "quantity": None,
        "price_per_unit": None,
        "cogs": 600.0,
        "total_sale": 1500.0,
    }
    store = TableStore.from_rows(
        [
            row_factory(1, category="Beauty", age=25, total_sale=500.0, cogs=200.0),
            incomplete,
            row_factory(3, category="Clothing", age=40, total_sale=800.0, cogs=300.0),
        ]
    )
    assert purge_incomplete(store) == 1

    totals = catalog.totals_by_category(store)
    assert list(totals.itertuples(index=False, name=None)) == [
        ("Beauty", 500.0, 1),
        ("Clothing", 800.0, 1),
    ]
    assert _ids(catalog.high_value_transactions(store, 600)) == [3]


def test_shift_scenario(row_factory: Callable[..., dict[str, Any]]) -> None:
    """One order in each shift."""
    store = TableStore.from_rows(
        [
            row_factory(1, sale_time="09:00"),
            row_factory(2, sale_time="13:00"),
            row_factory(3, sale_time="18:30"),
        ]
    )
    out = catalog.orders_by_shift(store)
    assert dict(zip(out["shift"], out["total_orders"])) == {
        "Morning": 1,
        "Afternoon": 1,
        "Evening": 1,
    }


def test_weekend_scenario(row_factory: Callable[..., dict[str, Any]]) -> None:
    """A Saturday order and a Tuesday order."""
    store = TableStore.from_rows(
        [
            row_factory(1, sale_date="2022-11-05"),  # Saturday
            row_factory(2, sale_date="2022-11-08"),  # Tuesday
        ]
    )
    out = catalog.weekend_vs_weekday(store)
    assert dict(zip(out["day_type"], out["total_orders"])) == {"Weekend": 1, "Weekday": 1}


def test_reports_do_not_mutate_the_table(sample_table: TableStore) -> None:
    """Reports read a copy of the table."""
    before = sample_table.frame
    catalog.profit_margin_by_category(sample_table)
    catalog.best_month_per_year(sample_table)
    catalog.orders_by_shift(sample_table)
    pd.testing.assert_frame_equal(before, sample_table.frame)
