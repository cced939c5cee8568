"""Tests for report name lookup and parameter binding."""

import pytest

from retail_sales.config import ReportConfig
from retail_sales.exceptions import ConfigError
from retail_sales.reports import REPORTS, get_report, report_names
from retail_sales.store import TableStore


def test_catalog_contains_every_report() -> None:
    names = report_names()
    assert len(names) == 18
    assert names[:3] == ["record_count", "customer_count", "category_list"]
    assert names[-1] == "profit_margin_by_category"


@pytest.mark.parametrize("name", ["top_customers", "top-customers", "topCustomers"])
def test_name_spellings(name: str) -> None:
    assert get_report(name) is REPORTS["top_customers"]


def test_unknown_report() -> None:
    with pytest.raises(ConfigError, match="Unknown report"):
        get_report("monthly_forecast")


def test_bind_takes_parameters_from_config(sample_table: TableStore) -> None:
    config = ReportConfig.from_path("unused.csv", filter_category="Clothing", min_quantity=3)
    definition = get_report("filter_category_qty_month")
    assert definition.bind(config) == {
        "category": "Clothing",
        "year_month": "2022-11",
        "min_quantity": 3,
    }
    assert definition.run(sample_table, config)["transaction_id"].tolist() == [1, 4]


def test_reports_without_parameters_bind_nothing() -> None:
    config = ReportConfig.from_path("unused.csv")
    assert get_report("orders_by_shift").bind(config) == {}
