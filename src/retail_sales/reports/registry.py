"""Report registry: name lookup and parameter binding.

Parameterised reports take their arguments from ``ReportConfig``; the
``params`` mapping of each definition names the config attribute bound to
each function argument.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable

from retail_sales.exceptions import ConfigError
from retail_sales.reports import catalog, exploration
from retail_sales.store.parsing import to_snake

if TYPE_CHECKING:
    from retail_sales.config import ReportConfig
    from retail_sales.store.table import TableStore


@dataclass(frozen=True)
class ReportDefinition:
    """A named report and how to call it.

    Attributes:
        name: CLI/report name (snake_case).
        func: Report function; first argument is the TableStore.
        description: One-line description shown by ``--list-reports``.
        params: Mapping of function argument -> ReportConfig attribute.
    """

    name: str
    func: Callable[..., Any]
    description: str
    params: dict[str, str] = field(default_factory=dict)

    def bind(self, config: ReportConfig) -> dict[str, Any]:
        """Keyword arguments for ``func`` taken from ``config``."""
        return {arg: getattr(config, attr) for arg, attr in self.params.items()}

    def run(self, table: TableStore, config: ReportConfig) -> Any:
        return self.func(table, **self.bind(config))


_DEFINITIONS = [
    ReportDefinition("record_count", exploration.record_count, "Total number of sales records"),
    ReportDefinition("customer_count", exploration.customer_count, "Number of distinct customers"),
    ReportDefinition("category_list", exploration.category_list, "Distinct product categories"),
    ReportDefinition(
        "sales_on_date",
        catalog.sales_on_date,
        "All sales made on a given date",
        {"sale_date": "report_date"},
    ),
    ReportDefinition(
        "filter_category_qty_month",
        catalog.filter_category_qty_month,
        "Sales of a category in a month with quantity at or above a threshold",
        {
            "category": "filter_category",
            "year_month": "filter_month",
            "min_quantity": "min_quantity",
        },
    ),
    ReportDefinition(
        "totals_by_category", catalog.totals_by_category, "Net sales and order count per category"
    ),
    ReportDefinition(
        "avg_age_for_category",
        catalog.avg_age_for_category,
        "Average customer age for a category",
        {"category": "age_category"},
    ),
    ReportDefinition(
        "high_value_transactions",
        catalog.high_value_transactions,
        "Transactions with total_sale above a threshold",
        {"threshold": "high_value_threshold"},
    ),
    ReportDefinition(
        "count_by_gender_category",
        catalog.count_by_gender_category,
        "Transaction count per category and gender",
    ),
    ReportDefinition(
        "best_month_per_year",
        catalog.best_month_per_year,
        "Best-selling month (highest average sale) of each year",
    ),
    ReportDefinition(
        "top_customers",
        catalog.top_customers,
        "Top customers by total sales",
        {"n": "top_n"},
    ),
    ReportDefinition(
        "unique_customers_by_category",
        catalog.unique_customers_by_category,
        "Distinct customers per category",
    ),
    ReportDefinition(
        "orders_by_shift", catalog.orders_by_shift, "Orders per shift (Morning/Afternoon/Evening)"
    ),
    ReportDefinition(
        "avg_purchase_by_gender",
        catalog.avg_purchase_by_gender,
        "Average purchase value per gender",
    ),
    ReportDefinition(
        "top_priced_category",
        catalog.top_priced_category,
        "Category with the highest average unit price",
    ),
    ReportDefinition(
        "weekend_vs_weekday", catalog.weekend_vs_weekday, "Orders on weekends versus weekdays"
    ),
    ReportDefinition(
        "age_group_distribution",
        catalog.age_group_distribution,
        "Customers per age group",
    ),
    ReportDefinition(
        "profit_margin_by_category",
        catalog.profit_margin_by_category,
        "Total and average profit per category",
    ),
]

REPORTS: dict[str, ReportDefinition] = {d.name: d for d in _DEFINITIONS}


def report_names() -> list[str]:
    """All report names, in catalog order."""
    return list(REPORTS)


def get_report(name: str) -> ReportDefinition:
    """Look up a report by name.

    snake_case, kebab-case and camelCase spellings are accepted
    (``top_customers``, ``top-customers``, ``topCustomers``).

    Raises:
        ConfigError: If no report has that name.
    """
    key = to_snake(name)
    if key not in REPORTS:
        raise ConfigError(f"Unknown report '{name}'. Available reports: {report_names()}")
    return REPORTS[key]
