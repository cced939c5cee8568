"""Column catalog for the retail sales table.

The table has exactly eleven columns. Raw headers are converted to
snake_case and then resolved through ``HEADER_ALIASES`` so the public
export (which spells two headers ``transactions_id`` and ``quantiy``)
loads unchanged.
"""

from __future__ import annotations

COLUMNS: list[str] = [
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

# Fields whose null makes a record incomplete. total_sale is not checked:
# the business rule only requires the inputs of a sale, not its result.
CHECKED_FIELDS: list[str] = [
    "sale_date",
    "sale_time",
    "customer_id",
    "gender",
    "age",
    "category",
    "quantity",
    "price_per_unit",
    "cogs",
]

INT_COLUMNS = ["transaction_id", "customer_id", "age", "quantity"]
FLOAT_COLUMNS = ["price_per_unit", "cogs", "total_sale"]
TEXT_COLUMNS = ["gender", "category"]

GENDERS = ("Male", "Female")

HEADER_ALIASES: dict[str, str] = {
    "transactions_id": "transaction_id",
    "transactionid": "transaction_id",
    "quantiy": "quantity",
    "qty": "quantity",
    "price": "price_per_unit",
    "customerid": "customer_id",
}

# pandas dtypes of the live table; nullable integers keep nulls until the
# Cleaner has run.
DTYPES: dict[str, str] = {
    "transaction_id": "int64",
    "sale_date": "datetime64[ns]",
    "sale_time": "timedelta64[ns]",
    "customer_id": "Int64",
    "gender": "object",
    "age": "Int64",
    "category": "object",
    "quantity": "Int64",
    "price_per_unit": "float64",
    "cogs": "float64",
    "total_sale": "float64",
}
