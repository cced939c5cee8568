"""Sales table storage: schema, parsing, records and the Table Store.

Example:
    >>> from retail_sales.store import load_table
    >>> table = load_table("data/retail_sales.csv")
    >>> table.count()
    2000
"""

from retail_sales.store.readers import load_table, read_sales_csv
from retail_sales.store.record import Record
from retail_sales.store.table import TableStore

__all__ = ["Record", "TableStore", "load_table", "read_sales_csv"]
