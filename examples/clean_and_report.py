"""Example: load, clean and report step by step

This example uses the library pieces directly instead of the runner, to show
what each stage does to the table.

Prerequisites:
- A retail sales CSV with the eleven columns (transactions_id, sale_date,
  sale_time, customer_id, gender, age, category, quantiy, price_per_unit,
  cogs, total_sale) at data/retail_sales.csv (or modify the path below)
"""

from pathlib import Path

from retail_sales.cleaning import null_profile, purge_incomplete
from retail_sales.reports import catalog
from retail_sales.store import load_table

dataset = Path("data/retail_sales.csv")  # MODIFY AS NEEDED

table = load_table(dataset)
print(f"Loaded {table.count()} rows")

# Null counts per column before deleting
print(null_profile(table).to_string(index=False))

removed = purge_incomplete(table)
print(f"\nRemoved {removed} incomplete rows, {table.count()} remain")

print("\nNet sales per category:")
print(catalog.totals_by_category(table).to_string(index=False))

print("\nTop 5 customers:")
print(catalog.top_customers(table, 5).to_string(index=False))

print("\nOrders per shift:")
print(catalog.orders_by_shift(table).to_string(index=False))

print("\nBest month of each year:")
print(catalog.best_month_per_year(table).to_string(index=False))
