"""Example: run the whole report catalog and export it

Prerequisites:
- A retail sales CSV at data/retail_sales.csv (or modify the path below)
"""

from retail_sales import ReportConfig, run_reports
from retail_sales.formatters import format_results

config = ReportConfig.from_path(
    "data/retail_sales.csv",  # MODIFY AS NEEDED
    output_dir="reports",
    filter_category="Clothing",
    filter_month="2022-11",
    top_n=10,
)

run = run_reports(config)
print(f"{run.rows_loaded} rows loaded, {run.rows_purged} purged, {run.rows_live} reported on\n")
print(format_results(run.results))

if run.empty_reports:
    print(f"\nReports with no matching rows: {run.empty_reports}")
print(f"\nCSV files and run metadata written to {config.output_dir}/")
