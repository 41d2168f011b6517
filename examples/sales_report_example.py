"""Example: Answering the canned sales questions

This example builds a small transactions frame in memory, runs individual
queries, and then produces the full SalesReport in one call.

Prerequisites:
- Records already parsed by your loader (dates, times and numbers coerced,
  missing values as None)
"""

import logging
from datetime import date

from retail_sales import AnalysisConfig, EmptyAggregateError, run_sales_report, to_frame
from retail_sales import aggregate
from retail_sales.shifts import orders_by_shift

logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

records = [
    {"id": 1, "sale_date": "2022-11-05", "sale_time": "09:00", "customer_id": 1, "gender": "Female", "age": 25, "category": "Clothing", "quantity": 5, "price_per_unit": 100, "cogs": 40, "total_sale": 500},
    {"id": 2, "sale_date": "2022-11-05", "sale_time": "14:00", "customer_id": 2, "gender": "Male", "age": 40, "category": "Beauty", "quantity": 1, "price_per_unit": 1200, "cogs": 500, "total_sale": 1200},
    {"id": 3, "sale_date": "2022-12-01", "sale_time": "19:30", "customer_id": 3, "gender": "Female", "age": 30, "category": "Beauty", "quantity": 3, "price_per_unit": 500, "cogs": 150, "total_sale": 1500},
    {"id": 4, "sale_date": "2023-01-15", "sale_time": None, "customer_id": None, "gender": None, "age": None, "category": "Electronics", "quantity": 2, "price_per_unit": 1000, "cogs": 600, "total_sale": 2000},
    # Malformed: quantity is not a number. Skipped (and logged) below.
    {"id": 5, "sale_date": "2023-01-16", "sale_time": "10:00", "customer_id": 4, "gender": "Male", "age": 22, "category": "Clothing", "quantity": "two", "price_per_unit": 50, "cogs": 20, "total_sale": 100},
]

# Example 1: Individual queries
print("=" * 80)
print("Example 1: Individual queries")
print("=" * 80)

df = to_frame(records, errors="skip")
print(f"\nLoaded {aggregate.count_all(df)} records")
print(f"Incomplete records: {aggregate.find_incomplete(df)['id'].tolist()}")

print("\nSales on 2022-11-05:")
print(aggregate.by_date(df, date(2022, 11, 5)))

print("\nTotals by category:")
print(aggregate.totals_by_category(df))

print("\nBest month per year:")
print(aggregate.best_month_per_year(df))

try:
    print(f"\nAverage Beauty customer age: {aggregate.average_age(df, 'Beauty')}")
    print(f"Average Toys customer age: {aggregate.average_age(df, 'Toys')}")
except EmptyAggregateError as e:
    print(f"No data: {e}")

shifts = orders_by_shift(df)
print(f"\nOrders by shift: {shifts.as_dict()} ({shifts.unshiftable} without a sale time)")

# Example 2: Full report with custom parameters
print("\n" + "=" * 80)
print("Example 2: Full report")
print("=" * 80)

config = AnalysisConfig.from_dict({"sale_date": "2022-12-01", "top_k": 2})
report = run_sales_report(df, config)

print(f"\nSummary: {report.summary}")
print("\nTop customers:")
print(report.top_customers)
