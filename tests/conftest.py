"""Shared fixtures: small transactions datasets with hand-checked answers.

The ``sales_df`` dataset (ids 1-10) is built so every canned question has a
non-trivial answer:

- ids 9 and 10 are incomplete (id 9 has no time/customer/gender/age,
  id 10 has no age/total_sale)
- customers 1 and 3 tie on total sales (700)
- Beauty and Electronics tie on distinct customers (2)
- 2022-11 has a null total_sale that must not drag its average down
"""

from __future__ import annotations

import pandas as pd
import pytest

from retail_sales.schema import empty_frame, to_frame

SAMPLE_RECORDS = [
    {"id": 1, "sale_date": "2022-11-05", "sale_time": "09:00", "customer_id": 1, "gender": "Female", "age": 25, "category": "Clothing", "quantity": 5, "price_per_unit": 100, "cogs": 40, "total_sale": 500},
    {"id": 2, "sale_date": "2022-11-05", "sale_time": "14:00", "customer_id": 2, "gender": "Male", "age": 40, "category": "Beauty", "quantity": 1, "price_per_unit": 1200, "cogs": 500, "total_sale": 1200},
    {"id": 3, "sale_date": "2022-11-12", "sale_time": "19:30", "customer_id": 1, "gender": "Female", "age": 25, "category": "Clothing", "quantity": 4, "price_per_unit": 50, "cogs": 20, "total_sale": 200},
    {"id": 4, "sale_date": "2022-11-20", "sale_time": "11:15", "customer_id": 3, "gender": "Male", "age": 34, "category": "Clothing", "quantity": 2, "price_per_unit": 300, "cogs": 100, "total_sale": 600},
    {"id": 5, "sale_date": "2022-12-01", "sale_time": "17:59", "customer_id": 4, "gender": "Female", "age": 30, "category": "Beauty", "quantity": 3, "price_per_unit": 500, "cogs": 150, "total_sale": 1500},
    {"id": 6, "sale_date": "2023-01-15", "sale_time": "08:00", "customer_id": 2, "gender": "Male", "age": 40, "category": "Electronics", "quantity": 2, "price_per_unit": 1000, "cogs": 600, "total_sale": 2000},
    {"id": 7, "sale_date": "2023-02-10", "sale_time": "21:00", "customer_id": 5, "gender": "Female", "age": 55, "category": "Electronics", "quantity": 1, "price_per_unit": 300, "cogs": 120, "total_sale": 300},
    {"id": 8, "sale_date": "2023-02-11", "sale_time": "12:00", "customer_id": 3, "gender": "Male", "age": 34, "category": "Clothing", "quantity": 4, "price_per_unit": 25, "cogs": 10, "total_sale": 100},
    {"id": 9, "sale_date": "2022-10-03", "sale_time": None, "customer_id": None, "gender": None, "age": None, "category": "Beauty", "quantity": 2, "price_per_unit": 50, "cogs": 20, "total_sale": 100},
    {"id": 10, "sale_date": "2022-11-05", "sale_time": "10:00", "customer_id": 6, "gender": "Female", "age": None, "category": "Clothing", "quantity": 6, "price_per_unit": 50, "cogs": 25, "total_sale": None},
]


@pytest.fixture
def sample_records() -> list[dict]:
    """Raw records for the sample dataset."""
    return [dict(record) for record in SAMPLE_RECORDS]


@pytest.fixture
def sales_df(sample_records: list[dict]) -> pd.DataFrame:
    """Ten-record transactions frame (see module docstring)."""
    return to_frame(sample_records)


@pytest.fixture
def scenario_df() -> pd.DataFrame:
    """Two complete-enough records on 2022-11-05, one morning and one afternoon."""
    return to_frame(
        [
            {"id": 1, "sale_date": "2022-11-05", "sale_time": "09:00", "customer_id": 1, "category": "Clothing", "quantity": 5, "total_sale": 500},
            {"id": 2, "sale_date": "2022-11-05", "sale_time": "14:00", "customer_id": 2, "category": "Beauty", "quantity": 1, "total_sale": 1200},
        ]
    )


@pytest.fixture
def empty_df() -> pd.DataFrame:
    """Transactions frame with no rows."""
    return empty_frame()
