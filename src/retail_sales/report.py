"""Run the canned sales analyses in one call.

This module provides an in-memory API that answers the fixed set of
business questions over a transactions frame without reading or writing
any files.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional

import pandas as pd

from retail_sales import aggregate
from retail_sales.config import AnalysisConfig
from retail_sales.exceptions import EmptyAggregateError
from retail_sales.quality import null_counts
from retail_sales.schema import validate_frame
from retail_sales.shifts import ShiftCounts, orders_by_shift

logger = logging.getLogger(__name__)


@dataclass
class SalesReport:
    """Answers to the canned sales questions.

    Attributes:
        total_records: Number of records, incomplete ones included.
        unique_customers: Number of distinct non-null customer ids.
        categories: Distinct categories.
        incomplete: Records missing at least one field.
        null_counts: Null count per field.
        sales_on_date: Sales made on config.sale_date.
        category_month_orders: config.category orders in config.year_month with
            quantity >= config.min_quantity.
        totals_by_category: Net sale and order count per category.
        avg_age: Average age for config.age_category, or None when that
            category has no record with a known age.
        high_value: Records with total_sale > config.high_value_threshold.
        trans_by_gender_category: Transaction count per category and gender.
        best_month_per_year: Best month by average sale for each year.
        top_customers: Top config.top_k customers by total sales.
        unique_customers_by_category: Distinct customers per category.
        orders_by_shift: Order counts per shift.
        summary: Headline counts for quick inspection.
    """

    total_records: int
    unique_customers: int
    categories: frozenset
    incomplete: pd.DataFrame
    null_counts: dict[str, int]
    sales_on_date: pd.DataFrame
    category_month_orders: pd.DataFrame
    totals_by_category: pd.DataFrame
    avg_age: Optional[Decimal]
    high_value: pd.DataFrame
    trans_by_gender_category: pd.DataFrame
    best_month_per_year: pd.DataFrame
    top_customers: pd.DataFrame
    unique_customers_by_category: pd.DataFrame
    orders_by_shift: ShiftCounts
    summary: dict = field(default_factory=dict)


def run_sales_report(
    df: pd.DataFrame,
    config: Optional[AnalysisConfig] = None,
) -> SalesReport:
    """Answer every canned sales question over a transactions frame.

    This function:
    - does NOT read or write any files,
    - does NOT modify ``df``,
    - does NOT print (logging only).

    Args:
        df: Transactions frame, e.g. the output of ``schema.to_frame``.
        config: Question parameters. Defaults to ``AnalysisConfig()``.

    Returns:
        SalesReport with one attribute per question.

    Raises:
        DataQualityError: If df is missing required columns or has duplicate ids.
    """
    if config is None:
        config = AnalysisConfig()
    validate_frame(df)

    logger.info("Running sales report over %s records", len(df))

    empty_aggregates = []
    try:
        avg_age: Optional[Decimal] = aggregate.average_age(df, config.age_category)
    except EmptyAggregateError as e:
        logger.warning("Average age unavailable: %s", e)
        avg_age = None
        empty_aggregates.append("avg_age")

    incomplete = aggregate.find_incomplete(df)
    shifts = orders_by_shift(df)

    report = SalesReport(
        total_records=aggregate.count_all(df),
        unique_customers=aggregate.count_distinct_customers(df),
        categories=aggregate.distinct_categories(df),
        incomplete=incomplete,
        null_counts=null_counts(df),
        sales_on_date=aggregate.by_date(df, config.sale_date),
        category_month_orders=aggregate.by_category_month_min_qty(
            df, config.category, config.year_month, config.min_quantity
        ),
        totals_by_category=aggregate.totals_by_category(df),
        avg_age=avg_age,
        high_value=aggregate.high_value(df, config.high_value_threshold),
        trans_by_gender_category=aggregate.trans_by_gender_category(df),
        best_month_per_year=aggregate.best_month_per_year(df),
        top_customers=aggregate.top_customers(df, config.top_k),
        unique_customers_by_category=aggregate.unique_customers_by_category(df),
        orders_by_shift=shifts,
    )

    report.summary = {
        "total_records": report.total_records,
        "complete_records": report.total_records - len(incomplete),
        "incomplete_records": len(incomplete),
        "unique_customers": report.unique_customers,
        "total_categories": len(report.categories),
        "high_value_count": len(report.high_value),
        "unshiftable_count": shifts.unshiftable,
        "empty_aggregates": empty_aggregates,
    }

    logger.info(
        "Sales report complete: %s incomplete records, %s high value sales, "
        "%s unshiftable records",
        report.summary["incomplete_records"],
        report.summary["high_value_count"],
        report.summary["unshiftable_count"],
    )

    return report
