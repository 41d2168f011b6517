"""Retail Sales Analysis - canned aggregation queries over a sales table.

This package answers a fixed set of business questions (totals, grouping,
ranking, windowing) over a single denormalised table of retail transactions
held in memory as a pandas DataFrame.

Module Structure:
    retail_sales.schema: Transaction record and transactions frame contract
    retail_sales.aggregate: Counts, filters and grouped aggregates
    retail_sales.shifts: Time-of-day shift bucketing
    retail_sales.quality: Null profile of a dataset
    retail_sales.report: All canned questions in one call
    retail_sales.config: AnalysisConfig with the question parameters

Quick Start:
    >>> from retail_sales import AnalysisConfig, run_sales_report, to_frame
    >>> from retail_sales import aggregate
    >>>
    >>> df = to_frame(records)  # records supplied by your loader
    >>>
    >>> aggregate.totals_by_category(df)
    >>> aggregate.top_customers(df, 5)
    >>>
    >>> report = run_sales_report(df, AnalysisConfig(top_k=10))
    >>> print(report.summary)
"""

__version__ = "0.1.0"

from retail_sales.config import AnalysisConfig
from retail_sales.exceptions import (
    ConfigError,
    DataQualityError,
    EmptyAggregateError,
    MalformedInputError,
    SalesAnalysisError,
)
from retail_sales.report import SalesReport, run_sales_report
from retail_sales.schema import Transaction, iter_transactions, to_frame
from retail_sales.shifts import ShiftCounts

__all__ = [
    "AnalysisConfig",
    "ConfigError",
    "DataQualityError",
    "EmptyAggregateError",
    "MalformedInputError",
    "SalesAnalysisError",
    "SalesReport",
    "ShiftCounts",
    "Transaction",
    "__version__",
    "iter_transactions",
    "run_sales_report",
    "to_frame",
]
