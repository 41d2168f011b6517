"""Analytical queries over a transactions frame.

Every function here is a pure read of the input frame: nothing is mutated,
row-returning queries return a new DataFrame with a fresh RangeIndex, and an
empty frame yields an empty result or zero. The only exception is
``average_age``, which raises EmptyAggregateError when there is nothing to
average.

Null policy per query:

- Grouping queries keep null keys as their own group (sorted last).
- Distinct-customer counts ignore null customer_id.
- total_sale sums treat null as zero; total_sale averages skip nulls.
- Row filters never match a null in the filtered field.

Example:
    >>> from retail_sales.schema import to_frame
    >>> from retail_sales import aggregate
    >>> df = to_frame([{"id": 1, "category": "Beauty", "total_sale": 1200}])
    >>> aggregate.totals_by_category(df)["net_sale"].tolist()
    [1200.0]
"""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal
from typing import Union

import pandas as pd

from retail_sales.exceptions import EmptyAggregateError
from retail_sales.primitives import group_aggregate, rank_rows, round_half_up, top_per_group
from retail_sales.schema import complete_mask, require_columns

logger = logging.getLogger(__name__)

DateLike = Union[date, str, pd.Timestamp]
YearMonth = Union[str, tuple[int, int], pd.Period]


def _parse_date(value: DateLike) -> pd.Timestamp:
    try:
        ts = pd.Timestamp(value)
    except (TypeError, ValueError) as e:
        raise ValueError(f"Invalid date format: {value!r}") from e
    if pd.isna(ts):
        raise ValueError(f"Invalid date format: {value!r}")
    return ts.normalize()


def _parse_month(value: YearMonth) -> pd.Period:
    try:
        if isinstance(value, tuple):
            year, month = value
            return pd.Period(year=int(year), month=int(month), freq="M")
        return pd.Period(value, freq="M")
    except (TypeError, ValueError) as e:
        raise ValueError(
            f"Invalid year_month {value!r}. Must be 'YYYY-MM' or (year, month)."
        ) from e


def _matches(series: pd.Series, value: object) -> pd.Series:
    """Equality mask where null cells never match."""
    return (series == value).fillna(False).astype(bool)


def _select(df: pd.DataFrame, mask: pd.Series) -> pd.DataFrame:
    return df.loc[mask].reset_index(drop=True)


# --------------------------------------------------------------------------- #
# Counts and distinct values
# --------------------------------------------------------------------------- #


def count_all(df: pd.DataFrame) -> int:
    """Number of records, including incomplete ones."""
    return len(df)


def count_distinct_customers(df: pd.DataFrame) -> int:
    """Number of distinct non-null customer ids."""
    require_columns(df, ["customer_id"])
    return int(df["customer_id"].nunique(dropna=True))


def distinct_categories(df: pd.DataFrame) -> frozenset:
    """Set of categories present. A null category is reported as None."""
    require_columns(df, ["category"])
    return frozenset(None if pd.isna(c) else str(c) for c in df["category"].unique())


# --------------------------------------------------------------------------- #
# Completeness
# --------------------------------------------------------------------------- #


def find_incomplete(df: pd.DataFrame) -> pd.DataFrame:
    """Rows missing at least one required field."""
    result = _select(df, ~complete_mask(df))
    logger.debug("Found %s incomplete records out of %s", len(result), len(df))
    return result


def filter_complete(df: pd.DataFrame) -> pd.DataFrame:
    """New frame with only the complete rows; the input is left untouched."""
    result = _select(df, complete_mask(df))
    logger.debug("Kept %s complete records out of %s", len(result), len(df))
    return result


# --------------------------------------------------------------------------- #
# Row filters
# --------------------------------------------------------------------------- #


def by_date(df: pd.DataFrame, sale_date: DateLike) -> pd.DataFrame:
    """Rows whose sale_date equals the given date.

    Args:
        df: Transactions frame.
        sale_date: A date, Timestamp, or "YYYY-MM-DD" string.

    Raises:
        ValueError: If sale_date cannot be parsed.
    """
    require_columns(df, ["sale_date"])
    target = _parse_date(sale_date)
    return _select(df, _matches(df["sale_date"].dt.normalize(), target))


def by_category_month_min_qty(
    df: pd.DataFrame,
    category: str,
    year_month: YearMonth,
    min_quantity: int,
) -> pd.DataFrame:
    """Rows of one category sold in one calendar month with quantity >= min_quantity.

    Args:
        df: Transactions frame.
        category: Category to match exactly.
        year_month: "YYYY-MM" string, (year, month) tuple, or monthly Period.
        min_quantity: Inclusive quantity floor.

    Returns:
        Matching rows in dataset order. Rows with null quantity, category or
        sale_date never match.

    Raises:
        ValueError: If year_month cannot be parsed.
    """
    require_columns(df, ["category", "sale_date", "quantity"])
    period = _parse_month(year_month)
    mask = (
        _matches(df["category"], category)
        & _matches(df["sale_date"].dt.year, period.year)
        & _matches(df["sale_date"].dt.month, period.month)
        & (df["quantity"] >= min_quantity).fillna(False).astype(bool)
    )
    return _select(df, mask)


def high_value(df: pd.DataFrame, threshold: Union[float, Decimal]) -> pd.DataFrame:
    """Rows with total_sale strictly above threshold; null total_sale never matches."""
    require_columns(df, ["total_sale"])
    return _select(df, (df["total_sale"] > float(threshold)).fillna(False).astype(bool))


# --------------------------------------------------------------------------- #
# Grouped aggregates
# --------------------------------------------------------------------------- #


def totals_by_category(df: pd.DataFrame) -> pd.DataFrame:
    """Net sale and order count per category.

    Returns:
        DataFrame with columns: category, net_sale, total_orders. Ordered by
        net_sale descending, then category ascending. Null total_sale counts
        as zero in net_sale but the row still counts as an order.
    """
    require_columns(df, ["id", "category", "total_sale"])
    totals = group_aggregate(
        df,
        ["category"],
        net_sale=("total_sale", "sum"),
        total_orders=("id", "size"),
    )
    return rank_rows(totals, [("net_sale", False), ("category", True)])


def average_age(df: pd.DataFrame, category: str) -> Decimal:
    """Average customer age for a category, rounded half-up to 2 decimals.

    Null ages are excluded from both the sum and the count.

    Raises:
        EmptyAggregateError: If no row of the category has a non-null age.

    Examples:
        >>> from retail_sales.schema import to_frame
        >>> df = to_frame([{"id": 1, "category": "Beauty", "age": 30},
        ...                {"id": 2, "category": "Beauty"}])
        >>> average_age(df, "Beauty")
        Decimal('30.00')
    """
    require_columns(df, ["category", "age"])
    ages = df.loc[_matches(df["category"], category), "age"].dropna()
    if ages.empty:
        raise EmptyAggregateError(f"No records with a known age in category {category!r}")
    mean = Decimal(int(ages.sum())) / Decimal(len(ages))
    return round_half_up(mean, 2)


def trans_by_gender_category(df: pd.DataFrame) -> pd.DataFrame:
    """Transaction count per (category, gender).

    Returns:
        DataFrame with columns: category, gender, total_trans. Ordered by
        category then gender, both ascending.
    """
    require_columns(df, ["id", "category", "gender"])
    counts = group_aggregate(df, ["category", "gender"], total_trans=("id", "size"))
    return rank_rows(counts, [("category", True), ("gender", True)])


def best_month_per_year(df: pd.DataFrame) -> pd.DataFrame:
    """Month with the highest average total_sale in each year.

    The average skips null total_sale. Months with no known total_sale have
    a NaN average and rank below every known average, so a year made only
    of such months reports its lowest month with a NaN avg_sale. Rows with
    a null sale_date are ignored.

    Returns:
        DataFrame with columns: year, month, avg_sale. One row per year,
        ordered by year ascending. Equal averages go to the lowest month.
    """
    require_columns(df, ["sale_date", "total_sale"])
    dated = df.loc[df["sale_date"].notna()]
    monthly = pd.DataFrame(
        {
            "year": dated["sale_date"].dt.year.astype("int64"),
            "month": dated["sale_date"].dt.month.astype("int64"),
            "total_sale": dated["total_sale"],
        }
    )
    monthly = group_aggregate(monthly, ["year", "month"], avg_sale=("total_sale", "mean"))
    return top_per_group(monthly, ["year"], [("avg_sale", False), ("month", True)])


def top_customers(df: pd.DataFrame, k: int) -> pd.DataFrame:
    """The k customers with the highest summed total_sale.

    Null total_sale counts as zero. A null customer_id forms its own group.

    Returns:
        DataFrame with columns: customer_id, total_sales. At most k rows,
        ordered by total_sales descending, then customer_id ascending.

    Raises:
        ValueError: If k is negative.
    """
    if k < 0:
        raise ValueError(f"k must be non-negative, got {k}")
    require_columns(df, ["customer_id", "total_sale"])
    totals = group_aggregate(df, ["customer_id"], total_sales=("total_sale", "sum"))
    return rank_rows(totals, [("total_sales", False), ("customer_id", True)], n=k)


def unique_customers_by_category(df: pd.DataFrame) -> pd.DataFrame:
    """Distinct non-null customer count per category.

    Returns:
        DataFrame with columns: category, unique_customers. Ordered by
        unique_customers descending, then category ascending.
    """
    require_columns(df, ["category", "customer_id"])
    counts = group_aggregate(df, ["category"], unique_customers=("customer_id", "nunique"))
    return rank_rows(counts, [("unique_customers", False), ("category", True)])
