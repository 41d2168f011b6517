"""Grouping and ranking primitives shared by the analysis queries.

Every ranked query in ``retail_sales.aggregate`` is built from the same
three steps: group rows by key columns, order the groups by explicit sort
keys, and optionally keep the first n rows (overall or per group). Keeping
those steps here means each query only states its keys and tie-break rule.

Examples:
    >>> import pandas as pd
    >>> df = pd.DataFrame({"category": ["A", "B", "A"], "total_sale": [1.0, 5.0, 2.0]})
    >>> totals = group_aggregate(df, ["category"], net_sale=("total_sale", "sum"))
    >>> rank_rows(totals, [("net_sale", False), ("category", True)])["category"].tolist()
    ['B', 'A']
"""

from __future__ import annotations

from collections.abc import Sequence
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Union

import pandas as pd

# (column, ascending) pairs, applied left to right
SortOrder = Sequence[tuple[str, bool]]


def group_aggregate(
    frame: pd.DataFrame,
    keys: Sequence[str],
    **aggregations: tuple[str, str],
) -> pd.DataFrame:
    """Group rows by key columns and apply named aggregations.

    Null key values form their own group instead of being dropped.

    Args:
        frame: Input DataFrame.
        keys: Columns to group by.
        **aggregations: Named aggregations, ``output=(column, func)`` as accepted
            by ``DataFrameGroupBy.agg``.

    Returns:
        DataFrame with the key columns followed by one column per aggregation.
        Group order is unspecified; callers rank the result explicitly.
    """
    keys = list(keys)
    if frame.empty:
        return pd.DataFrame(columns=keys + list(aggregations))
    grouped = frame.groupby(keys, dropna=False, sort=False).agg(**aggregations)
    return grouped.reset_index()


def rank_rows(
    frame: pd.DataFrame,
    order: SortOrder,
    n: Optional[int] = None,
) -> pd.DataFrame:
    """Sort rows by explicit keys and optionally keep the first n.

    Null values sort last for every key. Because every query passes a full
    tie-break chain, the result does not depend on the input row order.

    Args:
        frame: Input DataFrame.
        order: (column, ascending) pairs, most significant first.
        n: Number of rows to keep, or None for all rows.

    Returns:
        Sorted DataFrame with a fresh RangeIndex.
    """
    by = [col for col, _ in order]
    ascending = [asc for _, asc in order]
    ranked = frame.sort_values(by, ascending=ascending, na_position="last", kind="mergesort")
    if n is not None:
        ranked = ranked.head(n)
    return ranked.reset_index(drop=True)


def top_per_group(
    frame: pd.DataFrame,
    group_keys: Sequence[str],
    order: SortOrder,
    n: int = 1,
) -> pd.DataFrame:
    """Keep the first n rows of each group under the given ordering.

    This is the grouped equivalent of ``rank_rows(..., n=n)``: a
    ``RANK() OVER (PARTITION BY ...)`` filter without ties sharing a rank,
    since ``order`` must fully break ties.

    Returns:
        DataFrame ordered by the group keys ascending, then by ``order``.
    """
    group_keys = list(group_keys)
    ranked = rank_rows(frame, [(key, True) for key in group_keys] + list(order))
    if ranked.empty:
        return ranked
    return ranked.groupby(group_keys, sort=False).head(n).reset_index(drop=True)


def round_half_up(value: Union[Decimal, float, int], places: int = 2) -> Decimal:
    """Round to a fixed number of decimal places, halves away from zero.

    Examples:
        >>> round_half_up(Decimal("30.125"))
        Decimal('30.13')
        >>> round_half_up(30)
        Decimal('30.00')
    """
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)
