"""Time-of-day shift bucketing.

A shift is a coarse bucket derived from the hour of sale_time:

- Morning: hour < 12
- Afternoon: 12 <= hour <= 17
- Evening: hour >= 18

Records without a sale_time belong to no shift; ``orders_by_shift`` reports
them separately as unshiftable.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import time

import numpy as np
import pandas as pd

from retail_sales.primitives import rank_rows
from retail_sales.schema import require_columns

logger = logging.getLogger(__name__)

MORNING = "Morning"
AFTERNOON = "Afternoon"
EVENING = "Evening"

# Canonical order, also the tie-break when two shifts have equal counts
SHIFTS = (MORNING, AFTERNOON, EVENING)

AFTERNOON_START_HOUR = 12
EVENING_START_HOUR = 18


@dataclass
class ShiftCounts:
    """Order counts per shift.

    Attributes:
        counts: DataFrame with columns shift, total_orders. Always holds all
            three shifts (zero counts included), ordered by total_orders
            descending, then Morning, Afternoon, Evening.
        unshiftable: Number of records with a null sale_time.
    """

    counts: pd.DataFrame
    unshiftable: int

    def as_dict(self) -> dict[str, int]:
        """Shift name to order count."""
        return {row.shift: int(row.total_orders) for row in self.counts.itertuples(index=False)}


def shift_of(sale_time: time) -> str:
    """Return the shift a time of day falls in.

    Examples:
        >>> shift_of(time(11, 59))
        'Morning'
        >>> shift_of(time(17, 30))
        'Afternoon'
        >>> shift_of(time(18, 0))
        'Evening'
    """
    if sale_time.hour < AFTERNOON_START_HOUR:
        return MORNING
    if sale_time.hour < EVENING_START_HOUR:
        return AFTERNOON
    return EVENING


def assign_shifts(df: pd.DataFrame) -> pd.Series:
    """Shift label for every row of a transactions frame.

    Returns:
        String Series aligned with ``df.index``; <NA> where sale_time is null.
    """
    require_columns(df, ["sale_time"])
    hours = df["sale_time"].map(lambda t: t.hour, na_action="ignore").astype("float64")
    labels = np.select(
        [
            hours < AFTERNOON_START_HOUR,
            hours < EVENING_START_HOUR,
            hours >= EVENING_START_HOUR,
        ],
        list(SHIFTS),
        default="",
    )
    return pd.Series(labels, index=df.index, dtype="string").mask(hours.isna())


def orders_by_shift(df: pd.DataFrame) -> ShiftCounts:
    """Count orders per shift.

    Returns:
        ShiftCounts with one row per shift and the number of records
        excluded for having no sale_time.

    Examples:
        >>> from retail_sales.schema import to_frame
        >>> df = to_frame([{"id": 1, "sale_time": "09:00"}, {"id": 2, "sale_time": "14:00"}])
        >>> orders_by_shift(df).as_dict()
        {'Morning': 1, 'Afternoon': 1, 'Evening': 0}
    """
    shifts = assign_shifts(df)
    unshiftable = int(shifts.isna().sum())
    if unshiftable:
        logger.debug("%s records have no sale_time and were not assigned a shift", unshiftable)

    counts = pd.DataFrame(
        {
            "shift": list(SHIFTS),
            "total_orders": [int((shifts == name).sum()) for name in SHIFTS],
            "position": range(len(SHIFTS)),
        }
    )
    counts = rank_rows(counts, [("total_orders", False), ("position", True)])
    return ShiftCounts(counts=counts.drop(columns=["position"]), unshiftable=unshiftable)
