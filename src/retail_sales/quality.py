"""Null profile of a transactions frame."""

from __future__ import annotations

import pandas as pd

from retail_sales.schema import REQUIRED_FIELDS, require_columns


def null_counts(df: pd.DataFrame) -> dict[str, int]:
    """Count absent values per required field.

    Returns:
        Dictionary mapping each field in REQUIRED_FIELDS (in that order) to
        its number of null cells. Fields without nulls map to 0.

    Examples:
        >>> from retail_sales.schema import to_frame
        >>> df = to_frame([{"id": 1, "age": 30}, {"id": 2}])
        >>> null_counts(df)["age"]
        1
    """
    require_columns(df, REQUIRED_FIELDS)
    return {col: int(df[col].isna().sum()) for col in REQUIRED_FIELDS}
