"""Configuration for the canned sales analyses.

This module provides a single configuration class holding the parameters of
the fixed business questions answered by ``run_sales_report``.
"""

from __future__ import annotations

import numbers
from collections.abc import Mapping
from dataclasses import dataclass, fields
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Union

import pandas as pd

from retail_sales.exceptions import ConfigError


@dataclass
class AnalysisConfig:
    """Parameters of the canned sales questions.

    Attributes:
        sale_date: Date for "all sales made on a given day".
        category: Category for "orders of a category in a month above a quantity".
        year_month: Month for the same question, as "YYYY-MM".
        min_quantity: Quantity floor (inclusive) for the same question.
        age_category: Category whose average customer age is reported.
        high_value_threshold: total_sale must exceed this to count as high value.
        top_k: Number of customers in the top customers ranking.
    """

    sale_date: Union[date, str] = date(2022, 11, 5)
    category: str = "Clothing"
    year_month: str = "2022-11"
    min_quantity: int = 4
    age_category: str = "Beauty"
    high_value_threshold: float = 1000.0
    top_k: int = 5

    def __post_init__(self) -> None:
        if isinstance(self.sale_date, str):
            try:
                self.sale_date = date.fromisoformat(self.sale_date)
            except ValueError as e:
                raise ConfigError(f"Invalid sale_date {self.sale_date!r}: {e}") from e
        elif isinstance(self.sale_date, datetime):
            self.sale_date = self.sale_date.date()
        elif not isinstance(self.sale_date, date):
            raise ConfigError(f"sale_date must be a date, got {type(self.sale_date).__name__}")

        for name in ("category", "age_category"):
            value = getattr(self, name)
            if not isinstance(value, str) or not value.strip():
                raise ConfigError(f"{name} must be a non-empty string, got {value!r}")

        if not isinstance(self.year_month, str):
            raise ConfigError(f"year_month must be a 'YYYY-MM' string, got {self.year_month!r}")
        try:
            pd.Period(self.year_month, freq="M")
        except (TypeError, ValueError) as e:
            raise ConfigError(
                f"Invalid year_month {self.year_month!r}. Must be 'YYYY-MM'."
            ) from e

        for name in ("min_quantity", "top_k"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise ConfigError(f"{name} must be a non-negative integer, got {value!r}")

        if isinstance(self.high_value_threshold, bool) or not isinstance(
            self.high_value_threshold, (numbers.Real, Decimal)
        ):
            raise ConfigError(
                f"high_value_threshold must be a number, got {self.high_value_threshold!r}"
            )

    @classmethod
    def from_dict(cls, values: Mapping[str, Any]) -> AnalysisConfig:
        """Create an AnalysisConfig from plain values, e.g. parsed JSON.

        Args:
            values: Mapping of field name to value. Missing fields keep
                their defaults. sale_date may be an ISO date string.

        Returns:
            AnalysisConfig instance.

        Raises:
            ConfigError: If a key is unknown or a value is invalid.

        Examples:
            >>> cfg = AnalysisConfig.from_dict({"sale_date": "2023-01-02", "top_k": 3})
            >>> cfg.top_k
            3
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(values) - known)
        if unknown:
            raise ConfigError(f"Unknown configuration keys: {unknown}. Known: {sorted(known)}")
        return cls(**dict(values))
