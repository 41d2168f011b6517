"""Transaction record and the transactions frame contract.

The analysis functions operate on a pandas DataFrame with one row per
Transaction (the "transactions frame"). This module defines:

- ``Transaction``: the record type handed over by a dataset loader
- ``COLUMNS`` / ``FRAME_DTYPES``: the column contract of the frame
- ``to_frame``: coerce records into a typed frame, rejecting malformed values
- ``iter_transactions``: turn a frame back into ``Transaction`` objects

Absent values are ``None`` on the record side and NaN / NaT / ``pd.NA`` on
the frame side. Sentinels such as empty strings are never treated as absent.

Example:
    >>> from datetime import date, time
    >>> from retail_sales.schema import Transaction, to_frame
    >>> df = to_frame([
    ...     Transaction(id=1, sale_date=date(2022, 11, 5), sale_time=time(9, 0),
    ...                 category="Clothing", total_sale=500),
    ... ])
    >>> len(df)
    1
"""

from __future__ import annotations

import logging
import math
import numbers
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, fields
from datetime import date, datetime, time
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Optional, Union

import pandas as pd

from retail_sales.exceptions import DataQualityError, MalformedInputError

logger = logging.getLogger(__name__)

# Fields that must all be present for a record to count as complete
REQUIRED_FIELDS = (
    "sale_date",
    "sale_time",
    "customer_id",
    "gender",
    "age",
    "category",
    "quantity",
    "price_per_unit",
    "cogs",
    "total_sale",
)

COLUMNS = ("id", *REQUIRED_FIELDS)

INT_COLUMNS = ("id", "customer_id", "age", "quantity")
MONEY_COLUMNS = ("price_per_unit", "cogs", "total_sale")
STRING_COLUMNS = ("gender", "category")

FRAME_DTYPES = {
    **{col: "Int64" for col in INT_COLUMNS},
    **{col: "float64" for col in MONEY_COLUMNS},
    **{col: "string" for col in STRING_COLUMNS},
    "sale_date": "datetime64[ns]",
    "sale_time": "object",
}

GENDERS = ("Male", "Female")


@dataclass(frozen=True)
class Transaction:
    """One retail sale.

    Attributes:
        id: Unique transaction identifier.
        sale_date: Calendar date of the sale.
        sale_time: Time of day of the sale.
        customer_id: Customer identifier.
        gender: "Male" or "Female".
        age: Customer age in years.
        category: Product category (open set, e.g. "Clothing", "Beauty").
        quantity: Units sold.
        price_per_unit: Unit price.
        cogs: Cost of goods sold.
        total_sale: Sale amount. Usually quantity * price_per_unit, but not enforced.
    """

    id: int
    sale_date: Optional[date] = None
    sale_time: Optional[time] = None
    customer_id: Optional[int] = None
    gender: Optional[str] = None
    age: Optional[int] = None
    category: Optional[str] = None
    quantity: Optional[int] = None
    price_per_unit: Optional[Decimal] = None
    cogs: Optional[Decimal] = None
    total_sale: Optional[Decimal] = None

    def is_complete(self) -> bool:
        """Return True if no required field is absent."""
        return all(getattr(self, name) is not None for name in REQUIRED_FIELDS)


RecordLike = Union[Transaction, Mapping[str, Any]]


# --------------------------------------------------------------------------- #
# Value coercion
# --------------------------------------------------------------------------- #


def _is_absent(value: Any) -> bool:
    if value is None:
        return True
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        # Containers are not absent markers; they fail coercion later
        return False


def _to_int(value: Any) -> int:
    if isinstance(value, bool):
        raise ValueError("is a boolean, expected an integer")
    if isinstance(value, numbers.Integral):
        return int(value)
    if isinstance(value, (float, Decimal)):
        if not math.isfinite(value) or value != int(value):
            raise ValueError("is not a whole number")
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            raise ValueError("is not an integer") from None
    raise ValueError(f"has unsupported type {type(value).__name__}")


def _to_money(value: Any) -> float:
    if isinstance(value, bool):
        raise ValueError("is a boolean, expected a number")
    if isinstance(value, str):
        try:
            value = Decimal(value.strip())
        except InvalidOperation:
            raise ValueError("is not a number") from None
    if not isinstance(value, (numbers.Real, Decimal)):
        raise ValueError(f"has unsupported type {type(value).__name__}")
    if not math.isfinite(value):
        raise ValueError("is not a finite number")
    return float(value)


def _to_non_negative_money(value: Any) -> float:
    amount = _to_money(value)
    if amount < 0:
        raise ValueError("must not be negative")
    return amount


def _to_non_negative_int(value: Any) -> int:
    number = _to_int(value)
    if number < 0:
        raise ValueError("must not be negative")
    return number


def _to_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip())
        except ValueError:
            raise ValueError("is not an ISO date (YYYY-MM-DD)") from None
    raise ValueError(f"has unsupported type {type(value).__name__}")


def _to_time(value: Any) -> time:
    if isinstance(value, datetime):
        return value.time()
    if isinstance(value, time):
        return value
    if isinstance(value, str):
        try:
            return time.fromisoformat(value.strip())
        except ValueError:
            raise ValueError("is not an ISO time (HH:MM[:SS])") from None
    raise ValueError(f"has unsupported type {type(value).__name__}")


def _to_text(value: Any) -> str:
    if not isinstance(value, str):
        raise ValueError(f"has unsupported type {type(value).__name__}")
    text = value.strip()
    if not text:
        raise ValueError("is empty; use None for an absent value")
    return text


def _to_gender(value: Any) -> str:
    text = _to_text(value)
    if text not in GENDERS:
        raise ValueError(f"is not one of {list(GENDERS)}")
    return text


_COERCERS: dict[str, Callable[[Any], Any]] = {
    "id": _to_int,
    "sale_date": _to_date,
    "sale_time": _to_time,
    "customer_id": _to_int,
    "gender": _to_gender,
    "age": _to_non_negative_int,
    "category": _to_text,
    "quantity": _to_non_negative_int,
    "price_per_unit": _to_non_negative_money,
    "cogs": _to_non_negative_money,
    "total_sale": _to_money,
}


def _record_values(record: RecordLike) -> Mapping[str, Any]:
    if isinstance(record, Transaction):
        return {f.name: getattr(record, f.name) for f in fields(Transaction)}
    if isinstance(record, Mapping):
        return record
    raise MalformedInputError(
        None, "<record>", record, "is neither a Transaction nor a mapping"
    )


def coerce_record(record: RecordLike) -> dict[str, Any]:
    """Coerce one record into a dict of typed column values.

    Args:
        record: A Transaction or a mapping keyed by column name. Missing keys
            are treated as absent values; extra keys are ignored.

    Returns:
        Dictionary with one entry per column in COLUMNS. Money fields are
        floats; absent values are None.

    Raises:
        MalformedInputError: If any field fails coercion, or the id is absent.
    """
    values = _record_values(record)
    raw_id = values.get("id")
    if _is_absent(raw_id):
        raise MalformedInputError(None, "id", raw_id, "is required")

    row: dict[str, Any] = {}
    for name in COLUMNS:
        raw = values.get(name)
        if _is_absent(raw):
            row[name] = None
            continue
        try:
            row[name] = _COERCERS[name](raw)
        except ValueError as e:
            record_id = row.get("id", raw_id)
            raise MalformedInputError(record_id, name, raw, str(e)) from e
    return row


# --------------------------------------------------------------------------- #
# Frame construction and validation
# --------------------------------------------------------------------------- #


def _build_frame(rows: list[dict[str, Any]]) -> pd.DataFrame:
    data = {}
    for name in COLUMNS:
        values = [row[name] for row in rows]
        if name == "sale_date":
            data[name] = pd.to_datetime(pd.Series(values, dtype="object")).astype(
                "datetime64[ns]"
            )
        else:
            data[name] = pd.Series(values, dtype=FRAME_DTYPES[name])
    return pd.DataFrame(data, columns=list(COLUMNS))


def empty_frame() -> pd.DataFrame:
    """Return an empty transactions frame with the canonical dtypes."""
    return _build_frame([])


def to_frame(records: Iterable[RecordLike], errors: str = "raise") -> pd.DataFrame:
    """Build a transactions frame from records.

    Args:
        records: Transactions or mappings, in dataset order.
        errors: "raise" (default) to propagate the first MalformedInputError,
            or "skip" to log and drop malformed records.

    Returns:
        DataFrame with columns COLUMNS and dtypes FRAME_DTYPES, in input order.

    Raises:
        ValueError: If errors is not "raise" or "skip".
        MalformedInputError: If a record fails coercion and errors="raise".
        DataQualityError: If transaction ids are not unique.
    """
    if errors not in ("raise", "skip"):
        raise ValueError(f"Invalid errors '{errors}'. Must be 'raise' or 'skip'.")

    rows = []
    skipped = 0
    for position, record in enumerate(records):
        try:
            rows.append(coerce_record(record))
        except MalformedInputError as e:
            if errors == "raise":
                raise
            skipped += 1
            logger.warning("Skipping malformed record at position %s: %s", position, e)

    frame = _build_frame(rows)
    validate_frame(frame)
    logger.debug("Built transactions frame with %s rows (%s skipped)", len(frame), skipped)
    return frame


def require_columns(frame: pd.DataFrame, columns: Iterable[str]) -> None:
    """Raise DataQualityError if any of the given columns is missing."""
    missing = [col for col in columns if col not in frame.columns]
    if missing:
        raise DataQualityError(f"Missing required columns: {missing}. Required: {list(columns)}")


def validate_frame(frame: pd.DataFrame) -> None:
    """Check that a frame satisfies the transactions frame contract.

    Validates presence of every column in COLUMNS, and that ids are present
    and unique.

    Raises:
        DataQualityError: If a column is missing or ids are absent/duplicated.
    """
    require_columns(frame, COLUMNS)

    null_ids = int(frame["id"].isna().sum())
    if null_ids:
        raise DataQualityError(f"Column 'id' has {null_ids} null values.")

    dup_mask = frame["id"].duplicated()
    if dup_mask.any():
        dup_ids = sorted(int(i) for i in frame.loc[dup_mask, "id"].unique())
        raise DataQualityError(f"Found duplicate transaction ids: {dup_ids}")


def complete_mask(frame: pd.DataFrame) -> pd.Series:
    """Boolean mask of rows with no absent required field."""
    require_columns(frame, REQUIRED_FIELDS)
    return frame[list(REQUIRED_FIELDS)].notna().all(axis=1)


# --------------------------------------------------------------------------- #
# Frame -> records
# --------------------------------------------------------------------------- #


def _from_cell(name: str, value: Any) -> Any:
    if _is_absent(value):
        return None
    if name in INT_COLUMNS:
        return int(value)
    if name in MONEY_COLUMNS:
        return Decimal(str(float(value)))
    if name == "sale_date":
        return pd.Timestamp(value).date()
    if name in STRING_COLUMNS:
        return str(value)
    return value


def iter_transactions(frame: pd.DataFrame) -> Iterator[Transaction]:
    """Yield a Transaction for every row of a transactions frame.

    Each call starts a fresh pass over the frame, so the result of
    ``find_incomplete`` or any other row-returning query can be iterated
    as many times as needed.
    """
    require_columns(frame, COLUMNS)
    for row in frame[list(COLUMNS)].itertuples(index=False, name=None):
        yield Transaction(**{name: _from_cell(name, value) for name, value in zip(COLUMNS, row)})
