"""Domain-specific exceptions for retail sales analysis.

This module defines custom exceptions that are part of the public API.
All exceptions inherit from SalesAnalysisError for easy catching.
"""

from __future__ import annotations

from typing import Any, Optional


class SalesAnalysisError(Exception):
    """Base exception for all retail sales analysis errors.

    Users can catch this exception to handle any error raised by the package.
    """

    pass


class ConfigError(SalesAnalysisError):
    """Raised when there is a configuration error.

    This exception is raised when:
    - Invalid configuration values are provided
    - Unknown configuration keys are passed to AnalysisConfig.from_dict
    """

    pass


class DataQualityError(SalesAnalysisError):
    """Raised when a transactions frame fails validation.

    This exception is raised when:
    - Required columns are missing from input data
    - Transaction ids are not unique
    """

    pass


class MalformedInputError(SalesAnalysisError):
    """Raised when a single record cannot be coerced into a Transaction.

    Attributes:
        record_id: Identifier of the offending record, if it could be read.
        field: Name of the field that failed coercion.
        value: The raw value that was rejected.
    """

    def __init__(
        self,
        record_id: Optional[Any],
        field: str,
        value: Any,
        reason: str,
    ) -> None:
        self.record_id = record_id
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(f"Record {record_id!r}: field '{field}' = {value!r} {reason}")


class EmptyAggregateError(SalesAnalysisError):
    """Raised when an averaging operation finds zero eligible rows.

    Distinguishes "no data" from "the average is zero".
    """

    pass
