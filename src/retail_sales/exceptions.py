"""Domain-specific exceptions for the retail sales reporting engine.

This module defines custom exceptions that are part of the public API.
All exceptions inherit from RetailSalesError for easy catching.
"""


class RetailSalesError(Exception):
    """Base exception for all retail sales reporting errors.

    Users can catch this exception to handle any error raised by the package.
    """

    pass


class ConfigError(RetailSalesError):
    """Raised when there is a configuration error.

    This exception is raised when:
    - An unknown report name is requested
    - Report parameters in the configuration are invalid
    """

    pass


class ReportArgumentError(ConfigError, ValueError):
    """Raised by a report when one of its arguments is invalid.

    Examples: ``top_customers`` with n < 1, a negative threshold, a
    malformed year-month or date. It is also a ValueError, so callers of
    the report functions can catch it as such.
    """

    pass


class DataQualityError(RetailSalesError):
    """Raised when input data fails validation."""

    pass


class SchemaError(DataQualityError):
    """Raised when a dataset does not match the sales table schema.

    This exception is raised when:
    - A required column is missing from the input
    - A value cannot be parsed into its column type
    - A value is out of range (e.g. negative age, zero quantity)
    - A transaction_id is null or duplicated

    The whole load is aborted; no rows from the failing batch are inserted.

    Attributes:
        row: Zero-based position of the offending row in the batch, if known.
        field: Name of the offending column, if known.
    """

    def __init__(self, message: str, row: int | None = None, field: str | None = None):
        super().__init__(message)
        self.row = row
        self.field = field


class EmptyResultWarning(UserWarning):
    """Issued when a report matches no rows.

    This is a normal outcome, not an error: the report still returns an
    empty result.
    """
