"""Data access error taxonomy raised by the template and DB-API adapter."""

from __future__ import annotations

from typing import Any, Optional


class DataAccessError(Exception):
    """Base class for every error surfaced by `sql_template`.

    Attributes:
        sql: SQL text of the failing statement, when known.
        cause: Original driver exception, when the error was translated.
    """

    def __init__(
        self,
        message: str,
        *,
        sql: Optional[str] = None,
        cause: Optional[BaseException] = None,
    ):
        super().__init__(message)
        self.sql = sql
        self.cause = cause


class StatementError(DataAccessError):
    """Malformed SQL or parameters that do not match the placeholders."""


class IncorrectResultSizeError(DataAccessError):
    """A single-row operation got zero or more than one row."""

    def __init__(
        self,
        expected: int,
        actual: int,
        *,
        sql: Optional[str] = None,
        message: Optional[str] = None,
    ):
        super().__init__(
            message or f"Incorrect result size: expected {expected}, actual {actual}",
            sql=sql,
        )
        self.expected = expected
        self.actual = actual


class IncorrectColumnCountError(IncorrectResultSizeError):
    """A single-column operation got a row with a different column count."""

    def __init__(self, expected: int, actual: int, *, sql: Optional[str] = None):
        super().__init__(
            expected,
            actual,
            sql=sql,
            message=f"Incorrect column count: expected {expected}, actual {actual}",
        )


class TypeConversionError(DataAccessError, TypeError):
    """A cell value cannot be coerced to the requested Python type."""

    def __init__(self, value: Any, required_type: type, *, column: Optional[str] = None):
        where = f" in column {column!r}" if column else ""
        super().__init__(
            f"Cannot convert value {value!r} of type {type(value).__name__}"
            f"{where} to {required_type.__name__}"
        )
        self.value = value
        self.required_type = required_type
        self.column = column


class IntegrityViolationError(DataAccessError):
    """A write violated a uniqueness, foreign key, or not-null constraint."""


class ConnectionLostError(DataAccessError):
    """The database session is closed or failed at the I/O level."""


class UnsupportedOperationError(DataAccessError):
    """The session or statement shape cannot provide the requested feature."""


class UncategorizedSQLError(DataAccessError):
    """Driver error that matches no more specific category."""


class ColumnNotFoundError(DataAccessError, KeyError):
    """A row was asked for a column it does not have."""

    def __init__(self, column: Any, available: Any = ()):
        super().__init__(
            f"Column {column!r} not found; available columns: {list(available)!r}"
        )
        self.column = column

    def __str__(self) -> str:
        return str(self.args[0])
