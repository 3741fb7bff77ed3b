"""Typed SQL execution and result mapping over DB-API connections."""

from .core import (
    ColumnMap,
    ColumnMapRowMapper,
    ColumnNotFoundError,
    ConnectionLostError,
    DataAccessError,
    DataclassRowMapper,
    GeneratedKeyHolder,
    IncorrectColumnCountError,
    IncorrectResultSizeError,
    IntegrityViolationError,
    ResultSet,
    Row,
    RowCountCallbackHandler,
    SingleColumnRowMapper,
    SqlTemplate,
    StatementError,
    TypeConversionError,
    UncategorizedSQLError,
    UnsupportedOperationError,
    execute_sql_script,
    read_sql_script,
    split_sql_script,
)
from .ports import Database, Dialect, MySQLDialect, PostgresDialect, SQLiteDialect

__all__ = [
    "SqlTemplate",
    "Database",
    "Dialect",
    "SQLiteDialect",
    "PostgresDialect",
    "MySQLDialect",
    "Row",
    "ResultSet",
    "ColumnMap",
    "GeneratedKeyHolder",
    "ColumnMapRowMapper",
    "SingleColumnRowMapper",
    "DataclassRowMapper",
    "RowCountCallbackHandler",
    "DataAccessError",
    "StatementError",
    "IncorrectResultSizeError",
    "IncorrectColumnCountError",
    "TypeConversionError",
    "IntegrityViolationError",
    "ConnectionLostError",
    "UnsupportedOperationError",
    "UncategorizedSQLError",
    "ColumnNotFoundError",
    "execute_sql_script",
    "read_sql_script",
    "split_sql_script",
]
