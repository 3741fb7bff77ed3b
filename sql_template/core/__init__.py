"""Public core API for SQL execution, row mapping, and error handling."""

from .contracts import (
    DatabasePort,
    DialectPort,
    ResultSetExtractor,
    RowCallbackHandler,
    RowMapper,
)
from .conversion import convert_value
from .errors import (
    ColumnNotFoundError,
    ConnectionLostError,
    DataAccessError,
    IncorrectColumnCountError,
    IncorrectResultSizeError,
    IntegrityViolationError,
    StatementError,
    TypeConversionError,
    UncategorizedSQLError,
    UnsupportedOperationError,
)
from .keys import GeneratedKeyHolder
from .mappers import (
    ColumnMapRowMapper,
    DataclassRowMapper,
    RowCountCallbackHandler,
    SingleColumnRowMapper,
)
from .rows import ColumnMap, ResultSet, Row
from .scripts import execute_sql_script, read_sql_script, split_sql_script
from .template import SqlTemplate

__all__ = [
    "SqlTemplate",
    "DatabasePort",
    "DialectPort",
    "RowMapper",
    "ResultSetExtractor",
    "RowCallbackHandler",
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
    "convert_value",
    "execute_sql_script",
    "read_sql_script",
    "split_sql_script",
]
