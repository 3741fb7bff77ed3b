"""DB-API adapter and dialect exports."""

from .database import Database
from .dialects import Dialect, MySQLDialect, PostgresDialect, SQLiteDialect
from .errors import translate_exception

__all__ = [
    "Database",
    "Dialect",
    "MySQLDialect",
    "PostgresDialect",
    "SQLiteDialect",
    "translate_exception",
]
