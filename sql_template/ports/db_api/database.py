"""DB-API adapter implementation for the core database port."""

from __future__ import annotations

import contextlib
import logging
from typing import Any

from ...core.errors import ConnectionLostError
from ...core.scripts import execute_sql_script
from ...core.types import QueryParams
from .dialects import Dialect
from .errors import translate_exception

logger = logging.getLogger(__name__)


class Database:
    """Thin DB-API wrapper that binds positional parameters and translates errors."""

    def __init__(self, conn: Any, dialect: Dialect):
        """Create database adapter.

        Args:
            conn: Open DB-API connection object.
            dialect: Concrete SQL dialect instance.
        """

        self._closed = False
        self._savepoint_seq = 0
        self.conn: Any | None = conn
        self.dialect = dialect

    @property
    def closed(self) -> bool:
        return self._closed

    def _require_open_connection(self) -> Any:
        if self._closed or self.conn is None:
            raise ConnectionLostError("connection is closed")
        return self.conn

    def _should_begin_sqlite_transaction(self, conn: Any) -> bool:
        if getattr(self.dialect, "name", "").lower() != "sqlite":
            return False
        return not bool(getattr(conn, "in_transaction", False))

    @contextlib.contextmanager
    def transaction(self):
        """Provide commit/rollback transaction scope."""

        conn = self._require_open_connection()
        try:
            if self._should_begin_sqlite_transaction(conn):
                conn.execute("BEGIN")
            yield
            conn.commit()
        except BaseException:
            conn.rollback()
            raise

    @contextlib.contextmanager
    def savepoint(self):
        """Scope work in a savepoint that is rolled back if the block raises.

        Works inside or outside an enclosing `transaction()`; an outer
        transaction stays open either way.
        """

        self._require_open_connection()
        self._savepoint_seq += 1
        name = f"sql_template_sp_{self._savepoint_seq}"
        self._run_control(f"SAVEPOINT {name}")
        try:
            yield
        except BaseException:
            self._run_control(f"ROLLBACK TO SAVEPOINT {name}")
            self._run_control(f"RELEASE SAVEPOINT {name}")
            raise
        self._run_control(f"RELEASE SAVEPOINT {name}")

    def execute(self, sql: str, params: QueryParams = None) -> Any:
        """Bind `?` parameters, execute SQL, and return the open cursor.

        The caller owns the returned cursor and must close it.
        """

        conn = self._require_open_connection()
        bound_sql, bound_params = self.dialect.bind(sql, params)
        cur = self._cursor(conn, sql)
        try:
            if bound_params is None:
                cur.execute(bound_sql)
            else:
                cur.execute(bound_sql, bound_params)
        except Exception as exc:
            _close_quietly(cur)
            raise self.translate_error(exc, sql) from exc
        return cur

    def executescript(self, script: str) -> None:
        """Run a multi-statement script without parameters."""

        execute_sql_script(self, script)

    def _run_control(self, sql: str) -> None:
        _close_quietly(self.execute(sql))

    def _cursor(self, conn: Any, sql: str) -> Any:
        try:
            return conn.cursor()
        except Exception as exc:
            raise self.translate_error(exc, sql) from exc

    def translate_error(self, exc: BaseException, sql: str) -> Exception:
        """Map a driver exception raised for `sql` to a `DataAccessError`."""

        translated = translate_exception(exc, sql)
        logger.debug("Translated %s to %s for SQL [%s]", type(exc).__name__, type(translated).__name__, sql)
        return translated

    def close(self) -> None:
        """Close the underlying connection."""

        if self._closed:
            return
        conn = self.conn
        self._closed = True
        self.conn = None
        if conn is None:
            return
        close = getattr(conn, "close", None)
        if callable(close):
            close()

    def __enter__(self) -> Database:
        return self

    def __exit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        self.close()


def _close_quietly(cursor: Any) -> None:
    close = getattr(cursor, "close", None)
    if callable(close):
        try:
            close()
        except Exception:
            logger.debug("Ignoring error while closing cursor", exc_info=True)
