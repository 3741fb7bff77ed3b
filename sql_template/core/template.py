"""`SqlTemplate`: parameterized SQL execution with typed result mapping."""

from __future__ import annotations

import logging
import re
from contextlib import AbstractContextManager
from functools import partial
from typing import Any, Callable, List, Optional, Sequence, Type, TypeVar

from .contracts import (
    DatabasePort,
    ResultSetExtractor,
    RowCallbackHandler,
    RowMapper,
    as_extractor,
    as_row_callback,
    as_row_mapper,
)
from .errors import DataAccessError, IncorrectResultSizeError, UnsupportedOperationError
from .keys import GeneratedKeyHolder
from .mappers import ColumnMapRowMapper, SingleColumnRowMapper
from .rows import ColumnMap, ResultSet
from .scripts import execute_sql_script
from .types import BatchParams, QueryParams

logger = logging.getLogger(__name__)

T = TypeVar("T")
A = TypeVar("A")

_RETURNING_RE = re.compile(r"\breturning\b", re.IGNORECASE)
_USE_TEMPLATE_SETTING = object()


class SqlTemplate:
    """Run SQL with `?` positional parameters and map the results.

    Every query opens one cursor, hands its rows to a mapper, extractor, or
    callback, and closes the cursor before returning, including when the
    row-processing code raises. Calls are independent and blocking; one
    template should not be shared across threads that use the same connection.

    Args:
        db: Database adapter (usually `Database(conn, dialect)`).
        fetch_size: Rows pulled per `cursor.fetchmany` call while streaming.
        max_rows: Optional cap on the rows read from any one query.
    """

    def __init__(
        self,
        db: DatabasePort,
        *,
        fetch_size: int = 100,
        max_rows: Optional[int] = None,
    ):
        if fetch_size < 1:
            raise ValueError("fetch_size must be >= 1.")
        if max_rows is not None and max_rows < 1:
            raise ValueError("max_rows must be >= 1 when set.")
        self.db = db
        self.fetch_size = fetch_size
        self.max_rows = max_rows

    def transaction(self) -> AbstractContextManager[None]:
        """Commit/rollback scope of the underlying database adapter."""

        return self.db.transaction()

    # Queries

    def query_scalar(
        self,
        sql: str,
        params: QueryParams = None,
        *,
        required_type: Optional[Type[T]] = None,
    ) -> Any:
        """Return the single cell of a one-row, one-column query.

        Raises:
            IncorrectResultSizeError: Zero or several rows, or several columns.
            TypeConversionError: The cell cannot be converted to `required_type`.
        """

        return self._query_single(sql, SingleColumnRowMapper(required_type), params)

    def query_row_as_map(self, sql: str, params: QueryParams = None) -> ColumnMap:
        """Return the single row of a query as a case-insensitive column map."""

        return self._query_single(sql, ColumnMapRowMapper(), params)

    def query_rows_as_maps(self, sql: str, params: QueryParams = None) -> List[ColumnMap]:
        """Return every row as an independent column map, in result order."""

        return self.query_many(sql, ColumnMapRowMapper(), params)

    def query_column(
        self,
        sql: str,
        params: QueryParams = None,
        *,
        element_type: Optional[Type[T]] = None,
    ) -> List[Any]:
        """Return the values of a single-column query, in result order."""

        return self.query_many(sql, SingleColumnRowMapper(element_type), params)

    def query_one(self, sql: str, row_mapper: RowMapper[T], params: QueryParams = None) -> T:
        """Map the single expected row with `row_mapper`."""

        return self._query_single(sql, row_mapper, params)

    def query_many(self, sql: str, row_mapper: RowMapper[T], params: QueryParams = None) -> List[T]:
        """Map every row with `row_mapper`, preserving result order."""

        return self._query(sql, params, _map_all(row_mapper))

    def query_with_extractor(
        self,
        sql: str,
        extractor: ResultSetExtractor[A],
        params: QueryParams = None,
    ) -> A:
        """Hand the whole forward-only result set to `extractor`."""

        return self._query(sql, params, as_extractor(extractor))

    def query_with_callback(
        self,
        sql: str,
        callback: RowCallbackHandler,
        params: QueryParams = None,
    ) -> None:
        """Invoke `callback` once per row for its side effects.

        A callback that returns `False` stops the iteration early.
        """

        process_row = as_row_callback(callback)

        def _visit(rows: ResultSet) -> None:
            for row in rows:
                if process_row(row) is False:
                    logger.debug("Row callback stopped after %d row(s)", rows.row_number)
                    break

        self._query(sql, params, _visit)

    # Writes

    def execute(self, sql: str, params: QueryParams = None) -> int:
        """Run an insert, update, or delete and return the affected row count."""

        logger.debug("Executing SQL update [%s]", sql)
        cur = self.db.execute(sql, params)
        try:
            affected = _rowcount(cur)
        finally:
            _close_cursor(cur)
        logger.debug("SQL update affected %d rows", affected)
        return affected

    def batch_execute(self, sql: str, batch_params: BatchParams) -> List[int]:
        """Run one statement per parameter sequence; return each affected count."""

        logger.debug("Executing SQL batch update [%s] with %d entries", sql, len(batch_params))
        return [self.execute(sql, params) for params in batch_params]

    def execute_returning_key(
        self,
        sql: str,
        params: QueryParams = None,
        *,
        key_columns: Sequence[str] = ("id",),
        key_holder: Optional[GeneratedKeyHolder] = None,
    ) -> GeneratedKeyHolder:
        """Run a single-row insert and collect its database-generated key.

        Dialects with `RETURNING` get the clause appended for `key_columns`;
        other dialects fall back to `cursor.lastrowid` for one key column.
        The statement runs inside a savepoint, so a rejected insert leaves no
        rows behind even without an enclosing transaction.

        Raises:
            UnsupportedOperationError: The session cannot report generated keys.
            IncorrectResultSizeError: The statement did not affect exactly one row.
        """

        columns = list(key_columns)
        if not columns:
            raise ValueError("key_columns must name at least one column.")
        holder = key_holder if key_holder is not None else GeneratedKeyHolder()
        dialect = self.db.dialect

        if not dialect.supports_returning:
            if not getattr(dialect, "supports_lastrowid", False):
                raise UnsupportedOperationError(
                    f"Dialect {dialect.name!r} cannot report generated keys.",
                    sql=sql,
                )
            if len(columns) != 1:
                raise UnsupportedOperationError(
                    f"Dialect {dialect.name!r} can only report one generated key column.",
                    sql=sql,
                )

        with self.db.savepoint():
            if dialect.supports_returning:
                keys = self._returning_keys(sql, params, columns)
            else:
                keys = self._lastrowid_key(sql, params, columns[0])
        holder.add(keys)
        return holder

    def execute_script(self, script: str) -> int:
        """Run a multi-statement script; return the statement count."""

        return execute_sql_script(self.db, script)

    def _returning_keys(self, sql: str, params: QueryParams, columns: List[str]) -> ColumnMap:
        statement = sql.rstrip().rstrip(";").rstrip()
        if not _RETURNING_RE.search(statement):
            statement += self.db.dialect.returning_clause(columns)
        keys = self._query(statement, params, _map_all(ColumnMapRowMapper()), max_rows=None)
        if len(keys) != 1:
            raise IncorrectResultSizeError(1, len(keys), sql=sql)
        return keys[0]

    def _lastrowid_key(self, sql: str, params: QueryParams, column: str) -> ColumnMap:
        logger.debug("Executing SQL update and returning generated keys [%s]", sql)
        cur = self.db.execute(sql, params)
        try:
            affected = _rowcount(cur)
            if affected > 1 or affected == 0:
                raise IncorrectResultSizeError(1, affected, sql=sql)
            key = self.db.dialect.get_lastrowid(cur)
        finally:
            _close_cursor(cur)
        if key is None:
            raise UnsupportedOperationError(
                f"Dialect {self.db.dialect.name!r} did not report a generated key.",
                sql=sql,
            )
        return ColumnMap([(column, key)])

    def _query_single(self, sql: str, row_mapper: RowMapper[T], params: QueryParams) -> T:
        # The row cap must not hide surplus rows from the size check.
        results = self._query(sql, params, _map_all(row_mapper), max_rows=None)
        return _single_result(results, sql)

    def _query(
        self,
        sql: str,
        params: QueryParams,
        action: Callable[[ResultSet], A],
        *,
        max_rows: Any = _USE_TEMPLATE_SETTING,
    ) -> A:
        logger.debug("Executing SQL query [%s]", sql)
        cur = self.db.execute(sql, params)
        rows: Optional[ResultSet] = None
        try:
            rows = ResultSet(
                cur,
                fetch_size=self.fetch_size,
                max_rows=self.max_rows if max_rows is _USE_TEMPLATE_SETTING else max_rows,
                error_translator=partial(self.db.translate_error, sql=sql),
            )
            return action(rows)
        except DataAccessError as exc:
            if exc.sql is None:
                exc.sql = sql
            raise
        finally:
            if rows is not None:
                rows.close()
            else:
                _close_cursor(cur)


def _map_all(row_mapper: RowMapper[T]) -> Callable[[ResultSet], List[T]]:
    map_row = as_row_mapper(row_mapper)

    def _extract(rows: ResultSet) -> List[T]:
        return [map_row(row, row_num) for row_num, row in enumerate(rows)]

    return _extract


def _single_result(results: List[T], sql: str) -> T:
    if len(results) != 1:
        raise IncorrectResultSizeError(1, len(results), sql=sql)
    return results[0]


def _rowcount(cursor: Any) -> int:
    count = getattr(cursor, "rowcount", -1)
    return count if isinstance(count, int) else -1


def _close_cursor(cursor: Any) -> None:
    close = getattr(cursor, "close", None)
    if callable(close):
        close()
