"""Row, column map, and forward-only result set over a DB-API cursor."""

from __future__ import annotations

from collections.abc import Iterator, Mapping, MutableMapping
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple, Type, TypeVar

from .conversion import convert_value
from .errors import ColumnNotFoundError, StatementError
from .types import ColumnDescription

T = TypeVar("T")


class ColumnMap(MutableMapping):
    """Mapping of column name to value with case-insensitive keys.

    Keys keep the spelling the driver reported and the select order;
    `m["NAME"]`, `m["name"]` and `"Name" in m` all address the same column.
    """

    def __init__(self, data: Optional[Iterable[Tuple[str, Any]]] = None):
        self._store: Dict[str, Tuple[str, Any]] = {}
        if data is not None:
            pairs = data.items() if isinstance(data, Mapping) else data
            for key, value in pairs:
                self[key] = value

    @staticmethod
    def _fold(key: str) -> str:
        return key.lower()

    def __getitem__(self, key: str) -> Any:
        try:
            return self._store[self._fold(key)][1]
        except KeyError:
            raise KeyError(key) from None

    def __setitem__(self, key: str, value: Any) -> None:
        folded = self._fold(key)
        existing = self._store.get(folded)
        self._store[folded] = (existing[0] if existing else key, value)

    def __delitem__(self, key: str) -> None:
        try:
            del self._store[self._fold(key)]
        except KeyError:
            raise KeyError(key) from None

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self._fold(key) in self._store

    def __iter__(self) -> Iterator[str]:
        return (original for original, _ in self._store.values())

    def __len__(self) -> int:
        return len(self._store)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ColumnMap):
            return dict(self.items()) == dict(other.items())
        if isinstance(other, dict):
            return dict(self.items()) == other
        return NotImplemented

    def __repr__(self) -> str:
        return f"ColumnMap({dict(self.items())!r})"

    def copy(self) -> ColumnMap:
        return ColumnMap(self.items())


class ColumnIndex:
    """Column names of one result set, shared by all its rows."""

    def __init__(self, description: Sequence[ColumnDescription]):
        self.names: List[str] = [str(d[0]) for d in description]
        self._positions: Dict[str, int] = {}
        for position, name in enumerate(self.names):
            # First occurrence wins for duplicate labels, e.g. joined `name` columns.
            self._positions.setdefault(name.lower(), position)

    def position(self, name: str) -> int:
        try:
            return self._positions[name.lower()]
        except KeyError:
            raise ColumnNotFoundError(name, self.names) from None

    def __len__(self) -> int:
        return len(self.names)


class Row:
    """One result row with case-insensitive named and positional access."""

    __slots__ = ("_columns", "_values")

    def __init__(self, columns: ColumnIndex, values: Sequence[Any]):
        self._columns = columns
        self._values = tuple(values)

    @property
    def column_names(self) -> List[str]:
        return list(self._columns.names)

    def __getitem__(self, key: int | str) -> Any:
        if isinstance(key, int):
            try:
                return self._values[key]
            except IndexError:
                raise ColumnNotFoundError(key, self._columns.names) from None
        return self._values[self._columns.position(key)]

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self) -> Iterator[Any]:
        return iter(self._values)

    def __contains__(self, name: object) -> bool:
        if not isinstance(name, str):
            return False
        try:
            self._columns.position(name)
        except ColumnNotFoundError:
            return False
        return True

    def __repr__(self) -> str:
        pairs = ", ".join(f"{n}={v!r}" for n, v in zip(self._columns.names, self._values))
        return f"Row({pairs})"

    def get(self, key: int | str, default: Any = None) -> Any:
        try:
            return self[key]
        except ColumnNotFoundError:
            return default

    def get_object(self, key: int | str, required_type: Optional[Type[T]] = None) -> Any:
        """Return one cell coerced to `required_type`."""

        column = key if isinstance(key, str) else self._column_label(key)
        return convert_value(self[key], required_type, column=column)

    def get_int(self, key: int | str) -> Optional[int]:
        return self.get_object(key, int)

    def get_str(self, key: int | str) -> Optional[str]:
        return self.get_object(key, str)

    def get_float(self, key: int | str) -> Optional[float]:
        return self.get_object(key, float)

    def get_decimal(self, key: int | str) -> Optional[Decimal]:
        return self.get_object(key, Decimal)

    def get_bool(self, key: int | str) -> Optional[bool]:
        return self.get_object(key, bool)

    def get_date(self, key: int | str) -> Optional[date]:
        return self.get_object(key, date)

    def get_datetime(self, key: int | str) -> Optional[datetime]:
        return self.get_object(key, datetime)

    def as_map(self) -> ColumnMap:
        """Copy this row into an independent `ColumnMap`."""

        result = ColumnMap()
        for name, value in zip(self._columns.names, self._values):
            if name not in result:
                result[name] = value
        return result

    def _column_label(self, position: int) -> Optional[str]:
        names = self._columns.names
        if -len(names) <= position < len(names):
            return names[position]
        return None


def row_values(raw: Any, columns: ColumnIndex) -> Sequence[Any]:
    """Normalize a driver row (tuple, mapping, `sqlite3.Row`) to values in column order."""

    if isinstance(raw, (tuple, list)):
        return raw
    if isinstance(raw, Mapping):
        return [raw[name] for name in columns.names]
    try:
        return tuple(raw)
    except TypeError:
        raise TypeError(f"Unsupported row type: {type(raw)}") from None


class ResultSet(Iterator[Row]):
    """Lazy, single-pass iterator over the rows of one open cursor.

    Rows are pulled with `cursor.fetchmany(fetch_size)`; at most one batch is
    buffered. The result set does not own transaction state; closing it only
    closes the cursor. It cannot be restarted once consumed.
    """

    def __init__(
        self,
        cursor: Any,
        *,
        fetch_size: int = 100,
        max_rows: Optional[int] = None,
        error_translator: Optional[Callable[[BaseException], Exception]] = None,
    ):
        description = getattr(cursor, "description", None)
        if not description:
            raise StatementError("Statement did not produce a result set.")
        self._cursor = cursor
        self._fetch_size = fetch_size
        self._max_rows = max_rows
        self._error_translator = error_translator
        self.columns = ColumnIndex(description)
        self._buffer: List[Any] = []
        self._buffer_pos = 0
        self._row_number = 0
        self._exhausted = False
        self._closed = False

    @property
    def column_names(self) -> List[str]:
        return list(self.columns.names)

    @property
    def row_number(self) -> int:
        """Number of rows delivered so far."""

        return self._row_number

    @property
    def closed(self) -> bool:
        return self._closed

    def __iter__(self) -> ResultSet:
        return self

    def __next__(self) -> Row:
        if self._exhausted or self._closed:
            raise StopIteration
        if self._max_rows is not None and self._row_number >= self._max_rows:
            self._exhausted = True
            raise StopIteration
        if self._buffer_pos >= len(self._buffer):
            self._buffer = self._fetch_batch()
            self._buffer_pos = 0
            if not self._buffer:
                self._exhausted = True
                raise StopIteration
        raw = self._buffer[self._buffer_pos]
        self._buffer_pos += 1
        self._row_number += 1
        return Row(self.columns, row_values(raw, self.columns))

    def _fetch_batch(self) -> List[Any]:
        try:
            return list(self._cursor.fetchmany(self._fetch_size))
        except Exception as exc:
            if self._error_translator is None:
                raise
            raise self._error_translator(exc) from exc

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._buffer = []
        close = getattr(self._cursor, "close", None)
        if callable(close):
            close()

    def __enter__(self) -> ResultSet:
        return self

    def __exit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        self.close()
