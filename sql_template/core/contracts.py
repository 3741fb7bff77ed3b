"""Core port contracts used by adapters and the SQL template."""

from __future__ import annotations

from contextlib import AbstractContextManager
from typing import Any, Callable, Optional, Protocol, Sequence, TypeVar, Union, runtime_checkable

from .rows import ResultSet, Row
from .types import QueryParams

T = TypeVar("T")
T_co = TypeVar("T_co", covariant=True)


class DialectPort(Protocol):
    """Dialect behavior required by statement binding and key retrieval."""

    name: str
    paramstyle: str
    supports_returning: bool
    supports_lastrowid: bool

    def q(self, ident: str) -> str: ...

    def bind(self, sql: str, params: QueryParams = None) -> tuple[str, Sequence[Any]]: ...

    def returning_clause(self, columns: Sequence[str]) -> str: ...

    def get_lastrowid(self, cursor: Any) -> Optional[int]: ...


class DatabasePort(Protocol):
    """Database adapter behavior required by `SqlTemplate`."""

    dialect: DialectPort

    def transaction(self) -> AbstractContextManager[None]: ...

    def savepoint(self) -> AbstractContextManager[None]: ...

    def execute(self, sql: str, params: QueryParams = None) -> Any: ...

    def executescript(self, script: str) -> None: ...

    def translate_error(self, exc: BaseException, sql: str) -> Exception: ...


@runtime_checkable
class RowMapperObject(Protocol[T_co]):
    """Object form of a row mapper."""

    def map_row(self, row: Row, row_num: int) -> T_co: ...


@runtime_checkable
class ResultSetExtractorObject(Protocol[T_co]):
    """Object form of a result set extractor."""

    def extract_data(self, rows: ResultSet) -> T_co: ...


@runtime_checkable
class RowCallbackHandlerObject(Protocol):
    """Object form of a row callback handler."""

    def process_row(self, row: Row) -> Optional[bool]: ...


RowMapper = Union[Callable[[Row, int], T], RowMapperObject[T]]
ResultSetExtractor = Union[Callable[[ResultSet], T], ResultSetExtractorObject[T]]
RowCallbackHandler = Union[Callable[[Row], Optional[bool]], RowCallbackHandlerObject]


def as_row_mapper(mapper: Any) -> Callable[[Row, int], Any]:
    """Return the callable behind a row mapper function or object."""

    if isinstance(mapper, RowMapperObject):
        return mapper.map_row
    if callable(mapper):
        return mapper
    raise TypeError(f"Row mapper must be callable or define map_row(), got {type(mapper).__name__}.")


def as_extractor(extractor: Any) -> Callable[[ResultSet], Any]:
    """Return the callable behind a result set extractor function or object."""

    if isinstance(extractor, ResultSetExtractorObject):
        return extractor.extract_data
    if callable(extractor):
        return extractor
    raise TypeError(
        f"Extractor must be callable or define extract_data(), got {type(extractor).__name__}."
    )


def as_row_callback(callback: Any) -> Callable[[Row], Optional[bool]]:
    """Return the callable behind a row callback function or object."""

    if isinstance(callback, RowCallbackHandlerObject):
        return callback.process_row
    if callable(callback):
        return callback
    raise TypeError(
        f"Row callback must be callable or define process_row(), got {type(callback).__name__}."
    )
