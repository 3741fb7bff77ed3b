"""Translation of DB-API driver exceptions into `DataAccessError` kinds."""

from __future__ import annotations

from typing import Optional, Type

from ...core.errors import (
    ConnectionLostError,
    DataAccessError,
    IntegrityViolationError,
    StatementError,
    UncategorizedSQLError,
)

# SQLSTATE class (first two characters) -> error kind.
_SQLSTATE_CLASSES = {
    "07": StatementError,  # dynamic SQL error
    "08": ConnectionLostError,  # connection exception
    "21": StatementError,  # cardinality violation
    "22": StatementError,  # data exception
    "23": IntegrityViolationError,  # integrity constraint violation
    "42": StatementError,  # syntax error or access rule violation
    "57": ConnectionLostError,  # operator intervention (admin shutdown)
}

_MYSQL_INTEGRITY_CODES = {1022, 1048, 1052, 1062, 1169, 1216, 1217, 1451, 1452, 1557, 1586}
_MYSQL_STATEMENT_CODES = {1054, 1064, 1146, 1149, 1210}
_MYSQL_CONNECTION_CODES = {2002, 2003, 2006, 2013, 2055}

_SQLITE_STATEMENT_MARKERS = (
    "syntax error",
    "no such table",
    "no such column",
    "no such function",
    "incomplete input",
    "unrecognized token",
    "has no column named",
    "values were supplied",
    "ambiguous column name",
    "already exists",
    "incorrect number of bindings",
    "error binding parameter",
    "type 'list' is not supported",
    "you can only execute one statement",
)
_CONNECTION_MARKERS = (
    "closed database",
    "closed cursor",
    "connection already closed",
    "cursor already closed",
    "connection is closed",
    "connection was closed",
    "disk i/o error",
    "unable to open database",
    "server closed the connection",
    "connection refused",
    "lost connection",
    "gone away",
    "terminating connection",
)


def translate_exception(exc: BaseException, sql: Optional[str] = None) -> DataAccessError:
    """Return the `DataAccessError` matching one driver exception.

    The original exception is stored on `.cause`; callers chain it with
    `raise translated from exc`.
    """

    if isinstance(exc, DataAccessError):
        return exc

    kind = _from_sqlstate(exc) or _from_mysql_errno(exc) or _from_class_and_message(exc)
    message = f"{type(exc).__name__}: {exc}"
    return kind(message, sql=sql, cause=exc)


def _from_sqlstate(exc: BaseException) -> Optional[Type[DataAccessError]]:
    state = getattr(exc, "sqlstate", None) or getattr(exc, "pgcode", None)
    if not isinstance(state, str) or len(state) < 2:
        return None
    return _SQLSTATE_CLASSES.get(state[:2], UncategorizedSQLError)


def _from_mysql_errno(exc: BaseException) -> Optional[Type[DataAccessError]]:
    module = type(exc).__module__.lower()
    if "mysql" not in module:
        return None
    errno = getattr(exc, "errno", None)
    if errno is None and exc.args and isinstance(exc.args[0], int):
        errno = exc.args[0]
    if not isinstance(errno, int):
        return None
    if errno in _MYSQL_INTEGRITY_CODES:
        return IntegrityViolationError
    if errno in _MYSQL_STATEMENT_CODES:
        return StatementError
    if errno in _MYSQL_CONNECTION_CODES:
        return ConnectionLostError
    return None


def _from_class_and_message(exc: BaseException) -> Type[DataAccessError]:
    names = {cls.__name__ for cls in type(exc).__mro__}
    text = str(exc).lower()

    if "IntegrityError" in names:
        return IntegrityViolationError
    # Statement markers win: error text can quote identifiers such as `closed`.
    if any(marker in text for marker in _SQLITE_STATEMENT_MARKERS):
        return StatementError
    if any(marker in text for marker in _CONNECTION_MARKERS):
        return ConnectionLostError
    if "ProgrammingError" in names or "DataError" in names:
        return StatementError
    if "InterfaceError" in names:
        return ConnectionLostError
    if "OperationalError" in names:
        return UncategorizedSQLError
    if "NotSupportedError" in names:
        return StatementError
    return UncategorizedSQLError
