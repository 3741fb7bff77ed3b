"""Concrete SQL dialect implementations for DB-API adapters."""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence, Tuple

from ...core.errors import StatementError
from ...core.types import QueryParams


class Dialect:
    """Base dialect that defines quoting, placeholder binding, and key retrieval.

    SQL handed to the template always uses `?` positional placeholders. The
    dialect rewrites them into the driver's `paramstyle` and validates that
    the number of placeholders matches the number of parameters.
    """

    name: str = "generic"
    paramstyle: str = "qmark"
    quote_char: str = '"'
    supports_returning: bool = False
    supports_lastrowid: bool = False

    def q(self, ident: str) -> str:
        """Quote SQL identifier."""

        return f"{self.quote_char}{ident}{self.quote_char}"

    def placeholder(self, index: int) -> str:
        """Return the placeholder for the zero-based parameter `index`."""

        if self.paramstyle == "qmark":
            return "?"
        if self.paramstyle == "format":
            return "%s"
        if self.paramstyle == "numeric":
            return f":{index + 1}"
        if self.paramstyle == "named":
            return f":p{index + 1}"
        if self.paramstyle == "pyformat":
            return f"%(p{index + 1})s"
        raise ValueError(f"Unsupported paramstyle: {self.paramstyle}")

    def bind(self, sql: str, params: QueryParams = None) -> Tuple[str, Any]:
        """Rewrite `?` placeholders and shape `params` for the driver.

        Returns:
            `(sql, params)` ready for `cursor.execute`. `params` is `None` when
            the statement takes no parameters.

        Raises:
            StatementError: Placeholder and parameter counts differ.
        """

        values = _as_param_list(params, sql)
        rewritten, count = self._rewrite(sql, escape_percent=bool(values))
        if count != len(values):
            raise StatementError(
                f"SQL expects {count} parameter(s) but {len(values)} were given.",
                sql=sql,
            )
        if not values:
            return rewritten, None
        if self.paramstyle in {"named", "pyformat"}:
            named: Dict[str, Any] = {f"p{i + 1}": v for i, v in enumerate(values)}
            return rewritten, named
        return rewritten, values

    def count_placeholders(self, sql: str) -> int:
        """Count `?` placeholders outside literals, identifiers, and comments."""

        return _scan(sql, lambda index: "?", escape_percent=False)[1]

    def returning_clause(self, columns: Sequence[str]) -> str:
        """Return `RETURNING` clause when dialect supports it."""

        if self.supports_returning and columns:
            return " RETURNING " + ", ".join(self.q(c) for c in columns)
        return ""

    def get_lastrowid(self, cursor: Any) -> Optional[int]:
        """Extract `lastrowid` from DB-API cursor when available."""

        if not self.supports_lastrowid:
            return None
        return getattr(cursor, "lastrowid", None)

    def _rewrite(self, sql: str, *, escape_percent: bool) -> Tuple[str, int]:
        needs_escape = escape_percent and self.paramstyle in {"format", "pyformat"}
        if self.paramstyle == "qmark":
            return sql, self.count_placeholders(sql)
        return _scan(sql, self.placeholder, escape_percent=needs_escape)


class SQLiteDialect(Dialect):
    """SQLite dialect (`?` parameters, supports `RETURNING` and `lastrowid`)."""

    name = "sqlite"
    paramstyle = "qmark"
    quote_char = '"'
    supports_returning = True
    supports_lastrowid = True


class PostgresDialect(Dialect):
    """PostgreSQL dialect (`%s` positional parameters, supports `RETURNING`)."""

    name = "postgres"
    paramstyle = "format"
    quote_char = '"'
    supports_returning = True


class MySQLDialect(Dialect):
    """MySQL dialect (`%s` positional parameters, no `RETURNING`, `lastrowid`)."""

    name = "mysql"
    paramstyle = "format"
    quote_char = "`"
    supports_returning = False
    supports_lastrowid = True


def _as_param_list(params: QueryParams, sql: str) -> List[Any]:
    if params is None:
        return []
    if isinstance(params, (str, bytes)) or not isinstance(params, Sequence):
        raise StatementError(
            f"Parameters must be a sequence of positional values, got {type(params).__name__}.",
            sql=sql,
        )
    return list(params)


def _scan(sql: str, placeholder: Any, *, escape_percent: bool) -> Tuple[str, int]:
    out: List[str] = []
    count = 0
    i = 0
    n = len(sql)
    while i < n:
        ch = sql[i]
        if ch in ("'", '"', "`"):
            end = sql.find(ch, i + 1)
            end = n if end == -1 else end + 1
            chunk = sql[i:end]
            out.append(chunk.replace("%", "%%") if escape_percent else chunk)
            i = end
            continue
        if ch == "-" and sql.startswith("--", i):
            end = sql.find("\n", i)
            end = n if end == -1 else end
            out.append(sql[i:end])
            i = end
            continue
        if ch == "/" and sql.startswith("/*", i):
            end = sql.find("*/", i + 2)
            end = n if end == -1 else end + 2
            out.append(sql[i:end])
            i = end
            continue
        if ch == "?":
            out.append(placeholder(count))
            count += 1
        elif ch == "%" and escape_percent:
            out.append("%%")
        else:
            out.append(ch)
        i += 1
    return "".join(out), count
