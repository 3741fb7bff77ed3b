"""SQL script splitting and execution used to load schema and seed data."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, List, Union

logger = logging.getLogger(__name__)


def split_sql_script(script: str, *, separator: str = ";") -> List[str]:
    """Split a script into statements on `separator`.

    Separators inside quoted literals, quoted identifiers, and comments do not
    split. Comments are dropped and blank statements are skipped.
    """

    statements: List[str] = []
    current: List[str] = []
    i = 0
    n = len(script)
    while i < n:
        ch = script[i]
        if ch in ("'", '"', "`"):
            end = script.find(ch, i + 1)
            end = n if end == -1 else end + 1
            current.append(script[i:end])
            i = end
            continue
        if script.startswith("--", i):
            end = script.find("\n", i)
            i = n if end == -1 else end
            continue
        if script.startswith("/*", i):
            end = script.find("*/", i + 2)
            i = n if end == -1 else end + 2
            current.append(" ")
            continue
        if script.startswith(separator, i):
            _flush(current, statements)
            i += len(separator)
            continue
        current.append(ch)
        i += 1
    _flush(current, statements)
    return statements


def execute_sql_script(db: Any, script: str) -> int:
    """Execute every statement of `script` on `db`; return the statement count."""

    statements = split_sql_script(script)
    for statement in statements:
        cur = db.execute(statement)
        close = getattr(cur, "close", None)
        if callable(close):
            close()
    logger.debug("Executed SQL script with %d statement(s)", len(statements))
    return len(statements)


def read_sql_script(path: Union[str, Path], *, encoding: str = "utf-8") -> str:
    """Read one script file from disk."""

    return Path(path).read_text(encoding=encoding)


def _flush(current: List[str], statements: List[str]) -> None:
    statement = "".join(current).strip()
    current.clear()
    if statement:
        statements.append(statement)
