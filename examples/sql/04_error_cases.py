"""Error translation examples for sql_template SqlTemplate."""

from __future__ import annotations

import sqlite3
import sys
from pathlib import Path

# Allow running this script directly from repository root.
PROJECT_ROOT = next(
    (parent for parent in Path(__file__).resolve().parents if (parent / "sql_template").exists()),
    None,
)
if PROJECT_ROOT and str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from sql_template import Database, DataAccessError, SQLiteDialect, SqlTemplate


def expect_error(label: str, fn) -> None:  # noqa: ANN001
    try:
        fn()
    except DataAccessError as exc:
        print(f"[OK] {label}: {type(exc).__name__}: {exc}")
    else:
        print(f"[UNEXPECTED] {label}: no exception raised")


def main() -> None:
    conn = sqlite3.connect(":memory:")
    db = Database(conn, SQLiteDialect())
    template = SqlTemplate(db)

    try:
        with template.transaction():
            template.execute_script(
                "CREATE TABLE types (id INTEGER PRIMARY KEY, name VARCHAR(80) NOT NULL UNIQUE);"
                "INSERT INTO types (name) VALUES ('cat'), ('dog');"
            )

        # Result size and type checks.
        expect_error("scalar over no rows", lambda: template.query_scalar("SELECT id FROM types WHERE id = ?", [99]))
        expect_error("single row over many rows", lambda: template.query_row_as_map("SELECT * FROM types"))
        expect_error("scalar over two columns", lambda: template.query_scalar("SELECT id, name FROM types WHERE id = 1"))
        expect_error(
            "text as int",
            lambda: template.query_scalar("SELECT name FROM types WHERE id = 1", required_type=int),
        )

        # Statement problems are reported before or by the driver.
        expect_error("parameter count", lambda: template.query_scalar("SELECT name FROM types WHERE id = ?"))
        expect_error("syntax error", lambda: template.query_scalar("SELEC 1"))
        expect_error("unknown table", lambda: template.query_rows_as_maps("SELECT * FROM missing"))

        # Constraint violations roll back the surrounding transaction.
        def duplicate() -> None:
            with template.transaction():
                template.execute("INSERT INTO types (name) VALUES (?)", ["ferret"])
                template.execute("INSERT INTO types (name) VALUES (?)", ["cat"])

        expect_error("unique violation", duplicate)
        print("Types after rollback:", template.query_column("SELECT name FROM types ORDER BY id"))

        # A closed session is reported as a lost connection.
        db.close()
        expect_error("closed connection", lambda: template.query_scalar("SELECT 1"))
    finally:
        db.close()


if __name__ == "__main__":
    main()
