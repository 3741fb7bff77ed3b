"""Update, batch, and generated-key example for sql_template SqlTemplate."""

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

from sql_template import Database, GeneratedKeyHolder, SQLiteDialect, SqlTemplate


def main() -> None:
    conn = sqlite3.connect(":memory:")
    template = SqlTemplate(Database(conn, SQLiteDialect()))

    try:
        with template.transaction():
            template.execute("CREATE TABLE types (id INTEGER PRIMARY KEY, name VARCHAR(80) NOT NULL UNIQUE)")

        # 1) Batch insert: one affected-row count per parameter set.
        with template.transaction():
            counts = template.batch_execute(
                "INSERT INTO types (name) VALUES (?)",
                [["cat"], ["dog"], ["lizard"], ["snake"], ["bird"], ["hamster"]],
            )
        print("Batch insert counts:", counts)

        # 2) Update returns the affected row count.
        with template.transaction():
            updated = template.execute("UPDATE types SET name = ? WHERE id = ?", ["elephant", 6])
        print("Updated rows:", updated)
        print("Row 6 now:", template.query_scalar("SELECT name FROM types WHERE id = ?", [6]))

        # 3) Insert and read back the generated key (RETURNING on sqlite >= 3.35).
        holder = GeneratedKeyHolder()
        with template.transaction():
            template.execute_returning_key(
                "INSERT INTO types (name) VALUES (?)", ["ferret"], key_holder=holder
            )
        print("Generated key:", holder.key)
        print("Inserted row:", dict(template.query_row_as_map("SELECT * FROM types WHERE id = ?", [holder.key])))

        # 4) Several key columns come back together.
        with template.transaction():
            both = template.execute_returning_key(
                "INSERT INTO types (name) VALUES (?)", ["parrot"], key_columns=("id", "name")
            )
        print("Generated keys:", dict(both.keys))
    finally:
        conn.close()


if __name__ == "__main__":
    main()
