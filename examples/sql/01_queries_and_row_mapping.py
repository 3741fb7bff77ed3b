"""Query and row-mapping example for sql_template SqlTemplate."""

from __future__ import annotations

import sqlite3
import sys
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Optional

# Allow running this script directly from repository root.
PROJECT_ROOT = next(
    (parent for parent in Path(__file__).resolve().parents if (parent / "sql_template").exists()),
    None,
)
if PROJECT_ROOT and str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from sql_template import Database, DataclassRowMapper, SQLiteDialect, SqlTemplate

SCHEMA = """
CREATE TABLE types (id INTEGER PRIMARY KEY, name VARCHAR(80) NOT NULL UNIQUE);
CREATE TABLE pets (
  id INTEGER PRIMARY KEY,
  name VARCHAR(30),
  birth_date DATE,
  type_id INTEGER NOT NULL REFERENCES types (id)
);
INSERT INTO types VALUES (1, 'cat'), (2, 'dog'), (3, 'lizard');
INSERT INTO pets VALUES (1, 'Leo', '2010-09-07', 1), (2, 'Basil', '2012-08-06', 3), (3, 'Rosy', '2011-04-17', 2);
"""


@dataclass
class Pet:
    id: int
    name: str
    birth_date: Optional[date] = None


def main() -> None:
    # 1) Wrap a DB-API connection and build the template.
    conn = sqlite3.connect(":memory:")
    template = SqlTemplate(Database(conn, SQLiteDialect()))

    try:
        # 2) Load schema and seed rows.
        with template.transaction():
            template.execute_script(SCHEMA)

        # 3) Single values, converted to the requested type.
        print("Type count:", template.query_scalar("SELECT COUNT(*) FROM types", required_type=int))
        print(
            "Leo was born:",
            template.query_scalar("SELECT birth_date FROM pets WHERE id = ?", [1], required_type=date),
        )

        # 4) Rows as case-insensitive column maps.
        leo = template.query_row_as_map("SELECT * FROM pets WHERE id = ?", [1])
        print("Leo as map:", dict(leo), "NAME ->", leo["NAME"])
        print("All types:", template.query_rows_as_maps("SELECT * FROM types ORDER BY id"))
        print("Type names:", template.query_column("SELECT name FROM types ORDER BY name"))

        # 5) Typed objects via a row mapper function or a dataclass mapper.
        names = template.query_many(
            "SELECT id, name FROM pets WHERE id >= ? ORDER BY id",
            lambda row, row_num: f"{row_num}:{row.get_str('name')}",
            [2],
        )
        print("Mapped with a function:", names)
        pet = template.query_one("SELECT * FROM pets WHERE name = ?", DataclassRowMapper(Pet), ["Basil"])
        print("Mapped with DataclassRowMapper:", pet)
    finally:
        conn.close()


if __name__ == "__main__":
    main()
