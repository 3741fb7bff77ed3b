"""Result-set extractor and row-callback example for sql_template SqlTemplate."""

from __future__ import annotations

import sqlite3
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

# Allow running this script directly from repository root.
PROJECT_ROOT = next(
    (parent for parent in Path(__file__).resolve().parents if (parent / "sql_template").exists()),
    None,
)
if PROJECT_ROOT and str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from sql_template import Database, ResultSet, RowCountCallbackHandler, SQLiteDialect, SqlTemplate

SCHEMA = """
CREATE TABLE vets (id INTEGER PRIMARY KEY, first_name VARCHAR(30), last_name VARCHAR(30));
CREATE TABLE specialties (id INTEGER PRIMARY KEY, name VARCHAR(80));
CREATE TABLE vet_specialties (vet_id INTEGER NOT NULL, specialty_id INTEGER NOT NULL);
INSERT INTO vets VALUES (1, 'James', 'Carter'), (2, 'Helen', 'Leary'), (3, 'Linda', 'Douglas');
INSERT INTO specialties VALUES (1, 'radiology'), (2, 'surgery'), (3, 'dentistry');
INSERT INTO vet_specialties VALUES (2, 1), (3, 2), (3, 3);
"""


@dataclass
class VetSpecs:
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    specialties: List[str] = field(default_factory=list)


def vet_specs_extractor(rows: ResultSet) -> VetSpecs:
    # The extractor owns iteration: many joined rows fold into one object.
    specs = VetSpecs()
    for row in rows:
        specs.first_name = row.get_str("first_name")
        specs.last_name = row.get_str("last_name")
        specs.specialties.append(row.get_str("name"))
    return specs


def main() -> None:
    conn = sqlite3.connect(":memory:")
    template = SqlTemplate(Database(conn, SQLiteDialect()), fetch_size=2)

    try:
        with template.transaction():
            template.execute_script(SCHEMA)

        specs = template.query_with_extractor(
            "SELECT v.first_name, v.last_name, s.name "
            "FROM vets v JOIN vet_specialties vs ON v.id = vs.vet_id "
            "JOIN specialties s ON s.id = vs.specialty_id WHERE v.id = ?",
            vet_specs_extractor,
            [3],
        )
        print("Vet 3:", specs)

        handler = RowCountCallbackHandler()
        template.query_with_callback("SELECT * FROM vets", handler)
        print("Vets:", handler.row_count, "rows,", handler.column_count, "columns", handler.column_names)

        # Returning False from a callback stops the iteration.
        first_two: List[str] = []

        def collect(row) -> bool:  # noqa: ANN001
            first_two.append(row["last_name"])
            return len(first_two) < 2

        template.query_with_callback("SELECT last_name FROM vets ORDER BY id", collect)
        print("First two vets:", first_two)
    finally:
        conn.close()


if __name__ == "__main__":
    main()
