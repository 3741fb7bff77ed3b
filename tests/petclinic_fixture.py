from __future__ import annotations

import sqlite3
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from sql_template import Database, ResultSet, Row, SQLiteDialect, SqlTemplate, read_sql_script

FIXTURE_DIR = Path(__file__).parent / "fixtures" / "petclinic"
SCHEMA_SCRIPT = FIXTURE_DIR / "schema.sql"
DATA_SCRIPT = FIXTURE_DIR / "data.sql"

TYPE_COUNT = 6
OWNER_COUNT = 10


@dataclass
class Owner:
    id: Optional[int] = None
    first_name: str = ""
    last_name: str = ""
    address: str = ""
    city: str = ""
    telephone: str = ""


@dataclass
class VetSpecs:
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    specialties: List[str] = field(default_factory=list)

    def add_specialty(self, specialty: str) -> None:
        self.specialties.append(specialty)


def owner_row_mapper(row: Row, row_num: int) -> Owner:
    return Owner(
        id=row.get_int("id"),
        first_name=row.get_str("first_name"),
        last_name=row.get_str("last_name"),
        address=row.get_str("address"),
        city=row.get_str("city"),
        telephone=row.get_str("telephone"),
    )


def vet_specs_extractor(rows: ResultSet) -> VetSpecs:
    vet_specs = VetSpecs()
    for row in rows:
        vet_specs.first_name = row.get_str("first_name")
        vet_specs.last_name = row.get_str("last_name")
        vet_specs.add_specialty(row.get_str("name"))
    return vet_specs


def open_petclinic(**template_options) -> tuple[sqlite3.Connection, Database, SqlTemplate]:
    """Create a fresh in-memory petclinic database with schema and seed rows."""

    conn = sqlite3.connect(":memory:")
    conn.execute("PRAGMA foreign_keys = ON")
    db = Database(conn, SQLiteDialect())
    with db.transaction():
        db.executescript(read_sql_script(SCHEMA_SCRIPT))
        db.executescript(read_sql_script(DATA_SCRIPT))
    return conn, db, SqlTemplate(db, **template_options)


class PetclinicFixtureMixin:
    """Reset the petclinic database before every test and discard it after."""

    template_options: dict = {}

    def setUp(self) -> None:
        self.conn, self.db, self.template = open_petclinic(**self.template_options)

    def tearDown(self) -> None:
        self.db.close()
