from __future__ import annotations

import importlib
import os
import unittest
from typing import Any

from sql_template import (
    Database,
    IncorrectResultSizeError,
    IntegrityViolationError,
    PostgresDialect,
    SqlTemplate,
    StatementError,
)


def _load_connect() -> Any:
    for module_name in ("psycopg", "psycopg2"):
        try:
            module = importlib.import_module(module_name)
        except (ModuleNotFoundError, ImportError):
            continue
        connect = getattr(module, "connect", None)
        if connect is not None:
            return connect
    return None


POSTGRES_CONNECT = _load_connect()
HAS_POSTGRES_DRIVER = POSTGRES_CONNECT is not None


@unittest.skipUnless(HAS_POSTGRES_DRIVER, "psycopg/psycopg2 is not installed")
class SqlTemplatePostgresTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls) -> None:
        password = os.getenv(
            "SQL_TEMPLATE_PG_PASSWORD",
            os.getenv("PGPASSWORD", os.getenv("POSTGRES_PASSWORD", "password")),
        )
        params = {
            "host": os.getenv("SQL_TEMPLATE_PG_HOST", os.getenv("PGHOST", "localhost")),
            "port": int(os.getenv("SQL_TEMPLATE_PG_PORT", os.getenv("PGPORT", "5432"))),
            "user": os.getenv("SQL_TEMPLATE_PG_USER", os.getenv("PGUSER", "postgres")),
            "password": password,
            "dbname": os.getenv("SQL_TEMPLATE_PG_DATABASE", os.getenv("PGDATABASE", "postgres")),
        }

        try:
            cls.conn = POSTGRES_CONNECT(**params)
        except Exception as exc:
            raise unittest.SkipTest(
                "PostgreSQL is not reachable at localhost:5432 "
                f"with configured credentials: {exc}"
            ) from exc

        cls.db = Database(cls.conn, PostgresDialect())
        cls.template = SqlTemplate(cls.db, fetch_size=2)

    @classmethod
    def tearDownClass(cls) -> None:
        conn = getattr(cls, "conn", None)
        if conn is not None:
            conn.close()

    def setUp(self) -> None:
        with self.template.transaction():
            self.template.execute_script(
                """
                DROP TABLE IF EXISTS sql_template_types;
                CREATE TABLE sql_template_types (
                  id   SERIAL PRIMARY KEY,
                  name VARCHAR(80) NOT NULL UNIQUE
                );
                INSERT INTO sql_template_types (name)
                VALUES ('cat'), ('dog'), ('lizard'), ('snake'), ('bird'), ('hamster');
                """
            )

    def tearDown(self) -> None:
        with self.template.transaction():
            self.template.execute("DROP TABLE IF EXISTS sql_template_types")

    def test_scalar_and_maps_with_format_params(self) -> None:
        with self.template.transaction():
            count = self.template.query_scalar(
                "SELECT COUNT(*) FROM sql_template_types WHERE name LIKE '%a%' OR id = ?",
                [1],
                required_type=int,
            )
            rows = self.template.query_rows_as_maps(
                "SELECT id, name FROM sql_template_types WHERE id <= ? ORDER BY id", [3]
            )

        self.assertEqual(count, 4)
        self.assertEqual([row["NAME"] for row in rows], ["cat", "dog", "lizard"])

    def test_update_and_generated_key(self) -> None:
        with self.template.transaction():
            updated = self.template.execute(
                "UPDATE sql_template_types SET name = ? WHERE id = ?", ["elephant", 6]
            )
            holder = self.template.execute_returning_key(
                "INSERT INTO sql_template_types (name) VALUES (?)", ["ferret"]
            )

        self.assertEqual(updated, 1)
        self.assertEqual(holder.key, 7)
        with self.template.transaction():
            name = self.template.query_scalar(
                "SELECT name FROM sql_template_types WHERE id = ?", [6], required_type=str
            )
        self.assertEqual(name, "elephant")

    def test_errors_are_translated(self) -> None:
        with self.assertRaises(IntegrityViolationError):
            with self.template.transaction():
                self.template.execute("INSERT INTO sql_template_types (name) VALUES (?)", ["cat"])

        with self.assertRaises(StatementError):
            with self.template.transaction():
                self.template.query_scalar("SELEC 1")

        with self.assertRaises(IncorrectResultSizeError):
            with self.template.transaction():
                self.template.query_row_as_map("SELECT * FROM sql_template_types WHERE id > ?", [0])


if __name__ == "__main__":
    unittest.main()
