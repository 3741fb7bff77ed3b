from __future__ import annotations

import unittest
from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional

from sql_template import (
    ColumnMap,
    ColumnMapRowMapper,
    ColumnNotFoundError,
    DataAccessError,
    DataclassRowMapper,
    GeneratedKeyHolder,
    IncorrectColumnCountError,
    IncorrectResultSizeError,
    Row,
    RowCountCallbackHandler,
    SingleColumnRowMapper,
    split_sql_script,
)
from sql_template.core.contracts import as_extractor, as_row_callback, as_row_mapper
from sql_template.core.rows import ColumnIndex


def _row(**values) -> Row:
    return Row(ColumnIndex([(name, None) for name in values]), list(values.values()))


@dataclass
class Pet:
    id: int
    name: str
    birth_date: Optional[date] = None
    tags: List[str] = field(default_factory=list)


class MapperTests(unittest.TestCase):
    def test_column_map_row_mapper(self) -> None:
        mapped = ColumnMapRowMapper().map_row(_row(ID=1, Name="Leo"), 0)

        self.assertIsInstance(mapped, ColumnMap)
        self.assertEqual(mapped["id"], 1)
        self.assertEqual(list(mapped), ["ID", "Name"])

    def test_single_column_row_mapper(self) -> None:
        self.assertEqual(SingleColumnRowMapper(int).map_row(_row(c="6"), 0), 6)
        self.assertEqual(SingleColumnRowMapper().map_row(_row(c="6"), 0), "6")

        with self.assertRaises(IncorrectColumnCountError) as ctx:
            SingleColumnRowMapper().map_row(_row(a=1, b=2), 0)
        self.assertIsInstance(ctx.exception, IncorrectResultSizeError)
        self.assertEqual(ctx.exception.actual, 2)

    def test_dataclass_row_mapper_converts_fields(self) -> None:
        mapper = DataclassRowMapper(Pet)
        pet = mapper.map_row(_row(ID="1", NAME="Leo", BIRTH_DATE="2010-09-07", owner_id=1), 0)

        self.assertEqual(pet, Pet(id=1, name="Leo", birth_date=date(2010, 9, 7)))

    def test_dataclass_row_mapper_uses_defaults_and_overrides(self) -> None:
        mapper = DataclassRowMapper(Pet, columns={"name": "pet_name"})
        pet = mapper.map_row(_row(id=2, pet_name="Basil"), 0)

        self.assertEqual(pet.name, "Basil")
        self.assertIsNone(pet.birth_date)
        self.assertEqual(pet.tags, [])

    def test_dataclass_row_mapper_missing_required_column(self) -> None:
        with self.assertRaises(ColumnNotFoundError):
            DataclassRowMapper(Pet).map_row(_row(id=1), 0)

    def test_dataclass_row_mapper_rejects_plain_classes(self) -> None:
        class NotADataclass:
            pass

        with self.assertRaises(TypeError):
            DataclassRowMapper(NotADataclass)

    def test_row_count_callback_handler(self) -> None:
        handler = RowCountCallbackHandler()
        self.assertEqual(handler.column_count, 0)

        handler.process_row(_row(a=1, b=2))
        handler.process_row(_row(a=3, b=4))

        self.assertEqual(handler.row_count, 2)
        self.assertEqual(handler.column_names, ["a", "b"])
        self.assertEqual(handler.column_count, 2)


class ContractTests(unittest.TestCase):
    def test_functions_and_objects_are_accepted(self) -> None:
        def fn(*args):  # noqa: ANN002,ANN202
            return args

        mapper = ColumnMapRowMapper()
        handler = RowCountCallbackHandler()

        self.assertIs(as_row_mapper(fn), fn)
        self.assertEqual(as_row_mapper(mapper), mapper.map_row)
        self.assertIs(as_extractor(fn), fn)
        self.assertEqual(as_row_callback(handler), handler.process_row)

    def test_other_values_are_rejected(self) -> None:
        with self.assertRaises(TypeError):
            as_row_mapper(42)
        with self.assertRaises(TypeError):
            as_extractor("rows")
        with self.assertRaises(TypeError):
            as_row_callback(None)


class GeneratedKeyHolderTests(unittest.TestCase):
    def test_empty_holder(self) -> None:
        holder = GeneratedKeyHolder()

        self.assertIsNone(holder.keys)
        self.assertIsNone(holder.key)
        self.assertIsNone(holder.key_as("id"))
        self.assertEqual(holder.key_list, [])

    def test_single_key(self) -> None:
        holder = GeneratedKeyHolder()
        holder.add(ColumnMap({"ID": 7}))

        self.assertEqual(holder.key, 7)
        self.assertEqual(holder.key_as("id"), 7)
        self.assertEqual(holder.keys, {"ID": 7})

    def test_multiple_columns_need_key_as(self) -> None:
        holder = GeneratedKeyHolder([ColumnMap({"id": 7, "version": 1})])

        self.assertEqual(holder.key_as("version"), 1)
        with self.assertRaises(DataAccessError):
            _ = holder.key

    def test_multiple_rows_reject_single_row_access(self) -> None:
        holder = GeneratedKeyHolder([ColumnMap({"id": 7}), ColumnMap({"id": 8})])

        with self.assertRaises(IncorrectResultSizeError):
            _ = holder.keys
        with self.assertRaises(IncorrectResultSizeError):
            _ = holder.key
        self.assertEqual([k["id"] for k in holder.key_list], [7, 8])

        holder.clear()
        self.assertIsNone(holder.key)


class SplitSqlScriptTests(unittest.TestCase):
    def test_splits_on_separator_and_drops_blank_statements(self) -> None:
        script = "CREATE TABLE a (x INT);\n\n;INSERT INTO a VALUES (1);\n"

        self.assertEqual(
            split_sql_script(script),
            ["CREATE TABLE a (x INT)", "INSERT INTO a VALUES (1)"],
        )

    def test_separators_in_literals_and_comments_do_not_split(self) -> None:
        script = (
            "-- header; comment\n"
            "INSERT INTO a VALUES ('x;y', \"c;d\");\n"
            "/* block; comment */ DELETE FROM a"
        )

        self.assertEqual(
            split_sql_script(script),
            ["INSERT INTO a VALUES ('x;y', \"c;d\")", "DELETE FROM a"],
        )

    def test_custom_separator(self) -> None:
        self.assertEqual(split_sql_script("SELECT 1\nGO\nSELECT 2", separator="GO"), ["SELECT 1", "SELECT 2"])

    def test_comment_only_script(self) -> None:
        self.assertEqual(split_sql_script("-- nothing here\n/* or here */"), [])


if __name__ == "__main__":
    unittest.main()
