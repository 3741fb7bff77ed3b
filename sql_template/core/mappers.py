"""Built-in row mappers and row callback handlers."""

from __future__ import annotations

from dataclasses import MISSING, fields, is_dataclass
from typing import Any, Dict, Generic, List, Optional, Type, TypeVar, get_type_hints

from .conversion import convert_value
from .errors import ColumnNotFoundError, IncorrectColumnCountError
from .rows import ColumnMap, Row

T = TypeVar("T")


class ColumnMapRowMapper:
    """Map each row to an independent `ColumnMap`."""

    def map_row(self, row: Row, row_num: int) -> ColumnMap:
        return row.as_map()


class SingleColumnRowMapper(Generic[T]):
    """Map single-column rows to their (optionally converted) value."""

    def __init__(self, required_type: Optional[Type[T]] = None):
        self.required_type = required_type

    def map_row(self, row: Row, row_num: int) -> Optional[T]:
        if len(row) != 1:
            raise IncorrectColumnCountError(1, len(row))
        return row.get_object(0, self.required_type)


class DataclassRowMapper(Generic[T]):
    """Map rows onto a dataclass by matching column labels to field names.

    Matching is case-insensitive and tolerates columns with no matching field.
    Field values are converted to the field's annotated type. Fields without
    a matching column keep their default; a field with neither a column nor
    a default raises `ColumnNotFoundError`.

    Args:
        cls: Target dataclass type.
        columns: Optional field-name -> column-label overrides.
    """

    def __init__(self, cls: Type[T], *, columns: Optional[Dict[str, str]] = None):
        if not is_dataclass(cls):
            raise TypeError(f"{cls.__name__} must be a dataclass.")
        self.cls = cls
        self._overrides = dict(columns or {})
        try:
            hints = get_type_hints(cls)
        except Exception:
            hints = {}
        self._fields = [
            (f.name, hints.get(f.name), f.default is MISSING and f.default_factory is MISSING)
            for f in fields(cls)
            if f.init
        ]

    def map_row(self, row: Row, row_num: int) -> T:
        kwargs: Dict[str, Any] = {}
        for name, annotation, required in self._fields:
            column = self._overrides.get(name, name)
            if column not in row:
                if required:
                    raise ColumnNotFoundError(column, row.column_names)
                continue
            kwargs[name] = convert_value(row[column], annotation, column=column)
        return self.cls(**kwargs)


class RowCountCallbackHandler:
    """Count rows and remember the result set's column labels."""

    def __init__(self) -> None:
        self.row_count = 0
        self.column_names: List[str] = []

    @property
    def column_count(self) -> int:
        return len(self.column_names)

    def process_row(self, row: Row) -> None:
        if self.row_count == 0:
            self.column_names = row.column_names
        self.row_count += 1
