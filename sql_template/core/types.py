"""Shared core type aliases used across contracts, template, and ports."""

from __future__ import annotations

from typing import Any, Optional, Sequence, Tuple

PositionalParams = Sequence[Any]
QueryParams = Optional[PositionalParams]
BatchParams = Sequence[PositionalParams]

# DB-API `cursor.description` entry: (name, type_code, display_size, ...).
ColumnDescription = Tuple[Any, ...]
