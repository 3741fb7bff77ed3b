"""Holder for database-generated keys returned by write statements."""

from __future__ import annotations

from typing import Any, List, Optional

from .errors import DataAccessError, IncorrectResultSizeError
from .rows import ColumnMap


class GeneratedKeyHolder:
    """Collects one key mapping per inserted row.

    `key` is the usual accessor for single-row, single-column keys such as an
    auto-increment `id`.
    """

    def __init__(self, key_list: Optional[List[ColumnMap]] = None):
        self._key_list: List[ColumnMap] = list(key_list or [])

    @property
    def key_list(self) -> List[ColumnMap]:
        return self._key_list

    def add(self, keys: ColumnMap) -> None:
        self._key_list.append(keys)

    def clear(self) -> None:
        self._key_list.clear()

    @property
    def keys(self) -> Optional[ColumnMap]:
        """Key columns of the single generated row, or `None` if there is none."""

        if not self._key_list:
            return None
        if len(self._key_list) > 1:
            raise IncorrectResultSizeError(
                1,
                len(self._key_list),
                message=(
                    "The keys getter should only be used when keys for a single row "
                    f"are returned; the current key list contains {len(self._key_list)} rows."
                ),
            )
        return self._key_list[0]

    @property
    def key(self) -> Any:
        """The single generated value, or `None` if no key was generated."""

        keys = self.keys
        if keys is None:
            return None
        if len(keys) != 1:
            raise DataAccessError(
                "The key getter should only be used when a single key is returned; "
                f"the current key entry contains multiple keys: {dict(keys.items())!r}."
            )
        return next(iter(keys.values()))

    def key_as(self, column: str) -> Any:
        """Return one named key column of the single generated row."""

        keys = self.keys
        if keys is None:
            return None
        return keys[column]

    def __repr__(self) -> str:
        return f"GeneratedKeyHolder({self._key_list!r})"
