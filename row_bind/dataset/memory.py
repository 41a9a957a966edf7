"""In-memory dataset.

A list-backed cursor implementing the Cursor protocol. Column lookup is
case-insensitive; the spelling given in the FieldDef is the canonical one.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any

from row_bind.core.exceptions import ColumnNotFoundError, InvalidCursorStateError


@dataclass(frozen=True)
class FieldDef:
    """A dataset column: its name and the Python type of its values."""

    name: str
    type: type = object


class _DatasetState(Enum):
    BROWSE = "browsing"
    EDIT = "editing"


class MemoryDataset:
    """List-backed cursor with a single-row edit buffer.

    Args:
        fields: Column definitions, as FieldDef or (name, type) pairs.
        rows: Optional initial rows, as sequences in column order or mappings
              keyed by column name.
    """

    def __init__(
        self,
        fields: Iterable[FieldDef | tuple[str, type]],
        rows: Iterable[Sequence[Any] | Mapping[str, Any]] | None = None,
    ) -> None:
        self._fields = [f if isinstance(f, FieldDef) else FieldDef(*f) for f in fields]
        self._index: dict[str, int] = {}
        for i, f in enumerate(self._fields):
            key = f.name.lower()
            if key in self._index:
                raise ValueError(f"Duplicate column name: '{f.name}'")
            self._index[key] = i
        self._rows: list[list[Any]] = []
        self._position = 0
        self._state = _DatasetState.BROWSE
        self._buffer: list[Any] | None = None
        for row in rows or ():
            self.append(row)

    # --- Schema ---

    @property
    def fields(self) -> list[FieldDef]:
        return list(self._fields)

    @property
    def column_names(self) -> list[str]:
        return [f.name for f in self._fields]

    def column_exists(self, name: str) -> bool:
        return name.lower() in self._index

    def column_type(self, name: str) -> type:
        return self._fields[self._column_index(name)].type

    # --- Row access ---

    def get_value(self, name: str) -> Any:
        index = self._column_index(name)
        self._check_positioned(f"read column '{name}'")
        if self._buffer is not None:
            return self._buffer[index]
        return self._rows[self._position][index]

    def set_value(self, name: str, value: Any) -> None:
        index = self._column_index(name)
        if self._state != _DatasetState.EDIT or self._buffer is None:
            raise InvalidCursorStateError(self._state.value, f"write column '{name}'")
        self._buffer[index] = value

    def append(self, row: Sequence[Any] | Mapping[str, Any]) -> None:
        """Add a row at the end of the dataset without moving the cursor."""
        if self._state == _DatasetState.EDIT:
            raise InvalidCursorStateError(self._state.value, "append")
        if isinstance(row, Mapping):
            values: list[Any] = [None] * len(self._fields)
            for name, value in row.items():
                values[self._column_index(name)] = value
        else:
            values = list(row)
            if len(values) != len(self._fields):
                raise ValueError(
                    f"Row has {len(values)} values, dataset has {len(self._fields)} columns"
                )
        self._rows.append(values)

    def to_dicts(self) -> list[dict[str, Any]]:
        """Snapshot of all committed rows keyed by column name."""
        names = self.column_names
        return [dict(zip(names, row, strict=True)) for row in self._rows]

    # --- Navigation ---

    def move_first(self) -> None:
        self._check_browsing("move")
        self._position = 0

    def move_next(self) -> None:
        self._check_browsing("move")
        if self._position < len(self._rows):
            self._position += 1

    @property
    def at_end(self) -> bool:
        return self._position >= len(self._rows)

    @property
    def position(self) -> int:
        return self._position

    def __len__(self) -> int:
        return len(self._rows)

    # --- Editing ---

    @property
    def in_edit(self) -> bool:
        return self._state == _DatasetState.EDIT

    def begin_edit(self) -> None:
        self._check_browsing("begin edit")
        self._check_positioned("begin edit")
        self._buffer = list(self._rows[self._position])
        self._state = _DatasetState.EDIT

    def commit_edit(self) -> None:
        if self._state != _DatasetState.EDIT or self._buffer is None:
            raise InvalidCursorStateError(self._state.value, "commit edit")
        self._rows[self._position] = self._buffer
        self._buffer = None
        self._state = _DatasetState.BROWSE

    def cancel_edit(self) -> None:
        if self._state != _DatasetState.EDIT:
            raise InvalidCursorStateError(self._state.value, "cancel edit")
        self._buffer = None
        self._state = _DatasetState.BROWSE

    def _column_index(self, name: str) -> int:
        try:
            return self._index[name.lower()]
        except KeyError:
            raise ColumnNotFoundError(name) from None

    def _check_positioned(self, action: str) -> None:
        if self.at_end:
            raise InvalidCursorStateError("at end", action)

    def _check_browsing(self, action: str) -> None:
        if self._state != _DatasetState.BROWSE:
            raise InvalidCursorStateError(self._state.value, action)
