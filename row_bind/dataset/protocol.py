"""Cursor protocol.

The mapping layer only talks to a dataset through this interface. Row
storage, I/O and the meaning of an edit transaction belong to the dataset.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class Cursor(Protocol):
    """A positioned, forward-navigable view over named-column rows."""

    @property
    def column_names(self) -> Sequence[str]:
        """Column names in dataset order."""
        ...

    def column_exists(self, name: str) -> bool:
        """Whether a column with this name exists (case-insensitive)."""
        ...

    def column_type(self, name: str) -> type:
        """Declared Python type of a column's values."""
        ...

    def get_value(self, name: str) -> Any:
        """Read a column of the current row."""
        ...

    def set_value(self, name: str, value: Any) -> None:
        """Write a column of the current row. Only valid while editing."""
        ...

    def move_first(self) -> None:
        """Position on the first row, or at end if there are none."""
        ...

    def move_next(self) -> None:
        """Advance one row; moving past the last row puts the cursor at end."""
        ...

    @property
    def at_end(self) -> bool:
        """True when there is no current row."""
        ...

    @property
    def in_edit(self) -> bool:
        """True while the current row is inside an edit transaction."""
        ...

    def begin_edit(self) -> None:
        """Open an edit transaction on the current row."""
        ...

    def commit_edit(self) -> None:
        """Apply pending changes to the current row."""
        ...

    def cancel_edit(self) -> None:
        """Discard pending changes to the current row."""
        ...
