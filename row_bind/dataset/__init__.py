"""Dataset layer - the Cursor protocol and bundled cursor implementations."""

from __future__ import annotations

from row_bind.dataset.memory import FieldDef, MemoryDataset
from row_bind.dataset.protocol import Cursor
from row_bind.dataset.sqlite import load_query

__all__ = [
    "Cursor",
    "FieldDef",
    "MemoryDataset",
    "load_query",
]
