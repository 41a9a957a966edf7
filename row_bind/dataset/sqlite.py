"""SQLite result loader using stdlib sqlite3.

Runs a query and materializes the result set into a MemoryDataset so it can
be read, enumerated and edited through the Cursor protocol. Changes made to
the dataset are not written back to the database.
"""

from __future__ import annotations

import sqlite3
from typing import Any

from row_bind.dataset.memory import FieldDef, MemoryDataset


def _infer_column_types(columns: list[str], rows: list[Any]) -> list[type]:
    """Use the type of the first non-NULL value in each column.

    Columns that are NULL in every row are typed as ``object``.
    """
    types: list[type] = []
    for index in range(len(columns)):
        column_type: type = object
        for row in rows:
            if row[index] is not None:
                column_type = type(row[index])
                break
        types.append(column_type)
    return types


def load_query(
    connection: sqlite3.Connection,
    sql: str,
    params: dict[str, Any] | None = None,
) -> MemoryDataset:
    """Execute a query and return its rows as a MemoryDataset."""
    cursor = connection.execute(sql, params or {})
    if cursor.description is None:
        return MemoryDataset([])
    columns = [desc[0] for desc in cursor.description]
    # sqlite3.Row and plain tuples both index by position
    rows = [tuple(row) for row in cursor.fetchall()]
    types = _infer_column_types(columns, rows)
    fields = [FieldDef(name, t) for name, t in zip(columns, types, strict=True)]
    return MemoryDataset(fields, rows)
