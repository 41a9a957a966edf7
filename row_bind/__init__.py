"""row_bind - typed row mapping over cursor-based datasets."""

from __future__ import annotations

from row_bind.core.binder import (
    RowBinder,
    configure,
    get_binder,
    iter_rows,
    iter_rows_into,
    read_row,
    read_row_into,
    write_row,
)
from row_bind.core.config import MappingConfig
from row_bind.core.enums import EnumeratorState, MappingMode
from row_bind.core.exceptions import (
    ColumnMismatchError,
    ColumnNotFoundError,
    CursorError,
    EmptyManualMappingError,
    InvalidCursorStateError,
    MappingConfigurationError,
    MappingError,
    PlanCompilationError,
    RowBindError,
    TypeMismatchError,
    UnresolvedColumnError,
)
from row_bind.dataset.memory import FieldDef, MemoryDataset
from row_bind.dataset.protocol import Cursor
from row_bind.mapping.builder import mapping, row_mapping
from row_bind.mapping.enumerator import RowEnumerator
from row_bind.mapping.metadata import TypeMetadata

__all__ = [
    # Binder
    "RowBinder",
    "get_binder",
    "configure",
    "read_row",
    "read_row_into",
    "write_row",
    "iter_rows",
    "iter_rows_into",
    # Config
    "MappingConfig",
    # Mapping
    "mapping",
    "row_mapping",
    "RowEnumerator",
    "TypeMetadata",
    # Datasets
    "Cursor",
    "FieldDef",
    "MemoryDataset",
    # Enums
    "MappingMode",
    "EnumeratorState",
    # Exceptions
    "RowBindError",
    "MappingError",
    "MappingConfigurationError",
    "UnresolvedColumnError",
    "EmptyManualMappingError",
    "PlanCompilationError",
    "TypeMismatchError",
    "ColumnMismatchError",
    "CursorError",
    "InvalidCursorStateError",
    "ColumnNotFoundError",
]
