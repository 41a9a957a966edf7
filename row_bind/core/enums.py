"""Mapping enumerations."""

from __future__ import annotations

from enum import Enum


class MappingMode(Enum):
    """How a type's members are bound to columns.

    AUTO binds every member whose name matches a column; MANUAL binds only
    members with an explicit column.
    """

    AUTO = "auto"
    MANUAL = "manual"


class EnumeratorState(Enum):
    """Lifecycle of a RowEnumerator."""

    NOT_STARTED = "not_started"
    POSITIONED = "positioned"
    EXHAUSTED = "exhausted"
