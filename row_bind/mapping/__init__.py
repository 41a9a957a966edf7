"""Mapping layer - bind typed objects to cursor rows."""

from __future__ import annotations

from row_bind.mapping.accessor import InstanceRowAccessor, RowAccessor, ValueRowAccessor
from row_bind.mapping.builder import TypeMappingBuilder, mapping, row_mapping
from row_bind.mapping.enumerator import RowEnumerator
from row_bind.mapping.metadata import (
    ColumnBinding,
    MemberDescriptor,
    MemberKind,
    MetadataCache,
    TypeMetadata,
    build_metadata,
)
from row_bind.mapping.modes import MappingModeRegistry
from row_bind.mapping.plan import MemberOverride, TypeMapping
from row_bind.mapping.resolver import resolve_column

__all__ = [
    "RowAccessor",
    "ValueRowAccessor",
    "InstanceRowAccessor",
    "RowEnumerator",
    "mapping",
    "row_mapping",
    "TypeMappingBuilder",
    "TypeMapping",
    "MemberOverride",
    "MappingModeRegistry",
    "MetadataCache",
    "TypeMetadata",
    "MemberDescriptor",
    "MemberKind",
    "ColumnBinding",
    "build_metadata",
    "resolve_column",
]
