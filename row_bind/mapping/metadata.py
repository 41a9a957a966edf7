"""Per-type mapping metadata.

TypeMetadata is the resolved member -> column mapping of one class, built
the first time the class is used against a cursor and reused for the rest of
the process. Building it enumerates the class's members, resolves the
mapping mode and each member's column, and checks that every bound column's
type can be assigned to its member.
"""

from __future__ import annotations

import dataclasses
import logging
import operator
import threading
import types
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any, ClassVar, Union, get_args, get_origin, get_type_hints

from pydantic import BaseModel

from row_bind.core.config import MappingConfig
from row_bind.core.enums import MappingMode
from row_bind.core.exceptions import (
    EmptyManualMappingError,
    MappingConfigurationError,
    TypeMismatchError,
    UnresolvedColumnError,
)
from row_bind.dataset.protocol import Cursor
from row_bind.mapping.modes import MappingModeRegistry
from row_bind.mapping.plan import TypeMapping
from row_bind.mapping.resolver import resolve_column

logger = logging.getLogger(__name__)

# (source, target) pairs that convert without loss
_WIDENING: tuple[tuple[type, type], ...] = (
    (int, float),
    (int, Decimal),
)

# (source, target) pairs accepted only when every value is integral
_NARROWING: tuple[tuple[type, type], ...] = (
    (float, int),
    (Decimal, int),
)


class MemberKind(Enum):
    FIELD = "field"  # constructor parameter (dataclass, NamedTuple, pydantic)
    PROPERTY = "property"
    ATTRIBUTE = "attribute"


@dataclass(frozen=True)
class MemberDescriptor:
    """A gettable/settable member of a target class."""

    name: str
    declared_type: Any
    kind: MemberKind
    getter: Callable[[Any], Any] = dataclasses.field(repr=False, compare=False)
    setter: Callable[[Any, Any], None] = dataclasses.field(repr=False, compare=False)
    explicit_column: str | None = None
    skipped: bool = False


@dataclass(frozen=True)
class ColumnBinding:
    """A member bound to a dataset column."""

    member: MemberDescriptor
    column: str
    column_type: type


@dataclass(frozen=True)
class TypeMetadata:
    """Resolved mapping of one class."""

    owner_type: type
    mode: MappingMode
    members: tuple[MemberDescriptor, ...]
    bindings: tuple[ColumnBinding, ...]

    @property
    def resolved_columns(self) -> Mapping[str, str]:
        """Member name -> column name for every bound member."""
        return types.MappingProxyType({b.member.name: b.column for b in self.bindings})

    def binding_for(self, member: str) -> ColumnBinding | None:
        for binding in self.bindings:
            if binding.member.name == member:
                return binding
        return None


# --- Type compatibility ---


def runtime_class(annotation: Any) -> type | None:
    """Reduce an annotation to a class usable with isinstance.

    ``X | None`` reduces to ``X``; generic aliases reduce to their origin.
    Returns None when the annotation accepts anything or cannot be checked.
    """
    origin = get_origin(annotation)
    if origin is Union or origin is types.UnionType:
        args = [a for a in get_args(annotation) if a is not type(None)]
        if len(args) != 1:
            return None
        return runtime_class(args[0])
    if origin is not None:
        annotation = origin
    if not isinstance(annotation, type) or annotation is object:
        return None
    return annotation


def is_assignable(
    source: type, target: Any, *, widening: bool = True, narrowing: bool = False
) -> bool:
    """Whether values of ``source`` may be assigned to a ``target`` member.

    ``narrowing`` also accepts float/Decimal -> int; each value is then
    checked for an integral value when it is converted.
    """
    target_class = runtime_class(target)
    if target_class is None or source is object:
        return True
    if issubclass(source, target_class):
        return True
    if not widening:
        return False
    if any(
        issubclass(source, narrow) and issubclass(target_class, wide)
        for narrow, wide in _WIDENING
    ):
        return True
    return narrowing and any(
        issubclass(source, src) and target_class is dst for src, dst in _NARROWING
    )


def is_integral(value: Any) -> bool:
    """Whether a float or Decimal holds a whole number."""
    if isinstance(value, float):
        return value.is_integer()
    if isinstance(value, Decimal):
        return value.is_finite() and value == value.to_integral_value()
    return False


# --- Member discovery ---


def _make_setter(name: str) -> Callable[[Any, Any], None]:
    def setter(instance: Any, value: Any) -> None:
        setattr(instance, name, value)

    return setter


def _field_types(cls: type) -> dict[str, Any]:
    """Declared field names and types of a record class, in declaration order."""
    if issubclass(cls, BaseModel):
        model_fields = cls.model_fields  # type: ignore[attr-defined]
        return {name: info.annotation for name, info in model_fields.items()}

    hints = get_type_hints(cls)
    if dataclasses.is_dataclass(cls):
        return {f.name: hints.get(f.name, object) for f in dataclasses.fields(cls)}
    if issubclass(cls, tuple) and hasattr(cls, "_fields"):
        return {name: hints.get(name, object) for name in cls._fields}
    return {}


def _attribute_types(cls: type) -> dict[str, Any]:
    """Class-level annotations of a plain class, ClassVars excluded."""
    return {
        name: hint
        for name, hint in get_type_hints(cls).items()
        if get_origin(hint) is not ClassVar and hint is not ClassVar
    }


def _properties(cls: type) -> dict[str, property]:
    """Read/write properties, base classes first."""
    found: dict[str, property] = {}
    for klass in reversed(cls.__mro__):
        for name, value in vars(klass).items():
            if isinstance(value, property) and not name.startswith("__"):
                if value.fset is not None:
                    found[name] = value
                else:
                    found.pop(name, None)
    return found


def discover_members(cls: type, plan: TypeMapping) -> list[MemberDescriptor]:
    """List a class's mappable members with their overrides applied."""
    declared: dict[str, tuple[Any, MemberKind]] = {}

    fields = _field_types(cls)
    if fields:
        for name, hint in fields.items():
            declared[name] = (hint, MemberKind.FIELD)
    else:
        for name, hint in _attribute_types(cls).items():
            declared[name] = (hint, MemberKind.ATTRIBUTE)

    for name, prop in _properties(cls).items():
        hint = get_type_hints(prop.fget).get("return", object) if prop.fget else object
        declared[name] = (hint, MemberKind.PROPERTY)

    # Explicitly bound members the class does not declare (backing attributes)
    for name, override in plan.overrides.items():
        if name not in declared and override.column is not None:
            declared[name] = (override.member_type or object, MemberKind.ATTRIBUTE)

    members: list[MemberDescriptor] = []
    for name, (hint, kind) in declared.items():
        override = plan.override_for(name)
        if override is not None and override.member_type is not None:
            hint = override.member_type
        members.append(
            MemberDescriptor(
                name=name,
                declared_type=hint,
                kind=kind,
                getter=operator.attrgetter(name),
                setter=_make_setter(name),
                explicit_column=override.column if override else None,
                skipped=override.skip if override else False,
            )
        )
    return members


# --- Build ---


def build_metadata(
    cls: type,
    cursor: Cursor,
    mode: MappingMode,
    plan: TypeMapping,
    config: MappingConfig,
) -> TypeMetadata:
    """Resolve a class's mapping against the columns of a cursor.

    Raises:
        UnresolvedColumnError: An explicit column does not exist on the cursor.
        TypeMismatchError: A column's type cannot be assigned to its member.
        EmptyManualMappingError: A MANUAL type binds no members.
        MappingConfigurationError: Two members resolve to the same column.
    """
    type_name = cls.__name__
    members = discover_members(cls, plan)
    columns = list(cursor.column_names)

    bindings: list[ColumnBinding] = []
    bound_by: dict[str, str] = {}
    for member in members:
        if (
            member.explicit_column is None
            and member.name.startswith("_")
            and not config.include_private
        ):
            continue

        column = resolve_column(member.name, member.explicit_column, member.skipped, mode, columns)
        if column is None:
            continue
        if not cursor.column_exists(column):
            raise UnresolvedColumnError(type_name, member.name, column)

        column_type = cursor.column_type(column)
        if not is_assignable(
            column_type,
            member.declared_type,
            widening=config.numeric_widening,
            narrowing=member.explicit_column is not None,
        ):
            raise TypeMismatchError(
                type_name, member.name, column, column_type, member.declared_type
            )

        key = column.lower()
        if key in bound_by:
            raise MappingConfigurationError(
                f"Column '{column}' is bound by both {type_name}.{bound_by[key]} "
                f"and {type_name}.{member.name}"
            )
        bound_by[key] = member.name
        bindings.append(ColumnBinding(member=member, column=column, column_type=column_type))

    if mode is MappingMode.MANUAL and not bindings:
        raise EmptyManualMappingError(type_name)

    return TypeMetadata(
        owner_type=cls,
        mode=mode,
        members=tuple(members),
        bindings=tuple(bindings),
    )


class MetadataCache:
    """Process-wide, write-once cache of TypeMetadata keyed by class.

    The first use of a class builds its metadata against the cursor supplied
    at that moment; every later lookup returns the same object. Concurrent
    first uses are serialized so a class is built at most once. A class's
    mapping mode is committed only once its metadata is built, so a failed
    build can be retried after registering a corrected mapping.
    """

    def __init__(self, modes: MappingModeRegistry, config: MappingConfig) -> None:
        self._modes = modes
        self._config = config
        self._entries: dict[type, TypeMetadata] = {}
        self._lock = threading.Lock()
        self.build_count = 0

    def get(self, cls: type, cursor: Cursor) -> TypeMetadata:
        metadata = self._entries.get(cls)
        if metadata is not None:
            return metadata
        with self._lock:
            metadata = self._entries.get(cls)
            if metadata is None:
                mode = self._modes.resolve(cls, commit=False)
                metadata = build_metadata(
                    cls, cursor, mode, self._modes.plan_for(cls), self._config
                )
                self._modes.commit(cls, mode)
                self._entries[cls] = metadata
                self.build_count += 1
                logger.debug(
                    "Built %s mapping for %s: %s",
                    mode.value,
                    cls.__qualname__,
                    dict(metadata.resolved_columns),
                )
        return metadata

    def peek(self, cls: type) -> TypeMetadata | None:
        return self._entries.get(cls)

    def __contains__(self, cls: object) -> bool:
        return cls in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
