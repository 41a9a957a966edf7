"""Row accessors.

Copy values between the cursor's current row and a typed instance using a
class's TypeMetadata. Two variants are selected by the caller's intent:

- ValueRowAccessor builds a new instance for every row read.
- InstanceRowAccessor fills one caller-supplied instance in place.

Neither accessor moves the cursor, and neither opens or closes an edit
transaction.
"""

from __future__ import annotations

import dataclasses
from typing import Any, Generic, Protocol, TypeVar

from pydantic import BaseModel, ValidationError

from row_bind.core.exceptions import (
    ColumnMismatchError,
    InvalidCursorStateError,
    TypeMismatchError,
)
from row_bind.dataset.protocol import Cursor
from row_bind.mapping.metadata import (
    ColumnBinding,
    MemberKind,
    TypeMetadata,
    is_assignable,
    is_integral,
    runtime_class,
)

T = TypeVar("T")


class RowAccessor(Protocol[T]):
    """Reads the current row into a T and writes a T back into it."""

    @property
    def metadata(self) -> TypeMetadata: ...

    def read(self, cursor: Cursor) -> T:
        """Materialize the current row."""
        ...

    def write(self, cursor: Cursor, instance: T) -> None:
        """Write an instance's mapped members into the current row."""
        ...


def _convert(
    value: Any,
    target: Any,
    binding: ColumnBinding,
    owner: type,
    widening: bool,
    narrowing: bool = False,
) -> Any:
    """Convert a value for assignment to ``target``; NULL passes through.

    With ``narrowing`` a float or Decimal holding a whole number converts to
    int; any other value is a mismatch.
    """
    if value is None:
        return None
    target_class = runtime_class(target)
    if target_class is None or isinstance(value, target_class):
        return value
    if widening and is_assignable(type(value), target_class, widening=True):
        return target_class(value)
    if (
        widening
        and narrowing
        and is_assignable(type(value), target_class, widening=True, narrowing=True)
        and is_integral(value)
    ):
        return target_class(value)
    raise TypeMismatchError(
        owner.__name__, binding.member.name, binding.column, type(value), target
    )


def read_values(cursor: Cursor, metadata: TypeMetadata, *, widening: bool = True) -> dict[str, Any]:
    """Read every bound column of the current row, keyed by member name."""
    if cursor.at_end:
        raise InvalidCursorStateError("at end", "read row")
    values: dict[str, Any] = {}
    for binding in metadata.bindings:
        raw = cursor.get_value(binding.column)
        values[binding.member.name] = _convert(
            raw,
            binding.member.declared_type,
            binding,
            metadata.owner_type,
            widening,
            narrowing=binding.member.explicit_column is not None,
        )
    return values


def write_values(
    cursor: Cursor, metadata: TypeMetadata, instance: Any, *, widening: bool = True
) -> None:
    """Write every bound member of ``instance`` into the current row.

    The cursor must already be inside an edit transaction. A member widened
    on read (int column into a float member) is narrowed back to the
    column's type as long as its value is still a whole number.
    """
    if cursor.at_end:
        raise InvalidCursorStateError("at end", "write row")
    if not cursor.in_edit:
        raise InvalidCursorStateError("browsing", "write row")
    for binding in metadata.bindings:
        value = binding.member.getter(instance)
        cursor.set_value(
            binding.column,
            _convert(
                value,
                binding.column_type,
                binding,
                metadata.owner_type,
                widening,
                narrowing=True,
            ),
        )


def _constructor_fields(cls: type) -> set[str]:
    if dataclasses.is_dataclass(cls):
        return {f.name for f in dataclasses.fields(cls) if f.init}
    return set()


class ValueRowAccessor(Generic[T]):
    """Builds a fresh instance per read.

    Constructor-field members (dataclass, NamedTuple, Pydantic) are passed
    as keyword arguments; property and attribute members are assigned after
    construction. Unmapped members keep their defaults.
    """

    def __init__(self, metadata: TypeMetadata, *, numeric_widening: bool = True) -> None:
        self._metadata = metadata
        self._widening = numeric_widening
        self._is_pydantic = issubclass(metadata.owner_type, BaseModel)
        self._init_fields = _constructor_fields(metadata.owner_type)

    @property
    def metadata(self) -> TypeMetadata:
        return self._metadata

    def read(self, cursor: Cursor) -> T:
        values = read_values(cursor, self._metadata, widening=self._widening)
        return self._construct(values)

    def write(self, cursor: Cursor, instance: T) -> None:
        write_values(cursor, self._metadata, instance, widening=self._widening)

    def _construct(self, values: dict[str, Any]) -> T:
        cls = self._metadata.owner_type
        kwargs: dict[str, Any] = {}
        deferred: list[tuple[ColumnBinding, Any]] = []
        for binding in self._metadata.bindings:
            name = binding.member.name
            if binding.member.kind is MemberKind.FIELD and (
                self._is_pydantic or not self._init_fields or name in self._init_fields
            ):
                kwargs[name] = values[name]
            else:
                deferred.append((binding, values[name]))

        if self._is_pydantic:
            try:
                instance = cls.model_validate(kwargs)  # type: ignore[attr-defined]
            except ValidationError as e:
                raise ColumnMismatchError(cls.__name__, [str(e)]) from e
        else:
            try:
                instance = cls(**kwargs)
            except TypeError as e:
                raise ColumnMismatchError(cls.__name__, [str(e)]) from e

        for binding, value in deferred:
            binding.member.setter(instance, value)
        return instance  # type: ignore[no-any-return]


class InstanceRowAccessor(Generic[T]):
    """Fills one caller-supplied instance in place.

    Every read returns the same object, so values from an earlier row are
    overwritten by the next read. Copy the instance to keep a row.
    """

    def __init__(
        self,
        metadata: TypeMetadata,
        instance: T,
        *,
        numeric_widening: bool = True,
    ) -> None:
        if not isinstance(instance, metadata.owner_type):
            raise TypeError(
                f"Expected an instance of {metadata.owner_type.__name__}, "
                f"got {type(instance).__name__}"
            )
        self._metadata = metadata
        self._instance = instance
        self._widening = numeric_widening

    @property
    def metadata(self) -> TypeMetadata:
        return self._metadata

    @property
    def instance(self) -> T:
        return self._instance

    def read(self, cursor: Cursor) -> T:
        values = read_values(cursor, self._metadata, widening=self._widening)
        for binding in self._metadata.bindings:
            binding.member.setter(self._instance, values[binding.member.name])
        return self._instance

    def write(self, cursor: Cursor, instance: T) -> None:
        write_values(cursor, self._metadata, instance, widening=self._widening)
