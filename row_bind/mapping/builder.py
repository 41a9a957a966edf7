"""Mapping declaration DSL.

Provides a fluent builder and a class decorator for declaring how a type's
members bind to dataset columns.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from row_bind.core.enums import MappingMode
from row_bind.core.exceptions import PlanCompilationError
from row_bind.mapping.plan import MemberOverride, TypeMapping

MAPPING_ATTRIBUTE = "__row_mapping__"


def mapping(target_class: type) -> TypeMappingBuilder:
    """Entry point for the mapping DSL.

    Args:
        target_class: The class whose members are being mapped.

    Returns:
        A builder for chaining mapping declarations.
    """
    return TypeMappingBuilder(target_class)


class TypeMappingBuilder:
    """Fluent builder for a TypeMapping."""

    def __init__(self, target_class: type) -> None:
        self._target_class = target_class
        self._mode: MappingMode | None = None
        self._columns: dict[str, tuple[str, Any]] = {}
        self._skipped: list[str] = []

    def mode(self, mode: MappingMode) -> TypeMappingBuilder:
        """Override the process-wide default mapping mode for this type."""
        self._mode = mode
        return self

    def auto(self) -> TypeMappingBuilder:
        """Bind every member whose name matches a column."""
        return self.mode(MappingMode.AUTO)

    def manual(self) -> TypeMappingBuilder:
        """Bind only members declared with column()."""
        return self.mode(MappingMode.MANUAL)

    def column(
        self,
        member: str,
        column_name: str | None = None,
        *,
        member_type: Any = None,
    ) -> TypeMappingBuilder:
        """Bind a member to an explicit column (defaults to the member name)."""
        self._columns[member] = (column_name or member, member_type)
        return self

    def skip(self, *members: str) -> TypeMappingBuilder:
        """Exclude members from mapping regardless of mode."""
        self._skipped.extend(members)
        return self

    def build(self) -> TypeMapping:
        """Compile and validate the declarations into a TypeMapping."""
        overrides: dict[str, MemberOverride] = {}

        bound_columns: dict[str, str] = {}
        for member, (column_name, member_type) in self._columns.items():
            if member in self._skipped:
                raise PlanCompilationError(
                    f"Member '{member}' of {self._target_class.__name__} "
                    f"is both skipped and bound to column '{column_name}'"
                )
            if not column_name.strip():
                raise PlanCompilationError(f"Empty column name for member '{member}'")
            key = column_name.lower()
            if key in bound_columns:
                raise PlanCompilationError(
                    f"Column '{column_name}' is bound to both "
                    f"'{bound_columns[key]}' and '{member}'"
                )
            bound_columns[key] = member
            overrides[member] = MemberOverride(
                member=member, column=column_name, member_type=member_type
            )

        for member in self._skipped:
            overrides[member] = MemberOverride(member=member, skip=True)

        return TypeMapping(
            target_class=self._target_class,
            mode=self._mode,
            overrides=overrides,
        )


def row_mapping(
    cls: type | None = None,
    *,
    mode: MappingMode | None = None,
    columns: dict[str, str] | None = None,
    skip: Iterable[str] = (),
) -> Any:
    """Class decorator attaching a TypeMapping to the class.

    Args:
        cls: Decorated class
        mode: Optional mapping mode override
        columns: Member name to column name bindings
        skip: Members excluded from mapping

    """

    def decorator(cls: type) -> type:
        builder = mapping(cls)
        if mode is not None:
            builder.mode(mode)
        for member, column_name in (columns or {}).items():
            builder.column(member, column_name)
        builder.skip(*skip)
        setattr(cls, MAPPING_ATTRIBUTE, builder.build())
        return cls

    if cls is not None:
        return decorator(cls)
    return decorator


def declared_mapping(cls: type) -> TypeMapping | None:
    """Return the TypeMapping attached to this exact class, if any."""
    plan = vars(cls).get(MAPPING_ATTRIBUTE)
    if isinstance(plan, TypeMapping):
        return plan
    return None
