"""Type mapping plan data classes.

Frozen dataclasses holding a type's declared mapping: its optional mode
override and per-member column overrides or skip markers. Produced by the
builder DSL and consumed once, when the type's metadata is first built.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from row_bind.core.enums import MappingMode


@dataclass(frozen=True)
class MemberOverride:
    """Explicit mapping for a single member.

    ``column`` and ``skip`` are mutually exclusive. ``member_type`` declares
    the type of a member the class does not annotate (e.g. a backing
    attribute assigned in ``__init__``).
    """

    member: str
    column: str | None = None
    skip: bool = False
    member_type: Any = None


@dataclass(frozen=True)
class TypeMapping:
    """Declared mapping for one target class."""

    target_class: type
    mode: MappingMode | None = None
    overrides: dict[str, MemberOverride] = field(default_factory=dict)

    def override_for(self, member: str) -> MemberOverride | None:
        return self.overrides.get(member)
