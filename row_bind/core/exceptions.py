"""row_bind exception hierarchy.

Every failure is raised synchronously at the point where it is detected and
propagates to the immediate caller. Nothing is retried or partially recovered.
"""

from __future__ import annotations


class RowBindError(Exception):
    """Base exception for all row_bind errors."""


# --- Mapping ---


class MappingError(RowBindError):
    """Base for mapping errors."""


class MappingConfigurationError(MappingError):
    """Base for errors caused by a type's mapping declaration."""


class UnresolvedColumnError(MappingConfigurationError):
    """Raised when an explicitly bound column does not exist on the cursor."""

    def __init__(self, type_name: str, member: str, column: str) -> None:
        self.type_name = type_name
        self.member = member
        self.column = column
        super().__init__(
            f"Cannot bind {type_name}.{member}: column '{column}' does not exist"
        )


class EmptyManualMappingError(MappingConfigurationError):
    """Raised when a Manual-mode type ends up with no mapped members."""

    def __init__(self, type_name: str) -> None:
        self.type_name = type_name
        super().__init__(f"{type_name} uses manual mapping but binds no members")


class PlanCompilationError(MappingConfigurationError):
    """Raised when a TypeMapping fails validation during build()."""


class TypeMismatchError(MappingError):
    """Raised when a value cannot be converted between column and member types."""

    def __init__(
        self,
        type_name: str,
        member: str,
        column: str,
        source_type: type,
        target_type: object,
    ) -> None:
        self.type_name = type_name
        self.member = member
        self.column = column
        self.source_type = source_type
        self.target_type = target_type
        target = getattr(target_type, "__name__", repr(target_type))
        super().__init__(
            f"Cannot convert {source_type.__name__} to {target} "
            f"for {type_name}.{member} (column '{column}')"
        )


class ColumnMismatchError(MappingError):
    """Raised when a value type cannot be constructed from the mapped columns."""

    def __init__(self, target_class: str, details: list[str]) -> None:
        self.target_class = target_class
        self.details = details
        super().__init__(f"Cannot construct {target_class}: {details}")


# --- Cursor ---


class CursorError(RowBindError):
    """Base for cursor errors."""


class InvalidCursorStateError(CursorError):
    """Raised when a row operation is attempted in the wrong cursor state."""

    def __init__(self, current_state: str, attempted_action: str) -> None:
        self.current_state = current_state
        self.attempted_action = attempted_action
        super().__init__(f"Cannot {attempted_action} while cursor is {current_state}")


class ColumnNotFoundError(CursorError):
    """Raised when a dataset is asked for a column it does not have."""

    def __init__(self, column: str) -> None:
        self.column = column
        super().__init__(f"Column not found: '{column}'")
