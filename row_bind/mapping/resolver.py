"""Member name to column name resolution."""

from __future__ import annotations

from collections.abc import Sequence

from row_bind.core.enums import MappingMode


def match_column(name: str, columns: Sequence[str]) -> str | None:
    """Find a column by case-insensitive name, returning the cursor's spelling."""
    wanted = name.lower()
    for column in columns:
        if column.lower() == wanted:
            return column
    return None


def resolve_column(
    member_name: str,
    explicit_column: str | None,
    skipped: bool,
    mode: MappingMode,
    columns: Sequence[str],
) -> str | None:
    """Decide which column a member binds to, or None to leave it unmapped.

    Resolution order:
    1. skip marker -> None, in every mode
    2. explicit column -> that column (cursor spelling when it exists)
    3. AUTO -> the column matching the member name, if any
    4. MANUAL -> None
    """
    if skipped:
        return None
    if explicit_column is not None:
        return match_column(explicit_column, columns) or explicit_column
    if mode is MappingMode.AUTO:
        return match_column(member_name, columns)
    return None
