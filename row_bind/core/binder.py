"""Row binder.

The RowBinder resolves a class's cached TypeMetadata against a cursor and
hands the work to a row accessor or a row enumerator. Module-level helpers
delegate to a process-wide default binder.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any, TypeVar

from row_bind.core.config import MappingConfig
from row_bind.core.exceptions import MappingConfigurationError
from row_bind.dataset.protocol import Cursor
from row_bind.mapping.accessor import InstanceRowAccessor, ValueRowAccessor
from row_bind.mapping.enumerator import RowEnumerator
from row_bind.mapping.metadata import MetadataCache, TypeMetadata
from row_bind.mapping.modes import MappingModeRegistry
from row_bind.mapping.plan import TypeMapping

T = TypeVar("T")

logger = logging.getLogger(__name__)


class RowBinder:
    """Typed read/write/enumerate operations over cursors.

    Args:
        config: Mapping configuration. Its default mode is injected into the
                binder's MappingModeRegistry.
    """

    def __init__(self, config: MappingConfig | None = None) -> None:
        self.config = config or MappingConfig()
        self._modes = MappingModeRegistry(self.config.default_mode)
        self._cache = MetadataCache(self._modes, self.config)

    @property
    def modes(self) -> MappingModeRegistry:
        return self._modes

    @property
    def cache(self) -> MetadataCache:
        return self._cache

    def register(self, plan: TypeMapping) -> None:
        """Register a TypeMapping before the type is first used.

        Raises:
            MappingConfigurationError: If the type's metadata is already built.
        """
        if plan.target_class in self._cache:
            raise MappingConfigurationError(
                f"Mapping for {plan.target_class.__name__} is already resolved"
            )
        self._modes.register(plan)

    def metadata(self, cls: type, cursor: Cursor) -> TypeMetadata:
        """Return the cached metadata for a class, building it on first use."""
        return self._cache.get(cls, cursor)

    def read(self, cursor: Cursor, cls: type[T]) -> T:
        """Build a new instance of ``cls`` from the cursor's current row."""
        return self.value_accessor(cursor, cls).read(cursor)

    def read_into(self, cursor: Cursor, instance: T) -> T:
        """Fill ``instance`` in place from the cursor's current row."""
        return self.instance_accessor(cursor, instance).read(cursor)

    def write(self, cursor: Cursor, instance: Any) -> None:
        """Write an instance's mapped members into the current row.

        The cursor must already be in an edit transaction (see edit()).
        """
        metadata = self.metadata(type(instance), cursor)
        ValueRowAccessor(metadata, numeric_widening=self.config.numeric_widening).write(
            cursor, instance
        )

    def rows(self, cursor: Cursor, cls: type[T]) -> RowEnumerator[T]:
        """Enumerate the cursor from its first row as new ``cls`` instances."""
        return RowEnumerator(cursor, self.value_accessor(cursor, cls))

    def rows_into(self, cursor: Cursor, instance: T) -> RowEnumerator[T]:
        """Enumerate the cursor from its first row, refilling ``instance``."""
        return RowEnumerator(cursor, self.instance_accessor(cursor, instance))

    def value_accessor(self, cursor: Cursor, cls: type[T]) -> ValueRowAccessor[T]:
        return ValueRowAccessor(
            self.metadata(cls, cursor), numeric_widening=self.config.numeric_widening
        )

    def instance_accessor(self, cursor: Cursor, instance: T) -> InstanceRowAccessor[T]:
        return InstanceRowAccessor(
            self.metadata(type(instance), cursor),
            instance,
            numeric_widening=self.config.numeric_widening,
        )

    @contextmanager
    def edit(self, cursor: Cursor) -> Iterator[Cursor]:
        """Open an edit transaction on the current row.

        Commits on success, cancels on exception.
        """
        cursor.begin_edit()
        try:
            yield cursor
        except BaseException:
            cursor.cancel_edit()
            raise
        cursor.commit_edit()

    def clear(self) -> None:
        """Drop cached metadata and resolved modes."""
        self._cache.clear()
        self._modes.clear()


_default_binder = RowBinder()


def get_binder() -> RowBinder:
    """Return the process-wide default binder."""
    return _default_binder


def configure(config: MappingConfig) -> RowBinder:
    """Replace the default binder with one using ``config``.

    Types already resolved by the previous binder are resolved again, once,
    by the new one.
    """
    global _default_binder
    _default_binder = RowBinder(config)
    logger.debug("Default binder configured: %s", config)
    return _default_binder


def read_row(cursor: Cursor, cls: type[T]) -> T:
    return _default_binder.read(cursor, cls)


def read_row_into(cursor: Cursor, instance: T) -> T:
    return _default_binder.read_into(cursor, instance)


def write_row(cursor: Cursor, instance: Any) -> None:
    _default_binder.write(cursor, instance)


def iter_rows(cursor: Cursor, cls: type[T]) -> RowEnumerator[T]:
    return _default_binder.rows(cursor, cls)


def iter_rows_into(cursor: Cursor, instance: T) -> RowEnumerator[T]:
    return _default_binder.rows_into(cursor, instance)
