"""Lazy, forward-only row enumeration.

A RowEnumerator walks a cursor from its first row to its end, producing one
typed instance per row through a RowAccessor. States:

    NOT_STARTED --begin--> POSITIONED --next...--> EXHAUSTED
    NOT_STARTED --begin (no rows)--> EXHAUSTED

The cursor is advanced when the next instance is requested, so inside a loop
body the cursor is still positioned on the row just produced and may be
edited. EXHAUSTED is terminal; iterate again by requesting a new enumerator,
which repositions the same shared cursor.

With an InstanceRowAccessor every step yields the same caller-supplied
object, refilled with the new row's values. Callers that keep a row past the
next step must copy it first.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any, Generic, TypeVar

from row_bind.core.enums import EnumeratorState
from row_bind.core.exceptions import InvalidCursorStateError
from row_bind.dataset.protocol import Cursor
from row_bind.mapping.accessor import RowAccessor

T = TypeVar("T")


class RowEnumerator(Generic[T]):
    """Iterator over a cursor's rows as typed instances.

    Use it as a context manager so enumeration is closed on every exit
    path, including an early ``break``.
    """

    def __init__(self, cursor: Cursor, accessor: RowAccessor[T]) -> None:
        self._cursor: Cursor | None = cursor
        self._accessor: RowAccessor[T] | None = accessor
        self._state = EnumeratorState.NOT_STARTED
        self._advance_pending = False
        self._current: T | None = None

    @property
    def state(self) -> EnumeratorState:
        return self._state

    @property
    def current(self) -> T:
        """The instance produced by the latest step."""
        if self._state is not EnumeratorState.POSITIONED:
            raise InvalidCursorStateError(self._state.value, "read current row")
        return self._current  # type: ignore[return-value]

    def begin(self) -> bool:
        """Move the cursor to its first row. Returns False if there are none."""
        if self._state is not EnumeratorState.NOT_STARTED:
            raise InvalidCursorStateError(self._state.value, "begin enumeration")
        cursor, _ = self._source("begin enumeration")
        cursor.move_first()
        if cursor.at_end:
            self._finish()
            return False
        self._state = EnumeratorState.POSITIONED
        return True

    def __iter__(self) -> Iterator[T]:
        return self

    def __next__(self) -> T:
        if self._state is EnumeratorState.NOT_STARTED:
            self.begin()
        elif self._state is EnumeratorState.POSITIONED and self._advance_pending:
            cursor, _ = self._source("advance")
            cursor.move_next()
            # The move is done; a failed read below retries this same row.
            self._advance_pending = False
            if cursor.at_end:
                self._finish()

        if self._state is EnumeratorState.EXHAUSTED:
            raise StopIteration

        cursor, accessor = self._source("read row")
        self._current = accessor.read(cursor)
        self._advance_pending = True
        return self._current

    def close(self) -> None:
        """Stop enumerating and release the cursor and accessor.

        The cursor itself is left where it is.
        """
        self._finish()

    def __enter__(self) -> RowEnumerator[T]:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        self.close()

    def _source(self, action: str) -> tuple[Cursor, RowAccessor[T]]:
        if self._cursor is None or self._accessor is None:
            raise InvalidCursorStateError(self._state.value, action)
        return self._cursor, self._accessor

    def _finish(self) -> None:
        self._state = EnumeratorState.EXHAUSTED
        self._advance_pending = False
        self._current = None
        self._cursor = None
        self._accessor = None
