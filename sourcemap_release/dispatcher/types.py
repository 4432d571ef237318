"""Types for the concurrency-limited dispatcher."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class TaskQueue(Generic[T]):
    """Ordered buffer of pending items drained through an index cursor.

    `claim()` never awaits, so under asyncio a claim is atomic with
    respect to every other worker: no two workers receive the same item.
    """

    def __init__(self, items: Iterable[T]):
        self._items: list[T] = list(items)
        self._cursor = 0

    def claim(self) -> Optional[T]:
        """Return the next pending item, or None once exhausted."""
        if self._cursor >= len(self._items):
            return None
        item = self._items[self._cursor]
        self._cursor += 1
        return item

    @property
    def claimed(self) -> int:
        return self._cursor

    def __len__(self) -> int:
        """Number of items not yet claimed."""
        return len(self._items) - self._cursor


@dataclass
class DispatchResult:
    """Outcome of a successful dispatch.

    peak_in_flight is the highest number of units observed running at
    the same time.
    """

    completed: int = 0
    peak_in_flight: int = 0

    def to_dict(self) -> dict:
        return {
            "completed": self.completed,
            "peak_in_flight": self.peak_in_flight,
        }
