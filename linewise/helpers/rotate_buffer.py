"""Fixed-capacity rotate buffer.

Holds the most recent N items in preallocated slots; adding to a full
buffer overwrites the oldest item in place. Used for look-behind context
during a single forward pass, so memory stays constant regardless of how
many items flow through.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Generic, TypeVar

T = TypeVar("T")


class RotateBuffer(Generic[T]):
    """Ring of ``capacity`` slots, iterated oldest first."""

    __slots__ = ("_count", "_head", "_slots")

    def __init__(self, capacity: int) -> None:
        if capacity < 1:
            msg = f"capacity must be >= 1, got {capacity}"
            raise ValueError(msg)
        self._slots: list[T | None] = [None] * capacity
        self._head = 0  # next write position
        self._count = 0

    def __len__(self) -> int:
        return self._count

    def add(self, item: T) -> None:
        """Append an item, overwriting the oldest one when full."""
        self._slots[self._head] = item
        self._head = (self._head + 1) % len(self._slots)
        if self._count < len(self._slots):
            self._count += 1

    def __getitem__(self, index: int) -> T:
        """Return the item at ``index`` (0 = oldest, len-1 = newest)."""
        if index < 0 or index >= self._count:
            msg = f"index must be between 0 and {self._count - 1}, got {index}"
            raise IndexError(msg)
        start = (self._head - self._count) % len(self._slots)
        item = self._slots[(start + index) % len(self._slots)]
        return item  # type: ignore[return-value]

    def clear(self) -> None:
        for i in range(len(self._slots)):
            self._slots[i] = None
        self._head = 0
        self._count = 0

    def __iter__(self) -> Iterator[T]:
        for i in range(self._count):
            yield self[i]
