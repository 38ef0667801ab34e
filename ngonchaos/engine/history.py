"""Fixed-capacity record of the most recently selected vertex indices."""

from __future__ import annotations

from ngonchaos.errors import InvalidParameter


class HistoryBuffer:
    """Ring buffer of the last ``capacity`` selections.

    ``read()`` returns them most-recent first. With capacity 0 nothing is
    ever stored.
    """

    def __init__(self, capacity: int) -> None:
        if capacity < 0:
            raise InvalidParameter(f"History capacity must be >= 0, got {capacity}")
        self._capacity = capacity
        self._slots: list[int] = [0] * capacity
        # Index of the most recent entry; meaningless while _count == 0
        self._head = -1
        self._count = 0

    @property
    def capacity(self) -> int:
        return self._capacity

    def push(self, index: int) -> None:
        if self._capacity == 0:
            return
        self._head = (self._head + 1) % self._capacity
        self._slots[self._head] = index
        if self._count < self._capacity:
            self._count += 1

    def read(self) -> tuple[int, ...]:
        cap = self._capacity
        return tuple(self._slots[(self._head - i) % cap] for i in range(self._count))

    def clear(self) -> None:
        self._head = -1
        self._count = 0

    def __len__(self) -> int:
        return self._count

    def __repr__(self) -> str:
        return f"HistoryBuffer(capacity={self._capacity}, recent={list(self.read())})"
