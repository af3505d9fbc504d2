"""Binary min-heap keyed by a plain key function.

Ordering among items with equal keys is by insertion: the item pushed
first compares smaller. Eviction of the minimum therefore removes the
oldest of several equal minima, and ``items_sorted`` keeps insertion
order among ties.
"""

from __future__ import annotations

import heapq
from collections.abc import Callable
from itertools import count
from typing import Generic, TypeVar

T = TypeVar("T")


class BoundedMinHeap(Generic[T]):
    """Min-heap with O(1) peek and O(log n) push/pop/replace.

    The heap itself does not enforce a size limit; the owner decides when
    to ``push`` and when to ``replace``. Internal order is never exposed.
    """

    def __init__(self, key: Callable[[T], int]) -> None:
        self._key = key
        self._seq = count()
        # (key, seq, item); seq breaks key ties and keeps items uncompared
        self._heap: list[tuple[int, int, T]] = []

    def __len__(self) -> int:
        return len(self._heap)

    def _wrap(self, item: T) -> tuple[int, int, T]:
        return (self._key(item), next(self._seq), item)

    def push(self, item: T) -> None:
        """Insert an item."""
        heapq.heappush(self._heap, self._wrap(item))

    def peek(self) -> T | None:
        """Return the minimum item without removing it, or None if empty."""
        if not self._heap:
            return None
        return self._heap[0][2]

    def pop(self) -> T:
        """Remove and return the minimum item.

        Raises:
            IndexError: If the heap is empty.
        """
        if not self._heap:
            raise IndexError("pop from empty heap")
        return heapq.heappop(self._heap)[2]

    def replace(self, item: T) -> T:
        """Pop the minimum and push ``item`` in a single sift.

        Raises:
            IndexError: If the heap is empty.
        """
        if not self._heap:
            raise IndexError("replace on empty heap")
        return heapq.heapreplace(self._heap, self._wrap(item))[2]

    def clear(self) -> None:
        """Remove all items."""
        self._heap.clear()

    def items_sorted(self) -> list[T]:
        """Return a copy of all items sorted ascending by (key, insertion)."""
        return [item for _, _, item in sorted(self._heap)]
