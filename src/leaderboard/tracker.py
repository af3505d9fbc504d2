"""Bounded Top-K score tracker.

Keeps the K highest scores seen so far in a min-heap of at most K
entries. The heap root is the current K-th best score:

- Fewer than K entries: every submission is accepted.
- K entries: a submission is accepted only if its score is strictly
  greater than the root, in which case the root is evicted. A score
  equal to the root is ignored (a tie does not displace).

Tie rules (deterministic):
1. Among several entries sharing the minimum score, the earliest
   inserted is evicted first.
2. Snapshots sort by score ascending, ties in insertion order.

Duplicate player ids are independent entries; there is no per-player
replacement.

Every operation returns an outcome dataclass. "Score too low" is the
IGNORED status, never an exception.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Any

from leaderboard.bounded_heap import BoundedMinHeap
from leaderboard.core import Entry, SubmitStatus, TrackerError, TrackerState
from leaderboard.stats import TrackerStats

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InitOutcome:
    """Result of ``initialize``.

    Attributes:
        capacity: Capacity in effect after the call
        error: Named error, or None on success
    """

    capacity: int
    error: TrackerError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-serializable dict."""
        return {
            "capacity": self.capacity,
            "error": self.error.value if self.error else None,
        }


@dataclass(frozen=True)
class SubmitOutcome:
    """Result of ``submit``.

    Attributes:
        entry: The submitted entry
        status: ACCEPTED or IGNORED (None when ``error`` is set)
        new_size: Entry count after the call
        evicted: Entry removed to make room (ACCEPTED on a full tracker)
        current_min_score: K-th best score that blocked the entry (IGNORED)
        error: Named error, or None
    """

    entry: Entry
    status: SubmitStatus | None = None
    new_size: int = 0
    evicted: Entry | None = None
    current_min_score: int | None = None
    error: TrackerError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def accepted(self) -> bool:
        return self.status is SubmitStatus.ACCEPTED

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-serializable dict."""
        return {
            "entry": self.entry.to_dict(),
            "status": self.status.value if self.status else None,
            "new_size": self.new_size,
            "evicted": self.evicted.to_dict() if self.evicted else None,
            "current_min_score": self.current_min_score,
            "error": self.error.value if self.error else None,
        }


@dataclass(frozen=True)
class SnapshotOutcome:
    """Result of ``snapshot``.

    Attributes:
        entries: Entries sorted by score ascending (ties in insertion order)
        capacity: Tracker capacity at snapshot time
        error: Named error, or None
    """

    entries: tuple[Entry, ...] = field(default_factory=tuple)
    capacity: int = 0
    error: TrackerError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def is_empty(self) -> bool:
        """True for an initialized tracker holding no entries."""
        return self.ok and not self.entries

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-serializable dict."""
        return {
            "entries": [e.to_dict() for e in self.entries],
            "capacity": self.capacity,
            "error": self.error.value if self.error else None,
        }


def _score(entry: Entry) -> int:
    return entry.score


def _require_int(name: str, value: object) -> None:
    # bool is an int subclass but never a valid capacity or score
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be int, got {type(value).__name__}")


class TopKTracker:
    """Bounded Top-K leaderboard.

    Single-threaded and synchronous. Wrap in :class:`LockedTracker` when
    several threads share one instance.

    Usage:
        tracker = TopKTracker()
        tracker.initialize(3)
        tracker.submit("A", 10)
        outcome = tracker.snapshot()
        for entry in outcome.entries:
            print(entry.player_id, entry.score)
    """

    def __init__(self) -> None:
        """Create an uninitialized tracker (capacity 0, no entries)."""
        self._capacity = 0
        self._state = TrackerState.UNINITIALIZED
        self._heap: BoundedMinHeap[Entry] = BoundedMinHeap(key=_score)
        self.stats = TrackerStats()

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def size(self) -> int:
        return len(self._heap)

    @property
    def state(self) -> TrackerState:
        return self._state

    @property
    def is_initialized(self) -> bool:
        return self._state is TrackerState.INITIALIZED

    @property
    def current_min(self) -> Entry | None:
        """Lowest-scoring entry held, or None when empty."""
        return self._heap.peek()

    def initialize(self, capacity: int) -> InitOutcome:
        """Set capacity and discard all entries.

        Calling again on an initialized tracker is a full reset, even with
        the same capacity. A failed call leaves the tracker untouched.

        Args:
            capacity: Maximum number of entries (K), must be > 0

        Returns:
            InitOutcome with INVALID_CAPACITY on ``capacity <= 0``
        """
        _require_int("capacity", capacity)
        if capacity <= 0:
            logger.warning("Rejected initialize: capacity=%d must be positive", capacity)
            self.stats.record_rejected(TrackerError.INVALID_CAPACITY)
            return InitOutcome(capacity=self._capacity, error=TrackerError.INVALID_CAPACITY)

        self._capacity = capacity
        self._heap.clear()
        self._state = TrackerState.INITIALIZED
        self.stats.record_reset()
        logger.info("Leaderboard initialized: capacity=%d", capacity)
        return InitOutcome(capacity=capacity)

    def submit(self, player_id: str, score: int) -> SubmitOutcome:
        """Offer a score to the leaderboard.

        Args:
            player_id: Player identifier
            score: Integer score

        Returns:
            SubmitOutcome: ACCEPTED (with ``evicted`` when full), IGNORED
            (with ``current_min_score``), or NOT_INITIALIZED error
        """
        _require_int("score", score)
        entry = Entry(player_id=player_id, score=score)

        if not self.is_initialized:
            logger.warning("Rejected submit for %s: tracker not initialized", player_id)
            self.stats.record_rejected(TrackerError.NOT_INITIALIZED)
            return SubmitOutcome(entry=entry, error=TrackerError.NOT_INITIALIZED)

        if len(self._heap) < self._capacity:
            self._heap.push(entry)
            self.stats.record_submit(SubmitStatus.ACCEPTED)
            logger.debug("Accepted %s (size=%d)", entry, len(self._heap))
            return SubmitOutcome(
                entry=entry,
                status=SubmitStatus.ACCEPTED,
                new_size=len(self._heap),
            )

        current_min = self._heap.peek()
        assert current_min is not None  # capacity > 0 and heap is full

        # Strict: equal to the K-th best does not enter
        if score > current_min.score:
            evicted = self._heap.replace(entry)
            self.stats.record_submit(SubmitStatus.ACCEPTED, evicted=True)
            logger.debug("Accepted %s, evicted %s", entry, evicted)
            return SubmitOutcome(
                entry=entry,
                status=SubmitStatus.ACCEPTED,
                new_size=len(self._heap),
                evicted=evicted,
            )

        self.stats.record_submit(SubmitStatus.IGNORED)
        logger.debug("Ignored %s (current min=%d)", entry, current_min.score)
        return SubmitOutcome(
            entry=entry,
            status=SubmitStatus.IGNORED,
            new_size=len(self._heap),
            current_min_score=current_min.score,
        )

    def snapshot(self) -> SnapshotOutcome:
        """Return all entries sorted by score ascending.

        Read-only: does not reorder the heap or affect later evictions.
        """
        if not self.is_initialized:
            self.stats.record_rejected(TrackerError.NOT_INITIALIZED)
            return SnapshotOutcome(error=TrackerError.NOT_INITIALIZED)
        return SnapshotOutcome(
            entries=tuple(self._heap.items_sorted()),
            capacity=self._capacity,
        )


class LockedTracker:
    """TopKTracker guarded by a single lock.

    Each operation runs atomically, so a concurrent ``submit`` cannot
    interleave its compare/evict/insert with another ``submit`` or a
    ``snapshot`` on the same tracker.
    """

    def __init__(self, tracker: TopKTracker | None = None) -> None:
        self._tracker = tracker if tracker is not None else TopKTracker()
        self._lock = threading.Lock()

    @property
    def tracker(self) -> TopKTracker:
        """Underlying tracker. Callers must not use it without the lock."""
        return self._tracker

    @property
    def capacity(self) -> int:
        with self._lock:
            return self._tracker.capacity

    @property
    def size(self) -> int:
        with self._lock:
            return self._tracker.size

    @property
    def is_initialized(self) -> bool:
        with self._lock:
            return self._tracker.is_initialized

    @property
    def stats(self) -> TrackerStats:
        """Copy of the counters taken under the lock."""
        with self._lock:
            return self._tracker.stats.copy()

    def initialize(self, capacity: int) -> InitOutcome:
        with self._lock:
            return self._tracker.initialize(capacity)

    def submit(self, player_id: str, score: int) -> SubmitOutcome:
        with self._lock:
            return self._tracker.submit(player_id, score)

    def snapshot(self) -> SnapshotOutcome:
        with self._lock:
            return self._tracker.snapshot()
