"""Tests for LockedTracker under concurrent submits."""

from __future__ import annotations

import threading

from leaderboard import LockedTracker, SubmitStatus, TopKTracker, TrackerError


class TestLockedTracker:
    """Same contract as TopKTracker, serialized by one lock."""

    def test_delegates_operations(self) -> None:
        locked = LockedTracker()
        assert locked.submit("A", 1).error is TrackerError.NOT_INITIALIZED
        assert locked.initialize(2).ok
        assert locked.is_initialized
        assert locked.capacity == 2
        assert locked.submit("A", 1).status is SubmitStatus.ACCEPTED
        assert locked.size == 1
        assert [e.player_id for e in locked.snapshot().entries] == ["A"]

    def test_wraps_existing_tracker(self) -> None:
        inner = TopKTracker()
        inner.initialize(1)
        locked = LockedTracker(inner)
        locked.submit("A", 3)
        assert locked.tracker is inner
        assert inner.size == 1
        assert locked.stats is not inner.stats
        assert locked.stats.to_dict() == inner.stats.to_dict()

    def test_stats_is_detached_copy(self) -> None:
        locked = LockedTracker()
        locked.initialize(1)
        before = locked.stats
        locked.submit("A", 1)
        assert before.accepted == 0
        assert locked.stats.accepted == 1

    def test_concurrent_submits_respect_capacity(self) -> None:
        locked = LockedTracker()
        locked.initialize(10)
        errors: list[str] = []

        def worker(offset: int) -> None:
            for i in range(500):
                locked.submit(f"t{offset}-{i}", (i * 7 + offset) % 1000)
                if locked.size > 10:
                    errors.append(f"size {locked.size}")

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert errors == []
        snapshot = locked.snapshot()
        assert len(snapshot.entries) == 10
        scores = [e.score for e in snapshot.entries]
        assert scores == sorted(scores)
        assert locked.stats.accepted + locked.stats.ignored == 8 * 500

    def test_stats_readable_during_submits(self) -> None:
        locked = LockedTracker()
        locked.initialize(5)
        stop = threading.Event()
        failures: list[BaseException] = []

        def reader() -> None:
            while not stop.is_set():
                try:
                    locked.stats.to_dict()
                except RuntimeError as e:
                    failures.append(e)
                    return

        t = threading.Thread(target=reader)
        t.start()
        for i in range(2000):
            locked.submit(f"p{i}", i % 50)
            if i % 3 == 0:
                locked.initialize(5 if i % 2 else 0)
        stop.set()
        t.join()

        assert failures == []
        assert locked.stats.to_dict()["rejected"]["INVALID_CAPACITY"] > 0
