"""Shared pytest fixtures for unit tests."""

from __future__ import annotations

import pytest

from leaderboard.tracker import TopKTracker


@pytest.fixture
def tracker() -> TopKTracker:
    """Fresh, uninitialized tracker."""
    return TopKTracker()


@pytest.fixture
def filled_tracker() -> TopKTracker:
    """Tracker with K=3 holding A=10, B=20, C=15."""
    t = TopKTracker()
    t.initialize(3)
    t.submit("A", 10)
    t.submit("B", 20)
    t.submit("C", 15)
    return t
