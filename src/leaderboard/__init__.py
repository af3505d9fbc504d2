"""Top-K leaderboard.

Tracks the K highest scores from a stream of (player, score) submissions
in a bounded min-heap and reports them sorted on demand.

Note: version is sourced from package metadata (pyproject.toml).
"""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

from leaderboard.core import Entry, SubmitStatus, TrackerError, TrackerState
from leaderboard.tracker import (
    InitOutcome,
    LockedTracker,
    SnapshotOutcome,
    SubmitOutcome,
    TopKTracker,
)


def _pkg_version() -> str:
    try:
        return version("topk-leaderboard")
    except PackageNotFoundError:
        return "0.0.0"


__version__ = _pkg_version()

__all__ = [
    "Entry",
    "InitOutcome",
    "LockedTracker",
    "SnapshotOutcome",
    "SubmitOutcome",
    "SubmitStatus",
    "TopKTracker",
    "TrackerError",
    "TrackerState",
    "__version__",
]
