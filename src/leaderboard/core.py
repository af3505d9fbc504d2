"""Core types and enums for the leaderboard."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any

# Plain decimal integers only; int() alone would also accept "1_000"
DECIMAL_RE = re.compile(r"[+-]?[0-9]+")


def parse_decimal(token: str) -> int | None:
    """Parse a plain decimal integer, or return None."""
    if not DECIMAL_RE.fullmatch(token):
        return None
    return int(token)


class TrackerState(Enum):
    """Tracker lifecycle states."""

    UNINITIALIZED = "UNINITIALIZED"  # No capacity yet
    INITIALIZED = "INITIALIZED"  # Accepting submissions


class TrackerError(Enum):
    """Named errors returned by tracker operations.

    These values are stable and used in logs, stats and JSON output.
    """

    INVALID_CAPACITY = "INVALID_CAPACITY"
    NOT_INITIALIZED = "NOT_INITIALIZED"


class SubmitStatus(Enum):
    """Outcome of a score submission."""

    ACCEPTED = "ACCEPTED"  # Entered the Top-K
    IGNORED = "IGNORED"  # Not above the current K-th best


@dataclass(frozen=True)
class Entry:
    """One (player, score) entry in the leaderboard.

    Attributes:
        player_id: Player identifier (not unique across entries)
        score: Integer score
    """

    player_id: str
    score: int

    def __str__(self) -> str:
        return f"({self.player_id}, {self.score})"

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-serializable dict."""
        return {"player_id": self.player_id, "score": self.score}
