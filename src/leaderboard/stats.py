"""Per-tracker counters with Prometheus text rendering.

Metrics:
- leaderboard_submissions_total{status}
- leaderboard_evictions_total
- leaderboard_rejected_total{reason}
- leaderboard_resets_total

Labels use ``status`` and ``reason`` only. No ``player=`` labels.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from leaderboard.core import SubmitStatus, TrackerError

METRIC_SUBMISSIONS = "leaderboard_submissions_total"
METRIC_EVICTIONS = "leaderboard_evictions_total"
METRIC_REJECTED = "leaderboard_rejected_total"
METRIC_RESETS = "leaderboard_resets_total"


@dataclass
class TrackerStats:
    """Counters for tracker operations.

    Not synchronized; the owning tracker serializes access.
    """

    submissions: dict[SubmitStatus, int] = field(default_factory=dict)
    evictions: int = 0
    rejected: dict[TrackerError, int] = field(default_factory=dict)
    resets: int = 0

    def record_submit(self, status: SubmitStatus, evicted: bool = False) -> None:
        """Record a submission that reached the heap."""
        self.submissions[status] = self.submissions.get(status, 0) + 1
        if evicted:
            self.evictions += 1

    def record_rejected(self, error: TrackerError) -> None:
        """Record an operation that failed with a named error."""
        self.rejected[error] = self.rejected.get(error, 0) + 1

    def record_reset(self) -> None:
        """Record a successful initialize."""
        self.resets += 1

    def copy(self) -> TrackerStats:
        """Return an independent copy of the counters."""
        return TrackerStats(
            submissions=dict(self.submissions),
            evictions=self.evictions,
            rejected=dict(self.rejected),
            resets=self.resets,
        )

    @property
    def accepted(self) -> int:
        return self.submissions.get(SubmitStatus.ACCEPTED, 0)

    @property
    def ignored(self) -> int:
        return self.submissions.get(SubmitStatus.IGNORED, 0)

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-serializable dict."""
        return {
            "accepted": self.accepted,
            "ignored": self.ignored,
            "evicted": self.evictions,
            "rejected": {e.value: n for e, n in sorted(self.rejected.items(), key=_by_value)},
            "resets": self.resets,
        }

    def to_prometheus_lines(self) -> list[str]:
        """Render Prometheus text-format lines."""
        lines: list[str] = []

        lines.append(f"# HELP {METRIC_SUBMISSIONS} Score submissions by outcome")
        lines.append(f"# TYPE {METRIC_SUBMISSIONS} counter")
        for status in SubmitStatus:
            count = self.submissions.get(status, 0)
            lines.append(f'{METRIC_SUBMISSIONS}{{status="{status.value.lower()}"}} {count}')

        lines.append(f"# HELP {METRIC_EVICTIONS} Entries evicted by higher scores")
        lines.append(f"# TYPE {METRIC_EVICTIONS} counter")
        lines.append(f"{METRIC_EVICTIONS} {self.evictions}")

        lines.append(f"# HELP {METRIC_REJECTED} Operations rejected with a named error")
        lines.append(f"# TYPE {METRIC_REJECTED} counter")
        for error in TrackerError:
            count = self.rejected.get(error, 0)
            lines.append(f'{METRIC_REJECTED}{{reason="{error.value.lower()}"}} {count}')

        lines.append(f"# HELP {METRIC_RESETS} Successful initialize calls")
        lines.append(f"# TYPE {METRIC_RESETS} counter")
        lines.append(f"{METRIC_RESETS} {self.resets}")

        return lines


def _by_value(item: tuple[TrackerError, int]) -> str:
    return item[0].value
