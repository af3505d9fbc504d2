"""Line-oriented command interface for a TopKTracker.

Parses text commands, calls the tracker, and formats its outcomes for
display. No leaderboard logic lives here.

Commands (command word is case-insensitive):
    INIT <k>
    SCORE <player> <score>
    SHOW_TOP
    STATS
    HELP
    EXIT
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from enum import Enum

from leaderboard.core import SubmitStatus, TrackerError, parse_decimal
from leaderboard.tracker import (
    InitOutcome,
    LockedTracker,
    SnapshotOutcome,
    SubmitOutcome,
    TopKTracker,
)

logger = logging.getLogger(__name__)

NOT_INITIALIZED_MSG = "Leaderboard not initialized. Use INIT <k> first."
EMPTY_MSG = "Leaderboard is empty."
EXIT_MSG = "Exiting."

HELP_LINES: tuple[str, ...] = (
    "Commands:",
    "  INIT <k>",
    "  SCORE <player> <score>",
    "  SHOW_TOP",
    "  STATS",
    "  HELP",
    "  EXIT",
)


class CommandName(Enum):
    """Recognized command words."""

    INIT = "INIT"
    SCORE = "SCORE"
    SHOW_TOP = "SHOW_TOP"
    STATS = "STATS"
    HELP = "HELP"
    EXIT = "EXIT"


@dataclass(frozen=True)
class Command:
    """A parsed command.

    Attributes:
        name: Command word, or None when unrecognized
        word: Command word as typed, uppercased
        args: Remaining whitespace-separated tokens
    """

    name: CommandName | None
    word: str
    args: tuple[str, ...] = ()


@dataclass
class CommandResult:
    """Output of one command.

    Attributes:
        lines: Text lines to display
        exit: True when the loop should stop
    """

    lines: list[str] = field(default_factory=list)
    exit: bool = False


def parse_command(line: str) -> Command | None:
    """Split a line into a Command. Returns None for blank lines."""
    parts = line.split()
    if not parts:
        return None
    word = parts[0].upper()
    try:
        name: CommandName | None = CommandName(word)
    except ValueError:
        name = None
    return Command(name=name, word=word, args=tuple(parts[1:]))


def format_init(outcome: InitOutcome) -> list[str]:
    if outcome.error is TrackerError.INVALID_CAPACITY:
        return ["K must be positive."]
    return [f"Leaderboard initialized with size K = {outcome.capacity}"]


def format_submit(outcome: SubmitOutcome) -> list[str]:
    if outcome.error is TrackerError.NOT_INITIALIZED:
        return [NOT_INITIALIZED_MSG]
    entry = outcome.entry
    if outcome.status is SubmitStatus.IGNORED:
        return [
            f"Ignored: {entry.player_id} {entry.score} "
            f"(<= current K-th best: {outcome.current_min_score})"
        ]
    if outcome.evicted is not None:
        evicted = outcome.evicted
        return [
            f"Accepted: {entry.player_id} {entry.score} "
            f"(evicted {evicted.player_id} {evicted.score})"
        ]
    return [f"Accepted: {entry.player_id} {entry.score} (Heap size: {outcome.new_size})"]


def format_snapshot(outcome: SnapshotOutcome) -> list[str]:
    if outcome.error is TrackerError.NOT_INITIALIZED:
        return [NOT_INITIALIZED_MSG]
    if outcome.is_empty:
        return [EMPTY_MSG]
    lines = [f"Current Top {outcome.capacity} (sorted by score):"]
    lines.extend(f"  {e.player_id} : {e.score}" for e in outcome.entries)
    return lines


class CommandSession:
    """Dispatches parsed commands to one owned tracker."""

    def __init__(self, tracker: TopKTracker | LockedTracker | None = None) -> None:
        self.tracker = tracker if tracker is not None else TopKTracker()

    def execute(self, line: str) -> CommandResult:
        """Run one input line and return its output."""
        command = parse_command(line)
        if command is None:
            return CommandResult()

        if command.name is None:
            logger.debug("Unknown command word: %s", command.word)
            return CommandResult([f"Unknown command: {command.word}"])

        if command.name is CommandName.EXIT:
            return CommandResult([EXIT_MSG], exit=True)
        if command.name is CommandName.INIT:
            return CommandResult(self._init(command.args))
        if command.name is CommandName.SCORE:
            return CommandResult(self._score(command.args))
        if command.name is CommandName.SHOW_TOP:
            return CommandResult(format_snapshot(self.tracker.snapshot()))
        if command.name is CommandName.STATS:
            return CommandResult(self.tracker.stats.to_prometheus_lines())
        return CommandResult(list(HELP_LINES))

    def _init(self, args: tuple[str, ...]) -> list[str]:
        if len(args) != 1:
            return ["Usage: INIT <k>"]
        k = parse_decimal(args[0])
        if k is None:
            return ["K must be an integer."]
        return format_init(self.tracker.initialize(k))

    def _score(self, args: tuple[str, ...]) -> list[str]:
        if len(args) != 2:
            return ["Usage: SCORE <player> <score>"]
        player, raw_score = args
        score = parse_decimal(raw_score)
        if score is None:
            return ["Score must be an integer."]
        return format_submit(self.tracker.submit(player, score))


def run_session(session: CommandSession, lines: Iterable[str]) -> Iterator[str]:
    """Execute lines in order, yielding output, until EXIT or end of input."""
    for line in lines:
        result = session.execute(line)
        yield from result.lines
        if result.exit:
            return
