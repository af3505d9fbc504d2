"""Tests for the line-oriented command interface.

Covers:
- parse_command: blank lines, case-insensitivity, unknown words
- CommandSession output text for every command
- Usage and integer parse errors never reach the tracker
- run_session stops at EXIT
"""

from __future__ import annotations

import pytest

from leaderboard.commands import (
    EMPTY_MSG,
    EXIT_MSG,
    HELP_LINES,
    NOT_INITIALIZED_MSG,
    CommandName,
    CommandSession,
    parse_command,
    run_session,
)
from leaderboard.tracker import LockedTracker


@pytest.fixture
def session() -> CommandSession:
    return CommandSession()


class TestParseCommand:
    """Tokenizing input lines."""

    @pytest.mark.parametrize("line", ["", "   ", "\t\n"])
    def test_blank_is_none(self, line: str) -> None:
        assert parse_command(line) is None

    def test_case_insensitive_word(self) -> None:
        command = parse_command("score Alice 10")
        assert command is not None
        assert command.name is CommandName.SCORE
        assert command.args == ("Alice", "10")

    def test_whitespace_split(self) -> None:
        command = parse_command("  INIT\t  3  \n")
        assert command is not None
        assert command.name is CommandName.INIT
        assert command.args == ("3",)

    def test_unknown_word(self) -> None:
        command = parse_command("frobnicate 1")
        assert command is not None
        assert command.name is None
        assert command.word == "FROBNICATE"

    def test_player_case_preserved(self) -> None:
        command = parse_command("SCORE MixedCase 1")
        assert command is not None
        assert command.args[0] == "MixedCase"


class TestInitCommand:
    def test_init(self, session: CommandSession) -> None:
        assert session.execute("INIT 3").lines == ["Leaderboard initialized with size K = 3"]
        assert session.tracker.capacity == 3

    def test_non_positive(self, session: CommandSession) -> None:
        assert session.execute("INIT 0").lines == ["K must be positive."]
        assert not session.tracker.is_initialized

    def test_not_integer(self, session: CommandSession) -> None:
        assert session.execute("INIT three").lines == ["K must be an integer."]
        assert session.tracker.stats.to_dict()["rejected"] == {}

    @pytest.mark.parametrize("line", ["INIT", "INIT 1 2"])
    def test_usage(self, session: CommandSession, line: str) -> None:
        assert session.execute(line).lines == ["Usage: INIT <k>"]

    @pytest.mark.parametrize("token", ["1_0", "1.5", "0x10"])
    def test_only_plain_decimal(self, session: CommandSession, token: str) -> None:
        assert session.execute(f"INIT {token}").lines == ["K must be an integer."]


class TestScoreCommand:
    def test_not_initialized(self, session: CommandSession) -> None:
        assert session.execute("SCORE A 10").lines == [NOT_INITIALIZED_MSG]

    def test_accepted_with_size(self, session: CommandSession) -> None:
        session.execute("INIT 2")
        assert session.execute("SCORE A 10").lines == ["Accepted: A 10 (Heap size: 1)"]
        assert session.execute("SCORE B -3").lines == ["Accepted: B -3 (Heap size: 2)"]

    def test_accepted_with_eviction(self, session: CommandSession) -> None:
        session.execute("INIT 1")
        session.execute("SCORE A 10")
        assert session.execute("SCORE B 11").lines == ["Accepted: B 11 (evicted A 10)"]

    def test_ignored(self, session: CommandSession) -> None:
        session.execute("INIT 1")
        session.execute("SCORE A 10")
        assert session.execute("SCORE B 10").lines == [
            "Ignored: B 10 (<= current K-th best: 10)"
        ]

    def test_score_not_integer(self, session: CommandSession) -> None:
        session.execute("INIT 1")
        assert session.execute("SCORE A ten").lines == ["Score must be an integer."]
        assert session.tracker.size == 0

    @pytest.mark.parametrize("line", ["SCORE", "SCORE A", "SCORE A 1 2"])
    def test_usage(self, session: CommandSession, line: str) -> None:
        assert session.execute(line).lines == ["Usage: SCORE <player> <score>"]

    def test_explicit_plus_sign(self, session: CommandSession) -> None:
        session.execute("INIT 1")
        assert session.execute("SCORE A +5").lines == ["Accepted: A 5 (Heap size: 1)"]


class TestShowTopCommand:
    def test_not_initialized(self, session: CommandSession) -> None:
        assert session.execute("SHOW_TOP").lines == [NOT_INITIALIZED_MSG]

    def test_empty(self, session: CommandSession) -> None:
        session.execute("INIT 2")
        assert session.execute("show_top").lines == [EMPTY_MSG]

    def test_sorted_listing(self, session: CommandSession) -> None:
        for line in ["INIT 3", "SCORE A 10", "SCORE B 20", "SCORE C 15"]:
            session.execute(line)
        assert session.execute("SHOW_TOP").lines == [
            "Current Top 3 (sorted by score):",
            "  A : 10",
            "  C : 15",
            "  B : 20",
        ]


class TestOtherCommands:
    def test_unknown(self, session: CommandSession) -> None:
        result = session.execute("dance now")
        assert result.lines == ["Unknown command: DANCE"]
        assert not result.exit

    def test_blank(self, session: CommandSession) -> None:
        result = session.execute("   ")
        assert result.lines == []
        assert not result.exit

    def test_exit(self, session: CommandSession) -> None:
        result = session.execute("exit")
        assert result.lines == [EXIT_MSG]
        assert result.exit

    def test_help(self, session: CommandSession) -> None:
        lines = session.execute("HELP").lines
        assert lines == list(HELP_LINES)
        listed = {line.split()[0] for line in lines[1:]}
        assert listed == {name.value for name in CommandName}

    def test_stats(self, session: CommandSession) -> None:
        session.execute("INIT 1")
        session.execute("SCORE A 1")
        lines = session.execute("STATS").lines
        assert 'leaderboard_submissions_total{status="accepted"} 1' in lines


class TestRunSession:
    def test_stops_at_exit(self, session: CommandSession) -> None:
        output = list(run_session(session, ["INIT 1", "EXIT", "SCORE A 1"]))
        assert output == ["Leaderboard initialized with size K = 1", EXIT_MSG]
        assert session.tracker.size == 0

    def test_runs_to_end_of_input(self, session: CommandSession) -> None:
        output = list(run_session(session, ["INIT 1", "", "SCORE A 1"]))
        assert output == [
            "Leaderboard initialized with size K = 1",
            "Accepted: A 1 (Heap size: 1)",
        ]

    def test_locked_tracker_session(self) -> None:
        session = CommandSession(LockedTracker())
        output = list(run_session(session, ["INIT 2", "SCORE A 3", "SHOW_TOP"]))
        assert output[-1] == "  A : 3"
