"""Project CLI entrypoint.

Provides CLI commands for the leaderboard:
- leaderboard repl: Interactive command loop on stdin (default)
- leaderboard run: Execute a command script and optionally write JSON
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from collections.abc import Iterator
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import TextIO

from leaderboard.commands import HELP_LINES, CommandSession, run_session
from leaderboard.config import LOG_LEVELS, LeaderboardConfig, load_config
from leaderboard.env_parse import ConfigError
from leaderboard.core import TrackerError
from leaderboard.tracker import SnapshotOutcome, TopKTracker

logger = logging.getLogger(__name__)

BANNER = "Live Gaming Leaderboard (Min-Heap Top K)"


def _pkg_version() -> str:
    try:
        return version("topk-leaderboard")
    except PackageNotFoundError:
        return "0.0.0"


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level),
        format="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )


def _build_session(config: LeaderboardConfig) -> CommandSession:
    """Create the session and its single tracker instance."""
    tracker = TopKTracker()
    if config.capacity is not None:
        tracker.initialize(config.capacity)
    return CommandSession(tracker)


def _prompted_lines(stream: TextIO, out: TextIO, prompt: bool) -> Iterator[str]:
    while True:
        if prompt:
            out.write("> ")
            out.flush()
        line = stream.readline()
        if not line:
            return
        yield line


def _cmd_repl(config: LeaderboardConfig, stdin: TextIO, stdout: TextIO) -> int:
    """Run the interactive command loop."""
    session = _build_session(config)
    if config.prompt:
        print(BANNER, file=stdout)
        for line in HELP_LINES:
            print(line, file=stdout)
    for out_line in run_session(session, _prompted_lines(stdin, stdout, config.prompt)):
        print(out_line, file=stdout)
    return 0


def _cmd_run(args: argparse.Namespace, config: LeaderboardConfig, stdout: TextIO) -> int:
    """Execute a command script."""
    script = Path(args.script)
    if not script.is_file():
        print(f"Script not found: {script}", file=sys.stderr)
        return 1

    session = _build_session(config)
    with script.open() as f:
        for out_line in run_session(session, f):
            print(out_line, file=stdout)

    if args.out:
        tracker = session.tracker
        # Exporting must not count as a rejected snapshot
        stats = tracker.stats.to_dict()
        if tracker.is_initialized:
            snapshot = tracker.snapshot()
        else:
            snapshot = SnapshotOutcome(error=TrackerError.NOT_INITIALIZED)
        payload = {**snapshot.to_dict(), "stats": stats}
        out_path = Path(args.out)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        with out_path.open("w") as f:
            json.dump(payload, f, indent=2)
        logger.info("Output written to: %s", out_path)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="leaderboard", description="Top-K leaderboard CLI")
    parser.add_argument(
        "--version", action="version", version=f"leaderboard {_pkg_version()}"
    )
    parser.add_argument("--config", help="Path to YAML config file (optional)")
    parser.add_argument(
        "--log-level",
        choices=sorted(LOG_LEVELS),
        help="Logging level (overrides config and LEADERBOARD_LOG_LEVEL)",
    )

    sub = parser.add_subparsers(dest="cmd")

    sub.add_parser("repl", help="Interactive command loop on stdin (default)")

    p_run = sub.add_parser("run", help="Execute a file of commands")
    p_run.add_argument("--script", required=True, help="Path to command script")
    p_run.add_argument("--out", help="Output path for final leaderboard JSON (optional)")

    return parser


def main(
    argv: list[str] | None = None,
    stdin: TextIO | None = None,
    stdout: TextIO | None = None,
) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    stdin = stdin if stdin is not None else sys.stdin
    stdout = stdout if stdout is not None else sys.stdout

    try:
        config = load_config(Path(args.config) if args.config else None)
    except (ConfigError, FileNotFoundError) as e:
        print(f"Config error: {e}", file=sys.stderr)
        return 2

    _configure_logging(args.log_level or config.log_level)

    if args.cmd == "run":
        return _cmd_run(args, config, stdout)
    return _cmd_repl(config, stdin, stdout)
