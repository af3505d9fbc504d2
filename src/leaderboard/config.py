"""Leaderboard runtime configuration.

Precedence (highest first):
1. Environment: ``LEADERBOARD_CAPACITY``, ``LEADERBOARD_LOG_LEVEL``,
   ``LEADERBOARD_PROMPT``
2. YAML config file (``--config``)
3. Defaults

YAML example::

    capacity: 10
    log_level: INFO
    prompt: true
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

import yaml

from leaderboard.env_parse import ConfigError, parse_bool, parse_enum, parse_int

logger = logging.getLogger(__name__)

ENV_CAPACITY = "LEADERBOARD_CAPACITY"
ENV_LOG_LEVEL = "LEADERBOARD_LOG_LEVEL"
ENV_PROMPT = "LEADERBOARD_PROMPT"

LOG_LEVELS: frozenset[str] = frozenset({"DEBUG", "INFO", "WARNING", "ERROR"})
_KNOWN_KEYS: frozenset[str] = frozenset({"capacity", "log_level", "prompt"})


@dataclass(frozen=True)
class LeaderboardConfig:
    """Settings for the command-line front end.

    Attributes:
        capacity: Initialize the tracker with this K before the first command
            (None = wait for an INIT command)
        log_level: Root logging level name
        prompt: Print the banner and ``> `` prompt in the REPL
    """

    capacity: int | None = None
    log_level: str = "WARNING"
    prompt: bool = True

    def __post_init__(self) -> None:
        if self.capacity is not None and (
            isinstance(self.capacity, bool) or not isinstance(self.capacity, int)
        ):
            raise ConfigError(f"capacity must be an integer, got {self.capacity!r}")
        if self.capacity is not None and self.capacity < 1:
            raise ConfigError(f"capacity={self.capacity} is below minimum 1")
        if not isinstance(self.log_level, str) or self.log_level not in LOG_LEVELS:
            raise ConfigError(
                f"invalid log_level: {self.log_level!r} (allowed: {sorted(LOG_LEVELS)})"
            )
        if not isinstance(self.prompt, bool):
            raise ConfigError(f"prompt must be a boolean, got {self.prompt!r}")


def load_yaml(path: Path) -> dict[str, Any]:
    """Load a YAML mapping from ``path``.

    Raises:
        FileNotFoundError: If path does not exist.
        ConfigError: If the YAML is invalid, not a mapping, or has unknown keys.
    """
    if path.is_dir():
        raise ConfigError(f"config path is a directory: {path}")
    with path.open() as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"invalid YAML in {path}: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"expected YAML mapping in {path}, got {type(data).__name__}")
    unknown = set(data) - _KNOWN_KEYS
    if unknown:
        raise ConfigError(f"unknown config keys in {path}: {sorted(unknown)}")
    return data


def load_config(path: Path | None = None) -> LeaderboardConfig:
    """Build config from defaults, an optional YAML file, then environment."""
    config = LeaderboardConfig()
    if path is not None:
        data = load_yaml(path)
        if isinstance(data.get("log_level"), str):
            data["log_level"] = data["log_level"].upper()
        config = replace(config, **data)
        logger.debug("Loaded config from %s: %s", path, config)

    capacity = parse_int(ENV_CAPACITY, default=config.capacity, min_value=1)
    log_level = parse_enum(ENV_LOG_LEVEL, set(LOG_LEVELS), default=config.log_level)
    prompt = parse_bool(ENV_PROMPT, default=config.prompt)
    assert log_level is not None  # default is always set

    return replace(config, capacity=capacity, log_level=log_level, prompt=prompt)
