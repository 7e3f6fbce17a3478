"""Configuration for the line-editing engine."""

from __future__ import annotations

import logging
import math
import os
from dataclasses import dataclass
from typing import Callable, Mapping, Optional

DEFAULT_PROMPT = "CLI> "

_logger = logging.getLogger("termcli.config")


@dataclass
class EngineConfig:
    """Capacity limits and presentation settings for a prompt session."""

    max_commands: int = 16
    max_line_length: int = 128
    max_args: int = 16
    prompt: str = DEFAULT_PROMPT
    poll_interval: float = 0.01

    def __post_init__(self) -> None:
        if self.max_commands <= 0:
            raise ValueError("max_commands must be positive")
        if self.max_line_length < 2:
            raise ValueError("max_line_length must leave room for at least one character")
        if self.max_args <= 0:
            raise ValueError("max_args must be positive")
        if not math.isfinite(self.poll_interval) or self.poll_interval < 0:
            raise ValueError("poll_interval must be a finite, non-negative number")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "EngineConfig":
        """Build a config, letting ``TERMCLI_*`` variables override the defaults."""

        env = os.environ if environ is None else environ
        config = cls()
        config.max_commands = _positive(env, "TERMCLI_MAX_COMMANDS", int, config.max_commands)
        config.max_line_length = _positive(
            env, "TERMCLI_MAX_LINE_LENGTH", int, config.max_line_length, minimum=2
        )
        config.max_args = _positive(env, "TERMCLI_MAX_ARGS", int, config.max_args)
        config.poll_interval = _positive(
            env, "TERMCLI_POLL_INTERVAL", float, config.poll_interval, minimum=0
        )
        prompt = env.get("TERMCLI_PROMPT")
        if prompt:
            config.prompt = prompt
        return config


def _positive(
    env: Mapping[str, str],
    key: str,
    parse: Callable[[str], float],
    default,
    *,
    minimum: float = 1,
):
    raw = env.get(key)
    if not raw:
        return default
    try:
        value = parse(raw)
    except ValueError:
        _logger.warning("Ignoring %s=%r: not a number", key, raw)
        return default
    if not math.isfinite(value):
        _logger.warning("Ignoring %s=%r: not a finite number", key, raw)
        return default
    if value < minimum:
        _logger.warning("Ignoring %s=%r: below minimum %s", key, raw, minimum)
        return default
    return value


__all__ = ["DEFAULT_PROMPT", "EngineConfig"]
