from __future__ import annotations

"""
Level Registry.

Fixed, totally ordered set of severities. Each level carries a numeric rank
used for threshold filtering and a display color token understood by the
terminal surfaces.
"""

import logging
from enum import Enum
from typing import Any, Dict, Union

from cclog.domain.errors import InvalidLevel


class LogLevel(str, Enum):
    """Supported severities, lowest first."""

    TRACE = "trace"
    DEBUG = "debug"
    INFO = "info"
    WARN = "warn"
    ERROR = "error"
    FATAL = "fatal"

    @property
    def rank(self) -> int:
        return _RANKS[self]

    @property
    def color(self) -> str:
        return _COLORS[self]

    def tag(self, abbreviate: bool = True) -> str:
        """Return the rendered level tag, e.g. "W" or "WARN"."""
        name = self.value.upper()
        return name[0] if abbreviate else name


_RANKS: Dict[LogLevel, int] = {
    LogLevel.TRACE: 1,
    LogLevel.DEBUG: 2,
    LogLevel.INFO: 3,
    LogLevel.WARN: 4,
    LogLevel.ERROR: 5,
    LogLevel.FATAL: 6,
}

_COLORS: Dict[LogLevel, str] = {
    LogLevel.TRACE: "grey70",
    LogLevel.DEBUG: "cyan",
    LogLevel.INFO: "bright_green",
    LogLevel.WARN: "yellow",
    LogLevel.ERROR: "red",
    LogLevel.FATAL: "magenta",
}

# Names accepted from the standard logging vocabulary
_ALIASES: Dict[str, LogLevel] = {
    "warning": LogLevel.WARN,
    "critical": LogLevel.FATAL,
}

# Closest standard logging level, used by the stdlib bridge
_STDLIB_LEVELS: Dict[LogLevel, int] = {
    LogLevel.TRACE: 5,
    LogLevel.DEBUG: logging.DEBUG,
    LogLevel.INFO: logging.INFO,
    LogLevel.WARN: logging.WARNING,
    LogLevel.ERROR: logging.ERROR,
    LogLevel.FATAL: logging.CRITICAL,
}

LevelLike = Union[LogLevel, str]


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def parse_level(value: Any) -> LogLevel:
    """
    Resolve a level name or LogLevel member.

    Args:
        value: LogLevel instance or case-insensitive level name.

    Returns:
        LogLevel: The matching level.

    Raises:
        InvalidLevel: If the value does not name a known level.
    """
    if isinstance(value, LogLevel):
        return value
    if isinstance(value, str):
        key = value.strip().lower()
        try:
            return LogLevel(key)
        except ValueError:
            if key in _ALIASES:
                return _ALIASES[key]
    raise InvalidLevel(
        f"Invalid logging level: {value!r}",
        details={"valid": [lvl.value for lvl in LogLevel]},
    )


def is_valid(value: Any) -> bool:
    try:
        parse_level(value)
    except InvalidLevel:
        return False
    return True


def rank(value: LevelLike) -> int:
    return parse_level(value).rank


def color(value: LevelLike) -> str:
    return parse_level(value).color


def to_stdlib(value: LevelLike) -> int:
    """Map a level to its nearest standard logging numeric level."""
    return _STDLIB_LEVELS[parse_level(value)]


def from_stdlib(levelno: int) -> LogLevel:
    """Map a standard logging numeric level to the highest level not above it."""
    chosen = LogLevel.TRACE
    for level in LogLevel:
        if _STDLIB_LEVELS[level] <= levelno:
            chosen = level
    return chosen
