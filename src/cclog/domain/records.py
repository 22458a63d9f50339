from __future__ import annotations

"""
Log Record Model.

A LogRecord is created per accepted log call, handed to the dispatcher and
discarded afterwards. It is never persisted as an object.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict

from cclog.domain.levels import LogLevel


@dataclass(frozen=True)
class LogRecord:
    """
    Ephemeral representation of one log call.

    Attributes:
        level: Severity of the call.
        context: Merged context (empty when none).
        message: Formatted message text.
        timestamp: Creation time.
        line: Fully rendered output line.
    """
    level: LogLevel
    message: str
    timestamp: datetime
    line: str
    context: Dict[str, Any] = field(default_factory=dict)


def render_line(
        level: LogLevel,
        timestamp_text: str,
        message: str,
        context_block: str = "",
        abbreviate: bool = True,
) -> str:
    """
    Build "[<TAG>] [<timestamp>] [k=v] <message>".

    Args:
        level: Record level.
        timestamp_text: Already formatted timestamp.
        message: Formatted message.
        context_block: Rendered context ("" for none).
        abbreviate: Use the one-letter level tag.

    Returns:
        str: The rendered line.
    """
    body = f"{context_block} {message}" if context_block else message
    return f"[{level.tag(abbreviate)}] [{timestamp_text}] {body}"
