from __future__ import annotations

"""
Error Taxonomy.

Every error raised by the library derives from CCLogError and carries a
machine-readable code plus an optional details mapping. Configuration-time
errors propagate to the caller; sink errors are contained by the logger.
"""

from typing import Any, Dict, Optional


class CCLogError(Exception):
    """
    Base exception for all library errors.

    Attributes:
        message: Human-readable error description.
        code: Machine-readable slug (defaults to the class default_code).
        details: Optional mapping with extra context.
    """

    default_code: str = "ERROR"

    def __init__(
        self,
        message: str,
        *,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code if code is not None else self.default_code
        self.details: Dict[str, Any] = details or {}

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message={self.message!r}, code={self.code!r})"

    def __str__(self) -> str:
        return self.message


class InvalidLevel(CCLogError, ValueError):
    """Unrecognized level name at construction, reconfiguration or filtering."""

    default_code = "INVALID_LEVEL"


class InvalidArgument(CCLogError, TypeError):
    """Malformed option or non-mapping context."""

    default_code = "INVALID_ARGUMENT"


class SinkUnavailable(CCLogError):
    """A file or monitor sink could not be opened or written."""

    default_code = "SINK_UNAVAILABLE"
