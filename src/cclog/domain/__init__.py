from __future__ import annotations

from .config import FileSinkConfig, LoggerConfig, OutputsConfig
from .errors import CCLogError, InvalidArgument, InvalidLevel, SinkUnavailable
from .levels import LogLevel, parse_level

__all__ = [
    "LoggerConfig",
    "OutputsConfig",
    "FileSinkConfig",
    "CCLogError",
    "InvalidLevel",
    "InvalidArgument",
    "SinkUnavailable",
    "LogLevel",
    "parse_level",
]
