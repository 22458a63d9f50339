from __future__ import annotations

"""
cclog: structured multi-sink logger.

Usage:
    from cclog import Logger

    log = Logger({"level": "debug", "outputs": {"file": True}})
    log.info("Started %s", "reactor")
    req = log.child({"request_id": "abc"})
    req.warn("slow response", {"ms": 812})
    log.close()

    # Process-wide default instance
    import cclog
    cclog.configure({"level": "warn"})
    cclog.get_logger().error("boom")
    cclog.shutdown()
"""

from cclog.core.builder import LoggerBuilder
from cclog.core.context import merge_context
from cclog.core.crash import CrashHandler
from cclog.core.formatter import format_message
from cclog.core.logger import ChildLogger, Logger, LoggerState
from cclog.core.registry import LoggerRegistry, configure, get_logger, shutdown
from cclog.domain.config import LoggerConfig, build_config_from_dict, load_config_file
from cclog.domain.errors import CCLogError, InvalidArgument, InvalidLevel, SinkUnavailable
from cclog.domain.levels import LogLevel
from cclog.infra.bridge import attach_stdlib_bridge, detach_stdlib_bridge
from cclog.infra.fs import FileStore, LocalFileStore
from cclog.infra.peripherals import BufferMonitor, PeripheralRegistry
from cclog.infra.terminal import BufferSurface, ConsoleSurface, Terminal
from cclog.version import VERSION as __version__

__all__ = [
    "Logger",
    "ChildLogger",
    "LoggerState",
    "LoggerBuilder",
    "LoggerConfig",
    "LoggerRegistry",
    "LogLevel",
    "CrashHandler",
    "CCLogError",
    "InvalidLevel",
    "InvalidArgument",
    "SinkUnavailable",
    "FileStore",
    "LocalFileStore",
    "PeripheralRegistry",
    "BufferMonitor",
    "Terminal",
    "ConsoleSurface",
    "BufferSurface",
    "attach_stdlib_bridge",
    "detach_stdlib_bridge",
    "build_config_from_dict",
    "load_config_file",
    "configure",
    "get_logger",
    "shutdown",
    "format_message",
    "merge_context",
    "__version__",
]
