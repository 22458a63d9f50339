from __future__ import annotations

"""
Logger Core.

Orchestrates configuration, level filtering, context merging, formatting
and dispatch. A Logger owns its configuration and the log file handle;
ChildLogger is a lightweight delegate that only adds context and forwards
every call to its root Logger.

Lifecycle: UNCONFIGURED -> CONFIGURED <-> CLOSED. configure() may be called
any number of times and layers new options over the current ones.
"""

import dataclasses
import logging
import threading
from datetime import datetime
from enum import Enum
from types import TracebackType
from typing import Any, Dict, Mapping, Optional, Type, Union

from cclog.core.context import ensure_context, merge_context, render_context
from cclog.core.dispatcher import (
    FileSink,
    MonitorSink,
    Sink,
    SinkDispatcher,
    TerminalSink,
)
from cclog.core.formatter import format_message
from cclog.core.rotation import (
    BannerMetadata,
    HostInfo,
    RotatingLogFile,
    describe_host,
    infer_source_label,
)
from cclog.domain.config import LoggerConfig
from cclog.domain.errors import InvalidArgument, SinkUnavailable
from cclog.domain.levels import LevelLike, LogLevel, parse_level
from cclog.domain.records import LogRecord, render_line
from cclog.infra.fs import FileStore, LocalFileStore, get_default_log_dir, normalize_path
from cclog.infra.peripherals import PeripheralRegistry
from cclog.infra.terminal import Terminal

logger = logging.getLogger(__name__)

ConfigLike = Union[LoggerConfig, Mapping[str, Any], None]


class LoggerState(str, Enum):
    UNCONFIGURED = "unconfigured"
    CONFIGURED = "configured"
    CLOSED = "closed"


class _LevelMethods:
    """One convenience method per level, all forwarding to log()."""

    def log(self, level: LevelLike, *args: Any, context: Optional[Mapping[str, Any]] = None) -> None:
        raise NotImplementedError

    def trace(self, *args: Any, context: Optional[Mapping[str, Any]] = None) -> None:
        self.log(LogLevel.TRACE, *args, context=context)

    def debug(self, *args: Any, context: Optional[Mapping[str, Any]] = None) -> None:
        self.log(LogLevel.DEBUG, *args, context=context)

    def info(self, *args: Any, context: Optional[Mapping[str, Any]] = None) -> None:
        self.log(LogLevel.INFO, *args, context=context)

    def warn(self, *args: Any, context: Optional[Mapping[str, Any]] = None) -> None:
        self.log(LogLevel.WARN, *args, context=context)

    def error(self, *args: Any, context: Optional[Mapping[str, Any]] = None) -> None:
        self.log(LogLevel.ERROR, *args, context=context)

    def fatal(self, *args: Any, context: Optional[Mapping[str, Any]] = None) -> None:
        self.log(LogLevel.FATAL, *args, context=context)


def _require_context(context: Any) -> Dict[str, Any]:
    if not isinstance(context, Mapping):
        raise InvalidArgument(
            f"child() expects a mapping context, got {type(context).__name__}"
        )
    return dict(context)


def coerce_config(config: ConfigLike) -> LoggerConfig:
    """Accept a LoggerConfig, an option mapping or None (defaults)."""
    if isinstance(config, LoggerConfig):
        return config
    if config is None or isinstance(config, Mapping):
        return LoggerConfig.from_dict(config)
    raise InvalidArgument(f"Unsupported logger config type: {type(config).__name__}")


class Logger(_LevelMethods):
    """
    Configurable multi-sink logger.

    Args:
        config: LoggerConfig, nested option mapping, or None for defaults.
        terminal: Redirectable terminal (default: rich console).
        peripherals: Peripheral accessor resolving monitor names.
        store: Filesystem accessor used by the file sink.
        host: Host facts for banners and source label inference.

    Raises:
        InvalidLevel: If the configured level is unknown.
        InvalidArgument: If the options are malformed.
    """

    def __init__(
            self,
            config: ConfigLike = None,
            *,
            terminal: Optional[Terminal] = None,
            peripherals: Optional[PeripheralRegistry] = None,
            store: Optional[FileStore] = None,
            host: Optional[HostInfo] = None,
    ) -> None:
        self.state = LoggerState.UNCONFIGURED
        # Validate before acquiring anything so a bad config leaves no half-built logger
        self.config = coerce_config(config)

        self.terminal = terminal or Terminal()
        self.peripherals = peripherals or PeripheralRegistry()
        self.store = store or LocalFileStore()
        self.host = host or describe_host()

        self._dispatcher = SinkDispatcher()
        self._log_file: Optional[RotatingLogFile] = None
        self._last_path: Optional[str] = None
        # Guards handle swaps and dispatch; reentrant for sink diagnostics
        self._lock = threading.RLock()

        self._apply_config()

    # -------------------------------------------------------------------------
    # Logging
    # -------------------------------------------------------------------------

    def log(self, level: LevelLike, *args: Any, context: Optional[Mapping[str, Any]] = None) -> None:
        """
        Log a message at the given level.

        Calls below the configured level return without side effects.

        Args:
            level: LogLevel or level name.
            *args: Message arguments (see cclog.core.formatter).
            context: Per-call context, merged over nothing at the root.

        Raises:
            InvalidLevel: If level is unknown.
            InvalidArgument: If context is not a mapping.
        """
        lvl = parse_level(level)
        ctx = ensure_context(context)
        if lvl.rank < self.config.level.rank:
            return
        self._emit(lvl, args, ctx)

    def is_enabled_for(self, level: LevelLike) -> bool:
        return parse_level(level).rank >= self.config.level.rank

    def child(self, context: Mapping[str, Any]) -> "ChildLogger":
        """
        Create a delegate that adds context to every call.

        Raises:
            InvalidArgument: If context is not a mapping.
        """
        return ChildLogger(self, _require_context(context))

    # -------------------------------------------------------------------------
    # Configuration
    # -------------------------------------------------------------------------

    def configure(self, options: ConfigLike = None) -> "Logger":
        """
        Layer new options over the current configuration and reinitialize sinks.

        Nested sections merge key by key, the monitor list is appended and
        scalars are replaced. A LoggerConfig instance replaces the config.

        Raises:
            InvalidLevel: If the new level is unknown (config is left untouched).
            InvalidArgument: If the options are malformed.
        """
        if isinstance(options, LoggerConfig):
            new_config = options
        elif options is None or isinstance(options, Mapping):
            new_config = self.config.merged(options)
        else:
            raise InvalidArgument(f"Unsupported logger config type: {type(options).__name__}")

        with self._lock:
            self.config = new_config
            self._apply_config()
        return self

    def set_level(self, level: LevelLike) -> "Logger":
        self.config = dataclasses.replace(self.config, level=parse_level(level))
        return self

    def close(self) -> None:
        """Flush and release the log file; safe to call repeatedly."""
        with self._lock:
            if self._dispatcher.file is not None:
                self._dispatcher.file.detach()
            if self._log_file is not None:
                self._log_file.close()
                self._log_file = None
            self.state = LoggerState.CLOSED

    # -------------------------------------------------------------------------
    # Introspection
    # -------------------------------------------------------------------------

    @property
    def current_log_path(self) -> Optional[str]:
        """Path of the open log file, or of the last one after close()."""
        return self._last_path

    @property
    def active_monitors(self) -> list:
        monitors = self._dispatcher.monitors
        return list(monitors.active) if monitors is not None else []

    def revalidate_monitors(self) -> list:
        """Re-resolve the configured monitor names on demand."""
        monitors = self._dispatcher.monitors
        return monitors.validate() if monitors is not None else []

    def recent_logs(self, n_lines: int = 100) -> str:
        """
        Return the tail of the current log file, e.g. for crash reports.

        Args:
            n_lines: Maximum number of lines from the end of the file.
        """
        path = self._last_path
        if path is None or not self.store.exists(path):
            return "Log file not found."
        try:
            lines = self.store.read_text(path).splitlines(keepends=True)
        except OSError as e:
            return f"Error retrieving logs: {e}"
        return "".join(lines[-n_lines:])

    def __enter__(self) -> "Logger":
        return self

    def __exit__(
            self,
            exc_type: Optional[Type[BaseException]],
            exc: Optional[BaseException],
            tb: Optional[TracebackType],
    ) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"Logger(level={self.config.level.value!r}, state={self.state.value!r})"

    # -------------------------------------------------------------------------
    # Private Helpers
    # -------------------------------------------------------------------------

    def _apply_config(self) -> None:
        """(Re)build the sinks from the current configuration."""
        if self._log_file is not None:
            self._log_file.close()
            self._log_file = None

        cfg = self.config
        outputs = cfg.outputs

        terminal_sink = TerminalSink(self.terminal, cfg.colors) if outputs.terminal else None
        monitor_sink = None
        if outputs.monitors:
            monitor_sink = MonitorSink(
                self.terminal,
                self.peripherals,
                outputs.monitors,
                colors=cfg.colors,
                reporter=self._report,
            )
        file_sink = FileSink(reporter=self._report) if outputs.file else None

        self._dispatcher = SinkDispatcher(terminal_sink, monitor_sink, file_sink)
        self.state = LoggerState.CONFIGURED

        if monitor_sink is not None:
            monitor_sink.validate(initial=True)
        if file_sink is not None:
            self._open_file(file_sink)

        logger.debug(
            "Logger configured: level=%s sinks=%s",
            cfg.level.value,
            [type(s).__name__ for s in self._dispatcher.sinks],
        )

    def _open_file(self, sink: FileSink) -> None:
        file_cfg = self.config.file
        label = file_cfg.source_label or infer_source_label(self.host.program)
        banner = None
        if file_cfg.write_banner:
            banner = BannerMetadata(host=self.host, source_label=label, level=self.config.level)

        log_file = RotatingLogFile(
            self.store,
            self._log_directory(),
            label,
            file_cfg.max_retained_files,
            banner=banner,
        )
        try:
            self._last_path = log_file.open()
        except SinkUnavailable as e:
            sink.fail(str(e))
            return

        sink.attach(log_file)
        self._log_file = log_file

    def _log_directory(self) -> str:
        """Absolute log directory; an empty base_directory means the per-user one."""
        raw = self.config.file.base_directory
        fallback = raw if raw.strip() else get_default_log_dir()
        return normalize_path(raw, fallback)

    def _report(self, source: Sink, level: LogLevel, message: str) -> None:
        """Emit an internal diagnostic through every sink except its source."""
        self._emit(level, (message,), None, source=source)

    def _emit(
            self,
            level: LogLevel,
            args: tuple,
            context: Optional[Dict[str, Any]],
            source: Optional[Sink] = None,
    ) -> None:
        now = datetime.now()
        cfg = self.config
        message = format_message(*args)
        line = render_line(
            level,
            self._timestamp(now),
            message,
            context_block=render_context(context),
            abbreviate=cfg.abbreviate_level,
        )
        record = LogRecord(level=level, message=message, timestamp=now, line=line,
                           context=dict(context or {}))
        with self._lock:
            if source is not None:
                self._dispatcher.dispatch_diagnostic(record, source)
            else:
                self._dispatcher.dispatch(record)

    def _timestamp(self, now: datetime) -> str:
        try:
            return now.strftime(self.config.timestamp_format)
        except ValueError:
            return now.strftime("%H:%M:%S")


class ChildLogger(_LevelMethods):
    """
    Context-carrying delegate of a Logger.

    Holds no configuration or resources; valid as long as its root is.
    """

    def __init__(self, parent: Logger, context: Mapping[str, Any]) -> None:
        self._parent = parent
        self.context: Dict[str, Any] = dict(context)

    @property
    def parent(self) -> Logger:
        return self._parent

    def log(self, level: LevelLike, *args: Any, context: Optional[Mapping[str, Any]] = None) -> None:
        extra = ensure_context(context)
        self._parent.log(level, *args, context=merge_context(self.context, extra))

    def child(self, context: Mapping[str, Any]) -> "ChildLogger":
        """Derive a deeper delegate; its context overrides this one's."""
        merged = merge_context(self.context, _require_context(context))
        return ChildLogger(self._parent, merged or {})

    def is_enabled_for(self, level: LevelLike) -> bool:
        return self._parent.is_enabled_for(level)

    def __repr__(self) -> str:
        return f"ChildLogger(context={self.context!r})"
