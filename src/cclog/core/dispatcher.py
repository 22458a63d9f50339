from __future__ import annotations

"""
Sink Dispatcher.

Fans a rendered record out to the enabled sinks: the terminal, a set of
monitor devices and the rotating log file. Sink failures are contained
here; they are reported through the remaining sinks and never reach the
caller of a log method.
"""

import logging
from typing import Any, Callable, List, Optional, Sequence, Set, Tuple

from cclog.core.rotation import RotatingLogFile
from cclog.domain.errors import SinkUnavailable
from cclog.domain.levels import LogLevel
from cclog.domain.records import LogRecord
from cclog.infra.peripherals import PeripheralRegistry
from cclog.infra.terminal import Terminal, TextSurface

logger = logging.getLogger(__name__)

# (sink, level, message) -> None; emits an internal diagnostic through the other sinks
Reporter = Callable[["Sink", LogLevel, str], None]


class Sink:
    """Base class of all output destinations."""

    def write(self, record: LogRecord) -> None:
        raise NotImplementedError


def _print_colored(surface: TextSurface, text: str, color: Optional[str]) -> None:
    """Print with a temporary text color, restoring the previous one."""
    if color is None:
        surface.print_line(text)
        return
    original = surface.get_text_color()
    surface.set_text_color(color)
    try:
        surface.print_line(text)
    finally:
        surface.set_text_color(original)


# -----------------------------------------------------------------------------
# Terminal
# -----------------------------------------------------------------------------

class TerminalSink(Sink):
    """
    Prints to the current terminal target, colored by level.
    """

    def __init__(self, terminal: Terminal, colors: bool = True) -> None:
        self.terminal = terminal
        self.colors = colors

    def write(self, record: LogRecord) -> None:
        _print_colored(self.terminal, record.line, record.level.color if self.colors else None)


# -----------------------------------------------------------------------------
# Monitors
# -----------------------------------------------------------------------------

class MonitorSink(Sink):
    """
    Mirrors records onto monitor devices.

    Devices are revalidated on every write. A device that fails validation
    is skipped. Setup is silent; a failure on a later validation emits one
    warning per device until the logger is reconfigured.
    """

    def __init__(
            self,
            terminal: Terminal,
            peripherals: PeripheralRegistry,
            names: Sequence[str],
            colors: bool = True,
            reporter: Optional[Reporter] = None,
    ) -> None:
        self.terminal = terminal
        self.peripherals = peripherals
        self.names = tuple(names)
        self.colors = colors
        self._reporter = reporter
        self._warned: Set[str] = set()
        self.active: List[Any] = []

    def validate(self, initial: bool = False) -> List[Any]:
        """
        Resolve the configured names to monitor handles.

        Args:
            initial: True during setup; suppresses all warnings.

        Returns:
            List[Any]: Handles of the valid monitors, in configured order.
        """
        return [handle for _, handle in self._check(initial)]

    def write(self, record: LogRecord) -> None:
        color = record.level.color if self.colors else None
        for name, handle in self._check(initial=False):
            previous = self.terminal.redirect(handle)
            try:
                _print_colored(self.terminal, record.line, color)
            except Exception as e:
                self._warn_once(name, f"write failed: {e}")
            finally:
                self.terminal.redirect(previous)

    def _check(self, initial: bool) -> List[Tuple[str, Any]]:
        pairs: List[Tuple[str, Any]] = []
        for name in self.names:
            ok, result = self.peripherals.validate_monitor(name)
            if ok:
                pairs.append((name, result))
            elif not initial:
                self._warn_once(name, str(result))
            else:
                logger.debug("Monitor %s not available at setup: %s", name, result)
        self.active = [handle for _, handle in pairs]
        return pairs

    def _warn_once(self, name: str, reason: str) -> None:
        if name in self._warned:
            return
        self._warned.add(name)
        logger.debug("Monitor %s unavailable: %s", name, reason)
        if self._reporter is not None:
            self._reporter(self, LogLevel.WARN, f"Monitor '{name}' unavailable: {reason}")


# -----------------------------------------------------------------------------
# File
# -----------------------------------------------------------------------------

class FileSink(Sink):
    """
    Appends records to the rotating log file.

    The first failure disables the sink just long enough to report one
    error through the other sinks; later writes are dropped silently until
    the logger is reconfigured.
    """

    def __init__(self, reporter: Optional[Reporter] = None) -> None:
        self._reporter = reporter
        self.log_file: Optional[RotatingLogFile] = None
        self.enabled = True
        self.failed = False
        self.closed = False

    def attach(self, log_file: RotatingLogFile) -> None:
        self.log_file = log_file
        self.failed = False
        self.closed = False

    def detach(self) -> None:
        """Release the file after an explicit close; later writes are no-ops."""
        if self.log_file is not None:
            self.log_file.close()
        self.closed = True

    def write(self, record: LogRecord) -> None:
        if not self.enabled or self.closed or self.failed:
            return
        if self.log_file is None or not self.log_file.is_open:
            self.fail("Log file handle is not available; file output disabled")
            return
        try:
            self.log_file.write_line(record.line)
        except (OSError, SinkUnavailable) as e:
            self.log_file.close()
            self.fail(f"Could not write log file: {e}")

    def fail(self, message: str) -> None:
        """Report a file sink failure once, guarding against recursion."""
        if self.failed:
            return
        self.failed = True
        logger.debug("File sink disabled: %s", message)
        if self._reporter is None:
            return
        self.enabled = False
        try:
            self._reporter(self, LogLevel.ERROR, message)
        finally:
            self.enabled = True


# -----------------------------------------------------------------------------
# Dispatcher
# -----------------------------------------------------------------------------

class SinkDispatcher:
    """
    Ordered collection of active sinks.
    """

    def __init__(
            self,
            terminal: Optional[TerminalSink] = None,
            monitors: Optional[MonitorSink] = None,
            file: Optional[FileSink] = None,
    ) -> None:
        self.terminal = terminal
        self.monitors = monitors
        self.file = file

    @property
    def sinks(self) -> List[Sink]:
        return [s for s in (self.terminal, self.monitors, self.file) if s is not None]

    def dispatch(self, record: LogRecord, exclude: Optional[Sink] = None) -> None:
        """
        Write a record to every active sink except exclude.

        Args:
            record: Rendered record.
            exclude: Sink to skip (the one reporting a diagnostic).
        """
        for sink in self.sinks:
            if sink is exclude:
                continue
            try:
                sink.write(record)
            except Exception as e:
                logger.warning("Sink %s failed: %s", type(sink).__name__, e)

    def dispatch_diagnostic(self, record: LogRecord, source: Sink) -> None:
        """Send an internal diagnostic raised by source to the other sinks."""
        self.dispatch(record, exclude=source)
