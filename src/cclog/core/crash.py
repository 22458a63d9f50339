from __future__ import annotations

"""
Crash Handling.

Records a fatal error of the host program, logs it together with its
traceback and re-raises it on exit.
"""

import traceback
from contextlib import contextmanager
from typing import Iterator, Optional, Union

from cclog.core.logger import ChildLogger, Logger

TRACE_BEGIN = "----- begin debug trace -----"
TRACE_END = "----- end debug trace -----"


class CrashHandler:
    """
    Example:
        >>> crash = CrashHandler(log)
        >>> crash.set_env("reactor", "1.2.0")
        >>> with crash.guard():
        ...     main()
    """

    def __init__(self, log: Union[Logger, ChildLogger]) -> None:
        self.log = log
        self.app = "unknown"
        self.version = "v0.0.0"
        self.error: Optional[BaseException] = None

    def set_env(self, app: str, version: str) -> None:
        self.app = app
        self.version = version

    def handle(self, exc: BaseException) -> None:
        """
        Log a fatal error and remember it for exit().

        A KeyboardInterrupt is a user termination, not a crash; it is
        forgotten.
        """
        if isinstance(exc, KeyboardInterrupt):
            self.error = None
            return
        self.error = exc
        self.log.fatal(
            "%s %s crashed: %s: %s", self.app, self.version, type(exc).__name__, exc,
        )
        trace = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__)).rstrip()
        self.log.info("%s\n%s", TRACE_BEGIN, trace)
        self.log.info(TRACE_END)

    def exit(self) -> None:
        """Re-raise the recorded error, if any."""
        if self.error is not None:
            raise self.error

    @contextmanager
    def guard(self) -> Iterator["CrashHandler"]:
        try:
            yield self
        except (Exception, KeyboardInterrupt) as exc:
            self.handle(exc)
        self.exit()
