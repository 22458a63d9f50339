from __future__ import annotations

"""
Default Logger Registry.

One convenient default Logger reachable without explicit wiring. The
instance lives in an explicit LoggerRegistry: it is created on first
request, reconfigured in place by merging new options, and torn down by
close(). Module-level helpers delegate to a single registry.
"""

import logging
from typing import Any, Callable, Dict, Optional

from cclog.core.logger import ConfigLike, Logger, LoggerState

logger = logging.getLogger(__name__)

LoggerFactory = Callable[..., Logger]


class LoggerRegistry:
    """
    Owner of the default Logger instance.

    Args:
        factory: Callable building the Logger (default: Logger).
        **collaborators: Forwarded to the factory (terminal, peripherals, ...).
    """

    def __init__(self, factory: LoggerFactory = Logger, **collaborators: Any) -> None:
        self._factory = factory
        self._collaborators: Dict[str, Any] = collaborators
        self._instance: Optional[Logger] = None
        self._closed = False

    @property
    def state(self) -> LoggerState:
        if self._instance is None:
            return LoggerState.CLOSED if self._closed else LoggerState.UNCONFIGURED
        return self._instance.state

    @property
    def is_configured(self) -> bool:
        return self.state is LoggerState.CONFIGURED

    def get(self) -> Logger:
        """Return the default Logger, creating it with defaults if needed."""
        if self._instance is None:
            self._instance = self._factory(None, **self._collaborators)
            self._closed = False
            logger.debug("Default logger created with defaults.")
        return self._instance

    def configure(self, options: ConfigLike = None) -> Logger:
        """
        Create the default Logger or merge options into the existing one.

        Never creates a second instance while one is alive.
        """
        if self._instance is None:
            self._instance = self._factory(options, **self._collaborators)
            self._closed = False
            logger.debug("Default logger created.")
        else:
            self._instance.configure(options)
            logger.debug("Default logger reconfigured.")
        return self._instance

    def close(self) -> None:
        """
        Flush and release the default Logger.

        The registry reports CLOSED until the next get() or configure()
        creates a fresh instance.
        """
        instance, self._instance = self._instance, None
        if instance is not None:
            instance.close()
            self._closed = True


_registry = LoggerRegistry()


def get_logger() -> Logger:
    return _registry.get()


def configure(options: ConfigLike = None) -> Logger:
    return _registry.configure(options)


def shutdown() -> None:
    _registry.close()


def default_registry() -> LoggerRegistry:
    return _registry
