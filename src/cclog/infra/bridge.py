from __future__ import annotations

"""
Standard Logging Bridge.

Routes records emitted through Python's standard 'logging' module into the
sinks of a cclog Logger. The root logger only receives a QueueHandler: the
calling thread enqueues and returns, and a QueueListener thread forwards the
records to the Logger. No thread ever holds a logging handler lock while
waiting on the Logger, so the Logger may itself emit 'logging' records while
dispatching.

Attaching is idempotent: the handler is tagged so repeated calls do not
duplicate it, and detaching removes only our own handlers without touching
external logging setup.
"""

import atexit
import logging
import queue
from logging.handlers import QueueHandler, QueueListener
from typing import Optional, Union

from cclog.domain.levels import LevelLike, from_stdlib, to_stdlib

# Internal attributes used to tag our handlers and track the bridge lifecycle
_HANDLER_TAG_ATTR: str = "_cclog_handler"
_CONFIGURED_FLAG_ATTR: str = "_cclog_bridge_configured"
_QUEUE_LISTENER_ATTR: str = "_cclog_bridge_listener"


class BridgeHandler(logging.Handler):
    """
    logging.Handler forwarding records to a cclog Logger.

    Runs on the listener thread. The logger name is attached as context.
    Records arrive already rendered by the QueueHandler, exception text
    included.
    """

    def __init__(self, target, level: int = logging.NOTSET) -> None:
        super().__init__(level)
        self.target = target

    def emit(self, record: logging.LogRecord) -> None:
        try:
            self.target.log(from_stdlib(record.levelno), "%s", record.getMessage(),
                            context={"logger": record.name})
        except Exception:
            self.handleError(record)


class _ExternalOnly(logging.Filter):
    """Drop records of cclog's own modules before they are queued."""

    def filter(self, record: logging.LogRecord) -> bool:
        return not _is_internal(record.name)


# =============================================================================
# Public API
# =============================================================================

def attach_stdlib_bridge(
        target,
        level: Union[LevelLike, int] = "info",
        *,
        force: bool = False,
) -> logging.Logger:
    """
    Forward the root 'logging' logger into a cclog Logger.

    Args:
        target: Logger or ChildLogger receiving the records.
        level: Minimum standard level forwarded (cclog level name or int).
        force: Replace an existing bridge instead of keeping it.

    Returns:
        logging.Logger: The root logger.
    """
    root = logging.getLogger()

    already_configured = bool(getattr(root, _CONFIGURED_FLAG_ATTR, False))
    if already_configured and not force:
        return root

    level_int = level if isinstance(level, int) else to_stdlib(level)

    _remove_our_handlers(root)
    _stop_existing_listener(root)

    log_queue: queue.Queue[logging.LogRecord] = queue.Queue(-1)

    queue_handler = QueueHandler(log_queue)
    queue_handler.setLevel(level_int)
    queue_handler.addFilter(_ExternalOnly())
    _tag_handler(queue_handler)

    listener = QueueListener(log_queue, BridgeHandler(target, level_int))
    listener.start()

    root.addHandler(queue_handler)
    if root.level > level_int:
        root.setLevel(level_int)

    setattr(root, _QUEUE_LISTENER_ATTR, listener)
    setattr(root, _CONFIGURED_FLAG_ATTR, True)

    # Forward whatever is still queued at interpreter shutdown
    atexit.register(_safe_stop_listener, listener)
    return root


def detach_stdlib_bridge() -> None:
    """
    Remove the bridge from the root logger.

    Records queued before the call are forwarded before it returns.
    """
    root = logging.getLogger()
    _remove_our_handlers(root)
    _stop_existing_listener(root)
    if hasattr(root, _CONFIGURED_FLAG_ATTR):
        delattr(root, _CONFIGURED_FLAG_ATTR)


def bridge_handler() -> Optional[BridgeHandler]:
    """Return the installed bridge handler, if any."""
    listener = getattr(logging.getLogger(), _QUEUE_LISTENER_ATTR, None)
    if listener is None:
        return None
    for h in listener.handlers:
        if isinstance(h, BridgeHandler):
            return h
    return None


# =============================================================================
# Private Helpers
# =============================================================================

def _tag_handler(handler: logging.Handler) -> None:
    """Tag a handler instance as owned by cclog."""
    setattr(handler, _HANDLER_TAG_ATTR, True)


def _is_internal(name: str) -> bool:
    return name == "cclog" or name.startswith("cclog.")


def _is_our_handler(handler: logging.Handler) -> bool:
    """Check if a handler instance was created by this module."""
    return bool(getattr(handler, _HANDLER_TAG_ATTR, False))


def _remove_our_handlers(root: logging.Logger) -> None:
    """Remove only the handlers tagged as ours from the logger."""
    for h in list(root.handlers):
        if _is_our_handler(h):
            root.removeHandler(h)
            h.close()


def _stop_existing_listener(root: logging.Logger) -> None:
    """Drain and stop the listener thread of a previous bridge."""
    listener = getattr(root, _QUEUE_LISTENER_ATTR, None)
    if listener is not None:
        _safe_stop_listener(listener)
        setattr(root, _QUEUE_LISTENER_ATTR, None)


def _safe_stop_listener(listener: Optional[QueueListener]) -> None:
    """Stop a QueueListener; repeated calls (atexit after detach) are no-ops."""
    if listener is None or getattr(listener, "_thread", None) is None:
        return
    listener.stop()
