from __future__ import annotations

"""
Integration tests for the standard logging bridge.

Verifies idempotent attachment, level mapping of forwarded records, the
queue-based hand-off across threads and that the library's own
diagnostics are never fed back into a logger.
"""

import logging
import threading
import time
from logging.handlers import QueueHandler

import pytest

from cclog.infra.bridge import (
    _CONFIGURED_FLAG_ATTR,
    _QUEUE_LISTENER_ATTR,
    BridgeHandler,
    attach_stdlib_bridge,
    bridge_handler,
    detach_stdlib_bridge,
)
from cclog.infra.peripherals import PeripheralRegistry


class _SlowPeripherals(PeripheralRegistry):
    """Registry whose first validation blocks for a while; traces via 'logging'."""

    delay = 0.2

    def validate_monitor(self, name: str):
        time.sleep(self.delay)
        self.delay = 0.0
        logging.getLogger("cclog.tests.peripherals").debug("validated %s", name)
        return super().validate_monitor(name)


@pytest.fixture(autouse=True)
def reset_logging() -> None:
    """Clean up bridge handlers and the root level around each test."""
    root = logging.getLogger()
    original_level = root.level
    detach_stdlib_bridge()
    yield
    detach_stdlib_bridge()
    root.setLevel(original_level)


def test_bridge_idempotency(make_logger) -> None:
    """TC-01: Verify that repeated attach calls do not duplicate handlers."""
    log = make_logger()
    root = logging.getLogger()

    attach_stdlib_bridge(log)
    count = len(root.handlers)
    attach_stdlib_bridge(log)

    assert len(root.handlers) == count
    assert getattr(root, _CONFIGURED_FLAG_ATTR) is True
    assert isinstance(bridge_handler(), BridgeHandler)


def test_root_only_receives_queue_handler(make_logger) -> None:
    attach_stdlib_bridge(make_logger())

    root = logging.getLogger()
    assert not any(isinstance(h, BridgeHandler) for h in root.handlers)
    assert any(isinstance(h, QueueHandler) for h in root.handlers)
    assert getattr(root, _QUEUE_LISTENER_ATTR) is not None


def test_force_replaces_target(make_logger) -> None:
    first, second = make_logger(), make_logger()

    attach_stdlib_bridge(first)
    attach_stdlib_bridge(second, force=True)

    queue_handlers = [h for h in logging.getLogger().handlers if isinstance(h, QueueHandler)]
    assert len(queue_handlers) == 1
    assert bridge_handler().target is second


def test_records_are_forwarded_with_logger_name(make_logger, screen) -> None:
    """TC-02: A stdlib warning lands in the sinks with the logger name as context."""
    log = make_logger({"timestamp_format": "T"})
    attach_stdlib_bridge(log, level="debug")

    logging.getLogger("app.db").warning("pool at %d%%", 90)
    detach_stdlib_bridge()

    assert ("yellow", "[W] [T] [logger=app.db] pool at 90%") in screen.lines


def test_records_below_bridge_level_are_dropped(make_logger, screen) -> None:
    log = make_logger({"level": "trace"})
    attach_stdlib_bridge(log, level="error")

    logging.getLogger("app.db").warning("ignored")
    detach_stdlib_bridge()

    assert screen.lines == []


def test_library_records_are_not_forwarded(make_logger, screen) -> None:
    log = make_logger({"level": "trace"})
    attach_stdlib_bridge(log, level="trace")

    logging.getLogger("cclog.core.dispatcher").warning("internal")
    detach_stdlib_bridge()

    assert screen.lines == []


def test_exception_text_is_appended(make_logger, screen) -> None:
    log = make_logger()
    attach_stdlib_bridge(log)

    try:
        raise KeyError("missing")
    except KeyError:
        logging.getLogger("app").exception("lookup failed")
    detach_stdlib_bridge()

    text = screen.texts[-1]
    assert "lookup failed" in text
    assert "KeyError: 'missing'" in text


def test_configure_and_stdlib_logging_from_two_threads(make_logger, monitor, screen) -> None:
    """TC-03: Reconfiguring while another thread logs through 'logging' completes."""
    log = make_logger(peripherals=_SlowPeripherals({"top": monitor}))
    attach_stdlib_bridge(log, level="debug")

    configure = threading.Thread(target=log.configure, args=({"outputs": {"monitors": ["top"]}},))
    app = threading.Thread(
        target=lambda: [logging.getLogger("app").info("tick %d", i) for i in range(20)]
    )
    configure.start()
    time.sleep(0.05)
    app.start()
    configure.join(timeout=5)
    app.join(timeout=5)

    assert not configure.is_alive()
    assert not app.is_alive()

    detach_stdlib_bridge()
    assert sum(1 for t in screen.texts if "[logger=app] tick" in t) == 20


def test_detach_removes_only_bridge_handlers(make_logger) -> None:
    root = logging.getLogger()
    foreign = logging.NullHandler()
    root.addHandler(foreign)
    try:
        attach_stdlib_bridge(make_logger())
        detach_stdlib_bridge()
        detach_stdlib_bridge()

        assert bridge_handler() is None
        assert foreign in root.handlers
        assert not hasattr(root, _CONFIGURED_FLAG_ATTR)
    finally:
        root.removeHandler(foreign)
