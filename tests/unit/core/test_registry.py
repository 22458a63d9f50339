from __future__ import annotations

"""
Unit tests for the default Logger registry.
"""

from unittest.mock import patch

import pytest

import cclog
from cclog.core.logger import LoggerState
from cclog.core.registry import LoggerRegistry
from cclog.domain.levels import LogLevel


@pytest.fixture
def registry(terminal, peripherals, host) -> LoggerRegistry:
    reg = LoggerRegistry(terminal=terminal, peripherals=peripherals, host=host)
    yield reg
    reg.close()


def test_get_creates_default_logger_once(registry: LoggerRegistry) -> None:
    assert registry.state is LoggerState.UNCONFIGURED

    first = registry.get()
    second = registry.get()

    assert first is second
    assert registry.is_configured is True
    assert first.config.level is LogLevel.INFO


def test_configure_merges_into_existing_instance(registry: LoggerRegistry) -> None:
    created = registry.configure({"level": "warn", "outputs": {"monitors": ["top"]}})
    again = registry.configure({"outputs": {"monitors": ["left"]}})

    assert again is created
    assert again.config.level is LogLevel.WARN
    assert again.config.outputs.monitors == ("top", "left")


def test_close_reports_closed_until_next_get(registry: LoggerRegistry) -> None:
    first = registry.get()
    registry.close()
    registry.close()

    assert first.state is LoggerState.CLOSED
    assert registry.state is LoggerState.CLOSED
    assert registry.is_configured is False

    second = registry.get()
    assert second is not first
    assert registry.state is LoggerState.CONFIGURED


def test_custom_factory_receives_collaborators(terminal) -> None:
    calls = []

    def factory(options, **collab):
        calls.append((options, collab))
        return cclog.Logger(options, **collab)

    reg = LoggerRegistry(factory=factory, terminal=terminal)
    reg.configure({"level": "error"})
    reg.close()

    assert calls == [({"level": "error"}, {"terminal": terminal})]


def test_module_helpers_use_default_registry(terminal) -> None:
    reg = LoggerRegistry(terminal=terminal)
    with patch("cclog.core.registry._registry", reg):
        log = cclog.configure({"level": "debug"})
        assert cclog.get_logger() is log
        cclog.shutdown()
        assert reg.state is LoggerState.CLOSED
