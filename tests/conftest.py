from __future__ import annotations

"""
Global Pytest Configuration and Fixtures.

This module sets up the testing environment, including:
1. Path manipulation to ensure the 'src' directory is importable.
2. Shared fixtures wiring loggers to in-memory terminals, monitors and a
   temporary log directory.
"""

import os
import sys
from typing import Any, Callable, Dict, Iterator, Optional

import pytest

# -----------------------------------------------------------------------------
# Path Configuration
# -----------------------------------------------------------------------------
_SRC_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if _SRC_PATH not in sys.path:
    sys.path.insert(0, _SRC_PATH)

from cclog.core.logger import Logger  # noqa: E402
from cclog.core.rotation import HostInfo  # noqa: E402
from cclog.infra.fs import LocalFileStore  # noqa: E402
from cclog.infra.peripherals import BufferMonitor, PeripheralRegistry  # noqa: E402
from cclog.infra.terminal import BufferSurface, Terminal  # noqa: E402


def pytest_configure(config: Any) -> None:
    config.addinivalue_line("markers", "gui: tests touching the customtkinter monitor")


# -----------------------------------------------------------------------------
# Shared Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def screen() -> BufferSurface:
    """Native surface of the test terminal."""
    return BufferSurface()


@pytest.fixture
def terminal(screen: BufferSurface) -> Terminal:
    return Terminal(screen)


@pytest.fixture
def monitor() -> BufferMonitor:
    return BufferMonitor()


@pytest.fixture
def peripherals(monitor: BufferMonitor) -> PeripheralRegistry:
    """Registry with one monitor mounted on 'top'."""
    return PeripheralRegistry({"top": monitor})


@pytest.fixture
def host() -> HostInfo:
    return HostInfo(
        identity="computer-7",
        label="reactor-room",
        program="/programs/reactor/main.py",
        platform_version="Python 3.12.0 (Linux)",
    )


@pytest.fixture
def log_dir(tmp_path: Any) -> str:
    return str(tmp_path / "logs")


@pytest.fixture
def make_logger(
        terminal: Terminal,
        peripherals: PeripheralRegistry,
        host: HostInfo,
) -> Iterator[Callable[..., Logger]]:
    """
    Factory building loggers wired to the in-memory collaborators.

    Loggers created through the factory are closed at teardown.
    """
    created = []

    def _make(options: Optional[Dict[str, Any]] = None, **overrides: Any) -> Logger:
        kwargs: Dict[str, Any] = {
            "terminal": terminal,
            "peripherals": peripherals,
            "store": LocalFileStore(),
            "host": host,
        }
        kwargs.update(overrides)
        log = Logger(options, **kwargs)
        created.append(log)
        return log

    yield _make

    for log in created:
        log.close()
