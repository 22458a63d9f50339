from __future__ import annotations

"""
Unit tests for the windowed monitor device.

The Tk widgets are replaced by mocks so the tests run headless; only the
monitor contract (scale, color, print) is exercised.
"""

from unittest.mock import MagicMock

import pytest

pytest.importorskip("customtkinter")

from cclog.infra.peripherals import PeripheralRegistry  # noqa: E402
from cclog.interface.gui.console_monitor import ConsoleMonitor  # noqa: E402


@pytest.fixture
def console() -> ConsoleMonitor:
    view = ConsoleMonitor.__new__(ConsoleMonitor)
    view._color = "default"
    view._scale = 1.0
    view.textbox = MagicMock()
    return view


@pytest.mark.gui
def test_console_monitor_passes_validation(console: ConsoleMonitor) -> None:
    registry = PeripheralRegistry({"window": console})
    assert registry.validate_monitor("window") == (True, console)


@pytest.mark.gui
def test_print_line_toggles_read_only_state(console: ConsoleMonitor) -> None:
    console.print_line("hello")

    console.textbox.insert.assert_called_once_with("end", "hello\n", None)
    states = [c.kwargs.get("state") for c in console.textbox.configure.call_args_list]
    assert states == ["normal", "disabled"]


@pytest.mark.gui
def test_colored_line_uses_tag(console: ConsoleMonitor) -> None:
    console.set_text_color("red")
    console.print_line("boom")

    console.textbox.tag_config.assert_called_once_with("fg_red", foreground="#f14c4c")
    console.textbox.insert.assert_called_once_with("end", "boom\n", "fg_red")
    assert console.get_text_color() == "red"


@pytest.mark.gui
def test_text_scale_resizes_font(console: ConsoleMonitor) -> None:
    console.set_text_scale(1.5)
    console.textbox.configure.assert_called_once_with(font=("Consolas", 15))


@pytest.mark.gui
def test_copy_logs(console: ConsoleMonitor) -> None:
    console.master = MagicMock()
    console.textbox.get.return_value = "line\n"

    console._copy_logs()

    console.master.clipboard_clear.assert_called_once()
    console.master.clipboard_append.assert_called_once_with("line\n")
