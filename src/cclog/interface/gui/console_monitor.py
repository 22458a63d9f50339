from __future__ import annotations

"""
Windowed Monitor Device.

A read-only, terminal-like text view that behaves as a monitor peripheral:
mount it in a PeripheralRegistry and list its name in the logger outputs
to mirror log lines into a desktop window.
"""

from typing import Any, Dict, Optional

import customtkinter as ctk

from cclog.infra.peripherals import MONITOR_TYPE
from cclog.infra.terminal import DEFAULT_TEXT_COLOR

BASE_FONT_SIZE = 10

# Level color tokens that are not valid Tk color names
_TK_COLORS: Dict[str, str] = {
    "grey70": "#b3b3b3",
    "bright_green": "#55ff55",
    "yellow": "#e5e510",
    "red": "#f14c4c",
}

# -----------------------------------------------------------------------------
# MONITOR VIEW CLASS
# -----------------------------------------------------------------------------

class ConsoleMonitor(ctk.CTkFrame):
    """
    Monitor-capable console frame.

    Utilizes a monospaced text buffer; every printed line is tagged with
    the text color active at print time.
    """

    peripheral_type = MONITOR_TYPE

    def __init__(self, master: Any, **kwargs: Any):
        """
        Initialize the console view.

        Args:
            master: Parent UI container.
        """
        super().__init__(master, corner_radius=10, fg_color="transparent", **kwargs)
        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(0, weight=1)

        self._color = DEFAULT_TEXT_COLOR
        self._scale = 1.0

        self.textbox = ctk.CTkTextbox(self, state="disabled", font=("Consolas", BASE_FONT_SIZE))
        self.textbox.grid(row=0, column=0, sticky="nsew")

        self.btn_copy = ctk.CTkButton(self, text="Copy", command=self._copy_logs)
        self.btn_copy.grid(row=1, column=0, pady=10, sticky="e")

    # -------------------------------------------------------------------------
    # Monitor interface
    # -------------------------------------------------------------------------

    def set_text_scale(self, scale: float) -> None:
        self._scale = float(scale)
        self.textbox.configure(font=("Consolas", max(1, round(BASE_FONT_SIZE * self._scale))))

    def get_text_color(self) -> str:
        return self._color

    def set_text_color(self, color: str) -> None:
        self._color = color

    def print_line(self, text: str) -> None:
        """
        Append one line in the current color.

        Handles state transitions to keep the buffer read-only to the user
        while allowing programmatic writes.
        """
        tag = self._color_tag()
        self.textbox.configure(state="normal")
        self.textbox.insert("end", text + "\n", tag)
        self.textbox.see("end")
        self.textbox.configure(state="disabled")

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _color_tag(self) -> Optional[str]:
        if self._color == DEFAULT_TEXT_COLOR:
            return None
        tag = f"fg_{self._color}"
        self.textbox.tag_config(tag, foreground=_TK_COLORS.get(self._color, self._color))
        return tag

    def _copy_logs(self) -> None:
        """
        Synchronize the entire console buffer to the system clipboard.
        """
        self.master.clipboard_clear()
        self.master.clipboard_append(self.textbox.get("1.0", "end"))
