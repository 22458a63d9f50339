from __future__ import annotations

"""
Terminal Surfaces.

A text surface is anything that can print a line in a current text color.
The Terminal front holds the active surface and supports redirection: the
monitor sink temporarily points it at a device, prints, and restores the
previous target. ConsoleSurface renders to the process console through
rich; BufferSurface keeps lines in memory.
"""

import logging
import sys
from abc import ABC, abstractmethod
from typing import IO, List, Optional, Tuple

from rich.console import Console
from rich.errors import StyleSyntaxError
from rich.style import Style

logger = logging.getLogger(__name__)

DEFAULT_TEXT_COLOR = "default"


class TextSurface(ABC):
    """
    Colored line output target.
    """

    @abstractmethod
    def get_text_color(self) -> str:
        pass

    @abstractmethod
    def set_text_color(self, color: str) -> None:
        pass

    @abstractmethod
    def print_line(self, text: str) -> None:
        """Write one line of text in the current color."""
        pass


class ConsoleSurface(TextSurface):
    """
    Process console rendered with rich.

    Markup and highlighting are disabled so log text is printed verbatim.
    """

    def __init__(self, console: Optional[Console] = None, file: Optional[IO[str]] = None) -> None:
        self.console = console or Console(file=file or sys.stdout, highlight=False)
        self._color = DEFAULT_TEXT_COLOR

    def get_text_color(self) -> str:
        return self._color

    def set_text_color(self, color: str) -> None:
        self._color = color

    def print_line(self, text: str) -> None:
        self.console.print(
            text,
            style=self._style(),
            markup=False,
            highlight=False,
            emoji=False,
            soft_wrap=True,
        )

    def _style(self) -> Optional[Style]:
        if self._color == DEFAULT_TEXT_COLOR:
            return None
        try:
            return Style.parse(self._color)
        except StyleSyntaxError:
            logger.debug("Unknown text color %r, printing uncolored.", self._color)
            return None


class BufferSurface(TextSurface):
    """
    In-memory surface recording (color, text) pairs.
    """

    def __init__(self) -> None:
        self._color = DEFAULT_TEXT_COLOR
        self.lines: List[Tuple[str, str]] = []

    def get_text_color(self) -> str:
        return self._color

    def set_text_color(self, color: str) -> None:
        self._color = color

    def print_line(self, text: str) -> None:
        self.lines.append((self._color, text))

    @property
    def texts(self) -> List[str]:
        return [text for _, text in self.lines]

    def clear(self) -> None:
        self.lines.clear()


class Terminal(TextSurface):
    """
    Redirectable terminal front.

    All TextSurface calls are forwarded to the current target. The native
    surface is the one the terminal was created with.
    """

    def __init__(self, native: Optional[TextSurface] = None) -> None:
        self.native: TextSurface = native or ConsoleSurface()
        self._current: TextSurface = self.native

    @property
    def current(self) -> TextSurface:
        return self._current

    def redirect(self, target: TextSurface) -> TextSurface:
        """
        Point the terminal at a new surface.

        Args:
            target: Surface receiving subsequent output.

        Returns:
            TextSurface: The previous target, to be restored by the caller.
        """
        previous = self._current
        self._current = target
        return previous

    def get_text_color(self) -> str:
        return self._current.get_text_color()

    def set_text_color(self, color: str) -> None:
        self._current.set_text_color(color)

    def print_line(self, text: str) -> None:
        self._current.print_line(text)
