from __future__ import annotations

"""
Fluent Logger Builder.

Accumulates a nested option tree step by step and validates it once, on
build_config() / build().
"""

import copy
from typing import Any, Dict, Optional

from cclog.core.logger import Logger
from cclog.domain.config import LoggerConfig
from cclog.domain.levels import LevelLike, parse_level


class LoggerBuilder:
    """
    Example:
        >>> log = (LoggerBuilder()
        ...        .level("debug")
        ...        .monitor("top")
        ...        .file(base_directory="/logs", max_retained_files=5)
        ...        .build())
    """

    def __init__(self) -> None:
        self._options: Dict[str, Any] = {}

    def level(self, level: LevelLike) -> "LoggerBuilder":
        self._options["level"] = parse_level(level).value
        return self

    def abbreviate(self, enabled: bool = True) -> "LoggerBuilder":
        self._options["abbreviate_level"] = enabled
        return self

    def colors(self, enabled: bool = True) -> "LoggerBuilder":
        self._options["colors"] = enabled
        return self

    def timestamp(self, fmt: str) -> "LoggerBuilder":
        self._options["timestamp_format"] = fmt
        return self

    def terminal(self, enabled: bool = True) -> "LoggerBuilder":
        self._outputs()["terminal"] = enabled
        return self

    def monitor(self, name: str) -> "LoggerBuilder":
        """Add one monitor device name (order is preserved)."""
        self._outputs().setdefault("monitors", []).append(name)
        return self

    def file(
            self,
            enabled: bool = True,
            *,
            base_directory: Optional[str] = None,
            max_retained_files: Optional[int] = None,
            write_banner: Optional[bool] = None,
            source_label: Optional[str] = None,
    ) -> "LoggerBuilder":
        self._outputs()["file"] = enabled
        file_opts = self._options.setdefault("file", {})
        for key, value in (
                ("base_directory", base_directory),
                ("max_retained_files", max_retained_files),
                ("write_banner", write_banner),
                ("source_label", source_label),
        ):
            if value is not None:
                file_opts[key] = value
        return self

    def options(self) -> Dict[str, Any]:
        """Return a copy of the accumulated option tree."""
        return copy.deepcopy(self._options)

    def build_config(self) -> LoggerConfig:
        return LoggerConfig.from_dict(self._options)

    def build(self, **collaborators: Any) -> Logger:
        """
        Construct the Logger.

        Args:
            **collaborators: terminal, peripherals, store, host (see Logger).
        """
        return Logger(self.build_config(), **collaborators)

    def _outputs(self) -> Dict[str, Any]:
        return self._options.setdefault("outputs", {})
