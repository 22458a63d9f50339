from __future__ import annotations

"""
Logger Configuration Models.

Defines the immutable configuration consumed by the logger core together
with its defaults and the builders that turn user options (dicts, JSON
documents, environment variables) into a validated LoggerConfig.
"""

import json
import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple

from cclog.domain.errors import InvalidArgument
from cclog.domain.levels import LogLevel, parse_level
from cclog.utils.merge import deep_merge

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# Constants & Defaults
# -----------------------------------------------------------------------------
DEFAULT_TIMESTAMP_FORMAT = "%H:%M:%S"
DEFAULT_LOG_DIR = "logs"
DEFAULT_MAX_RETAINED_FILES = 10

_TRUE_STRINGS = ("1", "true", "yes", "on")

_TOP_LEVEL_KEYS = ("level", "abbreviate_level", "colors", "timestamp_format", "outputs", "file")
_OUTPUT_KEYS = ("terminal", "monitors", "file")
_FILE_KEYS = ("base_directory", "max_retained_files", "write_banner", "source_label")


def get_default_options() -> Dict[str, Any]:
    """
    Generate the default option tree.

    Returns:
        Dict[str, Any]: Fresh nested dict, safe to mutate.
    """
    return {
        "level": LogLevel.INFO.value,
        "abbreviate_level": True,
        "colors": True,
        "timestamp_format": DEFAULT_TIMESTAMP_FORMAT,
        "outputs": {
            "terminal": True,
            "monitors": [],
            "file": False,
        },
        "file": {
            "base_directory": DEFAULT_LOG_DIR,
            "max_retained_files": DEFAULT_MAX_RETAINED_FILES,
            "write_banner": True,
            "source_label": None,
        },
    }


# -----------------------------------------------------------------------------
# Configuration Models
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class OutputsConfig:
    """
    Enabled sinks.

    Attributes:
        terminal: Print to the process terminal.
        monitors: Ordered monitor device names, without duplicates.
        file: Append to a rotating log file.
    """
    terminal: bool = True
    monitors: Tuple[str, ...] = ()
    file: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "monitors", _unique_names(self.monitors))


@dataclass(frozen=True)
class FileSinkConfig:
    """
    Options of the rotating file sink.

    Attributes:
        base_directory: Directory holding the log files.
        max_retained_files: Upper bound of log files kept in the directory.
        write_banner: Write the descriptive header into fresh files.
        source_label: Label embedded in filenames; inferred when None.
    """
    base_directory: str = DEFAULT_LOG_DIR
    max_retained_files: int = DEFAULT_MAX_RETAINED_FILES
    write_banner: bool = True
    source_label: Optional[str] = None

    def __post_init__(self) -> None:
        if not isinstance(self.base_directory, str):
            raise InvalidArgument(
                f"base_directory must be a string, got {type(self.base_directory).__name__}"
            )
        if self.source_label is not None and not isinstance(self.source_label, str):
            raise InvalidArgument(
                f"source_label must be a string or None, got {type(self.source_label).__name__}"
            )
        if isinstance(self.max_retained_files, bool) or not isinstance(self.max_retained_files, int):
            raise InvalidArgument(
                f"max_retained_files must be an integer, got {self.max_retained_files!r}"
            )
        if self.max_retained_files < 1:
            raise InvalidArgument(
                f"max_retained_files must be >= 1, got {self.max_retained_files}"
            )


@dataclass(frozen=True)
class LoggerConfig:
    """
    Immutable configuration of a logger.

    Attributes:
        level: Minimum level that produces output.
        abbreviate_level: Render "I" instead of "INFO".
        colors: Colorize terminal and monitor output by level.
        timestamp_format: strftime-style format of the line timestamp.
        outputs: Enabled sinks.
        file: File sink options.
    """
    level: LogLevel = LogLevel.INFO
    abbreviate_level: bool = True
    colors: bool = True
    timestamp_format: str = DEFAULT_TIMESTAMP_FORMAT
    outputs: OutputsConfig = field(default_factory=OutputsConfig)
    file: FileSinkConfig = field(default_factory=FileSinkConfig)

    def __post_init__(self) -> None:
        object.__setattr__(self, "level", parse_level(self.level))

    @classmethod
    def from_dict(cls, options: Optional[Mapping[str, Any]] = None) -> "LoggerConfig":
        """
        Build a config by deep-merging options onto the defaults.

        Args:
            options: Nested option mapping (see get_default_options).

        Returns:
            LoggerConfig: Validated configuration.

        Raises:
            InvalidLevel: If the level is not recognized.
            InvalidArgument: If the options are malformed.
        """
        _check_options(options)
        merged = deep_merge(get_default_options(), options)
        return cls._from_tree(merged)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "LoggerConfig":
        """
        Build a config from CCLOG_* environment variables.

        Recognized: CCLOG_LEVEL, CCLOG_DIR, CCLOG_FILE, CCLOG_COLORS,
        CCLOG_MAX_FILES.
        """
        env = os.environ if environ is None else environ
        options: Dict[str, Any] = {}
        if env.get("CCLOG_LEVEL"):
            options["level"] = env["CCLOG_LEVEL"]
        if env.get("CCLOG_COLORS"):
            options["colors"] = env["CCLOG_COLORS"].strip().lower() in _TRUE_STRINGS
        if env.get("CCLOG_FILE"):
            options["outputs"] = {"file": env["CCLOG_FILE"].strip().lower() in _TRUE_STRINGS}
        file_opts: Dict[str, Any] = {}
        if env.get("CCLOG_DIR"):
            file_opts["base_directory"] = env["CCLOG_DIR"]
        if env.get("CCLOG_MAX_FILES"):
            try:
                file_opts["max_retained_files"] = int(env["CCLOG_MAX_FILES"])
            except ValueError:
                raise InvalidArgument(
                    f"CCLOG_MAX_FILES must be an integer, got {env['CCLOG_MAX_FILES']!r}"
                ) from None
        if file_opts:
            options["file"] = file_opts
        return cls.from_dict(options)

    def to_dict(self) -> Dict[str, Any]:
        """Return the nested option tree equivalent to this config."""
        return {
            "level": self.level.value,
            "abbreviate_level": self.abbreviate_level,
            "colors": self.colors,
            "timestamp_format": self.timestamp_format,
            "outputs": {
                "terminal": self.outputs.terminal,
                "monitors": list(self.outputs.monitors),
                "file": self.outputs.file,
            },
            "file": {
                "base_directory": self.file.base_directory,
                "max_retained_files": self.file.max_retained_files,
                "write_banner": self.file.write_banner,
                "source_label": self.file.source_label,
            },
        }

    def merged(self, options: Optional[Mapping[str, Any]]) -> "LoggerConfig":
        """
        Layer new options on top of this config.

        Nested sections merge key by key and the monitor list is appended.

        Args:
            options: Partial nested option mapping.

        Returns:
            LoggerConfig: A new validated configuration.
        """
        _check_options(options)
        return self._from_tree(deep_merge(self.to_dict(), options))

    @classmethod
    def _from_tree(cls, tree: Mapping[str, Any]) -> "LoggerConfig":
        outputs = tree["outputs"]
        file_opts = tree["file"]
        return cls(
            level=parse_level(tree["level"]),
            abbreviate_level=bool(tree["abbreviate_level"]),
            colors=bool(tree["colors"]),
            timestamp_format=str(tree["timestamp_format"]),
            outputs=OutputsConfig(
                terminal=bool(outputs["terminal"]),
                monitors=tuple(outputs["monitors"] or ()),
                file=bool(outputs["file"]),
            ),
            file=FileSinkConfig(
                base_directory=file_opts["base_directory"],
                max_retained_files=file_opts["max_retained_files"],
                write_banner=bool(file_opts["write_banner"]),
                source_label=file_opts["source_label"],
            ),
        )


# -----------------------------------------------------------------------------
# Builders
# -----------------------------------------------------------------------------

def build_config_from_dict(d: Mapping[str, Any]) -> LoggerConfig:
    """
    Build LoggerConfig from a loosely structured dict (e.g. a JSON file).

    Accepted keys (tolerant):
      - the nested option tree understood by LoggerConfig.from_dict
      - log_level / logging_level
      - log_dir / logging_dir
      - log_console / logging_console
      - log_file / logging_file (bool)
    """
    options: Dict[str, Any] = {
        k: v for k, v in d.items() if k in _TOP_LEVEL_KEYS
    }

    level = d.get("logging_level") or d.get("log_level")
    if level:
        options["level"] = level

    outputs: Dict[str, Any] = {}
    console = d.get("logging_console", d.get("log_console"))
    if console is not None:
        outputs["terminal"] = bool(console)
    to_file = d.get("logging_file", d.get("log_file"))
    if to_file is not None:
        outputs["file"] = bool(to_file)
    if outputs:
        options["outputs"] = deep_merge(dict(options.get("outputs") or {}), outputs)

    log_dir = d.get("logging_dir") or d.get("log_dir")
    if log_dir:
        options["file"] = deep_merge(dict(options.get("file") or {}), {"base_directory": log_dir})

    return LoggerConfig.from_dict(options)


def load_config_file(path: str) -> LoggerConfig:
    """
    Load a logger configuration from a JSON document.

    Falls back to the defaults when the file is missing or malformed.

    Args:
        path: Path to the JSON file.

    Returns:
        LoggerConfig: The loaded or default configuration.
    """
    if not os.path.exists(path):
        logger.debug("Config file not found at %s. Using defaults.", path)
        return LoggerConfig()

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        logger.warning("Failed to read logger config %s: %s. Using defaults.", path, e)
        return LoggerConfig()

    if not isinstance(data, dict):
        logger.warning("Corrupted logger config %s. Using defaults.", path)
        return LoggerConfig()

    return build_config_from_dict(data)


# -----------------------------------------------------------------------------
# Private Helpers
# -----------------------------------------------------------------------------

def _unique_names(names: Iterable[str]) -> Tuple[str, ...]:
    if isinstance(names, str):
        raise InvalidArgument("monitors must be a sequence of device names, not a string")
    seen: Dict[str, None] = {}
    for name in names:
        if not isinstance(name, str) or not name:
            raise InvalidArgument(f"Invalid monitor name: {name!r}")
        seen.setdefault(name, None)
    return tuple(seen)


def _check_options(options: Optional[Mapping[str, Any]]) -> None:
    """Reject option trees with unknown keys or non-mapping sections."""
    if options is None:
        return
    if not isinstance(options, Mapping):
        raise InvalidArgument(f"Logger options must be a mapping, got {type(options).__name__}")

    _check_keys(options, _TOP_LEVEL_KEYS, "logger")
    for section, allowed in (("outputs", _OUTPUT_KEYS), ("file", _FILE_KEYS)):
        if section not in options:
            continue
        value = options[section]
        if not isinstance(value, Mapping):
            raise InvalidArgument(f"'{section}' options must be a mapping")
        _check_keys(value, allowed, section)

    monitors = (options.get("outputs") or {}).get("monitors")
    if isinstance(monitors, str):
        raise InvalidArgument("monitors must be a sequence of device names, not a string")


def _check_keys(options: Mapping[str, Any], allowed: Tuple[str, ...], where: str) -> None:
    unknown = sorted(set(options) - set(allowed))
    if unknown:
        raise InvalidArgument(
            f"Unknown {where} option(s): {', '.join(unknown)}",
            details={"allowed": list(allowed)},
        )
