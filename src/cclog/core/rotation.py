from __future__ import annotations

"""
Log File Rotation.

Derives timestamp-sortable log filenames, enforces the retained-file cap of
a log directory and writes the descriptive banner into fresh files.
RotatingLogFile owns the open handle used by the file sink.
"""

import logging
import os
import platform
import re
import socket
import sys
import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import IO, List, Optional

from cclog import version
from cclog.domain.errors import SinkUnavailable
from cclog.domain.levels import LogLevel
from cclog.infra.fs import FileStore, safe_mkdir

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# Constants
# -----------------------------------------------------------------------------
LOG_EXTENSION = ".log"
LOG_FILE_RE = re.compile(r"^\d+_.+\.log$")
BANNER_RULE = "=" * 50
_STAMP_WIDTH = 13
_GENERIC_ENTRYPOINTS = ("main", "__main__", "init", "startup")

_last_stamp: int = 0


# -----------------------------------------------------------------------------
# Host Metadata
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class HostInfo:
    """
    Facts about the running host printed in the banner.

    Attributes:
        identity: Host identity (hostname).
        label: Human label of the host.
        program: Path of the running program.
        platform_version: Interpreter / platform version string.
    """
    identity: str
    label: str
    program: str
    platform_version: str


@dataclass(frozen=True)
class BannerMetadata:
    """Everything write_banner renders."""
    host: HostInfo
    source_label: str
    level: LogLevel
    created: datetime = field(default_factory=datetime.now)


def describe_host() -> HostInfo:
    """Collect HostInfo from the current process."""
    hostname = socket.gethostname() or "unknown"
    program = os.path.abspath(sys.argv[0]) if sys.argv and sys.argv[0] else "<interactive>"
    return HostInfo(
        identity=hostname,
        label=os.environ.get("CCLOG_HOST_LABEL") or hostname,
        program=program,
        platform_version=f"Python {platform.python_version()} ({platform.system() or 'unknown'})",
    )


def infer_source_label(program_path: str) -> str:
    """
    Derive a source label from the running program's path.

    The file stem is used, unless it is a generic entry point such as
    main.py, in which case the enclosing directory names the program.

    Args:
        program_path: Path of the running program.

    Returns:
        str: Sanitized label.
    """
    normalized = program_path.replace("\\", "/").rstrip("/")
    parts = [p for p in normalized.split("/") if p]
    if not parts:
        return sanitize_label("")
    stem = os.path.splitext(parts[-1])[0]
    if stem in _GENERIC_ENTRYPOINTS and len(parts) > 1:
        stem = parts[-2]
    return sanitize_label(stem)


def sanitize_label(label: Optional[str]) -> str:
    """Restrict a label to [A-Za-z0-9_-]; empty labels become "log"."""
    cleaned = re.sub(r"[^A-Za-z0-9_-]+", "_", (label or "").strip()).strip("_")
    return cleaned or "log"


# -----------------------------------------------------------------------------
# Rotation API
# -----------------------------------------------------------------------------

def next_filename(source_label: Optional[str]) -> str:
    """
    Return "<epoch-ms>_<label>.log" with a strictly increasing stamp.

    The stamp is zero-padded so lexicographic order equals creation order.
    """
    global _last_stamp
    stamp = max(int(time.time() * 1000), _last_stamp + 1)
    _last_stamp = stamp
    return f"{stamp:0{_STAMP_WIDTH}d}_{sanitize_label(source_label)}{LOG_EXTENSION}"


def list_log_files(store: FileStore, directory: str) -> List[str]:
    """Return the log filenames of a directory, oldest first."""
    if not store.exists(directory):
        return []
    return sorted(name for name in store.list_dir(directory) if LOG_FILE_RE.match(name))


def enforce_retention(store: FileStore, directory: str, max_files: int) -> List[str]:
    """
    Delete the oldest log files until fewer than max_files remain.

    Leaves room for exactly one new file. A missing directory is created
    and treated as empty.

    Args:
        store: Storage accessor.
        directory: Log directory.
        max_files: Retained-file cap (>= 1).

    Returns:
        List[str]: Names of the deleted files.

    Raises:
        OSError: If the directory cannot be created or listed.
    """
    if not store.exists(directory):
        store.make_dir(directory)
        return []

    files = list_log_files(store, directory)
    deleted: List[str] = []
    while files and len(files) >= max_files:
        oldest = files.pop(0)
        store.delete(store.join(directory, oldest))
        deleted.append(oldest)

    if deleted:
        logger.debug("Rotation: removed %d old log file(s) from %s", len(deleted), directory)
    return deleted


def write_banner(handle: IO[str], metadata: BannerMetadata) -> None:
    """
    Write the fixed multi-line header of a fresh log file.

    Args:
        handle: Open text handle positioned at the start of the file.
        metadata: Banner facts.
    """
    host = metadata.host
    lines = [
        BANNER_RULE,
        f"Date:     {metadata.created.strftime('%Y-%m-%d %H:%M:%S')}",
        f"Host:     {host.identity}",
        f"Label:    {host.label}",
        f"Source:   {metadata.source_label} ({host.program})",
        f"Platform: {host.platform_version}; {version.describe()}",
        f"Level:    {metadata.level.value.upper()}",
        BANNER_RULE,
    ]
    handle.write("\n".join(lines) + "\n")
    handle.flush()


# -----------------------------------------------------------------------------
# Handle Owner
# -----------------------------------------------------------------------------

class RotatingLogFile:
    """
    Exclusive owner of the current log file handle.
    """

    def __init__(
            self,
            store: FileStore,
            directory: str,
            source_label: str,
            max_files: int,
            banner: Optional[BannerMetadata] = None,
    ) -> None:
        self._store = store
        self.directory = directory
        self.source_label = sanitize_label(source_label)
        self.max_files = max_files
        self.banner = banner
        self.path: Optional[str] = None
        self._handle: Optional[IO[str]] = None

    @property
    def is_open(self) -> bool:
        return self._handle is not None

    def open(self) -> str:
        """
        Clean old files, open a new log file and write the banner if needed.

        Returns:
            str: Path of the opened file.

        Raises:
            SinkUnavailable: If the directory or file cannot be prepared.
        """
        self.close()
        ok, err = safe_mkdir(self._store, self.directory)
        if not ok:
            raise SinkUnavailable(
                f"Could not create log directory {self.directory}: {err}",
                details={"directory": self.directory},
            )
        try:
            enforce_retention(self._store, self.directory, self.max_files)
            path = self._store.join(self.directory, next_filename(self.source_label))
            handle = self._store.open_append(path)
        except OSError as e:
            raise SinkUnavailable(
                f"Could not open log file in {self.directory}: {e}",
                details={"directory": self.directory},
            ) from e

        try:
            if self.banner is not None and self._store.size(path) == 0:
                write_banner(handle, self.banner)
        except OSError as e:
            handle.close()
            raise SinkUnavailable(f"Could not write banner to {path}: {e}") from e

        self._handle = handle
        self.path = path
        logger.debug("Rotation: opened %s", path)
        return path

    def write_line(self, line: str) -> None:
        """
        Append one line and flush.

        Raises:
            SinkUnavailable: If no handle is open.
            OSError: If the write fails.
        """
        if self._handle is None:
            raise SinkUnavailable("Log file handle is not open")
        self._handle.write(line + "\n")
        self._handle.flush()

    def close(self) -> None:
        """Flush and release the handle; idempotent."""
        handle, self._handle = self._handle, None
        if handle is None:
            return
        try:
            handle.flush()
        finally:
            handle.close()
