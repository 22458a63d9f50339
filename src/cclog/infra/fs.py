from __future__ import annotations

"""
FileSystem Infrastructure Layer.

Abstract storage interface consumed by the rotating file sink, a local
implementation over the 'os' module, and the path helpers used to resolve
the default log directory.
"""

import logging
import os
from abc import ABC, abstractmethod
from typing import IO, List, Optional, Tuple

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# GLOBAL CONSTANTS
# -----------------------------------------------------------------------------

APP_DIR_NAME = "cclog"
UNIX_APP_DIR_NAME = ".cclog"

# -----------------------------------------------------------------------------
# STORAGE INTERFACE
# -----------------------------------------------------------------------------


class FileStore(ABC):
    """
    Minimal file storage contract required by the log file sink.
    """

    @abstractmethod
    def exists(self, path: str) -> bool:
        pass

    @abstractmethod
    def make_dir(self, path: str) -> None:
        """Create a directory hierarchy; no-op if it already exists."""
        pass

    @abstractmethod
    def list_dir(self, path: str) -> List[str]:
        """Return the entry names of a directory (not full paths)."""
        pass

    @abstractmethod
    def delete(self, path: str) -> None:
        pass

    @abstractmethod
    def size(self, path: str) -> int:
        """Return the size in bytes of a file, 0 if it does not exist."""
        pass

    @abstractmethod
    def open_append(self, path: str) -> IO[str]:
        """Open a text handle in append mode, creating the file if needed."""
        pass

    @abstractmethod
    def read_text(self, path: str) -> str:
        pass

    def join(self, *parts: str) -> str:
        return os.path.join(*parts)


class LocalFileStore(FileStore):
    """
    FileStore backed by the local filesystem.
    """

    def __init__(self, encoding: str = "utf-8") -> None:
        self._encoding = encoding

    def exists(self, path: str) -> bool:
        return os.path.exists(path)

    def make_dir(self, path: str) -> None:
        os.makedirs(path, exist_ok=True)

    def list_dir(self, path: str) -> List[str]:
        return [
            name for name in os.listdir(path)
            if os.path.isfile(os.path.join(path, name))
        ]

    def delete(self, path: str) -> None:
        os.remove(path)

    def size(self, path: str) -> int:
        try:
            return os.path.getsize(path)
        except OSError:
            return 0

    def open_append(self, path: str) -> IO[str]:
        return open(path, "a", encoding=self._encoding)

    def read_text(self, path: str) -> str:
        # errors='replace' keeps partially corrupted log files readable
        with open(path, "r", encoding=self._encoding, errors="replace") as f:
            return f.read()


# -----------------------------------------------------------------------------
# LOG DIRECTORY RESOLUTION
# -----------------------------------------------------------------------------

def get_user_data_dir(create: bool = True) -> str:
    """
    Per-user data directory of the library.

    - Windows: %LOCALAPPDATA%/cclog (or %APPDATA%/cclog)
    - Elsewhere: ~/.cclog

    Args:
        create: Create the directory when missing. Failures are traced and
            left to the first writer to report.

    Returns:
        str: Absolute path.
    """
    base = None
    if os.name == "nt":
        base = os.environ.get("LOCALAPPDATA") or os.environ.get("APPDATA")
    if base:
        path = os.path.join(base, APP_DIR_NAME)
    else:
        path = os.path.join(os.path.expanduser("~"), UNIX_APP_DIR_NAME)

    if create:
        ok, err = safe_mkdir(LocalFileStore(), path)
        if not ok:
            logger.debug("Could not create data directory %s: %s", path, err)
    return os.path.abspath(path)


def get_default_log_dir() -> str:
    """Log directory used when the file sink has no base_directory."""
    return os.path.join(get_user_data_dir(), "logs")


def normalize_path(path: Optional[str], fallback: str) -> str:
    """
    Expand "~" and $VARS / %VARS% and make a directory path absolute.

    Blank input resolves to fallback.
    """
    raw = (path or "").strip() or fallback
    return os.path.abspath(os.path.expandvars(os.path.expanduser(raw)))


def safe_mkdir(store: FileStore, path: str) -> Tuple[bool, Optional[str]]:
    """
    Create a directory hierarchy through a store without raising.

    Returns:
        Tuple[bool, Optional[str]]: (created or already present, error text).
    """
    try:
        store.make_dir(path)
    except OSError as e:
        return False, str(e)
    return True, None
