from __future__ import annotations

"""
Unit tests for Log File Rotation.

Verifies:
1. Sortable, strictly increasing filenames.
2. Retention of at most max_retained_files files per directory.
3. Banner contents and the RotatingLogFile handle lifecycle.
"""

import io
import os
from datetime import datetime
from pathlib import Path
from typing import IO

import pytest

from cclog.core.rotation import (
    BANNER_RULE,
    BannerMetadata,
    HostInfo,
    RotatingLogFile,
    enforce_retention,
    infer_source_label,
    list_log_files,
    next_filename,
    sanitize_label,
    write_banner,
)
from cclog.domain.errors import SinkUnavailable
from cclog.domain.levels import LogLevel
from cclog.infra.fs import LocalFileStore


class _ReadOnlyStore(LocalFileStore):
    """Store whose files can never be opened for writing."""

    def open_append(self, path: str) -> IO[str]:
        raise PermissionError(13, "Permission denied", path)


def _seed(directory: Path, *stamps: int) -> None:
    directory.mkdir(parents=True, exist_ok=True)
    for stamp in stamps:
        (directory / f"{stamp:013d}_seed.log").write_text("old\n", encoding="utf-8")


# -----------------------------------------------------------------------------
# Naming
# -----------------------------------------------------------------------------

def test_filenames_are_sortable_and_strictly_increasing() -> None:
    names = [next_filename("reactor") for _ in range(5)]
    assert names == sorted(names)
    assert len(set(names)) == 5
    assert all(n.endswith("_reactor.log") for n in names)
    assert all(len(n.split("_", 1)[0]) == 13 for n in names)


@pytest.mark.parametrize("raw, expected", [
    ("reactor", "reactor"),
    ("my program!", "my_program"),
    ("", "log"),
    (None, "log"),
    ("../../etc", "etc"),
])
def test_sanitize_label(raw, expected) -> None:
    assert sanitize_label(raw) == expected


@pytest.mark.parametrize("program, expected", [
    ("/programs/miner.py", "miner"),
    ("/programs/reactor/main.py", "reactor"),
    ("C:\\tools\\sorter\\startup.py", "sorter"),
    ("main.py", "main"),
    ("", "log"),
])
def test_infer_source_label(program, expected) -> None:
    assert infer_source_label(program) == expected


# -----------------------------------------------------------------------------
# Retention
# -----------------------------------------------------------------------------

def test_retention_keeps_most_recent_files(tmp_path: Path) -> None:
    """TC-01: 4 existing files, cap 3, one new file -> newest 3 remain."""
    log_dir = tmp_path / "logs"
    _seed(log_dir, 1, 2, 3, 4)
    store = LocalFileStore()

    log_file = RotatingLogFile(store, str(log_dir), "reactor", max_files=3)
    new_path = log_file.open()
    log_file.close()

    remaining = list_log_files(store, str(log_dir))
    assert len(remaining) == 3
    assert remaining[:2] == ["0000000000003_seed.log", "0000000000004_seed.log"]
    assert remaining[-1] == os.path.basename(new_path)


def test_retention_never_exceeds_cap_over_many_rotations(tmp_path: Path) -> None:
    store = LocalFileStore()
    log_dir = str(tmp_path / "logs")

    for _ in range(6):
        log_file = RotatingLogFile(store, log_dir, "loop", max_files=2)
        log_file.open()
        log_file.close()
        assert len(list_log_files(store, log_dir)) <= 2


def test_retention_ignores_foreign_files(tmp_path: Path) -> None:
    log_dir = tmp_path / "logs"
    _seed(log_dir, 1, 2)
    (log_dir / "notes.txt").write_text("keep me", encoding="utf-8")

    deleted = enforce_retention(LocalFileStore(), str(log_dir), 1)

    assert deleted == ["0000000000001_seed.log", "0000000000002_seed.log"]
    assert (log_dir / "notes.txt").exists()


def test_retention_creates_missing_directory(tmp_path: Path) -> None:
    log_dir = tmp_path / "nested" / "logs"
    assert enforce_retention(LocalFileStore(), str(log_dir), 3) == []
    assert log_dir.is_dir()


# -----------------------------------------------------------------------------
# Banner & Handle
# -----------------------------------------------------------------------------

def test_banner_lists_host_facts(host: HostInfo) -> None:
    buffer = io.StringIO()
    meta = BannerMetadata(
        host=host,
        source_label="reactor",
        level=LogLevel.DEBUG,
        created=datetime(2024, 5, 1, 12, 30, 0),
    )

    write_banner(buffer, meta)
    lines = buffer.getvalue().splitlines()

    assert lines[0] == BANNER_RULE
    assert lines[-1] == BANNER_RULE
    assert "Date:     2024-05-01 12:30:00" in lines
    assert "Host:     computer-7" in lines
    assert "Label:    reactor-room" in lines
    assert "Source:   reactor (/programs/reactor/main.py)" in lines
    assert "Level:    DEBUG" in lines
    assert any(line.startswith("Platform: Python 3.12.0 (Linux); cclog ") for line in lines)


def test_open_writes_banner_then_lines(tmp_path: Path, host: HostInfo) -> None:
    meta = BannerMetadata(host=host, source_label="reactor", level=LogLevel.INFO)
    log_file = RotatingLogFile(LocalFileStore(), str(tmp_path), "reactor", 5, banner=meta)

    path = log_file.open()
    log_file.write_line("[I] [12:00:00] hello")
    log_file.close()

    content = Path(path).read_text(encoding="utf-8").splitlines()
    assert content[0] == BANNER_RULE
    assert content[-1] == "[I] [12:00:00] hello"


def test_close_is_idempotent_and_blocks_writes(tmp_path: Path) -> None:
    log_file = RotatingLogFile(LocalFileStore(), str(tmp_path), "x", 5)
    log_file.open()
    log_file.close()
    log_file.close()

    assert log_file.is_open is False
    with pytest.raises(SinkUnavailable):
        log_file.write_line("late")


def test_open_failure_raises_sink_unavailable(tmp_path: Path) -> None:
    log_file = RotatingLogFile(_ReadOnlyStore(), str(tmp_path), "x", 5)

    with pytest.raises(SinkUnavailable) as exc_info:
        log_file.open()

    assert exc_info.value.code == "SINK_UNAVAILABLE"
    assert log_file.is_open is False
