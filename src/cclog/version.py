from __future__ import annotations

"""
Build Metadata.

Holds the four opaque strings stamped by the release tooling. Local
checkouts carry the placeholder values below.
"""

VERSION: str = "0.1.0"
COMMIT: str = "unknown"
BRANCH: str = "unknown"
BUILD_DATE: str = "unknown"


def describe() -> str:
    """Return the one-line identification printed by entrypoints."""
    return f"cclog {VERSION} (commit: {COMMIT}, branch: {BRANCH})"
