from __future__ import annotations

"""
Context Merger.

Flat, override-only merge of the key/value annotations attached to loggers
and log calls, and the bracketed rendering used in log lines.
"""

from typing import Any, Dict, Mapping, Optional

from cclog.core.formatter import safe_serialize
from cclog.domain.errors import InvalidArgument

Context = Dict[str, Any]


def ensure_context(value: Any) -> Optional[Context]:
    """
    Validate a context argument.

    Args:
        value: None or a mapping.

    Returns:
        Optional[Context]: A shallow copy of the mapping, or None.

    Raises:
        InvalidArgument: If value is neither None nor a mapping.
    """
    if value is None:
        return None
    if not isinstance(value, Mapping):
        raise InvalidArgument(
            f"Context must be a mapping, got {type(value).__name__}",
            details={"value": repr(value)},
        )
    return dict(value)


def merge_context(
        base: Optional[Mapping[str, Any]],
        overlay: Optional[Mapping[str, Any]],
) -> Optional[Context]:
    """
    Merge two contexts one level deep; overlay wins on shared keys.

    Inputs are never mutated and the result shares no top-level dict with
    them.

    Returns:
        Optional[Context]: None only when both sides are None.
    """
    if base is None and overlay is None:
        return None
    merged: Context = dict(base) if base is not None else {}
    if overlay is not None:
        merged.update(overlay)
    return merged


def render_context(context: Optional[Mapping[str, Any]]) -> str:
    """Render "[k1=v1,k2=v2]" with sorted keys; empty context renders ""."""
    if not context:
        return ""
    pairs = ",".join(
        f"{safe_serialize(k)}={safe_serialize(context[k])}"
        for k in sorted(context, key=safe_serialize)
    )
    return f"[{pairs}]"
