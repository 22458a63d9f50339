from __future__ import annotations

"""
Message Formatter.

Turns the variadic arguments of a log call into one human-readable line.
A leading printf-style template is applied to as many arguments as it has
conversion specifiers; everything else is serialized and appended. Any
substitution failure degrades to plain concatenation and never raises.
"""

import json
import re
from typing import Any, Sequence

# Conversion specifiers of the %-operator; "%%" escapes are matched so they can be skipped
_SPECIFIER_RE = re.compile(
    r"%(?:%|(?:\([^)]*\))?[#0\- +]*(?:\*|\d+)?(?:\.(?:\*|\d+))?[hlL]?[diouxXeEfFgGcrsa])"
)


def count_specifiers(template: str) -> int:
    """Count the positional conversion specifiers of a %-style template."""
    count = 0
    for match in _SPECIFIER_RE.finditer(template):
        token = match.group(0)
        if token == "%%":
            continue
        count += 1 + token.count("*")
    return count


def serialize(value: Any) -> str:
    """
    Render one value for a log line.

    Strings pass through untouched; mappings and sequences become a nested
    JSON literal so structured values stay legible.

    Args:
        value: Any value.

    Returns:
        str: Readable representation.
    """
    if isinstance(value, str):
        return value
    if isinstance(value, (dict, list, tuple, set, frozenset)):
        try:
            return json.dumps(_jsonable(value), default=str, ensure_ascii=False)
        except (TypeError, ValueError, RecursionError):
            return repr(value)
    return str(value)


def format_message(*args: Any) -> str:
    """
    Format the arguments of a log call.

    Example:
        >>> format_message("%d of %s", 3, "files", {"a": 1})
        '3 of files {"a": 1}'
        >>> format_message("value: %d items", "not-a-number")
        'value: %d items not-a-number'

    Returns:
        str: The rendered message ("" for no arguments).
    """
    if not args:
        return ""

    first = args[0]
    if isinstance(first, str) and "%" in first:
        consumed = count_specifiers(first)
        try:
            head = first % tuple(args[1:1 + consumed])
        except Exception:
            return _concat(args)
        return " ".join([head] + [safe_serialize(a) for a in args[1 + consumed:]])

    return _concat(args)


def safe_serialize(value: Any) -> str:
    """serialize() that never raises; unprintable values render as a placeholder."""
    try:
        return serialize(value)
    except Exception:
        return f"<unprintable {type(value).__name__}>"


def _concat(args: Sequence[Any]) -> str:
    return " ".join(safe_serialize(a) for a in args)


def _jsonable(value: Any) -> Any:
    """Convert sets (unordered, not JSON) into sorted lists, recursively."""
    if isinstance(value, dict):
        return {k if isinstance(k, (str, int, float, bool)) or k is None else str(k): _jsonable(v)
                for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    if isinstance(value, (set, frozenset)):
        items = [_jsonable(v) for v in value]
        try:
            return sorted(items)
        except TypeError:
            return sorted(items, key=repr)
    return value
