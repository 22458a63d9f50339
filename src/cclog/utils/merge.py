from __future__ import annotations

"""
Structural Merge for Configuration.

Recursive merge used only when configuration options are layered on top of
one another. Nested mappings merge key by key, sequences are appended and
scalars are replaced. Context annotations use the flat merge in
cclog.core.context instead.
"""

import copy
from typing import Any, Dict, Mapping, Optional


def deep_merge(
        target: Optional[Dict[str, Any]],
        source: Optional[Mapping[str, Any]],
) -> Optional[Dict[str, Any]]:
    """
    Merge source into target recursively.

    Example:
        >>> deep_merge({"arr": [1, 2], "d": {"x": 1}}, {"arr": [3], "d": {"y": 2}})
        {'arr': [1, 2, 3], 'd': {'x': 1, 'y': 2}}

    Args:
        target: Mapping to merge into (modified in place).
        source: Mapping whose keys overwrite or extend the target.

    Returns:
        Optional[Dict[str, Any]]: The merged target, or a copy of source
        when target is None.

    Raises:
        TypeError: If either side is not a mapping.
    """
    if source is None:
        return target
    if target is None:
        return copy.deepcopy(dict(source))

    if not isinstance(target, dict):
        raise TypeError("Target must be a mapping")
    if not isinstance(source, Mapping):
        raise TypeError("Source must be a mapping")

    for key, value in source.items():
        current = target.get(key)
        if isinstance(value, Mapping) and isinstance(current, dict):
            target[key] = deep_merge(current, value)
        elif _is_sequence(value) and _is_sequence(current):
            target[key] = list(current) + copy.deepcopy(list(value))
        else:
            target[key] = copy.deepcopy(value)

    return target


def _is_sequence(value: Any) -> bool:
    return isinstance(value, (list, tuple))
