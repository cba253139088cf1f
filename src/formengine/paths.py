"""Field path resolution against the caller-owned model.

Paths are dot/bracket strings ("user.name", "items[0].sku") or lists of
segments (["items", 0, "sku"]). Reads tolerate missing intermediate keys;
writes create them.
"""

import re
from typing import Any

from formengine.types import FieldPath

_SEGMENT = re.compile(r"([^.\[\]]+)|\[(\d+)\]")


def split_path(path: FieldPath) -> list[str | int]:
    """Split a field path into key (str) and index (int) segments.

    Raises:
        ValueError: If the path is empty
    """
    if isinstance(path, (list, tuple)):
        segments = list(path)
    else:
        segments = []
        for match in _SEGMENT.finditer(path):
            key, index = match.groups()
            segments.append(int(index) if index is not None else key)
    if not segments:
        raise ValueError(f"Empty field path: {path!r}")
    return segments


def join_path(path: FieldPath) -> str:
    """Canonical string form of a path ("items[0].sku")."""
    if isinstance(path, str):
        path = split_path(path)
    parts: list[str] = []
    for segment in path:
        if isinstance(segment, int):
            parts.append(f"[{segment}]")
        elif parts:
            parts.append(f".{segment}")
        else:
            parts.append(str(segment))
    return "".join(parts)


def _step(container: Any, segment: str | int) -> Any:
    if isinstance(container, dict):
        return container.get(segment)
    if isinstance(container, (list, tuple)) and isinstance(segment, int):
        if -len(container) <= segment < len(container):
            return container[segment]
        return None
    return None


def get_value(model: Any, path: FieldPath) -> Any:
    """Read the value at `path`; missing intermediates resolve to None."""
    current = model
    for segment in split_path(path):
        if current is None:
            return None
        current = _step(current, segment)
    return current


def set_value(model: dict[str, Any], path: FieldPath, value: Any) -> None:
    """Write `value` at `path`, creating intermediate containers as needed.

    An intermediate missing before an integer segment becomes a list,
    otherwise a dict. Lists are padded with None up to the target index.

    Raises:
        TypeError: If an intermediate value is a scalar
    """
    segments = split_path(path)
    current: Any = model
    for segment, following in zip(segments, segments[1:]):
        child = _step(current, segment)
        if child is None:
            child = [] if isinstance(following, int) else {}
            _assign(current, segment, child)
        elif not isinstance(child, (dict, list)):
            raise TypeError(
                f"Cannot set {join_path(segments)}: '{segment}' holds a "
                f"{type(child).__name__}"
            )
        current = child
    _assign(current, segments[-1], value)


def _assign(container: Any, segment: str | int, value: Any) -> None:
    if isinstance(container, list):
        if not isinstance(segment, int):
            raise TypeError(f"List index must be an integer, got {segment!r}")
        if segment >= len(container):
            container.extend([None] * (segment + 1 - len(container)))
        container[segment] = value
    elif isinstance(container, dict):
        container[segment] = value
    else:
        raise TypeError(f"Cannot assign into {type(container).__name__}")
