"""
Dot-path navigation over nested JSON/XML-shaped data.

Trees are the map-of-maps/lists form produced by
:mod:`vendor_status.documents`. Field lookups deliberately consider only the
first element of any list met along the way, so ``outages.outage`` reads the
first ``outages`` entry. Callers that need every element resolve the
collection one level up with :func:`resolve_collection` and iterate there.
"""

from collections.abc import Iterator, Mapping, Sequence
from typing import Any, Optional

from ..core.exceptions import PathResolutionError

_MISSING = object()

SERVICE_HINT_KEYS = ("name", "title", "serviceName", "status", "state", "operational")


def _is_sequence(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray))


def _as_index(segment: str) -> Optional[int]:
    try:
        return int(segment)
    except ValueError:
        return None


def _split(path: str) -> list[str]:
    return [segment for segment in path.split(".") if segment != ""]


def _step(current: Any, segment: str) -> Any:
    if isinstance(current, Mapping):
        return current.get(segment, _MISSING)

    if _is_sequence(current):
        index = _as_index(segment)
        if index is not None:
            return current[index] if 0 <= index < len(current) else _MISSING
        if current:
            return _step(current[0], segment)

    return _MISSING


def resolve(root: Any, path: Optional[str]) -> Any:
    """
    Resolve a dot-separated field path against a nested structure.

    Each segment is looked up as a key; on a list, an integer segment indexes
    positionally and any other segment is applied to the first element. When
    the final value is a non-empty list, its first element is returned.

    Args:
        root: Nested dicts/lists to navigate
        path: Dot-separated path such as ``outages.outage``

    Returns:
        The resolved value, or None when any segment is missing. Never raises.
    """
    if not path:
        return root

    current = root
    for segment in _split(path):
        if current is None:
            return None
        current = _step(current, segment)
        if current is _MISSING:
            return None

    if _is_sequence(current) and len(current) > 0:
        return current[0]
    return current


def resolve_collection(root: Any, path: str) -> list[Any]:
    """
    Resolve the path to a collection of items without collapsing lists.

    Args:
        root: Nested dicts/lists to navigate
        path: Dot-separated path, integer segments index into lists

    Returns:
        The list found at ``path``; a single object is wrapped in a list and
        an explicit null yields an empty list.

    Raises:
        PathResolutionError: If any segment cannot be followed
    """
    current = root
    for segment in _split(path):
        if isinstance(current, Mapping) and segment in current:
            current = current[segment]
            continue

        index = _as_index(segment)
        if index is not None and _is_sequence(current) and 0 <= index < len(current):
            current = current[index]
            continue

        if isinstance(current, Mapping):
            available = sorted(str(key) for key in current.keys())
        elif _is_sequence(current):
            available = [str(i) for i in range(len(current))]
        else:
            available = []
        raise PathResolutionError(
            f"Path {path} not found at part '{segment}'",
            details={"path": path, "segment": segment, "available": available},
        )

    if current is None:
        return []
    if _is_sequence(current):
        return list(current)
    return [current]


def discover_collections(root: Any, prefix: str = "") -> Iterator[tuple[str, list[Any]]]:
    """Yield every list found in the tree together with its dot path."""
    if isinstance(root, Mapping):
        items = ((str(key), value) for key, value in root.items())
    elif _is_sequence(root):
        items = ((str(i), value) for i, value in enumerate(root))
    else:
        return

    for key, value in items:
        current_path = f"{prefix}.{key}" if prefix else key
        if _is_sequence(value):
            yield current_path, list(value)
        if isinstance(value, (Mapping, list, tuple)):
            yield from discover_collections(value, current_path)


def find_service_collection(root: Any) -> tuple[Optional[str], list[Any]]:
    """
    Pick the largest list whose first item looks like a service record.

    Returns:
        ``(path, items)``, or ``(None, [])`` when nothing qualifies
    """
    best_path: Optional[str] = None
    best: list[Any] = []

    for path, items in discover_collections(root):
        if len(items) <= len(best):
            continue
        sample = items[0]
        if isinstance(sample, Mapping) and any(key in sample for key in SERVICE_HINT_KEYS):
            best_path, best = path, items

    return best_path, best
