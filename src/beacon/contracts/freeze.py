"""Deep immutability helpers for artifact payloads.

Protocol payloads arrive as plain JSON-shaped dicts and lists. Artifacts
must never mutate once finalized, so payloads are frozen on the way in:
mappings become MappingProxyType over a private copy, lists become tuples.
thaw() reverses the transformation for JSON export.
"""

from collections.abc import Mapping
from types import MappingProxyType
from typing import Any


def deep_freeze(value: Any) -> Any:
    """Return a recursively immutable copy of a JSON-shaped value."""
    if isinstance(value, Mapping):
        return MappingProxyType({key: deep_freeze(item) for key, item in value.items()})
    if isinstance(value, list | tuple):
        return tuple(deep_freeze(item) for item in value)
    return value


def thaw(value: Any) -> Any:
    """Return plain dict/list copies of a frozen value (JSON-serializable)."""
    if isinstance(value, Mapping):
        return {key: thaw(item) for key, item in value.items()}
    if isinstance(value, tuple | list):
        return [thaw(item) for item in value]
    return value
