# src/beacon/core/canonical.py
"""
Canonical JSON serialization for deterministic artifact fingerprints.

Two-phase approach:
1. Normalize: Convert frozen artifact types to JSON-safe primitives (our code)
2. Serialize: Produce deterministic JSON per RFC 8785/JCS (rfc8785 package)

Two artifacts are "bit-for-bit equivalent" exactly when their fingerprints
match, regardless of which collection protocol produced them.

IMPORTANT: NaN and Infinity are strictly REJECTED, not silently converted.
"""

from __future__ import annotations

import dataclasses
import hashlib
import math
from collections.abc import Mapping
from enum import Enum
from typing import Any

import rfc8785

# Version string recorded alongside fingerprints
CANONICAL_VERSION = "sha256-rfc8785-v1"


def _normalize_value(obj: Any) -> Any:
    """Convert a single leaf value to a JSON-safe primitive.

    Raises:
        ValueError: If value is a non-finite float
    """
    if isinstance(obj, float):
        if math.isnan(obj) or math.isinf(obj):
            raise ValueError(f"Cannot canonicalize non-finite float: {obj}. Use None for missing values, not NaN.")
        return obj

    if isinstance(obj, Enum):
        return obj.value

    return obj


def _normalize_for_canonical(data: Any) -> Any:
    """Recursively normalize a data structure for canonical JSON.

    Artifacts expose to_dict(); frozen mappings and tuples are unwrapped;
    plain dataclasses are converted field by field.
    """
    to_dict = getattr(data, "to_dict", None)
    if callable(to_dict):
        return _normalize_for_canonical(to_dict())
    if isinstance(data, Mapping):
        return {str(_normalize_value(k)): _normalize_for_canonical(v) for k, v in data.items()}
    if isinstance(data, list | tuple):
        return [_normalize_for_canonical(v) for v in data]
    if dataclasses.is_dataclass(data) and not isinstance(data, type):
        return {f.name: _normalize_for_canonical(getattr(data, f.name)) for f in dataclasses.fields(data)}
    return _normalize_value(data)


def canonical_json(obj: Any) -> str:
    """Produce canonical JSON for hashing.

    Args:
        obj: Artifact or data structure to serialize

    Returns:
        Canonical JSON string (no whitespace, sorted keys)

    Raises:
        ValueError: If data contains NaN, Infinity, or other non-finite values
        TypeError: If data contains types that cannot be serialized
    """
    normalized = _normalize_for_canonical(obj)
    result: bytes = rfc8785.dumps(normalized)
    return result.decode("utf-8")


def stable_hash(obj: Any, version: str = CANONICAL_VERSION) -> str:
    """Compute stable hash of object.

    Args:
        obj: Data structure to hash
        version: Hash algorithm version

    Returns:
        SHA-256 hex digest of canonical JSON
    """
    canonical = canonical_json(obj)
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()


def artifact_fingerprint(artifact: Any) -> str:
    """Fingerprint a raw artifact for cross-protocol equivalence checks."""
    return stable_hash(artifact)
