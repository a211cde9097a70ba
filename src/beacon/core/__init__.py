# src/beacon/core/__init__.py
"""Core infrastructure: Canonical fingerprints, Configuration, Logging."""

from beacon.core.canonical import (
    CANONICAL_VERSION,
    artifact_fingerprint,
    canonical_json,
    stable_hash,
)
from beacon.core.config import (
    DEFAULT_COLLECTORS,
    GatherSettings,
    LoggingSettings,
    load_settings,
)
from beacon.core.logging import configure_logging, get_logger

__all__ = [
    "CANONICAL_VERSION",
    "DEFAULT_COLLECTORS",
    "GatherSettings",
    "LoggingSettings",
    "artifact_fingerprint",
    "canonical_json",
    "configure_logging",
    "get_logger",
    "load_settings",
    "stable_hash",
]
