"""Computed facts: derived values memoized per run with single-flight semantics."""

from beacon.computed.base import ComputedFact
from beacon.computed.cache import ComputedFactCache, FailedEntry, PendingEntry, ResolvedEntry
from beacon.computed.main_resource import MainResource, MainResourceInput
from beacon.computed.network_records import NetworkRecords
from beacon.computed.viewport_meta import ViewportMeta, parse_viewport_content

__all__ = [
    "ComputedFact",
    "ComputedFactCache",
    "FailedEntry",
    "MainResource",
    "MainResourceInput",
    "NetworkRecords",
    "PendingEntry",
    "ResolvedEntry",
    "ViewportMeta",
    "parse_viewport_content",
]
