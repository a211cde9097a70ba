"""Collection layer: event buffering, network lookup, reconciliation, collectors."""

from beacon.gather.base import BaseCollector, InstrumentedCollector
from beacon.gather.event_buffer import EventBuffer
from beacon.gather.manager import CollectorManager
from beacon.gather.network_index import NetworkRecordIndex
from beacon.gather.reconciler import IssueReconciler

__all__ = [
    "BaseCollector",
    "CollectorManager",
    "EventBuffer",
    "InstrumentedCollector",
    "IssueReconciler",
    "NetworkRecordIndex",
]
