"""Shared contracts for cross-boundary data types.

All dataclasses, enums, and exceptions that cross subsystem boundaries are
defined here. This package is a LEAF MODULE with no outbound dependencies
to core/gather/computed/engine.

Import patterns:
    # Contracts (lightweight, no heavy dependencies)
    from beacon.contracts import GatherMode, NetworkRecord, ProtocolEvent

    # Settings classes (from core, pulls in pydantic/dynaconf)
    from beacon.core.config import GatherSettings
"""

from beacon.contracts.artifacts import (
    DEVTOOLS_LOG,
    INSPECTOR_ISSUES,
    LINK_ELEMENTS,
    META_ELEMENTS,
    DevtoolsLog,
    InspectorIssues,
    LinkElement,
    MetaElement,
    NotApplicable,
    ViewportMetaResult,
)
from beacon.contracts.enums import (
    CollectionProtocol,
    CollectorPhase,
    EntryState,
    FactKind,
    GatherMode,
    IssueCategory,
)
from beacon.contracts.errors import (
    ArtifactAlreadyRecordedError,
    ComputedFactCycleError,
    DependencyGraphError,
    FactResolutionError,
    LifecycleError,
    MainResourceNotFound,
    PageEvaluationError,
)
from beacon.contracts.events import ProtocolEvent
from beacon.contracts.network import NetworkRecord, ResponseHeader
from beacon.contracts.session import EventHandler, ProtocolSession

__all__ = [
    "DEVTOOLS_LOG",
    "INSPECTOR_ISSUES",
    "LINK_ELEMENTS",
    "META_ELEMENTS",
    "ArtifactAlreadyRecordedError",
    "CollectionProtocol",
    "CollectorPhase",
    "ComputedFactCycleError",
    "DependencyGraphError",
    "DevtoolsLog",
    "EntryState",
    "EventHandler",
    "FactKind",
    "FactResolutionError",
    "GatherMode",
    "InspectorIssues",
    "IssueCategory",
    "LifecycleError",
    "LinkElement",
    "MainResourceNotFound",
    "MetaElement",
    "NetworkRecord",
    "NotApplicable",
    "PageEvaluationError",
    "ProtocolEvent",
    "ProtocolSession",
    "ResponseHeader",
    "ViewportMetaResult",
]
