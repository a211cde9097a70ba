# src/beacon/engine/__init__.py
"""Run execution: contexts, dependency ordering, tracing, orchestration.

The orchestrator lives in beacon.engine.orchestrator and is not re-exported
here, because collectors import the contexts from this package.
"""

from beacon.engine.context import ArtifactStore, CollectionContext, LoadData, RunContext
from beacon.engine.spans import NoOpSpan, SpanFactory

__all__ = [
    "ArtifactStore",
    "CollectionContext",
    "LoadData",
    "NoOpSpan",
    "RunContext",
    "SpanFactory",
]
