# src/beacon/engine/spans.py
"""OpenTelemetry span factory for collection runs.

Provides structured span creation for collector lifecycles and computed
facts. Falls back to no-op mode when no tracer is configured.

Span Hierarchy:
    run:{run_id}
    ├── collector:{name}
    │   ├── start_instrumentation / before_window
    │   ├── stop_instrumentation / during_window
    │   └── produce_artifact / after_window
    └── fact:{kind}
"""

from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from opentelemetry.trace import Span, Tracer


class NoOpSpan:
    """No-op span for when tracing is disabled."""

    def set_attribute(self, key: str, value: Any) -> None:
        """No-op."""
        pass

    def set_status(self, status: Any) -> None:
        """No-op."""
        pass

    def record_exception(self, exception: BaseException) -> None:
        """No-op."""
        pass

    def is_recording(self) -> bool:
        """Always False for no-op."""
        return False


class SpanFactory:
    """Factory for creating OpenTelemetry spans.

    When no tracer is provided, all span methods return no-op contexts.

    Example:
        factory = SpanFactory(tracer=opentelemetry.trace.get_tracer("beacon"))

        with factory.run_span("run-001", "navigation"):
            with factory.collector_span("InspectorIssues", "produce_artifact"):
                ...
    """

    # Singleton no-op span to avoid repeated allocations
    _NOOP_SPAN = NoOpSpan()

    def __init__(self, tracer: "Tracer | None" = None) -> None:
        self._tracer = tracer

    @property
    def enabled(self) -> bool:
        """Whether tracing is enabled."""
        return self._tracer is not None

    @contextmanager
    def run_span(self, run_id: str, gather_mode: str) -> Iterator["Span | NoOpSpan"]:
        """Create a span for the entire run."""
        if self._tracer is None:
            yield self._NOOP_SPAN
            return

        with self._tracer.start_as_current_span("run") as span:
            span.set_attribute("run.id", run_id)
            span.set_attribute("run.gather_mode", gather_mode)
            yield span

    @contextmanager
    def collector_span(self, collector_name: str, operation: str) -> Iterator["Span | NoOpSpan"]:
        """Create a span for one collector lifecycle call.

        Args:
            collector_name: Artifact name of the collector
            operation: Lifecycle method being invoked
        """
        if self._tracer is None:
            yield self._NOOP_SPAN
            return

        with self._tracer.start_as_current_span(f"collector:{collector_name}") as span:
            span.set_attribute("collector.name", collector_name)
            span.set_attribute("collector.operation", operation)
            yield span

    @contextmanager
    def fact_span(self, kind: str) -> Iterator["Span | NoOpSpan"]:
        """Create a span for a computed-fact computation (cache misses only)."""
        if self._tracer is None:
            yield self._NOOP_SPAN
            return

        with self._tracer.start_as_current_span(f"fact:{kind}") as span:
            span.set_attribute("fact.kind", kind)
            yield span
