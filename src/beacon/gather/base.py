# src/beacon/gather/base.py
"""Base classes for collectors.

A collector produces exactly one raw artifact per run. The embedding
orchestrator drives it through one of two lifecycles:

Legacy protocol:
    before_window(ctx) -> during_window(ctx) -> after_window(ctx, load_data)

    after_window receives the pass's already-finalized network records and
    event log directly.

Instrumentation protocol:
    start_instrumentation(ctx) -> stop_instrumentation(ctx) -> produce_artifact(ctx)

    produce_artifact receives its network dependency through
    ctx.dependencies (the DevtoolsLog artifact) and derives the records via
    the NetworkRecords computed fact.

BaseCollector is the only place that knows which lifecycle is in use. The
hooks subclasses implement (start_collection, stop_collection,
build_artifact) are protocol-agnostic, so both lifecycles yield identical
artifacts from identical event streams and records.

Calling lifecycle methods out of order, calling them twice, or mixing the two
protocols on one instance raises LifecycleError.

Collector instances are per run: the orchestrator instantiates a fresh one
for every run, so no buffer outlives its run.
"""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any, ClassVar

import structlog

from beacon.computed.network_records import NetworkRecords
from beacon.contracts.artifacts import DEVTOOLS_LOG
from beacon.contracts.enums import CollectionProtocol, CollectorPhase, GatherMode
from beacon.contracts.errors import LifecycleError
from beacon.contracts.events import ProtocolEvent
from beacon.contracts.network import NetworkRecord
from beacon.engine.context import CollectionContext, LoadData
from beacon.gather.event_buffer import EventBuffer

logger = structlog.get_logger(__name__)

_UNSET: Any = object()


class BaseCollector(ABC):
    """Base class for all collectors.

    Class attributes:
        name: Artifact name the collector produces (unique per run)
        supported_modes: Gather modes the collector can run in
        dependencies: Artifact names needed by build_artifact in the
            instrumentation protocol
        plugin_version: Reported alongside the artifact
    """

    name: ClassVar[str]
    supported_modes: ClassVar[frozenset[GatherMode]] = frozenset(GatherMode)
    dependencies: ClassVar[tuple[str, ...]] = ()
    plugin_version: ClassVar[str] = "0.0.0"

    def __init__(self) -> None:
        self._phase = CollectorPhase.IDLE
        self._protocol: CollectionProtocol | None = None
        self._artifact: Any = _UNSET

    @property
    def phase(self) -> CollectorPhase:
        return self._phase

    @property
    def artifact(self) -> Any:
        """The finalized artifact.

        Raises:
            LifecycleError: If the collector has not completed yet
        """
        if self._artifact is _UNSET:
            raise LifecycleError(self.name, "artifact", self._phase.value, detail="artifact not produced yet")
        return self._artifact

    # === Hooks for subclasses ===

    async def start_collection(self, ctx: CollectionContext) -> None:  # noqa: B027
        """Open the instrumentation window. Default: nothing to observe."""

    async def stop_collection(self, ctx: CollectionContext) -> None:  # noqa: B027
        """Close the instrumentation window. Default: nothing to observe."""

    async def on_window(self, ctx: CollectionContext) -> None:  # noqa: B027
        """Legacy-only hook run while the observed activity is in progress."""

    def release_collection(self, ctx: CollectionContext) -> None:  # noqa: B027
        """Drop every hold on the session without talking to it. Must be idempotent."""

    @abstractmethod
    async def build_artifact(self, ctx: CollectionContext, network_records: tuple[NetworkRecord, ...] | None) -> Any:
        """Produce the finalized artifact.

        Args:
            ctx: Context whose dependencies carry DevtoolsLog when declared
            network_records: The run's finalized records, or None if the
                collector does not depend on DevtoolsLog
        """

    # === Legacy protocol ===

    async def before_window(self, ctx: CollectionContext) -> None:
        self._transition(CollectionProtocol.LEGACY, "before_window", CollectorPhase.IDLE)
        with ctx.run.spans.collector_span(self.name, "before_window"):
            self._phase = CollectorPhase.INSTRUMENTING
            await self.start_collection(ctx)

    async def during_window(self, ctx: CollectionContext) -> None:
        self._transition(CollectionProtocol.LEGACY, "during_window", CollectorPhase.INSTRUMENTING)
        with ctx.run.spans.collector_span(self.name, "during_window"):
            await self.on_window(ctx)

    async def after_window(self, ctx: CollectionContext, load_data: LoadData) -> Any:
        self._transition(CollectionProtocol.LEGACY, "after_window", CollectorPhase.INSTRUMENTING)
        with ctx.run.spans.collector_span(self.name, "after_window"):
            self._phase = CollectorPhase.STOPPED
            await self.stop_collection(ctx)
            records = load_data.network_records if DEVTOOLS_LOG in self.dependencies else None
            finalize_ctx = ctx.with_dependencies({**ctx.dependencies, DEVTOOLS_LOG: load_data.event_log})
            return await self._finalize(finalize_ctx, records)

    # === Instrumentation protocol ===

    async def start_instrumentation(self, ctx: CollectionContext) -> None:
        self._transition(CollectionProtocol.INSTRUMENTATION, "start_instrumentation", CollectorPhase.IDLE)
        with ctx.run.spans.collector_span(self.name, "start_instrumentation"):
            self._phase = CollectorPhase.INSTRUMENTING
            await self.start_collection(ctx)

    async def stop_instrumentation(self, ctx: CollectionContext) -> None:
        self._transition(CollectionProtocol.INSTRUMENTATION, "stop_instrumentation", CollectorPhase.INSTRUMENTING)
        with ctx.run.spans.collector_span(self.name, "stop_instrumentation"):
            self._phase = CollectorPhase.STOPPED
            await self.stop_collection(ctx)

    async def produce_artifact(self, ctx: CollectionContext) -> Any:
        self._transition(CollectionProtocol.INSTRUMENTATION, "produce_artifact", CollectorPhase.STOPPED)
        missing = [name for name in self.dependencies if name not in ctx.dependencies]
        if missing:
            raise LifecycleError(self.name, "produce_artifact", self._phase.value, detail=f"unresolved dependencies {missing}")
        with ctx.run.spans.collector_span(self.name, "produce_artifact"):
            records = None
            if DEVTOOLS_LOG in self.dependencies:
                records = await NetworkRecords.request(ctx.dependencies[DEVTOOLS_LOG], ctx.run)
            return await self._finalize(ctx, records)

    # === Failed runs ===

    def abort(self, ctx: CollectionContext) -> None:
        """Release a collector whose run failed before it completed.

        Unsubscribes and closes the window without sending protocol commands.
        A collector that never started or already completed is left alone.
        """
        if self._phase not in (CollectorPhase.INSTRUMENTING, CollectorPhase.STOPPED):
            return
        logger.debug("Collector aborted", collector=self.name, phase=self._phase.value)
        self._phase = CollectorPhase.STOPPED
        self.release_collection(ctx)

    # === Internals ===

    def _transition(self, protocol: CollectionProtocol, operation: str, required: CollectorPhase) -> None:
        if self._protocol is not None and self._protocol != protocol:
            raise LifecycleError(
                self.name,
                operation,
                self._phase.value,
                detail=f"collector is driven by the {self._protocol.value} protocol",
            )
        if self._phase != required:
            raise LifecycleError(self.name, operation, self._phase.value)
        self._protocol = protocol
        logger.debug("Collector lifecycle call", collector=self.name, operation=operation, protocol=protocol.value)

    async def _finalize(self, ctx: CollectionContext, records: tuple[NetworkRecord, ...] | None) -> Any:
        artifact = await self.build_artifact(ctx, records)
        self._artifact = artifact
        self._phase = CollectorPhase.COMPLETE
        return artifact


class InstrumentedCollector(BaseCollector):
    """Collector that buffers protocol events during its instrumentation window.

    Subclasses declare the events to subscribe to and the enable/disable
    commands, and may override to_event() to translate or skip raw events.

    Window open: buffer opens, handlers subscribe, enable command is sent.
    Window close: disable command is sent (events delivered while awaiting
    its acknowledgment are still buffered), handlers unsubscribe, buffer closes.
    Abort after a failed run: handlers unsubscribe and the buffer closes, with
    no disable command.
    """

    event_names: ClassVar[tuple[str, ...]] = ()
    enable_command: ClassVar[str | None] = None
    disable_command: ClassVar[str | None] = None

    def __init__(self) -> None:
        super().__init__()
        self._buffer = EventBuffer(owner=self.name)
        self._handlers = {event_name: self._make_handler(event_name) for event_name in self.event_names}
        self._subscribed = False

    @property
    def buffer(self) -> EventBuffer:
        return self._buffer

    def to_event(self, method: str, params: Mapping[str, Any]) -> ProtocolEvent | None:
        """Translate a raw transport event. Return None to skip it."""
        return ProtocolEvent.from_protocol(method, params)

    def _make_handler(self, event_name: str) -> Any:
        def handle(params: Mapping[str, Any]) -> None:
            event = self.to_event(event_name, params)
            if event is not None:
                self._buffer.record(event)

        return handle

    async def start_collection(self, ctx: CollectionContext) -> None:
        self._buffer.open()
        for event_name, handler in self._handlers.items():
            ctx.session.on(event_name, handler)
        self._subscribed = True
        if self.enable_command is not None:
            await ctx.session.send_command(self.enable_command)

    async def stop_collection(self, ctx: CollectionContext) -> None:
        if self.disable_command is not None:
            await ctx.session.send_command(self.disable_command)
        self._unsubscribe(ctx)
        self._buffer.close()

    def release_collection(self, ctx: CollectionContext) -> None:
        self._unsubscribe(ctx)
        if self._buffer.is_open:
            self._buffer.close()

    def _unsubscribe(self, ctx: CollectionContext) -> None:
        if not self._subscribed:
            return
        for event_name, handler in self._handlers.items():
            ctx.session.off(event_name, handler)
        self._subscribed = False
