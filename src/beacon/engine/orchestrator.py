# src/beacon/engine/orchestrator.py
"""GatherOrchestrator: drives collectors through one run.

The orchestrator picks one of two runner strategies from settings.protocol.
Runners are the only code that knows which lifecycle it is driving;
EventBuffer, IssueReconciler and the computed facts never branch on it.

Legacy run:
    before_window (DevtoolsLog recorder first) -> during_window -> activity
    -> recorder.after_window -> NetworkRecords -> after_window(load_data) per collector

Instrumentation run:
    start_instrumentation (dependency order) -> activity
    -> stop_instrumentation (reverse order) -> produce_artifact (dependency order)

If a run fails part way, every collector that had opened a window is
aborted: its handlers leave the session and its buffer closes.

Every run gets a fresh RunContext and fresh collector instances. The
context's computed-fact cache is discarded when the run ends, whether it
succeeds or fails. Errors propagate unchanged; nothing is retried here.
"""

from collections.abc import Awaitable, Callable, Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol
from uuid import uuid4

import structlog

from beacon.computed.network_records import NetworkRecords
from beacon.contracts.artifacts import DEVTOOLS_LOG
from beacon.contracts.enums import CollectionProtocol, GatherMode
from beacon.contracts.session import ProtocolSession
from beacon.core.config import GatherSettings, load_settings
from beacon.core.logging import configure_logging
from beacon.engine.context import CollectionContext, LoadData, RunContext
from beacon.engine.dependency_graph import CollectorGraph
from beacon.engine.spans import SpanFactory
from beacon.gather.base import BaseCollector
from beacon.gather.collectors.devtools_log import DevtoolsLogCollector
from beacon.gather.manager import CollectorManager

logger = structlog.get_logger(__name__)

Activity = Callable[[RunContext], Awaitable[None]]


async def _no_activity(run: RunContext) -> None:
    return None


@dataclass(frozen=True)
class GatherResult:
    """Artifacts produced by one run, keyed by artifact name."""

    run_id: str
    gather_mode: GatherMode
    protocol: CollectionProtocol
    artifacts: Mapping[str, Any]


class CollectionRunner(Protocol):
    """Strategy for driving collectors through one lifecycle."""

    async def collect(self, run: RunContext, collectors: Sequence[BaseCollector], activity: Activity) -> None: ...


class LegacyRunner:
    """Drives the legacy before/during/after window lifecycle.

    The DevtoolsLog collector doubles as the pass recorder: its event log and
    the NetworkRecords derived from it become the LoadData every other
    collector finalizes against. If DevtoolsLog is not enabled for the run,
    a private recorder is used and its log is not stored as an artifact.
    """

    async def collect(self, run: RunContext, collectors: Sequence[BaseCollector], activity: Activity) -> None:
        ctx = CollectionContext(run=run)
        recorder = next((c for c in collectors if c.name == DEVTOOLS_LOG), None)
        store_log = recorder is not None
        if recorder is None:
            recorder = DevtoolsLogCollector()
        others = [c for c in collectors if c is not recorder]

        try:
            for collector in (recorder, *others):
                await collector.before_window(ctx)
            for collector in (recorder, *others):
                await collector.during_window(ctx)

            await activity(run)

            event_log = await recorder.after_window(ctx, LoadData())
            if store_log:
                run.artifacts.record(DEVTOOLS_LOG, event_log)
            network_records = await NetworkRecords.request(event_log, run)
            load_data = LoadData(network_records=network_records, event_log=event_log)

            for collector in others:
                artifact = await collector.after_window(ctx, load_data)
                run.artifacts.record(collector.name, artifact)
        finally:
            _abort_unfinished(ctx, (recorder, *others))


class InstrumentationRunner:
    """Drives the start/stop instrumentation lifecycle over a dependency graph."""

    async def collect(self, run: RunContext, collectors: Sequence[BaseCollector], activity: Activity) -> None:
        ctx = CollectionContext(run=run)
        graph = CollectorGraph(collectors)
        ordered = graph.topological_order()

        try:
            for collector in ordered:
                await collector.start_instrumentation(ctx)

            await activity(run)

            for collector in reversed(ordered):
                await collector.stop_instrumentation(ctx)

            for collector in ordered:
                dependencies = {name: run.artifacts[name] for name in graph.dependencies_of(collector.name)}
                artifact = await collector.produce_artifact(ctx.with_dependencies(dependencies))
                run.artifacts.record(collector.name, artifact)
        finally:
            _abort_unfinished(ctx, ordered)


def _abort_unfinished(ctx: CollectionContext, collectors: Sequence[BaseCollector]) -> None:
    # Session handlers never outlive the run.
    for collector in collectors:
        collector.abort(ctx)


_RUNNERS: dict[CollectionProtocol, CollectionRunner] = {
    CollectionProtocol.LEGACY: LegacyRunner(),
    CollectionProtocol.INSTRUMENTATION: InstrumentationRunner(),
}


class GatherOrchestrator:
    """Runs the configured collectors against one inspected session.

    Example:
        manager = CollectorManager()
        manager.register_builtin_collectors()
        orchestrator = GatherOrchestrator(settings, manager)

        async def navigate(run: RunContext) -> None:
            await run.session.send_command("Page.navigate", {"url": run.url})

        result = await orchestrator.run(session, navigate)
        issues = result.artifacts["InspectorIssues"]
    """

    def __init__(
        self,
        settings: GatherSettings,
        manager: CollectorManager,
        *,
        span_factory: SpanFactory | None = None,
    ) -> None:
        self._settings = settings
        self._manager = manager
        self._spans = span_factory or SpanFactory()

    @property
    def settings(self) -> GatherSettings:
        return self._settings

    @classmethod
    def from_config(
        cls,
        config_path: Path,
        *,
        manager: CollectorManager | None = None,
        span_factory: SpanFactory | None = None,
    ) -> "GatherOrchestrator":
        """Load settings, apply their logging section, and build an orchestrator.

        Without a manager, one with the built-in collectors is created.

        Raises:
            FileNotFoundError: If config_path does not exist
            ValidationError: If the settings are invalid
        """
        settings = load_settings(config_path)
        configure_logging(settings.logging)
        if manager is None:
            manager = CollectorManager()
            manager.register_builtin_collectors()
        return cls(settings, manager, span_factory=span_factory)

    def _instantiate_collectors(self) -> list[BaseCollector]:
        collectors: list[BaseCollector] = []
        for name in self._settings.collectors:
            collector_cls = self._manager.get_collector_by_name(name)
            if collector_cls is None:
                raise ValueError(f"Unknown collector: '{name}'")
            if self._settings.gather_mode not in collector_cls.supported_modes:
                logger.info("Skipping collector unsupported in gather mode", collector=name, gather_mode=self._settings.gather_mode.value)
                continue
            collectors.append(collector_cls())
        return collectors

    async def run(
        self,
        session: ProtocolSession,
        activity: Activity | None = None,
        *,
        run_id: str | None = None,
    ) -> GatherResult:
        """Collect every enabled artifact for one run.

        Args:
            session: Transport for the inspected session
            activity: The observed navigation or user interaction. Runs while
                every instrumentation window is open.
            run_id: Identifier for logs and spans (generated if omitted)

        Returns:
            GatherResult with a read-only artifact mapping
        """
        settings = self._settings
        run = RunContext(
            run_id=run_id or uuid4().hex,
            session=session,
            gather_mode=settings.gather_mode,
            url=settings.url,
            spans=self._spans,
        )
        collectors = self._instantiate_collectors()
        runner = _RUNNERS[settings.protocol]

        with structlog.contextvars.bound_contextvars(run_id=run.run_id):
            logger.info(
                "Collection run started",
                gather_mode=settings.gather_mode.value,
                protocol=settings.protocol.value,
                collectors=[c.name for c in collectors],
            )
            try:
                with self._spans.run_span(run.run_id, settings.gather_mode.value):
                    await runner.collect(run, collectors, activity or _no_activity)
                logger.info("Collection run finished", artifacts=list(run.artifacts))
                return GatherResult(
                    run_id=run.run_id,
                    gather_mode=settings.gather_mode,
                    protocol=settings.protocol,
                    artifacts=run.artifacts.snapshot(),
                )
            finally:
                run.teardown()
