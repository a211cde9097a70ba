# src/beacon/engine/context.py
"""Run-scoped and collector-scoped execution contexts.

RunContext is created at run start and discarded at run end. It owns the
computed-fact cache and the artifact store; neither is ever shared across
runs. Within a run they are read by many consumers and written only by
the single-flight computation path and the orchestrator respectively.

CollectionContext is what a collector receives. In the instrumentation
protocol its ``dependencies`` carry the already-produced artifacts the
collector declared it needs.
"""

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from beacon.computed.cache import ComputedFactCache
from beacon.contracts.enums import GatherMode
from beacon.contracts.errors import ArtifactAlreadyRecordedError
from beacon.contracts.events import ProtocolEvent
from beacon.contracts.network import NetworkRecord
from beacon.contracts.session import ProtocolSession
from beacon.engine.spans import SpanFactory


class ArtifactStore(Mapping[str, Any]):
    """Write-once mapping of artifact name to finalized raw artifact."""

    def __init__(self) -> None:
        self._artifacts: dict[str, Any] = {}

    def record(self, name: str, artifact: Any) -> None:
        """Store ``artifact`` under ``name``.

        Raises:
            ArtifactAlreadyRecordedError: If ``name`` was already recorded
        """
        if name in self._artifacts:
            raise ArtifactAlreadyRecordedError(name, self._artifacts[name])
        self._artifacts[name] = artifact

    def __getitem__(self, name: str) -> Any:
        return self._artifacts[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._artifacts)

    def __len__(self) -> int:
        return len(self._artifacts)

    def snapshot(self) -> Mapping[str, Any]:
        """Read-only copy of the current contents."""
        return MappingProxyType(dict(self._artifacts))


@dataclass
class RunContext:
    """Per-run container: transport handle, mode, target URL, cache, artifacts.

    Example:
        run = RunContext(run_id="run-001", session=session, gather_mode=GatherMode.NAVIGATION,
                         url="https://example.com/")
        record = await MainResource.request(MainResourceInput(log, run.url), run)
    """

    run_id: str
    session: ProtocolSession
    gather_mode: GatherMode
    url: str
    computed_cache: ComputedFactCache = field(default_factory=ComputedFactCache)
    artifacts: ArtifactStore = field(default_factory=ArtifactStore)
    spans: SpanFactory = field(default_factory=SpanFactory)

    def teardown(self) -> None:
        """Discard the computed-fact cache at run end."""
        self.computed_cache.clear()


@dataclass(frozen=True)
class CollectionContext:
    """Context handed to every collector lifecycle call."""

    run: RunContext
    dependencies: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))

    @property
    def session(self) -> ProtocolSession:
        return self.run.session

    @property
    def gather_mode(self) -> GatherMode:
        return self.run.gather_mode

    @property
    def url(self) -> str:
        return self.run.url

    def with_dependencies(self, dependencies: Mapping[str, Any]) -> "CollectionContext":
        """Return a copy carrying the resolved dependency artifacts."""
        return CollectionContext(run=self.run, dependencies=MappingProxyType(dict(dependencies)))


@dataclass(frozen=True)
class LoadData:
    """What the legacy protocol hands to after_window: the pass's finalized records and event log."""

    network_records: tuple[NetworkRecord, ...] = ()
    event_log: tuple[ProtocolEvent, ...] = ()
