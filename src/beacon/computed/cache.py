# src/beacon/computed/cache.py
"""Single-flight memoization of computed facts for one run.

Many independent consumers request the same derived fact within a run.
The cache guarantees the computation runs once per FactKind per cache, that
every caller observes the same outcome, and that ownership ends with the
RunContext that holds the cache.

Entry lifecycle:
    (absent) --request--> PENDING --success--> RESOLVED
                                  --failure--> FAILED

The pending entry is stored BEFORE the computation gets a chance to run,
so a concurrent request arriving at any later suspension point attaches to
it. RESOLVED and FAILED entries are permanent for the cache's lifetime;
a failure is replayed to every caller, current and future.

Concurrency model: single event loop, cooperative scheduling. The cache is
only ever touched from that loop, so no locking is needed.
"""

from __future__ import annotations

import asyncio
import contextvars
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

import structlog

from beacon.contracts.enums import EntryState, FactKind
from beacon.contracts.errors import ComputedFactCycleError

logger = structlog.get_logger(__name__)

# Kinds currently being computed along this task's chain of requests.
# Tasks copy the context at creation, so a computation started from inside
# another computation sees its parent's chain.
_computing: contextvars.ContextVar[tuple[FactKind, ...]] = contextvars.ContextVar("beacon_computing", default=())


@dataclass(frozen=True, slots=True)
class PendingEntry:
    task: asyncio.Task[Any]

    @property
    def state(self) -> EntryState:
        return EntryState.PENDING


@dataclass(frozen=True, slots=True)
class ResolvedEntry:
    value: Any

    @property
    def state(self) -> EntryState:
        return EntryState.RESOLVED


@dataclass(frozen=True, slots=True)
class FailedEntry:
    error: BaseException

    @property
    def state(self) -> EntryState:
        return EntryState.FAILED


CacheEntry = PendingEntry | ResolvedEntry | FailedEntry


class ComputedFactCache:
    """Typed, run-scoped cache of computed facts keyed by FactKind.

    Consumers never construct one: the RunContext owns it and it is discarded
    with the run. Consumers go through ComputedFact.request().

    Example:
        cache = ComputedFactCache()
        value = await cache.request(FactKind.MAIN_RESOURCE, lambda: compute(...))
    """

    def __init__(self) -> None:
        self._entries: dict[FactKind, CacheEntry] = {}

    def __contains__(self, kind: object) -> bool:
        return kind in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def state(self, kind: FactKind) -> EntryState | None:
        """Current state of ``kind``'s entry, or None if never requested."""
        entry = self._entries.get(kind)
        return entry.state if entry is not None else None

    async def request(self, kind: FactKind, compute: Callable[[], Awaitable[Any]]) -> Any:
        """Return the shared result for ``kind``, starting ``compute`` only on first request.

        Args:
            kind: Fact identity
            compute: Zero-argument factory for the computation coroutine.
                Only invoked on a cache miss.

        Returns:
            The computed value (same object for every caller)

        Raises:
            ComputedFactCycleError: If ``kind`` is already being computed
                further up this request chain
            Exception: Whatever the computation raised, replayed to every caller
        """
        chain = _computing.get()
        if kind in chain:
            raise ComputedFactCycleError(kind.value, tuple(k.value for k in chain))

        entry = self._entries.get(kind)
        if entry is None:
            logger.debug("Computed fact miss", kind=kind.value)
            entry = self._start(kind, compute, chain)
        else:
            logger.debug("Computed fact hit", kind=kind.value, state=entry.state.value)

        if isinstance(entry, ResolvedEntry):
            return entry.value
        if isinstance(entry, FailedEntry):
            raise entry.error
        # shield: a cancelled waiter must not cancel the computation other callers share
        return await asyncio.shield(entry.task)

    def _start(
        self,
        kind: FactKind,
        compute: Callable[[], Awaitable[Any]],
        chain: tuple[FactKind, ...],
    ) -> PendingEntry:
        async def run() -> Any:
            _computing.set((*chain, kind))
            return await compute()

        task = asyncio.ensure_future(run())
        entry = PendingEntry(task)
        self._entries[kind] = entry
        task.add_done_callback(lambda done: self._settle(kind, done))
        return entry

    def _settle(self, kind: FactKind, task: asyncio.Task[Any]) -> None:
        # clear() may have dropped or replaced the entry; only settle our own
        current = self._entries.get(kind)
        if not isinstance(current, PendingEntry) or current.task is not task:
            return
        if task.cancelled():
            self._entries[kind] = FailedEntry(asyncio.CancelledError(f"computation of {kind.value} was cancelled"))
            return
        error = task.exception()
        if error is not None:
            logger.debug("Computed fact failed", kind=kind.value, error=str(error))
            self._entries[kind] = FailedEntry(error)
        else:
            self._entries[kind] = ResolvedEntry(task.result())

    def clear(self) -> None:
        """Drop every entry. Called once at run teardown."""
        self._entries.clear()
