# src/beacon/computed/base.py
"""Base class for computed facts.

A computed fact is a pure function of raw artifacts (and other computed
facts) whose result is shared by every consumer in a run. Subclasses
declare their FactKind and implement compute(); consumers only ever call
request().

Example:
    class MainResource(ComputedFact[MainResourceInput, NetworkRecord | NotApplicable]):
        kind = FactKind.MAIN_RESOURCE

        @classmethod
        async def compute(cls, data, context):
            ...

    record = await MainResource.request(MainResourceInput(log, url), run_context)
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, ClassVar, Generic, TypeVar

from beacon.contracts.enums import FactKind

if TYPE_CHECKING:
    from beacon.engine.context import RunContext

InputT = TypeVar("InputT")
ResultT = TypeVar("ResultT")


class ComputedFact(ABC, Generic[InputT, ResultT]):
    """A derived value computed at most once per RunContext."""

    kind: ClassVar[FactKind]

    def __init_subclass__(cls, **kwargs: object) -> None:
        super().__init_subclass__(**kwargs)
        if "kind" not in cls.__dict__:
            raise TypeError(f"{cls.__name__} must declare a FactKind as class attribute 'kind'")

    @classmethod
    @abstractmethod
    async def compute(cls, data: InputT, context: RunContext) -> ResultT:
        """Derive the fact from ``data``. Only called on a cache miss."""

    @classmethod
    async def request(cls, data: InputT, context: RunContext) -> ResultT:
        """Return the run's shared result for this fact, computing it if needed."""

        async def compute() -> ResultT:
            with context.spans.fact_span(cls.kind.value):
                return await cls.compute(data, context)

        result: ResultT = await context.computed_cache.request(cls.kind, compute)
        return result
