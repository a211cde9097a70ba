# src/beacon/engine/dependency_graph.py
"""Collector dependency graph for the instrumentation protocol.

Uses NetworkX for:
- Acyclicity validation
- Topological ordering (ties broken by configured collector order)

An edge A -> B means B reads A's artifact in produce_artifact.
"""

from __future__ import annotations

from collections.abc import Sequence

import networkx as nx

from beacon.contracts.errors import DependencyGraphError
from beacon.gather.base import BaseCollector


class CollectorGraph:
    """Dependency DAG over the collectors enabled for one run."""

    def __init__(self, collectors: Sequence[BaseCollector]) -> None:
        self._graph: nx.DiGraph[str] = nx.DiGraph()
        self._collectors: dict[str, BaseCollector] = {}
        self._position: dict[str, int] = {}

        for position, collector in enumerate(collectors):
            self._collectors[collector.name] = collector
            self._position[collector.name] = position
            self._graph.add_node(collector.name)

        for collector in collectors:
            for dependency in collector.dependencies:
                if dependency not in self._collectors:
                    raise DependencyGraphError(
                        f"Collector '{collector.name}' depends on '{dependency}', which no enabled collector produces"
                    )
                self._graph.add_edge(dependency, collector.name)

        self.validate()

    def validate(self) -> None:
        """Raise DependencyGraphError if the dependencies form a cycle."""
        if nx.is_directed_acyclic_graph(self._graph):
            return
        try:
            cycle = nx.find_cycle(self._graph)
            cycle_str = " -> ".join(f"{edge[0]}" for edge in cycle)
            raise DependencyGraphError(f"Collector dependencies contain a cycle: {cycle_str}")
        except nx.NetworkXNoCycle:
            raise DependencyGraphError("Collector dependencies contain a cycle") from None

    def topological_order(self) -> list[BaseCollector]:
        """Collectors ordered so every dependency precedes its dependents."""
        names = nx.lexicographical_topological_sort(self._graph, key=lambda name: self._position[name])
        return [self._collectors[name] for name in names]

    def dependencies_of(self, name: str) -> list[str]:
        return sorted(self._graph.predecessors(name), key=lambda dep: self._position[dep])
