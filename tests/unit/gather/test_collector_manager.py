# tests/unit/gather/test_collector_manager.py
"""Tests for pluggy-based collector registration."""

import pytest

from beacon.contracts.artifacts import DEVTOOLS_LOG, INSPECTOR_ISSUES
from beacon.contracts.enums import GatherMode
from beacon.contracts.network import NetworkRecord
from beacon.engine.context import CollectionContext
from beacon.gather.base import BaseCollector
from beacon.gather.collectors import BUILTIN_COLLECTORS, InspectorIssuesCollector
from beacon.gather.hookspecs import hookimpl
from beacon.gather.manager import CollectorManager


class NavigationOnlyCollector(BaseCollector):
    name = "NavigationOnly"
    supported_modes = frozenset({GatherMode.NAVIGATION})
    plugin_version = "2.1.0"

    async def build_artifact(self, ctx: CollectionContext, network_records: tuple[NetworkRecord, ...] | None) -> None:
        return None


class ExtraCollectors:
    @hookimpl
    def beacon_get_collectors(self) -> list[type[BaseCollector]]:
        return [NavigationOnlyCollector]


class ClashingCollectors:
    @hookimpl
    def beacon_get_collectors(self) -> list[type[BaseCollector]]:
        return [InspectorIssuesCollector]


class TestCollectorManager:
    def test_builtin_collectors_registered(self, collector_manager: CollectorManager) -> None:
        assert collector_manager.get_collector_by_name(INSPECTOR_ISSUES) is InspectorIssuesCollector
        assert set(collector_manager.get_collectors()) == set(BUILTIN_COLLECTORS)

    def test_unknown_name_returns_none(self, collector_manager: CollectorManager) -> None:
        assert collector_manager.get_collector_by_name("Nope") is None

    def test_register_additional_plugin(self, collector_manager: CollectorManager) -> None:
        collector_manager.register(ExtraCollectors())

        assert collector_manager.get_collector_by_name("NavigationOnly") is NavigationOnlyCollector

    def test_duplicate_name_rejected_and_rolled_back(self, collector_manager: CollectorManager) -> None:
        with pytest.raises(ValueError, match="Duplicate collector name: 'InspectorIssues'"):
            collector_manager.register(ClashingCollectors())

        # the clashing plugin was unregistered again; a later refresh still works
        collector_manager.register(ExtraCollectors())
        assert collector_manager.get_collector_by_name(INSPECTOR_ISSUES) is InspectorIssuesCollector

    def test_inspector_issues_declares_devtools_dependency(self, collector_manager: CollectorManager) -> None:
        collector_cls = collector_manager.get_collector_by_name(INSPECTOR_ISSUES)

        assert collector_cls is not None
        assert collector_cls.dependencies == (DEVTOOLS_LOG,)
