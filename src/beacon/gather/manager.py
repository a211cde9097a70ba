# src/beacon/gather/manager.py
"""Collector manager for discovery, registration, and lookup.

Uses pluggy for hook-based collector registration.
"""

from typing import Any

import pluggy

from beacon.gather.base import BaseCollector
from beacon.gather.hookspecs import PROJECT_NAME, BeaconCollectorSpec


class CollectorManager:
    """Manages collector discovery, registration, and lookup.

    Usage:
        manager = CollectorManager()
        manager.register_builtin_collectors()

        collector_cls = manager.get_collector_by_name("InspectorIssues")
    """

    def __init__(self) -> None:
        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(BeaconCollectorSpec)
        self._collectors: dict[str, type[BaseCollector]] = {}

    def register_builtin_collectors(self) -> None:
        """Register the collectors shipped with Beacon. Call once at startup."""
        from beacon.gather.collectors import BuiltinCollectors

        self.register(BuiltinCollectors())

    def register(self, plugin: Any) -> None:
        """Register a plugin object implementing beacon_get_collectors.

        Raises:
            ValueError: If two collectors share a name
        """
        self._pm.register(plugin)
        try:
            self._refresh_cache()
        except ValueError:
            self._pm.unregister(plugin)
            raise

    def _refresh_cache(self) -> None:
        new_collectors: dict[str, type[BaseCollector]] = {}
        for collectors in self._pm.hook.beacon_get_collectors():
            for cls in collectors:
                name = cls.name
                if name in new_collectors:
                    raise ValueError(f"Duplicate collector name: '{name}'. Already registered by {new_collectors[name].__name__}")
                new_collectors[name] = cls
        self._collectors = new_collectors

    def get_collectors(self) -> list[type[BaseCollector]]:
        """Get all registered collector classes."""
        return list(self._collectors.values())

    def get_collector_by_name(self, name: str) -> type[BaseCollector] | None:
        """Get collector class by artifact name."""
        return self._collectors.get(name)
