# src/beacon/gather/hookspecs.py
"""pluggy hook specifications for Beacon collectors.

Collector packages implement these hooks to register themselves.

Usage (implementing a collector plugin):
    from beacon.gather.hookspecs import hookimpl

    class MyCollectors:
        @hookimpl  # NOT @hookspec - that's for defining specs
        def beacon_get_collectors(self):
            return [MyCollector]

Note: @hookspec defines the hook interface (done here).
      @hookimpl marks plugin implementations of those hooks.
"""

from typing import TYPE_CHECKING

import pluggy

if TYPE_CHECKING:
    from beacon.gather.base import BaseCollector

# Project name for pluggy
PROJECT_NAME = "beacon"

hookspec = pluggy.HookspecMarker(PROJECT_NAME)
hookimpl = pluggy.HookimplMarker(PROJECT_NAME)


class BeaconCollectorSpec:
    """Hook specifications for collector plugins."""

    @hookspec
    def beacon_get_collectors(self) -> list[type["BaseCollector"]]:  # type: ignore[empty-body]
        """Return collector classes.

        Returns:
            List of BaseCollector subclasses (not instances)
        """
