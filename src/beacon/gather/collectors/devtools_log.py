# src/beacon/gather/collectors/devtools_log.py
"""DevtoolsLog: the run's Network domain event log, in arrival order."""

from beacon.contracts.artifacts import DEVTOOLS_LOG, DevtoolsLog
from beacon.contracts.network import NetworkRecord
from beacon.engine.context import CollectionContext
from beacon.gather.base import InstrumentedCollector
from beacon.network.records import NETWORK_EVENTS


class DevtoolsLogCollector(InstrumentedCollector):
    """Buffers every Network event the transport delivers during the window.

    Network is left enabled on stop: other collectors and the transport
    itself may still rely on it.
    """

    name = DEVTOOLS_LOG
    plugin_version = "1.0.0"
    event_names = NETWORK_EVENTS
    enable_command = "Network.enable"

    async def build_artifact(self, ctx: CollectionContext, network_records: tuple[NetworkRecord, ...] | None) -> DevtoolsLog:
        return self.buffer.events
