# src/beacon/computed/network_records.py
"""NetworkRecords: the run's finalized network records, derived once from its DevtoolsLog."""

from __future__ import annotations

from typing import TYPE_CHECKING

from beacon.computed.base import ComputedFact
from beacon.contracts.artifacts import DevtoolsLog
from beacon.contracts.enums import FactKind
from beacon.contracts.network import NetworkRecord
from beacon.network.records import records_from_event_log

if TYPE_CHECKING:
    from beacon.engine.context import RunContext


class NetworkRecords(ComputedFact[DevtoolsLog, tuple[NetworkRecord, ...]]):
    kind = FactKind.NETWORK_RECORDS

    @classmethod
    async def compute(cls, data: DevtoolsLog, context: RunContext) -> tuple[NetworkRecord, ...]:
        return records_from_event_log(data)
