# src/beacon/computed/main_resource.py
"""MainResource: the top-level document request for the run's target URL.

Resolution policy depends on the run's gather mode:

- navigation: a page load to the target URL happened, so a missing document
  request means collection went wrong. Raises MainResourceNotFound.
- timespan: the interval may never have loaded a document at all. A missing
  match resolves to NotApplicable, which score-bearing consumers turn into a
  neutral outcome.

When the target URL redirected, the record returned is the final hop of
the chain (the one that carried the document), not the redirect response.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING
from urllib.parse import urldefrag

from beacon.computed.base import ComputedFact
from beacon.computed.network_records import NetworkRecords
from beacon.contracts.artifacts import DevtoolsLog, NotApplicable
from beacon.contracts.enums import FactKind, GatherMode
from beacon.contracts.errors import MainResourceNotFound
from beacon.contracts.network import NetworkRecord
from beacon.network.records import chain_request_id

if TYPE_CHECKING:
    from beacon.engine.context import RunContext

DOCUMENT_RESOURCE_TYPE = "Document"


def _final_hop(records: tuple[NetworkRecord, ...], position: int) -> NetworkRecord:
    record = records[position]
    final_id = chain_request_id(record.request_id)
    if final_id == record.request_id:
        return record
    return next((later for later in records[position + 1 :] if later.request_id == final_id), record)


@dataclass(frozen=True, slots=True)
class MainResourceInput:
    devtools_log: DevtoolsLog
    url: str


class MainResource(ComputedFact[MainResourceInput, NetworkRecord | NotApplicable]):
    kind = FactKind.MAIN_RESOURCE

    @classmethod
    async def compute(cls, data: MainResourceInput, context: RunContext) -> NetworkRecord | NotApplicable:
        records = await NetworkRecords.request(data.devtools_log, context)
        target = urldefrag(data.url).url

        for position, record in enumerate(records):
            if record.resource_type == DOCUMENT_RESOURCE_TYPE and record.url_without_fragment == target:
                return _final_hop(records, position)

        if context.gather_mode == GatherMode.TIMESPAN:
            return NotApplicable(reason=f"No document request for {data.url} was observed during the timespan")
        raise MainResourceNotFound(data.url)
