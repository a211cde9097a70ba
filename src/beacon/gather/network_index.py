# src/beacon/gather/network_index.py
"""Request-id lookup over a run's finalized network records."""

from collections.abc import Iterable, Iterator, Mapping
from types import MappingProxyType

from beacon.contracts.network import NetworkRecord


class NetworkRecordIndex:
    """Read-only mapping from request id to its finalized NetworkRecord.

    Built in a single pass. If two records share a request id, the later one
    wins. A run should never produce such duplicates, but the policy is
    fixed so lookups stay deterministic.

    A missing id is not an error: requests that were filtered, cancelled, or
    fell outside the observation window simply have no record.
    """

    __slots__ = ("_records",)

    def __init__(self, records: Iterable[NetworkRecord]) -> None:
        by_id: dict[str, NetworkRecord] = {}
        for record in records:
            by_id[record.request_id] = record
        self._records: Mapping[str, NetworkRecord] = MappingProxyType(by_id)

    def lookup(self, request_id: str | None) -> NetworkRecord | None:
        """Return the record for ``request_id``, or None if it was never observed."""
        if request_id is None:
            return None
        return self._records.get(request_id)

    def __contains__(self, request_id: object) -> bool:
        return request_id in self._records

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[str]:
        return iter(self._records)
