# src/beacon/gather/reconciler.py
"""Reconcile buffered inspector issues against the run's network records.

Instrumentation frequently reports issues tied to network activity that is
later filtered out of the finalized record set (non-network resource types,
cross-session noise). Only issues anchored to a request the run actually
observed can be attached to a concrete URL, so anchored issues whose request
has no record are dropped. This is a filter, not a deduplication: two issues
anchored to two distinct observed requests are both kept.
"""

from collections.abc import Iterable

import structlog

from beacon.contracts.artifacts import InspectorIssues, IssueDetails
from beacon.contracts.enums import IssueCategory
from beacon.contracts.events import ProtocolEvent
from beacon.gather.network_index import NetworkRecordIndex

logger = structlog.get_logger(__name__)


class IssueReconciler:
    """Bucket issue events by category and drop those anchored to unobserved requests.

    Rules, applied per event in arrival order:
    1. Events whose category is not an IssueCategory are ignored.
    2. Events with a request_ref survive only if the index resolves it.
    3. Events without a request_ref always survive.

    The result always carries every category key.
    """

    def reconcile(self, events: Iterable[ProtocolEvent], index: NetworkRecordIndex) -> InspectorIssues:
        buckets: dict[IssueCategory, list[IssueDetails]] = {category: [] for category in IssueCategory}
        unresolved = 0
        ignored = 0

        for event in events:
            try:
                category = IssueCategory(event.category)
            except ValueError:
                ignored += 1
                continue

            if event.request_ref is not None and index.lookup(event.request_ref) is None:
                unresolved += 1
                continue

            buckets[category].append(event.payload)

        if unresolved or ignored:
            logger.debug(
                "Filtered inspector issues",
                unresolved_requests=unresolved,
                unknown_categories=ignored,
            )
        return InspectorIssues(buckets)
