# src/beacon/gather/collectors/inspector_issues.py
"""InspectorIssues: browser-reported issues anchored to requests the run observed.

Subscribes to ``Audits.issueAdded`` for the instrumentation window. Each
issue is reduced to its category's details payload; the request it is
anchored to (if any) becomes the event's request_ref. At artifact time the
buffered issues are reconciled against the run's network records.
"""

from collections.abc import Mapping
from typing import Any

import structlog

from beacon.contracts.artifacts import DEVTOOLS_LOG, INSPECTOR_ISSUES, InspectorIssues
from beacon.contracts.enums import IssueCategory
from beacon.contracts.events import ProtocolEvent
from beacon.contracts.network import NetworkRecord
from beacon.engine.context import CollectionContext
from beacon.gather.base import InstrumentedCollector
from beacon.gather.network_index import NetworkRecordIndex
from beacon.gather.reconciler import IssueReconciler

logger = structlog.get_logger(__name__)

ISSUE_ADDED = "Audits.issueAdded"


class InspectorIssuesCollector(InstrumentedCollector):
    name = INSPECTOR_ISSUES
    plugin_version = "1.0.0"
    dependencies = (DEVTOOLS_LOG,)
    event_names = (ISSUE_ADDED,)
    enable_command = "Audits.enable"
    disable_command = "Audits.disable"

    def __init__(self) -> None:
        super().__init__()
        self._reconciler = IssueReconciler()

    def to_event(self, method: str, params: Mapping[str, Any]) -> ProtocolEvent | None:
        issue = params.get("issue") or {}
        category = IssueCategory.from_issue_code(str(issue.get("code", "")))
        if category is None:
            logger.debug("Ignoring untracked inspector issue", code=issue.get("code"))
            return None

        details = (issue.get("details") or {}).get(category.details_key)
        if details is None:
            logger.debug("Ignoring inspector issue without details", code=issue.get("code"))
            return None

        request = details.get("request") or {}
        request_id = request.get("requestId")
        return ProtocolEvent(
            category=category.value,
            payload=details,
            request_ref=str(request_id) if request_id is not None else None,
        )

    async def build_artifact(self, ctx: CollectionContext, network_records: tuple[NetworkRecord, ...] | None) -> InspectorIssues:
        index = NetworkRecordIndex(network_records or ())
        return self._reconciler.reconcile(self.buffer.events, index)
