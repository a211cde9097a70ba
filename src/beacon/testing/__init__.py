# src/beacon/testing/__init__.py
"""Test infrastructure for Beacon collectors.

Factories for raw protocol payloads with sensible defaults, plus FakeSession.
When a payload shape changes, update the factory here; tests that use the
factories need no changes.

Usage:
    from beacon.testing import FakeSession, make_request_events, make_issue_params

    session = FakeSession()
    for method, params in make_request_events("1", "https://example.com/", resource_type="Document"):
        session.emit(method, params)
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from beacon.contracts.enums import IssueCategory
from beacon.contracts.events import ProtocolEvent
from beacon.network.records import LOADING_FINISHED, REQUEST_WILL_BE_SENT, RESPONSE_RECEIVED
from beacon.testing.session import FakeSession, SentCommand

RawEvent = tuple[str, dict[str, Any]]


def make_request_events(
    request_id: str,
    url: str,
    *,
    resource_type: str = "Other",
    status: int = 200,
    mime_type: str = "text/html",
    headers: Mapping[str, str] | None = None,
    method: str = "GET",
) -> list[RawEvent]:
    """Raw Network events for one successful request: sent, response, finished."""
    return [
        (
            REQUEST_WILL_BE_SENT,
            {
                "requestId": request_id,
                "documentURL": url,
                "frameId": "frame-1",
                "type": resource_type,
                "request": {"url": url, "method": method},
            },
        ),
        (
            RESPONSE_RECEIVED,
            {
                "requestId": request_id,
                "type": resource_type,
                "response": {"url": url, "status": status, "mimeType": mime_type, "headers": dict(headers or {})},
            },
        ),
        (LOADING_FINISHED, {"requestId": request_id}),
    ]


def make_event_log(*requests: list[RawEvent]) -> tuple[ProtocolEvent, ...]:
    """Flatten raw request event lists into a DevtoolsLog artifact."""
    return tuple(ProtocolEvent.from_protocol(method, params) for events in requests for method, params in events)


def make_issue_details(category: IssueCategory, request_id: str | None = None, **fields: Any) -> dict[str, Any]:
    """Details payload for ``category``, optionally anchored to ``request_id``."""
    details: dict[str, Any] = dict(fields)
    if request_id is not None:
        details["request"] = {"requestId": request_id, "url": fields.get("url", "")}
    return details


def make_issue_params(category: IssueCategory, request_id: str | None = None, **fields: Any) -> dict[str, Any]:
    """Raw ``Audits.issueAdded`` params for ``category``."""
    return {
        "issue": {
            "code": category.issue_code,
            "details": {category.details_key: make_issue_details(category, request_id, **fields)},
        }
    }


def make_issue_event(category: IssueCategory, request_id: str | None = None, **fields: Any) -> ProtocolEvent:
    """Already-translated issue event, as InspectorIssuesCollector buffers it."""
    return ProtocolEvent(
        category=category.value,
        payload=make_issue_details(category, request_id, **fields),
        request_ref=request_id,
    )


__all__ = [
    "FakeSession",
    "RawEvent",
    "SentCommand",
    "make_event_log",
    "make_issue_details",
    "make_issue_event",
    "make_issue_params",
    "make_request_events",
]
