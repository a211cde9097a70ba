# src/beacon/network/records.py
"""Derive finalized network records from a protocol event log.

Replays Network domain events in arrival order:

- requestWillBeSent opens a record. If a record with the same id is already
  open and the event carries redirectResponse, the open record is closed out
  as a redirect hop (its id gets a ``:redirect`` suffix per hop) and a fresh
  record takes over the original id.
- responseReceived fills status, MIME type, headers, timing.
- loadingFinished marks the record finished; loadingFailed marks it finished
  and failed.

Events for request ids never opened by requestWillBeSent are ignored. Output
order is the order in which requests were first seen.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from beacon.contracts.events import ProtocolEvent
from beacon.contracts.network import NetworkRecord, ResponseHeader

REQUEST_WILL_BE_SENT = "Network.requestWillBeSent"
RESPONSE_RECEIVED = "Network.responseReceived"
LOADING_FINISHED = "Network.loadingFinished"
LOADING_FAILED = "Network.loadingFailed"

REDIRECT_SUFFIX = ":redirect"

NETWORK_EVENTS: tuple[str, ...] = (
    REQUEST_WILL_BE_SENT,
    RESPONSE_RECEIVED,
    LOADING_FINISHED,
    LOADING_FAILED,
)


@dataclass
class _RecordBuilder:
    request_id: str
    url: str
    resource_type: str = "Other"
    document_url: str = ""
    frame_id: str = ""
    request_method: str = "GET"
    status_code: int = -1
    mime_type: str = ""
    response_headers: list[ResponseHeader] = field(default_factory=list)
    finished: bool = False
    failed: bool = False
    timing: Mapping[str, Any] | None = None

    def apply_response(self, response: Mapping[str, Any], resource_type: str | None) -> None:
        status = response.get("status")
        self.status_code = int(status) if status is not None else -1
        self.mime_type = str(response.get("mimeType", ""))
        self.response_headers = [ResponseHeader(str(name), str(value)) for name, value in (response.get("headers") or {}).items()]
        self.timing = response.get("timing")
        if resource_type:
            self.resource_type = resource_type

    def build(self) -> NetworkRecord:
        return NetworkRecord(
            request_id=self.request_id,
            url=self.url,
            resource_type=self.resource_type,
            document_url=self.document_url,
            frame_id=self.frame_id,
            request_method=self.request_method,
            status_code=self.status_code,
            mime_type=self.mime_type,
            response_headers=tuple(self.response_headers),
            finished=self.finished,
            failed=self.failed,
            timing=self.timing,
        )


def _open_record(request_id: str, params: Mapping[str, Any]) -> _RecordBuilder:
    request = params.get("request") or {}
    return _RecordBuilder(
        request_id=request_id,
        url=str(request.get("url", "")),
        resource_type=str(params.get("type") or "Other"),
        document_url=str(params.get("documentURL", "")),
        frame_id=str(params.get("frameId", "")),
        request_method=str(request.get("method", "GET")),
    )


def chain_request_id(request_id: str) -> str:
    """Request id of the record that ends the redirect chain ``request_id`` belongs to."""
    while request_id.endswith(REDIRECT_SUFFIX):
        request_id = request_id[: -len(REDIRECT_SUFFIX)]
    return request_id


def records_from_event_log(events: Iterable[ProtocolEvent]) -> tuple[NetworkRecord, ...]:
    """Replay Network events into finalized records.

    Args:
        events: Protocol events in arrival order (non-Network events are skipped)

    Returns:
        Finalized records in first-seen order
    """
    ordered: list[_RecordBuilder] = []
    open_by_id: dict[str, _RecordBuilder] = {}
    hops: dict[str, int] = {}

    for event in events:
        request_id = event.request_ref
        if request_id is None or event.category not in NETWORK_EVENTS:
            continue
        params = event.payload

        if event.category == REQUEST_WILL_BE_SENT:
            previous = open_by_id.get(request_id)
            redirect = params.get("redirectResponse")
            if previous is not None and redirect is not None:
                previous.apply_response(redirect, None)
                previous.finished = True
                hops[request_id] = hops.get(request_id, 0) + 1
                previous.request_id = request_id + REDIRECT_SUFFIX * hops[request_id]
            builder = _open_record(request_id, params)
            open_by_id[request_id] = builder
            ordered.append(builder)
            continue

        builder = open_by_id.get(request_id)
        if builder is None:
            continue
        if event.category == RESPONSE_RECEIVED:
            builder.apply_response(params.get("response") or {}, params.get("type"))
        elif event.category == LOADING_FINISHED:
            builder.finished = True
        elif event.category == LOADING_FAILED:
            builder.finished = True
            builder.failed = True

    return tuple(builder.build() for builder in ordered)
