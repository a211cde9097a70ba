"""Network record contract.

A NetworkRecord describes one observed network request for a run. Records
are finalized (immutable) once the run's network collection phase ends.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import urldefrag

from beacon.contracts.freeze import deep_freeze, thaw


@dataclass(frozen=True, slots=True)
class ResponseHeader:
    """A single response header, name case preserved as received."""

    name: str
    value: str


@dataclass(frozen=True, slots=True)
class NetworkRecord:
    """Finalized description of one observed network request.

    Attributes:
        request_id: Protocol request identifier (unique within a run)
        url: Request URL as sent
        resource_type: Protocol resource type (``Document``, ``Script``, ...)
        document_url: URL of the document that issued the request
        frame_id: Frame that issued the request
        request_method: HTTP method
        status_code: HTTP status, -1 if no response was received
        mime_type: Response MIME type
        response_headers: Headers in the order the response listed them
        finished: True once loading finished or failed
        failed: True if loading failed
        timing: Deep-frozen protocol timing block, if the response had one
    """

    request_id: str
    url: str
    resource_type: str = "Other"
    document_url: str = ""
    frame_id: str = ""
    request_method: str = "GET"
    status_code: int = -1
    mime_type: str = ""
    response_headers: tuple[ResponseHeader, ...] = ()
    finished: bool = False
    failed: bool = False
    timing: Mapping[str, Any] | None = field(default=None)

    def __post_init__(self) -> None:
        if self.timing is not None:
            object.__setattr__(self, "timing", deep_freeze(self.timing))

    @property
    def url_without_fragment(self) -> str:
        return urldefrag(self.url).url

    def header(self, name: str) -> str | None:
        """Return the first response header value matching ``name`` (case-insensitive)."""
        wanted = name.lower()
        for header in self.response_headers:
            if header.name.lower() == wanted:
                return header.value
        return None

    def headers_named(self, name: str) -> list[str]:
        """Return every response header value matching ``name`` (case-insensitive)."""
        wanted = name.lower()
        return [header.value for header in self.response_headers if header.name.lower() == wanted]

    def to_dict(self) -> dict[str, Any]:
        return {
            "requestId": self.request_id,
            "url": self.url,
            "resourceType": self.resource_type,
            "documentURL": self.document_url,
            "frameId": self.frame_id,
            "requestMethod": self.request_method,
            "statusCode": self.status_code,
            "mimeType": self.mime_type,
            "responseHeaders": [{"name": h.name, "value": h.value} for h in self.response_headers],
            "finished": self.finished,
            "failed": self.failed,
            "timing": thaw(self.timing) if self.timing is not None else None,
        }
