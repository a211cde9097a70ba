"""Protocol event contract.

A ProtocolEvent is one observation delivered by the instrumentation layer.
It is immutable once received: the payload is deep-frozen on construction.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from beacon.contracts.freeze import deep_freeze, thaw


@dataclass(frozen=True, slots=True)
class ProtocolEvent:
    """An observation delivered by the instrumentation layer.

    Attributes:
        category: Event category. For raw transport events this is the
            protocol method (e.g. ``Network.responseReceived``); for inspector
            issues it is the IssueCategory value.
        payload: Deep-frozen event parameters
        request_ref: Request identifier the event is anchored to, if any
    """

    category: str
    payload: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))
    request_ref: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "payload", deep_freeze(self.payload))

    @classmethod
    def from_protocol(cls, method: str, params: Mapping[str, Any]) -> "ProtocolEvent":
        """Build an event from a raw transport notification.

        Network domain events carry their request id at ``params["requestId"]``.
        """
        request_id = params.get("requestId")
        return cls(category=method, payload=params, request_ref=str(request_id) if request_id is not None else None)

    def to_dict(self) -> dict[str, Any]:
        """Plain-dict form for export and canonical hashing."""
        return {
            "category": self.category,
            "payload": thaw(self.payload),
            "requestRef": self.request_ref,
        }
