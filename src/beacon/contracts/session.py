"""Transport capability consumed by collectors.

The low-level transport that delivers protocol commands and events is an
external collaborator. Beacon only relies on this structural interface.
Deadlines on commands are the caller's concern: nothing here times out.
"""

from collections.abc import Callable, Mapping
from typing import Any, Protocol

EventHandler = Callable[[Mapping[str, Any]], None]


class ProtocolSession(Protocol):
    """One inspected session's command/event channel.

    Handlers receive the event's params and are invoked synchronously in
    the order the transport delivers events.
    """

    async def send_command(self, method: str, params: Mapping[str, Any] | None = None) -> Mapping[str, Any]:
        """Send a protocol command and await its reply.

        Raises whatever the transport raises on rejection or disconnect.
        """
        ...

    def on(self, event_name: str, handler: EventHandler) -> None:
        """Subscribe ``handler`` to ``event_name``."""
        ...

    def off(self, event_name: str, handler: EventHandler) -> None:
        """Unsubscribe ``handler`` from ``event_name``."""
        ...
