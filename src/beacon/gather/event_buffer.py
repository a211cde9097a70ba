# src/beacon/gather/event_buffer.py
"""Ordered buffer for events observed during one instrumentation window.

Key design decisions:
- Single window per buffer: open() once, close() once. A second open() or
  close() is a caller bug and raises LifecycleError.
- Arrival order is the only order: events are appended as delivered, across
  all categories, and never reordered or dropped while open.
- Late delivery is tolerated: events recorded while closed are discarded
  without error and counted. Debug logging is aggregated so a chatty
  transport cannot flood the log.
"""

from enum import StrEnum

import structlog

from beacon.contracts.errors import LifecycleError
from beacon.contracts.events import ProtocolEvent

logger = structlog.get_logger(__name__)


class _BufferState(StrEnum):
    NEW = "new"
    OPEN = "open"
    CLOSED = "closed"


class EventBuffer:
    """Per-collector ordered store of events observed during an open window.

    Not thread-safe. Collection runs on a single event loop and handlers are
    invoked synchronously by the transport, so no locking is needed.

    Attributes:
        dropped_count: Number of events discarded because the window was not open.

    Example:
        buffer = EventBuffer(owner="InspectorIssues")
        buffer.open()
        buffer.record(event)
        events = buffer.close()
        assert buffer.events == events
    """

    # Log aggregate drop counts every N drops
    _LOG_INTERVAL = 100

    def __init__(self, owner: str = "EventBuffer") -> None:
        self._owner = owner
        self._state = _BufferState.NEW
        self._events: list[ProtocolEvent] = []
        self._frozen: tuple[ProtocolEvent, ...] | None = None
        self._dropped_count = 0

    @property
    def is_open(self) -> bool:
        return self._state == _BufferState.OPEN

    @property
    def dropped_count(self) -> int:
        return self._dropped_count

    def open(self) -> None:
        """Start accepting events.

        Raises:
            LifecycleError: If the buffer was already opened (open or closed)
        """
        if self._state != _BufferState.NEW:
            raise LifecycleError(self._owner, "open", f"buffer {self._state}")
        self._state = _BufferState.OPEN
        logger.debug("Event window opened", owner=self._owner)

    def record(self, event: ProtocolEvent) -> bool:
        """Append an event if the window is open.

        Returns:
            True if the event was buffered, False if it was discarded.
        """
        if self._state != _BufferState.OPEN:
            self._dropped_count += 1
            if self._dropped_count == 1 or self._dropped_count % self._LOG_INTERVAL == 0:
                logger.debug(
                    "Discarding event outside instrumentation window",
                    owner=self._owner,
                    category=event.category,
                    state=str(self._state),
                    dropped_count=self._dropped_count,
                )
            return False
        self._events.append(event)
        return True

    def close(self) -> tuple[ProtocolEvent, ...]:
        """Stop accepting events and return them in arrival order.

        Raises:
            LifecycleError: If the buffer is not currently open
        """
        if self._state != _BufferState.OPEN:
            raise LifecycleError(self._owner, "close", f"buffer {self._state}")
        self._state = _BufferState.CLOSED
        self._frozen = tuple(self._events)
        self._events = []
        logger.debug("Event window closed", owner=self._owner, event_count=len(self._frozen))
        return self._frozen

    @property
    def events(self) -> tuple[ProtocolEvent, ...]:
        """The frozen event sequence returned by close().

        Raises:
            LifecycleError: If the buffer has not been closed yet
        """
        if self._frozen is None:
            raise LifecycleError(self._owner, "events", f"buffer {self._state}", detail="read before close")
        return self._frozen
