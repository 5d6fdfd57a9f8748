"""Turn lifecycle event emitter.

The synchronizer emits one event per lifecycle step of a turn (start,
each live update, done, error) and one per optimistic user row.
Rendering sinks subscribe as listeners; they never feed state back into
the core.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections import deque
from collections.abc import Callable
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

# Recent events kept for inspection; streaming updates carry the full text
HISTORY_LIMIT = 200


class TurnEventType(StrEnum):
    """Lifecycle steps of a single turn."""

    USER_ENTRY_ADDED = "user_entry_added"
    TURN_STARTED = "turn_started"
    TURN_UPDATED = "turn_updated"
    TURN_DONE = "turn_done"
    TURN_ERROR = "turn_error"


class TurnEvent(BaseModel):
    """A single lifecycle event for one UI entry."""

    type: TurnEventType = Field(description="Event type")
    entry_id: str = Field(description="UI entry the event refers to")
    timestamp: float = Field(
        default_factory=time.time,
        description="Unix timestamp when the event occurred",
    )
    data: dict[str, Any] = Field(
        default_factory=dict,
        description="Event payload; varies by event type",
    )


# Type alias for event listener callbacks
EventListener = Callable[[TurnEvent], Any]


class TurnEventEmitter:
    """Broadcasts turn events to registered listeners.

    Listeners can be sync or async callables. Listener exceptions are
    logged and never reach the turn that emitted the event. Only the
    most recent events are kept in history.
    """

    def __init__(self, history_limit: int = HISTORY_LIMIT) -> None:
        self._listeners: list[EventListener] = []
        self._history: deque[TurnEvent] = deque(maxlen=history_limit)

    @property
    def history(self) -> list[TurnEvent]:
        """The most recent events, oldest first."""
        return list(self._history)

    def add_listener(self, listener: EventListener) -> None:
        """Register a listener to receive turn events."""
        self._listeners.append(listener)

    def remove_listener(self, listener: EventListener) -> None:
        """Remove a previously registered listener."""
        self._listeners = [ln for ln in self._listeners if ln is not listener]

    async def emit(self, event_type: TurnEventType, entry_id: str, **data: Any) -> None:
        """Emit a turn event to every registered listener."""
        event = TurnEvent(type=event_type, entry_id=entry_id, data=data)
        self._history.append(event)

        for listener in self._listeners:
            try:
                result = listener(event)
                if asyncio.iscoroutine(result):
                    await result
            except Exception:
                logger.exception("Event listener error for %s", event_type)
