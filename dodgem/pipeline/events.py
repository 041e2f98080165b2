"""Event types and in-process EventBus for cycle progress.

The scheduler, cycle runner and discoverer publish events here; presentation
subscribes. Nothing published here ever feeds back into control flow.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, auto
from typing import Any, Callable, Coroutine, Dict, List, Optional
from uuid import UUID, uuid4

logger = logging.getLogger(__name__)


class EventType(Enum):
    """Progress events, in the order a cycle emits them."""

    # Cycle lifecycle
    CYCLE_STARTED = auto()
    CYCLE_COMPLETE = auto()           # payload["report"] is the CycleReport

    # Discovery
    LOGIN_STARTED = auto()
    LOGIN_COMPLETE = auto()
    LOGIN_FAILED = auto()
    DISCOVERY_STARTED = auto()
    ITEMS_DISCOVERED = auto()
    DISCOVERY_FAILED = auto()

    # Per-item actions
    ITEM_STARTED = auto()
    ITEM_SUCCEEDED = auto()
    ITEM_FAILED = auto()

    # Scheduling
    NEXT_RUN_SCHEDULED = auto()


@dataclass
class Event:
    """Event published on the bus.

    Attributes:
        event_type: The type of event
        payload: Event-specific data
        event_id: Unique identifier for this event
        correlation_id: ID shared by every event of one cycle
        timestamp: When the event was created
        source: Component that emitted the event
    """

    event_type: EventType
    payload: Dict[str, Any] = field(default_factory=dict)
    event_id: UUID = field(default_factory=uuid4)
    correlation_id: Optional[UUID] = None
    timestamp: datetime = field(default_factory=datetime.now)
    source: str = ""


# Type alias for event handlers
EventHandler = Callable[[Event], Coroutine[Any, Any, None]]


class EventBus:
    """In-process async event bus.

    Example:
        bus = EventBus()

        async def handler(event: Event) -> None:
            print(f"Received: {event.event_type}")

        bus.subscribe(EventType.ITEM_SUCCEEDED, handler)
        await bus.publish(Event(EventType.ITEM_SUCCEEDED, {"index": 1}))
    """

    def __init__(self) -> None:
        """Initialize the event bus."""
        self._handlers: Dict[EventType, List[EventHandler]] = {}
        self._global_handlers: List[EventHandler] = []
        self._event_history: List[Event] = []
        self._history_enabled: bool = False
        self._max_history: int = 1000

    def subscribe(
        self,
        event_type: EventType,
        handler: EventHandler,
    ) -> Callable[[], None]:
        """Subscribe a handler to a specific event type.

        Args:
            event_type: The event type to subscribe to
            handler: Async function to call when event is published

        Returns:
            Unsubscribe function to remove this subscription
        """
        self._handlers.setdefault(event_type, []).append(handler)

        def unsubscribe() -> None:
            self._handlers[event_type].remove(handler)

        return unsubscribe

    def subscribe_all(self, handler: EventHandler) -> Callable[[], None]:
        """Subscribe a handler to all event types.

        Args:
            handler: Async function to call for every event

        Returns:
            Unsubscribe function to remove this subscription
        """
        self._global_handlers.append(handler)

        def unsubscribe() -> None:
            self._global_handlers.remove(handler)

        return unsubscribe

    async def publish(self, event: Event) -> None:
        """Publish an event to all subscribed handlers.

        Handlers run concurrently; a failing handler is logged and does not
        affect the others or the publisher.

        Args:
            event: The event to publish
        """
        if self._history_enabled:
            self._event_history.append(event)
            if len(self._event_history) > self._max_history:
                self._event_history = self._event_history[-self._max_history:]

        handlers: List[EventHandler] = list(self._global_handlers)
        handlers.extend(self._handlers.get(event.event_type, []))

        if not handlers:
            return

        await asyncio.gather(*[self._safe_call(handler, event) for handler in handlers])

    async def _safe_call(self, handler: EventHandler, event: Event) -> None:
        """Call a handler, logging instead of propagating its exceptions."""
        try:
            await handler(event)
        except Exception:
            logger.exception(f"Event handler error for {event.event_type.name}")

    def enable_history(self, max_size: int = 1000) -> None:
        """Enable event history tracking.

        Args:
            max_size: Maximum number of events to retain
        """
        self._history_enabled = True
        self._max_history = max_size

    def get_history(
        self,
        event_type: Optional[EventType] = None,
        correlation_id: Optional[UUID] = None,
    ) -> List[Event]:
        """Get event history, optionally filtered by type or correlation ID."""
        events = self._event_history

        if event_type is not None:
            events = [e for e in events if e.event_type == event_type]

        if correlation_id is not None:
            events = [e for e in events if e.correlation_id == correlation_id]

        return events

    def clear(self) -> None:
        """Clear all subscriptions and history."""
        self._handlers.clear()
        self._global_handlers.clear()
        self._event_history.clear()


# Singleton event bus instance for the application
_default_bus: Optional[EventBus] = None


def get_event_bus() -> EventBus:
    """Get the default application-wide event bus."""
    global _default_bus
    if _default_bus is None:
        _default_bus = EventBus()
    return _default_bus


def reset_event_bus() -> None:
    """Reset the default event bus (useful for testing)."""
    global _default_bus
    if _default_bus is not None:
        _default_bus.clear()
    _default_bus = None
