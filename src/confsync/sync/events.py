"""
Engine Notifications

Typed events published by the synchronization engine and a small
publish/subscribe bus. Publishing with no subscribers is a no-op and a
failing subscriber never reaches the engine.
"""

import inspect
from collections import defaultdict
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union

from confsync.sync.cache import CacheEntry
from confsync.utils.logging import get_logger

logger = get_logger(__name__)


class EventType(Enum):
    """Notification kinds."""
    READY = "ready"
    UPDATE = "update"
    ERROR = "error"
    PROFILE_DELETED = "profile_deleted"
    DEBUG = "debug"


@dataclass
class ReadyEvent:
    """Initial discovery finished."""
    profile_names: list[str] = field(default_factory=list)
    type: EventType = field(default=EventType.READY, init=False)


@dataclass
class UpdateEvent:
    """A profile's cached configuration changed."""
    profile_name: str
    parsed: Any
    entry: CacheEntry
    type: EventType = field(default=EventType.UPDATE, init=False)


@dataclass
class ErrorEvent:
    """A recovered error; source is a profile name or "discovery"."""
    source: str
    error: Exception
    type: EventType = field(default=EventType.ERROR, init=False)


@dataclass
class ProfileDeletedEvent:
    """The provider no longer knows a profile."""
    profile_name: str
    type: EventType = field(default=EventType.PROFILE_DELETED, init=False)


@dataclass
class DebugEvent:
    """Free-form diagnostic message."""
    message: str
    type: EventType = field(default=EventType.DEBUG, init=False)


Event = Union[ReadyEvent, UpdateEvent, ErrorEvent, ProfileDeletedEvent, DebugEvent]
EventHandler = Callable[[Any], Union[None, Awaitable[None]]]


class EventBus:
    """Publish/subscribe channel for engine notifications."""

    def __init__(self):
        self._handlers: dict[EventType, list[EventHandler]] = defaultdict(list)

    def subscribe(self, event_type: EventType, handler: EventHandler) -> None:
        """Register a plain or async handler for one event type."""
        self._handlers[event_type].append(handler)

    def unsubscribe(self, event_type: EventType, handler: EventHandler) -> None:
        """Remove a previously registered handler."""
        handlers = self._handlers.get(event_type, [])
        if handler in handlers:
            handlers.remove(handler)

    def has_subscribers(self, event_type: EventType) -> bool:
        return bool(self._handlers.get(event_type))

    async def emit(self, event: Event) -> None:
        """Deliver an event to the handlers of its type."""
        for handler in list(self._handlers.get(event.type, ())):
            try:
                result = handler(event)
                if inspect.isawaitable(result):
                    await result
            except Exception as e:
                logger.error(f"Error in {event.type.value} handler: {e}")
