"""
Events - Simple publish/subscribe dispatch for world connection events
"""

import logging
from enum import Enum
from typing import Dict, List, Callable, Any

logger = logging.getLogger(__name__)


class EventType(Enum):
    """World connection event types"""
    SPAWN = "spawn"
    CHAT_MESSAGE = "chat_message"
    GOAL_REACHED = "goal_reached"
    DEATH = "death"
    KICKED = "kicked"
    ERROR = "error"
    SESSION_END = "session_end"


class EventManager:
    """Simple event manager - handlers receive a single data argument"""

    def __init__(self):
        self._handlers: Dict[EventType, List[Callable]] = {}

    def subscribe(self, event_type: EventType, handler: Callable):
        if event_type not in self._handlers:
            self._handlers[event_type] = []
        self._handlers[event_type].append(handler)

    def unsubscribe(self, event_type: EventType, handler: Callable) -> bool:
        """Remove a handler. Returns False if it was not subscribed."""
        handlers = self._handlers.get(event_type)
        if not handlers or handler not in handlers:
            return False
        handlers.remove(handler)
        return True

    def once(self, event_type: EventType, handler: Callable) -> Callable:
        """Subscribe a handler that removes itself after the first call.

        Returns the wrapper actually registered, so callers can unsubscribe
        it before it fires.
        """
        def wrapper(data):
            self.unsubscribe(event_type, wrapper)
            handler(data)

        self.subscribe(event_type, wrapper)
        return wrapper

    def listener_count(self, event_type: EventType) -> int:
        return len(self._handlers.get(event_type, []))

    def clear(self):
        self._handlers.clear()

    def emit(self, event_type: EventType, data: Any = None):
        # Handlers may unsubscribe themselves while we dispatch
        for handler in list(self._handlers.get(event_type, [])):
            try:
                handler(data)
            except Exception:
                logger.exception(f"Handler {getattr(handler, '__name__', handler)} failed for {event_type.value}")
