"""
Simple asynchronous event bus connecting host lifecycle events to agents.
"""

import asyncio
import logging
from collections.abc import Callable, Coroutine
from enum import Enum
from typing import Any

from models.events import RetailEvent

logger_event_bus = logging.getLogger(__name__)

EventCallback = Callable[[RetailEvent], Coroutine[Any, Any, None]]


def _event_key(event_type: str | Enum) -> str:
    return event_type.value if isinstance(event_type, Enum) else event_type


def _callback_name(callback: EventCallback) -> str:
    return getattr(callback, "__name__", repr(callback))


class EventBus:
    """
    Event bus keyed by event type name. Subscribers of an event run
    concurrently; a failing subscriber is logged and does not affect the others.
    """

    def __init__(self):
        self.subscribers: dict[str, list[EventCallback]] = {}

    def subscribe(self, event_type: str | Enum, callback: EventCallback) -> None:
        """Subscribe to an event type."""
        if not callable(callback):
            raise TypeError("Callback must be a callable async function.")
        key = _event_key(event_type)
        callbacks = self.subscribers.setdefault(key, [])
        if callback in callbacks:
            logger_event_bus.warning(f"Callback {_callback_name(callback)} already subscribed to {key}")
            return
        callbacks.append(callback)
        logger_event_bus.debug(f"Callback {_callback_name(callback)} subscribed to {key}")

    def unsubscribe(self, event_type: str | Enum, callback: EventCallback) -> None:
        """Unsubscribe a specific callback from an event type."""
        key = _event_key(event_type)
        callbacks = self.subscribers.get(key)
        if not callbacks or callback not in callbacks:
            logger_event_bus.warning(f"Callback {_callback_name(callback)} not found for event type {key}")
            return
        callbacks.remove(callback)
        logger_event_bus.debug(f"Callback {_callback_name(callback)} unsubscribed from {key}")
        if not callbacks:
            del self.subscribers[key]

    async def publish(self, event: RetailEvent) -> None:
        """Publish an event to subscribers and wait for them to finish."""
        if not isinstance(event, RetailEvent):
            logger_event_bus.error(f"Attempted to publish invalid event type: {type(event)}")
            return

        logger_event_bus.debug(f"Event published: {event.event_type} from {event.source.value}")
        callbacks = list(self.subscribers.get(event.event_type, []))
        if not callbacks:
            return

        results = await asyncio.gather(*(callback(event) for callback in callbacks), return_exceptions=True)
        for callback, result in zip(callbacks, results):
            if isinstance(result, Exception):
                logger_event_bus.error(
                    f"Error in subscriber callback '{_callback_name(callback)}' for event {event.event_type}: {result}"
                )
