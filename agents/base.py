"""
Base class for agents attached to the event bus.
"""

import logging
from typing import Any

from models.enums import AgentType
from models.events import RetailEvent
from utils.event_bus import EventBus

logger_base = logging.getLogger(__name__)


class BaseAgent:
    """Base class for event-driven agents"""

    def __init__(self, agent_id: str, agent_type: AgentType, event_bus: EventBus):
        self.agent_id = agent_id
        self.agent_type = agent_type
        self.event_bus = event_bus
        # Call registration in subclass __init__ after setting up handlers

    def register_event_handlers(self) -> None:
        """Register for events this agent cares about. Subclasses override this."""
        ...

    async def publish_event(self, event_type: str, payload: dict[str, Any]) -> None:
        """Publish an event to the event bus"""
        if self.event_bus is None:
            logger_base.error(f"Agent {self.agent_id} has no event bus to publish to.")
            return

        event = RetailEvent(event_type=event_type, payload=payload, source=self.agent_type)
        await self.event_bus.publish(event)

    async def handle_exception(self, exception: Exception, context: dict[str, Any]) -> None:
        """Log an exception raised while handling an event and publish it as a system event"""
        error_details = {
            "error_type": type(exception).__name__,
            "error_message": str(exception),
            "context": context,
            "agent_id": self.agent_id,
        }
        logger_base.error(
            f"Exception in {self.agent_type.value} agent ({self.agent_id}): {str(exception)}",
            exc_info=True,
        )
        await self.publish_event("system.exception", {"error_details": error_details})
