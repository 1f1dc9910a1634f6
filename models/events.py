"""
Data models for events exchanged between the host and the inventory system.
"""

import uuid
from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from .enums import AgentType


class RetailEvent(BaseModel):
    """Base event for host and inventory interactions."""

    event_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    event_type: str  # Generic event type name, usually a HostEventType value
    payload: dict[str, Any] = Field(default_factory=dict)
    source: AgentType
    timestamp: datetime = Field(default_factory=datetime.now)


class ProductScannedPayload(BaseModel):
    """Payload of a checkout scan. bag_count is set for bagged multi-unit sales."""

    product_id: int
    bag_count: int | None = Field(default=None, ge=0)
