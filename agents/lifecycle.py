"""
Lifecycle agent wiring host game events to the inventory management system.
"""

import asyncio
import logging

from pydantic import ValidationError

from agents.base import BaseAgent
from agents.inventory_system import InventorySystem
from models.enums import AgentType, HostEventType
from models.events import ProductScannedPayload, RetailEvent
from models.order import OrderRunResult
from utils.event_bus import EventBus

logger = logging.getLogger(__name__)


class InventoryLifecycleAgent(BaseAgent):
    """
    Translates host events into InventorySystem calls.

    Order runs are started as background tasks, the way the host starts a
    coroutine, so the publishing frame is not blocked while boxes are bought.
    """

    def __init__(self, agent_id: str, event_bus: EventBus, inventory: InventorySystem):
        super().__init__(agent_id, AgentType.INVENTORY, event_bus)
        self.inventory = inventory
        self.order_task: asyncio.Task[OrderRunResult | None] | None = None
        self.register_event_handlers()

    def register_event_handlers(self) -> None:
        self.event_bus.subscribe(HostEventType.PRODUCT_SCANNED, self.handle_product_scanned)
        self.event_bus.subscribe(HostEventType.DAY_FINISHED, self.handle_day_finished)
        self.event_bus.subscribe(HostEventType.DAY_STARTED, self.handle_day_started)
        self.event_bus.subscribe(HostEventType.GAME_SAVED, self.handle_game_saved)
        self.event_bus.subscribe(HostEventType.RESTOCK_REQUESTED, self.handle_restock_requested)
        self.event_bus.subscribe(HostEventType.DELTA_REPORT_REQUESTED, self.handle_delta_report_requested)

    async def handle_product_scanned(self, event: RetailEvent) -> None:
        try:
            payload = ProductScannedPayload.model_validate(event.payload)
        except ValidationError as e:
            logger.error(f"Invalid product scanned event {event.event_id}: {e}")
            return
        self.inventory.record_sale(payload.product_id, payload.bag_count)

    async def handle_day_finished(self, event: RetailEvent) -> None:
        self.inventory.rollover_day()

    async def handle_day_started(self, event: RetailEvent) -> None:
        if not self.inventory.config.autostock_daily_morning:
            return
        self.start_order()

    async def handle_game_saved(self, event: RetailEvent) -> None:
        self.inventory.save()

    async def handle_restock_requested(self, event: RetailEvent) -> None:
        self.start_order()

    async def handle_delta_report_requested(self, event: RetailEvent) -> None:
        self.inventory.log_outliers()

    def start_order(self) -> asyncio.Task[OrderRunResult | None] | None:
        """Start an order run in the background unless one is already running."""
        if self.order_task is not None and not self.order_task.done():
            logger.info("Order run already in progress, not starting another.")
            return None
        self.order_task = asyncio.create_task(self._run_order())
        return self.order_task

    async def _run_order(self) -> OrderRunResult | None:
        try:
            result = await self.inventory.run_order()
        except Exception as e:
            await self.handle_exception(e, {"stage": "order_run"})
            return None
        logger.info(f"Order run finished: {result.outcome.value}")
        return result
