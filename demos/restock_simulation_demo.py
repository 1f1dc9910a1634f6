"""
Demonstrates the inventory management system against the in-memory DummyStore.

Simulates a few store days: customers buy products, the day rolls over, the
system saves its state and restocks at the start of the next day.
"""

import asyncio
import logging
import random
import tempfile
from dataclasses import replace
from pathlib import Path

from agents.inventory_system import InventorySystem
from agents.lifecycle import InventoryLifecycleAgent
from config.config import InventoryConfig
from connectors.dummy_store import DummyStore
from connectors.stock_record_store import StockRecordStore
from models.enums import AgentType, HostEventType
from models.events import RetailEvent
from models.inventory import CatalogProduct
from utils.event_bus import EventBus
from utils.logger import get_logger

logger = logging.getLogger("demos.restock_simulation")

PRODUCTS = [
    CatalogProduct(id=1, name="Bread", brand="Baker's Best", category="bakery", box_size=8),
    CatalogProduct(id=2, name="Milk", brand="Happy Cow", category="dairy", box_size=6),
    CatalogProduct(id=3, name="Apples", category="produce", box_size=20),
    CatalogProduct(id=4, name="Cereal", brand="Crunchy", category="breakfast", box_size=12),
]
DAILY_DEMAND = {1: (10, 20), 2: (6, 14), 3: (15, 40), 4: (2, 6)}


def build_store() -> DummyStore:
    store = DummyStore(PRODUCTS, funds=400.0, max_cart_items=5, shipping_cost=5.0)
    for product in PRODUCTS:
        store.set_on_display(product.id)
        store.set_stock(product.id, displayed=product.box_size * 2, boxed=product.box_size)
        store.set_prices(product.id, unit_price=round(random.uniform(0.5, 2.5), 2))
    return store


async def publish(bus: EventBus, event_type: HostEventType, payload: dict | None = None) -> None:
    await bus.publish(RetailEvent(event_type=event_type.value, payload=payload or {}, source=AgentType.HOST))


async def simulate_day(bus: EventBus, store: DummyStore, day: int) -> None:
    logger.info(f"--- Day {day} ---")
    for product in PRODUCTS:
        low, high = DAILY_DEMAND[product.id]
        sold = random.randint(low, high)
        if product.id == 3:
            # Apples are sold loose in paper bags
            await publish(bus, HostEventType.PRODUCT_SCANNED, {"product_id": product.id, "bag_count": sold})
        else:
            for _ in range(sold):
                await publish(bus, HostEventType.PRODUCT_SCANNED, {"product_id": product.id})
        store.sell_from_display(product.id, sold)
    await publish(bus, HostEventType.DAY_FINISHED)
    await publish(bus, HostEventType.GAME_SAVED)


async def main(days: int = 4) -> None:
    random.seed(7)
    store = build_store()
    with tempfile.TemporaryDirectory() as tmp:
        config = replace(
            InventoryConfig.from_env(),
            autostock_daily_morning=True,
            order_wait_seconds=0.1,
            save_file_path=str(Path(tmp) / "IMS.json"),
        )
        # Root handler so agents.* and connectors.* lines are shown too
        get_logger(None, config.log_level)
        inventory = InventorySystem.load_or_create(store.services(), config, StockRecordStore(config.save_file_path))
        bus = EventBus()
        agent = InventoryLifecycleAgent("ims_01", bus, inventory)

        for day in range(1, days + 1):
            await simulate_day(bus, store, day)
            store.deliver()
            await publish(bus, HostEventType.DAY_STARTED)
            if agent.order_task is not None:
                result = await agent.order_task
                logger.info(
                    f"Order outcome: {result.outcome.value}, boxes: {result.boxes_added}, "
                    f"spent: {result.money_spent:.2f}, funds left: {store.funds:.2f}"
                )
            store.funds += 150.0  # Daily takings

        print(inventory.stock_report().to_string(index=False))
        await publish(bus, HostEventType.DELTA_REPORT_REQUESTED)

        restored = InventorySystem.load_or_create(store.services(), config)
        logger.info(f"Restored {len(restored.records)} records from {config.save_file_path}")


if __name__ == "__main__":
    asyncio.run(main())
