"""
Order planner: turns stock records into a list of OrderItems for every
displayed product whose stock is below target.
"""

import logging
import math
from collections.abc import Iterable

from connectors.host_services import PriceService
from models.inventory import StockRecord
from models.order import OrderItem

logger = logging.getLogger(__name__)


class OrderPlanner:
    """Builds the restocking plan for one order run."""

    def __init__(self, prices: PriceService):
        self.prices = prices

    def plan(self, records: Iterable[StockRecord]) -> list[OrderItem]:
        """
        Return one OrderItem per displayed, understocked product, largest
        shortfall first. Products the host cannot resolve are skipped.
        """
        order: list[OrderItem] = []
        for record in records:
            try:
                item = self._plan_item(record)
            except LookupError as e:
                logger.error(f"Skipping {record.product_name_print()} while planning order: {e}")
                continue
            if item is not None:
                order.append(item)

        # sorted() is stable, so ties keep catalog order
        return sorted(order, key=lambda e: e.boxes_wanted, reverse=True)

    def _plan_item(self, record: StockRecord) -> OrderItem | None:
        # Products not on display have no demand to restock for
        if not record.is_on_display():
            return None

        required_boxes = record.target_stock_boxes()
        in_storage_boxes = record.current_stock_boxes()
        if required_boxes - in_storage_boxes <= 0:
            return None

        logger.info(
            f"{in_storage_boxes:5.2f}/{required_boxes:5.2f} supply based on average usage of "
            f"{record.average_sold_boxes():5.2f} boxes per day for Item {record.product_name_print()}"
        )
        return OrderItem(
            id=record.id,
            name=record.name,
            boxes_wanted=math.ceil(required_boxes - in_storage_boxes),
            unit_price=self.prices.current_unit_price(record.id),
            box_price=self.prices.box_price(record.id),
        )


def total_price(order: Iterable[OrderItem]) -> float:
    """Price of the whole plan at box prices."""
    return sum(item.box_price * item.boxes_wanted for item in order)
