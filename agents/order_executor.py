"""
Order executor: drains an order plan into the host cart one box at a time,
within the available budget and the cart's capacity.

The run is a coroutine driven by the host's event loop. It suspends only at
two points: for order_wait_seconds after a full cart has been purchased, and
for a single loop tick after every other cart addition.
"""

import asyncio
import logging
from collections import defaultdict

from config.config import InventoryConfig
from connectors.host_services import CartService, MoneyService
from models.enums import OrderRunOutcome, OrderRunState
from models.order import OrderItem, OrderRunResult

logger = logging.getLogger(__name__)


class OrderExecutor:
    """
    Purchases an order plan against the live cart and money services.

    Each iteration picks the item with the most boxes still wanted. Money and
    cart totals are re-read before every addition. The first item that cannot
    be afforded ends the run; cheaper items are not tried instead.
    """

    def __init__(self, cart: CartService, money: MoneyService, config: InventoryConfig):
        self.cart = cart
        self.money = money
        self.config = config
        self.state = OrderRunState.PLANNING

    async def run(self, order: list[OrderItem]) -> OrderRunResult:
        order = list(order)
        if not order:
            self.state = OrderRunState.DONE
            logger.info("No new order, all items are in stock!")
            return OrderRunResult(outcome=OrderRunOutcome.FULLY_STOCKED, state=self.state)

        self.state = OrderRunState.CHECK_EMBARGO
        if self.cart.ordering_currently_disallowed():
            logger.info("Cannot order at this time.")
            self.state = OrderRunState.DONE
            return OrderRunResult(outcome=OrderRunOutcome.EMBARGOED, state=self.state)

        starting_funds = self.money.current_funds()
        boxes_added: dict[int, int] = defaultdict(int)
        flush_count = 0

        self.state = OrderRunState.PURCHASING
        while order:
            item = max(order, key=lambda e: e.boxes_wanted)

            if not self._can_afford(item):
                self._log_shortfall(item)
                if self.cart.item_count_in_cart() > 0:
                    self.cart.purchase()
                    flush_count += 1
                self.state = OrderRunState.DONE
                return OrderRunResult(
                    outcome=OrderRunOutcome.INSUFFICIENT_FUNDS,
                    state=self.state,
                    boxes_added=dict(boxes_added),
                    flush_count=flush_count,
                    money_spent=starting_funds - self.money.current_funds(),
                    blocking_item_id=item.id,
                )

            try:
                self.cart.add_unit(item.id, item.unit_price)
            except LookupError as e:
                logger.error(f"Could not add ({item.id}){item.name} to the cart, skipping it: {e}")
                order = [o for o in order if o.id != item.id]
                continue

            boxes_added[item.id] += 1
            item.boxes_wanted -= 1
            if item.boxes_wanted < 1:
                order = [o for o in order if o.id != item.id]

            if self.cart.is_cart_full(True):
                self.cart.purchase()
                flush_count += 1
                logger.info("Order processing part (Cart maxed)")
                await asyncio.sleep(self.config.order_wait_seconds)
            else:
                await asyncio.sleep(0)

        self.state = OrderRunState.FLUSHING
        if self.cart.item_count_in_cart() > 0:
            self.cart.purchase()
            flush_count += 1

        self.state = OrderRunState.DONE
        logger.info("Order complete!")
        return OrderRunResult(
            outcome=OrderRunOutcome.COMPLETED,
            state=self.state,
            boxes_added=dict(boxes_added),
            flush_count=flush_count,
            money_spent=starting_funds - self.money.current_funds(),
        )

    def _available_funds(self) -> float:
        return self.money.current_funds() - self.config.protected_funds

    def _can_afford(self, item: OrderItem) -> bool:
        pending = self.cart.cart_total() + self.cart.shipping_cost()
        return self._available_funds() >= pending + item.box_price

    def _log_shortfall(self, item: OrderItem) -> None:
        funds = self.money.current_funds()
        pending = self.cart.cart_total() + self.cart.shipping_cost()
        logger.warning(
            f"Could not purchase all items! Player has ${funds:.2f} "
            f"(${self.config.protected_funds:.2f} is reserved leaving ${funds - self.config.protected_funds:.2f}). "
            f"Cart currently costs ${pending:.2f}, next item is {item.name} ${item.box_price:.2f}"
        )
