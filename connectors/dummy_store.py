"""
Module: connectors.dummy_store

Provides a dummy in-memory store implementing every host service interface
(catalog, inventory, display, prices, cart, money) for tests and demos.
"""

import logging
from dataclasses import dataclass

from connectors.host_services import HostServices
from models.inventory import CatalogProduct, InventorySplit

logger = logging.getLogger(__name__)


@dataclass
class CartLine:
    product_id: int
    unit_price: float
    box_price: float


class DummyStore:
    """
    Dummy host store. One cart addition is one box of a product; purchasing
    the cart charges its total plus shipping and moves the boxes in transit.
    """

    def __init__(
        self,
        products: list[CatalogProduct],
        funds: float = 1000.0,
        max_cart_items: int = 40,
        shipping_cost: float = 0.0,
    ):
        self._products = {p.id: p for p in products}
        self._splits: dict[int, InventorySplit] = {p.id: InventorySplit(0, 0, 0) for p in products}
        self._displayed: set[int] = set()
        self._unit_prices: dict[int, float] = {p.id: 1.0 for p in products}
        self._box_prices: dict[int, float] = {}
        self.funds = funds
        self.max_cart_items = max_cart_items
        self._shipping_cost = shipping_cost
        self.too_late_to_order = False
        self.cart: list[CartLine] = []
        self.purchases: list[list[CartLine]] = []

    # --- Setup helpers ---

    def set_stock(self, product_id: int, displayed: int = 0, boxed: int = 0, in_transit: int = 0) -> None:
        self._require(product_id)
        self._splits[product_id] = InventorySplit(displayed, boxed, in_transit)

    def set_on_display(self, product_id: int, on_display: bool = True) -> None:
        self._require(product_id)
        if on_display:
            self._displayed.add(product_id)
        else:
            self._displayed.discard(product_id)

    def set_prices(self, product_id: int, unit_price: float, box_price: float | None = None) -> None:
        self._require(product_id)
        self._unit_prices[product_id] = unit_price
        if box_price is None:
            self._box_prices.pop(product_id, None)
        else:
            self._box_prices[product_id] = box_price

    def sell_from_display(self, product_id: int, count: int = 1) -> None:
        self._require(product_id)
        split = self._splits[product_id]
        self._splits[product_id] = InventorySplit(max(0, split.displayed - count), split.boxed, split.in_transit)

    def deliver(self) -> None:
        """Move all in-transit units into boxed storage."""
        for pid, split in self._splits.items():
            self._splits[pid] = InventorySplit(split.displayed, split.boxed + split.in_transit, 0)

    def services(self) -> HostServices:
        return HostServices(
            catalog=self, inventory=self, display=self, prices=self, cart=self, money=self
        )

    def _require(self, product_id: int) -> CatalogProduct:
        try:
            return self._products[product_id]
        except KeyError:
            raise KeyError(f"Unknown product id {product_id}") from None

    # --- CatalogService ---

    def list_products(self) -> list[CatalogProduct]:
        return list(self._products.values())

    # --- InventoryService ---

    def current_units(self, product_id: int) -> int:
        self._require(product_id)
        split = self._splits[product_id]
        return split.displayed + split.boxed + split.in_transit

    def current_units_split(self, product_id: int) -> InventorySplit:
        self._require(product_id)
        return self._splits[product_id]

    # --- DisplayService ---

    def is_on_display(self, product_id: int) -> bool:
        return product_id in self._displayed

    # --- PriceService ---

    def current_unit_price(self, product_id: int) -> float:
        self._require(product_id)
        return self._unit_prices[product_id]

    def box_price(self, product_id: int) -> float:
        product = self._require(product_id)
        if product_id in self._box_prices:
            return self._box_prices[product_id]
        return self._unit_prices[product_id] * product.box_size

    # --- CartService ---

    def add_unit(self, product_id: int, unit_price: float) -> None:
        self._require(product_id)
        self.cart.append(CartLine(product_id, unit_price, self.box_price(product_id)))

    def cart_total(self) -> float:
        return sum(line.box_price for line in self.cart)

    def shipping_cost(self) -> float:
        return self._shipping_cost if self.cart else 0.0

    def item_count_in_cart(self) -> int:
        return len(self.cart)

    def is_cart_full(self, products: bool = True) -> bool:
        return len(self.cart) >= self.max_cart_items

    def purchase(self) -> None:
        if not self.cart:
            return
        total = self.cart_total() + self.shipping_cost()
        self.funds -= total
        for line in self.cart:
            split = self._splits[line.product_id]
            box_size = self._products[line.product_id].box_size
            self._splits[line.product_id] = InventorySplit(
                split.displayed, split.boxed, split.in_transit + box_size
            )
        self.purchases.append(self.cart)
        logger.info(f"DUMMY: Purchased {len(self.cart)} boxes for {total:.2f}")
        self.cart = []

    def ordering_currently_disallowed(self) -> bool:
        return self.too_late_to_order

    # --- MoneyService ---

    def current_funds(self) -> float:
        return self.funds
