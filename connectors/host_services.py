"""
Module: connectors.host_services

Interfaces of the host game services consumed by the inventory management
system. Implementations raise KeyError for product ids they do not know.
Every call is a live read or write; callers must not cache results.
"""

from dataclasses import dataclass
from typing import Protocol

from models.inventory import CatalogProduct, InventorySplit


class CatalogService(Protocol):
    def list_products(self) -> list[CatalogProduct]: ...


class InventoryService(Protocol):
    def current_units(self, product_id: int) -> int:
        """All units of the product, including those on display."""
        ...

    def current_units_split(self, product_id: int) -> InventorySplit: ...


class DisplayService(Protocol):
    def is_on_display(self, product_id: int) -> bool: ...


class PriceService(Protocol):
    def current_unit_price(self, product_id: int) -> float: ...

    def box_price(self, product_id: int) -> float: ...


class CartService(Protocol):
    def add_unit(self, product_id: int, unit_price: float) -> None:
        """Add one box of the product to the cart, priced per unit."""
        ...

    def cart_total(self) -> float: ...

    def shipping_cost(self) -> float: ...

    def item_count_in_cart(self) -> int: ...

    def is_cart_full(self, products: bool = True) -> bool: ...

    def purchase(self) -> None: ...

    def ordering_currently_disallowed(self) -> bool: ...


class MoneyService(Protocol):
    def current_funds(self) -> float: ...


@dataclass
class HostServices:
    """Bundle of host service handles injected into the planner, executor and records."""

    catalog: CatalogService
    inventory: InventoryService
    display: DisplayService
    prices: PriceService
    cart: CartService
    money: MoneyService
