"""
Inventory-related data models for the inventory management system.
Includes CatalogProduct, InventorySplit, the StockRecord demand model and its
persisted StockRecordSnapshot form.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from pydantic import AliasChoices, BaseModel, Field, NonNegativeInt

from config.config import InventoryConfig

if TYPE_CHECKING:
    from connectors.host_services import DisplayService, InventoryService


@dataclass(frozen=True)
class CatalogProduct:
    """A product as listed by the host catalog."""

    id: int
    name: str
    box_size: int
    brand: str | None = None
    category: str | None = None

    def __post_init__(self):
        if self.box_size < 1:
            raise ValueError(f"Product {self.id} has invalid box size {self.box_size}")


@dataclass(frozen=True)
class InventorySplit:
    """Units of a product by location: on display, boxed in storage, and in transit."""

    displayed: int
    boxed: int
    in_transit: int


class StockRecordSnapshot(BaseModel):
    """
    Persisted form of a StockRecord. Also accepts the key names used by
    older save files (Id, SaleCounts, currentDayCount).
    """

    id: int = Field(validation_alias=AliasChoices("id", "Id"))
    sales_history: list[NonNegativeInt] = Field(
        default_factory=list, validation_alias=AliasChoices("sales_history", "SaleCounts")
    )
    current_day_count: NonNegativeInt = Field(
        default=0, validation_alias=AliasChoices("current_day_count", "currentDayCount")
    )


@dataclass
class StockRecord:
    """
    Demand model and stock state of a single product.

    Sales are accumulated into current_day_count during the day and pushed
    into a sliding window of daily counts (sales_history) on rollover. The
    window holds at most config.averaging_days entries, oldest first.
    Stock levels are never cached: every read goes to the inventory service.
    """

    id: int
    name: str
    box_size: int
    config: InventoryConfig = field(repr=False, compare=False)
    inventory_service: InventoryService = field(repr=False, compare=False)
    display_service: DisplayService = field(repr=False, compare=False)
    brand: str | None = None
    category: str | None = None
    sales_history: list[int] = field(default_factory=list)
    current_day_count: int = 0

    def __post_init__(self):
        if self.box_size < 1:
            raise ValueError(f"Stock record {self.id} has invalid box size {self.box_size}")
        if self.current_day_count < 0:
            raise ValueError(f"Stock record {self.id} has negative sale count {self.current_day_count}")
        self._trim_history()

    @classmethod
    def from_product(
        cls,
        product: CatalogProduct,
        config: InventoryConfig,
        inventory_service: InventoryService,
        display_service: DisplayService,
        snapshot: StockRecordSnapshot | None = None,
    ) -> StockRecord:
        """Create a record for a catalog product, overlaying saved counters when a snapshot is given."""
        return cls(
            id=product.id,
            name=product.name,
            brand=product.brand,
            category=product.category,
            box_size=product.box_size,
            config=config,
            inventory_service=inventory_service,
            display_service=display_service,
            sales_history=list(snapshot.sales_history) if snapshot else [],
            current_day_count=snapshot.current_day_count if snapshot else 0,
        )

    def to_snapshot(self) -> StockRecordSnapshot:
        return StockRecordSnapshot(
            id=self.id,
            sales_history=list(self.sales_history),
            current_day_count=self.current_day_count,
        )

    # --- Demand model ---

    def average_sold_units(self) -> float:
        """Mean daily units sold over the sales window, 0.0 when there is no history yet."""
        if not self.sales_history:
            return 0.0
        return sum(self.sales_history) / len(self.sales_history)

    def average_sold_boxes(self) -> float:
        return self.convert_to_box_count(self.average_sold_units())

    def target_stock_boxes(self) -> float:
        """Boxes needed to cover days_to_stock days of average demand, never below min_boxes."""
        order_quantity = self.average_sold_boxes() * self.config.days_to_stock
        return max(order_quantity, float(self.config.min_boxes))

    # --- Live stock ---

    def is_on_display(self) -> bool:
        return self.display_service.is_on_display(self.id)

    def current_storage_units(self) -> int:
        """
        Units counted as stock. With include_display every unit counts,
        otherwise only boxed storage and deliveries in transit do.
        """
        if self.config.include_display:
            return self.inventory_service.current_units(self.id)
        split = self.inventory_service.current_units_split(self.id)
        return split.boxed + split.in_transit

    def current_stock_boxes(self) -> float:
        return self.convert_to_box_count(self.current_storage_units())

    def stock_delta(self) -> float:
        """Target minus current stock in boxes. Positive means understocked."""
        return self.target_stock_boxes() - self.current_stock_boxes()

    def convert_to_box_count(self, count: float) -> float:
        return count / self.box_size

    def convert_to_whole_box_count(self, count: int) -> int:
        return count // self.box_size

    # --- Mutation ---

    def record_sale(self, count: int | None = None) -> None:
        """Add count units to today's sales, or a single unit when no count is reported."""
        if count is None:
            self.current_day_count += 1
            return
        if count < 0:
            raise ValueError(f"Sale count cannot be negative, got {count} for {self.product_name_print()}")
        self.current_day_count += count

    def rollover_day(self) -> None:
        """Close the current day: push its count into the window and start a new day at zero."""
        self.sales_history.append(self.current_day_count)
        self._trim_history()
        self.current_day_count = 0

    def _trim_history(self) -> None:
        excess = len(self.sales_history) - self.config.averaging_days
        if excess > 0:
            del self.sales_history[:excess]

    # --- Reporting ---

    def product_name_print(self) -> str:
        brand = f" - {self.brand}" if self.brand else ""
        return f"{self.name}{brand}({self.id})"

    def print_info(self) -> str:
        return (
            f"{self.product_name_print()} | Current stock {self.current_storage_units()}"
            f" | Average Sales {self.average_sold_units()}"
        )

    def sale_info(self) -> str:
        return f"Salecount {self.current_day_count:4d} for product {self.product_name_print()}."

    def rolling_day_info(self) -> str:
        return (
            f"Average/Day:{self.average_sold_units():6.2f} count, "
            f"{self.average_sold_boxes():5.2f} Boxes for {self.product_name_print()}"
        )
