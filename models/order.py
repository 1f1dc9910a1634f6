"""
Data models for restocking orders: the transient OrderItem list built for a
single order run and the OrderRunResult summary returned when it ends.
"""

from dataclasses import dataclass, field

from .enums import OrderRunOutcome, OrderRunState


@dataclass
class OrderItem:
    """One product to restock during an order run. boxes_wanted counts down as boxes are added to the cart."""

    id: int
    name: str
    boxes_wanted: int
    unit_price: float
    box_price: float

    def __str__(self) -> str:
        return f"{self.boxes_wanted:3d} boxes of ({self.id:4d}){self.name} at price {self.box_price}"


@dataclass
class OrderRunResult:
    """Summary of a finished order run."""

    outcome: OrderRunOutcome
    state: OrderRunState = OrderRunState.DONE
    boxes_added: dict[int, int] = field(default_factory=dict)
    flush_count: int = 0
    money_spent: float = 0.0
    blocking_item_id: int | None = None  # Item that could not be afforded, if any

    @property
    def total_boxes_added(self) -> int:
        return sum(self.boxes_added.values())
