"""
Inventory management system: owns the stock records of every catalog
product and exposes the entry points driven by host events (sales, day
rollover, save, order runs).
"""

import logging
from collections.abc import Iterable

import pandas as pd

from agents.order_executor import OrderExecutor
from agents.order_planner import OrderPlanner, total_price
from config.config import InventoryConfig
from connectors.host_services import HostServices
from connectors.stock_record_store import StockRecordStore
from models.enums import OrderRunOutcome
from models.inventory import StockRecord, StockRecordSnapshot
from models.order import OrderRunResult

logger = logging.getLogger(__name__)

REPORT_COLUMNS = [
    "product_id",
    "name",
    "brand",
    "on_display",
    "average_units",
    "average_boxes",
    "target_boxes",
    "current_boxes",
    "stock_delta",
]


class InventorySystem:
    """
    Orchestrates stock records, persistence and order runs.

    Records are keyed by product id and kept in catalog order. At most one
    order run is in flight at a time.
    """

    def __init__(
        self,
        records: Iterable[StockRecord],
        services: HostServices,
        config: InventoryConfig,
        store: StockRecordStore | None = None,
    ):
        self.records: dict[int, StockRecord] = {r.id: r for r in records}
        self.services = services
        self.config = config
        self.store = store if store is not None else StockRecordStore(config.save_file_path)
        self._order_in_progress = False

    @classmethod
    def from_snapshots(
        cls,
        snapshots: Iterable[StockRecordSnapshot],
        services: HostServices,
        config: InventoryConfig,
        store: StockRecordStore | None = None,
    ) -> "InventorySystem":
        """
        Build records from the current catalog, overlaying saved counters by
        product id. Catalog products without a snapshot start with no history.
        When an id is saved more than once the first record wins.
        """
        saved: dict[int, StockRecordSnapshot] = {}
        for snapshot in snapshots:
            if snapshot.id in saved:
                logger.warning(f"Duplicate saved stock record {snapshot.id}, keeping the first one.")
                continue
            saved[snapshot.id] = snapshot
        products = services.catalog.list_products()
        records = [
            StockRecord.from_product(product, config, services.inventory, services.display, saved.pop(product.id, None))
            for product in products
        ]
        for orphan_id in saved:
            logger.warning(f"Saved stock record {orphan_id} has no matching catalog product, dropping it.")

        logger.info(f"Inventory Management System initialized with {len(records)} products.")
        return cls(records, services, config, store)

    @classmethod
    def fresh(
        cls,
        services: HostServices,
        config: InventoryConfig,
        store: StockRecordStore | None = None,
    ) -> "InventorySystem":
        return cls.from_snapshots([], services, config, store)

    @classmethod
    def load_or_create(
        cls,
        services: HostServices,
        config: InventoryConfig,
        store: StockRecordStore | None = None,
    ) -> "InventorySystem":
        """Restore from the save file, or start fresh if there is no usable save."""
        store = store if store is not None else StockRecordStore(config.save_file_path)
        snapshots = store.load()
        if snapshots is None:
            return cls.fresh(services, config, store)
        return cls.from_snapshots(snapshots, services, config, store)

    def get_record(self, product_id: int) -> StockRecord | None:
        return self.records.get(product_id)

    # --- Host event entry points ---

    def record_sale(self, product_id: int, count: int | None = None) -> bool:
        """Count a sale of product_id. Returns False if the product has no stock record."""
        record = self.records.get(product_id)
        if record is None:
            logger.error(f"No stock record found for product {product_id}")
            return False
        try:
            record.record_sale(count)
        except ValueError as e:
            logger.error(f"Ignoring sale: {e}")
            return False
        logger.debug(record.sale_info())
        return True

    def rollover_day(self) -> None:
        for record in self.records.values():
            record.rollover_day()

        for record in sorted(self.records.values(), key=lambda r: r.average_sold_boxes(), reverse=True):
            logger.info(record.rolling_day_info())

    def save(self) -> bool:
        return self.store.save(r.to_snapshot() for r in self.records.values())

    @property
    def order_in_progress(self) -> bool:
        return self._order_in_progress

    async def run_order(self) -> OrderRunResult:
        """Plan and execute one restocking order."""
        if self._order_in_progress:
            logger.warning("An order is already being processed, ignoring new order request.")
            return OrderRunResult(outcome=OrderRunOutcome.ALREADY_RUNNING)

        self._order_in_progress = True
        try:
            order = OrderPlanner(self.services.prices).plan(self.records.values())
            if not order:
                logger.info("No new order, all items are in stock!")
                return OrderRunResult(outcome=OrderRunOutcome.FULLY_STOCKED)

            logger.info("New Order Generated:")
            for item in order:
                logger.info(str(item))
            logger.info(f"Total price: {total_price(order):.2f}")

            executor = OrderExecutor(self.services.cart, self.services.money, self.config)
            return await executor.run(order)
        finally:
            self._order_in_progress = False

    # --- Reporting ---

    def _displayed_deltas(self) -> list[tuple[StockRecord, float]]:
        deltas = []
        for record in self.records.values():
            try:
                if record.is_on_display():
                    deltas.append((record, record.stock_delta()))
            except LookupError as e:
                logger.error(f"Cannot compute stock delta for {record.product_name_print()}: {e}")
        return deltas

    def get_stock_delta_outliers(
        self, top_limit: int = 5, min_delta_boxes: float = 0
    ) -> tuple[list[StockRecord], list[StockRecord]]:
        """
        Displayed records with the largest shortfalls (top, most positive
        first) and largest surpluses (bottom, most negative first).
        """
        deltas = [(r, d) for r, d in self._displayed_deltas() if abs(d) >= min_delta_boxes]
        top = sorted((rd for rd in deltas if rd[1] > 0), key=lambda rd: rd[1], reverse=True)
        bottom = sorted((rd for rd in deltas if rd[1] < 0), key=lambda rd: rd[1])
        return [r for r, _ in top[:top_limit]], [r for r, _ in bottom[:top_limit]]

    def log_outliers(self, top_limit: int = 10, min_delta_boxes: float = 1) -> str:
        top, bottom = self.get_stock_delta_outliers(top_limit, min_delta_boxes)

        lines = [
            "",
            "===================================",
            f"Showing deltas with a minimum of {min_delta_boxes} ",
            "Top stock deltas:",
        ]
        lines += [self._delta_line(r) for r in top] or ["[no positive deltas]"]
        lines += ["", "Bottom stock deltas:"]
        lines += [self._delta_line(r) for r in bottom] or ["[no negative deltas]"]

        report = "\n".join(lines)
        logger.info(report)
        return report

    @staticmethod
    def _delta_line(record: StockRecord) -> str:
        return (
            f"ΔBox {record.stock_delta():8.2f} | Stock: {record.current_stock_boxes():5.1f} | "
            f"{record.product_name_print()}"
        )

    def stock_report(self) -> pd.DataFrame:
        """One row per stock record with its demand model and live stock figures."""
        rows = []
        for record in self.records.values():
            try:
                rows.append(
                    {
                        "product_id": record.id,
                        "name": record.name,
                        "brand": record.brand,
                        "on_display": record.is_on_display(),
                        "average_units": record.average_sold_units(),
                        "average_boxes": record.average_sold_boxes(),
                        "target_boxes": record.target_stock_boxes(),
                        "current_boxes": record.current_stock_boxes(),
                        "stock_delta": record.stock_delta(),
                    }
                )
            except LookupError as e:
                logger.error(f"Leaving {record.product_name_print()} out of the stock report: {e}")
        return pd.DataFrame(rows, columns=REPORT_COLUMNS)
