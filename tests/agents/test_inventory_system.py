import asyncio
import json
import logging
from unittest.mock import AsyncMock, patch

import pytest

from agents.inventory_system import REPORT_COLUMNS, InventorySystem
from connectors.stock_record_store import StockRecordStore
from models.enums import OrderRunOutcome
from models.inventory import StockRecordSnapshot


@pytest.fixture
def store(config) -> StockRecordStore:
    return StockRecordStore(config.save_file_path)


@pytest.fixture
def ims(dummy_store, config, store) -> InventorySystem:
    return InventorySystem.fresh(dummy_store.services(), config, store)


@pytest.fixture(autouse=True)
def no_order_pause():
    with patch("agents.order_executor.asyncio.sleep", new_callable=AsyncMock) as sleep:
        yield sleep


# --- Construction and persistence --- #


def test_fresh_builds_one_record_per_product(ims: InventorySystem):
    assert list(ims.records) == [1, 2, 3]
    assert all(r.sales_history == [] and r.current_day_count == 0 for r in ims.records.values())


def test_load_or_create_without_save_file_starts_fresh(dummy_store, config, store):
    ims = InventorySystem.load_or_create(dummy_store.services(), config, store)
    assert list(ims.records) == [1, 2, 3]
    assert ims.store is store


def test_save_then_load_round_trip(ims: InventorySystem, dummy_store, config, store):
    ims.record_sale(1, 5)
    ims.rollover_day()
    ims.record_sale(1)
    ims.record_sale(2, 3)
    ims.rollover_day()
    ims.record_sale(3, 7)
    assert ims.save() is True

    restored = InventorySystem.load_or_create(dummy_store.services(), config, store)

    assert [r.to_snapshot() for r in restored.records.values()] == [r.to_snapshot() for r in ims.records.values()]
    assert restored.get_record(1).sales_history == [5, 1]
    assert restored.get_record(3).current_day_count == 7


def test_corrupt_save_file_falls_back_to_fresh(dummy_store, config, store, caplog):
    store.path.write_text('[{"id": 1, "sales_history": [1, 2', encoding="utf-8")

    with caplog.at_level(logging.ERROR):
        ims = InventorySystem.load_or_create(dummy_store.services(), config, store)

    assert list(ims.records) == [1, 2, 3]
    assert ims.get_record(1).sales_history == []
    assert "Error loading inventory data" in caplog.text


def test_new_catalog_products_start_empty_and_orphans_are_dropped(dummy_store, config, store, caplog):
    store.save(
        [
            StockRecordSnapshot(id=2, sales_history=[6, 6], current_day_count=1),
            StockRecordSnapshot(id=42, sales_history=[9]),
        ]
    )

    with caplog.at_level(logging.WARNING):
        ims = InventorySystem.load_or_create(dummy_store.services(), config, store)

    assert list(ims.records) == [1, 2, 3]
    assert ims.get_record(2).sales_history == [6, 6]
    assert ims.get_record(2).current_day_count == 1
    assert ims.get_record(1).sales_history == []
    assert ims.get_record(42) is None
    assert "Saved stock record 42 has no matching catalog product" in caplog.text


def test_duplicate_saved_ids_keep_first_record(dummy_store, config, store, caplog):
    store.path.write_text(
        json.dumps([{"id": 1, "sales_history": [50, 50, 50]}, {"id": 1, "sales_history": []}]),
        encoding="utf-8",
    )

    with caplog.at_level(logging.WARNING):
        ims = InventorySystem.load_or_create(dummy_store.services(), config, store)

    assert ims.get_record(1).sales_history == [50, 50, 50]
    assert "Duplicate saved stock record 1" in caplog.text


def test_save_failure_is_logged_not_raised(ims: InventorySystem, tmp_path, caplog):
    blocker = tmp_path / "not_a_dir"
    blocker.write_text("x")
    ims.store = StockRecordStore(blocker / "IMS.json")

    with caplog.at_level(logging.ERROR):
        assert ims.save() is False
    assert "Cannot save inventory data" in caplog.text


# --- Sales and rollover --- #


def test_record_sale_unknown_product(ims: InventorySystem, caplog):
    with caplog.at_level(logging.ERROR):
        assert ims.record_sale(404) is False
    assert "No stock record found for product 404" in caplog.text
    assert all(r.current_day_count == 0 for r in ims.records.values())


def test_record_sale_negative_count_is_ignored(ims: InventorySystem, caplog):
    with caplog.at_level(logging.ERROR):
        assert ims.record_sale(1, -3) is False
    assert ims.get_record(1).current_day_count == 0


def test_rollover_day_shifts_every_record(ims: InventorySystem, caplog):
    ims.record_sale(1, 10)
    ims.record_sale(2)
    with caplog.at_level(logging.INFO):
        ims.rollover_day()

    assert ims.get_record(1).sales_history == [10]
    assert ims.get_record(2).sales_history == [1]
    assert ims.get_record(3).sales_history == [0]
    assert all(r.current_day_count == 0 for r in ims.records.values())
    # Highest average boxes is logged first
    assert caplog.text.index("Bread") < caplog.text.index("Milk")


# --- Order runs --- #


@pytest.mark.asyncio
async def test_run_order_fully_stocked(ims: InventorySystem, dummy_store, caplog):
    with caplog.at_level(logging.INFO):
        result = await ims.run_order()
    assert result.outcome == OrderRunOutcome.FULLY_STOCKED
    assert dummy_store.purchases == []
    assert "No new order, all items are in stock!" in caplog.text


@pytest.mark.asyncio
async def test_run_order_buys_shortfall(ims: InventorySystem, dummy_store, caplog):
    dummy_store.set_on_display(1)
    dummy_store.set_prices(1, unit_price=2.0)
    ims.get_record(1).sales_history = [20, 30, 40]
    dummy_store.set_stock(1, displayed=30, boxed=25)

    with caplog.at_level(logging.INFO):
        result = await ims.run_order()

    assert result.outcome == OrderRunOutcome.COMPLETED
    assert result.boxes_added == {1: 4}
    assert dummy_store.funds == pytest.approx(1000.0 - 4 * 20.0)
    assert dummy_store.current_units_split(1).in_transit == 40
    assert "New Order Generated:" in caplog.text
    assert "Total price: 80.00" in caplog.text
    assert ims.order_in_progress is False
    # Ordering does not touch the demand model
    assert ims.get_record(1).sales_history == [20, 30, 40]


@pytest.mark.asyncio
async def test_only_one_order_run_at_a_time(ims: InventorySystem, dummy_store, no_order_pause):
    dummy_store.set_on_display(1)
    suspended = asyncio.Event()
    gate = asyncio.Event()

    # asyncio.sleep is patched module-wide, so the test waits on events instead
    async def blocked_sleep(delay):
        suspended.set()
        await gate.wait()

    no_order_pause.side_effect = blocked_sleep
    first = asyncio.create_task(ims.run_order())
    await suspended.wait()
    assert ims.order_in_progress is True

    second = await ims.run_order()
    assert second.outcome == OrderRunOutcome.ALREADY_RUNNING

    gate.set()
    result = await first
    assert result.outcome == OrderRunOutcome.COMPLETED
    assert ims.order_in_progress is False


# --- Reporting --- #


def _set_up_deltas(ims: InventorySystem, dummy_store):
    for pid in (1, 2, 3):
        dummy_store.set_on_display(pid)
    dummy_store.set_stock(1, boxed=0)  # target 2 -> delta +2
    dummy_store.set_stock(2, boxed=6 * 7)  # target 2 -> delta -5
    ims.get_record(3).sales_history = [100, 100, 100]  # 5 boxes/day -> target 10
    dummy_store.set_stock(3, boxed=20)  # delta +9


def test_stock_delta_outliers(ims: InventorySystem, dummy_store):
    _set_up_deltas(ims, dummy_store)
    top, bottom = ims.get_stock_delta_outliers()
    assert [r.id for r in top] == [3, 1]
    assert [r.id for r in bottom] == [2]

    top, bottom = ims.get_stock_delta_outliers(top_limit=1, min_delta_boxes=3)
    assert [r.id for r in top] == [3]
    assert [r.id for r in bottom] == [2]


def test_outliers_ignore_products_not_displayed(ims: InventorySystem, dummy_store):
    _set_up_deltas(ims, dummy_store)
    dummy_store.set_on_display(3, False)
    top, _ = ims.get_stock_delta_outliers()
    assert [r.id for r in top] == [1]


def test_log_outliers(ims: InventorySystem, dummy_store, caplog):
    with caplog.at_level(logging.INFO):
        report = ims.log_outliers()
    assert "[no positive deltas]" in report
    assert "[no negative deltas]" in report

    _set_up_deltas(ims, dummy_store)
    report = ims.log_outliers()
    assert "ΔBox     9.00 | Stock:   1.0 | Apples(3)" in report
    assert "ΔBox    -5.00 | Stock:   7.0 | Milk - Happy Cow(2)" in report


def test_stock_report(ims: InventorySystem, dummy_store):
    _set_up_deltas(ims, dummy_store)
    report = ims.stock_report()

    assert list(report.columns) == REPORT_COLUMNS
    assert list(report["product_id"]) == [1, 2, 3]
    apples = report.set_index("product_id").loc[3]
    assert apples["average_boxes"] == pytest.approx(5.0)
    assert apples["target_boxes"] == pytest.approx(10.0)
    assert apples["stock_delta"] == pytest.approx(9.0)


def test_save_file_layout(ims: InventorySystem, store):
    ims.record_sale(1, 2)
    ims.save()
    data = json.loads(store.path.read_text(encoding="utf-8"))
    assert data[0] == {"id": 1, "sales_history": [], "current_day_count": 2}
