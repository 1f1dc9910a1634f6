import sys
from pathlib import Path

import pytest

# Ensure project root is on sys.path to allow `import agents`, `import models`, etc.
PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from config.config import InventoryConfig  # noqa: E402
from connectors.dummy_store import DummyStore  # noqa: E402
from models.inventory import CatalogProduct  # noqa: E402


@pytest.fixture
def products() -> list[CatalogProduct]:
    return [
        CatalogProduct(id=1, name="Bread", brand="Baker's Best", category="bakery", box_size=10),
        CatalogProduct(id=2, name="Milk", brand="Happy Cow", category="dairy", box_size=6),
        CatalogProduct(id=3, name="Apples", category="produce", box_size=20),
    ]


@pytest.fixture
def config(tmp_path: Path) -> InventoryConfig:
    """Defaults with the save file inside the test's temp dir and no order pause."""
    return InventoryConfig(order_wait_seconds=0, save_file_path=str(tmp_path / "IMS.json"))


@pytest.fixture
def dummy_store(products: list[CatalogProduct]) -> DummyStore:
    return DummyStore(products, funds=1000.0, max_cart_items=40)
