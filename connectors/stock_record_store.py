"""
Module: connectors.stock_record_store

Durable JSON storage for stock record snapshots. Loading is tolerant of a
missing or corrupt file; saving replaces the file atomically so a failed
write leaves the previous save in place.
"""

import contextlib
import json
import logging
import os
import tempfile
from collections.abc import Iterable
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from models.inventory import StockRecordSnapshot

logger = logging.getLogger(__name__)

_snapshot_list = TypeAdapter(list[StockRecordSnapshot])


class StockRecordStore:
    """Reads and writes the list of StockRecordSnapshots at a fixed path."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def save(self, snapshots: Iterable[StockRecordSnapshot]) -> bool:
        """Write all snapshots. Returns False (after logging) if the write failed."""
        data = [s.model_dump(mode="json") for s in snapshots]
        tmp_name = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w", encoding="utf-8", dir=self.path.parent, prefix=f".{self.path.name}.", delete=False
            ) as tmp:
                tmp_name = tmp.name
                json.dump(data, tmp, indent=2)
            os.replace(tmp_name, self.path)
        except OSError as e:
            logger.error(f"Cannot save inventory data at {self.path}: {e}")
            if tmp_name is not None:
                with contextlib.suppress(OSError):
                    os.remove(tmp_name)
            return False

        logger.info(f"Saved inventory data for {len(data)} products to {self.path}")
        return True

    def load(self) -> list[StockRecordSnapshot] | None:
        """
        Read saved snapshots. Returns None when there is no saved state:
        the file is absent, unreadable, or does not hold a list of records.
        """
        if not self.path.exists():
            logger.info(f"No saved inventory data at {self.path}, starting fresh.")
            return None

        try:
            contents = self.path.read_text(encoding="utf-8")
            raw = json.loads(contents)
            if raw is None:
                raise ValueError("Save data could not load correctly")
            snapshots = _snapshot_list.validate_python(raw)
        except (OSError, ValueError, ValidationError) as e:
            # json.JSONDecodeError is a ValueError
            logger.error(f"Error loading inventory data from {self.path}:\n{e}")
            return None

        logger.info(f"Loaded inventory data for {len(snapshots)} products from {self.path}")
        return snapshots
