"""
Configuration classes for the inventory management system.
Defines the stocking, statistics and persistence options in a type-safe, extensible way.
"""

import os
from dataclasses import dataclass

from utils.env import load_project_dotenv

_TRUE_VALUES = {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ValueError(f"Environment variable {name} must be an integer, got {raw!r}") from e


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError as e:
        raise ValueError(f"Environment variable {name} must be a number, got {raw!r}") from e


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in _TRUE_VALUES


@dataclass
class InventoryConfig:
    """
    Options recognized by the inventory management system.

    - min_boxes: minimum boxes to keep stocked, regardless of demand
    - days_to_stock: number of days of average demand to keep stocked
    - averaging_days: number of days to average sales over
    - include_display: count units on display as stock (False keeps X days in the back)
    - protected_funds: funds the ordering system is never allowed to spend
    - autostock_daily_morning: run a restock at the start of every day
    """

    min_boxes: int = 2
    days_to_stock: int = 2
    averaging_days: int = 3
    include_display: bool = False
    protected_funds: float = 0
    autostock_daily_morning: bool = False
    order_wait_seconds: float = 1.0  # Pause after a full cart is purchased
    save_file_path: str = "IMS.json"
    log_level: str = "INFO"

    def __post_init__(self):
        if self.averaging_days < 1:
            raise ValueError(f"averaging_days must be at least 1, got {self.averaging_days}")
        if self.min_boxes < 0:
            raise ValueError(f"min_boxes cannot be negative, got {self.min_boxes}")
        if self.days_to_stock < 0:
            raise ValueError(f"days_to_stock cannot be negative, got {self.days_to_stock}")
        if self.protected_funds < 0:
            raise ValueError(f"protected_funds cannot be negative, got {self.protected_funds}")
        if self.order_wait_seconds < 0:
            raise ValueError(f"order_wait_seconds cannot be negative, got {self.order_wait_seconds}")

    @classmethod
    def from_env(cls) -> "InventoryConfig":
        """Build a config from IMS_* environment variables, loading the project .env first."""
        load_project_dotenv()
        defaults = cls()
        return cls(
            min_boxes=_env_int("IMS_MIN_BOXES", defaults.min_boxes),
            days_to_stock=_env_int("IMS_DAYS_TO_STOCK", defaults.days_to_stock),
            averaging_days=_env_int("IMS_AVERAGING_DAYS", defaults.averaging_days),
            include_display=_env_bool("IMS_INCLUDE_DISPLAY", defaults.include_display),
            protected_funds=_env_float("IMS_PROTECTED_FUNDS", defaults.protected_funds),
            autostock_daily_morning=_env_bool("IMS_AUTOSTOCK_DAILY_MORNING", defaults.autostock_daily_morning),
            order_wait_seconds=_env_float("IMS_ORDER_WAIT_SECONDS", defaults.order_wait_seconds),
            save_file_path=os.getenv("IMS_SAVE_FILE") or defaults.save_file_path,
            log_level=os.getenv("IMS_LOG_LEVEL") or defaults.log_level,
        )


# Example usage:
# config = InventoryConfig.from_env()
# config = InventoryConfig(days_to_stock=3, protected_funds=500)
