"""
Centralized Enum definitions for the project.
"""

from enum import Enum


class AgentType(str, Enum):
    """Participants that publish events on the bus"""

    HOST = "host"
    INVENTORY = "inventory"
    SYSTEM = "system"


class HostEventType(str, Enum):
    """Lifecycle events emitted by the host game"""

    PRODUCT_SCANNED = "checkout.product_scanned"
    DAY_FINISHED = "day.finished"
    DAY_STARTED = "day.started"
    GAME_SAVED = "game.saved"
    RESTOCK_REQUESTED = "restock.requested"
    DELTA_REPORT_REQUESTED = "restock.delta_report_requested"


class OrderRunState(str, Enum):
    """States of a single order run"""

    PLANNING = "planning"
    CHECK_EMBARGO = "check_embargo"
    PURCHASING = "purchasing"
    FLUSHING = "flushing"
    DONE = "done"


class OrderRunOutcome(str, Enum):
    """Why an order run ended"""

    FULLY_STOCKED = "fully_stocked"
    EMBARGOED = "embargoed"
    INSUFFICIENT_FUNDS = "insufficient_funds"
    COMPLETED = "completed"
    ALREADY_RUNNING = "already_running"
