"""Base enums for production SQLModel classes."""

from enum import Enum


class OrderStatus(str, Enum):
    """Production order lifecycle."""

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class StopCategory(str, Enum):
    """Stoppage (paro) categories."""

    MAINTENANCE = "maintenance"
    QUALITY = "quality"
    OPERATIONAL = "operational"
