"""
Repository Implementations

Concrete SQLModel repositories for the raw record store. They translate
SQLAlchemy failures into domain exceptions and are the only layer that
builds SQL statements.
"""

from linedash.domain.shared.exceptions import (
    DatabaseError,
    EntityAlreadyExistsError,
    EntityNotFoundError,
)

from .base import BaseRepository
from .line_repository import (
    PlannedSpeedRepository,
    ProductionLineRepository,
    ProductionSystemRepository,
    ProductRepository,
    SubsubsystemRepository,
    SubsystemRepository,
)
from .production_repository import ProductionOrderRepository, StoppageRepository

__all__ = [
    # Base classes
    "BaseRepository",
    "DatabaseError",
    "EntityAlreadyExistsError",
    "EntityNotFoundError",
    # Line hierarchy and catalogue
    "ProductionLineRepository",
    "ProductionSystemRepository",
    "SubsystemRepository",
    "SubsubsystemRepository",
    "ProductRepository",
    "PlannedSpeedRepository",
    # Production records
    "ProductionOrderRepository",
    "StoppageRepository",
]
