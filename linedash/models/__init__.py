"""SQLModel database models for the application."""

from sqlmodel import SQLModel  # noqa: F401  (metadata for create_all)

from .base import OrderStatus, StopCategory
from .production import (
    FinalizationRecord,
    HourlyProductionCreate,
    HourlyProductionEntry,
    HourlyProductionEntryPublic,
    OrderFinish,
    ProductionOrder,
    ProductionOrderCreate,
    ProductionOrderPublic,
    Stoppage,
    StoppageCreate,
    StoppagePublic,
)
from .production_line import (
    Product,
    ProductCreate,
    ProductionLine,
    ProductionLineCreate,
    ProductionLinePublic,
    ProductionLineTree,
    ProductionSystem,
    ProductionSystemCreate,
    ProductionSystemPublic,
    ProductOnLine,
    ProductOnLinePublic,
    ProductOnLineUpdate,
    ProductPublic,
    Subsubsystem,
    SubsubsystemCreate,
    SubsubsystemPublic,
    Subsystem,
    SubsystemCreate,
    SubsystemPublic,
)

__all__ = [
    "OrderStatus",
    "StopCategory",
    # Hierarchy and catalogue
    "ProductionLine",
    "ProductionLineCreate",
    "ProductionLinePublic",
    "ProductionLineTree",
    "ProductionSystem",
    "ProductionSystemCreate",
    "ProductionSystemPublic",
    "Subsystem",
    "SubsystemCreate",
    "SubsystemPublic",
    "Subsubsystem",
    "SubsubsystemCreate",
    "SubsubsystemPublic",
    "Product",
    "ProductCreate",
    "ProductPublic",
    "ProductOnLine",
    "ProductOnLinePublic",
    "ProductOnLineUpdate",
    # Production records
    "ProductionOrder",
    "ProductionOrderCreate",
    "ProductionOrderPublic",
    "HourlyProductionCreate",
    "HourlyProductionEntry",
    "HourlyProductionEntryPublic",
    "OrderFinish",
    "FinalizationRecord",
    "Stoppage",
    "StoppageCreate",
    "StoppagePublic",
]
