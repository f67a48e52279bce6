"""Production orders and the raw records logged against them."""

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime
from sqlmodel import Field, Relationship, SQLModel

from .base import OrderStatus, StopCategory
from .production_line import Product, ProductionLine


class ProductionOrderBase(SQLModel):
    """Base production order fields."""

    order_number: str = Field(min_length=1, max_length=50, unique=True, index=True)
    production_line_id: int = Field(foreign_key="production_lines.id", index=True)
    product_id: int = Field(foreign_key="products.id", index=True)
    shift: int = Field(ge=1, le=3, description="Shift number (1-3)")
    planned_boxes: int = Field(default=0, ge=0)
    planned_hours: float | None = Field(
        default=None, ge=0, description="Planned production time in hours"
    )
    production_date: datetime = Field(sa_type=DateTime, index=True)


class ProductionOrderCreate(ProductionOrderBase):
    pass


class ProductionOrder(ProductionOrderBase, table=True):
    """
    ProductionOrder table model.

    produced_boxes only ever grows: it is incremented by hourly logging.
    """

    __tablename__ = "production_orders"

    id: int | None = Field(default=None, primary_key=True)
    produced_boxes: int = Field(default=0, ge=0)
    status: OrderStatus = Field(default=OrderStatus.PENDING, index=True)
    last_update_time: datetime | None = Field(default=None, sa_type=DateTime)
    created_at: datetime = Field(default_factory=datetime.utcnow, sa_type=DateTime)

    # Relationships
    production_line: ProductionLine = Relationship(back_populates="orders")
    product: Product = Relationship(back_populates="orders")
    hourly_entries: list["HourlyProductionEntry"] = Relationship(
        back_populates="order", cascade_delete=True
    )
    finalizations: list["FinalizationRecord"] = Relationship(
        back_populates="order", cascade_delete=True
    )
    stoppages: list["Stoppage"] = Relationship(
        back_populates="order", cascade_delete=True
    )


class ProductionOrderPublic(ProductionOrderBase):
    id: int
    produced_boxes: int
    status: OrderStatus
    last_update_time: datetime | None = None


class HourlyProductionEntry(SQLModel, table=True):
    """One hour bucket of actual output for an order."""

    __tablename__ = "hourly_production_entries"

    id: int | None = Field(default=None, primary_key=True)
    order_id: int = Field(foreign_key="production_orders.id", index=True)
    boxes: int = Field(ge=0)
    recorded_at: datetime = Field(
        default_factory=datetime.utcnow, sa_type=DateTime, index=True
    )

    order: ProductionOrder = Relationship(back_populates="hourly_entries")


class FinalizationRecord(SQLModel, table=True):
    """Residual (fractional) hours logged when an order wraps up mid-hour."""

    __tablename__ = "finalization_records"

    id: int | None = Field(default=None, primary_key=True)
    order_id: int = Field(foreign_key="production_orders.id", index=True)
    elapsed_hours: float = Field(ge=0)
    recorded_at: datetime = Field(default_factory=datetime.utcnow, sa_type=DateTime)

    order: ProductionOrder = Relationship(back_populates="finalizations")


class StoppageBase(SQLModel):
    duration_minutes: float = Field(gt=0)
    category: StopCategory
    subsystem_id: int | None = Field(default=None, foreign_key="subsystems.id")
    description: str | None = Field(default=None, max_length=500)


class StoppageCreate(StoppageBase):
    pass


class Stoppage(StoppageBase, table=True):
    """A downtime event (paro) recorded against an order."""

    __tablename__ = "stoppages"

    id: int | None = Field(default=None, primary_key=True)
    order_id: int = Field(foreign_key="production_orders.id", index=True)
    created_at: datetime = Field(
        default_factory=datetime.utcnow, sa_type=DateTime, index=True
    )

    order: Optional["ProductionOrder"] = Relationship(back_populates="stoppages")


class StoppagePublic(StoppageBase):
    id: int
    order_id: int
    created_at: datetime


class HourlyProductionCreate(SQLModel):
    """Boxes produced during one hour; ``recorded_at`` defaults to now."""

    boxes: int
    recorded_at: datetime | None = None


class HourlyProductionEntryPublic(SQLModel):
    id: int
    order_id: int
    boxes: int
    recorded_at: datetime


class OrderFinish(SQLModel):
    elapsed_hours: float | None = Field(
        default=None, description="Residual hours worked after the last full hour"
    )
