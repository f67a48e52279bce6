"""Production line hierarchy, product catalogue and planned speeds."""

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, Text, UniqueConstraint
from sqlmodel import Column, Field, Relationship, SQLModel


class ProductionLineBase(SQLModel):
    name: str = Field(min_length=1, max_length=100, unique=True, index=True)
    description: str | None = Field(default=None, sa_column=Column(Text))
    is_active: bool = Field(default=True)


class ProductionLineCreate(ProductionLineBase):
    pass


class ProductionLine(ProductionLineBase, table=True):
    """
    ProductionLine table model.

    Root of the equipment hierarchy: line -> systems -> subsystems ->
    sub-subsystems.
    """

    __tablename__ = "production_lines"

    id: int | None = Field(default=None, primary_key=True)
    created_at: datetime = Field(default_factory=datetime.utcnow, sa_type=DateTime)

    # Relationships
    systems: list["ProductionSystem"] = Relationship(
        back_populates="production_line", cascade_delete=True
    )
    planned_speeds: list["ProductOnLine"] = Relationship(
        back_populates="production_line", cascade_delete=True
    )
    orders: list["ProductionOrder"] = Relationship(back_populates="production_line")


class ProductionSystemBase(SQLModel):
    name: str = Field(min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=255)


class ProductionSystemCreate(ProductionSystemBase):
    pass


class ProductionSystem(ProductionSystemBase, table=True):
    __tablename__ = "production_systems"

    id: int | None = Field(default=None, primary_key=True)
    production_line_id: int = Field(foreign_key="production_lines.id", index=True)

    production_line: ProductionLine = Relationship(back_populates="systems")
    subsystems: list["Subsystem"] = Relationship(
        back_populates="system", cascade_delete=True
    )


class SubsystemBase(SQLModel):
    name: str = Field(min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=255)


class SubsystemCreate(SubsystemBase):
    pass


class Subsystem(SubsystemBase, table=True):
    __tablename__ = "subsystems"

    id: int | None = Field(default=None, primary_key=True)
    system_id: int = Field(foreign_key="production_systems.id", index=True)

    system: ProductionSystem = Relationship(back_populates="subsystems")
    subsubsystems: list["Subsubsystem"] = Relationship(
        back_populates="subsystem", cascade_delete=True
    )


class SubsubsystemBase(SQLModel):
    name: str = Field(min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=255)


class SubsubsystemCreate(SubsubsystemBase):
    pass


class Subsubsystem(SubsubsystemBase, table=True):
    __tablename__ = "subsubsystems"

    id: int | None = Field(default=None, primary_key=True)
    subsystem_id: int = Field(foreign_key="subsystems.id", index=True)

    subsystem: Subsystem = Relationship(back_populates="subsubsystems")


class ProductBase(SQLModel):
    name: str = Field(min_length=1, max_length=120, unique=True, index=True)
    flavor: str | None = Field(default=None, max_length=60)
    size_liters: float = Field(default=0.0, ge=0, description="Liters per unit")
    units_per_box: int = Field(default=0, ge=0)


class ProductCreate(ProductBase):
    pass


class Product(ProductBase, table=True):
    __tablename__ = "products"

    id: int | None = Field(default=None, primary_key=True)
    created_at: datetime = Field(default_factory=datetime.utcnow, sa_type=DateTime)

    planned_speeds: list["ProductOnLine"] = Relationship(back_populates="product")
    orders: list["ProductionOrder"] = Relationship(back_populates="product")


class ProductOnLineBase(SQLModel):
    boxes_per_hour: float = Field(
        default=0.0, ge=0, description="Planned speed; 0 means no plan"
    )


class ProductOnLineUpdate(ProductOnLineBase):
    pass


class ProductOnLine(ProductOnLineBase, table=True):
    """Planned production rate of a product on a given line."""

    __tablename__ = "products_on_line"
    __table_args__ = (
        UniqueConstraint("product_id", "production_line_id", name="uq_product_line"),
    )

    id: int | None = Field(default=None, primary_key=True)
    product_id: int = Field(foreign_key="products.id", index=True)
    production_line_id: int = Field(foreign_key="production_lines.id", index=True)
    updated_at: datetime = Field(
        default_factory=datetime.utcnow,
        sa_type=DateTime,
        sa_column_kwargs={"onupdate": datetime.utcnow},
    )

    product: Optional["Product"] = Relationship(back_populates="planned_speeds")
    production_line: Optional["ProductionLine"] = Relationship(
        back_populates="planned_speeds"
    )


# Public models


class SubsubsystemPublic(SubsubsystemBase):
    id: int
    subsystem_id: int


class SubsystemPublic(SubsystemBase):
    id: int
    system_id: int
    subsubsystems: list[SubsubsystemPublic] = []


class ProductionSystemPublic(ProductionSystemBase):
    id: int
    production_line_id: int
    subsystems: list[SubsystemPublic] = []


class ProductionLinePublic(ProductionLineBase):
    id: int


class ProductionLineTree(ProductionLinePublic):
    systems: list[ProductionSystemPublic] = []


class ProductPublic(ProductBase):
    id: int


class ProductOnLinePublic(ProductOnLineBase):
    id: int
    product_id: int
    production_line_id: int
