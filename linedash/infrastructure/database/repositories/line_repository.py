"""
Repositories for the line hierarchy, the product catalogue and planned speeds.
"""

from collections.abc import Iterable

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import selectinload
from sqlmodel import select

from linedash.models import (
    Product,
    ProductCreate,
    ProductionLine,
    ProductionLineCreate,
    ProductionSystem,
    ProductionSystemCreate,
    ProductOnLine,
    Subsubsystem,
    SubsubsystemCreate,
    Subsystem,
    SubsystemCreate,
)

from .base import BaseRepository, DatabaseError


class ProductionLineRepository(BaseRepository[ProductionLine, ProductionLineCreate]):
    @property
    def entity_class(self):
        return ProductionLine

    def find_by_name(self, name: str) -> ProductionLine | None:
        try:
            statement = select(ProductionLine).where(ProductionLine.name == name)
            return self.session.exec(statement).first()
        except SQLAlchemyError as e:
            raise DatabaseError(f"Error finding line by name {name}: {str(e)}") from e

    def find_with_tree(self, line_id: int) -> ProductionLine | None:
        """
        Find a line with systems, subsystems and sub-subsystems eagerly loaded.

        Raises:
            DatabaseError: If database operation fails
        """
        try:
            statement = (
                select(ProductionLine)
                .options(
                    selectinload(ProductionLine.systems)
                    .selectinload(ProductionSystem.subsystems)
                    .selectinload(Subsystem.subsubsystems)
                )
                .where(ProductionLine.id == line_id)
            )
            return self.session.exec(statement).first()
        except SQLAlchemyError as e:
            raise DatabaseError(
                f"Error loading hierarchy for line {line_id}: {str(e)}"
            ) from e


class ProductionSystemRepository(
    BaseRepository[ProductionSystem, ProductionSystemCreate]
):
    @property
    def entity_class(self):
        return ProductionSystem


class SubsystemRepository(BaseRepository[Subsystem, SubsystemCreate]):
    @property
    def entity_class(self):
        return Subsystem


class SubsubsystemRepository(BaseRepository[Subsubsystem, SubsubsystemCreate]):
    @property
    def entity_class(self):
        return Subsubsystem


class ProductRepository(BaseRepository[Product, ProductCreate]):
    @property
    def entity_class(self):
        return Product

    def find_by_name(self, name: str) -> Product | None:
        try:
            statement = select(Product).where(Product.name == name)
            return self.session.exec(statement).first()
        except SQLAlchemyError as e:
            raise DatabaseError(
                f"Error finding product by name {name}: {str(e)}"
            ) from e


class PlannedSpeedRepository(BaseRepository[ProductOnLine, ProductOnLine]):
    """Planned boxes-per-hour per (product, line) pair."""

    @property
    def entity_class(self):
        return ProductOnLine

    def find_pair(self, product_id: int, line_id: int) -> ProductOnLine | None:
        try:
            statement = select(ProductOnLine).where(
                ProductOnLine.product_id == product_id,
                ProductOnLine.production_line_id == line_id,
            )
            return self.session.exec(statement).first()
        except SQLAlchemyError as e:
            raise DatabaseError(
                f"Error finding planned speed for product {product_id} "
                f"on line {line_id}: {str(e)}"
            ) from e

    def find_for_line(self, line_id: int) -> list[ProductOnLine]:
        try:
            statement = (
                select(ProductOnLine)
                .where(ProductOnLine.production_line_id == line_id)
                .order_by(ProductOnLine.product_id)
            )
            return list(self.session.exec(statement).all())
        except SQLAlchemyError as e:
            raise DatabaseError(
                f"Error listing planned speeds for line {line_id}: {str(e)}"
            ) from e

    def lookup(self, pairs: Iterable[tuple[int, int]]) -> dict[tuple[int, int], float]:
        """
        Planned speeds keyed by ``(product_id, line_id)``.

        Pairs without a stored plan are absent from the result.
        """
        pairs = set(pairs)
        if not pairs:
            return {}
        product_ids = {product_id for product_id, _ in pairs}
        try:
            statement = select(ProductOnLine).where(
                ProductOnLine.product_id.in_(product_ids)  # type: ignore[attr-defined]
            )
            rows = self.session.exec(statement).all()
        except SQLAlchemyError as e:
            raise DatabaseError(f"Error loading planned speeds: {str(e)}") from e
        return {
            (row.product_id, row.production_line_id): row.boxes_per_hour
            for row in rows
            if (row.product_id, row.production_line_id) in pairs
        }

    def upsert(self, product_id: int, line_id: int, boxes_per_hour: float) -> ProductOnLine:
        planned = self.find_pair(product_id, line_id)
        if planned is None:
            planned = ProductOnLine(
                product_id=product_id,
                production_line_id=line_id,
                boxes_per_hour=boxes_per_hour,
            )
        else:
            planned.boxes_per_hour = boxes_per_hour
        return self.save(planned)
