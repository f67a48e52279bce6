"""
Production order repository.

Provides the window-scoped reads the reports are built from and the writes
used by order tracking: hourly entries, finalization records and stoppages.
"""

from datetime import datetime

from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import selectinload
from sqlmodel import select

from linedash.models import (
    FinalizationRecord,
    HourlyProductionEntry,
    OrderStatus,
    Product,
    ProductionLine,
    ProductionOrder,
    ProductionOrderCreate,
    ProductionSystem,
    StopCategory,
    Stoppage,
    Subsystem,
)

from .base import BaseRepository, DatabaseError


class ProductionOrderRepository(BaseRepository[ProductionOrder, ProductionOrderCreate]):
    """
    Repository implementation for ProductionOrder entities.

    Window queries eagerly load everything the efficiency aggregator reads so
    mapping to snapshots never triggers lazy loads.
    """

    @property
    def entity_class(self):
        return ProductionOrder

    def find_by_order_number(self, order_number: str) -> ProductionOrder | None:
        try:
            statement = select(ProductionOrder).where(
                ProductionOrder.order_number == order_number
            )
            return self.session.exec(statement).first()
        except SQLAlchemyError as e:
            raise DatabaseError(
                f"Error finding order by number {order_number}: {str(e)}"
            ) from e

    def find_orders(
        self,
        start: datetime | None = None,
        end: datetime | None = None,
        status: OrderStatus | None = None,
        line_id: int | None = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[ProductionOrder]:
        """
        Find orders, optionally bounded by production date.

        Args:
            start: Inclusive lower bound on production date
            end: Inclusive upper bound on production date
            status: Optional status filter
            line_id: Optional production line filter
            limit: Optional page size
            offset: Page offset

        Raises:
            DatabaseError: If database operation fails
        """
        try:
            statement = (
                select(ProductionOrder)
                .options(
                    selectinload(ProductionOrder.hourly_entries),
                    selectinload(ProductionOrder.finalizations),
                    selectinload(ProductionOrder.product),
                    selectinload(ProductionOrder.production_line),
                )
            )
            if start is not None:
                statement = statement.where(ProductionOrder.production_date >= start)
            if end is not None:
                statement = statement.where(ProductionOrder.production_date <= end)
            if status is not None:
                statement = statement.where(ProductionOrder.status == status)
            if line_id is not None:
                statement = statement.where(ProductionOrder.production_line_id == line_id)
            statement = statement.order_by(
                ProductionOrder.production_date, ProductionOrder.id
            ).offset(offset)
            if limit:
                statement = statement.limit(limit)
            return list(self.session.exec(statement).all())
        except SQLAlchemyError as e:
            raise DatabaseError(
                f"Error finding orders between {start} and {end}: {str(e)}"
            ) from e

    def add_hourly_entry(
        self, order: ProductionOrder, boxes: int, recorded_at: datetime
    ) -> HourlyProductionEntry:
        """
        Append an hourly entry and bump the order's produced boxes in one commit.

        The increment is applied in SQL so concurrent loggers never overwrite
        each other's boxes.
        """
        entry = HourlyProductionEntry(
            order_id=order.id, boxes=boxes, recorded_at=recorded_at
        )
        changes = {
            "produced_boxes": ProductionOrder.produced_boxes + boxes,
            "last_update_time": recorded_at,
        }
        if order.status == OrderStatus.PENDING:
            changes["status"] = OrderStatus.IN_PROGRESS
        statement = (
            update(ProductionOrder)
            .where(ProductionOrder.id == order.id)
            .values(**changes)
        )
        try:
            self.session.add(entry)
            self.session.exec(statement)
            self.session.commit()
            self.session.refresh(entry)
            self.session.refresh(order)
            return entry
        except SQLAlchemyError as e:
            self.session.rollback()
            raise DatabaseError(
                f"Error logging hourly production for order {order.id}: {str(e)}"
            ) from e

    def finish(
        self, order: ProductionOrder, elapsed_hours: float | None, finished_at: datetime
    ) -> ProductionOrder:
        """Mark the order completed, storing residual hours when given."""
        order.status = OrderStatus.COMPLETED
        order.last_update_time = finished_at
        try:
            if elapsed_hours:
                self.session.add(
                    FinalizationRecord(
                        order_id=order.id,
                        elapsed_hours=elapsed_hours,
                        recorded_at=finished_at,
                    )
                )
            self.session.add(order)
            self.session.commit()
            self.session.refresh(order)
            return order
        except SQLAlchemyError as e:
            self.session.rollback()
            raise DatabaseError(f"Error finishing order {order.id}: {str(e)}") from e

    def hourly_entries_in_window(
        self, start: datetime, end: datetime
    ) -> list[tuple[HourlyProductionEntry, Product]]:
        """Hourly entries recorded within the window, paired with their product."""
        try:
            statement = (
                select(HourlyProductionEntry, Product)
                .join(
                    ProductionOrder,
                    HourlyProductionEntry.order_id == ProductionOrder.id,
                )
                .join(Product, ProductionOrder.product_id == Product.id)
                .where(HourlyProductionEntry.recorded_at >= start)
                .where(HourlyProductionEntry.recorded_at <= end)
                .order_by(HourlyProductionEntry.recorded_at, HourlyProductionEntry.id)
            )
            return list(self.session.exec(statement).all())
        except SQLAlchemyError as e:
            raise DatabaseError(
                f"Error loading hourly entries between {start} and {end}: {str(e)}"
            ) from e


class StoppageRepository(BaseRepository[Stoppage, Stoppage]):
    """Repository for stoppage (paro) records."""

    @property
    def entity_class(self):
        return Stoppage

    def find_for_order(self, order_id: int) -> list[Stoppage]:
        try:
            statement = (
                select(Stoppage)
                .where(Stoppage.order_id == order_id)
                .order_by(Stoppage.created_at, Stoppage.id)
            )
            return list(self.session.exec(statement).all())
        except SQLAlchemyError as e:
            raise DatabaseError(
                f"Error finding stoppages for order {order_id}: {str(e)}"
            ) from e

    def find_in_window(
        self, start: datetime, end: datetime
    ) -> list[tuple[Stoppage, ProductionLine]]:
        """Stoppages created within the window, paired with the order's line."""
        try:
            statement = (
                select(Stoppage, ProductionLine)
                .join(ProductionOrder, Stoppage.order_id == ProductionOrder.id)
                .join(
                    ProductionLine,
                    ProductionOrder.production_line_id == ProductionLine.id,
                )
                .where(Stoppage.created_at >= start)
                .where(Stoppage.created_at <= end)
                .order_by(Stoppage.created_at, Stoppage.id)
            )
            return list(self.session.exec(statement).all())
        except SQLAlchemyError as e:
            raise DatabaseError(
                f"Error loading stoppages between {start} and {end}: {str(e)}"
            ) from e

    def find_with_subsystem_in_window(
        self, start: datetime, end: datetime, category: StopCategory | None = None
    ) -> list[
        tuple[Stoppage, Subsystem | None, ProductionSystem | None, ProductionLine | None]
    ]:
        """
        Stoppages created within the window with the subsystem they were
        attributed to, its system and that system's line.

        Stoppages without a subsystem come back with ``None`` in the last
        three places.
        """
        try:
            statement = (
                select(Stoppage, Subsystem, ProductionSystem, ProductionLine)
                .outerjoin(Subsystem, Stoppage.subsystem_id == Subsystem.id)
                .outerjoin(ProductionSystem, Subsystem.system_id == ProductionSystem.id)
                .outerjoin(
                    ProductionLine,
                    ProductionSystem.production_line_id == ProductionLine.id,
                )
                .where(Stoppage.created_at >= start)
                .where(Stoppage.created_at <= end)
            )
            if category is not None:
                statement = statement.where(Stoppage.category == category)
            statement = statement.order_by(Stoppage.created_at, Stoppage.id)
            return list(self.session.exec(statement).all())
        except SQLAlchemyError as e:
            raise DatabaseError(
                f"Error loading stoppages by subsystem between {start} and {end}: "
                f"{str(e)}"
            ) from e
