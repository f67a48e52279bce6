"""
Mapper for converting ProductionOrder SQL entities into aggregator snapshots.
"""

from linedash.domain.efficiency import HourlyEntrySnapshot, OrderSnapshot
from linedash.models import OrderStatus, ProductionOrder


class OrderMapper:
    """
    Mapper class for converting ProductionOrder rows to immutable snapshots.

    Expects the hourly entries, finalizations, product and line relations to be
    loaded already.
    """

    @staticmethod
    def sql_to_snapshot(
        order: ProductionOrder, planned_speed: float | None = None
    ) -> OrderSnapshot:
        """
        Convert an SQL order to an OrderSnapshot.

        Args:
            order: ORM order with relations loaded
            planned_speed: Boxes per hour planned for the order's (product, line)

        Returns:
            Order snapshot
        """
        entries = tuple(
            HourlyEntrySnapshot(boxes=entry.boxes, recorded_at=entry.recorded_at)
            for entry in sorted(order.hourly_entries, key=lambda e: e.recorded_at)
        )
        return OrderSnapshot(
            order_id=order.id,
            order_number=order.order_number,
            line_id=order.production_line_id,
            line_name=order.production_line.name if order.production_line else "",
            product_id=order.product_id,
            product_name=order.product.name if order.product else "",
            shift=order.shift,
            planned_boxes=order.planned_boxes,
            produced_boxes=order.produced_boxes,
            planned_hours=order.planned_hours,
            production_date=order.production_date,
            status=OrderStatus(order.status).value,
            planned_speed=planned_speed,
            hourly_entries=entries,
            finalization_hours=tuple(f.elapsed_hours for f in order.finalizations),
        )
