"""
Production volume query service: heatmaps by hour and weekday, and totals per
product, flavor and unit size. Liters are
``boxes * liters per unit * units per box``.
"""

from collections.abc import Callable, Hashable
from typing import Any

from linedash.application.dtos import (
    DayBucketResponse,
    DayHeatmapResponse,
    GroupProductionResponse,
    GroupProductionRowResponse,
    HourBucketResponse,
    HourHeatmapResponse,
    ProductProductionResponse,
    ProductProductionRowResponse,
)
from linedash.core.observability import monitor_report
from linedash.domain.efficiency import ReportWindow, round_to
from linedash.infrastructure.database.repositories import ProductionOrderRepository
from linedash.models import Product

from .base_query import BaseQueryService, ProductionSort

WEEKDAY_NAMES = ("Lunes", "Martes", "Miércoles", "Jueves", "Viernes", "Sábado", "Domingo")
NO_FLAVOR = "Sin sabor"

GroupKey = Callable[[Product], tuple[Hashable, str]]


def liters_for(boxes: int, product: Product) -> float:
    return boxes * (product.size_liters or 0.0) * (product.units_per_box or 0)


def by_product(product: Product) -> tuple[Hashable, str]:
    return product.id, product.name


def by_flavor(product: Product) -> tuple[Hashable, str]:
    flavor = (product.flavor or "").strip()
    if not flavor:
        return None, NO_FLAVOR
    return flavor.lower(), flavor


def by_size(product: Product) -> tuple[Hashable, str]:
    size = product.size_liters or 0.0
    return size, f"{size:g}L"


class ProductionQueryService(BaseQueryService):
    def __init__(self, session):
        super().__init__(session)
        self.orders = ProductionOrderRepository(session)

    @monitor_report("production_heatmap_by_hour")
    def heatmap_by_hour(self, window: ReportWindow) -> HourHeatmapResponse:
        """Boxes, liters and entry count per hour of day (00:00-23:00)."""
        boxes = [0] * 24
        liters = [0.0] * 24
        records = [0] * 24
        for entry, product in self.orders.hourly_entries_in_window(window.start, window.end):
            hour = entry.recorded_at.hour
            boxes[hour] += entry.boxes
            liters[hour] += liters_for(entry.boxes, product)
            records[hour] += 1

        return HourHeatmapResponse(
            data=[
                HourBucketResponse(
                    hour=f"{hour:02d}:00",
                    hour_index=hour,
                    boxes=boxes[hour],
                    liters=round_to(liters[hour], 2),
                    records=records[hour],
                )
                for hour in range(24)
            ],
            total_boxes=sum(boxes),
            total_liters=round_to(sum(liters), 2),
            max_boxes=max(boxes),
            max_liters=round_to(max(liters), 2),
            applied_filters=self.applied_filters(window),
        )

    @monitor_report("production_heatmap_by_day")
    def heatmap_by_day(self, window: ReportWindow) -> DayHeatmapResponse:
        """
        Boxes, liters and entry count per weekday, Monday first.

        ``dayIndex`` keeps the dashboard's numbering: Sunday is 0.
        """
        boxes = [0] * 7
        liters = [0.0] * 7
        records = [0] * 7
        for entry, product in self.orders.hourly_entries_in_window(window.start, window.end):
            weekday = entry.recorded_at.weekday()
            boxes[weekday] += entry.boxes
            liters[weekday] += liters_for(entry.boxes, product)
            records[weekday] += 1

        return DayHeatmapResponse(
            data=[
                DayBucketResponse(
                    day=WEEKDAY_NAMES[weekday],
                    day_index=(weekday + 1) % 7,
                    boxes=boxes[weekday],
                    liters=round_to(liters[weekday], 2),
                    records=records[weekday],
                )
                for weekday in range(7)
            ],
            total_boxes=sum(boxes),
            total_liters=round_to(sum(liters), 2),
            max_boxes=max(boxes),
            max_liters=round_to(max(liters), 2),
            applied_filters=self.applied_filters(window),
        )

    def _production_totals(
        self, window: ReportWindow, key: GroupKey
    ) -> list[dict[str, Any]]:
        """
        Produced boxes, planned boxes and liters of the window's orders,
        summed per ``key(product)``.
        """
        totals: dict[Hashable, dict[str, Any]] = {}
        for order in self.orders.find_orders(start=window.start, end=window.end):
            product = order.product
            group, name = key(product)
            row = totals.setdefault(
                group,
                {
                    "key": group,
                    "name": name,
                    "boxes": 0,
                    "planned": 0,
                    "liters": 0.0,
                    "products": set(),
                },
            )
            row["boxes"] += order.produced_boxes
            row["planned"] += order.planned_boxes
            row["liters"] += liters_for(order.produced_boxes, product)
            row["products"].add(product.id)
        return list(totals.values())

    @monitor_report("production_by_product")
    def production_by_product(
        self, window: ReportWindow, limit: int | None = None
    ) -> ProductProductionResponse:
        """Produced and planned boxes per product, most produced first."""
        limit = self.validate_limit(limit)
        rows = [
            ProductProductionRowResponse(
                product_id=row["key"],
                name=row["name"],
                boxes=row["boxes"],
                planned_boxes=row["planned"],
                liters=round_to(row["liters"], 2),
                completion=round_to(
                    self.calculate_percentage(row["boxes"], row["planned"]), 1
                ),
            )
            for row in self._production_totals(window, by_product)
        ]
        rows.sort(key=lambda r: (-r.boxes, r.product_id))

        return ProductProductionResponse(
            data=rows[:limit] if limit else rows,
            total_boxes=sum(r.boxes for r in rows),
            total_liters=round_to(sum(r.liters for r in rows), 2),
            total_products=len(rows),
            applied_filters=self.applied_filters(window, limit=limit),
        )

    def _group_production(
        self,
        window: ReportWindow,
        key: GroupKey,
        limit: int | None,
        sort_by: ProductionSort,
    ) -> GroupProductionResponse:
        limit = self.validate_limit(limit)
        rows = [
            GroupProductionRowResponse(
                name=row["name"],
                boxes=row["boxes"],
                planned_boxes=row["planned"],
                liters=round_to(row["liters"], 2),
                completion=round_to(
                    self.calculate_percentage(row["boxes"], row["planned"]), 1
                ),
                products=len(row["products"]),
            )
            for row in self._production_totals(window, key)
        ]
        if sort_by is ProductionSort.LITERS:
            rows.sort(key=lambda r: (-r.liters, r.name))
        else:
            rows.sort(key=lambda r: (-r.boxes, r.name))

        return GroupProductionResponse(
            data=rows[:limit] if limit else rows,
            total_boxes=sum(r.boxes for r in rows),
            total_liters=round_to(sum(r.liters for r in rows), 2),
            total_groups=len(rows),
            applied_filters=self.applied_filters(
                window, limit=limit, sort_by=sort_by.value
            ),
        )

    @monitor_report("production_by_flavor")
    def production_by_flavor(
        self,
        window: ReportWindow,
        limit: int | None = None,
        sort_by: ProductionSort = ProductionSort.BOXES,
    ) -> GroupProductionResponse:
        """Totals per flavor; products without one share a single row."""
        return self._group_production(window, by_flavor, limit, sort_by)

    @monitor_report("production_by_size")
    def production_by_size(
        self,
        window: ReportWindow,
        limit: int | None = None,
        sort_by: ProductionSort = ProductionSort.BOXES,
    ) -> GroupProductionResponse:
        """Totals per unit size, labelled like ``0.5L``."""
        return self._group_production(window, by_size, limit, sort_by)
