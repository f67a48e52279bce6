"""
Efficiency report query service.

Loads the order snapshot for a report window, runs the efficiency aggregator
over it and shapes the result for the API. Comparison periods rerun the same
reduction over a shifted window and only compare the scalar averages.
"""

from linedash.application.dtos import (
    BoxEfficiencyRowResponse,
    ComparisonSummary,
    HourlyEfficiencyResponse,
    LineEfficiencyResponse,
    LineTimePlanResponse,
    OperatorTimePlanResponse,
    ShiftEfficiencyResponse,
    ShiftTimePlanResponse,
    ThroughputRowResponse,
    TimePlanResponse,
    TimePlanRowResponse,
)
from linedash.core.config import settings
from linedash.core.observability import get_logger, monitor_report
from linedash.domain.efficiency import (
    OrderSnapshot,
    ReportWindow,
    TimeGrouping,
    aggregate_box_efficiency,
    aggregate_throughput,
    aggregate_time_plan,
    percentage_change,
    round_to,
)
from linedash.infrastructure.database.repositories import (
    PlannedSpeedRepository,
    ProductionOrderRepository,
)
from linedash.infrastructure.database.repositories.mappers import OrderMapper
from linedash.models import OrderStatus

from .base_query import BaseQueryService, ComparisonPeriod

logger = get_logger(__name__)

_TIME_PLAN_RESPONSES: dict[TimeGrouping, type[TimePlanResponse]] = {
    TimeGrouping.SHIFT: ShiftTimePlanResponse,
    TimeGrouping.OPERATOR: OperatorTimePlanResponse,
    TimeGrouping.LINE: LineTimePlanResponse,
}


class EfficiencyQueryService(BaseQueryService):
    """
    Query service for the efficiency reports.

    Every report is a single read-reduce pass; nothing is cached between
    requests.
    """

    def __init__(self, session):
        super().__init__(session)
        self.orders = ProductionOrderRepository(session)
        self.planned_speeds = PlannedSpeedRepository(session)

    def load_snapshots(
        self,
        window: ReportWindow,
        status: OrderStatus | None = None,
        with_planned_speed: bool = False,
    ) -> list[OrderSnapshot]:
        """
        Load the orders produced within ``window`` as aggregator snapshots.

        Args:
            window: Report window
            status: Only load orders in this status
            with_planned_speed: Attach the (product, line) planned speed
        """
        orders = self.orders.find_orders(start=window.start, end=window.end, status=status)
        speeds: dict[tuple[int, int], float] = {}
        if with_planned_speed:
            speeds = self.planned_speeds.lookup(
                (order.product_id, order.production_line_id) for order in orders
            )
        logger.debug(
            "Loaded report snapshot",
            start=window.start.isoformat(),
            end=window.end.isoformat(),
            status=status.value if status else None,
            orders=len(orders),
        )
        return [
            OrderMapper.sql_to_snapshot(
                order, speeds.get((order.product_id, order.production_line_id))
            )
            for order in orders
        ]

    def _comparison(
        self,
        window: ReportWindow,
        compare_with: ComparisonPeriod,
        current_average: float,
        compute_average,
    ) -> ComparisonSummary:
        other = self.comparison_window(window, compare_with)
        previous_average = compute_average(other)
        return ComparisonSummary(
            compare_with=compare_with.value,
            from_date=other.first_day,
            to_date=other.last_day,
            previous_average_efficiency=previous_average,
            change_percentage=round_to(
                percentage_change(current_average, previous_average), 1
            ),
        )

    # Throughput per hour

    def _throughput(self, window: ReportWindow, limit: int | None = None):
        return aggregate_throughput(
            self.load_snapshots(window, with_planned_speed=True),
            window,
            limit=limit,
            on_skip=self.skip_logger("hourly_production_efficiency"),
        )

    @monitor_report("hourly_production_efficiency")
    def hourly_production_efficiency(
        self,
        window: ReportWindow,
        limit: int | None = None,
        compare_with: ComparisonPeriod | None = None,
    ) -> HourlyEfficiencyResponse:
        """
        Average boxes per hour per (product, line) against the planned speed.

        Rows are sorted by absolute deviation, largest first; summary figures
        cover every group regardless of ``limit``.
        """
        limit = self.validate_limit(limit)
        report = self._throughput(window, limit)

        comparison = None
        if compare_with is not None:
            comparison = self._comparison(
                window,
                compare_with,
                report.average_efficiency,
                lambda other: self._throughput(other).average_efficiency,
            )

        return HourlyEfficiencyResponse(
            data=[
                ThroughputRowResponse(
                    product_id=row.product_id,
                    product_name=row.product_name,
                    line_id=row.line_id,
                    line_name=row.line_name,
                    average_boxes_per_hour=row.average_boxes_per_hour,
                    planned_speed=row.planned_speed,
                    efficiency=row.efficiency,
                    deviation=row.deviation,
                    total_records=row.total_records,
                )
                for row in report.data
            ],
            average_efficiency=report.average_efficiency,
            positive_deviation_average=report.positive_deviation_average,
            negative_deviation_average=report.negative_deviation_average,
            total_groups=report.total_groups,
            applied_filters=self.applied_filters(
                window, limit=limit, compare_with=compare_with
            ),
            comparison=comparison,
        )

    # Planned vs. actual time

    def real_vs_planned_time(
        self,
        window: ReportWindow,
        grouping: TimeGrouping,
        include_incomplete: bool = False,
        limit: int | None = None,
    ) -> TimePlanResponse:
        """
        Planned vs. actual hours of completed orders, grouped by ``grouping``.

        Orders below the completion threshold are left out unless
        ``include_incomplete`` is set.
        """
        report_name = f"real_vs_planned_time_by_{grouping.value}"
        return monitor_report(report_name)(self._real_vs_planned_time)(
            window, grouping, include_incomplete, limit, report_name
        )

    def _real_vs_planned_time(
        self,
        window: ReportWindow,
        grouping: TimeGrouping,
        include_incomplete: bool,
        limit: int | None,
        report_name: str,
    ) -> TimePlanResponse:
        limit = self.validate_limit(limit)
        report = aggregate_time_plan(
            self.load_snapshots(window, status=OrderStatus.COMPLETED),
            grouping,
            include_incomplete=include_incomplete,
            limit=limit,
            completion_threshold=settings.REPORT_COMPLETION_THRESHOLD,
            on_skip=self.skip_logger(report_name),
        )

        response_class = _TIME_PLAN_RESPONSES[grouping]
        return response_class(
            data=[
                TimePlanRowResponse(
                    id=row.group_id,
                    name=row.name,
                    planned_hours=row.planned_hours,
                    actual_hours=row.actual_hours,
                    difference=row.difference,
                    deviation_percentage=row.deviation_percentage,
                    total_orders=row.total_orders,
                    average_completion=row.average_completion,
                )
                for row in report.data
            ],
            positive_deviation_average=report.positive_deviation_average,
            negative_deviation_average=report.negative_deviation_average,
            total_groups=report.total_groups,
            completed_only=report.completed_only,
            applied_filters=self.applied_filters(
                window, limit=limit, include_incomplete=include_incomplete
            ),
        )

    # Produced vs. planned boxes

    def _box_efficiency(self, window: ReportWindow, by: TimeGrouping):
        return aggregate_box_efficiency(
            self.load_snapshots(window),
            by,
            pooled_average=by is TimeGrouping.SHIFT,
        )

    def _box_efficiency_response(
        self,
        response_class,
        window: ReportWindow,
        by: TimeGrouping,
        compare_with: ComparisonPeriod | None,
    ):
        report = self._box_efficiency(window, by)
        comparison = None
        if compare_with is not None:
            comparison = self._comparison(
                window,
                compare_with,
                report.average_efficiency,
                lambda other: self._box_efficiency(other, by).average_efficiency,
            )
        return response_class(
            data=[
                BoxEfficiencyRowResponse(
                    id=row.group_id,
                    name=row.name,
                    efficiency=row.efficiency,
                    produced_boxes=row.produced_boxes,
                    planned_boxes=row.planned_boxes,
                )
                for row in report.data
            ],
            average_efficiency=report.average_efficiency,
            total_produced=report.total_produced,
            total_planned=report.total_planned,
            total_groups=report.total_groups,
            applied_filters=self.applied_filters(window, compare_with=compare_with),
            comparison=comparison,
        )

    @monitor_report("efficiency_by_line")
    def efficiency_by_line(
        self, window: ReportWindow, compare_with: ComparisonPeriod | None = None
    ) -> LineEfficiencyResponse:
        """Produced over planned boxes per line; the average is the mean ratio."""
        return self._box_efficiency_response(
            LineEfficiencyResponse, window, TimeGrouping.LINE, compare_with
        )

    @monitor_report("efficiency_by_shift")
    def efficiency_by_shift(
        self, window: ReportWindow, compare_with: ComparisonPeriod | None = None
    ) -> ShiftEfficiencyResponse:
        """Produced over planned boxes per shift; the average is pooled."""
        return self._box_efficiency_response(
            ShiftEfficiencyResponse, window, TimeGrouping.SHIFT, compare_with
        )
