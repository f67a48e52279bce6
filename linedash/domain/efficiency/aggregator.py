"""
Production efficiency aggregation.

Pure reductions from order snapshots to per-group efficiency rows plus summary
statistics. Three families are provided:

* throughput per hour, grouped by (product, line), against planned speed;
* planned vs. actual time, grouped by shift, operator proxy or line;
* produced vs. planned boxes, grouped by line or shift.

Every reduction computes its summary over the full set of groups before the
optional ``limit`` truncation, and never divides by a zero plan.
"""

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum

from .records import OrderSnapshot, ReportWindow

SkipCallback = Callable[[OrderSnapshot, str], None]

DEFAULT_COMPLETION_THRESHOLD = 95.0


class TimeGrouping(str, Enum):
    """Grouping keys for the planned vs. actual time reports."""

    SHIFT = "shift"
    OPERATOR = "operator"
    LINE = "line"


@dataclass(frozen=True)
class ThroughputRow:
    product_id: int
    product_name: str
    line_id: int
    line_name: str
    average_boxes_per_hour: float
    planned_speed: float
    efficiency: float
    deviation: float
    total_records: int


@dataclass(frozen=True)
class ThroughputReport:
    data: list[ThroughputRow]
    average_efficiency: float
    positive_deviation_average: float
    negative_deviation_average: float
    total_groups: int


@dataclass(frozen=True)
class TimePlanRow:
    group_id: str
    name: str
    planned_hours: float
    actual_hours: float
    difference: float
    deviation_percentage: float
    total_orders: int
    average_completion: float


@dataclass(frozen=True)
class TimePlanReport:
    grouping: TimeGrouping
    data: list[TimePlanRow]
    positive_deviation_average: float
    negative_deviation_average: float
    total_groups: int
    completed_only: bool


@dataclass(frozen=True)
class BoxEfficiencyRow:
    group_id: str
    name: str
    efficiency: float
    produced_boxes: int
    planned_boxes: int


@dataclass(frozen=True)
class BoxEfficiencyReport:
    data: list[BoxEfficiencyRow]
    average_efficiency: float
    total_produced: int
    total_planned: int
    total_groups: int


@dataclass
class _ThroughputAccumulator:
    product_id: int
    product_name: str
    line_id: int
    line_name: str
    planned_speed: float | None
    total_boxes: int = 0
    records: int = 0
    orders: list[OrderSnapshot] = field(default_factory=list)


@dataclass
class _TimeAccumulator:
    group_id: str
    name: str
    planned_hours: float = 0.0
    actual_hours: float = 0.0
    total_orders: int = 0
    completion_total: float = 0.0


def round_to(value: float, digits: int) -> float:
    """Round half away from zero, the way the dashboard displays numbers."""
    quantum = Decimal(1).scaleb(-digits)
    return float(Decimal(repr(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def mean(values: Iterable[float]) -> float:
    values = list(values)
    return sum(values) / len(values) if values else 0.0


def percentage_change(current: float, previous: float) -> float:
    """
    Percent change from ``previous`` to ``current``.

    A zero baseline reports 100 when there is any current value and 0
    otherwise.
    """
    if previous == 0:
        return 100.0 if current != 0 else 0.0
    return (current - previous) / abs(previous) * 100


def apply_limit(rows: list, limit: int | None) -> list:
    if limit and limit > 0:
        return rows[:limit]
    return rows


def _deviation_averages(deviations: list[float]) -> tuple[float, float]:
    """
    Mean positive and mean negative deviation over group rows.

    Each entry is one group's deviation, so a group with many orders weighs
    the same as a group with one. Per-order deviations are never averaged.
    """
    positives = [d for d in deviations if d > 0]
    negatives = [d for d in deviations if d < 0]
    return round_to(mean(positives), 1), round_to(mean(negatives), 1)


def aggregate_throughput(
    orders: Iterable[OrderSnapshot],
    window: ReportWindow,
    limit: int | None = None,
    on_skip: SkipCallback | None = None,
) -> ThroughputReport:
    """
    Average boxes per hour per (product, line) against the planned speed.

    Every hourly entry with positive boxes inside ``window`` is one hour
    bucket. Pairs without a positive planned speed are left out entirely.
    """
    groups: dict[tuple[int, int], _ThroughputAccumulator] = {}

    for order in orders:
        entries = [
            e for e in order.hourly_entries if e.boxes > 0 and window.contains(e.recorded_at)
        ]
        if not entries:
            continue

        key = (order.product_id, order.line_id)
        group = groups.get(key)
        if group is None:
            group = groups[key] = _ThroughputAccumulator(
                product_id=order.product_id,
                product_name=order.product_name,
                line_id=order.line_id,
                line_name=order.line_name,
                planned_speed=order.planned_speed,
            )
        group.total_boxes += sum(e.boxes for e in entries)
        group.records += len(entries)
        group.orders.append(order)

    rows: list[ThroughputRow] = []
    raw_efficiencies: list[float] = []
    raw_deviations: list[float] = []
    for group in groups.values():
        planned = group.planned_speed or 0.0
        if planned <= 0:
            if on_skip is not None:
                for order in group.orders:
                    on_skip(order, "no_planned_speed")
            continue

        average = group.total_boxes / group.records
        efficiency = average / planned
        deviation = (average - planned) / planned * 100
        raw_efficiencies.append(efficiency)
        raw_deviations.append(deviation)

        rows.append(
            ThroughputRow(
                product_id=group.product_id,
                product_name=group.product_name,
                line_id=group.line_id,
                line_name=group.line_name,
                average_boxes_per_hour=round_to(average, 2),
                planned_speed=planned,
                efficiency=round_to(efficiency, 2),
                deviation=round_to(deviation, 1),
                total_records=group.records,
            )
        )

    rows.sort(key=lambda r: (-abs(r.deviation), r.product_id, r.line_id))
    positive_avg, negative_avg = _deviation_averages(raw_deviations)

    return ThroughputReport(
        data=apply_limit(rows, limit),
        average_efficiency=round_to(mean(raw_efficiencies), 2),
        positive_deviation_average=positive_avg,
        negative_deviation_average=negative_avg,
        total_groups=len(rows),
    )


def _time_group_key(order: OrderSnapshot, grouping: TimeGrouping) -> tuple[str, str]:
    if grouping is TimeGrouping.SHIFT:
        return str(order.shift), f"Turno {order.shift}"
    if grouping is TimeGrouping.OPERATOR:
        # No operator entity exists; line + shift stands in for the crew
        return (
            f"{order.line_id}-turno-{order.shift}",
            f"Operador {order.line_name} T{order.shift}",
        )
    return str(order.line_id), order.line_name


def aggregate_time_plan(
    orders: Iterable[OrderSnapshot],
    grouping: TimeGrouping,
    include_incomplete: bool = False,
    limit: int | None = None,
    completion_threshold: float = DEFAULT_COMPLETION_THRESHOLD,
    on_skip: SkipCallback | None = None,
) -> TimePlanReport:
    """
    Planned vs. actual hours per group.

    Orders without planned time or shift are skipped. Unless
    ``include_incomplete`` is set, orders below ``completion_threshold``
    percent of their planned boxes are skipped too.
    """
    groups: dict[str, _TimeAccumulator] = {}

    for order in orders:
        if not order.planned_hours or order.planned_hours <= 0:
            if on_skip is not None:
                on_skip(order, "no_planned_time")
            continue
        if order.shift is None:
            if on_skip is not None:
                on_skip(order, "no_shift")
            continue

        completion = order.completion_percentage
        if not include_incomplete and completion < completion_threshold:
            continue

        group_id, name = _time_group_key(order, grouping)
        group = groups.get(group_id)
        if group is None:
            group = groups[group_id] = _TimeAccumulator(group_id=group_id, name=name)
        group.planned_hours += order.planned_hours
        group.actual_hours += order.actual_hours
        group.total_orders += 1
        group.completion_total += completion

    rows: list[TimePlanRow] = []
    raw_deviations: list[float] = []
    for group in groups.values():
        difference = group.actual_hours - group.planned_hours
        deviation = difference / group.planned_hours * 100
        raw_deviations.append(deviation)
        rows.append(
            TimePlanRow(
                group_id=group.group_id,
                name=group.name,
                planned_hours=round_to(group.planned_hours, 1),
                actual_hours=round_to(group.actual_hours, 1),
                difference=round_to(difference, 1),
                deviation_percentage=round_to(deviation, 1),
                total_orders=group.total_orders,
                average_completion=round_to(
                    group.completion_total / group.total_orders, 1
                ),
            )
        )

    rows.sort(key=lambda r: (-abs(r.deviation_percentage), r.group_id))
    positive_avg, negative_avg = _deviation_averages(raw_deviations)

    return TimePlanReport(
        grouping=grouping,
        data=apply_limit(rows, limit),
        positive_deviation_average=positive_avg,
        negative_deviation_average=negative_avg,
        total_groups=len(rows),
        completed_only=not include_incomplete,
    )


def aggregate_box_efficiency(
    orders: Iterable[OrderSnapshot],
    by: TimeGrouping,
    pooled_average: bool = False,
) -> BoxEfficiencyReport:
    """
    Produced vs. planned boxes per line or shift, best first.

    ``pooled_average`` reports total produced over total planned instead of
    the mean of the per-group ratios.
    """
    names: dict[str, str] = {}
    produced: dict[str, int] = {}
    planned: dict[str, int] = {}
    for order in orders:
        if order.planned_boxes <= 0:
            continue
        if by is TimeGrouping.SHIFT and order.shift is None:
            continue
        group_id, name = _time_group_key(order, by)
        names.setdefault(group_id, name)
        produced[group_id] = produced.get(group_id, 0) + order.produced_boxes
        planned[group_id] = planned.get(group_id, 0) + order.planned_boxes

    rows = [
        BoxEfficiencyRow(
            group_id=group_id,
            name=name,
            efficiency=round_to(produced[group_id] / planned[group_id], 2),
            produced_boxes=produced[group_id],
            planned_boxes=planned[group_id],
        )
        for group_id, name in names.items()
    ]
    rows.sort(key=lambda r: (-r.efficiency, r.group_id))

    total_produced = sum(r.produced_boxes for r in rows)
    total_planned = sum(r.planned_boxes for r in rows)
    if pooled_average:
        average = total_produced / total_planned if total_planned else 0.0
    else:
        average = mean(r.produced_boxes / r.planned_boxes for r in rows)

    return BoxEfficiencyReport(
        data=rows,
        average_efficiency=round_to(average, 2),
        total_produced=total_produced,
        total_planned=total_planned,
        total_groups=len(rows),
    )
