from .aggregator import (
    BoxEfficiencyReport,
    BoxEfficiencyRow,
    ThroughputReport,
    ThroughputRow,
    TimeGrouping,
    TimePlanReport,
    TimePlanRow,
    aggregate_box_efficiency,
    aggregate_throughput,
    aggregate_time_plan,
    percentage_change,
    round_to,
)
from .records import HourlyEntrySnapshot, OrderSnapshot, ReportWindow

__all__ = [
    "BoxEfficiencyReport",
    "BoxEfficiencyRow",
    "HourlyEntrySnapshot",
    "OrderSnapshot",
    "ReportWindow",
    "ThroughputReport",
    "ThroughputRow",
    "TimeGrouping",
    "TimePlanReport",
    "TimePlanRow",
    "aggregate_box_efficiency",
    "aggregate_throughput",
    "aggregate_time_plan",
    "percentage_change",
    "round_to",
]
