from .report_dtos import (
    AppliedFilters,
    BoxEfficiencyResponse,
    BoxEfficiencyRowResponse,
    ComparisonSummary,
    DayBucketResponse,
    DayHeatmapResponse,
    GroupProductionResponse,
    GroupProductionRowResponse,
    HourBucketResponse,
    HourHeatmapResponse,
    HourlyEfficiencyResponse,
    LineEfficiencyResponse,
    LineTimePlanResponse,
    OperatorTimePlanResponse,
    ProductProductionResponse,
    ProductProductionRowResponse,
    ShiftEfficiencyResponse,
    ShiftTimePlanResponse,
    StopCategoryRowResponse,
    StopLineRowResponse,
    StopsByCategoryResponse,
    StopsByLineResponse,
    StopsBySubsystemResponse,
    StopSubsystemRowResponse,
    StopSystemRowResponse,
    ThroughputRowResponse,
    TimePlanResponse,
    TimePlanRowResponse,
)

__all__ = [
    "AppliedFilters",
    "BoxEfficiencyResponse",
    "BoxEfficiencyRowResponse",
    "ComparisonSummary",
    "DayBucketResponse",
    "DayHeatmapResponse",
    "GroupProductionResponse",
    "GroupProductionRowResponse",
    "HourBucketResponse",
    "HourHeatmapResponse",
    "HourlyEfficiencyResponse",
    "LineEfficiencyResponse",
    "LineTimePlanResponse",
    "OperatorTimePlanResponse",
    "ProductProductionResponse",
    "ProductProductionRowResponse",
    "ShiftEfficiencyResponse",
    "ShiftTimePlanResponse",
    "StopCategoryRowResponse",
    "StopLineRowResponse",
    "StopsByCategoryResponse",
    "StopsByLineResponse",
    "StopsBySubsystemResponse",
    "StopSubsystemRowResponse",
    "StopSystemRowResponse",
    "ThroughputRowResponse",
    "TimePlanResponse",
    "TimePlanRowResponse",
]
