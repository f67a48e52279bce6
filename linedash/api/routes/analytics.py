"""
Analytics API Routes.

Report endpoints over a ``from``/``to`` date range. Every endpoint validates
the range itself so a missing or malformed bound is a 400 with an ``error``
message rather than a schema error.
"""

from typing import Annotated

from fastapi import APIRouter, Query

from linedash.api.deps import (
    EfficiencyQueriesDep,
    ProductionQueriesDep,
    StoppageQueriesDep,
)
from linedash.application.dtos import (
    DayHeatmapResponse,
    GroupProductionResponse,
    HourHeatmapResponse,
    HourlyEfficiencyResponse,
    LineEfficiencyResponse,
    LineTimePlanResponse,
    OperatorTimePlanResponse,
    ProductProductionResponse,
    ShiftEfficiencyResponse,
    ShiftTimePlanResponse,
    StopsByCategoryResponse,
    StopsByLineResponse,
    StopsBySubsystemResponse,
)
from linedash.application.queries import ComparisonPeriod, ProductionSort
from linedash.domain.efficiency import TimeGrouping
from linedash.models import StopCategory

router = APIRouter(prefix="/analytics", tags=["analytics"])

FromParam = Annotated[
    str | None, Query(alias="from", description="First day of the range (ISO-8601)")
]
ToParam = Annotated[
    str | None, Query(alias="to", description="Last day of the range (ISO-8601)")
]
LimitParam = Annotated[
    int | None, Query(description="Maximum rows to return; 0 means all")
]
IncludeIncompleteParam = Annotated[
    bool,
    Query(
        alias="includeIncomplete",
        description="Include orders below the completion threshold",
    ),
]
CompareWithParam = Annotated[
    ComparisonPeriod | None,
    Query(
        alias="compareWith",
        description="Compare the average against another window",
    ),
]
SortByParam = Annotated[
    ProductionSort,
    Query(alias="sortBy", description="Order rows by boxes or by liters"),
]
CategoryParam = Annotated[
    StopCategory | None, Query(description="Only stoppages of this category")
]


@router.get(
    "/hourly-production-efficiency",
    summary="Hourly production efficiency",
    description="Average boxes per hour per product and line against the planned speed.",
    response_model=HourlyEfficiencyResponse,
)
def hourly_production_efficiency(
    queries: EfficiencyQueriesDep,
    from_param: FromParam = None,
    to_param: ToParam = None,
    limit: LimitParam = None,
    compare_with: CompareWithParam = None,
) -> HourlyEfficiencyResponse:
    window = queries.build_window(from_param, to_param)
    return queries.hourly_production_efficiency(
        window, limit=limit, compare_with=compare_with
    )


@router.get(
    "/real-vs-planned-time-by-shift",
    summary="Real vs. planned time by shift",
    response_model=ShiftTimePlanResponse,
)
def real_vs_planned_time_by_shift(
    queries: EfficiencyQueriesDep,
    from_param: FromParam = None,
    to_param: ToParam = None,
    limit: LimitParam = None,
    include_incomplete: IncludeIncompleteParam = False,
):
    window = queries.build_window(from_param, to_param)
    return queries.real_vs_planned_time(
        window, TimeGrouping.SHIFT, include_incomplete=include_incomplete, limit=limit
    )


@router.get(
    "/real-vs-planned-time-by-operator",
    summary="Real vs. planned time by operator",
    description="Operators are approximated by line and shift.",
    response_model=OperatorTimePlanResponse,
)
def real_vs_planned_time_by_operator(
    queries: EfficiencyQueriesDep,
    from_param: FromParam = None,
    to_param: ToParam = None,
    limit: LimitParam = None,
    include_incomplete: IncludeIncompleteParam = False,
):
    window = queries.build_window(from_param, to_param)
    return queries.real_vs_planned_time(
        window,
        TimeGrouping.OPERATOR,
        include_incomplete=include_incomplete,
        limit=limit,
    )


@router.get(
    "/real-vs-planned-time-by-line",
    summary="Real vs. planned time by production line",
    response_model=LineTimePlanResponse,
)
def real_vs_planned_time_by_line(
    queries: EfficiencyQueriesDep,
    from_param: FromParam = None,
    to_param: ToParam = None,
    limit: LimitParam = None,
    include_incomplete: IncludeIncompleteParam = False,
):
    window = queries.build_window(from_param, to_param)
    return queries.real_vs_planned_time(
        window, TimeGrouping.LINE, include_incomplete=include_incomplete, limit=limit
    )


@router.get(
    "/efficiency-by-line",
    summary="Produced vs. planned boxes by line",
    response_model=LineEfficiencyResponse,
)
def efficiency_by_line(
    queries: EfficiencyQueriesDep,
    from_param: FromParam = None,
    to_param: ToParam = None,
    compare_with: CompareWithParam = None,
) -> LineEfficiencyResponse:
    window = queries.build_window(from_param, to_param)
    return queries.efficiency_by_line(window, compare_with=compare_with)


@router.get(
    "/efficiency-by-shift",
    summary="Produced vs. planned boxes by shift",
    response_model=ShiftEfficiencyResponse,
)
def efficiency_by_shift(
    queries: EfficiencyQueriesDep,
    from_param: FromParam = None,
    to_param: ToParam = None,
    compare_with: CompareWithParam = None,
) -> ShiftEfficiencyResponse:
    window = queries.build_window(from_param, to_param)
    return queries.efficiency_by_shift(window, compare_with=compare_with)


@router.get(
    "/production-heatmap-by-hour",
    summary="Production heatmap by hour of day",
    response_model=HourHeatmapResponse,
)
def production_heatmap_by_hour(
    queries: ProductionQueriesDep,
    from_param: FromParam = None,
    to_param: ToParam = None,
) -> HourHeatmapResponse:
    return queries.heatmap_by_hour(queries.build_window(from_param, to_param))


@router.get(
    "/production-heatmap-by-day",
    summary="Production heatmap by weekday",
    response_model=DayHeatmapResponse,
)
def production_heatmap_by_day(
    queries: ProductionQueriesDep,
    from_param: FromParam = None,
    to_param: ToParam = None,
) -> DayHeatmapResponse:
    return queries.heatmap_by_day(queries.build_window(from_param, to_param))


@router.get(
    "/production-by-product",
    summary="Production totals by product",
    response_model=ProductProductionResponse,
)
def production_by_product(
    queries: ProductionQueriesDep,
    from_param: FromParam = None,
    to_param: ToParam = None,
    limit: LimitParam = None,
) -> ProductProductionResponse:
    window = queries.build_window(from_param, to_param)
    return queries.production_by_product(window, limit=limit)


@router.get(
    "/production-by-flavor",
    summary="Production totals by flavor",
    response_model=GroupProductionResponse,
)
def production_by_flavor(
    queries: ProductionQueriesDep,
    from_param: FromParam = None,
    to_param: ToParam = None,
    limit: LimitParam = None,
    sort_by: SortByParam = ProductionSort.BOXES,
) -> GroupProductionResponse:
    window = queries.build_window(from_param, to_param)
    return queries.production_by_flavor(window, limit=limit, sort_by=sort_by)


@router.get(
    "/production-by-size",
    summary="Production totals by unit size",
    response_model=GroupProductionResponse,
)
def production_by_size(
    queries: ProductionQueriesDep,
    from_param: FromParam = None,
    to_param: ToParam = None,
    limit: LimitParam = None,
    sort_by: SortByParam = ProductionSort.BOXES,
) -> GroupProductionResponse:
    window = queries.build_window(from_param, to_param)
    return queries.production_by_size(window, limit=limit, sort_by=sort_by)


@router.get(
    "/stops-by-category",
    summary="Stoppages by category",
    response_model=StopsByCategoryResponse,
)
def stops_by_category(
    queries: StoppageQueriesDep,
    from_param: FromParam = None,
    to_param: ToParam = None,
) -> StopsByCategoryResponse:
    return queries.stops_by_category(queries.build_window(from_param, to_param))


@router.get(
    "/stops-by-line",
    summary="Stoppages by production line",
    response_model=StopsByLineResponse,
)
def stops_by_line(
    queries: StoppageQueriesDep,
    from_param: FromParam = None,
    to_param: ToParam = None,
) -> StopsByLineResponse:
    return queries.stops_by_line(queries.build_window(from_param, to_param))


@router.get(
    "/stops-by-subsystem",
    summary="Stoppages by subsystem",
    description="Stoppage minutes per subsystem with a roll-up per system.",
    response_model=StopsBySubsystemResponse,
)
def stops_by_subsystem(
    queries: StoppageQueriesDep,
    from_param: FromParam = None,
    to_param: ToParam = None,
    category: CategoryParam = None,
) -> StopsBySubsystemResponse:
    window = queries.build_window(from_param, to_param)
    return queries.stops_by_subsystem(window, category=category)
