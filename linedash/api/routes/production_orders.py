"""
Production Order API Routes.

Order creation and lifecycle, hourly production logging, finalization and
stoppage recording.
"""

from datetime import date, datetime, time
from typing import Annotated

from fastapi import APIRouter, Query, status

from linedash.api.deps import ProductionServiceDep
from linedash.models import (
    HourlyProductionCreate,
    HourlyProductionEntryPublic,
    OrderFinish,
    OrderStatus,
    ProductionOrderCreate,
    ProductionOrderPublic,
    StoppageCreate,
    StoppagePublic,
)

router = APIRouter(prefix="/production-orders", tags=["production-orders"])


@router.post(
    "/",
    summary="Create production order",
    response_model=ProductionOrderPublic,
    status_code=status.HTTP_201_CREATED,
)
def create_production_order(
    service: ProductionServiceDep, order_in: ProductionOrderCreate
):
    return service.create_order(order_in)


@router.get(
    "/",
    summary="List production orders",
    description="Orders ordered by production date, optionally filtered.",
    response_model=list[ProductionOrderPublic],
)
def list_production_orders(
    service: ProductionServiceDep,
    from_date: Annotated[date | None, Query(alias="from")] = None,
    to_date: Annotated[date | None, Query(alias="to")] = None,
    order_status: Annotated[OrderStatus | None, Query(alias="status")] = None,
    line_id: Annotated[int | None, Query(alias="lineId")] = None,
    limit: Annotated[int, Query(ge=1, le=1000)] = 100,
    offset: Annotated[int, Query(ge=0)] = 0,
):
    return service.list_orders(
        start=datetime.combine(from_date, time.min) if from_date else None,
        end=datetime.combine(to_date, time.max) if to_date else None,
        status=order_status,
        line_id=line_id,
        limit=limit,
        offset=offset,
    )


@router.get(
    "/{order_id}",
    summary="Get production order",
    response_model=ProductionOrderPublic,
)
def get_production_order(service: ProductionServiceDep, order_id: int):
    return service.get_order(order_id)


@router.post(
    "/{order_id}/start",
    summary="Start production order",
    response_model=ProductionOrderPublic,
)
def start_production_order(service: ProductionServiceDep, order_id: int):
    return service.start_order(order_id)


@router.post(
    "/{order_id}/hourly-production",
    summary="Log hourly production",
    description="Appends one hour of output and adds it to the produced boxes.",
    response_model=HourlyProductionEntryPublic,
    status_code=status.HTTP_201_CREATED,
)
def log_hourly_production(
    service: ProductionServiceDep, order_id: int, entry_in: HourlyProductionCreate
):
    return service.record_hourly_production(
        order_id, entry_in.boxes, entry_in.recorded_at
    )


@router.post(
    "/{order_id}/finish",
    summary="Finish production order",
    response_model=ProductionOrderPublic,
)
def finish_production_order(
    service: ProductionServiceDep,
    order_id: int,
    finish_in: OrderFinish | None = None,
):
    elapsed_hours = finish_in.elapsed_hours if finish_in else None
    return service.finish_order(order_id, elapsed_hours)


@router.post(
    "/{order_id}/stoppages",
    summary="Record stoppage",
    response_model=StoppagePublic,
    status_code=status.HTTP_201_CREATED,
)
def record_stoppage(
    service: ProductionServiceDep, order_id: int, stoppage_in: StoppageCreate
):
    return service.record_stoppage(order_id, stoppage_in)


@router.get(
    "/{order_id}/stoppages",
    summary="List stoppages of an order",
    response_model=list[StoppagePublic],
)
def list_stoppages(service: ProductionServiceDep, order_id: int):
    return service.list_stoppages(order_id)
