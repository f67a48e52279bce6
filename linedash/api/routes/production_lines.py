"""
Production Line API Routes.

Line hierarchy (line -> systems -> subsystems -> sub-subsystems) and planned
speeds per product on a line.
"""

from fastapi import APIRouter, status

from linedash.api.deps import LineServiceDep
from linedash.models import (
    ProductionLineCreate,
    ProductionLinePublic,
    ProductionLineTree,
    ProductionSystemCreate,
    ProductionSystemPublic,
    ProductOnLinePublic,
    ProductOnLineUpdate,
    SubsubsystemCreate,
    SubsubsystemPublic,
    SubsystemCreate,
    SubsystemPublic,
)

router = APIRouter(tags=["production-lines"])


@router.post(
    "/production-lines/",
    summary="Create production line",
    response_model=ProductionLinePublic,
    status_code=status.HTTP_201_CREATED,
)
def create_production_line(service: LineServiceDep, line_in: ProductionLineCreate):
    return service.create_line(line_in)


@router.get(
    "/production-lines/",
    summary="List production lines",
    response_model=list[ProductionLinePublic],
)
def list_production_lines(service: LineServiceDep):
    return service.list_lines()


@router.get(
    "/production-lines/{line_id}",
    summary="Get production line with its hierarchy",
    response_model=ProductionLineTree,
)
def get_production_line(service: LineServiceDep, line_id: int):
    return service.get_line_tree(line_id)


@router.post(
    "/production-lines/{line_id}/systems",
    summary="Add system to a line",
    response_model=ProductionSystemPublic,
    status_code=status.HTTP_201_CREATED,
)
def create_system(
    service: LineServiceDep, line_id: int, system_in: ProductionSystemCreate
):
    return service.add_system(line_id, system_in)


@router.post(
    "/systems/{system_id}/subsystems",
    summary="Add subsystem to a system",
    response_model=SubsystemPublic,
    status_code=status.HTTP_201_CREATED,
)
def create_subsystem(
    service: LineServiceDep, system_id: int, subsystem_in: SubsystemCreate
):
    return service.add_subsystem(system_id, subsystem_in)


@router.post(
    "/subsystems/{subsystem_id}/subsubsystems",
    summary="Add sub-subsystem to a subsystem",
    response_model=SubsubsystemPublic,
    status_code=status.HTTP_201_CREATED,
)
def create_subsubsystem(
    service: LineServiceDep, subsystem_id: int, subsubsystem_in: SubsubsystemCreate
):
    return service.add_subsubsystem(subsystem_id, subsubsystem_in)


@router.get(
    "/production-lines/{line_id}/products",
    summary="List planned speeds on a line",
    response_model=list[ProductOnLinePublic],
)
def list_planned_speeds(service: LineServiceDep, line_id: int):
    return service.list_planned_speeds(line_id)


@router.get(
    "/production-lines/{line_id}/products/{product_id}",
    summary="Get planned speed of a product on a line",
    response_model=ProductOnLinePublic,
)
def get_planned_speed(service: LineServiceDep, line_id: int, product_id: int):
    return service.get_planned_speed(line_id, product_id)


@router.put(
    "/production-lines/{line_id}/products/{product_id}",
    summary="Set planned speed of a product on a line",
    response_model=ProductOnLinePublic,
)
def set_planned_speed(
    service: LineServiceDep,
    line_id: int,
    product_id: int,
    speed_in: ProductOnLineUpdate,
):
    return service.set_planned_speed(line_id, product_id, speed_in.boxes_per_hour)
