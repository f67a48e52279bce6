"""
API Dependencies

Request-scoped session plus the services built on top of it.
"""

from collections.abc import Generator
from typing import Annotated

from fastapi import Depends
from sqlmodel import Session

from linedash.application.queries import (
    EfficiencyQueryService,
    ProductionQueryService,
    StoppageQueryService,
)
from linedash.application.services import LineService, ProductionService
from linedash.core.db import engine


def get_db() -> Generator[Session, None, None]:
    with Session(engine) as session:
        yield session


SessionDep = Annotated[Session, Depends(get_db)]


def get_efficiency_queries(session: SessionDep) -> EfficiencyQueryService:
    return EfficiencyQueryService(session)


def get_production_queries(session: SessionDep) -> ProductionQueryService:
    return ProductionQueryService(session)


def get_stoppage_queries(session: SessionDep) -> StoppageQueryService:
    return StoppageQueryService(session)


def get_production_service(session: SessionDep) -> ProductionService:
    return ProductionService(session)


def get_line_service(session: SessionDep) -> LineService:
    return LineService(session)


EfficiencyQueriesDep = Annotated[EfficiencyQueryService, Depends(get_efficiency_queries)]
ProductionQueriesDep = Annotated[ProductionQueryService, Depends(get_production_queries)]
StoppageQueriesDep = Annotated[StoppageQueryService, Depends(get_stoppage_queries)]
ProductionServiceDep = Annotated[ProductionService, Depends(get_production_service)]
LineServiceDep = Annotated[LineService, Depends(get_line_service)]
