"""
Health Check API Routes

Liveness plus a database round trip.
"""

from datetime import datetime

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from linedash.api.deps import SessionDep
from linedash.core.config import settings
from linedash.core.db import ping
from linedash.core.observability import get_logger

logger = get_logger(__name__)
router = APIRouter()


@router.get("/health", summary="Overall system health")
def get_health_status(session: SessionDep) -> JSONResponse:
    """
    Report service status; 503 when the database cannot be reached.
    """
    checks = {}
    try:
        ping(session)
        checks["database"] = "healthy"
    except SQLAlchemyError as e:
        logger.error("Database health check failed", error=str(e))
        checks["database"] = "unhealthy"

    healthy = all(value == "healthy" for value in checks.values())
    response_data = {
        "status": "healthy" if healthy else "unhealthy",
        "timestamp": datetime.utcnow().isoformat(),
        "environment": settings.ENVIRONMENT,
        "checks": checks,
    }
    logger.info("Health check performed", overall_status=response_data["status"])
    return JSONResponse(content=response_data, status_code=200 if healthy else 503)
