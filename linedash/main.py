import time
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.routing import APIRoute
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.middleware.cors import CORSMiddleware

from linedash.api.main import api_router
from linedash.core.config import settings
from linedash.core.db import init_db
from linedash.core.observability import (
    REQUEST_COUNT,
    REQUEST_DURATION,
    get_logger,
    initialize_observability,
    set_correlation_id,
)
from linedash.domain.shared.exceptions import DomainError, ErrorType

logger = get_logger(__name__)

CORRELATION_HEADER = "X-Correlation-ID"

ERROR_STATUS_CODES = {
    ErrorType.VALIDATION: status.HTTP_400_BAD_REQUEST,
    ErrorType.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorType.BUSINESS_RULE: status.HTTP_409_CONFLICT,
    ErrorType.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorType.REPOSITORY: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def _route_template(request: Request) -> str:
    # Label metrics by route template so ids in paths don't explode cardinality
    route = request.scope.get("route")
    return getattr(route, "path", request.url.path)


class ObservabilityMiddleware(BaseHTTPMiddleware):
    """Correlation id, access log and HTTP metrics for every request."""

    async def dispatch(self, request: Request, call_next):
        correlation_id = set_correlation_id(request.headers.get(CORRELATION_HEADER))
        started = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception:
            self._observe(request, "500", started)
            logger.exception(
                "Request failed", method=request.method, path=request.url.path
            )
            raise

        elapsed = self._observe(request, str(response.status_code), started)
        response.headers[CORRELATION_HEADER] = correlation_id
        logger.info(
            "Request completed",
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
            duration_seconds=round(elapsed, 4),
        )
        return response

    @staticmethod
    def _observe(request: Request, status_code: str, started: float) -> float:
        elapsed = time.perf_counter() - started
        endpoint = _route_template(request)
        REQUEST_COUNT.labels(
            method=request.method, endpoint=endpoint, status=status_code
        ).inc()
        REQUEST_DURATION.labels(method=request.method, endpoint=endpoint).observe(
            elapsed
        )
        return elapsed


def generate_operation_id(route: APIRoute) -> str:
    return f"{route.tags[0]}-{route.name}"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    initialize_observability()

    if settings.AUTO_CREATE_TABLES:
        init_db()
        logger.info("Database tables ensured")

    logger.info(
        "linedash started",
        environment=settings.ENVIRONMENT,
        api_prefix=settings.API_V1_STR,
        completion_threshold=settings.REPORT_COMPLETION_THRESHOLD,
    )
    yield
    logger.info("linedash stopped")


app = FastAPI(
    title=settings.PROJECT_NAME,
    description="""
    Production-line efficiency analytics.

    Tracks production orders on bottling lines (hourly output, residual
    finalization time and stoppages) and reports throughput and time
    efficiency against plan over a date range.
    """,
    version="0.1.0",
    openapi_url=f"{settings.API_V1_STR}/openapi.json",
    generate_unique_id_function=generate_operation_id,
    lifespan=lifespan,
)


@app.exception_handler(DomainError)
async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    status_code = ERROR_STATUS_CODES.get(
        exc.error_type, status.HTTP_500_INTERNAL_SERVER_ERROR
    )
    if status_code >= 500:
        # Data-store messages carry SQL and hosts; they go to the log only
        logger.error(
            "Request failed",
            path=request.url.path,
            status_code=status_code,
            error=exc.to_dict(),
        )
        return JSONResponse(
            status_code=status_code, content={"error": "Internal server error"}
        )

    logger.warning(
        "Request rejected",
        path=request.url.path,
        status_code=status_code,
        error=exc.to_dict(),
    )
    return JSONResponse(status_code=status_code, content={"error": exc.message})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        messages.append(f"{location}: {error.get('msg')}" if location else error.get("msg"))
    message = "; ".join(messages) or "Invalid request"
    logger.warning("Invalid request", path=request.url.path, error=message)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST, content={"error": message}
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "Unhandled error",
        path=request.url.path,
        error=str(exc),
        error_type=type(exc).__name__,
        exc_info=exc,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error"},
    )


app.add_middleware(ObservabilityMiddleware)

if settings.all_cors_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.all_cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

app.include_router(api_router, prefix=settings.API_V1_STR)
