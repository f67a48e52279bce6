"""
Logging and metrics.

structlog is configured once at startup; every event carries the request's
correlation id through ``structlog.contextvars``. Prometheus counters and
histograms cover HTTP traffic, report computation and the orders an
aggregation had to leave out.
"""

import functools
import logging
import sys
import time
import uuid
from collections.abc import Callable
from typing import Any, TypeVar

import structlog
from prometheus_client import Counter, Histogram, start_http_server

from linedash.domain.shared.exceptions import DatabaseError, DomainError

from .config import settings

F = TypeVar("F", bound=Callable[..., Any])

REQUEST_COUNT = Counter(
    "linedash_http_requests_total",
    "HTTP requests served",
    ["method", "endpoint", "status"],
)
REQUEST_DURATION = Histogram(
    "linedash_http_request_duration_seconds",
    "Time spent serving an HTTP request",
    ["method", "endpoint"],
)
REPORT_OPERATIONS = Counter(
    "linedash_report_operations_total",
    "Report computations by outcome",
    ["report", "status"],
)
REPORT_DURATION = Histogram(
    "linedash_report_duration_seconds",
    "Time spent loading and reducing a report",
    ["report"],
)
SKIPPED_ORDERS = Counter(
    "linedash_skipped_orders_total",
    "Orders left out of an aggregation because of missing inputs",
    ["report", "reason"],
)

_metrics_server_started = False


def setup_structured_logging() -> None:
    """Route structlog through stdlib logging with JSON or console output."""
    log_level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)

    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.TimeStamper(fmt="ISO"),
        structlog.processors.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.format_exc_info,
    ]
    if settings.LOG_FORMAT == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(
            structlog.dev.ConsoleRenderer(colors=settings.ENVIRONMENT == "local")
        )

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=log_level)

    sql_level = logging.INFO if settings.LOG_SQL else logging.WARNING
    logging.getLogger("sqlalchemy.engine").setLevel(sql_level)


def setup_metrics() -> None:
    """Serve the Prometheus registry on METRICS_PORT, once per process."""
    global _metrics_server_started

    if settings.ENABLE_METRICS and not _metrics_server_started:
        start_http_server(settings.METRICS_PORT)
        _metrics_server_started = True


def get_logger(name: str) -> structlog.BoundLogger:
    return structlog.get_logger(name)


def set_correlation_id(correlation_id: str | None = None) -> str:
    """Bind a correlation id (generated when absent) to the current context."""
    correlation_id = correlation_id or str(uuid.uuid4())
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(correlation_id=correlation_id)
    return correlation_id


def record_skipped_order(report: str, reason: str, **context: Any) -> None:
    """Log and count an order that an aggregation could not use."""
    get_logger("linedash.aggregation").warning(
        "Order skipped", report=report, reason=reason, **context
    )
    SKIPPED_ORDERS.labels(report=report, reason=reason).inc()


def monitor_report(report: str):
    """
    Time a report computation and count its outcome.

    Domain errors (bad parameters, missing entities) count as ``rejected``.
    Data-store failures and anything unexpected count as ``error``. The
    exception is always re-raised.
    """

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            logger = get_logger(func.__module__)
            started = time.perf_counter()
            try:
                result = func(*args, **kwargs)
            except DatabaseError as e:
                REPORT_OPERATIONS.labels(report=report, status="error").inc()
                logger.error(
                    "Report failed",
                    report=report,
                    duration_seconds=time.perf_counter() - started,
                    error=e.to_dict(),
                )
                raise
            except DomainError as e:
                REPORT_OPERATIONS.labels(report=report, status="rejected").inc()
                logger.warning("Report rejected", report=report, error=e.message)
                raise
            except Exception as e:
                REPORT_OPERATIONS.labels(report=report, status="error").inc()
                logger.error(
                    "Report failed",
                    report=report,
                    duration_seconds=time.perf_counter() - started,
                    error=str(e),
                    error_type=type(e).__name__,
                )
                raise

            elapsed = time.perf_counter() - started
            REPORT_OPERATIONS.labels(report=report, status="success").inc()
            REPORT_DURATION.labels(report=report).observe(elapsed)
            logger.info("Report computed", report=report, duration_seconds=elapsed)
            return result

        return wrapper  # type: ignore[return-value]

    return decorator


def initialize_observability() -> None:
    setup_structured_logging()
    setup_metrics()

    get_logger("linedash.observability").info(
        "Observability configured",
        log_format=settings.LOG_FORMAT,
        log_level=settings.LOG_LEVEL,
        metrics_port=settings.METRICS_PORT if settings.ENABLE_METRICS else None,
    )
