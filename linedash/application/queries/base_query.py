"""
Base query service providing common query functionality.

This module provides a base class for all report query services, including
request-parameter validation and the skip-logging hook handed to the
aggregator.
"""

from abc import ABC
from enum import Enum

from sqlmodel import Session

from linedash.application.dtos import AppliedFilters
from linedash.core.config import settings
from linedash.core.observability import record_skipped_order
from linedash.domain.efficiency import OrderSnapshot, ReportWindow
from linedash.domain.shared.exceptions import ValidationError


class ComparisonPeriod(str, Enum):
    """Windows a report can be compared against."""

    PREVIOUS_PERIOD = "previous_period"
    SAME_PERIOD_LAST_YEAR = "same_period_last_year"


class ProductionSort(str, Enum):
    """Ordering of the production total reports, largest first."""

    BOXES = "boxes"
    LITERS = "liters"


class BaseQueryService(ABC):
    """
    Base class for query services.

    Holds the request-scoped session and the validation shared by every
    report.
    """

    def __init__(self, session: Session):
        self.session = session

    def build_window(self, from_param: str | None, to_param: str | None) -> ReportWindow:
        """
        Validate date range parameters.

        Raises:
            ValidationError: If either bound is missing or malformed, the range
                is inverted, or it exceeds the configured maximum
        """
        return ReportWindow.from_params(
            from_param, to_param, max_days=settings.REPORT_MAX_RANGE_DAYS
        )

    def validate_limit(self, limit: int | None) -> int | None:
        """
        Validate the row cap. ``0`` and ``None`` both mean unlimited.

        Raises:
            ValidationError: If limit is negative
        """
        if limit is None:
            return None
        if limit < 0:
            raise ValidationError("limit", limit, "Limit must be non-negative")
        return limit or None

    def comparison_window(
        self, window: ReportWindow, compare_with: ComparisonPeriod
    ) -> ReportWindow:
        if compare_with is ComparisonPeriod.SAME_PERIOD_LAST_YEAR:
            return window.same_period_last_year()
        return window.previous_period()

    def applied_filters(
        self,
        window: ReportWindow,
        limit: int | None = None,
        include_incomplete: bool | None = None,
        compare_with: ComparisonPeriod | None = None,
        sort_by: str | None = None,
        category: str | None = None,
    ) -> AppliedFilters:
        return AppliedFilters(
            from_date=window.first_day,
            to_date=window.last_day,
            limit=limit,
            include_incomplete=include_incomplete,
            compare_with=compare_with.value if compare_with else None,
            sort_by=sort_by,
            category=category,
        )

    @staticmethod
    def skip_logger(report: str):
        """Build the aggregator's skip callback for ``report``."""

        def on_skip(order: OrderSnapshot, reason: str) -> None:
            record_skipped_order(
                report,
                reason,
                order_id=order.order_id,
                order_number=order.order_number,
            )

        return on_skip

    @staticmethod
    def calculate_percentage(numerator: float, denominator: float) -> float:
        """
        Calculate percentage with safe division.

        Returns:
            Percentage value, 0 when the denominator is 0
        """
        if denominator == 0:
            return 0.0
        return (numerator / denominator) * 100
