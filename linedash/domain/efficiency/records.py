"""
Immutable inputs for the efficiency aggregator.

Query services map ORM rows into these snapshots so the reductions never
touch a session and can run twice over the same data with identical output.
"""

import calendar
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta

from linedash.domain.shared.exceptions import ValidationError


@dataclass(frozen=True)
class HourlyEntrySnapshot:
    boxes: int
    recorded_at: datetime


@dataclass(frozen=True)
class OrderSnapshot:
    """A production order with the related records the reports need."""

    order_id: int
    order_number: str
    line_id: int
    line_name: str
    product_id: int
    product_name: str
    shift: int | None
    planned_boxes: int
    produced_boxes: int
    planned_hours: float | None
    production_date: datetime
    status: str
    planned_speed: float | None = None
    hourly_entries: tuple[HourlyEntrySnapshot, ...] = field(default_factory=tuple)
    finalization_hours: tuple[float, ...] = field(default_factory=tuple)

    @property
    def actual_hours(self) -> float:
        """Each hourly entry counts as one hour, plus residual finalization time."""
        return len(self.hourly_entries) + sum(h or 0.0 for h in self.finalization_hours)

    @property
    def completion_percentage(self) -> float:
        if self.planned_boxes <= 0:
            return 0.0
        return self.produced_boxes / self.planned_boxes * 100


@dataclass(frozen=True)
class ReportWindow:
    """
    Inclusive, day-aligned date range of a report request.

    ``start`` is midnight of the first day and ``end`` the last microsecond of
    the final day, both naive UTC.
    """

    start: datetime
    end: datetime

    @classmethod
    def for_days(cls, first_day: date, last_day: date) -> "ReportWindow":
        if first_day > last_day:
            raise ValidationError(
                "from", first_day.isoformat(), "'from' must not be after 'to'"
            )
        return cls(
            start=datetime.combine(first_day, time.min),
            end=datetime.combine(last_day, time.max),
        )

    @classmethod
    def from_params(
        cls, from_param: str | None, to_param: str | None, max_days: int | None = None
    ) -> "ReportWindow":
        """
        Build a window from raw ``from``/``to`` query values.

        Raises:
            ValidationError: If either bound is missing, malformed, inverted or
                the range exceeds ``max_days``.
        """
        if not from_param or not to_param:
            raise ValidationError(
                "from" if not from_param else "to",
                None,
                "'from' and 'to' parameters are required",
                "MISSING_DATE_RANGE",
            )

        window = cls.for_days(_parse_day("from", from_param), _parse_day("to", to_param))
        if max_days is not None and window.days > max_days:
            raise ValidationError(
                "to", to_param, f"Date range cannot exceed {max_days} days"
            )
        return window

    @property
    def first_day(self) -> date:
        return self.start.date()

    @property
    def last_day(self) -> date:
        return self.end.date()

    @property
    def days(self) -> int:
        return (self.last_day - self.first_day).days + 1

    def contains(self, moment: datetime) -> bool:
        return self.start <= moment <= self.end

    def previous_period(self) -> "ReportWindow":
        """The window of equal length ending the day before this one starts."""
        shift = timedelta(days=self.days)
        return ReportWindow.for_days(self.first_day - shift, self.last_day - shift)

    def same_period_last_year(self) -> "ReportWindow":
        return ReportWindow.for_days(
            _one_year_earlier(self.first_day), _one_year_earlier(self.last_day)
        )


def _parse_day(field_name: str, raw: str) -> date:
    try:
        parsed = datetime.fromisoformat(raw.strip().replace("Z", "+00:00"))
    except ValueError as e:
        raise ValidationError(
            field_name, raw, "expected an ISO-8601 date or datetime", "INVALID_DATE"
        ) from e
    return parsed.date()


def _one_year_earlier(day: date) -> date:
    year = day.year - 1
    # Feb 29 falls back to Feb 28 on non-leap years
    last_day_of_month = calendar.monthrange(year, day.month)[1]
    return day.replace(year=year, day=min(day.day, last_day_of_month))
