"""
Base application service providing common functionality.

This module provides a base class for the write-side services, including
common validation helpers.
"""

from abc import ABC
from datetime import datetime, timezone

from sqlmodel import Session

from linedash.domain.shared.exceptions import ValidationError


class ApplicationServiceBase(ABC):
    """
    Base class for application services.

    Services receive the request-scoped session and build the repositories
    they coordinate from it.
    """

    def __init__(self, session: Session):
        self.session = session

    def validate_non_empty_string(self, value: str | None, field_name: str) -> None:
        """
        Validate that a string field is not empty.

        Raises:
            ValidationError: If string is None or empty
        """
        if not value or not value.strip():
            raise ValidationError(field_name, value, f"{field_name} cannot be empty")

    def validate_non_negative(self, value: float | None, field_name: str) -> None:
        """
        Validate that a number is zero or positive.

        Raises:
            ValidationError: If number is negative
        """
        if value is not None and value < 0:
            raise ValidationError(
                field_name, value, f"{field_name} must be non-negative"
            )

    @staticmethod
    def as_naive_utc(moment: datetime) -> datetime:
        """Timestamps are stored as naive UTC; aware values are converted."""
        if moment.tzinfo is None:
            return moment
        return moment.astimezone(timezone.utc).replace(tzinfo=None)
