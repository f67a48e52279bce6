"""
Domain Exceptions

Custom exceptions for domain-specific errors, discriminated by error type so
the API layer can translate them into status codes without inspecting
messages.
"""

from enum import Enum


class ErrorType(str, Enum):
    """What went wrong, independent of the message text."""

    VALIDATION = "validation"
    BUSINESS_RULE = "business_rule"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    REPOSITORY = "repository"


class DomainError(Exception):
    """Base class of every error the API maps to a status code."""

    def __init__(
        self,
        message: str,
        error_type: ErrorType,
        details: dict[str, str | int | bool | None] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.error_type = error_type
        self.details = details or {}

    def to_dict(self) -> dict[str, str | dict[str, str | int | bool | None]]:
        """Structured form used in error logs."""
        return {
            "type": self.error_type.value,
            "message": self.message,
            "details": self.details,
        }


class ValidationError(DomainError):
    """Raised when request or domain validation rules are violated."""

    def __init__(
        self,
        field_name: str,
        value: str | int | float | bool | None,
        message: str,
        error_code: str | None = None,
    ) -> None:
        self.field_name = field_name
        self.value = value
        self.error_code = error_code or "VALIDATION_ERROR"

        details: dict[str, str | int | bool | None] = {
            "field": field_name,
            "value": str(value) if value is not None else None,
            "error_code": self.error_code,
        }
        super().__init__(
            f"Validation failed for field '{field_name}': {message}",
            ErrorType.VALIDATION,
            details,
        )


class BusinessRuleViolation(DomainError):
    """Raised when an operation breaks a production rule."""

    def __init__(
        self, message: str, details: dict[str, str | int | bool | None] | None = None
    ) -> None:
        super().__init__(message, ErrorType.BUSINESS_RULE, details)


class EntityNotFoundError(DomainError):
    """A referenced record does not exist."""

    def __init__(self, entity_name: str, entity_id: int | str) -> None:
        super().__init__(
            f"{entity_name} with ID {entity_id} not found",
            ErrorType.NOT_FOUND,
            {"entity_type": entity_name, "entity_id": str(entity_id)},
        )
        self.entity_name = entity_name
        self.entity_id = entity_id


class EntityAlreadyExistsError(DomainError):
    """A unique name or number is already taken."""

    def __init__(self, message: str) -> None:
        super().__init__(message, ErrorType.CONFLICT)


class DatabaseError(DomainError):
    """A data-store failure, already rolled back."""

    def __init__(self, message: str) -> None:
        super().__init__(message, ErrorType.REPOSITORY)
