"""
Base exception classes for application-wide error handling.

This module provides a standardized exception hierarchy that enables:
- Machine-readable error codes for callers and job runners
- Detailed error context for logging and debugging
- A single base class to catch all domain failures

Exception Hierarchy:
    BaseApplicationError (base)
    ├── NotFoundError - Resource not found
    └── ConflictError - State conflicts (duplicates, concurrent modifications)

Usage:
    from core.exceptions import ConflictError, NotFoundError

    # Raise with message only
    raise NotFoundError("Charge ch_123 not found")

    # Raise with error code and details
    raise ConflictError(
        "Charge ch_123 was written concurrently",
        error_code="CHARGE_SYNC_CONFLICT",
        details={"processor_id": "ch_123"},
    )

    # Convert to dict for logging or an API response
    try:
        ...
    except BaseApplicationError as e:
        logger.error("Operation failed", extra=e.to_dict())
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from typing import Any


class BaseApplicationError(Exception):
    """
    Base exception for all application-specific errors.

    Attributes:
        message: Human-readable error description
        error_code: Machine-readable code for programmatic handling
        details: Additional error context (identifiers, counters, etc.)
    """

    default_error_code: str = "APPLICATION_ERROR"

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        """
        Initialize the exception.

        Args:
            message: Human-readable error description
            error_code: Machine-readable error code (defaults to class default)
            details: Additional error context
        """
        self.message = message
        self.error_code = error_code or self.default_error_code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """
        Convert exception to a dictionary.

        Returns:
            Dict with error, error_code, and (when present) details keys

        Example:
            {
                "error": "Charge ch_123 not found",
                "error_code": "NOT_FOUND",
                "details": {"processor_id": "ch_123"}
            }
        """
        result: dict[str, Any] = {
            "error": self.message,
            "error_code": self.error_code,
        }
        if self.details:
            result["details"] = self.details
        return result

    def __str__(self) -> str:
        """Return string representation with error code."""
        return f"[{self.error_code}] {self.message}"

    def __repr__(self) -> str:
        """Return detailed representation for debugging."""
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"error_code={self.error_code!r}, "
            f"details={self.details!r})"
        )


class NotFoundError(BaseApplicationError):
    """
    Raised when a requested resource is not found.

    Use for single-record lookups where existence is expected. Lookups
    where absence is a normal outcome should return None instead.
    """

    default_error_code: str = "NOT_FOUND"


class ConflictError(BaseApplicationError):
    """
    Raised when an operation conflicts with current resource state.

    Use for:
    - Unique constraint violations
    - Concurrent modification conflicts

    Example:
        try:
            Charge.objects.create(customer=customer, processor_id="ch_123")
        except IntegrityError as e:
            raise ConflictError(
                "Charge ch_123 already exists",
                details={"processor_id": "ch_123"},
            ) from e
    """

    default_error_code: str = "CONFLICT"

