"""
Pay-specific exceptions for charge sync and refund operations.

Exception Hierarchy:
    PaymentError (base for pay domain)
    ├── PaymentValidationError - Invalid arguments to a pay operation
    └── PaymentProcessingError - Payment processing failures
        └── StripeError - Base for all Stripe errors
            ├── StripeInvalidAccountError - Invalid connected account (permanent)
            ├── StripeInvalidRequestError - Invalid request params (permanent)
            ├── StripeRateLimitError - Rate limited (transient, retry)
            └── StripeAPIUnavailableError - API unavailable (transient, retry)

    ChargeSyncConflictError - Concurrent write on the same charge (inherits ConflictError)

Usage:
    from pay.exceptions import ChargeSyncConflictError, StripeError

    try:
        StripeCharge.sync("ch_123")
    except ChargeSyncConflictError:
        # Retries exhausted, let the job runner retry later
        raise
    except StripeError as e:
        if e.is_retryable:
            schedule_retry()
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from core.exceptions import BaseApplicationError, ConflictError

if TYPE_CHECKING:
    from typing import Any


# =============================================================================
# Pay Domain Exceptions
# =============================================================================


class PaymentError(BaseApplicationError):
    """
    Base exception for all pay operations.

    All pay-specific exceptions inherit from this class, which itself
    inherits from BaseApplicationError for consistent error codes.
    """

    default_error_code: str = "PAYMENT_ERROR"


class PaymentValidationError(PaymentError):
    """
    Raised when a pay operation is called with invalid arguments.

    Example:
        if amount <= 0:
            raise PaymentValidationError(
                "Refund amount must be positive",
                details={"amount": amount},
            )
    """

    default_error_code: str = "PAYMENT_VALIDATION_ERROR"


class PaymentProcessingError(PaymentError):
    """Raised when the payment processor rejects or fails an operation."""

    default_error_code: str = "PAYMENT_PROCESSING_ERROR"


# =============================================================================
# Stripe-Specific Exceptions
# =============================================================================


class StripeError(PaymentProcessingError):
    """
    Base exception for all Stripe-related errors.

    Raised by StripeAdapter in place of the SDK exception, which is kept
    as ``__cause__``.

    Attributes:
        stripe_code: Stripe's error code, when Stripe returned one
        is_retryable: Whether the operation can be retried as-is
    """

    default_error_code: str = "STRIPE_ERROR"
    is_retryable: bool = False

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        stripe_code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        details = details or {}
        if stripe_code:
            details["stripe_code"] = stripe_code
        super().__init__(message, error_code=error_code, details=details)
        self.stripe_code = stripe_code


# -----------------------------------------------------------------------------
# Permanent Errors (do not retry)
# -----------------------------------------------------------------------------


class StripeInvalidAccountError(StripeError):
    """
    The connected account a request was scoped to is invalid.

    Raised when the Stripe-Account header names an account that does
    not exist or that the platform has lost access to.
    """

    default_error_code: str = "INVALID_STRIPE_ACCOUNT"
    is_retryable: bool = False


class StripeInvalidRequestError(StripeError):
    """
    Invalid request sent to Stripe.

    Possible causes:
    - Unknown charge or invoice ID
    - Refund larger than the refundable amount
    - Charge already fully refunded
    - Authentication failure (bad API key)
    """

    default_error_code: str = "INVALID_STRIPE_REQUEST"
    is_retryable: bool = False


# -----------------------------------------------------------------------------
# Transient Errors (safe to retry with backoff)
# -----------------------------------------------------------------------------


class StripeRateLimitError(StripeError):
    """Rate limited by the Stripe API."""

    default_error_code: str = "STRIPE_RATE_LIMITED"
    is_retryable: bool = True


class StripeAPIUnavailableError(StripeError):
    """
    Stripe API is temporarily unavailable.

    This covers network connectivity issues, timeouts and Stripe server
    errors (5xx).
    """

    default_error_code: str = "STRIPE_UNAVAILABLE"
    is_retryable: bool = True


# =============================================================================
# Concurrency Control Exceptions
# =============================================================================


class ChargeSyncConflictError(ConflictError):
    """
    Raised when a charge write loses a race with a concurrent sync.

    Two syncs of the same charge can both miss the existing row and both
    try to insert it; the unique constraint on (customer, processor_id)
    rejects the second insert with this error. StripeCharge.sync retries
    on it and re-raises once the retry bound is exhausted.

    Attributes:
        details: Contains processor_id and, after retries, attempts
    """

    default_error_code: str = "CHARGE_SYNC_CONFLICT"


# =============================================================================
# Exports
# =============================================================================

__all__ = [
    # Pay domain
    "PaymentError",
    "PaymentValidationError",
    "PaymentProcessingError",
    # Stripe-specific
    "StripeError",
    "StripeInvalidAccountError",
    "StripeInvalidRequestError",
    "StripeRateLimitError",
    "StripeAPIUnavailableError",
    # Concurrency control
    "ChargeSyncConflictError",
]
