"""
Stripe API adapter for charge sync and refund operations.

This module provides the StripeAdapter class which encapsulates all
Stripe API interactions made by the pay app. All Stripe calls go through
this adapter to ensure consistent error handling, timeouts, account
scoping and observability.

Features:
- Configurable timeouts on all API calls
- Automatic error translation to domain exceptions
- Structured logging with timing metrics
- Connected account scoping via the Stripe-Account header

Configuration (via settings):
- STRIPE_SECRET_KEY: Stripe API secret key
- STRIPE_API_TIMEOUT_SECONDS: API call timeout (default: 10)
- STRIPE_MAX_RETRIES: Network retries done by the Stripe client (default: 3)

Usage:
    from pay.adapters import StripeAdapter

    charge = StripeAdapter.retrieve_charge(
        "ch_123",
        expand=["customer", "invoice.subscription"],
        stripe_account="acct_123",
    )

    result = StripeAdapter.create_refund(
        "ch_123",
        amount_cents=500,
        options={"reason": "requested_by_customer"},
    )
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any

import stripe
from django.conf import settings

from pay.exceptions import (
    StripeAPIUnavailableError,
    StripeInvalidAccountError,
    StripeInvalidRequestError,
    StripeRateLimitError,
)


# =============================================================================
# Data Types
# =============================================================================


@dataclass
class RefundResult:
    """
    Result from Stripe Refund operations.

    Attributes:
        id: Refund ID (re_xxx)
        amount_cents: Refunded amount in cents
        currency: Currency code
        status: Refund status (succeeded, pending, failed)
        charge_id: Refunded Charge ID (ch_xxx)
        metadata: Attached metadata
        raw_response: Full Stripe response dict
    """

    id: str
    amount_cents: int
    currency: str
    status: str
    charge_id: str
    metadata: dict[str, str] = field(default_factory=dict)
    raw_response: dict[str, Any] = field(default_factory=dict)


def _request_options(stripe_account: str | None) -> dict[str, Any]:
    """Build per-request options, omitting the account for platform calls."""
    if stripe_account:
        return {"stripe_account": stripe_account}
    return {}


def _to_dict(stripe_object: Any) -> dict[str, Any]:
    """Convert a Stripe object (or plain mapping) to a dict."""
    if hasattr(stripe_object, "to_dict"):
        return stripe_object.to_dict()
    return dict(stripe_object)


# =============================================================================
# Stripe Adapter
# =============================================================================


class StripeAdapter:
    """
    Adapter for Stripe API operations.

    All methods are classmethods - no instance state is maintained.

    Remote objects are returned as plain dicts so callers never depend on
    the SDK's object model.
    """

    # =========================================================================
    # Configuration
    # =========================================================================

    @staticmethod
    def _configure_stripe() -> None:
        """Configure Stripe client with API key, timeout and retries."""
        stripe.api_key = settings.STRIPE_SECRET_KEY
        stripe.max_network_retries = getattr(settings, "STRIPE_MAX_RETRIES", 3)
        timeout = getattr(settings, "STRIPE_API_TIMEOUT_SECONDS", 10)
        stripe.default_http_client = stripe.RequestsClient(timeout=timeout)

    @classmethod
    def get_logger(cls) -> logging.Logger:
        """Get logger for this adapter."""
        return logging.getLogger(f"{cls.__module__}.{cls.__name__}")

    # =========================================================================
    # Charges
    # =========================================================================

    @classmethod
    def retrieve_charge(
        cls,
        charge_id: str,
        expand: list[str] | None = None,
        stripe_account: str | None = None,
    ) -> dict[str, Any]:
        """
        Retrieve a Charge by ID.

        Args:
            charge_id: Stripe Charge ID (ch_xxx or py_xxx)
            expand: Related objects to expand (e.g. ["customer"])
            stripe_account: Connected account to scope the request to

        Returns:
            The charge as a dict

        Raises:
            StripeInvalidRequestError: Charge not found
            StripeInvalidAccountError: Connected account not accessible
            StripeAPIUnavailableError: Stripe service unavailable
        """
        cls._configure_stripe()
        logger = cls.get_logger()

        log_context = {
            "operation": "retrieve_charge",
            "charge_id": charge_id,
            "stripe_account": stripe_account,
        }

        start_time = time.time()
        logger.debug("Starting Stripe operation", extra=log_context)

        try:
            params: dict[str, Any] = {}
            if expand:
                params["expand"] = expand

            charge = stripe.Charge.retrieve(
                charge_id,
                **params,
                **_request_options(stripe_account),
            )

            duration_ms = (time.time() - start_time) * 1000
            logger.debug(
                "Stripe operation completed",
                extra={
                    **log_context,
                    "status": charge.status,
                    "duration_ms": duration_ms,
                },
            )

            return _to_dict(charge)

        except stripe.StripeError as e:
            duration_ms = (time.time() - start_time) * 1000
            cls._handle_stripe_error(e, log_context, duration_ms)
            raise  # Never reached, but satisfies type checker

    # =========================================================================
    # Invoices
    # =========================================================================

    @classmethod
    def retrieve_invoice(
        cls,
        invoice_id: str,
        stripe_account: str | None = None,
    ) -> dict[str, Any]:
        """
        Retrieve an Invoice by ID.

        Used to find the subscription a charge was billed for.

        Args:
            invoice_id: Stripe Invoice ID (in_xxx)
            stripe_account: Connected account to scope the request to

        Returns:
            The invoice as a dict

        Raises:
            StripeInvalidRequestError: Invoice not found
            StripeAPIUnavailableError: Stripe service unavailable
        """
        cls._configure_stripe()
        logger = cls.get_logger()

        log_context = {
            "operation": "retrieve_invoice",
            "invoice_id": invoice_id,
            "stripe_account": stripe_account,
        }

        start_time = time.time()
        logger.debug("Starting Stripe operation", extra=log_context)

        try:
            invoice = stripe.Invoice.retrieve(
                invoice_id,
                **_request_options(stripe_account),
            )

            duration_ms = (time.time() - start_time) * 1000
            logger.debug(
                "Stripe operation completed",
                extra={**log_context, "duration_ms": duration_ms},
            )

            return _to_dict(invoice)

        except stripe.StripeError as e:
            duration_ms = (time.time() - start_time) * 1000
            cls._handle_stripe_error(e, log_context, duration_ms)
            raise

    # =========================================================================
    # Refunds
    # =========================================================================

    @classmethod
    def create_refund(
        cls,
        charge_id: str,
        amount_cents: int | None = None,
        options: dict[str, Any] | None = None,
        stripe_account: str | None = None,
    ) -> RefundResult:
        """
        Create a refund for a Charge.

        Caller options (reason, metadata, refund_application_fee,
        idempotency_key, ...) are passed through; charge and amount always
        come from the explicit arguments.

        Args:
            charge_id: Stripe Charge ID (ch_xxx)
            amount_cents: Amount to refund (None for full refund)
            options: Extra Refund.create parameters
            stripe_account: Connected account to scope the request to

        Returns:
            RefundResult with refund details

        Raises:
            StripeInvalidRequestError: Refund not possible
        """
        cls._configure_stripe()
        logger = cls.get_logger()

        log_context = {
            "operation": "create_refund",
            "charge_id": charge_id,
            "amount_cents": amount_cents,
            "stripe_account": stripe_account,
        }

        start_time = time.time()
        logger.info("Starting Stripe operation", extra=log_context)

        try:
            refund_params: dict[str, Any] = {**(options or {}), "charge": charge_id}
            if amount_cents is not None:
                refund_params["amount"] = amount_cents

            refund = stripe.Refund.create(
                **refund_params,
                **_request_options(stripe_account),
            )

            duration_ms = (time.time() - start_time) * 1000
            logger.info(
                "Stripe operation completed",
                extra={
                    **log_context,
                    "refund_id": refund.id,
                    "status": refund.status,
                    "duration_ms": duration_ms,
                },
            )

            return RefundResult(
                id=refund.id,
                amount_cents=refund.amount,
                currency=refund.currency,
                status=refund.status,
                charge_id=refund.charge,
                metadata=dict(refund.metadata or {}),
                raw_response=_to_dict(refund),
            )

        except stripe.StripeError as e:
            duration_ms = (time.time() - start_time) * 1000
            cls._handle_stripe_error(e, log_context, duration_ms)
            raise

    # =========================================================================
    # Error Handling
    # =========================================================================

    @classmethod
    def _handle_stripe_error(
        cls,
        error: stripe.StripeError,
        log_context: dict[str, Any],
        duration_ms: float,
    ) -> None:
        """
        Translate Stripe exceptions to domain exceptions.

        The SDK exception is chained as ``__cause__`` on the raised error.

        Raises:
            StripeInvalidAccountError: Invalid or inaccessible connected account
            StripeInvalidRequestError: Invalid request or authentication failure
            StripeRateLimitError: Rate limited
            StripeAPIUnavailableError: API unavailable or unexpected error
        """
        logger = cls.get_logger()

        log_context = {**log_context, "duration_ms": duration_ms}

        if isinstance(error, stripe.InvalidRequestError):
            logger.error(
                "Invalid request to Stripe",
                extra={**log_context, "stripe_code": error.code},
            )

            if "account" in str(error).lower():
                raise StripeInvalidAccountError(
                    str(error),
                    stripe_code=error.code,
                ) from error

            raise StripeInvalidRequestError(
                str(error),
                stripe_code=error.code,
            ) from error

        elif isinstance(error, stripe.PermissionError):
            # Platform has no access to the connected account
            logger.error(
                "Permission denied by Stripe",
                extra=log_context,
            )
            raise StripeInvalidAccountError(
                str(error),
                stripe_code="permission_error",
            ) from error

        elif isinstance(error, stripe.RateLimitError):
            logger.warning(
                "Rate limited by Stripe",
                extra=log_context,
            )
            raise StripeRateLimitError(
                "Stripe rate limit exceeded. Please retry.",
                stripe_code="rate_limit",
            ) from error

        elif isinstance(error, stripe.APIConnectionError):
            logger.error(
                "Connection error to Stripe",
                extra=log_context,
                exc_info=True,
            )
            raise StripeAPIUnavailableError(
                "Could not connect to Stripe. Please retry.",
                stripe_code="api_connection_error",
            ) from error

        elif isinstance(error, stripe.APIError):
            logger.error(
                "Stripe API error",
                extra=log_context,
                exc_info=True,
            )
            raise StripeAPIUnavailableError(
                "Stripe service error. Please retry.",
                stripe_code="api_error",
            ) from error

        elif isinstance(error, stripe.AuthenticationError):
            logger.critical(
                "Stripe authentication failed - check API key",
                extra=log_context,
            )
            raise StripeInvalidRequestError(
                "Stripe authentication failed",
                stripe_code="authentication_error",
            ) from error

        else:
            logger.error(
                f"Unexpected error from Stripe: {type(error).__name__}",
                extra=log_context,
                exc_info=True,
            )
            raise StripeAPIUnavailableError(
                f"Unexpected Stripe error: {error}",
                stripe_code="unknown_error",
            ) from error
