"""
Tests for the application exception hierarchy.

Tests cover:
- Default and explicit error codes
- to_dict and string representations
- Pay exceptions built on the core hierarchy
"""

from core.exceptions import BaseApplicationError, ConflictError, NotFoundError
from pay.exceptions import (
    ChargeSyncConflictError,
    PaymentError,
    StripeAPIUnavailableError,
    StripeError,
    StripeInvalidRequestError,
)


class TestBaseApplicationError:
    """Tests for BaseApplicationError."""

    def test_default_error_code(self):
        assert NotFoundError("missing").error_code == "NOT_FOUND"
        assert ConflictError("clash").error_code == "CONFLICT"

    def test_explicit_error_code(self):
        error = NotFoundError("missing", error_code="PAYCHARGE_NOT_FOUND")

        assert error.error_code == "PAYCHARGE_NOT_FOUND"

    def test_to_dict_with_details(self):
        error = ConflictError("clash", details={"processor_id": "ch_123"})

        assert error.to_dict() == {
            "error": "clash",
            "error_code": "CONFLICT",
            "details": {"processor_id": "ch_123"},
        }

    def test_to_dict_omits_empty_details(self):
        assert "details" not in NotFoundError("missing").to_dict()

    def test_str_includes_code(self):
        assert str(NotFoundError("missing")) == "[NOT_FOUND] missing"


class TestPayExceptions:
    """Tests for pay exceptions on top of the core hierarchy."""

    def test_stripe_error_records_stripe_code(self):
        error = StripeInvalidRequestError("No such charge", stripe_code="resource_missing")

        assert error.stripe_code == "resource_missing"
        assert error.details["stripe_code"] == "resource_missing"
        assert error.error_code == "INVALID_STRIPE_REQUEST"

    def test_stripe_errors_are_payment_errors(self):
        error = StripeAPIUnavailableError("down")

        assert isinstance(error, StripeError)
        assert isinstance(error, PaymentError)
        assert isinstance(error, BaseApplicationError)
        assert error.is_retryable is True

    def test_charge_sync_conflict_is_conflict(self):
        error = ChargeSyncConflictError("lost race", details={"processor_id": "ch_123"})

        assert isinstance(error, ConflictError)
        assert error.error_code == "CHARGE_SYNC_CONFLICT"
