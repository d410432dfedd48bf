"""
Normalization of remote Stripe charges into PayCharge attributes.

normalize_charge is a pure function: it reads a charge mapping (as
returned by StripeAdapter or carried in a webhook payload) and returns a
ChargeAttributes value. It never raises on a structurally valid charge,
including payment method types it has never seen.

Payment method fields are read by an extractor chosen from a registry
keyed by the payment method type tag. Unregistered tags fall back to a
default extractor that tries every known field.

Usage:
    from pay.services.charge_normalizer import normalize_charge

    attributes = normalize_charge(remote_charge, stripe_account="acct_123")
    attributes.payment_method.brand  # "Visa"

    # Register an extractor for a new payment method type
    @register_extractor("konbini")
    def extract_konbini(details):
        return PaymentMethodDetails(bank=details.get("store", {}).get("chain"))
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any, Callable

from pay.types import ChargeAttributes, PaymentMethodDetails


logger = logging.getLogger(__name__)


# =============================================================================
# Extractor Registry
# =============================================================================


PaymentMethodExtractor = Callable[[Mapping[str, Any]], PaymentMethodDetails]

# Maps payment method type tags to extractor functions
PAYMENT_METHOD_EXTRACTORS: dict[str, PaymentMethodExtractor] = {}


def register_extractor(*type_tags: str) -> Callable:
    """
    Decorator to register a payment method extractor for one or more tags.

    Extractors receive the variant sub-mapping (e.g. the value under
    ``payment_method_details["card"]``) and must not raise on missing keys.
    The type tag itself is filled in by normalize_charge.

    Args:
        type_tags: Payment method type tags handled by the extractor

    Returns:
        Decorator function that registers the extractor
    """

    def decorator(func: PaymentMethodExtractor) -> PaymentMethodExtractor:
        for type_tag in type_tags:
            PAYMENT_METHOD_EXTRACTORS[type_tag] = func
        return func

    return decorator


def _get(details: Any, key: str) -> Any:
    if isinstance(details, Mapping):
        return details.get(key)
    return None


def _capitalize(value: Any) -> str | None:
    if not value:
        return None
    return str(value).capitalize()


def _bank(details: Any) -> str | None:
    # eps, fpx, ideal and p24 use "bank"; acss_debit and us_bank_account use "bank_name"
    bank_name = _get(details, "bank_name")
    if bank_name is not None:
        return bank_name
    return _get(details, "bank")


# =============================================================================
# Extractors
# =============================================================================


@register_extractor("card", "card_present", "interac_present")
def extract_card(details: Mapping[str, Any]) -> PaymentMethodDetails:
    """Card details: brand, last4 and expiry."""
    return PaymentMethodDetails(
        brand=_capitalize(_get(details, "brand")),
        last4=_get(details, "last4"),
        exp_month=_get(details, "exp_month"),
        exp_year=_get(details, "exp_year"),
    )


@register_extractor(
    "acss_debit",
    "au_becs_debit",
    "bacs_debit",
    "eps",
    "fpx",
    "ideal",
    "p24",
    "sepa_debit",
    "sofort",
    "us_bank_account",
)
def extract_bank_debit(details: Mapping[str, Any]) -> PaymentMethodDetails:
    """Bank debit details: bank and account last4."""
    return PaymentMethodDetails(
        last4=_get(details, "last4"),
        bank=_bank(details),
    )


def extract_default(details: Mapping[str, Any]) -> PaymentMethodDetails:
    """Fallback for unregistered types: read whatever fields are present."""
    return PaymentMethodDetails(
        brand=_capitalize(_get(details, "brand")),
        last4=_get(details, "last4"),
        exp_month=_get(details, "exp_month"),
        exp_year=_get(details, "exp_year"),
        bank=_bank(details),
    )


def extract_payment_method(payment_method_details: Any) -> PaymentMethodDetails:
    """
    Extract payment method fields from a charge's payment_method_details.

    Args:
        payment_method_details: The charge's payment_method_details mapping,
            or None

    Returns:
        PaymentMethodDetails; all fields None when details are missing
    """
    type_tag = _get(payment_method_details, "type")
    if not type_tag:
        return PaymentMethodDetails()

    extractor = PAYMENT_METHOD_EXTRACTORS.get(type_tag)
    if extractor is None:
        logger.debug(
            f"No payment method extractor for type: {type_tag}",
            extra={"payment_method_type": type_tag},
        )
        extractor = extract_default

    variant = _get(payment_method_details, type_tag)
    details = extractor(variant if isinstance(variant, Mapping) else {})
    return PaymentMethodDetails(
        payment_method_type=type_tag,
        brand=details.brand,
        last4=details.last4,
        exp_month=details.exp_month,
        exp_year=details.exp_year,
        bank=details.bank,
    )


# =============================================================================
# Normalization
# =============================================================================


def _timestamp(epoch_seconds: Any) -> datetime | None:
    if epoch_seconds is None:
        return None
    return datetime.fromtimestamp(int(epoch_seconds), tz=timezone.utc)


def normalize_charge(
    remote_charge: Mapping[str, Any],
    stripe_account: str | None = None,
) -> ChargeAttributes:
    """
    Build the local attribute set for a remote charge.

    Args:
        remote_charge: Charge mapping from Stripe
        stripe_account: Connected account scope of the owning customer

    Returns:
        ChargeAttributes without subscription linkage

    Example:
        attributes = normalize_charge(
            {
                "id": "ch_123",
                "amount": 2000,
                "amount_refunded": 0,
                "currency": "usd",
                "created": 1700000000,
                "payment_method_details": {
                    "type": "card",
                    "card": {"brand": "visa", "last4": "4242"},
                },
            }
        )
        attributes.payment_method.brand  # "Visa"
    """
    return ChargeAttributes(
        amount=remote_charge.get("amount") or 0,
        amount_refunded=remote_charge.get("amount_refunded") or 0,
        application_fee_amount=remote_charge.get("application_fee_amount"),
        currency=remote_charge.get("currency") or "",
        created_at=_timestamp(remote_charge.get("created")),
        stripe_account=stripe_account,
        payment_method=extract_payment_method(
            remote_charge.get("payment_method_details")
        ),
    )


__all__ = [
    "PAYMENT_METHOD_EXTRACTORS",
    "extract_payment_method",
    "normalize_charge",
    "register_extractor",
]
