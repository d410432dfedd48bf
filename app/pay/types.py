"""
Data types for charge sync.

Types:
    PaymentMethodDetails: Fields extracted from a charge's payment method
    ChargeAttributes: Normalized attribute set written to a PayCharge

Usage:
    from pay.types import ChargeAttributes

    attributes = normalize_charge(remote_charge, stripe_account="acct_123")
    PayCharge.objects.create(
        customer=customer,
        processor_id=remote_charge["id"],
        **attributes.as_model_fields(),
    )
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, replace
from datetime import datetime
from typing import Any


class _Unresolved:
    """Marker for a subscription link that could not be determined."""

    def __repr__(self) -> str:
        return "UNRESOLVED"

    def __bool__(self) -> bool:
        return False


# Leaves the stored subscription link untouched when written
UNRESOLVED: Any = _Unresolved()


@dataclass(frozen=True)
class PaymentMethodDetails:
    """
    Payment method fields of a charge.

    Every field is optional; which ones are set depends on the payment
    method type (cards carry brand and expiry, bank debits carry a bank).

    Attributes:
        payment_method_type: Type tag (card, sepa_debit, ideal, ...)
        brand: Capitalized card brand (e.g. "Visa")
        last4: Last four digits of the card or account number
        exp_month: Card expiry month
        exp_year: Card expiry year
        bank: Bank name or bank identifier
    """

    payment_method_type: str | None = None
    brand: str | None = None
    last4: str | None = None
    exp_month: int | None = None
    exp_year: int | None = None
    bank: str | None = None


@dataclass(frozen=True)
class ChargeAttributes:
    """
    Normalized attributes of a remote charge.

    Built by normalize_charge and applied to a PayCharge on create or
    update. The subscription link is resolved separately and attached
    with with_subscription().

    Attributes:
        amount: Charged amount in the smallest currency unit
        amount_refunded: Refunded amount in the smallest currency unit
        application_fee_amount: Platform fee, if any
        currency: ISO 4217 currency code
        created_at: Remote creation time (None if the payload had none)
        stripe_account: Connected account scope
        payment_method: Extracted payment method fields
        subscription: Linked PaySubscription, None to clear the link, or
            UNRESOLVED to keep whatever link is stored
    """

    amount: int
    amount_refunded: int
    application_fee_amount: int | None
    currency: str
    created_at: datetime | None
    stripe_account: str | None
    payment_method: PaymentMethodDetails = field(default_factory=PaymentMethodDetails)
    subscription: Any = UNRESOLVED

    def with_subscription(self, subscription: Any) -> ChargeAttributes:
        """Return a copy linked to the given subscription."""
        return replace(self, subscription=subscription)

    def as_model_fields(self) -> dict[str, Any]:
        """
        Flatten into PayCharge field values.

        created_at and subscription are omitted when unknown so the model
        default applies on create and the stored value is kept on update.
        """
        fields: dict[str, Any] = {
            "amount": self.amount,
            "amount_refunded": self.amount_refunded,
            "application_fee_amount": self.application_fee_amount,
            "currency": self.currency,
            "stripe_account": self.stripe_account,
            **asdict(self.payment_method),
        }
        if self.created_at is not None:
            fields["created_at"] = self.created_at
        if self.subscription is not UNRESOLVED:
            fields["subscription"] = self.subscription
        return fields
