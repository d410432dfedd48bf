"""
PayCharge model mirroring a processor charge.

A PayCharge is created the first time a remote charge is synced for a
customer and updated in place on every later sync of the same charge. It
is never deleted by the sync process.

Usage:
    from pay.models import PayCharge

    charge = customer.charges.get(processor_id="ch_123")
    charge.charged_to      # "Visa (**** 4242)"
    charge.partial_refund  # True if some but not all of it was refunded
"""

from __future__ import annotations

from django.db import models
from django.utils import timezone

from core.models import BaseModel


class PayCharge(BaseModel):
    """
    Local record of a single charge at the payment processor.

    Fields:
        customer: Owning PayCustomer
        subscription: Subscription whose invoice produced the charge, if known
        processor_id: The processor's charge ID (ch_xxx), unique per customer
        amount: Charged amount in the smallest currency unit
        amount_refunded: Refunded amount in the smallest currency unit
        application_fee_amount: Platform fee taken on a connected charge
        currency: ISO 4217 currency code (lowercase)
        created_at: When the processor created the charge
        stripe_account: Connected account the charge lives on (acct_xxx)
        payment_method_type: Payment method tag (card, sepa_debit, ideal, ...)
        brand, last4, exp_month, exp_year: Card details, when a card was used
        bank: Bank name or identifier, when a bank debit was used
    """

    customer = models.ForeignKey(
        "pay.PayCustomer",
        on_delete=models.CASCADE,
        related_name="charges",
        help_text="Customer that was charged",
    )

    subscription = models.ForeignKey(
        "pay.PaySubscription",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="charges",
        help_text="Subscription that generated this charge, if any",
    )

    processor_id = models.CharField(
        max_length=255,
        db_index=True,
        help_text="Processor charge ID (ch_xxx)",
    )

    # ==========================================================================
    # Amount & Currency
    # ==========================================================================

    amount = models.BigIntegerField(
        help_text="Charged amount in smallest currency unit (e.g., cents)",
    )

    amount_refunded = models.BigIntegerField(
        default=0,
        help_text="Refunded amount in smallest currency unit",
    )

    application_fee_amount = models.BigIntegerField(
        null=True,
        blank=True,
        help_text="Application fee in smallest currency unit",
    )

    currency = models.CharField(
        max_length=3,
        default="usd",
        help_text="ISO 4217 currency code (lowercase)",
    )

    # Remote creation time, not the local insert time
    created_at = models.DateTimeField(
        default=timezone.now,
        db_index=True,
        help_text="When the processor created this charge",
    )

    stripe_account = models.CharField(
        max_length=255,
        null=True,
        blank=True,
        help_text="Stripe connected account ID (acct_xxx) for API scoping",
    )

    # ==========================================================================
    # Payment Method
    # ==========================================================================

    payment_method_type = models.CharField(
        max_length=64,
        null=True,
        blank=True,
        help_text="Payment method type tag (card, sepa_debit, ideal, ...)",
    )

    brand = models.CharField(max_length=64, null=True, blank=True)
    last4 = models.CharField(max_length=4, null=True, blank=True)
    exp_month = models.PositiveSmallIntegerField(null=True, blank=True)
    exp_year = models.PositiveSmallIntegerField(null=True, blank=True)
    bank = models.CharField(max_length=255, null=True, blank=True)

    class Meta:
        db_table = "pay_charges"
        ordering = ["-created_at"]
        verbose_name = "Pay Charge"
        verbose_name_plural = "Pay Charges"
        constraints = [
            models.UniqueConstraint(
                fields=["customer", "processor_id"],
                name="unique_pay_charge_per_customer",
            ),
        ]

    def __str__(self) -> str:
        return f"PayCharge {self.processor_id} ({self.amount} {self.currency})"

    # ==========================================================================
    # Refund State
    # ==========================================================================

    @property
    def full_refund(self) -> bool:
        """True if the whole charge has been refunded."""
        return self.amount > 0 and self.amount_refunded == self.amount

    @property
    def partial_refund(self) -> bool:
        """True if part, but not all, of the charge has been refunded."""
        return 0 < self.amount_refunded < self.amount

    @property
    def amount_refundable(self) -> int:
        """Amount still available to refund, never negative."""
        return max(self.amount - self.amount_refunded, 0)

    # ==========================================================================
    # Display
    # ==========================================================================

    @property
    def charged_to(self) -> str:
        """
        Describe what was charged, for receipts and admin listings.

        Examples:
            "Visa (**** 4242)"
            "ING (**** 3000)"
            "Us bank account"
        """
        if self.brand and self.last4:
            return f"{self.brand} (**** {self.last4})"
        if self.bank:
            return f"{self.bank} (**** {self.last4})" if self.last4 else self.bank
        if self.payment_method_type:
            return self.payment_method_type.replace("_", " ").capitalize()
        return ""
