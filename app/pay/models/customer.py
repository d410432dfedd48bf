"""
PayCustomer model linking a processor customer to local billing records.

A PayCustomer is the local counterpart of a customer object at a payment
processor. Charges and subscriptions synced from the processor hang off it.

Usage:
    from pay.models import PayCustomer, PaymentProcessor

    customer = PayCustomer.objects.filter(
        processor=PaymentProcessor.STRIPE,
        processor_id="cus_123",
    ).first()

    customer.charges.all()
    customer.subscriptions.filter(status="active")
"""

from __future__ import annotations

from django.db import models

from core.models import BaseModel


class PaymentProcessor(models.TextChoices):
    """Payment processors a customer can belong to."""

    STRIPE = "stripe", "Stripe"
    BRAINTREE = "braintree", "Braintree"
    PADDLE = "paddle", "Paddle"


class PayCustomer(BaseModel):
    """
    A customer record at a payment processor.

    Fields:
        processor: Which payment processor owns the customer
        processor_id: The processor's customer ID (cus_xxx for Stripe)
        stripe_account: Connected account the customer lives on (acct_xxx),
            or None for the platform account
        default: Whether this is the owner's default customer
    """

    processor = models.CharField(
        max_length=20,
        choices=PaymentProcessor.choices,
        db_index=True,
        help_text="Payment processor that owns this customer",
    )

    processor_id = models.CharField(
        max_length=255,
        help_text="Processor customer ID (cus_xxx)",
    )

    stripe_account = models.CharField(
        max_length=255,
        null=True,
        blank=True,
        help_text="Stripe connected account ID (acct_xxx) for API scoping",
    )

    default = models.BooleanField(
        default=False,
        help_text="Whether this is the owner's default customer",
    )

    class Meta:
        db_table = "pay_customers"
        ordering = ["-created_at"]
        verbose_name = "Pay Customer"
        verbose_name_plural = "Pay Customers"
        constraints = [
            models.UniqueConstraint(
                fields=["processor", "processor_id"],
                name="unique_pay_customer_per_processor",
            ),
        ]

    def __str__(self) -> str:
        return f"PayCustomer {self.processor}:{self.processor_id}"
