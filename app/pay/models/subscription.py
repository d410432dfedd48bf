"""
PaySubscription model for recurring billing linked to a PayCustomer.

Charges generated by a subscription invoice are linked back to the
subscription during charge sync when the subscription is known locally.

Usage:
    from pay.models import PaySubscription

    subscription = customer.subscriptions.filter(processor_id="sub_123").first()
    subscription.charges.all()
"""

from __future__ import annotations

from django.db import models

from core.models import BaseModel


class PaySubscription(BaseModel):
    """
    A processor subscription belonging to a PayCustomer.

    Fields:
        customer: Owning PayCustomer
        processor_id: The processor's subscription ID (sub_xxx)
        name: Local name for the subscription (e.g. "default")
        processor_plan: The processor's price/plan ID (price_xxx)
        status: Processor status string (active, past_due, canceled, ...)
        quantity: Seat count
    """

    customer = models.ForeignKey(
        "pay.PayCustomer",
        on_delete=models.CASCADE,
        related_name="subscriptions",
        help_text="Customer that owns this subscription",
    )

    processor_id = models.CharField(
        max_length=255,
        help_text="Processor subscription ID (sub_xxx)",
    )

    name = models.CharField(
        max_length=255,
        default="default",
        help_text="Local name for the subscription",
    )

    processor_plan = models.CharField(
        max_length=255,
        blank=True,
        default="",
        help_text="Processor price or plan ID (price_xxx)",
    )

    status = models.CharField(
        max_length=32,
        db_index=True,
        default="active",
        help_text="Processor subscription status",
    )

    quantity = models.PositiveIntegerField(
        default=1,
        help_text="Number of seats",
    )

    class Meta:
        db_table = "pay_subscriptions"
        ordering = ["-created_at"]
        verbose_name = "Pay Subscription"
        verbose_name_plural = "Pay Subscriptions"
        constraints = [
            models.UniqueConstraint(
                fields=["customer", "processor_id"],
                name="unique_pay_subscription_per_customer",
            ),
        ]

    def __str__(self) -> str:
        return f"PaySubscription {self.processor_id} ({self.status})"
