"""
Factory Boy factories for pay test data.

This module provides factories for creating test instances of pay models
and builders for remote Stripe charge payloads.

Usage:
    from pay.tests.factories import (
        PayChargeFactory,
        PayCustomerFactory,
        PaySubscriptionFactory,
        build_remote_charge,
    )

    # Create a Stripe customer
    customer = PayCustomerFactory()

    # Create a charge on a connected account
    charge = PayChargeFactory(customer__stripe_account="acct_123")

    # Build the Stripe payload for a card charge
    remote = build_remote_charge(customer=customer.processor_id)
"""

from __future__ import annotations

from typing import Any

import factory

from pay.models import PayCharge, PayCustomer, PaymentProcessor, PaySubscription


class PayCustomerFactory(factory.django.DjangoModelFactory):
    """
    Factory for creating PayCustomer instances.

    Default creates a Stripe customer on the platform account.

    Example:
        # Customer on a connected account
        customer = PayCustomerFactory(stripe_account="acct_123")
    """

    class Meta:
        model = PayCustomer

    processor = PaymentProcessor.STRIPE
    processor_id = factory.Sequence(lambda n: f"cus_test{n}")
    stripe_account = None
    default = True


class PaySubscriptionFactory(factory.django.DjangoModelFactory):
    """Factory for creating PaySubscription instances."""

    class Meta:
        model = PaySubscription

    customer = factory.SubFactory(PayCustomerFactory)
    processor_id = factory.Sequence(lambda n: f"sub_test{n}")
    name = "default"
    processor_plan = "price_monthly"
    status = "active"
    quantity = 1


class PayChargeFactory(factory.django.DjangoModelFactory):
    """
    Factory for creating PayCharge instances.

    Default creates a $20.00 USD Visa card charge with nothing refunded.

    Example:
        # Partially refunded charge
        charge = PayChargeFactory(amount=2000, amount_refunded=500)

        # Bank debit charge
        charge = PayChargeFactory(
            payment_method_type="sepa_debit",
            brand=None,
            exp_month=None,
            exp_year=None,
            bank="ING",
        )
    """

    class Meta:
        model = PayCharge

    customer = factory.SubFactory(PayCustomerFactory)
    processor_id = factory.Sequence(lambda n: f"ch_test{n}")
    amount = 2000
    amount_refunded = 0
    currency = "usd"
    stripe_account = factory.SelfAttribute("customer.stripe_account")
    payment_method_type = "card"
    brand = "Visa"
    last4 = "4242"
    exp_month = 12
    exp_year = 2030


def build_remote_charge(**overrides: Any) -> dict[str, Any]:
    """
    Build a Stripe charge payload as returned by StripeAdapter.

    Default is a captured $20.00 USD Visa card charge with no invoice.
    Keyword arguments replace top-level keys.
    """
    charge: dict[str, Any] = {
        "id": "ch_test123",
        "object": "charge",
        "amount": 2000,
        "amount_refunded": 0,
        "application_fee_amount": None,
        "created": 1700000000,
        "currency": "usd",
        "customer": "cus_test123",
        "invoice": None,
        "status": "succeeded",
        "payment_method_details": {
            "type": "card",
            "card": {
                "brand": "visa",
                "last4": "4242",
                "exp_month": 12,
                "exp_year": 2030,
            },
        },
    }
    charge.update(overrides)
    return charge
