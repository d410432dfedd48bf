"""
Pay domain models.

This module contains all pay-related models:
- PayCustomer: Local counterpart of a processor customer
- PaySubscription: Recurring subscription belonging to a customer
- PayCharge: Local mirror of a processor charge
"""

from pay.models.charge import PayCharge
from pay.models.customer import PayCustomer, PaymentProcessor
from pay.models.subscription import PaySubscription

__all__ = [
    "PayCharge",
    "PayCustomer",
    "PaySubscription",
    "PaymentProcessor",
]
