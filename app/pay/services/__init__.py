"""
Pay services.

Usage:
    from pay.services import StripeCharge, normalize_charge

    charge = StripeCharge.sync("ch_123")
"""

from pay.services.charge_normalizer import normalize_charge
from pay.services.stripe_charge import StripeCharge

__all__ = [
    "StripeCharge",
    "normalize_charge",
]
