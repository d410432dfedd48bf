"""
Pay adapters for external services.

All Stripe API calls made by the pay app go through these adapters to
ensure consistent error handling, timeouts, account scoping and
observability.

Usage:
    from pay.adapters import StripeAdapter

    charge = StripeAdapter.retrieve_charge("ch_123")
"""

from pay.adapters.stripe_adapter import (
    RefundResult,
    StripeAdapter,
)

__all__ = [
    "RefundResult",
    "StripeAdapter",
]
