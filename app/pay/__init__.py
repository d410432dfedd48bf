"""
Pay app for Stripe charge sync.

This app handles:
- Mirroring Stripe charges into PayCharge records
- Linking charges to customers and subscriptions
- Issuing refunds against synced charges

Usage:
    from pay.services import StripeCharge

    # Sync from a webhook payload (no extra fetch)
    charge = StripeCharge.sync(event["data"]["object"]["id"], remote_charge=event["data"]["object"])

    # Refund part of a charge
    StripeCharge(charge).refund(500)
"""
