"""
Pay app configuration.

This app mirrors payment processor state locally:
- Customers, subscriptions and charges synced from Stripe
- Concurrency-safe charge upserts
- Refunds issued against synced charges
"""

from django.apps import AppConfig


class PayConfig(AppConfig):
    """Configuration for the pay application."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "pay"
    verbose_name = "Pay"
