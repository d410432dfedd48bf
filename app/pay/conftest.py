"""
Pytest fixtures shared by the pay test packages.

Usage:
    def test_sync_updates_charge(stripe_customer, remote_charge):
        charge = StripeCharge.sync("ch_test123", remote_charge=remote_charge())
        assert charge.customer == stripe_customer
"""

from unittest.mock import patch

import pytest

from pay.tests.factories import (
    PayChargeFactory,
    PayCustomerFactory,
    PaySubscriptionFactory,
    build_remote_charge,
)


# =============================================================================
# Model Fixtures
# =============================================================================


@pytest.fixture
def stripe_customer(db):
    """Create the Stripe customer that owns remote_charge()."""
    return PayCustomerFactory(processor_id="cus_test123")


@pytest.fixture
def connected_customer(db):
    """Create a Stripe customer on a connected account."""
    return PayCustomerFactory(processor_id="cus_connected", stripe_account="acct_test123")


@pytest.fixture
def subscription(db, stripe_customer):
    """Create a subscription for the Stripe customer."""
    return PaySubscriptionFactory(customer=stripe_customer, processor_id="sub_test123")


@pytest.fixture
def pay_charge(db, stripe_customer):
    """Create a synced card charge for the Stripe customer."""
    return PayChargeFactory(customer=stripe_customer, processor_id="ch_test123")


# =============================================================================
# Remote Payload Fixtures
# =============================================================================


@pytest.fixture
def remote_charge():
    """Build remote charge payloads; keyword arguments replace top-level keys."""
    return build_remote_charge


# =============================================================================
# Mock Fixtures
# =============================================================================


@pytest.fixture
def mock_adapter():
    """Mock StripeAdapter as seen by the charge service."""
    with patch("pay.services.stripe_charge.StripeAdapter") as mock:
        yield mock


@pytest.fixture
def no_sleep():
    """Skip the delay between conflict retries."""
    with patch("pay.locks.time.sleep") as mock:
        yield mock
