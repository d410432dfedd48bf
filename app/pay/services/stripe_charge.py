"""
Stripe charge reconciliation.

StripeCharge converges the local PayCharge for a Stripe charge to the
remote state. It is safe to call any number of times for the same charge,
in any order and from concurrent workers: every call upserts the single
row keyed on (customer, processor_id).

Sync flow:
    1. Fetch the remote charge if the caller did not supply one
    2. Resolve the owning PayCustomer (skip the charge if there is none)
    3. Normalize the remote charge into ChargeAttributes
    4. Link the subscription billed by the charge's invoice, if any
    5. Update the existing row under a row lock, or create it
    6. On a write conflict, re-run steps 2-5 up to the retry bound

Usage:
    from pay.services import StripeCharge

    # From a webhook payload
    charge = StripeCharge.sync(event_charge["id"], remote_charge=event_charge)

    # By ID only; the charge is fetched from Stripe
    charge = StripeCharge.sync("ch_123", stripe_account="acct_123")

    # Refund part of a synced charge
    StripeCharge(charge).refund(500, reason="requested_by_customer")
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from django.conf import settings
from django.db import IntegrityError

from core.exceptions import NotFoundError
from core.services import BaseService
from pay.adapters import RefundResult, StripeAdapter
from pay.exceptions import (
    ChargeSyncConflictError,
    PaymentValidationError,
    StripeError,
)
from pay.locks import lock_for_update, retry_on_conflict
from pay.models import PayCharge, PayCustomer, PaymentProcessor
from pay.services.charge_normalizer import normalize_charge
from pay.types import UNRESOLVED, ChargeAttributes


def _object_id(value: Any) -> str | None:
    """Return the ID of an expanded Stripe object, or the value itself."""
    if isinstance(value, Mapping):
        return value.get("id")
    return value or None


class StripeCharge(BaseService):
    """
    Reconciles PayCharge records with Stripe charges.

    sync is a classmethod working from a charge ID; fetch_remote and refund
    act on one already-synced charge.
    """

    # Related objects expanded when fetching a single charge
    EXPAND = ["customer", "invoice.subscription"]

    def __init__(self, pay_charge: PayCharge):
        self.pay_charge = pay_charge

    # =========================================================================
    # Sync
    # =========================================================================

    @classmethod
    def sync(
        cls,
        charge_id: str,
        remote_charge: Mapping[str, Any] | None = None,
        retries: int | None = None,
        stripe_account: str | None = None,
    ) -> PayCharge | None:
        """
        Create or update the local record of a Stripe charge.

        Args:
            charge_id: Stripe Charge ID (ch_xxx); the row is keyed on the
                payload's own id when it has one
            remote_charge: Charge already in hand (e.g. from a webhook);
                fetched from Stripe when omitted
            retries: Extra attempts after a write conflict
                (default: settings.PAY_CHARGE_SYNC_RETRIES)
            stripe_account: Connected account to fetch the charge from

        Returns:
            The created or updated PayCharge, or None when no local
            customer owns the charge

        Raises:
            StripeError: Fetching the charge failed
            ChargeSyncConflictError: Write conflicts outlasted the retries
        """
        if remote_charge is None:
            remote_charge = StripeAdapter.retrieve_charge(
                charge_id,
                stripe_account=stripe_account,
            )

        if retries is None:
            retries = getattr(settings, "PAY_CHARGE_SYNC_RETRIES", 1)
        delay = getattr(settings, "PAY_CONFLICT_RETRY_DELAY_SECONDS", 0.1)

        return retry_on_conflict(
            lambda: cls._sync_once(charge_id, remote_charge),
            retries=retries,
            delay=delay,
        )

    @classmethod
    def _sync_once(
        cls,
        charge_id: str,
        remote_charge: Mapping[str, Any],
    ) -> PayCharge | None:
        logger = cls.get_logger()

        customer = cls._resolve_customer(remote_charge)
        if customer is None:
            logger.info(
                "Skipping charge sync, no local customer",
                extra={
                    "charge_id": charge_id,
                    "customer_id": _object_id(remote_charge.get("customer")),
                },
            )
            return None

        # The processor's own ID is the upsert key, whatever ID the caller used
        processor_id = remote_charge.get("id") or charge_id

        attributes = normalize_charge(
            remote_charge,
            stripe_account=customer.stripe_account,
        )
        subscription = cls._resolve_subscription(
            customer,
            remote_charge.get("invoice"),
        )

        return cls._write(
            customer,
            processor_id,
            attributes.with_subscription(subscription),
        )

    @classmethod
    def _resolve_customer(cls, remote_charge: Mapping[str, Any]) -> PayCustomer | None:
        customer_id = _object_id(remote_charge.get("customer"))
        if not customer_id:
            return None

        return PayCustomer.objects.filter(
            processor=PaymentProcessor.STRIPE,
            processor_id=customer_id,
        ).first()

    @classmethod
    def _resolve_subscription(
        cls,
        customer: PayCustomer,
        invoice: Any,
    ) -> Any:
        """
        Find the customer's subscription billed by an invoice.

        The invoice may be an ID or an expanded mapping.

        Returns:
            The matching PaySubscription, None when the invoice names no
            subscription of this customer, or UNRESOLVED when there is no
            invoice or it could not be retrieved (the stored link is kept)
        """
        if not invoice:
            return UNRESOLVED

        if not isinstance(invoice, Mapping):
            try:
                invoice = StripeAdapter.retrieve_invoice(
                    invoice,
                    stripe_account=customer.stripe_account,
                )
            except StripeError as e:
                cls.get_logger().warning(
                    "Could not retrieve invoice for charge, keeping subscription link",
                    extra={"invoice_id": invoice, **e.to_dict()},
                )
                return UNRESOLVED

        subscription_id = _object_id(invoice.get("subscription"))
        if not subscription_id:
            parent = invoice.get("parent") or {}
            details = parent.get("subscription_details") or {}
            subscription_id = _object_id(details.get("subscription"))

        if not subscription_id:
            return None

        return customer.subscriptions.filter(processor_id=subscription_id).first()

    @classmethod
    def _find_local_charge(
        cls,
        customer: PayCustomer,
        processor_id: str,
    ) -> PayCharge | None:
        return customer.charges.filter(processor_id=processor_id).first()

    @classmethod
    def _write(
        cls,
        customer: PayCustomer,
        processor_id: str,
        attributes: ChargeAttributes,
    ) -> PayCharge:
        """
        Upsert the charge row.

        An existing row is updated under a row lock held only for the
        update. A missing row is inserted in a savepoint so a losing insert
        leaves the caller's transaction usable.

        Raises:
            ChargeSyncConflictError: The insert hit the unique constraint or
                the row vanished before it could be locked
        """
        logger = cls.get_logger()
        fields = attributes.as_model_fields()
        existing = cls._find_local_charge(customer, processor_id)

        try:
            if existing is not None:
                with lock_for_update(existing) as charge:
                    for name, value in fields.items():
                        setattr(charge, name, value)
                    charge.save()
                action = "updated"
            else:
                with cls.atomic():
                    charge = PayCharge.objects.create(
                        customer=customer,
                        processor_id=processor_id,
                        **fields,
                    )
                action = "created"
        except (IntegrityError, NotFoundError) as e:
            raise ChargeSyncConflictError(
                f"Charge {processor_id} was written concurrently",
                details={"processor_id": processor_id, "customer_id": customer.pk},
            ) from e

        logger.info(
            f"Charge {action}",
            extra={
                "charge_id": charge.pk,
                "processor_id": processor_id,
                "customer_id": customer.pk,
                "amount": charge.amount,
                "amount_refunded": charge.amount_refunded,
            },
        )
        return charge

    # =========================================================================
    # Single-charge operations
    # =========================================================================

    def fetch_remote(self) -> dict[str, Any]:
        """
        Retrieve this charge from Stripe with customer and subscription expanded.

        Raises:
            StripeError: The request failed
        """
        return StripeAdapter.retrieve_charge(
            self.pay_charge.processor_id,
            expand=self.EXPAND,
            stripe_account=self.pay_charge.stripe_account,
        )

    def refund(self, amount: int, **options: Any) -> RefundResult:
        """
        Refund part or all of this charge.

        Options (reason, metadata, refund_application_fee, ...) are passed
        to Stripe with the charge ID and amount. After Stripe accepts the
        refund, amount_refunded is set to the requested amount.

        Args:
            amount: Amount to refund in the smallest currency unit
            **options: Extra Refund.create parameters

        Returns:
            RefundResult from Stripe

        Raises:
            PaymentValidationError: amount is not positive
            StripeError: Stripe rejected or failed the refund
        """
        charge = self.pay_charge

        if amount is None or amount <= 0:
            raise PaymentValidationError(
                "Refund amount must be positive",
                details={"amount": amount, "processor_id": charge.processor_id},
            )

        result = StripeAdapter.create_refund(
            charge.processor_id,
            amount_cents=amount,
            options=options,
            stripe_account=charge.stripe_account,
        )

        charge.amount_refunded = amount
        charge.save(update_fields=["amount_refunded", "updated_at"])

        self.get_logger().info(
            "Charge refunded",
            extra={
                "charge_id": charge.pk,
                "processor_id": charge.processor_id,
                "refund_id": result.id,
                "amount": amount,
            },
        )
        return result


__all__ = ["StripeCharge"]
