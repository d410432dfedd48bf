"""
Base service layer patterns for business logic encapsulation.

Services encapsulate business logic separate from models and from whatever
triggers them (webhooks, scheduled jobs, management commands). Models hold
data; services hold the workflow that reads and writes it.

Usage:
    from core.services import BaseService

    class ChargeService(BaseService):
        @classmethod
        def mark_refunded(cls, charge, amount: int) -> None:
            with cls.atomic():
                charge.amount_refunded = amount
                charge.save(update_fields=["amount_refunded", "updated_at"])

            cls.get_logger().info(
                "Marked charge refunded",
                extra={"charge_id": charge.pk, "amount": amount},
            )

Related:
    - core.exceptions: For failures raised out of services
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING

from django.db import transaction

if TYPE_CHECKING:
    from collections.abc import Generator


class BaseService:
    """
    Base class for service layer classes.

    Provides common utilities for services:
    - Logging setup per service
    - Database transaction management

    Design Notes:
        - Use @staticmethod or @classmethod for stateless operations
        - Raise domain exceptions (core.exceptions) for failures
    """

    @classmethod
    def get_logger(cls) -> logging.Logger:
        """
        Get logger for this service.

        Returns a logger named after the service class for
        easy filtering in logs.
        """
        return logging.getLogger(f"{cls.__module__}.{cls.__name__}")

    @classmethod
    @contextmanager
    def atomic(cls) -> Generator[None, None, None]:
        """
        Execute operations in a database transaction.

        Nested use creates a savepoint, so a failure inside the block
        rolls back only the block and leaves the outer transaction usable.

        Example:
            with cls.atomic():
                charge = Charge.objects.create(...)
        """
        with transaction.atomic():
            yield
