"""
Concurrency control utilities for charge sync.

This module provides two complementary mechanisms:

1. **Row Locks** (lock_for_update)
   - Pessimistic SELECT ... FOR UPDATE on a single row
   - Held only for the surrounding transaction
   - Use for: the write step of an upsert, never across API calls

2. **Conflict Retry** (retry_on_conflict)
   - Re-runs an operation when it loses a write race
   - Bounded attempts with a fixed delay between them
   - Use for: inserts guarded by a unique constraint

Usage:

    from pay.locks import lock_for_update, retry_on_conflict

    # Row lock around an update
    with lock_for_update(charge) as locked:
        locked.amount_refunded = 500
        locked.save()

    # Retry an upsert once on a unique constraint race
    charge = retry_on_conflict(lambda: upsert(...), retries=1, delay=0.1)
"""

from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from typing import TYPE_CHECKING, Callable, TypeVar

from django.db import models, transaction

from core.exceptions import ConflictError, NotFoundError

if TYPE_CHECKING:
    from collections.abc import Generator


logger = logging.getLogger(__name__)

M = TypeVar("M", bound=models.Model)
R = TypeVar("R")


# =============================================================================
# Row Locks
# =============================================================================


@contextmanager
def lock_for_update(instance: M) -> Generator[M, None, None]:
    """
    Lock a record's row for the duration of the block.

    Opens a transaction, re-reads the row with select_for_update and
    yields the fresh, locked instance. The lock is released when the
    block exits and the transaction commits or rolls back.

    Args:
        instance: Saved model instance to lock

    Yields:
        The locked instance, reloaded from the database

    Raises:
        NotFoundError: If the row was deleted since it was read

    Example:
        with lock_for_update(charge) as locked:
            locked.amount = 2000
            locked.save()

    Note:
        Do not make network calls inside the block. Other writers to the
        same row wait for as long as the block runs.
    """
    model_class = type(instance)

    with transaction.atomic():
        locked = model_class.objects.select_for_update().filter(pk=instance.pk).first()

        if locked is None:
            model_name = model_class.__name__
            raise NotFoundError(
                f"{model_name} {instance.pk} not found",
                error_code=f"{model_name.upper()}_NOT_FOUND",
                details={"pk": str(instance.pk)},
            )

        yield locked


# =============================================================================
# Conflict Retry
# =============================================================================


def retry_on_conflict(
    operation: Callable[[], R],
    retries: int,
    delay: float = 0.1,
    conflict_types: tuple[type[Exception], ...] = (ConflictError,),
) -> R:
    """
    Run an operation, re-running it when it raises a conflict.

    The operation is attempted once, then up to ``retries`` more times,
    sleeping ``delay`` seconds between attempts. The last conflict is
    re-raised once attempts are exhausted. Other exceptions propagate
    immediately.

    Args:
        operation: Zero-argument callable to run
        retries: Additional attempts after the first (0 disables retry)
        delay: Seconds to sleep between attempts
        conflict_types: Exception types treated as retryable conflicts

    Returns:
        The operation's return value

    Example:
        charge = retry_on_conflict(
            lambda: cls._sync_once(remote_charge),
            retries=1,
            delay=0.1,
        )
    """
    attempt = 0
    while True:
        try:
            return operation()
        except conflict_types as exc:
            attempt += 1
            if attempt > retries:
                if isinstance(exc, ConflictError):
                    exc.details["attempts"] = attempt
                raise

            logger.warning(
                "Write conflict, retrying",
                extra={
                    "attempt": attempt,
                    "retries": retries,
                    "delay": delay,
                    "error": str(exc),
                },
            )
            time.sleep(delay)


__all__ = [
    "lock_for_update",
    "retry_on_conflict",
]
