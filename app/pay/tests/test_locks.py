"""
Tests for concurrency control utilities.

Tests cover:
- lock_for_update: reloads and yields the locked row, fails on deleted rows
- retry_on_conflict: retries conflicts with a delay, stops at the bound
"""

from unittest.mock import MagicMock, call, patch

import pytest

from core.exceptions import ConflictError, NotFoundError
from pay.exceptions import ChargeSyncConflictError
from pay.locks import lock_for_update, retry_on_conflict
from pay.models import PayCharge
from pay.tests.factories import PayChargeFactory


# =============================================================================
# lock_for_update Tests
# =============================================================================


@pytest.mark.django_db
class TestLockForUpdate:
    """Tests for lock_for_update."""

    def test_yields_fresh_instance(self):
        """Should yield the row as currently stored, not the stale instance."""
        charge = PayChargeFactory(amount_refunded=0)
        PayCharge.objects.filter(pk=charge.pk).update(amount_refunded=700)

        with lock_for_update(charge) as locked:
            assert locked.pk == charge.pk
            assert locked.amount_refunded == 700

    def test_changes_saved_in_block_persist(self):
        """Should commit saves made inside the block."""
        charge = PayChargeFactory(amount=2000)

        with lock_for_update(charge) as locked:
            locked.amount = 2500
            locked.save()

        charge.refresh_from_db()
        assert charge.amount == 2500

    def test_deleted_row_raises_not_found(self):
        """Should raise NotFoundError when the row no longer exists."""
        charge = PayChargeFactory()
        PayCharge.objects.filter(pk=charge.pk).delete()

        with pytest.raises(NotFoundError) as exc_info:
            with lock_for_update(charge):
                pass

        assert exc_info.value.error_code == "PAYCHARGE_NOT_FOUND"


# =============================================================================
# retry_on_conflict Tests
# =============================================================================


class TestRetryOnConflict:
    """Tests for retry_on_conflict."""

    @pytest.fixture(autouse=True)
    def mock_sleep(self):
        with patch("pay.locks.time.sleep") as mock:
            yield mock

    def test_returns_result_without_retry(self, mock_sleep):
        """Should return immediately when the operation succeeds."""
        operation = MagicMock(return_value="ok")

        assert retry_on_conflict(operation, retries=1) == "ok"
        operation.assert_called_once()
        mock_sleep.assert_not_called()

    def test_retries_after_conflict(self, mock_sleep):
        """Should sleep then re-run after a conflict."""
        operation = MagicMock(side_effect=[ConflictError("lost race"), "ok"])

        result = retry_on_conflict(operation, retries=1, delay=0.1)

        assert result == "ok"
        assert operation.call_count == 2
        mock_sleep.assert_called_once_with(0.1)

    def test_reraises_after_retries_exhausted(self, mock_sleep):
        """Should re-raise the last conflict once retries run out."""
        operation = MagicMock(side_effect=ChargeSyncConflictError("lost race"))

        with pytest.raises(ChargeSyncConflictError) as exc_info:
            retry_on_conflict(operation, retries=2, delay=0.5)

        assert operation.call_count == 3
        assert mock_sleep.call_args_list == [call(0.5), call(0.5)]
        assert exc_info.value.details["attempts"] == 3

    def test_zero_retries_runs_once(self, mock_sleep):
        """Should not retry at all when retries is 0."""
        operation = MagicMock(side_effect=ConflictError("lost race"))

        with pytest.raises(ConflictError):
            retry_on_conflict(operation, retries=0)

        operation.assert_called_once()
        mock_sleep.assert_not_called()

    def test_other_errors_propagate_immediately(self, mock_sleep):
        """Should not retry errors that are not conflicts."""
        operation = MagicMock(side_effect=ValueError("bad input"))

        with pytest.raises(ValueError):
            retry_on_conflict(operation, retries=3)

        operation.assert_called_once()
        mock_sleep.assert_not_called()

    def test_custom_conflict_types(self, mock_sleep):
        """Should retry the exception types it is given."""
        operation = MagicMock(side_effect=[KeyError("busy"), "ok"])

        result = retry_on_conflict(operation, retries=1, conflict_types=(KeyError,))

        assert result == "ok"
