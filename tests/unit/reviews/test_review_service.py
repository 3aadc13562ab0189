"""Unit tests for ReviewOrderService with mocked repositories.

Covers:
- Submission validation (empty snapshot, missing ids, total invariant).
- Cart bookkeeping failures never fail the submission.
- Admin decisions: approval remap, cart approval and its snapshot fallback.
- Picture confirmation from any status, idempotent on repeat.
"""

from __future__ import annotations

from decimal import Decimal
from unittest.mock import MagicMock

import pytest
from django.db import DatabaseError
from django.utils import timezone

from modules.carts.repositories.interfaces import ICartRepository
from modules.reviews.constants import ReviewStatus
from modules.reviews.dtos import (
    CustomerConfirmationDTO,
    PictureReplyDTO,
    SubmitReviewDTO,
    UpdateReviewStatusDTO,
)
from modules.reviews.exceptions import (
    InvalidReviewRequest,
    InvalidReviewStatus,
    InvalidStatusTransition,
    ReviewOrderNotFound,
    ReviewPersistenceError,
)
from modules.reviews.models import ReviewOrder
from modules.reviews.repositories.interfaces import IReviewOrderRepository
from modules.reviews.services import ReviewOrderService

pytestmark = pytest.mark.unit

CUSTOMER_ID = 11


@pytest.fixture()
def review_repo():
    return MagicMock(spec=IReviewOrderRepository)


@pytest.fixture()
def cart_repo():
    repo = MagicMock(spec=ICartRepository)
    repo.mark_submitted.return_value = 2
    repo.approve_linked.return_value = 2
    return repo


@pytest.fixture()
def service(review_repo, cart_repo):
    return ReviewOrderService(review_repository=review_repo, cart_repository=cart_repo)


@pytest.fixture()
def review(review_repo):
    review = ReviewOrder.open(
        customer_id=CUSTOMER_ID,
        items=[{"id": "item-1"}, {"id": "item-2"}],
        subtotal=Decimal("40.00"),
        shipping=Decimal("5.00"),
        tax=Decimal("3.15"),
        submitted_at=timezone.now(),
    )
    review.clear_domain_events()
    review_repo.get_for_update.return_value = review
    return review


def _submission(**overrides):
    fields = {
        "items": [{"id": "item-1", "quantity": 2}, {"id": "item-2", "quantity": 1}],
        "subtotal": Decimal("40.00"),
        "shipping": Decimal("5.00"),
        "tax": Decimal("3.15"),
        "total": Decimal("48.15"),
    }
    fields.update(overrides)
    return SubmitReviewDTO(**fields)


# ---------------------------------------------------------------------------
# Submission
# ---------------------------------------------------------------------------


class TestSubmit:
    def test_creates_pending_review_and_links_cart_items(
        self, service, review_repo, cart_repo
    ):
        review = service.submit(CUSTOMER_ID, _submission())

        assert review.status == ReviewStatus.PENDING
        assert review.total == Decimal("48.15")
        assert review.item_count == 2
        review_repo.save.assert_called_once_with(review)
        review_repo.add_history.assert_called_once_with(
            review.id, None, ReviewStatus.PENDING, actor_id=CUSTOMER_ID
        )
        cart_repo.mark_submitted.assert_called_once_with(
            CUSTOMER_ID, ["item-1", "item-2"], review.id
        )

    def test_uses_given_submission_time(self, service):
        submitted_at = timezone.now().replace(microsecond=0)
        review = service.submit(CUSTOMER_ID, _submission(submitted_at=submitted_at))
        assert review.submitted_at == submitted_at

    def test_empty_items_are_rejected(self, service, review_repo):
        with pytest.raises(InvalidReviewRequest):
            service.submit(CUSTOMER_ID, _submission(items=[]))
        review_repo.save.assert_not_called()

    def test_item_without_id_is_rejected(self, service, review_repo):
        with pytest.raises(InvalidReviewRequest):
            service.submit(CUSTOMER_ID, _submission(items=[{"quantity": 1}]))
        review_repo.save.assert_not_called()

    def test_total_mismatch_is_rejected(self, service, review_repo):
        with pytest.raises(InvalidReviewRequest):
            service.submit(CUSTOMER_ID, _submission(total=Decimal("50.00")))
        review_repo.save.assert_not_called()

    def test_total_within_tolerance_stores_exact_sum(self, service):
        review = service.submit(CUSTOMER_ID, _submission(total=Decimal("48.16")))
        assert review.total == Decimal("48.15")

    def test_negative_amount_is_rejected(self, service):
        with pytest.raises(InvalidReviewRequest):
            service.submit(
                CUSTOMER_ID,
                _submission(subtotal=Decimal("-1.00"), total=Decimal("7.15")),
            )

    def test_sum_beyond_column_range_is_rejected(self, service, review_repo):
        with pytest.raises(InvalidReviewRequest):
            service.submit(
                CUSTOMER_ID,
                _submission(
                    subtotal=Decimal("99999999.99"),
                    shipping=Decimal("0.01"),
                    tax=Decimal("0.00"),
                    total=Decimal("99999999.99"),
                ),
            )
        review_repo.save.assert_not_called()

    def test_cart_sync_failure_does_not_fail_submission(
        self, service, review_repo, cart_repo, caplog
    ):
        cart_repo.mark_submitted.side_effect = DatabaseError("cart table locked")

        review = service.submit(CUSTOMER_ID, _submission())

        assert review.status == ReviewStatus.PENDING
        review_repo.save.assert_called_once_with(review)
        assert any("cart.sync_failed" in r.getMessage() for r in caplog.records)

    def test_store_failure_is_reported(self, service, review_repo):
        review_repo.save.side_effect = DatabaseError("connection lost")

        with pytest.raises(ReviewPersistenceError):
            service.submit(CUSTOMER_ID, _submission())


# ---------------------------------------------------------------------------
# Admin decision
# ---------------------------------------------------------------------------


class TestUpdateStatus:
    def test_approved_is_persisted_as_pending_payment(
        self, service, review, review_repo, cart_repo
    ):
        result = service.update_status(
            str(review.id),
            UpdateReviewStatusDTO(status="approved", admin_notes="looks good"),
            actor_id=1,
        )

        assert result.status == ReviewStatus.PENDING_PAYMENT
        assert result.reviewed_at is not None
        assert result.admin_notes == "looks good"
        review_repo.save.assert_called_once_with(review)
        review_repo.add_history.assert_called_once_with(
            review.id,
            ReviewStatus.PENDING,
            ReviewStatus.PENDING_PAYMENT,
            actor_id=1,
            notes="looks good",
        )
        cart_repo.approve_linked.assert_called_once_with(review.id)
        cart_repo.approve_by_ids.assert_not_called()

    def test_approval_falls_back_to_snapshot_ids(self, service, review, cart_repo):
        cart_repo.approve_linked.return_value = 0

        service.update_status(str(review.id), UpdateReviewStatusDTO(status="approved"))

        cart_repo.approve_by_ids.assert_called_once_with(
            CUSTOMER_ID, ["item-1", "item-2"]
        )

    def test_fallback_when_back_reference_cannot_be_queried(
        self, service, review, cart_repo
    ):
        cart_repo.approve_linked.side_effect = DatabaseError("no such column")

        result = service.update_status(
            str(review.id), UpdateReviewStatusDTO(status="approved")
        )

        assert result.status == ReviewStatus.PENDING_PAYMENT
        cart_repo.approve_by_ids.assert_called_once()

    def test_rejection_does_not_touch_cart(self, service, review, cart_repo):
        result = service.update_status(
            str(review.id), UpdateReviewStatusDTO(status="rejected")
        )

        assert result.status == ReviewStatus.REJECTED
        assert result.reviewed_at is not None
        cart_repo.approve_linked.assert_not_called()

    def test_invalid_status_is_rejected_before_any_read(self, service, review_repo):
        with pytest.raises(InvalidReviewStatus):
            service.update_status("any", UpdateReviewStatusDTO(status="shipped"))
        review_repo.get_for_update.assert_not_called()

    def test_terminal_review_refuses_change(self, service, review, review_repo):
        review.status = ReviewStatus.REJECTED

        with pytest.raises(InvalidStatusTransition):
            service.update_status(
                str(review.id), UpdateReviewStatusDTO(status="approved")
            )
        review_repo.save.assert_not_called()

    def test_unknown_review(self, service, review_repo):
        review_repo.get_for_update.return_value = None

        with pytest.raises(ReviewOrderNotFound):
            service.update_status("missing", UpdateReviewStatusDTO(status="pending"))


# ---------------------------------------------------------------------------
# Picture workflow
# ---------------------------------------------------------------------------


class TestPictureReplies:
    def test_upload_replaces_replies(self, service, review, review_repo):
        replies = [PictureReplyDTO(item_id=17, image="https://img/17.jpg")]

        result = service.upload_picture_replies(str(review.id), replies)

        assert result.picture_replies[0]["item_id"] == "17"
        assert result.picture_replies[0]["notes"] == ""
        assert "uploaded_at" in result.picture_replies[0]
        assert result.picture_reply_uploaded_at is not None
        review_repo.get_for_update.assert_called_once_with(
            str(review.id), customer_id=None
        )

    def test_confirm_moves_to_pending_payment(
        self, service, review, review_repo, cart_repo
    ):
        confirmations = [
            CustomerConfirmationDTO(item_id="item-1", confirmed=True),
            CustomerConfirmationDTO(item_id="item-2", confirmed=False, notes="too dark"),
        ]

        result = service.confirm_picture_replies(
            CUSTOMER_ID, str(review.id), confirmations
        )

        assert result.status == ReviewStatus.PENDING_PAYMENT
        assert result.customer_confirmed_at is not None
        assert result.reviewed_at is not None
        assert len(result.customer_confirmations) == 2
        review_repo.get_for_update.assert_called_once_with(
            str(review.id), customer_id=CUSTOMER_ID
        )
        cart_repo.approve_linked.assert_called_once_with(review.id)

    def test_confirm_overrides_rejected_review(self, service, review):
        review.status = ReviewStatus.REJECTED

        result = service.confirm_picture_replies(
            CUSTOMER_ID,
            str(review.id),
            [CustomerConfirmationDTO(item_id="item-1", confirmed=True)],
        )

        assert result.status == ReviewStatus.PENDING_PAYMENT

    def test_confirm_twice_stays_pending_payment(self, service, review):
        confirmations = [CustomerConfirmationDTO(item_id="item-1", confirmed=True)]

        service.confirm_picture_replies(CUSTOMER_ID, str(review.id), confirmations)
        result = service.confirm_picture_replies(
            CUSTOMER_ID, str(review.id), confirmations
        )

        assert result.status == ReviewStatus.PENDING_PAYMENT

    def test_confirm_with_no_entries_still_confirms(self, service, review, review_repo):
        result = service.confirm_picture_replies(CUSTOMER_ID, str(review.id), [])

        assert result.status == ReviewStatus.PENDING_PAYMENT
        assert result.customer_confirmations == []
        assert result.customer_confirmed_at is not None
        review_repo.save.assert_called_once_with(review)

    def test_confirm_foreign_review_is_not_found(self, service, review_repo):
        review_repo.get_for_update.return_value = None

        with pytest.raises(ReviewOrderNotFound):
            service.confirm_picture_replies(
                CUSTOMER_ID,
                "foreign",
                [CustomerConfirmationDTO(item_id="x", confirmed=True)],
            )
