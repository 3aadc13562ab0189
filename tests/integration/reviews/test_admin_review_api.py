"""Integration tests for PATCH /api/v1/admin/review-orders/{id}/.

Covers:
- Scenario: ``approved`` with notes -> ``pending-payment``, reviewed_at set,
  linked cart items approved.
- Scenario: ``rejected`` is terminal for admin decisions.
- Unknown status values are refused with ``invalid_status``.
- Only statuses of the fixed enumeration are ever persisted.
"""

from __future__ import annotations

import pytest

from modules.carts.constants import CartReviewStatus
from modules.reviews.constants import ReviewStatus
from modules.reviews.models import ReviewOrder, ReviewStatusHistory

pytestmark = pytest.mark.integration


def _url(review_id) -> str:
    return f"/api/v1/admin/review-orders/{review_id}/"


class TestAdminDecision:
    def test_approval_becomes_pending_payment(
        self, admin_client, submitted_review, cart_items, admin_user
    ):
        response = admin_client.patch(
            _url(submitted_review["review_id"]),
            {"status": "approved", "admin_notes": "looks good"},
            format="json",
        )

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "pending-payment"
        assert body["admin_notes"] == "looks good"
        assert body["reviewed_at"] is not None

        review = ReviewOrder.objects.get(id=submitted_review["review_id"])
        assert review.status == ReviewStatus.PENDING_PAYMENT
        for item in cart_items:
            item.refresh_from_db()
            assert item.review_status == CartReviewStatus.APPROVED

        history = ReviewStatusHistory.objects.filter(review_order=review).first()
        assert history.old_status == "pending"
        assert history.new_status == "pending-payment"
        assert history.actor_id == admin_user.pk
        assert history.notes == "looks good"

    @pytest.mark.parametrize(
        "value",
        [
            "pending",
            "rejected",
            "needs-changes",
            "pending-payment",
            "approved-processing",
        ],
    )
    def test_direct_statuses_are_stored(self, admin_client, submitted_review, value):
        response = admin_client.patch(
            _url(submitted_review["review_id"]), {"status": value}, format="json"
        )

        assert response.status_code == 200
        assert response.json()["status"] == value
        assert response.json()["reviewed_at"] is not None

    def test_rejection_does_not_approve_cart_items(
        self, admin_client, submitted_review, cart_items
    ):
        admin_client.patch(
            _url(submitted_review["review_id"]), {"status": "rejected"}, format="json"
        )

        for item in cart_items:
            item.refresh_from_db()
            assert item.review_status == CartReviewStatus.SUBMITTED

    def test_rejected_review_refuses_other_decisions(self, admin_client, submitted_review):
        admin_client.patch(
            _url(submitted_review["review_id"]), {"status": "rejected"}, format="json"
        )

        response = admin_client.patch(
            _url(submitted_review["review_id"]), {"status": "approved"}, format="json"
        )

        assert response.status_code == 400
        assert response.json()["errors"][0]["code"] == "invalid_transition"
        review = ReviewOrder.objects.get(id=submitted_review["review_id"])
        assert review.status == ReviewStatus.REJECTED

    def test_rejected_review_accepts_new_notes(self, admin_client, submitted_review):
        admin_client.patch(
            _url(submitted_review["review_id"]), {"status": "rejected"}, format="json"
        )

        response = admin_client.patch(
            _url(submitted_review["review_id"]),
            {"status": "rejected", "admin_notes": "artwork unusable"},
            format="json",
        )

        assert response.status_code == 200
        assert response.json()["admin_notes"] == "artwork unusable"

    def test_decision_without_notes_clears_them(self, admin_client, submitted_review):
        admin_client.patch(
            _url(submitted_review["review_id"]),
            {"status": "needs-changes", "admin_notes": "thread colour?"},
            format="json",
        )

        response = admin_client.patch(
            _url(submitted_review["review_id"]), {"status": "approved"}, format="json"
        )

        assert response.status_code == 200
        assert response.json()["admin_notes"] is None

    def test_needs_changes_can_be_approved_later(self, admin_client, submitted_review):
        admin_client.patch(
            _url(submitted_review["review_id"]), {"status": "needs-changes"}, format="json"
        )
        response = admin_client.patch(
            _url(submitted_review["review_id"]), {"status": "approved"}, format="json"
        )

        assert response.json()["status"] == "pending-payment"


class TestAdminDecisionRejections:
    @pytest.mark.parametrize("value", ["shipped", "APPROVED", "approve", ""])
    def test_invalid_status(self, admin_client, submitted_review, value):
        response = admin_client.patch(
            _url(submitted_review["review_id"]), {"status": value}, format="json"
        )

        assert response.status_code == 400
        review = ReviewOrder.objects.get(id=submitted_review["review_id"])
        assert review.status == ReviewStatus.PENDING

    def test_invalid_status_code(self, admin_client, submitted_review):
        response = admin_client.patch(
            _url(submitted_review["review_id"]), {"status": "shipped"}, format="json"
        )

        error = response.json()["errors"][0]
        assert error["code"] == "invalid_status"
        assert error["attr"] == "status"

    def test_missing_status(self, admin_client, submitted_review):
        response = admin_client.patch(
            _url(submitted_review["review_id"]), {"admin_notes": "x"}, format="json"
        )
        assert response.status_code == 400

    def test_unknown_review(self, admin_client):
        response = admin_client.patch(
            _url("01890a5d-ac96-774b-bcce-b302099a8057"),
            {"status": "approved"},
            format="json",
        )
        assert response.status_code == 404

    def test_customer_cannot_review(self, customer_client, submitted_review):
        response = customer_client.patch(
            _url(submitted_review["review_id"]), {"status": "approved"}, format="json"
        )

        assert response.status_code == 403
        review = ReviewOrder.objects.get(id=submitted_review["review_id"])
        assert review.status == ReviewStatus.PENDING

    def test_persisted_statuses_stay_in_enumeration(self, admin_client, submitted_review):
        for value in ["approved", "needs-changes", "shipped", "pending"]:
            admin_client.patch(
                _url(submitted_review["review_id"]), {"status": value}, format="json"
            )

        statuses = set(ReviewOrder.objects.values_list("status", flat=True))
        statuses |= set(ReviewStatusHistory.objects.values_list("new_status", flat=True))
        assert statuses <= set(ReviewStatus.values)
