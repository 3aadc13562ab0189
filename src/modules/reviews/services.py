"""Review order service layer (Use Cases).

Covers the whole order review workflow: cart submission, the admin
decision, picture replies and the customer confirmation.  Every command
runs in one transaction; domain events (and with them the real-time
notifications) are only published once it commits.

Cart bookkeeping is secondary to the review itself: failing to mark or
approve cart items is logged and never fails the request.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, List, Optional

import structlog
from django.db import DatabaseError, transaction
from django.utils import timezone

from modules.reviews.constants import MAX_AMOUNT, MONEY_QUANTUM, TOTAL_TOLERANCE
from modules.reviews.exceptions import (
    InvalidReviewRequest,
    ReviewOrderNotFound,
    ReviewPersistenceError,
)
from modules.reviews.models import ReviewOrder
from modules.reviews.state_machine import ReviewAction, Transition, transition

if TYPE_CHECKING:
    from django.db.models import QuerySet

    from modules.carts.repositories.interfaces import ICartRepository
    from modules.reviews.dtos import (
        CustomerConfirmationDTO,
        PictureReplyDTO,
        SubmitReviewDTO,
        UpdateReviewStatusDTO,
    )
    from modules.reviews.repositories.interfaces import IReviewOrderRepository

logger = structlog.get_logger(__name__)


class ReviewOrderService:
    """Application service for review order use cases.

    Receives repositories via constructor injection (DIP).
    """

    def __init__(
        self,
        review_repository: IReviewOrderRepository,
        cart_repository: ICartRepository,
    ) -> None:
        self._review_repo = review_repository
        self._cart_repo = cart_repository

    # ------------------------------------------------------------------
    # Submission
    # ------------------------------------------------------------------

    @transaction.atomic
    def submit(self, customer_id: Any, dto: SubmitReviewDTO) -> ReviewOrder:
        """Create a ``pending`` review order from a cart snapshot.

        The contributing cart items are linked to the new review in a
        savepoint; if that fails the review is still created.

        Raises:
            InvalidReviewRequest: empty snapshot, item without ``id``, a
                total that is not ``subtotal + shipping + tax``, or a sum too
                large to store.
            ReviewPersistenceError: the review could not be stored.
        """
        log = logger.bind(customer_id=str(customer_id))
        self._check_snapshot(dto.items)
        subtotal, shipping, tax = (
            amount.quantize(MONEY_QUANTUM)
            for amount in (dto.subtotal, dto.shipping, dto.tax)
        )
        if min(subtotal, shipping, tax) < 0:
            raise InvalidReviewRequest("Amounts cannot be negative.")
        if abs(dto.total - (subtotal + shipping + tax)) > TOTAL_TOLERANCE:
            raise InvalidReviewRequest(
                "Total must equal subtotal + shipping + tax "
                f"({subtotal + shipping + tax})."
            )
        if subtotal + shipping + tax > MAX_AMOUNT:
            raise InvalidReviewRequest(f"Total cannot exceed {MAX_AMOUNT}.")

        review = ReviewOrder.open(
            customer_id=customer_id,
            items=dto.items,
            subtotal=subtotal,
            shipping=shipping,
            tax=tax,
            submitted_at=dto.submitted_at or timezone.now(),
        )
        try:
            self._review_repo.save(review)
            self._review_repo.add_history(
                review.id, None, review.status, actor_id=customer_id
            )
        except DatabaseError as exc:
            log.error("review.submission_failed", exc_info=True)
            raise ReviewPersistenceError("Could not store the review order.") from exc

        linked = self._link_cart_items(customer_id, review)
        log.info(
            "review.submitted",
            review_id=str(review.id),
            item_count=review.item_count,
            total=str(review.total),
            linked_cart_items=linked,
        )
        return review

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_for_customer(self, customer_id: Any) -> QuerySet:
        return self._review_repo.list_for_customer(customer_id)

    def get_for_customer(self, customer_id: Any, review_id: str) -> ReviewOrder:
        review = self._review_repo.get_for_customer(customer_id, review_id)
        if not review:
            raise ReviewOrderNotFound(f"Review order {review_id} not found.")
        return review

    def list_all(self) -> QuerySet:
        return self._review_repo.list_all()

    def get(self, review_id: str) -> ReviewOrder:
        review = self._review_repo.get_by_id(review_id)
        if not review:
            raise ReviewOrderNotFound(f"Review order {review_id} not found.")
        return review

    # ------------------------------------------------------------------
    # Admin review
    # ------------------------------------------------------------------

    @transaction.atomic
    def update_status(
        self, review_id: str, dto: UpdateReviewStatusDTO, actor_id: Any = None
    ) -> ReviewOrder:
        """Apply an admin decision.

        ``approved`` is stored as ``pending-payment`` and approves the
        linked cart items.

        Raises:
            InvalidReviewStatus: ``dto.status`` is not an admin review value.
            ReviewOrderNotFound: no such review.
            InvalidStatusTransition: the review is in a terminal state.
        """
        action = ReviewAction.from_admin_status(dto.status)
        review = self._locked(review_id)
        step = transition(review.status, action)

        review.apply_transition(step, timezone.now(), admin_notes=dto.admin_notes)
        self._review_repo.save(review)
        self._record(review, step, actor_id, notes=dto.admin_notes)
        if step.approves_cart_items:
            self._approve_cart_items(review)

        logger.info(
            "review.status_updated",
            review_id=str(review.id),
            requested=dto.status,
            old_status=step.source,
            new_status=step.target,
        )
        return review

    # ------------------------------------------------------------------
    # Picture replies
    # ------------------------------------------------------------------

    @transaction.atomic
    def upload_picture_replies(
        self, review_id: str, replies: List[PictureReplyDTO]
    ) -> ReviewOrder:
        """Replace the picture replies of a review (any status).

        Raises:
            ReviewOrderNotFound: no such review.
        """
        review = self._locked(review_id)
        review.replace_picture_replies(
            [reply.model_dump() for reply in replies], timezone.now()
        )
        self._review_repo.save(review)
        logger.info(
            "review.picture_replies_uploaded",
            review_id=str(review.id),
            reply_count=len(replies),
        )
        return review

    @transaction.atomic
    def confirm_picture_replies(
        self,
        customer_id: Any,
        review_id: str,
        confirmations: Optional[List[CustomerConfirmationDTO]],
    ) -> ReviewOrder:
        """Record the customer's confirmations and move to ``pending-payment``.

        The status is advanced whatever the individual ``confirmed`` flags
        say (an empty list included), and from any current status.  Calling
        it again is harmless.

        Raises:
            InvalidReviewRequest: ``confirmations`` is missing.
            ReviewOrderNotFound: no such review for this customer.
        """
        if confirmations is None:
            raise InvalidReviewRequest("Confirmations are required.")
        review = self._locked(review_id, customer_id=customer_id)
        step = transition(review.status, ReviewAction.CONFIRM_PICTURES)

        now = timezone.now()
        review.apply_transition(step, now)
        review.replace_confirmations(
            [confirmation.model_dump() for confirmation in confirmations], now
        )
        self._review_repo.save(review)
        self._record(review, step, customer_id, notes="Picture replies confirmed")
        self._approve_cart_items(review)

        logger.info(
            "review.pictures_confirmed",
            review_id=str(review.id),
            confirmation_count=len(confirmations),
            rejected_count=sum(1 for c in confirmations if not c.confirmed),
            old_status=step.source,
        )
        return review

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _check_snapshot(items: List[Any]) -> None:
        if not items:
            raise InvalidReviewRequest("Items are required.")
        for position, item in enumerate(items):
            if not isinstance(item, dict) or item.get("id") in (None, ""):
                raise InvalidReviewRequest(f"Item {position} has no id.")

    def _locked(self, review_id: str, customer_id: Any = None) -> ReviewOrder:
        review = self._review_repo.get_for_update(review_id, customer_id=customer_id)
        if not review:
            raise ReviewOrderNotFound(f"Review order {review_id} not found.")
        return review

    def _record(
        self,
        review: ReviewOrder,
        step: Transition,
        actor_id: Any,
        notes: Optional[str] = None,
    ) -> None:
        if not step.changes_status and not notes:
            return
        self._review_repo.add_history(
            review.id, step.source, step.target, actor_id=actor_id, notes=notes or ""
        )

    def _link_cart_items(self, customer_id: Any, review: ReviewOrder) -> int:
        try:
            with transaction.atomic():
                return self._cart_repo.mark_submitted(
                    customer_id, review.item_ids, review.id
                )
        except DatabaseError:
            logger.warning(
                "cart.sync_failed",
                review_id=str(review.id),
                customer_id=str(customer_id),
                exc_info=True,
            )
            return 0

    def _approve_cart_items(self, review: ReviewOrder) -> int:
        """Approve the review's cart items.

        Items linked through the back-reference are preferred; when none are
        (or the link cannot be queried) the snapshot ids are used instead.
        """
        log = logger.bind(review_id=str(review.id))
        try:
            with transaction.atomic():
                approved = self._cart_repo.approve_linked(review.id)
        except DatabaseError:
            log.warning("cart.approve_linked_failed", exc_info=True)
            approved = 0

        if not approved:
            try:
                with transaction.atomic():
                    approved = self._cart_repo.approve_by_ids(
                        review.customer_id, review.item_ids
                    )
            except DatabaseError:
                log.warning("cart.approve_by_ids_failed", exc_info=True)
                return 0
            log.info("cart.items_approved_by_snapshot", approved=approved)
            return approved

        log.info("cart.items_approved", approved=approved)
        return approved
