"""Review order state machine.

A single transition function, ``transition(state, action)``, is the
authority for every status change.  Both the admin review route and the
customer picture confirmation call it; neither rewrites statuses inline.

Transition table::

    any non-terminal  --admin pending/rejected/needs-changes/...-->  that status
    any non-terminal  --admin approved-->  pending-payment (+ cart items approved)
    terminal          --admin same status-->  unchanged (annotation only)
    any               --customer confirms pictures-->  pending-payment
                                                       (+ cart items approved)

``rejected`` and ``approved-processing`` are terminal for admin actions.
The customer confirmation is deliberately not guarded by that rule.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from modules.reviews.constants import (
    ADMIN_REVIEW_STATUSES,
    TERMINAL_STATES,
    ReviewStatus,
)
from modules.reviews.exceptions import InvalidReviewStatus, InvalidStatusTransition


class ReviewAction(str, Enum):
    SET_PENDING = "pending"
    APPROVE = "approved"
    REJECT = "rejected"
    REQUEST_CHANGES = "needs-changes"
    REQUIRE_PAYMENT = "pending-payment"
    START_PROCESSING = "approved-processing"
    CONFIRM_PICTURES = "confirm-pictures"

    @classmethod
    def from_admin_status(cls, value: object) -> ReviewAction:
        """Map a status submitted on the admin review route to an action.

        Raises:
            InvalidReviewStatus: ``value`` is not an admin review status.
        """
        if not isinstance(value, str) or value not in ADMIN_REVIEW_STATUSES:
            raise InvalidReviewStatus(
                "Invalid status. Must be one of: " + ", ".join(ADMIN_REVIEW_STATUSES)
            )
        return cls(value)

    @property
    def is_admin_action(self) -> bool:
        return self is not ReviewAction.CONFIRM_PICTURES


_ADMIN_TARGETS: dict[ReviewAction, str] = {
    ReviewAction.SET_PENDING: ReviewStatus.PENDING,
    ReviewAction.APPROVE: ReviewStatus.PENDING_PAYMENT,
    ReviewAction.REJECT: ReviewStatus.REJECTED,
    ReviewAction.REQUEST_CHANGES: ReviewStatus.NEEDS_CHANGES,
    ReviewAction.REQUIRE_PAYMENT: ReviewStatus.PENDING_PAYMENT,
    ReviewAction.START_PROCESSING: ReviewStatus.APPROVED_PROCESSING,
}


@dataclass(frozen=True)
class Transition:
    """Outcome of applying an action to a status, with its side effects."""

    source: str
    target: str
    action: ReviewAction
    approves_cart_items: bool = False
    # Admin actions always re-stamp reviewed_at; the confirmation only
    # fills it when the order was never reviewed.
    overwrites_reviewed_at: bool = True
    confirms_pictures: bool = False

    @property
    def changes_status(self) -> bool:
        return self.source != self.target


def transition(state: str, action: ReviewAction) -> Transition:
    """Resolve ``action`` applied to an order currently in ``state``.

    Raises:
        InvalidReviewStatus: ``state`` is not a persisted status.
        InvalidStatusTransition: an admin action targets a terminal order.
    """
    if state not in ReviewStatus.values:
        raise InvalidReviewStatus(f"Unknown review status {state!r}.")

    if not action.is_admin_action:
        return Transition(
            source=state,
            target=ReviewStatus.PENDING_PAYMENT,
            action=action,
            approves_cart_items=True,
            overwrites_reviewed_at=False,
            confirms_pictures=True,
        )

    target = _ADMIN_TARGETS[action]
    if state in TERMINAL_STATES and target != state:
        raise InvalidStatusTransition(
            f"Cannot move a review order from {state} to {target}."
        )
    return Transition(
        source=state,
        target=target,
        action=action,
        approves_cart_items=action is ReviewAction.APPROVE,
    )
