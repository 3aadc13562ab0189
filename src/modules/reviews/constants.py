"""Review order domain constants.

``ReviewStatus`` lists the only values ever persisted.  ``approved`` is an
admin *outcome*, not a stored status: it is accepted on the admin review
route and rewritten to ``pending-payment`` by the state machine.
"""

from decimal import Decimal

from django.db import models


class ReviewStatus(models.TextChoices):
    PENDING = "pending", "Pending review"
    REJECTED = "rejected", "Rejected"
    NEEDS_CHANGES = "needs-changes", "Needs changes"
    PENDING_PAYMENT = "pending-payment", "Pending payment"
    APPROVED_PROCESSING = "approved-processing", "Approved, processing"


APPROVED_OUTCOME = "approved"

# Values accepted by the admin review route, in the order they are documented.
ADMIN_REVIEW_STATUSES: tuple[str, ...] = (
    ReviewStatus.PENDING,
    APPROVED_OUTCOME,
    ReviewStatus.REJECTED,
    ReviewStatus.NEEDS_CHANGES,
    ReviewStatus.PENDING_PAYMENT,
    ReviewStatus.APPROVED_PROCESSING,
)

# No admin action moves an order out of these; fulfillment or nobody owns it.
TERMINAL_STATES: frozenset[str] = frozenset(
    {ReviewStatus.REJECTED, ReviewStatus.APPROVED_PROCESSING}
)

TOTAL_TOLERANCE = Decimal("0.01")
MONEY_QUANTUM = Decimal("0.01")
# Largest value the DECIMAL(10, 2) money columns hold.
MAX_AMOUNT = Decimal("99999999.99")
