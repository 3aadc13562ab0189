"""ReviewOrder and ReviewStatusHistory models.

A ``ReviewOrder`` is created once per cart submission and never
re-created.  ``items`` is a denormalized copy of the submitted line items;
later cart edits never reach it.  Only the status, the admin notes, the
picture reply / confirmation lists and their timestamps change afterwards.

Status changes go through ``apply_transition`` with a ``Transition``
resolved by ``modules.reviews.state_machine``; nothing assigns ``status``
directly.
"""

from __future__ import annotations

import copy
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models

from modules.core.models import BaseModel
from modules.reviews.constants import TOTAL_TOLERANCE, ReviewStatus
from modules.reviews.events import (
    PictureRepliesConfirmed,
    PictureRepliesUploaded,
    ReviewStatusChanged,
    ReviewSubmitted,
)
from modules.reviews.state_machine import Transition
from shared.domain.events import DomainEventMixin


class ReviewOrder(DomainEventMixin, BaseModel):
    """Review aggregate root: one submitted cart under admin review."""

    customer: models.ForeignKey = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="review_orders",
    )
    items: models.JSONField = models.JSONField(default=list)
    subtotal: models.DecimalField = models.DecimalField(max_digits=10, decimal_places=2)
    shipping: models.DecimalField = models.DecimalField(max_digits=10, decimal_places=2)
    tax: models.DecimalField = models.DecimalField(max_digits=10, decimal_places=2)
    total: models.DecimalField = models.DecimalField(max_digits=10, decimal_places=2)
    status: models.CharField = models.CharField(
        max_length=32,
        choices=ReviewStatus.choices,
        default=ReviewStatus.PENDING,
    )
    submitted_at: models.DateTimeField = models.DateTimeField()
    reviewed_at: models.DateTimeField = models.DateTimeField(null=True, blank=True)
    admin_notes: models.TextField = models.TextField(null=True, blank=True)  # noqa: DJ01
    picture_replies: models.JSONField = models.JSONField(null=True, blank=True)
    customer_confirmations: models.JSONField = models.JSONField(null=True, blank=True)
    picture_reply_uploaded_at: models.DateTimeField = models.DateTimeField(
        null=True, blank=True
    )
    customer_confirmed_at: models.DateTimeField = models.DateTimeField(
        null=True, blank=True
    )

    class Meta:
        db_table = "review_orders"
        ordering = ["-submitted_at"]
        indexes = [
            models.Index(
                fields=["customer", "-submitted_at"], name="review_customer_idx"
            ),
            models.Index(fields=["status"], name="review_status_idx"),
        ]

    # ------------------------------------------------------------------
    # Factory
    # ------------------------------------------------------------------

    @classmethod
    def open(
        cls,
        customer_id: Any,
        items: List[Dict[str, Any]],
        subtotal: Decimal,
        shipping: Decimal,
        tax: Decimal,
        submitted_at: datetime,
    ) -> ReviewOrder:
        """Build an unsaved review order in ``pending`` from a cart submission."""
        order = cls(
            customer_id=customer_id,
            items=copy.deepcopy(items),
            subtotal=subtotal,
            shipping=shipping,
            tax=tax,
            total=subtotal + shipping + tax,
            status=ReviewStatus.PENDING,
            submitted_at=submitted_at,
        )
        order.add_domain_event(
            ReviewSubmitted(
                aggregate_id=order.id,
                customer_id=customer_id,
                item_count=len(order.items),
                total=str(order.total),
            )
        )
        return order

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def item_count(self) -> int:
        return len(self.items or [])

    @property
    def item_ids(self) -> List[Any]:
        """Identifiers of the snapshot line items, in snapshot order."""
        return [
            item["id"]
            for item in self.items or []
            if isinstance(item, dict) and item.get("id") is not None
        ]

    def apply_transition(
        self,
        transition: Transition,
        at: datetime,
        admin_notes: Optional[str] = None,
    ) -> None:
        """Move to ``transition.target`` and stamp the review timestamps.

        An admin decision replaces the notes, so omitted or blank notes clear
        them.  The customer confirmation leaves them untouched.
        """
        self.status = transition.target
        if transition.overwrites_reviewed_at or self.reviewed_at is None:
            self.reviewed_at = at
        if transition.action.is_admin_action:
            self.admin_notes = admin_notes or None
        self.add_domain_event(
            ReviewStatusChanged(
                aggregate_id=self.id,
                customer_id=self.customer_id,
                old_status=transition.source,
                new_status=transition.target,
                admin_notes=self.admin_notes,
            )
        )

    # ------------------------------------------------------------------
    # Picture reply workflow
    # ------------------------------------------------------------------

    def replace_picture_replies(
        self, replies: List[Dict[str, Any]], at: datetime
    ) -> None:
        """Replace the whole reply list; every reply is stamped with ``at``."""
        uploaded_at = at.isoformat()
        self.picture_replies = [
            {**copy.deepcopy(reply), "uploaded_at": uploaded_at} for reply in replies
        ]
        self.picture_reply_uploaded_at = at
        self.add_domain_event(
            PictureRepliesUploaded(
                aggregate_id=self.id,
                customer_id=self.customer_id,
                reply_count=len(self.picture_replies),
            )
        )

    def replace_confirmations(
        self, confirmations: List[Dict[str, Any]], at: datetime
    ) -> None:
        """Replace the whole confirmation list and stamp ``customer_confirmed_at``.

        Call after ``apply_transition`` so the emitted event carries the new
        status.
        """
        self.customer_confirmations = copy.deepcopy(confirmations)
        self.customer_confirmed_at = at
        self.add_domain_event(
            PictureRepliesConfirmed(
                aggregate_id=self.id,
                customer_id=self.customer_id,
                confirmation_count=len(self.customer_confirmations),
                new_status=self.status,
            )
        )

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def clean(self) -> None:
        super().clean()
        if None in (self.subtotal, self.shipping, self.tax, self.total):
            return
        expected = Decimal(self.subtotal) + Decimal(self.shipping) + Decimal(self.tax)
        if abs(Decimal(self.total) - expected) > TOTAL_TOLERANCE:
            raise ValidationError(
                {"total": "Total must equal subtotal + shipping + tax."}
            )

    def __str__(self) -> str:
        return f"ReviewOrder {self.id} ({self.status})"


class ReviewStatusHistory(BaseModel):
    """Append-only audit trail of review order status changes.

    ``actor`` is ``None`` when the change was not attributed to a user.
    """

    review_order: models.ForeignKey = models.ForeignKey(
        "reviews.ReviewOrder",
        on_delete=models.CASCADE,
        related_name="status_history",
    )
    old_status: models.CharField = models.CharField(  # noqa: DJ01
        max_length=32,
        choices=ReviewStatus.choices,
        null=True,
        blank=True,
    )
    new_status: models.CharField = models.CharField(
        max_length=32,
        choices=ReviewStatus.choices,
    )
    actor: models.ForeignKey = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    notes: models.TextField = models.TextField(blank=True, default="")

    class Meta:
        db_table = "review_status_history"
        ordering = ["-created_at"]
        indexes = [
            models.Index(
                fields=["review_order", "-created_at"],
                name="rsh_review_created_idx",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.review_order_id}: {self.old_status} -> {self.new_status}"
