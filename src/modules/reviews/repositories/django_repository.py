"""Django ORM implementation of the review order repository.

``save`` publishes the aggregate's pending domain events on the event bus
only after the surrounding transaction commits, so a rolled back use case
never notifies anybody.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import structlog
from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import QuerySet

from modules.reviews.models import ReviewOrder, ReviewStatusHistory
from modules.reviews.repositories.interfaces import IReviewOrderRepository
from shared.domain.bus import IEventBus
from shared.infrastructure.bus import event_bus

logger = structlog.get_logger(__name__)


class ReviewOrderDjangoRepository(IReviewOrderRepository):
    """Concrete review order repository backed by Django ORM."""

    def __init__(self, bus: IEventBus = event_bus) -> None:
        self._bus = bus

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get_by_id(self, id: str) -> Optional[ReviewOrder]:
        try:
            return (
                ReviewOrder.objects.select_related("customer")
                .prefetch_related("status_history")
                .filter(id=id)
                .first()
            )
        except (ValueError, ValidationError):
            return None

    def get_for_customer(self, customer_id: Any, review_id: str) -> Optional[ReviewOrder]:
        try:
            return (
                ReviewOrder.objects.prefetch_related("status_history")
                .filter(id=review_id, customer_id=customer_id)
                .first()
            )
        except (ValueError, ValidationError):
            return None

    def get_for_update(
        self, review_id: str, customer_id: Any = None
    ) -> Optional[ReviewOrder]:
        """Lock the review row (SELECT FOR UPDATE) for the current transaction.

        Returns ``None`` for non-existent, foreign or malformed ids.
        """
        queryset = ReviewOrder.objects.select_for_update().filter(id=review_id)
        if customer_id is not None:
            queryset = queryset.filter(customer_id=customer_id)
        try:
            return queryset.first()
        except (ValueError, ValidationError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> QuerySet:
        queryset = ReviewOrder.objects.select_related("customer")
        if filters:
            queryset = queryset.filter(**filters)
        return queryset

    def list_for_customer(self, customer_id: Any) -> QuerySet:
        return ReviewOrder.objects.filter(customer_id=customer_id).order_by(
            "-submitted_at", "-id"
        )

    def list_all(self) -> QuerySet:
        return ReviewOrder.objects.select_related("customer").order_by(
            "-submitted_at", "-id"
        )

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    @transaction.atomic
    def save(self, entity: ReviewOrder) -> ReviewOrder:
        """Persist the aggregate and schedule its events for after commit."""
        entity.full_clean(exclude=["customer"])
        entity.save()

        events = entity.pull_domain_events()
        if events:
            transaction.on_commit(lambda: self._bus.publish_all(events))

        logger.info(
            "review.saved",
            review_id=str(entity.id),
            status=entity.status,
            event_count=len(events),
        )
        return entity

    def add_history(
        self,
        review_id: Any,
        old_status: Optional[str],
        new_status: str,
        actor_id: Any = None,
        notes: str = "",
    ) -> ReviewStatusHistory:
        history = ReviewStatusHistory.objects.create(
            review_order_id=review_id,
            old_status=old_status,
            new_status=new_status,
            actor_id=actor_id,
            notes=notes or "",
        )
        logger.info(
            "review.history_added",
            review_id=str(review_id),
            old_status=old_status,
            new_status=new_status,
        )
        return history
