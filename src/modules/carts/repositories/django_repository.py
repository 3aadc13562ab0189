"""Django ORM implementation of the cart repository."""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional
from uuid import UUID

import structlog
from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import QuerySet
from django.utils import timezone

from modules.carts.constants import CartReviewStatus
from modules.carts.models import CartItem
from modules.carts.repositories.interfaces import ICartRepository

logger = structlog.get_logger(__name__)


def _as_uuids(values: Iterable[Any]) -> List[UUID]:
    """Keep only values that parse as UUIDs.

    Snapshot line items come from the client and may carry identifiers that
    never were cart rows (e.g. local-only items); those cannot match.
    """
    parsed = []
    for value in values:
        if value is None:
            continue
        try:
            parsed.append(value if isinstance(value, UUID) else UUID(str(value)))
        except (TypeError, ValueError):
            continue
    return parsed


class CartDjangoRepository(ICartRepository):
    """Concrete cart repository backed by Django ORM."""

    # ------------------------------------------------------------------
    # IRepository contract
    # ------------------------------------------------------------------

    def get_by_id(self, id: str) -> Optional[CartItem]:
        try:
            return CartItem.objects.filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> QuerySet:
        queryset = CartItem.objects.all()
        if filters:
            queryset = queryset.filter(**filters)
        return queryset

    def save(self, entity: CartItem) -> CartItem:
        entity.full_clean(exclude=["customer", "review_order"])
        entity.save()
        return entity

    # ------------------------------------------------------------------
    # Customer-scoped CRUD
    # ------------------------------------------------------------------

    def create(self, data: Dict[str, Any]) -> CartItem:
        item = CartItem(
            customer_id=data["customer_id"],
            product_ref=data["product_ref"],
            quantity=data.get("quantity", 1),
            customization=data.get("customization"),
        )
        return self.save(item)

    def get_for_customer(self, customer_id: Any, item_id: str) -> Optional[CartItem]:
        try:
            return CartItem.objects.filter(id=item_id, customer_id=customer_id).first()
        except (ValueError, ValidationError):
            return None

    def list_for_customer(self, customer_id: Any) -> List[CartItem]:
        return list(CartItem.objects.filter(customer_id=customer_id))

    def find_mergeable(
        self, customer_id: Any, product_ref: str, customization: Any
    ) -> Optional[CartItem]:
        # JSON equality is compared in Python: key order and backend JSON
        # normalisation make a database-side exact match unreliable.
        candidates = CartItem.objects.filter(
            customer_id=customer_id,
            product_ref=product_ref,
            review_order__isnull=True,
        )
        for candidate in candidates:
            if candidate.customization == customization:
                return candidate
        return None

    def delete(self, entity: CartItem) -> None:
        entity.delete()

    def clear(self, customer_id: Any) -> int:
        deleted, _ = CartItem.objects.filter(customer_id=customer_id).delete()
        return deleted

    @transaction.atomic
    def replace_all(
        self, customer_id: Any, items: Iterable[Dict[str, Any]]
    ) -> List[CartItem]:
        CartItem.objects.filter(customer_id=customer_id).delete()
        created = [self.create({"customer_id": customer_id, **item}) for item in items]
        logger.info(
            "cart.replaced", customer_id=str(customer_id), item_count=len(created)
        )
        return created

    # ------------------------------------------------------------------
    # Review workflow bookkeeping
    # ------------------------------------------------------------------

    def mark_submitted(
        self, customer_id: Any, item_ids: Iterable[Any], review_id: UUID
    ) -> int:
        ids = _as_uuids(item_ids)
        if not ids:
            return 0
        return CartItem.objects.filter(
            id__in=ids,
            customer_id=customer_id,
            review_order__isnull=True,
        ).update(
            review_status=CartReviewStatus.SUBMITTED,
            review_order_id=review_id,
            updated_at=timezone.now(),
        )

    def approve_linked(self, review_id: UUID) -> int:
        return CartItem.objects.filter(review_order_id=review_id).update(
            review_status=CartReviewStatus.APPROVED, updated_at=timezone.now()
        )

    def approve_by_ids(self, customer_id: Any, item_ids: Iterable[Any]) -> int:
        ids = _as_uuids(item_ids)
        if not ids:
            return 0
        return CartItem.objects.filter(id__in=ids, customer_id=customer_id).update(
            review_status=CartReviewStatus.APPROVED, updated_at=timezone.now()
        )
