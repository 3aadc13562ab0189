"""Cart service layer (Use Cases).

Every operation is scoped to the calling customer: an item id that
belongs to somebody else behaves exactly like an unknown id.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, List, Tuple

import structlog
from django.db import transaction

from modules.carts.constants import MAX_CART_QUANTITY
from modules.carts.exceptions import CartItemNotFound, InvalidCartQuantity

if TYPE_CHECKING:
    from modules.carts.dtos import AddCartItemDTO, SyncCartDTO, UpdateCartItemDTO
    from modules.carts.models import CartItem
    from modules.carts.repositories.interfaces import ICartRepository

logger = structlog.get_logger(__name__)


class CartService:
    """Application service for the customer's cart."""

    def __init__(self, repository: ICartRepository) -> None:
        self._repo = repository

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_items(self, customer_id: Any) -> List[CartItem]:
        return self._repo.list_for_customer(customer_id)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def add_item(self, customer_id: Any, dto: AddCartItemDTO) -> Tuple[CartItem, bool]:
        """Add a line item, merging into an identical unsubmitted one.

        Returns ``(item, created)``.

        Raises:
            InvalidCartQuantity: the merged quantity would exceed the maximum.
        """
        log = logger.bind(customer_id=str(customer_id), product_ref=dto.product_ref)

        existing = self._repo.find_mergeable(
            customer_id, dto.product_ref, dto.customization
        )
        if existing:
            new_quantity = existing.quantity + dto.quantity
            if new_quantity > MAX_CART_QUANTITY:
                raise InvalidCartQuantity(
                    f"Quantity cannot exceed {MAX_CART_QUANTITY} "
                    f"(requested {new_quantity})."
                )
            existing.quantity = new_quantity
            self._repo.save(existing)
            log.info("cart.item_merged", item_id=str(existing.id), quantity=new_quantity)
            return existing, False

        item = self._repo.create(
            {
                "customer_id": customer_id,
                "product_ref": dto.product_ref,
                "quantity": dto.quantity,
                "customization": dto.customization,
            }
        )
        log.info(
            "cart.item_added",
            item_id=str(item.id),
            quantity=item.quantity,
            has_customization=item.customization is not None,
        )
        return item, True

    @transaction.atomic
    def update_item(
        self, customer_id: Any, item_id: str, dto: UpdateCartItemDTO
    ) -> CartItem:
        """Raises:
        CartItemNotFound: no such item for this customer.
        """
        item = self._get_owned(customer_id, item_id)
        item.quantity = dto.quantity
        if dto.customization is not None:
            item.customization = dto.customization
        self._repo.save(item)
        logger.info(
            "cart.item_updated",
            customer_id=str(customer_id),
            item_id=str(item.id),
            quantity=item.quantity,
        )
        return item

    def remove_item(self, customer_id: Any, item_id: str) -> None:
        item = self._get_owned(customer_id, item_id)
        self._repo.delete(item)
        logger.info("cart.item_removed", customer_id=str(customer_id), item_id=item_id)

    def clear(self, customer_id: Any) -> int:
        deleted = self._repo.clear(customer_id)
        logger.info("cart.cleared", customer_id=str(customer_id), deleted=deleted)
        return deleted

    def sync(self, customer_id: Any, dto: SyncCartDTO) -> List[CartItem]:
        """Replace the stored cart with a client-side copy.

        An empty list leaves the stored cart untouched, so a fresh device
        with an empty local cart never wipes the server copy.  Unusable
        entries (no product, quantity out of range) are skipped.
        """
        if not dto.items:
            return []
        usable = [
            {
                "product_ref": entry.product_ref.strip(),
                "quantity": entry.quantity,
                "customization": entry.customization,
            }
            for entry in dto.items
            if entry.is_usable
        ]
        skipped = len(dto.items) - len(usable)
        if skipped:
            logger.warning(
                "cart.sync_entries_skipped",
                customer_id=str(customer_id),
                skipped=skipped,
            )
        return self._repo.replace_all(customer_id, usable)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _get_owned(self, customer_id: Any, item_id: str) -> CartItem:
        item = self._repo.get_for_customer(customer_id, item_id)
        if not item:
            raise CartItemNotFound(f"Cart item {item_id} not found.")
        return item
