"""Cart repository interface.

Besides the customer-facing CRUD, the contract exposes the bookkeeping
calls the review workflow needs: linking items to a review order at
submission and flipping them to ``approved`` once payment is unlocked.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Optional
from uuid import UUID

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.carts.models import CartItem


class ICartRepository(IRepository["CartItem"]):
    @abstractmethod
    def create(self, data: Dict[str, Any]) -> CartItem:
        """Create a cart item from ``customer_id``, ``product_ref``,
        ``quantity`` and optional ``customization``."""

    @abstractmethod
    def get_for_customer(self, customer_id: Any, item_id: str) -> Optional[CartItem]:
        """Return the item only when it belongs to ``customer_id``."""

    @abstractmethod
    def list_for_customer(self, customer_id: Any) -> List[CartItem]:
        """All items of a customer, oldest first."""

    @abstractmethod
    def find_mergeable(
        self, customer_id: Any, product_ref: str, customization: Any
    ) -> Optional[CartItem]:
        """An unsubmitted item with the same product and customization."""

    @abstractmethod
    def delete(self, entity: CartItem) -> None:
        """Physically remove a cart item."""

    @abstractmethod
    def clear(self, customer_id: Any) -> int:
        """Remove every item of a customer; return the deleted count."""

    @abstractmethod
    def replace_all(
        self, customer_id: Any, items: Iterable[Dict[str, Any]]
    ) -> List[CartItem]:
        """Atomically swap a customer's cart for ``items``."""

    @abstractmethod
    def mark_submitted(
        self, customer_id: Any, item_ids: Iterable[Any], review_id: UUID
    ) -> int:
        """Link not-yet-linked items to a review order; return the row count."""

    @abstractmethod
    def approve_linked(self, review_id: UUID) -> int:
        """Approve every item linked to ``review_id``; return the row count."""

    @abstractmethod
    def approve_by_ids(self, customer_id: Any, item_ids: Iterable[Any]) -> int:
        """Approve the customer's items with the given ids; return the row count."""
