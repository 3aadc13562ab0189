"""Review order repository interface.

Customer-scoped reads take both the review id and the customer id, so a
review owned by somebody else is indistinguishable from a missing one.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from django.db.models import QuerySet

    from modules.reviews.models import ReviewOrder, ReviewStatusHistory


class IReviewOrderRepository(IRepository["ReviewOrder"]):
    @abstractmethod
    def get_for_customer(self, customer_id: Any, review_id: str) -> Optional[ReviewOrder]:
        """Return the review only when it belongs to ``customer_id``."""

    @abstractmethod
    def get_for_update(
        self, review_id: str, customer_id: Any = None
    ) -> Optional[ReviewOrder]:
        """Row-locked read, optionally scoped to a customer."""

    @abstractmethod
    def list_for_customer(self, customer_id: Any) -> QuerySet:
        """A customer's reviews, newest submission first."""

    @abstractmethod
    def list_all(self) -> QuerySet:
        """Every review with the submitter joined in."""

    @abstractmethod
    def add_history(
        self,
        review_id: Any,
        old_status: Optional[str],
        new_status: str,
        actor_id: Any = None,
        notes: str = "",
    ) -> ReviewStatusHistory:
        """Append one record to the review's status audit trail."""
