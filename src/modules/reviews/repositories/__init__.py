"""Review order repositories package."""

from modules.reviews.repositories.django_repository import ReviewOrderDjangoRepository
from modules.reviews.repositories.interfaces import IReviewOrderRepository

__all__ = ["IReviewOrderRepository", "ReviewOrderDjangoRepository"]
