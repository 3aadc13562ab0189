"""Review workflow URL configuration."""

from __future__ import annotations

from django.urls import path
from rest_framework.routers import DefaultRouter

from modules.reviews.views import (
    AdminReviewOrderViewSet,
    ReviewOrderViewSet,
    SubmitForReviewView,
)

router = DefaultRouter(trailing_slash=True)
router.register("review-orders", ReviewOrderViewSet, basename="review-order")
router.register(
    "admin/review-orders", AdminReviewOrderViewSet, basename="admin-review-order"
)

urlpatterns = [
    path("submit-for-review/", SubmitForReviewView.as_view(), name="submit-for-review"),
    *router.urls,
]
