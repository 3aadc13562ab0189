"""Review workflow API views.

Customer routes (submission, own review orders, picture confirmation) and
admin routes (all review orders, status decision, picture replies).
Domain exceptions are translated into DRF exceptions carrying a stable
error code; the standardized error handler renders them.
"""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import exceptions, status
from rest_framework.decorators import action
from rest_framework.filters import OrderingFilter
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.throttling import BaseThrottle
from rest_framework.views import APIView
from rest_framework.viewsets import GenericViewSet

from modules.carts.repositories.django_repository import CartDjangoRepository
from modules.core.exceptions import InternalFailure
from modules.core.pagination import StandardResultsSetPagination
from modules.core.permissions import IsAdminRole, IsCustomerRole
from modules.reviews.dtos import (
    CustomerConfirmationDTO,
    PictureReplyDTO,
    SubmitReviewDTO,
    UpdateReviewStatusDTO,
)
from modules.reviews.exceptions import (
    InvalidReviewRequest,
    InvalidReviewStatus,
    InvalidStatusTransition,
    ReviewOrderNotFound,
    ReviewPersistenceError,
)
from modules.reviews.filters import ReviewOrderFilter
from modules.reviews.models import ReviewOrder
from modules.reviews.repositories.django_repository import ReviewOrderDjangoRepository
from modules.reviews.serializers import (
    AdminReviewOrderDetailSerializer,
    AdminReviewOrderSerializer,
    ConfirmPicturesSerializer,
    ReviewOrderDetailSerializer,
    ReviewOrderSerializer,
    SubmitReviewSerializer,
    SubmittedReviewSerializer,
    UpdateReviewStatusSerializer,
    UploadPictureRepliesSerializer,
)
from modules.reviews.services import ReviewOrderService

REVIEW_ERRORS = (
    ReviewOrderNotFound,
    InvalidReviewRequest,
    InvalidReviewStatus,
    InvalidStatusTransition,
    ReviewPersistenceError,
)


def as_api_exception(exc: Exception) -> exceptions.APIException:
    """Map a review domain exception to its HTTP counterpart."""
    if isinstance(exc, ReviewOrderNotFound):
        return exceptions.NotFound("Review order not found.")
    if isinstance(exc, InvalidReviewStatus):
        return exceptions.ValidationError({"status": [str(exc)]}, code="invalid_status")
    if isinstance(exc, InvalidStatusTransition):
        return exceptions.ValidationError(
            {"status": [str(exc)]}, code="invalid_transition"
        )
    if isinstance(exc, InvalidReviewRequest):
        return exceptions.ValidationError(str(exc), code="invalid_request")
    return InternalFailure()


def _review_service() -> ReviewOrderService:
    return ReviewOrderService(
        review_repository=ReviewOrderDjangoRepository(),
        cart_repository=CartDjangoRepository(),
    )


class ScopedThrottleMixin:
    """Picks the throttle scope from the current action."""

    throttle_scopes: dict[str, str] = {}

    def get_throttles(self) -> list[BaseThrottle]:
        self.throttle_scope = self.throttle_scopes.get(getattr(self, "action", None))
        return super().get_throttles()


# ---------------------------------------------------------------------------
# Customer
# ---------------------------------------------------------------------------


class SubmitForReviewView(APIView):
    """POST /api/v1/submit-for-review/"""

    permission_classes = [IsCustomerRole]
    throttle_scope = "review_submission"

    def post(self, request: Request) -> Response:
        serializer = SubmitReviewSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        dto = SubmitReviewDTO(**serializer.validated_data)

        try:
            review = _review_service().submit(request.user.pk, dto)
        except REVIEW_ERRORS as exc:
            raise as_api_exception(exc) from exc

        return Response(
            SubmittedReviewSerializer(review).data, status=status.HTTP_201_CREATED
        )


class ReviewOrderViewSet(ScopedThrottleMixin, GenericViewSet):
    """The calling customer's review orders.

    A review owned by another customer answers 404, never 403.
    """

    permission_classes = [IsCustomerRole]
    queryset = ReviewOrder.objects.none()
    serializer_class = ReviewOrderSerializer
    throttle_scopes = {"list": "review_listing", "retrieve": "review_listing"}

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = _review_service()

    def list(self, request: Request) -> Response:
        """GET /api/v1/review-orders/ (newest first)"""
        queryset = self._service.list_for_customer(request.user.pk)
        paginator = StandardResultsSetPagination()
        page = paginator.paginate_queryset(queryset, request, view=self)
        return paginator.get_paginated_response(
            ReviewOrderSerializer(page, many=True).data
        )

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/review-orders/{pk}/"""
        try:
            review = self._service.get_for_customer(request.user.pk, str(pk))
        except ReviewOrderNotFound as exc:
            raise as_api_exception(exc) from exc
        return Response(ReviewOrderDetailSerializer(review).data)

    @action(detail=True, methods=["post"], url_path="confirm-pictures")
    def confirm_pictures(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/review-orders/{pk}/confirm-pictures/"""
        serializer = ConfirmPicturesSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        entries = serializer.validated_data.get("confirmations")
        confirmations = (
            None
            if entries is None
            else [CustomerConfirmationDTO(**entry) for entry in entries]
        )

        try:
            review = self._service.confirm_picture_replies(
                request.user.pk, str(pk), confirmations
            )
        except REVIEW_ERRORS as exc:
            raise as_api_exception(exc) from exc
        return Response(ReviewOrderSerializer(review).data)


# ---------------------------------------------------------------------------
# Admin
# ---------------------------------------------------------------------------


class AdminReviewOrderViewSet(ScopedThrottleMixin, GenericViewSet):
    """Every review order, with the submitter joined in.  Admin only."""

    permission_classes = [IsAdminRole]
    queryset = ReviewOrder.objects.none()
    serializer_class = AdminReviewOrderSerializer
    filterset_class = ReviewOrderFilter
    filter_backends = [DjangoFilterBackend, OrderingFilter]
    ordering_fields = ["submitted_at", "total", "status"]
    ordering = ["-submitted_at", "-id"]
    throttle_scopes = {"list": "review_listing", "retrieve": "review_listing"}

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = _review_service()

    def get_queryset(self):
        return self._service.list_all()

    def list(self, request: Request) -> Response:
        """GET /api/v1/admin/review-orders/

        Filters: ``status``, ``customer``, ``submitted_after``,
        ``submitted_before``.  Ordering: ``submitted_at``, ``total``,
        ``status``.
        """
        queryset = self.filter_queryset(self.get_queryset())
        paginator = StandardResultsSetPagination()
        page = paginator.paginate_queryset(queryset, request, view=self)
        return paginator.get_paginated_response(
            AdminReviewOrderSerializer(page, many=True).data
        )

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/admin/review-orders/{pk}/"""
        try:
            review = self._service.get(str(pk))
        except ReviewOrderNotFound as exc:
            raise as_api_exception(exc) from exc
        return Response(AdminReviewOrderDetailSerializer(review).data)

    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /api/v1/admin/review-orders/{pk}/

        Body: ``{"status": ..., "admin_notes": ...}``.  ``approved`` is
        stored as ``pending-payment``.
        """
        serializer = UpdateReviewStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        dto = UpdateReviewStatusDTO(**serializer.validated_data)

        try:
            review = self._service.update_status(str(pk), dto, actor_id=request.user.pk)
        except REVIEW_ERRORS as exc:
            raise as_api_exception(exc) from exc
        return Response(AdminReviewOrderSerializer(review).data)

    @action(detail=True, methods=["post"], url_path="picture-reply")
    def picture_reply(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/admin/review-orders/{pk}/picture-reply/"""
        serializer = UploadPictureRepliesSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        replies = [
            PictureReplyDTO(**entry)
            for entry in serializer.validated_data["picture_replies"]
        ]

        try:
            review = self._service.upload_picture_replies(str(pk), replies)
        except REVIEW_ERRORS as exc:
            raise as_api_exception(exc) from exc
        return Response(AdminReviewOrderSerializer(review).data)
