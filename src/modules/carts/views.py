"""Cart API views.

Exposes ``CartService`` over HTTP.  Domain exceptions are translated
into DRF exceptions, which the standardized error handler renders.
"""

from __future__ import annotations

from rest_framework import exceptions, status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import ViewSet

from modules.carts.dtos import (
    AddCartItemDTO,
    SyncCartDTO,
    SyncCartItemDTO,
    UpdateCartItemDTO,
)
from modules.carts.exceptions import CartItemNotFound, InvalidCartQuantity
from modules.carts.repositories.django_repository import CartDjangoRepository
from modules.carts.serializers import (
    AddCartItemSerializer,
    CartItemSerializer,
    SyncCartSerializer,
    UpdateCartItemSerializer,
)
from modules.carts.services import CartService
from modules.core.permissions import IsCustomerRole


class CartViewSet(ViewSet):
    """The calling customer's cart.  Every route is customer-only."""

    permission_classes = [IsCustomerRole]

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = CartService(repository=CartDjangoRepository())

    # ------------------------------------------------------------------
    # Collection
    # ------------------------------------------------------------------

    def list(self, request: Request) -> Response:
        """GET /api/v1/cart/"""
        items = self._service.list_items(request.user.pk)
        return Response(CartItemSerializer(items, many=True).data)

    def create(self, request: Request) -> Response:
        """POST /api/v1/cart/

        Returns 201 for a new line item, 200 when merged into an existing one.
        """
        serializer = AddCartItemSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        dto = AddCartItemDTO(**serializer.validated_data)

        try:
            item, created = self._service.add_item(request.user.pk, dto)
        except InvalidCartQuantity as exc:
            raise exceptions.ValidationError(
                {"quantity": [str(exc)]}, code="invalid_quantity"
            ) from exc

        return Response(
            CartItemSerializer(item).data,
            status=status.HTTP_201_CREATED if created else status.HTTP_200_OK,
        )

    def clear(self, request: Request) -> Response:
        """DELETE /api/v1/cart/"""
        deleted = self._service.clear(request.user.pk)
        return Response({"deleted_count": deleted})

    def sync(self, request: Request) -> Response:
        """POST /api/v1/cart/sync/"""
        serializer = SyncCartSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        dto = SyncCartDTO(
            items=[
                SyncCartItemDTO(**entry)
                for entry in serializer.validated_data["items"]
            ]
        )
        items = self._service.sync(request.user.pk, dto)
        return Response(CartItemSerializer(items, many=True).data)

    # ------------------------------------------------------------------
    # Single item
    # ------------------------------------------------------------------

    def update(self, request: Request, pk: str | None = None) -> Response:
        """PUT/PATCH /api/v1/cart/{pk}/"""
        serializer = UpdateCartItemSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        dto = UpdateCartItemDTO(**serializer.validated_data)

        try:
            item = self._service.update_item(request.user.pk, str(pk), dto)
        except CartItemNotFound as exc:
            raise exceptions.NotFound("Cart item not found.") from exc
        return Response(CartItemSerializer(item).data)

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/v1/cart/{pk}/"""
        try:
            self._service.remove_item(request.user.pk, str(pk))
        except CartItemNotFound as exc:
            raise exceptions.NotFound("Cart item not found.") from exc
        return Response(status=status.HTTP_204_NO_CONTENT)
