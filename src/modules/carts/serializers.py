"""Cart DRF serializers for API input/output."""

from __future__ import annotations

from rest_framework import serializers

from modules.carts.constants import MAX_CART_QUANTITY, MIN_CART_QUANTITY
from modules.carts.models import CartItem

# ---------------------------------------------------------------------------
# Input Serializers
# ---------------------------------------------------------------------------


class AddCartItemSerializer(serializers.Serializer):
    product_ref = serializers.CharField(max_length=64)
    quantity = serializers.IntegerField(
        min_value=MIN_CART_QUANTITY, max_value=MAX_CART_QUANTITY, default=1
    )
    customization = serializers.JSONField(required=False, allow_null=True)


class UpdateCartItemSerializer(serializers.Serializer):
    quantity = serializers.IntegerField(
        min_value=MIN_CART_QUANTITY, max_value=MAX_CART_QUANTITY
    )
    customization = serializers.JSONField(required=False, allow_null=True)


class SyncCartEntrySerializer(serializers.Serializer):
    # Lenient on purpose: unusable entries are skipped by the service.
    product_ref = serializers.CharField(
        max_length=64, required=False, allow_blank=True, allow_null=True
    )
    quantity = serializers.IntegerField(required=False, default=0)
    customization = serializers.JSONField(required=False, allow_null=True)


class SyncCartSerializer(serializers.Serializer):
    items = SyncCartEntrySerializer(many=True, allow_empty=True)


# ---------------------------------------------------------------------------
# Output Serializers
# ---------------------------------------------------------------------------


class CartItemSerializer(serializers.ModelSerializer):
    review_order_id = serializers.UUIDField(read_only=True, allow_null=True)

    class Meta:
        model = CartItem
        fields = [
            "id",
            "product_ref",
            "quantity",
            "customization",
            "review_status",
            "review_order_id",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields
