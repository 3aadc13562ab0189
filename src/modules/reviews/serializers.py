"""Review workflow DRF serializers for API input/output.

Input serializers check the wire shape only; workflow rules live in
``ReviewOrderService``.
"""

from __future__ import annotations

from django.contrib.auth import get_user_model
from rest_framework import serializers

from modules.reviews.models import ReviewOrder, ReviewStatusHistory

# ---------------------------------------------------------------------------
# Input Serializers
# ---------------------------------------------------------------------------

_MONEY = {"max_digits": 10, "decimal_places": 2, "min_value": 0}


class SubmitReviewSerializer(serializers.Serializer):
    # Missing and empty lists are both rejected by the service.
    items = serializers.ListField(
        child=serializers.JSONField(), required=False, default=list
    )
    subtotal = serializers.DecimalField(**_MONEY)
    shipping = serializers.DecimalField(**_MONEY, required=False, default=0)
    tax = serializers.DecimalField(**_MONEY, required=False, default=0)
    total = serializers.DecimalField(**_MONEY)
    submitted_at = serializers.DateTimeField(required=False, allow_null=True)


class UpdateReviewStatusSerializer(serializers.Serializer):
    status = serializers.CharField()
    admin_notes = serializers.CharField(
        required=False, allow_blank=True, allow_null=True
    )


class PictureReplySerializer(serializers.Serializer):
    item_id = serializers.CharField(max_length=64)
    # URL or data URI of the proof image.
    image = serializers.CharField()
    notes = serializers.CharField(required=False, allow_blank=True, default="")


class UploadPictureRepliesSerializer(serializers.Serializer):
    picture_replies = PictureReplySerializer(many=True, allow_empty=True)


class CustomerConfirmationSerializer(serializers.Serializer):
    item_id = serializers.CharField(max_length=64)
    confirmed = serializers.BooleanField()
    notes = serializers.CharField(required=False, allow_blank=True, default="")


class ConfirmPicturesSerializer(serializers.Serializer):
    # A missing list is rejected by the service; an empty one confirms.
    confirmations = CustomerConfirmationSerializer(
        many=True, allow_empty=True, required=False
    )


# ---------------------------------------------------------------------------
# Output Serializers (Read)
# ---------------------------------------------------------------------------


class SubmittedReviewSerializer(serializers.ModelSerializer):
    review_id = serializers.UUIDField(source="id", read_only=True)
    item_count = serializers.IntegerField(read_only=True)

    class Meta:
        model = ReviewOrder
        fields = ["review_id", "status", "submitted_at", "item_count", "total"]
        read_only_fields = fields


class StatusHistorySerializer(serializers.ModelSerializer):
    class Meta:
        model = ReviewStatusHistory
        fields = ["id", "old_status", "new_status", "actor_id", "notes", "created_at"]
        read_only_fields = fields


class ReviewOrderSerializer(serializers.ModelSerializer):
    item_count = serializers.IntegerField(read_only=True)

    class Meta:
        model = ReviewOrder
        fields = [
            "id",
            "customer_id",
            "items",
            "item_count",
            "subtotal",
            "shipping",
            "tax",
            "total",
            "status",
            "submitted_at",
            "reviewed_at",
            "admin_notes",
            "picture_replies",
            "customer_confirmations",
            "picture_reply_uploaded_at",
            "customer_confirmed_at",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class ReviewOrderDetailSerializer(ReviewOrderSerializer):
    status_history = StatusHistorySerializer(many=True, read_only=True)

    class Meta(ReviewOrderSerializer.Meta):
        fields = ReviewOrderSerializer.Meta.fields + ["status_history"]
        read_only_fields = fields


class SubmitterSerializer(serializers.ModelSerializer):
    class Meta:
        model = get_user_model()
        fields = ["id", "username", "email", "first_name", "last_name"]
        read_only_fields = fields


class AdminReviewOrderSerializer(ReviewOrderSerializer):
    """Review order joined with the submitter identity for admin screens."""

    customer = SubmitterSerializer(read_only=True)

    class Meta(ReviewOrderSerializer.Meta):
        fields = ReviewOrderSerializer.Meta.fields + ["customer"]
        read_only_fields = fields


class AdminReviewOrderDetailSerializer(AdminReviewOrderSerializer):
    status_history = StatusHistorySerializer(many=True, read_only=True)

    class Meta(AdminReviewOrderSerializer.Meta):
        fields = AdminReviewOrderSerializer.Meta.fields + ["status_history"]
        read_only_fields = fields
