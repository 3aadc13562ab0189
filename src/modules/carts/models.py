"""CartItem model.

A cart item is a pending purchase intent of one customer.  ``product_ref``
holds either a catalog product id or ``CUSTOM_PRODUCT_REF`` for fully custom
items, so there is no foreign key to the catalog.

``review_order`` is the back-reference to the review order the item was
rolled into.  It is written once, at submission, and never reassigned: the
repository only links rows whose back-reference is still empty.
"""

from __future__ import annotations

from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

from modules.carts.constants import (
    MAX_CART_QUANTITY,
    MIN_CART_QUANTITY,
    CartReviewStatus,
)
from modules.core.models import BaseModel


class CartItem(BaseModel):
    customer: models.ForeignKey = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="cart_items",
    )
    product_ref: models.CharField = models.CharField(max_length=64)
    quantity: models.PositiveIntegerField = models.PositiveIntegerField(
        default=1,
        validators=[
            MinValueValidator(MIN_CART_QUANTITY),
            MaxValueValidator(MAX_CART_QUANTITY),
        ],
    )
    customization: models.JSONField = models.JSONField(null=True, blank=True)
    review_status: models.CharField = models.CharField(
        max_length=20,
        choices=CartReviewStatus.choices,
        default=CartReviewStatus.PENDING,
    )
    review_order: models.ForeignKey = models.ForeignKey(
        "reviews.ReviewOrder",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="cart_items",
    )

    class Meta:
        db_table = "cart_items"
        ordering = ["created_at"]
        indexes = [
            models.Index(fields=["customer", "created_at"], name="cart_customer_idx"),
            models.Index(fields=["product_ref"], name="cart_product_ref_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                check=models.Q(quantity__gte=MIN_CART_QUANTITY)
                & models.Q(quantity__lte=MAX_CART_QUANTITY),
                name="cart_items_quantity_range",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.product_ref} x{self.quantity} ({self.review_status})"
