"""Cart domain constants."""

from django.db import models

# Sentinel product reference for fully custom (embroidery) items that have
# no catalog product behind them.
CUSTOM_PRODUCT_REF = "custom-embroidery"

MIN_CART_QUANTITY = 1
MAX_CART_QUANTITY = 999


class CartReviewStatus(models.TextChoices):
    PENDING = "pending", "Pending"
    SUBMITTED = "submitted", "Submitted for review"
    APPROVED = "approved", "Approved"
