"""Cart DTOs for the Service Layer.

Framework-agnostic, immutable (``frozen=True``) Pydantic v2 models passed
from the cart views to ``CartService``.
"""

from __future__ import annotations

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, field_validator

from modules.carts.constants import MAX_CART_QUANTITY, MIN_CART_QUANTITY


def _check_quantity(v: int) -> int:
    if not MIN_CART_QUANTITY <= v <= MAX_CART_QUANTITY:
        raise ValueError(
            f"Quantity must be between {MIN_CART_QUANTITY} and {MAX_CART_QUANTITY}."
        )
    return v


class AddCartItemDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    product_ref: str
    quantity: int = 1
    customization: Optional[Any] = None

    @field_validator("product_ref")
    @classmethod
    def product_ref_must_not_be_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Product reference is required.")
        return v

    @field_validator("quantity")
    @classmethod
    def quantity_in_range(cls, v: int) -> int:
        return _check_quantity(v)


class UpdateCartItemDTO(BaseModel):
    """Quantity edit; ``customization`` is only replaced when provided."""

    model_config = ConfigDict(frozen=True)

    quantity: int
    customization: Optional[Any] = None

    @field_validator("quantity")
    @classmethod
    def quantity_in_range(cls, v: int) -> int:
        return _check_quantity(v)


class SyncCartItemDTO(BaseModel):
    """One entry of a client-side cart.

    Entries are accepted loosely here; ``is_usable`` decides whether the
    service keeps them.
    """

    model_config = ConfigDict(frozen=True)

    product_ref: Optional[str] = None
    quantity: int = 0
    customization: Optional[Any] = None

    @property
    def is_usable(self) -> bool:
        return bool(self.product_ref and self.product_ref.strip()) and (
            MIN_CART_QUANTITY <= self.quantity <= MAX_CART_QUANTITY
        )


class SyncCartDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    items: List[SyncCartItemDTO]
