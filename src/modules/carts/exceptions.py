"""Cart domain exceptions.

Raised by the cart service; the cart views translate them into HTTP
responses.
"""

from __future__ import annotations


class CartItemNotFound(Exception):
    """The item does not exist or belongs to another customer."""


class InvalidCartQuantity(Exception):
    """The resulting quantity falls outside the allowed range."""
