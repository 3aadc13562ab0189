"""Cart URL configuration.

Routes are wired by hand because the collection also answers DELETE
(clear cart), which the DRF router does not map.
"""

from __future__ import annotations

from django.urls import path

from modules.carts.views import CartViewSet

cart_collection = CartViewSet.as_view(
    {"get": "list", "post": "create", "delete": "clear"}
)
cart_item = CartViewSet.as_view(
    {"put": "update", "patch": "update", "delete": "destroy"}
)
cart_sync = CartViewSet.as_view({"post": "sync"})

urlpatterns = [
    path("cart/", cart_collection, name="cart"),
    path("cart/sync/", cart_sync, name="cart-sync"),
    path("cart/<str:pk>/", cart_item, name="cart-item"),
]
