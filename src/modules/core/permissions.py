"""Role checks on top of the authenticated caller.

Identity comes from the session collaborator (SimpleJWT): the caller is a
Django user, staff users act as admins and everyone else as a customer.
Ownership of individual review orders is enforced by the repositories,
which scope customer queries by ``customer_id`` so foreign rows look absent.
"""

from __future__ import annotations

from rest_framework.permissions import BasePermission

ROLE_ADMIN = "admin"
ROLE_CUSTOMER = "customer"


def role_of(user) -> str:
    return ROLE_ADMIN if getattr(user, "is_staff", False) else ROLE_CUSTOMER


class IsAdminRole(BasePermission):
    message = "Admin role required."
    code = "permission_denied"

    def has_permission(self, request, view) -> bool:
        user = request.user
        return bool(user and user.is_authenticated and role_of(user) == ROLE_ADMIN)


class IsCustomerRole(BasePermission):
    message = "Customer role required."
    code = "permission_denied"

    def has_permission(self, request, view) -> bool:
        user = request.user
        return bool(
            user and user.is_authenticated and role_of(user) == ROLE_CUSTOMER
        )
