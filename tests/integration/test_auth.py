"""Integration tests for JWT authentication and caller roles.

Validates:
  - /health is public (plain Django view, no DRF).
  - Protected DRF endpoints return 401 without, or with a bad, token.
  - A token obtained with real credentials is accepted.
  - /api/v1/me reports the role the review workflow authorizes against.
"""

import pytest

pytestmark = pytest.mark.integration


class TestPublicEndpoints:
    """Health check must remain accessible without credentials."""

    def test_health_is_public(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


class TestProtectedEndpoints:
    """All DRF endpoints require a valid JWT by default (Fail Closed)."""

    @pytest.mark.parametrize(
        "path",
        [
            "/api/v1/me",
            "/api/v1/cart/",
            "/api/v1/review-orders/",
            "/api/v1/admin/review-orders/",
        ],
    )
    def test_no_token_returns_401(self, api_client, path):
        assert api_client.get(path).status_code == 401

    def test_invalid_token_returns_401(self, api_client):
        api_client.credentials(HTTP_AUTHORIZATION="Bearer invalid.token.here")
        response = api_client.get("/api/v1/me")
        assert response.status_code == 401

    def test_malformed_auth_header_returns_401(self, api_client):
        api_client.credentials(HTTP_AUTHORIZATION="Token some-token")
        response = api_client.get("/api/v1/me")
        assert response.status_code == 401

    def test_empty_bearer_returns_401(self, api_client):
        api_client.credentials(HTTP_AUTHORIZATION="Bearer ")
        response = api_client.get("/api/v1/me")
        assert response.status_code == 401

    def test_401_includes_www_authenticate_header(self, api_client):
        response = api_client.get("/api/v1/me")
        assert response.status_code == 401
        assert "Bearer" in response.get("WWW-Authenticate", "")


class TestTokenFlow:
    def _obtain(self, api_client, username):
        response = api_client.post(
            "/api/v1/auth/token/",
            {"username": username, "password": "testpass123"},
            format="json",
        )
        assert response.status_code == 200, response.content
        return response.json()

    def test_obtained_token_authenticates(self, api_client, customer):
        tokens = self._obtain(api_client, "alice")
        api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {tokens['access']}")

        response = api_client.get("/api/v1/me")

        assert response.status_code == 200
        assert response.json() == {"customer_id": customer.pk, "role": "customer"}

    def test_wrong_password_is_rejected(self, api_client, customer):
        response = api_client.post(
            "/api/v1/auth/token/",
            {"username": "alice", "password": "nope"},
            format="json",
        )
        assert response.status_code == 401


class TestRoles:
    def test_staff_user_is_admin(self, admin_client, admin_user):
        response = admin_client.get("/api/v1/me")
        assert response.json() == {"customer_id": admin_user.pk, "role": "admin"}

    def test_regular_user_is_customer(self, customer_client):
        assert customer_client.get("/api/v1/me").json()["role"] == "customer"
