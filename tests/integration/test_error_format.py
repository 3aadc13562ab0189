"""Integration tests for standardized error responses."""

import pytest

pytestmark = pytest.mark.integration


def _assert_standard_body(data):
    assert "type" in data
    assert isinstance(data["errors"], list)
    assert data["errors"]
    for error in data["errors"]:
        assert {"code", "detail", "attr"} <= set(error)


class TestStandardizedErrors:
    def test_auth_error_has_standard_format(self, api_client):
        response = api_client.get("/api/v1/review-orders/")
        assert response.status_code == 401
        data = response.json()
        _assert_standard_body(data)
        assert data["type"] == "client_error"

    def test_malformed_json_has_standard_format(self, customer_client):
        response = customer_client.post(
            "/api/v1/submit-for-review/", data="{", content_type="application/json"
        )
        assert response.status_code == 400
        _assert_standard_body(response.json())

    def test_validation_error_names_the_field(self, customer_client):
        response = customer_client.post(
            "/api/v1/submit-for-review/",
            {"items": [{"id": "1"}], "subtotal": "abc", "total": "1.00"},
            format="json",
        )
        assert response.status_code == 400
        data = response.json()
        _assert_standard_body(data)
        assert data["type"] == "validation_error"
        assert "subtotal" in {error["attr"] for error in data["errors"]}

    def test_domain_error_carries_its_code(self, customer_client, submission_payload):
        submission_payload["total"] = "99.99"
        response = customer_client.post(
            "/api/v1/submit-for-review/", submission_payload, format="json"
        )
        assert response.status_code == 400
        data = response.json()
        _assert_standard_body(data)
        assert data["errors"][0]["code"] == "invalid_request"

    def test_not_found_has_standard_format(self, customer_client):
        response = customer_client.get(
            "/api/v1/review-orders/01890a5d-ac96-774b-bcce-b302099a8057/"
        )
        assert response.status_code == 404
        _assert_standard_body(response.json())

    def test_permission_error_has_standard_format(self, customer_client):
        response = customer_client.get("/api/v1/admin/review-orders/")
        assert response.status_code == 403
        data = response.json()
        _assert_standard_body(data)
        assert data["errors"][0]["code"] == "permission_denied"
