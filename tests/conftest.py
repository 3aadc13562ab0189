import pytest
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient

from modules.carts.models import CartItem
from modules.notifications.publishers import InMemoryPublisher

User = get_user_model()


@pytest.fixture(autouse=True)
def _use_db(db):
    """Automatically use the test database for all tests."""


@pytest.fixture(autouse=True)
def _reset_published_notifications():
    InMemoryPublisher.reset()
    yield
    InMemoryPublisher.reset()


@pytest.fixture()
def api_client():
    """DRF APIClient for testing API endpoints."""
    return APIClient()


@pytest.fixture()
def api_client_with_correlation(api_client):
    """APIClient pre-configured with a known correlation ID header."""
    cid = "test-correlation-id-fixture"
    api_client.defaults["HTTP_X_REQUEST_ID"] = cid
    return api_client, cid


# ---------------------------------------------------------------------------
# Identities
# ---------------------------------------------------------------------------


@pytest.fixture()
def admin_user():
    return User.objects.create_user(
        username="reviewer", password="testpass123", is_staff=True
    )


@pytest.fixture()
def customer():
    return User.objects.create_user(
        username="alice", email="alice@example.com", password="testpass123"
    )


@pytest.fixture()
def other_customer():
    return User.objects.create_user(
        username="bruno", email="bruno@example.com", password="testpass123"
    )


def _client_for(user):
    client = APIClient()
    client.force_authenticate(user=user)
    return client


@pytest.fixture()
def admin_client(admin_user):
    return _client_for(admin_user)


@pytest.fixture()
def customer_client(customer):
    return _client_for(customer)


@pytest.fixture()
def other_client(other_customer):
    return _client_for(other_customer)


# ---------------------------------------------------------------------------
# Workflow data
# ---------------------------------------------------------------------------


@pytest.fixture()
def cart_items(customer):
    """Two pending cart items: a catalog product and a custom embroidery."""
    return [
        CartItem.objects.create(customer=customer, product_ref="cap-classic", quantity=2),
        CartItem.objects.create(
            customer=customer,
            product_ref="custom-embroidery",
            quantity=1,
            customization={"text": "Team Alpha", "image": "data:image/png;base64,AAAA"},
        ),
    ]


@pytest.fixture()
def submission_payload(cart_items):
    """Scenario: 2 items, subtotal 40.00, shipping 5.00, tax 3.15."""
    return {
        "items": [
            {
                "id": str(item.id),
                "product_ref": item.product_ref,
                "quantity": item.quantity,
                "customization": item.customization,
            }
            for item in cart_items
        ],
        "subtotal": "40.00",
        "shipping": "5.00",
        "tax": "3.15",
        "total": "48.15",
    }


@pytest.fixture()
def submitted_review(customer_client, submission_payload):
    """Submit the cart through the API and return the response body."""
    response = customer_client.post(
        "/api/v1/submit-for-review/", submission_payload, format="json"
    )
    assert response.status_code == 201, response.content
    return response.json()
