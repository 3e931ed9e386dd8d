import pytest
from faker import Faker

from storefront import create_app
from storefront.extensions import db
from storefront.models import Order, PaymentConfirmation, PickupOrder
from storefront.security import issue_access_token

# Initialize Faker for generating test data
fake = Faker()


# Custom pytest marks for organizing tests
def pytest_configure(config):
    config.addinivalue_line(
        "markers",
        "db: mark test as database-intensive"
    )
    config.addinivalue_line(
        "markers",
        "auth: mark test as authentication-related"
    )
    config.addinivalue_line(
        "markers",
        "payment: mark test as payment-related"
    )


@pytest.fixture()
def app():
    """Fresh application and in-memory database per test"""
    app = create_app("testing")

    with app.app_context():
        db.create_all()

        yield app

        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(app):
    """Test client with bearer-token helpers"""
    client = app.test_client()

    def _headers(token, headers=None):
        headers = dict(headers or {})
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    def authenticated_get(self, url, token=None, **kwargs):
        return self.get(url, headers=_headers(token, kwargs.pop("headers", None)), **kwargs)

    def authenticated_post(self, url, token=None, **kwargs):
        return self.post(url, headers=_headers(token, kwargs.pop("headers", None)), **kwargs)

    def authenticated_put(self, url, token=None, **kwargs):
        return self.put(url, headers=_headers(token, kwargs.pop("headers", None)), **kwargs)

    def authenticated_patch(self, url, token=None, **kwargs):
        return self.patch(url, headers=_headers(token, kwargs.pop("headers", None)), **kwargs)

    def authenticated_delete(self, url, token=None, **kwargs):
        return self.delete(url, headers=_headers(token, kwargs.pop("headers", None)), **kwargs)

    client.authenticated_get = authenticated_get.__get__(client)
    client.authenticated_post = authenticated_post.__get__(client)
    client.authenticated_put = authenticated_put.__get__(client)
    client.authenticated_patch = authenticated_patch.__get__(client)
    client.authenticated_delete = authenticated_delete.__get__(client)

    return client


@pytest.fixture
def admin_token(app):
    """JWT for an admin account"""
    return issue_access_token(1, role="admin")


@pytest.fixture
def super_admin_token(app):
    return issue_access_token(2, role="super-admin")


@pytest.fixture
def customer_token(app):
    """JWT for a storefront customer (not staff)"""
    return issue_access_token(500, role="customer")


@pytest.fixture
def confirmation_payload():
    """A well-formed delivery payment confirmation"""
    return {
        "order_id": "42",
        "order_type": "delivery",
        "payment_method": "bank_transfer",
        "amount": "12500",
        "customer_name": fake.name(),
        "customer_email": fake.email(),
        "customer_phone": fake.phone_number(),
        "transaction_reference": f"REF-{fake.random_number(digits=8, fix_len=True)}",
        "notes": "Paid from GTBank",
        "cart_items": [
            {"name": "Shea Butter Cream", "quantity": 2, "price": 4000, "image": fake.image_url()},
            {"name": "Black Soap", "quantity": 1, "price": 4500},
        ],
    }


@pytest.fixture
def make_order(app):
    """Factory for delivery orders owned by the orders module"""
    def _make(**overrides):
        values = {
            "order_id": f"ORD-{fake.unique.random_number(digits=6, fix_len=True)}",
            "customer_name": fake.name(),
            "customer_email": fake.email(),
            "customer_phone": fake.phone_number()[:50],
            "total": 12500,
            "items_count": 3,
            "status": "pending",
        }
        values.update(overrides)
        order = Order(**values)
        db.session.add(order)
        db.session.commit()
        return order

    return _make


@pytest.fixture
def make_pickup_order(app):
    """Factory for pickup orders with AMC-XXXXXX codes"""
    def _make(**overrides):
        values = {
            "order_id": f"AMC-{fake.unique.bothify('??####').upper()}",
            "customer_name": fake.name(),
            "customer_email": fake.email(),
            "total_amount": 8000,
            "products_count": 2,
            "pickup_code": fake.bothify("####"),
            "status": "pending",
        }
        values.update(overrides)
        order = PickupOrder(**values)
        db.session.add(order)
        db.session.commit()
        return order

    return _make


@pytest.fixture
def make_transaction(app):
    """Factory for payment confirmations inserted directly"""
    def _make(**overrides):
        values = {
            "order_id": None,
            "order_type": "delivery",
            "payment_method": "bank_transfer",
            "amount": 5000,
            "status": "pending",
        }
        values.update(overrides)
        transaction = PaymentConfirmation(**values)
        db.session.add(transaction)
        db.session.commit()
        return transaction

    return _make
