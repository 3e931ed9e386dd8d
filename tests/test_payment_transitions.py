import logging
from unittest.mock import patch

import pytest
from sqlalchemy.exc import OperationalError

from storefront.extensions import db
from storefront.models import PaymentConfirmation

pytestmark = pytest.mark.payment


def status_url(transaction_id):
    return f"/api/payments/transactions/{transaction_id}/status"


def test_verifying_delivery_confirmation_moves_order_to_processing(client, admin_token, make_order):
    order = make_order()
    confirm = client.post("/api/payments/confirm", json={
        "order_id": str(order.id),
        "order_type": "delivery",
        "payment_method": "bank_transfer",
        "amount": 12500,
    }).get_json()["data"]

    response = client.authenticated_patch(status_url(confirm["id"]), token=admin_token, json={"action": "approve"})

    assert response.status_code == 200
    body = response.get_json()
    assert body["success"] is True
    assert body["message"] == "Transaction updated successfully"
    assert body["data"]["status"] == "verified"
    assert body["data"]["id"] == confirm["id"]

    db.session.refresh(order)
    assert order.status == "processing"


def test_rejecting_pickup_confirmation_by_code_cancels_pickup(client, admin_token, make_pickup_order):
    pickup = make_pickup_order(order_id="AMC-7K2QXP")
    confirm = client.post("/api/payments/confirm", json={
        "order_id": "AMC-7K2QXP",
        "order_type": "pickup",
        "payment_method": "card",
        "amount": 8000,
    }).get_json()["data"]

    response = client.authenticated_patch(status_url(confirm["id"]), token=admin_token, json={"status": "rejected"})

    assert response.status_code == 200
    assert response.get_json()["data"]["status"] == "rejected"

    db.session.refresh(pickup)
    assert pickup.status == "canceled"


def test_verified_pickup_becomes_ready_for_collection(client, admin_token, make_pickup_order, make_transaction):
    pickup = make_pickup_order(status="expired")
    transaction = make_transaction(order_id=str(pickup.id), order_type="pickup")

    response = client.authenticated_patch(status_url(transaction.id), token=admin_token, json={"status": "verified"})

    assert response.status_code == 200
    db.session.refresh(pickup)
    assert pickup.status == "pending"


def test_numeric_reference_falls_back_to_order_code(client, admin_token, make_order, make_transaction):
    order = make_order(order_id="100200")
    transaction = make_transaction(order_id="100200")

    response = client.authenticated_patch(status_url(transaction.id), token=admin_token, json={"action": "approve"})

    assert response.status_code == 200
    db.session.refresh(order)
    assert order.status == "processing"


def test_declined_numeric_pickup_reference_cancels_pickup_only(
    client, admin_token, make_order, make_pickup_order, make_transaction
):
    order = make_order()
    pickup = make_pickup_order()
    assert order.id == pickup.id

    confirm = client.post("/api/payments/confirm", json={
        "order_id": str(pickup.id),
        "order_type": "pickup",
        "payment_method": "card",
        "amount": 8000,
    }).get_json()["data"]

    response = client.authenticated_patch(status_url(confirm["id"]), token=admin_token, json={"action": "decline"})

    assert response.status_code == 200
    assert response.get_json()["data"]["status"] == "rejected"
    db.session.refresh(pickup)
    db.session.refresh(order)
    assert pickup.status == "canceled"
    assert order.status == "pending"


def test_array_body_on_status_route_is_rejected(client, admin_token, make_transaction):
    transaction = make_transaction()

    response = client.authenticated_patch(status_url(transaction.id), token=admin_token, json=["approve"])

    assert response.status_code == 400
    assert response.get_json() == {"success": False, "message": "Invalid status supplied"}
    db.session.refresh(transaction)
    assert transaction.status == "pending"


def test_reapplying_same_status_is_idempotent(client, admin_token, make_order, make_transaction):
    order = make_order()
    transaction = make_transaction(order_id=str(order.id))

    first = client.authenticated_patch(status_url(transaction.id), token=admin_token, json={"status": "verified"})
    second = client.authenticated_patch(status_url(transaction.id), token=admin_token, json={"status": "verified"})

    assert first.status_code == 200
    assert second.status_code == 200
    assert second.get_json()["data"]["status"] == "verified"
    db.session.refresh(order)
    assert order.status == "processing"


def test_settled_transaction_cannot_be_flipped(client, admin_token, make_order, make_transaction):
    order = make_order()
    transaction = make_transaction(order_id=str(order.id), status="verified")

    response = client.authenticated_patch(status_url(transaction.id), token=admin_token, json={"action": "decline"})

    assert response.status_code == 409
    body = response.get_json()
    assert body["success"] is False
    assert "already verified" in body["message"]

    db.session.refresh(transaction)
    db.session.refresh(order)
    assert transaction.status == "verified"
    assert order.status == "pending"


def test_unknown_transaction_returns_404(client, admin_token):
    response = client.authenticated_patch(status_url(9999), token=admin_token, json={"status": "verified"})

    assert response.status_code == 404
    assert response.get_json() == {"success": False, "message": "Transaction not found"}


def test_invalid_status_is_checked_before_lookup(client, admin_token, make_transaction):
    transaction = make_transaction()

    for missing in (9999, transaction.id):
        response = client.authenticated_patch(status_url(missing), token=admin_token, json={"status": "refunded"})
        assert response.status_code == 400
        assert response.get_json()["message"] == "Invalid status supplied"

    db.session.refresh(transaction)
    assert transaction.status == "pending"


def test_notes_updated_only_when_supplied(client, admin_token, make_transaction):
    transaction = make_transaction(notes="customer says paid at 10am")

    client.authenticated_patch(status_url(transaction.id), token=admin_token, json={"status": "pending"})
    db.session.refresh(transaction)
    assert transaction.notes == "customer says paid at 10am"

    client.authenticated_patch(
        status_url(transaction.id), token=admin_token, json={"status": "verified", "notes": "Matched bank alert"}
    )
    db.session.refresh(transaction)
    assert transaction.notes == "Matched bank alert"

    client.authenticated_patch(status_url(transaction.id), token=admin_token, json={"status": "verified", "notes": ""})
    db.session.refresh(transaction)
    assert transaction.notes is None


def test_transition_refreshes_updated_at(client, admin_token, make_transaction):
    transaction = make_transaction()
    before = transaction.updated_at

    response = client.authenticated_patch(status_url(transaction.id), token=admin_token, json={"status": "rejected"})

    assert response.status_code == 200
    db.session.refresh(transaction)
    assert transaction.updated_at >= before


def test_pending_transition_does_not_propagate(client, admin_token, make_order, make_transaction):
    order = make_order(status="delivered")
    transaction = make_transaction(order_id=str(order.id))

    response = client.authenticated_patch(status_url(transaction.id), token=admin_token, json={"status": "pending"})

    assert response.status_code == 200
    db.session.refresh(order)
    assert order.status == "delivered"


def test_missing_order_is_logged_not_raised(client, admin_token, make_transaction, caplog):
    transaction = make_transaction(order_id="ORD-DOES-NOT-EXIST")

    with caplog.at_level(logging.WARNING, logger="storefront.payments.orders"):
        response = client.authenticated_patch(status_url(transaction.id), token=admin_token, json={"action": "approve"})

    assert response.status_code == 200
    assert response.get_json()["data"]["status"] == "verified"
    assert any("ORD-DOES-NOT-EXIST" in record.getMessage() for record in caplog.records)


def test_transaction_without_order_reference_still_transitions(client, admin_token, make_transaction):
    transaction = make_transaction(order_id=None)

    response = client.authenticated_patch(status_url(transaction.id), token=admin_token, json={"action": "approve"})

    assert response.status_code == 200
    assert response.get_json()["data"]["status"] == "verified"


def test_propagation_database_error_keeps_transition(client, admin_token, make_order, make_transaction):
    order = make_order()
    transaction = make_transaction(order_id=str(order.id))

    with patch(
        "storefront.payments.orders.OrderReferenceResolver.update_status",
        side_effect=OperationalError("UPDATE orders", {}, Exception("lock wait timeout")),
    ):
        response = client.authenticated_patch(status_url(transaction.id), token=admin_token, json={"action": "approve"})

    assert response.status_code == 200
    db.session.refresh(transaction)
    db.session.refresh(order)
    assert transaction.status == "verified"
    assert order.status == "pending"


def test_primary_update_failure_returns_500(client, admin_token, make_transaction):
    transaction = make_transaction()

    with patch(
        "storefront.payments.service.db.session.commit",
        side_effect=OperationalError("UPDATE payment_confirmations", {}, Exception("disk full")),
    ):
        response = client.authenticated_patch(status_url(transaction.id), token=admin_token, json={"action": "approve"})

    assert response.status_code == 500
    body = response.get_json()
    assert body == {"success": False, "message": "Failed to update transaction status"}

    db.session.refresh(transaction)
    assert transaction.status == "pending"
    assert PaymentConfirmation.query.count() == 1
