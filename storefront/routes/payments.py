from flask import Blueprint, current_app, jsonify, request

from storefront.extensions import limiter
from storefront.middleware.admin_guard import admin_required
from storefront.payments import methods, service

payments_bp = Blueprint("payments", __name__, url_prefix="/api/payments")


def success(message, data=None, status_code=200):
    return jsonify({"success": True, "message": message, "data": data}), status_code


def _json_body():
    """Request JSON object; anything else (arrays, scalars, invalid JSON) reads as empty."""
    body = request.get_json(silent=True)
    return body if isinstance(body, dict) else {}


def _confirm_rate_limit():
    return current_app.config["PAYMENT_CONFIRM_RATE_LIMIT"]


# ============================================
# PAYMENT METHODS
# ============================================

@payments_bp.route("/methods", methods=["GET"])
def get_payment_methods():
    """Enabled payment methods for checkout (public)"""
    data = methods.list_enabled()
    message = (
        "Payment methods fetched successfully"
        if data["source"] == "database"
        else "Using default payment methods"
    )
    return success(message, data)


@payments_bp.route("/methods", methods=["POST"])
@admin_required
def create_payment_method():
    method = methods.create_method(payload=_json_body())
    return success("Payment method created successfully", method)


@payments_bp.route("/methods/<identifier>", methods=["PUT"])
@admin_required
def update_payment_method(identifier):
    method = methods.update_method(identifier=identifier, payload=_json_body())
    return success("Payment method updated successfully", method)


@payments_bp.route("/methods/<identifier>", methods=["DELETE"])
@admin_required
def delete_payment_method(identifier):
    data = methods.delete_method(method_id=identifier)
    return success("Payment method deleted successfully", data)


# ============================================
# CONFIRMATIONS & TRANSACTIONS
# ============================================

@payments_bp.route("/confirm", methods=["POST"])
@limiter.limit(_confirm_rate_limit)
def confirm_payment():
    """Customer submits proof of an offline payment (public)"""
    data = service.create_confirmation(payload=_json_body())
    return success(
        "Payment confirmation submitted successfully. We will verify your payment shortly.",
        data,
    )


@payments_bp.route("/transactions", methods=["GET"])
@admin_required
def get_payment_transactions():
    transactions = service.list_transactions()
    if not transactions:
        return success("No transactions found", [])
    return success("Transactions fetched successfully", transactions)


@payments_bp.route("/transactions/<int:transaction_id>/status", methods=["PATCH"])
@admin_required
def update_payment_transaction_status(transaction_id):
    """Approve or decline a confirmation; the linked order follows."""
    body = _json_body()
    options = {"status": body.get("status"), "action": body.get("action")}
    if "notes" in body:
        options["notes"] = body["notes"]

    transaction = service.transition_transaction(transaction_id=transaction_id, **options)
    return success("Transaction updated successfully", transaction)
