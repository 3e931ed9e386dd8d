"""Payment methods offered at checkout, with bank details for transfers."""

import json
import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from storefront.errors import NotFoundError, PersistenceError, ValidationError
from storefront.extensions import db
from storefront.models import PaymentMethod

logger = logging.getLogger(__name__)

DEFAULT_PAYMENT_METHODS = [
    {"id": "card", "code": "card", "name": "Credit/Debit Card", "enabled": True, "icon": "💳",
     "description": "Pay securely with major credit and debit cards."},
    {"id": "flutterwave", "code": "flutterwave", "name": "Flutterwave", "enabled": True, "icon": "🌊",
     "description": "Regional payments powered by Flutterwave."},
    {"id": "monnify", "code": "monnify", "name": "Monnify", "enabled": False, "icon": "💰",
     "description": "Accept payments using Monnify accounts and transfers."},
    {"id": "bank_transfer", "code": "bank_transfer", "name": "Bank Transfer", "enabled": True, "icon": "🏦",
     "description": "Direct bank transfer or deposit."},
    {"id": "paypal", "code": "paypal", "name": "PayPal", "enabled": False, "icon": "🅿️",
     "description": "Pay easily with your PayPal account."},
    {"id": "stripe", "code": "stripe", "name": "Stripe", "enabled": True, "icon": "💎",
     "description": "Secure global payments powered by Stripe."},
    {"id": "razorpay", "code": "razorpay", "name": "Razorpay", "enabled": False, "icon": "🔒",
     "description": "Popular payment option for India."},
    {"id": "paystack", "code": "paystack", "name": "Paystack", "enabled": True, "icon": "⚡",
     "description": "Fast local payments with Paystack."},
]

TEXT_FIELDS = ("name", "icon", "description", "bank_name", "account_name", "account_number", "additional_notes")


def _defaults():
    return [dict(method) for method in DEFAULT_PAYMENT_METHODS]


def _parse_config(value):
    """Accept a JSON object or its string form."""
    if value is None:
        return None
    if isinstance(value, (dict, list)):
        return value
    if isinstance(value, str):
        if not value.strip():
            return None
        try:
            return json.loads(value)
        except ValueError:
            raise ValidationError("Invalid config format. Must be a valid JSON object or string.") from None
    raise ValidationError("Invalid config format. Must be a valid JSON object or string.")


def _sort_order(value):
    try:
        return int(value or 0)
    except (TypeError, ValueError):
        raise ValidationError("sort_order must be an integer.") from None


def list_enabled() -> dict:
    """
    Enabled methods by ``sort_order``. Falls back to the built-in defaults
    when nothing is configured or the table cannot be read.
    """
    try:
        methods = (
            PaymentMethod.query
            .filter(PaymentMethod.enabled.is_(True))
            .order_by(PaymentMethod.sort_order.asc(), PaymentMethod.id.asc())
            .all()
        )
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"Error fetching payment methods: {e}")
        methods = []

    if methods:
        data = [method.to_dict() for method in methods]
        source = "database"
    else:
        data = _defaults()
        source = "default"

    return {"paymentMethods": data, "source": source, "count": len(data)}


def find_method(identifier):
    """Look up by numeric id, else by code."""
    identifier = str(identifier or "").strip()
    if not identifier:
        raise ValidationError("Payment method identifier is required.")

    method = None
    if identifier.isdigit():
        method = db.session.get(PaymentMethod, int(identifier))
    if method is None:
        method = PaymentMethod.query.filter_by(code=identifier).first()
    if method is None:
        raise NotFoundError("Payment method not found.")
    return method


def create_method(*, payload: dict) -> dict:
    """Insert a payment method, or overwrite the one sharing its ``code``."""
    payload = payload or {}
    code = str(payload.get("code") or "").strip()
    name = str(payload.get("name") or "").strip()
    if not code or not name:
        raise ValidationError("Code and name are required.")

    config = _parse_config(payload.get("config"))

    method = PaymentMethod.query.filter_by(code=code).first()
    if method is None:
        method = PaymentMethod(code=code)
        db.session.add(method)

    method.name = name
    method.enabled = bool(payload.get("enabled", True))
    method.icon = payload.get("icon") or "💳"
    method.description = payload.get("description") or None
    method.sort_order = _sort_order(payload.get("sort_order"))
    method.bank_name = payload.get("bank_name") or None
    method.account_name = payload.get("account_name") or None
    method.account_number = payload.get("account_number") or None
    method.additional_notes = payload.get("additional_notes") or None
    method.config = config

    _commit("create", code)
    logger.info("Payment method saved", extra={"code": code, "payment_method_id": method.id})
    return method.to_dict()


def update_method(*, identifier, payload: dict) -> dict:
    """Partial update. Only keys present in ``payload`` are written."""
    payload = payload or {}
    method = find_method(identifier)

    changed = False
    for field in TEXT_FIELDS:
        if field in payload:
            setattr(method, field, payload[field])
            changed = True

    if "enabled" in payload:
        method.enabled = bool(payload["enabled"])
        changed = True

    if "sort_order" in payload:
        method.sort_order = _sort_order(payload["sort_order"])
        changed = True

    if "config" in payload:
        method.config = _parse_config(payload["config"])
        changed = True

    if not changed:
        raise ValidationError("No valid fields to update.")

    _commit("update", method.code)
    logger.info("Payment method updated", extra={"code": method.code, "payment_method_id": method.id})
    return method.to_dict()


def delete_method(*, method_id) -> dict:
    try:
        method_id = int(method_id)
    except (TypeError, ValueError):
        raise ValidationError("Payment method ID is required.") from None

    method = db.session.get(PaymentMethod, method_id)
    if method is None:
        raise NotFoundError("Payment method not found.")

    code = method.code
    db.session.delete(method)
    _commit("delete", code)
    logger.info("Payment method deleted", extra={"payment_method_id": method_id, "code": code})
    return {"id": method_id}


def _commit(operation, code):
    try:
        db.session.commit()
    except IntegrityError as e:
        db.session.rollback()
        raise ValidationError("A payment method with this code already exists.") from e
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"Error on payment method {operation} ({code}): {e}")
        raise PersistenceError(f"Failed to {operation} payment method", detail=str(e)) from e
