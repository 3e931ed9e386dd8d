"""
Payment confirmation store.

Customers submit a confirmation after paying offline; admins review the
list and mark each confirmation verified or rejected, which is reflected
onto the delivery or pickup order it references.
"""

import logging
import time
from datetime import datetime
from decimal import Decimal, InvalidOperation

from sqlalchemy.exc import SQLAlchemyError

from storefront.errors import InvalidStateTransition, NotFoundError, PersistenceError, ValidationError
from storefront.extensions import db
from storefront.models import PaymentConfirmation
from storefront.notifications.notification_service import NotificationService
from storefront.payments.orders import load_order_contacts, propagate_status
from storefront.payments.state_machine import OrderType, PaymentStateMachine, TransactionStatus

logger = logging.getLogger(__name__)

NAME_PLACEHOLDER = "—"

CENT = Decimal("0.01")
# Numeric(10, 2)
MAX_AMOUNT = Decimal("99999999.99")

_UNSET = object()


def _clean(value):
    """Strip strings; blanks become ``None``."""
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def coerce_amount(value) -> Decimal:
    """
    Unparsable, non-finite or negative amounts are stored as zero.

    Raises:
        ValidationError: when the amount does not fit the stored precision.
    """
    try:
        amount = Decimal(str(value if value is not None else 0).strip() or "0")
    except (InvalidOperation, ValueError):
        return Decimal("0.00")
    if not amount.is_finite() or amount < 0:
        return Decimal("0.00")

    try:
        amount = amount.quantize(CENT)
    except InvalidOperation:
        raise ValidationError("Amount is too large.") from None
    if amount > MAX_AMOUNT:
        raise ValidationError("Amount is too large.")
    return amount


def generate_reference() -> str:
    return f"TRANS-{int(time.time() * 1000)}"


def create_confirmation(*, payload: dict) -> dict:
    """
    Record a customer's payment confirmation as ``pending``.

    The confirmation email is dispatched only after the row is committed;
    its failure never affects the result.

    Raises:
        ValidationError: when ``payment_method`` is missing.
        PersistenceError: when the insert fails.
    """
    payload = payload or {}

    payment_method = _clean(payload.get("payment_method"))
    if not payment_method:
        raise ValidationError("Payment method is required.")

    order_type = OrderType.coerce(payload.get("order_type"))
    amount = coerce_amount(payload.get("amount"))

    confirmation = PaymentConfirmation(
        order_id=_clean(payload.get("order_id")),
        order_type=order_type.value,
        payment_method=payment_method,
        amount=amount,
        customer_name=_clean(payload.get("customer_name")),
        customer_email=_clean(payload.get("customer_email")),
        customer_phone=_clean(payload.get("customer_phone")),
        transaction_reference=_clean(payload.get("transaction_reference")) or generate_reference(),
        notes=_clean(payload.get("notes")),
        status=TransactionStatus.PENDING.value,
    )

    try:
        db.session.add(confirmation)
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"Error confirming payment: {e}")
        raise PersistenceError("Failed to process payment confirmation", detail=str(e)) from e

    logger.info(
        "Payment confirmation recorded",
        extra={
            "transaction_id": confirmation.id,
            "order_id": confirmation.order_id,
            "order_type": order_type.value,
            "payment_method": payment_method,
        },
    )

    items = payload.get("cart_items")
    NotificationService.notify_payment_confirmed(
        order_type.value,
        confirmation.customer_email,
        {
            "customer_name": confirmation.customer_name,
            "order_id": confirmation.order_id,
            "amount": amount,
            "payment_method": payment_method,
            "items": items if isinstance(items, list) else [],
            "pickup_date": payload.get("pickup_date"),
            "pickup_branch": payload.get("pickup_branch"),
        },
    )

    return {
        "id": confirmation.id,
        "order_id": confirmation.order_id,
        "status": TransactionStatus.PENDING.value,
    }


def present_transaction(transaction: PaymentConfirmation, contacts: dict = None) -> dict:
    """Wire shape for the admin list, with contact backfill and display fallbacks."""
    row = transaction.to_dict()

    lookup = (contacts or {}).get(str(transaction.order_id)) if transaction.order_id else None
    if lookup:
        row["customer_name"] = row["customer_name"] or lookup.get("name")
        row["customer_email"] = row["customer_email"] or lookup.get("email")
        row["customer_phone"] = row["customer_phone"] or lookup.get("phone")

    row["customer_name"] = (
        row["customer_name"] or row["customer_email"] or row["customer_phone"] or NAME_PLACEHOLDER
    )
    row["customer_email"] = row["customer_email"] or None
    row["customer_phone"] = row["customer_phone"] or None
    return row


def list_transactions() -> list:
    """All confirmations, newest first, with contact details filled in from orders."""
    transactions = (
        PaymentConfirmation.query
        .order_by(PaymentConfirmation.created_at.desc(), PaymentConfirmation.id.desc())
        .all()
    )
    if not transactions:
        return []

    needs_contacts = [
        t.order_id for t in transactions
        if t.order_id and not (t.customer_name and t.customer_email and t.customer_phone)
    ]
    contacts = load_order_contacts(needs_contacts)

    return [present_transaction(t, contacts) for t in transactions]


def transition_transaction(*, transaction_id: int, status=None, action=None, notes=_UNSET) -> dict:
    """
    Move a confirmation to ``verified``, ``rejected`` or back to ``pending``.

    The status change is one guarded update: it only applies while the row
    is still pending or already holds the target status. Order propagation
    runs afterwards as a separate best-effort write.

    Raises:
        ValidationError: unknown status/action.
        NotFoundError: no such transaction.
        InvalidStateTransition: transaction already settled with another status.
    """
    target = PaymentStateMachine.resolve_target_status(status=status, action=action)

    existing = db.session.get(PaymentConfirmation, transaction_id)
    if existing is None:
        raise NotFoundError("Transaction not found")

    values = {"status": target.value, "updated_at": datetime.utcnow()}
    if notes is not _UNSET:
        values["notes"] = _clean(notes)

    try:
        updated = (
            PaymentConfirmation.query
            .filter(
                PaymentConfirmation.id == transaction_id,
                PaymentConfirmation.status.in_(PaymentStateMachine.allowed_sources(target)),
            )
            .update(values, synchronize_session=False)
        )
        if not updated:
            db.session.rollback()
            current = db.session.get(PaymentConfirmation, transaction_id)
            if current is None:
                raise NotFoundError("Transaction not found")
            PaymentStateMachine.ensure_transition(current.status, target)
            raise InvalidStateTransition()
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"Error updating payment transaction {transaction_id}: {e}")
        raise PersistenceError("Failed to update transaction status", detail=str(e)) from e

    db.session.expire_all()
    transaction = db.session.get(PaymentConfirmation, transaction_id)

    logger.info(
        "Payment transaction status updated",
        extra={"transaction_id": transaction.id, "status": transaction.status, "order_id": transaction.order_id},
    )

    propagate_status(transaction)

    return transaction.to_dict()
