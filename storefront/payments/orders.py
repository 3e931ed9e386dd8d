"""
Correlation between payment confirmations and the order stores.

Order references arrive loosely typed: sometimes a database primary key,
sometimes an external code such as ``AMC-7K2QXP``. Resolution tries the
typed key first and the textual code second, once each.
"""

import logging
import re

from sqlalchemy.exc import SQLAlchemyError

from storefront.errors import PropagationFailure
from storefront.extensions import db
from storefront.models import Order, PickupOrder
from storefront.payments.state_machine import OrderType, PaymentStateMachine

logger = logging.getLogger(__name__)

NUMERIC_REFERENCE = re.compile(r"^\d+$")


def is_numeric_reference(value) -> bool:
    return value is not None and bool(NUMERIC_REFERENCE.match(str(value)))


class OrderReferenceResolver:
    """Resolves an order reference against the store selected by order type."""

    def __init__(self, order_type):
        self.order_type = OrderType.coerce(order_type)
        self.store = PickupOrder if self.order_type == OrderType.PICKUP else Order

    @property
    def has_text_key(self) -> bool:
        return getattr(self.store, "order_id", None) is not None

    def update_status(self, reference, status) -> int:
        """
        Write ``status`` onto the referenced record. Returns rows updated.
        One attempt by primary key (numeric references only), then one by text key.
        """
        reference = str(reference).strip()
        updated = 0

        if is_numeric_reference(reference):
            updated = (
                self.store.query
                .filter(self.store.id == int(reference))
                .update({"status": status}, synchronize_session=False)
            )

        if not updated and self.has_text_key:
            updated = (
                self.store.query
                .filter(self.store.order_id == reference)
                .update({"status": status}, synchronize_session=False)
            )

        return updated


def propagate_status(transaction) -> int:
    """
    Best-effort write of the derived order status for ``transaction``.

    Runs after the transaction's own status change has been committed and
    commits separately; a miss or a database error is logged and swallowed
    so the administrative action still succeeds.
    """
    target = PaymentStateMachine.derive_order_status(transaction.status, transaction.order_type)
    if target is None or not transaction.order_id:
        return 0

    resolver = OrderReferenceResolver(transaction.order_type)
    log_extra = {
        "transaction_id": transaction.id,
        "order_id": transaction.order_id,
        "order_type": resolver.order_type.value,
        "order_status": target,
    }

    try:
        updated = resolver.update_status(transaction.order_id, target)
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"Order status propagation failed: {e}", extra=log_extra)
        return 0

    if not updated:
        failure = PropagationFailure(
            f"No {resolver.store.__tablename__} row matches order reference {transaction.order_id!r}"
        )
        logger.warning(str(failure), extra=log_extra)
        return 0

    logger.info("Order status propagated", extra=log_extra)
    return updated


def load_order_contacts(order_ids) -> dict:
    """
    Fetch customer contact details for numeric order references in one query.

    Returns ``{"42": {"name": ..., "email": ..., "phone": ...}}``; any
    database failure yields an empty mapping.
    """
    numeric_ids = sorted({int(str(value)) for value in order_ids if is_numeric_reference(value)})
    if not numeric_ids:
        return {}

    try:
        rows = (
            db.session.query(
                Order.id.label("id"),
                Order.customer_name.label("name"),
                Order.customer_email.label("email"),
                Order.customer_phone.label("phone"),
            )
            .filter(Order.id.in_(numeric_ids))
            .all()
        )
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"Failed to fetch related order details for transactions: {e}")
        return {}

    return {
        str(row.id): {
            "name": row.name or None,
            "email": row.email or None,
            "phone": row.phone or None,
        }
        for row in rows
    }
