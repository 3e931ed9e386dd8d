from enum import Enum

from storefront.errors import InvalidStateTransition, ValidationError


class TransactionStatus(str, Enum):
    PENDING = "pending"
    VERIFIED = "verified"
    REJECTED = "rejected"


class OrderType(str, Enum):
    DELIVERY = "delivery"
    PICKUP = "pickup"

    @classmethod
    def coerce(cls, value) -> "OrderType":
        """Unknown or missing order types fall back to delivery."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value or "").strip().lower())
        except ValueError:
            return cls.DELIVERY


class OrderStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    SUCCESSFUL = "successful"
    DELIVERED = "delivered"
    CANCELED = "canceled"
    RETURNED = "returned"
    FAILED = "failed"


class PickupStatus(str, Enum):
    PENDING = "pending"
    PICKED_UP = "picked_up"
    EXPIRED = "expired"
    CANCELED = "canceled"


ACTION_ALIASES = {
    "approve": TransactionStatus.VERIFIED,
    "decline": TransactionStatus.REJECTED,
    "rejected": TransactionStatus.REJECTED,
}


class PaymentStateMachine:
    """
    Rules for moving a payment confirmation between statuses and for
    deriving the status written onto the correlated order.

    pending -> verified | rejected. Terminal statuses accept only
    themselves again, which re-applies the same derived order status.
    """

    @staticmethod
    def resolve_target_status(status=None, action=None) -> TransactionStatus:
        """
        An explicit ``status`` wins; otherwise a coarse ``action`` is mapped.

        Raises:
            ValidationError: when neither resolves to a known status.
        """
        raw = str(status or "").strip().lower()
        if not raw and action:
            alias = ACTION_ALIASES.get(str(action).strip().lower())
            raw = alias.value if alias else ""

        try:
            return TransactionStatus(raw)
        except ValueError:
            raise ValidationError("Invalid status supplied") from None

    @staticmethod
    def derive_order_status(status, order_type):
        """Map a transaction status onto the order/pickup vocabulary. ``None`` means no propagation."""
        status = TransactionStatus(status)
        order_type = OrderType.coerce(order_type)

        if status == TransactionStatus.VERIFIED:
            if order_type == OrderType.PICKUP:
                return PickupStatus.PENDING.value
            return OrderStatus.PROCESSING.value

        if status == TransactionStatus.REJECTED:
            return OrderStatus.CANCELED.value

        return None

    @staticmethod
    def allowed_sources(target) -> tuple:
        """Statuses a transaction may currently hold for ``target`` to be applied."""
        target = TransactionStatus(target)
        return tuple({TransactionStatus.PENDING.value, target.value})

    @classmethod
    def can_transition(cls, current, target) -> bool:
        return TransactionStatus(current).value in cls.allowed_sources(target)

    @classmethod
    def ensure_transition(cls, current, target) -> None:
        if not cls.can_transition(current, target):
            raise InvalidStateTransition(
                f"Transaction is already {current} and cannot be marked {TransactionStatus(target).value}"
            )
