from storefront.models.order import Order, PickupOrder
from storefront.models.payment import PaymentConfirmation
from storefront.models.payment_method import PaymentMethod

__all__ = ["Order", "PickupOrder", "PaymentConfirmation", "PaymentMethod"]
