from datetime import datetime

from storefront.extensions import db


class PaymentConfirmation(db.Model):
    """A customer's claim to have paid for an order, awaiting admin review."""

    __tablename__ = "payment_confirmations"
    __table_args__ = (
        db.Index("idx_payment_confirmations_status", "status"),
        db.Index("idx_payment_confirmations_payment_method", "payment_method"),
        db.Index("idx_payment_confirmations_created_at", "created_at"),
    )

    id = db.Column(db.Integer, primary_key=True)
    order_id = db.Column(db.String(100), nullable=True)
    order_type = db.Column(
        db.Enum("delivery", "pickup", name="payment_order_type", native_enum=False),
        nullable=False,
        default="delivery",
    )
    payment_method = db.Column(db.String(50), nullable=False)
    amount = db.Column(db.Numeric(10, 2), nullable=False, default=0)
    customer_name = db.Column(db.String(255))
    customer_email = db.Column(db.String(255))
    customer_phone = db.Column(db.String(50))
    transaction_reference = db.Column(db.String(255))
    notes = db.Column(db.Text)
    status = db.Column(
        db.Enum("pending", "verified", "rejected", name="payment_confirmation_status", native_enum=False),
        nullable=False,
        default="pending",
    )
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "order_id": self.order_id,
            "payment_method": self.payment_method,
            "amount": float(self.amount) if self.amount is not None else 0,
            "customer_name": self.customer_name,
            "customer_email": self.customer_email,
            "customer_phone": self.customer_phone,
            "transaction_reference": self.transaction_reference,
            "notes": self.notes,
            "status": self.status or "pending",
            "order_type": self.order_type or "delivery",
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }

    def __repr__(self):
        return f"<PaymentConfirmation {self.id} order={self.order_id} status={self.status}>"
