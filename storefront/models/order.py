from datetime import datetime

from storefront.extensions import db


class Order(db.Model):
    """Delivery order. Owned by the orders module; payments only read contacts and write status."""

    __tablename__ = "orders"

    id = db.Column(db.Integer, primary_key=True)
    order_id = db.Column(db.String(20), unique=True, index=True)
    customer_name = db.Column("customer", db.String(255))
    customer_email = db.Column(db.String(255))
    customer_phone = db.Column(db.String(50))
    customer_id = db.Column(db.Integer)
    total = db.Column(db.Numeric(10, 2), default=0)
    items_count = db.Column(db.Integer, default=0)
    status = db.Column(db.String(20), nullable=False, default="pending")
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "order_id": self.order_id,
            "customer": self.customer_name,
            "customer_email": self.customer_email,
            "customer_phone": self.customer_phone,
            "total": float(self.total) if self.total is not None else 0,
            "items_count": self.items_count,
            "status": self.status,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


class PickupOrder(db.Model):
    """In-store pickup order, addressed by database id or its ``AMC-XXXXXX`` code."""

    __tablename__ = "pickup_orders"

    id = db.Column(db.Integer, primary_key=True)
    order_id = db.Column(db.String(20), unique=True, index=True)
    customer_name = db.Column(db.String(150))
    customer_email = db.Column(db.String(150))
    total_amount = db.Column(db.Numeric(10, 2))
    products_count = db.Column(db.Integer)
    pickup_code = db.Column(db.String(16))
    scheduled_date = db.Column(db.DateTime)
    status = db.Column(db.String(20), nullable=False, default="pending")
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "order_id": self.order_id,
            "customer_name": self.customer_name,
            "customer_email": self.customer_email,
            "total_amount": float(self.total_amount) if self.total_amount is not None else 0,
            "products_count": self.products_count,
            "pickup_code": self.pickup_code,
            "scheduled_date": self.scheduled_date.isoformat() if self.scheduled_date else None,
            "status": self.status,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
