from datetime import datetime

from storefront.extensions import db


class PaymentMethod(db.Model):
    __tablename__ = "payment_methods"

    id = db.Column(db.Integer, primary_key=True)
    code = db.Column(db.String(50), unique=True, nullable=False, index=True)
    name = db.Column(db.String(255), nullable=False)
    enabled = db.Column(db.Boolean, nullable=False, default=True, index=True)
    icon = db.Column(db.String(50), default="💳")
    description = db.Column(db.Text)
    sort_order = db.Column(db.Integer, nullable=False, default=0)
    bank_name = db.Column(db.String(255))
    account_name = db.Column(db.String(255))
    account_number = db.Column(db.String(100))
    additional_notes = db.Column(db.Text)
    config = db.Column(db.JSON)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    @property
    def is_bank_transfer(self):
        return self.code == "bank_transfer" or "bank transfer" in (self.name or "").lower()

    def to_dict(self):
        data = {
            "id": self.id,
            "databaseId": self.id,
            "code": self.code,
            "name": self.name or "Payment Method",
            "enabled": bool(self.enabled),
            "icon": self.icon or "💳",
            "description": self.description or "",
            "sort_order": self.sort_order,
        }
        if self.config is not None:
            data["config"] = self.config
        if self.is_bank_transfer or self.bank_name or self.account_name or self.account_number:
            data.update({
                "bank_name": self.bank_name or "",
                "account_name": self.account_name or "",
                "account_number": self.account_number or "",
                "additional_notes": self.additional_notes or "",
            })
        return data
