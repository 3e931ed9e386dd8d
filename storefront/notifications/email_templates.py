# storefront/notifications/email_templates.py
from datetime import datetime
from decimal import Decimal, InvalidOperation
from html import escape


def format_naira(value):
    """Render an amount as ``₦12,500`` (kobo shown only when present)."""
    try:
        amount = Decimal(str(value if value is not None else 0))
    except (InvalidOperation, ValueError):
        amount = Decimal(0)
    if amount == amount.to_integral_value():
        return f"₦{amount:,.0f}"
    return f"₦{amount:,.2f}"


def _quantity(item):
    try:
        return int(item.get("quantity") or 1)
    except (TypeError, ValueError):
        return 1


def _price(item):
    try:
        return Decimal(str(item.get("price") or 0))
    except (InvalidOperation, ValueError):
        return Decimal(0)


class EmailTemplates:
    """Payment confirmation email templates"""

    @staticmethod
    def _items_html(items):
        rows = []
        for item in items or []:
            if not isinstance(item, dict):
                continue
            name = escape(str(item.get("name") or "Item"))
            image = escape(str(item.get("image") or "https://via.placeholder.com/80"))
            quantity = _quantity(item)
            price = _price(item)
            rows.append(f"""
            <tr>
                <td class="item-image"><img src="{image}" alt="{name}" width="70" height="70" /></td>
                <td class="item-details">
                    <div class="item-name">{name}</div>
                    <div class="item-qty">Quantity: {quantity}</div>
                    <div class="item-price">{format_naira(price)} each</div>
                </td>
                <td class="item-total">{format_naira(price * quantity)}</td>
            </tr>""")
        return "".join(rows)

    @staticmethod
    def _layout(store, header_title, header_subtitle, body):
        return f"""
        <!DOCTYPE html>
        <html lang="en">
        <head>
            <meta charset="UTF-8">
            <style>
                body {{ font-family: 'Segoe UI', Tahoma, Geneva, Verdana, sans-serif; line-height: 1.6; }}
                .container {{ max-width: 650px; margin: 0 auto; padding: 20px; }}
                .header {{ background: #1e3a8a; color: white; padding: 30px; text-align: center; }}
                .content {{ padding: 30px; background: #ffffff; }}
                .summary {{ background: #f0f9ff; border-left: 4px solid #0ea5e9; padding: 20px; margin: 20px 0; }}
                .next-steps {{ background: #fef3c7; border-left: 4px solid #f59e0b; padding: 20px; margin: 20px 0; }}
                .item-name {{ font-weight: 600; color: #1f2937; }}
                .item-total {{ text-align: right; font-weight: 700; color: #1e3a8a; }}
                .footer {{ margin-top: 30px; padding-top: 20px; border-top: 1px solid #e2e8f0; color: #64748b; text-align: center; }}
            </style>
        </head>
        <body>
            <div class="container">
                <div class="header">
                    <h1>{header_title}</h1>
                    <p>{header_subtitle}</p>
                </div>
                <div class="content">
                    {body}
                    <p>If you have any questions, reach us at<br>
                    Phone: {escape(store['phone'])} | Email: {escape(store['email'])}</p>
                </div>
                <div class="footer">
                    <p><strong>{escape(store['name'])}</strong></p>
                    <p>{escape(store['address'])}</p>
                    <p>© {datetime.now().year} {escape(store['name'])}. All rights reserved.</p>
                </div>
            </div>
        </body>
        </html>
        """

    @classmethod
    def delivery_payment_received(cls, store, customer_name, order_id, amount, items, payment_method):
        """Payment received for a delivery order"""
        subject = f"Payment Received - Order #{order_id}"
        amount_str = format_naira(amount)

        body = f"""
                    <p>Hello {escape(customer_name or 'there')},</p>
                    <p>We've received your payment confirmation for your delivery order. Our team will
                    verify your payment shortly and prepare your items for delivery.</p>

                    <div class="summary">
                        <p><strong>Order ID:</strong> #{escape(str(order_id))}</p>
                        <p><strong>Payment Method:</strong> {escape(str(payment_method))}</p>
                        <p><strong>Total Amount:</strong> {amount_str}</p>
                    </div>

                    <h3>Your Order Items</h3>
                    <table width="100%">{cls._items_html(items)}</table>
                    <p><strong>Subtotal:</strong> {amount_str}<br>
                    <strong>Delivery:</strong> FREE<br>
                    <strong>Total:</strong> {amount_str}</p>

                    <div class="next-steps">
                        <p><strong>What Happens Next?</strong></p>
                        <p>Step 1: We verify your payment (usually within 30 minutes)<br>
                        Step 2: We prepare and package your items<br>
                        Step 3: Your order is dispatched for delivery<br>
                        Step 4: You receive your products at your doorstep</p>
                    </div>
        """

        return subject, cls._layout(store, "Payment Received!", "Thank you for your order", body)

    @classmethod
    def pickup_payment_received(cls, store, customer_name, order_id, amount, items, payment_method,
                                pickup_date=None, pickup_branch=None):
        """Payment received for an in-store pickup order"""
        subject = f"Pickup Confirmed - Order #{order_id}"
        amount_str = format_naira(amount)

        body = f"""
                    <p>Hello {escape(customer_name or 'there')},</p>
                    <p>We've received your payment confirmation for your pickup order. Once our team
                    verifies it, your items will be ready for collection.</p>

                    <div class="summary">
                        <p><strong>Order ID:</strong> #{escape(str(order_id))}</p>
                        <p><strong>Payment Method:</strong> {escape(str(payment_method))}</p>
                        <p><strong>Total Amount:</strong> {amount_str}</p>
                        <p><strong>Pickup Date:</strong> {escape(str(pickup_date or 'To be confirmed'))}</p>
                        <p><strong>Pickup Branch:</strong> {escape(str(pickup_branch or store['address']))}</p>
                    </div>

                    <h3>Items Reserved For You</h3>
                    <table width="100%">{cls._items_html(items)}</table>
                    <p><strong>Total:</strong> {amount_str}</p>

                    <div class="next-steps">
                        <p><strong>Before You Come</strong></p>
                        <p>Bring your order ID and a valid phone number. Orders not collected on the
                        scheduled date may expire.</p>
                    </div>
        """

        return subject, cls._layout(store, "Pickup Confirmed!", "Your items are being reserved", body)
