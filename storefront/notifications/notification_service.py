# storefront/notifications/notification_service.py
import logging
import threading

from flask import current_app
from flask_mail import Message

from storefront.errors import NotificationFailure
from storefront.extensions import mail
from storefront.notifications.email_templates import EmailTemplates
from storefront.payments.state_machine import OrderType

logger = logging.getLogger(__name__)


class NotificationService:
    """Fire-and-forget customer email. Failures are logged, never raised."""

    @staticmethod
    def store_details():
        config = current_app.config
        return {
            "name": config.get("STORE_NAME", ""),
            "email": config.get("STORE_SUPPORT_EMAIL", ""),
            "phone": config.get("STORE_SUPPORT_PHONE", ""),
            "address": config.get("STORE_ADDRESS", ""),
        }

    @staticmethod
    def _deliver(app, to_email, subject, html_content):
        with app.app_context():
            try:
                msg = Message(
                    subject=subject,
                    recipients=[to_email],
                    html=html_content,
                    sender=app.config.get("MAIL_DEFAULT_SENDER"),
                )
                mail.send(msg)
                logger.info(f"Email sent to {to_email}: {subject}")
                return True
            except Exception as e:
                failure = NotificationFailure(f"Failed to send email to {to_email}: {e}")
                logger.error(str(failure), extra={"subject": subject})
                return False

    @classmethod
    def send_email(cls, to_email, subject, html_content):
        """Send on a daemon thread, or inline when NOTIFICATIONS_ASYNC is off."""
        app = current_app._get_current_object()

        if not app.config.get("NOTIFICATIONS_ASYNC", True):
            return cls._deliver(app, to_email, subject, html_content)

        thread = threading.Thread(
            target=cls._deliver,
            args=(app, to_email, subject, html_content),
            name="payment-email",
        )
        thread.daemon = True
        thread.start()
        return None

    @classmethod
    def notify_payment_confirmed(cls, order_type, recipient_email, details):
        """
        Send the pickup or delivery "payment received" email.

        ``details`` carries customer_name, order_id, amount, payment_method,
        items and, for pickups, pickup_date and pickup_branch.
        """
        if not recipient_email:
            logger.info(
                "Payment confirmation email skipped: no recipient",
                extra={"order_id": details.get("order_id")},
            )
            return None

        try:
            store = cls.store_details()
            if OrderType.coerce(order_type) == OrderType.PICKUP:
                subject, html = EmailTemplates.pickup_payment_received(
                    store,
                    customer_name=details.get("customer_name"),
                    order_id=details.get("order_id"),
                    amount=details.get("amount"),
                    items=details.get("items") or [],
                    payment_method=details.get("payment_method"),
                    pickup_date=details.get("pickup_date"),
                    pickup_branch=details.get("pickup_branch"),
                )
            else:
                subject, html = EmailTemplates.delivery_payment_received(
                    store,
                    customer_name=details.get("customer_name"),
                    order_id=details.get("order_id"),
                    amount=details.get("amount"),
                    items=details.get("items") or [],
                    payment_method=details.get("payment_method"),
                )
        except Exception as e:
            logger.error(f"[Payment Confirmation] Email rendering failed: {e}")
            return False

        return cls.send_email(recipient_email, subject, html)
