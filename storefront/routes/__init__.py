import logging

from storefront.routes.payments import payments_bp

logger = logging.getLogger(__name__)


def register_blueprints(app):
    """Register all API blueprints"""
    app.register_blueprint(payments_bp)
    logger.info("Blueprints registered", extra={"blueprints": [payments_bp.name]})
