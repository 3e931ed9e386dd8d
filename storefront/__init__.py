"""
Flask application factory for the storefront payments service.
Fails fast on configuration errors.
"""

import logging

import sentry_sdk
from flask import Flask
from sentry_sdk.integrations.flask import FlaskIntegration

from storefront.config import ConfigurationError, get_config
from storefront.error_handlers import register_error_handlers
from storefront.extensions import init_extensions
from storefront.health import health_bp
from storefront.logging_config import setup_logging
from storefront.middleware.request_id import init_request_id_middleware
from storefront.routes import register_blueprints

logger = logging.getLogger(__name__)

__all__ = ["create_app", "ConfigurationError"]


def setup_sentry(app):
    """Initialize Sentry error tracking (production only)"""
    sentry_dsn = app.config.get("SENTRY_DSN")

    if sentry_dsn and app.config.get("ENVIRONMENT") == "production":
        sentry_sdk.init(
            dsn=sentry_dsn,
            integrations=[FlaskIntegration()],
            traces_sample_rate=0.1,
            environment="production",
            release=app.config.get("APP_VERSION", "1.0.0"),
            send_default_pii=False,
        )
        logger.info("Sentry error tracking initialized")


def create_app(config_name=None):
    """
    Build the application for ``config_name`` (development, testing,
    production), defaulting to the APP_ENV environment variable.

    Raises:
        ConfigurationError: unknown environment or missing production settings.
    """
    config_class = get_config(config_name)

    app = Flask(__name__)
    app.config.from_object(config_class)

    # Request id must be assigned before the access log hook runs.
    init_request_id_middleware(app)
    setup_logging(app)
    setup_sentry(app)

    init_extensions(app)

    # Registers the JWT error callbacks on the shared manager.
    from storefront import security  # noqa: F401

    register_error_handlers(app)
    app.register_blueprint(health_bp)
    register_blueprints(app)

    logger.info(
        "Application created",
        extra={"environment": app.config.get("ENVIRONMENT"), "version": app.config.get("APP_VERSION")},
    )
    return app
