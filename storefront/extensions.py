# storefront/extensions.py
"""
Flask extensions initialization module.
Extension objects are created unbound here to avoid circular imports.
"""

import logging

from flask_cors import CORS
from flask_jwt_extended import JWTManager
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_mail import Mail
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()
jwt = JWTManager()
cors = CORS()
migrate = Migrate()
mail = Mail()
limiter = Limiter(key_func=get_remote_address, default_limits=[])

logger = logging.getLogger(__name__)


def init_extensions(app):
    """Initialize all Flask extensions against ``app``."""
    db.init_app(app)
    logger.info("SQLAlchemy initialized")

    migrate.init_app(app, db)
    logger.info("Flask-Migrate initialized")

    jwt.init_app(app)
    logger.info("JWT Manager initialized")

    init_cors(app)

    mail.init_app(app)
    logger.info("Flask-Mail initialized")

    limiter.init_app(app)
    logger.info(
        "Rate limiter initialized",
        extra={"storage": app.config.get("RATELIMIT_STORAGE_URI"), "enabled": app.config.get("RATELIMIT_ENABLED")},
    )

    if app.config.get("ENVIRONMENT") == "development" or app.config.get("CREATE_TABLES_ON_START", False):
        create_tables(app)

    return app


def init_cors(app):
    """Initialize CORS for API routes only."""
    origins = app.config.get("CORS_ORIGINS", [])
    cors.init_app(
        app,
        resources={r"/api/*": {"origins": origins}},
        supports_credentials=True,
        methods=["GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "X-Request-ID"],
        expose_headers=["X-Request-ID"],
        max_age=600,
    )
    logger.info("CORS initialized", extra={"origins": origins})


def create_tables(app):
    """Create all tables. Migrations own the schema outside development."""
    # Models must be imported so they register on the metadata.
    from storefront import models  # noqa: F401

    with app.app_context():
        db.create_all()
    logger.info("Database tables created")
