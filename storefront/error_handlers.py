# storefront/error_handlers.py
import logging
import traceback

from flask import jsonify, request
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException

from storefront.errors import DomainError, PersistenceError
from storefront.extensions import db

logger = logging.getLogger(__name__)


def is_development(app):
    return app.config.get("ENVIRONMENT") == "development" or app.config.get("DEBUG", False)


def error_envelope(message, status_code, error=None, **extra):
    """Uniform failure envelope: ``success`` is always false, ``error`` only in development."""
    body = {"success": False, "message": message, **extra}
    if error is not None:
        body["error"] = error
    return jsonify(body), status_code


def register_error_handlers(app):
    """Register all error handlers for the application"""

    @app.errorhandler(DomainError)
    def handle_domain_error(error):
        if isinstance(error, PersistenceError):
            logger.error(f"Persistence error: {error.message} - Path: {request.path}", extra={"detail": error.detail})
            detail = error.detail if is_development(app) else None
            return error_envelope(error.message, error.status_code, error=detail)

        logger.info(f"{error.__class__.__name__}: {error.message} - Path: {request.path}")
        return error_envelope(error.message, error.status_code, **(error.payload or {}))

    @app.errorhandler(SQLAlchemyError)
    def handle_database_error(error):
        db.session.rollback()
        logger.error(f"Database error: {error} - Path: {request.path}")
        logger.error(traceback.format_exc())
        detail = str(error) if is_development(app) else None
        return error_envelope("A database error occurred.", 500, error=detail)

    @app.errorhandler(HTTPException)
    def handle_http_exception(error):
        """
        Handles known HTTP errors (404, 405, 429, etc.)
        """
        if error.code == 404:
            logger.info(f"Not found: {request.path}")
        else:
            logger.warning(f"{error.name}: {error.description} - Path: {request.path}")
        return error_envelope(error.description or error.name, error.code)

    @app.errorhandler(Exception)
    def handle_exception(error):
        """
        Handles all unexpected server errors.
        Stack traces are only exposed in development.
        """
        db.session.rollback()
        logger.error(f"Unhandled exception: {error} - Path: {request.path}")
        logger.error(traceback.format_exc())

        detail = str(error) if is_development(app) else None
        return error_envelope("Something went wrong. Please try again later.", 500, error=detail)
