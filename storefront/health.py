import logging
from datetime import datetime

from flask import Blueprint, current_app, jsonify
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from storefront.extensions import db

health_bp = Blueprint("health", __name__)

logger = logging.getLogger(__name__)


@health_bp.route("/health", methods=["GET"])
def health_check():
    """Liveness plus a database ping"""
    health_status = {
        "status": "healthy",
        "timestamp": datetime.utcnow().isoformat(),
        "environment": current_app.config.get("ENVIRONMENT"),
        "version": current_app.config.get("APP_VERSION", "1.0.0"),
        "service": current_app.config.get("APP_NAME"),
        "checks": {},
    }

    try:
        db.session.execute(text("SELECT 1"))
        health_status["checks"]["database"] = "healthy"
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"Health check database ping failed: {e}")
        health_status["checks"]["database"] = "unhealthy"
        health_status["status"] = "degraded"

    health_status["checks"]["mail"] = "configured" if current_app.config.get("MAIL_USERNAME") else "not configured"

    return jsonify(health_status), 200 if health_status["status"] == "healthy" else 503
