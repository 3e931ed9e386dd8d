import logging

from flask import jsonify
from flask_jwt_extended import create_access_token

from storefront.extensions import jwt

logger = logging.getLogger(__name__)

ADMIN_ROLES = frozenset({"admin", "super-admin"})


def issue_access_token(account_id, role="admin", **claims):
    """Create a bearer token whose identity is the account id and whose claims carry the role."""
    return create_access_token(identity=str(account_id), additional_claims={"role": role, **claims})


def _auth_failure(message, status_code=401):
    return jsonify({"success": False, "message": message}), status_code


@jwt.unauthorized_loader
def missing_token_callback(reason):
    logger.info("Missing bearer token", extra={"reason": reason})
    return _auth_failure("No token provided or invalid token format")


@jwt.invalid_token_loader
def invalid_token_callback(reason):
    logger.warning("Invalid bearer token", extra={"reason": reason})
    return _auth_failure("Invalid or malformed token")


@jwt.expired_token_loader
def expired_token_callback(jwt_header, jwt_payload):
    logger.info("Expired bearer token", extra={"sub": jwt_payload.get("sub")})
    return _auth_failure("Session expired. Please log in again.")
