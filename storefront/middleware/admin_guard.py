from functools import wraps

from flask import g
from flask_jwt_extended import get_jwt, get_jwt_identity, verify_jwt_in_request

from storefront.errors import PermissionDenied
from storefront.security.tokens import ADMIN_ROLES


def admin_required(fn):
    """Allow only staff tokens whose role is admin or super-admin."""

    @wraps(fn)
    def wrapper(*args, **kwargs):
        verify_jwt_in_request()
        claims = get_jwt()

        if claims.get("role") not in ADMIN_ROLES:
            raise PermissionDenied("Access denied. Insufficient permissions.")

        g.account_id = get_jwt_identity()
        g.account_role = claims.get("role")
        return fn(*args, **kwargs)

    return wrapper
