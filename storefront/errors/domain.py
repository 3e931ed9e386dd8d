class DomainError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code = 400
    default_message = "Request could not be processed."

    def __init__(self, message=None, payload=None):
        self.message = message or self.default_message
        self.payload = payload
        super().__init__(self.message)


class ValidationError(DomainError):
    status_code = 400
    default_message = "Invalid request."


class AuthenticationError(DomainError):
    status_code = 401
    default_message = "No token provided or invalid token format"


class PermissionDenied(DomainError):
    status_code = 403
    default_message = "Access denied. Insufficient permissions."


class NotFoundError(DomainError):
    status_code = 404
    default_message = "Resource not found."


class InvalidStateTransition(DomainError):
    status_code = 409
    default_message = "Transaction cannot move to the requested status."


class PersistenceError(DomainError):
    status_code = 500
    default_message = "A database error occurred."

    def __init__(self, message=None, detail=None):
        super().__init__(message)
        self.detail = detail


class PropagationFailure(Exception):
    """Derived order status could not be written. Logged, never surfaced."""


class NotificationFailure(Exception):
    """Email dispatch failed. Logged, never surfaced."""
