from storefront.errors.domain import (
    AuthenticationError,
    DomainError,
    InvalidStateTransition,
    NotFoundError,
    NotificationFailure,
    PermissionDenied,
    PersistenceError,
    PropagationFailure,
    ValidationError,
)

__all__ = [
    "AuthenticationError",
    "DomainError",
    "InvalidStateTransition",
    "NotFoundError",
    "NotificationFailure",
    "PermissionDenied",
    "PersistenceError",
    "PropagationFailure",
    "ValidationError",
]
