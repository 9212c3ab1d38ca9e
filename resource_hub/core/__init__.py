"""Core utilities and shared components."""
from resource_hub.core.errors import (
    ErrorCode,
    ResourceError,
    ValidationError,
    NotFoundError,
    ConflictError,
    RenameInProgressError,
    AuthenticationError,
    AuthorizationError,
    TransportError,
    ExternalServiceError,
    InvalidResponseError,
)
from resource_hub.core.notifications import (
    Notification,
    NotificationLevel,
    Notifier,
)

__all__ = [
    # Error codes and exceptions
    "ErrorCode",
    "ResourceError",
    "ValidationError",
    "NotFoundError",
    "ConflictError",
    "RenameInProgressError",
    "AuthenticationError",
    "AuthorizationError",
    "TransportError",
    "ExternalServiceError",
    "InvalidResponseError",
    # Notifications
    "Notification",
    "NotificationLevel",
    "Notifier",
]
