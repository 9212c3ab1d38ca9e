"""
Standardized Error Codes and Client Exceptions

Every failure the resource client can report maps onto one of these classes:
- Machine-readable error codes for programmatic handling
- Human-readable messages suitable for a user-facing notification
- The HTTP status the remote store answered with, when there was one
- Support for error details and parameters
"""

from enum import Enum
from typing import Optional, Any, Dict, List

import httpx


class ErrorCode(str, Enum):
    """
    Machine-readable error codes.

    Categories:
    - VALIDATION_*: Input validation errors (400)
    - AUTH_*: Missing or rejected credentials (401)
    - PERMISSION_*: Authorization errors (403)
    - NOT_FOUND_*: Stale or unknown references (404)
    - CONFLICT_*: Duplicate names and local state conflicts (409)
    - TRANSPORT_*: Network failures, no server answer at all
    - EXTERNAL_*: Server-side failures (502/503)
    """

    # Validation Errors (400)
    VALIDATION_FAILED = "validation_failed"
    VALIDATION_MISSING_FIELD = "missing_required_field"
    VALIDATION_EMPTY_NAME = "empty_name"
    VALIDATION_UNREADABLE_FILE = "unreadable_file"

    # Authentication Errors (401)
    AUTH_REQUIRED = "authentication_required"
    AUTH_ORGANIZATION_REQUIRED = "organization_required"
    AUTH_INVALID_TOKEN = "invalid_auth_token"

    # Authorization Errors (403)
    PERMISSION_DENIED = "permission_denied"

    # Not Found Errors (404)
    NOT_FOUND_RESOURCE = "resource_not_found"
    NOT_FOUND_FOLDER = "folder_not_found"
    NOT_FOUND_FILE = "file_not_found"

    # Conflict Errors (409)
    CONFLICT_RESOURCE_EXISTS = "resource_already_exists"
    CONFLICT_FOLDER_EXISTS = "folder_already_exists"
    CONFLICT_RENAME_IN_PROGRESS = "rename_in_progress"

    # Transport Errors (no response)
    TRANSPORT_UNAVAILABLE = "server_unreachable"
    TRANSPORT_TIMEOUT = "request_timeout"

    # External Service Errors (502/503)
    EXTERNAL_SERVICE_ERROR = "external_service_error"
    EXTERNAL_INVALID_RESPONSE = "invalid_response"


# HTTP Status Code Mapping
ERROR_CODE_STATUS_MAP: Dict[ErrorCode, int] = {
    # Validation (400)
    ErrorCode.VALIDATION_FAILED: httpx.codes.BAD_REQUEST,
    ErrorCode.VALIDATION_MISSING_FIELD: httpx.codes.BAD_REQUEST,
    ErrorCode.VALIDATION_EMPTY_NAME: httpx.codes.BAD_REQUEST,
    ErrorCode.VALIDATION_UNREADABLE_FILE: httpx.codes.BAD_REQUEST,

    # Authentication (401)
    ErrorCode.AUTH_REQUIRED: httpx.codes.UNAUTHORIZED,
    ErrorCode.AUTH_ORGANIZATION_REQUIRED: httpx.codes.UNAUTHORIZED,
    ErrorCode.AUTH_INVALID_TOKEN: httpx.codes.UNAUTHORIZED,

    # Authorization (403)
    ErrorCode.PERMISSION_DENIED: httpx.codes.FORBIDDEN,

    # Not Found (404)
    ErrorCode.NOT_FOUND_RESOURCE: httpx.codes.NOT_FOUND,
    ErrorCode.NOT_FOUND_FOLDER: httpx.codes.NOT_FOUND,
    ErrorCode.NOT_FOUND_FILE: httpx.codes.NOT_FOUND,

    # Conflict (409)
    ErrorCode.CONFLICT_RESOURCE_EXISTS: httpx.codes.CONFLICT,
    ErrorCode.CONFLICT_FOLDER_EXISTS: httpx.codes.CONFLICT,
    ErrorCode.CONFLICT_RENAME_IN_PROGRESS: httpx.codes.CONFLICT,

    # Transport (gateway never answered)
    ErrorCode.TRANSPORT_UNAVAILABLE: httpx.codes.SERVICE_UNAVAILABLE,
    ErrorCode.TRANSPORT_TIMEOUT: httpx.codes.GATEWAY_TIMEOUT,

    # External Service (502)
    ErrorCode.EXTERNAL_SERVICE_ERROR: httpx.codes.BAD_GATEWAY,
    ErrorCode.EXTERNAL_INVALID_RESPONSE: httpx.codes.BAD_GATEWAY,
}


class ResourceError(Exception):
    """
    Base exception for all resource client errors.

    Provides a consistent error structure:
    - code: Machine-readable error code
    - message: Human-readable error message
    - param: Parameter that caused the error (optional)
    - details: Additional error details (optional)
    - status_code: Status answered by the server, or the code's default

    Example:
        raise ResourceError(
            code=ErrorCode.VALIDATION_EMPTY_NAME,
            message="Folder name is required",
            param="name"
        )
    """

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        param: Optional[str] = None,
        details: Optional[List[str]] = None,
        status_code: Optional[int] = None,
    ):
        self.code = code
        self.message = message
        self.param = param
        self.details = details or []
        self.status_code = status_code or ERROR_CODE_STATUS_MAP.get(
            code, httpx.codes.INTERNAL_SERVER_ERROR
        )
        super().__init__(message)

    @property
    def retryable(self) -> bool:
        """Whether retrying the same action may succeed without user input."""
        return False

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for logging and notifications."""
        error_dict = {
            "code": self.code.value,
            "message": self.message,
        }
        if self.param:
            error_dict["param"] = self.param
        if self.details:
            error_dict["details"] = self.details
        return error_dict


# Convenience exception classes for common error types

class ValidationError(ResourceError):
    """Raised when input validation fails, locally or on the server."""

    def __init__(
        self,
        message: str,
        param: Optional[str] = None,
        code: ErrorCode = ErrorCode.VALIDATION_FAILED,
        details: Optional[List[str]] = None,
        status_code: Optional[int] = None,
    ):
        super().__init__(
            code=code, message=message, param=param, details=details, status_code=status_code
        )


class NotFoundError(ResourceError):
    """Raised when the remote store no longer knows a referenced item."""

    def __init__(
        self,
        resource: str,
        identifier: Optional[str] = None,
        code: Optional[ErrorCode] = None,
        message: Optional[str] = None,
    ):
        # Auto-detect error code based on resource type
        if code is None:
            code_map = {
                "folder": ErrorCode.NOT_FOUND_FOLDER,
                "file": ErrorCode.NOT_FOUND_FILE,
            }
            code = code_map.get(resource.lower(), ErrorCode.NOT_FOUND_RESOURCE)

        if message is None:
            message = f"{resource.capitalize()} not found"
            if identifier:
                message = f"{resource.capitalize()} with ID '{identifier}' not found"

        self.identifier = identifier
        super().__init__(code=code, message=message, param=f"{resource.lower()}_id")


class ConflictError(ResourceError):
    """Raised when there's a resource conflict (e.g., duplicate folder name)."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.CONFLICT_RESOURCE_EXISTS,
        param: Optional[str] = None,
    ):
        super().__init__(code=code, message=message, param=param)


class RenameInProgressError(ConflictError):
    """Raised when a second rename of the same entity kind is started."""

    def __init__(self, kind: str, item_id: str):
        self.kind = kind
        self.item_id = item_id
        super().__init__(
            message=f"Another {kind} is already being renamed",
            code=ErrorCode.CONFLICT_RENAME_IN_PROGRESS,
            param=f"{kind}_id",
        )


class AuthenticationError(ResourceError):
    """Raised when credentials or organization context are missing or rejected."""

    def __init__(
        self,
        message: str = "Authentication required. Please log in again.",
        code: ErrorCode = ErrorCode.AUTH_REQUIRED,
    ):
        super().__init__(code=code, message=message)


class AuthorizationError(ResourceError):
    """Raised when the user lacks permission for an action."""

    def __init__(
        self,
        message: str = "Permission denied",
        code: ErrorCode = ErrorCode.PERMISSION_DENIED,
        resource: Optional[str] = None,
    ):
        param = f"{resource}_id" if resource else None
        super().__init__(code=code, message=message, param=param)


class TransportError(ResourceError):
    """Raised when the remote store could not be reached at all."""

    def __init__(
        self,
        message: str = "Cannot connect to the server. Please check if the server is running.",
        code: ErrorCode = ErrorCode.TRANSPORT_UNAVAILABLE,
    ):
        super().__init__(code=code, message=message)

    @property
    def retryable(self) -> bool:
        return True


class ExternalServiceError(ResourceError):
    """Raised when the remote store answers with a server-side failure."""

    def __init__(
        self,
        message: str = "Resource service temporarily unavailable",
        code: ErrorCode = ErrorCode.EXTERNAL_SERVICE_ERROR,
        status_code: Optional[int] = None,
    ):
        super().__init__(code=code, message=message, status_code=status_code)

    @property
    def retryable(self) -> bool:
        return True


class InvalidResponseError(ExternalServiceError):
    """Raised when a response body cannot be understood."""

    def __init__(self, message: str = "Invalid response format from server"):
        super().__init__(message=message, code=ErrorCode.EXTERNAL_INVALID_RESPONSE)

    @property
    def retryable(self) -> bool:
        return False


def error_from_status(status_code: int, message: str, resource: str = "resource") -> ResourceError:
    """Map an HTTP error status and extracted message onto the error taxonomy."""
    if status_code == httpx.codes.UNAUTHORIZED:
        return AuthenticationError(message=message, code=ErrorCode.AUTH_INVALID_TOKEN)
    if status_code == httpx.codes.FORBIDDEN:
        return AuthorizationError(message=message, resource=resource)
    if status_code == httpx.codes.NOT_FOUND:
        return NotFoundError(resource=resource, message=message)
    if status_code == httpx.codes.CONFLICT or (
        status_code == httpx.codes.BAD_REQUEST and "already exists" in message.lower()
    ):
        code = (
            ErrorCode.CONFLICT_FOLDER_EXISTS
            if resource == "folder"
            else ErrorCode.CONFLICT_RESOURCE_EXISTS
        )
        return ConflictError(message=message, code=code, param="name")
    if 400 <= status_code < 500:
        return ValidationError(message=message, status_code=status_code)
    return ExternalServiceError(message=message, status_code=status_code)
