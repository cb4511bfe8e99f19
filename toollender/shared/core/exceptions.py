# 📄 File: toollender/shared/core/exceptions.py
# 🧭 Purpose (Layman Explanation):
# Defines the special error types ToolLender uses to say clearly what went wrong,
# like "that tool doesn't exist" or "we can't reach the server right now".
# 🧪 Purpose (Technical Summary):
# Custom exception hierarchy with error codes and structured details for the
# repository layer, remote store adapters, local cache and external services.
# 🔗 Dependencies:
# typing
# 🔄 Connected Modules / Calls From:
# Repositories, remote/local store adapters, storage and identity adapters, services

from typing import Any, Dict, Optional


class ToolLenderException(Exception):
    """
    Base exception class for the ToolLender data layer.
    All custom exceptions should inherit from this class.
    """

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        error_code: Optional[str] = None
    ):
        self.message = message
        self.details = details or {}
        self.error_code = error_code or self.__class__.__name__.upper()
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary format."""
        return {
            "error": {
                "code": self.error_code,
                "message": self.message,
                "details": self.details,
            }
        }


# =============================================================================
# VALIDATION & DATA EXCEPTIONS
# =============================================================================

class ValidationError(ToolLenderException):
    """
    Exception raised when caller-supplied input is invalid.
    Used when a required field is empty or blank.
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        value: Optional[Any] = None,
        constraint: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        if not details:
            details = {}

        if field:
            details["field"] = field
        if value is not None:
            details["value"] = str(value)
        if constraint:
            details["constraint"] = constraint

        super().__init__(
            message=message,
            details=details,
            error_code="VALIDATION_ERROR"
        )


class NotFoundError(ToolLenderException):
    """
    Exception raised when a requested entity is absent after falling
    through the cache and the server.
    """

    def __init__(
        self,
        message: str = "Resource not found",
        resource_type: Optional[str] = None,
        resource_id: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        if not details:
            details = {}

        if resource_type:
            details["resource_type"] = resource_type
        if resource_id:
            details["resource_id"] = resource_id

        super().__init__(
            message=message,
            details=details,
            error_code="NOT_FOUND"
        )


class DecodeError(ToolLenderException):
    """
    Exception raised when a stored document is present but malformed,
    e.g. missing one of the entity's required fields.
    """

    def __init__(
        self,
        message: str = "Malformed document",
        resource_type: Optional[str] = None,
        resource_id: Optional[str] = None,
        missing_fields: Optional[list] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        if not details:
            details = {}

        if resource_type:
            details["resource_type"] = resource_type
        if resource_id:
            details["resource_id"] = resource_id
        if missing_fields:
            details["missing_fields"] = list(missing_fields)

        super().__init__(
            message=message,
            details=details,
            error_code="DECODE_ERROR"
        )


class AlreadyExistsError(ToolLenderException):
    """
    Exception raised when attempting to create a duplicate resource.
    Used for association name uniqueness.
    """

    def __init__(
        self,
        message: str = "Resource already exists",
        resource_type: Optional[str] = None,
        field: Optional[str] = None,
        value: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        if not details:
            details = {}

        if resource_type:
            details["resource_type"] = resource_type
        if field:
            details["field"] = field
        if value:
            details["value"] = value

        super().__init__(
            message=message,
            details=details,
            error_code="ALREADY_EXISTS"
        )


# =============================================================================
# REMOTE STORE EXCEPTIONS
# =============================================================================

class RemoteStoreError(ToolLenderException):
    """
    Exception raised when a remote document store operation fails.
    """

    def __init__(
        self,
        message: str = "Remote store error",
        operation: Optional[str] = None,
        collection: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        error_code: str = "REMOTE_STORE_ERROR"
    ):
        if not details:
            details = {}

        if operation:
            details["operation"] = operation
        if collection:
            details["collection"] = collection

        super().__init__(
            message=message,
            details=details,
            error_code=error_code
        )


class RemoteUnavailableError(RemoteStoreError):
    """
    Exception raised when the remote store cannot be reached.
    Read paths fall back to cached or default data on this error.
    """

    def __init__(
        self,
        message: str = "Remote store unavailable",
        operation: Optional[str] = None,
        collection: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            operation=operation,
            collection=collection,
            details=details,
            error_code="REMOTE_UNAVAILABLE"
        )


class RemoteConflictError(RemoteStoreError):
    """
    Exception raised when the remote store rejects a write because of a
    uniqueness constraint.
    """

    def __init__(
        self,
        message: str = "Remote store conflict",
        operation: Optional[str] = None,
        collection: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            operation=operation,
            collection=collection,
            details=details,
            error_code="REMOTE_CONFLICT"
        )


# =============================================================================
# INFRASTRUCTURE EXCEPTIONS
# =============================================================================

class CacheError(ToolLenderException):
    """
    Exception raised for local cache operation failures.
    Used for unreadable cache directories, Redis connection issues, etc.
    """

    def __init__(
        self,
        message: str = "Cache error",
        operation: Optional[str] = None,
        key: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        if not details:
            details = {}

        if operation:
            details["operation"] = operation
        if key:
            details["key"] = key

        super().__init__(
            message=message,
            details=details,
            error_code="CACHE_ERROR"
        )


class StorageError(ToolLenderException):
    """
    Exception raised for blob storage failures (tool image uploads).
    """

    def __init__(
        self,
        message: str = "File storage error",
        operation: Optional[str] = None,
        storage_path: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        if not details:
            details = {}

        if operation:
            details["operation"] = operation
        if storage_path:
            details["storage_path"] = storage_path

        super().__init__(
            message=message,
            details=details,
            error_code="FILE_STORAGE_ERROR"
        )


class AuthenticationError(ToolLenderException):
    """
    Exception raised for identity provider failures.
    Used when credentials are invalid or no subject is signed in.
    """

    def __init__(
        self,
        message: str = "Authentication failed",
        details: Optional[Dict[str, Any]] = None,
        user_id: Optional[str] = None
    ):
        if not details:
            details = {}
        if user_id:
            details["user_id"] = user_id

        super().__init__(
            message=message,
            details=details,
            error_code="AUTHENTICATION_ERROR"
        )


class ConfigurationError(ToolLenderException):
    """
    Exception raised when the configured backends cannot be built.
    """

    def __init__(
        self,
        message: str = "Invalid configuration",
        setting: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        if not details:
            details = {}
        if setting:
            details["setting"] = setting

        super().__init__(
            message=message,
            details=details,
            error_code="CONFIGURATION_ERROR"
        )


# =============================================================================
# UTILITY FUNCTIONS
# =============================================================================

def is_read_degradable(exception: Exception) -> bool:
    """
    Check whether a single-document read may serve its cached copy or a
    default instead of surfacing the exception. Collection reads fall back
    on every RemoteStoreError.
    """
    return isinstance(exception, RemoteUnavailableError)
