"""
Custom exceptions for storefront storage.

All stores and the reconciler raise these exceptions
for consistent error handling across backends.
"""


class StorefrontStorageError(Exception):
    """Base exception for all storefront storage errors."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class StorageIOError(StorefrontStorageError):
    """Raised when a local storage I/O operation fails."""

    def __init__(self, operation: str, path: str | None = None, cause: Exception | None = None):
        details = {"operation": operation}
        if path:
            details["path"] = path
        if cause:
            details["cause"] = str(cause)
        message = f"Storage I/O error during {operation}"
        if path:
            message += f": {path}"
        super().__init__(message, details)
        self.operation = operation
        self.path = path
        self.cause = cause


class RemoteStoreError(StorefrontStorageError):
    """Raised when the remote store rejects or fails an operation."""

    def __init__(
        self,
        operation: str,
        entity: str,
        entity_id: str | None = None,
        cause: Exception | None = None,
    ):
        details = {"operation": operation, "entity": entity}
        if entity_id:
            details["entity_id"] = entity_id
        if cause:
            details["cause"] = str(cause)
        message = f"Remote {operation} failed for {entity}"
        if entity_id:
            message += f" {entity_id}"
        if cause:
            message += f": {cause}"
        super().__init__(message, details)
        self.operation = operation
        self.entity = entity
        self.entity_id = entity_id
        self.cause = cause


class StorageConnectionError(StorefrontStorageError):
    """Raised when connection to remote storage fails.

    Note: Named StorageConnectionError to avoid shadowing the builtin ConnectionError.
    """

    def __init__(self, endpoint: str, cause: Exception | None = None):
        details = {"endpoint": endpoint}
        if cause:
            details["cause"] = str(cause)
        super().__init__(f"Connection failed to {endpoint}", details)
        self.endpoint = endpoint
        self.cause = cause


class AuthenticationError(StorefrontStorageError):
    """Raised when authentication to remote storage fails."""

    def __init__(self, endpoint: str, reason: str | None = None):
        details = {"endpoint": endpoint}
        if reason:
            details["reason"] = reason
        super().__init__(f"Authentication failed for {endpoint}", details)
        self.endpoint = endpoint
        self.reason = reason


class SyncError(StorefrontStorageError):
    """Raised when pushing local state to the remote store fails."""

    def __init__(self, message: str, cause: Exception | None = None):
        details: dict = {}
        if cause:
            details["cause"] = str(cause)
        super().__init__(message, details)
        self.cause = cause


class ValidationError(StorefrontStorageError):
    """Raised when data validation fails."""

    def __init__(self, field: str, reason: str, value: str | None = None):
        details = {"field": field, "reason": reason}
        if value is not None:
            details["value"] = value
        super().__init__(f"Validation failed for {field}: {reason}", details)
        self.field = field
        self.reason = reason
        self.value = value


class FeaturedLimitError(ValidationError):
    """Raised when featuring one more product would exceed the limit."""

    def __init__(self, limit: int):
        super().__init__(
            "is_featured",
            f"at most {limit} products can be featured",
        )
        self.limit = limit


class EntityNotFoundError(StorefrontStorageError):
    """Raised when an operation targets an entity that is not in the state."""

    def __init__(self, entity: str, entity_id: str):
        super().__init__(
            f"{entity.capitalize()} not found: {entity_id}",
            {"entity": entity, "entity_id": entity_id},
        )
        self.entity = entity
        self.entity_id = entity_id
