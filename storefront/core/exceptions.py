class BaseServiceError(Exception):
    """Base exception for all service-related errors."""
    pass

class InvalidationError(BaseServiceError):
    """Base exception for webhook / cache invalidation errors."""
    status_code = 500

class ConfigurationError(InvalidationError):
    """Raised when the webhook secret is not provisioned."""
    status_code = 500

class AuthenticationError(InvalidationError):
    """Raised when the webhook signature is missing or does not match."""
    status_code = 401

class ValidationError(InvalidationError):
    """Raised when the webhook body is malformed or lacks identifying fields."""
    status_code = 400

class PurgeError(InvalidationError):
    """Raised by a cache collaborator when a single path cannot be purged."""

    def __init__(self, path: str, message: str = ""):
        self.path = path
        super().__init__(message or f"Failed to purge {path}")

class ContentStoreError(BaseServiceError):
    """Raised when content store API calls fail."""
    pass

class ContentNotFoundError(ContentStoreError):
    """Raised when a requested document does not exist."""
    pass
