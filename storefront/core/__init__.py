"""
Core module exports.
"""
from .enums import (
    Locale,
    DocumentType,
    SortOption
)

from .exceptions import (
    BaseServiceError,
    InvalidationError,
    ConfigurationError,
    AuthenticationError,
    ValidationError,
    PurgeError,
    ContentStoreError,
    ContentNotFoundError
)
