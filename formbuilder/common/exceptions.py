"""
Application exceptions.

Every error raised on purpose by the repositories and services derives from
BaseError and carries a short machine-readable ``code`` that ends up in API
error bodies.
"""

from typing import Any, Dict, List, Optional


class BaseError(Exception):
    """Root of the application's exception hierarchy."""

    code = "unknown_error"

    def __init__(self, message: str, original_exception: Optional[Exception] = None):
        super().__init__(message)
        self.message = message
        self.original_exception = original_exception


class StorageError(BaseError):
    """The storage backend failed; wraps the driver exception."""

    code = "storage_error"

    def __init__(self, message: str, original_exception: Optional[Exception] = None):
        super().__init__(f"Storage error: {message}", original_exception)


class ValidationError(BaseError):
    """
    Input was rejected before anything was written.

    Attributes:
        errors: Field name to list of problems, returned as ``details``
    """

    code = "validation_error"

    def __init__(self, message: str, errors: Optional[Dict[str, List[str]]] = None):
        super().__init__(message)
        self.errors = errors or {}


class ConfigurationError(BaseError):
    """A setting is missing or unusable."""

    code = "configuration_error"

    def __init__(self, message: str, config_key: Optional[str] = None):
        super().__init__(f"Configuration error: {message}")
        self.config_key = config_key


class NotFoundError(BaseError):
    """No resource matched the given identifier."""

    code = "not_found"

    def __init__(self, resource_type: str, resource_id: Any):
        super().__init__(f"{resource_type} not found")
        self.resource_type = resource_type
        self.resource_id = resource_id


class DuplicateError(BaseError):
    """The identifier chosen for a new resource is already taken."""

    code = "duplicate"

    def __init__(self, resource_type: str, identifier: Any):
        super().__init__(f"Duplicate {resource_type} with identifier {identifier}")
        self.resource_type = resource_type
        self.identifier = identifier
