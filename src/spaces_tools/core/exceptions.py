"""Exception hierarchy for spaces-tools."""

from typing import Optional


class SpacesToolsError(Exception):
    """Base exception for all spaces-tools errors."""

    pass


class ConfigurationError(SpacesToolsError):
    """Raised when required configuration is missing."""

    pass


class ValidationError(SpacesToolsError):
    """Raised when validation fails."""

    pass


class PathNotFoundError(SpacesToolsError):
    """Raised when a local path is not found."""

    pass


class ServiceError(SpacesToolsError):
    """Raised when a call to the storage service fails.

    The botocore exception is kept as ``__cause__``.
    """

    def __init__(
        self,
        message: str,
        operation: str,
        key: Optional[str] = None,
        error_code: Optional[str] = None,
    ):
        super().__init__(message)
        self.operation = operation
        self.key = key
        self.error_code = error_code
