"""Spaces client management."""

from .s3_client import (
    BOTO_ERRORS,
    EnvKeys,
    SpacesClientConfig,
    SpacesClientManager,
    is_not_found,
    to_service_error,
)

__all__ = [
    "BOTO_ERRORS",
    "EnvKeys",
    "SpacesClientConfig",
    "SpacesClientManager",
    "is_not_found",
    "to_service_error",
]
