"""Core utilities and shared components for spaces-tools."""

from .config import settings
from .exceptions import (
    ConfigurationError,
    PathNotFoundError,
    ServiceError,
    SpacesToolsError,
    ValidationError,
)
from .observability import get_logger, get_tracer

__all__ = [
    "settings",
    "ConfigurationError",
    "PathNotFoundError",
    "ServiceError",
    "SpacesToolsError",
    "ValidationError",
    "get_logger",
    "get_tracer",
]
