"""Folder-oriented tools for DigitalOcean Spaces.

This package wraps the single-object S3 API of DigitalOcean Spaces (or any
S3-compatible store) with operations over whole prefixes: recursive upload
and download, listing, copy, move, delete and metadata edits.

Key Features:
    - Paged listing that follows continuation tokens to the end
    - Prefix-preserving key remapping for copy and move
    - Override/overwrite skips for uploads and downloads
    - Process-wide cap on concurrent operations
    - CLI interface

Recommended Usage:

    >>> from spaces_tools import SpacesManager, ListOptions
    >>> manager = SpacesManager.from_env()  # ENDPOINT, KEY, SECRET, BUCKET
    >>> manager.upload_folder("build/", "site/")
    >>> manager.list_objects("site/", ListOptions(recursive=True)).files
"""

__version__ = "0.1.0"

from .concurrency import CallLimiter
from .core.exceptions import (
    ConfigurationError,
    PathNotFoundError,
    ServiceError,
    SpacesToolsError,
    ValidationError,
)
from .objectstorage import (
    EnvKeys,
    ObjectListing,
    SpacesClientConfig,
    SpacesClientManager,
    SpacesManager,
    enumerate_keys,
    remap_key,
)
from .schemas import DownloadOptions, EditOptions, ListOptions, UploadOptions

__all__ = [
    # Client and operations
    "CallLimiter",
    "EnvKeys",
    "SpacesClientConfig",
    "SpacesClientManager",
    "SpacesManager",
    # Options and results
    "DownloadOptions",
    "EditOptions",
    "ListOptions",
    "ObjectListing",
    "UploadOptions",
    # Key helpers
    "enumerate_keys",
    "remap_key",
    # Errors
    "ConfigurationError",
    "PathNotFoundError",
    "ServiceError",
    "SpacesToolsError",
    "ValidationError",
]
