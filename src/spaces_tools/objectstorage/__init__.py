"""Object storage operations for DigitalOcean Spaces and other S3-compatible services."""

from .clients import EnvKeys, SpacesClientConfig, SpacesClientManager
from .keys import relative_key, remap_key, resolve_upload_key
from .listing import ObjectListing, enumerate_keys, iter_listing_pages
from .operations import SpacesManager, guess_content_type

__all__ = [
    "EnvKeys",
    "ObjectListing",
    "SpacesClientConfig",
    "SpacesClientManager",
    "SpacesManager",
    "enumerate_keys",
    "guess_content_type",
    "iter_listing_pages",
    "relative_key",
    "remap_key",
    "resolve_upload_key",
]
