"""Object storage listing operations."""

from .prefix_contents import (
    ObjectListing,
    enumerate_keys,
    iter_listing_pages,
    list_prefix,
)

__all__ = ["ObjectListing", "enumerate_keys", "iter_listing_pages", "list_prefix"]
