"""Paged listing of keys and common prefixes under a prefix."""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, Optional

from spaces_tools.core import get_logger, settings
from spaces_tools.objectstorage.clients import BOTO_ERRORS, to_service_error
from spaces_tools.objectstorage.keys import DELIMITER

logger = get_logger(__name__)


@dataclass(frozen=True)
class ObjectListing:
    """Keys and virtual folders found under a prefix.

    Attributes:
        files: Object keys in the order the service returned them
        folders: Common prefixes one level below the listed prefix (shallow
            listings only)
    """

    files: list[str] = field(default_factory=list)
    folders: list[str] = field(default_factory=list)


def iter_listing_pages(
    client,
    bucket: str,
    prefix: str = "",
    recursive: bool = True,
    page_size: Optional[int] = None,
) -> Iterator[Dict[str, Any]]:
    """Yield ``list_objects_v2`` pages until the service reports no more.

    A shallow (non-recursive) listing passes the delimiter, so keys with a
    further ``/`` below the prefix are folded into ``CommonPrefixes``.

    Raises:
        ServiceError: If a listing request fails
    """
    params: Dict[str, Any] = {
        "Bucket": bucket,
        "Prefix": prefix,
        "MaxKeys": page_size or settings.page_size,
    }
    if not recursive:
        params["Delimiter"] = DELIMITER

    pages = 0
    while True:
        try:
            page = client.list_objects_v2(**params)
        except BOTO_ERRORS as e:
            raise to_service_error(e, "list_objects_v2", prefix) from e

        pages += 1
        yield page

        token = page.get("NextContinuationToken")
        if not page.get("IsTruncated") or not token:
            break
        params["ContinuationToken"] = token

    logger.debug("Listing finished", bucket=bucket, prefix=prefix, pages=pages)


def enumerate_keys(
    client,
    bucket: str,
    prefix: str = "",
    recursive: bool = True,
    page_size: Optional[int] = None,
) -> list[str]:
    """Collect every key under ``prefix``, in service order.

    Args:
        client: boto3 S3 client
        bucket: Bucket name
        prefix: Key prefix, empty for the whole bucket
        recursive: Include keys nested below further delimiters
        page_size: Keys requested per page

    Returns:
        Keys in page order, then in-page order
    """
    keys: list[str] = []
    for page in iter_listing_pages(client, bucket, prefix, recursive, page_size):
        keys.extend(obj["Key"] for obj in page.get("Contents", []))
    return keys


def list_prefix(
    client,
    bucket: str,
    prefix: str = "",
    recursive: bool = False,
    page_size: Optional[int] = None,
) -> ObjectListing:
    """List files, and for shallow listings the folders, under a prefix."""
    files: list[str] = []
    folders: list[str] = []

    for page in iter_listing_pages(client, bucket, prefix, recursive, page_size):
        files.extend(obj["Key"] for obj in page.get("Contents", []))
        folders.extend(p["Prefix"] for p in page.get("CommonPrefixes", []))

    logger.info(
        "Objects listed",
        bucket=bucket,
        prefix=prefix,
        recursive=recursive,
        file_count=len(files),
        folder_count=len(folders),
    )
    return ObjectListing(files=files, folders=folders)
