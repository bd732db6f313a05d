"""Folder-oriented operations on a Space.

:class:`SpacesManager` composes the paged enumerator, the key remapper and
single-object boto3 calls into upload, download, list, remove, copy, move and
metadata edit operations over whole prefixes.

Batch operations work one key at a time in listing order and stop at the
first failure. Nothing is rolled back: a failed folder upload keeps the files
already sent, and an interrupted move can leave some keys at both the source
and the destination (each key is copied, then its source deleted).
"""

import mimetypes
import os
import stat
import tempfile
from typing import Optional

from spaces_tools.concurrency import CallLimiter, default_limiter, limited
from spaces_tools.core import get_logger
from spaces_tools.core.exceptions import PathNotFoundError, ValidationError
from spaces_tools.objectstorage.clients import (
    BOTO_ERRORS,
    SpacesClientConfig,
    SpacesClientManager,
    is_not_found,
    to_service_error,
)
from spaces_tools.objectstorage.keys import (
    is_folder,
    join_key,
    relative_key,
    remap_key,
    resolve_upload_key,
)
from spaces_tools.objectstorage.listing import (
    ObjectListing,
    enumerate_keys,
    list_prefix,
)
from spaces_tools.schemas import (
    DownloadOptions,
    EditOptions,
    ListOptions,
    UploadOptions,
)

logger = get_logger(__name__)

DEFAULT_CONTENT_TYPE = "application/octet-stream"
DOWNLOAD_CHUNK_SIZE = 1024 * 1024


def guess_content_type(local_path: str) -> str:
    """Content type from the file extension, ignoring its case."""
    root, ext = os.path.splitext(local_path)
    content_type, _ = mimetypes.guess_type(root + ext.lower())
    return content_type or DEFAULT_CONTENT_TYPE


class SpacesManager:
    """Runs folder-oriented operations against one bucket.

    Example:
        manager = SpacesManager.from_env()
        manager.upload_folder("site/", "www/")
        manager.move_object("www/old/", "www/archive/", ListOptions(recursive=True))
    """

    def __init__(
        self,
        client_manager: SpacesClientManager,
        limiter: Optional[CallLimiter] = None,
    ):
        """Initialize the manager.

        Args:
            client_manager: Client holder for the target bucket
            limiter: Concurrency limiter; the process-wide default when omitted
        """
        self.client_manager = client_manager
        self.limiter = limiter or default_limiter()

    @classmethod
    def from_config(
        cls, config: SpacesClientConfig, limiter: Optional[CallLimiter] = None
    ) -> "SpacesManager":
        return cls(SpacesClientManager(config), limiter)

    @classmethod
    def from_env(cls, limiter: Optional[CallLimiter] = None) -> "SpacesManager":
        """Build a manager from ENDPOINT/KEY/SECRET/BUCKET."""
        return cls.from_config(SpacesClientConfig.from_env(), limiter)

    @property
    def client(self):
        return self.client_manager.client

    @property
    def bucket(self) -> str:
        return self.client_manager.bucket

    # Upload

    def _object_exists(self, key: str) -> bool:
        try:
            self.client.head_object(Bucket=self.bucket, Key=key)
        except BOTO_ERRORS as e:
            if is_not_found(e):
                return False
            raise to_service_error(e, "head_object", key) from e
        return True

    @limited
    def upload_file(
        self,
        local_path: str,
        remote_path: str,
        options: Optional[UploadOptions] = None,
    ) -> Optional[str]:
        """Upload one local file.

        Args:
            local_path: File to upload
            remote_path: Destination key, or a folder prefix ending in ``/``
                under which the file's base name is used
            options: Upload options

        Returns:
            The key written, or None when an existing object was kept

        Raises:
            ServiceError: If the existence probe or the upload fails
            OSError: If the local file cannot be read
        """
        options = options or UploadOptions()
        key = resolve_upload_key(local_path, remote_path)

        if not options.override and self._object_exists(key):
            logger.info("Skipped existing object", key=key)
            return None

        params = {
            "Bucket": self.bucket,
            "Key": key,
            "ContentType": guess_content_type(local_path),
        }
        if options.is_public:
            params["ACL"] = "public-read"

        with open(local_path, "rb") as body:
            try:
                self.client.put_object(Body=body, **params)
            except BOTO_ERRORS as e:
                raise to_service_error(e, "put_object", key) from e

        logger.info("Uploaded file", local_path=local_path, key=key)
        return key

    @limited
    def upload_folder(
        self,
        local_path: str,
        remote_path: str,
        options: Optional[UploadOptions] = None,
    ) -> list[str]:
        """Upload a local directory tree under a remote prefix.

        Subdirectories become nested prefixes. Entries are visited in name
        order and the first failure aborts the walk.

        Returns:
            Keys written, in upload order

        Raises:
            PathNotFoundError: If ``local_path`` is not a directory
        """
        options = options or UploadOptions()
        if not os.path.isdir(local_path):
            raise PathNotFoundError(f"Local folder not found: {local_path}")

        uploaded: list[str] = []
        with os.scandir(local_path) as it:
            entries = sorted(it, key=lambda entry: entry.name)

        for entry in entries:
            remote_entry = join_key(remote_path, entry.name)
            if entry.is_dir():
                uploaded.extend(self.upload_folder(entry.path, remote_entry, options))
            elif entry.is_file():
                key = self.upload_file(entry.path, remote_entry, options)
                if key is not None:
                    uploaded.append(key)

        logger.info(
            "Uploaded folder",
            local_path=local_path,
            prefix=remote_path,
            file_count=len(uploaded),
        )
        return uploaded

    # Listing

    def _keys(self, prefix: str, options: ListOptions) -> list[str]:
        return enumerate_keys(
            self.client,
            self.bucket,
            prefix,
            recursive=options.recursive,
            page_size=options.page_size,
        )

    @limited
    def list_objects(
        self, prefix: str = "", options: Optional[ListOptions] = None
    ) -> ObjectListing:
        """List what lies under a prefix.

        A shallow listing returns the direct child keys as ``files`` and the
        next level of virtual folders as ``folders``. A recursive listing
        returns every key below the prefix as ``files`` and no folders.
        """
        options = options or ListOptions()
        return list_prefix(
            self.client,
            self.bucket,
            prefix,
            recursive=options.recursive,
            page_size=options.page_size,
        )

    # Remove

    def _delete(self, key: str) -> None:
        try:
            self.client.delete_object(Bucket=self.bucket, Key=key)
        except BOTO_ERRORS as e:
            raise to_service_error(e, "delete_object", key) from e
        logger.info("Deleted object", key=key)

    @limited
    def remove_object(
        self, prefix: str = "", options: Optional[ListOptions] = None
    ) -> int:
        """Delete every key under a prefix, one request per key.

        Returns:
            Number of keys deleted; zero when nothing matched
        """
        options = options or ListOptions()
        keys = self._keys(prefix, options)

        if not keys:
            logger.info("No objects found, nothing to delete", prefix=prefix)
            return 0

        for key in keys:
            self._delete(key)

        logger.info("Removed objects", prefix=prefix, object_count=len(keys))
        return len(keys)

    # Copy and move

    def _copy(self, source_key: str, target_key: str) -> None:
        try:
            self.client.copy_object(
                Bucket=self.bucket,
                CopySource={"Bucket": self.bucket, "Key": source_key},
                Key=target_key,
            )
        except BOTO_ERRORS as e:
            raise to_service_error(e, "copy_object", source_key) from e
        logger.info("Copied object", source=source_key, target=target_key)

    def _transfer(
        self, source: str, target: str, options: ListOptions, delete_source: bool
    ) -> list[str]:
        keys = self._keys(source, options)
        if not is_folder(source):
            # A source without a trailing delimiter names exactly one key
            keys = [key for key in keys if key == source]
        if not keys:
            logger.info("No objects found", prefix=source)
            return []

        targets: list[str] = []
        for key in keys:
            target_key = remap_key(source, key, target)
            self._copy(key, target_key)
            if delete_source:
                self._delete(key)
            targets.append(target_key)

        logger.info(
            "Moved objects" if delete_source else "Copied objects",
            source=source,
            target=target,
            object_count=len(targets),
        )
        return targets

    @limited
    def copy_object(
        self, source: str, target: str, options: Optional[ListOptions] = None
    ) -> list[str]:
        """Server-side copy of a key, or of every key under a folder prefix.

        A source ending in ``/`` keeps each key's path below it under
        ``target``; any other source is copied to ``target`` exactly.

        Returns:
            Destination keys, in listing order
        """
        return self._transfer(source, target, options or ListOptions(), False)

    @limited
    def move_object(
        self, source: str, target: str, options: Optional[ListOptions] = None
    ) -> list[str]:
        """Copy like :meth:`copy_object`, deleting each source key after its copy.

        Keys are handled one by one. If the run stops part way, keys already
        processed exist only at the target, the current key may exist at
        both, and the rest only at the source. There is no resume.

        Returns:
            Destination keys, in listing order
        """
        return self._transfer(source, target, options or ListOptions(), True)

    # Download

    def _download_one(self, key: str, target_path: str, overwrite: bool) -> bool:
        try:
            exists = stat.S_ISREG(os.stat(target_path).st_mode)
        except FileNotFoundError:
            exists = False
        if exists and not overwrite:
            logger.info("Skipped existing file", path=target_path)
            return False

        try:
            response = self.client.get_object(Bucket=self.bucket, Key=key)
        except BOTO_ERRORS as e:
            raise to_service_error(e, "get_object", key) from e

        parent = os.path.dirname(target_path)
        if parent:
            os.makedirs(parent, exist_ok=True)

        # Only a complete body is ever moved onto target_path
        tmp = tempfile.NamedTemporaryFile(
            dir=parent or os.curdir, prefix=".download-", suffix=".part", delete=False
        )
        try:
            with tmp:
                for chunk in response["Body"].iter_chunks(DOWNLOAD_CHUNK_SIZE):
                    tmp.write(chunk)
            os.replace(tmp.name, target_path)
        except BOTO_ERRORS as e:
            os.unlink(tmp.name)
            raise to_service_error(e, "get_object", key) from e
        except BaseException:
            os.unlink(tmp.name)
            raise

        logger.info("Downloaded object", key=key, path=target_path)
        return True

    @staticmethod
    def _is_local_dir(path: str) -> bool:
        return path.endswith(("/", os.sep)) or os.path.isdir(path)

    @limited
    def download_object(
        self,
        remote_path: str,
        local_path: Optional[str] = None,
        options: Optional[DownloadOptions] = None,
    ) -> list[str]:
        """Download one object, or every object under a folder prefix.

        Single object: saved under its base name in the working directory
        when ``local_path`` is omitted, inside ``local_path`` when that is a
        directory (or ends with a separator), otherwise at ``local_path``.

        Folder (``remote_path`` ends in ``/`` or ``recursive`` is set): each
        key is saved at its path relative to ``remote_path`` inside
        ``local_path`` (the working directory when omitted). Folder
        placeholder keys are skipped.

        Existing files are kept unless ``overwrite`` is set.

        Returns:
            Local paths written

        Raises:
            ValidationError: If ``remote_path`` is empty
            ServiceError: If listing or fetching fails
            OSError: On local filesystem failures
        """
        options = options or DownloadOptions()
        if not remote_path:
            raise ValidationError("remote_path is required")

        if is_folder(remote_path) or options.recursive:
            local_dir = local_path or os.curdir
            written: list[str] = []
            for key in enumerate_keys(self.client, self.bucket, remote_path):
                if is_folder(key):
                    continue
                rel = relative_key(remote_path, key) or os.path.basename(key)
                dest = os.path.join(local_dir, *rel.split("/"))
                if self._download_one(key, dest, options.overwrite):
                    written.append(dest)
            logger.info(
                "Downloaded folder",
                prefix=remote_path,
                path=local_dir,
                file_count=len(written),
            )
            return written

        file_name = os.path.basename(remote_path)
        if not local_path:
            target_path = file_name
        elif self._is_local_dir(local_path):
            target_path = os.path.join(local_path, file_name)
        else:
            target_path = local_path

        if self._download_one(remote_path, target_path, options.overwrite):
            return [target_path]
        return []

    # Metadata

    @limited
    def edit_object(self, key: str, options: EditOptions) -> None:
        """Change an object's ACL, headers or metadata.

        An ACL-only change uses ``put_object_acl``. Anything else copies the
        object onto itself with ``MetadataDirective=REPLACE``, sending only
        the fields that are set.

        Raises:
            ValidationError: If ``options`` changes nothing
            ServiceError: If the update fails
        """
        if options.acl is None and not options.has_header_changes:
            raise ValidationError("edit_object needs at least one change")

        if options.acl_only:
            try:
                self.client.put_object_acl(
                    Bucket=self.bucket, Key=key, ACL=options.acl
                )
            except BOTO_ERRORS as e:
                raise to_service_error(e, "put_object_acl", key) from e
            logger.info("Changed object ACL", key=key, acl=options.acl)
            return

        params = {
            "Bucket": self.bucket,
            "CopySource": {"Bucket": self.bucket, "Key": key},
            "Key": key,
            "MetadataDirective": "REPLACE",
        }
        if options.acl:
            params["ACL"] = options.acl
        if options.content_type:
            params["ContentType"] = options.content_type
        cache_control = options.resolved_cache_control()
        if cache_control:
            params["CacheControl"] = cache_control
        if options.metadata is not None:
            params["Metadata"] = options.metadata

        try:
            self.client.copy_object(**params)
        except BOTO_ERRORS as e:
            raise to_service_error(e, "copy_object", key) from e
        logger.info("Edited object", key=key)

    @limited
    def edit_objects(self, prefix: str, options: EditOptions) -> list[str]:
        """Apply :meth:`edit_object` to every key under a prefix, in order.

        Returns:
            Keys edited
        """
        keys = enumerate_keys(self.client, self.bucket, prefix)
        for key in keys:
            self.edit_object(key, options)

        logger.info("Edited objects", prefix=prefix, object_count=len(keys))
        return keys
