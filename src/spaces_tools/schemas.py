"""Option models for spaces-tools operations.

Each operation takes one of these models instead of a loose set of keyword
arguments. Every field documents its default and its effect.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class UploadOptions(BaseModel):
    """Options for ``upload_file`` and ``upload_folder``."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    is_public: bool = Field(
        default=False, description="Upload with the public-read ACL"
    )
    override: bool = Field(
        default=True,
        description="Overwrite existing objects; when false, existing keys are skipped",
    )


class ListOptions(BaseModel):
    """Options for listing, removing, copying and moving under a prefix."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    recursive: bool = Field(
        default=False,
        description="Include keys below nested folders, not just direct children",
    )
    page_size: Optional[int] = Field(
        default=None,
        ge=1,
        le=1000,
        description="Keys per listing request, defaults to the configured page size",
    )


class DownloadOptions(BaseModel):
    """Options for ``download_object``."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    overwrite: bool = Field(
        default=False,
        description="Replace existing local files; when false they are skipped",
    )
    recursive: bool = Field(
        default=False,
        description="Download every key under the remote path as a folder",
    )


class EditOptions(BaseModel):
    """Header, ACL and metadata changes for ``edit_object`` and ``edit_objects``.

    Only the fields that are set are sent. An ACL on its own is applied with
    the lightweight ACL call; anything else rewrites the object's headers via
    a self-copy.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    acl: Optional[str] = Field(
        default=None,
        min_length=1,
        description="Canned ACL, e.g. 'private' or 'public-read'",
    )
    content_type: Optional[str] = Field(
        default=None, min_length=1, description="Content-Type"
    )
    cache_control: Optional[str] = Field(
        default=None, min_length=1, description="Cache-Control, takes precedence over ttl"
    )
    ttl: Optional[int] = Field(
        default=None, ge=0, description="Seconds; sent as Cache-Control max-age"
    )
    metadata: Optional[dict[str, str]] = Field(
        default=None, description="User metadata, replaces the existing set"
    )

    @property
    def acl_only(self) -> bool:
        return self.acl is not None and not self.has_header_changes

    @property
    def has_header_changes(self) -> bool:
        return (
            self.content_type is not None
            or self.cache_control is not None
            or self.ttl is not None
            or self.metadata is not None
        )

    def resolved_cache_control(self) -> Optional[str]:
        if self.cache_control:
            return self.cache_control
        if self.ttl is not None:
            return f"max-age={self.ttl}"
        return None
