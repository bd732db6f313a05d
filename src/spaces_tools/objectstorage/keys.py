"""Object key helpers.

Keys are flat strings; "folders" only exist as ``/``-terminated prefixes.
These helpers map keys between prefixes without ever producing a doubled or
missing separator at the join.
"""

import os
import posixpath

from spaces_tools.core.exceptions import ValidationError

DELIMITER = "/"


def is_folder(path: str) -> bool:
    """A remote path ending in the delimiter names a virtual folder."""
    return path.endswith(DELIMITER)


def as_folder(prefix: str) -> str:
    """Append the delimiter to a non-empty prefix that lacks one."""
    if prefix and not prefix.endswith(DELIMITER):
        return prefix + DELIMITER
    return prefix


def remap_key(source_prefix: str, key: str, target_prefix: str) -> str:
    """Compute where ``key`` lands when ``source_prefix`` is moved to ``target_prefix``.

    When the source is a folder prefix the part of the key below it is kept
    verbatim under the target folder, so distinct keys stay distinct. A
    source without a trailing delimiter names a single object and the target
    is used as the destination key as-is.

    Examples:
        >>> remap_key("a/", "a/b/c.txt", "x")
        'x/b/c.txt'
        >>> remap_key("a/", "a/b/c.txt", "x/")
        'x/b/c.txt'
        >>> remap_key("a/c.txt", "a/c.txt", "x/d.txt")
        'x/d.txt'

    Raises:
        ValidationError: If ``key`` is not under ``source_prefix``
    """
    if not key.startswith(source_prefix):
        raise ValidationError(f"Key '{key}' is not under prefix '{source_prefix}'")

    if not is_folder(source_prefix):
        return target_prefix

    return as_folder(target_prefix) + key[len(source_prefix) :]


def relative_key(prefix: str, key: str) -> str:
    """Return the part of ``key`` below ``prefix``, without a leading delimiter."""
    if not key.startswith(prefix):
        raise ValidationError(f"Key '{key}' is not under prefix '{prefix}'")
    return key[len(prefix) :].lstrip(DELIMITER)


def join_key(prefix: str, name: str) -> str:
    """Join a name under a remote prefix."""
    if not prefix:
        return name
    return posixpath.join(prefix, name)


def resolve_upload_key(local_path: str, remote_path: str) -> str:
    """Full key for an upload; a folder target gets the local file name appended."""
    if is_folder(remote_path):
        return remote_path + os.path.basename(local_path)
    return remote_path
