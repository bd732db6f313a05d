"""Command-line interface for spaces-tools.

Commands:
    - upload: Upload a file, or a folder recursively
    - download: Download an object, or every object under a prefix
    - list: List files and folders under a prefix
    - rm: Delete objects under a prefix
    - cp: Copy an object or prefix
    - mv: Move an object or prefix
    - edit: Change ACL, headers or metadata of an object or prefix

Credentials are read from the ENDPOINT, KEY, SECRET and BUCKET environment
variables (a .env file in the working directory is honoured).
"""

import os
from typing import Annotated, Optional

import typer

from . import __version__
from .objectstorage import SpacesClientConfig, SpacesManager
from .schemas import DownloadOptions, EditOptions, ListOptions, UploadOptions

app = typer.Typer(
    name="spaces-tools",
    help="Folder-oriented operations for DigitalOcean Spaces.",
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Display version information."""
    if value:
        typer.echo(f"spaces-tools {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        Optional[bool],
        typer.Option("--version", callback=version_callback, help="Show version."),
    ] = None,
) -> None:
    """
    Spaces-Tools: recursive upload, download, copy, move and delete on Spaces.
    """
    pass


BucketOption = Annotated[
    Optional[str],
    typer.Option("--bucket", "-b", help="Bucket to use instead of $BUCKET"),
]

RecursiveOption = Annotated[
    bool,
    typer.Option("--recursive", "-r", help="Include keys below nested folders"),
]


def _create_manager(bucket: Optional[str] = None) -> SpacesManager:
    """Create a manager from the environment, optionally for another bucket."""
    config = SpacesClientConfig.from_env()
    if bucket:
        config = config.with_bucket(bucket)
    return SpacesManager.from_config(config)


def _parse_metadata(pairs: Optional[list[str]]) -> Optional[dict[str, str]]:
    if not pairs:
        return None
    metadata = {}
    for pair in pairs:
        name, sep, value = pair.partition("=")
        if not sep or not name:
            raise typer.BadParameter(f"Metadata must be KEY=VALUE, got: {pair}")
        metadata[name] = value
    return metadata


@app.command("upload")
def upload_cmd(
    local_path: Annotated[str, typer.Argument(help="Local file or folder")],
    remote_path: Annotated[
        str, typer.Argument(help="Destination key, or a prefix ending in '/'")
    ],
    public: Annotated[
        bool, typer.Option("--public", help="Upload with the public-read ACL")
    ] = False,
    override: Annotated[
        bool,
        typer.Option("--override/--no-override", help="Overwrite existing objects"),
    ] = True,
    bucket: BucketOption = None,
) -> None:
    """
    Upload a file, or a folder with everything below it.

    Examples:
        spaces-tools upload report.pdf docs/
        spaces-tools upload ./site/ www/ --public --no-override
    """
    try:
        manager = _create_manager(bucket)
        options = UploadOptions(is_public=public, override=override)

        if os.path.isdir(local_path):
            keys = manager.upload_folder(local_path, remote_path, options)
            typer.echo(f"Uploaded {len(keys)} file(s) to {remote_path}")
        else:
            key = manager.upload_file(local_path, remote_path, options)
            if key:
                typer.echo(f"Uploaded {local_path} to {key}")
            else:
                typer.echo(f"Skipped (exists): {remote_path}")

    except Exception as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


@app.command("download")
def download_cmd(
    remote_path: Annotated[
        str, typer.Argument(help="Object key, or a prefix ending in '/'")
    ],
    local_path: Annotated[
        Optional[str], typer.Argument(help="Local file or folder")
    ] = None,
    overwrite: Annotated[
        bool, typer.Option("--overwrite", help="Replace existing local files")
    ] = False,
    recursive: RecursiveOption = False,
    bucket: BucketOption = None,
) -> None:
    """
    Download an object, or every object under a prefix.

    Examples:
        spaces-tools download docs/report.pdf ./
        spaces-tools download www/ ./mirror/ --overwrite
    """
    try:
        manager = _create_manager(bucket)
        paths = manager.download_object(
            remote_path,
            local_path,
            DownloadOptions(overwrite=overwrite, recursive=recursive),
        )
        typer.echo(f"Downloaded {len(paths)} file(s)")
        for path in paths:
            typer.echo(f"  {path}")

    except Exception as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


@app.command("list")
def list_cmd(
    prefix: Annotated[str, typer.Argument(help="Prefix to list")] = "",
    recursive: RecursiveOption = False,
    bucket: BucketOption = None,
) -> None:
    """
    List files (and, unless recursive, folders) under a prefix.
    """
    try:
        manager = _create_manager(bucket)
        listing = manager.list_objects(prefix, ListOptions(recursive=recursive))

        if not listing.files and not listing.folders:
            typer.echo("No objects found.")
            return
        for folder in listing.folders:
            typer.echo(f"  {folder}")
        for key in listing.files:
            typer.echo(f"  {key}")

    except Exception as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


@app.command("rm")
def remove_cmd(
    prefix: Annotated[str, typer.Argument(help="Key or prefix to delete")],
    recursive: RecursiveOption = False,
    bucket: BucketOption = None,
) -> None:
    """
    Delete every object under a prefix.
    """
    try:
        manager = _create_manager(bucket)
        count = manager.remove_object(prefix, ListOptions(recursive=recursive))
        if count:
            typer.echo(f"Deleted {count} object(s) under {prefix}")
        else:
            typer.echo(f"No objects found under {prefix}")

    except Exception as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


@app.command("cp")
def copy_cmd(
    source: Annotated[str, typer.Argument(help="Source key or prefix")],
    target: Annotated[str, typer.Argument(help="Target key or prefix")],
    recursive: RecursiveOption = False,
    bucket: BucketOption = None,
) -> None:
    """
    Copy an object, or every object under a prefix ending in '/'.
    """
    try:
        manager = _create_manager(bucket)
        keys = manager.copy_object(source, target, ListOptions(recursive=recursive))
        typer.echo(f"Copied {len(keys)} object(s) from {source} to {target}")

    except Exception as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


@app.command("mv")
def move_cmd(
    source: Annotated[str, typer.Argument(help="Source key or prefix")],
    target: Annotated[str, typer.Argument(help="Target key or prefix")],
    recursive: RecursiveOption = False,
    bucket: BucketOption = None,
) -> None:
    """
    Move an object, or every object under a prefix ending in '/'.

    Each object is copied and then deleted; an interrupted move is not
    rolled back.
    """
    try:
        manager = _create_manager(bucket)
        keys = manager.move_object(source, target, ListOptions(recursive=recursive))
        typer.echo(f"Moved {len(keys)} object(s) from {source} to {target}")

    except Exception as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


@app.command("edit")
def edit_cmd(
    path: Annotated[str, typer.Argument(help="Object key, or prefix with --all")],
    acl: Annotated[
        Optional[str], typer.Option("--acl", help="Canned ACL, e.g. public-read")
    ] = None,
    content_type: Annotated[
        Optional[str], typer.Option("--content-type", help="Content-Type header")
    ] = None,
    cache_control: Annotated[
        Optional[str], typer.Option("--cache-control", help="Cache-Control header")
    ] = None,
    ttl: Annotated[
        Optional[int], typer.Option("--ttl", help="Cache max-age in seconds")
    ] = None,
    meta: Annotated[
        Optional[list[str]],
        typer.Option("--meta", help="User metadata KEY=VALUE, repeatable"),
    ] = None,
    all_under: Annotated[
        bool, typer.Option("--all", help="Edit every object under the prefix")
    ] = False,
    bucket: BucketOption = None,
) -> None:
    """
    Change the ACL, headers or metadata of an object or of a whole prefix.

    Examples:
        spaces-tools edit www/index.html --acl public-read
        spaces-tools edit www/assets/ --all --ttl 86400
    """
    try:
        options = EditOptions(
            acl=acl,
            content_type=content_type,
            cache_control=cache_control,
            ttl=ttl,
            metadata=_parse_metadata(meta),
        )
        manager = _create_manager(bucket)

        if all_under:
            keys = manager.edit_objects(path, options)
            typer.echo(f"Edited {len(keys)} object(s) under {path}")
        else:
            manager.edit_object(path, options)
            typer.echo(f"Edited {path}")

    except Exception as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
