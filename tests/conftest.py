"""Test configuration and fixtures for spaces-tools."""

from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
from moto import mock_aws

from spaces_tools.concurrency import CallLimiter
from spaces_tools.objectstorage import SpacesClientConfig, SpacesManager

BUCKET = "test-bucket"


@pytest.fixture
def aws_credentials(monkeypatch):
    """Keep boto3 away from any real credentials."""
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", "us-east-1")


@pytest.fixture
def spaces_config():
    """Client configuration pointed at an endpoint moto intercepts."""
    return SpacesClientConfig(
        endpoint_url="https://s3.amazonaws.com",
        access_key_id="testing",
        secret_access_key="testing",
        bucket=BUCKET,
    )


@pytest.fixture
def manager(aws_credentials, spaces_config):
    """SpacesManager backed by a mocked bucket."""
    with mock_aws():
        spaces = SpacesManager.from_config(spaces_config, CallLimiter(4))
        spaces.client.create_bucket(Bucket=BUCKET)
        yield spaces


@pytest.fixture
def stub_client():
    """MagicMock standing in for a boto3 S3 client."""
    client = MagicMock()
    client.list_objects_v2.return_value = {"IsTruncated": False}
    return client


@pytest.fixture
def stub_manager(stub_client):
    """SpacesManager wired to the stub client."""
    client_manager = SimpleNamespace(client=stub_client, bucket=BUCKET)
    return SpacesManager(client_manager, CallLimiter(2))


@pytest.fixture
def upload_tree(tmp_path):
    """Local folder with two top-level files and one nested file."""
    root = tmp_path / "upload"
    root.mkdir()
    (root / "hello.txt").write_text("hello world")
    (root / "hotdog.png").write_bytes(b"\x89PNG\r\n\x1a\nfake")

    subfolder = root / "subfolder"
    subfolder.mkdir()
    (subfolder / "goodbye.txt").write_text("goodbye")

    return root


def read_object(manager, key):
    """Fetch an object's body from the mocked bucket."""
    return manager.client.get_object(Bucket=BUCKET, Key=key)["Body"].read()
