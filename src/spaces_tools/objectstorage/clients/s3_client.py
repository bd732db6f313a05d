"""Spaces client configuration and management.

This module provides configuration and lazy client creation for DigitalOcean
Spaces, or any other S3-compatible service reachable through boto3.

Configuration is normally read from the process environment (and a ``.env``
file, when one is found) under four variables:

    ENDPOINT  host of the Spaces region, e.g. ``nyc3.digitaloceanspaces.com``
    KEY       access key ID
    SECRET    secret access key
    BUCKET    name of the Space to operate on

The variable names can be remapped with :class:`EnvKeys`, which lets one
process talk to several Spaces configured side by side.
"""

import os
from typing import Mapping, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator

from spaces_tools.core import get_logger
from spaces_tools.core.exceptions import ConfigurationError, ServiceError

logger = get_logger(__name__)

NOT_FOUND_CODES = frozenset({"404", "NotFound", "NoSuchKey"})

# Everything a boto3 call can raise on transport or service failure
BOTO_ERRORS = (ClientError, BotoCoreError)


class EnvKeys(BaseModel):
    """Names of the environment variables holding Spaces credentials."""

    model_config = ConfigDict(frozen=True)

    endpoint: str = "ENDPOINT"
    key: str = "KEY"
    secret: str = "SECRET"
    bucket: str = "BUCKET"


class SpacesClientConfig(BaseModel):
    """Configuration for a Spaces client connection.

    Example:
        config = SpacesClientConfig(
            endpoint_url="nyc3.digitaloceanspaces.com",
            access_key_id="DO00EXAMPLE",
            secret_access_key="secret",
            bucket="my-space",
        )

        # or, from ENDPOINT/KEY/SECRET/BUCKET
        config = SpacesClientConfig.from_env()
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    endpoint_url: str = Field(..., description="Spaces endpoint host or URL")
    access_key_id: str = Field(..., description="Spaces access key ID")
    secret_access_key: str = Field(..., description="Spaces secret access key")
    bucket: str = Field(..., description="Bucket (Space) name")
    region_name: str = Field(
        "us-east-1", description="Region name, required by the SDK but unused"
    )

    @field_validator("endpoint_url")
    @classmethod
    def _add_scheme(cls, value: str) -> str:
        if "://" not in value:
            return f"https://{value}"
        return value

    @classmethod
    def from_env(
        cls,
        env_keys: Optional[EnvKeys] = None,
        environ: Optional[Mapping[str, str]] = None,
        load_env_file: bool = True,
    ) -> "SpacesClientConfig":
        """Build a configuration from environment variables.

        Args:
            env_keys: Variable names to read, defaults to ENDPOINT/KEY/SECRET/BUCKET
            environ: Mapping to read from instead of ``os.environ``
            load_env_file: Load a ``.env`` file found from the working directory
                first (existing variables win)

        Returns:
            Validated client configuration

        Raises:
            ConfigurationError: If any of the four variables is missing or empty
        """
        env_keys = env_keys or EnvKeys()

        if environ is None:
            if load_env_file:
                env_path = find_dotenv(usecwd=True)
                if env_path:
                    load_dotenv(dotenv_path=env_path, override=False)
            environ = os.environ

        values = {}
        for field, variable in (
            ("endpoint_url", env_keys.endpoint),
            ("access_key_id", env_keys.key),
            ("secret_access_key", env_keys.secret),
            ("bucket", env_keys.bucket),
        ):
            value = environ.get(variable)
            if not value:
                raise ConfigurationError(
                    f"Missing {variable} in environment variables."
                )
            values[field] = value

        return cls(**values)

    def with_bucket(self, bucket: str) -> "SpacesClientConfig":
        """Return a copy of this configuration targeting another bucket."""
        return self.model_copy(update={"bucket": bucket})


class SpacesClientManager:
    """Owns the boto3 client for one Spaces configuration."""

    def __init__(self, config: SpacesClientConfig):
        """Initialize Spaces client manager.

        Args:
            config: Spaces client configuration
        """
        self.config = config
        self._client = None
        logger.info(
            "Spaces client manager initialized",
            endpoint=config.endpoint_url,
            bucket=config.bucket,
        )

    @property
    def bucket(self) -> str:
        return self.config.bucket

    @property
    def client(self):
        """Get or create the S3 client instance."""
        if self._client is None:
            self._client = self._create_client()
        return self._client

    def _create_client(self):
        """Create boto3 S3 client with the configured settings."""
        client = boto3.client(
            "s3",
            region_name=self.config.region_name,
            endpoint_url=self.config.endpoint_url,
            aws_access_key_id=self.config.access_key_id,
            aws_secret_access_key=self.config.secret_access_key,
        )
        logger.info("S3 client created", endpoint=self.config.endpoint_url)
        return client


def _error_code(error: Exception) -> Optional[str]:
    if isinstance(error, ClientError):
        return error.response.get("Error", {}).get("Code")
    return None


def is_not_found(error: Exception) -> bool:
    """Tell whether a botocore error means the object does not exist."""
    return _error_code(error) in NOT_FOUND_CODES


def to_service_error(
    error: Exception, operation: str, key: Optional[str] = None
) -> ServiceError:
    """Wrap a botocore error in a ServiceError, logging it.

    The caller raises the result ``from error`` to keep the original.
    """
    code = _error_code(error)
    target = f" for '{key}'" if key else ""
    error_msg = f"{operation} failed{target}: {error}"
    logger.error(error_msg, operation=operation, key=key, error_code=code)
    return ServiceError(error_msg, operation=operation, key=key, error_code=code)
