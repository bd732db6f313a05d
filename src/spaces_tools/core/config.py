"""Configuration management for spaces-tools."""

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    log_level: str = "INFO"
    log_json: bool = True
    otel_enabled: bool = False
    otel_service_name: str = "spaces-tools"
    max_concurrency: int = Field(5, ge=1)
    page_size: int = Field(1000, ge=1, le=1000)

    model_config = {
        "env_prefix": "SPACES_TOOLS_",
        "case_sensitive": False,
    }


settings = Settings()
