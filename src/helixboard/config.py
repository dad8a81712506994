"""
Configuration loading for Helixboard.

Environment variables (or a `.env` file) provide the process settings; the
CLI adds the data-source mode and, for cloud mode, the HelixDB URL.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .core.defs import DataSource


DEFAULT_PORT = 8080
DEFAULT_HELIX_PORT = 6969
DEFAULT_SCHEMA_FILE_PATH = "helixdb-cfg/schema.hx"
DEFAULT_QUERIES_FILE_PATH = "helixdb-cfg/queries.hx"


class Settings(BaseSettings):
    """Process settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # HelixDB
    HELIX_API_KEY: Optional[str] = None
    DOCKER_HOST_INTERNAL: str = "localhost"
    HELIX_PORT: int = DEFAULT_HELIX_PORT

    # Local definition files (local-file mode)
    SCHEMA_FILE_PATH: str = DEFAULT_SCHEMA_FILE_PATH
    QUERIES_FILE_PATH: str = DEFAULT_QUERIES_FILE_PATH

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = DEFAULT_PORT
    CORS_ORIGINS: list[str] = ["*"]

    @field_validator("HELIX_API_KEY")
    @classmethod
    def blank_key_is_unset(cls, value: Optional[str]) -> Optional[str]:
        if value is None or not value.strip():
            return None
        return value


@dataclass
class AppConfig:
    """Resolved runtime configuration for one server process."""
    source: DataSource
    settings: Settings = field(default_factory=Settings)
    cloud_url: Optional[str] = None
    helix_port: Optional[int] = None

    def __post_init__(self):
        if self.source is DataSource.CLOUD and not self.cloud_url:
            raise ValueError("Cloud URL is required for cloud mode")

    @property
    def helix_url(self) -> str:
        """Base URL of the HelixDB instance for the selected mode."""
        if self.source is DataSource.CLOUD:
            return self.cloud_url.rstrip("/")
        port = self.helix_port or self.settings.HELIX_PORT
        return f"http://{self.settings.DOCKER_HOST_INTERNAL}:{port}"

    @property
    def api_key(self) -> Optional[str]:
        """API key sent to HelixDB; only used against the cloud endpoint."""
        if self.source is DataSource.CLOUD:
            return self.settings.HELIX_API_KEY
        return None

    @property
    def schema_file_path(self) -> str:
        return self.settings.SCHEMA_FILE_PATH

    @property
    def queries_file_path(self) -> str:
        return self.settings.QUERIES_FILE_PATH
