"""Configuration management for the user sync API."""

import os
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def _get_env_file_path() -> str:
    """Get the path to the .env file.

    Checks for ENV_FILE environment variable first, then defaults to
    .env in the API project directory (apps/api/.env).
    """
    env_file = os.getenv("ENV_FILE")
    if env_file:
        return env_file

    # apps/api/src/usersync_api/config.py -> apps/api/
    api_dir = Path(__file__).parent.parent.parent
    return str(api_dir / ".env")


class Settings(BaseSettings):
    """Application settings from environment variables."""

    # Application
    app_name: str = "usersync"
    app_version: str = "0.1.0"
    environment: str = "development"
    log_level: str = "info"

    # API
    api_host: str = "0.0.0.0"
    api_port: int = Field(3000, validation_alias="PORT")

    # UI
    ui_url: str = "http://localhost:5173"

    # Clerk
    clerk_webhook_secret: str | None = None
    clerk_jwt_key: str | None = None
    clerk_authorized_parties: str | None = None
    clerk_clock_skew_seconds: int = 5

    # Azure Cosmos DB
    azure_cosmosdb_endpoint: str | None = None
    azure_cosmosdb_key: str | None = None
    database_name: str = "usersync"
    cosmos_users_container: str = "users"

    model_config = SettingsConfigDict(
        env_file=_get_env_file_path(),
        case_sensitive=False,
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    @property
    def authorized_parties(self) -> list[str]:
        """Allowed ``azp`` origins parsed from CLERK_AUTHORIZED_PARTIES (comma separated)."""
        if not self.clerk_authorized_parties:
            return []
        return [party.strip() for party in self.clerk_authorized_parties.split(",") if party.strip()]


def get_settings() -> Settings:
    """Get application settings."""
    return Settings()
