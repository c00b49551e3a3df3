"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

from jobsite_reports.domain.errors import ConfigurationError

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    supervisor_token: str
    minio_endpoint: str = "minio-api.entify.ca"
    minio_bucket: str = "hudson-photos"
    minio_secure: bool = True
    minio_access_key: str | None = None
    minio_secret_key: str | None = None
    photo_fetch_timeout: float = 20.0
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def require_object_store_credentials(
    access_key: str | None, secret_key: str | None
) -> tuple[str, str]:
    """Return the object store credentials or explain how to provide them."""
    if not access_key or not secret_key:
        raise ConfigurationError(
            "MINIO_ACCESS_KEY and MINIO_SECRET_KEY must be set. "
            f"For local development set them in .env.{_ENVIRONMENT}; "
            "for deployments set them as environment variables."
        )
    return access_key, secret_key
