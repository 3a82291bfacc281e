"""
Application configuration using Pydantic settings.

Configuration is loaded from environment variables (and an optional .env
file). Required values default to empty strings so that every missing
variable can be reported at once by validate_required_fields(), rather than
failing on the first one.

Mock mode swaps R2 for an in-memory store, so the gateway can be run
locally without object storage credentials.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigurationError(Exception):
    """Raised when required configuration is missing at startup."""

    def __init__(self, missing_fields: list[str]) -> None:
        self.missing_fields = missing_fields
        super().__init__(
            "Missing required environment variables: " + ", ".join(missing_fields)
        )


class Settings(BaseSettings):
    """
    Gateway settings loaded from environment variables.

    Field names map to env vars case-insensitively, e.g. r2_bucket_name
    is read from R2_BUCKET_NAME.
    """

    # API Configuration
    api_title: str = "Image Upload Gateway"
    api_version: str = "v1"
    api_key: str = Field(
        default="",
        description="Shared secret expected in the X-API-Key header on every request."
    )

    # R2/S3 Storage Configuration
    r2_bucket_name: str = Field(
        default="",
        description="Bucket that receives uploaded images"
    )
    r2_public_url: str = Field(
        default="",
        description="Public base URL the bucket is served from, e.g. https://pub-xxx.r2.dev"
    )
    r2_access_key: str = Field(
        default="",
        description="R2 access key ID"
    )
    r2_secret_key: str = Field(
        default="",
        description="R2 secret access key"
    )
    r2_account_id: str = Field(
        default="",
        description="Cloudflare account ID, used to build the R2 endpoint"
    )
    r2_endpoint_url: Optional[str] = Field(
        default=None,
        description="Storage endpoint URL. Auto-constructed from account_id if not provided."
    )
    r2_mock_mode: bool = Field(
        default=False,
        description="Use in-memory mock instead of real R2. Enables local dev without object storage."
    )

    # Server
    host: str = Field(default="0.0.0.0", description="Interface to bind")
    port: int = Field(default=8080, description="Port to listen on")
    tls_cert_file: Optional[str] = Field(
        default=None,
        description="TLS certificate path. HTTPS is served only when the key path is also set."
    )
    tls_key_file: Optional[str] = Field(
        default=None,
        description="TLS private key path"
    )

    # Upload limits
    max_images_per_upload: int = Field(
        default=5,
        description="Maximum number of files accepted in one upload request"
    )
    max_upload_size_mb: int = Field(
        default=50,
        description="Maximum combined size of the files in one request, in MiB"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def r2_endpoint(self) -> str:
        """
        Storage endpoint URL.

        R2 endpoints follow the pattern: https://{account_id}.r2.cloudflarestorage.com
        """
        if self.r2_endpoint_url:
            return self.r2_endpoint_url
        return f"https://{self.r2_account_id}.r2.cloudflarestorage.com"

    @property
    def public_base_url(self) -> str:
        """Public base URL without a trailing slash."""
        return self.r2_public_url.rstrip("/")

    @property
    def max_upload_size_bytes(self) -> int:
        return self.max_upload_size_mb * 1024 * 1024

    @property
    def tls_enabled(self) -> bool:
        return bool(self.tls_cert_file and self.tls_key_file)

    def validate_required_fields(self) -> list[str]:
        """
        Return the env var names of required settings that are not set.

        R2 credentials are only required outside of mock mode.
        """
        missing = []

        if not self.r2_bucket_name:
            missing.append("R2_BUCKET_NAME")
        if not self.r2_public_url:
            missing.append("R2_PUBLIC_URL")

        if not self.r2_mock_mode:
            if not self.r2_access_key:
                missing.append("R2_ACCESS_KEY")
            if not self.r2_secret_key:
                missing.append("R2_SECRET_KEY")
            if not self.r2_account_id and not self.r2_endpoint_url:
                missing.append("R2_ACCOUNT_ID")

        if not self.api_key:
            missing.append("API_KEY")

        return missing


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Settings are loaded once per process. For tests, construct Settings
    directly or call get_settings.cache_clear() to reset.
    """
    return Settings()
