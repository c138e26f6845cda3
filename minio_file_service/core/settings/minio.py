"""MinIO object storage configuration settings.

Environment variables use MINIO_ prefix.
Example: MINIO_ENDPOINT="http://localhost:9000"
         MINIO_BUCKET="medusa-media"

The endpoint may omit its scheme, in which case HTTPS is assumed.
"""

from __future__ import annotations

from typing import Any

from pydantic import Field, SecretStr, computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_BUCKET = "medusa-media"


class MinioSettings(BaseSettings):
    """MinIO file provider settings.

    Environment variables use MINIO_ prefix.
    Example: MINIO_ACCESS_KEY=minioadmin
    """

    # ──────────────────────────────────────────────────────────────
    # Provider options
    # ──────────────────────────────────────────────────────────────

    endpoint: str | None = Field(
        default=None,
        description="Internal MinIO endpoint, with or without scheme (https assumed)",
    )

    access_key: SecretStr | None = Field(
        default=None,
        description="MinIO access key",
    )

    secret_key: SecretStr | None = Field(
        default=None,
        description="MinIO secret key",
    )

    bucket: str = Field(
        default=DEFAULT_BUCKET,
        min_length=3,
        max_length=63,
        description="Bucket holding uploaded files",
    )

    public_endpoint: str | None = Field(
        default=None,
        description="Public base URL for file links (defaults to the internal endpoint)",
    )

    # ──────────────────────────────────────────────────────────────
    # Client configuration
    # ──────────────────────────────────────────────────────────────

    region: str = Field(
        default="us-east-1",
        description="Region used for request signing",
    )

    verify_ssl: bool = Field(
        default=True,
        description="Verify SSL certificates (set False for self-signed certs)",
    )

    max_retries: int = Field(
        default=3,
        ge=0,
        le=10,
        description="Maximum retry attempts performed by botocore",
    )

    retry_mode: str = Field(
        default="standard",
        description="botocore retry mode: standard, adaptive, or legacy",
    )

    timeout: int = Field(
        default=30,
        ge=1,
        le=300,
        description="Connect/read timeout in seconds",
    )

    max_pool_connections: int = Field(
        default=10,
        ge=1,
        le=200,
        description="Maximum number of connections in the connection pool",
    )

    # ──────────────────────────────────────────────────────────────
    # URL / streaming configuration
    # ──────────────────────────────────────────────────────────────

    download_url_expiry_seconds: int = Field(
        default=24 * 60 * 60,
        ge=60,
        le=604800,  # 7 days max
        description="Presigned download URL expiration in seconds (default 24 hours)",
    )

    upload_url_expiry_seconds: int = Field(
        default=15 * 60,
        ge=60,
        le=604800,
        description="Presigned upload URL expiration in seconds (default 15 minutes)",
    )

    stream_chunk_size: int = Field(
        default=1024 * 1024,  # 1MB
        ge=65536,
        le=104857600,
        description="Chunk size in bytes for streamed downloads",
    )

    # ──────────────────────────────────────────────────────────────
    # Lifecycle configuration
    # ──────────────────────────────────────────────────────────────

    startup_require_storage: bool = Field(
        default=False,
        description="Fail application startup if the bucket cannot be initialized",
    )

    @field_validator("retry_mode")
    @classmethod
    def _validate_retry_mode(cls, value: str) -> str:
        """Validate retry_mode is one of the allowed values."""
        allowed_modes = {"standard", "adaptive", "legacy"}
        if value not in allowed_modes:
            raise ValueError(f"retry_mode must be one of {allowed_modes}, got {value}")
        return value

    @field_validator("public_endpoint")
    @classmethod
    def _strip_trailing_slash(cls, value: str | None) -> str | None:
        return value.rstrip("/") if value else value

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_configured(self) -> bool:
        """Check if endpoint and both credentials are present."""
        return bool(self.endpoint and self.access_key and self.secret_key)

    def to_provider_options(self) -> dict[str, Any]:
        """Get the option mapping accepted by the file provider.

        Credentials are unwrapped; never log the returned mapping.
        """
        return {
            "endpoint": self.endpoint,
            "access_key": self.access_key.get_secret_value() if self.access_key else None,
            "secret_key": self.secret_key.get_secret_value() if self.secret_key else None,
            "bucket": self.bucket,
            "public_endpoint": self.public_endpoint,
        }

    model_config = SettingsConfigDict(
        env_prefix="MINIO_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        populate_by_name=True,
        extra="ignore",
        env_ignore_empty=True,
    )
