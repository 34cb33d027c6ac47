"""
Application configuration using Pydantic Settings.
All environment variables are loaded here with sensible defaults.
"""
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Environment
    environment: str = "dev"
    log_level: str = "INFO"

    # Hosted S3-compatible storage
    # Hosted storage is used only when the endpoint AND the key pair are set
    storage_endpoint: Optional[str] = None  # e.g., https://<project>.supabase.co/storage/v1/s3
    storage_access_key: Optional[str] = None  # Access key ID
    storage_secret_key: Optional[str] = None  # Secret access key
    storage_region: str = "auto"
    storage_bucket: str = "documents"  # Single fixed collection for all documents
    storage_public_url: Optional[str] = None  # Public bucket base URL, e.g. .../object/public/documents
    storage_signed_url_expiration: int = 3600  # Signed URL lifetime in seconds (1 hour)

    # Local fallback storage
    local_upload_dir: str = "uploads/documents"

    # Upload limits
    max_upload_bytes: int = 50 * 1024 * 1024  # 50MB

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    @property
    def hosted_storage_configured(self) -> bool:
        """True when both the hosted endpoint and its credential are present."""
        return bool(
            self.storage_endpoint
            and self.storage_access_key
            and self.storage_secret_key
        )


# Global settings instance
settings = Settings()
