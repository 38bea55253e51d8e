"""Application settings and configuration.

This module defines all configuration options for the Inventory Relay service.
Settings are loaded from environment variables with sensible defaults.
"""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

_DAY_SECONDS = 24 * 60 * 60


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Settings can be overridden via environment variables or .env files.
    """

    # Application metadata
    app_name: str = Field(default="Inventory Relay", alias="APP_NAME")
    app_version: str = Field(default="1.0.0", alias="APP_VERSION")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Key-value store backing shares, backups and rate-limit windows
    store_backend: Literal["redis", "memory"] = Field(default="redis", alias="STORE_BACKEND")
    redis_url: str = Field(default="redis://localhost:6379", alias="REDIS_URL")
    store_key_prefix: str = Field(default="", alias="STORE_KEY_PREFIX")

    # Share retention, anchored to the snapshot timestamp
    share_retention_days: int = Field(default=90, alias="SHARE_RETENTION_DAYS")
    min_ttl_seconds: int = Field(default=60, alias="MIN_TTL_SECONDS")

    # Expiring share aliases
    alias_min_duration_seconds: int = Field(default=60 * 60, alias="ALIAS_MIN_DURATION_SECONDS")
    alias_max_duration_seconds: int = Field(
        default=30 * _DAY_SECONDS + 23 * 60 * 60,
        alias="ALIAS_MAX_DURATION_SECONDS",
    )
    alias_code_attempts: int = Field(default=10, alias="ALIAS_CODE_ATTEMPTS")

    # Backups
    backup_ttl_days: int = Field(default=365, alias="BACKUP_TTL_DAYS")
    max_backups_per_type: int = Field(default=50, alias="MAX_BACKUPS_PER_TYPE")
    backup_types: list[str] = Field(default=["inventory", "tags"], alias="BACKUP_TYPES")

    # Fixed-window rate limiting (requests per window, per client address)
    rate_limit_enabled: bool = Field(default=True, alias="RATE_LIMIT_ENABLED")
    rate_limit_fail_open: bool = Field(default=True, alias="RATE_LIMIT_FAIL_OPEN")
    rate_limit_window_minutes: int = Field(default=60, alias="RATE_LIMIT_WINDOW_MINUTES")
    rate_limit_create_share: int = Field(default=10, alias="RATE_LIMIT_CREATE_SHARE")
    rate_limit_update_share: int = Field(default=30, alias="RATE_LIMIT_UPDATE_SHARE")
    rate_limit_delete_share: int = Field(default=30, alias="RATE_LIMIT_DELETE_SHARE")
    rate_limit_download_share: int = Field(default=60, alias="RATE_LIMIT_DOWNLOAD_SHARE")
    rate_limit_create_expiring_share: int = Field(
        default=20,
        alias="RATE_LIMIT_CREATE_EXPIRING_SHARE",
    )
    rate_limit_delete_expiring_share: int = Field(
        default=30,
        alias="RATE_LIMIT_DELETE_EXPIRING_SHARE",
    )
    rate_limit_upload_backup: int = Field(default=30, alias="RATE_LIMIT_UPLOAD_BACKUP")
    rate_limit_download_backup: int = Field(default=60, alias="RATE_LIMIT_DOWNLOAD_BACKUP")
    rate_limit_register_backup: int = Field(default=10, alias="RATE_LIMIT_REGISTER_BACKUP")

    # Device attestation (verification itself is not implemented)
    attestation_reject_unverified: bool = Field(
        default=False,
        alias="ATTESTATION_REJECT_UNVERIFIED",
    )

    # Serve the unversioned /api/share routes alongside /api/v1
    legacy_routes_enabled: bool = Field(default=True, alias="LEGACY_ROUTES_ENABLED")

    # CORS configuration for app and web clients
    cors_origins: list[str] = Field(default=["*"], alias="CORS_ORIGINS")
    cors_allow_methods: list[str] = Field(
        default=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        alias="CORS_ALLOW_METHODS",
    )
    cors_allow_headers: list[str] = Field(
        default=["Content-Type", "X-Apple-Assertion", "X-Ownership-Signature"],
        alias="CORS_ALLOW_HEADERS",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        validate_assignment=True,
        extra="ignore",
    )

    @property
    def share_retention_seconds(self) -> int:
        """Return the anchored share retention in seconds."""
        return self.share_retention_days * _DAY_SECONDS

    @property
    def backup_ttl_seconds(self) -> int:
        """Return the TTL applied to backup entries and indexes."""
        return self.backup_ttl_days * _DAY_SECONDS

    @property
    def rate_limits(self) -> dict[str, int]:
        """Return per-endpoint request limits keyed by endpoint name."""
        return {
            "create-share": self.rate_limit_create_share,
            "update-share": self.rate_limit_update_share,
            "delete-share": self.rate_limit_delete_share,
            "download-share": self.rate_limit_download_share,
            "create-expiring-share": self.rate_limit_create_expiring_share,
            "delete-expiring-share": self.rate_limit_delete_expiring_share,
            "upload-backup": self.rate_limit_upload_backup,
            "download-backup": self.rate_limit_download_backup,
            "register-backup": self.rate_limit_register_backup,
        }


settings = Settings()
