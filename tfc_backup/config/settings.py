"""Configuration settings for TFC Backup."""

import shlex
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class PaginationStrategy(str, Enum):
    """How variable set listings are paged."""

    MULTI = "multi"
    SINGLE = "single"


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_parse_none_str="null",
        env_parse_enums=True,
    )

    # Terraform Cloud API Configuration
    atlas_token: SecretStr | None = Field(default=None, description="Terraform Cloud access token")
    organization: str | None = Field(default=None, description="Terraform Cloud organization")
    tfc_api_url: str = Field(default="https://app.terraform.io/api/v2", description="Terraform Cloud API base URL")
    request_timeout: float = Field(default=30.0, gt=0, description="Per-request timeout in seconds")

    # Discovery Configuration
    page_size: int = Field(default=100, ge=1, le=100, description="Variable set page size")
    max_pages: int = Field(default=100, ge=1, description="Maximum number of variable set pages to fetch")
    varset_pagination: PaginationStrategy = Field(
        default=PaginationStrategy.MULTI,
        description="Variable set pagination strategy",
    )
    tfc_ops_path: str = Field(default="tfc-ops", description="tfc-ops executable")
    listing_timeout: float = Field(default=300.0, gt=0, description="Workspace listing timeout in seconds")

    # Export Configuration
    max_workers: int = Field(default=4, ge=1, description="Concurrent fetches during export")

    # Failure Reporting Configuration
    sentry_dsn: SecretStr | None = Field(default=None, description="Sentry DSN; enables sentry-cli alerts")
    sentry_cli_path: str = Field(default="sentry-cli", description="sentry-cli executable")
    alert_timeout: float = Field(default=30.0, gt=0, description="Alert sender timeout in seconds")
    enable_notifications: bool = Field(default=False, description="Enable Apprise notifications")
    apprise_urls: Any = Field(default_factory=list, description="Apprise notification URLs")
    notification_title: str = Field(default="TFC Backup", description="Notification title")

    # Restic Configuration
    source_path: Path = Field(
        default=Path("./tfc-export"),
        validate_default=True,
        description="Staging directory for the export",
    )
    restic_path: str = Field(default="restic", description="restic executable")
    restic_repository: str | None = Field(default=None, description="Restic repository location")
    restic_password: SecretStr | None = Field(default=None, description="Restic repository password")
    restic_host: str | None = Field(default=None, description="Hostname recorded with snapshots")
    restic_tag: str | None = Field(default=None, description="Tag applied to snapshots")
    restic_backup_args: Any = Field(default_factory=list, description="Additional 'restic backup' arguments")
    restic_forget_args: Any = Field(default_factory=list, description="Arguments for 'restic forget --prune'")
    restic_timeout: float = Field(default=3600.0, gt=0, description="Restic command timeout in seconds")
    b2_account_id: str | None = Field(default=None, description="Backblaze keyID")
    b2_account_key: SecretStr | None = Field(default=None, description="Backblaze applicationKey")

    @field_validator("tfc_api_url")
    @classmethod
    def validate_api_url(cls, v: str) -> str:
        """Require an HTTPS base URL without a trailing slash."""
        if not v.startswith("https://"):
            msg = "TFC_API_URL must be an https:// URL"
            raise ValueError(msg)
        return v.rstrip("/")

    @field_validator("source_path")
    @classmethod
    def validate_source_path(cls, v: Path) -> Path:
        """Ensure the staging path is absolute."""
        return v.expanduser().resolve()

    @field_validator("apprise_urls", mode="before")
    @classmethod
    def validate_apprise_urls(cls, v: Any) -> list[str]:
        """Handle comma-separated URLs from environment variables."""
        if isinstance(v, str):
            v_stripped = v.strip()
            if not v_stripped:
                return []

            if v_stripped.startswith("[") and v_stripped.endswith("]"):
                msg = "JSON array format is not supported for APPRISE_URLS. Use comma-separated format: url1,url2,url3"
                raise ValueError(msg)

            urls = []
            for url in v_stripped.split(","):
                cleaned_url = url.strip().strip("\"'")
                if cleaned_url:
                    urls.append(cleaned_url)
            return urls

        if isinstance(v, list):
            return [str(url) for url in v]

        return []

    @field_validator("restic_backup_args", "restic_forget_args", mode="before")
    @classmethod
    def validate_restic_args(cls, v: Any) -> list[str]:
        """Split shell-style argument strings (e.g. "--keep-daily 7 --keep-weekly 5")."""
        if isinstance(v, str):
            return shlex.split(v)
        if isinstance(v, list):
            return [str(arg) for arg in v]
        return []

    def get_client_config(self) -> dict[str, Any]:
        """Get API client configuration."""
        return {
            "base_url": self.tfc_api_url,
            "timeout": self.request_timeout,
        }

    def get_engine_config(self) -> dict[str, Any]:
        """Get restic engine configuration."""
        env: dict[str, str] = {}
        if self.restic_repository:
            env["RESTIC_REPOSITORY"] = self.restic_repository
        if self.restic_password:
            env["RESTIC_PASSWORD"] = self.restic_password.get_secret_value()
        if self.b2_account_id:
            env["B2_ACCOUNT_ID"] = self.b2_account_id
        if self.b2_account_key:
            env["B2_ACCOUNT_KEY"] = self.b2_account_key.get_secret_value()

        return {
            "executable": self.restic_path,
            "env": env,
            "host": self.restic_host,
            "tag": self.restic_tag,
            "backup_args": self.restic_backup_args,
            "forget_args": self.restic_forget_args,
            "timeout": self.restic_timeout,
        }

    def get_notification_config(self) -> dict[str, Any]:
        """Get notification-specific configuration."""
        return {
            "enabled": self.enable_notifications,
            "urls": self.apprise_urls,
            "title": self.notification_title,
        }

    def get_sentry_config(self) -> dict[str, Any]:
        """Get sentry-cli alert configuration."""
        return {
            "enabled": self.sentry_dsn is not None and bool(self.sentry_dsn.get_secret_value()),
            "dsn": self.sentry_dsn.get_secret_value() if self.sentry_dsn else None,
            "executable": self.sentry_cli_path,
            "timeout": self.alert_timeout,
        }

