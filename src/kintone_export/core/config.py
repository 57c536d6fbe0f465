"""
Configuration management using Pydantic Settings.

``Settings`` loads credentials and defaults from environment variables and
.env files. ``ExportConfig`` is the immutable per-run configuration that is
passed explicitly through the export pipeline.
"""

from pathlib import Path
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from kintone_export.core.exceptions import UnsupportedFormatError
from kintone_export.services.encoding import resolve_encoding

DEFAULT_DOMAIN_SUFFIX = ".cybozu.com"
EXPORT_FORMATS = ("csv", "json")


def _split_field_codes(v: Any) -> Any:
    """Parse field codes from a comma-separated string."""
    if isinstance(v, str):
        codes = [code.strip() for code in v.split(",")]
        return tuple(code for code in codes if code) or None
    return v


class Settings(BaseSettings):
    """Settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="KINTONE_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        case_sensitive=False,
        populate_by_name=True,
        extra="ignore",
    )

    # ==========================================================================
    # Logging
    # ==========================================================================
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL", description="Logging level")
    json_logs: bool = Field(default=False, validation_alias="JSON_LOGS", description="Emit JSON logs")

    # ==========================================================================
    # kintone Connection
    # ==========================================================================
    domain: str = Field(default="", description="kintone domain, e.g. example.cybozu.com")
    app_id: int | None = Field(default=None, description="App ID to export")
    guest_space_id: int | None = Field(default=None, description="Guest space ID")
    api_token: str | None = Field(default=None, description="API token")
    login: str | None = Field(default=None, description="Login name")
    password: str | None = Field(default=None, description="Login password")
    basic_auth_user: str | None = Field(default=None, description="Basic authentication user")
    basic_auth_password: str | None = Field(
        default=None, description="Basic authentication password"
    )
    timeout_seconds: float = Field(default=60.0, description="HTTP timeout in seconds")

    @field_validator("domain", mode="before")
    @classmethod
    def normalize_domain(cls, v: Any) -> Any:
        """Append the default cybozu.com suffix to bare subdomains."""
        if isinstance(v, str):
            v = v.strip()
            if v and "." not in v:
                return v + DEFAULT_DOMAIN_SUFFIX
        return v

    @property
    def has_credentials(self) -> bool:
        """Check if an API token or a login is configured."""
        return bool(self.api_token or (self.domain and self.login))

    # ==========================================================================
    # Export Defaults
    # ==========================================================================
    query: str = Field(default="", description="kintone query string")
    fields: Annotated[tuple[str, ...] | None, NoDecode] = Field(
        default=None, description="Field codes to export"
    )
    output_format: str = Field(default="csv", description="Output format: csv or json")
    encoding: str = Field(default="utf-8", description="Output character encoding")
    attachment_dir: Path | None = Field(default=None, description="Attachment download directory")

    @field_validator("fields", mode="before")
    @classmethod
    def parse_fields(cls, v: Any) -> Any:
        """Parse field codes from comma-separated string."""
        return _split_field_codes(v)

    # ==========================================================================
    # Object Storage (S3)
    # ==========================================================================
    s3_access_key: str | None = Field(
        default=None, validation_alias="KINTONE_TO_S3_ACCESSKEY", description="S3 access key"
    )
    s3_secret_key: str | None = Field(
        default=None, validation_alias="KINTONE_TO_S3_SECRET", description="S3 secret key"
    )
    s3_region: str | None = Field(
        default=None, validation_alias="KINTONE_TO_S3_REGION", description="S3 region"
    )
    s3_bucket_name: str | None = Field(
        default=None, validation_alias="KINTONE_TO_S3_BUCKETNAME", description="S3 bucket name"
    )
    s3_object_key: str = Field(
        default="golang-kintone-to-s3.csv",
        validation_alias="KINTONE_TO_S3_KEY",
        description="Object key for the uploaded export",
    )
    s3_endpoint_url: str | None = Field(
        default=None,
        validation_alias="KINTONE_TO_S3_ENDPOINT_URL",
        description="S3-compatible endpoint URL",
    )

    @property
    def upload_enabled(self) -> bool:
        """Check if the finished export should be uploaded to S3."""
        return bool(self.s3_bucket_name)


class ExportConfig(BaseModel):
    """Immutable configuration for a single export run."""

    model_config = ConfigDict(frozen=True)

    app_id: int = Field(..., gt=0, description="App ID to export")
    query: str = Field(default="", description="kintone query string")
    fields: tuple[str, ...] | None = Field(
        default=None, description="Field codes to export; None exports every field"
    )
    output_format: str = Field(default="csv", description="Output format: csv or json")
    encoding: str = Field(default="utf-8", description="Output character encoding")
    attachment_dir: Path | None = Field(
        default=None, description="Directory receiving attachment downloads"
    )

    @field_validator("fields", mode="before")
    @classmethod
    def parse_fields(cls, v: Any) -> Any:
        """Accept comma-separated strings and lists."""
        v = _split_field_codes(v)
        if isinstance(v, list):
            return tuple(code.strip() for code in v if code.strip()) or None
        return v

    @field_validator("output_format", mode="before")
    @classmethod
    def validate_output_format(cls, v: Any) -> Any:
        """Only CSV and JSON are supported."""
        if isinstance(v, str):
            v = v.strip().lower()
            if v not in EXPORT_FORMATS:
                raise UnsupportedFormatError(v)
        return v

    @field_validator("encoding", mode="before")
    @classmethod
    def validate_encoding(cls, v: Any) -> Any:
        """Reject encodings the transcoder cannot produce."""
        if isinstance(v, str):
            v = v.strip().lower()
            resolve_encoding(v)
        return v

    @property
    def downloads_attachments(self) -> bool:
        """Check if attachments should be downloaded."""
        return self.attachment_dir is not None

    @classmethod
    def from_settings(cls, settings: Settings) -> "ExportConfig":
        """Create run config from loaded settings."""
        return cls(
            app_id=settings.app_id or 0,
            query=settings.query,
            fields=settings.fields,
            output_format=settings.output_format,
            encoding=settings.encoding,
            attachment_dir=settings.attachment_dir,
        )
