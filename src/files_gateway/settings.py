# src/files_gateway/settings.py
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Single source of truth for all gateway settings.

    Configuration precedence:
    1. Environment variables (highest priority)
    2. .env file (if exists)
    3. Default values in this class (lowest priority)

    Usage:
        from files_gateway.settings import Settings
        settings = Settings()
        bucket_name = settings.s3_bucket_name
    """

    # Server
    host: str = Field(
        default="0.0.0.0",
        alias="HOST",
        description="Interface the HTTP server binds to"
    )

    port: int = Field(
        default=5000,
        alias="PORT",
        description="Port the HTTP server listens on"
    )

    # AWS Core Settings
    aws_region: str = Field(
        default="us-east-1",
        alias="AWS_REGION"
    )

    aws_access_key_id: Optional[str] = Field(
        default=None,
        alias="AWS_ACCESS_KEY_ID"
    )

    aws_secret_access_key: Optional[str] = Field(
        default=None,
        alias="AWS_SECRET_ACCESS_KEY"
    )

    aws_endpoint_url: Optional[str] = Field(
        default=None,
        alias="AWS_ENDPOINT_URL",
        description="Alternate S3 endpoint, e.g. a local emulator"
    )

    # S3 Configuration
    s3_bucket_name: str = Field(
        alias="AWS_S3_BUCKET_NAME",
        description="Bucket every object is stored in"
    )

    public_base_url: Optional[str] = Field(
        default=None,
        alias="PUBLIC_BASE_URL",
        description="Base used for descriptor URLs instead of the virtual-hosted S3 URL"
    )

    # Transfer limits
    max_upload_files: int = Field(
        default=10,
        alias="MAX_UPLOAD_FILES",
        ge=1,
        description="Maximum number of files accepted by a single upload request"
    )

    download_chunk_size: int = Field(
        default=64 * 1024,
        alias="DOWNLOAD_CHUNK_SIZE",
        gt=0,
        description="Bytes read from the object body per relayed chunk"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        alias="LOG_LEVEL",
        description="Logging level"
    )

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """Accept lowercase level names from the environment."""
        level = v.upper()
        valid_levels = ["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"]
        if level not in valid_levels:
            raise ValueError(f"Invalid log_level: {v}. Must be one of {valid_levels}")
        return level

    @field_validator("public_base_url")
    @classmethod
    def strip_trailing_slash(cls, v: Optional[str]) -> Optional[str]:
        return v.rstrip("/") if v else v

    def masked(self) -> dict:
        """Settings as a dictionary with credentials hidden, for display."""
        values = self.model_dump()
        for secret in ("aws_access_key_id", "aws_secret_access_key"):
            if values.get(secret):
                values[secret] = "****"
        return values

    model_config = SettingsConfigDict(
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )
