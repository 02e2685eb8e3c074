"""Application settings and configuration.

This module defines all configuration options for the Niche Communities
service. Settings are loaded from environment variables with sensible defaults.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Settings can be overridden via environment variables or .env files.
    """

    # Application metadata
    app_name: str = Field(default="Niche Communities", alias="APP_NAME")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Security and authentication
    secret_key: str = Field(default="dev-secret-change-me", alias="SECRET_KEY")
    jwt_algorithm: str = Field(default="HS256", alias="JWT_ALGORITHM")
    access_token_expire_minutes: int = Field(
        default=60 * 24 * 7,
        alias="ACCESS_TOKEN_EXPIRE_MINUTES",
    )
    min_password_length: int = Field(default=6, alias="MIN_PASSWORD_LENGTH")

    # Database configuration
    database_url: str = Field(default="sqlite:///./niche.db", alias="DATABASE_URL")
    sql_debug: bool = Field(default=False, alias="SQL_DEBUG")
    auto_create_tables: bool = Field(default=True, alias="AUTO_CREATE_TABLES")

    # Image hosting (Cloudinary-compatible unsigned uploads)
    upload_cloud_name: str = Field(default="demo", alias="UPLOAD_CLOUD_NAME")
    upload_preset: str = Field(default="niche-upload", alias="UPLOAD_PRESET")
    upload_base_url: str = Field(
        default="https://api.cloudinary.com/v1_1",
        alias="UPLOAD_BASE_URL",
    )
    upload_max_bytes: int = Field(default=5 * 1024 * 1024, alias="UPLOAD_MAX_BYTES")
    upload_timeout_seconds: float = Field(default=30.0, alias="UPLOAD_TIMEOUT_SECONDS")

    # Content defaults
    default_community_photo_url: str = Field(
        default="https://via.placeholder.com/150",
        alias="DEFAULT_COMMUNITY_PHOTO_URL",
    )
    notification_snippet_length: int = Field(
        default=100,
        alias="NOTIFICATION_SNIPPET_LENGTH",
    )

    # CORS configuration for web frontend access
    cors_origins: list[str] = Field(default=["*"], alias="CORS_ORIGINS")
    cors_allow_credentials: bool = Field(default=True, alias="CORS_ALLOW_CREDENTIALS")
    cors_allow_methods: list[str] = Field(
        default=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
        alias="CORS_ALLOW_METHODS",
    )
    cors_allow_headers: list[str] = Field(default=["*"], alias="CORS_ALLOW_HEADERS")

    model_config = SettingsConfigDict(
        env_file=".env",
        validate_assignment=True,
        extra="ignore",
    )

    @property
    def upload_url(self) -> str:
        """Return the image upload endpoint for the configured cloud."""
        return f"{self.upload_base_url.rstrip('/')}/{self.upload_cloud_name}/image/upload"

    @property
    def database_url_sync(self) -> str:
        """Return the database URL used by tooling such as Alembic."""
        return self.database_url


settings = Settings()
