"""Application settings and configuration.

This module defines all configuration options for the Note Stash service.
Settings are loaded from environment variables with sensible defaults.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Settings can be overridden via environment variables or .env files.
    """

    # Application metadata
    app_name: str = Field(default="Note Stash", alias="APP_NAME")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Security and authentication
    secret_key: str = Field(alias="SECRET_KEY")
    jwt_algorithm: str = Field(default="HS256", alias="JWT_ALGORITHM")
    access_token_expire_minutes: int = Field(default=15, alias="ACCESS_TOKEN_EXPIRE_MINUTES")
    refresh_token_expire_minutes: int = Field(
        default=60 * 24 * 7,
        alias="REFRESH_TOKEN_EXPIRE_MINUTES",
    )
    password_hash_rounds: int = Field(default=12, ge=4, le=31, alias="PASSWORD_HASH_ROUNDS")

    # Request throttling (fixed one-minute windows, in-process only)
    rate_limit_requests_per_minute: int = Field(
        default=60,
        ge=1,
        alias="RATE_LIMIT_REQUESTS_PER_MINUTE",
    )
    rate_limit_window_seconds: float = Field(default=60.0, gt=0, alias="RATE_LIMIT_WINDOW_SECONDS")
    rate_limit_max_keys: int = Field(default=10_000, ge=1, alias="RATE_LIMIT_MAX_KEYS")
    trust_forwarded_for: bool = Field(default=True, alias="TRUST_FORWARDED_FOR")

    # Database configuration
    database_url: str = Field(default="sqlite:///./notes.db", alias="DATABASE_URL")
    sql_debug: bool = Field(default=False, alias="SQL_DEBUG")
    auto_create_tables: bool = Field(default=True, alias="AUTO_CREATE_TABLES")

    # Note listing defaults
    notes_default_page_size: int = Field(default=20, alias="NOTES_DEFAULT_PAGE_SIZE")
    notes_max_page_size: int = Field(default=100, alias="NOTES_MAX_PAGE_SIZE")
    notes_latest_default_limit: int = Field(default=1000, alias="NOTES_LATEST_DEFAULT_LIMIT")

    # CORS configuration for web frontend access
    cors_origins: list[str] = Field(default=["*"], alias="CORS_ORIGINS")
    cors_allow_credentials: bool = Field(default=True, alias="CORS_ALLOW_CREDENTIALS")
    cors_allow_methods: list[str] = Field(
        default=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        alias="CORS_ALLOW_METHODS",
    )
    cors_allow_headers: list[str] = Field(default=["*"], alias="CORS_ALLOW_HEADERS")

    model_config = SettingsConfigDict(
        env_file=".env",
        validate_assignment=True,
        extra="ignore",
    )

    @property
    def access_token_ttl_seconds(self) -> int:
        """Return the access token lifetime in seconds."""
        return self.access_token_expire_minutes * 60

    @property
    def refresh_token_ttl_seconds(self) -> int:
        """Return the refresh token lifetime in seconds."""
        return self.refresh_token_expire_minutes * 60


settings = Settings()  # type: ignore[call-arg]
