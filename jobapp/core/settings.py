from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings.

    Required in production:
      - DATABASE_URL
      - SESSION_COOKIE_SECURE=true when served over HTTPS

    Optional:
      - SQIDS_ALPHABET: custom alphabet for encoded user ids
      - BCRYPT_ROUNDS: bcrypt cost factor (4-31)
    """

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    database_url: str = "sqlite:///./database.sqlite"

    # API prefix (kept constant for reverse-proxy routing)
    api_prefix: str = "/api"

    cors_origins: list[str] = Field(
        default=[
            "http://localhost:3000",
            "http://localhost:5173",
            "http://127.0.0.1:5173",
        ],
        validation_alias="CORS_ORIGINS",
    )

    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

    # Session settings
    session_cookie_name: str = Field(
        default="session_id",
        validation_alias="SESSION_COOKIE_NAME",
    )
    session_max_age_minutes: int = Field(
        default=24 * 60,
        validation_alias="SESSION_MAX_AGE_MINUTES",
        description="Absolute session lifetime in minutes (default 1 day)",
    )
    session_cookie_secure: bool = Field(
        default=False,
        validation_alias="SESSION_COOKIE_SECURE",
        description="Only send the session cookie over HTTPS",
    )
    session_cookie_samesite: str = Field(
        default="lax",
        validation_alias="SESSION_COOKIE_SAMESITE",
    )
    session_cleanup_interval_minutes: int = Field(
        default=60,
        validation_alias="SESSION_CLEANUP_INTERVAL_MINUTES",
        description="Expired session sweep interval; 0 disables the sweep",
    )

    # Password hashing
    bcrypt_rounds: int = Field(
        default=10,
        ge=4,
        le=31,
        validation_alias="BCRYPT_ROUNDS",
    )

    # Encoded user ids
    sqids_alphabet: Optional[str] = Field(
        default=None,
        validation_alias="SQIDS_ALPHABET",
    )
    sqids_min_length: int = Field(
        default=8,
        ge=0,
        le=255,
        validation_alias="SQIDS_MIN_LENGTH",
    )

    # Login rate limiting (per client address)
    login_max_attempts: int = Field(
        default=5,
        ge=1,
        validation_alias="LOGIN_MAX_ATTEMPTS",
    )
    login_window_seconds: int = Field(
        default=60,
        ge=1,
        validation_alias="LOGIN_WINDOW_SECONDS",
    )

    # CV uploads
    cv_max_bytes: int = Field(
        default=5 * 1024 * 1024,
        validation_alias="CV_MAX_BYTES",
    )
    cv_allowed_mime_types: list[str] = Field(
        default=[
            "application/pdf",
            "application/msword",
            "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        ],
        validation_alias="CV_ALLOWED_MIME_TYPES",
    )


settings = Settings()
