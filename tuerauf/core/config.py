"""Application configuration loaded from environment variables."""

from functools import lru_cache
from typing import Literal

from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Allowed URL schemes for DATABASE_URL (module-level so validators can use it).
VALID_DATABASE_URL_PREFIXES = (
    "sqlite://",
    "postgresql://",
    "postgresql+psycopg2://",
    "postgres://",
    "postgres+psycopg2://",
)


class Settings(BaseSettings):
    """Validated application settings from env and optional .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    APP_ENV: Literal["dev", "prod"] = "dev"
    DEBUG: bool = False
    API_V1_PREFIX: str = "/api/v1"

    # SQLite is enough for a handful of installations; Postgres works as well.
    DATABASE_URL: str = "sqlite:///./tuerauf.db"

    # Size of the PIN table on the door controller; serial ids are 0..MAX_SERIAL_ID-1.
    MAX_SERIAL_ID: int = 16
    # How often a registration is re-run after a uniqueness conflict in the store.
    REGISTRATION_MAX_ATTEMPTS: int = 3

    # Admin notification mail (optional; notifications are always logged)
    MAIL_ENABLED: bool = False
    SMTP_HOST: str | None = None
    SMTP_PORT: int = 465
    SMTP_USER: str | None = None
    SMTP_PASSWORD: SecretStr | None = None
    SMTP_FROM: str | None = None
    ADMIN_MAIL_TO: str | None = None
    MAIL_SUBJECT_PREFIX: str = "[tuerauf] "
    SMTP_TIMEOUT_SEC: float = 10.0

    @field_validator("DATABASE_URL")
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        v = (v or "").strip()
        if not v:
            raise ValueError("DATABASE_URL must be set and non-empty")
        if not any(v.startswith(prefix) for prefix in VALID_DATABASE_URL_PREFIXES):
            raise ValueError(
                "DATABASE_URL must be a SQLite or PostgreSQL URL (e.g. sqlite:///./tuerauf.db or postgresql://)"
            )
        return v

    @field_validator("MAX_SERIAL_ID")
    @classmethod
    def validate_max_serial_id(cls, v: int) -> int:
        if v < 1 or v > 1024:
            raise ValueError("MAX_SERIAL_ID must be between 1 and 1024")
        return v

    @field_validator("REGISTRATION_MAX_ATTEMPTS")
    @classmethod
    def validate_registration_max_attempts(cls, v: int) -> int:
        if v < 1 or v > 10:
            raise ValueError("REGISTRATION_MAX_ATTEMPTS must be between 1 and 10")
        return v

    @field_validator("SMTP_HOST", "SMTP_USER", "SMTP_FROM", "ADMIN_MAIL_TO")
    @classmethod
    def blank_to_none(cls, v: str | None) -> str | None:
        if v is None or not v.strip():
            return None
        return v.strip()

    @field_validator("SMTP_PORT")
    @classmethod
    def validate_smtp_port(cls, v: int) -> int:
        if v < 1 or v > 65535:
            raise ValueError("SMTP_PORT must be between 1 and 65535")
        return v

    @field_validator("SMTP_TIMEOUT_SEC")
    @classmethod
    def validate_smtp_timeout(cls, v: float) -> float:
        if v <= 0 or v > 120:
            raise ValueError("SMTP_TIMEOUT_SEC must be greater than 0 and at most 120")
        return v


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance (safe to call from dependencies)."""
    return Settings()


settings = get_settings()
