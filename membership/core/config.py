"""Application configuration loaded from environment variables."""

import re
from functools import lru_cache
from typing import Literal

from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from membership.core.passwords import password_policy_violation

# Allowed URL schemes for DATABASE_URL (module-level so validators can use it).
VALID_DATABASE_URL_PREFIXES = (
    "postgresql://",
    "postgresql+psycopg2://",
    "postgres://",
    "postgres+psycopg2://",
    "sqlite://",
    "sqlite+pysqlite://",
)

COUNTRY_CODE_PATTERN = re.compile(r"^\+\d{1,4}$")


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

    # Postgres in prod; SQLite is fine for local dev and tests
    DATABASE_URL: str = "sqlite:///./membership.db"

    # Single key under which the whole member collection is stored as one JSON array
    STORAGE_KEY: str = "trapo_dummy_users"

    # Reserved administrator seeded on every start
    ADMIN_EMAIL: str = "admin@trapo.com"
    ADMIN_FULL_NAME: str = "Default Admin"
    ADMIN_COUNTRY_CODE: str = "+62"
    ADMIN_PHONE_NUMBER: str = "8112233445"
    ADMIN_INITIAL_PASSWORD: SecretStr = SecretStr("Admin123!")

    # What happens when a previously rejected email registers again
    REJECTED_REREGISTRATION: Literal["allow", "block"] = "allow"

    BCRYPT_ROUNDS: int = 12

    # JWT authentication
    JWT_SECRET: SecretStr = SecretStr("change-me-in-production")
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRE_MINUTES: int = 60

    @field_validator("DATABASE_URL")
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("DATABASE_URL must be set and non-empty")
        if not any(v.startswith(prefix) for prefix in VALID_DATABASE_URL_PREFIXES):
            raise ValueError(
                "DATABASE_URL must be a PostgreSQL or SQLite URL "
                "(e.g. postgresql+psycopg2:// or sqlite:///)"
            )
        return v.strip()

    @field_validator("STORAGE_KEY")
    @classmethod
    def validate_storage_key(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("STORAGE_KEY must be set and non-empty")
        if len(v.strip()) > 255:
            raise ValueError("STORAGE_KEY must be at most 255 characters")
        return v.strip()

    @field_validator("ADMIN_EMAIL")
    @classmethod
    def validate_admin_email(cls, v: str) -> str:
        v = v.strip()
        if "@" not in v or v.startswith("@") or v.endswith("@"):
            raise ValueError("ADMIN_EMAIL must be an email address")
        return v

    @field_validator("ADMIN_COUNTRY_CODE")
    @classmethod
    def validate_admin_country_code(cls, v: str) -> str:
        v = v.strip()
        if not COUNTRY_CODE_PATTERN.match(v):
            raise ValueError("ADMIN_COUNTRY_CODE must look like +62")
        return v

    @field_validator("ADMIN_PHONE_NUMBER")
    @classmethod
    def validate_admin_phone_number(cls, v: str) -> str:
        v = "".join(v.split())
        if not v:
            raise ValueError("ADMIN_PHONE_NUMBER must be set and non-empty")
        return v

    @field_validator("ADMIN_INITIAL_PASSWORD")
    @classmethod
    def validate_admin_initial_password(cls, v: SecretStr) -> SecretStr:
        if not v.get_secret_value():
            raise ValueError("ADMIN_INITIAL_PASSWORD must be set and non-empty")
        reason = password_policy_violation(v.get_secret_value())
        if reason:
            raise ValueError(f"ADMIN_INITIAL_PASSWORD: {reason}")
        return v

    @field_validator("BCRYPT_ROUNDS")
    @classmethod
    def validate_bcrypt_rounds(cls, v: int) -> int:
        if v < 4 or v > 16:
            raise ValueError("BCRYPT_ROUNDS must be between 4 and 16")
        return v

    @field_validator("JWT_SECRET")
    @classmethod
    def validate_jwt_secret(cls, v: SecretStr) -> SecretStr:
        if not v.get_secret_value() or not v.get_secret_value().strip():
            raise ValueError("JWT_SECRET must be set and non-empty")
        return v

    @field_validator("JWT_ALGORITHM")
    @classmethod
    def validate_jwt_algorithm(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("JWT_ALGORITHM must be set and non-empty")
        return v.strip()

    @field_validator("JWT_EXPIRE_MINUTES")
    @classmethod
    def validate_jwt_expire_minutes(cls, v: int) -> int:
        if v < 1 or v > 10080:
            raise ValueError(
                "JWT_EXPIRE_MINUTES must be between 1 and 10080 (1 min to 7 days)"
            )
        return v


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance (safe to call from dependencies)."""
    return Settings()


settings = get_settings()
