"""Application configuration loaded from environment variables."""

from functools import lru_cache
from typing import Literal

from pydantic import SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# HMAC algorithms accepted for signing access tokens (shared-secret trust model).
VALID_JWT_ALGORITHMS = ("HS256", "HS384", "HS512")

# HS256 keys shorter than this are rejected in prod.
MIN_PROD_SECRET_BYTES = 32


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
    LOG_LEVEL: str = "INFO"
    API_V1_PREFIX: str = "/api/v1"
    CORS_ORIGINS: list[str] = ["http://localhost:5173", "http://localhost:5174"]

    # Access tokens. Issuer, audience and secret must match in every service
    # that validates them (catalog, orders).
    JWT_SECRET: SecretStr = SecretStr("please-change-me-in-appsettings-super-secret")
    JWT_ALGORITHM: str = "HS256"
    JWT_ISSUER: str = "amigurumi.identity"
    JWT_AUDIENCE: str = "amigurumi.clients"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    # Passwords. "sha256" reproduces the legacy unsalted digest; "bcrypt" is salted.
    PASSWORD_HASH_SCHEME: Literal["bcrypt", "sha256"] = "bcrypt"
    BCRYPT_ROUNDS: int = 12

    # Refresh tokens tracked per user; 0 means unlimited, 1 means single session.
    MAX_REFRESH_SESSIONS_PER_USER: int = 0

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError("LOG_LEVEL must be one of DEBUG, INFO, WARNING, ERROR, CRITICAL")
        return level

    @field_validator("API_V1_PREFIX")
    @classmethod
    def validate_api_prefix(cls, v: str) -> str:
        v = v.strip().rstrip("/")
        if v and not v.startswith("/"):
            raise ValueError("API_V1_PREFIX must start with '/' (e.g. /api/v1)")
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
        v = v.strip().upper()
        if v not in VALID_JWT_ALGORITHMS:
            raise ValueError(
                f"JWT_ALGORITHM must be one of {', '.join(VALID_JWT_ALGORITHMS)}"
            )
        return v

    @field_validator("JWT_ISSUER", "JWT_AUDIENCE")
    @classmethod
    def validate_issuer_audience(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("JWT_ISSUER and JWT_AUDIENCE must be set and non-empty")
        return v.strip()

    @field_validator("ACCESS_TOKEN_EXPIRE_MINUTES")
    @classmethod
    def validate_access_token_expire_minutes(cls, v: int) -> int:
        if v < 1 or v > 10080:
            raise ValueError(
                "ACCESS_TOKEN_EXPIRE_MINUTES must be between 1 and 10080 (1 min to 7 days)"
            )
        return v

    @field_validator("BCRYPT_ROUNDS")
    @classmethod
    def validate_bcrypt_rounds(cls, v: int) -> int:
        if v < 4 or v > 15:
            raise ValueError("BCRYPT_ROUNDS must be between 4 and 15")
        return v

    @field_validator("MAX_REFRESH_SESSIONS_PER_USER")
    @classmethod
    def validate_max_sessions(cls, v: int) -> int:
        if v < 0:
            raise ValueError("MAX_REFRESH_SESSIONS_PER_USER must be 0 (unlimited) or positive")
        return v

    @model_validator(mode="after")
    def validate_prod_secret(self) -> "Settings":
        secret = self.JWT_SECRET.get_secret_value()
        if self.APP_ENV == "prod" and len(secret.encode("utf-8")) < MIN_PROD_SECRET_BYTES:
            raise ValueError(
                f"JWT_SECRET must be at least {MIN_PROD_SECRET_BYTES} bytes when APP_ENV=prod"
            )
        return self


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance (safe to call from dependencies)."""
    return Settings()


settings = get_settings()
