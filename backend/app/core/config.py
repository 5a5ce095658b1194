"""Application configuration via pydantic settings."""

from functools import lru_cache
from pathlib import Path

from typing import Any

from pydantic import Field
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_FALLBACK_ORIGIN = "http://localhost:5173"


class Settings(BaseSettings):
    """Typed application configuration for the EquiManage backend."""

    app_env: str = Field("local", alias="APP_ENV")
    app_name: str = "EquiManage API"
    api_v1_prefix: str = "/api/v1"

    # async driver for the app, sync driver for alembic
    database_url: str = Field(..., alias="DATABASE_URL")
    sync_database_url: str | None = Field(default=None, alias="SYNC_DATABASE_URL")

    secret_key: str = Field(..., alias="SECRET_KEY")
    jwt_secret_key: str = Field(default="", alias="JWT_SECRET_KEY")
    jwt_algorithm: str = Field("HS256", alias="JWT_ALGORITHM")
    access_token_expire_minutes: int = Field(60, alias="ACCESS_TOKEN_EXPIRE_MINUTES")

    redis_url: str | None = Field(default=None, alias="REDIS_URL")
    rate_limit_default: str = Field("100/minute", alias="RATE_LIMIT_DEFAULT")
    rate_limit_login: str = Field("10/minute", alias="RATE_LIMIT_LOGIN")

    smtp_host: str | None = Field(default=None, alias="SMTP_HOST")
    smtp_port: int | None = Field(default=None, alias="SMTP_PORT")
    smtp_username: str | None = Field(default=None, alias="SMTP_USER")
    smtp_password: str | None = Field(default=None, alias="SMTP_PASSWORD")
    smtp_from: str = Field("noreply@equimanage.local", alias="SMTP_FROM")

    # daily reminder job
    cron_secret: str | None = Field(default=None, alias="CRON_SECRET")
    due_check_concurrency: int = Field(1, ge=1, le=32, alias="DUE_CHECK_CONCURRENCY")

    cors_allow_origins: list[str] = Field(
        default_factory=lambda: [_FALLBACK_ORIGIN, "http://localhost:3000"],
        alias="CORS_ALLOW_ORIGINS",
    )
    cors_allowlist: list[str] = Field(default_factory=list, alias="CORS_ALLOWLIST")
    cors_allow_credentials: bool = Field(default=False, alias="CORS_ALLOW_CREDENTIALS")

    model_config = SettingsConfigDict(
        env_file=Path(__file__).resolve().parents[3] / ".env",
        case_sensitive=False,
    )

    def model_post_init(self, __context: Any) -> None:
        """Fall back to the generic secret for signing tokens."""

        if not self.jwt_secret_key:
            object.__setattr__(self, "jwt_secret_key", self.secret_key)

    @field_validator("cors_allow_origins", "cors_allowlist", mode="before")
    @classmethod
    def _split_origins(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value

    @property
    def smtp_configured(self) -> bool:
        return bool(self.smtp_host and self.smtp_port)

    @property
    def cron_enabled(self) -> bool:
        return bool(self.cron_secret)

    @property
    def allowed_origins(self) -> list[str]:
        """Explicit allowlist first, then the general origin list."""
        for candidates in (self.cors_allowlist, self.cors_allow_origins):
            origins = [origin for origin in candidates if origin]
            if origins:
                return origins
        return [_FALLBACK_ORIGIN]


@lru_cache
def get_settings() -> Settings:
    """Return a cached settings instance."""
    return Settings()  # type: ignore[call-arg]
