"""Application configuration using pydantic-settings."""
import re
from datetime import timedelta
from functools import lru_cache
from urllib.parse import urlparse

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEV_ACCESS_SECRET = "dev-access-secret"
DEV_REFRESH_SECRET = "dev-refresh-secret"

PRODUCTION_ENVIRONMENTS = {"prod", "production"}

_TTL_PATTERN = re.compile(r"^\s*(\d+)\s*([smhd]?)\s*$")
_TTL_UNITS = {"": 1, "s": 1, "m": 60, "h": 3600, "d": 86400}


def parse_ttl(value: str | int | timedelta) -> timedelta:
    """
    Parse a token lifetime such as '15m', '30d', '12h', '45s' or '3600'.

    Plain integers are seconds.

    Raises:
        ValueError: If the value is not a positive duration.
    """
    if isinstance(value, timedelta):
        seconds = int(value.total_seconds())
    elif isinstance(value, int):
        seconds = value
    else:
        match = _TTL_PATTERN.match(value)
        if match is None:
            raise ValueError(f"Invalid duration: '{value}' (use e.g. '15m', '30d', '3600')")
        seconds = int(match.group(1)) * _TTL_UNITS[match.group(2)]
    if seconds <= 0:
        raise ValueError("Duration must be positive")
    return timedelta(seconds=seconds)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # Database
    database_url: str = Field(
        default="sqlite+aiosqlite:///./promptvault.db",
        validation_alias="DATABASE_URL",
    )
    db_pool_size: int = Field(default=5, validation_alias="DB_POOL_SIZE")
    db_max_overflow: int = Field(default=10, validation_alias="DB_MAX_OVERFLOW")

    app_env: str = Field(default="dev", validation_alias="APP_ENV")

    # Days a soft-deleted entry stays in the trash before a purge may remove it
    retention_days: int = Field(default=30, ge=1, validation_alias="RETENTION_DAYS")

    # CORS - comma-separated list of allowed origins (stored as string, parsed via property)
    cors_origins_str: str = Field(
        default="http://localhost:5173",
        validation_alias="CORS_ORIGIN",
    )

    # JWT
    jwt_access_secret: str = Field(default=DEV_ACCESS_SECRET, validation_alias="JWT_ACCESS_SECRET")
    jwt_refresh_secret: str = Field(
        default=DEV_REFRESH_SECRET, validation_alias="JWT_REFRESH_SECRET",
    )
    access_token_ttl: timedelta = Field(
        default=timedelta(minutes=15), validation_alias="ACCESS_TOKEN_TTL",
    )
    refresh_token_ttl: timedelta = Field(
        default=timedelta(days=30), validation_alias="REFRESH_TOKEN_TTL",
    )

    # First-run admin account (created only when the users table is empty)
    bootstrap_admin_email: str = Field(
        default="admin@example.com", validation_alias="BOOTSTRAP_ADMIN_EMAIL",
    )
    bootstrap_admin_password: str = Field(
        default="admin1234", validation_alias="BOOTSTRAP_ADMIN_PASSWORD",
    )

    @field_validator("access_token_ttl", "refresh_token_ttl", mode="before")
    @classmethod
    def parse_token_ttl(cls, v: str | int | timedelta) -> timedelta:
        """Accept '15m'-style durations in addition to seconds."""
        return parse_ttl(v)

    @model_validator(mode="after")
    def validate_production_secrets(self) -> "Settings":
        """
        Prevent the built-in development JWT secrets from being used in production.

        Anyone reading the source could mint valid tokens with them.
        """
        if self.app_env.lower() not in PRODUCTION_ENVIRONMENTS:
            return self

        if self.jwt_access_secret == DEV_ACCESS_SECRET or (
            self.jwt_refresh_secret == DEV_REFRESH_SECRET
        ):
            raise ValueError(
                "JWT_ACCESS_SECRET and JWT_REFRESH_SECRET must be set when "
                f"APP_ENV is '{self.app_env}'.",
            )
        return self

    @property
    def cors_origins(self) -> list[str]:
        """Parse comma-separated CORS origins string into a list."""
        if not self.cors_origins_str:
            return []
        return [origin.strip() for origin in self.cors_origins_str.split(",") if origin.strip()]

    @property
    def db_type(self) -> str:
        """Database backend family derived from the URL: sqlite, postgres or unknown."""
        scheme = urlparse(self.database_url).scheme.split("+")[0]
        if scheme == "sqlite":
            return "sqlite"
        if scheme in ("postgres", "postgresql"):
            return "postgres"
        return "unknown"

    @property
    def db_path(self) -> str | None:
        """Filesystem path of a SQLite database, None for server databases."""
        if self.db_type != "sqlite":
            return None
        _, _, path = self.database_url.partition(":///")
        return path or None


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
