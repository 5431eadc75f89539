"""Application configuration."""
from functools import lru_cache
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings."""

    # App
    app_env: str = "development"
    app_host: str = "0.0.0.0"
    app_port: int = 8000
    app_debug: bool = True
    log_level: str = "DEBUG"

    # Database - required, read from DATABASE_URL
    database_url: str = Field(
        ...,
        description="Database connection URL (required)",
    )
    db_pool_size: int = Field(
        default=20,
        description="DB connection pool size (ignored for SQLite)",
    )
    db_max_overflow: int = Field(
        default=10,
        description="Max overflow connections (ignored for SQLite)",
    )

    # JWT - tokens are issued by the identity provider, only verified here
    jwt_secret_key: str = Field(
        ...,
        description="JWT secret key (required, minimum 32 characters)",
    )
    jwt_algorithm: str = "HS256"
    jwt_access_token_expire_minutes: int = 30

    # CORS
    cors_origins: str = "http://localhost:3000"

    # Daily login rewards
    app_timezone: str = Field(
        default="UTC",
        description="IANA timezone that defines the calendar day for claims",
    )
    daily_login_jackpot_costume_id: str | None = Field(
        default=None,
        description="Costume granted on day 7 of the reward cycle (optional)",
    )

    @field_validator("jwt_secret_key")
    @classmethod
    def validate_jwt_secret_key(cls, v: str) -> str:
        """Validate JWT secret key length."""
        if len(v) < 32:
            raise ValueError(
                "jwt_secret_key must be at least 32 characters long"
            )

        weak_patterns = [
            "change-this",
            "secret",
            "password",
            "12345",
            "qwerty",
        ]
        lower_v = v.lower()
        for pattern in weak_patterns:
            if pattern in lower_v:
                raise ValueError(
                    f"jwt_secret_key contains weak pattern '{pattern}'. "
                    "Use a strong, random secret key."
                )

        return v

    @field_validator("app_timezone")
    @classmethod
    def validate_app_timezone(cls, v: str) -> str:
        """Reject timezone names zoneinfo cannot resolve."""
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError(f"app_timezone '{v}' is not a known IANA timezone")
        return v

    @model_validator(mode="after")
    def validate_production_settings(self) -> "Settings":
        """Validate settings for production environment."""
        if self.app_env == "production":
            if self.app_debug:
                raise ValueError(
                    "app_debug must be False in production environment"
                )

            origins = [o.strip() for o in self.cors_origins.split(",")]
            if "*" in origins:
                raise ValueError(
                    "CORS wildcard '*' is not allowed in production environment. "
                    "Specify explicit allowed origins."
                )

        return self

    @property
    def cors_origin_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    model_config = {
        "env_file": ".env",
        "extra": "ignore",
    }


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
