"""
Application settings configuration for Eventcal.

Centralized settings loaded from environment variables.
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


# Used only when JWT_SECRET_KEY is unset (local development and tests)
DEVELOPMENT_JWT_SECRET = "eventcal-development-secret-change-me-now"


class AppSettings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Environment Variables:
        JWT_SECRET_KEY: Secret key for signing login tokens (>= 32 characters)
        JWT_TOKEN_EXPIRY_HOURS: Login token lifetime in hours (default: 24)
        EVENTCAL_FRONTEND_URL: Browser client origin allowed by CORS
        EVENTCAL_MAX_OCCURRENCES: Upper bound on generated occurrences for
            indefinite series (default: 366)
        RATE_LIMIT_ENABLED: Enable rate limiting on login/register (default: True)
    """

    jwt_secret_key: str = Field(
        default="",
        validation_alias="JWT_SECRET_KEY",
        description="Secret key for signing JWT login tokens. Must be at least 32 bytes."
    )

    jwt_token_expiry_hours: int = Field(
        default=24,
        validation_alias="JWT_TOKEN_EXPIRY_HOURS",
        ge=1,
        le=24 * 30,
    )

    frontend_url: str = Field(
        default="http://localhost:5173",
        validation_alias="EVENTCAL_FRONTEND_URL",
        description="Origin of the browser client (CORS)"
    )

    max_occurrences: int = Field(
        default=366,
        validation_alias="EVENTCAL_MAX_OCCURRENCES",
        ge=1,
        le=5000,
        description="Cap on occurrences generated for an indefinite series"
    )

    rate_limit_enabled: bool = Field(
        default=True,
        validation_alias="RATE_LIMIT_ENABLED",
    )

    class Config:
        env_file = ".env"
        extra = "ignore"

    @field_validator("jwt_secret_key")
    @classmethod
    def validate_jwt_secret_key(cls, v: str) -> str:
        """Validate that JWT secret key is sufficiently long."""
        if v and len(v) < 32:
            raise ValueError("JWT_SECRET_KEY must be at least 32 characters")
        return v

    @property
    def jwt_configured(self) -> bool:
        """Check if a JWT secret was provided explicitly."""
        return bool(self.jwt_secret_key)

    @property
    def effective_jwt_secret(self) -> str:
        """Secret used for signing, falling back to the development secret."""
        return self.jwt_secret_key or DEVELOPMENT_JWT_SECRET

    @property
    def cors_origins(self) -> list[str]:
        """Origins allowed by the CORS middleware."""
        origins = [self.frontend_url, "http://localhost:5173"]
        return list(dict.fromkeys(origins))


@lru_cache()
def get_settings() -> AppSettings:
    """
    Get cached application settings instance.

    Returns:
        AppSettings: Configured application settings from environment
    """
    return AppSettings()
