"""
Central application configuration from environment variables.
Loaded from a .env file in development.
"""

from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigurationError(RuntimeError):
    """A required configuration value is missing."""


class Settings(BaseSettings):
    # Database (NEON_DATABASE_URL wins when both are set)
    DATABASE_URL: Optional[str] = None
    NEON_DATABASE_URL: Optional[str] = None

    # Sessions
    SESSION_COOKIE_NAME: str = "schoolraise.sid"
    SESSION_MAX_AGE_SECONDS: int = 60 * 60 * 24 * 7  # 1 week
    SESSION_COOKIE_SECURE: bool = False
    SESSION_PURGE_INTERVAL_MINUTES: int = 60

    # Fundraisers
    DEFAULT_TICKET_PRICE_CENTS: int = 1000
    CURRENCY_SYMBOL: str = "R"
    PUBLIC_BASE_URL: str = "http://localhost:8000"

    # Query cache used by the dashboard pages
    QUERY_CACHE_TTL_SECONDS: int = 30

    # SMTP, optional copy of notifications by email
    NOTIFICATION_EMAILS_ENABLED: bool = False
    SMTP_HOST: str = "localhost"
    SMTP_PORT: int = 587
    SMTP_USERNAME: str = ""
    SMTP_PASSWORD: str = ""
    SMTP_FROM: str = "noreply@schoolraise.local"
    SMTP_USE_TLS: bool = True

    # Test accounts created by the seed-accounts script
    SEED_PASSWORD: str = "123456"

    # Environment
    ENV: str = "development"

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    @property
    def database_url(self) -> str:
        url = self.NEON_DATABASE_URL or self.DATABASE_URL
        if not url:
            raise ConfigurationError(
                "Database connection URL environment variable is required "
                "(DATABASE_URL or NEON_DATABASE_URL)."
            )
        return url


settings = Settings()
