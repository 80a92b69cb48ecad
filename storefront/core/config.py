# storefront/core/config.py
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Centralized application settings loaded from environment.

    Every external integration is optional. A missing value disables the
    feature that needs it (the endpoint answers 503) instead of failing
    startup.

    Database:
      - DATABASE_URL (Supabase Postgres connection string). Falls back to a
        local SQLite file for development.

    Supabase SDK:
      - SUPABASE_URL
      - SUPABASE_KEY (anon key)
      - SUPABASE_SERVICE_ROLE_KEY (storage uploads, RPC calls)
      - SUPABASE_WEBHOOK_SECRET (database webhook Authorization header)

    Identity provider (Clerk):
      - CLERK_JWT_KEY (PEM public key or shared secret for session tokens)
      - CLERK_WEBHOOK_SECRET (svix signing secret, "whsec_...")
      - CLERK_PUBLISHABLE_KEY / CLERK_SECRET_KEY / CLERK_DOMAIN
        (only reported by the diagnostics endpoints)
    """

    PROJECT_NAME: str = "Lade Studio Storefront API"
    API_V1_STR: str = "/api/v1"
    ENVIRONMENT: str = "development"
    APP_URL: str = "http://localhost:3000"
    CORS_ORIGINS: list[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    # Database
    DATABASE_URL: str | None = None
    SQLITE_FALLBACK_URL: str = "sqlite:///./storefront.db"

    # Supabase SDK
    SUPABASE_URL: str | None = None
    SUPABASE_KEY: str | None = None
    SUPABASE_SERVICE_ROLE_KEY: str | None = None
    SUPABASE_WEBHOOK_SECRET: str | None = None

    # Clerk
    CLERK_JWT_KEY: str | None = None
    CLERK_JWT_ALG: str = "RS256"
    CLERK_WEBHOOK_SECRET: str | None = None
    CLERK_PUBLISHABLE_KEY: str | None = None
    CLERK_SECRET_KEY: str | None = None
    CLERK_DOMAIN: str | None = None

    # SMTP (back-in-stock notifications)
    SMTP_HOST: str | None = None
    SMTP_PORT: int = 587
    SMTP_USERNAME: str | None = None
    SMTP_PASSWORD: str | None = None
    SMTP_FROM_EMAIL: str | None = None
    SMTP_FROM_NAME: str = "Lade Studio"
    SMTP_USE_TLS: bool = True
    SMTP_USE_SSL: bool = False

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @property
    def supabase_configured(self) -> bool:
        return bool(self.SUPABASE_URL and self.SUPABASE_KEY)

    @property
    def smtp_configured(self) -> bool:
        return bool(self.SMTP_HOST and self.SMTP_USERNAME and self.SMTP_PASSWORD)


@lru_cache
def get_settings() -> Settings:
    """
    Cached settings loader.
    Ensures we don't re-parse .env on every import / request.
    """
    return Settings()
