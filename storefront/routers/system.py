# storefront/routers/system.py
import time
from datetime import datetime, timezone

from fastapi import APIRouter

from storefront.core.config import get_settings
from storefront.database import db_url
from storefront.schemas.system import DebugRead, EnvCheckRead, HealthRead

router = APIRouter(prefix="/api", tags=["System"])

settings = get_settings()

STARTED_AT = time.monotonic()


def _set_or_missing(value: str | None) -> str:
    return "SET" if value else "MISSING"


@router.get("/health", response_model=HealthRead)
def health():
    """Liveness probe."""
    return HealthRead(
        status="ok",
        timestamp=datetime.now(timezone.utc),
        uptime_seconds=round(time.monotonic() - STARTED_AT, 3),
        environment=settings.ENVIRONMENT,
        app_url=settings.APP_URL,
    )


@router.get("/env-check", response_model=EnvCheckRead)
def env_check():
    """
    Which settings are present. Values are never returned.
    """
    return EnvCheckRead(
        has_database_url=bool(settings.DATABASE_URL),
        has_supabase_url=bool(settings.SUPABASE_URL),
        has_supabase_anon_key=bool(settings.SUPABASE_KEY),
        has_supabase_service_role_key=bool(settings.SUPABASE_SERVICE_ROLE_KEY),
        has_clerk_publishable_key=bool(settings.CLERK_PUBLISHABLE_KEY),
        has_clerk_secret_key=bool(settings.CLERK_SECRET_KEY),
        has_clerk_jwt_key=bool(settings.CLERK_JWT_KEY),
        has_clerk_webhook_secret=bool(settings.CLERK_WEBHOOK_SECRET),
        has_smtp=settings.smtp_configured,
    )


@router.get("/debug", response_model=DebugRead)
def debug():
    return DebugRead(
        environment=settings.ENVIRONMENT,
        app_url=settings.APP_URL,
        database="sqlite" if db_url.startswith("sqlite") else "postgres",
        clerk_publishable_key=_set_or_missing(settings.CLERK_PUBLISHABLE_KEY),
        clerk_domain=_set_or_missing(settings.CLERK_DOMAIN),
        supabase_url=_set_or_missing(settings.SUPABASE_URL),
        timestamp=datetime.now(timezone.utc),
    )
