# storefront/schemas/system.py
from datetime import datetime
from typing import Literal

from sqlmodel import SQLModel

SetOrMissing = Literal["SET", "MISSING"]


class HealthRead(SQLModel):
    status: str
    timestamp: datetime
    uptime_seconds: float
    environment: str
    app_url: str


class EnvCheckRead(SQLModel):
    """
    Which settings are present. Values are never echoed.
    """

    has_database_url: bool
    has_supabase_url: bool
    has_supabase_anon_key: bool
    has_supabase_service_role_key: bool
    has_clerk_publishable_key: bool
    has_clerk_secret_key: bool
    has_clerk_jwt_key: bool
    has_clerk_webhook_secret: bool
    has_smtp: bool


class DebugRead(SQLModel):
    environment: str
    app_url: str
    database: Literal["postgres", "sqlite"]
    clerk_publishable_key: SetOrMissing
    clerk_domain: SetOrMissing
    supabase_url: SetOrMissing
    timestamp: datetime


class WebhookAck(SQLModel):
    received: bool = True
