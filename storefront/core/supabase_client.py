# storefront/core/supabase_client.py
from functools import lru_cache

from fastapi import HTTPException, status
from supabase import create_client, Client

from storefront.core.config import get_settings

settings = get_settings()


@lru_cache
def supabase_public() -> Client | None:
    """
    Create a Supabase client with the anon/public key.

    Use cases:
      - calling database functions (RPC) that respect RLS
      - reading public buckets

    Returns None when SUPABASE_URL / SUPABASE_KEY are missing so callers
    can degrade gracefully.
    """
    if not settings.supabase_configured:
        return None
    return create_client(settings.SUPABASE_URL, settings.SUPABASE_KEY)


@lru_cache
def supabase_admin() -> Client | None:
    """
    Create a Supabase client with the service role key.

    Use cases:
      - uploading to storage buckets
      - any operation that needs to bypass RLS

    WARNING:
      - Never expose service role key to frontend.
      - Only backend should call this.

    Returns None when the service role key is not configured.
    """
    if not (settings.SUPABASE_URL and settings.SUPABASE_SERVICE_ROLE_KEY):
        return None
    return create_client(settings.SUPABASE_URL, settings.SUPABASE_SERVICE_ROLE_KEY)


def require_supabase_admin() -> Client:
    """
    Return the admin client or fail the request with 503.
    """
    client = supabase_admin()
    if client is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Supabase storage is not configured",
        )
    return client


def supabase_rpc_client() -> Client | None:
    """
    Client used for database function calls.

    Prefers the service role client, falls back to the public one.
    """
    return supabase_admin() or supabase_public()
