"""Hosted backend client."""

import httpx

from ...config import Settings
from ..base import AdminClient
from .client import SupabaseAuth, SupabaseDataStore, SupabaseHTTP, SupabaseStorage


def create_supabase_client(
    settings: Settings,
    transport: httpx.AsyncBaseTransport | None = None,
) -> AdminClient:
    """Build a client sharing one HTTP connection pool across services."""
    if not settings.SUPABASE_URL or not settings.SUPABASE_KEY:
        raise ValueError("SUPABASE_URL and SUPABASE_KEY must be set for the supabase backend")

    http = httpx.AsyncClient(
        base_url=settings.SUPABASE_URL.rstrip("/"),
        headers={
            "apikey": settings.SUPABASE_KEY,
            "Authorization": f"Bearer {settings.SUPABASE_KEY}",
        },
        timeout=settings.HTTP_TIMEOUT,
        transport=transport,
    )
    shared = SupabaseHTTP(http)
    client = AdminClient(
        db=SupabaseDataStore(shared),
        auth=SupabaseAuth(shared),
        storage=SupabaseStorage(shared, settings.SUPABASE_URL),
        backend="supabase",
    )
    client.on_close(http.aclose)
    return client


__all__ = [
    "create_supabase_client",
    "SupabaseAuth",
    "SupabaseDataStore",
    "SupabaseHTTP",
    "SupabaseStorage",
]
