"""Backend clients for armadmin."""

from ..config import Settings
from .base import (
    NOT_FOUND_CODE,
    AdminClient,
    AuthProvider,
    AuthSession,
    DataStore,
    Embed,
    ObjectStorage,
    StoreError,
)


def create_client(settings: Settings) -> AdminClient:
    """Create the backend client selected by settings.BACKEND."""
    if settings.BACKEND == "supabase":
        from .supabase import create_supabase_client

        return create_supabase_client(settings)

    from .local import create_local_client

    return create_local_client(settings)


__all__ = [
    "AdminClient",
    "AuthProvider",
    "AuthSession",
    "create_client",
    "DataStore",
    "Embed",
    "NOT_FOUND_CODE",
    "ObjectStorage",
    "StoreError",
]
