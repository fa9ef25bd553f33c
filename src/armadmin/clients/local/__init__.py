"""Local backend for development and tests."""

from datetime import timedelta

from ...config import Settings
from ..base import AdminClient
from .client import LocalAuth, LocalDataStore, LocalObjectStorage, connect
from .schema import TABLES, init_db

STORAGE_URL_PREFIX = "/storage"


def create_local_client(settings: Settings) -> AdminClient:
    """Build a client over the local database and storage directory."""
    return AdminClient(
        db=LocalDataStore(settings.db_path),
        auth=LocalAuth(settings.db_path, timedelta(hours=settings.SESSION_TTL_HOURS)),
        storage=LocalObjectStorage(settings.storage_dir, STORAGE_URL_PREFIX),
        backend="local",
    )


__all__ = [
    "connect",
    "create_local_client",
    "init_db",
    "LocalAuth",
    "LocalDataStore",
    "LocalObjectStorage",
    "STORAGE_URL_PREFIX",
    "TABLES",
]
