"""Protocols for the data store, auth provider and object storage backends."""

from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

# Code reported when a single-row fetch matches no row
NOT_FOUND_CODE = "PGRST116"


class StoreError(Exception):
    """Error raised by any backend collaborator.

    Carries the backend's message unchanged plus an optional code, so forms
    can show the message verbatim.
    """

    def __init__(self, message: str, code: str | None = None):
        self.message = message
        self.code = code
        super().__init__(message)

    @property
    def is_not_found(self) -> bool:
        return self.code == NOT_FOUND_CODE


@dataclass(frozen=True)
class Embed:
    """A related row to fetch alongside each selected row.

    ``foreign_key`` is the column on the selected table that references
    ``table.id``; the related row is attached under ``alias``.
    """

    alias: str
    table: str
    foreign_key: str
    columns: tuple[str, ...] = ("id",)


@dataclass
class AuthSession:
    """An authenticated identity."""

    access_token: str
    user_id: str
    email: str | None = None


@runtime_checkable
class DataStore(Protocol):
    """Query and mutation interface over named tables."""

    async def select(
        self,
        table: str,
        columns: Sequence[str],
        *,
        filters: dict[str, Any] | None = None,
        order: str | None = None,
        ascending: bool = True,
        embed: Embed | None = None,
    ) -> list[dict]:
        """Return all rows matching the equality filters."""
        ...

    async def select_one(
        self,
        table: str,
        columns: Sequence[str],
        *,
        filters: dict[str, Any],
        embed: Embed | None = None,
    ) -> dict:
        """Return exactly one row, or raise StoreError with NOT_FOUND_CODE."""
        ...

    async def count(self, table: str) -> int:
        """Return the number of rows in a table."""
        ...

    async def insert(
        self,
        table: str,
        rows: list[dict],
        *,
        returning: bool = False,
        embed: Embed | None = None,
    ) -> list[dict]:
        """Insert rows; returns the stored rows when ``returning`` is set."""
        ...

    async def update(self, table: str, values: dict, *, filters: dict[str, Any]) -> None:
        """Update the rows matching the filters."""
        ...

    async def delete(self, table: str, *, filters: dict[str, Any]) -> None:
        """Delete the rows matching the filters."""
        ...


@runtime_checkable
class AuthProvider(Protocol):
    """Session interface."""

    async def sign_in(self, email: str, password: str) -> AuthSession:
        ...

    async def get_session(self, access_token: str | None) -> AuthSession | None:
        """Return the session for a token, or None when absent or expired."""
        ...

    async def sign_out(self, access_token: str) -> None:
        ...


@runtime_checkable
class ObjectStorage(Protocol):
    """Object storage interface."""

    async def upload(
        self,
        bucket: str,
        key: str,
        content: bytes,
        *,
        content_type: str | None = None,
        upsert: bool = False,
    ) -> str:
        """Store bytes under a key and return the stored path."""
        ...

    def get_public_url(self, bucket: str, path: str) -> str:
        ...


@dataclass
class AdminClient:
    """Handle bundling the three backend collaborators.

    Built once by the application entry point and passed to every component
    that needs the backend.
    """

    db: DataStore
    auth: AuthProvider
    storage: ObjectStorage
    backend: str = "local"
    _closers: list[Callable[[], Awaitable[None]]] = field(default_factory=list, repr=False)

    def on_close(self, closer: Callable[[], Awaitable[None]]) -> None:
        self._closers.append(closer)

    async def aclose(self) -> None:
        """Release backend resources."""
        while self._closers:
            closer = self._closers.pop()
            await closer()
