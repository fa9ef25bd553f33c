"""Tracking of in-flight record operations and view lifetimes."""

from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class Operation(str, Enum):
    DELETING = "deleting"
    UPDATING = "updating"


class AlreadyInFlight(Exception):
    """Raised when a record already has an operation running."""

    def __init__(self, resource: str, record_id: str, operation: Operation):
        self.resource = resource
        self.record_id = record_id
        self.operation = operation
        verb = "deleted" if operation == Operation.DELETING else "saved"
        super().__init__(f"This record is already being {verb}")


@dataclass
class InFlight:
    """An operation currently running against one record."""
    operation: Operation
    started_at: datetime = field(default_factory=datetime.now)


class InFlightRegistry:
    """Lock table keyed by (resource, record id).

    Entries are taken and released with ``hold``. Taking an entry involves no
    await, so on a single event loop two handlers can never both hold the
    same record.
    """

    def __init__(self):
        self._entries: dict[tuple[str, str], InFlight] = {}

    def is_locked(self, resource: str, record_id: str) -> bool:
        return (resource, record_id) in self._entries

    def operation(self, resource: str, record_id: str) -> Operation | None:
        entry = self._entries.get((resource, record_id))
        return entry.operation if entry else None

    def locked_ids(self, resource: str) -> set[str]:
        """IDs of the resource's records with an operation running."""
        return {record_id for (name, record_id) in self._entries if name == resource}

    @asynccontextmanager
    async def hold(
        self, resource: str, record_id: str, operation: Operation
    ) -> AsyncIterator[InFlight]:
        """Hold a record for the duration of the block.

        Raises:
            AlreadyInFlight: If the record is already held.
        """
        key = (resource, record_id)
        current = self._entries.get(key)
        if current is not None:
            raise AlreadyInFlight(resource, record_id, current.operation)
        entry = InFlight(operation)
        self._entries[key] = entry
        try:
            yield entry
        finally:
            self._entries.pop(key, None)

    def __len__(self) -> int:
        return len(self._entries)


class ViewLifetime:
    """Cancellation token tied to one rendered view.

    ``probe`` is an optional async callable returning True once the view's
    client has gone away (for a web request, ``request.is_disconnected``).
    """

    def __init__(self, probe: Callable[[], Awaitable[bool]] | None = None):
        self._probe = probe
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    async def alive(self) -> bool:
        """Whether results may still be applied to the view."""
        if not self._cancelled and self._probe is not None and await self._probe():
            self._cancelled = True
        return not self._cancelled


async def still_alive(lifetime: ViewLifetime | None) -> bool:
    return lifetime is None or await lifetime.alive()
