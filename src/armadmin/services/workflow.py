"""List, create, edit and delete workflow shared by every resource page.

``ResourceList`` backs the list pages and ``ResourceForm`` backs the
create and edit pages. Both hold the state one rendered view needs and
leave that state alone once the view's lifetime has ended.
"""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, replace
from typing import Any

from ..clients.base import StoreError
from ..db.repositories import ProfileRepository, TableRepository
from .forms import FormError
from .inflight import AlreadyInFlight, InFlightRegistry, Operation, ViewLifetime, still_alive

logger = logging.getLogger(__name__)

# Errors shown inline on a form rather than raised
FORM_ERRORS = (FormError, StoreError, AlreadyInFlight)


@dataclass
class FormResult:
    """Outcome of a form submission: where to go next, or what went wrong."""

    redirect_to: str | None = None
    error: str | None = None
    record: Any = None

    @property
    def ok(self) -> bool:
        return self.error is None


class ResourceList:
    """State behind a resource's list page."""

    def __init__(
        self,
        repo: TableRepository,
        locks: InFlightRegistry,
        lifetime: ViewLifetime | None = None,
    ):
        self.repo = repo
        self.locks = locks
        self.lifetime = lifetime
        self.rows: list = []

    @property
    def resource(self) -> str:
        return self.repo.table

    async def load(self) -> list:
        """Fetch all rows. A failed fetch leaves the list empty."""
        try:
            rows = await self.repo.list_all()
        except StoreError as e:
            logger.warning(f"Could not list {self.resource}: {e}")
            rows = []
        if await still_alive(self.lifetime):
            self.rows = rows
        return self.rows

    def is_deleting(self, record_id: str) -> bool:
        return self.locks.operation(self.resource, record_id) == Operation.DELETING

    def is_busy(self, record_id: str) -> bool:
        return self.locks.is_locked(self.resource, record_id)

    async def delete(self, record_id: str) -> bool:
        """Delete one row and drop it from the list without re-fetching.

        Failures leave the list as it was.
        """
        try:
            async with self.locks.hold(self.resource, record_id, Operation.DELETING):
                await self.repo.delete(record_id)
        except AlreadyInFlight as e:
            logger.info(f"Ignored delete of {self.resource}/{record_id}: {e}")
            return False
        except StoreError as e:
            logger.warning(f"Could not delete {self.resource}/{record_id}: {e}")
            return False

        if await still_alive(self.lifetime):
            self.rows = [row for row in self.rows if row.id != record_id]
        return True


class ProfileList(ResourceList):
    """List of user profiles with per-row role and ban toggles."""

    repo: ProfileRepository

    def _find(self, record_id: str):
        return next((row for row in self.rows if row.id == record_id), None)

    async def _patch(self, profile, update: Callable[[], Awaitable[None]], **changes) -> bool:
        record_id = profile.id
        try:
            async with self.locks.hold(self.resource, record_id, Operation.UPDATING):
                await update()
        except (AlreadyInFlight, StoreError) as e:
            logger.warning(f"Could not update profile {record_id}: {e}")
            return False

        if await still_alive(self.lifetime):
            self.rows = [
                replace(row, **changes) if row.id == record_id else row for row in self.rows
            ]
        return True

    async def toggle_role(self, record_id: str) -> bool:
        """Promote a user to admin, or demote an admin to user."""
        profile = self._find(record_id)
        if profile is None:
            return False
        role = profile.toggled_role()
        return await self._patch(
            profile, lambda: self.repo.set_role(profile.id, role), role=role
        )

    async def toggle_ban(self, record_id: str) -> bool:
        """Ban an unbanned user, or lift a ban."""
        profile = self._find(record_id)
        if profile is None:
            return False
        banned = not profile.is_banned
        return await self._patch(
            profile, lambda: self.repo.set_banned(profile.id, banned), is_banned=banned
        )


class ResourceForm:
    """State behind a resource's create and edit pages.

    ``build`` callables passed to create and update turn the submitted form
    into a model, uploading files on the way if needed. Validation, upload
    and store errors all end up in ``error`` with the values left for the
    form to re-render.
    """

    def __init__(
        self,
        repo: TableRepository,
        list_url: str,
        locks: InFlightRegistry,
        *,
        open_after_create: bool = False,
        lifetime: ViewLifetime | None = None,
    ):
        self.repo = repo
        self.list_url = list_url
        self.locks = locks
        self.open_after_create = open_after_create
        self.lifetime = lifetime
        self.record = None
        self.error: str | None = None

    @property
    def resource(self) -> str:
        return self.repo.table

    def detail_url(self, record_id: str) -> str:
        return f"{self.list_url}/{record_id}"

    async def _fail(self, error: Exception) -> FormResult:
        message = str(error)
        logger.info(f"Form error on {self.resource}: {message}")
        if await still_alive(self.lifetime):
            self.error = message
        return FormResult(error=message)

    async def load(self, record_id: str):
        """Fetch the record being edited. Returns None when it can't be fetched."""
        try:
            record = await self.repo.get(record_id)
        except StoreError as e:
            logger.warning(f"Could not load {self.resource}/{record_id}: {e}")
            return None
        if await still_alive(self.lifetime):
            self.record = record
        return record

    async def create(self, build: Callable[[], Awaitable[Any]]) -> FormResult:
        self.error = None
        try:
            record = await build()
            created = await self.repo.create(record)
        except FORM_ERRORS as e:
            return await self._fail(e)

        logger.info(f"Created {self.resource}/{created.id}")
        target = self.detail_url(created.id) if self.open_after_create else self.list_url
        return FormResult(redirect_to=target, record=created)

    async def update(self, record_id: str, build: Callable[[], Awaitable[Any]]) -> FormResult:
        self.error = None
        try:
            async with self.locks.hold(self.resource, record_id, Operation.UPDATING):
                record = await build()
                await self.repo.update(record_id, record)
        except FORM_ERRORS as e:
            return await self._fail(e)

        logger.info(f"Updated {self.resource}/{record_id}")
        return FormResult(redirect_to=self.list_url, record=record)

    async def delete(self, record_id: str) -> FormResult:
        self.error = None
        try:
            async with self.locks.hold(self.resource, record_id, Operation.DELETING):
                await self.repo.delete(record_id)
        except FORM_ERRORS as e:
            return await self._fail(e)

        logger.info(f"Deleted {self.resource}/{record_id}")
        return FormResult(redirect_to=self.list_url)
