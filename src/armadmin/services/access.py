"""Admin access guard.

Decides whether the visitor behind a session token may use the admin
portal. The decision is a three-state machine driven by ``next_state``;
``AccessGuard`` performs the lookups that feed it.
"""

import logging
from dataclasses import dataclass
from enum import Enum

from ..clients.base import AdminClient, AuthSession, StoreError
from ..models.profile import Role
from .inflight import ViewLifetime, still_alive

logger = logging.getLogger(__name__)


class AccessState(str, Enum):
    CHECKING = "checking"
    DENIED = "denied"
    GRANTED = "granted"


@dataclass(frozen=True)
class ProfileLookup:
    """Outcome of looking up the session user's profile."""

    found: bool
    role: str | None = None
    is_banned: bool = False
    error: str | None = None

    @classmethod
    def from_row(cls, row: dict | None) -> "ProfileLookup":
        if not row:
            return cls(found=False)
        return cls(found=True, role=row.get("role"), is_banned=bool(row.get("is_banned")))

    @classmethod
    def failed(cls, error: str) -> "ProfileLookup":
        return cls(found=False, error=error)


def next_state(session: AuthSession | None, lookup: ProfileLookup | None) -> AccessState:
    """Transition function for the access check.

    ``lookup`` is None while the profile has not been looked up yet.
    Anything short of a found, unbanned admin profile is denied.
    """
    if session is None:
        return AccessState.DENIED
    if lookup is None:
        return AccessState.CHECKING
    if lookup.error is not None or not lookup.found:
        return AccessState.DENIED
    if lookup.is_banned or lookup.role != Role.ADMIN.value:
        return AccessState.DENIED
    return AccessState.GRANTED


@dataclass
class AccessResult:
    state: AccessState
    session: AuthSession | None = None

    @property
    def granted(self) -> bool:
        return self.state == AccessState.GRANTED


class AccessGuard:
    """Runs the access check against the backend.

    Every failure, including backend errors, ends in DENIED. The reason is
    only logged; callers get the same result for every denial.
    """

    def __init__(self, client: AdminClient):
        self.client = client

    async def check(
        self, access_token: str | None, lifetime: ViewLifetime | None = None
    ) -> AccessResult:
        try:
            session = await self.client.auth.get_session(access_token)
        except StoreError as e:
            logger.debug(f"Session lookup failed: {e}")
            session = None

        state = next_state(session, None)
        if state == AccessState.DENIED:
            logger.debug("Access denied: no session")
            return AccessResult(state)

        try:
            row = await self.client.db.select_one(
                "profiles", ("role", "is_banned"), filters={"id": session.user_id}
            )
            lookup = ProfileLookup.from_row(row)
        except StoreError as e:
            lookup = ProfileLookup.failed(str(e))

        state = next_state(session, lookup)
        if state == AccessState.DENIED:
            logger.debug(
                f"Access denied for user {session.user_id}: "
                f"found={lookup.found} role={lookup.role} banned={lookup.is_banned} error={lookup.error}"
            )
            return AccessResult(state, session)

        if not await still_alive(lifetime):
            # The view went away mid-check; leave it in the checking state
            return AccessResult(AccessState.CHECKING, session)
        return AccessResult(state, session)
