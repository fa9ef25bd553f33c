"""Tests for the admin access guard."""

import pytest

from armadmin.clients.base import AdminClient, AuthSession, StoreError
from armadmin.db.repositories import ProfileRepository
from armadmin.services.access import AccessGuard, AccessState, ProfileLookup, next_state
from armadmin.services.inflight import ViewLifetime

from conftest import ADMIN_EMAIL, ADMIN_PASSWORD, MEMBER_EMAIL, MEMBER_PASSWORD

SESSION = AuthSession(access_token="t", user_id="u1")


class TestNextState:
    """Tests for the access state transitions."""

    def test_no_session_is_denied(self):
        assert next_state(None, None) == AccessState.DENIED
        assert next_state(None, ProfileLookup.from_row({"role": "admin"})) == AccessState.DENIED

    def test_session_without_lookup_is_checking(self):
        assert next_state(SESSION, None) == AccessState.CHECKING

    @pytest.mark.parametrize(
        "lookup",
        [
            ProfileLookup.failed("boom"),
            ProfileLookup.from_row(None),
            ProfileLookup.from_row({"role": "user", "is_banned": False}),
            ProfileLookup.from_row({"role": "admin", "is_banned": True}),
            ProfileLookup.from_row({"role": "user", "is_banned": True}),
            ProfileLookup.from_row({"role": None, "is_banned": False}),
        ],
    )
    def test_denied_lookups(self, lookup):
        assert next_state(SESSION, lookup) == AccessState.DENIED

    def test_unbanned_admin_is_granted(self):
        lookup = ProfileLookup.from_row({"role": "admin", "is_banned": False})
        assert next_state(SESSION, lookup) == AccessState.GRANTED


class FailingAuth:
    async def sign_in(self, email, password):
        raise StoreError("down")

    async def get_session(self, access_token):
        raise StoreError("auth service unavailable", code="network")

    async def sign_out(self, access_token):
        raise StoreError("down")


class TestAccessGuard:
    """Tests for AccessGuard against the local backend."""

    async def test_missing_token_is_denied(self, local_client):
        result = await AccessGuard(local_client).check(None)
        assert result.state == AccessState.DENIED
        assert not result.granted

    async def test_unknown_token_is_denied(self, local_client):
        result = await AccessGuard(local_client).check("not-a-token")
        assert result.state == AccessState.DENIED

    async def test_admin_is_granted(self, local_client, admin_id):
        session = await local_client.auth.sign_in(ADMIN_EMAIL, ADMIN_PASSWORD)
        result = await AccessGuard(local_client).check(session.access_token)

        assert result.granted
        assert result.session.user_id == admin_id

    async def test_regular_user_is_denied(self, local_client, member_id):
        session = await local_client.auth.sign_in(MEMBER_EMAIL, MEMBER_PASSWORD)
        result = await AccessGuard(local_client).check(session.access_token)
        assert result.state == AccessState.DENIED

    async def test_banned_admin_is_denied(self, local_client, admin_id):
        await ProfileRepository(local_client.db).set_banned(admin_id, True)
        session = await local_client.auth.sign_in(ADMIN_EMAIL, ADMIN_PASSWORD)

        result = await AccessGuard(local_client).check(session.access_token)
        assert result.state == AccessState.DENIED

    async def test_missing_profile_is_denied(self, local_client, admin_id):
        session = await local_client.auth.sign_in(ADMIN_EMAIL, ADMIN_PASSWORD)
        await local_client.db.delete("profiles", filters={"id": admin_id})

        result = await AccessGuard(local_client).check(session.access_token)
        assert result.state == AccessState.DENIED

    async def test_session_lookup_error_is_denied(self, local_client):
        client = AdminClient(db=local_client.db, auth=FailingAuth(), storage=local_client.storage)
        result = await AccessGuard(client).check("any")
        assert result.state == AccessState.DENIED

    async def test_closed_view_stays_checking(self, local_client, admin_id):
        session = await local_client.auth.sign_in(ADMIN_EMAIL, ADMIN_PASSWORD)
        lifetime = ViewLifetime()
        lifetime.cancel()

        result = await AccessGuard(local_client).check(session.access_token, lifetime)
        assert result.state == AccessState.CHECKING

    async def test_closed_view_still_denies(self, local_client):
        lifetime = ViewLifetime()
        lifetime.cancel()

        result = await AccessGuard(local_client).check(None, lifetime)
        assert result.state == AccessState.DENIED
