"""Pytest configuration and fixtures."""

import asyncio
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from armadmin.clients.local import create_local_client, init_db
from armadmin.config import Settings
from armadmin.models.profile import Role
from armadmin.web import create_app

ADMIN_EMAIL = "coach@example.com"
ADMIN_PASSWORD = "top-roll-2024"
MEMBER_EMAIL = "puller@example.com"
MEMBER_PASSWORD = "hook-and-press"


@pytest.fixture
def settings(tmp_path):
    """Settings for a local backend rooted in a temporary directory."""
    return Settings(_env_file=None, BACKEND="local", DATA_DIR=tmp_path / "data")


@pytest.fixture
async def local_client(settings):
    """An initialized local backend client."""
    await init_db(settings.db_path)
    client = create_local_client(settings)
    yield client
    await client.aclose()


@pytest.fixture
async def admin_id(local_client):
    """ID of an admin account."""
    return await local_client.auth.create_user(ADMIN_EMAIL, ADMIN_PASSWORD, Role.ADMIN)


@pytest.fixture
async def member_id(local_client):
    """ID of a regular app user."""
    return await local_client.auth.create_user(MEMBER_EMAIL, MEMBER_PASSWORD, Role.USER)


def sign_in(client: TestClient, email: str, password: str):
    return client.post(
        "/login", data={"email": email, "password": password}, follow_redirects=False
    )


@pytest.fixture
def backend(settings):
    """A local backend with one admin and one regular user, set up outside any event loop."""
    asyncio.run(init_db(settings.db_path))
    client = create_local_client(settings)
    admin = asyncio.run(client.auth.create_user(ADMIN_EMAIL, ADMIN_PASSWORD, Role.ADMIN))
    member = asyncio.run(client.auth.create_user(MEMBER_EMAIL, MEMBER_PASSWORD, Role.USER))
    return SimpleNamespace(client=client, admin_id=admin, member_id=member)


@pytest.fixture
def anonymous(settings, backend):
    """Test client with no session."""
    app = create_app(settings, backend.client)
    with TestClient(app) as client:
        yield client


@pytest.fixture
def web(settings, backend):
    """Test client signed in as the admin."""
    app = create_app(settings, backend.client)
    with TestClient(app) as client:
        response = sign_in(client, ADMIN_EMAIL, ADMIN_PASSWORD)
        assert response.status_code == 302
        yield client
