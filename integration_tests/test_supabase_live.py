"""Read-only checks against a real hosted project.

Run with SUPABASE_URL and SUPABASE_KEY set, e.g.:

    SUPABASE_URL=... SUPABASE_KEY=... pytest integration_tests
"""

import pytest

from armadmin.clients.base import StoreError
from armadmin.clients.supabase import create_supabase_client
from armadmin.config import Settings
from armadmin.db.repositories import CategoryRepository, StatsRepository


@pytest.fixture
async def hosted_client():
    client = create_supabase_client(Settings(BACKEND="supabase"))
    yield client
    await client.aclose()


async def test_counts(hosted_client):
    counts = await StatsRepository(hosted_client.db).counts()
    assert set(counts) == {"exercises", "workouts", "videos", "users"}
    assert all(value >= 0 for value in counts.values())


async def test_list_categories(hosted_client):
    categories = await CategoryRepository(hosted_client.db).list_all()
    assert all(category.id for category in categories)


async def test_missing_row_is_not_found(hosted_client):
    with pytest.raises(StoreError) as exc_info:
        await hosted_client.db.select_one(
            "videos", ("id",), filters={"id": "00000000-0000-0000-0000-000000000000"}
        )
    assert exc_info.value.is_not_found


async def test_bad_token_has_no_session(hosted_client):
    assert await hosted_client.auth.get_session("not-a-jwt") is None
