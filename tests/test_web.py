"""Tests for the web interface."""

import asyncio

from armadmin.db.repositories import (
    CategoryRepository,
    ExerciseRepository,
    ProfileRepository,
    VideoRepository,
    WorkoutExerciseRepository,
    WorkoutRepository,
)
from armadmin.models import Category, Exercise, Role, Video, Workout
from armadmin.services.inflight import ViewLifetime
from armadmin.web.dependencies import view_lifetime
from armadmin.web.navigation import nav_items

from conftest import ADMIN_EMAIL, ADMIN_PASSWORD, MEMBER_EMAIL, MEMBER_PASSWORD, sign_in


def run(coro):
    return asyncio.run(coro)


def test_nav_items_mark_active_section():
    active = {item["href"] for item in nav_items("/workouts/abc") if item["active"]}
    assert active == {"/workouts"}

    active = {item["href"] for item in nav_items("/") if item["active"]}
    assert active == {"/"}

    # A shared prefix alone does not activate an entry
    assert not any(item["active"] for item in nav_items("/videosx"))


class TestAccess:
    """Tests for sign-in and the admin guard."""

    def test_health_is_open(self, anonymous):
        response = anonymous.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert response.json()["backend"] == "local"

    def test_pages_redirect_to_login(self, anonymous):
        for path in ("/", "/exercises", "/workouts/abc", "/videos/new", "/users"):
            response = anonymous.get(path, follow_redirects=False)
            assert response.status_code == 302, path
            assert response.headers["location"] == "/login"

    def test_mutations_redirect_to_login(self, anonymous, backend):
        response = anonymous.post(
            "/categories/new", data={"name": "Hand"}, follow_redirects=False
        )

        assert response.status_code == 302
        assert run(CategoryRepository(backend.client.db).list_all()) == []

    def test_login_page(self, anonymous):
        response = anonymous.get("/login")
        assert response.status_code == 200
        assert "Admin sign in" in response.text

    def test_wrong_password(self, anonymous):
        response = sign_in(anonymous, ADMIN_EMAIL, "not-it")
        assert response.status_code == 400
        assert "Invalid login credentials" in response.text

    def test_session_cookie_is_http_only(self, anonymous):
        response = sign_in(anonymous, ADMIN_EMAIL, ADMIN_PASSWORD)
        assert response.status_code == 302
        assert "httponly" in response.headers["set-cookie"].lower()

    def test_admin_gets_dashboard(self, anonymous):
        sign_in(anonymous, ADMIN_EMAIL, ADMIN_PASSWORD)
        response = anonymous.get("/")
        assert response.status_code == 200
        assert "Dashboard" in response.text

    def test_regular_user_is_denied(self, anonymous):
        assert sign_in(anonymous, MEMBER_EMAIL, MEMBER_PASSWORD).status_code == 302

        response = anonymous.get("/", follow_redirects=False)
        assert response.status_code == 302
        assert response.headers["location"] == "/login"

    def test_banned_admin_is_denied(self, anonymous, backend):
        run(ProfileRepository(backend.client.db).set_banned(backend.admin_id, True))
        sign_in(anonymous, ADMIN_EMAIL, ADMIN_PASSWORD)

        response = anonymous.get("/exercises", follow_redirects=False)
        assert response.status_code == 302

    def test_logout(self, web):
        response = web.post("/logout", follow_redirects=False)
        assert response.status_code == 302
        assert response.headers["location"] == "/login"

        assert web.get("/", follow_redirects=False).status_code == 302

    def test_closed_view_gets_no_page(self, web):
        def closed_lifetime():
            lifetime = ViewLifetime()
            lifetime.cancel()
            return lifetime

        web.app.dependency_overrides[view_lifetime] = closed_lifetime
        try:
            response = web.get("/", follow_redirects=False)
        finally:
            web.app.dependency_overrides.clear()

        assert response.status_code == 499
        assert response.content == b""


class TestDashboard:
    """Tests for the dashboard page."""

    def test_counts(self, web, backend):
        run(VideoRepository(backend.client.db).create(Video(title="Setup", url="https://x")))

        response = web.get("/")

        assert '<span class="count">1</span> Videos' in response.text
        assert '<span class="count">2</span> Users' in response.text
        assert '<span class="count">0</span> Workouts' in response.text
        assert 'href="/" class="active"' in response.text


class TestCategories:
    """Tests for category pages."""

    def test_create_edit_delete(self, web, backend):
        repo = CategoryRepository(backend.client.db)

        response = web.post(
            "/categories/new", data={"name": "  Hand ", "description": ""}, follow_redirects=False
        )
        assert response.status_code == 302
        assert response.headers["location"] == "/categories"
        [category] = run(repo.list_all())
        assert category.name == "Hand"
        assert category.description is None
        assert "Hand" in web.get("/categories").text

        response = web.post(
            f"/categories/{category.id}",
            data={"name": "Hand control", "description": "Grip work"},
            follow_redirects=False,
        )
        assert response.headers["location"] == "/categories"
        assert run(repo.get(category.id)).description == "Grip work"

        response = web.post(f"/categories/{category.id}/delete", data={"origin": "list"})
        assert response.status_code == 200
        assert "Hand control" not in response.text
        assert run(repo.list_all()) == []

    def test_delete_unknown_id_keeps_list(self, web, backend):
        repo = CategoryRepository(backend.client.db)
        run(repo.create(Category(name="Hand")))
        run(repo.create(Category(name="Wrist")))

        response = web.post("/categories/missing/delete", data={"origin": "list"})

        assert response.status_code == 200
        assert "Hand" in response.text
        assert "Wrist" in response.text
        assert [c.name for c in run(repo.list_all())] == ["Hand", "Wrist"]

    def test_blank_name_is_rejected(self, web, backend):
        response = web.post("/categories/new", data={"name": "   ", "description": "x"})

        assert response.status_code == 400
        assert "Name is required" in response.text
        assert run(CategoryRepository(backend.client.db).list_all()) == []

    def test_missing_category(self, web):
        response = web.get("/categories/does-not-exist")
        assert response.status_code == 404
        assert "Category not found" in response.text

    def test_delete_from_edit_page(self, web, backend):
        repo = CategoryRepository(backend.client.db)
        category = run(repo.create(Category(name="Wrist")))

        response = web.post(
            f"/categories/{category.id}/delete", data={"origin": "edit"}, follow_redirects=False
        )

        assert response.headers["location"] == "/categories"
        assert run(repo.list_all()) == []


class TestExercises:
    """Tests for exercise pages."""

    def test_uploaded_preview_wins_over_url(self, web, backend, settings):
        response = web.post(
            "/exercises/new",
            data={
                "name": "Riser",
                "preview_url": "https://ignored.example.com/riser.png",
                "recommended_sets": "3",
                "recommended_reps": "",
                "recommended_rest_seconds": "60",
            },
            files={"preview_file": ("riser.png", b"png-bytes", "image/png")},
            follow_redirects=False,
        )
        assert response.status_code == 302
        assert response.headers["location"] == "/exercises"

        [exercise] = run(ExerciseRepository(backend.client.db).list_all())
        assert exercise.preview_url.startswith("/storage/media/")
        assert exercise.preview_url.endswith(".png")
        assert exercise.recommended_sets == 3
        assert exercise.recommended_reps is None
        assert exercise.recommended_rest_seconds == 60

        key = exercise.preview_url.rsplit("/", 1)[1]
        assert (settings.storage_dir / "media" / key).read_bytes() == b"png-bytes"
        assert web.get(exercise.preview_url).content == b"png-bytes"

    def test_trimmed_url_without_file(self, web, backend):
        web.post(
            "/exercises/new",
            data={"name": "Wrist Curl", "preview_url": "  https://cdn.example.com/curl.gif  "},
        )

        [exercise] = run(ExerciseRepository(backend.client.db).list_all())
        assert exercise.preview_url == "https://cdn.example.com/curl.gif"

    def test_invalid_number_keeps_values(self, web, backend):
        response = web.post(
            "/exercises/new",
            data={"name": "Riser", "recommended_sets": "three"},
        )

        assert response.status_code == 400
        assert "Recommended sets must be a whole number" in response.text
        assert 'value="three"' in response.text
        assert run(ExerciseRepository(backend.client.db).list_all()) == []

    def test_edit_clears_preview(self, web, backend):
        repo = ExerciseRepository(backend.client.db)
        exercise = run(repo.create(Exercise(name="Riser", preview_url="https://x/p.png")))

        page = web.get(f"/exercises/{exercise.id}")
        assert 'value="https://x/p.png"' in page.text

        response = web.post(
            f"/exercises/{exercise.id}",
            data={"name": "Riser", "preview_url": "", "recommended_rest_seconds": "45"},
            follow_redirects=False,
        )
        assert response.headers["location"] == "/exercises"
        stored = run(repo.get(exercise.id))
        assert stored.preview_url is None
        assert stored.recommended_rest_seconds == 45

    def test_list_delete(self, web, backend):
        repo = ExerciseRepository(backend.client.db)
        keep = run(repo.create(Exercise(name="Keep")))
        gone = run(repo.create(Exercise(name="Gone")))

        response = web.post(f"/exercises/{gone.id}/delete")

        assert "Keep" in response.text
        assert "Gone" not in response.text
        assert [e.id for e in run(repo.list_all())] == [keep.id]


class TestVideos:
    """Tests for video pages."""

    def test_url_or_file_required(self, web, backend):
        response = web.post("/videos/new", data={"title": "Setup", "url": "  "})

        assert response.status_code == 400
        assert "Provide a video URL or upload a file" in response.text
        assert run(VideoRepository(backend.client.db).list_all()) == []

    def test_create_opens_edit_page(self, web, backend):
        response = web.post(
            "/videos/new",
            data={"title": "Hook basics", "url": "https://videos.example.com/hook"},
            follow_redirects=False,
        )

        assert response.status_code == 302
        location = response.headers["location"]
        [video] = run(VideoRepository(backend.client.db).list_all())
        assert location == f"/videos/{video.id}"
        assert "Hook basics" in web.get(location).text

    def test_upload_replaces_url(self, web, backend):
        repo = VideoRepository(backend.client.db)
        video = run(repo.create(Video(title="Toproll", url="https://old.example.com/v")))

        response = web.post(
            f"/videos/{video.id}",
            data={"title": "Toproll", "url": "https://old.example.com/v"},
            files={"video_file": ("toproll.mp4", b"mp4", "video/mp4")},
            follow_redirects=False,
        )

        assert response.headers["location"] == "/videos"
        stored = run(repo.get(video.id))
        assert stored.url.startswith("/storage/media/")
        assert stored.url.endswith(".mp4")

    def test_missing_video(self, web):
        assert web.get("/videos/nope").status_code == 404


class TestWorkouts:
    """Tests for workout pages."""

    def test_build_workout(self, web, backend):
        store = backend.client.db
        riser = run(ExerciseRepository(store).create(Exercise(name="Riser")))
        curl = run(ExerciseRepository(store).create(Exercise(name="Wrist Curl")))

        response = web.post(
            "/workouts/new",
            data={"name": "Table Day", "description": "", "is_public": "true"},
            follow_redirects=False,
        )
        location = response.headers["location"]
        workout_id = location.rsplit("/", 1)[1]
        workout = run(WorkoutRepository(store).get(workout_id))
        assert workout.is_public is True
        assert workout.user_id is None

        page = web.get(f"{location}?add=1")
        assert "Select exercise" in page.text
        assert "Wrist Curl" in page.text

        page = web.post(f"/workouts/{workout_id}/exercises", data={"exercise_id": riser.id})
        assert "1. Riser" in page.text
        assert "Select exercise" not in page.text

        page = web.post(f"/workouts/{workout_id}/exercises", data={"exercise_id": curl.id})
        assert "2. Wrist Curl" in page.text

        links = run(WorkoutExerciseRepository(store).list_for_workout(workout_id))
        assert [link.order for link in links] == [1, 2]

        page = web.post(f"/workouts/{workout_id}/exercises/{links[0].id}/delete")
        assert "1. Riser" not in page.text
        assert "2. Wrist Curl" in page.text

    def test_empty_pick_keeps_picker_open(self, web, backend):
        workout = run(WorkoutRepository(backend.client.db).create(Workout(name="Day")))

        page = web.post(f"/workouts/{workout.id}/exercises", data={"exercise_id": ""})

        assert "Select exercise" in page.text
        assert "No exercises in this workout." in page.text

    def test_update_keeps_owner(self, web, backend):
        repo = WorkoutRepository(backend.client.db)
        workout = run(repo.create(Workout(name="Mine", is_public=True, user_id=backend.member_id)))

        # Unchecked checkboxes are not submitted
        response = web.post(
            f"/workouts/{workout.id}", data={"name": "Renamed"}, follow_redirects=False
        )

        assert response.headers["location"] == "/workouts"
        stored = run(repo.get(workout.id))
        assert stored.name == "Renamed"
        assert stored.is_public is False
        assert stored.user_id == backend.member_id

    def test_missing_workout(self, web):
        assert web.get("/workouts/nope").status_code == 404
        assert web.post("/workouts/nope/exercises", data={"exercise_id": "x"}).status_code == 404


class TestUsers:
    """Tests for the user management page."""

    def test_toggles(self, web, backend):
        repo = ProfileRepository(backend.client.db)
        member_id = backend.member_id

        page = web.get("/users")
        assert member_id in page.text

        page = web.post(f"/users/{member_id}/role")
        assert page.status_code == 200
        assert run(repo.get(member_id)).role == Role.ADMIN

        page = web.post(f"/users/{member_id}/ban")
        assert run(repo.get(member_id)).is_banned
        assert "Unban" in page.text

        web.post(f"/users/{member_id}/ban")
        web.post(f"/users/{member_id}/role")
        stored = run(repo.get(member_id))
        assert stored.role == Role.USER
        assert not stored.is_banned
