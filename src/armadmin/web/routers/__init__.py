"""Web routers."""

from . import auth, categories, dashboard, exercises, users, videos, workouts

__all__ = ["auth", "categories", "dashboard", "exercises", "users", "videos", "workouts"]
