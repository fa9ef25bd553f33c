"""Local database schema setup and initialization."""

from pathlib import Path

import aiosqlite

# Millisecond timestamps keep created_at ordering stable for rows inserted in quick succession
_NOW = "(strftime('%Y-%m-%d %H:%M:%f', 'now'))"

# Tables reachable through the DataStore interface and their columns
TABLES: dict[str, tuple[str, ...]] = {
    "categories": ("id", "name", "description", "created_at"),
    "exercises": (
        "id",
        "name",
        "description",
        "preview_url",
        "recommended_sets",
        "recommended_reps",
        "recommended_rest_seconds",
        "created_at",
    ),
    "workouts": ("id", "name", "description", "is_public", "user_id", "created_at"),
    "workout_exercises": ("id", "workout_id", "exercise_id", "order", "created_at"),
    "videos": ("id", "title", "description", "url", "created_at"),
    "profiles": ("id", "role", "is_banned", "created_at"),
}

# SQLite stores booleans as integers
BOOLEAN_COLUMNS = {"is_public", "is_banned"}


async def init_db(db_path: Path) -> None:
    """Initialize the database schema."""
    db_path.parent.mkdir(parents=True, exist_ok=True)

    async with aiosqlite.connect(db_path) as db:
        await db.execute("PRAGMA foreign_keys = ON")

        # Auth identities (the hosted backend keeps these in its auth schema)
        await db.execute(f"""
            CREATE TABLE IF NOT EXISTS users (
                id TEXT PRIMARY KEY,
                email TEXT UNIQUE NOT NULL,
                password_hash TEXT NOT NULL,
                created_at TEXT DEFAULT {_NOW}
            )
        """)

        await db.execute(f"""
            CREATE TABLE IF NOT EXISTS auth_sessions (
                token TEXT PRIMARY KEY,
                user_id TEXT NOT NULL,
                expires_at TEXT NOT NULL,
                created_at TEXT DEFAULT {_NOW},
                FOREIGN KEY (user_id) REFERENCES users(id) ON DELETE CASCADE
            )
        """)

        await db.execute(f"""
            CREATE TABLE IF NOT EXISTS profiles (
                id TEXT PRIMARY KEY,
                role TEXT NOT NULL DEFAULT 'user' CHECK (role IN ('admin', 'user')),
                is_banned INTEGER NOT NULL DEFAULT 0,
                created_at TEXT DEFAULT {_NOW},
                FOREIGN KEY (id) REFERENCES users(id) ON DELETE CASCADE
            )
        """)

        await db.execute(f"""
            CREATE TABLE IF NOT EXISTS categories (
                id TEXT PRIMARY KEY,
                name TEXT NOT NULL,
                description TEXT,
                created_at TEXT DEFAULT {_NOW}
            )
        """)

        await db.execute(f"""
            CREATE TABLE IF NOT EXISTS exercises (
                id TEXT PRIMARY KEY,
                name TEXT NOT NULL,
                description TEXT,
                preview_url TEXT,
                recommended_sets INTEGER CHECK (recommended_sets >= 0),
                recommended_reps INTEGER CHECK (recommended_reps >= 0),
                recommended_rest_seconds INTEGER CHECK (recommended_rest_seconds >= 0),
                created_at TEXT DEFAULT {_NOW}
            )
        """)

        await db.execute(f"""
            CREATE TABLE IF NOT EXISTS workouts (
                id TEXT PRIMARY KEY,
                name TEXT NOT NULL,
                description TEXT,
                is_public INTEGER NOT NULL DEFAULT 0,
                user_id TEXT,
                created_at TEXT DEFAULT {_NOW}
            )
        """)

        await db.execute(f"""
            CREATE TABLE IF NOT EXISTS workout_exercises (
                id TEXT PRIMARY KEY,
                workout_id TEXT NOT NULL,
                exercise_id TEXT NOT NULL,
                "order" INTEGER NOT NULL,
                created_at TEXT DEFAULT {_NOW},
                FOREIGN KEY (workout_id) REFERENCES workouts(id) ON DELETE CASCADE,
                FOREIGN KEY (exercise_id) REFERENCES exercises(id) ON DELETE CASCADE
            )
        """)

        await db.execute(f"""
            CREATE TABLE IF NOT EXISTS videos (
                id TEXT PRIMARY KEY,
                title TEXT NOT NULL,
                description TEXT,
                url TEXT NOT NULL,
                created_at TEXT DEFAULT {_NOW}
            )
        """)

        # Create indexes for common queries
        await db.execute("""
            CREATE INDEX IF NOT EXISTS idx_workout_exercises_workout
            ON workout_exercises(workout_id)
        """)
        await db.execute("""
            CREATE INDEX IF NOT EXISTS idx_auth_sessions_user
            ON auth_sessions(user_id)
        """)
        await db.execute("""
            CREATE INDEX IF NOT EXISTS idx_exercises_name
            ON exercises(name)
        """)

        await db.commit()
