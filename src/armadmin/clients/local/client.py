"""Local backend: SQLite data store, password auth and a filesystem bucket."""

import asyncio
import logging
import secrets
import sqlite3
from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any
from uuid import uuid4

import aiosqlite
from werkzeug.security import check_password_hash, generate_password_hash

from ...models.profile import Role
from ..base import NOT_FOUND_CODE, AuthSession, Embed, StoreError
from .schema import BOOLEAN_COLUMNS, TABLES

logger = logging.getLogger(__name__)

# Postgres error codes, so callers see the same codes from either backend
UNDEFINED_TABLE_CODE = "42P01"
UNDEFINED_COLUMN_CODE = "42703"
INTEGRITY_CODE = "23000"


@asynccontextmanager
async def connect(db_path: Path) -> AsyncIterator[aiosqlite.Connection]:
    """Open a connection with foreign keys enforced and sqlite errors mapped."""
    try:
        async with aiosqlite.connect(db_path) as db:
            db.row_factory = aiosqlite.Row
            await db.execute("PRAGMA foreign_keys = ON")
            yield db
    except sqlite3.IntegrityError as e:
        raise StoreError(str(e), code=INTEGRITY_CODE) from e
    except sqlite3.Error as e:
        raise StoreError(str(e), code="sqlite") from e


def _quote(name: str) -> str:
    return f'"{name}"'


class LocalDataStore:
    """DataStore over a local SQLite database.

    Table and column names are checked against the schema before being
    placed in SQL; values always go through parameters.
    """

    def __init__(self, db_path: Path):
        self.db_path = db_path

    def _check(self, table: str, columns: Sequence[str]) -> None:
        known = TABLES.get(table)
        if known is None:
            raise StoreError(f'relation "{table}" does not exist', code=UNDEFINED_TABLE_CODE)
        for column in columns:
            if column not in known:
                raise StoreError(
                    f'column {table}.{column} does not exist', code=UNDEFINED_COLUMN_CODE
                )

    @staticmethod
    def _where(filters: dict[str, Any] | None) -> tuple[str, list]:
        if not filters:
            return "", []
        clauses = [f"{_quote(column)} = ?" for column in filters]
        return " WHERE " + " AND ".join(clauses), list(filters.values())

    @staticmethod
    def _row_to_dict(row: aiosqlite.Row) -> dict:
        data = dict(row)
        for column in BOOLEAN_COLUMNS & data.keys():
            data[column] = bool(data[column])
        return data

    async def _fetch(
        self,
        db: aiosqlite.Connection,
        table: str,
        columns: Sequence[str],
        filters: dict[str, Any] | None,
        order: str | None = None,
        ascending: bool = True,
        embed: Embed | None = None,
    ) -> list[dict]:
        selected = list(columns)
        hidden = embed is not None and embed.foreign_key not in selected
        if hidden:
            selected.append(embed.foreign_key)

        where, params = self._where(filters)
        sql = f"SELECT {', '.join(_quote(c) for c in selected)} FROM {_quote(table)}{where}"
        if order:
            direction = "ASC" if ascending else "DESC"
            sql += f" ORDER BY {_quote(order)} {direction}, rowid {direction}"

        cursor = await db.execute(sql, params)
        rows = [self._row_to_dict(row) for row in await cursor.fetchall()]

        if embed is not None:
            await self._attach(db, rows, embed)
            if hidden:
                for row in rows:
                    del row[embed.foreign_key]
        return rows

    async def _attach(self, db: aiosqlite.Connection, rows: list[dict], embed: Embed) -> None:
        """Attach the related row for each row under the embed alias."""
        self._check(embed.table, embed.columns)
        ids = sorted({row[embed.foreign_key] for row in rows if row[embed.foreign_key]})
        related: dict[str, dict] = {}
        if ids:
            columns = list(embed.columns)
            if "id" not in columns:
                columns.append("id")
            placeholders = ", ".join("?" for _ in ids)
            cursor = await db.execute(
                f"SELECT {', '.join(_quote(c) for c in columns)} FROM {_quote(embed.table)} "
                f"WHERE id IN ({placeholders})",
                ids,
            )
            for row in await cursor.fetchall():
                data = self._row_to_dict(row)
                related[data["id"]] = {c: data[c] for c in embed.columns}
        for row in rows:
            row[embed.alias] = related.get(row[embed.foreign_key])

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
        self._check(table, [*columns, *(filters or {}), *([order] if order else [])])
        async with connect(self.db_path) as db:
            return await self._fetch(db, table, columns, filters, order, ascending, embed)

    async def select_one(
        self,
        table: str,
        columns: Sequence[str],
        *,
        filters: dict[str, Any],
        embed: Embed | None = None,
    ) -> dict:
        rows = await self.select(table, columns, filters=filters, embed=embed)
        if len(rows) != 1:
            raise StoreError(
                f"JSON object requested, multiple (or no) rows returned ({len(rows)} rows)",
                code=NOT_FOUND_CODE,
            )
        return rows[0]

    async def count(self, table: str) -> int:
        self._check(table, [])
        async with connect(self.db_path) as db:
            cursor = await db.execute(f"SELECT COUNT(*) FROM {_quote(table)}")
            row = await cursor.fetchone()
            return row[0]

    async def insert(
        self,
        table: str,
        rows: list[dict],
        *,
        returning: bool = False,
        embed: Embed | None = None,
    ) -> list[dict]:
        ids = []
        async with connect(self.db_path) as db:
            for row in rows:
                values = {"id": str(uuid4()), **row}
                self._check(table, list(values))
                columns = ", ".join(_quote(c) for c in values)
                placeholders = ", ".join("?" for _ in values)
                await db.execute(
                    f"INSERT INTO {_quote(table)} ({columns}) VALUES ({placeholders})",
                    list(values.values()),
                )
                ids.append(values["id"])
            await db.commit()

            if not returning:
                return []
            inserted = []
            for row_id in ids:
                inserted.extend(
                    await self._fetch(db, table, TABLES[table], {"id": row_id}, embed=embed)
                )
            return inserted

    async def update(self, table: str, values: dict, *, filters: dict[str, Any]) -> None:
        if not filters:
            raise StoreError("UPDATE requires a WHERE clause", code="21000")
        self._check(table, [*values, *filters])
        assignments = ", ".join(f"{_quote(c)} = ?" for c in values)
        where, params = self._where(filters)
        async with connect(self.db_path) as db:
            await db.execute(
                f"UPDATE {_quote(table)} SET {assignments}{where}",
                [*values.values(), *params],
            )
            await db.commit()

    async def delete(self, table: str, *, filters: dict[str, Any]) -> None:
        if not filters:
            raise StoreError("DELETE requires a WHERE clause", code="21000")
        self._check(table, list(filters))
        where, params = self._where(filters)
        async with connect(self.db_path) as db:
            await db.execute(f"DELETE FROM {_quote(table)}{where}", params)
            await db.commit()


class LocalAuth:
    """Email/password auth with opaque session tokens stored in SQLite."""

    def __init__(self, db_path: Path, session_ttl: timedelta = timedelta(days=7)):
        self.db_path = db_path
        self.session_ttl = session_ttl

    async def create_user(self, email: str, password: str, role: Role = Role.USER) -> str:
        """Create an identity and its profile row. Returns the new user id."""
        user_id = str(uuid4())
        async with connect(self.db_path) as db:
            await db.execute(
                "INSERT INTO users (id, email, password_hash) VALUES (?, ?, ?)",
                (user_id, email.strip().lower(), generate_password_hash(password)),
            )
            await db.execute(
                "INSERT INTO profiles (id, role) VALUES (?, ?)",
                (user_id, role.value),
            )
            await db.commit()
        logger.info(f"Created local user {user_id} with role {role.value}")
        return user_id

    async def sign_in(self, email: str, password: str) -> AuthSession:
        async with connect(self.db_path) as db:
            cursor = await db.execute(
                "SELECT id, email, password_hash FROM users WHERE email = ?",
                (email.strip().lower(),),
            )
            user = await cursor.fetchone()
            if user is None or not check_password_hash(user["password_hash"], password):
                raise StoreError("Invalid login credentials", code="invalid_credentials")

            token = secrets.token_urlsafe(32)
            expires_at = datetime.now(timezone.utc) + self.session_ttl
            await db.execute(
                "INSERT INTO auth_sessions (token, user_id, expires_at) VALUES (?, ?, ?)",
                (token, user["id"], expires_at.isoformat()),
            )
            await db.commit()
        return AuthSession(access_token=token, user_id=user["id"], email=user["email"])

    async def get_session(self, access_token: str | None) -> AuthSession | None:
        if not access_token:
            return None
        async with connect(self.db_path) as db:
            cursor = await db.execute(
                """
                SELECT s.user_id, s.expires_at, u.email
                FROM auth_sessions s JOIN users u ON u.id = s.user_id
                WHERE s.token = ?
                """,
                (access_token,),
            )
            row = await cursor.fetchone()
        if row is None:
            return None
        if datetime.fromisoformat(row["expires_at"]) <= datetime.now(timezone.utc):
            return None
        return AuthSession(access_token=access_token, user_id=row["user_id"], email=row["email"])

    async def sign_out(self, access_token: str) -> None:
        async with connect(self.db_path) as db:
            await db.execute("DELETE FROM auth_sessions WHERE token = ?", (access_token,))
            await db.commit()


class LocalObjectStorage:
    """Buckets as directories under a root; files served by the web app."""

    def __init__(self, root: Path, public_base: str = "/storage"):
        self.root = root
        self.public_base = public_base.rstrip("/")

    @staticmethod
    def _check_name(kind: str, name: str) -> None:
        if not name or name in (".", "..") or "/" in name or "\\" in name:
            raise StoreError(f"Invalid {kind}: {name!r}", code="400")

    async def upload(
        self,
        bucket: str,
        key: str,
        content: bytes,
        *,
        content_type: str | None = None,
        upsert: bool = False,
    ) -> str:
        self._check_name("bucket", bucket)
        self._check_name("key", key)
        path = self.root / bucket / key
        if path.exists() and not upsert:
            raise StoreError("The resource already exists", code="409")

        def write() -> None:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(content)

        await asyncio.to_thread(write)
        logger.debug(f"Stored {len(content)} bytes at {bucket}/{key}")
        return key

    def get_public_url(self, bucket: str, path: str) -> str:
        return f"{self.public_base}/{bucket}/{path}"
