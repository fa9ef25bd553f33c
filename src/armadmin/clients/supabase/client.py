"""
Hosted backend integration.

Talks to a Supabase project over HTTP: PostgREST for table access, GoTrue
for sessions and the Storage API for media uploads. Every request is sent
exactly once; failures surface as StoreError with the service's own message.
"""

import logging
from collections.abc import Sequence
from typing import Any
from urllib.parse import quote

import httpx

from ..base import AuthSession, Embed, StoreError

logger = logging.getLogger(__name__)

SINGLE_OBJECT = "application/vnd.pgrst.object+json"


def _error_from_response(response: httpx.Response) -> StoreError:
    """Build a StoreError from any of the services' error body shapes."""
    try:
        body = response.json()
    except ValueError:
        body = None
    if not isinstance(body, dict):
        body = {}

    message = (
        body.get("message")
        or body.get("msg")
        or body.get("error_description")
        or body.get("error")
        or f"HTTP {response.status_code}"
    )
    code = (
        body.get("code")
        or body.get("error_code")
        or body.get("statusCode")
        or response.status_code
    )
    return StoreError(str(message), code=str(code))


def _encode(value: Any) -> str:
    if value is None:
        return "is.null"
    if isinstance(value, bool):
        return f"eq.{str(value).lower()}"
    return f"eq.{value}"


class SupabaseHTTP:
    """Thin request helper shared by the three hosted services."""

    def __init__(self, http: httpx.AsyncClient):
        self.http = http

    async def request(
        self,
        method: str,
        path: str,
        *,
        raise_for_status: bool = True,
        **kwargs: Any,
    ) -> httpx.Response:
        """
        Send one request.

        Raises:
            StoreError: On transport failure, or on an error status when
                raise_for_status is set.
        """
        try:
            response = await self.http.request(method, path, **kwargs)
        except httpx.TimeoutException:
            logger.warning(f"Hosted backend timeout: {method} {path}")
            raise StoreError("Request timed out", code="timeout")
        except httpx.RequestError as e:
            logger.error(f"Hosted backend request error: {str(e)}")
            raise StoreError(f"Request failed: {str(e)}", code="network")

        if raise_for_status and response.status_code >= 400:
            error = _error_from_response(response)
            logger.warning(
                f"Hosted backend error: {method} {path} -> {response.status_code} {error.message}"
            )
            raise error
        return response


class SupabaseDataStore:
    """DataStore over PostgREST."""

    def __init__(self, http: SupabaseHTTP):
        self._http = http

    @staticmethod
    def _select_param(columns: Sequence[str], embed: Embed | None) -> str:
        select = ",".join(columns) if columns else "*"
        if embed is not None:
            select += f",{embed.alias}:{embed.table}({','.join(embed.columns)})"
        return select

    @staticmethod
    def _filter_params(filters: dict[str, Any] | None) -> dict[str, str]:
        return {column: _encode(value) for column, value in (filters or {}).items()}

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
        params = {"select": self._select_param(columns, embed), **self._filter_params(filters)}
        if order:
            params["order"] = f"{order}.{'asc' if ascending else 'desc'}"
        response = await self._http.request("GET", f"/rest/v1/{table}", params=params)
        return response.json()

    async def select_one(
        self,
        table: str,
        columns: Sequence[str],
        *,
        filters: dict[str, Any],
        embed: Embed | None = None,
    ) -> dict:
        params = {"select": self._select_param(columns, embed), **self._filter_params(filters)}
        response = await self._http.request(
            "GET",
            f"/rest/v1/{table}",
            params=params,
            headers={"Accept": SINGLE_OBJECT},
        )
        return response.json()

    async def count(self, table: str) -> int:
        response = await self._http.request(
            "HEAD",
            f"/rest/v1/{table}",
            params={"select": "id"},
            headers={"Prefer": "count=exact"},
        )
        # Content-Range looks like "0-24/120" or "*/0"
        content_range = response.headers.get("Content-Range", "")
        _, _, total = content_range.partition("/")
        try:
            return int(total)
        except ValueError:
            raise StoreError(f"Unexpected Content-Range: {content_range!r}", code="count")

    async def insert(
        self,
        table: str,
        rows: list[dict],
        *,
        returning: bool = False,
        embed: Embed | None = None,
    ) -> list[dict]:
        params = {}
        if returning:
            params["select"] = self._select_param(["*"], embed)
        response = await self._http.request(
            "POST",
            f"/rest/v1/{table}",
            params=params,
            json=rows,
            headers={"Prefer": "return=representation" if returning else "return=minimal"},
        )
        return response.json() if returning else []

    async def update(self, table: str, values: dict, *, filters: dict[str, Any]) -> None:
        await self._http.request(
            "PATCH",
            f"/rest/v1/{table}",
            params=self._filter_params(filters),
            json=values,
            headers={"Prefer": "return=minimal"},
        )

    async def delete(self, table: str, *, filters: dict[str, Any]) -> None:
        await self._http.request(
            "DELETE",
            f"/rest/v1/{table}",
            params=self._filter_params(filters),
        )


class SupabaseAuth:
    """AuthProvider over GoTrue."""

    def __init__(self, http: SupabaseHTTP):
        self._http = http

    async def sign_in(self, email: str, password: str) -> AuthSession:
        response = await self._http.request(
            "POST",
            "/auth/v1/token",
            params={"grant_type": "password"},
            json={"email": email, "password": password},
        )
        data = response.json()
        user = data.get("user") or {}
        logger.info(f"Signed in user {user.get('id')}")
        return AuthSession(
            access_token=data["access_token"],
            user_id=user["id"],
            email=user.get("email"),
        )

    async def get_session(self, access_token: str | None) -> AuthSession | None:
        if not access_token:
            return None
        response = await self._http.request(
            "GET",
            "/auth/v1/user",
            headers={"Authorization": f"Bearer {access_token}"},
            raise_for_status=False,
        )
        if response.status_code in (401, 403):
            logger.debug("Session token rejected by auth service")
            return None
        if response.status_code >= 400:
            raise _error_from_response(response)
        user = response.json()
        return AuthSession(access_token=access_token, user_id=user["id"], email=user.get("email"))

    async def sign_out(self, access_token: str) -> None:
        await self._http.request(
            "POST",
            "/auth/v1/logout",
            headers={"Authorization": f"Bearer {access_token}"},
        )


class SupabaseStorage:
    """ObjectStorage over the Storage API."""

    def __init__(self, http: SupabaseHTTP, base_url: str):
        self._http = http
        self.base_url = base_url.rstrip("/")

    async def upload(
        self,
        bucket: str,
        key: str,
        content: bytes,
        *,
        content_type: str | None = None,
        upsert: bool = False,
    ) -> str:
        await self._http.request(
            "POST",
            f"/storage/v1/object/{bucket}/{quote(key)}",
            content=content,
            headers={
                "Content-Type": content_type or "application/octet-stream",
                "x-upsert": "true" if upsert else "false",
            },
        )
        logger.debug(f"Uploaded {len(content)} bytes to {bucket}/{key}")
        return key

    def get_public_url(self, bucket: str, path: str) -> str:
        return f"{self.base_url}/storage/v1/object/public/{bucket}/{quote(path)}"
