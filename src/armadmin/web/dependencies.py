"""Request dependencies shared by the routers."""

from collections.abc import AsyncIterator

from fastapi import Depends, Request
from fastapi.templating import Jinja2Templates

from ..clients.base import AdminClient, AuthSession
from ..config import Settings
from ..services.access import AccessGuard, AccessState
from ..services.inflight import InFlightRegistry, ViewLifetime
from ..services.media import MediaUploader


class AdminRequired(Exception):
    """The visitor may not use the admin portal."""


class ViewClosed(Exception):
    """The client went away before the access check finished."""


def get_templates(request: Request) -> Jinja2Templates:
    """Get templates from app state."""
    return request.app.state.templates


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_client(request: Request) -> AdminClient:
    return request.app.state.client


def get_locks(request: Request) -> InFlightRegistry:
    return request.app.state.locks


def get_uploader(request: Request) -> MediaUploader:
    return request.app.state.uploader


async def view_lifetime(request: Request) -> AsyncIterator[ViewLifetime]:
    """Lifetime token for the view rendered by this request."""
    lifetime = ViewLifetime(probe=request.is_disconnected)
    try:
        yield lifetime
    finally:
        lifetime.cancel()


async def require_admin(
    request: Request, lifetime: ViewLifetime = Depends(view_lifetime)
) -> AuthSession:
    """Let the request through only for a signed-in, unbanned admin."""
    token = request.cookies.get(get_settings(request).SESSION_COOKIE_NAME)
    result = await AccessGuard(get_client(request)).check(token, lifetime)
    if result.state == AccessState.DENIED:
        raise AdminRequired()
    if result.state == AccessState.CHECKING:
        raise ViewClosed()
    request.state.session = result.session
    return result.session


def render(request: Request, name: str, context: dict | None = None, status_code: int = 200):
    """Render a template with the signed-in session available."""
    return get_templates(request).TemplateResponse(
        request,
        name,
        {"session": getattr(request.state, "session", None), **(context or {})},
        status_code=status_code,
    )


def not_found(request: Request, what: str, back: str = "/"):
    return render(request, "not_found.html", {"what": what, "back": back}, status_code=404)
