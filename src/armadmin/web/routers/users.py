"""User management routes."""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse

from ...db.repositories import ProfileRepository
from ...services.inflight import ViewLifetime
from ...services.workflow import ProfileList
from ..dependencies import get_client, get_locks, render, require_admin, view_lifetime

router = APIRouter(prefix="/users", tags=["users"], dependencies=[Depends(require_admin)])


async def _load(request: Request, lifetime: ViewLifetime) -> ProfileList:
    view = ProfileList(ProfileRepository(get_client(request).db), get_locks(request), lifetime)
    await view.load()
    return view


@router.get("", response_class=HTMLResponse)
async def list_users(request: Request, lifetime: ViewLifetime = Depends(view_lifetime)):
    """User list with role and ban toggles."""
    view = await _load(request, lifetime)
    return render(request, "users/list.html", {"view": view})


@router.post("/{user_id}/role", response_class=HTMLResponse)
async def toggle_role(request: Request, user_id: str, lifetime: ViewLifetime = Depends(view_lifetime)):
    """Promote to admin or demote to user."""
    view = await _load(request, lifetime)
    await view.toggle_role(user_id)
    return render(request, "users/list.html", {"view": view})


@router.post("/{user_id}/ban", response_class=HTMLResponse)
async def toggle_ban(request: Request, user_id: str, lifetime: ViewLifetime = Depends(view_lifetime)):
    """Ban or unban a user."""
    view = await _load(request, lifetime)
    await view.toggle_ban(user_id)
    return render(request, "users/list.html", {"view": view})
