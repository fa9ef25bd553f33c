"""Dashboard route."""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse

from ...db.repositories import StatsRepository
from ..dependencies import get_client, render, require_admin

router = APIRouter(tags=["dashboard"], dependencies=[Depends(require_admin)])


@router.get("/", response_class=HTMLResponse)
async def dashboard(request: Request):
    """Dashboard with content totals."""
    counts = await StatsRepository(get_client(request).db).counts()
    return render(request, "dashboard.html", {"counts": counts})
