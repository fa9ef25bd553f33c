"""Exercise category routes."""

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse

from ...db.repositories import CategoryRepository
from ...models.category import Category
from ...services.forms import optional_text, require_text
from ...services.inflight import ViewLifetime
from ...services.workflow import ResourceForm, ResourceList
from ..dependencies import get_client, get_locks, not_found, render, require_admin, view_lifetime

router = APIRouter(prefix="/categories", tags=["categories"], dependencies=[Depends(require_admin)])

LIST_URL = "/categories"


def _repo(request: Request) -> CategoryRepository:
    return CategoryRepository(get_client(request).db)


def _values(category: Category | None = None) -> dict:
    if category is None:
        return {"name": "", "description": ""}
    return {"name": category.name, "description": category.description or ""}


def _render_list(request: Request, view: ResourceList):
    return render(request, "categories/list.html", {"view": view})


def _render_form(request: Request, form: ResourceForm, values: dict, record_id: str | None = None):
    return render(
        request,
        "categories/form.html",
        {"values": values, "record_id": record_id, "error": form.error},
        status_code=400 if form.error else 200,
    )


@router.get("", response_class=HTMLResponse)
async def list_categories(request: Request, lifetime: ViewLifetime = Depends(view_lifetime)):
    """Category list page."""
    view = ResourceList(_repo(request), get_locks(request), lifetime)
    await view.load()
    return _render_list(request, view)


@router.get("/new", response_class=HTMLResponse)
async def new_category(request: Request):
    form = ResourceForm(_repo(request), LIST_URL, get_locks(request))
    return _render_form(request, form, _values())


@router.post("/new")
async def create_category(
    request: Request,
    name: str = Form(""),
    description: str = Form(""),
    lifetime: ViewLifetime = Depends(view_lifetime),
):
    """Create a category and go back to the list."""
    form = ResourceForm(_repo(request), LIST_URL, get_locks(request), lifetime=lifetime)

    async def build():
        return Category(name=require_text(name, "Name"), description=optional_text(description))

    result = await form.create(build)
    if result.ok:
        return RedirectResponse(url=result.redirect_to, status_code=302)
    return _render_form(request, form, {"name": name, "description": description})


@router.get("/{category_id}", response_class=HTMLResponse)
async def edit_category(
    request: Request, category_id: str, lifetime: ViewLifetime = Depends(view_lifetime)
):
    form = ResourceForm(_repo(request), LIST_URL, get_locks(request), lifetime=lifetime)
    category = await form.load(category_id)
    if category is None:
        return not_found(request, "Category", LIST_URL)
    return _render_form(request, form, _values(category), category_id)


@router.post("/{category_id}")
async def update_category(
    request: Request,
    category_id: str,
    name: str = Form(""),
    description: str = Form(""),
    lifetime: ViewLifetime = Depends(view_lifetime),
):
    """Save changes to a category."""
    form = ResourceForm(_repo(request), LIST_URL, get_locks(request), lifetime=lifetime)

    async def build():
        return Category(name=require_text(name, "Name"), description=optional_text(description))

    result = await form.update(category_id, build)
    if result.ok:
        return RedirectResponse(url=result.redirect_to, status_code=302)
    return _render_form(request, form, {"name": name, "description": description}, category_id)


@router.post("/{category_id}/delete")
async def delete_category(
    request: Request,
    category_id: str,
    origin: str = Form("list"),
    lifetime: ViewLifetime = Depends(view_lifetime),
):
    """Delete a category from the list page or from its edit page."""
    repo = _repo(request)
    if origin == "edit":
        form = ResourceForm(repo, LIST_URL, get_locks(request), lifetime=lifetime)
        result = await form.delete(category_id)
        if result.ok:
            return RedirectResponse(url=result.redirect_to, status_code=302)
        category = await form.load(category_id)
        if category is None:
            return not_found(request, "Category", LIST_URL)
        return _render_form(request, form, _values(category), category_id)

    view = ResourceList(repo, get_locks(request), lifetime)
    await view.load()
    await view.delete(category_id)
    return _render_list(request, view)
