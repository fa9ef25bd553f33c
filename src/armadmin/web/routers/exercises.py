"""Exercise library routes."""

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile
from fastapi.responses import HTMLResponse, RedirectResponse

from ...db.repositories import ExerciseRepository
from ...models.exercise import Exercise
from ...services.forms import optional_text, parse_optional_int, require_text
from ...services.inflight import ViewLifetime
from ...services.media import MediaFile, MediaUploader, resolve_media_url
from ...services.workflow import ResourceForm, ResourceList
from ..dependencies import (
    get_client,
    get_locks,
    get_uploader,
    not_found,
    render,
    require_admin,
    view_lifetime,
)
from ..uploads import read_upload

router = APIRouter(prefix="/exercises", tags=["exercises"], dependencies=[Depends(require_admin)])

LIST_URL = "/exercises"


def _repo(request: Request) -> ExerciseRepository:
    return ExerciseRepository(get_client(request).db)


def _values(exercise: Exercise | None = None) -> dict:
    if exercise is None:
        exercise = Exercise(name="")

    def text(value) -> str:
        return "" if value is None else str(value)

    return {
        "name": exercise.name,
        "description": text(exercise.description),
        "preview_url": text(exercise.preview_url),
        "recommended_sets": text(exercise.recommended_sets),
        "recommended_reps": text(exercise.recommended_reps),
        "recommended_rest_seconds": text(exercise.recommended_rest_seconds),
    }


def _builder(uploader: MediaUploader, values: dict, media: MediaFile | None):
    """Turn submitted values into an Exercise, uploading the preview last."""

    async def build() -> Exercise:
        name = require_text(values["name"], "Name")
        sets = parse_optional_int(values["recommended_sets"], "Recommended sets")
        reps = parse_optional_int(values["recommended_reps"], "Recommended reps")
        rest = parse_optional_int(values["recommended_rest_seconds"], "Rest seconds")
        preview_url = await resolve_media_url(uploader, media, values["preview_url"])
        return Exercise(
            name=name,
            description=optional_text(values["description"]),
            preview_url=preview_url,
            recommended_sets=sets,
            recommended_reps=reps,
            recommended_rest_seconds=rest,
        )

    return build


def _render_form(request: Request, form: ResourceForm, values: dict, record_id: str | None = None):
    return render(
        request,
        "exercises/form.html",
        {"values": values, "record_id": record_id, "error": form.error},
        status_code=400 if form.error else 200,
    )


@router.get("", response_class=HTMLResponse)
async def list_exercises(request: Request, lifetime: ViewLifetime = Depends(view_lifetime)):
    """Exercise library page."""
    view = ResourceList(_repo(request), get_locks(request), lifetime)
    await view.load()
    return render(request, "exercises/list.html", {"view": view})


@router.get("/new", response_class=HTMLResponse)
async def new_exercise(request: Request):
    form = ResourceForm(_repo(request), LIST_URL, get_locks(request))
    return _render_form(request, form, _values())


@router.post("/new")
async def create_exercise(
    request: Request,
    name: str = Form(""),
    description: str = Form(""),
    preview_url: str = Form(""),
    recommended_sets: str = Form(""),
    recommended_reps: str = Form(""),
    recommended_rest_seconds: str = Form(""),
    preview_file: UploadFile | None = File(None),
    lifetime: ViewLifetime = Depends(view_lifetime),
):
    """Create an exercise, uploading its preview if one was picked."""
    values = {
        "name": name,
        "description": description,
        "preview_url": preview_url,
        "recommended_sets": recommended_sets,
        "recommended_reps": recommended_reps,
        "recommended_rest_seconds": recommended_rest_seconds,
    }
    form = ResourceForm(_repo(request), LIST_URL, get_locks(request), lifetime=lifetime)
    media = await read_upload(preview_file)

    result = await form.create(_builder(get_uploader(request), values, media))
    if result.ok:
        return RedirectResponse(url=result.redirect_to, status_code=302)
    return _render_form(request, form, values)


@router.get("/{exercise_id}", response_class=HTMLResponse)
async def edit_exercise(
    request: Request, exercise_id: str, lifetime: ViewLifetime = Depends(view_lifetime)
):
    form = ResourceForm(_repo(request), LIST_URL, get_locks(request), lifetime=lifetime)
    exercise = await form.load(exercise_id)
    if exercise is None:
        return not_found(request, "Exercise", LIST_URL)
    return _render_form(request, form, _values(exercise), exercise_id)


@router.post("/{exercise_id}")
async def update_exercise(
    request: Request,
    exercise_id: str,
    name: str = Form(""),
    description: str = Form(""),
    preview_url: str = Form(""),
    recommended_sets: str = Form(""),
    recommended_reps: str = Form(""),
    recommended_rest_seconds: str = Form(""),
    preview_file: UploadFile | None = File(None),
    lifetime: ViewLifetime = Depends(view_lifetime),
):
    """Save changes to an exercise."""
    values = {
        "name": name,
        "description": description,
        "preview_url": preview_url,
        "recommended_sets": recommended_sets,
        "recommended_reps": recommended_reps,
        "recommended_rest_seconds": recommended_rest_seconds,
    }
    form = ResourceForm(_repo(request), LIST_URL, get_locks(request), lifetime=lifetime)
    media = await read_upload(preview_file)

    result = await form.update(exercise_id, _builder(get_uploader(request), values, media))
    if result.ok:
        return RedirectResponse(url=result.redirect_to, status_code=302)
    return _render_form(request, form, values, exercise_id)


@router.post("/{exercise_id}/delete")
async def delete_exercise(
    request: Request,
    exercise_id: str,
    origin: str = Form("list"),
    lifetime: ViewLifetime = Depends(view_lifetime),
):
    """Delete an exercise from the list page or from its edit page."""
    repo = _repo(request)
    if origin == "edit":
        form = ResourceForm(repo, LIST_URL, get_locks(request), lifetime=lifetime)
        result = await form.delete(exercise_id)
        if result.ok:
            return RedirectResponse(url=result.redirect_to, status_code=302)
        exercise = await form.load(exercise_id)
        if exercise is None:
            return not_found(request, "Exercise", LIST_URL)
        return _render_form(request, form, _values(exercise), exercise_id)

    view = ResourceList(repo, get_locks(request), lifetime)
    await view.load()
    await view.delete(exercise_id)
    return render(request, "exercises/list.html", {"view": view})
