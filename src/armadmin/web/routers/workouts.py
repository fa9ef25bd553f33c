"""Workout routes, including the exercises placed inside a workout."""

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse

from ...db.repositories import ExerciseRepository, WorkoutExerciseRepository, WorkoutRepository
from ...models.workout import Workout
from ...services.forms import optional_text, require_text
from ...services.inflight import ViewLifetime
from ...services.workflow import ResourceForm, ResourceList
from ...services.workouts import WorkoutExercises
from ..dependencies import get_client, get_locks, not_found, render, require_admin, view_lifetime

router = APIRouter(prefix="/workouts", tags=["workouts"], dependencies=[Depends(require_admin)])

LIST_URL = "/workouts"


def _repo(request: Request) -> WorkoutRepository:
    return WorkoutRepository(get_client(request).db)


def _form(request: Request, lifetime: ViewLifetime | None = None) -> ResourceForm:
    return ResourceForm(
        _repo(request), LIST_URL, get_locks(request), open_after_create=True, lifetime=lifetime
    )


def _editor(request: Request, workout_id: str, lifetime: ViewLifetime) -> WorkoutExercises:
    store = get_client(request).db
    return WorkoutExercises(
        workout_id, WorkoutExerciseRepository(store), ExerciseRepository(store), lifetime
    )


def _values(workout: Workout | None = None) -> dict:
    if workout is None:
        return {"name": "", "description": "", "is_public": False}
    return {
        "name": workout.name,
        "description": workout.description or "",
        "is_public": workout.is_public,
    }


def _build(name: str, description: str, is_public: bool):
    # Created from the admin portal, so never owned by an app user
    async def build() -> Workout:
        return Workout(
            name=require_text(name, "Name"),
            description=optional_text(description),
            is_public=is_public,
        )

    return build


async def _render_edit(
    request: Request,
    form: ResourceForm,
    editor: WorkoutExercises | None,
    values: dict,
    workout_id: str,
    adding: bool = False,
):
    """Render the edit page with its exercise list and, if open, the picker."""
    if editor is not None and adding:
        await editor.open_picker()
    return render(
        request,
        "workouts/form.html",
        {
            "values": values,
            "record_id": workout_id,
            "error": form.error,
            "editor": editor,
            "adding": adding,
        },
        status_code=400 if form.error else 200,
    )


@router.get("", response_class=HTMLResponse)
async def list_workouts(request: Request, lifetime: ViewLifetime = Depends(view_lifetime)):
    """Workout list page, newest first."""
    view = ResourceList(_repo(request), get_locks(request), lifetime)
    await view.load()
    return render(request, "workouts/list.html", {"view": view})


@router.get("/new", response_class=HTMLResponse)
async def new_workout(request: Request):
    return render(
        request, "workouts/form.html", {"values": _values(), "record_id": None, "error": None}
    )


@router.post("/new")
async def create_workout(
    request: Request,
    name: str = Form(""),
    description: str = Form(""),
    is_public: bool = Form(False),
    lifetime: ViewLifetime = Depends(view_lifetime),
):
    """Create a workout and open it so exercises can be added."""
    form = _form(request, lifetime)
    result = await form.create(_build(name, description, is_public))
    if result.ok:
        return RedirectResponse(url=result.redirect_to, status_code=302)
    values = {"name": name, "description": description, "is_public": is_public}
    return render(
        request,
        "workouts/form.html",
        {"values": values, "record_id": None, "error": form.error},
        status_code=400,
    )


@router.get("/{workout_id}", response_class=HTMLResponse)
async def edit_workout(
    request: Request,
    workout_id: str,
    add: bool = False,
    lifetime: ViewLifetime = Depends(view_lifetime),
):
    """Workout edit page. ``?add=1`` opens the exercise picker."""
    form = _form(request, lifetime)
    workout = await form.load(workout_id)
    if workout is None:
        return not_found(request, "Workout", LIST_URL)
    editor = _editor(request, workout_id, lifetime)
    await editor.load()
    return await _render_edit(request, form, editor, _values(workout), workout_id, adding=add)


@router.post("/{workout_id}")
async def update_workout(
    request: Request,
    workout_id: str,
    name: str = Form(""),
    description: str = Form(""),
    is_public: bool = Form(False),
    lifetime: ViewLifetime = Depends(view_lifetime),
):
    """Save a workout's name, description and visibility."""
    form = _form(request, lifetime)
    result = await form.update(workout_id, _build(name, description, is_public))
    if result.ok:
        return RedirectResponse(url=result.redirect_to, status_code=302)
    editor = _editor(request, workout_id, lifetime)
    await editor.load()
    values = {"name": name, "description": description, "is_public": is_public}
    return await _render_edit(request, form, editor, values, workout_id)


@router.post("/{workout_id}/delete")
async def delete_workout(
    request: Request,
    workout_id: str,
    origin: str = Form("list"),
    lifetime: ViewLifetime = Depends(view_lifetime),
):
    """Delete a workout from the list page or from its edit page."""
    if origin == "edit":
        form = _form(request, lifetime)
        result = await form.delete(workout_id)
        if result.ok:
            return RedirectResponse(url=result.redirect_to, status_code=302)
        workout = await form.load(workout_id)
        if workout is None:
            return not_found(request, "Workout", LIST_URL)
        editor = _editor(request, workout_id, lifetime)
        await editor.load()
        return await _render_edit(request, form, editor, _values(workout), workout_id)

    view = ResourceList(_repo(request), get_locks(request), lifetime)
    await view.load()
    await view.delete(workout_id)
    return render(request, "workouts/list.html", {"view": view})


@router.post("/{workout_id}/exercises", response_class=HTMLResponse)
async def add_workout_exercise(
    request: Request,
    workout_id: str,
    exercise_id: str = Form(""),
    lifetime: ViewLifetime = Depends(view_lifetime),
):
    """Append an exercise to the end of the workout."""
    form = _form(request, lifetime)
    workout = await form.load(workout_id)
    if workout is None:
        return not_found(request, "Workout", LIST_URL)
    editor = _editor(request, workout_id, lifetime)
    await editor.load()
    added = await editor.add(exercise_id)
    # The picker stays open when nothing was added
    return await _render_edit(
        request, form, editor, _values(workout), workout_id, adding=added is None
    )


@router.post("/{workout_id}/exercises/{link_id}/delete", response_class=HTMLResponse)
async def remove_workout_exercise(
    request: Request,
    workout_id: str,
    link_id: str,
    lifetime: ViewLifetime = Depends(view_lifetime),
):
    """Take an exercise out of the workout. Remaining positions are kept as they are."""
    form = _form(request, lifetime)
    workout = await form.load(workout_id)
    if workout is None:
        return not_found(request, "Workout", LIST_URL)
    editor = _editor(request, workout_id, lifetime)
    await editor.load()
    await editor.remove(link_id)
    return await _render_edit(request, form, editor, _values(workout), workout_id)
