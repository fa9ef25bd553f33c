"""Training video routes."""

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile
from fastapi.responses import HTMLResponse, RedirectResponse

from ...db.repositories import VideoRepository
from ...models.video import Video
from ...services.forms import FormError, optional_text, require_text
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

router = APIRouter(prefix="/videos", tags=["videos"], dependencies=[Depends(require_admin)])

LIST_URL = "/videos"


def _repo(request: Request) -> VideoRepository:
    return VideoRepository(get_client(request).db)


def _form(request: Request, lifetime: ViewLifetime | None = None) -> ResourceForm:
    return ResourceForm(
        _repo(request), LIST_URL, get_locks(request), open_after_create=True, lifetime=lifetime
    )


def _values(video: Video | None = None) -> dict:
    if video is None:
        return {"title": "", "description": "", "url": ""}
    return {"title": video.title, "description": video.description or "", "url": video.url}


def _builder(uploader: MediaUploader, values: dict, media: MediaFile | None):
    async def build() -> Video:
        title = require_text(values["title"], "Title")
        if media is None and not (values["url"] or "").strip():
            raise FormError("Provide a video URL or upload a file")
        url = await resolve_media_url(uploader, media, values["url"])
        return Video(title=title, url=url, description=optional_text(values["description"]))

    return build


def _render_form(request: Request, form: ResourceForm, values: dict, record_id: str | None = None):
    return render(
        request,
        "videos/form.html",
        {"values": values, "record_id": record_id, "error": form.error},
        status_code=400 if form.error else 200,
    )


@router.get("", response_class=HTMLResponse)
async def list_videos(request: Request, lifetime: ViewLifetime = Depends(view_lifetime)):
    """Video list page, newest first."""
    view = ResourceList(_repo(request), get_locks(request), lifetime)
    await view.load()
    return render(request, "videos/list.html", {"view": view})


@router.get("/new", response_class=HTMLResponse)
async def new_video(request: Request):
    return _render_form(request, _form(request), _values())


@router.post("/new")
async def create_video(
    request: Request,
    title: str = Form(""),
    description: str = Form(""),
    url: str = Form(""),
    video_file: UploadFile | None = File(None),
    lifetime: ViewLifetime = Depends(view_lifetime),
):
    """Create a video and open its edit page."""
    values = {"title": title, "description": description, "url": url}
    form = _form(request, lifetime)
    media = await read_upload(video_file)

    result = await form.create(_builder(get_uploader(request), values, media))
    if result.ok:
        return RedirectResponse(url=result.redirect_to, status_code=302)
    return _render_form(request, form, values)


@router.get("/{video_id}", response_class=HTMLResponse)
async def edit_video(request: Request, video_id: str, lifetime: ViewLifetime = Depends(view_lifetime)):
    form = _form(request, lifetime)
    video = await form.load(video_id)
    if video is None:
        return not_found(request, "Video", LIST_URL)
    return _render_form(request, form, _values(video), video_id)


@router.post("/{video_id}")
async def update_video(
    request: Request,
    video_id: str,
    title: str = Form(""),
    description: str = Form(""),
    url: str = Form(""),
    video_file: UploadFile | None = File(None),
    lifetime: ViewLifetime = Depends(view_lifetime),
):
    """Save changes to a video, replacing its file if a new one was picked."""
    values = {"title": title, "description": description, "url": url}
    form = _form(request, lifetime)
    media = await read_upload(video_file)

    result = await form.update(video_id, _builder(get_uploader(request), values, media))
    if result.ok:
        return RedirectResponse(url=result.redirect_to, status_code=302)
    return _render_form(request, form, values, video_id)


@router.post("/{video_id}/delete")
async def delete_video(
    request: Request,
    video_id: str,
    origin: str = Form("list"),
    lifetime: ViewLifetime = Depends(view_lifetime),
):
    """Delete a video from the list page or from its edit page."""
    if origin == "edit":
        form = _form(request, lifetime)
        result = await form.delete(video_id)
        if result.ok:
            return RedirectResponse(url=result.redirect_to, status_code=302)
        video = await form.load(video_id)
        if video is None:
            return not_found(request, "Video", LIST_URL)
        return _render_form(request, form, _values(video), video_id)

    view = ResourceList(_repo(request), get_locks(request), lifetime)
    await view.load()
    await view.delete(video_id)
    return render(request, "videos/list.html", {"view": view})
