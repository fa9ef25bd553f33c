"""FastAPI application for the armadmin web interface."""

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.responses import RedirectResponse, Response
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates

from .. import __version__
from ..clients import AdminClient, create_client
from ..clients.local import STORAGE_URL_PREFIX, init_db
from ..config import Settings, get_settings
from ..services.inflight import InFlightRegistry
from ..services.media import MediaUploader
from .dependencies import AdminRequired, ViewClosed
from .navigation import nav_items
from .routers import auth, categories, dashboard, exercises, users, videos, workouts

logger = logging.getLogger(__name__)

# Template and static file paths
TEMPLATES_DIR = Path(__file__).parent / "templates"
STATIC_DIR = Path(__file__).parent / "static"


def create_app(settings: Settings | None = None, client: AdminClient | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    When no client is given one is built from settings and closed on
    shutdown; a client passed in stays owned by the caller.
    """
    settings = settings or get_settings()
    owns_client = client is None
    client = client or create_client(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan handler - runs on startup and shutdown."""
        if client.backend == "local":
            if not settings.db_path.exists():
                await init_db(settings.db_path)
            settings.storage_dir.mkdir(parents=True, exist_ok=True)
        logger.info(f"armadmin started with {client.backend} backend")
        yield
        if owns_client:
            await client.aclose()

    app = FastAPI(
        title="armadmin",
        description="Admin portal for managing the Armwrestling fitness app",
        version=__version__,
        lifespan=lifespan,
    )

    # Mount static files
    if STATIC_DIR.exists():
        app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")
    if client.backend == "local":
        app.mount(
            STORAGE_URL_PREFIX,
            StaticFiles(directory=settings.storage_dir, check_dir=False),
            name="storage",
        )

    # Setup templates
    templates = Jinja2Templates(directory=TEMPLATES_DIR)
    templates.env.globals["nav_items"] = nav_items

    # Shared state for routers
    app.state.settings = settings
    app.state.client = client
    app.state.templates = templates
    app.state.locks = InFlightRegistry()
    app.state.uploader = MediaUploader(client.storage, settings.storage_bucket)

    @app.exception_handler(AdminRequired)
    async def admin_required(request: Request, exc: AdminRequired):
        return RedirectResponse(url="/login", status_code=302)

    @app.exception_handler(ViewClosed)
    async def view_closed(request: Request, exc: ViewClosed):
        return Response(status_code=499)

    # Include routers
    app.include_router(auth.router)
    app.include_router(dashboard.router)
    app.include_router(categories.router)
    app.include_router(exercises.router)
    app.include_router(workouts.router)
    app.include_router(videos.router)
    app.include_router(users.router)

    @app.get("/health")
    async def health():
        """Health check endpoint."""
        return {"status": "healthy", "version": __version__, "backend": client.backend}

    return app
