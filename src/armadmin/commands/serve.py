"""Web server command."""

import click

from ..config import get_settings
from .base import configure_logging, ensure_initialized


@click.command()
@click.option("--host", default="127.0.0.1", help="Host to bind to (default: 127.0.0.1)")
@click.option("--port", "-p", default=8000, type=int, help="Port to bind to (default: 8000)")
@click.option("--reload", is_flag=True, help="Enable auto-reload for development")
@click.pass_context
def serve(ctx: click.Context, host: str, port: int, reload: bool):
    """Start the admin portal.

    Examples:

        # Start on default port (8000)
        armadmin serve

        # Development mode with auto-reload
        armadmin serve --reload
    """
    settings = get_settings()
    ensure_initialized(ctx, settings)
    configure_logging(settings)

    import uvicorn

    from ..web import create_app

    click.echo()
    click.echo(click.style("Starting armadmin...", fg="green"))
    click.echo()
    click.echo(f"  Local:   http://{host}:{port}")
    click.echo(f"  Backend: {settings.BACKEND}")
    click.echo()
    click.echo("Press Ctrl+C to stop the server.")
    click.echo()

    uvicorn.run(
        create_app(settings) if not reload else "armadmin.web:create_app",
        host=host,
        port=port,
        reload=reload,
        factory=reload,
        log_level=settings.LOG_LEVEL.lower(),
    )
