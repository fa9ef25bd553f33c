"""Initialize project command."""

import click

from ..clients.local import init_db
from ..config import get_settings
from .base import async_command, echo_info, echo_success


@click.command()
@async_command
async def init():
    """Initialize the local database and media storage.

    Creates the data directory, the SQLite schema and the default upload
    bucket. Running it again leaves existing data in place.
    """
    settings = get_settings()
    data_dir = settings.DATA_DIR

    echo_info(f"Initializing armadmin in {data_dir}")
    data_dir.mkdir(parents=True, exist_ok=True)

    await init_db(settings.db_path)
    echo_success("Database initialized")

    bucket_dir = settings.storage_dir / settings.storage_bucket
    bucket_dir.mkdir(parents=True, exist_ok=True)
    echo_success(f"Media bucket '{settings.storage_bucket}' ready")

    click.echo()
    click.echo("Next steps:")
    click.echo("  1. Create an admin account:")
    click.echo("     armadmin users create you@example.com --admin")
    click.echo()
    click.echo("  2. Start the portal:")
    click.echo("     armadmin serve")
