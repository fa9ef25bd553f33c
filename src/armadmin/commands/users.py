"""User account commands."""

import click
import questionary

from ..clients import StoreError, create_client
from ..config import get_settings
from ..db.repositories import ProfileRepository
from ..models.profile import Role
from .base import async_command, echo_error, echo_info, echo_success, ensure_initialized, format_table


@click.group()
@click.pass_context
def users(ctx):
    """Manage portal users and their roles."""
    ensure_initialized(ctx, get_settings())


@users.command()
@click.argument("email")
@click.option("--admin", is_flag=True, help="Give the account the admin role")
@click.option("--password", help="Password (prompted for when omitted)")
@click.pass_context
@async_command
async def create(ctx, email: str, admin: bool, password: str | None):
    """Create a local account. The hosted backend manages its own sign-ups."""
    settings = get_settings()
    if settings.BACKEND != "local":
        echo_error("Accounts can only be created with the local backend")
        ctx.exit(1)

    if not password:
        password = await questionary.password("Password:").ask_async()
    if not password:
        echo_error("A password is required")
        ctx.exit(1)

    client = create_client(settings)
    try:
        user_id = await client.auth.create_user(
            email.strip(), password, Role.ADMIN if admin else Role.USER
        )
    except StoreError as e:
        echo_error(f"Could not create {email}: {e.message}")
        ctx.exit(1)
    finally:
        await client.aclose()

    echo_success(f"Created {'admin' if admin else 'user'} {email} ({user_id})")


@users.command(name="list")
@async_command
async def list_users():
    """List all profiles with their role and ban status."""
    client = create_client(get_settings())
    try:
        profiles = await ProfileRepository(client.db).list_all()
    finally:
        await client.aclose()

    if not profiles:
        echo_info("No users found. Create one with 'armadmin users create'")
        return

    rows = [
        [profile.id, profile.role.value, "yes" if profile.is_banned else "no"]
        for profile in profiles
    ]
    click.echo()
    click.echo(format_table(["ID", "Role", "Banned"], rows))
    click.echo()
    click.echo(f"Total: {len(profiles)} user(s)")


async def _update_profile(ctx, user_id: str, message: str, **changes) -> None:
    client = create_client(get_settings())
    repo = ProfileRepository(client.db)
    try:
        await repo.get(user_id)
        if "role" in changes:
            await repo.set_role(user_id, changes["role"])
        if "is_banned" in changes:
            await repo.set_banned(user_id, changes["is_banned"])
    except StoreError as e:
        if e.is_not_found:
            echo_error(f"User {user_id} not found")
        else:
            echo_error(f"Could not update {user_id}: {e.message}")
        ctx.exit(1)
    finally:
        await client.aclose()
    echo_success(message)


@users.command()
@click.argument("user_id")
@click.pass_context
@async_command
async def promote(ctx, user_id: str):
    """Give a user the admin role."""
    await _update_profile(ctx, user_id, f"{user_id} is now an admin", role=Role.ADMIN)


@users.command()
@click.argument("user_id")
@click.pass_context
@async_command
async def demote(ctx, user_id: str):
    """Take the admin role away from a user."""
    await _update_profile(ctx, user_id, f"{user_id} is now a regular user", role=Role.USER)


@users.command()
@click.argument("user_id")
@click.pass_context
@async_command
async def ban(ctx, user_id: str):
    """Ban a user from the app and the portal."""
    await _update_profile(ctx, user_id, f"{user_id} is banned", is_banned=True)


@users.command()
@click.argument("user_id")
@click.pass_context
@async_command
async def unban(ctx, user_id: str):
    """Lift a user's ban."""
    await _update_profile(ctx, user_id, f"{user_id} is no longer banned", is_banned=False)
