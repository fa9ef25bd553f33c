"""CLI entry point for armadmin."""

import click

from . import __version__
from .commands import init, serve, users


@click.group()
@click.version_option(version=__version__, prog_name="armadmin")
def main():
    """armadmin: admin portal for the Armwrestling fitness app.

    Manage the exercise library, workouts, training videos, categories and
    user accounts from a browser.

    Example usage:

        # Set up the local database
        armadmin init

        # Create an admin account
        armadmin users create coach@example.com --admin

        # Start the portal
        armadmin serve
    """
    pass


# Register commands
main.add_command(init)
main.add_command(serve)
main.add_command(users)


def run():
    """Run the CLI."""
    main()


if __name__ == "__main__":
    run()
