"""User commands."""

from typing import Optional

import click


@click.group()
def user() -> None:
    """Manage marker authors."""
    pass


@user.command("create")
@click.argument("username")
@click.option("--display-name", default=None, help="Name shown next to markers")
def user_create(username: str, display_name: Optional[str]) -> None:
    """Create a user."""
    from siteplan.cli.console import print_success
    from siteplan.cli.service_helpers import cli_errors, services
    from siteplan.database import UserCreate

    with cli_errors():
        created = services.users.create(UserCreate(username=username, display_name=display_name))
    print_success(f"Created user {created.username} ({created.id})")


@user.command("list")
def user_list() -> None:
    """List users."""
    from siteplan.cli.console import print_info, print_table
    from siteplan.cli.service_helpers import cli_errors, services

    with cli_errors():
        users = services.users.list()

    if not users:
        print_info("No users")
        return
    print_table("Users", ["ID", "Username", "Display name"], [[u.id, u.username, u.display_name or ""] for u in users])
