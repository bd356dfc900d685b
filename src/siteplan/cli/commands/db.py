"""Database management commands."""

import click


@click.group()
def db() -> None:
    """Database management commands."""
    pass


@db.command("init")
def db_init() -> None:
    """Create all tables."""
    from siteplan.cli.console import print_success
    from siteplan.cli.service_helpers import services

    database = services.database
    database.create_tables()
    print_success(f"Database ready: {database.url}")


@db.command("drop")
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
def db_drop(yes: bool) -> None:
    """Drop all tables and their data."""
    from siteplan.cli.console import print_success, print_warning
    from siteplan.cli.service_helpers import services

    database = services.database
    if not yes and not click.confirm(f"Drop all tables in {database.url}?", default=False):
        print_warning("Aborted")
        return

    database.drop_tables()
    print_success(f"Dropped all tables in {database.url}")
