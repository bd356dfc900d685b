"""Site item commands."""

import uuid
from typing import Optional

import click

from siteplan.core.tree import SiteItemType

ITEM_TYPES = [t.value for t in SiteItemType]


@click.group()
def item() -> None:
    """Add, move, toggle and delete site items."""
    pass


@item.command("add")
@click.argument("project_id", type=click.UUID)
@click.argument("item_type", metavar="TYPE", type=click.Choice(ITEM_TYPES))
@click.argument("name")
@click.option("--parent", "parent_id", type=click.UUID, default=None, help="Folder to add into")
@click.option("--url", default=None, help="Page URL")
def item_add(
    project_id: uuid.UUID,
    item_type: str,
    name: str,
    parent_id: Optional[uuid.UUID],
    url: Optional[str],
) -> None:
    """Add a site item to a project."""
    from siteplan.cli.console import print_success
    from siteplan.cli.service_helpers import cli_errors, services
    from siteplan.database import SiteItemCreate

    with cli_errors():
        created = services.site_map.add_item(
            project_id,
            SiteItemCreate(type=item_type, name=name, parent_id=parent_id, url=url),
        )
    print_success(f"Added {created.type.value} {created.name} ({created.id})")


@item.command("move")
@click.argument("active_id", type=click.UUID)
@click.argument("over_id", type=click.UUID)
def item_move(active_id: uuid.UUID, over_id: uuid.UUID) -> None:
    """Move ACTIVE_ID onto OVER_ID (into a folder, or after an item)."""
    from siteplan.cli.console import print_success
    from siteplan.cli.service_helpers import cli_errors, services

    with cli_errors():
        site_tree = services.site_map.move_item(active_id, over_id)
        parent = site_tree.find_parent(active_id)

    where = f"into {parent.name}" if parent is not None else "to the top level"
    print_success(f"Moved {site_tree.get(active_id).name} {where}")


@item.command("toggle")
@click.argument("item_id", type=click.UUID)
def item_toggle(item_id: uuid.UUID) -> None:
    """Open or close a folder."""
    from siteplan.cli.console import print_success, print_warning
    from siteplan.cli.service_helpers import cli_errors, services

    with cli_errors():
        toggled = services.site_map.toggle_folder(item_id)

    if toggled.type != SiteItemType.FOLDER:
        print_warning(f"{toggled.name} is not a folder")
        return
    print_success(f"{toggled.name} is now {'open' if toggled.is_open else 'closed'}")


@item.command("delete")
@click.argument("item_id", type=click.UUID)
def item_delete(item_id: uuid.UUID) -> None:
    """Delete a site item and everything below it."""
    from siteplan.cli.console import print_success, print_warning
    from siteplan.cli.service_helpers import cli_errors, services

    with cli_errors():
        deleted = services.site_map.delete_item(item_id)

    if deleted:
        print_success(f"Deleted {deleted} site item{'s' if deleted != 1 else ''}")
    else:
        print_warning(f"Site item {item_id} does not exist")
