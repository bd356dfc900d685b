"""Site tree display command."""

import uuid

import click


@click.group()
def tree() -> None:
    """Inspect a project's site map."""
    pass


@tree.command("show")
@click.argument("project_id", type=click.UUID)
@click.option("--all", "include_collapsed", is_flag=True, help="Expand closed folders too")
def tree_show(project_id: uuid.UUID, include_collapsed: bool) -> None:
    """Print the site item tree of a project."""
    from siteplan.cli.console import print_site_tree
    from siteplan.cli.service_helpers import cli_errors, services

    with cli_errors():
        project = services.projects.get(project_id)
        site_tree = services.site_map.get_tree(project_id)

    print_site_tree(project.name, site_tree.roots, include_collapsed=include_collapsed)
