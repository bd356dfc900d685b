"""Project commands."""

import uuid

import click


@click.group()
def project() -> None:
    """Create, list and delete projects."""
    pass


@project.command("list")
def project_list() -> None:
    """List projects, most recently updated first."""
    from siteplan.cli.console import print_info, print_table
    from siteplan.cli.service_helpers import cli_errors, services

    with cli_errors():
        projects = services.projects.list()

    if not projects:
        print_info("No projects")
        return

    rows = [
        [p.id, p.name, p.updated_at.strftime("%Y-%m-%d %H:%M")]
        for p in projects
    ]
    print_table("Projects", ["ID", "Name", "Updated"], rows)


@project.command("create")
@click.argument("name")
def project_create(name: str) -> None:
    """Create a project."""
    from siteplan.cli.console import print_success
    from siteplan.cli.service_helpers import cli_errors, services
    from siteplan.database import ProjectCreate

    with cli_errors():
        created = services.projects.create(ProjectCreate(name=name))
    print_success(f"Created project {created.name} ({created.id})")


@project.command("delete")
@click.argument("project_id", type=click.UUID)
def project_delete(project_id: uuid.UUID) -> None:
    """Delete a project with all its site items."""
    from siteplan.cli.console import print_success, print_warning
    from siteplan.cli.service_helpers import cli_errors, services

    with cli_errors():
        deleted = services.projects.delete(project_id)
    if deleted:
        print_success(f"Deleted project {project_id}")
    else:
        print_warning(f"Project {project_id} does not exist")
