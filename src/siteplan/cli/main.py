"""
Siteplan CLI - plan web projects from the terminal
"""

from typing import Optional

import click

from siteplan import __version__
from siteplan.core.config import load_config_cascade, set_config
from siteplan.core.logger import configure_logging

from .commands import config, db, item, project, serve, tree, user
from .service_helpers import reset_factory


@click.group()
@click.version_option(version=__version__, prog_name="siteplan")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Path to a TOML config file",
)
@click.pass_context
def cli(ctx: click.Context, config_path: Optional[str]) -> None:
    """Siteplan - site maps, page markers and flows for web projects

    Use 'siteplan COMMAND --help' for more information on a command.
    """
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path

    settings = load_config_cascade(config_path)
    set_config(settings)
    configure_logging(settings.logging)
    # Rebuild services against the configuration of this invocation
    reset_factory()


# Register commands
cli.add_command(serve)
cli.add_command(db)
cli.add_command(config)
cli.add_command(project)
cli.add_command(user)
cli.add_command(tree)
cli.add_command(item)


if __name__ == "__main__":
    cli()
