"""Configuration management commands."""

from pathlib import Path

import click


@click.group()
def config() -> None:
    """Configuration commands."""
    pass


@config.command("show")
def config_show() -> None:
    """Show current configuration."""
    from siteplan.cli.console import console
    from siteplan.core.config import get_config

    config_obj = get_config()

    console.print("\n[bold]Current Configuration[/bold]")
    if config_obj._source:
        console.print(f"[dim]Source: {config_obj._source}[/dim]\n")
    else:
        console.print("[dim]Source: defaults (no config file found)[/dim]\n")

    for section_name, section in config_obj.to_dict().items():
        if section:
            console.print(f"[bold blue]\\[{section_name}][/bold blue]")
            for key, value in section.items():
                console.print(f"  {key} = {value}", markup=False)
            console.print()


@config.command("init")
@click.option("--output", "-o", default="siteplan.toml", help="Output file path")
@click.option("--force", "-f", is_flag=True, help="Overwrite existing file")
def config_init(output: str, force: bool) -> None:
    """Create a default configuration file."""
    from siteplan.cli.console import print_success
    from siteplan.cli.service_helpers import exit_with_error
    from siteplan.core.config import create_default_config_file

    if Path(output).exists() and not force:
        click.echo("Use --force to overwrite.")
        exit_with_error(f"File already exists: {output}")

    path = create_default_config_file(output)
    print_success(f"Created configuration file: {path}")
