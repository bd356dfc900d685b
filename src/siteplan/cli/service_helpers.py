"""
CLI Service Helpers
===================

Access to a singleton ServiceFactory for CLI commands and consistent
error reporting.

The factory is built lazily from the active configuration the first time
a command needs it, so commands such as ``config init`` never touch the
database.

Usage:
    from siteplan.cli.service_helpers import services, cli_errors

    with cli_errors():
        project = services.projects.create(ProjectCreate(name="Redesign"))
"""

from contextlib import contextmanager
from typing import TYPE_CHECKING, Iterator, NoReturn, Optional

from siteplan.core.exceptions import SitePlanError

if TYPE_CHECKING:
    from siteplan.services import ServiceFactory


# Module-level singleton factory for CLI commands
_factory: "Optional[ServiceFactory]" = None
# True when the factory came from set_factory rather than the configuration
_injected = False


def get_factory() -> "ServiceFactory":
    """
    Get the singleton ServiceFactory instance for CLI.

    Created on first access from the ``[database]`` section of the global
    configuration; tables are created if missing.
    """
    global _factory
    if _factory is None:
        from siteplan.core.config import get_config
        from siteplan.database import get_database
        from siteplan.services import ServiceFactory

        config = get_config()
        database = get_database(
            config.get("database", "url", "sqlite:///siteplan.db"),
            echo=config.get("database", "echo", False),
        )
        database.create_tables()
        _factory = ServiceFactory(database)
    return _factory


def set_factory(factory: "Optional[ServiceFactory]") -> None:
    """
    Set a custom ServiceFactory instance, or None to rebuild on next access.

    Args:
        factory: Factory to use for subsequent commands
    """
    global _factory, _injected
    if _factory is not None and _factory is not factory:
        _factory.database.dispose()
    _factory = factory
    _injected = factory is not None


def reset_factory() -> None:
    """
    Forget a factory built from configuration so the next command rebuilds it.

    A factory installed with set_factory is kept.
    """
    if not _injected:
        set_factory(None)


class _ServiceAccessor:
    """Lazy accessor for services through the singleton factory."""

    @property
    def projects(self):
        return get_factory().projects

    @property
    def users(self):
        return get_factory().users

    @property
    def site_map(self):
        return get_factory().site_map

    @property
    def markers(self):
        return get_factory().markers

    @property
    def flows(self):
        return get_factory().flows

    @property
    def database(self):
        return get_factory().database


services = _ServiceAccessor()


def exit_with_error(message: str, code: int = 1) -> NoReturn:
    """Print an error message and exit."""
    from siteplan.cli.console import print_error

    print_error(message)
    raise SystemExit(code)


@contextmanager
def cli_errors() -> Iterator[None]:
    """Turn siteplan errors into an error message and exit code 1."""
    try:
        yield
    except SitePlanError as e:
        exit_with_error(e.message)
