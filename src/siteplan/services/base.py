# services/base.py
"""
Base class and utilities for all services.
"""

from contextlib import contextmanager
from typing import Iterator, Optional

from siteplan.database import DatabaseConnection, UnitOfWork


class BaseService:
    """
    Base class for all services.

    Every public service method accepts an optional ``uow``. When given, the
    work joins that unit and the caller decides when to commit; otherwise the
    method runs in its own unit that commits on success and rolls back on
    any exception.
    """

    def __init__(self, database: DatabaseConnection) -> None:
        """Initialize the service.

        Args:
            database: Connection used to open units of work
        """
        self._database = database

    @contextmanager
    def _unit(self, uow: Optional[UnitOfWork] = None) -> Iterator[UnitOfWork]:
        """Join the caller's unit of work or run in a fresh auto-committing one."""
        if uow is not None:
            yield uow
            return
        with UnitOfWork(self._database).auto_commit() as own:
            yield own
