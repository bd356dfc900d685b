"""Unit of Work pattern implementation for the siteplan database layer."""
from __future__ import annotations

from contextlib import contextmanager
from typing import TYPE_CHECKING, Dict

from sqlmodel import Session

from .connection import DatabaseConnection
from .repositories import (
    FlowEdgeRepository,
    FlowNodeRepository,
    MarkerHistoryRepository,
    MarkerRepository,
    ProjectRepository,
    SiteItemRepository,
    UserRepository,
)

if TYPE_CHECKING:
    from typing import Generator


class UnitOfWork:
    """
    Unit of Work pattern implementation.

    Manages database transactions and provides access to repositories.
    Ensures all operations within a unit are committed or rolled back together.

    Objects loaded through a unit stay readable after it is closed
    (the session does not expire them on commit).

    Usage:
        with UnitOfWork(db) as uow:
            project = uow.projects.create(project_data)
            uow.commit()

    Or as a context manager that auto-commits:
        with UnitOfWork(db).auto_commit() as uow:
            project = uow.projects.create(project_data)
            # Automatically committed on exit
    """

    _repository_types = {
        "users": UserRepository,
        "projects": ProjectRepository,
        "site_items": SiteItemRepository,
        "markers": MarkerRepository,
        "marker_history": MarkerHistoryRepository,
        "flow_nodes": FlowNodeRepository,
        "flow_edges": FlowEdgeRepository,
    }

    def __init__(self, database: DatabaseConnection):
        self._database = database
        self._session: Session | None = None
        # Repository instances (lazily initialized)
        self._repositories: Dict[str, object] = {}

    @property
    def session(self) -> Session:
        """Get the current session."""
        if self._session is None:
            raise RuntimeError("UnitOfWork not started. Use 'with' statement.")
        return self._session

    def _repository(self, name: str):
        if name not in self._repositories:
            self._repositories[name] = self._repository_types[name](self.session)
        return self._repositories[name]

    @property
    def users(self) -> UserRepository:
        """User repository instance."""
        return self._repository("users")

    @property
    def projects(self) -> ProjectRepository:
        """Project repository instance."""
        return self._repository("projects")

    @property
    def site_items(self) -> SiteItemRepository:
        """Site item repository instance."""
        return self._repository("site_items")

    @property
    def markers(self) -> MarkerRepository:
        """Marker repository instance."""
        return self._repository("markers")

    @property
    def marker_history(self) -> MarkerHistoryRepository:
        """Marker history repository instance."""
        return self._repository("marker_history")

    @property
    def flow_nodes(self) -> FlowNodeRepository:
        """Flow node repository instance."""
        return self._repository("flow_nodes")

    @property
    def flow_edges(self) -> FlowEdgeRepository:
        """Flow edge repository instance."""
        return self._repository("flow_edges")

    def _open(self) -> None:
        self._session = Session(self._database.engine, expire_on_commit=False)

    def __enter__(self) -> UnitOfWork:
        """Start the unit of work."""
        self._open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """End the unit of work, rolling back if there was an exception."""
        if exc_type is not None:
            self.rollback()
        self.close()

    def commit(self) -> None:
        """Commit the current transaction."""
        self.session.commit()

    def rollback(self) -> None:
        """Rollback the current transaction."""
        self.session.rollback()

    def close(self) -> None:
        """Close the session."""
        if self._session is not None:
            self._session.close()
            self._session = None
            self._repositories = {}

    @contextmanager
    def auto_commit(self) -> Generator[UnitOfWork, None, None]:
        """
        Context manager that auto-commits on successful exit.

        Usage:
            with UnitOfWork(db).auto_commit() as uow:
                uow.projects.create(...)
                # Auto-committed here
        """
        self._open()
        try:
            yield self
            self.commit()
        except Exception:
            self.rollback()
            raise
        finally:
            self.close()
