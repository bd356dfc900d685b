# services/project.py
"""
Project Service
===============

CRUD for projects and users.

Usage:
    from siteplan.services import ProjectService

    service = ProjectService(database)
    project = service.create(ProjectCreate(name="Redesign"))
    for project in service.list():
        print(project.name)
"""

from typing import List, Optional
from uuid import UUID

from siteplan.core.exceptions import ValidationError
from siteplan.core.logger import get_logger
from siteplan.database import (
    Project,
    ProjectCreate,
    ProjectUpdate,
    UnitOfWork,
    User,
    UserCreate,
)

from .base import BaseService

logger = get_logger(__name__)


class ProjectService(BaseService):
    """Service for project management."""

    def list(self, uow: Optional[UnitOfWork] = None) -> List[Project]:
        """All projects, most recently updated first."""
        with self._unit(uow) as u:
            return u.projects.get_recent()

    def get(self, project_id: UUID, uow: Optional[UnitOfWork] = None) -> Project:
        with self._unit(uow) as u:
            return u.projects.get_or_raise(project_id)

    def create(self, project_in: ProjectCreate, uow: Optional[UnitOfWork] = None) -> Project:
        with self._unit(uow) as u:
            project = u.projects.create(project_in)
            logger.info(f"Created project {project.id} ({project.name})")
            return project

    def update(
        self, project_id: UUID, project_in: ProjectUpdate, uow: Optional[UnitOfWork] = None
    ) -> Project:
        if project_in.model_dump(exclude_unset=True).get("name", "") is None:
            raise ValidationError("Project name cannot be empty")
        with self._unit(uow) as u:
            project = u.projects.get_or_raise(project_id)
            return u.projects.update(project, project_in)

    def delete(self, project_id: UUID, uow: Optional[UnitOfWork] = None) -> bool:
        """Delete a project with all its items. Deleting a missing project is a no-op."""
        with self._unit(uow) as u:
            deleted = u.projects.delete_by_id(project_id)
            if deleted:
                logger.info(f"Deleted project {project_id}")
            return deleted


class UserService(BaseService):
    """Service for marker authors."""

    def list(self, uow: Optional[UnitOfWork] = None) -> List[User]:
        with self._unit(uow) as u:
            return u.users.get_all(limit=None, order_by="username")

    def get(self, user_id: UUID, uow: Optional[UnitOfWork] = None) -> User:
        with self._unit(uow) as u:
            return u.users.get_or_raise(user_id)

    def create(self, user_in: UserCreate, uow: Optional[UnitOfWork] = None) -> User:
        with self._unit(uow) as u:
            if u.users.get_by_username(user_in.username) is not None:
                raise ValidationError(f"Username {user_in.username!r} is already taken")
            user = u.users.create(user_in)
            logger.info(f"Created user {user.username}")
            return user
