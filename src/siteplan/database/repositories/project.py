"""Project repository for database operations."""
from typing import List, Optional
from uuid import UUID

from sqlmodel import Session

from ..models import Project, ProjectCreate, ProjectUpdate, utcnow
from ..repository import BaseRepository


class ProjectRepository(BaseRepository[Project, ProjectCreate, ProjectUpdate]):
    """Repository for Project entities."""

    def __init__(self, session: Session):
        super().__init__(Project, session)

    def get_recent(self, limit: Optional[int] = None) -> List[Project]:
        """Get projects, most recently updated first."""
        return self.get_all(limit=limit, order_by="updated_at", descending=True)

    def touch(self, project_id: UUID) -> None:
        """Bump updated_at of a project."""
        project = self.get(project_id)
        if project is not None:
            project.updated_at = utcnow()
            self.session.add(project)
            self.session.flush()
