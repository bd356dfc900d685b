"""Site item repository for database operations."""
from typing import List, Optional
from uuid import UUID

from sqlalchemy import func
from sqlmodel import Session, select

from ..models import SiteItem, SiteItemCreate, SiteItemUpdate
from ..repository import BaseRepository


class SiteItemRepository(BaseRepository[SiteItem, SiteItemCreate, SiteItemUpdate]):
    """
    Repository for SiteItem entities.

    Deleting an item here does not touch its children; tree-aware
    deletion lives in SiteMapService.
    """

    entity_name = "Site item"

    def __init__(self, session: Session):
        super().__init__(SiteItem, session)

    def get_by_project(self, project_id: UUID) -> List[SiteItem]:
        """Get all items of a project, in sibling order."""
        statement = (
            select(SiteItem)
            .where(SiteItem.project_id == project_id)
            .order_by(SiteItem.order, SiteItem.created_at)
        )
        return list(self.session.exec(statement).all())

    def get_children(self, project_id: UUID, parent_id: Optional[UUID]) -> List[SiteItem]:
        """Get the direct children of a folder (or the root items when parent_id is None)."""
        statement = select(SiteItem).where(SiteItem.project_id == project_id)
        if parent_id is None:
            statement = statement.where(SiteItem.parent_id.is_(None))
        else:
            statement = statement.where(SiteItem.parent_id == parent_id)
        statement = statement.order_by(SiteItem.order, SiteItem.created_at)
        return list(self.session.exec(statement).all())

    def next_order(self, project_id: UUID, parent_id: Optional[UUID]) -> int:
        """Order value that places a new item after its future siblings."""
        statement = select(func.max(SiteItem.order)).where(SiteItem.project_id == project_id)
        if parent_id is None:
            statement = statement.where(SiteItem.parent_id.is_(None))
        else:
            statement = statement.where(SiteItem.parent_id == parent_id)
        current = self.session.exec(statement).one()
        return 0 if current is None else current + 1

    def count_by_project(self, project_id: UUID) -> int:
        """Count items in a project."""
        statement = (
            select(func.count())
            .select_from(SiteItem)
            .where(SiteItem.project_id == project_id)
        )
        return self.session.exec(statement).one()
