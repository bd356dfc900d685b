"""Marker and marker history repositories for database operations."""
from typing import List
from uuid import UUID

from sqlalchemy import func
from sqlmodel import Session, SQLModel, select

from ..models import Marker, MarkerCreate, MarkerHistory, MarkerHistoryCreate, MarkerUpdate
from ..repository import BaseRepository


class MarkerRepository(BaseRepository[Marker, MarkerCreate, MarkerUpdate]):
    """Repository for Marker entities."""

    def __init__(self, session: Session):
        super().__init__(Marker, session)

    def get_by_site_item(self, site_item_id: UUID) -> List[Marker]:
        """Get all markers of a page, ordered by marker number."""
        statement = (
            select(Marker)
            .where(Marker.site_item_id == site_item_id)
            .order_by(Marker.number, Marker.created_at)
        )
        return list(self.session.exec(statement).all())

    def next_number(self, site_item_id: UUID) -> int:
        """Next free marker number on a page (1-based)."""
        statement = select(func.max(Marker.number)).where(Marker.site_item_id == site_item_id)
        current = self.session.exec(statement).one()
        return 1 if current is None else current + 1

    def count_by_site_item(self, site_item_id: UUID) -> int:
        statement = (
            select(func.count())
            .select_from(Marker)
            .where(Marker.site_item_id == site_item_id)
        )
        return self.session.exec(statement).one()


class MarkerHistoryRepository(BaseRepository[MarkerHistory, MarkerHistoryCreate, SQLModel]):
    """Repository for MarkerHistory entities."""

    entity_name = "Marker history"

    def __init__(self, session: Session):
        super().__init__(MarkerHistory, session)

    def get_by_marker(self, marker_id: UUID) -> List[MarkerHistory]:
        """Get the history of a marker, newest first."""
        statement = (
            select(MarkerHistory)
            .where(MarkerHistory.marker_id == marker_id)
            .order_by(MarkerHistory.created_at.desc())
        )
        return list(self.session.exec(statement).all())
