# services/marker.py
"""
Marker Service
==============

Markers are numbered annotations placed at a position on a page. Each
marker keeps a history trail of comments and status changes.
"""

from typing import List, Optional
from uuid import UUID

from siteplan.core.exceptions import ValidationError
from siteplan.core.logger import get_logger
from siteplan.database import (
    Marker,
    MarkerCreate,
    MarkerHistory,
    MarkerHistoryCreate,
    MarkerUpdate,
    UnitOfWork,
)

from .base import BaseService

logger = get_logger(__name__)


class MarkerService(BaseService):
    """Service for markers and their history."""

    def list_for_item(self, site_item_id: UUID, uow: Optional[UnitOfWork] = None) -> List[Marker]:
        """Markers of a site item ordered by number."""
        with self._unit(uow) as u:
            u.site_items.get_or_raise(site_item_id)
            return u.markers.get_by_site_item(site_item_id)

    def get(self, marker_id: UUID, uow: Optional[UnitOfWork] = None) -> Marker:
        with self._unit(uow) as u:
            return u.markers.get_or_raise(marker_id)

    def create(
        self,
        marker_in: MarkerCreate,
        site_item_id: Optional[UUID] = None,
        uow: Optional[UnitOfWork] = None,
    ) -> Marker:
        """
        Place a marker on a site item.

        Args:
            marker_in: Marker data; ``number`` defaults to the next free number
            site_item_id: Target item, overrides ``marker_in.site_item_id``
            uow: Optional UnitOfWork for database transaction

        Raises:
            NotFoundError: If the site item or the author does not exist
            ValidationError: If no site item is given
        """
        site_item_id = site_item_id or marker_in.site_item_id
        if site_item_id is None:
            raise ValidationError("site_item_id is required")

        with self._unit(uow) as u:
            u.site_items.get_or_raise(site_item_id)
            u.users.get_or_raise(marker_in.author_id)
            number = marker_in.number or u.markers.next_number(site_item_id)
            marker = u.markers.create(marker_in, site_item_id=site_item_id, number=number)
            logger.debug(f"Created marker #{marker.number} on site item {site_item_id}")
            return marker

    def update(
        self, marker_id: UUID, marker_in: MarkerUpdate, uow: Optional[UnitOfWork] = None
    ) -> Marker:
        data = marker_in.model_dump(exclude_unset=True)
        for required in ("number", "x", "y", "type", "color", "status"):
            if required in data and data[required] is None:
                raise ValidationError(f"Marker {required} cannot be null")
        with self._unit(uow) as u:
            marker = u.markers.get_or_raise(marker_id)
            return u.markers.update(marker, data)

    def delete(self, marker_id: UUID, uow: Optional[UnitOfWork] = None) -> bool:
        """Delete a marker and its history. Deleting a missing marker is a no-op."""
        with self._unit(uow) as u:
            return u.markers.delete_by_id(marker_id)

    def history(self, marker_id: UUID, uow: Optional[UnitOfWork] = None) -> List[MarkerHistory]:
        """History of a marker, newest first."""
        with self._unit(uow) as u:
            u.markers.get_or_raise(marker_id)
            return u.marker_history.get_by_marker(marker_id)

    def add_history(
        self,
        marker_id: UUID,
        history_in: MarkerHistoryCreate,
        uow: Optional[UnitOfWork] = None,
    ) -> MarkerHistory:
        with self._unit(uow) as u:
            u.markers.get_or_raise(marker_id)
            u.users.get_or_raise(history_in.author_id)
            return u.marker_history.create(history_in, marker_id=marker_id)
