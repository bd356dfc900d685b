# services/site_map.py
"""
Site Map Service
================

Tree-aware operations on a project's site items.

The store only knows flat rows (``parent_id`` + ``order``) and deletes
rows one by one. This service loads the rows into a
:class:`~siteplan.core.tree.SiteTree`, applies the structural change there
and writes back the rows whose position changed. Deletion cascades to all
descendants of the removed item.

Usage:
    from siteplan.services import SiteMapService

    service = SiteMapService(database)
    folder = service.add_item(project_id, SiteItemCreate(type="folder", name="Marketing"))
    page = service.add_item(project_id, SiteItemCreate(type="page", name="Home", parent_id=folder.id))
    service.move_item(page.id, other_folder.id)
    for flat in service.flatten(project_id):
        print("  " * flat.depth + flat.item.name)
"""

from typing import Dict, List, Optional
from uuid import UUID

from siteplan.core.exceptions import InvalidTreeOperationError, NotFoundError, ValidationError
from siteplan.core.logger import get_logger
from siteplan.core.tree import FlatNode, SiteItemType, SiteTree
from siteplan.database import SiteItem, SiteItemCreate, SiteItemUpdate, UnitOfWork

from .base import BaseService

logger = get_logger(__name__)


class SiteMapService(BaseService):
    """Service for the site item tree of a project."""

    # =========================================================================
    # Queries
    # =========================================================================

    def list_items(self, project_id: UUID, uow: Optional[UnitOfWork] = None) -> List[SiteItem]:
        """Flat rows of a project, in sibling order."""
        with self._unit(uow) as u:
            u.projects.get_or_raise(project_id)
            return u.site_items.get_by_project(project_id)

    def get_item(self, item_id: UUID, uow: Optional[UnitOfWork] = None) -> SiteItem:
        with self._unit(uow) as u:
            return u.site_items.get_or_raise(item_id)

    def get_tree(self, project_id: UUID, uow: Optional[UnitOfWork] = None) -> SiteTree:
        """Load a project's items as a nested tree."""
        with self._unit(uow) as u:
            u.projects.get_or_raise(project_id)
            return SiteTree.from_rows(u.site_items.get_by_project(project_id))

    def flatten(
        self,
        project_id: UUID,
        include_collapsed: bool = False,
        uow: Optional[UnitOfWork] = None,
    ) -> List[FlatNode]:
        """Pre-order display list of a project's tree with depths."""
        return self.get_tree(project_id, uow=uow).flatten(include_collapsed=include_collapsed)

    # =========================================================================
    # Mutations
    # =========================================================================

    def add_item(
        self,
        project_id: UUID,
        item_in: SiteItemCreate,
        uow: Optional[UnitOfWork] = None,
    ) -> SiteItem:
        """
        Add an item to a project, at the end of its parent folder.

        Args:
            project_id: Project to add to
            item_in: Item data; ``parent_id`` selects the folder (None = root)
            uow: Optional UnitOfWork for database transaction

        Returns:
            The created SiteItem

        Raises:
            NotFoundError: If the project or the parent folder does not exist
            InvalidTreeOperationError: If the parent is not a folder
        """
        if item_in.project_id is not None and item_in.project_id != project_id:
            raise ValidationError("Item project_id does not match the target project")

        with self._unit(uow) as u:
            u.projects.get_or_raise(project_id)

            parent = None
            if item_in.parent_id is not None:
                parent = u.site_items.get(item_in.parent_id)
                if parent is None or parent.project_id != project_id:
                    raise NotFoundError("Parent folder", item_in.parent_id)
                if parent.type != SiteItemType.FOLDER:
                    raise InvalidTreeOperationError(
                        f"Cannot add items to {parent.type.value} {parent.id}; only folders have children"
                    )

            if item_in.type == SiteItemType.FOLDER:
                is_open = True if item_in.is_open is None else item_in.is_open
            else:
                is_open = None

            item = u.site_items.create(
                item_in,
                project_id=project_id,
                is_open=is_open,
                order=u.site_items.next_order(project_id, item_in.parent_id),
            )

            if parent is not None and not parent.is_open:
                u.site_items.update(parent, {"is_open": True})
            u.projects.touch(project_id)

            logger.info(f"Added {item.type.value} {item.id} ({item.name}) to project {project_id}")
            return item

    def update_item(
        self,
        item_id: UUID,
        item_in: SiteItemUpdate,
        uow: Optional[UnitOfWork] = None,
    ) -> SiteItem:
        """
        Update an item's fields.

        A changed ``parent_id`` reparents the item to the end of the new
        folder, with the same checks as a move. ``is_open`` is ignored for
        items that are not folders.
        """
        data = item_in.model_dump(exclude_unset=True)
        if "name" in data and data["name"] is None:
            raise ValidationError("Site item name cannot be empty")

        with self._unit(uow) as u:
            item = u.site_items.get_or_raise(item_id)

            if "parent_id" in data:
                new_parent_id = data.pop("parent_id")
                if new_parent_id != item.parent_id:
                    tree = self._load_tree(u, item.project_id)
                    if new_parent_id is not None and not tree.contains(new_parent_id):
                        raise NotFoundError("Parent folder", new_parent_id)
                    tree.reparent(item.id, new_parent_id)
                    self._write_positions(u, item.project_id, tree)

            if item.type != SiteItemType.FOLDER:
                data.pop("is_open", None)
            elif data.get("is_open", True) is None:
                data.pop("is_open")

            if data:
                item = u.site_items.update(item, data)
            u.projects.touch(item.project_id)
            return item

    def move_item(
        self,
        active_id: UUID,
        over_id: UUID,
        uow: Optional[UnitOfWork] = None,
    ) -> SiteTree:
        """
        Move an item onto another item (drag and drop).

        Dropping on a folder makes the item the folder's first child; dropping
        on anything else places it right after the target.

        Returns:
            The project's tree after the move

        Raises:
            NotFoundError: If either item does not exist
            InvalidTreeOperationError: On cross-project moves or moves into
                the item's own subtree
        """
        with self._unit(uow) as u:
            active = u.site_items.get_or_raise(active_id)
            over = u.site_items.get_or_raise(over_id)
            if active.project_id != over.project_id:
                raise InvalidTreeOperationError("Cannot move items between projects")

            tree = self._load_tree(u, active.project_id)
            tree.move(active.id, over.id)
            changed = self._write_positions(u, active.project_id, tree)
            u.projects.touch(active.project_id)

            logger.info(f"Moved site item {active.id} onto {over.id} ({changed} rows updated)")
            return tree

    def toggle_folder(self, item_id: UUID, uow: Optional[UnitOfWork] = None) -> SiteItem:
        """Open or close a folder. Other item types are returned unchanged."""
        with self._unit(uow) as u:
            item = u.site_items.get_or_raise(item_id)
            if item.type != SiteItemType.FOLDER:
                return item
            currently_open = item.is_open is not False
            return u.site_items.update(item, {"is_open": not currently_open})

    def delete_item(self, item_id: UUID, uow: Optional[UnitOfWork] = None) -> int:
        """
        Delete an item together with all its descendants.

        Markers, marker history and flow content of the deleted items go
        with them. Deleting a missing item is a no-op.

        Returns:
            Number of site items deleted
        """
        with self._unit(uow) as u:
            item = u.site_items.get(item_id)
            if item is None:
                return 0

            project_id = item.project_id
            tree = self._load_tree(u, project_id)
            node = tree.find(item.id)
            ids = [UUID(n.id) for n in node.walk()]
            deleted = u.site_items.delete_many(ids)
            u.projects.touch(project_id)

            logger.info(f"Deleted site item {item_id} and {deleted - 1} descendants")
            return deleted

    # =========================================================================
    # Helpers
    # =========================================================================

    def _load_tree(self, u: UnitOfWork, project_id: UUID) -> SiteTree:
        return SiteTree.from_rows(u.site_items.get_by_project(project_id))

    def _write_positions(self, u: UnitOfWork, project_id: UUID, tree: SiteTree) -> int:
        """Persist parent/order/open state of every node that changed."""
        rows: Dict[str, SiteItem] = {str(row.id): row for row in u.site_items.get_by_project(project_id)}
        nodes = {node.id: node for node in tree}
        changed = 0

        for node_id, parent_id, order in tree.positions():
            row = rows[node_id]
            updates = {}
            parent_uuid = UUID(parent_id) if parent_id is not None else None
            if row.parent_id != parent_uuid:
                updates["parent_id"] = parent_uuid
            if row.order != order:
                updates["order"] = order
            node = nodes[node_id]
            if node.is_folder and row.is_open != node.is_open:
                updates["is_open"] = node.is_open
            if updates:
                u.site_items.update(row, updates)
                changed += 1

        return changed
