"""
Site Item Tree
==============

In-memory model of a project's content tree. A project holds folders,
pages, images, flows and presentations; only folders have children.

The store keeps items as flat rows (``parent_id`` + ``order``). This module
turns those rows into a nested tree, flattens the tree for display and
implements the structural edits performed in the site map panel:
add, move, toggle, rename and remove.

Usage:
    from siteplan.core.tree import SiteTree

    tree = SiteTree.from_rows(rows)
    tree.move(active_id, over_id)
    for flat in tree.flatten():
        print("  " * flat.depth + flat.item.name)
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Tuple

from siteplan.core.exceptions import InvalidTreeOperationError, NotFoundError
from siteplan.core.logger import get_logger

logger = get_logger(__name__)


class SiteItemType(str, Enum):
    """Kinds of site items."""

    FOLDER = "folder"
    PAGE = "page"
    IMAGE = "image"
    FLOW = "flow"
    PPT = "ppt"


@dataclass
class SiteNode:
    """A node of the site item tree."""

    id: str
    type: SiteItemType
    name: str
    url: Optional[str] = None
    is_open: Optional[bool] = None
    meta: Optional[Dict[str, Any]] = None
    children: List["SiteNode"] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.id = str(self.id)
        self.type = SiteItemType(self.type)
        if self.is_folder:
            if self.is_open is None:
                self.is_open = True
        else:
            if self.children:
                raise InvalidTreeOperationError(
                    f"Only folders can have children ({self.type.value} {self.id})"
                )
            self.is_open = None

    @property
    def is_folder(self) -> bool:
        return self.type == SiteItemType.FOLDER

    def walk(self) -> Iterator["SiteNode"]:
        """Yield this node and all its descendants in pre-order."""
        yield self
        for child in self.children:
            yield from child.walk()

    def to_dict(self) -> Dict[str, Any]:
        """Convert the node and its subtree to a dictionary."""
        data = {
            "id": self.id,
            "type": self.type.value,
            "name": self.name,
            "url": self.url,
            "is_open": self.is_open,
            "meta": self.meta,
        }
        if self.is_folder:
            data["children"] = [child.to_dict() for child in self.children]
        return data


@dataclass
class FlatNode:
    """A node as it appears in the flattened, display-ordered list."""

    item: SiteNode
    parent_id: Optional[str]
    depth: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.item.id,
            "type": self.item.type.value,
            "name": self.item.name,
            "url": self.item.url,
            "is_open": self.item.is_open,
            "meta": self.item.meta,
            "parent_id": self.parent_id,
            "depth": self.depth,
            "child_count": len(self.item.children),
        }


def _row_value(row: Any, key: str, default: Any = None) -> Any:
    if isinstance(row, Mapping):
        return row.get(key, default)
    return getattr(row, key, default)


def build_tree(rows: Iterable[Any]) -> List[SiteNode]:
    """
    Build a nested tree from flat site item rows.

    Rows may be ORM objects or mappings exposing ``id``, ``parent_id``,
    ``order``, ``type``, ``name``, ``url``, ``is_open`` and ``meta``.
    Siblings are sorted by ``order`` and then by row position.

    Rows whose parent is missing or is not a folder are placed at the root.
    Rows caught in a parent cycle are lifted to the root as well, so the
    returned tree is always acyclic.

    Args:
        rows: Flat site item rows

    Returns:
        List of root nodes
    """
    nodes: Dict[str, SiteNode] = {}
    entries: List[Tuple[SiteNode, Optional[str], int, int]] = []

    for index, row in enumerate(rows):
        node = SiteNode(
            id=_row_value(row, "id"),
            type=_row_value(row, "type"),
            name=_row_value(row, "name"),
            url=_row_value(row, "url"),
            is_open=_row_value(row, "is_open"),
            meta=_row_value(row, "meta"),
        )
        if node.id in nodes:
            raise InvalidTreeOperationError(f"Duplicate site item id {node.id}")
        parent_id = _row_value(row, "parent_id")
        parent_id = str(parent_id) if parent_id is not None else None
        nodes[node.id] = node
        entries.append((node, parent_id, _row_value(row, "order", 0) or 0, index))

    children_of: Dict[Optional[str], List[Tuple[int, int, SiteNode]]] = {}
    for node, parent_id, order, index in entries:
        parent = nodes.get(parent_id) if parent_id is not None else None
        if parent is None or not parent.is_folder or parent is node:
            if parent_id is not None:
                logger.debug(f"Site item {node.id} has no usable parent {parent_id}, placing at root")
            parent_id = None
        children_of.setdefault(parent_id, []).append((order, index, node))

    for bucket in children_of.values():
        bucket.sort(key=lambda entry: (entry[0], entry[1]))

    reached = set()

    def link(root: SiteNode) -> None:
        reached.add(root.id)
        stack = [root]
        while stack:
            current = stack.pop()
            current.children = []
            for _, _, child in children_of.get(current.id, []):
                if child.id in reached:
                    continue
                reached.add(child.id)
                current.children.append(child)
                stack.append(child)

    roots = [node for _, _, node in children_of.get(None, [])]
    for root in roots:
        link(root)

    for node, _, _, _ in entries:
        if node.id not in reached:
            logger.warning(f"Site item {node.id} is part of a parent cycle, placing at root")
            roots.append(node)
            link(node)

    return roots


def flatten_tree(nodes: List[SiteNode], include_collapsed: bool = False) -> List[FlatNode]:
    """
    Flatten a tree in pre-order, annotating each node with its depth.

    Args:
        nodes: Root nodes
        include_collapsed: Also descend into closed folders

    Returns:
        List of FlatNode in display order
    """
    flat: List[FlatNode] = []

    def visit(items: List[SiteNode], parent_id: Optional[str], depth: int) -> None:
        for item in items:
            flat.append(FlatNode(item=item, parent_id=parent_id, depth=depth))
            if item.children and (include_collapsed or item.is_open):
                visit(item.children, item.id, depth + 1)

    visit(nodes, None, 0)
    return flat


class SiteTree:
    """
    Mutable site item tree.

    All ids are compared as strings, so UUID objects can be passed in
    directly.
    """

    def __init__(self, roots: Optional[List[SiteNode]] = None):
        self.roots: List[SiteNode] = list(roots or [])

    @classmethod
    def from_rows(cls, rows: Iterable[Any]) -> "SiteTree":
        """Create a tree from flat store rows."""
        return cls(build_tree(rows))

    def __iter__(self) -> Iterator[SiteNode]:
        for root in self.roots:
            yield from root.walk()

    def __len__(self) -> int:
        return sum(1 for _ in self)

    # --- Lookup ---

    def _locate(self, item_id: Any) -> Optional[Tuple[List[SiteNode], int, Optional[SiteNode]]]:
        """Return (siblings, index, parent) for an item, or None."""
        item_id = str(item_id)
        stack: List[Tuple[List[SiteNode], Optional[SiteNode]]] = [(self.roots, None)]
        while stack:
            siblings, parent = stack.pop()
            for index, node in enumerate(siblings):
                if node.id == item_id:
                    return siblings, index, parent
                if node.children:
                    stack.append((node.children, node))
        return None

    def find(self, item_id: Any) -> Optional[SiteNode]:
        """Find an item by id."""
        location = self._locate(item_id)
        if location is None:
            return None
        siblings, index, _ = location
        return siblings[index]

    def get(self, item_id: Any) -> SiteNode:
        """Find an item by id or raise NotFoundError."""
        node = self.find(item_id)
        if node is None:
            raise NotFoundError("Site item", item_id)
        return node

    def contains(self, item_id: Any) -> bool:
        return self._locate(item_id) is not None

    def find_parent(self, item_id: Any) -> Optional[SiteNode]:
        """Return the folder holding an item (None for root items)."""
        location = self._locate(item_id)
        if location is None:
            return None
        return location[2]

    def find_by_url(self, url: str) -> Optional[SiteNode]:
        """Return the first item (pre-order) with the given URL."""
        for node in self:
            if node.url == url:
                return node
        return None

    def is_descendant(self, ancestor_id: Any, item_id: Any) -> bool:
        """True if item_id sits somewhere below ancestor_id."""
        ancestor = self.find(ancestor_id)
        if ancestor is None:
            return False
        item_id = str(item_id)
        return any(node.id == item_id for node in ancestor.walk() if node is not ancestor)

    # --- Mutation ---

    def add(self, node: SiteNode, parent_id: Any = None) -> SiteNode:
        """
        Append a node to the root list or to a folder.

        Args:
            node: Node to add (may carry a subtree)
            parent_id: Folder to add into, None for the root list

        Returns:
            The added node

        Raises:
            NotFoundError: If the parent does not exist
            InvalidTreeOperationError: If the parent is not a folder or an id is reused
        """
        for incoming in node.walk():
            if self.contains(incoming.id):
                raise InvalidTreeOperationError(f"Site item {incoming.id} already exists")

        if parent_id is None:
            self.roots.append(node)
            return node

        parent = self.get(parent_id)
        if not parent.is_folder:
            raise InvalidTreeOperationError(
                f"Cannot add items to {parent.type.value} {parent.id}; only folders have children"
            )
        parent.children.append(node)
        parent.is_open = True
        return node

    def remove(self, item_id: Any) -> Optional[SiteNode]:
        """Detach an item with its subtree. Returns None if it is absent."""
        location = self._locate(item_id)
        if location is None:
            return None
        siblings, index, _ = location
        return siblings.pop(index)

    def move(self, active_id: Any, over_id: Any) -> SiteNode:
        """
        Move an item onto another one.

        Dropping on a folder makes the item the folder's first child and
        opens the folder. Dropping on any other item places it right after
        that item, among its siblings.

        Raises:
            NotFoundError: If either item does not exist
            InvalidTreeOperationError: If the target lies inside the moved subtree
        """
        active = self.get(active_id)
        over = self.get(over_id)
        if active is over:
            return active
        if self.is_descendant(active.id, over.id):
            raise InvalidTreeOperationError(
                f"Cannot move {active.id} into its own subtree"
            )

        self.remove(active.id)
        if over.is_folder:
            over.children.insert(0, active)
            over.is_open = True
        else:
            siblings, index, _ = self._locate(over.id)
            siblings.insert(index + 1, active)
        logger.debug(f"Moved site item {active.id} onto {over.id}")
        return active

    def reparent(self, item_id: Any, parent_id: Any = None) -> SiteNode:
        """Move an item to the end of another folder (or of the root list)."""
        node = self.get(item_id)
        if parent_id is not None:
            parent = self.get(parent_id)
            if parent is node or self.is_descendant(node.id, parent.id):
                raise InvalidTreeOperationError(f"Cannot move {node.id} into its own subtree")
            if not parent.is_folder:
                raise InvalidTreeOperationError(
                    f"Cannot add items to {parent.type.value} {parent.id}; only folders have children"
                )
        self.remove(node.id)
        return self.add(node, parent_id)

    def toggle(self, item_id: Any) -> SiteNode:
        """Open or close a folder. Non-folders are returned unchanged."""
        node = self.get(item_id)
        if node.is_folder:
            node.is_open = not node.is_open
        return node

    def rename(self, item_id: Any, name: str) -> SiteNode:
        node = self.get(item_id)
        node.name = name
        return node

    # --- Views ---

    def flatten(self, include_collapsed: bool = False) -> List[FlatNode]:
        return flatten_tree(self.roots, include_collapsed=include_collapsed)

    def collect_by_type(self, item_type: Any) -> List[SiteNode]:
        item_type = SiteItemType(item_type)
        return [node for node in self if node.type == item_type]

    def count_by_type(self, item_type: Any) -> int:
        return len(self.collect_by_type(item_type))

    def first_of_type(self, item_type: Any) -> Optional[SiteNode]:
        item_type = SiteItemType(item_type)
        return next((node for node in self if node.type == item_type), None)

    def folders(self) -> List[SiteNode]:
        return self.collect_by_type(SiteItemType.FOLDER)

    def positions(self) -> Iterator[Tuple[str, Optional[str], int]]:
        """Yield (id, parent_id, order) for every node in pre-order."""

        def visit(items: List[SiteNode], parent_id: Optional[str]):
            for order, node in enumerate(items):
                yield node.id, parent_id, order
                yield from visit(node.children, node.id)

        yield from visit(self.roots, None)

    def to_list(self) -> List[Dict[str, Any]]:
        return [root.to_dict() for root in self.roots]
