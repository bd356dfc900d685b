# database/models.py
"""
SQLModel domain models for the siteplan database layer.

Models:
    - User: Author of markers and marker history entries
    - Project: A web project being planned
    - SiteItem: Node of a project's content tree (folder, page, image, flow, ppt)
    - Marker: Positional annotation on a page
    - MarkerHistory: Comment/status trail of a marker
    - FlowNode / FlowEdge: Diagram elements of a flow item
"""
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from uuid import UUID, uuid4

from sqlalchemy import DateTime
from sqlmodel import JSON, Column, Field, Relationship, SQLModel

from siteplan.core.tree import SiteItemType


def utcnow() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


class TimestampMixin(SQLModel):
    """Mixin for created timestamps."""

    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))


# =============================================================================
# User Model
# =============================================================================


class UserBase(SQLModel):
    """Shared user properties."""

    username: str = Field(index=True, unique=True, min_length=1, max_length=255)
    display_name: Optional[str] = Field(default=None, max_length=255)


class User(UserBase, TimestampMixin, table=True):
    """User database model."""

    __tablename__ = "users"

    id: Optional[UUID] = Field(default_factory=uuid4, primary_key=True)


class UserCreate(UserBase):
    """Schema for creating a user."""

    pass


# =============================================================================
# Project Model
# =============================================================================


class ProjectBase(SQLModel):
    """Shared project properties."""

    name: str = Field(index=True, min_length=1, max_length=255)


class Project(ProjectBase, TimestampMixin, table=True):
    """Project database model."""

    __tablename__ = "projects"

    id: Optional[UUID] = Field(default_factory=uuid4, primary_key=True)
    updated_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))

    # Relationships
    site_items: List["SiteItem"] = Relationship(
        back_populates="project",
        sa_relationship_kwargs={"cascade": "all, delete-orphan"},
    )


class ProjectCreate(ProjectBase):
    """Schema for creating a project."""

    pass


class ProjectUpdate(SQLModel):
    """Schema for updating a project (all fields optional)."""

    name: Optional[str] = Field(default=None, min_length=1, max_length=255)


# =============================================================================
# Site Item Model
# =============================================================================


class SiteItemBase(SQLModel):
    """Shared site item properties."""

    type: SiteItemType
    name: str = Field(min_length=1, max_length=255)
    url: Optional[str] = Field(default=None, max_length=2048)
    # Plain column: the store does not cascade through the tree, services do
    parent_id: Optional[UUID] = Field(default=None, index=True)
    is_open: Optional[bool] = Field(default=None)
    meta: Optional[Dict[str, Any]] = Field(default=None, sa_column=Column("metadata", JSON))


class SiteItem(SiteItemBase, TimestampMixin, table=True):
    """Site item database model."""

    __tablename__ = "site_items"

    id: Optional[UUID] = Field(default_factory=uuid4, primary_key=True)
    project_id: UUID = Field(foreign_key="projects.id", index=True)
    order: int = Field(default=0)

    # Relationships
    project: Optional[Project] = Relationship(back_populates="site_items")
    markers: List["Marker"] = Relationship(
        back_populates="site_item",
        sa_relationship_kwargs={"cascade": "all, delete-orphan"},
    )
    flow_nodes: List["FlowNode"] = Relationship(
        back_populates="flow",
        sa_relationship_kwargs={"cascade": "all, delete-orphan"},
    )
    flow_edges: List["FlowEdge"] = Relationship(
        back_populates="flow",
        sa_relationship_kwargs={"cascade": "all, delete-orphan"},
    )


class SiteItemCreate(SiteItemBase):
    """Schema for creating a site item. project_id may come from the URL instead."""

    project_id: Optional[UUID] = None


class SiteItemUpdate(SQLModel):
    """Schema for updating a site item (all fields optional)."""

    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    url: Optional[str] = Field(default=None, max_length=2048)
    parent_id: Optional[UUID] = None
    is_open: Optional[bool] = None
    meta: Optional[Dict[str, Any]] = None


class SiteItemMove(SQLModel):
    """Schema for a drag-and-drop move onto another item."""

    over_id: UUID


# =============================================================================
# Marker Model
# =============================================================================


class MarkerBase(SQLModel):
    """Shared marker properties."""

    number: Optional[int] = Field(default=None, ge=1)
    x: int
    y: int
    type: str = Field(default="default", max_length=50)
    title: Optional[str] = Field(default=None, max_length=255)
    description: Optional[str] = Field(default=None)
    color: str = Field(max_length=50)
    status: str = Field(default="pending", max_length=50)


class Marker(MarkerBase, TimestampMixin, table=True):
    """Marker database model."""

    __tablename__ = "markers"

    id: Optional[UUID] = Field(default_factory=uuid4, primary_key=True)
    site_item_id: UUID = Field(foreign_key="site_items.id", index=True)
    author_id: UUID = Field(foreign_key="users.id")

    # Relationships
    site_item: Optional[SiteItem] = Relationship(back_populates="markers")
    history: List["MarkerHistory"] = Relationship(
        back_populates="marker",
        sa_relationship_kwargs={"cascade": "all, delete-orphan"},
    )


class MarkerCreate(MarkerBase):
    """Schema for creating a marker. site_item_id may come from the URL instead."""

    site_item_id: Optional[UUID] = None
    author_id: UUID


class MarkerUpdate(SQLModel):
    """Schema for updating a marker (all fields optional)."""

    number: Optional[int] = Field(default=None, ge=1)
    x: Optional[int] = None
    y: Optional[int] = None
    type: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    color: Optional[str] = None
    status: Optional[str] = None


# =============================================================================
# Marker History Model
# =============================================================================


class MarkerHistoryBase(SQLModel):
    """Shared marker history properties."""

    type: str = Field(max_length=50)  # 'comment', 'status', ...
    content: str
    author_id: UUID = Field(foreign_key="users.id")


class MarkerHistory(MarkerHistoryBase, TimestampMixin, table=True):
    """Marker history database model."""

    __tablename__ = "marker_history"

    id: Optional[UUID] = Field(default_factory=uuid4, primary_key=True)
    marker_id: UUID = Field(foreign_key="markers.id", index=True)

    # Relationships
    marker: Optional[Marker] = Relationship(back_populates="history")


class MarkerHistoryCreate(MarkerHistoryBase):
    """Schema for creating a marker history entry."""

    pass


# =============================================================================
# Flow Models
# =============================================================================


class FlowNodeBase(SQLModel):
    """Shared flow node properties."""

    node_id: str = Field(max_length=255)
    type: str = Field(max_length=50)
    position: Dict[str, Any] = Field(sa_column=Column(JSON, nullable=False))
    data: Dict[str, Any] = Field(sa_column=Column(JSON, nullable=False))
    style: Optional[Dict[str, Any]] = Field(default=None, sa_column=Column(JSON))


class FlowNode(FlowNodeBase, TimestampMixin, table=True):
    """Flow node database model."""

    __tablename__ = "flow_nodes"

    id: Optional[UUID] = Field(default_factory=uuid4, primary_key=True)
    flow_id: UUID = Field(foreign_key="site_items.id", index=True)

    flow: Optional[SiteItem] = Relationship(back_populates="flow_nodes")


class FlowNodeCreate(FlowNodeBase):
    """Schema for creating a flow node."""

    flow_id: UUID


class FlowEdgeBase(SQLModel):
    """Shared flow edge properties."""

    edge_id: str = Field(max_length=255)
    source: str = Field(max_length=255)
    target: str = Field(max_length=255)
    animated: bool = Field(default=True)
    style: Optional[Dict[str, Any]] = Field(default=None, sa_column=Column(JSON))


class FlowEdge(FlowEdgeBase, TimestampMixin, table=True):
    """Flow edge database model."""

    __tablename__ = "flow_edges"

    id: Optional[UUID] = Field(default_factory=uuid4, primary_key=True)
    flow_id: UUID = Field(foreign_key="site_items.id", index=True)

    flow: Optional[SiteItem] = Relationship(back_populates="flow_edges")


class FlowEdgeCreate(FlowEdgeBase):
    """Schema for creating a flow edge."""

    flow_id: UUID


# =============================================================================
# Flow save payload (React Flow shape)
# =============================================================================


class FlowNodeIn(SQLModel):
    """A node as sent by the diagram editor."""

    id: str
    type: str = "default"
    position: Dict[str, Any]
    data: Dict[str, Any] = Field(default_factory=dict)
    style: Optional[Dict[str, Any]] = None


class FlowEdgeIn(SQLModel):
    """An edge as sent by the diagram editor."""

    id: str
    source: str
    target: str
    animated: Optional[bool] = None
    style: Optional[Dict[str, Any]] = None


class FlowSave(SQLModel):
    """Payload of a flow save."""

    nodes: List[FlowNodeIn] = Field(default_factory=list)
    edges: List[FlowEdgeIn] = Field(default_factory=list)
