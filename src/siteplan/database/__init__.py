# database/__init__.py
"""
Siteplan Database Layer
=======================

SQLModel-based database layer with Unit of Work pattern.

Components:
    - DatabaseConnection: Engine and session management
    - BaseRepository: Generic CRUD operations
    - UnitOfWork: Transaction management with repository access
    - Models: User, Project, SiteItem, Marker, MarkerHistory, FlowNode, FlowEdge

Usage:
    from siteplan.database import get_database, UnitOfWork
    from siteplan.database.models import ProjectCreate

    db = get_database("sqlite:///siteplan.db")
    db.create_tables()

    with UnitOfWork(db).auto_commit() as uow:
        project = uow.projects.create(ProjectCreate(name="Redesign"))
        print(f"Created project: {project.id}")
"""

from .connection import DatabaseConnection, get_database
from .models import (
    FlowEdge,
    FlowEdgeCreate,
    FlowNode,
    FlowNodeCreate,
    FlowSave,
    Marker,
    MarkerCreate,
    MarkerHistory,
    MarkerHistoryCreate,
    MarkerUpdate,
    Project,
    ProjectCreate,
    ProjectUpdate,
    SiteItem,
    SiteItemCreate,
    SiteItemMove,
    SiteItemUpdate,
    TimestampMixin,
    User,
    UserCreate,
)
from .repositories import (
    FlowEdgeRepository,
    FlowNodeRepository,
    MarkerHistoryRepository,
    MarkerRepository,
    ProjectRepository,
    SiteItemRepository,
    UserRepository,
)
from .repository import BaseRepository
from .unit_of_work import UnitOfWork

__all__ = [
    # Connection
    "DatabaseConnection",
    "get_database",
    # Base
    "BaseRepository",
    "UnitOfWork",
    "TimestampMixin",
    # Models
    "User",
    "UserCreate",
    "Project",
    "ProjectCreate",
    "ProjectUpdate",
    "SiteItem",
    "SiteItemCreate",
    "SiteItemUpdate",
    "SiteItemMove",
    "Marker",
    "MarkerCreate",
    "MarkerUpdate",
    "MarkerHistory",
    "MarkerHistoryCreate",
    "FlowNode",
    "FlowNodeCreate",
    "FlowEdge",
    "FlowEdgeCreate",
    "FlowSave",
    # Repositories
    "UserRepository",
    "ProjectRepository",
    "SiteItemRepository",
    "MarkerRepository",
    "MarkerHistoryRepository",
    "FlowNodeRepository",
    "FlowEdgeRepository",
]
