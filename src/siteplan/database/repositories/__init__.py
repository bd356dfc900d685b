"""Concrete repository implementations."""
from .flow import FlowEdgeRepository, FlowNodeRepository
from .marker import MarkerHistoryRepository, MarkerRepository
from .project import ProjectRepository
from .site_item import SiteItemRepository
from .user import UserRepository

__all__ = [
    "UserRepository",
    "ProjectRepository",
    "SiteItemRepository",
    "MarkerRepository",
    "MarkerHistoryRepository",
    "FlowNodeRepository",
    "FlowEdgeRepository",
]
