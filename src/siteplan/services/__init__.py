"""
Services Layer
==============

Business operations on top of the database layer. Every service takes a
DatabaseConnection and runs each call in its own unit of work unless a
``uow`` is passed in.
"""

from .base import BaseService
from .factory import ServiceFactory
from .flow import FlowService
from .marker import MarkerService
from .project import ProjectService, UserService
from .site_map import SiteMapService

__all__ = [
    "BaseService",
    "ServiceFactory",
    "ProjectService",
    "UserService",
    "SiteMapService",
    "MarkerService",
    "FlowService",
]
