"""
Service Factory
===============

Reusable factory for instantiating services on a shared database
connection. Used by the web API and the CLI.

Usage:
    from siteplan.services.factory import ServiceFactory

    factory = ServiceFactory(get_database("sqlite:///siteplan.db"))
    tree = factory.site_map.get_tree(project_id)
"""

from siteplan.database import DatabaseConnection

from .flow import FlowService
from .marker import MarkerService
from .project import ProjectService, UserService
from .site_map import SiteMapService


class ServiceFactory:
    """
    Factory for creating service instances bound to one database.

    Services hold no state besides the connection, so a fresh instance is
    returned on each access.

    Attributes:
        database: Connection shared by every service
    """

    def __init__(self, database: DatabaseConnection):
        """
        Initialize the service factory.

        Args:
            database: Connection used by all created services
        """
        self.database = database

    # ========================================================================
    # Service creation
    # ========================================================================

    def create_project_service(self) -> ProjectService:
        return ProjectService(self.database)

    def create_user_service(self) -> UserService:
        return UserService(self.database)

    def create_site_map_service(self) -> SiteMapService:
        return SiteMapService(self.database)

    def create_marker_service(self) -> MarkerService:
        return MarkerService(self.database)

    def create_flow_service(self) -> FlowService:
        return FlowService(self.database)

    # ========================================================================
    # Convenience properties
    # ========================================================================

    @property
    def projects(self) -> ProjectService:
        """Convenience property for create_project_service()."""
        return self.create_project_service()

    @property
    def users(self) -> UserService:
        """Convenience property for create_user_service()."""
        return self.create_user_service()

    @property
    def site_map(self) -> SiteMapService:
        """Convenience property for create_site_map_service()."""
        return self.create_site_map_service()

    @property
    def markers(self) -> MarkerService:
        """Convenience property for create_marker_service()."""
        return self.create_marker_service()

    @property
    def flows(self) -> FlowService:
        """Convenience property for create_flow_service()."""
        return self.create_flow_service()
