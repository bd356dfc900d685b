"""
Siteplan Web API
================
A FastAPI-based REST service for projects, their site item tree,
page markers and flow diagrams.

Run with ``siteplan serve`` or ``python -m siteplan.server.api``.
"""

import argparse
import os
from typing import Any, Dict, List, Optional
from urllib.parse import urlsplit
from uuid import UUID

import uvicorn
from fastapi import APIRouter, Depends, FastAPI, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from starlette.exceptions import HTTPException as StarletteHTTPException

from siteplan import __version__
from siteplan.core.config import Config, load_config_cascade
from siteplan.core.exceptions import NotFoundError, SitePlanError, ValidationError
from siteplan.core.logger import configure_logging, get_logger
from siteplan.database import (
    DatabaseConnection,
    FlowSave,
    MarkerCreate,
    MarkerHistoryCreate,
    MarkerUpdate,
    ProjectCreate,
    ProjectUpdate,
    SiteItemCreate,
    SiteItemMove,
    SiteItemUpdate,
    UserCreate,
    get_database,
)
from siteplan.services import ServiceFactory

logger = get_logger(__name__)

#: Environment variable carrying an explicit config path to reloaded workers
CONFIG_ENV_VAR = "SITEPLAN_CONFIG"


class ErrorResponse(BaseModel):
    success: bool = False
    error: str
    detail: Optional[Any] = None


def _error(status_code: int, error: str, detail: Any = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=error, detail=detail).model_dump(),
    )


def get_services(request: Request) -> ServiceFactory:
    return request.app.state.services


router = APIRouter(prefix="/api")


# =============================================================================
# Health and users
# =============================================================================


@router.get("/health")
def health(request: Request) -> Dict[str, Any]:
    database: DatabaseConnection = request.app.state.database
    return {
        "status": "ok",
        "version": __version__,
        "database": urlsplit(database.url).scheme,
    }


@router.get("/users")
def list_users(services: ServiceFactory = Depends(get_services)):
    return services.users.list()


@router.post("/users", status_code=status.HTTP_201_CREATED)
def create_user(user_in: UserCreate, services: ServiceFactory = Depends(get_services)):
    return services.users.create(user_in)


# =============================================================================
# Projects
# =============================================================================


@router.get("/projects")
def list_projects(services: ServiceFactory = Depends(get_services)):
    return services.projects.list()


@router.post("/projects", status_code=status.HTTP_201_CREATED)
def create_project(project_in: ProjectCreate, services: ServiceFactory = Depends(get_services)):
    return services.projects.create(project_in)


@router.get("/projects/{project_id}")
def get_project(project_id: UUID, services: ServiceFactory = Depends(get_services)):
    return services.projects.get(project_id)


@router.patch("/projects/{project_id}")
def update_project(
    project_id: UUID,
    project_in: ProjectUpdate,
    services: ServiceFactory = Depends(get_services),
):
    return services.projects.update(project_id, project_in)


@router.delete("/projects/{project_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_project(project_id: UUID, services: ServiceFactory = Depends(get_services)):
    services.projects.delete(project_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# =============================================================================
# Site items
# =============================================================================


@router.get("/projects/{project_id}/items")
def list_items(project_id: UUID, services: ServiceFactory = Depends(get_services)):
    return services.site_map.list_items(project_id)


@router.post("/projects/{project_id}/items", status_code=status.HTTP_201_CREATED)
def add_project_item(
    project_id: UUID,
    item_in: SiteItemCreate,
    services: ServiceFactory = Depends(get_services),
):
    return services.site_map.add_item(project_id, item_in)


@router.get("/projects/{project_id}/tree")
def get_tree(
    project_id: UUID,
    flat: bool = False,
    include_collapsed: bool = False,
    services: ServiceFactory = Depends(get_services),
) -> List[Dict[str, Any]]:
    tree = services.site_map.get_tree(project_id)
    if flat:
        return [node.to_dict() for node in tree.flatten(include_collapsed=include_collapsed)]
    return tree.to_list()


@router.post("/items", status_code=status.HTTP_201_CREATED)
def add_item(item_in: SiteItemCreate, services: ServiceFactory = Depends(get_services)):
    if item_in.project_id is None:
        raise ValidationError("project_id is required")
    return services.site_map.add_item(item_in.project_id, item_in)


@router.get("/items/{item_id}")
def get_item(item_id: UUID, services: ServiceFactory = Depends(get_services)):
    return services.site_map.get_item(item_id)


@router.patch("/items/{item_id}")
def update_item(
    item_id: UUID,
    item_in: SiteItemUpdate,
    services: ServiceFactory = Depends(get_services),
):
    return services.site_map.update_item(item_id, item_in)


@router.delete("/items/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_item(item_id: UUID, services: ServiceFactory = Depends(get_services)):
    services.site_map.delete_item(item_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/items/{item_id}/move")
def move_item(
    item_id: UUID,
    move: SiteItemMove,
    services: ServiceFactory = Depends(get_services),
) -> List[Dict[str, Any]]:
    tree = services.site_map.move_item(item_id, move.over_id)
    return [node.to_dict() for node in tree.flatten()]


@router.post("/items/{item_id}/toggle")
def toggle_item(item_id: UUID, services: ServiceFactory = Depends(get_services)):
    return services.site_map.toggle_folder(item_id)


# =============================================================================
# Markers
# =============================================================================


@router.get("/items/{item_id}/markers")
def list_markers(item_id: UUID, services: ServiceFactory = Depends(get_services)):
    return services.markers.list_for_item(item_id)


@router.post("/items/{item_id}/markers", status_code=status.HTTP_201_CREATED)
def add_item_marker(
    item_id: UUID,
    marker_in: MarkerCreate,
    services: ServiceFactory = Depends(get_services),
):
    return services.markers.create(marker_in, site_item_id=item_id)


@router.post("/markers", status_code=status.HTTP_201_CREATED)
def create_marker(marker_in: MarkerCreate, services: ServiceFactory = Depends(get_services)):
    return services.markers.create(marker_in)


@router.get("/markers/{marker_id}")
def get_marker(marker_id: UUID, services: ServiceFactory = Depends(get_services)):
    return services.markers.get(marker_id)


@router.patch("/markers/{marker_id}")
def update_marker(
    marker_id: UUID,
    marker_in: MarkerUpdate,
    services: ServiceFactory = Depends(get_services),
):
    return services.markers.update(marker_id, marker_in)


@router.delete("/markers/{marker_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_marker(marker_id: UUID, services: ServiceFactory = Depends(get_services)):
    services.markers.delete(marker_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/markers/{marker_id}/history")
def list_marker_history(marker_id: UUID, services: ServiceFactory = Depends(get_services)):
    return services.markers.history(marker_id)


@router.post("/markers/{marker_id}/history", status_code=status.HTTP_201_CREATED)
def add_marker_history(
    marker_id: UUID,
    history_in: MarkerHistoryCreate,
    services: ServiceFactory = Depends(get_services),
):
    return services.markers.add_history(marker_id, history_in)


# =============================================================================
# Flows
# =============================================================================


@router.get("/flows/{flow_id}/nodes")
def list_flow_nodes(flow_id: UUID, services: ServiceFactory = Depends(get_services)):
    return services.flows.get_nodes(flow_id)


@router.get("/flows/{flow_id}/edges")
def list_flow_edges(flow_id: UUID, services: ServiceFactory = Depends(get_services)):
    return services.flows.get_edges(flow_id)


@router.post("/flows/{flow_id}/save")
def save_flow(flow_id: UUID, payload: FlowSave, services: ServiceFactory = Depends(get_services)):
    nodes, edges = services.flows.save(flow_id, payload)
    return {"nodes": nodes, "edges": edges}


# =============================================================================
# Error handlers
# =============================================================================


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return _error(status.HTTP_400_BAD_REQUEST, "Invalid request", jsonable_errors(exc))


async def not_found_handler(request: Request, exc: NotFoundError):
    return _error(status.HTTP_404_NOT_FOUND, "Not found", str(exc))


async def siteplan_error_handler(request: Request, exc: SitePlanError):
    return _error(status.HTTP_400_BAD_REQUEST, "Invalid request", str(exc))


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return _error(exc.status_code, str(exc.detail), str(exc))


async def general_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled exception on {request.method} {request.url.path}")
    return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


def jsonable_errors(exc: RequestValidationError) -> List[Dict[str, Any]]:
    """Validation errors reduced to location and message."""
    return [
        {"loc": [str(part) for part in error.get("loc", ())], "msg": error.get("msg", "")}
        for error in exc.errors()
    ]


# =============================================================================
# Application factory
# =============================================================================


def create_app(
    config: Optional[Config] = None,
    database: Optional[DatabaseConnection] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        config: Settings to use (default: cascade lookup, honouring $SITEPLAN_CONFIG)
        database: Connection to use (default: built from ``[database]``)

    Returns:
        Configured FastAPI application with tables created
    """
    if config is None:
        config = load_config_cascade(os.environ.get(CONFIG_ENV_VAR))

    configure_logging(config.logging)

    if database is None:
        database = get_database(
            config.get("database", "url", "sqlite:///siteplan.db"),
            echo=config.get("database", "echo", False),
        )
    database.create_tables()

    app = FastAPI(
        title="Siteplan API",
        description="API for planning web projects: site maps, page markers and flows",
        version=__version__,
    )
    app.state.config = config
    app.state.database = database
    app.state.services = ServiceFactory(database)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.get("server", "cors_origins", ["*"]),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(NotFoundError, not_found_handler)
    app.add_exception_handler(SitePlanError, siteplan_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    app.include_router(router)

    logger.info(f"API ready on database {urlsplit(database.url).scheme}")
    return app


def run_server(
    host: str = "127.0.0.1",
    port: int = 8000,
    reload: bool = False,
    config_path: Optional[str] = None,
    log_level: str = "info",
) -> None:
    """Serve the API with uvicorn."""
    if config_path:
        os.environ[CONFIG_ENV_VAR] = config_path

    logger.info(f"Starting server on {host}:{port}")
    uvicorn.run(
        "siteplan.server.api:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
        log_level=log_level,
    )


def main():
    """Main function to run the server."""
    config = load_config_cascade(os.environ.get(CONFIG_ENV_VAR))

    parser = argparse.ArgumentParser(description="Siteplan API Server")
    parser.add_argument("--host", default=config.get("server", "host", "127.0.0.1"), help="Host to bind to")
    parser.add_argument("--port", type=int, default=config.get("server", "port", 8000), help="Port to bind to")
    parser.add_argument("--reload", action="store_true", help="Enable auto-reload")
    parser.add_argument("--config", default=None, help="Path to a TOML config file")
    parser.add_argument("--log-level", default="info", help="Log level")

    args = parser.parse_args()

    run_server(
        host=args.host,
        port=args.port,
        reload=args.reload or config.get("server", "reload", False),
        config_path=args.config,
        log_level=args.log_level,
    )


if __name__ == "__main__":
    main()
