# tests/conftest.py
"""
Global pytest fixtures for siteplan tests.
"""

import pytest

from siteplan.core.config import get_default_config, reset_config
from siteplan.database import DatabaseConnection, ProjectCreate, SiteItemCreate, UserCreate
from siteplan.services import ServiceFactory


@pytest.fixture(autouse=True)
def _reset_global_config():
    """Keep the global configuration from leaking between tests."""
    yield
    reset_config()


@pytest.fixture
def db_url(tmp_path):
    return f"sqlite:///{tmp_path / 'siteplan-test.db'}"


@pytest.fixture
def database(db_url):
    """File-backed SQLite database with all tables created."""
    db = DatabaseConnection(db_url)
    db.create_tables()
    yield db
    db.dispose()


@pytest.fixture
def services(database):
    return ServiceFactory(database)


@pytest.fixture
def project(services):
    return services.projects.create(ProjectCreate(name="Redesign"))


@pytest.fixture
def user(services):
    return services.users.create(UserCreate(username="alice", display_name="Alice"))


@pytest.fixture
def site_items(services, project):
    """
    A small site map:

        Marketing/        (folder, open)
            Home          (page)
            About         (page)
        Docs/             (folder, closed)
            Guide         (page)
        Checkout          (flow)
    """
    add = services.site_map.add_item
    marketing = add(project.id, SiteItemCreate(type="folder", name="Marketing"))
    home = add(project.id, SiteItemCreate(type="page", name="Home", url="/", parent_id=marketing.id))
    about = add(project.id, SiteItemCreate(type="page", name="About", url="/about", parent_id=marketing.id))
    docs = add(project.id, SiteItemCreate(type="folder", name="Docs"))
    guide = add(project.id, SiteItemCreate(type="page", name="Guide", parent_id=docs.id))
    services.site_map.toggle_folder(docs.id)
    checkout = add(project.id, SiteItemCreate(type="flow", name="Checkout"))
    return {
        "marketing": marketing,
        "home": home,
        "about": about,
        "docs": docs,
        "guide": guide,
        "checkout": checkout,
    }


@pytest.fixture
def app_config(db_url):
    config = get_default_config()
    config.set("database", "url", db_url)
    config.set("logging", "level", "WARNING")
    return config


@pytest.fixture
def client(app_config, database):
    """FastAPI test client bound to the test database."""
    from fastapi.testclient import TestClient

    from siteplan.server.api import create_app

    app = create_app(config=app_config, database=database)
    with TestClient(app) as test_client:
        yield test_client
