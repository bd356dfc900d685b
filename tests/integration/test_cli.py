"""
Integration tests for siteplan CLI.
"""

import uuid

import pytest
from click.testing import CliRunner

from siteplan.cli import cli
from siteplan.cli.service_helpers import get_factory, set_factory
from siteplan.database import ProjectCreate, SiteItemCreate


@pytest.fixture
def runner():
    """Create a CLI test runner."""
    return CliRunner()


@pytest.fixture
def config_file(tmp_path, db_url):
    """Config file pointing the CLI at the test database."""
    path = tmp_path / "siteplan.toml"
    path.write_text(f'[database]\nurl = "{db_url}"\n\n[logging]\nlevel = "WARNING"\n')
    return str(path)


@pytest.fixture
def invoke(runner, config_file, database):
    def run(*args, **kwargs):
        return runner.invoke(cli, ["--config", config_file, *args], **kwargs)

    return run


class TestCLIBasic:
    """Basic CLI tests."""

    def test_cli_help(self, runner):
        result = runner.invoke(cli, ["--help"])

        assert result.exit_code == 0
        for command in ("serve", "db", "config", "project", "user", "tree", "item"):
            assert command in result.output

    def test_version(self, runner):
        result = runner.invoke(cli, ["--version"])

        assert result.exit_code == 0
        assert "siteplan" in result.output


class TestConfigCommands:
    """Tests for the config command group."""

    def test_config_init(self, runner, tmp_path):
        output = tmp_path / "generated.toml"

        result = runner.invoke(cli, ["config", "init", "--output", str(output)])
        assert result.exit_code == 0
        assert output.exists()

        result = runner.invoke(cli, ["config", "init", "--output", str(output)])
        assert result.exit_code == 1
        assert "--force" in result.output

        result = runner.invoke(cli, ["config", "init", "--output", str(output), "--force"])
        assert result.exit_code == 0

    def test_config_show(self, invoke, config_file):
        result = invoke("config", "show")

        assert result.exit_code == 0
        assert "[database]" in result.output
        assert "WARNING" in result.output


class TestDatabaseCommands:
    """Tests for the db command group."""

    def test_db_init(self, invoke):
        result = invoke("db", "init")

        assert result.exit_code == 0
        assert "Database ready" in result.output

    def test_db_drop_requires_confirmation(self, invoke, services, project):
        result = invoke("db", "drop", input="n\n")

        assert result.exit_code == 0
        assert "Aborted" in result.output
        assert [p.name for p in services.projects.list()] == ["Redesign"]

    def test_db_drop(self, invoke, services, project):
        result = invoke("db", "drop", "--yes")

        assert result.exit_code == 0
        assert "Dropped" in result.output


class TestProjectCommands:
    """Tests for project and user commands."""

    def test_project_create_and_list(self, invoke, services):
        result = invoke("project", "create", "Relaunch")
        assert result.exit_code == 0
        assert [p.name for p in services.projects.list()] == ["Relaunch"]

        result = invoke("project", "list")
        assert result.exit_code == 0
        assert "Relaunch" in result.output

    def test_project_list_empty(self, invoke):
        result = invoke("project", "list")

        assert result.exit_code == 0
        assert "No projects" in result.output

    def test_project_delete(self, invoke, services, project):
        result = invoke("project", "delete", str(project.id))
        assert result.exit_code == 0
        assert services.projects.list() == []

        result = invoke("project", "delete", str(project.id))
        assert result.exit_code == 0
        assert "does not exist" in result.output

    def test_user_create(self, invoke, services):
        result = invoke("user", "create", "carol", "--display-name", "Carol")
        assert result.exit_code == 0
        assert services.users.list()[0].display_name == "Carol"

        result = invoke("user", "create", "carol")
        assert result.exit_code == 1
        assert "already taken" in result.output


class TestInjectedFactory:
    """Commands use a factory installed with set_factory."""

    @pytest.fixture
    def injected(self, services):
        set_factory(services)
        yield services
        set_factory(None)

    def test_injected_factory_survives_group_callback(self, runner, tmp_path, injected, project):
        other = tmp_path / "other.toml"
        other.write_text(f'[database]\nurl = "sqlite:///{tmp_path / "other.db"}"\n')

        result = runner.invoke(cli, ["--config", str(other), "project", "list"])

        assert result.exit_code == 0
        assert "Redesign" in result.output
        assert get_factory() is injected


class TestTreeCommands:
    """Tests for tree and item commands."""

    def test_item_add_and_tree_show(self, invoke, services, project):
        result = invoke("item", "add", str(project.id), "folder", "Marketing")
        assert result.exit_code == 0
        folder = services.site_map.list_items(project.id)[0]

        result = invoke("item", "add", str(project.id), "page", "Home", "--parent", str(folder.id), "--url", "/")
        assert result.exit_code == 0

        result = invoke("tree", "show", str(project.id))
        assert result.exit_code == 0
        assert "Redesign" in result.output
        assert "Marketing" in result.output
        assert "Home" in result.output

    def test_closed_folders_hidden_without_all(self, invoke, services, project):
        folder = services.site_map.add_item(project.id, SiteItemCreate(type="folder", name="Docs"))
        services.site_map.add_item(project.id, SiteItemCreate(type="page", name="Guide", parent_id=folder.id))

        result = invoke("item", "toggle", str(folder.id))
        assert result.exit_code == 0
        assert "closed" in result.output

        assert "Guide" not in invoke("tree", "show", str(project.id)).output
        assert "Guide" in invoke("tree", "show", str(project.id), "--all").output

    def test_item_add_under_page_fails(self, invoke, services, project):
        page = services.site_map.add_item(project.id, SiteItemCreate(type="page", name="Home"))

        result = invoke("item", "add", str(project.id), "page", "Child", "--parent", str(page.id))

        assert result.exit_code == 1
        assert "Cannot add items" in result.output

    def test_item_add_invalid_type(self, invoke, project):
        result = invoke("item", "add", str(project.id), "video", "Clip")

        assert result.exit_code == 2

    def test_item_move_and_delete(self, invoke, services, project):
        folder = services.site_map.add_item(project.id, SiteItemCreate(type="folder", name="Blog"))
        page = services.site_map.add_item(project.id, SiteItemCreate(type="page", name="Post"))

        result = invoke("item", "move", str(page.id), str(folder.id))
        assert result.exit_code == 0
        assert "into Blog" in result.output
        assert services.site_map.get_item(page.id).parent_id == folder.id

        result = invoke("item", "delete", str(folder.id))
        assert result.exit_code == 0
        assert "Deleted 2 site items" in result.output
        assert services.site_map.list_items(project.id) == []

    def test_tree_show_missing_project(self, invoke):
        result = invoke("tree", "show", str(uuid.uuid4()))

        assert result.exit_code == 1
        assert "not found" in result.output

    def test_tree_show_empty_project(self, invoke, services):
        project = services.projects.create(ProjectCreate(name="Empty"))

        result = invoke("tree", "show", str(project.id))

        assert result.exit_code == 0
        assert "No site items" in result.output


class TestServeCommand:
    """Tests for the serve command."""

    def test_serve_uses_config(self, invoke, config_file, mocker):
        run_server = mocker.patch("siteplan.server.api.run_server")

        result = invoke("serve", "--port", "9001")

        assert result.exit_code == 0
        run_server.assert_called_once()
        kwargs = run_server.call_args.kwargs
        assert kwargs["host"] == "127.0.0.1"
        assert kwargs["port"] == 9001
        assert kwargs["config_path"] == config_file
        assert kwargs["log_level"] == "warning"
