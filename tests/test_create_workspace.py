"""
Tests for the create-workspace flow with mocked deferred tasks.
"""

import json
from pathlib import Path

import pytest

from create_nx_plugin.adapters.mock import MockAdapter
from create_nx_plugin.adapters.registry import AdapterRegistry
from create_nx_plugin.core.devkit.tasks import TaskError
from create_nx_plugin.core.models.options import PluginOptions
from create_nx_plugin.core.use_cases.create_workspace import WorkspaceError, create_workspace


def _options(**overrides) -> PluginOptions:
    fields = {
        "plugin_name": "my-plugin",
        "package_manager": "pnpm",
        "nx_cloud": False,
        "default_base": "main",
    }
    fields.update(overrides)
    return PluginOptions(**fields)


class TestCreateWorkspace:
    def test_files_written(self, tmp_path: Path, mock_registry: AdapterRegistry):
        result = create_workspace(_options(), tmp_path, mock_registry)
        ws = tmp_path / "my-plugin"
        assert result.directory == ws.resolve()
        assert (ws / "project.json").is_file()
        assert (ws / "packages" / "create-my-plugin-package" / "bin" / "index.ts").is_file()
        pkg = json.loads((ws / "package.json").read_text())
        assert "@nrwl/nx-plugin" in pkg["devDependencies"]
        assert "npmScope" not in json.loads((ws / "nx.json").read_text())
        assert result.warnings == []

    def test_task_order(self, tmp_path: Path, mock_registry: AdapterRegistry, mock_adapter: MockAdapter):
        create_workspace(_options(), tmp_path, mock_registry)
        assert [c.action.id for c in mock_adapter.call_log] == [
            "plugin:install-packages",
            "create-package:install-packages",
            "git:init",
            "git:commit",
        ]
        install = mock_adapter.call_log[0]
        assert install.params["package_manager"] == "pnpm"
        assert install.project_root == str(tmp_path.resolve() / "my-plugin")

    def test_git_identity(self, tmp_path: Path, mock_registry: AdapterRegistry, mock_adapter: MockAdapter):
        create_workspace(
            _options(commit_name="Jane", commit_email="jane@example.com", commit_message="Hello", default_base="trunk"),
            tmp_path,
            mock_registry,
        )
        by_id = {c.action.id: c.params for c in mock_adapter.call_log}
        assert by_id["git:init"]["branch"] == "trunk"
        assert by_id["git:commit"]["message"] == "Hello"
        assert by_id["git:commit"]["author_email"] == "jane@example.com"

    def test_skip_git(self, tmp_path: Path, mock_registry: AdapterRegistry, mock_adapter: MockAdapter):
        create_workspace(_options(skip_git=True), tmp_path, mock_registry)
        assert not any(c.action.adapter == "git" for c in mock_adapter.call_log)

    def test_nx_cloud_and_ci(self, tmp_path: Path, mock_registry: AdapterRegistry, mock_adapter: MockAdapter):
        result = create_workspace(_options(nx_cloud=True, ci="github"), tmp_path, mock_registry)
        ws = tmp_path / "my-plugin"
        assert (ws / ".github" / "workflows" / "ci.yml").is_file()
        ids = [c.action.id for c in mock_adapter.call_log]
        assert ids.index("nx-cloud:init") == 2
        cloud = mock_adapter.call_log[2]
        assert cloud.params["args"][:3] == ["nx", "g", "@nrwl/nx-cloud:init"]
        assert any(c.path == ".github/workflows/ci.yml" for c in result.changes)

    def test_nx_cloud_failure_is_warning(self, tmp_path: Path, mock_registry: AdapterRegistry, mock_adapter: MockAdapter):
        mock_adapter.set_failure("nx-cloud:init", "offline")
        result = create_workspace(_options(nx_cloud=True), tmp_path, mock_registry)
        assert any("offline" in w for w in result.warnings)

    def test_git_failure_is_warning(self, tmp_path: Path, mock_registry: AdapterRegistry, mock_adapter: MockAdapter):
        mock_adapter.set_failure("git:init", "no git")
        result = create_workspace(_options(), tmp_path, mock_registry)
        assert any("no git" in w for w in result.warnings)
        assert "git:commit" not in [c.action.id for c in mock_adapter.call_log]

    def test_git_unavailable(self, tmp_path: Path):
        registry = AdapterRegistry()
        registry.register(MockAdapter(adapter_name="node"))
        result = create_workspace(_options(), tmp_path, registry)
        assert any("git was not found" in w for w in result.warnings)

    def test_install_failure_raises(self, tmp_path: Path, mock_registry: AdapterRegistry, mock_adapter: MockAdapter):
        mock_adapter.set_failure("plugin:install-packages", "ERESOLVE")
        with pytest.raises(TaskError, match="ERESOLVE"):
            create_workspace(_options(), tmp_path, mock_registry)
        assert mock_adapter.call_count == 1

    def test_dry_run(self, tmp_path: Path, mock_registry: AdapterRegistry, mock_adapter: MockAdapter):
        result = create_workspace(_options(), tmp_path, mock_registry, dry_run=True)
        assert result.dry_run
        assert not (tmp_path / "my-plugin").exists()
        assert result.changes
        assert [r.status for r in result.receipts] == ["skipped", "skipped"]
        assert mock_adapter.call_count == 0

    def test_non_empty_target(self, tmp_path: Path, mock_registry: AdapterRegistry):
        (tmp_path / "my-plugin").mkdir()
        (tmp_path / "my-plugin" / "keep.txt").write_text("x")
        with pytest.raises(WorkspaceError, match="not empty"):
            create_workspace(_options(), tmp_path, mock_registry)

    def test_empty_target_ok(self, tmp_path: Path, mock_registry: AdapterRegistry):
        (tmp_path / "my-plugin").mkdir()
        create_workspace(_options(), tmp_path, mock_registry)
        assert (tmp_path / "my-plugin" / "package.json").is_file()

    def test_scoped_name_directory(self, tmp_path: Path, mock_registry: AdapterRegistry):
        result = create_workspace(_options(plugin_name="@acme/foo"), tmp_path, mock_registry)
        assert result.directory.name == "foo"
        pkg = json.loads((tmp_path / "foo" / "package.json").read_text())
        assert pkg["name"] == "@acme/foo"

    def test_to_dict(self, tmp_path: Path, mock_registry: AdapterRegistry):
        data = create_workspace(_options(), tmp_path, mock_registry, dry_run=True).to_dict()
        assert data["dry_run"] is True
        assert {"path": "package.json", "type": "CREATE"} in data["changes"]
