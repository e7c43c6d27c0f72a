"""
Shared test fixtures and configuration.
"""

from pathlib import Path

import pytest

from create_nx_plugin.adapters.mock import MockAdapter
from create_nx_plugin.adapters.registry import AdapterRegistry
from create_nx_plugin.core.devkit.json_utils import write_json
from create_nx_plugin.core.devkit.tree import Tree
from create_nx_plugin.core.generators.workspace import workspace_generator
from create_nx_plugin.core.models.options import PluginOptions


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch):
    """Keep the developer's environment out of the tests."""
    for var in ("CNP_CONFIG", "CNP_LOG_LEVEL", "CNP_LOG_FILE", "CNP_LOG_FILE_LEVEL", "npm_config_user_agent"):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def options() -> PluginOptions:
    return PluginOptions(
        plugin_name="my-plugin",
        package_manager="npm",
        nx_cloud=False,
        default_base="main",
    )


@pytest.fixture
def workspace_tree(tmp_path: Path, options: PluginOptions) -> Tree:
    """A staged tree holding a fresh, empty workspace."""
    tree = Tree(tmp_path / "ws")
    workspace_generator(tree, options)
    return tree


@pytest.fixture
def bare_tree(tmp_path: Path) -> Tree:
    """A staged tree with only a root package.json."""
    tree = Tree(tmp_path / "bare")
    write_json(tree, "package.json", {"name": "bare", "dependencies": {}, "devDependencies": {}})
    return tree


@pytest.fixture
def mock_adapter() -> MockAdapter:
    return MockAdapter()


@pytest.fixture
def mock_registry(mock_adapter: MockAdapter) -> AdapterRegistry:
    return AdapterRegistry(mock_mode=True, mock_adapter=mock_adapter)
