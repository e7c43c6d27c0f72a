"""
Preset generator — turns a fresh workspace into a plugin workspace.

The steps run in a fixed order and each one depends on the state the
previous one left in the tree:

    1. scaffold the plugin at the workspace root       → install task A
    2. drop ``npmScope`` from nx.json
    3. move the plugin devkit to devDependencies
    4. scaffold the create-<plugin>-package CLI        → install task B
    5. format every staged file

The deferred tasks come back as ``[A, B]`` and must run in that order.
"""

from __future__ import annotations

import logging
from typing import Any

from create_nx_plugin.core.devkit.formatting import format_files
from create_nx_plugin.core.devkit.json_utils import update_json
from create_nx_plugin.core.devkit.nx_json import read_nx_json, update_nx_json
from create_nx_plugin.core.devkit.tree import Tree
from create_nx_plugin.core.devkit.versions import NX_PLUGIN_PACKAGE
from create_nx_plugin.core.generators._paths import project_file_name
from create_nx_plugin.core.generators.create_package import create_package_generator
from create_nx_plugin.core.generators.plugin import plugin_generator
from create_nx_plugin.core.models.action import Action
from create_nx_plugin.core.models.options import local_name
from create_nx_plugin.core.models.schemas import (
    CreatePackageGeneratorSchema,
    PluginGeneratorSchema,
    PresetGeneratorSchema,
)

logger = logging.getLogger(__name__)


def default_cli_name(plugin_name: str) -> str:
    """Default companion CLI name, built from the plugin name as supplied."""
    return f"create-{plugin_name}-package"


def remove_npm_scope(tree: Tree) -> None:
    """Drop the workspace-wide ``npmScope``; a root-level plugin has no use for it."""
    nx_json = read_nx_json(tree)
    if nx_json is None:
        logger.debug("No nx.json, nothing to strip")
        return
    update_nx_json(tree, {**nx_json, "npmScope": None})


def move_nx_plugin_to_dev_deps(tree: Tree) -> None:
    """Move the plugin devkit from ``dependencies`` to ``devDependencies``.

    A manifest without the entry in ``dependencies`` is left as it is, so
    re-running the preset on an already-converted workspace is harmless.
    """

    def _move(json: dict[str, Any]) -> dict[str, Any]:
        dependencies = json.get("dependencies") or {}
        if NX_PLUGIN_PACKAGE not in dependencies:
            logger.debug("%s not in dependencies, leaving package.json as is", NX_PLUGIN_PACKAGE)
            return json
        entry = dependencies.pop(NX_PLUGIN_PACKAGE)
        json["dependencies"] = dependencies
        json.setdefault("devDependencies", {})[NX_PLUGIN_PACKAGE] = entry
        return json

    update_json(tree, "package.json", _move)


def preset_generator(tree: Tree, options: PresetGeneratorSchema) -> list[Action]:
    """Run the preset pipeline. Returns the deferred tasks in execution order."""
    name = local_name(options.plugin_name)

    plugin_task = plugin_generator(tree, PluginGeneratorSchema(
        name=name,
        import_path=options.plugin_name,
        compiler="tsc",
        linter="eslint",
        unit_test_runner="jest",
        root_project=True,
        skip_format=True,
        skip_lint_checks=False,
        skip_ts_config=False,
    ))

    remove_npm_scope(tree)
    move_nx_plugin_to_dev_deps(tree)

    cli_task = create_package_generator(tree, CreatePackageGeneratorSchema(
        name=options.cli_name or project_file_name(default_cli_name(options.plugin_name)),
        project=name,
        compiler="tsc",
        linter="eslint",
        unit_test_runner="jest",
        skip_format=True,
        skip_ts_config=False,
    ))

    format_files(tree)

    return [plugin_task, cli_task]
