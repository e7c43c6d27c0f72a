"""
Generators — staged mutations of a workspace tree.

Each generator takes a ``Tree`` and its schema and returns the deferred
task(s) it needs run once the tree is committed. ``GENERATORS`` maps the
names accepted by ``nx-plugin-generate`` to a (schema, runner) pair that
always returns a task list.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from pydantic import BaseModel

from create_nx_plugin.core.devkit.tree import Tree
from create_nx_plugin.core.generators.ci_workflow import ci_workflow_generator
from create_nx_plugin.core.generators.create_package import create_package_generator
from create_nx_plugin.core.generators.plugin import plugin_generator
from create_nx_plugin.core.generators.preset import preset_generator
from create_nx_plugin.core.generators.workspace import workspace_generator
from create_nx_plugin.core.models.action import Action
from create_nx_plugin.core.models.schemas import (
    CreatePackageGeneratorSchema,
    PluginGeneratorSchema,
    PresetGeneratorSchema,
)

GeneratorRunner = Callable[[Tree, Any], list[Action]]

GENERATORS: dict[str, tuple[type[BaseModel], GeneratorRunner]] = {
    "preset": (PresetGeneratorSchema, preset_generator),
    "plugin": (PluginGeneratorSchema, lambda tree, s: [plugin_generator(tree, s)]),
    "create-package": (CreatePackageGeneratorSchema, lambda tree, s: [create_package_generator(tree, s)]),
}

__all__ = [
    "GENERATORS",
    "ci_workflow_generator",
    "create_package_generator",
    "plugin_generator",
    "preset_generator",
    "workspace_generator",
]
