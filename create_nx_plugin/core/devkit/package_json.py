"""
``package.json`` dependency helpers.
"""

from __future__ import annotations

from typing import Any

from create_nx_plugin.core.devkit.json_utils import update_json
from create_nx_plugin.core.devkit.tasks import install_packages_task
from create_nx_plugin.core.devkit.tree import Tree
from create_nx_plugin.core.models.action import Action


def add_dependencies_to_package_json(
    tree: Tree,
    dependencies: dict[str, str],
    dev_dependencies: dict[str, str],
    owner: str,
    path: str = "package.json",
) -> Action:
    """Merge dependency maps into a manifest and return an install task.

    ``owner`` names the generator asking, and prefixes the task id.

    A package already listed under ``dependencies`` is never added to
    ``devDependencies`` as well.
    """

    def _merge(json: dict[str, Any]) -> dict[str, Any]:
        deps = {**json.get("dependencies", {}), **dependencies}
        dev = {
            name: version
            for name, version in {**json.get("devDependencies", {}), **dev_dependencies}.items()
            if name not in deps
        }
        json["dependencies"] = deps
        json["devDependencies"] = dev
        return json

    update_json(tree, path, _merge)
    return install_packages_task(owner)
