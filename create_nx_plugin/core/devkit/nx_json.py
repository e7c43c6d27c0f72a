"""
Workspace configuration (``nx.json``) and project configuration
(``project.json``) helpers.
"""

from __future__ import annotations

import logging
from typing import Any

from create_nx_plugin.core.devkit.json_utils import read_json, write_json
from create_nx_plugin.core.devkit.tree import GeneratorError, Tree

logger = logging.getLogger(__name__)

NX_JSON = "nx.json"
PROJECT_JSON = "project.json"


def read_nx_json(tree: Tree) -> dict[str, Any] | None:
    """Return the parsed ``nx.json``, or None if the workspace has none."""
    if not tree.is_file(NX_JSON):
        return None
    data = read_json(tree, NX_JSON)
    if not isinstance(data, dict):
        raise GeneratorError(f"Expected a JSON object in {NX_JSON}")
    return data


def update_nx_json(tree: Tree, nx_json: dict[str, Any]) -> None:
    """Replace ``nx.json``. Keys whose value is None are dropped."""
    write_json(tree, NX_JSON, {k: v for k, v in nx_json.items() if v is not None})


def _project_json_path(root: str) -> str:
    return f"{root}/{PROJECT_JSON}" if root not in ("", ".") else PROJECT_JSON


def get_projects(tree: Tree) -> dict[str, dict[str, Any]]:
    """Map every project name in the tree to its configuration.

    Each configuration carries a ``root`` key (``.`` for the root project).
    """
    projects: dict[str, dict[str, Any]] = {}
    for path in tree.files():
        if path != PROJECT_JSON and not path.endswith(f"/{PROJECT_JSON}"):
            continue
        config = read_json(tree, path)
        if not isinstance(config, dict) or "name" not in config:
            logger.debug("Skipping %s: no project name", path)
            continue
        root = path.rsplit("/", 1)[0] if "/" in path else "."
        projects[config["name"]] = {**config, "root": root}
    return projects


def read_project_configuration(tree: Tree, name: str) -> dict[str, Any]:
    """Look up a project by name.

    Raises:
        GeneratorError: If no project with that name exists.
    """
    project = get_projects(tree).get(name)
    if project is None:
        raise GeneratorError(f"Cannot find configuration for '{name}'")
    return project


def add_project_configuration(tree: Tree, name: str, config: dict[str, Any]) -> None:
    """Write ``project.json`` for a new project at ``config['root']``."""
    if name in get_projects(tree):
        raise GeneratorError(f"Cannot create a new project {name} at {config['root']}. It already exists.")
    root = config["root"]
    body = {"name": name, **{k: v for k, v in config.items() if k != "root"}}
    write_json(tree, _project_json_path(root), body)

