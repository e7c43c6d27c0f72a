"""
Devkit — the toolbox generators are written against.

    from create_nx_plugin.core.devkit import Tree, update_json, format_files
"""

from create_nx_plugin.core.devkit.formatting import format_files
from create_nx_plugin.core.devkit.json_utils import read_json, update_json, write_json
from create_nx_plugin.core.devkit.nx_json import (
    add_project_configuration,
    get_projects,
    read_nx_json,
    read_project_configuration,
    update_nx_json,
)
from create_nx_plugin.core.devkit.package_json import add_dependencies_to_package_json
from create_nx_plugin.core.devkit.tasks import TaskError, install_packages_task, run_tasks_in_serial
from create_nx_plugin.core.devkit.tree import GeneratorError, Tree

__all__ = [
    "GeneratorError",
    "TaskError",
    "Tree",
    "add_dependencies_to_package_json",
    "add_project_configuration",
    "format_files",
    "get_projects",
    "install_packages_task",
    "read_json",
    "read_nx_json",
    "read_project_configuration",
    "run_tasks_in_serial",
    "update_json",
    "update_nx_json",
    "write_json",
]
