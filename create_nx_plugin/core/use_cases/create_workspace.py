"""
Create workspace — the delegate the CLI hands a resolved option set to.

Flow:
    stage base files → preset → CI workflow → format → commit
    → deferred tasks (serial) → Nx Cloud setup → git init + commit

Every file mutation happens on the staged tree before anything touches
the disk or runs a subprocess. Install tasks are fatal when they fail;
Nx Cloud and git are follow-ups whose failures are reported as warnings.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from create_nx_plugin.adapters.registry import AdapterRegistry
from create_nx_plugin.core.devkit.formatting import format_files
from create_nx_plugin.core.devkit.tasks import run_tasks_in_serial
from create_nx_plugin.core.devkit.tree import Tree
from create_nx_plugin.core.devkit.versions import NX_PLUGIN_PACKAGE
from create_nx_plugin.core.generators.ci_workflow import ci_workflow_generator
from create_nx_plugin.core.generators.preset import preset_generator
from create_nx_plugin.core.generators.workspace import workspace_generator
from create_nx_plugin.core.models.action import Action, Receipt
from create_nx_plugin.core.models.change import FileChange
from create_nx_plugin.core.models.options import PluginOptions
from create_nx_plugin.core.models.schemas import PresetGeneratorSchema

logger = logging.getLogger(__name__)


class WorkspaceError(Exception):
    """Raised when the target workspace directory cannot be used."""


@dataclass
class WorkspaceResult:
    """What a workspace-creation run did."""

    directory: Path
    dry_run: bool = False
    changes: list[FileChange] = field(default_factory=list)
    receipts: list[Receipt] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "directory": str(self.directory),
            "dry_run": self.dry_run,
            "changes": [{"path": c.path, "type": c.type} for c in self.changes],
            "receipts": [r.model_dump(mode="json") for r in self.receipts],
            "warnings": self.warnings,
        }


def _check_target(directory: Path) -> None:
    if not directory.exists():
        return
    if not directory.is_dir():
        raise WorkspaceError(f"{directory} exists and is not a directory")
    if any(directory.iterdir()):
        raise WorkspaceError(f"{directory} already exists and is not empty")


def _nx_cloud_action() -> Action:
    return Action(
        id="nx-cloud:init",
        name="Set up Nx Cloud",
        adapter="node",
        params={
            "operation": "exec",
            "args": ["nx", "g", "@nrwl/nx-cloud:init", "--no-analytics", "--installationSource=create-nx-plugin"],
        },
    )


def _git_actions(options: PluginOptions) -> list[Action]:
    return [
        Action(
            id="git:init",
            name="Initialise git repository",
            adapter="git",
            params={"operation": "init", "branch": options.default_base},
        ),
        Action(
            id="git:commit",
            name="Initial commit",
            adapter="git",
            params={
                "operation": "commit",
                "message": options.commit_message,
                "author_name": options.commit_name,
                "author_email": options.commit_email,
            },
        ),
    ]


def create_workspace(
    options: PluginOptions,
    cwd: Path,
    registry: AdapterRegistry,
    *,
    preset: str = NX_PLUGIN_PACKAGE,
    dry_run: bool = False,
) -> WorkspaceResult:
    """Create ``cwd/<name>`` as a plugin workspace.

    Raises:
        WorkspaceError: If the target directory is unusable.
        GeneratorError: If a generator cannot apply its changes.
        TaskError: If a deferred install task fails.
    """
    directory = (cwd / options.name).resolve()
    _check_target(directory)
    result = WorkspaceResult(directory=directory, dry_run=dry_run)

    tree = Tree(directory)
    workspace_generator(tree, options, preset)
    tasks = preset_generator(
        tree,
        PresetGeneratorSchema(plugin_name=options.plugin_name, cli_name=options.cli_name),
    )
    if options.ci:
        ci_workflow_generator(
            tree,
            options.ci,
            name=options.name,
            default_base=options.default_base,
            package_manager=options.package_manager,
        )
        format_files(tree)

    result.changes = tree.list_changes()
    task_params = {"package_manager": options.package_manager}

    if dry_run:
        logger.info("Dry run: %d change(s) not written", len(result.changes))
        result.receipts = run_tasks_in_serial(tasks, registry, str(directory), task_params, dry_run=True)
        return result

    tree.commit()
    result.receipts = run_tasks_in_serial(tasks, registry, str(directory), task_params)

    if options.nx_cloud:
        receipt = registry.execute_action(_nx_cloud_action(), str(directory), task_params)
        result.receipts.append(receipt)
        if receipt.failed:
            result.warnings.append(f"Nx Cloud was not set up: {receipt.error}")

    if options.skip_git:
        logger.info("Skipping git initialisation")
    elif not registry.is_available("git"):
        result.warnings.append("git was not found on PATH; the workspace was not initialised as a repository")
    else:
        for action in _git_actions(options):
            receipt = registry.execute_action(action, str(directory))
            result.receipts.append(receipt)
            if receipt.failed:
                result.warnings.append(f"Could not {action.name.lower()}: {receipt.error}")
                break

    logger.info("Workspace created at %s", directory)
    return result
