"""
Deferred tasks — work generators schedule for after the tree is committed.

A generator returns ``Action`` objects instead of running installs
itself. ``run_tasks_in_serial`` hands them to the adapter registry one at
a time, in the order given, and stops at the first failure.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

from create_nx_plugin.core.models.action import Action, Receipt

if TYPE_CHECKING:
    from create_nx_plugin.adapters.registry import AdapterRegistry

logger = logging.getLogger(__name__)


class TaskError(Exception):
    """A deferred task came back with a failed receipt."""

    def __init__(self, receipt: Receipt):
        self.receipt = receipt
        super().__init__(f"Task '{receipt.action_id}' failed: {receipt.error}")


def install_packages_task(owner: str) -> Action:
    """Install task for the workspace root, tagged with the generator that asked."""
    return Action(
        id=f"{owner}:install-packages",
        name="Install packages",
        adapter="node",
        params={"operation": "install"},
    )


def run_tasks_in_serial(
    tasks: Iterable[Action],
    registry: AdapterRegistry,
    cwd: str,
    params: dict[str, Any] | None = None,
    dry_run: bool = False,
) -> list[Receipt]:
    """Execute deferred tasks one after another.

    Each task starts only after the previous receipt is back.

    Args:
        tasks: Actions in execution order.
        registry: Dispatches each action to its adapter.
        cwd: Workspace directory the tasks run in.
        params: Defaults merged under each action's own params
            (e.g. the resolved ``package_manager``).
        dry_run: Validate only.

    Raises:
        TaskError: On the first failed receipt; later tasks do not run.
    """
    receipts: list[Receipt] = []
    for action in tasks:
        logger.info("Running task %s", action.id)
        receipt = registry.execute_action(
            action,
            project_root=cwd,
            defaults=params,
            dry_run=dry_run,
        )
        receipts.append(receipt)
        if receipt.failed:
            raise TaskError(receipt)
        logger.debug("Task %s → %s (%dms)", action.id, receipt.status, receipt.duration_ms)
    return receipts
