"""
Adapter registry — central dispatch for deferred tasks.

The task runner never talks to adapters directly — always through the
registry, which resolves the adapter (or the mock), validates, honours
dry runs and times the execution.
"""

from __future__ import annotations

import logging
import time
from typing import Any

from create_nx_plugin.adapters.base import Adapter, ExecutionContext
from create_nx_plugin.core.models.action import Action, Receipt

logger = logging.getLogger(__name__)


class AdapterRegistry:
    """Central registry and dispatcher for adapters.

    Features:
        - Register/unregister adapters by name
        - Mock mode: route every action to a mock (or plain success)
        - Execute actions through the appropriate adapter
    """

    def __init__(self, mock_mode: bool = False, mock_adapter: Adapter | None = None):
        self._adapters: dict[str, Adapter] = {}
        self._mock_mode = mock_mode
        self._mock_adapter = mock_adapter

    def register(self, adapter: Adapter) -> None:
        name = adapter.name
        if name in self._adapters:
            logger.warning("Overwriting existing adapter: %s", name)
        self._adapters[name] = adapter
        logger.debug("Registered adapter: %s", name)

    def unregister(self, name: str) -> None:
        self._adapters.pop(name, None)

    def get(self, name: str) -> Adapter | None:
        return self._adapters.get(name)

    def is_available(self, name: str) -> bool:
        """Whether an adapter is registered and its tool can be found."""
        if self._mock_mode:
            return True
        adapter = self._adapters.get(name)
        if adapter is None:
            return False
        try:
            return adapter.is_available()
        except Exception:
            return False

    def execute_action(
        self,
        action: Action,
        project_root: str = ".",
        defaults: dict[str, Any] | None = None,
        dry_run: bool = False,
    ) -> Receipt:
        """Execute an action through the appropriate adapter.

        1. Resolves the adapter (or mock)
        2. Builds the execution context
        3. Validates the action
        4. Executes (or dry-runs)
        5. Returns a Receipt (never raises)
        """
        start_time = time.monotonic()

        context = ExecutionContext(
            action=action,
            project_root=project_root,
            dry_run=dry_run,
            params={**(defaults or {}), **action.params},
        )

        adapter: Adapter | None
        if self._mock_mode and self._mock_adapter:
            adapter = self._mock_adapter
        elif self._mock_mode:
            return Receipt.success(
                adapter=action.adapter,
                action_id=action.id,
                output=f"[mock] {action.adapter}:{action.id} executed",
                metadata={"mock": True, "dry_run": dry_run},
            )
        else:
            adapter = self._adapters.get(action.adapter)

        if adapter is None:
            return Receipt.failure(
                adapter=action.adapter,
                action_id=action.id,
                error=f"No adapter registered for '{action.adapter}'",
            )

        try:
            is_valid, error_msg = adapter.validate(context)
        except Exception as e:
            return Receipt.failure(
                adapter=action.adapter,
                action_id=action.id,
                error=f"Validation error: {e}",
            )
        if not is_valid:
            return Receipt.failure(
                adapter=action.adapter,
                action_id=action.id,
                error=f"Validation failed: {error_msg}",
            )

        if dry_run:
            return Receipt.skip(
                adapter=action.adapter,
                action_id=action.id,
                reason=f"[dry-run] Would execute {action.adapter}:{action.id}",
                metadata={"dry_run": True},
            )

        try:
            receipt = adapter.execute(context)
        except Exception as e:
            logger.error("Adapter %s raised during execution: %s", action.adapter, e)
            receipt = Receipt.failure(
                adapter=action.adapter,
                action_id=action.id,
                error=f"Unexpected error: {e}",
            )

        receipt.duration_ms = int((time.monotonic() - start_time) * 1000)
        return receipt


def default_registry(mock_mode: bool = False) -> AdapterRegistry:
    """Registry with the node and git adapters registered."""
    from create_nx_plugin.adapters.languages.node import NodeAdapter
    from create_nx_plugin.adapters.vcs.git import GitAdapter

    registry = AdapterRegistry(mock_mode=mock_mode)
    registry.register(NodeAdapter())
    registry.register(GitAdapter())
    return registry
