"""
Mock adapter — test double for deferred-task execution.

Records every context it receives, along with monotonic start and end
stamps, so tests can assert ordering and strict sequencing without
running a package manager.
"""

from __future__ import annotations

import time

from create_nx_plugin.adapters.base import Adapter, ExecutionContext
from create_nx_plugin.core.models.action import Receipt


class MockAdapter(Adapter):
    """Universal mock adapter.

    By default, returns success for everything. Can be configured
    with custom responses per action ID.
    """

    def __init__(
        self,
        adapter_name: str = "mock",
        available: bool = True,
        default_output: str = "[mock] executed",
        delay: float = 0.0,
    ):
        self._name = adapter_name
        self._available = available
        self._default_output = default_output
        self._delay = delay
        self._responses: dict[str, Receipt] = {}
        self._call_log: list[ExecutionContext] = []
        self._timeline: list[tuple[str, float, float]] = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def call_log(self) -> list[ExecutionContext]:
        """All execution contexts this mock has received."""
        return self._call_log

    @property
    def call_count(self) -> int:
        return len(self._call_log)

    @property
    def timeline(self) -> list[tuple[str, float, float]]:
        """(action_id, started, ended) for every execution, in call order."""
        return self._timeline

    def is_available(self) -> bool:
        return self._available

    def set_response(self, action_id: str, receipt: Receipt) -> None:
        """Set a custom response for a specific action ID."""
        self._responses[action_id] = receipt

    def set_failure(self, action_id: str, error: str = "Mock failure") -> None:
        """Configure a specific action to fail."""
        self._responses[action_id] = Receipt.failure(
            adapter=self._name,
            action_id=action_id,
            error=error,
        )

    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        return True, ""

    def execute(self, context: ExecutionContext) -> Receipt:
        started = time.monotonic()
        self._call_log.append(context)
        if self._delay:
            time.sleep(self._delay)

        receipt = self._responses.get(context.action.id) or Receipt.success(
            adapter=self._name,
            action_id=context.action.id,
            output=self._default_output,
            metadata={"mock": True},
        )
        self._timeline.append((context.action.id, started, time.monotonic()))
        return receipt

    def reset(self) -> None:
        """Clear call log and custom responses."""
        self._call_log.clear()
        self._timeline.clear()
        self._responses.clear()
