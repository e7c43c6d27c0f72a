"""
Adapter base — the contract between the task runner and external tools.

Deferred tasks are Actions; adapters execute them and answer with
Receipts. Nothing else in the package spawns processes.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel, Field, model_validator

from create_nx_plugin.core.models.action import Action, Receipt


class ExecutionContext(BaseModel):
    """Everything an adapter needs to execute an action.

    ``params`` is the action's own params layered over the runner's
    defaults (for example the resolved package manager). Left out, it is
    the action's own params.
    """

    action: Action
    project_root: str = "."
    dry_run: bool = False
    params: dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _default_params(self) -> ExecutionContext:
        if "params" not in self.model_fields_set:
            self.params = dict(self.action.params)
        return self

    @property
    def working_dir(self) -> str:
        return self.project_root


class Adapter(ABC):
    """Abstract base class for all adapters.

    Adapters perform external side effects and return receipts.
    They NEVER raise exceptions — failures are captured in the Receipt.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """The adapter identifier (e.g. 'node', 'git')."""

    @abstractmethod
    def is_available(self) -> bool:
        """Check if this adapter's underlying tool is on PATH. Never raises."""

    @abstractmethod
    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        """Validate that the action can be executed.

        Returns:
            (is_valid, error_message). error_message is empty if valid.
        """

    @abstractmethod
    def execute(self, context: ExecutionContext) -> Receipt:
        """Execute the action and return a receipt. MUST never raise."""

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"
