"""
Node.js adapter — package-manager operations for deferred tasks.

Installs workspace dependencies and runs workspace binaries (``npx``,
``yarn``, ``pnpm exec``) through the adapter protocol.
"""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
import time
from pathlib import Path

from create_nx_plugin.adapters.base import Adapter, ExecutionContext
from create_nx_plugin.core.models.action import Receipt

logger = logging.getLogger(__name__)

_INSTALL_COMMANDS: dict[str, list[str]] = {
    "npm": ["npm", "install"],
    "yarn": ["yarn", "install"],
    "pnpm": ["pnpm", "install"],
}

_EXEC_COMMANDS: dict[str, list[str]] = {
    "npm": ["npx"],
    "yarn": ["yarn"],
    "pnpm": ["pnpm", "exec"],
}


def detect_invoked_package_manager(env: dict[str, str] | None = None) -> str:
    """Package manager that launched us, from ``npm_config_user_agent``.

    The agent looks like ``pnpm/7.27.0 npm/? node/v18.14.0 linux x64``.
    Falls back to npm.
    """
    agent = (env if env is not None else os.environ).get("npm_config_user_agent", "")
    head = agent.split(" ", 1)[0].split("/", 1)[0]
    return head if head in _INSTALL_COMMANDS else "npm"


def detect_lockfile_package_manager(cwd: Path) -> str:
    """Package manager implied by the lock file in ``cwd``."""
    if (cwd / "pnpm-lock.yaml").exists():
        return "pnpm"
    if (cwd / "yarn.lock").exists():
        return "yarn"
    return "npm"


def exec_command(package_manager: str) -> list[str]:
    """Command prefix that runs a workspace-local binary."""
    return list(_EXEC_COMMANDS.get(package_manager, _EXEC_COMMANDS["npm"]))


class NodeAdapter(Adapter):
    """Node.js package-manager adapter.

    Action params:
        operation (str): 'install' or 'exec'.
        package_manager (str): 'npm', 'yarn', or 'pnpm' (default: from lock file).
        args (list[str]): Command to run through the exec prefix (for 'exec').
        timeout (int): Timeout in seconds (install: 600, exec: 300).
    """

    @property
    def name(self) -> str:
        return "node"

    def is_available(self) -> bool:
        return shutil.which("node") is not None

    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        operation = context.params.get("operation", "")
        if operation not in ("install", "exec"):
            return False, f"Unknown operation '{operation}'. Valid: exec, install"

        pm = context.params.get("package_manager")
        if pm and pm not in _INSTALL_COMMANDS:
            return False, f"Unsupported package manager '{pm}'"

        if operation == "exec" and not context.params.get("args"):
            return False, "Missing required param: 'args' for exec operation"

        return True, ""

    def execute(self, context: ExecutionContext) -> Receipt:
        is_valid, error = self.validate(context)
        if not is_valid:
            return Receipt.failure(adapter=self.name, action_id=context.action.id, error=error)

        pm = context.params.get("package_manager") or detect_lockfile_package_manager(
            Path(context.working_dir)
        )
        if context.params.get("operation") == "install":
            cmd = list(_INSTALL_COMMANDS[pm])
            return self._exec(context, cmd, timeout=600)

        cmd = exec_command(pm) + list(context.params.get("args", []))
        return self._exec(context, cmd, timeout=300)

    def _exec(
        self,
        ctx: ExecutionContext,
        cmd: list[str],
        timeout: int,
    ) -> Receipt:
        timeout = ctx.params.get("timeout", timeout)
        logger.info("%s $ %s", ctx.working_dir, " ".join(cmd))
        start = time.monotonic()
        try:
            result = subprocess.run(
                cmd,
                cwd=ctx.working_dir,
                capture_output=True,
                text=True,
                timeout=timeout,
            )
        except subprocess.TimeoutExpired:
            return Receipt.failure(
                adapter=self.name,
                action_id=ctx.action.id,
                error=f"Command timed out after {timeout}s",
                metadata={"command": " ".join(cmd)},
            )
        except FileNotFoundError:
            return Receipt.failure(
                adapter=self.name,
                action_id=ctx.action.id,
                error=f"'{cmd[0]}' not found on PATH",
                metadata={"command": " ".join(cmd)},
            )

        elapsed_ms = int((time.monotonic() - start) * 1000)
        if result.returncode == 0:
            return Receipt.success(
                adapter=self.name,
                action_id=ctx.action.id,
                output=result.stdout.strip(),
                duration_ms=elapsed_ms,
                metadata={"command": " ".join(cmd), "return_code": 0},
            )
        return Receipt.failure(
            adapter=self.name,
            action_id=ctx.action.id,
            error=result.stderr.strip() or f"Exit code {result.returncode}",
            duration_ms=elapsed_ms,
            metadata={"command": " ".join(cmd), "return_code": result.returncode},
        )
