"""
Git adapter — initialise the new workspace repository.

Uses the git CLI — never raw API calls.
"""

from __future__ import annotations

import logging
import shutil
import subprocess

from create_nx_plugin.adapters.base import Adapter, ExecutionContext
from create_nx_plugin.core.models.action import Receipt

logger = logging.getLogger(__name__)


class GitAdapter(Adapter):
    """Git operations for a freshly-created workspace.

    Action params:
        operation (str): 'init' or 'commit'.
        branch (str): Initial branch name (for 'init', default: main).
        message (str): Commit message (for 'commit').
        author_name (str): Optional commit author name.
        author_email (str): Optional commit author email.
        timeout (int): Timeout in seconds (default: 30).
    """

    @property
    def name(self) -> str:
        return "git"

    def is_available(self) -> bool:
        return shutil.which("git") is not None

    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        operation = context.params.get("operation", "")
        if operation not in ("init", "commit"):
            return False, f"Unknown operation '{operation}'. Valid: commit, init"

        if operation == "commit" and not context.params.get("message"):
            return False, "Missing required param: 'message' for commit operation"

        return True, ""

    def execute(self, context: ExecutionContext) -> Receipt:
        is_valid, error = self.validate(context)
        if not is_valid:
            return Receipt.failure(adapter=self.name, action_id=context.action.id, error=error)

        operation = context.params.get("operation")
        try:
            if operation == "init":
                return self._init(context)
            return self._commit(context)
        except (RuntimeError, OSError, subprocess.TimeoutExpired) as e:
            return Receipt.failure(
                adapter=self.name,
                action_id=context.action.id,
                error=f"Git error: {e}",
            )

    # ── Operations ──────────────────────────────────────────────

    def _init(self, ctx: ExecutionContext) -> Receipt:
        branch = ctx.params.get("branch") or "main"
        cwd = ctx.working_dir
        output = self._git(["init"], cwd, ctx)
        # works on git versions that predate `init -b`
        self._git(["symbolic-ref", "HEAD", f"refs/heads/{branch}"], cwd, ctx)
        return Receipt.success(
            adapter=self.name,
            action_id=ctx.action.id,
            output=output.strip(),
            metadata={"branch": branch},
        )

    def _commit(self, ctx: ExecutionContext) -> Receipt:
        message = ctx.params["message"]
        cwd = ctx.working_dir

        identity: list[str] = []
        if ctx.params.get("author_name"):
            identity += ["-c", f"user.name={ctx.params['author_name']}"]
        if ctx.params.get("author_email"):
            identity += ["-c", f"user.email={ctx.params['author_email']}"]

        self._git(["add", "-A"], cwd, ctx)
        output = self._git([*identity, "commit", "-m", message], cwd, ctx)
        return Receipt.success(
            adapter=self.name,
            action_id=ctx.action.id,
            output=output.strip(),
            metadata={"message": message},
        )

    # ── Helpers ─────────────────────────────────────────────────

    def _git(self, args: list[str], cwd: str, ctx: ExecutionContext) -> str:
        """Run a git command and return stdout."""
        logger.debug("%s $ git %s", cwd, " ".join(args))
        result = subprocess.run(
            ["git", *args],
            cwd=cwd,
            capture_output=True,
            text=True,
            timeout=ctx.params.get("timeout", 30),
        )
        if result.returncode != 0:
            raise RuntimeError(result.stderr.strip() or f"git {args[0]} failed")
        return result.stdout
