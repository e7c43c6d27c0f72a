"""
Tests for adapter protocol, registry, mock, node, and git adapters.
"""

import shutil
import subprocess
from pathlib import Path

import pytest

from create_nx_plugin.adapters.base import ExecutionContext
from create_nx_plugin.adapters.languages.node import (
    NodeAdapter,
    detect_invoked_package_manager,
    detect_lockfile_package_manager,
    exec_command,
)
from create_nx_plugin.adapters.mock import MockAdapter
from create_nx_plugin.adapters.registry import AdapterRegistry, default_registry
from create_nx_plugin.adapters.vcs.git import GitAdapter
from create_nx_plugin.core.models.action import Action, Receipt

# ── Mock Adapter Tests ───────────────────────────────────────────────


class TestMockAdapter:
    def test_default_success(self):
        mock = MockAdapter(adapter_name="test-mock")
        ctx = ExecutionContext(action=Action(id="op-1", adapter="test-mock"))
        receipt = mock.execute(ctx)
        assert receipt.ok
        assert mock.call_count == 1

    def test_custom_response(self):
        mock = MockAdapter()
        mock.set_response(
            "op-1",
            Receipt.success(adapter="mock", action_id="op-1", output="custom"),
        )
        ctx = ExecutionContext(action=Action(id="op-1", adapter="mock"))
        assert mock.execute(ctx).output == "custom"

    def test_set_failure(self):
        mock = MockAdapter()
        mock.set_failure("op-fail", error="Intentional failure")
        ctx = ExecutionContext(action=Action(id="op-fail", adapter="mock"))
        receipt = mock.execute(ctx)
        assert receipt.failed
        assert receipt.error == "Intentional failure"

    def test_timeline_and_reset(self):
        mock = MockAdapter()
        mock.execute(ExecutionContext(action=Action(id="a", adapter="mock")))
        ((action_id, started, ended),) = mock.timeline
        assert action_id == "a"
        assert ended >= started
        mock.reset()
        assert mock.call_count == 0
        assert mock.timeline == []


# ── Registry Tests ───────────────────────────────────────────────────


class TestAdapterRegistry:
    def test_register_and_get(self):
        registry = AdapterRegistry()
        mock = MockAdapter(adapter_name="node")
        registry.register(mock)
        assert registry.get("node") is mock
        registry.unregister("node")
        assert registry.get("node") is None

    def test_unknown_adapter(self):
        receipt = AdapterRegistry().execute_action(Action(id="x", adapter="nope"))
        assert receipt.failed
        assert "No adapter registered" in receipt.error

    def test_validation_failure(self):
        registry = AdapterRegistry()
        registry.register(NodeAdapter())
        receipt = registry.execute_action(Action(id="x", adapter="node", params={"operation": "dance"}))
        assert receipt.failed
        assert "Validation failed" in receipt.error

    def test_dry_run_skips(self):
        registry = AdapterRegistry()
        mock = MockAdapter(adapter_name="node")
        registry.register(mock)
        receipt = registry.execute_action(Action(id="x", adapter="node"), dry_run=True)
        assert receipt.status == "skipped"
        assert mock.call_count == 0

    def test_mock_mode_without_adapter(self):
        registry = AdapterRegistry(mock_mode=True)
        receipt = registry.execute_action(Action(id="x", adapter="node"))
        assert receipt.ok
        assert receipt.metadata["mock"] is True
        assert registry.is_available("git")

    def test_defaults_layered_under_params(self):
        mock = MockAdapter()
        registry = AdapterRegistry(mock_mode=True, mock_adapter=mock)
        registry.execute_action(
            Action(id="x", adapter="node", params={"operation": "install"}),
            project_root="/ws",
            defaults={"package_manager": "yarn", "operation": "ignored"},
        )
        ctx = mock.call_log[0]
        assert ctx.params == {"package_manager": "yarn", "operation": "install"}
        assert ctx.working_dir == "/ws"

    def test_adapter_exception_captured(self):
        class Exploding(MockAdapter):
            def execute(self, context):
                raise RuntimeError("kaboom")

        registry = AdapterRegistry()
        registry.register(Exploding(adapter_name="boom"))
        receipt = registry.execute_action(Action(id="x", adapter="boom"))
        assert receipt.failed
        assert "kaboom" in receipt.error

    def test_default_registry(self):
        registry = default_registry()
        assert isinstance(registry.get("node"), NodeAdapter)
        assert isinstance(registry.get("git"), GitAdapter)
        assert not registry.is_available("svn")


# ── Node Adapter Tests ───────────────────────────────────────────────


class TestPackageManagerDetection:
    @pytest.mark.parametrize(
        ("agent", "expected"),
        [
            ("pnpm/7.27.0 npm/? node/v18.14.0 linux x64", "pnpm"),
            ("yarn/1.22.19 npm/? node/v18.14.0 darwin arm64", "yarn"),
            ("npm/9.5.0 node/v18.14.0 linux x64 workspaces/false", "npm"),
            ("bun/1.0.0", "npm"),
            ("", "npm"),
        ],
    )
    def test_invoked(self, agent, expected):
        assert detect_invoked_package_manager({"npm_config_user_agent": agent}) == expected

    def test_lockfile(self, tmp_path: Path):
        assert detect_lockfile_package_manager(tmp_path) == "npm"
        (tmp_path / "yarn.lock").write_text("")
        assert detect_lockfile_package_manager(tmp_path) == "yarn"
        (tmp_path / "pnpm-lock.yaml").write_text("")
        assert detect_lockfile_package_manager(tmp_path) == "pnpm"

    def test_exec_command(self):
        assert exec_command("npm") == ["npx"]
        assert exec_command("pnpm") == ["pnpm", "exec"]


class TestNodeAdapter:
    def _ctx(self, **params) -> ExecutionContext:
        return ExecutionContext(action=Action(id="t", adapter="node", params=params))

    def test_context_params_default_to_action(self):
        ctx = self._ctx(operation="install")
        assert ctx.params == {"operation": "install"}
        explicit = ExecutionContext(action=Action(id="t", adapter="node", params={"a": 1}), params={})
        assert explicit.params == {}

    def test_invalid_action_returns_failure(self):
        receipt = NodeAdapter().execute(self._ctx())
        assert receipt.failed
        assert "Unknown operation" in receipt.error

    def test_validate(self):
        node = NodeAdapter()
        assert node.validate(self._ctx(operation="install")) == (True, "")
        assert not node.validate(self._ctx(operation="exec"))[0]
        assert not node.validate(self._ctx(operation="install", package_manager="bun"))[0]
        assert node.validate(self._ctx(operation="exec", args=["nx", "--version"]))[0]

    def test_install_command(self, tmp_path: Path, monkeypatch):
        calls = []

        def fake_run(cmd, **kwargs):
            calls.append((cmd, kwargs["cwd"]))
            return subprocess.CompletedProcess(cmd, 0, stdout="added 1 package\n", stderr="")

        monkeypatch.setattr(subprocess, "run", fake_run)
        ctx = ExecutionContext(
            action=Action(id="t", adapter="node", params={"operation": "install", "package_manager": "pnpm"}),
            project_root=str(tmp_path),
        )
        receipt = NodeAdapter().execute(ctx)
        assert receipt.ok
        assert receipt.output == "added 1 package"
        assert calls == [(["pnpm", "install"], str(tmp_path))]

    def test_exec_failure(self, tmp_path: Path, monkeypatch):
        monkeypatch.setattr(
            subprocess,
            "run",
            lambda cmd, **kw: subprocess.CompletedProcess(cmd, 1, stdout="", stderr="nx: not found"),
        )
        ctx = ExecutionContext(
            action=Action(id="t", adapter="node", params={"operation": "exec", "args": ["nx", "g"]}),
            project_root=str(tmp_path),
        )
        receipt = NodeAdapter().execute(ctx)
        assert receipt.failed
        assert receipt.error == "nx: not found"
        assert receipt.metadata["command"] == "npx nx g"

    def test_missing_binary(self, tmp_path: Path, monkeypatch):
        def missing(cmd, **kw):
            raise FileNotFoundError(cmd[0])

        monkeypatch.setattr(subprocess, "run", missing)
        ctx = ExecutionContext(
            action=Action(id="t", adapter="node", params={"operation": "install", "package_manager": "yarn"}),
            project_root=str(tmp_path),
        )
        receipt = NodeAdapter().execute(ctx)
        assert receipt.failed
        assert "not found on PATH" in receipt.error


# ── Git Adapter Tests ────────────────────────────────────────────────


class TestGitAdapter:
    def test_validate(self):
        git = GitAdapter()
        ctx = ExecutionContext(action=Action(id="t", adapter="git", params={"operation": "commit"}))
        assert not git.validate(ctx)[0]
        ctx = ExecutionContext(action=Action(id="t", adapter="git", params={"operation": "init"}))
        assert git.validate(ctx)[0]

    def test_invalid_action_returns_failure(self):
        ctx = ExecutionContext(action=Action(id="t", adapter="git", params={"operation": "push"}))
        receipt = GitAdapter().execute(ctx)
        assert receipt.failed
        assert "Unknown operation" in receipt.error

    def test_failure_captured(self, tmp_path: Path, monkeypatch):
        monkeypatch.setattr(
            subprocess,
            "run",
            lambda cmd, **kw: subprocess.CompletedProcess(cmd, 128, stdout="", stderr="fatal: nope"),
        )
        ctx = ExecutionContext(
            action=Action(id="t", adapter="git", params={"operation": "init"}),
            project_root=str(tmp_path),
        )
        receipt = GitAdapter().execute(ctx)
        assert receipt.failed
        assert "fatal: nope" in receipt.error

    @pytest.mark.skipif(shutil.which("git") is None, reason="git not installed")
    def test_init_and_commit(self, tmp_path: Path):
        (tmp_path / "README.md").write_text("# ws\n")
        git = GitAdapter()
        init = git.execute(ExecutionContext(
            action=Action(id="init", adapter="git", params={"operation": "init", "branch": "trunk"}),
            project_root=str(tmp_path),
        ))
        assert init.ok
        commit = git.execute(ExecutionContext(
            action=Action(id="commit", adapter="git", params={
                "operation": "commit",
                "message": "Initial commit",
                "author_name": "Test",
                "author_email": "test@example.com",
            }),
            project_root=str(tmp_path),
        ))
        assert commit.ok, commit.error
        head = subprocess.run(
            ["git", "rev-parse", "--abbrev-ref", "HEAD"],
            cwd=tmp_path, capture_output=True, text=True,
        )
        assert head.stdout.strip() == "trunk"
