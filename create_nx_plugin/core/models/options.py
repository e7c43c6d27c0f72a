"""
Option models — what the CLI parsed and what the resolver produced.

``RawArguments`` is the partially-filled record straight from click (plus
the user defaults file). ``PluginOptions`` is the fully-resolved,
immutable option set every downstream step consumes.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

PackageManager = Literal["npm", "yarn", "pnpm"]
CIProvider = Literal["github", "circleci", "azure", "bitbucket-pipelines", "gitlab"]

PACKAGE_MANAGERS: tuple[str, ...] = ("npm", "yarn", "pnpm")
CI_PROVIDERS: dict[str, str] = {
    "github": "GitHub Actions",
    "circleci": "Circle CI",
    "azure": "Azure DevOps",
    "bitbucket-pipelines": "BitBucket Pipelines",
    "gitlab": "Gitlab",
}


def local_name(plugin_name: str) -> str:
    """Strip the scope from ``scope/name``; unscoped names pass through."""
    if "/" in plugin_name:
        return plugin_name.split("/")[1]
    return plugin_name


class RawArguments(BaseModel):
    """Command-line input before normalization. Every field may be unset."""

    plugin_name: str | None = None
    cli_name: str | None = None
    package_manager: PackageManager | None = None
    ci: CIProvider | None = None
    all_prompts: bool = False
    nx_cloud: bool | None = None
    default_base: str | None = None

    skip_git: bool = False
    commit_name: str | None = None
    commit_email: str | None = None
    commit_message: str = "Initial commit"


class PluginOptions(BaseModel):
    """The resolved option set for one invocation.

    Frozen: the resolver builds it once and nothing downstream may change
    it. ``ci`` is empty when no CI workflow should be generated.
    """

    model_config = ConfigDict(frozen=True)

    plugin_name: str = Field(min_length=1)
    cli_name: str | None = None
    package_manager: PackageManager
    ci: CIProvider | Literal[""] = ""
    all_prompts: bool = False
    nx_cloud: bool
    default_base: str = Field(min_length=1)

    skip_git: bool = False
    commit_name: str | None = None
    commit_email: str | None = None
    commit_message: str = "Initial commit"

    @property
    def name(self) -> str:
        """Local (unscoped) project name."""
        return local_name(self.plugin_name)

    @property
    def import_path(self) -> str:
        """Publishable package name — the plugin name as supplied."""
        return self.plugin_name
