"""
Argument normalization — raw CLI input → resolved option set.

All-or-nothing: either every field is resolved and a frozen
``PluginOptions`` comes back wrapped in ``Resolved``, or the first
problem comes back as a ``ResolutionFailure``. Nothing here exits the
process; the CLI entry point maps a failure to exit code 1.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

import click

from create_nx_plugin.core.models.options import PluginOptions, RawArguments
from create_nx_plugin.core.services import prompts

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Resolvers:
    """The determine helpers, injectable for tests."""

    plugin_name: Callable[[RawArguments], str] = prompts.determine_plugin_name
    package_manager: Callable[[RawArguments], str] = prompts.determine_package_manager
    default_base: Callable[[RawArguments], str] = prompts.determine_default_base
    nx_cloud: Callable[[RawArguments], bool] = prompts.determine_nx_cloud
    ci: Callable[[RawArguments, bool], str] = prompts.determine_ci


@dataclass(frozen=True)
class Resolved:
    options: PluginOptions
    ok: bool = field(default=True, init=False)


@dataclass(frozen=True)
class ResolutionFailure:
    title: str
    body_lines: list[str] = field(default_factory=list)
    error: BaseException | None = None
    ok: bool = field(default=False, init=False)


ResolutionResult = Resolved | ResolutionFailure


def normalize_args(args: RawArguments, resolvers: Resolvers | None = None) -> ResolutionResult:
    """Resolve every option, prompting where the command line left gaps.

    Order: name, package manager, default base, Nx Cloud, CI. The CI
    choice depends on the Nx Cloud answer.
    """
    r = resolvers or Resolvers()
    try:
        try:
            plugin_name = r.plugin_name(args)
        except click.Abort:
            plugin_name = ""
        if not plugin_name:
            return ResolutionFailure(title="Invalid name", body_lines=["Name cannot be empty"])

        package_manager = r.package_manager(args)
        default_base = r.default_base(args)
        nx_cloud = r.nx_cloud(args)
        ci = r.ci(args, nx_cloud)

        options = PluginOptions.model_validate({
            **args.model_dump(),
            "plugin_name": plugin_name,
            "package_manager": package_manager,
            "default_base": default_base,
            "nx_cloud": nx_cloud,
            "ci": ci,
        })
    except Exception as e:
        logger.debug("Argument normalization failed", exc_info=True)
        return ResolutionFailure(title=str(e) or type(e).__name__, error=e)

    logger.info("Resolved options: %s", options.model_dump())
    return Resolved(options=options)
