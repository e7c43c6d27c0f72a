"""
Interactive "determine" helpers — one per option the resolver fills.

Each helper returns the explicitly-passed value unchanged, or asks the
user through click's prompt machinery, or falls back to a derived
default. They are stateless; ordering between them is the resolver's
business (``determine_ci`` takes the resolved cloud choice as a
parameter, so it cannot be called first).
"""

from __future__ import annotations

import logging

import click

from create_nx_plugin.adapters.languages.node import detect_invoked_package_manager
from create_nx_plugin.core.models.options import CI_PROVIDERS, PACKAGE_MANAGERS, RawArguments

logger = logging.getLogger(__name__)

_SKIP_CI = "skip"


def _require_non_empty(value: str) -> str:
    if not value.strip():
        raise click.BadParameter("Name cannot be empty")
    return value.strip()


def determine_plugin_name(args: RawArguments) -> str:
    """Name from the command line, else one prompt (re-asked while empty)."""
    if args.plugin_name:
        return args.plugin_name
    return click.prompt(
        "Plugin name",
        default="",
        show_default=False,
        value_proc=_require_non_empty,
    )


def determine_package_manager(args: RawArguments) -> str:
    if args.package_manager:
        return args.package_manager
    invoked = detect_invoked_package_manager()
    if args.all_prompts:
        return click.prompt(
            "Which package manager to use",
            type=click.Choice(PACKAGE_MANAGERS),
            default=invoked,
        )
    return invoked


def determine_default_base(args: RawArguments) -> str:
    if args.default_base:
        return args.default_base
    if args.all_prompts:
        return click.prompt("Main branch name", default="main")
    return "main"


def determine_nx_cloud(args: RawArguments) -> bool:
    if args.nx_cloud is not None:
        return args.nx_cloud
    return click.confirm(
        "Enable distributed caching to make your CI faster",
        default=True,
    )


def determine_ci(args: RawArguments, nx_cloud: bool) -> str:
    """CI provider to generate a workflow for, or ``""`` for none.

    Workflows are only generated for Nx Cloud workspaces.
    """
    if not nx_cloud:
        if args.ci:
            logger.warning("Ignoring --ci=%s: CI workflows are generated only with Nx Cloud", args.ci)
        return ""
    if args.ci:
        return args.ci
    if args.all_prompts:
        choice = click.prompt(
            f"CI workflow [{', '.join(f'{k} ({v})' for k, v in CI_PROVIDERS.items())}, {_SKIP_CI}]",
            type=click.Choice([*CI_PROVIDERS, _SKIP_CI]),
            default=_SKIP_CI,
            show_choices=False,
        )
        return "" if choice == _SKIP_CI else choice
    return ""
