"""
create-nx-plugin — CLI entrypoint.

Usage:
    create-nx-plugin --help
    create-nx-plugin my-plugin
    create-nx-plugin @acme/my-plugin --cli-name create-acme --package-manager pnpm
    python -m create_nx_plugin.main my-plugin --dry-run
"""

from __future__ import annotations

import sys
from pathlib import Path

import click
from click.core import ParameterSource

from create_nx_plugin import __version__
from create_nx_plugin.adapters.registry import default_registry
from create_nx_plugin.core.config.loader import ConfigError, apply_defaults, load_defaults
from create_nx_plugin.core.models.options import CI_PROVIDERS, PACKAGE_MANAGERS, RawArguments
from create_nx_plugin.core.observability.logging_config import setup_from_flags
from create_nx_plugin.core.use_cases.create_workspace import WorkspaceResult, create_workspace
from create_nx_plugin.core.use_cases.normalize import ResolutionFailure, normalize_args
from create_nx_plugin.ui.cli import output

# click parameter name → RawArguments field, for the ones that can come
# from the defaults file
_DEFAULTABLE = {
    "package_manager": "package_manager",
    "ci": "ci",
    "nx_cloud": "nx_cloud",
    "default_base": "default_base",
    "all_prompts": "all_prompts",
    "skip_git": "skip_git",
    "commit_name": "commit_name",
    "commit_email": "commit_email",
    "commit_message": "commit_message",
}


def _explicit_fields(ctx: click.Context) -> set[str]:
    """RawArguments fields the user passed on the command line."""
    return {
        field
        for param, field in _DEFAULTABLE.items()
        if ctx.get_parameter_source(param) == ParameterSource.COMMANDLINE
    }


def _report(result: WorkspaceResult) -> None:
    for change in result.changes:
        output.log(f"{change.type} {change.path}")

    for warning in result.warnings:
        output.warn(warning)

    name = result.directory.name
    if result.dry_run:
        output.note(
            "Dry run: nothing was written",
            [f"{len(result.changes)} file(s) would be created in {result.directory}"],
        )
        return

    output.success(
        f"Successfully created the workspace: {name}",
        [f"cd {name}", f"npx nx build {name}", f"npx nx test {name}"],
    )


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(version=__version__, prog_name="create-nx-plugin")
@click.argument("plugin_name", required=False, metavar="[NAME]")
@click.option("--name", "name_option", default=None, help="Plugin name (same as NAME).")
@click.option(
    "--cli-name",
    "--cliName",
    "cli_name",
    default=None,
    help="Name of the CLI package to create workspace with plugin.",
)
@click.option(
    "--package-manager",
    "--packageManager",
    "--pm",
    "package_manager",
    type=click.Choice(PACKAGE_MANAGERS),
    default=None,
    help="Package manager to use.",
)
@click.option(
    "--ci",
    type=click.Choice(list(CI_PROVIDERS)),
    default=None,
    help="CI provider to generate a workflow for (requires Nx Cloud).",
)
@click.option(
    "--all-prompts",
    "--allPrompts",
    "-a",
    "all_prompts",
    is_flag=True,
    default=False,
    help="Show all prompts.",
)
@click.option(
    "--nx-cloud/--no-nx-cloud",
    "--nxCloud/--no-nxCloud",
    "nx_cloud",
    default=None,
    help="Use Nx Cloud.",
)
@click.option(
    "--default-base",
    "--defaultBase",
    "default_base",
    default=None,
    help="Default base branch for affected commands.",
)
@click.option("--skip-git", "--skipGit", "skip_git", is_flag=True, default=False, help="Skip initializing a git repository.")
@click.option("--commit-name", "--commit.name", "commit_name", default=None, help="Name of the committer.")
@click.option("--commit-email", "--commit.email", "commit_email", default=None, help="E-mail of the committer.")
@click.option(
    "--commit-message",
    "--commit.message",
    "commit_message",
    default="Initial commit",
    help="Commit message.",
)
@click.option("--dry-run", is_flag=True, help="Show what would be created without writing anything.")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False, dir_okay=False),
    default=None,
    help="Path to create-nx-plugin.yml (default: auto-detect).",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.pass_context
def cli(
    ctx: click.Context,
    plugin_name: str | None,
    name_option: str | None,
    cli_name: str | None,
    package_manager: str | None,
    ci: str | None,
    all_prompts: bool,
    nx_cloud: bool | None,
    default_base: str | None,
    skip_git: bool,
    commit_name: str | None,
    commit_email: str | None,
    commit_message: str,
    dry_run: bool,
    config_path: str | None,
    verbose: bool,
    debug: bool,
) -> None:
    """Create a new Nx plugin workspace."""
    setup_from_flags(verbose=verbose, debug=debug)

    try:
        defaults = load_defaults(Path(config_path) if config_path else None)
    except ConfigError as e:
        output.error("Invalid configuration", [str(e)])
        sys.exit(1)

    args = RawArguments(
        plugin_name=plugin_name or name_option,
        cli_name=cli_name,
        package_manager=package_manager,
        ci=ci,
        all_prompts=all_prompts,
        nx_cloud=nx_cloud,
        default_base=default_base,
        skip_git=skip_git,
        commit_name=commit_name,
        commit_email=commit_email,
        commit_message=commit_message,
    )
    args = apply_defaults(args, defaults, _explicit_fields(ctx))

    resolution = normalize_args(args)
    if isinstance(resolution, ResolutionFailure):
        output.error(resolution.title, resolution.body_lines)
        sys.exit(1)

    try:
        result = create_workspace(
            resolution.options,
            Path.cwd(),
            default_registry(),
            dry_run=dry_run,
        )
    except Exception:
        output.error(f"Something went wrong! v{__version__}")
        raise

    _report(result)


if __name__ == "__main__":
    cli()
