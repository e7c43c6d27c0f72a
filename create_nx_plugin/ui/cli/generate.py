"""
CLI commands for running a single generator against an existing workspace.

Thin wrapper over ``create_nx_plugin.core.generators``. Each generator
gets a subcommand whose options are built from its schema, so both
``--pluginName foo`` and ``--plugin-name foo`` work and ``--help`` lists
them.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, Literal, get_args, get_origin

import click
from click.core import ParameterSource
from pydantic import BaseModel, ValidationError

from create_nx_plugin import __version__
from create_nx_plugin.adapters.registry import default_registry
from create_nx_plugin.core.devkit.tasks import run_tasks_in_serial
from create_nx_plugin.core.devkit.tree import Tree
from create_nx_plugin.core.generators import GENERATORS
from create_nx_plugin.core.observability.logging_config import setup_from_flags
from create_nx_plugin.ui.cli import output


def schema_options(schema_cls: type[BaseModel]) -> list[click.Option]:
    """One click option per schema field, under its dashed name and its alias."""
    options: list[click.Option] = []
    for name, field in schema_cls.model_fields.items():
        flag = name.replace("_", "-")
        alias = field.alias if field.alias and field.alias != name else None
        help_text = None if field.is_required() else f"Default: {field.default}."

        if field.annotation is bool:
            decls = [f"--{flag}/--no-{flag}"]
            if alias:
                decls.append(f"--{alias}/--no-{alias}")
            options.append(click.Option([name, *decls], default=None, help=help_text))
            continue

        decls = [f"--{flag}"] + ([f"--{alias}"] if alias else [])
        choices = get_args(field.annotation) if get_origin(field.annotation) is Literal else ()
        options.append(click.Option(
            [name, *decls],
            type=click.Choice(choices) if choices else str,
            required=field.is_required(),
            default=None,
            help=help_text,
        ))
    return options


def _run(
    ctx: click.Context,
    generator: str,
    values: dict[str, Any],
    cwd: str,
    dry_run: bool,
    skip_install: bool,
) -> None:
    schema_cls, runner = GENERATORS[generator]
    given = {
        key: value
        for key, value in values.items()
        if ctx.get_parameter_source(key) == ParameterSource.COMMANDLINE
    }
    try:
        schema = schema_cls.model_validate(given)
    except ValidationError as e:
        problems = [
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
        ]
        output.error(f"Invalid options for '{generator}'", problems)
        sys.exit(1)

    root = Path(cwd).resolve()
    tree = Tree(root)
    try:
        tasks = runner(tree, schema)
    except Exception:
        output.error(f"Something went wrong! v{__version__}")
        raise

    changes = tree.list_changes()
    for change in changes:
        output.log(f"{change.type} {change.path}")

    if dry_run:
        output.note("Dry run: nothing was written")
        return

    tree.commit()
    if skip_install:
        return

    run_tasks_in_serial(tasks, default_registry(), str(root))
    output.success(f"Generator '{generator}' finished", [f"{len(changes)} file(s) changed"])


def _generator_command(generator: str) -> click.Command:
    schema_cls, _ = GENERATORS[generator]

    @click.command(generator, help=f"Run the {generator} generator in an existing workspace.")
    @click.option(
        "--cwd",
        type=click.Path(exists=True, file_okay=False),
        default=".",
        help="Workspace root (default: current directory).",
    )
    @click.option("--dry-run", is_flag=True, help="Show changes without writing them.")
    @click.option("--skip-install", is_flag=True, help="Do not run the deferred install tasks.")
    @click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
    @click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
    @click.pass_context
    def command(
        ctx: click.Context,
        cwd: str,
        dry_run: bool,
        skip_install: bool,
        verbose: bool,
        debug: bool,
        **values: Any,
    ) -> None:
        setup_from_flags(verbose=verbose, debug=debug)
        _run(ctx, generator, values, cwd, dry_run, skip_install)

    command.params.extend(schema_options(schema_cls))
    return command


@click.group("nx-plugin-generate")
@click.version_option(version=__version__, prog_name="nx-plugin-generate")
def generate() -> None:
    """Run a single generator (preset, plugin, create-package) in an existing workspace."""


for _name in GENERATORS:
    generate.add_command(_generator_command(_name))
