"""
User-facing output — titled, coloured blocks on the terminal.

Errors go to stderr, everything else to stdout.
"""

from __future__ import annotations

from collections.abc import Iterable

import click


def _block(icon: str, title: str, body_lines: Iterable[str], color: str, err: bool = False) -> None:
    click.echo(err=err)
    click.secho(f"{icon} {title}", fg=color, bold=True, err=err)
    lines = list(body_lines)
    if lines:
        click.echo(err=err)
        for line in lines:
            click.echo(f"   {line}", err=err)
    click.echo(err=err)


def error(title: str, body_lines: Iterable[str] = ()) -> None:
    _block("❌", title, body_lines, "red", err=True)


def warn(title: str, body_lines: Iterable[str] = ()) -> None:
    _block("⚠️ ", title, body_lines, "yellow", err=True)


def success(title: str, body_lines: Iterable[str] = ()) -> None:
    _block("✅", title, body_lines, "green")


def note(title: str, body_lines: Iterable[str] = ()) -> None:
    _block("ℹ️ ", title, body_lines, "cyan")


def log(message: str) -> None:
    click.secho(f"   {message}", dim=True)
