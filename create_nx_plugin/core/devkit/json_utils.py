"""
JSON helpers over the staged tree.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from typing import Any

from create_nx_plugin.core.devkit.tree import GeneratorError, Tree


def serialize_json(data: Any) -> str:
    """Canonical JSON text: 2-space indent, trailing newline."""
    return json.dumps(data, indent=2, ensure_ascii=False) + "\n"


def read_json(tree: Tree, path: str) -> Any:
    """Parse a JSON file from the tree.

    Raises:
        GeneratorError: If the file is missing or is not valid JSON.
    """
    text = tree.read_text(path)
    if text is None:
        raise GeneratorError(f"Cannot find {path}")
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise GeneratorError(f"Cannot parse {path}: {e}") from e


def write_json(tree: Tree, path: str, data: Any) -> None:
    tree.write(path, serialize_json(data))


def update_json(tree: Tree, path: str, updater: Callable[[Any], Any]) -> Any:
    """Read, transform and write back a JSON file. Returns the new value."""
    updated = updater(read_json(tree, path))
    write_json(tree, path, updated)
    return updated
