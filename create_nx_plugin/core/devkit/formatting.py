"""
Formatting pass — normalizes every file a generator run touched.

Only staged files are formatted; untouched files on disk are left alone.
"""

from __future__ import annotations

import json
import logging

from create_nx_plugin.core.devkit.json_utils import serialize_json
from create_nx_plugin.core.devkit.tree import Tree

logger = logging.getLogger(__name__)

_SORTED_PACKAGE_KEYS = ("dependencies", "devDependencies", "peerDependencies")


def _format_json(path: str, text: str) -> str:
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        logger.debug("Not formatting %s: invalid JSON", path)
        return text
    if (path == "package.json" or path.endswith("/package.json")) and isinstance(data, dict):
        for key in _SORTED_PACKAGE_KEYS:
            if isinstance(data.get(key), dict):
                data[key] = dict(sorted(data[key].items()))
    return serialize_json(data)


def format_files(tree: Tree) -> list[str]:
    """Format staged files in place. Returns the paths that changed."""
    formatted: list[str] = []
    for change in tree.list_changes():
        if change.type == "DELETE" or change.content is None:
            continue
        try:
            text = change.content.decode("utf-8")
        except UnicodeDecodeError:
            continue

        if change.path.endswith(".json"):
            new_text = _format_json(change.path, text)
        else:
            new_text = text.rstrip("\n") + "\n" if text.strip() else text

        if new_text != text:
            tree.write(change.path, new_text)
            formatted.append(change.path)

    logger.debug("Formatted %d file(s)", len(formatted))
    return formatted
