"""
Staged file tree — the in-memory workspace every generator mutates.

Reads fall through to disk; writes and deletes are recorded and only
reach the filesystem on ``commit()``. Generators never touch the
filesystem directly, so a whole pipeline can be previewed (dry run) or
abandoned halfway without leaving partial files behind.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path, PurePosixPath

from create_nx_plugin.core.models.change import FileChange

logger = logging.getLogger(__name__)

# Directories never walked when scanning the tree
_IGNORED_DIRS = frozenset({"node_modules", ".git", "dist", "tmp", ".nx"})


class GeneratorError(Exception):
    """Raised when a generator cannot apply its changes to the tree."""


class Tree:
    """Staged view over ``root``.

    Paths are ``/``-separated and relative to the root. A staged value of
    ``None`` marks a deleted file.
    """

    def __init__(self, root: Path | str):
        self.root = Path(root)
        self._staged: dict[str, bytes | None] = {}

    def __repr__(self) -> str:
        return f"<Tree root={str(self.root)!r} changes={len(self._staged)}>"

    # ── Paths ───────────────────────────────────────────────────

    @staticmethod
    def normalize(path: str) -> str:
        """Normalize a tree path, rejecting anything outside the root."""
        parts: list[str] = []
        for part in PurePosixPath(path.replace("\\", "/")).parts:
            if part in ("/", "."):
                continue
            if part == "..":
                if not parts:
                    raise GeneratorError(f"Path escapes the tree root: {path}")
                parts.pop()
                continue
            parts.append(part)
        return "/".join(parts)

    def _disk(self, path: str) -> Path:
        return self.root / path if path else self.root

    # ── Reads ───────────────────────────────────────────────────

    def read(self, path: str) -> bytes | None:
        """Return file content, or None if the file does not exist."""
        key = self.normalize(path)
        if key in self._staged:
            return self._staged[key]
        disk = self._disk(key)
        if disk.is_file():
            return disk.read_bytes()
        return None

    def read_text(self, path: str) -> str | None:
        content = self.read(path)
        return content.decode("utf-8") if content is not None else None

    def is_file(self, path: str) -> bool:
        return self.read(path) is not None

    def exists(self, path: str) -> bool:
        """True for files and for directories containing at least one file."""
        key = self.normalize(path)
        if self.is_file(key):
            return True
        return bool(self.children(key))

    def children(self, path: str = "") -> list[str]:
        """Names of the direct children (files and directories) of ``path``."""
        key = self.normalize(path)
        prefix = f"{key}/" if key else ""
        names: set[str] = set()

        disk = self._disk(key)
        if disk.is_dir():
            for entry in disk.iterdir():
                rel = f"{prefix}{entry.name}"
                if entry.is_file() and self._staged.get(rel, b"") is None:
                    continue  # deleted in this session
                if entry.is_dir() and self._dir_deleted(rel):
                    continue
                names.add(entry.name)

        for staged, content in self._staged.items():
            if content is None or not staged.startswith(prefix):
                continue
            names.add(staged[len(prefix):].split("/", 1)[0])

        return sorted(names)

    def _dir_deleted(self, rel: str) -> bool:
        """A directory is gone when every file under it on disk was deleted."""
        disk = self._disk(rel)
        on_disk = [
            p.relative_to(self.root).as_posix() for p in disk.rglob("*") if p.is_file()
        ]
        if not on_disk:
            return False
        staged_alive = any(
            k.startswith(f"{rel}/") and v is not None for k, v in self._staged.items()
        )
        return not staged_alive and all(self._staged.get(f, b"") is None for f in on_disk)

    def files(self, path: str = "") -> Iterator[str]:
        """Walk every file under ``path``, skipping build/vendor dirs."""
        key = self.normalize(path)
        for name in self.children(key):
            if name in _IGNORED_DIRS:
                continue
            child = f"{key}/{name}" if key else name
            if self.is_file(child):
                yield child
            else:
                yield from self.files(child)

    # ── Writes ──────────────────────────────────────────────────

    def write(self, path: str, content: str | bytes) -> None:
        key = self.normalize(path)
        if not key:
            raise GeneratorError("Cannot write to the tree root")
        data = content.encode("utf-8") if isinstance(content, str) else content
        self._staged[key] = data
        logger.debug("staged write %s (%d bytes)", key, len(data))

    def delete(self, path: str) -> None:
        """Delete a file, or every file below a directory."""
        key = self.normalize(path)
        if self.is_file(key):
            targets = [key]
        else:
            targets = list(self.files(key))
        for target in targets:
            if self._disk(target).is_file():
                self._staged[target] = None
            else:
                self._staged.pop(target, None)
            logger.debug("staged delete %s", target)

    # ── Changes ─────────────────────────────────────────────────

    def list_changes(self) -> list[FileChange]:
        """Pending changes, in the order they were first staged.

        Writes that leave a disk file byte-identical are not changes.
        """
        changes: list[FileChange] = []
        for key, content in self._staged.items():
            disk = self._disk(key)
            on_disk = disk.is_file()
            if content is None:
                if on_disk:
                    changes.append(FileChange(path=key, type="DELETE"))
                continue
            if not on_disk:
                changes.append(FileChange(path=key, type="CREATE", content=content))
            elif disk.read_bytes() != content:
                changes.append(FileChange(path=key, type="UPDATE", content=content))
        return changes

    def commit(self) -> list[FileChange]:
        """Flush every pending change to disk and clear the staging area."""
        changes = self.list_changes()
        for change in changes:
            disk = self._disk(change.path)
            if change.content is None:
                disk.unlink(missing_ok=True)
                continue
            disk.parent.mkdir(parents=True, exist_ok=True)
            disk.write_bytes(change.content)
        self._staged.clear()
        logger.info("Committed %d file change(s) under %s", len(changes), self.root)
        return changes
