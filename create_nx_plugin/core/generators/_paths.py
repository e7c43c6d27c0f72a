"""Path helpers shared by the generators."""

from __future__ import annotations


def join(root: str, *parts: str) -> str:
    """Join tree paths, treating ``.`` and ``""`` as the workspace root."""
    segments = [p.strip("/") for p in (root, *parts) if p not in ("", ".")]
    return "/".join(s for s in segments if s)


def offset_from_root(root: str) -> str:
    """Relative prefix leading from ``root`` back to the workspace root."""
    if root in ("", "."):
        return "./"
    return "../" * len(root.strip("/").split("/"))


def project_file_name(name: str) -> str:
    """File- and npm-safe project name: ``@acme/foo`` → ``acme-foo``."""
    return name.replace("@", "").replace("/", "-").replace(" ", "-").lower()
