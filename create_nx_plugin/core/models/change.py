"""
File change model — what a staged tree reports before it is committed.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel


class FileChange(BaseModel):
    """A pending change in the staged file tree.

    Attributes:
        path:    Path relative to the tree root, always ``/``-separated.
        type:    CREATE, UPDATE or DELETE.
        content: New file content (None for DELETE).
    """

    path: str
    type: Literal["CREATE", "UPDATE", "DELETE"]
    content: bytes | None = None
