"""
User defaults loader — reads create-nx-plugin.yml into RawArguments defaults.

The file is optional. It lets a team pin the answers they always give
(package manager, CI provider, commit identity) so the prompts stop
asking. Values only fill fields the command line left unset.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from create_nx_plugin.core.models.options import CIProvider, PackageManager, RawArguments

logger = logging.getLogger(__name__)

# Default config filename
DEFAULTS_FILE = "create-nx-plugin.yml"
CONFIG_ENV_VAR = "CNP_CONFIG"


class ConfigError(Exception):
    """Raised when the defaults file is unreadable or invalid."""


class CommitDefaults(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str | None = None
    email: str | None = None
    message: str | None = None


class UserDefaults(BaseModel):
    """Schema of create-nx-plugin.yml."""

    model_config = ConfigDict(extra="forbid")

    package_manager: PackageManager | None = None
    ci: CIProvider | None = None
    nx_cloud: bool | None = None
    default_base: str | None = None
    all_prompts: bool | None = None
    skip_git: bool | None = None
    commit: CommitDefaults = Field(default_factory=CommitDefaults)


def find_defaults_file(start_dir: Path | None = None) -> Path | None:
    """Search for create-nx-plugin.yml starting from the given directory, walking up."""
    current = (start_dir or Path.cwd()).resolve()

    for _ in range(20):  # safety limit
        candidate = current / DEFAULTS_FILE
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break
        current = parent

    return None


def load_defaults(path: Path | None = None) -> UserDefaults:
    """Load and validate the defaults file.

    Args:
        path: Explicit path. If None, ``$CNP_CONFIG`` then an upward search.
            No file found means empty defaults.

    Raises:
        ConfigError: If an explicit file is missing, or any file is invalid.
    """
    if path is None and os.environ.get(CONFIG_ENV_VAR):
        path = Path(os.environ[CONFIG_ENV_VAR])
        if not path.is_file():
            raise ConfigError(f"{CONFIG_ENV_VAR} points to a missing file: {path}")
    elif path is not None and not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    if path is None:
        path = find_defaults_file()
    if path is None:
        return UserDefaults()

    logger.debug("Loading defaults from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return UserDefaults()
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    try:
        return UserDefaults.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid defaults in {path}: {e}") from e


def apply_defaults(args: RawArguments, defaults: UserDefaults, explicit: set[str]) -> RawArguments:
    """Fill fields of ``args`` not given on the command line.

    Args:
        explicit: Names of RawArguments fields the user passed explicitly.
    """
    candidates = {
        "package_manager": defaults.package_manager,
        "ci": defaults.ci,
        "nx_cloud": defaults.nx_cloud,
        "default_base": defaults.default_base,
        "all_prompts": defaults.all_prompts,
        "skip_git": defaults.skip_git,
        "commit_name": defaults.commit.name,
        "commit_email": defaults.commit.email,
        "commit_message": defaults.commit.message,
    }
    updates = {k: v for k, v in candidates.items() if v is not None and k not in explicit}
    if updates:
        logger.debug("Applying defaults: %s", sorted(updates))
    return args.model_copy(update=updates)
