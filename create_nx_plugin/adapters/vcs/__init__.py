"""Version control adapters."""

from create_nx_plugin.adapters.vcs.git import GitAdapter

__all__ = ["GitAdapter"]
