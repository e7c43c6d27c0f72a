"""Language adapters."""

from create_nx_plugin.adapters.languages.node import NodeAdapter

__all__ = ["NodeAdapter"]
