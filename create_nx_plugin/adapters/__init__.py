"""Adapters — the only code that runs external tools."""

from create_nx_plugin.adapters.base import Adapter, ExecutionContext
from create_nx_plugin.adapters.mock import MockAdapter
from create_nx_plugin.adapters.registry import AdapterRegistry, default_registry

__all__ = [
    "Adapter",
    "AdapterRegistry",
    "ExecutionContext",
    "MockAdapter",
    "default_registry",
]
