"""
Domain models — Pydantic types for the scaffolder.

    from create_nx_plugin.core.models import Action, Receipt, PluginOptions
"""

from create_nx_plugin.core.models.action import Action, Receipt
from create_nx_plugin.core.models.change import FileChange
from create_nx_plugin.core.models.options import (
    CI_PROVIDERS,
    PACKAGE_MANAGERS,
    PluginOptions,
    RawArguments,
    local_name,
)
from create_nx_plugin.core.models.schemas import (
    CreatePackageGeneratorSchema,
    PluginGeneratorSchema,
    PresetGeneratorSchema,
)

__all__ = [
    "Action",
    "CI_PROVIDERS",
    "CreatePackageGeneratorSchema",
    "FileChange",
    "PACKAGE_MANAGERS",
    "PluginGeneratorSchema",
    "PluginOptions",
    "PresetGeneratorSchema",
    "RawArguments",
    "Receipt",
    "local_name",
]
