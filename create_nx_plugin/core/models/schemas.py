"""
Generator schemas — the inputs each generator accepts.

Field aliases carry the camelCase names the Nx CLI passes, so a schema can
be validated straight from ``--pluginName``-style options.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class _Schema(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class PresetGeneratorSchema(_Schema):
    plugin_name: str = Field(alias="pluginName", min_length=1)
    cli_name: str | None = Field(default=None, alias="cliName")


class PluginGeneratorSchema(_Schema):
    name: str = Field(min_length=1)
    import_path: str | None = Field(default=None, alias="importPath")
    directory: str | None = None
    compiler: Literal["tsc", "swc"] = "tsc"
    linter: Literal["eslint", "none"] = "eslint"
    unit_test_runner: Literal["jest", "none"] = Field(default="jest", alias="unitTestRunner")
    root_project: bool = Field(default=False, alias="rootProject")
    skip_format: bool = Field(default=False, alias="skipFormat")
    skip_lint_checks: bool = Field(default=False, alias="skipLintChecks")
    skip_ts_config: bool = Field(default=False, alias="skipTsConfig")


class CreatePackageGeneratorSchema(_Schema):
    name: str = Field(min_length=1)
    project: str = Field(min_length=1)
    directory: str = "packages"
    compiler: Literal["tsc", "swc"] = "tsc"
    linter: Literal["eslint", "none"] = "eslint"
    unit_test_runner: Literal["jest", "none"] = Field(default="jest", alias="unitTestRunner")
    skip_format: bool = Field(default=False, alias="skipFormat")
    skip_ts_config: bool = Field(default=False, alias="skipTsConfig")
