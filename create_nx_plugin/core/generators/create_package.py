"""
Create-package generator — a ``create-<plugin>`` CLI for a plugin.

The generated package is a tiny node CLI that creates a new workspace
with the plugin's ``preset`` generator. The plugin must already exist in
the tree; a ``preset`` generator is added to it when it has none.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from create_nx_plugin.core.devkit import versions
from create_nx_plugin.core.devkit.formatting import format_files
from create_nx_plugin.core.devkit.json_utils import read_json, update_json, write_json
from create_nx_plugin.core.devkit.nx_json import add_project_configuration, read_project_configuration
from create_nx_plugin.core.devkit.package_json import add_dependencies_to_package_json
from create_nx_plugin.core.devkit.tree import GeneratorError, Tree
from create_nx_plugin.core.generators._paths import join, offset_from_root, project_file_name
from create_nx_plugin.core.models.action import Action
from create_nx_plugin.core.models.options import local_name
from create_nx_plugin.core.models.schemas import CreatePackageGeneratorSchema

logger = logging.getLogger(__name__)

_PRESET_SCHEMA = {
    "$schema": "http://json-schema.org/schema",
    "cli": "nx",
    "$id": "Preset",
    "title": "",
    "type": "object",
    "properties": {
        "name": {
            "type": "string",
            "description": "",
            "$default": {"$source": "argv", "index": 0},
            "x-prompt": "What name would you like to use?",
        },
    },
    "required": ["name"],
}

_PRESET_GENERATOR_TS = """\
import { addProjectConfiguration, formatFiles, generateFiles, Tree } from '@nrwl/devkit';
import * as path from 'path';
import { PresetGeneratorSchema } from './schema';

export default async function (tree: Tree, options: PresetGeneratorSchema) {
  const projectRoot = `libs/${options.name}`;
  addProjectConfiguration(tree, options.name, {
    root: projectRoot,
    projectType: 'library',
    sourceRoot: `${projectRoot}/src`,
    targets: {},
  });
  generateFiles(tree, path.join(__dirname, 'files'), projectRoot, options);
  await formatFiles(tree);
}
"""

_PRESET_SCHEMA_TS = """\
export interface PresetGeneratorSchema {
  name: string;
}
"""


def _bin_index_ts(package_name: str, plugin_package: str) -> str:
    return f"""\
#!/usr/bin/env node

import {{ createWorkspace }} from 'create-nx-workspace';

async function main() {{
  const name = process.argv[2];
  if (!name) {{
    throw new Error('Please provide a name for the workspace');
  }}

  console.log(`Creating the workspace: ${{name}}`);

  // This assumes "{plugin_package}" and "{package_name}" are at the same version
  // eslint-disable-next-line @typescript-eslint/no-var-requires
  const presetVersion = require('../package.json').version;

  const {{ directory }} = await createWorkspace(`{plugin_package}@${{presetVersion}}`, {{
    name,
    nxCloud: false,
    packageManager: 'npm',
  }});

  console.log(`Successfully created the workspace: ${{directory}}.`);
}}

main();
"""


def _ensure_preset_generator(tree: Tree, plugin_root: str) -> None:
    """Register a ``preset`` generator in the plugin if it has none."""
    generators_path = join(plugin_root, "generators.json")
    if tree.is_file(generators_path):
        generators = read_json(tree, generators_path)
    else:
        generators = {"generators": {}}
    if "preset" in generators.get("generators", {}):
        logger.debug("Plugin already has a preset generator")
        return

    generators.setdefault("generators", {})["preset"] = {
        "factory": "./src/generators/preset/generator",
        "schema": "./src/generators/preset/schema.json",
        "description": "preset generator",
    }
    write_json(tree, generators_path, generators)

    preset_dir = join(plugin_root, "src/generators/preset")
    tree.write(join(preset_dir, "generator.ts"), _PRESET_GENERATOR_TS)
    tree.write(join(preset_dir, "schema.d.ts"), _PRESET_SCHEMA_TS)
    write_json(tree, join(preset_dir, "schema.json"), _PRESET_SCHEMA)
    tree.write(join(preset_dir, "files/src/index.ts__template__"), "const variable = '<%= name %>';\n")


def _project_config(
    schema: CreatePackageGeneratorSchema,
    project_name: str,
    root: str,
) -> dict[str, Any]:
    targets: dict[str, Any] = {
        "build": {
            "executor": f"@nrwl/js:{schema.compiler}",
            "outputs": ["{options.outputPath}"],
            "options": {
                "outputPath": f"dist/{root}",
                "main": join(root, "bin/index.ts"),
                "tsConfig": join(root, "tsconfig.lib.json"),
                "assets": [join(root, "*.md")],
            },
        },
    }
    if schema.linter == "eslint":
        targets["lint"] = {
            "executor": "@nrwl/linter:eslint",
            "outputs": ["{options.outputFile}"],
            "options": {"lintFilePatterns": [join(root, "**/*.ts")]},
        }
    if schema.unit_test_runner == "jest":
        targets["test"] = {
            "executor": "@nrwl/jest:jest",
            "outputs": ["{workspaceRoot}/coverage/{projectRoot}"],
            "options": {"jestConfig": join(root, "jest.config.ts"), "passWithNoTests": True},
        }
    return {
        "root": root,
        "$schema": f"{offset_from_root(root)}node_modules/nx/schemas/project-schema.json",
        "sourceRoot": join(root, "bin"),
        "projectType": "library",
        "implicitDependencies": [schema.project],
        "targets": targets,
        "tags": [],
    }


def _write_support_files(
    tree: Tree,
    schema: CreatePackageGeneratorSchema,
    project_name: str,
    root: str,
) -> None:
    offset = offset_from_root(root)
    write_json(tree, join(root, "tsconfig.json"), {
        "extends": f"{offset}tsconfig.base.json",
        "compilerOptions": {"module": "commonjs"},
        "files": [],
        "include": [],
        "references": [{"path": "./tsconfig.lib.json"}],
    })
    write_json(tree, join(root, "tsconfig.lib.json"), {
        "extends": "./tsconfig.json",
        "compilerOptions": {"outDir": f"{offset}dist/out-tsc", "declaration": True, "types": ["node"]},
        "include": ["bin/**/*.ts"],
        "exclude": ["jest.config.ts", "bin/**/*.spec.ts"],
    })
    if schema.linter == "eslint":
        write_json(tree, join(root, ".eslintrc.json"), {
            "extends": [f"{offset}.eslintrc.json"],
            "ignorePatterns": ["!**/*"],
            "overrides": [{"files": ["*.ts"], "rules": {}}],
        })
    if schema.unit_test_runner == "jest":
        tree.write(join(root, "jest.config.ts"), f"""\
/* eslint-disable */
export default {{
  displayName: {json.dumps(project_name)},
  preset: '{offset}jest.preset.js',
  testEnvironment: 'node',
  moduleFileExtensions: ['ts', 'js'],
  coverageDirectory: '{offset}coverage/{root}',
}};
""")
    tree.write(join(root, "README.md"), f"# {schema.name}\n\nRun `npx {schema.name} my-workspace` to create a workspace.\n")


def create_package_generator(tree: Tree, schema: CreatePackageGeneratorSchema) -> Action:
    """Add a create-workspace CLI package for an existing plugin project.

    Raises:
        GeneratorError: If the target plugin project does not exist.
    """
    plugin = read_project_configuration(tree, schema.project)
    plugin_root = plugin["root"]

    plugin_manifest = join(plugin_root, "package.json")
    if not tree.is_file(plugin_manifest):
        raise GeneratorError(f"Plugin project '{schema.project}' has no package.json")
    plugin_package = read_json(tree, plugin_manifest).get("name") or schema.project

    project_name = project_file_name(schema.name)
    root = join(schema.directory, project_name)
    logger.info("Creating CLI package %s at %s for %s", project_name, root, plugin_package)

    _ensure_preset_generator(tree, plugin_root)

    add_project_configuration(tree, project_name, _project_config(schema, project_name, root))
    write_json(tree, join(root, "package.json"), {
        "name": schema.name,
        "version": "0.0.1",
        "bin": {local_name(schema.name): "./bin/index.js"},
        "dependencies": {"create-nx-workspace": versions.NX_VERSION},
    })
    tree.write(join(root, "bin/index.ts"), _bin_index_ts(schema.name, plugin_package))
    _write_support_files(tree, schema, project_name, root)

    if not schema.skip_ts_config:
        def _add_path(json_: dict[str, Any]) -> dict[str, Any]:
            paths = json_.setdefault("compilerOptions", {}).setdefault("paths", {})
            paths[schema.name] = [join(root, "bin/index.ts")]
            return json_

        if tree.is_file("tsconfig.base.json"):
            update_json(tree, "tsconfig.base.json", _add_path)

    task = add_dependencies_to_package_json(
        tree, {}, {"create-nx-workspace": versions.NX_VERSION}, owner="create-package"
    )

    if not schema.skip_format:
        format_files(tree)
    return task
