"""
Plugin generator — scaffolds an Nx plugin library.

A root project (``root_project=True``) lives at the workspace root and
takes over the root ``package.json``; any other plugin is created under
``libs/<name>`` (or ``<directory>/<name>``).
"""

from __future__ import annotations

import logging
from typing import Any

from create_nx_plugin.core.devkit import versions
from create_nx_plugin.core.devkit.formatting import format_files
from create_nx_plugin.core.devkit.json_utils import update_json, write_json
from create_nx_plugin.core.devkit.nx_json import add_project_configuration, read_nx_json
from create_nx_plugin.core.devkit.package_json import add_dependencies_to_package_json
from create_nx_plugin.core.devkit.tree import Tree
from create_nx_plugin.core.generators._paths import join, offset_from_root, project_file_name
from create_nx_plugin.core.models.action import Action
from create_nx_plugin.core.models.schemas import PluginGeneratorSchema

logger = logging.getLogger(__name__)


def _normalize(tree: Tree, schema: PluginGeneratorSchema) -> dict[str, str]:
    file_name = project_file_name(schema.name)
    if schema.root_project:
        root = "."
    else:
        root = join(schema.directory or "libs", file_name)

    import_path = schema.import_path
    if not import_path:
        nx_json = read_nx_json(tree) or {}
        scope = nx_json.get("npmScope")
        import_path = f"@{scope}/{file_name}" if scope else file_name

    return {"name": schema.name, "file_name": file_name, "root": root, "import_path": import_path}


def _build_target(schema: PluginGeneratorSchema, n: dict[str, str]) -> dict[str, Any]:
    root = n["root"]
    src = f"./{join(root, 'src')}"
    project_dir = f"./{root}" if root != "." else "."
    return {
        "executor": f"@nrwl/js:{schema.compiler}",
        "outputs": ["{options.outputPath}"],
        "options": {
            "outputPath": f"dist/{n['file_name']}",
            "main": join(root, "src/index.ts"),
            "tsConfig": join(root, "tsconfig.lib.json"),
            "assets": [
                join(root, "*.md"),
                {"input": src, "glob": "**/!(*.ts)", "output": "./src"},
                {"input": src, "glob": "**/*.d.ts", "output": "./src"},
                {"input": project_dir, "glob": "generators.json", "output": "."},
                {"input": project_dir, "glob": "executors.json", "output": "."},
            ],
        },
    }


def _project_config(schema: PluginGeneratorSchema, n: dict[str, str]) -> dict[str, Any]:
    root = n["root"]
    targets: dict[str, Any] = {"build": _build_target(schema, n)}
    if schema.linter == "eslint":
        targets["lint"] = {
            "executor": "@nrwl/linter:eslint",
            "outputs": ["{options.outputFile}"],
            "options": {
                "lintFilePatterns": [
                    join(root, "**/*.ts"),
                    join(root, "package.json"),
                    join(root, "generators.json"),
                    join(root, "executors.json"),
                ],
            },
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
        "sourceRoot": join(root, "src"),
        "projectType": "library",
        "targets": targets,
        "tags": [],
    }


def _write_package_json(tree: Tree, n: dict[str, str]) -> None:
    path = join(n["root"], "package.json")
    fields = {
        "name": n["import_path"],
        "version": "0.0.1",
        "type": "commonjs",
        "main": "./src/index.js",
        "typings": "./src/index.d.ts",
        "generators": "./generators.json",
        "executors": "./executors.json",
    }
    if tree.is_file(path):
        # root projects share the workspace manifest; keep its other fields
        update_json(tree, path, lambda json: {**json, **fields})
    else:
        write_json(tree, path, fields)


def _write_ts_configs(tree: Tree, schema: PluginGeneratorSchema, n: dict[str, str]) -> None:
    root = n["root"]
    offset = offset_from_root(root)
    references = [{"path": "./tsconfig.lib.json"}]
    if schema.unit_test_runner == "jest":
        references.append({"path": "./tsconfig.spec.json"})

    write_json(tree, join(root, "tsconfig.json"), {
        "extends": f"{offset}tsconfig.base.json",
        "compilerOptions": {"module": "commonjs"},
        "files": [],
        "include": [],
        "references": references,
    })
    write_json(tree, join(root, "tsconfig.lib.json"), {
        "extends": "./tsconfig.json",
        "compilerOptions": {
            "outDir": f"{offset}dist/out-tsc",
            "declaration": True,
            "types": ["node"],
        },
        "include": ["src/**/*.ts"],
        "exclude": ["jest.config.ts", "src/**/*.spec.ts", "src/**/*.test.ts"],
    })
    if schema.unit_test_runner == "jest":
        write_json(tree, join(root, "tsconfig.spec.json"), {
            "extends": "./tsconfig.json",
            "compilerOptions": {
                "outDir": f"{offset}dist/out-tsc",
                "module": "commonjs",
                "types": ["jest", "node"],
            },
            "include": ["jest.config.ts", "src/**/*.test.ts", "src/**/*.spec.ts", "src/**/*.d.ts"],
        })

    if not schema.skip_ts_config and root != ".":
        def _add_path(json: dict[str, Any]) -> dict[str, Any]:
            paths = json.setdefault("compilerOptions", {}).setdefault("paths", {})
            paths[n["import_path"]] = [join(root, "src/index.ts")]
            return json

        update_json(tree, "tsconfig.base.json", _add_path)


def _write_lint_and_test(tree: Tree, schema: PluginGeneratorSchema, n: dict[str, str]) -> None:
    root = n["root"]
    offset = offset_from_root(root)
    if schema.linter == "eslint":
        overrides: list[dict[str, Any]] = [
            {"files": ["*.ts", "*.tsx", "*.js", "*.jsx"], "rules": {}},
            {"files": ["*.ts", "*.tsx"], "extends": ["plugin:@nrwl/nx/typescript"], "rules": {}},
            {"files": ["*.js", "*.jsx"], "extends": ["plugin:@nrwl/nx/javascript"], "rules": {}},
        ]
        if not schema.skip_lint_checks:
            overrides.append({
                "files": ["./package.json", "./generators.json", "./executors.json"],
                "parser": "jsonc-eslint-parser",
                "rules": {"@nrwl/nx/nx-plugin-checks": "error"},
            })
        config: dict[str, Any] = {"ignorePatterns": ["!**/*"], "overrides": overrides}
        if root != ".":
            config["extends"] = [f"{offset}.eslintrc.json"]
        else:
            config["root"] = True
            config["plugins"] = ["@nrwl/nx"]
        write_json(tree, join(root, ".eslintrc.json"), config)

    if schema.unit_test_runner == "jest":
        tree.write(join(root, "jest.config.ts"), f"""\
/* eslint-disable */
export default {{
  displayName: '{n['name']}',
  preset: '{offset}jest.preset.js',
  transform: {{
    '^.+\\\\.[tj]s$': ['ts-jest', {{ tsconfig: '<rootDir>/tsconfig.spec.json' }}],
  }},
  moduleFileExtensions: ['ts', 'js', 'html'],
  coverageDirectory: '{offset}coverage/{n['file_name']}',
}};
""")
        if not tree.is_file("jest.preset.js"):
            tree.write("jest.preset.js", "const nxPreset = require('@nrwl/jest/preset').default;\n\n"
                                         "module.exports = { ...nxPreset };\n")


def _dependencies(schema: PluginGeneratorSchema) -> tuple[dict[str, str], dict[str, str]]:
    deps = {"@nrwl/devkit": versions.NX_VERSION, "tslib": versions.TSLIB_VERSION}
    dev = {
        "@nrwl/js": versions.NX_VERSION,
        "@types/node": versions.TYPES_NODE_VERSION,
        "typescript": versions.TYPESCRIPT_VERSION,
    }
    if schema.compiler == "swc":
        dev["@swc/core"] = versions.SWC_CORE_VERSION
        dev["@swc/helpers"] = versions.SWC_HELPERS_VERSION
    if schema.unit_test_runner == "jest":
        dev.update({
            "@nrwl/jest": versions.NX_VERSION,
            "@types/jest": versions.TYPES_JEST_VERSION,
            "jest": versions.JEST_VERSION,
            "ts-jest": versions.TS_JEST_VERSION,
        })
    if schema.linter == "eslint":
        dev.update({
            "@nrwl/eslint-plugin-nx": versions.NX_VERSION,
            "@nrwl/linter": versions.NX_VERSION,
            "@typescript-eslint/eslint-plugin": versions.TYPESCRIPT_ESLINT_VERSION,
            "@typescript-eslint/parser": versions.TYPESCRIPT_ESLINT_VERSION,
            "eslint": versions.ESLINT_VERSION,
            "jsonc-eslint-parser": "^2.1.0",
        })
    return deps, dev


def plugin_generator(tree: Tree, schema: PluginGeneratorSchema) -> Action:
    """Scaffold a plugin project. Returns the deferred install task."""
    n = _normalize(tree, schema)
    logger.info("Creating plugin project %s at %s", n["name"], n["root"])

    add_project_configuration(tree, n["name"], _project_config(schema, n))
    _write_package_json(tree, n)
    _write_ts_configs(tree, schema, n)
    _write_lint_and_test(tree, schema, n)

    root = n["root"]
    tree.write(join(root, "src/index.ts"), "export {};\n")
    write_json(tree, join(root, "generators.json"), {"generators": {}})
    write_json(tree, join(root, "executors.json"), {"executors": {}})
    if root != ".":
        tree.write(join(root, "README.md"), f"# {n['name']}\n\nThis library was generated with [Nx](https://nx.dev).\n")

    deps, dev = _dependencies(schema)
    task = add_dependencies_to_package_json(tree, deps, dev, owner="plugin")

    if not schema.skip_format:
        format_files(tree)
    return task
