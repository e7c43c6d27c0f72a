"""
Workspace generator — the files every new workspace starts with.

Writes the root manifest (with the preset package listed as a runtime
dependency, the way a freshly-created workspace receives it), ``nx.json``
and the editor/formatter configuration.
"""

from __future__ import annotations

from create_nx_plugin.core.devkit.json_utils import write_json
from create_nx_plugin.core.devkit.tree import Tree
from create_nx_plugin.core.devkit.versions import (
    NX_CLOUD_VERSION,
    NX_PLUGIN_PACKAGE,
    NX_VERSION,
    PRETTIER_VERSION,
)
from create_nx_plugin.core.models.options import PluginOptions

_GITIGNORE = """\
# See http://help.github.com/ignore-files/ for more about ignoring files.

# compiled output
dist
tmp
/out-tsc

# dependencies
node_modules

# IDEs and editors
/.idea
.project
.classpath
.c9/
*.launch
.settings/
*.sublime-workspace

# IDE - VSCode
.vscode/*
!.vscode/settings.json
!.vscode/tasks.json
!.vscode/launch.json
!.vscode/extensions.json

# misc
/.sass-cache
/connect.lock
/coverage
/libpeerconnection.log
npm-debug.log
yarn-error.log
testem.log
/typings

# System Files
.DS_Store
Thumbs.db
"""

_PRETTIERIGNORE = """\
# Add files here to ignore them from prettier formatting

/dist
/coverage
"""


def _readme(options: PluginOptions) -> str:
    return f"""\
# {options.name}

This workspace builds and publishes the `{options.import_path}` Nx plugin.

## Build

Run `nx build {options.name}` to build the plugin.

## Test

Run `nx test {options.name}` to execute the unit tests via Jest.

## Publish

Build, then run `npm publish` from `dist/{options.name}`.
"""


def workspace_generator(tree: Tree, options: PluginOptions, preset: str = NX_PLUGIN_PACKAGE) -> None:
    """Stage the base files of a new workspace named after the plugin."""
    dev_dependencies = {
        "@nrwl/workspace": NX_VERSION,
        "nx": NX_VERSION,
        "prettier": PRETTIER_VERSION,
    }
    if options.nx_cloud:
        dev_dependencies["@nrwl/nx-cloud"] = NX_CLOUD_VERSION

    write_json(tree, "package.json", {
        "name": options.name,
        "version": "0.0.0",
        "license": "MIT",
        "scripts": {},
        "private": True,
        "dependencies": {preset: NX_VERSION},
        "devDependencies": dev_dependencies,
    })

    write_json(tree, "nx.json", {
        "$schema": "./node_modules/nx/schemas/nx-schema.json",
        "npmScope": options.name,
        "affected": {"defaultBase": options.default_base},
        "tasksRunnerOptions": {
            "default": {
                "runner": "nx/tasks-runners/default",
                "options": {"cacheableOperations": ["build", "lint", "test", "e2e"]},
            },
        },
        "targetDefaults": {
            "build": {"dependsOn": ["^build"], "inputs": ["production", "^production"]},
        },
        "namedInputs": {
            "default": ["{projectRoot}/**/*", "sharedGlobals"],
            "production": ["default"],
            "sharedGlobals": [],
        },
    })

    write_json(tree, "tsconfig.base.json", {
        "compileOnSave": False,
        "compilerOptions": {
            "rootDir": ".",
            "sourceMap": True,
            "declaration": False,
            "moduleResolution": "node",
            "emitDecoratorMetadata": True,
            "experimentalDecorators": True,
            "importHelpers": True,
            "target": "es2015",
            "module": "esnext",
            "lib": ["es2020", "dom"],
            "skipLibCheck": True,
            "skipDefaultLibCheck": True,
            "baseUrl": ".",
            "paths": {},
        },
        "exclude": ["node_modules", "tmp"],
    })

    write_json(tree, ".prettierrc", {"singleQuote": True})
    write_json(tree, ".vscode/extensions.json", {
        "recommendations": ["nrwl.angular-console", "esbenp.prettier-vscode"],
    })
    tree.write(".prettierignore", _PRETTIERIGNORE)
    tree.write(".gitignore", _GITIGNORE)
    tree.write("README.md", _readme(options))
