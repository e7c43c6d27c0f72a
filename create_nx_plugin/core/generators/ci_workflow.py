"""
CI workflow generator — one pipeline file for the chosen provider.

Every template installs dependencies, starts an Nx Cloud CI run and runs
lint, test and build for the projects affected since the default base
branch.
"""

from __future__ import annotations

from collections.abc import Callable

from create_nx_plugin.core.devkit.tree import GeneratorError, Tree

_INSTALL = {
    "npm": "npm ci",
    "yarn": "yarn install --frozen-lockfile",
    "pnpm": "pnpm install --frozen-lockfile",
}

_EXEC = {
    "npm": "npx",
    "yarn": "yarn",
    "pnpm": "pnpm exec",
}


def _commands(package_manager: str, base: str) -> list[str]:
    ex = _EXEC[package_manager]
    return [
        f"{ex} nx-cloud start-ci-run",
        f"{ex} nx affected --target=lint --parallel=3 --base={base}",
        f"{ex} nx affected --target=test --parallel=3 --ci --code-coverage --base={base}",
        f"{ex} nx affected --target=build --parallel=3 --base={base}",
    ]


def _github(name: str, base: str, pm: str) -> str:
    steps = "\n".join(f"      - run: {c}" for c in _commands(pm, f"origin/{base}"))
    return f"""\
name: CI

on:
  push:
    branches:
      - {base}
  pull_request:

permissions:
  contents: read

jobs:
  main:
    name: {name} — lint, test, build
    runs-on: ubuntu-latest
    steps:
      - uses: actions/checkout@v3
        with:
          fetch-depth: 0
      - uses: actions/setup-node@v3
        with:
          node-version: 18
          cache: {pm}
      - run: {_INSTALL[pm]}
{steps}
"""


def _circleci(name: str, base: str, pm: str) -> str:
    steps = "\n".join(f"      - run: {c}" for c in _commands(pm, base))
    return f"""\
version: 2.1

orbs:
  nx: nrwl/nx@1.5.1

jobs:
  main:
    docker:
      - image: cimg/node:lts-browsers
    steps:
      - checkout
      - run: {_INSTALL[pm]}
      - nx/set-shas:
          main-branch-name: {base}
{steps}

workflows:
  {name}:
    jobs:
      - main
"""


def _azure(name: str, base: str, pm: str) -> str:
    steps = "\n".join(f"  - script: {c}" for c in _commands(pm, f"origin/{base}"))
    return f"""\
name: {name}

trigger:
  - {base}
pr:
  - {base}

pool:
  vmImage: ubuntu-latest

steps:
  - checkout: self
    fetchDepth: 0
  - script: {_INSTALL[pm]}
{steps}
"""


def _bitbucket(name: str, base: str, pm: str) -> str:
    steps = "\n".join(f"            - {c}" for c in _commands(pm, f"origin/{base}"))
    return f"""\
image: node:18

clone:
  depth: full

pipelines:
  pull-requests:
    '**':
      - step:
          name: {name} — affected
          script:
            - {_INSTALL[pm]}
{steps}
  branches:
    {base}:
      - step:
          name: {name} — affected
          script:
            - {_INSTALL[pm]}
{steps}
"""


def _gitlab(name: str, base: str, pm: str) -> str:
    steps = "\n".join(f"    - {c}" for c in _commands(pm, f"origin/{base}"))
    return f"""\
image: node:18

stages:
  - affected

{name}:
  stage: affected
  interruptible: true
  only:
    - merge_requests
    - {base}
  script:
    - {_INSTALL[pm]}
{steps}
"""


_PROVIDERS: dict[str, tuple[str, Callable[[str, str, str], str]]] = {
    "github": (".github/workflows/ci.yml", _github),
    "circleci": (".circleci/config.yml", _circleci),
    "azure": ("azure-pipelines.yml", _azure),
    "bitbucket-pipelines": ("bitbucket-pipelines.yml", _bitbucket),
    "gitlab": (".gitlab-ci.yml", _gitlab),
}


def workflow_path(ci: str) -> str:
    """Where the workflow for ``ci`` is written."""
    if ci not in _PROVIDERS:
        raise GeneratorError(f"Unsupported CI provider '{ci}'")
    return _PROVIDERS[ci][0]


def ci_workflow_generator(
    tree: Tree,
    ci: str,
    *,
    name: str,
    default_base: str = "main",
    package_manager: str = "npm",
) -> str:
    """Stage the workflow file for ``ci``. Returns its path.

    Raises:
        GeneratorError: For an unknown provider or package manager.
    """
    path = workflow_path(ci)
    if package_manager not in _INSTALL:
        raise GeneratorError(f"Unsupported package manager '{package_manager}'")
    render = _PROVIDERS[ci][1]
    tree.write(path, render(name, default_base, package_manager))
    return path
