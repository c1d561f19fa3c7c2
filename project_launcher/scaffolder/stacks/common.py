"""Building blocks shared by every stack template.

Holds the file conditions, the ``TS``/``JS`` file-pair helper, JSON manifest
helpers, and the root files whose body depends on the stack (``.gitignore``,
``.env.example``, ``README.md``, CI workflow, docker-compose).  Per-stack
variants are kept in dictionaries keyed by ``Stack`` so a new stack cannot be
added without also choosing its variant; :func:`check_exhaustive` enforces
that at import time.
"""

from __future__ import annotations

import json
from typing import Any

from ...config import Datastore, ProjectConfiguration, Stack, TestingFramework
from ..models import Computed, Condition, Content, Literal, TemplateFile
from ..templates import rendered

# ---------------------------------------------------------------------------
# Conditions
# ---------------------------------------------------------------------------


def uses_typescript(config: ProjectConfiguration) -> bool:
    return config.features.typescript


def uses_javascript(config: ProjectConfiguration) -> bool:
    return not config.features.typescript


def wants_eslint(config: ProjectConfiguration) -> bool:
    return config.features.eslint


def wants_prettier(config: ProjectConfiguration) -> bool:
    return config.features.prettier


def wants_docker(config: ProjectConfiguration) -> bool:
    return config.features.docker


def wants_ci(config: ProjectConfiguration) -> bool:
    return config.features.github_actions


def wants_tests(config: ProjectConfiguration) -> bool:
    return config.features.testing is not TestingFramework.NONE


def testing_is(framework: TestingFramework) -> Condition:
    def _check(config: ProjectConfiguration) -> bool:
        return config.features.testing is framework

    return _check


def all_of(*conditions: Condition) -> Condition:
    def _check(config: ProjectConfiguration) -> bool:
        return all(cond(config) for cond in conditions)

    return _check


# ---------------------------------------------------------------------------
# File helpers
# ---------------------------------------------------------------------------


def script_pair(
    stem: str,
    content: Content,
    *,
    component: bool = False,
    when: Condition | None = None,
) -> list[TemplateFile]:
    """Declare a source file that is ``.ts``/``.tsx`` or ``.js``/``.jsx``.

    Exactly one of the two entries applies to any configuration.
    """
    ts_ext, js_ext = ("tsx", "jsx") if component else ("ts", "js")
    ts_cond: Condition = uses_typescript if when is None else all_of(when, uses_typescript)
    js_cond: Condition = uses_javascript if when is None else all_of(when, uses_javascript)
    return [
        TemplateFile(f"{stem}.{ts_ext}", content, condition=ts_cond),
        TemplateFile(f"{stem}.{js_ext}", content, condition=js_cond),
    ]


def to_json(data: dict[str, Any]) -> str:
    """Serialise a manifest the way npm writes it: two spaces, trailing newline."""
    return json.dumps(data, indent=2) + "\n"


def check_exhaustive(table: dict[Stack, Any], label: str) -> None:
    """Raise ``RuntimeError`` when *table* misses a ``Stack`` member."""
    missing = [s.value for s in Stack if s not in table]
    if missing:
        raise RuntimeError(f"No {label} variant for stack(s): {', '.join(missing)}")


# ---------------------------------------------------------------------------
# Node tooling manifests
# ---------------------------------------------------------------------------

PRETTIER_CONFIG: dict[str, Any] = {
    "semi": True,
    "singleQuote": True,
    "trailingComma": "all",
    "printWidth": 100,
    "tabWidth": 2,
}


def eslint_config(config: ProjectConfiguration, *, react: bool) -> dict[str, Any]:
    """Build an ``.eslintrc.json`` body for a React or Node package."""
    extends = ["eslint:recommended"]
    plugins: list[str] = []
    env = {"es2022": True}
    if react:
        env["browser"] = True
        extends += ["plugin:react/recommended", "plugin:react-hooks/recommended"]
        plugins.append("react-refresh")
    else:
        env["node"] = True
    if config.features.typescript:
        extends.append("plugin:@typescript-eslint/recommended")
    if config.features.prettier:
        extends.append("prettier")
    if config.features.testing is TestingFramework.JEST:
        env["jest"] = True

    data: dict[str, Any] = {
        "root": True,
        "env": env,
        "extends": extends,
        "parserOptions": {"ecmaVersion": "latest", "sourceType": "module"},
        "ignorePatterns": ["dist", "node_modules"],
    }
    if config.features.typescript:
        data["parser"] = "@typescript-eslint/parser"
    if plugins:
        data["plugins"] = plugins
    if react:
        data["settings"] = {"react": {"version": "detect"}}
        data["rules"] = {
            "react/react-in-jsx-scope": "off",
            "react-refresh/only-export-components": ["warn", {"allowConstantExport": True}],
        }
    return data


def eslint_dev_dependencies(config: ProjectConfiguration, *, react: bool) -> dict[str, str]:
    deps: dict[str, str] = {}
    if config.features.eslint:
        deps["eslint"] = "^8.56.0"
        if react:
            deps["eslint-plugin-react"] = "^7.33.2"
            deps["eslint-plugin-react-hooks"] = "^4.6.0"
            deps["eslint-plugin-react-refresh"] = "^0.4.5"
        if config.features.typescript:
            deps["@typescript-eslint/eslint-plugin"] = "^6.19.0"
            deps["@typescript-eslint/parser"] = "^6.19.0"
        if config.features.prettier:
            deps["eslint-config-prettier"] = "^9.1.0"
    if config.features.prettier:
        deps["prettier"] = "^3.2.4"
    return deps


def lint_scripts(config: ProjectConfiguration, src: str = "src") -> dict[str, str]:
    scripts: dict[str, str] = {}
    if config.features.eslint:
        exts = "ts,tsx" if config.features.typescript else "js,jsx"
        scripts["lint"] = f"eslint {src} --ext {exts}"
    if config.features.prettier:
        scripts["format"] = f'prettier --write "{src}/**/*"'
    return scripts


# ---------------------------------------------------------------------------
# Root files with per-stack variants
# ---------------------------------------------------------------------------

_GITIGNORE_TEMPLATES: dict[Stack, str] = {
    Stack.MERN: "common/gitignore_node.j2",
    Stack.PERN: "common/gitignore_node.j2",
    Stack.NEXTJS: "common/gitignore_node.j2",
    Stack.EXPRESS: "common/gitignore_node.j2",
    Stack.FLASK: "common/gitignore_python.j2",
}

_ENV_TEMPLATES: dict[Datastore, str] = {
    Datastore.MONGODB: "env/mongodb.env.j2",
    Datastore.POSTGRES: "env/postgres.env.j2",
    Datastore.SQLITE: "env/flask.env.j2",
    Datastore.NONE: "env/nextjs.env.j2",
}

_CI_TEMPLATES: dict[Stack, str] = {
    Stack.MERN: "ci/node_split.yml.j2",
    Stack.PERN: "ci/node_split.yml.j2",
    Stack.NEXTJS: "ci/node.yml.j2",
    Stack.EXPRESS: "ci/node.yml.j2",
    Stack.FLASK: "ci/python.yml.j2",
}

_COMPOSE_TEMPLATES: dict[Stack, str] = {
    Stack.MERN: "docker/compose_split.yml.j2",
    Stack.PERN: "docker/compose_split.yml.j2",
    Stack.NEXTJS: "docker/compose_single.yml.j2",
    Stack.EXPRESS: "docker/compose_single.yml.j2",
    Stack.FLASK: "docker/compose_single.yml.j2",
}

check_exhaustive(_GITIGNORE_TEMPLATES, ".gitignore")
check_exhaustive(_CI_TEMPLATES, "CI workflow")
check_exhaustive(_COMPOSE_TEMPLATES, "docker-compose")


def _by_stack(table: dict[Stack, str]) -> Computed:
    def _render(config: ProjectConfiguration) -> str:
        return rendered(table[config.stack]).render(config)

    return Computed(_render)


def _env_example(config: ProjectConfiguration) -> str:
    return rendered(_ENV_TEMPLATES[config.datastore]).render(config)


def readme_file() -> TemplateFile:
    return TemplateFile("README.md", rendered("common/README.md.j2"))


def gitignore_file() -> TemplateFile:
    return TemplateFile(".gitignore", _by_stack(_GITIGNORE_TEMPLATES))


def env_example_file() -> TemplateFile:
    return TemplateFile(".env.example", Computed(_env_example))


def prettierrc_file() -> TemplateFile:
    return TemplateFile(".prettierrc", Literal(to_json(PRETTIER_CONFIG)), condition=wants_prettier)


def ci_workflow_file() -> TemplateFile:
    return TemplateFile(".github/workflows/ci.yml", _by_stack(_CI_TEMPLATES), condition=wants_ci)


def compose_file() -> TemplateFile:
    return TemplateFile("docker-compose.yml", _by_stack(_COMPOSE_TEMPLATES), condition=wants_docker)


def dockerignore_file(prefix: str = "") -> TemplateFile:
    return TemplateFile(
        f"{prefix}.dockerignore", rendered("docker/dockerignore.j2"), condition=wants_docker
    )
