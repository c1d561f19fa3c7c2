"""Project-launcher configuration.

Two kinds of configuration live here:

* ``ProjectConfiguration`` -- the validated, immutable description of the
  project to generate.  Build it with :func:`validate_and_build`, which turns
  raw CLI/prompt answers into a configuration or raises an
  ``InvalidConfiguration`` subclass before anything touches the disk.
* ``LauncherSettings`` -- tool-level knobs (package manager, timeouts, commit
  message) that can be overridden from environment variables.

All models use Pydantic v2 so they are validated at construction time.
"""

from __future__ import annotations

import os
import re
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .errors import InvalidConfiguration, InvalidName, InvalidTestingFramework, UnknownStack

# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class Stack(str, Enum):
    """Supported technology stacks."""

    MERN = "mern"
    PERN = "pern"
    NEXTJS = "nextjs"
    FLASK = "flask"
    EXPRESS = "express"


class TestingFramework(str, Enum):
    """Test runner wired into the generated project."""

    __test__ = False  # keep pytest from collecting this enum

    JEST = "jest"
    VITEST = "vitest"
    PYTEST = "pytest"
    NONE = "none"


class PackageManager(str, Enum):
    """Node package manager used for dependency installation."""

    NPM = "npm"
    YARN = "yarn"
    PNPM = "pnpm"


class Datastore(str, Enum):
    """Database the generated backend talks to."""

    MONGODB = "mongodb"
    POSTGRES = "postgres"
    SQLITE = "sqlite"
    NONE = "none"


PYTHON_STACKS: frozenset[Stack] = frozenset({Stack.FLASK})
SPLIT_STACKS: frozenset[Stack] = frozenset({Stack.MERN, Stack.PERN})

STACK_DATASTORES: dict[Stack, Datastore] = {
    Stack.MERN: Datastore.MONGODB,
    Stack.PERN: Datastore.POSTGRES,
    Stack.NEXTJS: Datastore.NONE,
    Stack.FLASK: Datastore.SQLITE,
    # Express reuses the MERN server, Mongoose included.
    Stack.EXPRESS: Datastore.MONGODB,
}

STACK_DISPLAY_NAMES: dict[Stack, str] = {
    Stack.MERN: "MERN (MongoDB, Express, React, Node.js)",
    Stack.PERN: "PERN (PostgreSQL, Express, React, Node.js)",
    Stack.NEXTJS: "Next.js (React Framework with SSR)",
    Stack.FLASK: "Flask (Python Web Framework)",
    Stack.EXPRESS: "Express.js (Node.js Framework)",
}

# ---------------------------------------------------------------------------
# Project name validation
# ---------------------------------------------------------------------------

MAX_NAME_LENGTH = 214
RESERVED_NAMES: frozenset[str] = frozenset({"node_modules", "favicon.ico"})

_NAME_PATTERN = re.compile(r"^(?:@[a-z0-9_-]+/)?[a-z0-9_-]+$")


def validate_project_name(name: str) -> str | None:
    """Check *name* against the package-name rules.

    Returns:
        ``None`` when the name is valid, otherwise a human-readable reason.
    """
    if not name or not name.strip():
        return "Project name cannot be empty"
    if len(name) > MAX_NAME_LENGTH:
        return f"Project name must be at most {MAX_NAME_LENGTH} characters"
    if not _NAME_PATTERN.match(name):
        return (
            "Project name must contain only lowercase letters, numbers, "
            "hyphens, and underscores"
        )
    if name.lower() in RESERVED_NAMES:
        return f'"{name}" is a reserved name and cannot be used'
    return None


# ---------------------------------------------------------------------------
# Configuration models
# ---------------------------------------------------------------------------


class Features(BaseModel):
    """Optional tooling switched on in the generated project."""

    model_config = ConfigDict(frozen=True)

    typescript: bool = Field(default=False)
    eslint: bool = Field(default=True, description="Linter configuration")
    prettier: bool = Field(default=True, description="Formatter configuration")
    docker: bool = Field(default=False, description="Dockerfile and docker-compose.yml")
    github_actions: bool = Field(default=False, description="GitHub Actions CI workflow")
    testing: TestingFramework = Field(default=TestingFramework.JEST)

    def enabled_labels(self) -> list[str]:
        """Return display labels for every enabled feature, in a fixed order."""
        labels: list[str] = []
        if self.typescript:
            labels.append("TypeScript")
        if self.eslint:
            labels.append("ESLint")
        if self.prettier:
            labels.append("Prettier")
        if self.docker:
            labels.append("Docker")
        if self.github_actions:
            labels.append("GitHub Actions")
        if self.testing is not TestingFramework.NONE:
            labels.append(self.testing.value.capitalize())
        return labels


class ProjectConfiguration(BaseModel):
    """Immutable description of the project to generate."""

    model_config = ConfigDict(frozen=True)

    name: str
    description: str = Field(default="")
    author: str = Field(default="")
    stack: Stack
    features: Features = Field(default_factory=Features)
    path: Path = Field(default_factory=Path.cwd, description="Parent directory of the project")

    @field_validator("name")
    @classmethod
    def _check_name(cls, value: str) -> str:
        reason = validate_project_name(value)
        if reason is not None:
            raise ValueError(reason)
        return value

    # ------------------------------------------------------------------
    # Derived values (read-only properties)
    # ------------------------------------------------------------------

    @property
    def directory_name(self) -> str:
        """Directory name for the project (a scoped name drops its ``@scope/``)."""
        return self.name.rsplit("/", 1)[-1]

    @property
    def target_path(self) -> Path:
        """Absolute path of the project root to create."""
        return (Path(self.path) / self.directory_name).resolve()

    @property
    def is_python(self) -> bool:
        return self.stack in PYTHON_STACKS

    @property
    def is_split(self) -> bool:
        """True for stacks with separate ``client/`` and ``server/`` roots."""
        return self.stack in SPLIT_STACKS

    @property
    def script_ext(self) -> str:
        return "ts" if self.features.typescript else "js"

    @property
    def component_ext(self) -> str:
        return "tsx" if self.features.typescript else "jsx"

    @property
    def display_stack(self) -> str:
        return STACK_DISPLAY_NAMES[self.stack]

    @property
    def datastore(self) -> Datastore:
        return STACK_DATASTORES[self.stack]


def default_testing_framework(stack: Stack) -> TestingFramework:
    """Python stacks default to pytest, everything else to Jest."""
    if stack in PYTHON_STACKS:
        return TestingFramework.PYTEST
    return TestingFramework.JEST


def supports_typescript(stack: Stack) -> bool:
    return stack not in PYTHON_STACKS


def parse_stack(raw: Any) -> Stack:
    """Convert a raw stack identifier to ``Stack`` or raise ``UnknownStack``."""
    if isinstance(raw, Stack):
        return raw
    value = str(raw or "").strip().lower()
    try:
        return Stack(value)
    except ValueError:
        raise UnknownStack(str(raw), [s.value for s in Stack]) from None


def _parse_testing(raw: Any, stack: Stack) -> TestingFramework:
    if raw is None:
        return default_testing_framework(stack)
    try:
        testing = TestingFramework(str(raw).strip().lower())
    except ValueError:
        known = ", ".join(t.value for t in TestingFramework)
        raise InvalidTestingFramework(
            f"Unknown testing framework '{raw}'. Available: {known}"
        ) from None

    if testing is TestingFramework.PYTEST and stack not in PYTHON_STACKS:
        raise InvalidTestingFramework(
            f"pytest is only available for Python stacks, not '{stack.value}'"
        )
    if testing in (TestingFramework.JEST, TestingFramework.VITEST) and stack in PYTHON_STACKS:
        raise InvalidTestingFramework(
            f"{testing.value} is not available for the '{stack.value}' stack"
        )
    return testing


def _option(options: dict[str, Any], key: str, default: Any) -> Any:
    value = options.get(key)
    return default if value is None else value


_TRUE_WORDS = frozenset({"true", "yes", "y", "on", "1"})
_FALSE_WORDS = frozenset({"false", "no", "n", "off", "0"})


def _parse_flag(options: dict[str, Any], key: str, default: bool) -> bool:
    value = _option(options, key, default)
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        word = value.strip().lower()
        if word in _TRUE_WORDS:
            return True
        if word in _FALSE_WORDS:
            return False
    raise InvalidConfiguration(f"Option '{key}' must be true or false, got {value!r}")


def validate_and_build(
    raw_name: str | None, raw_options: dict[str, Any] | None = None
) -> ProjectConfiguration:
    """Validate raw answers and build a ``ProjectConfiguration``.

    Omitted (or ``None``) options fall back to the defaults table: eslint and
    prettier on; typescript, docker and GitHub Actions off; testing is pytest
    for Python stacks and Jest otherwise.

    Raises:
        InvalidName: The project name breaks the package-name rules.
        UnknownStack: The stack is not registered.
        InvalidTestingFramework: The testing choice is unknown or unsuitable.
    """
    options = dict(raw_options or {})
    name = (raw_name or "").strip()

    reason = validate_project_name(name)
    if reason is not None:
        raise InvalidName(name, reason)

    stack = parse_stack(options.get("stack"))
    testing = _parse_testing(options.get("testing"), stack)

    typescript = _parse_flag(options, "typescript", False)
    if not supports_typescript(stack):
        typescript = False

    features = Features(
        typescript=typescript,
        eslint=_parse_flag(options, "eslint", True),
        prettier=_parse_flag(options, "prettier", True),
        docker=_parse_flag(options, "docker", False),
        github_actions=_parse_flag(options, "github_actions", False),
        testing=testing,
    )

    return ProjectConfiguration(
        name=name,
        description=str(_option(options, "description", "")),
        author=str(_option(options, "author", "")),
        stack=stack,
        features=features,
        path=Path(_option(options, "path", Path.cwd())).expanduser(),
    )


# ---------------------------------------------------------------------------
# Tool settings
# ---------------------------------------------------------------------------


class LauncherSettings(BaseModel):
    """Tuning knobs for post-processing."""

    package_manager: PackageManager = Field(default=PackageManager.NPM)
    install_timeout: int = Field(
        default=600, ge=10, description="Per-command dependency install timeout in seconds"
    )
    git_timeout: int = Field(default=60, ge=5, description="Per-command git timeout in seconds")
    commit_message: str = Field(default="Initial commit", min_length=1)
    default_author: str = Field(default="")

    @classmethod
    def from_env(cls) -> "LauncherSettings":
        """Build ``LauncherSettings`` from environment variables.

        Recognised variables (all optional):
            PROJECT_LAUNCHER_PACKAGE_MANAGER, PROJECT_LAUNCHER_INSTALL_TIMEOUT,
            PROJECT_LAUNCHER_GIT_TIMEOUT, PROJECT_LAUNCHER_COMMIT_MESSAGE,
            PROJECT_LAUNCHER_AUTHOR.
        """
        kwargs: dict[str, Any] = {}
        if os.environ.get("PROJECT_LAUNCHER_PACKAGE_MANAGER"):
            kwargs["package_manager"] = os.environ["PROJECT_LAUNCHER_PACKAGE_MANAGER"].lower()
        if os.environ.get("PROJECT_LAUNCHER_INSTALL_TIMEOUT"):
            kwargs["install_timeout"] = int(os.environ["PROJECT_LAUNCHER_INSTALL_TIMEOUT"])
        if os.environ.get("PROJECT_LAUNCHER_GIT_TIMEOUT"):
            kwargs["git_timeout"] = int(os.environ["PROJECT_LAUNCHER_GIT_TIMEOUT"])
        if os.environ.get("PROJECT_LAUNCHER_COMMIT_MESSAGE"):
            kwargs["commit_message"] = os.environ["PROJECT_LAUNCHER_COMMIT_MESSAGE"]
        if os.environ.get("PROJECT_LAUNCHER_AUTHOR"):
            kwargs["default_author"] = os.environ["PROJECT_LAUNCHER_AUTHOR"]
        return cls(**kwargs)
