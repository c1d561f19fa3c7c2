"""Flask template: application factory, blueprints, pytest suite."""

from __future__ import annotations

from ...config import ProjectConfiguration, Stack, TestingFramework
from ..models import Computed, DirectoryStructure, Literal, Template, TemplateFile
from ..templates import rendered
from .common import (
    ci_workflow_file,
    compose_file,
    dockerignore_file,
    env_example_file,
    gitignore_file,
    readme_file,
    testing_is,
    wants_docker,
    wants_eslint,
)


def _structure() -> DirectoryStructure:
    return {
        "app": {
            "__init__.py": None,
            "routes": {
                "__init__.py": None,
                "main.py": None,
            },
            "models": {
                "__init__.py": None,
            },
            "utils": {
                "__init__.py": None,
            },
        },
        "tests": {
            "__init__.py": None,
            "test_main.py": None,
        },
    }


def _requirements(config: ProjectConfiguration) -> str:
    lines = ["Flask==3.0.0", "python-dotenv==1.0.0"]
    if config.features.docker:
        lines.append("gunicorn==21.2.0")
    if config.features.testing is TestingFramework.PYTEST:
        lines += ["pytest==7.4.3", "pytest-flask==1.3.0"]
    if config.features.eslint:
        lines.append("flake8==7.0.0")
    if config.features.prettier:
        lines.append("black==23.12.1")
    return "\n".join(lines) + "\n"


def _wants_pyproject(config: ProjectConfiguration) -> bool:
    return config.features.prettier or config.features.testing is TestingFramework.PYTEST


_FLAKE8_CONFIG = """[flake8]
max-line-length = 100
exclude = .git,__pycache__,venv,.venv,build,dist
"""


def build_flask_template() -> Template:
    files = [
        readme_file(),
        gitignore_file(),
        TemplateFile("requirements.txt", Computed(_requirements)),
        TemplateFile("run.py", rendered("flask/run.py.j2")),
        TemplateFile("config.py", rendered("flask/config.py.j2")),
        TemplateFile("app/__init__.py", rendered("flask/app_init.py.j2")),
        TemplateFile("app/routes/__init__.py", Literal("")),
        TemplateFile("app/routes/main.py", rendered("flask/routes_main.py.j2")),
        TemplateFile("app/models/__init__.py", Literal("")),
        TemplateFile("app/utils/__init__.py", Literal("")),
        TemplateFile("tests/__init__.py", Literal("")),
        TemplateFile(
            "tests/test_main.py",
            rendered("flask/test_main.py.j2"),
            condition=testing_is(TestingFramework.PYTEST),
        ),
        env_example_file(),
        TemplateFile(".flake8", Literal(_FLAKE8_CONFIG), condition=wants_eslint),
        TemplateFile("pyproject.toml", rendered("flask/pyproject.toml.j2"), condition=_wants_pyproject),
        TemplateFile("Dockerfile", rendered("docker/flask.Dockerfile.j2"), condition=wants_docker),
        dockerignore_file(),
        compose_file(),
        ci_workflow_file(),
    ]
    return Template(
        stack=Stack.FLASK,
        name="Flask",
        description="Python web framework with an application factory",
        structure=_structure(),
        files=tuple(files),
    )
