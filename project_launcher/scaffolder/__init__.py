"""Project scaffolder -- resolves stack templates and writes them to disk.

Quick usage::

    from project_launcher.config import validate_and_build
    from project_launcher.scaffolder import Materializer, TemplateRegistry

    config = validate_and_build("my-app", {"stack": "nextjs", "typescript": True})
    template = TemplateRegistry().resolve(config.stack)
    await Materializer().materialize(config.target_path, template, config)
"""

from project_launcher.scaffolder.materializer import LocalFileSystem, Materializer
from project_launcher.scaffolder.models import (
    Computed,
    Literal,
    Template,
    TemplateFile,
    TemplateSummary,
)
from project_launcher.scaffolder.registry import TemplateRegistry, derive_subset_template
from project_launcher.scaffolder.templates import TemplateRenderer

__all__ = [
    "Computed",
    "Literal",
    "LocalFileSystem",
    "Materializer",
    "Template",
    "TemplateFile",
    "TemplateRegistry",
    "TemplateRenderer",
    "TemplateSummary",
    "derive_subset_template",
]
