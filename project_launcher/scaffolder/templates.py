"""Jinja2 template rendering for project scaffolding.

Provides the ``TemplateRenderer`` class, which loads ``.j2`` templates from
the ``project_launcher/scaffolder/templates/`` directory, and the
:func:`rendered` helper that wraps a template name in ``Computed`` content so
stack definitions can reference template bodies declaratively.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined, select_autoescape

from ..config import ProjectConfiguration
from ..utils import to_db_name, to_title
from .models import Computed

# ---------------------------------------------------------------------------
# Template directory discovery
# ---------------------------------------------------------------------------

_DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "templates"


# ---------------------------------------------------------------------------
# TemplateRenderer
# ---------------------------------------------------------------------------


class TemplateRenderer:
    """Renders Jinja2 templates for project scaffolding.

    Templates are rendered with a context dictionary built from the
    ``ProjectConfiguration`` (see :func:`build_context`).  Undefined variables
    are errors, so a typo in a template fails loudly instead of silently
    producing an empty string.
    """

    def __init__(self, template_dir: str | Path | None = None) -> None:
        if template_dir is None:
            template_dir = _DEFAULT_TEMPLATE_DIR
        self.template_dir = Path(template_dir)
        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=select_autoescape([]),
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
            undefined=StrictUndefined,
        )

    def render(self, template_path: str, context: dict[str, Any]) -> str:
        """Render a single template with the provided context.

        Args:
            template_path: Path relative to the template directory (e.g.
                ``"nextjs/page.j2"``).
            context: Dictionary of variables available inside the template.

        Returns:
            The rendered template content as a string.
        """
        template = self.env.get_template(template_path)
        return template.render(**context)


@lru_cache(maxsize=None)
def default_renderer() -> TemplateRenderer:
    """Shared renderer for the bundled templates."""
    return TemplateRenderer()


# ---------------------------------------------------------------------------
# Context building
# ---------------------------------------------------------------------------


def build_context(config: ProjectConfiguration, **extra: Any) -> dict[str, Any]:
    """Build the Jinja2 template context from the project configuration."""
    features = config.features
    return {
        "config": config,
        "name": config.name,
        "dir_name": config.directory_name,
        "title": to_title(config.directory_name),
        "description": config.description,
        "author": config.author,
        "stack": config.stack.value,
        "stack_display": config.display_stack,
        "datastore": config.datastore.value,
        "db_name": to_db_name(config.name),
        "features": features,
        "feature_labels": features.enabled_labels(),
        "testing": features.testing.value,
        "ts": features.typescript,
        "ext": config.script_ext,
        "jsx_ext": config.component_ext,
        "is_split": config.is_split,
        "is_python": config.is_python,
        **extra,
    }


def rendered(template_path: str, **extra: Any) -> Computed:
    """Return ``Computed`` content that renders *template_path* for a config.

    Keyword arguments are merged into the template context, which lets one
    template body serve several files (e.g. ``root="client"``).
    """

    def _render(config: ProjectConfiguration) -> str:
        return default_renderer().render(template_path, build_context(config, **extra))

    return Computed(_render)

