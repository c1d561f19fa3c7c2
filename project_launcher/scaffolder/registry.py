"""Template registry: maps a ``Stack`` to its ``Template``.

Templates are built on every :meth:`TemplateRegistry.resolve` call, so a
resolved template can never leak changes into a later resolution.  The
Express template is derived from MERN with :func:`derive_subset_template`
instead of being authored twice.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Callable

from ..config import Stack, parse_stack
from ..errors import TemplateNotFound, UnknownStack
from .models import DirectoryStructure, Template, TemplateSummary
from .stacks import (
    SERVER_PREFIX,
    build_flask_template,
    build_mern_template,
    build_nextjs_template,
    build_pern_template,
)

TemplateBuilder = Callable[[], Template]

# Root-level files the server-only template keeps from its source.
SERVER_ROOT_FILES: frozenset[str] = frozenset({
    "README.md",
    ".gitignore",
    ".env.example",
    ".prettierrc",
    "docker-compose.yml",
    ".github/workflows/ci.yml",
})


# ---------------------------------------------------------------------------
# Derivation
# ---------------------------------------------------------------------------


def derive_subset_template(
    source: Template,
    predicate: Callable[[str], bool],
    rewrite: Callable[[str], str],
    *,
    stack: Stack,
    name: str,
    description: str,
    structure: DirectoryStructure,
) -> Template:
    """Build a new template from the files of *source* matching *predicate*.

    Kept files retain their content and condition; their paths are passed
    through *rewrite*.  Declaration order is preserved, including entries
    that end up sharing a path (the later one wins when materialised).
    """
    files = tuple(
        replace(f, path=rewrite(f.path)) for f in source.files if predicate(f.path)
    )
    return Template(
        stack=stack,
        name=name,
        description=description,
        structure=structure,
        files=files,
    )


def _in_server_subset(path: str) -> bool:
    return path.startswith(SERVER_PREFIX) or path in SERVER_ROOT_FILES


def _strip_server_prefix(path: str) -> str:
    return path.removeprefix(SERVER_PREFIX)


def derive_server_template(source: Template) -> Template:
    """Derive the Express-only template from the MERN ``server/`` subtree."""
    server_structure = source.structure.get(SERVER_PREFIX.rstrip("/")) or {}
    return derive_subset_template(
        source,
        _in_server_subset,
        _strip_server_prefix,
        stack=Stack.EXPRESS,
        name="Express",
        description="Express.js API server (Node.js)",
        structure=server_structure,
    )


def build_express_template() -> Template:
    return derive_server_template(build_mern_template())


DEFAULT_BUILDERS: dict[Stack, TemplateBuilder] = {
    Stack.MERN: build_mern_template,
    Stack.PERN: build_pern_template,
    Stack.NEXTJS: build_nextjs_template,
    Stack.FLASK: build_flask_template,
    Stack.EXPRESS: build_express_template,
}


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------


class TemplateRegistry:
    """Lookup of stack templates.

    Args:
        builders: Mapping of stack to template builder.  Must cover every
            ``Stack`` member; the order of the mapping is the order of
            :meth:`list`.
    """

    def __init__(self, builders: dict[Stack, TemplateBuilder] | None = None) -> None:
        self._builders = dict(builders if builders is not None else DEFAULT_BUILDERS)
        missing = [s.value for s in Stack if s not in self._builders]
        if missing:
            raise ValueError(f"No template builder for stack(s): {', '.join(missing)}")

    def resolve(self, stack: Stack | str) -> Template:
        """Return a freshly built template for *stack*.

        Raises:
            TemplateNotFound: *stack* is not a registered identifier.
        """
        try:
            key = parse_stack(stack)
        except UnknownStack:
            raise TemplateNotFound(str(stack)) from None
        builder = self._builders.get(key)
        if builder is None:
            raise TemplateNotFound(key.value)
        return builder()

    def list(self) -> list[TemplateSummary]:
        """Summaries of every registered template, in registration order."""
        return [builder().summary() for builder in self._builders.values()]

    @property
    def stacks(self) -> list[Stack]:
        return list(self._builders)
