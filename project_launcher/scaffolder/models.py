"""Template data model.

A ``Template`` is a read-only description of a project: a directory skeleton
plus an ordered list of ``TemplateFile`` entries.  File content is one of two
variants:

* ``Literal`` -- fixed text, identical for every configuration.
* ``Computed`` -- a pure function of the ``ProjectConfiguration``.

Both variants expose ``render(config)``, so callers never need to inspect
what kind of content they hold.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Union

from ..config import ProjectConfiguration, Stack

# A mapping of path segment -> nested structure (directory) or None (empty file).
DirectoryStructure = dict[str, Union["DirectoryStructure", None]]

ContentFn = Callable[[ProjectConfiguration], str]
Condition = Callable[[ProjectConfiguration], bool]


@dataclass(frozen=True)
class Literal:
    """Static file content."""

    text: str

    def render(self, config: ProjectConfiguration) -> str:
        return self.text


@dataclass(frozen=True)
class Computed:
    """File content computed from the project configuration.

    ``fn`` must be deterministic and free of side effects.
    """

    fn: ContentFn

    def render(self, config: ProjectConfiguration) -> str:
        return self.fn(config)


Content = Union[Literal, Computed]


def _always(config: ProjectConfiguration) -> bool:
    return True


@dataclass(frozen=True)
class TemplateFile:
    """One file of a template.

    Attributes:
        path: POSIX path relative to the project root.
        content: ``Literal`` or ``Computed`` content.
        condition: Decides whether the file is emitted for a configuration.
    """

    path: str
    content: Content
    condition: Condition = field(default=_always, compare=False)

    def applies_to(self, config: ProjectConfiguration) -> bool:
        return self.condition(config)

    def render(self, config: ProjectConfiguration) -> str:
        return self.content.render(config)


@dataclass(frozen=True)
class TemplateSummary:
    """Short description of a registered template for ``list`` output."""

    stack: Stack
    name: str
    description: str

    @property
    def example(self) -> str:
        return f"project-launcher create my-app --template {self.stack.value}"


@dataclass(frozen=True)
class Template:
    """A stack template: directory skeleton plus ordered files."""

    stack: Stack
    name: str
    description: str
    structure: DirectoryStructure
    files: tuple[TemplateFile, ...]

    def files_for(self, config: ProjectConfiguration) -> list[TemplateFile]:
        """Return the files emitted for *config*, in declared order."""
        return [f for f in self.files if f.applies_to(config)]

    def render(self, config: ProjectConfiguration) -> list[tuple[str, str]]:
        """Render every active file to ``(path, content)`` pairs, in order."""
        return [(f.path, f.render(config)) for f in self.files_for(config)]

    def summary(self) -> TemplateSummary:
        return TemplateSummary(stack=self.stack, name=self.name, description=self.description)


def structure_paths(structure: DirectoryStructure, prefix: str = "") -> list[str]:
    """Flatten a directory structure to POSIX paths (directories and files)."""
    paths: list[str] = []
    for name, child in structure.items():
        path = f"{prefix}{name}"
        paths.append(path)
        if child is not None:
            paths.extend(structure_paths(child, prefix=f"{path}/"))
    return paths
