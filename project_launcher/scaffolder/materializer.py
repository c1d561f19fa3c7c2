"""Writes a resolved template to disk.

Materialisation happens in two ordered steps:

1. Skeleton -- walk the template's ``DirectoryStructure``; nested mappings
   become directories (even when empty) and ``None`` leaves become empty
   placeholder files.
2. Files -- render each active ``TemplateFile`` in declared order and write
   it, creating parent directories as needed.  A file may overwrite a
   placeholder from step 1 or an earlier file with the same path.

The target directory must not exist beforehand.  Any ``OSError`` aborts the
run with ``MaterializationIOError``; whatever was written so far stays on
disk.  The existence check is not atomic with the writes, so two concurrent
runs against the same target are not supported.
"""

from __future__ import annotations

import asyncio
from pathlib import Path, PurePosixPath

from ..config import ProjectConfiguration
from ..errors import DirectoryExists, MaterializationIOError
from .models import DirectoryStructure, Template


class LocalFileSystem:
    """Filesystem accessor backed by ``pathlib``.

    Blocking calls run in a worker thread so the event loop stays responsive;
    each call is still awaited before the next one starts.
    """

    async def exists(self, path: Path) -> bool:
        return await asyncio.to_thread(path.exists)

    async def make_dir(self, path: Path) -> None:
        await asyncio.to_thread(path.mkdir, parents=True, exist_ok=True)

    async def touch(self, path: Path) -> None:
        await asyncio.to_thread(_touch, path)

    async def write_text(self, path: Path, content: str) -> None:
        await asyncio.to_thread(_write_file, path, content)


class Materializer:
    """Materialises templates into new project directories."""

    def __init__(self, filesystem: LocalFileSystem | None = None) -> None:
        self.fs = filesystem or LocalFileSystem()

    async def materialize(
        self,
        target_path: str | Path,
        template: Template,
        config: ProjectConfiguration,
    ) -> list[Path]:
        """Create *target_path* and write *template* into it.

        Args:
            target_path: Project root to create.  Must not exist.
            template: Resolved template.
            config: Configuration passed to content functions and conditions.

        Returns:
            Paths written in step 2, in write order (duplicates included).

        Raises:
            DirectoryExists: *target_path* already exists; nothing was written.
            MaterializationIOError: A filesystem operation failed part-way.
        """
        root = Path(target_path)
        if await self.fs.exists(root):
            raise DirectoryExists(root)

        # All content is rendered before the first write.
        rendered = [
            (_join(root, rel_path), content)
            for rel_path, content in template.render(config)
        ]

        try:
            await self.fs.make_dir(root)
        except OSError as exc:
            raise MaterializationIOError(root, exc) from exc

        await self._create_structure(root, template.structure)

        written: list[Path] = []
        for path, content in rendered:
            try:
                await self.fs.make_dir(path.parent)
                await self.fs.write_text(path, content)
            except OSError as exc:
                raise MaterializationIOError(path, exc) from exc
            written.append(path)

        return written

    async def _create_structure(self, base: Path, structure: DirectoryStructure) -> None:
        """Recursively create directories and empty placeholder files."""
        for name, child in structure.items():
            path = _join(base, name)
            try:
                if child is None:
                    await self.fs.make_dir(path.parent)
                    await self.fs.touch(path)
                else:
                    await self.fs.make_dir(path)
                    await self._create_structure(path, child)
            except OSError as exc:
                raise MaterializationIOError(path, exc) from exc


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _join(base: Path, rel_path: str) -> Path:
    """Join a template-relative POSIX path onto *base*, refusing escapes."""
    rel = PurePosixPath(rel_path)
    if rel.is_absolute() or ".." in rel.parts:
        raise ValueError(f"Template path escapes the project root: {rel_path}")
    return base.joinpath(*rel.parts)


def _touch(path: Path) -> None:
    path.touch(exist_ok=True)


def _write_file(path: Path, content: str) -> None:
    path.write_text(content, encoding="utf-8")
