"""Shared utility functions for project-launcher.

Provides async command execution, the injectable command-runner and console
collaborators used by the post-processing orchestrator, Rich-based output
helpers, and small string helpers shared by the stack templates.
"""

from __future__ import annotations

import asyncio
import os
import re
from dataclasses import dataclass
from pathlib import Path

from rich.console import Console
from rich.panel import Panel
from rich.rule import Rule
from rich.status import Status
from rich.table import Table

console = Console()

# ---------------------------------------------------------------------------
# Async command execution
# ---------------------------------------------------------------------------


async def run_command(
    cmd: list[str],
    cwd: str | Path | None = None,
    timeout: int = 120,
    env: dict[str, str] | None = None,
) -> tuple[int, str, str]:
    """Run a command asynchronously and capture its output.

    Args:
        cmd: Executable followed by its arguments.
        cwd: Working directory for the child process.
        timeout: Maximum wall-clock seconds before the process is killed.
        env: Optional extra environment variables merged on top of ``os.environ``.

    Returns:
        A ``(returncode, stdout, stderr)`` tuple.  A timeout yields ``-1``, a
        missing executable yields ``127`` and any other spawn error (for
        example a non-executable file) yields ``126``; none of them raise.
    """
    merged_env: dict[str, str] | None = None
    if env:
        merged_env = {**os.environ, **env}

    try:
        process = await asyncio.create_subprocess_exec(
            *cmd,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            cwd=str(cwd) if cwd else None,
            env=merged_env,
        )
    except FileNotFoundError:
        return (127, "", f"Command not found: {cmd[0]}")
    except OSError as exc:
        return (126, "", f"Cannot run {cmd[0]}: {exc.strerror or exc}")

    try:
        stdout_bytes, stderr_bytes = await asyncio.wait_for(
            process.communicate(), timeout=timeout
        )
    except asyncio.TimeoutError:
        process.kill()
        await process.wait()
        return (-1, "", f"Command timed out after {timeout}s: {' '.join(cmd)}")

    stdout_str = (stdout_bytes or b"").decode("utf-8", errors="replace").strip()
    stderr_str = (stderr_bytes or b"").decode("utf-8", errors="replace").strip()
    return (process.returncode or 0, stdout_str, stderr_str)


@dataclass(frozen=True)
class CommandResult:
    """Outcome of one external command."""

    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class CommandRunner:
    """Interface for running external commands.

    The orchestrator only depends on this one coroutine, so tests can pass
    any object with a compatible ``run`` method.
    """

    async def run(
        self,
        executable: str,
        args: list[str],
        cwd: Path,
        timeout: int = 120,
    ) -> CommandResult:
        raise NotImplementedError


class SubprocessRunner(CommandRunner):
    """Runs commands as real child processes via :func:`run_command`."""

    async def run(
        self,
        executable: str,
        args: list[str],
        cwd: Path,
        timeout: int = 120,
    ) -> CommandResult:
        returncode, stdout, stderr = await run_command(
            [executable, *args], cwd=cwd, timeout=timeout
        )
        return CommandResult(returncode=returncode, stdout=stdout, stderr=stderr)


# ---------------------------------------------------------------------------
# Console output
# ---------------------------------------------------------------------------


class Reporter:
    """Leveled console sink backed by a Rich ``Console``."""

    def __init__(self, out: Console | None = None) -> None:
        self.console = out or console

    def info(self, message: str) -> None:
        self.console.print(f"[blue]i[/blue] {message}")

    def success(self, message: str) -> None:
        self.console.print(f"[bold green]✓[/bold green] {message}")

    def warning(self, message: str) -> None:
        self.console.print(f"[bold yellow]![/bold yellow] [yellow]{message}[/yellow]")

    def error(self, message: str) -> None:
        self.console.print(f"[bold red]✗ {message}[/bold red]")

    def plain(self, message: str = "") -> None:
        self.console.print(message, highlight=False)

    def title(self, message: str) -> None:
        self.console.print()
        self.console.print(Rule(f"[bold cyan]{message}[/bold cyan]", style="cyan"))
        self.console.print()

    def status(self, message: str) -> Status:
        """Spinner shown while a long step runs (use as a context manager)."""
        return self.console.status(f"[cyan]{message}[/cyan]", spinner="dots")


def print_summary_table(
    data: dict[str, str], title: str = "Summary", out: Console | None = None
) -> None:
    """Print a two-column key/value summary table.

    Args:
        data: Mapping of label -> value.
        title: Table title.
        out: Console to print to (defaults to the module console).
    """
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Item", style="dim", no_wrap=True)
    table.add_column("Value")

    for key, value in data.items():
        table.add_row(key, str(value))

    target = out or console
    target.print(table)
    target.print()


def print_banner(text: str, out: Console | None = None) -> None:
    """Print the tool banner in a cyan panel."""
    (out or console).print(Panel(f"[bold cyan]{text}[/bold cyan]", expand=False))


# ---------------------------------------------------------------------------
# String helpers
# ---------------------------------------------------------------------------


def to_title(name: str) -> str:
    """Convert ``my-cool_app`` to ``My Cool App`` for headings."""
    parts = re.split(r"[-_\s/@]+", name)
    return " ".join(word.capitalize() for word in parts if word)


def to_db_name(name: str) -> str:
    """Convert a project name to a database-safe identifier (``my_app``)."""
    slug = re.sub(r"[^a-z0-9]+", "_", name.rsplit("/", 1)[-1].lower())
    return slug.strip("_") or "app"
