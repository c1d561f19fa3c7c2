"""Shared pytest fixtures for the project-launcher test suite.

Provides reusable fixtures for:
- A recording console reporter
- A fake command runner that records invocations
- Configuration factories rooted in ``tmp_path``
- Mock subprocess helpers
"""

from __future__ import annotations

import io
from pathlib import Path
from typing import Any, Callable
from unittest.mock import AsyncMock, MagicMock

import pytest
from rich.console import Console

from project_launcher.config import LauncherSettings, ProjectConfiguration, validate_and_build
from project_launcher.utils import CommandResult, CommandRunner, Reporter


# ---------------------------------------------------------------------------
# Console
# ---------------------------------------------------------------------------


class RecordingReporter(Reporter):
    """Reporter that keeps every message and prints to an in-memory console."""

    def __init__(self) -> None:
        self.buffer = io.StringIO()
        super().__init__(Console(file=self.buffer, width=200, color_system=None))
        self.messages: list[tuple[str, str]] = []

    def info(self, message: str) -> None:
        self.messages.append(("info", message))
        super().info(message)

    def success(self, message: str) -> None:
        self.messages.append(("success", message))
        super().success(message)

    def warning(self, message: str) -> None:
        self.messages.append(("warning", message))
        super().warning(message)

    def error(self, message: str) -> None:
        self.messages.append(("error", message))
        super().error(message)

    def levels(self, level: str) -> list[str]:
        return [msg for lvl, msg in self.messages if lvl == level]

    @property
    def output(self) -> str:
        return self.buffer.getvalue()


@pytest.fixture
def reporter() -> RecordingReporter:
    return RecordingReporter()


# ---------------------------------------------------------------------------
# Command runner
# ---------------------------------------------------------------------------


class FakeRunner(CommandRunner):
    """Records ``run`` calls and answers from a scripted table.

    ``failures`` maps ``(executable, first_arg)`` to the ``CommandResult``
    returned for matching calls; everything else succeeds.
    """

    def __init__(self, failures: dict[tuple[str, str], CommandResult] | None = None) -> None:
        self.failures = dict(failures or {})
        self.calls: list[dict[str, Any]] = []

    async def run(self, executable, args, cwd, timeout=120):
        self.calls.append(
            {"executable": executable, "args": list(args), "cwd": Path(cwd), "timeout": timeout}
        )
        key = (executable, args[0] if args else "")
        return self.failures.get(key, CommandResult(returncode=0))

    @property
    def commands(self) -> list[str]:
        return [" ".join([c["executable"], *c["args"]]) for c in self.calls]


@pytest.fixture
def fake_runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def settings() -> LauncherSettings:
    return LauncherSettings()


# ---------------------------------------------------------------------------
# Configurations
# ---------------------------------------------------------------------------


@pytest.fixture
def make_config(tmp_path: Path) -> Callable[..., ProjectConfiguration]:
    """Factory building a validated configuration under ``tmp_path``.

    Usage:
        def test_something(make_config):
            config = make_config("nextjs", typescript=True)
    """

    def factory(stack: str = "nextjs", name: str = "my-app", **options: Any) -> ProjectConfiguration:
        options.setdefault("path", tmp_path)
        return validate_and_build(name, {"stack": stack, **options})

    return factory


# ---------------------------------------------------------------------------
# Mock subprocess
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_subprocess():
    """Mock asyncio subprocess for testing command execution.

    Returns a factory that creates mock subprocess instances with configurable
    stdout, stderr, and return codes.

    Usage:
        def test_command(mock_subprocess):
            proc = mock_subprocess(stdout="output", returncode=0)
            with patch("asyncio.create_subprocess_exec", return_value=proc):
                ...
    """

    def factory(
        stdout: str = "",
        stderr: str = "",
        returncode: int = 0,
    ) -> AsyncMock:
        mock_proc = AsyncMock()
        mock_proc.communicate = AsyncMock(
            return_value=(stdout.encode("utf-8"), stderr.encode("utf-8"))
        )
        mock_proc.returncode = returncode
        mock_proc.kill = MagicMock()
        mock_proc.wait = AsyncMock(return_value=returncode)
        return mock_proc

    return factory
