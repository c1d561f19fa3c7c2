"""Post-processing: dependency installation and git initialisation.

Runs after the project tree has been materialised.  Installation happens
first and is fatal on failure (``DependencyInstallFailed``); git
initialisation follows and is best-effort -- a failure is reported as a
warning and the project still counts as created.

Both phases go through an injected ``CommandRunner`` and run their commands
strictly one after another, including the client and server installs of
split stacks.
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from pathlib import Path

from rich.markup import escape

from .config import LauncherSettings, PackageManager, ProjectConfiguration, Stack
from .errors import DependencyInstallFailed, VcsInitFailed
from .utils import CommandRunner, Reporter, SubprocessRunner


@dataclass(frozen=True)
class InstallStep:
    """One dependency-install command, relative to the project root."""

    subdir: str
    executable: str
    args: tuple[str, ...]

    def describe(self) -> str:
        where = self.subdir or "."
        return f"{self.executable} {' '.join(self.args)} (in {where})"

    def resolve_executable(self, cwd: Path) -> str:
        """Relative paths such as ``venv/bin/python`` resolve against *cwd*."""
        path = Path(self.executable)
        if path.is_absolute() or len(path.parts) == 1:
            return self.executable
        return str(cwd / path)


@dataclass
class PostProcessReport:
    """What post-processing did."""

    installed: bool = False
    git_initialized: bool = False
    warnings: list[str] = field(default_factory=list)


VENV_DIR = "venv"


def venv_python() -> str:
    """Interpreter inside the generated project's virtualenv, relative to its root."""
    if os.name == "nt":
        return f"{VENV_DIR}\\Scripts\\python.exe"
    return f"{VENV_DIR}/bin/python"


def _node_install(package_manager: PackageManager, subdir: str = "") -> InstallStep:
    return InstallStep(subdir=subdir, executable=package_manager.value, args=("install",))


def install_plan(config: ProjectConfiguration, settings: LauncherSettings) -> list[InstallStep]:
    """Return the install commands for *config*, in execution order."""
    pm = settings.package_manager
    plans: dict[Stack, list[InstallStep]] = {
        Stack.MERN: [_node_install(pm, "client"), _node_install(pm, "server")],
        Stack.PERN: [_node_install(pm, "client"), _node_install(pm, "server")],
        Stack.NEXTJS: [_node_install(pm)],
        Stack.EXPRESS: [_node_install(pm)],
        Stack.FLASK: [
            InstallStep(subdir="", executable=sys.executable, args=("-m", "venv", VENV_DIR)),
            InstallStep(
                subdir="",
                executable=venv_python(),
                args=("-m", "pip", "install", "-r", "requirements.txt"),
            ),
        ],
    }
    return plans[config.stack]


def _stderr_tail(stderr: str, lines: int = 5) -> str:
    return "\n".join(stderr.strip().splitlines()[-lines:])


class PostProcessor:
    """Sequences dependency installation and git initialisation.

    Args:
        runner: Executes external commands.
        reporter: Receives progress and warning messages.
        settings: Package manager, timeouts, and commit message.
    """

    def __init__(
        self,
        runner: CommandRunner | None = None,
        reporter: Reporter | None = None,
        settings: LauncherSettings | None = None,
    ) -> None:
        self.runner = runner or SubprocessRunner()
        self.reporter = reporter or Reporter()
        self.settings = settings or LauncherSettings()

    async def run(
        self,
        target_path: str | Path,
        config: ProjectConfiguration,
        *,
        install: bool = True,
        init_git: bool = True,
    ) -> PostProcessReport:
        """Install dependencies, then initialise git.

        Raises:
            DependencyInstallFailed: An install command failed.  Git is not
                attempted and the generated tree is left in place.
        """
        root = Path(target_path)
        report = PostProcessReport()

        if install:
            await self.install_dependencies(root, config)
            report.installed = True

        if init_git:
            try:
                await self.initialize_git(root)
            except VcsInitFailed as exc:
                message = f"Git initialization failed. You can initialize it manually. ({exc.message})"
                self.reporter.warning(escape(message))
                report.warnings.append(message)
            else:
                report.git_initialized = True

        return report

    async def install_dependencies(self, root: Path, config: ProjectConfiguration) -> None:
        """Run every install step for the stack, stopping at the first failure."""
        for step in install_plan(config, self.settings):
            cwd = root / step.subdir if step.subdir else root
            self.reporter.info(f"Installing dependencies: {step.describe()}")
            result = await self.runner.run(
                step.resolve_executable(cwd),
                list(step.args),
                cwd,
                timeout=self.settings.install_timeout,
            )
            if not result.ok:
                command = f"{step.executable} {' '.join(step.args)}"
                raise DependencyInstallFailed(
                    f"Failed to install dependencies in {cwd} "
                    f"({command} exited with {result.returncode})",
                    command=command,
                    cwd=cwd,
                    returncode=result.returncode,
                    stderr=_stderr_tail(result.stderr),
                )
        self.reporter.success("Dependencies installed")

    async def initialize_git(self, root: Path) -> None:
        """Run ``git init``, ``git add .`` and the initial commit.

        Raises:
            VcsInitFailed: Any of the three commands failed.
        """
        commands: list[list[str]] = [
            ["init"],
            ["add", "."],
            ["commit", "-m", self.settings.commit_message],
        ]
        for args in commands:
            result = await self.runner.run("git", args, root, timeout=self.settings.git_timeout)
            if not result.ok:
                command = "git " + " ".join(args)
                detail = _stderr_tail(result.stderr, lines=1) or f"exit {result.returncode}"
                raise VcsInitFailed(
                    f"{command} failed: {detail}",
                    command=command,
                    cwd=root,
                    returncode=result.returncode,
                    stderr=result.stderr,
                )
        self.reporter.success("Git repository initialized")
