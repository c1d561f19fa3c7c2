"""Exception hierarchy for project-launcher.

Every failure the CLI reports to the user is a ``LauncherError``.  The
``code`` attribute is a stable, machine-readable identifier; the message is
the single line shown to the user.
"""

from __future__ import annotations

from pathlib import Path


class LauncherError(Exception):
    """Base class for all user-facing project-launcher failures."""

    code: str = "LAUNCHER_ERROR"

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


# ---------------------------------------------------------------------------
# Configuration errors (raised before any I/O)
# ---------------------------------------------------------------------------


class InvalidConfiguration(LauncherError):
    """Raised when user input cannot be turned into a ``ProjectConfiguration``."""

    code = "INVALID_CONFIGURATION"


class InvalidName(InvalidConfiguration):
    """The project name is not a valid package name."""

    code = "INVALID_PROJECT_NAME"

    def __init__(self, name: str, reason: str) -> None:
        self.name = name
        self.reason = reason
        super().__init__(f"Invalid project name '{name}': {reason}")


class UnknownStack(InvalidConfiguration):
    """The requested stack identifier is not supported."""

    code = "UNKNOWN_STACK"

    def __init__(self, stack: str, known: list[str]) -> None:
        self.stack = stack
        self.known = known
        super().__init__(
            f"Unknown stack '{stack}'. Available stacks: {', '.join(known)}"
        )


class InvalidTestingFramework(InvalidConfiguration):
    """The testing framework is unknown or does not fit the chosen stack."""

    code = "INVALID_TESTING_FRAMEWORK"


# ---------------------------------------------------------------------------
# Template / filesystem errors
# ---------------------------------------------------------------------------


class TemplateNotFound(LauncherError):
    """No template is registered for the requested stack."""

    code = "TEMPLATE_NOT_FOUND"

    def __init__(self, stack: str) -> None:
        self.stack = stack
        super().__init__(f"Template for '{stack}' not found")


class DirectoryExists(LauncherError):
    """The target directory already exists; nothing was written."""

    code = "DIRECTORY_EXISTS"

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        super().__init__(f"Directory {self.path} already exists!")


class MaterializationIOError(LauncherError):
    """Writing the project tree failed part-way through.

    The partially written tree is left on disk.
    """

    code = "MATERIALIZATION_IO_ERROR"

    def __init__(self, path: Path, cause: OSError) -> None:
        self.path = Path(path)
        self.cause = cause
        reason = cause.strerror or str(cause)
        super().__init__(f"Failed to write {self.path}: {reason}")


# ---------------------------------------------------------------------------
# Post-processing errors
# ---------------------------------------------------------------------------


class CommandFailed(LauncherError):
    """An external command exited with a non-zero status."""

    code = "COMMAND_FAILED"

    def __init__(
        self,
        message: str,
        command: str = "",
        cwd: Path | None = None,
        returncode: int = 1,
        stderr: str = "",
    ) -> None:
        self.command = command
        self.cwd = cwd
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(message)


class DependencyInstallFailed(CommandFailed):
    """Dependency installation failed; the generated tree stays on disk."""

    code = "DEPENDENCY_INSTALL_FAILED"


class VcsInitFailed(CommandFailed):
    """Git initialisation failed.  Downgraded to a warning by the orchestrator."""

    code = "VCS_INIT_FAILED"
