"""Command-line interface.

Usage::

    project-launcher                      # interactive create
    project-launcher create my-app --stack nextjs --typescript
    project-launcher list

Exit codes: ``0`` on success (including a declined confirmation), ``1`` for
any ``LauncherError`` and ``130`` when interrupted.
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from typing import Any

from pydantic import ValidationError
from rich.markup import escape

from . import __version__
from .config import LauncherSettings, ProjectConfiguration, validate_and_build
from .errors import CommandFailed, LauncherError
from .launcher import ProjectLauncher
from .postprocess import PostProcessor
from .prompts import confirm_creation, prompt_project_details
from .scaffolder import TemplateRegistry
from .utils import Reporter, print_banner, print_summary_table

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INTERRUPTED = 130


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="project-launcher",
        description="Generate a ready-to-run project skeleton for a web stack",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  project-launcher create my-app --stack mern\n"
            "  project-launcher create my-app --template nextjs --typescript --docker\n"
            "  project-launcher list\n"
        ),
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.set_defaults(command=None)

    subparsers = parser.add_subparsers(dest="command")

    create = subparsers.add_parser("create", help="Create a new project")
    create.add_argument("name", nargs="?", default=None, help="Project name")
    create.add_argument(
        "--stack", "--template", "-s",
        dest="stack",
        default=None,
        help="Tech stack (mern, pern, nextjs, flask, express)",
    )
    create.add_argument(
        "--typescript", "-t",
        action="store_true",
        default=None,
        help="Enable TypeScript",
    )
    create.add_argument(
        "--docker", "-d",
        action="store_true",
        default=None,
        help="Include Dockerfile and docker-compose.yml",
    )
    create.add_argument(
        "--github-actions",
        dest="github_actions",
        action="store_true",
        default=None,
        help="Add a GitHub Actions CI workflow",
    )
    create.add_argument(
        "--testing",
        default=None,
        help="Testing framework (jest, vitest, pytest, none)",
    )
    create.add_argument(
        "--no-eslint",
        dest="eslint",
        action="store_false",
        default=None,
        help="Skip linter configuration",
    )
    create.add_argument(
        "--no-prettier",
        dest="prettier",
        action="store_false",
        default=None,
        help="Skip formatter configuration",
    )
    create.add_argument("--description", default=None, help="Project description")
    create.add_argument("--author", default=None, help="Author name")
    create.add_argument(
        "--no-install",
        dest="install",
        action="store_false",
        help="Skip dependency installation",
    )
    create.add_argument(
        "--no-git",
        dest="git",
        action="store_false",
        help="Skip git initialization",
    )
    create.add_argument(
        "--path", "-p",
        default=None,
        help="Parent directory for the project (default: current directory)",
    )
    create.add_argument(
        "--yes", "-y",
        action="store_true",
        help="Skip the confirmation prompt",
    )

    subparsers.add_parser("list", help="List available templates")

    return parser


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


def _raw_options(args: argparse.Namespace, settings: LauncherSettings) -> dict[str, Any]:
    return {
        "stack": args.stack,
        "typescript": args.typescript,
        "docker": args.docker,
        "github_actions": args.github_actions,
        "testing": args.testing,
        "eslint": args.eslint,
        "prettier": args.prettier,
        "description": args.description,
        "author": args.author or settings.default_author or None,
        "path": args.path,
    }


def _show_configuration(config: ProjectConfiguration, reporter: Reporter) -> None:
    data = {
        "Name": config.name,
        "Description": config.description or "-",
        "Stack": config.display_stack,
        "Features": ", ".join(config.features.enabled_labels()) or "none",
        "Location": str(config.target_path),
    }
    print_summary_table(data, title="Configuration Summary", out=reporter.console)


def cmd_create(
    args: argparse.Namespace,
    settings: LauncherSettings,
    reporter: Reporter,
) -> int:
    """Create a project, prompting for whatever the flags leave open."""
    print_banner("Project Launcher", out=reporter.console)
    options = _raw_options(args, settings)

    if args.name and args.stack:
        config = validate_and_build(args.name, options)
    else:
        answers = prompt_project_details(args.name, reporter.console, defaults=options)
        name = answers.pop("name")
        config = validate_and_build(name, answers)
        _show_configuration(config, reporter)
        if not args.yes and not confirm_creation(reporter.console):
            reporter.warning("Project creation cancelled.")
            return EXIT_OK

    launcher = ProjectLauncher(
        registry=TemplateRegistry(),
        post_processor=PostProcessor(reporter=reporter, settings=settings),
        reporter=reporter,
    )
    asyncio.run(launcher.create(config, install=args.install, init_git=args.git))
    return EXIT_OK


def cmd_list(reporter: Reporter, registry: TemplateRegistry | None = None) -> int:
    """Print every registered template with an example invocation."""
    registry = registry or TemplateRegistry()
    reporter.title("Available Templates")
    for index, summary in enumerate(registry.list(), start=1):
        reporter.plain(f"[bold cyan]{index}. {summary.name}[/bold cyan] ({summary.stack.value})")
        reporter.plain(f"   {summary.description}")
        reporter.plain(f"[dim]   $ {summary.example}[/dim]")
        reporter.plain()
    return EXIT_OK


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def run(argv: list[str] | None = None, reporter: Reporter | None = None) -> int:
    """Parse *argv*, run the command and return the process exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.command is None:
        args = parser.parse_args(["create"])

    reporter = reporter or Reporter()

    try:
        settings = LauncherSettings.from_env()
    except (ValidationError, ValueError) as exc:
        reporter.error(f"Invalid launcher settings: {escape(str(exc))}")
        return EXIT_FAILURE

    try:
        if args.command == "list":
            return cmd_list(reporter)
        return cmd_create(args, settings, reporter)
    except LauncherError as exc:
        reporter.error(escape(exc.message))
        if isinstance(exc, CommandFailed) and exc.stderr:
            reporter.plain(f"[dim]{escape(exc.stderr)}[/dim]")
        return EXIT_FAILURE
    except KeyboardInterrupt:
        reporter.plain()
        reporter.warning("Aborted.")
        return EXIT_INTERRUPTED


def main() -> None:
    """Console-script entry point."""
    sys.exit(run())


if __name__ == "__main__":
    main()
