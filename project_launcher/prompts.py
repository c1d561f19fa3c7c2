"""Interactive questions for ``project-launcher create``.

The prompts only collect raw answers; turning them into a
``ProjectConfiguration`` is left to :func:`project_launcher.config.validate_and_build`
so interactive and flag-driven runs share one validation path.
"""

from __future__ import annotations

from typing import Any

from rich.console import Console
from rich.prompt import Confirm, Prompt

from .config import (
    PYTHON_STACKS,
    STACK_DISPLAY_NAMES,
    Stack,
    TestingFramework,
    default_testing_framework,
    parse_stack,
    supports_typescript,
    validate_project_name,
)


def _testing_choices(stack: Stack) -> list[str]:
    if stack in PYTHON_STACKS:
        return [TestingFramework.PYTEST.value, TestingFramework.NONE.value]
    return [
        TestingFramework.JEST.value,
        TestingFramework.VITEST.value,
        TestingFramework.NONE.value,
    ]


def ask_project_name(default_name: str | None, console: Console) -> str:
    """Ask for a project name until it passes validation."""
    while True:
        name = Prompt.ask(
            "What is your project name?",
            default=default_name or "my-app",
            console=console,
        ).strip()
        reason = validate_project_name(name)
        if reason is None:
            return name
        console.print(f"[red]{reason}[/red]")


def ask_stack(console: Console) -> Stack:
    console.print("Select your tech stack:")
    for stack in Stack:
        console.print(f"  [cyan]{stack.value:<8}[/cyan] {STACK_DISPLAY_NAMES[stack]}")
    value = Prompt.ask(
        "Stack",
        choices=[s.value for s in Stack],
        default=Stack.MERN.value,
        console=console,
    )
    return Stack(value)


def prompt_project_details(
    default_name: str | None = None,
    console: Console | None = None,
    defaults: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Collect project details interactively.

    Args:
        default_name: Suggested project name.
        console: Console used for both questions and hints.
        defaults: Answers already supplied on the command line; their
            questions are skipped.

    Returns:
        A raw answer dict with ``name`` plus the option keys understood by
        ``validate_and_build``.
    """
    console = console or Console()
    known = dict(defaults or {})

    console.print("\n[bold cyan]Let's create your project![/bold cyan]\n")

    answers: dict[str, Any] = {"name": ask_project_name(default_name, console)}

    if known.get("description") is None:
        answers["description"] = Prompt.ask(
            "Project description?", default="A new project", console=console
        )
    if known.get("author") is None:
        answers["author"] = Prompt.ask("Author name?", default="", console=console)

    stack = parse_stack(known["stack"]) if known.get("stack") else ask_stack(console)
    answers["stack"] = stack.value

    if supports_typescript(stack) and known.get("typescript") is None:
        answers["typescript"] = Confirm.ask("Enable TypeScript?", default=True, console=console)

    if known.get("eslint") is None:
        answers["eslint"] = Confirm.ask("Add linting?", default=True, console=console)
    if known.get("prettier") is None:
        answers["prettier"] = Confirm.ask("Add formatting?", default=True, console=console)
    if known.get("docker") is None:
        answers["docker"] = Confirm.ask(
            "Include Docker configuration?", default=False, console=console
        )
    if known.get("github_actions") is None:
        answers["github_actions"] = Confirm.ask(
            "Add GitHub Actions CI?", default=False, console=console
        )
    if known.get("testing") is None:
        answers["testing"] = Prompt.ask(
            "Testing framework?",
            choices=_testing_choices(stack),
            default=default_testing_framework(stack).value,
            console=console,
        )

    return {**known, **answers}


def confirm_creation(console: Console) -> bool:
    return Confirm.ask("Proceed with creation?", default=True, console=console)
