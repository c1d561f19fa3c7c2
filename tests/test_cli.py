"""Tests for the command-line interface (project_launcher.cli).

Covers:
- Argument parsing (flags, aliases, defaults)
- ``list`` output
- Non-interactive ``create`` and its exit codes
- Interactive ``create`` (prompts mocked), including a declined confirmation
- KeyboardInterrupt handling and invalid settings
- Exit codes after install and git failures
"""

from __future__ import annotations

import os
from functools import partial
from unittest.mock import patch

import pytest

from project_launcher import __version__
from project_launcher.cli import EXIT_FAILURE, EXIT_INTERRUPTED, EXIT_OK, build_parser, run
from project_launcher.postprocess import PostProcessor
from project_launcher.utils import CommandResult

pytestmark = pytest.mark.unit


def _create_args(tmp_path, *extra: str) -> list[str]:
    return ["create", *extra, "--path", str(tmp_path), "--no-install", "--no-git"]


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


class TestParser:
    def test_create_defaults(self):
        args = build_parser().parse_args(["create"])
        assert args.command == "create"
        assert args.name is None
        assert args.stack is None
        assert args.typescript is None
        assert args.eslint is None
        assert args.install is True
        assert args.git is True
        assert args.yes is False

    def test_template_alias(self):
        args = build_parser().parse_args(["create", "app", "--template", "pern"])
        assert args.stack == "pern"

    def test_flags(self):
        args = build_parser().parse_args([
            "create", "app", "-s", "nextjs", "-t", "-d", "--github-actions",
            "--testing", "vitest", "--no-eslint", "--no-prettier", "--no-install", "--no-git",
        ])
        assert args.typescript is True
        assert args.docker is True
        assert args.github_actions is True
        assert args.testing == "vitest"
        assert args.eslint is False
        assert args.prettier is False
        assert args.install is False
        assert args.git is False

    def test_no_command(self):
        assert build_parser().parse_args([]).command is None

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            build_parser().parse_args(["--version"])
        assert exc_info.value.code == 0
        assert __version__ in capsys.readouterr().out


# ---------------------------------------------------------------------------
# list
# ---------------------------------------------------------------------------


class TestListCommand:
    def test_lists_all_templates(self, reporter):
        assert run(["list"], reporter=reporter) == EXIT_OK
        for stack in ("mern", "pern", "nextjs", "flask", "express"):
            assert f"--template {stack}" in reporter.output


# ---------------------------------------------------------------------------
# create (non-interactive)
# ---------------------------------------------------------------------------


class TestCreateCommand:
    def test_creates_project(self, tmp_path, reporter):
        code = run(_create_args(tmp_path, "web", "--stack", "nextjs", "--typescript"), reporter=reporter)
        assert code == EXIT_OK
        assert (tmp_path / "web" / "src/app/page.tsx").is_file()
        assert not (tmp_path / "web" / ".git").exists()

    def test_invalid_name(self, tmp_path, reporter):
        code = run(_create_args(tmp_path, "Bad_Name!", "--stack", "mern"), reporter=reporter)
        assert code == EXIT_FAILURE
        assert "Invalid project name" in reporter.levels("error")[0]
        assert list(tmp_path.iterdir()) == []

    def test_unknown_stack(self, tmp_path, reporter):
        code = run(_create_args(tmp_path, "app", "--stack", "rails"), reporter=reporter)
        assert code == EXIT_FAILURE
        assert "rails" in reporter.levels("error")[0]

    def test_incompatible_testing(self, tmp_path, reporter):
        code = run(
            _create_args(tmp_path, "app", "--stack", "flask", "--testing", "jest"), reporter=reporter
        )
        assert code == EXIT_FAILURE

    def test_existing_directory(self, tmp_path, reporter):
        (tmp_path / "app").mkdir()
        code = run(_create_args(tmp_path, "app", "--stack", "express"), reporter=reporter)
        assert code == EXIT_FAILURE
        assert "already exists" in reporter.levels("error")[0]
        assert list((tmp_path / "app").iterdir()) == []

    def test_author_from_settings(self, tmp_path, reporter):
        with patch.dict(os.environ, {"PROJECT_LAUNCHER_AUTHOR": "Ada"}):
            code = run(_create_args(tmp_path, "app", "--stack", "express"), reporter=reporter)
        assert code == EXIT_OK
        assert '"author": "Ada"' in (tmp_path / "app" / "package.json").read_text()

    def test_invalid_settings(self, tmp_path, reporter):
        with patch.dict(os.environ, {"PROJECT_LAUNCHER_INSTALL_TIMEOUT": "abc"}):
            code = run(_create_args(tmp_path, "app", "--stack", "express"), reporter=reporter)
        assert code == EXIT_FAILURE
        assert "Invalid launcher settings" in reporter.levels("error")[0]

    def test_keyboard_interrupt(self, tmp_path, reporter):
        with patch("project_launcher.cli.cmd_create", side_effect=KeyboardInterrupt):
            code = run(_create_args(tmp_path, "app", "--stack", "express"), reporter=reporter)
        assert code == EXIT_INTERRUPTED


# ---------------------------------------------------------------------------
# create (interactive)
# ---------------------------------------------------------------------------


class TestInteractiveCreate:
    ANSWERS = {
        "name": "shop",
        "description": "A shop",
        "author": "",
        "stack": "mern",
        "typescript": False,
        "eslint": True,
        "prettier": True,
        "docker": False,
        "github_actions": False,
        "testing": "jest",
    }

    def test_prompts_when_stack_missing(self, tmp_path, reporter):
        with patch(
            "project_launcher.cli.prompt_project_details",
            return_value={**self.ANSWERS, "path": str(tmp_path)},
        ) as prompt, patch("project_launcher.cli.confirm_creation", return_value=True):
            code = run(_create_args(tmp_path, "shop"), reporter=reporter)

        assert code == EXIT_OK
        assert prompt.call_args.args[0] == "shop"
        assert prompt.call_args.kwargs["defaults"]["path"] == str(tmp_path)
        assert (tmp_path / "shop" / "client/package.json").is_file()
        assert "Configuration Summary" in reporter.output

    def test_declined_confirmation_exits_cleanly(self, tmp_path, reporter):
        with patch(
            "project_launcher.cli.prompt_project_details",
            return_value={**self.ANSWERS, "path": str(tmp_path)},
        ), patch("project_launcher.cli.confirm_creation", return_value=False):
            code = run(["create"], reporter=reporter)

        assert code == EXIT_OK
        assert not (tmp_path / "shop").exists()
        assert "cancelled" in reporter.levels("warning")[0]

    def test_yes_skips_confirmation(self, tmp_path, reporter):
        with patch(
            "project_launcher.cli.prompt_project_details",
            return_value={**self.ANSWERS, "path": str(tmp_path)},
        ), patch("project_launcher.cli.confirm_creation") as confirm:
            code = run(_create_args(tmp_path, "--yes"), reporter=reporter)
        assert code == EXIT_OK
        confirm.assert_not_called()

    def test_no_arguments_runs_interactive_create(self, reporter):
        with patch(
            "project_launcher.cli.prompt_project_details", side_effect=KeyboardInterrupt
        ) as prompt:
            code = run([], reporter=reporter)
        assert code == EXIT_INTERRUPTED
        prompt.assert_called_once()


# ---------------------------------------------------------------------------
# create (post-processing outcomes)
# ---------------------------------------------------------------------------


class TestPostProcessingExitCodes:
    @pytest.fixture
    def patched_processor(self, fake_runner):
        with patch(
            "project_launcher.cli.PostProcessor", partial(PostProcessor, runner=fake_runner)
        ):
            yield fake_runner

    def test_install_failure_exits_1_and_keeps_tree(self, tmp_path, reporter, patched_processor):
        patched_processor.failures[("npm", "install")] = CommandResult(
            returncode=1, stderr="ERR! 404 Not Found"
        )
        code = run(["create", "web", "--stack", "nextjs", "--path", str(tmp_path)], reporter=reporter)

        assert code == EXIT_FAILURE
        assert "Failed to install dependencies" in reporter.levels("error")[0]
        assert "ERR! 404 Not Found" in reporter.output
        assert (tmp_path / "web" / "package.json").is_file()
        assert patched_processor.commands == ["npm install"]

    def test_git_failure_exits_0_with_warning(self, tmp_path, reporter, patched_processor):
        patched_processor.failures[("git", "commit")] = CommandResult(
            returncode=128, stderr="Author identity unknown"
        )
        code = run(["create", "web", "--stack", "nextjs", "--path", str(tmp_path)], reporter=reporter)

        assert code == EXIT_OK
        assert reporter.levels("error") == []
        assert "Git initialization failed" in reporter.levels("warning")[0]
        assert "Author identity unknown" in reporter.levels("warning")[0]

    def test_unrunnable_git_on_path_exits_0(self, tmp_path, reporter, monkeypatch):
        bin_dir = tmp_path / "bin"
        bin_dir.mkdir()
        (bin_dir / "git").write_text("#!/bin/sh\nexit 0\n")
        (bin_dir / "git").chmod(0o644)
        monkeypatch.setenv("PATH", str(bin_dir))

        code = run(
            ["create", "demo", "--stack", "nextjs", "--no-install", "--path", str(tmp_path)],
            reporter=reporter,
        )

        assert code == EXIT_OK
        assert (tmp_path / "demo" / "package.json").is_file()
        assert "Permission denied" in reporter.levels("warning")[0]
