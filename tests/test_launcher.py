"""Tests for the end-to-end launcher (project_launcher.launcher)."""

from __future__ import annotations

import sys

import pytest

from project_launcher.config import Stack
from project_launcher.errors import DependencyInstallFailed, DirectoryExists
from project_launcher.launcher import ProjectLauncher, next_steps
from project_launcher.postprocess import PostProcessor
from project_launcher.utils import CommandResult

pytestmark = pytest.mark.unit


@pytest.fixture
def launcher(fake_runner, reporter, settings) -> ProjectLauncher:
    return ProjectLauncher(
        post_processor=PostProcessor(runner=fake_runner, reporter=reporter, settings=settings),
        reporter=reporter,
    )


class TestProjectLauncher:
    @pytest.mark.asyncio
    async def test_create_generates_and_post_processes(self, launcher, fake_runner, reporter, make_config):
        config = make_config("express", name="api")
        target = await launcher.create(config)

        assert target == config.target_path
        assert (target / "package.json").is_file()
        assert (target / "src/index.js").is_file()
        assert fake_runner.commands[0] == "npm install"
        assert fake_runner.commands[-1].startswith("git commit")
        assert "Project Summary" in reporter.output
        assert "cd api" in reporter.output
        assert "npm run dev" in reporter.output

    @pytest.mark.asyncio
    async def test_skip_post_processing(self, launcher, fake_runner, reporter, make_config):
        config = make_config("nextjs")
        await launcher.create(config, install=False, init_git=False)
        assert fake_runner.calls == []
        assert "not installed" in reporter.output
        assert "npm install" in reporter.output

    @pytest.mark.asyncio
    async def test_existing_directory_runs_nothing(self, launcher, fake_runner, make_config):
        config = make_config("mern")
        config.target_path.mkdir()
        with pytest.raises(DirectoryExists):
            await launcher.create(config)
        assert fake_runner.calls == []

    @pytest.mark.asyncio
    async def test_install_failure_leaves_tree(self, launcher, fake_runner, make_config):
        fake_runner.failures[(sys.executable, "-m")] = CommandResult(returncode=1, stderr="ensurepip missing")
        config = make_config("flask")
        with pytest.raises(DependencyInstallFailed):
            await launcher.create(config)
        assert (config.target_path / "run.py").is_file()
        assert len(fake_runner.calls) == 1
        assert not any(c["executable"] == "git" for c in fake_runner.calls)


class TestNextSteps:
    def test_split_stack(self, make_config):
        steps = next_steps(make_config("pern", name="shop"))
        assert steps[0] == "cd shop"
        assert "cd server && npm run dev" in steps
        assert "cd client && npm run dev" in steps

    def test_flask_after_install_only_activates(self, make_config):
        steps = next_steps(make_config("flask"))
        assert "python run.py" in steps
        assert steps[1].startswith("source venv/bin/activate")
        assert "pip install -r requirements.txt" not in steps
        assert "python -m venv venv" not in steps

    def test_flask_without_install(self, make_config):
        steps = next_steps(make_config("flask"), installed=False)
        assert steps[1:4] == [
            "python -m venv venv",
            next_steps(make_config("flask"))[1],
            "pip install -r requirements.txt",
        ]

    def test_scoped_name_uses_directory(self, make_config):
        assert next_steps(make_config("nextjs", name="@acme/web"))[0] == "cd web"

    @pytest.mark.parametrize("stack", [Stack.NEXTJS, Stack.EXPRESS])
    def test_install_hint_when_skipped(self, make_config, stack):
        assert "npm install" in next_steps(make_config(stack.value), installed=False)
        assert "npm install" not in next_steps(make_config(stack.value), installed=True)
