"""Integration tests: generate real project trees end-to-end.

These tests run the launcher against ``tmp_path`` with every stack and
verify that the generated projects contain well-formed files.  Dependency
installation is replaced by a fake runner; the git test uses the real
``git`` binary when it is available.

No network access or package managers are required.
"""

from __future__ import annotations

import json
import shutil
from pathlib import Path

import pytest
import yaml

from project_launcher.config import Stack
from project_launcher.launcher import ProjectLauncher
from project_launcher.postprocess import PostProcessor
from project_launcher.utils import SubprocessRunner


def _launcher(runner, reporter, settings) -> ProjectLauncher:
    return ProjectLauncher(
        post_processor=PostProcessor(runner=runner, reporter=reporter, settings=settings),
        reporter=reporter,
    )


def _files(root: Path) -> set[str]:
    return {p.relative_to(root).as_posix() for p in root.rglob("*") if p.is_file()}


@pytest.mark.integration
class TestScaffoldEndToEnd:
    @pytest.mark.asyncio
    async def test_nextjs_typescript_project(self, fake_runner, reporter, settings, make_config):
        config = make_config("nextjs", name="my-app", typescript=True)
        root = await _launcher(fake_runner, reporter, settings).create(config)

        assert root == config.target_path
        package = json.loads((root / "package.json").read_text())
        assert package["name"] == "my-app"
        assert "typescript" in package["devDependencies"]
        assert (root / "src/app/page.tsx").is_file()
        assert (root / ".gitignore").is_file()
        assert ".next/" in (root / ".gitignore").read_text()
        assert fake_runner.commands[:2] == ["npm install", "git init"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("stack", [s.value for s in Stack])
    async def test_every_stack_with_all_features(self, fake_runner, reporter, settings, make_config, stack):
        config = make_config(stack, typescript=True, docker=True, github_actions=True)
        root = await _launcher(fake_runner, reporter, settings).create(config)

        files = _files(root)
        assert "README.md" in files
        assert ".gitignore" in files
        assert "docker-compose.yml" in files
        for path in files:
            text = (root / path).read_text(encoding="utf-8")
            if path.endswith((".yml", ".yaml")):
                assert yaml.safe_load(text) is not None, path
            elif path.endswith(".json"):
                json.loads(text)
            elif path.endswith(".py"):
                compile(text, path, "exec")

    @pytest.mark.asyncio
    async def test_express_is_server_only(self, fake_runner, reporter, settings, make_config):
        config = make_config("express", name="api")
        root = await _launcher(fake_runner, reporter, settings).create(config)

        files = _files(root)
        assert not any(p.startswith(("client/", "server/")) for p in files)
        assert {"package.json", "src/index.js", "src/app.js", ".env.example"} <= files
        assert (root / ".env.example").read_text().startswith("PORT=5000")
        assert fake_runner.calls[0]["cwd"] == root

    @pytest.mark.asyncio
    async def test_mern_installs_client_and_server(self, fake_runner, reporter, settings, make_config):
        config = make_config("mern", name="shop")
        root = await _launcher(fake_runner, reporter, settings).create(config, init_git=False)
        assert [c["cwd"] for c in fake_runner.calls] == [root / "client", root / "server"]


@pytest.mark.integration
@pytest.mark.skipif(shutil.which("git") is None, reason="git is not installed")
class TestRealGit:
    @pytest.mark.asyncio
    async def test_git_repository_created(self, reporter, settings, make_config):
        config = make_config("flask", name="api")
        launcher = _launcher(SubprocessRunner(), reporter, settings)

        root = await launcher.create(config, install=False)

        assert (root / ".git").is_dir()
        # Commit may fail without a configured identity; that is only a warning.
        for warning in reporter.levels("warning"):
            assert "Git initialization failed" in warning
