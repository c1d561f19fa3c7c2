"""End-to-end project creation.

``ProjectLauncher`` ties the pieces together for one ``create`` run:

1. Resolve the template for the configured stack.
2. Materialise it into ``config.target_path``.
3. Install dependencies and initialise git.
4. Print the configuration summary and the next steps.

Every collaborator is injected, so tests can swap the command runner, the
filesystem, or the console without patching.
"""

from __future__ import annotations

from pathlib import Path

from .config import ProjectConfiguration, Stack
from .postprocess import VENV_DIR, PostProcessor, PostProcessReport
from .scaffolder import Materializer, TemplateRegistry
from .utils import Reporter, print_summary_table


class ProjectLauncher:
    """Creates one project from a validated configuration."""

    def __init__(
        self,
        registry: TemplateRegistry | None = None,
        materializer: Materializer | None = None,
        post_processor: PostProcessor | None = None,
        reporter: Reporter | None = None,
    ) -> None:
        self.reporter = reporter or Reporter()
        self.registry = registry or TemplateRegistry()
        self.materializer = materializer or Materializer()
        self.post_processor = post_processor or PostProcessor(reporter=self.reporter)

    async def create(
        self,
        config: ProjectConfiguration,
        *,
        install: bool = True,
        init_git: bool = True,
    ) -> Path:
        """Generate the project described by *config* and return its root.

        Raises:
            TemplateNotFound: No template for ``config.stack``.
            DirectoryExists: The target directory already exists.
            MaterializationIOError: Writing the tree failed part-way.
            DependencyInstallFailed: An install command failed.
        """
        template = self.registry.resolve(config.stack)
        target = config.target_path

        self.reporter.info(f"Creating project: [cyan]{config.name}[/cyan]")
        with self.reporter.status("Generating project files..."):
            written = await self.materializer.materialize(target, template, config)
        self.reporter.success(f"Project files generated ({len(written)} files)")

        report = await self.post_processor.run(
            target, config, install=install, init_git=init_git
        )

        self.print_summary(config, target, report)
        self.print_next_steps(config, installed=report.installed)
        return target

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    def print_summary(
        self,
        config: ProjectConfiguration,
        target: Path,
        report: PostProcessReport,
    ) -> None:
        data = {
            "Name": config.name,
            "Stack": config.display_stack,
            "Features": ", ".join(config.features.enabled_labels()) or "none",
            "Location": str(target),
            "Dependencies": "installed" if report.installed else "not installed",
            "Git": "initialized" if report.git_initialized else "not initialized",
        }
        print_summary_table(data, title="Project Summary", out=self.reporter.console)

    def print_next_steps(self, config: ProjectConfiguration, *, installed: bool) -> None:
        self.reporter.success("Success! Your project is ready!")
        self.reporter.plain()
        self.reporter.plain("Next steps:")
        for line in next_steps(config, installed=installed):
            self.reporter.plain(f"  {line}")
        self.reporter.plain()


def next_steps(config: ProjectConfiguration, *, installed: bool = True) -> list[str]:
    """Shell commands the user runs to start the generated project."""
    lines = [f"cd {config.directory_name}"]

    if config.stack in (Stack.MERN, Stack.PERN):
        if not installed:
            lines.append("(cd client && npm install) && (cd server && npm install)")
        lines += [
            "",
            "# Start the backend",
            "cd server && npm run dev",
            "",
            "# Start the frontend (in another terminal)",
            "cd client && npm run dev",
        ]
    elif config.stack is Stack.FLASK:
        activate = f"source {VENV_DIR}/bin/activate  # On Windows: {VENV_DIR}\\Scripts\\activate"
        if installed:
            lines.append(activate)
        else:
            lines += [f"python -m venv {VENV_DIR}", activate, "pip install -r requirements.txt"]
        lines += ["cp .env.example .env", "python run.py"]
    else:
        if not installed:
            lines.append("npm install")
        lines.append("npm run dev")

    return lines
