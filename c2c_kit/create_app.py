"""Create-new-app orchestrator.

Runs the scaffolder as one linear sequence:

1. Ask for name, description, project type, database and auth choices.
2. Create ``<working dir>/<name>`` (aborts if it already exists).
3. Copy the chosen template tree (warns if the template is missing).
4. Write name/description into ``package.json`` and ``README.md``.
5. Install dependencies (primary package manager, then the fallback).
6. ``git init`` and commit everything.
7. Print a summary with next steps.

Steps 3, 5 and 6 never abort the run; everything else that goes wrong does.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from rich.console import Console

from c2c_kit.config import KitConfig
from c2c_kit.scaffolder import (
    AnswerCollector,
    DependencyInstaller,
    InstallResult,
    ProjectGenerator,
    ScaffoldRequest,
    TemplateLibrary,
    init_repository,
)
from c2c_kit.utils import colorize, print_banner, print_error, print_summary_table


@dataclass
class ScaffoldOutcome:
    """Everything a finished run produced."""

    request: ScaffoldRequest
    project_path: Path
    copied_files: list[Path] = field(default_factory=list)
    install: Optional[InstallResult] = None
    committed: bool = False
    warnings: list[str] = field(default_factory=list)


class CreateApp:
    """Interactive project scaffolder.

    Attributes:
        config: Kit configuration (template root, working dir, package managers).
        collector: Source of the user's answers.
        installer: Dependency installer used after the files are in place.
    """

    def __init__(
        self,
        config: KitConfig,
        collector: AnswerCollector | None = None,
        installer: DependencyInstaller | None = None,
        console: Console | None = None,
    ) -> None:
        self.config = config
        self.console = console if console is not None else Console()
        self.collector = collector or AnswerCollector(console=self.console)
        self.installer = installer or DependencyInstaller(
            primary=config.primary_package_manager,
            fallback=config.fallback_package_manager,
            timeout=config.install_timeout,
            console=self.console,
        )
        self.library = TemplateLibrary(config.templates_dir)

    async def run(self) -> ScaffoldOutcome:
        """Run the whole scaffold.

        Raises:
            ScaffoldError: On a blank project name or an existing destination.
        """
        print_banner("C2C Community Starter Kit - Create New App", console=self.console)

        request = await self.collector.collect()
        generator = ProjectGenerator(request, self.library, console=self.console)

        materialized = await generator.materialize(self.config.working_dir)
        outcome = ScaffoldOutcome(
            request=request,
            project_path=materialized.project_path,
            copied_files=materialized.copied_files,
            warnings=list(materialized.warnings),
        )

        await generator.substitute(outcome.project_path)

        outcome.install = await self.installer.install(outcome.project_path)
        if not outcome.install.success:
            outcome.warnings.append("Dependencies were not installed")

        outcome.committed = await init_repository(
            outcome.project_path, self.config.commit_message, console=self.console
        )
        if not outcome.committed:
            outcome.warnings.append("Initial git commit was not created")

        report(outcome, self.config, console=self.console)
        return outcome


def report(outcome: ScaffoldOutcome, config: KitConfig, console: Console | None = None) -> None:
    """Print the closing summary and next steps."""
    out = console if console is not None else Console()
    request = outcome.request

    out.print()
    print_banner("Project created successfully!", color="green", console=out)
    print_summary_table(
        {
            "Project name": request.project_name,
            "Project path": str(outcome.project_path),
            "Template": request.template_kind.value,
            "Database": request.database_choice.value,
            "Authentication": "enabled" if request.auth_enabled else "disabled",
        },
        title="New Project",
        console=out,
    )

    if outcome.warnings:
        out.print(colorize("Completed with warnings:", "yellow"))
        for warning in outcome.warnings:
            out.print(colorize(f"  - {warning}", "yellow"))
        out.print()

    out.print(colorize("Next steps:", "yellow"))
    out.print(colorize(f"1. cd {request.project_name}", "white"))
    out.print(colorize(f"2. {config.dev_command}", "white"))
    out.print(colorize(f"3. Open {config.dev_url}", "white"))
    out.print()
    out.print(colorize("Happy coding!", "magenta"))


def create_new_app(
    config: KitConfig | None = None,
    collector: AnswerCollector | None = None,
    installer: DependencyInstaller | None = None,
    console: Console | None = None,
    err_console: Console | None = None,
) -> int:
    """Entry point for ``c2c-kit create``.  Returns the process exit code."""
    try:
        app = CreateApp(
            config or KitConfig.from_env(),
            collector=collector,
            installer=installer,
            console=console,
        )
        asyncio.run(app.run())
    except Exception as exc:
        print_error(f"Failed to create app: {exc}", console=err_console)
        return 1
    return 0
