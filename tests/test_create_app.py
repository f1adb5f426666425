"""Unit tests for the create-new-app orchestrator (c2c_kit.create_app).

Tests cover:
- The full happy path with install and git mocked out
- Install and git failures completing with warnings
- Blank, path-like and existing destination names aborting with exit code 1
- Markup characters in answers reported literally
- The closing report
"""

from __future__ import annotations

import json
from unittest.mock import AsyncMock, patch

import pytest

from c2c_kit.create_app import CreateApp, create_new_app
from c2c_kit.scaffolder import (
    AnswerCollector,
    DestinationExistsError,
    ProjectNameRequiredError,
    TemplateKind,
)


def _app(kit_config, ask, console) -> CreateApp:
    return CreateApp(kit_config, collector=AnswerCollector(ask=ask, console=console), console=console)


@pytest.mark.unit
class TestCreateAppRun:
    @pytest.mark.asyncio
    async def test_happy_path(self, kit_config, scripted_answers, console):
        ask = scripted_answers("helper-app", "Test", "1", "1", "1")
        install = AsyncMock(return_value=(0, "", ""))
        git = AsyncMock(return_value=True)
        with patch("c2c_kit.scaffolder.installer.run_command", install), patch(
            "c2c_kit.create_app.init_repository", git
        ):
            outcome = await _app(kit_config, ask, console).run()

        project = kit_config.working_dir / "helper-app"
        assert outcome.project_path == project
        assert outcome.request.template_kind is TemplateKind.BASIC_CRUD
        assert outcome.install.success
        assert outcome.install.package_manager == "pnpm"
        assert outcome.committed
        assert outcome.warnings == []

        manifest = json.loads((project / "package.json").read_text(encoding="utf-8"))
        assert manifest["name"] == "helper-app"
        assert manifest["description"] == "Test"
        assert (project / "components" / "ItemCard.tsx").is_file()

        install.assert_awaited_once()
        assert install.await_args.kwargs["cwd"] == project
        git.assert_awaited_once_with(project, kit_config.commit_message, console=console)

        output = console.file.getvalue()
        assert "Project created successfully!" in output
        assert "1. cd helper-app" in output
        assert "2. pnpm dev" in output
        assert "3. Open http://localhost:3000" in output
        assert "Happy coding!" in output

    @pytest.mark.asyncio
    async def test_install_and_git_failures_are_warnings(self, kit_config, scripted_answers, console):
        ask = scripted_answers("helper-app", "", "4", "", "")
        install = AsyncMock(return_value=(1, "", ""))
        git = AsyncMock(return_value=False)
        with patch("c2c_kit.scaffolder.installer.run_command", install), patch(
            "c2c_kit.create_app.init_repository", git
        ):
            outcome = await _app(kit_config, ask, console).run()

        assert install.await_count == 2
        assert not outcome.install.success
        assert not outcome.committed
        assert outcome.warnings == [
            "Template custom not found, starting from an empty project",
            "Dependencies were not installed",
            "Initial git commit was not created",
        ]
        output = console.file.getvalue()
        assert "Completed with warnings" in output
        assert "Project created successfully!" in output

    @pytest.mark.asyncio
    async def test_blank_name_aborts_before_touching_disk(self, kit_config, scripted_answers, console):
        ask = scripted_answers("")
        install = AsyncMock()
        with patch("c2c_kit.scaffolder.installer.run_command", install):
            with pytest.raises(ProjectNameRequiredError):
                await _app(kit_config, ask, console).run()

        assert list(kit_config.working_dir.iterdir()) == []
        install.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_existing_destination_aborts(self, kit_config, scripted_answers, console):
        (kit_config.working_dir / "helper-app").mkdir()
        ask = scripted_answers("helper-app", "Test", "1", "1", "1")
        install = AsyncMock()
        with patch("c2c_kit.scaffolder.installer.run_command", install):
            with pytest.raises(DestinationExistsError):
                await _app(kit_config, ask, console).run()

        install.assert_not_awaited()
        assert list((kit_config.working_dir / "helper-app").iterdir()) == []

    def test_installer_built_from_config(self, kit_config, console):
        config = kit_config.model_copy(
            update={"primary_package_manager": "yarn", "install_timeout": 10.0}
        )
        app = CreateApp(config, console=console)
        assert app.installer.primary == "yarn"
        assert app.installer.fallback == "npm"
        assert app.installer.timeout == 10.0
        assert app.library.root == kit_config.templates_dir


@pytest.mark.unit
class TestCreateNewApp:
    def test_success_exit_code(self, kit_config, scripted_answers, make_console):
        ask = scripted_answers("helper-app", "Test", "1", "1", "1")
        console = make_console()
        with patch(
            "c2c_kit.scaffolder.installer.run_command", AsyncMock(return_value=(0, "", ""))
        ), patch("c2c_kit.create_app.init_repository", AsyncMock(return_value=True)):
            code = create_new_app(
                kit_config, collector=AnswerCollector(ask=ask, console=console), console=console
            )
        assert code == 0

    def test_markup_characters_in_name_are_reported_literally(
        self, kit_config, scripted_answers, make_console
    ):
        ask = scripted_answers("app[v2]", "[/x] beta", "1", "1", "1")
        console, errors = make_console(), make_console()
        with patch(
            "c2c_kit.scaffolder.installer.run_command", AsyncMock(return_value=(0, "", ""))
        ), patch("c2c_kit.create_app.init_repository", AsyncMock(return_value=True)):
            code = create_new_app(
                kit_config,
                collector=AnswerCollector(ask=ask, console=console),
                console=console,
                err_console=errors,
            )

        assert code == 0
        assert errors.file.getvalue() == ""
        assert (kit_config.working_dir / "app[v2]").is_dir()
        output = console.file.getvalue()
        [name_row] = [line for line in output.splitlines() if "Project name" in line]
        assert "app[v2]" in name_row
        assert "1. cd app[v2]" in output

    def test_path_like_name_exit_code(self, kit_config, scripted_answers, make_console):
        console, errors = make_console(), make_console()
        code = create_new_app(
            kit_config,
            collector=AnswerCollector(ask=scripted_answers("../escape"), console=console),
            console=console,
            err_console=errors,
        )
        assert code == 1
        assert "single directory name" in errors.file.getvalue()
        assert not (kit_config.working_dir.parent / "escape").exists()
        assert list(kit_config.working_dir.iterdir()) == []

    def test_blank_name_exit_code(self, kit_config, scripted_answers, make_console):
        console, errors = make_console(), make_console()
        code = create_new_app(
            kit_config,
            collector=AnswerCollector(ask=scripted_answers(""), console=console),
            console=console,
            err_console=errors,
        )
        assert code == 1
        assert "Failed to create app: Project name is required" in errors.file.getvalue()

    def test_existing_destination_exit_code(self, kit_config, scripted_answers, make_console):
        (kit_config.working_dir / "helper-app").mkdir()
        console, errors = make_console(), make_console()
        code = create_new_app(
            kit_config,
            collector=AnswerCollector(
                ask=scripted_answers("helper-app", "", "1", "1", "1"), console=console
            ),
            console=console,
            err_console=errors,
        )
        assert code == 1
        assert "already exists" in errors.file.getvalue()
