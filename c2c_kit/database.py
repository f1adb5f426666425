"""Supabase database setup helper.

Prepares a project's database with the Supabase CLI:

1. Verify the ``supabase`` CLI is installed and the project has ``supabase/``
2. Ask whether to use a local stack, a remote project, or skip
3. Make sure ``.env.local`` exists
4. (local only) start Supabase, apply migrations, seed, generate TS types
5. Print connection details and next steps

Step 1 aborts the run; a failure in any later step is reported and skipped.
"""

from __future__ import annotations

import asyncio
import shutil
from enum import Enum
from pathlib import Path
from typing import Optional

from rich.console import Console

from c2c_kit.config import KitConfig
from c2c_kit.scaffolder.prompts import AskFn, parse_choice
from c2c_kit.scaffolder.templates import TemplateRenderer
from c2c_kit.utils import (
    colorize,
    print_banner,
    print_error,
    print_info,
    print_success,
    print_warning,
    run_command,
    wait_for_health,
)

ENV_FILE = ".env.local"
ENV_EXAMPLE_FILE = ".env.example"

DEFAULT_ENV_TEMPLATE = """\
# Supabase Configuration
NEXT_PUBLIC_SUPABASE_URL={{ supabase_url }}
NEXT_PUBLIC_SUPABASE_ANON_KEY={{ anon_key }}

# Database Configuration
DATABASE_URL={{ database_url }}
"""


class SetupMode(str, Enum):
    LOCAL = "local"
    REMOTE = "remote"
    SKIP = "skip"

    @property
    def label(self) -> str:
        return _MODE_LABELS[self]


_MODE_LABELS: dict[SetupMode, str] = {
    SetupMode.LOCAL: "Use local Supabase (recommended for development)",
    SetupMode.REMOTE: "Connect to remote Supabase project",
    SetupMode.SKIP: "Skip database setup",
}

MODE_OPTIONS: tuple[SetupMode, ...] = (SetupMode.LOCAL, SetupMode.REMOTE, SetupMode.SKIP)
MODE_DEFAULT = SetupMode.LOCAL


class DatabaseSetupError(Exception):
    """Raised when the database helper cannot run at all."""

    def __init__(self, message: str, hint: str = "") -> None:
        self.hint = hint
        super().__init__(message)


class SupabaseCLIMissingError(DatabaseSetupError):
    def __init__(self) -> None:
        super().__init__(
            "Supabase CLI is not installed",
            hint="Please install it first: https://supabase.com/docs/guides/cli",
        )


class NotASupabaseProjectError(DatabaseSetupError):
    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(
            f"{path} is not a Supabase project",
            hint='Please run "supabase init" first',
        )


class DatabaseSetup:
    """Drives the Supabase CLI for one project directory.

    Args:
        config: Kit configuration (Supabase URLs, type output path).
        project_dir: Project root containing ``supabase/``.
        ask: Async prompt callable, as used by the scaffolder's collector.
        console: Console for progress output.
    """

    def __init__(
        self,
        config: KitConfig,
        project_dir: str | Path,
        ask: Optional[AskFn] = None,
        console: Console | None = None,
    ) -> None:
        self.config = config
        self.root = Path(project_dir)
        self.console = console if console is not None else Console()
        self._ask = ask or self._ask_terminal
        self.renderer = TemplateRenderer()
        self.warnings: list[str] = []

    async def _ask_terminal(self, prompt: str) -> str:
        return await asyncio.to_thread(self.console.input, prompt)

    def _warn(self, message: str, hint: str = "") -> None:
        print_warning(message, console=self.console)
        if hint:
            print_info(hint, console=self.console)
        self.warnings.append(message)

    async def _supabase(self, *args: str, capture: bool = False) -> tuple[int, str, str]:
        """Run ``supabase <args>`` in the project; spawn failures count as exit 127."""
        try:
            return await run_command(["supabase", *args], cwd=self.root, capture=capture)
        except OSError as exc:
            return 127, "", str(exc)

    # -- Preconditions ------------------------------------------------------

    async def check_cli(self) -> None:
        returncode, _, _ = await self._supabase("--version", capture=True)
        if returncode != 0:
            raise SupabaseCLIMissingError()

    def check_project(self) -> None:
        if not (self.root / "supabase").is_dir():
            raise NotASupabaseProjectError(self.root)

    # -- Steps --------------------------------------------------------------

    async def choose_mode(self) -> SetupMode:
        print_info("Database setup options:", console=self.console)
        for number, mode in enumerate(MODE_OPTIONS, start=1):
            self.console.print(colorize(f"  {number}. {mode.label}", "yellow"))
        self.console.print()
        answer = await self._ask(f"Choose setup option (1-{len(MODE_OPTIONS)}): ")
        return parse_choice((answer or "").strip(), MODE_OPTIONS, MODE_DEFAULT)

    def ensure_env_file(self, mode: SetupMode) -> Path:
        """Create ``.env.local`` unless it already exists."""
        env_path = self.root / ENV_FILE
        example = self.root / ENV_EXAMPLE_FILE
        if not env_path.exists():
            if example.is_file():
                shutil.copyfile(example, env_path)
                print_success(f"Created {ENV_FILE} from {ENV_EXAMPLE_FILE}", console=self.console)
            else:
                local = mode is SetupMode.LOCAL
                self.renderer.render_to_file(
                    DEFAULT_ENV_TEMPLATE,
                    env_path,
                    {
                        "supabase_url": self.config.supabase.api_url if local else "your_supabase_url",
                        "anon_key": "your_supabase_anon_key",
                        "database_url": self.config.supabase.db_url if local else "your_database_url",
                    },
                )
                print_success(f"Created {ENV_FILE} file", console=self.console)

        if mode is SetupMode.REMOTE:
            print_info(f"Please update {ENV_FILE} with your Supabase project credentials", console=self.console)
            print_info("You can find these in your Supabase dashboard", console=self.console)
        return env_path

    async def start_local(self) -> bool:
        print_info("Starting Supabase locally...", console=self.console)
        returncode, _, _ = await self._supabase("start")
        if returncode != 0:
            self._warn("Failed to start Supabase locally", "Please check your Docker installation")
            return False
        print_success("Supabase started successfully", console=self.console)

        ready = await wait_for_health(
            self.config.supabase.studio_url, timeout=self.config.supabase.health_timeout
        )
        if not ready:
            self._warn(f"Supabase Studio did not respond at {self.config.supabase.studio_url}")
        return True

    async def apply_migrations(self) -> bool:
        print_info("Applying database migrations...", console=self.console)
        if not (self.root / "supabase" / "migrations").is_dir():
            self._warn("No migrations found")
            return False
        returncode, _, _ = await self._supabase("db", "reset")
        if returncode != 0:
            self._warn("Failed to apply migrations", "Please check your migration files")
            return False
        print_success("Database migrations applied successfully", console=self.console)
        return True

    async def seed(self) -> bool:
        print_info("Seeding database...", console=self.console)
        if not (self.root / "supabase" / "seed.sql").is_file():
            self._warn("No seed file found")
            return False
        returncode, _, _ = await self._supabase("db", "seed")
        if returncode != 0:
            self._warn("Failed to seed database", "Please check your seed file")
            return False
        print_success("Database seeded successfully", console=self.console)
        return True

    async def generate_types(self) -> bool:
        print_info("Generating TypeScript types...", console=self.console)
        output = self.config.supabase.types_output
        returncode, stdout, _ = await self._supabase(
            "gen", "types", "typescript", "--local", capture=True
        )
        if returncode != 0:
            self._warn(
                "Failed to generate types",
                f'Please run "supabase gen types typescript --local > {output}" manually',
            )
            return False
        target = self.root / output
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(stdout + "\n", encoding="utf-8")
        print_success("TypeScript types generated successfully", console=self.console)
        return True

    # -- Orchestration ------------------------------------------------------

    async def run(self) -> SetupMode:
        """Run the whole setup.

        Raises:
            DatabaseSetupError: If the CLI is missing or the directory is not
                a Supabase project.
        """
        print_banner("C2C Community Starter Kit - Database Setup", console=self.console)

        await self.check_cli()
        self.check_project()

        mode = await self.choose_mode()
        self.ensure_env_file(mode)

        if mode is SetupMode.LOCAL:
            await self.start_local()
            await self.apply_migrations()
            await self.seed()
            await self.generate_types()

        self.report(mode)
        return mode

    def report(self, mode: SetupMode) -> None:
        out = self.console
        out.print()
        print_banner("Database setup completed!", color="green", console=out)

        if mode is SetupMode.LOCAL:
            supabase = self.config.supabase
            out.print(colorize("Local Supabase is running at:", "cyan"))
            out.print(colorize(f"  API URL: {supabase.api_url}", "white"))
            out.print(colorize(f"  Dashboard: {supabase.studio_url}", "white"))
            out.print(colorize(f"  Database: {supabase.db_url}", "white"))
            out.print()

        out.print(colorize("Next steps:", "yellow"))
        out.print(colorize(f"1. Update your {ENV_FILE} with the correct credentials", "white"))
        out.print(colorize(f'2. Run "{self.config.dev_command}" to start your application', "white"))
        out.print(colorize("3. Check the Supabase dashboard for your data", "white"))


def setup_database(
    config: KitConfig | None = None,
    project_dir: str | Path | None = None,
    ask: Optional[AskFn] = None,
    console: Console | None = None,
    err_console: Console | None = None,
) -> int:
    """Entry point for ``c2c-kit setup-db``.  Returns the process exit code."""
    try:
        config = config or KitConfig.from_env()
        setup = DatabaseSetup(config, project_dir or config.working_dir, ask=ask, console=console)
        asyncio.run(setup.run())
    except DatabaseSetupError as exc:
        print_error(str(exc), console=err_console)
        if exc.hint:
            print_info(exc.hint, console=err_console if err_console is not None else console)
        return 1
    except Exception as exc:
        print_error(f"Failed to setup database: {exc}", console=err_console)
        return 1
    return 0
