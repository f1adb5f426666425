"""Interactive answer collection for the scaffolder.

Questions are asked one at a time, in a fixed order, and each one is awaited
before the next is printed.  Numbered menus never re-ask: anything that is not
a valid menu number resolves to that menu's default.
"""

from __future__ import annotations

import asyncio
import re
from collections.abc import Awaitable, Callable, Sequence
from typing import Optional, TypeVar

from rich.console import Console

from c2c_kit.scaffolder.models import (
    DatabaseChoice,
    ScaffoldError,
    ScaffoldRequest,
    TemplateKind,
    is_directory_name,
)
from c2c_kit.utils import colorize, print_info

T = TypeVar("T")

AskFn = Callable[[str], Awaitable[str]]

TEMPLATE_OPTIONS: tuple[TemplateKind, ...] = (
    TemplateKind.BASIC_CRUD,
    TemplateKind.DASHBOARD,
    TemplateKind.PLUGIN,
    TemplateKind.CUSTOM,
)
TEMPLATE_DEFAULT = TemplateKind.CUSTOM

DATABASE_OPTIONS: tuple[DatabaseChoice, ...] = (
    DatabaseChoice.SUPABASE,
    DatabaseChoice.LOCAL,
    DatabaseChoice.NONE,
)
DATABASE_DEFAULT = DatabaseChoice.SUPABASE

AUTH_OPTIONS: tuple[bool, ...] = (True, False)
AUTH_DEFAULT = False

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


class ProjectNameRequiredError(ScaffoldError):
    """Raised when the user submits an empty project name."""


class InvalidProjectNameError(ScaffoldError):
    """Raised when the project name is not a single directory name."""


def parse_choice(answer: str, options: Sequence[T], default: T) -> T:
    """Map a 1-based menu answer onto *options*.

    The leading integer of *answer* is used (``"2 please"`` selects option 2).
    Non-numeric answers and numbers outside ``1..len(options)`` return
    *default*.
    """
    match = _LEADING_INT.match(answer or "")
    if not match:
        return default
    index = int(match.group(1))
    if 1 <= index <= len(options):
        return options[index - 1]
    return default


class AnswerCollector:
    """Asks the scaffolder's questions and builds a ``ScaffoldRequest``.

    Args:
        ask: Async callable that shows a prompt and returns the raw answer.
            Defaults to reading a line from the terminal in a worker thread.
        console: Console used for the menus.
    """

    def __init__(self, ask: Optional[AskFn] = None, console: Console | None = None) -> None:
        self.console = console if console is not None else Console()
        self._ask = ask or self._ask_terminal

    async def _ask_terminal(self, prompt: str) -> str:
        return await asyncio.to_thread(self.console.input, prompt)

    async def ask(self, prompt: str) -> str:
        answer = await self._ask(prompt)
        return (answer or "").strip()

    def _print_menu(self, heading: str, labels: Sequence[str]) -> None:
        print_info(heading, console=self.console)
        for number, label in enumerate(labels, start=1):
            self.console.print(colorize(f"  {number}. {label}", "yellow"))
        self.console.print()

    # -- Individual questions ------------------------------------------------

    async def project_name(self) -> str:
        name = await self.ask("What is the name of your project? ")
        if not name:
            raise ProjectNameRequiredError("Project name is required")
        if not is_directory_name(name):
            raise InvalidProjectNameError(
                f"Project name {name!r} must be a single directory name (no / or \\)"
            )
        return name

    async def description(self) -> str:
        return await self.ask("Describe your project (optional): ")

    async def template_kind(self) -> TemplateKind:
        self._print_menu(
            "Available project types:", [kind.label for kind in TEMPLATE_OPTIONS]
        )
        answer = await self.ask(f"Choose a project type (1-{len(TEMPLATE_OPTIONS)}): ")
        return parse_choice(answer, TEMPLATE_OPTIONS, TEMPLATE_DEFAULT)

    async def database_choice(self) -> DatabaseChoice:
        self._print_menu(
            "Database configuration:", [choice.label for choice in DATABASE_OPTIONS]
        )
        answer = await self.ask(f"Choose database option (1-{len(DATABASE_OPTIONS)}): ")
        return parse_choice(answer, DATABASE_OPTIONS, DATABASE_DEFAULT)

    async def auth_enabled(self) -> bool:
        self._print_menu(
            "Authentication configuration:",
            ["Enable authentication (recommended)", "Skip authentication setup"],
        )
        answer = await self.ask(f"Choose auth option (1-{len(AUTH_OPTIONS)}): ")
        return parse_choice(answer, AUTH_OPTIONS, AUTH_DEFAULT)

    # -- Whole questionnaire -------------------------------------------------

    async def collect(self) -> ScaffoldRequest:
        """Ask every question in order and return the validated request.

        Raises:
            ProjectNameRequiredError: If the project name is blank.  No
                further questions are asked in that case.
            InvalidProjectNameError: If the project name contains a path
                separator or is "." or "..".
        """
        name = await self.project_name()
        description = await self.description()
        kind = await self.template_kind()
        database = await self.database_choice()
        auth = await self.auth_enabled()
        return ScaffoldRequest(
            project_name=name,
            description=description,
            template_kind=kind,
            database_choice=database,
            auth_enabled=auth,
        )
