"""Shared pytest fixtures for the C2C Kit test suite.

Provides reusable fixtures for:
- Template trees and working directories
- Scripted answers for the interactive prompts
- Consoles that record output
- Mock subprocess helpers
"""

from __future__ import annotations

import io
import json
from pathlib import Path
from typing import Any, Callable
from unittest.mock import AsyncMock, MagicMock

import pytest
from rich.console import Console

from c2c_kit.config import KitConfig


# ---------------------------------------------------------------------------
# Consoles
# ---------------------------------------------------------------------------

@pytest.fixture
def make_console() -> Callable[[], Console]:
    """Factory for plain-text consoles that write into a StringIO buffer."""
    def factory() -> Console:
        return Console(file=io.StringIO(), width=160, color_system=None, force_terminal=False)

    return factory


@pytest.fixture
def console(make_console) -> Console:
    return make_console()


# ---------------------------------------------------------------------------
# Template trees
# ---------------------------------------------------------------------------

TEMPLATE_MANIFEST: dict[str, Any] = {
    "name": "template",
    "version": "0.1.0",
    "description": "",
    "scripts": {"dev": "next dev"},
}

TEMPLATE_README = (
    "# {{PROJECT_NAME}}\n"
    "\n"
    "{{PROJECT_DESCRIPTION}}\n"
    "\n"
    "Run {{PROJECT_NAME}} with `pnpm dev`. Literal {{OTHER_TOKEN}} stays.\n"
)

BINARY_BLOB = bytes(range(256)) + b"{{PROJECT_NAME}}"


def build_template(root: Path) -> Path:
    """Create a basic-crud style template tree under *root* and return it."""
    root.mkdir(parents=True, exist_ok=True)
    (root / "package.json").write_text(json.dumps(TEMPLATE_MANIFEST, indent=2), encoding="utf-8")
    (root / "README.md").write_text(TEMPLATE_README, encoding="utf-8")
    components = root / "components"
    components.mkdir()
    (components / "ItemCard.tsx").write_text(
        "export function ItemCard() { return null }\n", encoding="utf-8"
    )
    (components / "ItemList.tsx").write_text(
        "export function ItemList() { return null }\n", encoding="utf-8"
    )
    nested = components / "ui" / "icons"
    nested.mkdir(parents=True)
    (nested / "logo.bin").write_bytes(BINARY_BLOB)
    (root / "empty-dir").mkdir()
    return root


@pytest.fixture
def templates_root(tmp_path: Path) -> Path:
    """A templates directory holding a ``basic-crud-app`` tree."""
    root = tmp_path / "templates"
    build_template(root / "basic-crud-app")
    return root


@pytest.fixture
def working_dir(tmp_path: Path) -> Path:
    """Directory the scaffolder creates projects in."""
    work = tmp_path / "work"
    work.mkdir()
    return work


@pytest.fixture
def kit_config(templates_root: Path, working_dir: Path) -> KitConfig:
    return KitConfig(templates_dir=templates_root, working_dir=working_dir)


# ---------------------------------------------------------------------------
# Scripted answers
# ---------------------------------------------------------------------------

class ScriptedAnswers:
    """Async ``ask`` callable that replays fixed answers and records prompts."""

    def __init__(self, answers: list[str]) -> None:
        self.answers = list(answers)
        self.prompts: list[str] = []

    async def __call__(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if not self.answers:
            raise AssertionError(f"Unexpected prompt: {prompt!r}")
        return self.answers.pop(0)


@pytest.fixture
def scripted_answers() -> Callable[..., ScriptedAnswers]:
    """Factory: ``scripted_answers("helper-app", "Test", "1", "1", "1")``."""
    def factory(*answers: str) -> ScriptedAnswers:
        return ScriptedAnswers(list(answers))

    return factory


# ---------------------------------------------------------------------------
# Mock Subprocess (generic)
# ---------------------------------------------------------------------------

@pytest.fixture
def mock_subprocess():
    """Mock asyncio subprocess for testing command execution.

    Returns a factory that creates mock subprocess instances with configurable
    stdout, stderr, and return codes.

    Usage:
        def test_command(mock_subprocess):
            proc = mock_subprocess(stdout="output", returncode=0)
            with patch("asyncio.create_subprocess_exec", return_value=proc):
                ...
    """
    def factory(
        stdout: str = "",
        stderr: str = "",
        returncode: int = 0,
    ) -> AsyncMock:
        mock_proc = AsyncMock()
        mock_proc.communicate = AsyncMock(
            return_value=(stdout.encode("utf-8"), stderr.encode("utf-8"))
        )
        mock_proc.returncode = returncode
        mock_proc.pid = 99999
        mock_proc.kill = MagicMock()
        mock_proc.wait = AsyncMock(return_value=returncode)
        return mock_proc

    return factory
