"""Dependency installation with a single package-manager fallback.

Implements the primary -> fallback -> manual chain:
1. Run ``<primary> install`` in the project directory
2. If it exits non-zero, times out, or cannot be started, run
   ``<fallback> install`` once
3. If that fails too, tell the user to install by hand

Output from the package manager is streamed straight to the terminal; only
the exit status is inspected.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from rich.console import Console

from c2c_kit.utils import print_info, print_success, print_warning, run_command


@dataclass
class InstallAttempt:
    """Record of one package-manager invocation."""

    package_manager: str
    returncode: Optional[int]
    error: str = ""

    @property
    def success(self) -> bool:
        return self.returncode == 0


@dataclass
class InstallResult:
    """Outcome of the install step."""

    success: bool
    package_manager: Optional[str] = None
    attempts: list[InstallAttempt] = field(default_factory=list)


class DependencyInstaller:
    """Installs a generated project's dependencies.

    Exactly two package managers are tried, in order.  Failures never raise;
    the caller inspects ``InstallResult.success``.
    """

    def __init__(
        self,
        primary: str = "pnpm",
        fallback: str = "npm",
        timeout: Optional[float] = None,
        console: Console | None = None,
    ) -> None:
        self.primary = primary
        self.fallback = fallback
        self.timeout = timeout
        self.console = console

    async def _attempt(self, package_manager: str, project_path: Path) -> InstallAttempt:
        try:
            returncode, _, stderr = await run_command(
                [package_manager, "install"],
                cwd=project_path,
                timeout=self.timeout,
                capture=False,
            )
        except OSError as exc:
            return InstallAttempt(package_manager=package_manager, returncode=None, error=str(exc))
        return InstallAttempt(package_manager=package_manager, returncode=returncode, error=stderr)

    async def install(self, project_path: str | Path) -> InstallResult:
        """Install dependencies in *project_path*, falling back once."""
        path = Path(project_path)
        result = InstallResult(success=False)

        print_info("Installing dependencies...", console=self.console)

        attempt = await self._attempt(self.primary, path)
        result.attempts.append(attempt)
        if attempt.success:
            result.success = True
            result.package_manager = self.primary
            print_success("Dependencies installed successfully", console=self.console)
            return result

        print_warning(
            f"Failed to install dependencies with {self.primary}, trying {self.fallback}...",
            console=self.console,
        )
        attempt = await self._attempt(self.fallback, path)
        result.attempts.append(attempt)
        if attempt.success:
            result.success = True
            result.package_manager = self.fallback
            print_success("Dependencies installed successfully", console=self.console)
            return result

        print_warning("Failed to install dependencies automatically", console=self.console)
        print_info(
            f'Please run "{self.primary} install" or "{self.fallback} install" '
            "in your project directory",
            console=self.console,
        )
        return result
