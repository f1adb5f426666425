"""Check results shared by the security checker and the setup verifier."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field
from rich.console import Console
from rich.table import Table

from c2c_kit.utils import colorize


class CheckStatus(str, Enum):
    PASSED = "passed"
    WARNING = "warning"
    FAILED = "failed"
    INFO = "info"


_STATUS_STYLES: dict[CheckStatus, str] = {
    CheckStatus.PASSED: "green",
    CheckStatus.WARNING: "yellow",
    CheckStatus.FAILED: "red",
    CheckStatus.INFO: "blue",
}


class CheckResult(BaseModel):
    """A single check outcome."""

    category: str = Field(..., description="Group the check belongs to, e.g. 'Database'")
    status: CheckStatus
    message: str = Field(..., description="Human-readable result")


class CheckReport(BaseModel):
    """Ordered collection of check results with per-status counts."""

    checks: list[CheckResult] = Field(default_factory=list)

    def add(self, category: str, status: CheckStatus | str, message: str) -> CheckResult:
        result = CheckResult(category=category, status=CheckStatus(status), message=message)
        self.checks.append(result)
        return result

    def _count(self, status: CheckStatus) -> int:
        return sum(1 for check in self.checks if check.status == status)

    @property
    def total(self) -> int:
        return len(self.checks)

    @property
    def passed(self) -> int:
        return self._count(CheckStatus.PASSED)

    @property
    def warnings(self) -> int:
        return self._count(CheckStatus.WARNING)

    @property
    def failed(self) -> int:
        return self._count(CheckStatus.FAILED)

    @property
    def ok(self) -> bool:
        """``True`` when no check failed (warnings are allowed)."""
        return self.failed == 0

    def by_category(self) -> dict[str, list[CheckResult]]:
        """Group results by category, keeping first-seen category order."""
        grouped: dict[str, list[CheckResult]] = {}
        for check in self.checks:
            grouped.setdefault(check.category, []).append(check)
        return grouped

    def find(self, category: str) -> list[CheckResult]:
        return [check for check in self.checks if check.category == category]

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------

    def print_report(self, title: str, console: Console | None = None) -> None:
        """Pretty-print the results as a Rich table followed by the totals."""
        out = console if console is not None else Console()

        table = Table(title=title, show_lines=False)
        table.add_column("Status", style="bold", width=9)
        table.add_column("Category", width=26)
        table.add_column("Result")

        for category, checks in self.by_category().items():
            for check in checks:
                style = _STATUS_STYLES[check.status]
                table.add_row(
                    colorize(check.status.value.upper(), style),
                    colorize(category, ""),
                    colorize(check.message, ""),
                )

        out.print(table)
        out.print(
            f"\n[bold]Total checks:[/bold] {self.total}  |  "
            f"[green]Passed: {self.passed}[/green]  |  "
            f"[yellow]Warnings: {self.warnings}[/yellow]  |  "
            f"[red]Failed: {self.failed}[/red]\n"
        )
