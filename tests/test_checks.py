"""Unit tests for c2c_kit.checks.

Tests cover:
- CheckReport counters and the ok flag
- Grouping by category
- Table rendering
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from c2c_kit.checks import CheckReport, CheckStatus


@pytest.fixture
def report() -> CheckReport:
    report = CheckReport()
    report.add("Database", CheckStatus.PASSED, "Schema exists")
    report.add("Database", CheckStatus.WARNING, "No seed file")
    report.add("Templates", "failed", "Template [x] missing")
    report.add("API routes", CheckStatus.INFO, "No API routes found")
    return report


@pytest.mark.unit
class TestCheckReport:
    def test_counts(self, report):
        assert report.total == 4
        assert report.passed == 1
        assert report.warnings == 1
        assert report.failed == 1
        assert not report.ok

    def test_empty_report_is_ok(self):
        assert CheckReport().ok

    def test_warnings_do_not_fail(self):
        report = CheckReport()
        report.add("x", CheckStatus.WARNING, "careful")
        assert report.ok

    def test_status_strings_are_coerced(self, report):
        assert report.checks[2].status is CheckStatus.FAILED

    def test_unknown_status_rejected(self):
        with pytest.raises(ValueError):
            CheckReport().add("x", "bogus", "y")

    def test_by_category_keeps_order(self, report):
        assert list(report.by_category()) == ["Database", "Templates", "API routes"]
        assert len(report.find("Database")) == 2
        assert report.find("Nope") == []

    def test_print_report(self, report, console):
        report.print_report("Results", console=console)
        output = console.file.getvalue()
        assert "Results" in output
        assert "Template [x] missing" in output
        assert "Total checks: 4" in output
        assert "Failed: 1" in output

    def test_result_requires_message(self):
        from c2c_kit.checks import CheckResult

        with pytest.raises(ValidationError):
            CheckResult(category="x", status=CheckStatus.PASSED)
