"""Setup verification for a starter-kit checkout.

Walks the expected layout of the kit (config files, example app, docs,
templates, GitHub community files) and records a :class:`CheckReport`.
Nothing here raises for a broken checkout; every problem becomes a failed
or warning check.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional

from rich.console import Console

from c2c_kit.checks import CheckReport, CheckStatus
from c2c_kit.utils import colorize, load_json, print_banner, print_error, print_info

KIT_PACKAGE_NAME = "c2c-community-starter"
KIT_TITLE = "C2C Community Starter Kit"

REQUIRED_FILES = (
    "package.json",
    "tsconfig.json",
    "next.config.js",
    "tailwind.config.js",
    ".env.example",
    ".gitignore",
    "LICENSE",
    ".prettierrc",
    ".eslintrc.json",
    "postcss.config.js",
    "README.md",
)

REQUIRED_DIRS = ("docs", "example-app", "templates", "scripts", ".github", "public")

EXAMPLE_APP_FILES = (
    "example-app/app/layout.tsx",
    "example-app/app/page.tsx",
    "example-app/app/globals.css",
    "example-app/lib/supabase/client.ts",
    "example-app/lib/supabase/server.ts",
)

REQUIRED_DOCS = (
    "docs/00-WELCOME.md",
    "docs/01-GETTING-STARTED.md",
    "docs/02-MISSION-ALIGNMENT.md",
    "docs/03-DATABASE-DESIGN.md",
    "docs/04-BUILDING-YOUR-FIRST-APP.md",
    "docs/05-SECURITY-BASICS.md",
    "docs/06-NEXT-STEPS.md",
    "docs/EXAMPLES.md",
)

TEMPLATE_DIRS = (
    "templates/basic-crud-app",
    "templates/simple-dashboard",
    "templates/plugin-starter",
)

GITHUB_FILES = (
    ".github/CONTRIBUTING.md",
    ".github/CODE_OF_CONDUCT.md",
    ".github/ISSUE_TEMPLATE/bug_report.md",
    ".github/ISSUE_TEMPLATE/feature_request.md",
    ".github/ISSUE_TEMPLATE/documentation.md",
)


def _section(data: dict[str, Any], key: str) -> dict[str, Any]:
    """``data[key]`` if it is a JSON object, else an empty dict."""
    value = data.get(key)
    return value if isinstance(value, dict) else {}


class SetupVerifier:
    """Verifies that a kit checkout at *root* is complete."""

    def __init__(self, root: str | Path, console: Console | None = None) -> None:
        self.root = Path(root)
        self.console = console
        self.report = CheckReport()

    def run(self) -> CheckReport:
        print_banner("C2C Community Starter Kit - Complete Setup Test", console=self.console)

        self.check_project_structure()
        self.check_configuration()
        self.check_dependencies()
        self.check_database()
        self.check_application()
        self.check_documentation()
        self.check_templates()
        self.check_github()
        return self.report

    # -- Helpers ------------------------------------------------------------

    def _expect_file(self, category: str, rel: str, label: str, missing: CheckStatus = CheckStatus.FAILED) -> bool:
        if (self.root / rel).is_file():
            self.report.add(category, CheckStatus.PASSED, f"{label} {rel} exists")
            return True
        self.report.add(category, missing, f"{label} {rel} missing")
        return False

    def _load_json(self, rel: str) -> Optional[dict[str, Any]]:
        """Parse *rel* as a JSON object; ``None`` if absent, raises on bad JSON."""
        path = self.root / rel
        if not path.is_file():
            return None
        return load_json(path)

    # -- Categories ---------------------------------------------------------

    def check_project_structure(self) -> None:
        print_info("Testing project structure...", console=self.console)
        for rel in REQUIRED_FILES:
            self._expect_file("Project Structure", rel, "Required file")
        for rel in REQUIRED_DIRS:
            if (self.root / rel).is_dir():
                self.report.add("Project Structure", CheckStatus.PASSED, f"Required directory {rel} exists")
            else:
                self.report.add("Project Structure", CheckStatus.FAILED, f"Required directory {rel} missing")

    def check_configuration(self) -> None:
        print_info("Testing configuration files...", console=self.console)
        category = "Configuration"

        try:
            manifest = self._load_json("package.json")
        except (json.JSONDecodeError, UnicodeDecodeError):
            self.report.add(category, CheckStatus.FAILED, "Invalid package.json format")
            manifest = None
        if manifest is not None:
            if manifest.get("name") == KIT_PACKAGE_NAME:
                self.report.add(category, CheckStatus.PASSED, "Package name is correct")
            else:
                self.report.add(category, CheckStatus.WARNING, "Package name may need updating")

            if _section(manifest, "scripts").get("dev"):
                self.report.add(category, CheckStatus.PASSED, "Development script exists")
            else:
                self.report.add(category, CheckStatus.FAILED, "Development script missing")

            if _section(manifest, "dependencies").get("next"):
                self.report.add(category, CheckStatus.PASSED, "Next.js dependency exists")
            else:
                self.report.add(category, CheckStatus.FAILED, "Next.js dependency missing")

        try:
            tsconfig = self._load_json("tsconfig.json")
        except (json.JSONDecodeError, UnicodeDecodeError):
            self.report.add(category, CheckStatus.FAILED, "Invalid tsconfig.json format")
            tsconfig = None
        if tsconfig is not None:
            if _section(tsconfig, "compilerOptions").get("strict"):
                self.report.add(category, CheckStatus.PASSED, "TypeScript strict mode enabled")
            else:
                self.report.add(category, CheckStatus.WARNING, "TypeScript strict mode not enabled")

        if (self.root / "tailwind.config.js").is_file():
            self.report.add(category, CheckStatus.PASSED, "Tailwind CSS configuration exists")
        else:
            self.report.add(category, CheckStatus.FAILED, "Tailwind CSS configuration missing")

    def check_dependencies(self) -> None:
        print_info("Testing dependencies...", console=self.console)
        if (self.root / "node_modules").is_dir():
            self.report.add("Dependencies", CheckStatus.PASSED, "Dependencies installed")
        else:
            self.report.add("Dependencies", CheckStatus.WARNING, "Dependencies not installed (run pnpm install)")

        if (self.root / "pnpm-lock.yaml").is_file():
            self.report.add("Dependencies", CheckStatus.PASSED, "pnpm lock file exists")
        else:
            self.report.add("Dependencies", CheckStatus.WARNING, "pnpm lock file missing")

    def check_database(self) -> None:
        print_info("Testing database setup...", console=self.console)
        if (self.root / "supabase").is_dir():
            self.report.add("Database", CheckStatus.PASSED, "Supabase configuration exists")
        else:
            self.report.add("Database", CheckStatus.WARNING, "Supabase configuration missing")

        schema = self.root / "example-app" / "database" / "schema.sql"
        if schema.is_file():
            self.report.add("Database", CheckStatus.PASSED, "Database schema exists")
            if "ROW LEVEL SECURITY" in schema.read_text(encoding="utf-8", errors="replace"):
                self.report.add("Database", CheckStatus.PASSED, "Row Level Security policies found")
            else:
                self.report.add("Database", CheckStatus.WARNING, "No Row Level Security policies found")
        else:
            self.report.add("Database", CheckStatus.FAILED, "Database schema missing")

        if (self.root / "example-app" / "database" / "seed.sql").is_file():
            self.report.add("Database", CheckStatus.PASSED, "Database seed file exists")
        else:
            self.report.add("Database", CheckStatus.WARNING, "Database seed file missing")

    def check_application(self) -> None:
        print_info("Testing application build...", console=self.console)
        if not (self.root / "example-app").is_dir():
            self.report.add("Application", CheckStatus.FAILED, "Example application missing")
            return

        self.report.add("Application", CheckStatus.PASSED, "Example application exists")
        for rel in EXAMPLE_APP_FILES:
            self._expect_file("Application", rel, "Component")

    def check_documentation(self) -> None:
        print_info("Testing documentation...", console=self.console)
        for rel in REQUIRED_DOCS:
            self._expect_file("Documentation", rel, "Documentation")

        readme = self.root / "README.md"
        if readme.is_file():
            if KIT_TITLE in readme.read_text(encoding="utf-8", errors="replace"):
                self.report.add("Documentation", CheckStatus.PASSED, "README contains project information")
            else:
                self.report.add("Documentation", CheckStatus.WARNING, "README may need updating")

    def check_templates(self) -> None:
        print_info("Testing templates...", console=self.console)
        for rel in TEMPLATE_DIRS:
            if not (self.root / rel).is_dir():
                self.report.add("Templates", CheckStatus.FAILED, f"Template {rel} missing")
                continue
            self.report.add("Templates", CheckStatus.PASSED, f"Template {rel} exists")
            if (self.root / rel / "README.md").is_file():
                self.report.add("Templates", CheckStatus.PASSED, f"Template {rel} has README")
            else:
                self.report.add("Templates", CheckStatus.WARNING, f"Template {rel} missing README")

    def check_github(self) -> None:
        print_info("Testing GitHub setup...", console=self.console)
        for rel in GITHUB_FILES:
            self._expect_file("GitHub Setup", rel, "GitHub file")


def print_verdict(report: CheckReport, console: Console | None = None) -> None:
    out = console if console is not None else Console()
    if report.failed:
        out.print(colorize("Some tests failed. Please fix the issues before proceeding.", "bold red"))
    elif report.warnings:
        out.print(colorize("Setup is functional with some warnings. Consider addressing the warnings.", "yellow"))
    else:
        out.print(colorize("All tests passed! Your setup is complete and ready to use.", "green"))

    out.print()
    out.print(colorize("Next steps:", "blue"))
    for number, step in enumerate(
        (
            "Fix any failed tests",
            "Address warnings if possible",
            'Run "pnpm dev" to start development',
            "Check the documentation for guidance",
        ),
        start=1,
    ):
        out.print(colorize(f"{number}. {step}", "white"))


def verify_setup(
    root: str | Path | None = None,
    console: Console | None = None,
    err_console: Console | None = None,
) -> int:
    """Entry point for ``c2c-kit verify-setup``.  Returns 1 if any check failed."""
    verifier = SetupVerifier(root or Path.cwd(), console=console)
    try:
        report = verifier.run()
    except OSError as exc:
        print_error(f"Test suite failed: {exc}", console=err_console)
        return 1

    report.print_report("Setup Test Results", console=console)
    print_verdict(report, console=console)
    return 0 if report.ok else 1
