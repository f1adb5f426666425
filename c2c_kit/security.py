"""Security checks for an application built on the starter kit.

Scans the project directory for common mistakes: missing or leaky env files,
risky dependencies, tables without row level security, missing auth
middleware, world-readable secrets, hard-coded API keys and unauthenticated
API routes.  Every finding is recorded in a :class:`CheckReport`.
"""

from __future__ import annotations

import asyncio
import json
import re
import stat
from pathlib import Path

from rich.console import Console

from c2c_kit.checks import CheckReport, CheckStatus
from c2c_kit.utils import colorize, print_banner, print_error, print_info, run_command

# ---------------------------------------------------------------------------
# Patterns
# ---------------------------------------------------------------------------

_ENV_SECRET_PATTERNS = [
    re.compile(r"password\s*=\s*['\"][^'\"]+['\"]", re.IGNORECASE),
    re.compile(r"secret\s*=\s*['\"][^'\"]+['\"]", re.IGNORECASE),
    re.compile(r"key\s*=\s*['\"][^'\"]+['\"]", re.IGNORECASE),
    re.compile(r"token\s*=\s*['\"][^'\"]+['\"]", re.IGNORECASE),
]

_SOURCE_KEY_PATTERNS = [
    re.compile(r"sk_[a-zA-Z0-9]{24}"),  # Stripe secret key
    re.compile(r"pk_[a-zA-Z0-9]{24}"),  # Stripe publishable key
    re.compile(r"AIza[a-zA-Z0-9]{35}"),  # Google API key
    re.compile(r"[a-zA-Z0-9]{32}"),  # generic 32-char token
]

RISKY_PACKAGES = ("lodash", "moment", "jquery", "express", "mongoose")
AUTH_COMPONENTS = ("AuthProvider", "LoginForm", "SignupForm")
SENSITIVE_FILES = (".env", ".env.local", ".env.production")
SOURCE_EXTENSIONS = {".ts", ".tsx", ".js", ".jsx"}

_MAX_SAFE_MODE = 0o644


def collect_source_files(root: Path) -> list[Path]:
    """Recursively collect JS/TS sources, skipping hidden dirs and node_modules."""
    results: list[Path] = []
    if not root.is_dir():
        return results
    for child in sorted(root.iterdir()):
        if child.is_dir():
            if child.name.startswith(".") or child.name == "node_modules":
                continue
            results.extend(collect_source_files(child))
        elif child.is_file() and child.suffix in SOURCE_EXTENSIONS:
            results.append(child)
    return results


def _read(path: Path) -> str:
    return path.read_text(encoding="utf-8", errors="replace")


def _relative(path: Path, root: Path) -> str:
    try:
        return path.relative_to(root).as_posix()
    except ValueError:
        return str(path)


# ---------------------------------------------------------------------------
# SecurityChecker
# ---------------------------------------------------------------------------


class SecurityChecker:
    """Runs every security check against *project_dir*."""

    def __init__(self, project_dir: str | Path, console: Console | None = None) -> None:
        self.root = Path(project_dir)
        self.console = console
        self.report = CheckReport()

    async def run(self) -> CheckReport:
        print_banner("C2C Community Starter Kit - Security Check", console=self.console)

        self.check_environment()
        await self.check_dependencies()
        self.check_database()
        self.check_authentication()
        self.check_file_permissions()
        self.check_sensitive_data()
        self.check_api_security()
        return self.report

    # -- Individual checks ---------------------------------------------------

    def check_environment(self) -> None:
        print_info("Checking environment variables...", console=self.console)
        env_file = self.root / ".env.local"
        if not env_file.is_file():
            self.report.add("Environment file", CheckStatus.FAILED, ".env.local file not found")
            return

        if not (self.root / ".env.example").is_file():
            self.report.add("Environment example", CheckStatus.WARNING, ".env.example file not found")

        content = _read(env_file)
        if any(pattern.search(content) for pattern in _ENV_SECRET_PATTERNS):
            self.report.add(
                "Hardcoded secrets",
                CheckStatus.WARNING,
                "Potential hardcoded secrets found in .env.local",
            )

        self.report.add(
            "Environment variables", CheckStatus.PASSED, "Environment variables configured correctly"
        )

    async def check_dependencies(self) -> None:
        print_info("Checking dependencies...", console=self.console)
        manifest = self.root / "package.json"
        if not manifest.is_file():
            self.report.add("Package.json", CheckStatus.FAILED, "package.json file not found")
            return

        try:
            data = json.loads(_read(manifest))
        except json.JSONDecodeError:
            self.report.add("Package.json", CheckStatus.FAILED, "package.json is not valid JSON")
            return
        if not isinstance(data, dict):
            data = {}

        dependencies: dict[str, object] = {}
        for section in ("dependencies", "devDependencies"):
            value = data.get(section)
            if isinstance(value, dict):
                dependencies.update(value)
        for package in RISKY_PACKAGES:
            if package in dependencies:
                self.report.add(
                    "Vulnerable packages",
                    CheckStatus.WARNING,
                    f"Package {package} may have security vulnerabilities",
                )

        try:
            returncode, _, _ = await run_command(["npm", "audit"], cwd=self.root)
        except OSError:
            returncode = None

        if returncode == 0:
            self.report.add("Dependencies", CheckStatus.PASSED, "No known vulnerabilities found")
        else:
            self.report.add(
                "Dependencies", CheckStatus.WARNING, "Some dependencies may have vulnerabilities"
            )

    def check_database(self) -> None:
        print_info("Checking database security...", console=self.console)
        migrations = self.root / "supabase" / "migrations"
        if not migrations.is_dir():
            self.report.add("Database schema", CheckStatus.WARNING, "No database schema found")
            return

        has_rls = False
        for sql_file in sorted(migrations.glob("*.sql")):
            content = _read(sql_file)
            if "ROW LEVEL SECURITY" in content or "CREATE POLICY" in content:
                has_rls = True
                break

        if has_rls:
            self.report.add("Database RLS", CheckStatus.PASSED, "Row Level Security policies found")
        else:
            self.report.add("Database RLS", CheckStatus.WARNING, "No Row Level Security policies found")

    def check_authentication(self) -> None:
        print_info("Checking authentication...", console=self.console)
        middleware = self.root / "middleware.ts"
        if middleware.is_file():
            content = _read(middleware)
            if "auth" in content or "session" in content:
                self.report.add(
                    "Authentication middleware", CheckStatus.PASSED, "Authentication middleware found"
                )
            else:
                self.report.add(
                    "Authentication middleware",
                    CheckStatus.WARNING,
                    "Authentication middleware may be missing",
                )
        else:
            self.report.add(
                "Authentication middleware", CheckStatus.WARNING, "No middleware.ts file found"
            )

        found = sum(
            1
            for component in AUTH_COMPONENTS
            if (self.root / "components" / f"{component}.tsx").is_file()
            or (self.root / "app" / "components" / f"{component}.tsx").is_file()
        )
        if found:
            self.report.add(
                "Authentication components",
                CheckStatus.PASSED,
                f"{found} authentication components found",
            )
        else:
            self.report.add(
                "Authentication components", CheckStatus.WARNING, "No authentication components found"
            )

    def check_file_permissions(self) -> None:
        print_info("Checking file permissions...", console=self.console)
        for name in SENSITIVE_FILES:
            path = self.root / name
            if not path.exists():
                continue
            try:
                mode = stat.S_IMODE(path.stat().st_mode)
            except OSError:
                self.report.add("File permissions", CheckStatus.FAILED, f"Cannot check permissions for {name}")
                continue

            if mode & ~_MAX_SAFE_MODE:
                self.report.add(
                    "File permissions",
                    CheckStatus.WARNING,
                    f"File {name} has overly permissive permissions ({oct(mode)})",
                )
            else:
                self.report.add("File permissions", CheckStatus.PASSED, f"File {name} has correct permissions")

    def check_sensitive_data(self) -> None:
        print_info("Checking for sensitive data...", console=self.console)
        found = False
        for path in collect_source_files(self.root):
            content = _read(path)
            if any(pattern.search(content) for pattern in _SOURCE_KEY_PATTERNS):
                self.report.add(
                    "Sensitive data",
                    CheckStatus.FAILED,
                    f"Potential API key found in {_relative(path, self.root)}",
                )
                found = True

        if not found:
            self.report.add("Sensitive data", CheckStatus.PASSED, "No hardcoded API keys found")

    def check_api_security(self) -> None:
        print_info("Checking API security...", console=self.console)
        api_dir = self.root / "app" / "api"
        if not api_dir.is_dir():
            self.report.add("API routes", CheckStatus.INFO, "No API routes found")
            return

        has_auth_checks = any(
            "auth" in content or "session" in content or "user" in content
            for content in (_read(path) for path in collect_source_files(api_dir))
        )
        if has_auth_checks:
            self.report.add("API security", CheckStatus.PASSED, "API routes have authentication checks")
        else:
            self.report.add("API security", CheckStatus.WARNING, "API routes may lack authentication checks")


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def print_verdict(report: CheckReport, console: Console | None = None) -> None:
    out = console if console is not None else Console()
    if report.failed:
        out.print(colorize("Critical issues found! Please fix these before deploying.", "bold red"))
    elif report.warnings:
        out.print(colorize("Some warnings found. Consider addressing these for better security.", "yellow"))
    else:
        out.print(colorize("All security checks passed! Your application looks secure.", "green"))


def check_security(
    project_dir: str | Path | None = None,
    console: Console | None = None,
    err_console: Console | None = None,
) -> int:
    """Entry point for ``c2c-kit check-security``.  Returns 1 if any check failed."""
    checker = SecurityChecker(project_dir or Path.cwd(), console=console)
    try:
        report = asyncio.run(checker.run())
    except Exception as exc:
        print_error(f"Security check failed: {exc}", console=err_console)
        return 1

    report.print_report("Security Check Results", console=console)
    print_verdict(report, console=console)
    return 0 if report.ok else 1
