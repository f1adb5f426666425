"""Git repository initialisation for freshly generated projects."""

from __future__ import annotations

import asyncio
from pathlib import Path

from rich.console import Console

from c2c_kit.utils import print_info, print_success, print_warning


class GitError(Exception):
    """Raised when a git command fails."""

    def __init__(self, message: str, command: str = "", stderr: str = ""):
        self.command = command
        self.stderr = stderr
        super().__init__(message)


async def run_git(*args: str, cwd: str | Path | None = None) -> tuple[str, str]:
    """Run a git command asynchronously and return (stdout, stderr).

    Raises GitError if git cannot be started or exits with a non-zero code.
    """
    cmd = ["git"] + list(args)
    cmd_str = " ".join(cmd)

    try:
        process = await asyncio.create_subprocess_exec(
            *cmd,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            cwd=str(cwd) if cwd else None,
        )
    except OSError as exc:
        raise GitError(f"Could not run {cmd_str}: {exc}", command=cmd_str) from exc

    stdout_bytes, stderr_bytes = await process.communicate()
    stdout = (stdout_bytes or b"").decode("utf-8", errors="replace").strip()
    stderr = (stderr_bytes or b"").decode("utf-8", errors="replace").strip()

    if process.returncode != 0:
        raise GitError(
            f"Git command failed (exit {process.returncode}): {cmd_str}\n{stderr}",
            command=cmd_str,
            stderr=stderr,
        )

    return stdout, stderr


async def init_repository(
    project_path: str | Path,
    message: str,
    console: Console | None = None,
) -> bool:
    """Create a repository in *project_path* and commit everything in it.

    A failure at any step is reported as a warning; the project directory is
    left as it is.

    Returns:
        ``True`` if the initial commit was created.
    """
    path = Path(project_path)
    try:
        await run_git("init", cwd=path)
        await run_git("add", ".", cwd=path)
        await run_git("commit", "-m", message, cwd=path)
    except GitError as exc:
        print_warning("Failed to create initial git commit", console=console)
        if exc.stderr:
            print_info(exc.stderr.splitlines()[-1], console=console)
        print_info('Please run "git init" and "git commit" manually', console=console)
        return False

    print_success("Created initial git commit", console=console)
    return True
