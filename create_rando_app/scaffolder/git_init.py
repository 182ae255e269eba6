"""Git repository initialisation for a freshly scaffolded project.

Writes the ignore-file, runs ``git init`` with a named default branch and
records a single commit containing only that file.
"""

import asyncio
from pathlib import Path

from create_rando_app.config import GitConfig
from create_rando_app.utils import console


class GitInitError(Exception):
    """Raised when any part of repository initialisation fails."""

    def __init__(self, message: str, command: str = "", stderr: str = ""):
        self.command = command
        self.stderr = stderr
        super().__init__(message)


async def _run_git(
    *args: str,
    cwd: str | Path | None = None,
    timeout: float | None = None,
) -> tuple[str, str]:
    """Run a git command asynchronously and return (stdout, stderr).

    Raises GitInitError if git is missing or the command exits non-zero.
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
        raise GitInitError(f"Could not run {cmd_str}: {exc}", command=cmd_str) from exc

    try:
        stdout_bytes, stderr_bytes = await asyncio.wait_for(
            process.communicate(), timeout=timeout
        )
    except asyncio.TimeoutError:
        process.kill()
        raise GitInitError(
            f"Git command timed out after {timeout}s: {cmd_str}",
            command=cmd_str,
        )

    stdout = stdout_bytes.decode("utf-8", errors="replace").strip()
    stderr = stderr_bytes.decode("utf-8", errors="replace").strip()

    if process.returncode != 0:
        raise GitInitError(
            f"Git command failed (exit {process.returncode}): {cmd_str}\n{stderr}",
            command=cmd_str,
            stderr=stderr,
        )

    return stdout, stderr


class GitInitializer:
    """Creates a repository with one commit holding the ignore-file."""

    def __init__(self, config: GitConfig | None = None):
        self.config = config or GitConfig()

    async def initialize(self, repo_path: str | Path | None = None) -> None:
        """Initialise a repository in *repo_path* (default: current directory).

        Raises:
            GitInitError: Wrapping whichever step failed. Callers treat this
                as non-fatal.
        """
        repo = Path(repo_path) if repo_path else Path.cwd()

        with console.status("[green]Initializing git repository[/green]", spinner="dots"):
            try:
                (repo / self.config.ignore_filename).write_text(
                    self.config.ignore_content, encoding="utf-8"
                )
                await _run_git("init", "-b", self.config.default_branch, cwd=repo)
                await _run_git("add", self.config.ignore_filename, cwd=repo)
                await _run_git("commit", "-m", self.config.commit_message, cwd=repo)
            except GitInitError as exc:
                console.print("[bold red]Failed to initialize git repository[/bold red]")
                raise GitInitError(
                    f"Git initialization failed: {exc}",
                    command=exc.command,
                    stderr=exc.stderr,
                ) from exc
            except OSError as exc:
                console.print("[bold red]Failed to initialize git repository[/bold red]")
                raise GitInitError(f"Git initialization failed: {exc}") from exc

        console.print("[bold bright_green]Git repository initialized[/bold bright_green]")
