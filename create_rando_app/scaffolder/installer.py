"""Dependency installation via the system package manager.

Runs ``npm install --force`` in the project directory with stdout discarded
and stderr captured. SIGINT received while the install runs is forwarded to
the child and turned into ``InstallInterruptedError``.
"""

from __future__ import annotations

import asyncio
import signal
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from pathlib import Path

from create_rando_app.config import InstallerConfig
from create_rando_app.models import Challenge
from create_rando_app.utils import console

STDERR_TAIL_LINES = 20


class InstallError(Exception):
    """Raised when the package manager fails or cannot be started."""

    def __init__(
        self,
        message: str,
        command: str = "",
        returncode: int | None = None,
        stderr: str = "",
    ):
        self.command = command
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(message)


class InstallInterruptedError(InstallError):
    """Raised when the user interrupts a running install."""


@contextmanager
def forward_interrupt(
    process: asyncio.subprocess.Process,
    on_interrupt: Callable[[], None],
) -> Iterator[None]:
    """Forward SIGINT to *process* for the duration of the ``with`` block.

    The handler is removed on every exit path. On event loops without signal
    handler support (Windows, non-main threads) nothing is registered.
    """
    loop = asyncio.get_running_loop()

    def _handle() -> None:
        on_interrupt()
        if process.returncode is None:
            process.send_signal(signal.SIGINT)

    try:
        loop.add_signal_handler(signal.SIGINT, _handle)
    except (NotImplementedError, RuntimeError):
        installed = False
    else:
        installed = True

    try:
        yield
    finally:
        if installed:
            loop.remove_signal_handler(signal.SIGINT)


def _tail(text: str, lines: int = STDERR_TAIL_LINES) -> str:
    return "\n".join(text.strip().splitlines()[-lines:])


class DependencyInstaller:
    """Installs a challenge's dependencies, forcing past version conflicts."""

    def __init__(self, config: InstallerConfig | None = None) -> None:
        self.config = config or InstallerConfig()

    async def install(self, challenge: Challenge, cwd: str | Path | None = None) -> None:
        """Run the install command and wait for it to exit.

        Args:
            challenge: Supplies the dependency count shown while installing.
            cwd: Project directory; defaults to the current directory.

        Raises:
            InstallInterruptedError: If SIGINT arrived during the install.
            InstallError: If the command is missing or exits non-zero.
        """
        count = challenge.dependency_count
        command = self.config.display
        interrupted = asyncio.Event()

        with console.status(
            f"[bold bright_green]Installing {count} dependencies, "
            f"this will take a moment...[/bold bright_green]",
            spinner="grenade",
        ):
            try:
                process = await asyncio.create_subprocess_exec(
                    *self.config.argv,
                    stdin=asyncio.subprocess.DEVNULL,
                    stdout=asyncio.subprocess.DEVNULL,
                    stderr=asyncio.subprocess.PIPE,
                    cwd=str(cwd) if cwd else None,
                )
            except OSError as exc:
                console.print("[bold red]Failed to install dependencies[/bold red]")
                raise InstallError(f"Could not run {command}: {exc}", command=command) from exc

            with forward_interrupt(process, interrupted.set):
                _, stderr_bytes = await process.communicate()

        stderr = _tail((stderr_bytes or b"").decode("utf-8", errors="replace"))

        if interrupted.is_set():
            console.print("[bold red]Installation interrupted[/bold red]")
            raise InstallInterruptedError(
                "Installation interrupted",
                command=command,
                returncode=process.returncode,
                stderr=stderr,
            )

        if process.returncode != 0:
            console.print("[bold red]Failed to install dependencies[/bold red]")
            raise InstallError(
                f"{self.config.command} install exited with code {process.returncode}",
                command=command,
                returncode=process.returncode,
                stderr=stderr,
            )

        console.print("[bold bright_green]Dependencies installed successfully[/bold bright_green]")
