"""Shared utility functions for create-rando-app.

Provides JSON output, the recursive-delete helper used by cleanup, and the
Rich-based console helpers every step reports through.
"""

from __future__ import annotations

import asyncio
import json
import os
import shutil
from collections.abc import Callable
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.markup import escape
from rich.text import Text

console = Console()

# ---------------------------------------------------------------------------
# JSON I/O
# ---------------------------------------------------------------------------


def dump_json(data: dict[str, Any] | list[Any]) -> str:
    """Serialise *data* with 2-space indentation and no trailing newline."""
    return json.dumps(data, indent=2, ensure_ascii=False)


async def save_json(data: dict[str, Any] | list[Any], path: str | Path) -> None:
    """Save data as pretty-printed JSON.

    The write is performed in a thread-pool executor to avoid blocking the
    event loop. Parent directories are NOT created: callers write into a
    directory they just made.
    """
    file_path = Path(path)
    content = dump_json(data)

    loop = asyncio.get_running_loop()
    await loop.run_in_executor(None, file_path.write_text, content, "utf-8")


# ---------------------------------------------------------------------------
# Recursive delete
# ---------------------------------------------------------------------------


def _native_remove(path: Path) -> None:
    shutil.rmtree(path)


def _walk_remove(path: Path) -> None:
    """Remove *path* by hand: unlink files and links, recurse into directories.

    Symlinked directories are unlinked rather than followed.
    """
    with os.scandir(path) as entries:
        for entry in entries:
            entry_path = Path(entry.path)
            if entry.is_dir(follow_symlinks=False):
                _walk_remove(entry_path)
            else:
                os.unlink(entry_path)
    os.rmdir(path)


def select_remover() -> Callable[[Path], None]:
    """Pick the recursive-delete implementation for this platform.

    ``shutil.rmtree`` is used when it is immune to symlink races (the
    fd-based implementation); otherwise the manual ``scandir`` walk.
    """
    if getattr(shutil.rmtree, "avoids_symlink_attacks", False):
        return _native_remove
    return _walk_remove


def remove_tree(path: str | Path) -> None:
    """Recursively delete the directory at *path*.

    Raises:
        OSError: If any entry cannot be removed.
    """
    select_remover()(Path(path))


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------

BANNER = r"""
    ____                _         ____                _         _
   / ___|_ __ ___  __ _| |_ ___  |  _ \ __ _ _ __   __| | ___   / \   _ __  _ __
  | |   | '__/ _ \/ _` | __/ _ \ | |_) / _` | '_ \ / _` |/ _ \ / _ \ | '_ \| '_ \
  | |___| | |  __/ (_| | ||  __/ |  _ < (_| | | | | (_| | (_) / ___ \| |_) | |_) |
   \____|_|  \___|\__,_|\__\___| |_| \_\__,_|_| |_|\__,_|\___/_/   \_\ .__/| .__/
                                                                      |_|   |_|
"""

RAINBOW: list[tuple[int, int, int]] = [
    (255, 0, 0),
    (255, 127, 0),
    (255, 255, 0),
    (0, 255, 0),
    (0, 0, 255),
    (75, 0, 130),
    (143, 0, 255),
]


def rainbow_gradient(count: int) -> list[tuple[int, int, int]]:
    """Return *count* RGB colours interpolated across the rainbow.

    Examples::

        rainbow_gradient(1) -> [(255, 0, 0)]
        len(rainbow_gradient(50)) -> 50
    """
    colors: list[tuple[int, int, int]] = []
    for i in range(count):
        position = (i / count) * (len(RAINBOW) - 1)
        start = int(position)
        end = min(start + 1, len(RAINBOW) - 1)
        factor = position - start
        colors.append(
            tuple(  # type: ignore[misc]
                round(a + factor * (b - a)) for a, b in zip(RAINBOW[start], RAINBOW[end])
            )
        )
    return colors


def print_banner() -> None:
    """Print the rainbow ASCII-art banner and greeting."""
    text = Text()
    colors = rainbow_gradient(len(BANNER))
    for char, (r, g, b) in zip(BANNER, colors):
        if char in (" ", "\n"):
            text.append(char)
        else:
            text.append(char, style=f"rgb({r},{g},{b})")
    console.print(text)
    console.print("[bold yellow]Welcome to Dev Rando![/bold yellow]\n")


def print_success(message: str) -> None:
    """Print a green success message."""
    console.print(f"[bold bright_green]{escape(message)}[/bold bright_green]")


def print_error(message: str) -> None:
    """Print a red error message."""
    console.print(f"[bold red]{escape(message)}[/bold red]")


def print_warning(message: str) -> None:
    """Print a yellow warning message."""
    console.print(f"[bold yellow]{escape(message)}[/bold yellow]")
