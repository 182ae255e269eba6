"""Project directory creation and manifest output.

Creates the project directory, moves the process into it, and writes the
challenge as ``package.json`` together with the derived
``devrando.config.json``.
"""

from __future__ import annotations

import os
from pathlib import Path

from create_rando_app.config import Config
from create_rando_app.models import Challenge
from create_rando_app.utils import console, save_json


class ProjectExistsError(Exception):
    """Raised when the target project path is already taken.

    This is a benign cancellation, not a failure.
    """

    def __init__(self, project_name: str):
        self.project_name = project_name
        super().__init__(f"Project directory '{project_name}' already exists")


class ProjectMaterializer:
    """Turns a ``Challenge`` into files on disk.

    ``create_directory`` changes the process working directory into the new
    project; every later step (manifests, git, install) runs relative to it.
    """

    def __init__(self, config: Config | None = None) -> None:
        self.config = config or Config()

    def create_directory(self, project_name: str) -> Path:
        """Create ``./project_name`` and ``chdir`` into it.

        Returns:
            The absolute path of the new directory.

        Raises:
            ProjectExistsError: If anything already exists at that path.
            OSError: For any other creation failure.
        """
        target = Path(project_name)
        with console.status("[cyan]Creating project directory[/cyan]", spinner="dots"):
            try:
                target.mkdir()
            except FileExistsError as exc:
                raise ProjectExistsError(project_name) from exc

        project_dir = target.resolve()
        os.chdir(project_dir)
        console.print(
            f"[bold bright_green]Project directory '{project_name}' created[/bold bright_green]"
        )
        return project_dir

    async def write_manifests(self, challenge: Challenge, directory: Path | None = None) -> None:
        """Write ``package.json`` and ``devrando.config.json``.

        Args:
            challenge: The fetched challenge.
            directory: Where to write; defaults to the current directory.
        """
        base = directory or Path.cwd()

        with console.status(f"Creating {self.config.manifest_filename}", spinner="dots"):
            await save_json(challenge.to_manifest(), base / self.config.manifest_filename)
        console.print(
            f"[bold bright_green]{self.config.manifest_filename} created[/bold bright_green]"
        )

        with console.status(f"Creating {self.config.metadata_filename}", spinner="dots"):
            await save_json(challenge.metadata_record(), base / self.config.metadata_filename)
        console.print(
            f"[bold bright_green]{self.config.metadata_filename} created[/bold bright_green]"
        )
