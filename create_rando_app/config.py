"""create-rando-app configuration.

Centralised, typed configuration for the scaffolder. All settings use
Pydantic v2 models so they can be validated at construction time and
serialised to/from JSON or environment variables without boiler-plate.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

DEFAULT_API_URL = "https://dev-rando.vercel.app/api/trpc/challenge.getCurrentChallenge"


class GitConfig(BaseModel):
    """Settings for the optional repository initialisation step."""

    default_branch: str = Field(default="main", min_length=1)
    commit_message: str = Field(default="Initial commit: Add .gitignore")
    ignore_filename: str = Field(default=".gitignore")
    ignore_content: str = Field(default="node_modules\n")


class InstallerConfig(BaseModel):
    """Settings for the package-manager install step.

    ``--force`` is required: the randomised dependency set is not guaranteed
    to resolve at minor/patch granularity.
    """

    command: str = Field(default="npm", min_length=1)
    args: list[str] = Field(default_factory=lambda: ["install", "--force"])

    @property
    def argv(self) -> list[str]:
        """Full command line as passed to the subprocess."""
        return [self.command, *self.args]

    @property
    def display(self) -> str:
        return " ".join(self.argv)


class Config(BaseModel):
    """Global create-rando-app configuration.

    Instances are typically created once by the CLI entry point and then
    passed through the rest of the system.
    """

    api_url: str = Field(default=DEFAULT_API_URL)
    request_timeout: float | None = Field(
        default=None, gt=0, description="HTTP timeout in seconds; None waits indefinitely"
    )
    default_project_name: str = Field(default="my-rando-app")
    manifest_filename: str = Field(default="package.json")
    metadata_filename: str = Field(default="devrando.config.json")
    git: GitConfig = Field(default_factory=GitConfig)
    installer: InstallerConfig = Field(default_factory=InstallerConfig)

    # ------------------------------------------------------------------
    # Serialisation helpers
    # ------------------------------------------------------------------

    def save(self, path: Path) -> Path:
        """Persist the configuration to a JSON file.

        Args:
            path: Destination file.

        Returns:
            The path where the file was written.
        """
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(self.model_dump_json(indent=2), encoding="utf-8")
        return target

    @classmethod
    def load(cls, path: Path) -> "Config":
        """Load a previously-saved configuration from JSON."""
        raw = Path(path).read_text(encoding="utf-8")
        return cls.model_validate_json(raw)

    @classmethod
    def from_env(cls) -> "Config":
        """Build a ``Config`` from environment variables.

        Recognised variables (all optional):
            RANDO_API_URL, RANDO_PROJECT_NAME, RANDO_PACKAGE_MANAGER,
            RANDO_GIT_BRANCH, RANDO_REQUEST_TIMEOUT.
        """
        kwargs: dict[str, Any] = {}
        if os.environ.get("RANDO_API_URL"):
            kwargs["api_url"] = os.environ["RANDO_API_URL"]
        if os.environ.get("RANDO_PROJECT_NAME"):
            kwargs["default_project_name"] = os.environ["RANDO_PROJECT_NAME"]
        if os.environ.get("RANDO_REQUEST_TIMEOUT"):
            kwargs["request_timeout"] = float(os.environ["RANDO_REQUEST_TIMEOUT"])

        git_kwargs: dict[str, Any] = {}
        if os.environ.get("RANDO_GIT_BRANCH"):
            git_kwargs["default_branch"] = os.environ["RANDO_GIT_BRANCH"]

        installer_kwargs: dict[str, Any] = {}
        if os.environ.get("RANDO_PACKAGE_MANAGER"):
            installer_kwargs["command"] = os.environ["RANDO_PACKAGE_MANAGER"]

        return cls(
            git=GitConfig(**git_kwargs),
            installer=InstallerConfig(**installer_kwargs),
            **kwargs,
        )
