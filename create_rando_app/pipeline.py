"""create-rando-app orchestrator.

Sequences one scaffolding run:

FETCH        -- GET the current challenge from the Dev Rando API.
MATERIALIZE  -- Create the project directory, write package.json and
                devrando.config.json.
VCS_INIT     -- (optional) git init + one commit with .gitignore. Non-fatal.
INSTALL      -- (optional) npm install --force.

Usage::

    create-rando-app
    create-rando-app my-app --no-git --skip-install
    python -m create_rando_app --yes
"""

from __future__ import annotations

import asyncio
import os
import sys
from dataclasses import dataclass, replace
from pathlib import Path

from pydantic import ValidationError
from rich.prompt import Confirm, Prompt

from create_rando_app.challenge_client import ChallengeClient, ChallengeFetchError
from create_rando_app.config import Config
from create_rando_app.models import Challenge, ProjectAnswers
from create_rando_app.scaffolder import (
    DependencyInstaller,
    GitInitError,
    GitInitializer,
    ProjectExistsError,
    ProjectMaterializer,
)
from create_rando_app.utils import (
    console,
    print_banner,
    print_error,
    print_success,
    print_warning,
    remove_tree,
)

EXIT_OK = 0
EXIT_FAILURE = 1

FORCE_NOTE = "** Note: you -must- use the '--force' flag for the rando to properly install! **"

# ---------------------------------------------------------------------------
# Session state & exceptions
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ScaffoldSession:
    """Everything cleanup needs to know about a partially-completed run.

    ``project_dir`` is only set once this run has created the directory.
    """

    answers: ProjectAnswers
    base_dir: Path
    project_dir: Path | None = None

    def with_project_dir(self, project_dir: Path) -> "ScaffoldSession":
        return replace(self, project_dir=project_dir)


class ScaffoldError(Exception):
    """Raised when a stage fails irrecoverably after the fetch succeeded."""

    def __init__(self, stage: str, session: ScaffoldSession, message: str) -> None:
        self.stage = stage
        self.session = session
        super().__init__(message)


# ---------------------------------------------------------------------------
# Orchestrator
# ---------------------------------------------------------------------------


class ScaffoldPipeline:
    """Drives a single run and owns the failure/cleanup policy.

    Attributes:
        config: Global configuration.
        client: Challenge API client.
        materializer: Creates the project directory and manifests.
        git: Repository initialiser.
        installer: Package-manager runner.
    """

    def __init__(
        self,
        config: Config | None = None,
        client: ChallengeClient | None = None,
        materializer: ProjectMaterializer | None = None,
        git: GitInitializer | None = None,
        installer: DependencyInstaller | None = None,
    ) -> None:
        self.config = config or Config()
        self.client = client or ChallengeClient(
            api_url=self.config.api_url,
            timeout=self.config.request_timeout,
        )
        self.materializer = materializer or ProjectMaterializer(self.config)
        self.git = git or GitInitializer(self.config.git)
        self.installer = installer or DependencyInstaller(self.config.installer)

    async def run(self, answers: ProjectAnswers) -> int:
        """Execute the run for *answers* and return the process exit status."""
        session = ScaffoldSession(answers=answers, base_dir=Path.cwd())

        try:
            challenge = await self._fetch()
        except ChallengeFetchError as exc:
            print_error("Failed to fetch challenge")
            print_error(f"Error: {exc}")
            return EXIT_FAILURE

        try:
            session = await self._execute(session, challenge)
        except ProjectExistsError as exc:
            print_error(str(exc))
            print_warning("Installation cancelled.")
            return EXIT_OK
        except ScaffoldError as exc:
            print_error("\nAn error occurred during the installation process:\n")
            print_error(str(exc))
            self.cleanup(exc.session)
            return EXIT_FAILURE

        self._print_next_steps(session.answers)
        return EXIT_OK

    # ------------------------------------------------------------------
    # Stages
    # ------------------------------------------------------------------

    async def _fetch(self) -> Challenge:
        with console.status(
            "[bold bright_green]Fetching challenge...[/bold bright_green]", spinner="dots"
        ):
            challenge = await self.client.fetch_current()
        print_success("Challenge fetched successfully")
        return challenge

    async def _execute(self, session: ScaffoldSession, challenge: Challenge) -> ScaffoldSession:
        answers = session.answers

        try:
            project_dir = self.materializer.create_directory(answers.project_name)
        except ProjectExistsError:
            raise
        except OSError as exc:
            print_error("Failed to create project directory")
            raise ScaffoldError("MATERIALIZE", session, str(exc)) from exc

        session = session.with_project_dir(project_dir)

        try:
            await self.materializer.write_manifests(challenge, project_dir)
        except Exception as exc:
            raise ScaffoldError("MATERIALIZE", session, str(exc)) from exc

        if answers.init_git:
            try:
                await self.git.initialize(project_dir)
            except GitInitError as exc:
                print_error(str(exc))
                print_warning("Continuing without git initialization...")

        print_success("Project setup in progress...")

        if answers.install_deps:
            try:
                await self.installer.install(challenge, cwd=project_dir)
            except Exception as exc:
                raise ScaffoldError("INSTALL", session, str(exc)) from exc

        return session

    # ------------------------------------------------------------------
    # Cleanup
    # ------------------------------------------------------------------

    def cleanup(self, session: ScaffoldSession) -> bool:
        """Best-effort removal of the project directory this run created.

        Returns:
            ``True`` if nothing is left behind, ``False`` if removal failed.
            Failure is reported but never raised.
        """
        print_warning("\nCleaning up...")
        project_dir = session.project_dir
        if project_dir is None:
            console.print("[dim]No project directory was created; nothing to remove.[/dim]")
            return True

        name = session.answers.project_name
        try:
            os.chdir(session.base_dir)
            if os.path.lexists(project_dir):
                remove_tree(project_dir)
        except OSError as exc:
            print_error(f"Failed to remove project folder: {exc}")
            print_warning(f"Please manually remove the '{name}' folder.")
            return False

        console.print(f"[bold cyan]Project folder '{name}' has been removed.[/bold cyan]")
        print_success("Cleanup complete!")
        return True

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    def _print_next_steps(self, answers: ProjectAnswers) -> None:
        install_cmd = self.config.installer.display

        if answers.install_deps:
            print_success("\nProject setup completed successfully!")
            print_success("\n Your Dev Rando challenge app is ready! \n")
            steps = [
                f"cd {answers.project_name}",
                "Examine the dependencies and start building with them",
                "Have fun!",
            ]
        else:
            print_warning(
                "\nDependencies not installed. You can install dependencies manually later."
            )
            print_success("\nProject setup completed successfully!")
            steps = [
                f"cd {answers.project_name}",
                f"Run '{install_cmd}' to install dependencies",
                "Examine the dependencies and start building with them",
                "Have fun!",
            ]

        print_success("Next steps:")
        for number, step in enumerate(steps, start=1):
            print_success(f"{number}. {step}")
            if step.startswith("Run "):
                print_success(FORCE_NOTE)
        console.print(f"[bold bright_red]{len(steps) + 1}. (Optional) Survive.[/bold bright_red]")


# ---------------------------------------------------------------------------
# Prompts
# ---------------------------------------------------------------------------


def _validated_name(name: str) -> str:
    """Return *name* unchanged if it is a valid project name, else raise ``ValueError``."""
    try:
        return ProjectAnswers(project_name=name).project_name
    except ValidationError as exc:
        raise ValueError(exc.errors()[0]["msg"].removeprefix("Value error, ")) from exc


def collect_answers(
    config: Config,
    project_name: str | None = None,
    init_git: bool | None = None,
    install_deps: bool | None = None,
    assume_yes: bool = False,
) -> ProjectAnswers:
    """Build ``ProjectAnswers``, prompting for anything not supplied.

    With *assume_yes* every unanswered question takes its default.

    Raises:
        ValueError: If *project_name* was supplied and is invalid.
    """
    if project_name is not None:
        name = _validated_name(project_name)
    elif assume_yes:
        name = _validated_name(config.default_project_name)
    else:
        while True:
            raw = Prompt.ask(
                "[bright_magenta]What is the name of your project?[/bright_magenta]",
                default=config.default_project_name,
                console=console,
            )
            try:
                name = _validated_name(raw)
                break
            except ValueError as exc:
                print_warning(str(exc))

    if init_git is None:
        init_git = assume_yes or Confirm.ask(
            "[bright_magenta]Initialize a new git repository?[/bright_magenta]",
            default=True,
            console=console,
        )
    if install_deps is None:
        install_deps = assume_yes or Confirm.ask(
            "[bright_magenta]Install packages now?[/bright_magenta]",
            default=True,
            console=console,
        )

    return ProjectAnswers(project_name=name, init_git=init_git, install_deps=install_deps)


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for ``create-rando-app``."""
    import argparse

    parser = argparse.ArgumentParser(
        prog="create-rando-app",
        description="Scaffold a new Dev Rando challenge project",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  create-rando-app\n"
            "  create-rando-app my-app --no-git\n"
            "  create-rando-app my-app --skip-install --yes\n"
        ),
    )
    parser.add_argument(
        "project_name",
        nargs="?",
        default=None,
        help="Project directory to create (prompted for if omitted)",
    )
    parser.add_argument(
        "--no-git",
        dest="init_git",
        action="store_false",
        default=None,
        help="Do not initialise a git repository",
    )
    parser.add_argument(
        "--skip-install",
        dest="install_deps",
        action="store_false",
        default=None,
        help="Do not install dependencies",
    )
    parser.add_argument(
        "--yes", "-y",
        action="store_true",
        help="Accept the default answer for every question not given on the command line",
    )
    parser.add_argument(
        "--api-url",
        default=None,
        help="Override the challenge API endpoint",
    )

    args = parser.parse_args(argv)

    try:
        config = Config.from_env()
    except ValueError as exc:
        print_error(f"Invalid configuration: {exc}")
        sys.exit(EXIT_FAILURE)
    if args.api_url:
        config = config.model_copy(update={"api_url": args.api_url})

    print_banner()

    try:
        answers = collect_answers(
            config,
            project_name=args.project_name,
            init_git=args.init_git,
            install_deps=args.install_deps,
            assume_yes=args.yes,
        )
    except ValueError as exc:
        console.print(f"[bold red]Error:[/bold red] {exc}")
        sys.exit(EXIT_FAILURE)
    except (KeyboardInterrupt, EOFError):
        print_warning("\nInstallation cancelled.")
        sys.exit(EXIT_FAILURE)

    pipeline = ScaffoldPipeline(config)
    try:
        code = asyncio.run(pipeline.run(answers))
    except KeyboardInterrupt:
        print_warning("\nInstallation cancelled.")
        sys.exit(EXIT_FAILURE)

    sys.exit(code)


if __name__ == "__main__":
    main()
