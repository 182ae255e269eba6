"""create-rando-app scaffolder -- the side-effecting steps of a run.

Quick usage::

    from create_rando_app.scaffolder import ProjectMaterializer

    materializer = ProjectMaterializer()
    project_dir = materializer.create_directory("my-rando-app")
    await materializer.write_manifests(challenge)
"""

from create_rando_app.scaffolder.git_init import GitInitError, GitInitializer
from create_rando_app.scaffolder.installer import (
    DependencyInstaller,
    InstallError,
    InstallInterruptedError,
)
from create_rando_app.scaffolder.project import ProjectExistsError, ProjectMaterializer

__all__ = [
    "DependencyInstaller",
    "GitInitError",
    "GitInitializer",
    "InstallError",
    "InstallInterruptedError",
    "ProjectExistsError",
    "ProjectMaterializer",
]
