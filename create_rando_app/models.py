"""Pydantic models for the challenge payload and the interactive session.

``Challenge`` validates the shape of the payload returned by the Dev Rando
API while keeping the raw payload around, so the written ``package.json`` is
byte-for-byte what the service sent (unknown fields and key order included).
"""

from __future__ import annotations

import copy
import os
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, field_validator

METADATA_FIELDS: tuple[str, ...] = ("challengeHash", "generatedAt", "totalDependencies")


class DevrandoMetadata(BaseModel):
    """The ``devrandoMetadata`` record embedded in every challenge."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    challenge_hash: str = Field(..., alias="challengeHash")
    generated_at: str = Field(..., alias="generatedAt")
    total_dependencies: int = Field(..., ge=0, alias="totalDependencies")


class Challenge(BaseModel):
    """A randomised dependency manifest plus its metadata."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    dependencies: dict[str, str] = Field(default_factory=dict)
    dev_dependencies: dict[str, str] = Field(default_factory=dict, alias="devDependencies")
    metadata: DevrandoMetadata = Field(..., alias="devrandoMetadata")

    _payload: dict[str, Any] = PrivateAttr(default_factory=dict)

    @classmethod
    def from_payload(cls, payload: Any) -> "Challenge":
        """Validate *payload* and keep a private copy of it.

        Raises:
            pydantic.ValidationError: If the payload is not a challenge.
        """
        challenge = cls.model_validate(payload)
        challenge._payload = copy.deepcopy(payload)
        return challenge

    @property
    def dependency_count(self) -> int:
        """Number of declared runtime plus development dependencies."""
        return len(self.dependencies) + len(self.dev_dependencies)

    def to_manifest(self) -> dict[str, Any]:
        """Return the challenge exactly as received, for ``package.json``."""
        if self._payload:
            return copy.deepcopy(self._payload)
        return self.model_dump(by_alias=True)

    def metadata_record(self) -> dict[str, Any]:
        """Return the three metadata fields, derived from the manifest."""
        source = self.to_manifest()["devrandoMetadata"]
        return {key: source[key] for key in METADATA_FIELDS}


class ProjectAnswers(BaseModel):
    """Answers collected from the user before anything touches the disk."""

    model_config = ConfigDict(frozen=True)

    project_name: str
    init_git: bool = True
    install_deps: bool = True

    @field_validator("project_name")
    @classmethod
    def _valid_directory_name(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Project name cannot be empty")
        if value in (".", ".."):
            raise ValueError(f"'{value}' is not a valid project name")
        separators = [sep for sep in (os.sep, os.altsep, "/") if sep]
        if any(sep in value for sep in separators) or "\0" in value:
            raise ValueError("Project name must be a single directory name")
        return value
