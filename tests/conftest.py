"""Shared pytest fixtures for the create-rando-app test suite.

Provides reusable fixtures for:
- A temporary working directory the run can ``chdir`` around in
- Sample challenge payloads and API envelopes
- Mock subprocess and httpx client helpers
"""

from __future__ import annotations

import copy
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from create_rando_app.models import Challenge


# ---------------------------------------------------------------------------
# Paths & Directories
# ---------------------------------------------------------------------------

@pytest.fixture
def workdir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Temporary current working directory, restored after the test."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def git_identity(monkeypatch: pytest.MonkeyPatch) -> None:
    """Give git a committer identity without touching the user's config."""
    monkeypatch.setenv("GIT_AUTHOR_NAME", "Rando Test")
    monkeypatch.setenv("GIT_AUTHOR_EMAIL", "test@dev-rando.local")
    monkeypatch.setenv("GIT_COMMITTER_NAME", "Rando Test")
    monkeypatch.setenv("GIT_COMMITTER_EMAIL", "test@dev-rando.local")
    monkeypatch.setenv("GIT_CONFIG_GLOBAL", "/dev/null")
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")


# ---------------------------------------------------------------------------
# Challenge payloads
# ---------------------------------------------------------------------------

@pytest.fixture
def sample_payload() -> dict[str, Any]:
    """The single-dependency ``left-pad`` challenge."""
    return {
        "dependencies": {"left-pad": "1.0.0"},
        "devDependencies": {},
        "devrandoMetadata": {
            "challengeHash": "abc123",
            "generatedAt": "2024-01-01T00:00:00Z",
            "totalDependencies": 1,
        },
    }


@pytest.fixture
def rich_payload() -> dict[str, Any]:
    """A challenge with extra top-level and metadata fields."""
    return {
        "name": "rando-app",
        "version": "0.0.1",
        "private": True,
        "dependencies": {
            "lodash": "^4.17.21",
            "chalk": "~4.1.2",
            "ünïcode-pkg": "2.0.0",
        },
        "devDependencies": {"jest": "^29.0.0", "typescript": "5.3.3"},
        "scripts": {"start": "node index.js"},
        "devrandoMetadata": {
            "challengeHash": "f00dfeed",
            "generatedAt": "2025-06-30T12:34:56.789Z",
            "totalDependencies": 5,
            "seed": 42,
        },
    }


@pytest.fixture
def sample_challenge(sample_payload: dict[str, Any]) -> Challenge:
    return Challenge.from_payload(sample_payload)


@pytest.fixture
def envelope():
    """Wrap a payload the way the tRPC endpoint does."""
    def factory(payload: Any) -> dict[str, Any]:
        return {"result": {"data": {"json": copy.deepcopy(payload)}}}

    return factory


# ---------------------------------------------------------------------------
# Mock helpers
# ---------------------------------------------------------------------------

@pytest.fixture
def mock_subprocess():
    """Mock asyncio subprocess for testing command execution.

    Returns a factory that creates mock subprocess instances with configurable
    stdout, stderr, and return codes.

    Usage:
        def test_command(mock_subprocess):
            proc = mock_subprocess(stdout="output", returncode=0)
            with patch("asyncio.create_subprocess_exec", return_value=proc):
                ...
    """
    def factory(
        stdout: str = "",
        stderr: str = "",
        returncode: int | None = 0,
    ) -> AsyncMock:
        mock_proc = AsyncMock()
        mock_proc.communicate = AsyncMock(
            return_value=(stdout.encode("utf-8"), stderr.encode("utf-8"))
        )
        mock_proc.returncode = returncode
        mock_proc.pid = 99999
        mock_proc.kill = MagicMock()
        mock_proc.send_signal = MagicMock()
        mock_proc.wait = AsyncMock(return_value=returncode)
        return mock_proc

    return factory


@pytest.fixture
def mock_http_client():
    """Factory for a mocked ``httpx.AsyncClient`` whose ``get`` returns *body*.

    Pass ``get_side_effect`` to make ``get`` raise instead.
    """
    def factory(body: Any = None, get_side_effect: Exception | None = None) -> AsyncMock:
        mock_response = MagicMock()
        mock_response.json.return_value = body
        mock_response.raise_for_status = MagicMock()

        mock_client = AsyncMock()
        if get_side_effect is not None:
            mock_client.get = AsyncMock(side_effect=get_side_effect)
        else:
            mock_client.get = AsyncMock(return_value=mock_response)
        mock_client.__aenter__ = AsyncMock(return_value=mock_client)
        mock_client.__aexit__ = AsyncMock(return_value=False)
        return mock_client

    return factory
