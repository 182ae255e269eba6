"""Async client for the Dev Rando challenge API.

Wraps the single tRPC query the scaffolder needs
(``challenge.getCurrentChallenge``) and unwraps the challenge from the
``{"result": {"data": {"json": ...}}}`` envelope.

Typical usage::

    client = ChallengeClient()
    challenge = await client.fetch_current()
    print(challenge.metadata.challenge_hash)
"""

from __future__ import annotations

from typing import Any

import httpx
from pydantic import ValidationError

from create_rando_app.config import DEFAULT_API_URL
from create_rando_app.models import Challenge

ENVELOPE_PATH: tuple[str, ...] = ("result", "data", "json")


class ChallengeFetchError(Exception):
    """Raised when the current challenge cannot be fetched or understood."""

    def __init__(self, message: str, url: str = "", status_code: int | None = None):
        self.url = url
        self.status_code = status_code
        super().__init__(message)


class ChallengeClient:
    """Fetches the current challenge. No retries, no authentication."""

    def __init__(self, api_url: str = DEFAULT_API_URL, timeout: float | None = None) -> None:
        self.api_url = api_url
        self.timeout = timeout

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=httpx.Timeout(self.timeout))

    @staticmethod
    def _unwrap(body: Any) -> Any:
        """Walk the tRPC envelope down to the challenge payload."""
        node = body
        for key in ENVELOPE_PATH:
            if not isinstance(node, dict) or key not in node:
                raise ChallengeFetchError(
                    f"Unexpected response shape: missing '{'.'.join(ENVELOPE_PATH)}'"
                )
            node = node[key]
        return node

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def fetch_current(self) -> Challenge:
        """GET the current challenge.

        Returns:
            The validated ``Challenge``.

        Raises:
            ChallengeFetchError: On any network, HTTP, JSON or shape failure.
        """
        try:
            async with self._client() as client:
                response = await client.get(self.api_url)
                response.raise_for_status()
                body = response.json()
        except httpx.HTTPStatusError as exc:
            raise ChallengeFetchError(
                f"HTTP {exc.response.status_code} from challenge API",
                url=self.api_url,
                status_code=exc.response.status_code,
            ) from exc
        except httpx.HTTPError as exc:
            raise ChallengeFetchError(
                f"Cannot reach challenge API at {self.api_url}: {exc}",
                url=self.api_url,
            ) from exc
        except ValueError as exc:
            raise ChallengeFetchError(
                f"Challenge API returned invalid JSON: {exc}", url=self.api_url
            ) from exc

        try:
            return Challenge.from_payload(self._unwrap(body))
        except ValidationError as exc:
            raise ChallengeFetchError(
                f"Challenge payload is malformed: {exc.error_count()} validation error(s)",
                url=self.api_url,
            ) from exc
