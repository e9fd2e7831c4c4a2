"""HTTP client for the session progress API."""

from dataclasses import dataclass
from typing import Any, Protocol

import httpx


class ProgressApiError(Exception):
    """Raised when the progress API answers with a non-success status."""

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message


class ProgressClient(Protocol):
    """Interface for driving a session through the progress API."""

    async def start_session(self) -> dict[str, Any]:
        """Start a session and return the start payload."""

    async def update_progress(
        self, session_id: str, token: str, step: int, data: object | None = None
    ) -> dict[str, Any]:
        """Advance a session and return the replacement token payload."""

    async def complete_session(
        self, session_id: str, token: str, game_score: float, total_time: float
    ) -> dict[str, Any]:
        """Complete a session and return the completion payload."""

    async def get_session_status(self, session_id: str) -> dict[str, Any]:
        """Return diagnostic session state."""


@dataclass
class HttpxProgressClient(ProgressClient):
    """Progress API client implemented with httpx."""

    base_url: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(cls, base_url: str) -> "HttpxProgressClient":
        """Create a progress client with a managed httpx session."""
        return cls(base_url=base_url.rstrip("/"), http_client=httpx.AsyncClient())

    async def start_session(self) -> dict[str, Any]:
        """Start a new session."""
        response = await self.http_client.post(
            f"{self.base_url}/api/session/start", timeout=10
        )
        return _json_or_raise(response, "Failed to start session")

    async def update_progress(
        self, session_id: str, token: str, step: int, data: object | None = None
    ) -> dict[str, Any]:
        """Submit the latest token and the next step."""
        response = await self.http_client.post(
            f"{self.base_url}/api/session/{session_id}/progress",
            json={"token": token, "step": step, "data": data},
            timeout=10,
        )
        return _json_or_raise(response, "Failed to update progress")

    async def complete_session(
        self, session_id: str, token: str, game_score: float, total_time: float
    ) -> dict[str, Any]:
        """Complete the session with the final stats."""
        response = await self.http_client.post(
            f"{self.base_url}/api/session/{session_id}/complete",
            json={"token": token, "gameScore": game_score, "totalTime": total_time},
            timeout=10,
        )
        return _json_or_raise(response, "Failed to complete session")

    async def get_session_status(self, session_id: str) -> dict[str, Any]:
        """Fetch diagnostic session state."""
        response = await self.http_client.get(
            f"{self.base_url}/api/session/{session_id}/status", timeout=10
        )
        return _json_or_raise(response, "Failed to get session status")

    async def close(self) -> None:
        """Close the underlying HTTP client session."""
        await self.http_client.aclose()


def _json_or_raise(response: httpx.Response, fallback: str) -> dict[str, Any]:
    """Return the JSON body, raising ProgressApiError on failure statuses."""
    if response.is_success:
        return response.json()
    try:
        body = response.json()
    except ValueError:
        body = None
    message = body.get("error") if isinstance(body, dict) else None
    raise ProgressApiError(response.status_code, message or fallback)
