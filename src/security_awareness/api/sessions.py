"""Session endpoints consumed by the awareness UI."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from fastapi import APIRouter, Request

from security_awareness.api.models import CompleteRequest, ProgressRequest

if TYPE_CHECKING:
    from security_awareness.containers import AppContainer

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/session", tags=["session"])


def caller_metadata(request: Request) -> dict[str, object]:
    """Return client details attached to log records."""
    return {
        "ip": request.client.host if request.client else None,
        "user_agent": request.headers.get("user-agent"),
    }


@router.post("/start")
async def start_session(request: Request) -> dict[str, object]:
    """Start a new session and return its first token."""
    container: AppContainer = request.app.state.container
    started = container.session_service.start()
    logger.info(
        "Session issued",
        extra={"session_id": started.session_id, **caller_metadata(request)},
    )
    return {
        "sessionId": started.session_id,
        "token": started.issued.token,
        "message": container.settings.welcome_message,
        "expiresIn": started.issued.expires_in,
    }


@router.post("/{session_id}/progress")
async def update_progress(
    session_id: str, body: ProgressRequest, request: Request
) -> dict[str, object]:
    """Advance a session by one step and return a replacement token."""
    container: AppContainer = request.app.state.container
    issued = container.session_service.advance_progress(
        session_id, body.token, body.step
    )
    logger.info(
        "Progress accepted",
        extra={
            "session_id": session_id,
            "step": body.step,
            "data": "provided" if body.data is not None else "none",
            **caller_metadata(request),
        },
    )
    return {
        "token": issued.token,
        "message": f"Step {body.step} completed",
        "expiresIn": issued.expires_in,
    }


@router.post("/{session_id}/complete")
async def complete_session(
    session_id: str, body: CompleteRequest, request: Request
) -> dict[str, object]:
    """Complete a session and return the completion token with stats."""
    container: AppContainer = request.app.state.container
    result = container.session_service.complete(session_id, body.token)
    completed_at = format_timestamp(result.completed_at)
    logger.info(
        "Security awareness experience completed",
        extra={
            "session_id": session_id,
            "game_score": body.game_score,
            "total_time": body.total_time,
            "completed_at": completed_at,
            **caller_metadata(request),
        },
    )
    return {
        "completionToken": result.completion_token,
        "redirectUrl": container.settings.completion_redirect_url,
        "message": container.settings.completion_message,
        "stats": {
            "gameScore": body.game_score or 0,
            "totalTime": body.total_time or 0,
            "completedAt": completed_at,
        },
    }


@router.get("/{session_id}/status")
async def session_status(session_id: str, request: Request) -> dict[str, object]:
    """Return diagnostic state for a live session."""
    container: AppContainer = request.app.state.container
    status = container.session_service.status(session_id)
    return {
        "sessionId": status.session_id,
        "currentStep": status.current_step,
        "createdAt": format_timestamp(status.created_at),
        "lastActivity": format_timestamp(status.last_activity),
        "isActive": status.is_active,
    }


def format_timestamp(epoch_ms: int) -> str:
    """Format epoch milliseconds as an ISO-8601 UTC string."""
    moment = datetime.fromtimestamp(epoch_ms / 1000, tz=UTC)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")
