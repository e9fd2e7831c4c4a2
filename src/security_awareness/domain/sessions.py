"""Domain models for awareness sessions."""

from dataclasses import dataclass

from security_awareness.domain.tokens import IssuedToken


@dataclass
class SessionRecord:
    """Represents a live session held by the registry.

    Timestamps are epoch milliseconds.
    """

    session_id: str
    current_step: int
    created_at: int
    last_activity: int


@dataclass(frozen=True)
class SessionStatus:
    """Read-only snapshot of a session for diagnostics."""

    session_id: str
    current_step: int
    created_at: int
    last_activity: int
    is_active: bool


@dataclass(frozen=True)
class StartedSession:
    """Result of starting a session."""

    session_id: str
    issued: IssuedToken


@dataclass(frozen=True)
class CompletionResult:
    """Result of completing a session."""

    session_id: str
    completion_token: str
    created_at: int
    completed_at: int
