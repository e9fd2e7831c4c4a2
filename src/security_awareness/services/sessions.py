"""Session registry driving step-by-step progress through the experience."""

import logging
import threading
from dataclasses import dataclass, field

from security_awareness.domain.errors import (
    InvalidTransitionError,
    PrematureCompletionError,
    SessionNotFoundError,
    UnauthorizedError,
)
from security_awareness.domain.sessions import (
    CompletionResult,
    SessionRecord,
    SessionStatus,
    StartedSession,
)
from security_awareness.domain.tokens import COMPLETION_STEP, IssuedToken, TokenClaims
from security_awareness.services.session_store import SessionStore
from security_awareness.services.tokens import (
    TokenCodec,
    generate_nonce,
    is_valid_step_progression,
)

logger = logging.getLogger(__name__)

_MS_PER_MINUTE = 60 * 1000


@dataclass
class SessionService:
    """State machine for a session: started, in progress, completed.

    The step embedded in the presented token decides whether a transition is
    legal; the stored record only proves the session is still alive. Every
    read-check-mutate sequence runs under one lock shared with the idle sweep.
    """

    token_codec: TokenCodec
    store: SessionStore
    start_token_minutes: int = 10
    progress_token_minutes: int = 5
    completion_token_minutes: int = 1
    idle_timeout_minutes: int = 15
    min_completion_step: int = 2
    _lock: threading.Lock = field(
        default_factory=threading.Lock, init=False, repr=False
    )

    def start(self) -> StartedSession:
        """Create a session at step 0 and return its first token."""
        session_id = generate_nonce()
        issued = self._issue(session_id, 0, self.start_token_minutes)
        now = self._now()
        with self._lock:
            self.store.put(
                SessionRecord(
                    session_id=session_id,
                    current_step=0,
                    created_at=now,
                    last_activity=now,
                )
            )
        logger.info("Session started", extra={"session_id": session_id})
        return StartedSession(session_id=session_id, issued=issued)

    def advance_progress(
        self, session_id: str, token: str, requested_step: int
    ) -> IssuedToken:
        """Move a session to `requested_step` and return a replacement token."""
        claims = self._authorize(session_id, token, UnauthorizedError())
        with self._lock:
            record = self._require(session_id)
            if not is_valid_step_progression(claims.step, requested_step):
                logger.warning(
                    "Invalid step progression",
                    extra={
                        "session_id": session_id,
                        "current_step": claims.step,
                        "requested_step": requested_step,
                    },
                )
                raise InvalidTransitionError
            issued = self._issue(
                session_id, requested_step, self.progress_token_minutes
            )
            record.current_step = requested_step
            record.last_activity = self._now()
            self.store.put(record)
        logger.info(
            "Progress updated",
            extra={"session_id": session_id, "step": requested_step},
        )
        return issued

    def complete(self, session_id: str, token: str) -> CompletionResult:
        """Finish a session, returning a one-shot completion token."""
        claims = self._authorize(
            session_id, token, UnauthorizedError("Invalid completion token")
        )
        with self._lock:
            record = self._require(session_id)
            if claims.step < self.min_completion_step:
                logger.warning(
                    "Premature completion attempt",
                    extra={"session_id": session_id, "current_step": claims.step},
                )
                raise PrematureCompletionError
            completion = self._issue(
                session_id, COMPLETION_STEP, self.completion_token_minutes
            )
            self.store.delete(session_id)
        completed_at = self._now()
        logger.info(
            "Session completed",
            extra={
                "session_id": session_id,
                "session_duration_ms": completed_at - record.created_at,
            },
        )
        return CompletionResult(
            session_id=session_id,
            completion_token=completion.token,
            created_at=record.created_at,
            completed_at=completed_at,
        )

    def status(self, session_id: str) -> SessionStatus:
        """Return a read-only snapshot of a live session."""
        with self._lock:
            record = self.store.get(session_id)
            if record is None:
                raise SessionNotFoundError
            snapshot = SessionStatus(
                session_id=record.session_id,
                current_step=record.current_step,
                created_at=record.created_at,
                last_activity=record.last_activity,
                is_active=(
                    self._now() - record.last_activity
                    < self.idle_timeout_minutes * _MS_PER_MINUTE
                ),
            )
        return snapshot

    def sweep_idle(self) -> list[str]:
        """Evict sessions idle longer than the timeout and return their ids."""
        cutoff = self._now() - self.idle_timeout_minutes * _MS_PER_MINUTE
        with self._lock:
            evicted = self.store.sweep(cutoff)
        for session_id in evicted:
            logger.info("Cleaned up idle session", extra={"session_id": session_id})
        return evicted

    def _authorize(
        self, session_id: str, token: str, error: UnauthorizedError
    ) -> TokenClaims:
        claims = self.token_codec.verify(token)
        if claims is None or claims.session_id != session_id:
            logger.warning(
                "Token rejected",
                extra={
                    "session_id": session_id,
                    "provided_session_id": claims.session_id if claims else None,
                },
            )
            raise error
        return claims

    def _require(self, session_id: str) -> SessionRecord:
        record = self.store.get(session_id)
        if record is None:
            logger.warning("Session not found", extra={"session_id": session_id})
            raise SessionNotFoundError
        return record

    def _issue(self, session_id: str, step: int, minutes: int) -> IssuedToken:
        token = self.token_codec.sign(
            TokenClaims(
                session_id=session_id,
                step=step,
                nonce=generate_nonce(),
                exp=self.token_codec.create_expiration(minutes),
            )
        )
        return IssuedToken(token=token, expires_in=minutes * 60)

    def _now(self) -> int:
        return self.token_codec.clock()
