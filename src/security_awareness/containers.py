"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from security_awareness.config import Settings
from security_awareness.services.session_store import InMemorySessionStore
from security_awareness.services.sessions import SessionService
from security_awareness.services.sweeper import IdleSessionSweeper
from security_awareness.services.tokens import TokenCodec, now_ms


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    token_codec: TokenCodec
    session_service: SessionService
    sweeper: IdleSessionSweeper
    close_resources: Callable[[], Awaitable[None]]


def build_container(
    settings: Settings | None = None, clock: Callable[[], int] = now_ms
) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    token_codec = TokenCodec(secret=resolved_settings.hmac_secret, clock=clock)
    session_service = SessionService(
        token_codec=token_codec,
        store=InMemorySessionStore(),
        start_token_minutes=resolved_settings.start_token_minutes,
        progress_token_minutes=resolved_settings.progress_token_minutes,
        completion_token_minutes=resolved_settings.completion_token_minutes,
        idle_timeout_minutes=resolved_settings.idle_timeout_minutes,
        min_completion_step=resolved_settings.min_completion_step,
    )
    sweeper = IdleSessionSweeper(
        session_service,
        interval_seconds=resolved_settings.sweep_interval_minutes * 60,
    )

    async def close_resources() -> None:
        await sweeper.stop()

    return AppContainer(
        settings=resolved_settings,
        token_codec=token_codec,
        session_service=session_service,
        sweeper=sweeper,
        close_resources=close_resources,
    )
