"""Shared test fixtures."""

from dataclasses import dataclass

import pytest

from security_awareness.config import Settings
from security_awareness.containers import AppContainer, build_container
from security_awareness.services.session_store import InMemorySessionStore
from security_awareness.services.sessions import SessionService
from security_awareness.services.tokens import TokenCodec

TEST_SECRET = "test-secret-key-for-testing-only"


@dataclass
class FakeClock:
    """Controllable epoch-millisecond clock."""

    now: int = 1_700_000_000_000

    def __call__(self) -> int:
        return self.now

    def advance(self, minutes: float = 0, seconds: float = 0) -> None:
        self.now += int(minutes * 60_000 + seconds * 1000)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def settings() -> Settings:
    return Settings(
        hmac_secret=TEST_SECRET,
        environment="test",
        log_level="ERROR",
        completion_redirect_url="https://awareness.example.com/done",
    )


@pytest.fixture
def token_codec(clock: FakeClock) -> TokenCodec:
    return TokenCodec(secret=TEST_SECRET, clock=clock)


@pytest.fixture
def session_store() -> InMemorySessionStore:
    return InMemorySessionStore()


@pytest.fixture
def session_service(
    token_codec: TokenCodec, session_store: InMemorySessionStore
) -> SessionService:
    return SessionService(token_codec=token_codec, store=session_store)


@pytest.fixture
def container(settings: Settings, clock: FakeClock) -> AppContainer:
    return build_container(settings, clock=clock)
