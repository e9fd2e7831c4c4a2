"""Tests for the idle session sweeper."""

import asyncio

from security_awareness.services.session_store import InMemorySessionStore
from security_awareness.services.sessions import SessionService
from security_awareness.services.sweeper import IdleSessionSweeper
from tests.conftest import FakeClock


class _FlakySessionService:
    def __init__(self) -> None:
        self.calls = 0

    def sweep_idle(self) -> list[str]:
        self.calls += 1
        if self.calls == 1:
            raise RuntimeError("boom")
        return []


def test_run_once_evicts_idle_sessions(
    session_service: SessionService,
    session_store: InMemorySessionStore,
    clock: FakeClock,
) -> None:
    started = session_service.start()
    clock.advance(minutes=20)
    sweeper = IdleSessionSweeper(session_service, interval_seconds=300)

    assert sweeper.run_once() == [started.session_id]
    assert session_store.get(started.session_id) is None


def test_loop_sweeps_in_background_until_stopped(
    session_service: SessionService,
    session_store: InMemorySessionStore,
    clock: FakeClock,
) -> None:
    started = session_service.start()
    clock.advance(minutes=20)
    sweeper = IdleSessionSweeper(session_service, interval_seconds=0.01)

    async def scenario() -> None:
        sweeper.start()
        first_task = sweeper._task
        sweeper.start()
        assert sweeper._task is first_task
        assert sweeper.running
        await asyncio.sleep(0.1)
        await sweeper.stop()

    asyncio.run(scenario())

    assert not sweeper.running
    assert session_store.get(started.session_id) is None


def test_loop_survives_failed_sweep() -> None:
    service = _FlakySessionService()
    sweeper = IdleSessionSweeper(
        service,  # type: ignore[arg-type]
        interval_seconds=0.01,
    )

    async def scenario() -> None:
        sweeper.start()
        await asyncio.sleep(0.2)
        await sweeper.stop()

    asyncio.run(scenario())

    assert service.calls >= 2


def test_stop_without_start_is_noop(session_service: SessionService) -> None:
    sweeper = IdleSessionSweeper(session_service, interval_seconds=1)

    asyncio.run(sweeper.stop())

    assert not sweeper.running
