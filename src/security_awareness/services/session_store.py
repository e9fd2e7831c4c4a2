"""Session storage abstractions."""

import threading
from dataclasses import dataclass
from typing import Protocol

from security_awareness.domain.sessions import SessionRecord


class SessionStore(Protocol):
    """Keyed storage for live sessions."""

    def get(self, session_id: str) -> SessionRecord | None:
        """Return a session by id, if present."""

    def put(self, record: SessionRecord) -> None:
        """Insert or replace a session."""

    def delete(self, session_id: str) -> SessionRecord | None:
        """Remove a session and return it, if present."""

    def sweep(self, idle_before: int) -> list[str]:
        """Remove sessions last active before `idle_before` and return their ids."""


@dataclass
class InMemorySessionStore(SessionStore):
    """Process-local session store guarded by a lock."""

    _records: dict[str, SessionRecord]
    _lock: threading.Lock

    def __init__(self) -> None:
        self._records = {}
        self._lock = threading.Lock()

    def get(self, session_id: str) -> SessionRecord | None:
        """Return a session by id."""
        with self._lock:
            return self._records.get(session_id)

    def put(self, record: SessionRecord) -> None:
        """Store a session under its id."""
        with self._lock:
            self._records[record.session_id] = record

    def delete(self, session_id: str) -> SessionRecord | None:
        """Remove a session."""
        with self._lock:
            return self._records.pop(session_id, None)

    def sweep(self, idle_before: int) -> list[str]:
        """Remove every session whose last activity is older than the cutoff."""
        with self._lock:
            expired = [
                session_id
                for session_id, record in self._records.items()
                if record.last_activity < idle_before
            ]
            for session_id in expired:
                del self._records[session_id]
        return expired

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)
