"""
In-memory server-side sessions keyed by a cookie id. Holds what socialite writes
between /login and /callback (state, code verifier). TTL to avoid unbounded growth.
"""
import secrets
import time
from dataclasses import dataclass, field

from client_web.config import SESSION_TTL
from client_web.token_store import drop_session


@dataclass
class StoredSession:
    created_at: float
    data: dict[str, bytes] = field(default_factory=dict)

    def expired(self) -> bool:
        return (time.monotonic() - self.created_at) > SESSION_TTL


class CookieSession:
    """Session adapter handed to socialite for one request."""

    def __init__(self, session_id: str, stored: StoredSession):
        self.session_id = session_id
        self._stored = stored

    def get(self, key: str) -> bytes | None:
        return self._stored.data.get(key)

    def set(self, key: str, value: bytes) -> None:
        self._stored.data[key] = value

    def discard(self, key: str) -> None:
        self._stored.data.pop(key, None)


_sessions: dict[str, StoredSession] = {}


def open_session(session_id: str | None) -> CookieSession:
    """Return the live session for session_id, or a new one when missing or expired."""
    _clean_expired()
    stored = _sessions.get(session_id) if session_id else None
    if stored is None:
        session_id = secrets.token_urlsafe(32)
        stored = StoredSession(created_at=time.monotonic())
        _sessions[session_id] = stored
    return CookieSession(session_id, stored)


def find_session(session_id: str | None) -> CookieSession | None:
    """Like open_session, but never creates one."""
    if not session_id:
        return None
    stored = _sessions.get(session_id)
    if stored is None or stored.expired():
        _sessions.pop(session_id, None)
        drop_session(session_id)
        return None
    return CookieSession(session_id, stored)


def clear_sessions() -> None:
    _sessions.clear()


def _clean_expired() -> None:
    now = time.monotonic()
    expired = [s for s, stored in _sessions.items() if (now - stored.created_at) > SESSION_TTL]
    for s in expired:
        del _sessions[s]
        drop_session(s)
