"""
In-memory store for tokens after a successful login, one set per (session, driver).
Demo use only; nothing is persisted.
"""
import time
from dataclasses import dataclass

from socialite.models import Token


@dataclass
class StoredTokens:
    access_token: str
    refresh_token: str | None
    expires_in: int
    scopes: tuple[str, ...]
    issued_at: float

    def access_token_expired_or_soon(self, buffer_seconds: int = 60) -> bool:
        """
        True if access token is expired or within buffer_seconds of expiry (for proactive refresh).
        When token lifetime is shorter than buffer_seconds, only return True when actually expired.
        A lifetime of 0 means the provider did not say, so the token is never treated as expired.
        """
        if self.expires_in <= 0:
            return False
        elapsed = time.time() - self.issued_at
        if elapsed >= self.expires_in:
            return True
        if self.expires_in > buffer_seconds and elapsed >= (self.expires_in - buffer_seconds):
            return True
        return False


_tokens: dict[tuple[str, str], StoredTokens] = {}


def store_tokens(session_id: str, driver: str, token: Token) -> StoredTokens:
    stored = StoredTokens(
        access_token=token.access_token,
        refresh_token=token.refresh_token,
        expires_in=token.expires_in,
        scopes=token.approved_scopes,
        issued_at=time.time(),
    )
    _tokens[(session_id, driver)] = stored
    return stored


def get_tokens(session_id: str, driver: str) -> StoredTokens | None:
    return _tokens.get((session_id, driver))


def clear_tokens(session_id: str | None = None, driver: str | None = None) -> None:
    """Drop one entry, or everything when called without arguments."""
    if session_id is None:
        _tokens.clear()
        return
    _tokens.pop((session_id, driver), None)


def drop_session(session_id: str) -> None:
    """Forget every driver's tokens for a session that has ended."""
    for key in [k for k in _tokens if k[0] == session_id]:
        del _tokens[key]
