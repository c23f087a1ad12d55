"""Tests for token_store: expired_or_soon logic and per-session storage."""
import time

from client_web.token_store import StoredTokens, clear_tokens, drop_session, get_tokens, store_tokens
from socialite.models import Token


def _tokens(expires_in: int, elapsed: float) -> StoredTokens:
    return StoredTokens(
        access_token="at",
        refresh_token="rt",
        expires_in=expires_in,
        scopes=(),
        issued_at=time.time() - elapsed,
    )


def test_fresh_token_not_expired_or_soon():
    """Token just issued with 600s lifetime: should not trigger refresh."""
    assert _tokens(600, 0).access_token_expired_or_soon(buffer_seconds=60) is False


def test_short_lifetime_not_expired():
    """Token with 30s lifetime, 10s elapsed: lifetime under the buffer, not yet expired."""
    assert _tokens(30, 10).access_token_expired_or_soon(buffer_seconds=60) is False


def test_short_lifetime_expired():
    assert _tokens(30, 31).access_token_expired_or_soon(buffer_seconds=60) is True


def test_long_lifetime_near_expiry():
    """Token with 600s lifetime, 550s elapsed (50s left): within 60s buffer, should trigger refresh."""
    assert _tokens(600, 550).access_token_expired_or_soon(buffer_seconds=60) is True


def test_long_lifetime_mid_life():
    assert _tokens(600, 300).access_token_expired_or_soon(buffer_seconds=60) is False


def test_unknown_lifetime_never_expires():
    assert _tokens(0, 10_000).access_token_expired_or_soon(buffer_seconds=60) is False


def test_tokens_are_kept_per_session_and_driver():
    clear_tokens()
    store_tokens("s1", "google", Token("g1", "r1", 60, ("openid",)))
    store_tokens("s1", "github", Token("h1"))
    store_tokens("s2", "google", Token("g2"))

    assert get_tokens("s1", "google").access_token == "g1"
    assert get_tokens("s1", "google").scopes == ("openid",)
    assert get_tokens("s1", "github").refresh_token is None
    assert get_tokens("s2", "google").access_token == "g2"

    clear_tokens("s1", "google")
    assert get_tokens("s1", "google") is None
    assert get_tokens("s1", "github") is not None
    clear_tokens()
    assert get_tokens("s2", "google") is None


def test_drop_session_keeps_other_sessions():
    clear_tokens()
    store_tokens("s1", "google", Token("a"))
    store_tokens("s1", "github", Token("b"))
    store_tokens("s2", "google", Token("c"))
    drop_session("s1")
    assert get_tokens("s1", "google") is None
    assert get_tokens("s1", "github") is None
    assert get_tokens("s2", "google").access_token == "c"
    clear_tokens()
