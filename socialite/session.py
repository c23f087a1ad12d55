"""
Session collaborator contract and CSRF state validation.

The host framework owns the session; socialite only needs get/set of raw bytes
under the keys in SessionKey.
"""
import hmac
from collections.abc import Mapping
from enum import Enum
from typing import Protocol


class SessionKey(str, Enum):
    STATE = "socialite:state"
    CODE_VERIFIER = "socialite:code_verifier"


class Session(Protocol):
    def get(self, key: str) -> bytes | None: ...

    def set(self, key: str, value: bytes) -> None: ...


class MemorySession:
    """Dict-backed Session for tests and scripts."""

    def __init__(self, data: Mapping[str, bytes] | None = None):
        self._data: dict[str, bytes] = dict(data or {})

    def get(self, key: str) -> bytes | None:
        return self._data.get(key)

    def set(self, key: str, value: bytes) -> None:
        self._data[key] = value


def read_text(session: Session, key: SessionKey) -> str | None:
    """UTF-8 value stored under key, or None when absent or empty."""
    raw = session.get(key.value)
    if not raw:
        return None
    return raw.decode("utf-8")


def write_text(session: Session, key: SessionKey, value: str) -> None:
    session.set(key.value, value.encode("utf-8"))


def is_state_invalid(session: Session, request_state: str | None, stateless: bool) -> bool:
    """
    True when the callback state does not match the one stored at redirect time.

    Invalid if nothing was stored, the stored or returned value is empty, or the
    two differ. In stateless mode no check is done and this always returns False;
    that drops CSRF protection and is only meant for deployments without shared
    session storage.
    """
    if stateless:
        return False
    # compared as bytes: the stored value may not be valid UTF-8
    stored = session.get(SessionKey.STATE.value)
    if not stored or not request_state:
        return True
    return not hmac.compare_digest(stored, request_state.encode("utf-8"))
