"""
PKCE (RFC 7636), state generation and authorization URL helpers.
S256 only.
"""
import hashlib
import secrets
from base64 import urlsafe_b64encode
from collections.abc import Iterable, Mapping
from urllib.parse import quote, urlencode

CODE_CHALLENGE_METHOD = "S256"

# 64 bytes -> 86 chars base64url, the RFC 7636 upper range
CODE_VERIFIER_BYTES = 64

# 128 bits -> 32 hex chars
STATE_BYTES = 16


def _b64url(raw: bytes) -> str:
    return urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")


def generate_state() -> str:
    """Opaque CSRF nonce, lowercase hex with no separators."""
    return secrets.token_hex(STATE_BYTES)


def generate_code_verifier() -> str:
    """Random code_verifier: 64 bytes from the OS CSPRNG, base64url without padding."""
    return _b64url(secrets.token_bytes(CODE_VERIFIER_BYTES))


def derive_code_challenge(code_verifier: str) -> str:
    """code_challenge = base64url(SHA256(code_verifier)), no padding."""
    digest = hashlib.sha256(code_verifier.encode("utf-8")).digest()
    return _b64url(digest)


def format_scopes(scopes: Iterable[str] | None, separator: str) -> str:
    """Join scopes in order. No scopes gives an empty string."""
    return separator.join(scopes or ())


def build_url(base_url: str, fields: Mapping[str, str]) -> str:
    """Append fields to base_url as a query string; spaces become %20."""
    if not fields:
        return base_url
    query = urlencode(fields, quote_via=quote)
    joiner = "&" if "?" in base_url else "?"
    return f"{base_url}{joiner}{query}"
