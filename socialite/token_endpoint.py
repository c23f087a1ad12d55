"""
Token endpoint client: authorization_code and refresh_token grants.
Both post a form-urlencoded body and parse the JSON reply into a Token.
"""
import logging
from collections.abc import Mapping
from typing import Any

import httpx

from socialite.exceptions import AuthenticationError
from socialite.models import Token

logger = logging.getLogger(__name__)


def code_fields(
    *,
    code: str,
    client_id: str,
    client_secret: str,
    redirect_uri: str,
    code_verifier: str | None = None,
    parameters: Mapping[str, str] | None = None,
) -> dict[str, str]:
    """Form body for the authorization_code grant. Custom parameters are applied last."""
    fields = {
        "grant_type": "authorization_code",
        "client_id": client_id,
        "client_secret": client_secret,
        "code": code,
        "redirect_uri": redirect_uri,
    }
    if code_verifier:
        fields["code_verifier"] = code_verifier
    fields.update(parameters or {})
    return fields


def refresh_fields(*, refresh_token: str, client_id: str, client_secret: str) -> dict[str, str]:
    """Form body for the refresh_token grant. No redirect_uri, verifier or custom parameters."""
    return {
        "grant_type": "refresh_token",
        "refresh_token": refresh_token,
        "client_id": client_id,
        "client_secret": client_secret,
    }


async def post_token_request(
    client: httpx.AsyncClient,
    token_url: str,
    fields: Mapping[str, str],
    error_message: str,
) -> dict[str, Any]:
    """
    POST fields to token_url and return the decoded JSON object.
    Non-2xx, transport errors, timeouts and non-object bodies all raise
    AuthenticationError(error_message) chained to the cause.
    """
    try:
        r = await client.post(token_url, data=dict(fields), headers={"Accept": "application/json"})
        r.raise_for_status()
        data = r.json()
    except (httpx.HTTPError, ValueError) as e:
        logger.debug("Token request to %s failed: %s", token_url, type(e).__name__)
        raise AuthenticationError(error_message, cause=e) from e
    if not isinstance(data, dict):
        cause = ValueError(f"expected a JSON object, got {type(data).__name__}")
        raise AuthenticationError(error_message, cause=cause) from cause
    return data


def parse_expires_in(value: Any) -> int:
    """
    Lenient expiry parsing: ints, integral floats and decimal strings are used,
    anything else (absent, null, garbage) becomes 0.
    """
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return 0


def parse_scopes(value: Any, separator: str) -> tuple[str, ...]:
    if not value or not isinstance(value, str):
        return ()
    return tuple(s for s in value.split(separator) if s)


def parse_token_response(
    data: Mapping[str, Any],
    separator: str,
    fallback_refresh_token: str | None = None,
) -> Token:
    """
    Build a Token from a token-endpoint reply. A missing or null access_token is an
    AuthenticationError; so is an empty one. When the reply has no refresh_token,
    fallback_refresh_token is used (providers omit it to mean "unchanged").
    """
    access_token = data.get("access_token")
    if access_token is None:
        raise AuthenticationError("Access token not found in the response")
    access_token = str(access_token)
    if not access_token:
        raise AuthenticationError("Access token is null or empty")

    refresh_token = data.get("refresh_token")
    if refresh_token is None:
        refresh_token = fallback_refresh_token
    return Token(
        access_token=access_token,
        refresh_token=str(refresh_token) if refresh_token is not None else None,
        expires_in=parse_expires_in(data.get("expires_in")),
        approved_scopes=parse_scopes(data.get("scope"), separator),
    )


async def exchange_code(
    client: httpx.AsyncClient,
    token_url: str,
    separator: str,
    **fields: Any,
) -> Token:
    """Exchange an authorization code for a Token. fields are passed to code_fields."""
    body = code_fields(**fields)
    logger.debug("Exchanging code at %s (pkce=%s)", token_url, "code_verifier" in body)
    data = await post_token_request(client, token_url, body, "Failed to get access token")
    return parse_token_response(data, separator)


async def refresh(
    client: httpx.AsyncClient,
    token_url: str,
    separator: str,
    *,
    refresh_token: str,
    client_id: str,
    client_secret: str,
) -> Token:
    """Exchange a refresh token for a new Token."""
    body = refresh_fields(refresh_token=refresh_token, client_id=client_id, client_secret=client_secret)
    data = await post_token_request(client, token_url, body, "Failed to refresh token")
    token = parse_token_response(data, separator, fallback_refresh_token=refresh_token)
    logger.info("refresh_token grant: new access token issued by %s", token_url)
    return token
