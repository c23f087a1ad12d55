"""
User resolution: fetch the provider's user-info payload with an access token and
map it onto the common User model.
"""
import logging
from collections.abc import Iterable, Mapping
from typing import Any

import httpx

from socialite.descriptor import ProviderDescriptor
from socialite.exceptions import AuthenticationError
from socialite.models import User, UserField

logger = logging.getLogger(__name__)


async def get_json(client: httpx.AsyncClient, url: str, headers: Mapping[str, str]) -> Any:
    """GET url and decode JSON. Raises httpx.HTTPError on non-2xx, ValueError on bad JSON."""
    r = await client.get(url, headers=dict(headers))
    r.raise_for_status()
    return r.json()


async def fetch_user_payload(
    client: httpx.AsyncClient,
    descriptor: ProviderDescriptor,
    access_token: str,
    scopes: tuple[str, ...],
) -> dict[str, Any]:
    """
    Primary user-info call followed by the descriptor's enrichment steps.
    A failed primary call raises AuthenticationError; enrichers handle their own failures.
    """
    error_message = f"Error retrieving user information from {descriptor.display_name}"
    try:
        payload = await get_json(client, descriptor.user_url, descriptor.user_request_headers(access_token))
    except (httpx.HTTPError, ValueError) as e:
        raise AuthenticationError(error_message, cause=e) from e
    if not isinstance(payload, dict):
        cause = ValueError(f"expected a JSON object, got {type(payload).__name__}")
        raise AuthenticationError(error_message, cause=cause) from cause

    for enrich in descriptor.enrichers:
        await enrich(client, access_token, payload, scopes)
    return payload


def map_raw_to_user(payload: Mapping[str, Any], field_map: Iterable[tuple[str, UserField]]) -> User:
    """
    Apply a provider field map to a raw payload. Keys the payload lacks are skipped;
    payload keys not in the map are only reachable through User.raw.
    """
    values: dict[str, str | None] = {}
    for raw_key, target in field_map:
        if raw_key not in payload:
            continue
        value = payload[raw_key]
        values[target.value] = None if value is None else str(value)

    user_id = values.pop(UserField.ID.value, None)
    if not user_id:
        raise AuthenticationError("User id not found in the provider response")
    return User(id=user_id, raw=dict(payload), **values)
