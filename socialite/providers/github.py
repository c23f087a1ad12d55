"""
GitHub OAuth app. /user often has a null email for users with a private address,
so when user:email was requested the primary verified address is read from
/user/emails.
"""
import logging
from types import MappingProxyType
from typing import Any

import httpx

from socialite.config import USER_AGENT
from socialite.descriptor import ProviderDescriptor
from socialite.models import UserField
from socialite.userinfo import get_json

logger = logging.getLogger(__name__)

EMAILS_URL = "https://api.github.com/user/emails"
EMAIL_SCOPE = "user:email"

_HEADERS = MappingProxyType({"Accept": "application/vnd.github.v3+json", "User-Agent": USER_AGENT})


def primary_verified_email(emails: Any) -> str | None:
    """First entry that is both primary and verified. Verified-only entries never win."""
    if not isinstance(emails, list):
        return None
    for entry in emails:
        if not isinstance(entry, dict):
            continue
        if entry.get("primary") is True and entry.get("verified") is True and entry.get("email"):
            return str(entry["email"])
    return None


async def enrich_email(
    client: httpx.AsyncClient,
    access_token: str,
    payload: dict[str, Any],
    scopes: tuple[str, ...],
) -> None:
    """
    Overwrite payload["email"] with the primary verified address. Failures are
    logged and ignored so the login still succeeds without an email.
    """
    if EMAIL_SCOPE not in scopes:
        return
    headers = {**_HEADERS, "Authorization": f"token {access_token}"}
    try:
        emails = await get_json(client, EMAILS_URL, headers)
    except (httpx.HTTPError, ValueError) as e:
        logger.warning("GitHub email lookup failed, continuing without it: %s", e)
        return
    email = primary_verified_email(emails)
    if email:
        payload["email"] = email


GITHUB = ProviderDescriptor(
    name="github",
    display_name="GitHub",
    authorize_url="https://github.com/login/oauth/authorize",
    token_url="https://github.com/login/oauth/access_token",
    user_url="https://api.github.com/user",
    default_scopes=(EMAIL_SCOPE,),
    scope_separator=" ",
    field_map=(
        ("id", UserField.ID),
        ("login", UserField.NICKNAME),
        ("name", UserField.NAME),
        ("email", UserField.EMAIL),
        ("avatar_url", UserField.AVATAR),
    ),
    auth_scheme="token",
    user_headers=_HEADERS,
    enrichers=(enrich_email,),
)
