"""
Static, per-provider data: endpoints, default scopes and the raw-payload field map.
"""
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

import httpx

from socialite.models import UserField

# (client, access_token, payload, requested_scopes) -> None; may add keys to payload
Enricher = Callable[[httpx.AsyncClient, str, dict[str, Any], tuple[str, ...]], Awaitable[None]]


@dataclass(frozen=True)
class ProviderDescriptor:
    name: str
    display_name: str
    authorize_url: str
    token_url: str
    user_url: str
    default_scopes: tuple[str, ...] = ()
    scope_separator: str = " "
    # raw payload key -> User attribute; several raw keys may feed different fields
    field_map: tuple[tuple[str, UserField], ...] = ()
    auth_scheme: str = "Bearer"
    user_headers: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    enrichers: tuple[Enricher, ...] = ()

    def user_request_headers(self, access_token: str) -> dict[str, str]:
        headers = {"Accept": "application/json", **self.user_headers}
        headers["Authorization"] = f"{self.auth_scheme} {access_token}"
        return headers
