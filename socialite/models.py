"""
Value types: caller-supplied provider configuration, token results and the
normalized user.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from socialite.exceptions import ConfigurationError, InvalidArgumentError


@dataclass
class ProviderConfig:
    """
    Credentials and options for one provider. Consumed once by
    SocialiteManager.build_provider; later changes do not reach the built provider.
    Scope order is kept and decides the serialized scope string.
    """

    client_id: str = ""
    client_secret: str = ""
    redirect_url: str = ""
    scopes: list[str] = field(default_factory=list)
    scope_separator: str | None = None
    parameters: dict[str, str] = field(default_factory=dict)
    stateless: bool = False
    uses_pkce: bool = False

    def validate(self) -> None:
        """Raise ConfigurationError naming the first missing required field."""
        for name in ("client_id", "client_secret", "redirect_url"):
            value = getattr(self, name)
            if not value or not str(value).strip():
                raise ConfigurationError(f"{name} is required")


@dataclass(frozen=True)
class Token:
    """Result of a token-endpoint call. access_token is always non-empty."""

    access_token: str
    refresh_token: str | None = None
    expires_in: int = 0
    approved_scopes: tuple[str, ...] = ()

    def __post_init__(self):
        if not self.access_token:
            raise InvalidArgumentError("access_token is required")
        # Accept any iterable of scopes, store as a tuple
        object.__setattr__(self, "approved_scopes", tuple(self.approved_scopes or ()))


class UserField(str, Enum):
    """Typed User attributes a provider field map may target."""

    ID = "id"
    NICKNAME = "nickname"
    NAME = "name"
    EMAIL = "email"
    AVATAR = "avatar"
    AVATAR_ORIGINAL = "avatar_original"
    PROFILE_URL = "profile_url"


@dataclass
class User:
    """
    Normalized identity. Optional profile fields are None when the provider did
    not supply them. raw holds the provider payload unchanged.
    """

    id: str
    nickname: str | None = None
    name: str | None = None
    email: str | None = None
    avatar: str | None = None
    avatar_original: str | None = None
    profile_url: str | None = None
    token: str | None = None
    refresh_token: str | None = None
    expires_in: int = 0
    approved_scopes: tuple[str, ...] = ()
    raw: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if not self.id:
            raise InvalidArgumentError("id is required")

    def set_token(self, token: str) -> "User":
        if not token:
            raise InvalidArgumentError("token is required")
        self.token = token
        return self

    def set_token_details(self, token: Token) -> "User":
        """Copy access token, refresh token, lifetime and scopes from a token result."""
        self.set_token(token.access_token)
        self.refresh_token = token.refresh_token
        self.expires_in = token.expires_in
        self.approved_scopes = token.approved_scopes
        return self
