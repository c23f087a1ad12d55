"""
OAuth2 authorization-code client for one provider.

Flow:
  1. redirect(session)       -> URL to send the browser to (state / PKCE saved in session)
  2. get_user(session, query) -> validate state, exchange code, fetch and map the user
  3. refresh_token(rt)        -> new Token without any redirect

Configuration is immutable. Every fluent method returns a new provider, so an
instance shared at startup is never changed by a request. The resolved user and
the PKCE verifier live on the instance: use one instance per login.
"""
import dataclasses
import logging
from collections.abc import AsyncIterator, Mapping
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from types import MappingProxyType

import httpx

from socialite import config
from socialite import token_endpoint
from socialite.descriptor import ProviderDescriptor
from socialite.exceptions import AuthenticationError, ConfigurationError, InvalidArgumentError, InvalidStateError
from socialite.models import Token, User
from socialite.pkce import (
    CODE_CHALLENGE_METHOD,
    build_url,
    derive_code_challenge,
    format_scopes,
    generate_code_verifier,
    generate_state,
)
from socialite.session import Session, SessionKey, is_state_invalid, read_text, write_text
from socialite.userinfo import fetch_user_payload, map_raw_to_user

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProviderOptions:
    client_id: str
    client_secret: str
    redirect_url: str
    scopes: tuple[str, ...] = ()
    scope_separator: str = " "
    parameters: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    stateless: bool = False
    uses_pkce: bool = False


class OAuth2Provider:
    def __init__(
        self,
        descriptor: ProviderDescriptor,
        options: ProviderOptions,
        http_client: httpx.AsyncClient | None = None,
    ):
        for name in ("client_id", "client_secret", "redirect_url"):
            value = getattr(options, name)
            if not value or not value.strip():
                raise ConfigurationError(f"{name} is required")
        self.descriptor = descriptor
        self.options = options
        self._http_client = http_client
        self._code_verifier: str | None = None
        self._user: User | None = None

    @classmethod
    def create(
        cls,
        descriptor: ProviderDescriptor,
        client_id: str,
        client_secret: str,
        redirect_url: str,
        http_client: httpx.AsyncClient | None = None,
    ) -> "OAuth2Provider":
        """Provider with the descriptor's default scopes and separator."""
        options = ProviderOptions(
            client_id=client_id,
            client_secret=client_secret,
            redirect_url=redirect_url,
            scopes=tuple(descriptor.default_scopes),
            scope_separator=descriptor.scope_separator,
        )
        return cls(descriptor, options, http_client=http_client)

    def __repr__(self) -> str:
        return f"<OAuth2Provider {self.name} client_id={self.options.client_id!r}>"

    @property
    def name(self) -> str:
        return self.descriptor.name

    @property
    def scopes(self) -> tuple[str, ...]:
        return self.options.scopes

    @property
    def is_stateless(self) -> bool:
        return self.options.stateless

    @property
    def uses_pkce(self) -> bool:
        return self.options.uses_pkce

    # --- fluent configuration (each returns a new provider) ---

    def _replace(self, **changes) -> "OAuth2Provider":
        options = dataclasses.replace(self.options, **changes)
        return type(self)(self.descriptor, options, http_client=self._http_client)

    def fresh(self) -> "OAuth2Provider":
        """Same configuration, no cached user and no pending verifier."""
        return self._replace()

    def add_scopes(self, *scopes: str) -> "OAuth2Provider":
        merged = list(self.options.scopes)
        for scope in scopes:
            if scope and scope not in merged:
                merged.append(scope)
        return self._replace(scopes=tuple(merged))

    def set_scopes(self, *scopes: str) -> "OAuth2Provider":
        return self._replace(scopes=tuple(s for s in scopes if s))

    def set_scope_separator(self, separator: str) -> "OAuth2Provider":
        if not separator:
            raise InvalidArgumentError("separator is required")
        return self._replace(scope_separator=separator)

    def set_redirect_url(self, url: str) -> "OAuth2Provider":
        if not url or not url.strip():
            raise InvalidArgumentError("url is required")
        return self._replace(redirect_url=url)

    def stateless(self) -> "OAuth2Provider":
        """Skip the CSRF state check. Only for deployments without shared sessions."""
        return self._replace(stateless=True)

    def with_pkce(self) -> "OAuth2Provider":
        return self._replace(uses_pkce=True)

    def with_parameters(self, parameters: Mapping[str, str] | None = None, **extra: str) -> "OAuth2Provider":
        """Add custom query/body parameters. Empty values are dropped."""
        merged = dict(self.options.parameters)
        for key, value in {**(parameters or {}), **extra}.items():
            if value is not None and str(value) != "":
                merged[key] = str(value)
        return self._replace(parameters=MappingProxyType(merged))

    # --- authorization URL ---

    @property
    def code_challenge(self) -> str:
        if not self._code_verifier:
            return ""
        return derive_code_challenge(self._code_verifier)

    def get_code_fields(self, state: str | None = None) -> dict[str, str]:
        opts = self.options
        fields = {
            "client_id": opts.client_id,
            "redirect_uri": opts.redirect_url,
            "scope": format_scopes(opts.scopes, opts.scope_separator),
            "response_type": "code",
        }
        if not opts.stateless and state:
            fields["state"] = state
        if opts.uses_pkce:
            challenge = self.code_challenge
            if challenge:
                fields["code_challenge"] = challenge
                fields["code_challenge_method"] = CODE_CHALLENGE_METHOD
        fields.update(opts.parameters)
        return fields

    def get_auth_url(self, state: str | None = None) -> str:
        return build_url(self.descriptor.authorize_url, self.get_code_fields(state))

    def redirect(self, session: Session) -> str:
        """
        Build the authorization URL. State and PKCE verifier are written to the
        session before the URL is returned.
        """
        if session is None:
            raise InvalidArgumentError("session is required")
        state = None
        if not self.options.stateless:
            state = generate_state()
            write_text(session, SessionKey.STATE, state)
        if self.options.uses_pkce:
            self._code_verifier = generate_code_verifier()
            write_text(session, SessionKey.CODE_VERIFIER, self._code_verifier)
        logger.debug("Redirecting to %s (state=%s, pkce=%s)", self.name, state is not None, self.options.uses_pkce)
        return self.get_auth_url(state)

    # --- callback / tokens ---

    @asynccontextmanager
    async def _http(self) -> AsyncIterator[httpx.AsyncClient]:
        if self._http_client is not None:
            yield self._http_client
            return
        async with httpx.AsyncClient(
            timeout=config.HTTP_TIMEOUT,
            headers={"User-Agent": config.USER_AGENT},
        ) as client:
            yield client

    def has_invalid_state(self, session: Session, query: Mapping[str, str]) -> bool:
        return is_state_invalid(session, query.get("state"), self.options.stateless)

    async def get_access_token_response(self, code: str, session: Session) -> Token:
        opts = self.options
        code_verifier = read_text(session, SessionKey.CODE_VERIFIER) if opts.uses_pkce else None
        async with self._http() as client:
            return await token_endpoint.exchange_code(
                client,
                self.descriptor.token_url,
                opts.scope_separator,
                code=code,
                client_id=opts.client_id,
                client_secret=opts.client_secret,
                redirect_uri=opts.redirect_url,
                code_verifier=code_verifier,
                parameters=opts.parameters,
            )

    async def _resolve_user(self, access_token: str) -> User:
        async with self._http() as client:
            payload = await fetch_user_payload(client, self.descriptor, access_token, self.options.scopes)
        return map_raw_to_user(payload, self.descriptor.field_map)

    async def get_user(self, session: Session, query: Mapping[str, str]) -> User:
        """
        Complete the login from the callback query (code, state). A second call on
        the same instance returns the first user without any network traffic.
        """
        if session is None or query is None:
            raise InvalidArgumentError("session and query are required")
        if self._user is not None:
            return self._user
        if self.has_invalid_state(session, query):
            raise InvalidStateError()
        code = query.get("code")
        if not code:
            raise AuthenticationError("Authorization code not found in the request")

        token = await self.get_access_token_response(code, session)
        user = await self._resolve_user(token.access_token)
        user.set_token_details(token)
        self._user = user
        logger.info("Resolved %s user id=%s", self.name, user.id)
        return user

    async def get_user_from_token(self, token: str) -> User:
        """Look up the user for an existing access token. Only user.token is set."""
        if not token:
            raise InvalidArgumentError("token is required")
        user = await self._resolve_user(token)
        return user.set_token(token)

    async def refresh_token(self, refresh_token: str) -> Token:
        if not refresh_token:
            raise InvalidArgumentError("refresh_token is required")
        opts = self.options
        async with self._http() as client:
            return await token_endpoint.refresh(
                client,
                self.descriptor.token_url,
                opts.scope_separator,
                refresh_token=refresh_token,
                client_id=opts.client_id,
                client_secret=opts.client_secret,
            )
