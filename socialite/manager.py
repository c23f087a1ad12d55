"""
Driver registry. Resolves a provider by name from ad-hoc factories (extend) or
static registrations, or builds one for a known provider kind from a ProviderConfig.

get_provider always returns a new OAuth2Provider, so a cached user never leaks
from one request into another.
"""
import dataclasses
import logging
from collections.abc import Callable
from enum import Enum

import httpx

from socialite import config
from socialite.descriptor import ProviderDescriptor
from socialite.exceptions import DriverError, InvalidArgumentError, UnsupportedProviderError
from socialite.models import ProviderConfig
from socialite.provider import OAuth2Provider
from socialite.providers.github import GITHUB
from socialite.providers.google import GOOGLE

logger = logging.getLogger(__name__)


class ProviderKind(str, Enum):
    GOOGLE = "google"
    GITHUB = "github"


DESCRIPTORS: dict[ProviderKind, ProviderDescriptor] = {
    ProviderKind.GOOGLE: GOOGLE,
    ProviderKind.GITHUB: GITHUB,
}

DriverFactory = Callable[["SocialiteManager"], OAuth2Provider]


def _driver_key(name: str) -> str:
    return name.strip().lower()


def _provider_kind(kind: ProviderKind | str) -> ProviderKind:
    if isinstance(kind, ProviderKind):
        return kind
    if not kind:
        raise UnsupportedProviderError("Provider name cannot be empty")
    try:
        return ProviderKind(str(kind).strip().lower())
    except ValueError:
        raise UnsupportedProviderError(f"Provider [{kind}] is not supported.") from None


class SocialiteManager:
    def __init__(self, default_driver: str | None = None, http_client: httpx.AsyncClient | None = None):
        self.default_driver = default_driver if default_driver is not None else config.DEFAULT_DRIVER
        self.http_client = http_client
        # name -> template provider, or (descriptor, config) built on demand
        self._drivers: dict[str, OAuth2Provider | tuple[ProviderDescriptor, ProviderConfig]] = {}
        self._custom_factories: dict[str, DriverFactory] = {}

    def register_driver(
        self,
        name: str,
        provider: OAuth2Provider | ProviderDescriptor,
        provider_config: ProviderConfig | None = None,
    ) -> "SocialiteManager":
        """
        Register a driver. Pass either a configured provider (used as a template,
        copied on every get_provider) or a descriptor plus its ProviderConfig.
        """
        if not name:
            raise InvalidArgumentError("Driver name cannot be empty")
        if isinstance(provider, OAuth2Provider):
            self._drivers[_driver_key(name)] = provider
        elif isinstance(provider, ProviderDescriptor):
            if provider_config is None:
                raise InvalidArgumentError("provider_config is required when registering a descriptor")
            snapshot = dataclasses.replace(
                provider_config,
                scopes=list(provider_config.scopes),
                parameters=dict(provider_config.parameters),
            )
            self._drivers[_driver_key(name)] = (provider, snapshot)
        else:
            raise InvalidArgumentError(f"Cannot register {type(provider).__name__} as a driver")
        return self

    def extend(self, name: str, factory: DriverFactory) -> "SocialiteManager":
        """Register a factory for name. Factories take precedence over register_driver; last one wins."""
        if not name:
            raise InvalidArgumentError("Driver name cannot be empty")
        if not callable(factory):
            raise InvalidArgumentError("factory must be callable")
        self._custom_factories[_driver_key(name)] = factory
        return self

    def drivers(self) -> list[str]:
        return sorted(set(self._drivers) | set(self._custom_factories))

    def get_provider(self, name: str | None = None) -> OAuth2Provider:
        driver = name or self.default_driver
        if not driver:
            raise DriverError("No Socialite driver was specified.")
        key = _driver_key(driver)

        factory = self._custom_factories.get(key)
        if factory is not None:
            try:
                provider = factory(self)
            except Exception as e:
                raise DriverError(f"Factory for driver [{driver}] failed: {e}") from e
            if provider is None:
                raise DriverError(f"Factory for driver [{driver}] returned None.")
            return provider

        registered = self._drivers.get(key)
        if registered is None:
            raise DriverError(f"Driver [{driver}] not supported.")
        if isinstance(registered, OAuth2Provider):
            return registered.fresh()

        descriptor, provider_config = registered
        try:
            return self._build(descriptor, provider_config)
        except Exception as e:
            raise DriverError(f"Could not resolve provider for driver [{driver}]: {e}") from e

    def build_provider(self, kind: ProviderKind | str, provider_config: ProviderConfig) -> OAuth2Provider:
        """Build a provider of a known kind directly, bypassing registrations."""
        descriptor = DESCRIPTORS[_provider_kind(kind)]
        if provider_config is None:
            raise InvalidArgumentError("provider_config is required")
        return self._build(descriptor, provider_config)

    def _build(self, descriptor: ProviderDescriptor, provider_config: ProviderConfig) -> OAuth2Provider:
        provider_config.validate()
        provider = OAuth2Provider.create(
            descriptor,
            provider_config.client_id,
            provider_config.client_secret,
            provider_config.redirect_url,
            http_client=self.http_client,
        )
        if provider_config.scopes:
            provider = provider.set_scopes(*provider_config.scopes)
        if provider_config.scope_separator:
            provider = provider.set_scope_separator(provider_config.scope_separator)
        if provider_config.stateless:
            provider = provider.stateless()
        if provider_config.uses_pkce:
            provider = provider.with_pkce()
        if provider_config.parameters:
            provider = provider.with_parameters(provider_config.parameters)
        logger.debug("Built %s provider for client_id=%s", descriptor.name, provider_config.client_id)
        return provider
