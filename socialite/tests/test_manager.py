"""Tests for driver registration and resolution."""
import pytest

from socialite.exceptions import (
    ConfigurationError,
    DriverError,
    InvalidArgumentError,
    UnsupportedProviderError,
)
from socialite.manager import ProviderKind, SocialiteManager
from socialite.models import ProviderConfig
from socialite.provider import OAuth2Provider
from socialite.providers.github import GITHUB
from socialite.providers.google import GOOGLE
from socialite.session import MemorySession


def _config(**overrides) -> ProviderConfig:
    values = {"client_id": "cid", "client_secret": "secret", "redirect_url": "https://app/cb"}
    values.update(overrides)
    return ProviderConfig(**values)


def test_no_driver_specified():
    with pytest.raises(DriverError, match="No Socialite driver was specified."):
        SocialiteManager().get_provider()


def test_unknown_driver():
    with pytest.raises(DriverError, match=r"Driver \[twitter\] not supported\."):
        SocialiteManager().get_provider("twitter")


def test_default_driver_is_used():
    manager = SocialiteManager(default_driver="google").register_driver("google", GOOGLE, _config())
    assert manager.get_provider().name == "google"


def test_driver_names_are_case_insensitive():
    manager = SocialiteManager().register_driver("GitHub", GITHUB, _config())
    assert manager.get_provider("github").name == "github"
    assert manager.get_provider(" GITHUB ").name == "github"
    assert manager.drivers() == ["github"]


def test_factory_takes_precedence_over_registration():
    manager = SocialiteManager()
    manager.register_driver("google", GOOGLE, _config())
    marker = OAuth2Provider.create(GOOGLE, "from-factory", "s", "https://app/cb")
    manager.extend("google", lambda m: marker)
    assert manager.get_provider("google") is marker


def test_factory_receives_manager():
    seen = []

    def factory(manager):
        seen.append(manager)
        return OAuth2Provider.create(GITHUB, "cid", "s", "https://app/cb")

    manager = SocialiteManager().extend("gh", factory)
    manager.get_provider("gh")
    assert seen == [manager]


def test_last_registration_wins():
    manager = SocialiteManager()
    manager.register_driver("x", GOOGLE, _config(client_id="first"))
    manager.register_driver("x", GITHUB, _config(client_id="second"))
    provider = manager.get_provider("x")
    assert provider.name == "github"
    assert provider.options.client_id == "second"


def test_template_provider_is_copied_per_call():
    template = OAuth2Provider.create(GOOGLE, "cid", "s", "https://app/cb").with_pkce()
    manager = SocialiteManager().register_driver("google", template)
    first = manager.get_provider("google")
    second = manager.get_provider("google")
    assert first is not template and second is not first
    assert first.uses_pkce and second.uses_pkce


def test_descriptor_registration_builds_new_provider_each_call():
    manager = SocialiteManager().register_driver("google", GOOGLE, _config())
    assert manager.get_provider("google") is not manager.get_provider("google")


def test_factory_exception_is_wrapped():
    def broken(manager):
        raise RuntimeError("boom")

    manager = SocialiteManager().extend("bad", broken)
    with pytest.raises(DriverError, match="boom") as exc_info:
        manager.get_provider("bad")
    assert isinstance(exc_info.value.__cause__, RuntimeError)


def test_factory_returning_none():
    manager = SocialiteManager().extend("none", lambda m: None)
    with pytest.raises(DriverError, match="returned None"):
        manager.get_provider("none")


def test_invalid_registered_config_surfaces_as_driver_error():
    manager = SocialiteManager().register_driver("google", GOOGLE, _config(client_secret=""))
    with pytest.raises(DriverError, match="client_secret is required") as exc_info:
        manager.get_provider("google")
    assert isinstance(exc_info.value.__cause__, ConfigurationError)


def test_register_rejects_bad_input():
    manager = SocialiteManager()
    with pytest.raises(InvalidArgumentError):
        manager.register_driver("", GOOGLE, _config())
    with pytest.raises(InvalidArgumentError):
        manager.register_driver("google", GOOGLE)
    with pytest.raises(InvalidArgumentError):
        manager.register_driver("google", object())
    with pytest.raises(InvalidArgumentError):
        manager.extend("x", "not callable")


def test_config_changes_after_registration_have_no_effect():
    cfg = _config(scopes=["openid"])
    manager = SocialiteManager().register_driver("google", GOOGLE, cfg)
    cfg.scopes.append("email")
    cfg.client_id = "changed"
    provider = manager.get_provider("google")
    assert provider.scopes == ("openid",)
    assert provider.options.client_id == "cid"


def test_build_provider_unknown_kind():
    with pytest.raises(UnsupportedProviderError):
        SocialiteManager().build_provider("myspace", _config())
    with pytest.raises(UnsupportedProviderError):
        SocialiteManager().build_provider("", _config())


def test_build_provider_validates_config():
    with pytest.raises(ConfigurationError, match="redirect_url is required"):
        SocialiteManager().build_provider(ProviderKind.GOOGLE, _config(redirect_url="  "))


def test_build_provider_keeps_default_scopes_when_none_given():
    provider = SocialiteManager().build_provider("google", _config())
    assert provider.scopes == ("openid", "profile", "email")
    assert provider.options.scope_separator == " "


def test_build_provider_applies_config():
    cfg = _config(
        scopes=["read:user", "user:email"],
        scope_separator=",",
        parameters={"allow_signup": "false"},
        stateless=True,
        uses_pkce=True,
    )
    provider = SocialiteManager().build_provider("GitHub", cfg)
    assert provider.name == "github"
    assert provider.scopes == ("read:user", "user:email")
    assert provider.is_stateless
    assert provider.uses_pkce
    # no verifier exists until redirect() generates one
    assert "code_challenge" not in provider.get_auth_url()
    url = provider.redirect(MemorySession())
    assert "scope=read%3Auser%2Cuser%3Aemail" in url
    assert "allow_signup=false" in url
    assert "code_challenge=" in url
    assert "code_challenge_method=S256" in url


def test_built_provider_uses_manager_http_client(http_client):
    provider = SocialiteManager(http_client=http_client).build_provider("google", _config())
    assert provider._http_client is http_client
