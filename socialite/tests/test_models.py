import pytest

from socialite.exceptions import ConfigurationError, InvalidArgumentError
from socialite.models import ProviderConfig, Token, User


@pytest.mark.parametrize(
    "missing,overrides",
    [
        ("client_id", {"client_id": ""}),
        ("client_secret", {"client_secret": "   "}),
        ("redirect_url", {"redirect_url": ""}),
    ],
)
def test_provider_config_validate(missing, overrides):
    values = {"client_id": "cid", "client_secret": "s", "redirect_url": "https://app/cb", **overrides}
    with pytest.raises(ConfigurationError, match=f"{missing} is required"):
        ProviderConfig(**values).validate()


def test_provider_config_validate_ok():
    ProviderConfig(client_id="cid", client_secret="s", redirect_url="https://app/cb").validate()


def test_configuration_error_is_value_error():
    with pytest.raises(ValueError):
        ProviderConfig().validate()


def test_token_requires_access_token():
    with pytest.raises(InvalidArgumentError):
        Token(access_token="")


def test_token_scopes_become_tuple():
    assert Token("t", approved_scopes=["a", "b"]).approved_scopes == ("a", "b")


def test_user_requires_id():
    with pytest.raises(InvalidArgumentError):
        User(id="")


def test_user_set_token_details():
    user = User(id="1").set_token_details(Token("t", "r", 60, ("a",)))
    assert (user.token, user.refresh_token, user.expires_in, user.approved_scopes) == ("t", "r", 60, ("a",))


def test_user_set_token_rejects_empty():
    with pytest.raises(InvalidArgumentError):
        User(id="1").set_token("")
