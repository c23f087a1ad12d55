"""
Library settings. Values come from the environment; nothing secret lives here.
"""
import os
import re
from collections.abc import Mapping

from socialite.models import ProviderConfig

# Timeout (seconds) for token and user-info calls when no http client is injected
HTTP_TIMEOUT = float(os.environ.get("SOCIALITE_HTTP_TIMEOUT", "10.0"))

# Sent on every outbound request; GitHub rejects requests without one
USER_AGENT = os.environ.get("SOCIALITE_USER_AGENT", "socialite-python")

# Driver used by SocialiteManager.get_provider() when no name is passed
DEFAULT_DRIVER = os.environ.get("SOCIALITE_DEFAULT_DRIVER", "").strip() or None

_TRUE_VALUES = {"1", "true", "yes", "on"}


def _flag(value: str | None) -> bool:
    return (value or "").strip().lower() in _TRUE_VALUES


def _split_scopes(value: str | None) -> list[str]:
    """Comma or whitespace separated list, order kept, blanks dropped."""
    return [s for s in re.split(r"[,\s]+", value or "") if s]


def provider_config_from_env(driver: str, environ: Mapping[str, str] | None = None) -> ProviderConfig:
    """
    Build a ProviderConfig from SOCIALITE_<DRIVER>_* variables:
    CLIENT_ID, CLIENT_SECRET, REDIRECT_URL, SCOPES, SCOPE_SEPARATOR, STATELESS, PKCE.
    The result is not validated here; build_provider does that.
    """
    env = os.environ if environ is None else environ
    prefix = f"SOCIALITE_{driver.upper()}_"
    return ProviderConfig(
        client_id=env.get(prefix + "CLIENT_ID", ""),
        client_secret=env.get(prefix + "CLIENT_SECRET", ""),
        redirect_url=env.get(prefix + "REDIRECT_URL", ""),
        scopes=_split_scopes(env.get(prefix + "SCOPES")),
        scope_separator=env.get(prefix + "SCOPE_SEPARATOR") or None,
        stateless=_flag(env.get(prefix + "STATELESS")),
        uses_pkce=_flag(env.get(prefix + "PKCE")),
    )
