"""
Error kinds raised by socialite. Callers catch SocialiteError for everything,
or a specific subclass to tell configuration problems from failed logins.
"""


class SocialiteError(Exception):
    """Base error for the library."""

    default_message = "Socialite error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ConfigurationError(SocialiteError, ValueError):
    """A required configuration value is missing or empty."""

    default_message = "Invalid provider configuration"


class InvalidArgumentError(SocialiteError, ValueError):
    """A required runtime input was None or empty. No network call was made."""

    default_message = "Invalid argument"


class InvalidStateError(SocialiteError):
    """Callback state does not match the state stored at redirect time."""

    default_message = "Invalid state parameter. The request may have been tampered with."


class AuthenticationError(SocialiteError):
    """
    Login could not be completed: missing code, missing access token, or a failed
    call to the token or user-info endpoint. The underlying exception, if any, is
    chained (__cause__) and also available as .cause.
    """

    default_message = "Authentication failed"

    def __init__(self, message: str | None = None, cause: BaseException | None = None):
        super().__init__(message)
        self.cause = cause


class DriverError(SocialiteError, LookupError):
    """The manager could not resolve or construct the requested driver."""

    default_message = "Driver could not be resolved"


class UnsupportedProviderError(DriverError):
    """build_provider was asked for a provider kind it does not know."""

    default_message = "Unsupported provider"
