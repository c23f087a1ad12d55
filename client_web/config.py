"""
Demo host configuration. Provider credentials are read per driver by
socialite.config.provider_config_from_env (SOCIALITE_<DRIVER>_*).
"""
import os

# Drivers the host registers at startup, comma separated
ENABLED_DRIVERS = [
    d.strip().lower() for d in os.environ.get("CLIENT_WEB_DRIVERS", "google,github").split(",") if d.strip()
]

# Base URL of this app; used for the default callback URL of each driver
PUBLIC_URL = os.environ.get("CLIENT_WEB_PUBLIC_URL", "http://127.0.0.1:8000").rstrip("/")

# Cookie carrying the server-side session id
SESSION_COOKIE = os.environ.get("CLIENT_WEB_SESSION_COOKIE", "socialite_session")

# Seconds a session (and the state / verifier in it) stays valid
SESSION_TTL = int(os.environ.get("CLIENT_WEB_SESSION_TTL", "600"))

# Refresh the access token this many seconds before it expires
REFRESH_BUFFER = int(os.environ.get("CLIENT_WEB_REFRESH_BUFFER", "60"))

# Send the session cookie over HTTPS only
COOKIE_SECURE = os.environ.get("CLIENT_WEB_COOKIE_SECURE", "").lower() in ("1", "true", "yes")
