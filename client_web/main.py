"""
Demo host for socialite.
GET /login/{driver} redirects to the provider; /callback/{driver} resolves the user;
/me/{driver} looks the user up again from the stored token, refreshing it first when due.
"""
import html
import json
import logging
from functools import lru_cache

from fastapi import Depends, FastAPI, Request
from fastapi.responses import HTMLResponse, RedirectResponse

from client_web.config import COOKIE_SECURE, ENABLED_DRIVERS, PUBLIC_URL, REFRESH_BUFFER, SESSION_COOKIE, SESSION_TTL
from client_web.session_store import find_session, open_session
from client_web.token_store import clear_tokens, get_tokens, store_tokens
from socialite.config import provider_config_from_env
from socialite.exceptions import AuthenticationError, DriverError, InvalidStateError
from socialite.manager import DESCRIPTORS, ProviderKind, SocialiteManager
from socialite.models import Token
from socialite.session import SessionKey

logger = logging.getLogger(__name__)

app = FastAPI(title="Socialite Demo", version="0.1.0")


def build_manager(http_client=None, drivers=None) -> SocialiteManager:
    """Register every enabled driver from SOCIALITE_<DRIVER>_* settings. Unknown names are skipped."""
    manager = SocialiteManager(http_client=http_client)
    for driver in ENABLED_DRIVERS if drivers is None else drivers:
        try:
            kind = ProviderKind(driver)
        except ValueError:
            logger.warning("Skipping unknown driver %r in CLIENT_WEB_DRIVERS", driver)
            continue
        provider_config = provider_config_from_env(driver)
        if not provider_config.redirect_url:
            provider_config.redirect_url = f"{PUBLIC_URL}/callback/{driver}"
        manager.register_driver(driver, DESCRIPTORS[kind], provider_config)
    return manager


@lru_cache
def get_manager() -> SocialiteManager:
    return build_manager()


def _page(title: str, body: str, status_code: int = 200) -> HTMLResponse:
    return HTMLResponse(
        f"""<!DOCTYPE html>
<html>
<head><meta charset="utf-8"><title>{html.escape(title)}</title></head>
<body>
  <h1>{html.escape(title)}</h1>
  {body}
  <p><a href="/">Home</a></p>
</body>
</html>""",
        status_code=status_code,
    )


def _error(title: str, message: str, status_code: int) -> HTMLResponse:
    return _page(title, f"<p>{html.escape(message)}</p>", status_code=status_code)


@app.get("/health")
def health():
    """Health check endpoint."""
    return {"status": "ok", "service": "client_web"}


@app.get("/", response_class=HTMLResponse)
def home(manager: SocialiteManager = Depends(get_manager)):
    links = "".join(
        f'<li><a href="/login/{d}">Log in with {html.escape(d)}</a> | <a href="/me/{d}">Who am I</a></li>'
        for d in manager.drivers()
    )
    return _page("Socialite Demo", f"<ul>{links}</ul>")


@app.get("/login/{driver}")
def login(driver: str, request: Request, manager: SocialiteManager = Depends(get_manager)):
    """Save state (and PKCE verifier) in the session, then redirect to the provider."""
    try:
        provider = manager.get_provider(driver)
    except DriverError as e:
        return _error("Unknown provider", e.message, 404)

    session = open_session(request.cookies.get(SESSION_COOKIE))
    url = provider.redirect(session)
    logger.info("Redirecting session to %s for login", provider.name)
    response = RedirectResponse(url=url, status_code=302)
    response.set_cookie(
        SESSION_COOKIE,
        session.session_id,
        max_age=SESSION_TTL,
        httponly=True,
        samesite="lax",
        secure=COOKIE_SECURE,
    )
    return response


@app.get("/callback/{driver}", response_class=HTMLResponse)
async def callback(driver: str, request: Request, manager: SocialiteManager = Depends(get_manager)):
    """
    Handle the provider redirect. Provider errors (?error=...) and failed state
    checks are 400; token or user-info failures are 502.
    """
    query = dict(request.query_params)
    if query.get("error"):
        return _error("Login error", query.get("error_description") or query["error"], 400)

    try:
        provider = manager.get_provider(driver)
    except DriverError as e:
        return _error("Unknown provider", e.message, 404)

    session = find_session(request.cookies.get(SESSION_COOKIE))
    if session is None:
        return _error("Error", "Session expired. Please try logging in again.", 400)

    try:
        user = await provider.get_user(session, query)
    except InvalidStateError as e:
        return _error("Error", e.message, 400)
    except AuthenticationError as e:
        logger.warning("Login with %s failed: %s", driver, e.message)
        return _error("Login failed", e.message, 502)
    finally:
        # state and verifier are single use
        session.discard(SessionKey.STATE.value)
        session.discard(SessionKey.CODE_VERIFIER.value)

    store_tokens(
        session.session_id,
        provider.name,
        Token(user.token, user.refresh_token, user.expires_in, user.approved_scopes),
    )
    scopes = " ".join(user.approved_scopes)
    return _page(
        "Login success",
        f"""<p>Signed in as <strong>{html.escape(user.name or user.nickname or user.id)}</strong></p>
  <p>Email: {html.escape(user.email or "(not shared)")}</p>
  <p>Scope: <code>{html.escape(scopes)}</code></p>
  <p><a href="/me/{provider.name}">Who am I</a></p>""",
    )


@app.get("/me/{driver}", response_class=HTMLResponse)
async def me(driver: str, request: Request, manager: SocialiteManager = Depends(get_manager)):
    """Fetch the user with the stored access token. Refresh first when it is expired or about to be."""
    try:
        provider = manager.get_provider(driver)
    except DriverError as e:
        return _error("Unknown provider", e.message, 404)

    session = find_session(request.cookies.get(SESSION_COOKIE))
    tokens = get_tokens(session.session_id, provider.name) if session else None
    if tokens is None:
        return _page("Who am I", f'<p>No tokens. <a href="/login/{provider.name}">Log in</a> first.</p>')

    if tokens.access_token_expired_or_soon(buffer_seconds=REFRESH_BUFFER):
        if not tokens.refresh_token:
            clear_tokens(session.session_id, provider.name)
            return _page("Who am I", f'<p>Token expired. <a href="/login/{provider.name}">Log in</a> again.</p>')
        try:
            refreshed = await provider.refresh_token(tokens.refresh_token)
        except AuthenticationError as e:
            logger.warning("Token refresh with %s failed: %s", driver, e.message)
            clear_tokens(session.session_id, provider.name)
            return _page(
                "Who am I",
                f'<p>Token expired and refresh failed. <a href="/login/{provider.name}">Log in</a> again.</p>',
            )
        tokens = store_tokens(session.session_id, provider.name, refreshed)

    try:
        user = await provider.get_user_from_token(tokens.access_token)
    except AuthenticationError as e:
        return _error("Who am I", e.message, 502)

    return _page(
        "Who am I",
        f"""<p>Id: <code>{html.escape(user.id)}</code></p>
  <pre>{html.escape(json.dumps(user.raw, indent=2, default=str))}</pre>
  <p><a href="/me/{provider.name}">Call again</a></p>""",
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "client_web.main:app",
        host="127.0.0.1",
        port=8000,
        reload=True,
    )
