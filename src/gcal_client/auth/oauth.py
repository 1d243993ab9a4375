"""
OAuth tooling for the Calendar API: enough to capture access tokens.

Example:
    params = ClientParameters(client_id=CLIENT_ID, client_secret=CLIENT_SECRET)
    state = OAuthState(params)
    listener = await oauth_listener(state)
    print("Click on this and login:", build_authorization_url(await state.snapshot()))
    params = await state.wait_for_token(timeout=300)
    await listener.close()

`capture_access_token` does all of the above in one call.
"""

import asyncio
import json
import logging
import secrets
import socket
import webbrowser
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, Dict, Optional

import aiohttp
from aiohttp import web

from ..exceptions import OAuthError
from ..utils.datetime import expiry_from_seconds, utc_now_naive
from ..utils.log_sanitizer import sanitize_token

logger = logging.getLogger(__name__)

# The scope required to access Google Calendar.
CALENDAR_SCOPE = "https://www.googleapis.com/auth/calendar"
TOKEN_URL = "https://oauth2.googleapis.com/token"
USER_URL = "https://accounts.google.com/o/oauth2/v2/auth"

DEFAULT_REFRESH_TOKEN_LIFETIME = 3600
CONFIRMATION_PAGE = "Please close this browser tab. Thanks!"
TOKEN_REQUEST_TIMEOUT = 30


@dataclass
class AccessToken:
    """Token endpoint response."""
    access_token: str
    expires_in: int = DEFAULT_REFRESH_TOKEN_LIFETIME
    token_type: Optional[str] = None
    refresh_token: Optional[str] = None
    refresh_token_expires_in: Optional[int] = None
    scope: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AccessToken":
        if not isinstance(data, dict) or not data.get("access_token"):
            raise OAuthError("Token response carries no access_token")
        return cls(
            access_token=data["access_token"],
            expires_in=int(data.get("expires_in", DEFAULT_REFRESH_TOKEN_LIFETIME)),
            token_type=data.get("token_type"),
            refresh_token=data.get("refresh_token"),
            refresh_token_expires_in=data.get("refresh_token_expires_in"),
            scope=data.get("scope"),
        )


@dataclass
class ClientParameters:
    """
    Everything needed to negotiate OAuth, plus the tokens it produced.

    Owned by the application; the listener updates it in place. Expiry
    timestamps are naive UTC, like google-auth's.
    """
    client_id: str
    client_secret: str = field(repr=False)
    redirect_url: Optional[str] = None
    access_key: Optional[str] = field(default=None, repr=False)
    expires_at: Optional[datetime] = None
    refresh_token: Optional[str] = field(default=None, repr=False)
    refresh_token_expires_at: Optional[datetime] = None

    def apply_token(self, token: AccessToken) -> None:
        """Store a freshly issued token and compute its expiry timestamps."""
        self.access_key = token.access_token
        self.expires_at = expiry_from_seconds(token.expires_in)
        if token.refresh_token:
            self.refresh_token = token.refresh_token
            self.refresh_token_expires_at = expiry_from_seconds(
                token.refresh_token_expires_in or DEFAULT_REFRESH_TOKEN_LIFETIME
            )

    def is_expired(self) -> bool:
        if not self.access_key:
            return True
        return self.expires_at is not None and utc_now_naive() >= self.expires_at


def generate_state() -> str:
    """Random anti-replay token for the authorization request."""
    return secrets.token_urlsafe(32)


def build_authorization_url(params: ClientParameters, state: Optional[str] = None) -> str:
    """
    Produce the URL the user opens to grant calendar access.

    Args:
        params: Client parameters; `redirect_url` must point at the listener.
        state: Anti-replay token; a fresh one is generated when omitted.

    Raises:
        OAuthError: If no redirect URL is configured.
    """
    if not params.redirect_url:
        raise OAuthError("Expected a redirect URL")

    return (
        f"{USER_URL}?client_id={params.client_id}&access_type=offline&response_type=code"
        f"&redirect_uri={params.redirect_url}&state={state or generate_state()}&scope={CALENDAR_SCOPE}"
    )


async def request_access_token(
        client_params: ClientParameters,
        code: Optional[str] = None,
        state: Optional[str] = None,
        refresh: bool = False,
        session: Optional[aiohttp.ClientSession] = None
) -> AccessToken:
    """
    Exchange an authorization code (or, with `refresh`, the stored refresh
    token) for an access token. The redirect_url must be the one the code
    was issued for.

    Raises:
        OAuthError: On missing inputs, transport failure, a non-success
            status or an unreadable response.
    """
    grant = "refresh_token" if refresh else "authorization_code"
    form = {
        "grant_type": grant,
        "client_id": client_params.client_id,
        "client_secret": client_params.client_secret,
    }

    if refresh:
        if not client_params.refresh_token:
            raise OAuthError("A refresh token is required to refresh the access token")
        form["refresh_token"] = client_params.refresh_token
    else:
        if not code:
            raise OAuthError("An authorization code is required")
        form["code"] = code
        form["redirect_uri"] = client_params.redirect_url or ""
        if state:
            form["state"] = state

    logger.info("Requesting access token (grant_type=%s)", grant)

    owns_session = session is None
    if owns_session:
        session = aiohttp.ClientSession(timeout=aiohttp.ClientTimeout(total=TOKEN_REQUEST_TIMEOUT))
    try:
        async with session.post(
            TOKEN_URL,
            data=form,
            auth=aiohttp.BasicAuth(client_params.client_id, client_params.client_secret),
            headers={"Accept": "application/json"},
        ) as resp:
            status = resp.status
            body = await resp.read()
    except (aiohttp.ClientError, asyncio.TimeoutError) as e:
        raise OAuthError(f"Network error during token exchange: {e}") from e
    finally:
        if owns_session:
            await session.close()

    try:
        data = json.loads(body)
    except ValueError as e:
        raise OAuthError(f"Token endpoint answered {status} with a non-JSON body") from e

    if not 200 <= status < 300:
        description = data.get("error_description") or data.get("error") if isinstance(data, dict) else None
        raise OAuthError(f"Token exchange failed ({status}): {description or 'Unknown error'}")

    return AccessToken.from_dict(data)


async def refresh_access_token(
        client_params: ClientParameters,
        session: Optional[aiohttp.ClientSession] = None
) -> ClientParameters:
    """Use the refresh token to obtain a new access key, updating `client_params`."""
    token = await request_access_token(client_params, refresh=True, session=session)
    client_params.apply_token(token)
    logger.info("Refreshed access token, expires at %s", client_params.expires_at)
    return client_params


class OAuthState:
    """
    ClientParameters shared between the callback listener and the caller.

    The lock guards every read and update of `params`; `completed` is set
    once a token has been captured.
    """

    def __init__(self, params: ClientParameters, expected_state: Optional[str] = None):
        self.params = params
        self.expected_state = expected_state
        self.lock = asyncio.Lock()
        self.completed = asyncio.Event()

    async def snapshot(self) -> ClientParameters:
        async with self.lock:
            return replace(self.params)

    async def wait_for_token(self, timeout: Optional[float] = None) -> ClientParameters:
        """
        Wait until the listener captured a token.

        Raises:
            asyncio.TimeoutError: If `timeout` seconds pass first.
        """
        await asyncio.wait_for(self.completed.wait(), timeout)
        return await self.snapshot()


STATE_KEY = web.AppKey("oauth_state", OAuthState)


async def _handle_callback(request: web.Request) -> web.Response:
    state = request.app[STATE_KEY]
    code = request.query.get("code")
    oauth_state = request.query.get("state")

    if "error" in request.query:
        logger.warning("Authorization was refused: %s", request.query["error"])
        return web.Response(status=400, text=f"Authorization failed: {request.query['error']}")
    if not code:
        return web.Response(status=400, text="Missing authorization code")
    if state.expected_state and oauth_state != state.expected_state:
        logger.warning("Discarding callback with unexpected state %s", sanitize_token(oauth_state))
        return web.Response(status=400, text="State mismatch")

    params = await state.snapshot()
    try:
        token = await request_access_token(params, code, oauth_state)
    except OAuthError as e:
        logger.error("Token exchange failed: %s", e)
        return web.Response(status=500, text="Token exchange failed")

    async with state.lock:
        state.params.apply_token(token)
    state.completed.set()

    logger.info("Captured access token %s", sanitize_token(token.access_token))
    return web.Response(text=CONFIRMATION_PAGE)


class OAuthListener:
    """A running callback server. It serves until `close` is awaited."""

    def __init__(self, runner: web.AppRunner, address: str):
        self._runner = runner
        self.address = address

    @property
    def url(self) -> str:
        return f"http://{self.address}"

    async def close(self) -> None:
        await self._runner.cleanup()
        logger.info("OAuth callback listener on %s stopped", self.address)

    async def __aenter__(self) -> "OAuthListener":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()


async def oauth_listener(state: OAuthState, host: str = "localhost") -> OAuthListener:
    """
    Start a local listener ready to become the redirect_url. Once the user
    completes the consent screen it writes the access credentials into
    `state` and sets its completion signal.

    The OS picks a free port; the bound socket is handed straight to the
    server, so no other process can take the port in between.
    """
    app = web.Application()
    app[STATE_KEY] = state
    app.router.add_get("/", _handle_callback)

    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    try:
        sock.bind((host, 0))
        sock.listen()
        sock.setblocking(False)
    except OSError:
        sock.close()
        raise
    bound_host, port = sock.getsockname()[:2]
    address = f"{bound_host}:{port}"

    runner = web.AppRunner(app, access_log=None)
    await runner.setup()
    await web.SockSite(runner, sock).start()

    async with state.lock:
        state.params.redirect_url = f"http://{address}"

    logger.info("OAuth callback listener on %s", address)
    return OAuthListener(runner, address)


async def capture_access_token(
        params: ClientParameters,
        timeout: Optional[float] = None,
        open_browser: bool = False
) -> ClientParameters:
    """
    Run the whole authorization-code flow on a local listener.

    Args:
        params: Client id and secret; updated in place with the tokens.
        timeout: Seconds to wait for the user; None waits forever.
        open_browser: Open the consent page in the default browser.

    Returns:
        A snapshot of the updated parameters.

    Raises:
        asyncio.TimeoutError: If the user did not finish within `timeout`.
    """
    state = OAuthState(params, expected_state=generate_state())
    listener = await oauth_listener(state)
    try:
        url = build_authorization_url(await state.snapshot(), state.expected_state)
        print(f"Please visit this URL to authorize this application: {url}")
        if open_browser:
            webbrowser.open(url, new=1, autoraise=True)
        return await state.wait_for_token(timeout)
    finally:
        await listener.close()
