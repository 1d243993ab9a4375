import asyncio
import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

import aiohttp
from multidict import CIMultiDict
from yarl import URL

from .exceptions import (
    HTTPStatusError, InvalidTokenError, SerializationError, TransportError, URLConstructionError
)
from .sendable import Sendable
from .utils.log_sanitizer import sanitize_token, sanitize_url

logger = logging.getLogger(__name__)

INVALID_TOKEN_CHALLENGE = 'Bearer error="invalid_token"'
DEFAULT_TIMEOUT = 30


@dataclass
class ApiResponse:
    """
    A fully read HTTP response.

    Args:
        status: HTTP status code.
        headers: Case-insensitive response headers.
        body: Raw response body.
        url: Final request URL.
    """
    status: int
    headers: CIMultiDict = field(default_factory=CIMultiDict)
    body: bytes = b""
    url: str = ""

    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")

    def json(self) -> Any:
        try:
            return json.loads(self.body)
        except ValueError as e:
            raise SerializationError(f"Response body is not valid JSON: {e}") from e

    def decode(self, resource_cls):
        """Decode the body into the given Resource class."""
        return resource_cls.from_json(self.body)


def check_response(response: ApiResponse) -> ApiResponse:
    """
    Map a response onto the client's error policy.

    Returns:
        The response itself when the status is 2xx.

    Raises:
        InvalidTokenError: When the server challenges the bearer token.
        HTTPStatusError: For any other non-success status.
    """
    if 200 <= response.status < 300:
        return response

    challenge = response.headers.get("WWW-Authenticate", "")
    if challenge.startswith(INVALID_TOKEN_CHALLENGE):
        raise InvalidTokenError(response=response)

    raise HTTPStatusError(
        response.status,
        response,
        f"Calendar API error ({response.status}): {_error_message(response)}"
    )


def _error_message(response: ApiResponse) -> str:
    try:
        payload = response.json()
    except SerializationError:
        return response.text()[:200] or "no body"
    if isinstance(payload, dict) and isinstance(payload.get("error"), dict):
        return payload["error"].get("message", "Unknown error")
    return "Unknown error"


class Client:
    """
    Authenticated HTTP client for the Calendar API.

    Every verb takes an optional action segment and any Sendable target; the
    target supplies the URL and, for writes, the JSON body. One attempt per
    call: no retries, no token refresh. On InvalidTokenError the caller
    refreshes and builds a new client with `with_access_key`.

    Usage:
        async with Client(access_key) as client:
            events = await EventClient(client).list("primary", start, end)
    """

    def __init__(
            self,
            access_key: str,
            headers: Optional[Mapping[str, str]] = None,
            session: Optional[aiohttp.ClientSession] = None,
            timeout: float = DEFAULT_TIMEOUT
    ):
        self.access_key = access_key
        self._headers: Optional[Dict[str, str]] = dict(headers) if headers else None
        self._session = session
        self._owns_session = session is None
        self._timeout = timeout

    @classmethod
    def from_credentials(cls, credentials, **kwargs) -> "Client":
        """Build a client from google.oauth2 credentials holding a current token."""
        if not credentials.token:
            raise InvalidTokenError("Credentials carry no access token")
        return cls(credentials.token, **kwargs)

    def with_access_key(self, access_key: str) -> "Client":
        """A client with a new token that shares this client's session and headers."""
        sibling = Client(access_key, self._headers, self._session, self._timeout)
        sibling._owns_session = False
        return sibling

    def set_headers(self, headers: Mapping[str, str]) -> None:
        """Static headers added to every request."""
        self._headers = dict(headers)

    async def __aenter__(self) -> "Client":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def close(self) -> None:
        if self._owns_session and self._session is not None and not self._session.closed:
            await self._session.close()
        self._session = None

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create HTTP session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self._timeout)
            )
            self._owns_session = True
        return self._session

    def _request_headers(self, with_body: bool) -> Dict[str, str]:
        headers = dict(self._headers or {})
        headers["Authorization"] = f"Bearer {self.access_key}"
        if with_body:
            headers["Content-Type"] = "application/json"
        return headers

    async def send(self, method: str, url: URL, body: Optional[bytes] = None) -> ApiResponse:
        """
        Send one request and apply the error policy.

        Raises:
            URLConstructionError: If the URL is not https.
            TransportError: If no response was received.
            InvalidTokenError: If the token was rejected.
            HTTPStatusError: For other non-success statuses.
        """
        if url.scheme != "https":
            raise URLConstructionError(f"Refusing to send credentials over {url.scheme or 'a relative URL'}")

        logger.debug("%s %s (token %s)", method, sanitize_url(str(url)), sanitize_token(self.access_key))
        session = await self._get_session()

        try:
            async with session.request(
                method,
                url,
                headers=self._request_headers(body is not None),
                data=body,
            ) as resp:
                payload = await resp.read()
                response = ApiResponse(
                    status=resp.status,
                    headers=CIMultiDict(resp.headers),
                    body=payload,
                    url=str(resp.url),
                )
        except aiohttp.ClientError as e:
            logger.error("Transport error on %s %s: %s", method, sanitize_url(str(url)), e)
            raise TransportError(f"Network error: {e}") from e
        except asyncio.TimeoutError as e:
            logger.error("Timeout on %s %s", method, sanitize_url(str(url)))
            raise TransportError(f"Request timed out after {self._timeout}s") from e

        logger.debug("%s %s -> %d", method, sanitize_url(str(url)), response.status)
        try:
            return check_response(response)
        except InvalidTokenError:
            logger.warning("Access token rejected (token %s)", sanitize_token(self.access_key))
            raise

    async def get(self, action: Optional[str], target: Sendable) -> ApiResponse:
        return await self.send("GET", target.url(action))

    async def post(self, action: Optional[str], target: Sendable) -> ApiResponse:
        return await self.send("POST", target.url(action), target.body_bytes())

    async def put(self, action: Optional[str], target: Sendable) -> ApiResponse:
        return await self.send("PUT", target.url(action), target.body_bytes())

    async def patch(self, action: Optional[str], target: Sendable) -> ApiResponse:
        return await self.send("PATCH", target.url(action), target.body_bytes())

    async def delete(self, action: Optional[str], target: Sendable) -> ApiResponse:
        return await self.send("DELETE", target.url(action))
