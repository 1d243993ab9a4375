from dataclasses import dataclass, field
from typing import Dict, Optional
from urllib.parse import quote, urlencode

from yarl import URL

from .exceptions import MissingIdentityError, URLConstructionError

BASE_URL = "https://www.googleapis.com/calendar/v3"

QueryParams = Dict[str, str]


def path_segment(value: Optional[str], what: str = "id") -> str:
    """
    Percent-encode an identifier for use as one path segment.

    Calendar ids routinely contain '@' (kept) and '#' (encoded).

    Raises:
        MissingIdentityError: If the identifier is empty.
    """
    if not value:
        raise MissingIdentityError(f"A {what} is required to address this resource")
    return quote(value, safe="@")


def query_value(value) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


@dataclass
class Sendable:
    """
    Sendable is the contract a resource implements to be sent by the Client.

    The client asks the resource for its relative path, its query string and
    its JSON body; it never needs to know which resource it is sending.
    `query_string` is per-instance scratch configuration (sendUpdates,
    timeMin, ...) and is not part of the resource itself.
    """
    query_string: QueryParams = field(default_factory=dict, repr=False, compare=False, metadata={"skip": True})

    def path(self, action: Optional[str] = None) -> str:
        raise NotImplementedError

    def query(self) -> QueryParams:
        return dict(self.query_string)

    def set_query(self, key: str, value) -> "Sendable":
        """Set one query parameter; a repeated key keeps the last value."""
        self.query_string[key] = query_value(value)
        return self

    def remove_query(self, key: str) -> "Sendable":
        self.query_string.pop(key, None)
        return self

    def clear_query(self) -> "Sendable":
        self.query_string.clear()
        return self

    def url(self, action: Optional[str] = None) -> URL:
        """
        Compose the absolute request URL: base URL, relative path, query.

        Raises:
            URLConstructionError: If the path or parameters cannot form a URL.
        """
        path = self.path(action)
        if "?" in path or "#" in path:
            raise URLConstructionError(f"Resource path must not carry a query or fragment: {path!r}")

        raw = f"{BASE_URL}/{path}"
        query = self.query()
        if query:
            raw = f"{raw}?{urlencode(query, quote_via=quote)}"

        try:
            return URL(raw, encoded=True)
        except (TypeError, ValueError) as e:
            raise URLConstructionError(f"Cannot build URL for {path!r}: {e}") from e

    def body_bytes(self) -> bytes:
        """JSON body for write requests."""
        return self.to_json()
