from .base import (
    GcalClientError, AuthenticationError, APIError, HTTPStatusError,
    TransportError, ValidationError, SerializationError
)
from .calendar import (
    CalendarError, EventNotFoundError, CalendarNotFoundError,
    MissingIdentityError, URLConstructionError
)
from .auth import InvalidTokenError, OAuthError

__all__ = [
    "GcalClientError",
    "AuthenticationError",
    "APIError",
    "HTTPStatusError",
    "TransportError",
    "ValidationError",
    "SerializationError",
    "CalendarError",
    "EventNotFoundError",
    "CalendarNotFoundError",
    "MissingIdentityError",
    "URLConstructionError",
    "InvalidTokenError",
    "OAuthError"
]
