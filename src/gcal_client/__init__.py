"""
Typed async client for the Google Calendar v3 REST API.

    params = await capture_access_token(client_parameters_from_file())
    async with Client(params.access_key) as client:
        events = await EventClient(client).list("primary", start, end)
"""

from .client import Client, ApiResponse, check_response
from .sendable import BASE_URL, Sendable
from .clients import EventClient, CalendarListClient, CalendarClient
from .clients.calendar import EventQueryBuilder
from .resources import *  # noqa: F401,F403
from .resources import __all__ as _resources_all
from .exceptions import *  # noqa: F401,F403
from .exceptions import __all__ as _exceptions_all
from .auth import *  # noqa: F401,F403
from .auth import __all__ as _auth_all

__version__ = "0.1.0"

__all__ = [
    "Client",
    "ApiResponse",
    "check_response",
    "BASE_URL",
    "Sendable",
    "EventClient",
    "CalendarListClient",
    "CalendarClient",
    "EventQueryBuilder",
    *_resources_all,
    *_exceptions_all,
    *_auth_all,
]
