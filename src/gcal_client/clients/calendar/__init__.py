"""Calendar resource clients."""

from .client import EventClient, CalendarListClient, CalendarClient
from .query_builder import EventQueryBuilder

__all__ = [
    "EventClient",
    "CalendarListClient",
    "CalendarClient",
    "EventQueryBuilder",
]
