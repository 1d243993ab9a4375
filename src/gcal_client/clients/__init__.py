"""Resource clients for the Calendar API."""

from . import calendar
from .calendar import EventClient, CalendarListClient, CalendarClient

__all__ = [
    "calendar",
    "EventClient",
    "CalendarListClient",
    "CalendarClient",
]
