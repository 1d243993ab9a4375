from dataclasses import dataclass
from typing import Optional

from ..sendable import Sendable, path_segment
from .base import Resource
from .conference_properties import ConferenceProperties
from .constants import INSERT_ACTION, KIND_CALENDAR

# from: https://developers.google.com/calendar/api/v3/reference/calendars#resource


@dataclass
class Calendar(Resource, Sendable):
    """
    A single calendar's metadata.

    Args:
        id: Vendor-assigned identifier. Absent until the calendar is created.
        summary: Title of the calendar.
        time_zone: IANA time zone name, e.g. "Europe/Zurich".
    """
    kind: Optional[str] = KIND_CALENDAR
    etag: Optional[str] = None
    id: Optional[str] = None
    summary: Optional[str] = None
    description: Optional[str] = None
    location: Optional[str] = None
    time_zone: Optional[str] = None
    conference_properties: Optional[ConferenceProperties] = None

    def path(self, action: Optional[str] = None) -> str:
        if action == INSERT_ACTION:
            return "calendars"
        path = f"calendars/{path_segment(self.id, 'calendar id')}"
        return f"{path}/{action}" if action else path
