from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional
import logging

from ..sendable import Sendable, path_segment
from ..utils.datetime import parse_rfc3339
from .base import Resource, local, renamed, validate_choice
from .conference_properties import DefaultReminder
from .constants import (
    COLLECTION_ACTIONS, INSERT_ACTION, KIND_EVENT, KIND_EVENTS, VALID_AUTO_DECLINE_MODES,
    VALID_CHAT_STATUSES, VALID_CONFERENCE_SOLUTION_TYPES, VALID_CONFERENCE_STATUS_CODES,
    VALID_ENTRY_POINT_TYPES, VALID_EVENT_STATUSES, VALID_EVENT_TYPES, VALID_EVENTS_ACCESS_ROLES,
    VALID_REMINDER_METHODS, VALID_RESPONSE_STATUSES, VALID_TRANSPARENCIES, VALID_VISIBILITIES,
    VALID_WORKING_LOCATION_TYPES
)

logger = logging.getLogger(__name__)

# from: https://developers.google.com/calendar/api/v3/reference/events#resource


@dataclass
class EventDateTime(Resource):
    """
    Start or end of an event: `date` for all-day events, `date_time`
    (RFC3339) otherwise, with an optional IANA `time_zone`.
    """
    date: Optional[str] = None
    date_time: Optional[str] = None
    time_zone: Optional[str] = None

    @classmethod
    def from_datetime(cls, value: datetime, time_zone: Optional[str] = None) -> "EventDateTime":
        return cls(date_time=value.isoformat(), time_zone=time_zone)

    @classmethod
    def from_date(cls, value) -> "EventDateTime":
        """All-day value from a datetime.date."""
        return cls(date=value.isoformat())

    def is_all_day(self) -> bool:
        return self.date is not None and self.date_time is None

    def to_datetime(self) -> Optional[datetime]:
        """
        Parse into a datetime. All-day dates become midnight (naive).
        Returns None when neither field parses.
        """
        if self.date_time:
            return parse_rfc3339(self.date_time)
        if self.date:
            try:
                return datetime.strptime(self.date, "%Y-%m-%d")
            except ValueError:
                logger.warning("Failed to parse event date: %s", self.date)
        return None


@dataclass
class EventPerson(Resource):
    """Creator or organizer of an event."""
    id: Optional[str] = None
    email: Optional[str] = None
    display_name: Optional[str] = None
    appears_as_self: Optional[bool] = renamed("self")


@dataclass
class EventAttendee(Resource):
    id: Optional[str] = None
    email: Optional[str] = None
    display_name: Optional[str] = None
    organizer: Optional[bool] = None
    appears_as_self: Optional[bool] = renamed("self")
    resource: Optional[bool] = None
    optional: Optional[bool] = None
    response_status: Optional[str] = None
    comment: Optional[str] = None
    additional_guests: Optional[int] = None

    def __post_init__(self):
        validate_choice(self.response_status, VALID_RESPONSE_STATUSES, "response status")

    def __str__(self):
        if self.display_name:
            return f"{self.display_name} <{self.email}>"
        return self.email or ""


@dataclass
class EventAttachment(Resource):
    file_url: Optional[str] = None
    title: Optional[str] = None
    mime_type: Optional[str] = None
    icon_link: Optional[str] = None
    file_id: Optional[str] = None


@dataclass
class ConferenceSolutionKey(Resource):
    type: Optional[str] = None

    def __post_init__(self):
        validate_choice(self.type, VALID_CONFERENCE_SOLUTION_TYPES, "conference solution type")


@dataclass
class ConferenceSolution(Resource):
    key: Optional[ConferenceSolutionKey] = None
    name: Optional[str] = None
    icon_uri: Optional[str] = None


@dataclass
class ConferenceRequestStatus(Resource):
    status_code: Optional[str] = None

    def __post_init__(self):
        validate_choice(self.status_code, VALID_CONFERENCE_STATUS_CODES, "conference status code")


@dataclass
class CreateConferenceRequest(Resource):
    """Ask the server to create a conference (e.g. a Meet link) for the event."""
    request_id: Optional[str] = None
    conference_solution_key: Optional[ConferenceSolutionKey] = None
    status: Optional[ConferenceRequestStatus] = None


@dataclass
class EntryPoint(Resource):
    entry_point_type: Optional[str] = None
    uri: Optional[str] = None
    label: Optional[str] = None
    pin: Optional[str] = None
    access_code: Optional[str] = None
    meeting_code: Optional[str] = None
    passcode: Optional[str] = None
    password: Optional[str] = None

    def __post_init__(self):
        validate_choice(self.entry_point_type, VALID_ENTRY_POINT_TYPES, "entry point type")


@dataclass
class ConferenceData(Resource):
    create_request: Optional[CreateConferenceRequest] = None
    entry_points: Optional[List[EntryPoint]] = None
    conference_solution: Optional[ConferenceSolution] = None
    conference_id: Optional[str] = None
    signature: Optional[str] = None
    notes: Optional[str] = None


@dataclass
class ReminderOverride(Resource):
    method: Optional[str] = None
    minutes: Optional[int] = None

    def __post_init__(self):
        validate_choice(self.method, VALID_REMINDER_METHODS, "reminder method")


@dataclass
class EventReminders(Resource):
    use_default: Optional[bool] = None
    overrides: Optional[List[ReminderOverride]] = None


@dataclass
class ExtendedProperties(Resource):
    private: Optional[Dict[str, str]] = None
    shared: Optional[Dict[str, str]] = None


@dataclass
class EventSource(Resource):
    url: Optional[str] = None
    title: Optional[str] = None


@dataclass
class CustomLocation(Resource):
    label: Optional[str] = None


@dataclass
class OfficeLocation(Resource):
    building_id: Optional[str] = None
    floor_id: Optional[str] = None
    floor_section_id: Optional[str] = None
    desk_id: Optional[str] = None
    label: Optional[str] = None


@dataclass
class WorkingLocationProperties(Resource):
    type: Optional[str] = None
    home_office: Optional[Dict[str, str]] = None
    custom_location: Optional[CustomLocation] = None
    office_location: Optional[OfficeLocation] = None

    def __post_init__(self):
        validate_choice(self.type, VALID_WORKING_LOCATION_TYPES, "working location type")


@dataclass
class OutOfOfficeProperties(Resource):
    auto_decline_mode: Optional[str] = None
    decline_message: Optional[str] = None

    def __post_init__(self):
        validate_choice(self.auto_decline_mode, VALID_AUTO_DECLINE_MODES, "auto decline mode")


@dataclass
class FocusTimeProperties(Resource):
    auto_decline_mode: Optional[str] = None
    decline_message: Optional[str] = None
    chat_status: Optional[str] = None

    def __post_init__(self):
        validate_choice(self.auto_decline_mode, VALID_AUTO_DECLINE_MODES, "auto decline mode")
        validate_choice(self.chat_status, VALID_CHAT_STATUSES, "chat status")


@dataclass
class Event(Resource, Sendable):
    """
    A calendar event.

    Every field is optional so that an Event carrying only a handful of
    fields can be sent as a patch. `calendar_id` is not part of the JSON
    resource; it names the calendar the event is addressed through and must
    be set before the event is used in any request.

    Args:
        calendar_id: Calendar the event belongs to, e.g. "primary".
        id: Vendor-assigned (or client-chosen, on insert) identifier.
        start: Start as an EventDateTime (date or dateTime with time zone).
        end: Exclusive end as an EventDateTime.
        status: One of confirmed, tentative, cancelled.
        attendees: List of EventAttendee.
        recurrence: RRULE, EXRULE, RDATE and EXDATE lines (RFC 5545).
    """
    calendar_id: Optional[str] = local()
    kind: Optional[str] = KIND_EVENT
    etag: Optional[str] = None
    id: Optional[str] = None
    status: Optional[str] = None
    html_link: Optional[str] = None
    created: Optional[str] = None
    updated: Optional[str] = None
    summary: Optional[str] = None
    description: Optional[str] = None
    location: Optional[str] = None
    color_id: Optional[str] = None
    creator: Optional[EventPerson] = None
    organizer: Optional[EventPerson] = None
    start: Optional[EventDateTime] = None
    end: Optional[EventDateTime] = None
    end_time_unspecified: Optional[bool] = None
    recurrence: Optional[List[str]] = None
    recurring_event_id: Optional[str] = None
    original_start_time: Optional[EventDateTime] = None
    transparency: Optional[str] = None
    visibility: Optional[str] = None
    ical_uid: Optional[str] = renamed("iCalUID")
    sequence: Optional[int] = None
    attendees: Optional[List[EventAttendee]] = None
    attendees_omitted: Optional[bool] = None
    extended_properties: Optional[ExtendedProperties] = None
    hangout_link: Optional[str] = None
    conference_data: Optional[ConferenceData] = None
    anyone_can_add_self: Optional[bool] = None
    guests_can_invite_others: Optional[bool] = None
    guests_can_modify: Optional[bool] = None
    guests_can_see_other_guests: Optional[bool] = None
    private_copy: Optional[bool] = None
    locked: Optional[bool] = None
    reminders: Optional[EventReminders] = None
    source: Optional[EventSource] = None
    working_location_properties: Optional[WorkingLocationProperties] = None
    out_of_office_properties: Optional[OutOfOfficeProperties] = None
    focus_time_properties: Optional[FocusTimeProperties] = None
    attachments: Optional[List[EventAttachment]] = None
    event_type: Optional[str] = None

    def __post_init__(self):
        validate_choice(self.status, VALID_EVENT_STATUSES, "event status")
        validate_choice(self.visibility, VALID_VISIBILITIES, "visibility")
        validate_choice(self.transparency, VALID_TRANSPARENCIES, "transparency")
        validate_choice(self.event_type, VALID_EVENT_TYPES, "event type")

    def path(self, action: Optional[str] = None) -> str:
        """
        `calendars/{calendarId}/events[/{eventId}][/{action}]`.

        Collection actions (quickAdd, import, watch) and "insert" address
        the events collection; any other action needs the event id.
        """
        collection = f"calendars/{path_segment(self.calendar_id, 'calendar id')}/events"
        if action == INSERT_ACTION:
            return collection
        if action in COLLECTION_ACTIONS:
            return f"{collection}/{action}"
        path = f"{collection}/{path_segment(self.id, 'event id')}"
        return f"{path}/{action}" if action else path

    def start_datetime(self) -> Optional[datetime]:
        return self.start.to_datetime() if self.start else None

    def end_datetime(self) -> Optional[datetime]:
        return self.end.to_datetime() if self.end else None

    def duration_minutes(self) -> Optional[int]:
        """
        Calculate the duration of the event in minutes.
        Returns:
            Duration in minutes, or None if start/end times are missing or
            mix all-day and timed values.
        """
        start, end = self.start_datetime(), self.end_datetime()
        if not start or not end:
            return None
        try:
            return int((end - start).total_seconds() / 60)
        except TypeError:
            return None

    def is_all_day(self) -> bool:
        return bool(self.start and self.start.is_all_day())

    def is_recurring(self) -> bool:
        return bool(self.recurrence or self.recurring_event_id)

    def get_attendee_emails(self) -> List[str]:
        return [attendee.email for attendee in self.attendees or [] if attendee.email]

    def has_attendee(self, email: str) -> bool:
        return any(attendee.email == email for attendee in self.attendees or [])


@dataclass
class Events(Resource, Sendable):
    """
    One page of events of a calendar. An empty instance with a
    `calendar_id` and filters in its query string is the request for it.
    """
    calendar_id: Optional[str] = local()
    kind: Optional[str] = KIND_EVENTS
    etag: Optional[str] = None
    summary: Optional[str] = None
    description: Optional[str] = None
    updated: Optional[str] = None
    time_zone: Optional[str] = None
    access_role: Optional[str] = None
    default_reminders: Optional[List[DefaultReminder]] = None
    next_page_token: Optional[str] = None
    next_sync_token: Optional[str] = None
    items: List[Event] = field(default_factory=list)

    def __post_init__(self):
        validate_choice(self.access_role, VALID_EVENTS_ACCESS_ROLES, "access role")

    def path(self, action: Optional[str] = None) -> str:
        path = f"calendars/{path_segment(self.calendar_id, 'calendar id')}/events"
        return f"{path}/{action}" if action else path

    def adopt_items(self) -> List[Event]:
        """Stamp the page's calendar id on every item so they can be written back."""
        for event in self.items:
            if event.calendar_id is None:
                event.calendar_id = self.calendar_id
        return self.items


@dataclass
class EventInstances(Events):
    """Request for the instances of one recurring event; the response is an Events page."""
    event_id: Optional[str] = local()

    def path(self, action: Optional[str] = None) -> str:
        return super().path(f"{path_segment(self.event_id, 'event id')}/instances")
