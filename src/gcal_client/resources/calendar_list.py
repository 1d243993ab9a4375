from dataclasses import dataclass, field
from typing import List, Optional

from ..sendable import Sendable, path_segment
from .base import Resource, validate_choice
from .conference_properties import ConferenceProperties, DefaultReminder
from .constants import (
    INSERT_ACTION, KIND_CALENDAR_LIST, KIND_CALENDAR_LIST_ENTRY, VALID_ACCESS_ROLES,
    VALID_NOTIFICATION_METHODS, VALID_NOTIFICATION_TYPES
)

# from: https://developers.google.com/calendar/api/v3/reference/calendarList#resource

CALENDAR_LIST_PATH = "users/me/calendarList"


@dataclass
class NotificationSetting(Resource):
    type: Optional[str] = None
    method: Optional[str] = None

    def __post_init__(self):
        validate_choice(self.type, VALID_NOTIFICATION_TYPES, "notification type")
        validate_choice(self.method, VALID_NOTIFICATION_METHODS, "notification method")


@dataclass
class NotificationSettings(Resource):
    notifications: List[NotificationSetting] = field(default_factory=list)


@dataclass
class CalendarListItem(Resource, Sendable):
    """
    A calendar as it appears in the user's calendar list: the user's own
    view of it (color, visibility, reminders, notifications).
    """
    kind: Optional[str] = KIND_CALENDAR_LIST_ENTRY
    etag: Optional[str] = None
    id: Optional[str] = None
    summary: Optional[str] = None
    summary_override: Optional[str] = None
    description: Optional[str] = None
    location: Optional[str] = None
    time_zone: Optional[str] = None
    color_id: Optional[str] = None
    background_color: Optional[str] = None
    foreground_color: Optional[str] = None
    hidden: Optional[bool] = None
    selected: Optional[bool] = None
    access_role: Optional[str] = None
    default_reminders: Optional[List[DefaultReminder]] = None
    notification_settings: Optional[NotificationSettings] = None
    primary: Optional[bool] = None
    deleted: Optional[bool] = None
    conference_properties: Optional[ConferenceProperties] = None

    def __post_init__(self):
        validate_choice(self.access_role, VALID_ACCESS_ROLES, "access role")

    def path(self, action: Optional[str] = None) -> str:
        if action == INSERT_ACTION:
            return CALENDAR_LIST_PATH
        return f"{CALENDAR_LIST_PATH}/{path_segment(self.id, 'calendar id')}"

    def display_name(self) -> Optional[str]:
        """The name the user sees: their override if set, else the summary."""
        return self.summary_override or self.summary


@dataclass
class CalendarList(Resource, Sendable):
    """
    One page of the user's calendar list. An empty instance, with filters in
    its query string, is also the request that fetches such a page.
    """
    kind: Optional[str] = KIND_CALENDAR_LIST
    etag: Optional[str] = None
    next_page_token: Optional[str] = None
    next_sync_token: Optional[str] = None
    items: List[CalendarListItem] = field(default_factory=list)

    def path(self, action: Optional[str] = None) -> str:
        return CALENDAR_LIST_PATH
