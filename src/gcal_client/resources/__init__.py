"""Typed Calendar API resources."""

from .base import Resource
from .calendar import Calendar
from .calendar_list import CalendarList, CalendarListItem, NotificationSetting, NotificationSettings
from .conference_properties import ConferenceProperties, DefaultReminder
from .events import (
    ConferenceData, ConferenceRequestStatus, ConferenceSolution, ConferenceSolutionKey,
    CreateConferenceRequest, CustomLocation, EntryPoint, Event, EventAttachment,
    EventAttendee, EventDateTime, EventInstances, EventPerson, EventReminders, EventSource,
    Events, ExtendedProperties, FocusTimeProperties, OfficeLocation, OutOfOfficeProperties,
    ReminderOverride, WorkingLocationProperties
)

__all__ = [
    "Resource",

    # Calendars
    "Calendar",
    "CalendarList",
    "CalendarListItem",
    "NotificationSetting",
    "NotificationSettings",
    "ConferenceProperties",
    "DefaultReminder",

    # Events
    "Event",
    "Events",
    "EventInstances",
    "EventDateTime",
    "EventPerson",
    "EventAttendee",
    "EventAttachment",
    "EventReminders",
    "ReminderOverride",
    "EventSource",
    "ExtendedProperties",
    "ConferenceData",
    "ConferenceSolution",
    "ConferenceSolutionKey",
    "ConferenceRequestStatus",
    "CreateConferenceRequest",
    "EntryPoint",
    "WorkingLocationProperties",
    "CustomLocation",
    "OfficeLocation",
    "OutOfOfficeProperties",
    "FocusTimeProperties",
]
