"""Vendor string literals accepted by the Calendar API."""

KIND_CALENDAR = "calendar#calendar"
KIND_CALENDAR_LIST = "calendar#calendarList"
KIND_CALENDAR_LIST_ENTRY = "calendar#calendarListEntry"
KIND_EVENT = "calendar#event"
KIND_EVENTS = "calendar#events"

VALID_ACCESS_ROLES = ("freeBusyReader", "reader", "writer", "owner")
# The events envelope also reports "none" when the caller cannot see the calendar.
VALID_EVENTS_ACCESS_ROLES = ("none",) + VALID_ACCESS_ROLES
VALID_SEND_UPDATES = ("all", "externalOnly", "none")

VALID_REMINDER_METHODS = ("email", "popup")
VALID_NOTIFICATION_METHODS = ("email",)
VALID_NOTIFICATION_TYPES = (
    "eventCreation", "eventChange", "eventCancellation", "eventResponse", "agenda"
)
VALID_CONFERENCE_SOLUTION_TYPES = ("eventHangout", "eventNamedHangout", "hangoutsMeet", "addOn")

VALID_EVENT_STATUSES = ("confirmed", "tentative", "cancelled")
VALID_RESPONSE_STATUSES = ("needsAction", "declined", "tentative", "accepted")
VALID_VISIBILITIES = ("default", "public", "private", "confidential")
VALID_TRANSPARENCIES = ("opaque", "transparent")
VALID_EVENT_TYPES = (
    "default", "outOfOffice", "focusTime", "workingLocation", "fromGmail", "birthday"
)
VALID_ENTRY_POINT_TYPES = ("video", "phone", "sip", "more")
VALID_CONFERENCE_STATUS_CODES = ("pending", "success", "failure")
VALID_WORKING_LOCATION_TYPES = ("homeOffice", "officeLocation", "customLocation")
VALID_AUTO_DECLINE_MODES = (
    "declineNone", "declineAllConflictingInvitations", "declineOnlyNewConflictingInvitations"
)
VALID_CHAT_STATUSES = ("available", "doNotDisturb")

# Event actions addressed at the events collection rather than a single event.
COLLECTION_ACTIONS = ("quickAdd", "import", "watch")
INSERT_ACTION = "insert"
