from contextlib import asynccontextmanager
from datetime import datetime
from typing import List, Optional
import logging

from ...client import Client
from ...exceptions import (
    CalendarError, CalendarNotFoundError, EventNotFoundError, HTTPStatusError,
    MissingIdentityError, ValidationError
)
from ...resources import Calendar, CalendarList, CalendarListItem, Event, EventInstances, Events
from ...resources.base import validate_choice
from ...resources.constants import INSERT_ACTION, VALID_ACCESS_ROLES, VALID_SEND_UPDATES
from ...utils.datetime import convert_datetime_to_iso, convert_datetime_to_local_timezone
from ...utils.log_sanitizer import sanitize_for_logging

logger = logging.getLogger(__name__)

MAX_RESULTS_LIMIT = 2500
MAX_QUERY_LENGTH = 500


@asynccontextmanager
async def not_found_as(error_cls, what: str):
    """Re-raise a 404 from the API as the given not-found error."""
    try:
        yield
    except HTTPStatusError as e:
        if e.status == 404 and not isinstance(e, CalendarError):
            raise error_cls(e.status, e.response, f"{what} not found") from e
        raise


def _require_id(resource, what: str) -> None:
    if not resource.id:
        raise MissingIdentityError(f"A {what} is required for this operation")


def _apply_send_updates(target, send_updates: Optional[str]) -> None:
    if send_updates is not None:
        validate_choice(send_updates, VALID_SEND_UPDATES, "sendUpdates")
        target.set_query("sendUpdates", send_updates)


def _apply_time_range(target, start: Optional[datetime], end: Optional[datetime]) -> None:
    if start and end and convert_datetime_to_local_timezone(start) >= convert_datetime_to_local_timezone(end):
        raise ValidationError("Start time must be before end time")
    if start:
        target.set_query("timeMin", convert_datetime_to_iso(start))
    if end:
        target.set_query("timeMax", convert_datetime_to_iso(end))


class EventClient:
    """
    Event operations over an authenticated Client.

    The client holds no state between calls; any number of EventClients may
    share one Client.
    """

    def __init__(self, client: Client):
        self._client = client

    def query(self):
        """
        Create a new EventQueryBuilder for building event queries with a fluent API.

        Example:
            events = await (EventClient(client).query()
                .in_calendar("work@example.com")
                .next_days(7)
                .search("standup")
                .execute())
        """
        from .query_builder import EventQueryBuilder
        return EventQueryBuilder(self)

    async def _collect(
            self,
            request: Events,
            error_cls=CalendarNotFoundError,
            limit: Optional[int] = None
    ) -> List[Event]:
        """Follow nextPageToken until the result set is complete or `limit` items arrived."""
        items: List[Event] = []
        pages = 0
        while True:
            page = await self._fetch_page(request, error_cls)
            items.extend(page.items)
            pages += 1
            if limit is not None and len(items) >= limit:
                logger.info("Fetched %d events in %d page(s), limit reached", limit, pages)
                return items[:limit]
            if not page.next_page_token:
                logger.info("Fetched %d events in %d page(s)", len(items), pages)
                return items
            request.set_query("pageToken", page.next_page_token)

    async def _fetch_page(self, request: Events, error_cls=CalendarNotFoundError) -> Events:
        what = f"Calendar {request.calendar_id}"
        if isinstance(request, EventInstances):
            what = f"Event {request.event_id}"
        async with not_found_as(error_cls, what):
            response = await self._client.get(None, request)
        page = response.decode(Events)
        page.calendar_id = request.calendar_id
        page.adopt_items()
        return page

    @staticmethod
    def _list_request(
            request: Events,
            start: Optional[datetime],
            end: Optional[datetime],
            query: Optional[str],
            max_results: Optional[int],
            single_events: Optional[bool],
            order_by: Optional[str],
            show_deleted: Optional[bool],
            params: dict
    ) -> Events:
        if max_results is not None and (max_results < 1 or max_results > MAX_RESULTS_LIMIT):
            raise ValueError(f"max_results must be between 1 and {MAX_RESULTS_LIMIT}")
        if query and len(query) > MAX_QUERY_LENGTH:
            raise ValueError(f"Query string cannot exceed {MAX_QUERY_LENGTH} characters")
        if order_by == "startTime" and not single_events:
            raise ValueError("order_by='startTime' requires single_events=True")

        _apply_time_range(request, start, end)
        if query:
            request.set_query("q", query)
        if max_results is not None:
            request.set_query("maxResults", max_results)
        if single_events is not None:
            request.set_query("singleEvents", single_events)
        if order_by:
            request.set_query("orderBy", order_by)
        if show_deleted is not None:
            request.set_query("showDeleted", show_deleted)
        for key, value in params.items():
            if value is not None:
                request.set_query(key, value)
        return request

    async def list(
            self,
            calendar_id: str,
            start: Optional[datetime] = None,
            end: Optional[datetime] = None,
            query: Optional[str] = None,
            max_results: Optional[int] = None,
            single_events: Optional[bool] = None,
            order_by: Optional[str] = None,
            show_deleted: Optional[bool] = None,
            **params
    ) -> List[Event]:
        """
        List the events of a calendar, following every page.

        Args:
            calendar_id: Calendar to list, e.g. "primary".
            start: Lower bound (exclusive) for an event's end time, sent as timeMin.
            end: Upper bound (exclusive) for an event's start time, sent as timeMax.
            query: Free text search.
            max_results: Maximum number of events to return (1-2500), also
                sent as the page size. Without it every page is fetched.
            single_events: Expand recurring events into instances.
            order_by: "startTime" (needs single_events) or "updated".
            show_deleted: Include cancelled events.
            **params: Further API query parameters, camelCase.

        Returns:
            Every event in the result set; an empty list if there are none.
        """
        sanitized = sanitize_for_logging(calendar_id=calendar_id, query=query)
        logger.info("Listing events in %s from %s to %s (query=%s)",
                    sanitized['calendar_id'], start, end, sanitized['query'])

        request = self._list_request(
            Events(calendar_id=calendar_id), start, end, query,
            max_results, single_events, order_by, show_deleted, params
        )
        return await self._collect(request, limit=max_results)

    async def list_page(
            self,
            calendar_id: str,
            page_token: Optional[str] = None,
            sync_token: Optional[str] = None,
            **params
    ) -> Events:
        """
        Fetch a single page of events, keeping the envelope (nextPageToken,
        nextSyncToken, default reminders, access role).
        """
        request = Events(calendar_id=calendar_id)
        if page_token:
            request.set_query("pageToken", page_token)
        if sync_token:
            request.set_query("syncToken", sync_token)
        for key, value in params.items():
            if value is not None:
                request.set_query(key, value)
        return await self._fetch_page(request)

    async def get(self, calendar_id: str, event_id: str) -> Event:
        """
        Retrieve one event by id.

        Raises:
            EventNotFoundError: If the event does not exist.
        """
        logger.info("Retrieving event %s from %s", event_id, sanitize_for_logging(calendar_id=calendar_id)['calendar_id'])
        request = Event(calendar_id=calendar_id, id=event_id)
        async with not_found_as(EventNotFoundError, f"Event {event_id}"):
            response = await self._client.get(None, request)
        return self._adopt(response.decode(Event), calendar_id)

    async def insert(
            self,
            event: Event,
            send_updates: Optional[str] = None,
            max_attendees: Optional[int] = None
    ) -> Event:
        """
        Create an event in `event.calendar_id`.

        Args:
            event: The event to create.
            send_updates: Who is notified: "all", "externalOnly" or "none".
            max_attendees: Cap on attendees included in the response.

        Returns:
            The created event as stored by the server.
        """
        if event.attachments:
            event.set_query("supportsAttachments", True)
        else:
            event.remove_query("supportsAttachments")
        if event.conference_data and event.conference_data.create_request:
            event.set_query("conferenceDataVersion", 1)
        _apply_send_updates(event, send_updates)
        if max_attendees is not None:
            event.set_query("maxAttendees", max_attendees)

        logger.info("Inserting event into %s", sanitize_for_logging(calendar_id=event.calendar_id)['calendar_id'])
        async with not_found_as(CalendarNotFoundError, f"Calendar {event.calendar_id}"):
            response = await self._client.post(INSERT_ACTION, event)
        created = self._adopt(response.decode(Event), event.calendar_id)
        logger.info("Event created with ID: %s", created.id)
        return created

    async def update(self, event: Event, send_updates: Optional[str] = None) -> Event:
        """Replace the whole event (PUT); fields left unset are cleared on the server."""
        _require_id(event, "event id")
        _apply_send_updates(event, send_updates)
        logger.info("Updating event %s", event.id)
        async with not_found_as(EventNotFoundError, f"Event {event.id}"):
            response = await self._client.put(None, event)
        return self._adopt(response.decode(Event), event.calendar_id)

    async def patch(self, event: Event, send_updates: Optional[str] = None) -> Event:
        """Update only the fields set on `event` (PATCH)."""
        _require_id(event, "event id")
        _apply_send_updates(event, send_updates)
        logger.info("Patching event %s", event.id)
        async with not_found_as(EventNotFoundError, f"Event {event.id}"):
            response = await self._client.patch(None, event)
        return self._adopt(response.decode(Event), event.calendar_id)

    async def delete(self, event: Event, send_updates: Optional[str] = None) -> bool:
        _require_id(event, "event id")
        _apply_send_updates(event, send_updates)
        logger.info("Deleting event %s", event.id)
        async with not_found_as(EventNotFoundError, f"Event {event.id}"):
            await self._client.delete(None, event)
        return True

    async def move_to_calendar(
            self,
            event: Event,
            destination: str,
            send_updates: Optional[str] = None
    ) -> bool:
        """
        Move an event to another calendar (changes its organizer).

        Returns:
            True once the server accepted the move. `event.calendar_id` then
            points at the destination.
        """
        _require_id(event, "event id")
        event.set_query("destination", destination)
        _apply_send_updates(event, send_updates)
        sanitized = sanitize_for_logging(calendar_id=event.calendar_id, destination=destination)
        logger.info("Moving event %s from %s to %s", event.id, sanitized['calendar_id'], sanitized['destination'])

        async with not_found_as(EventNotFoundError, f"Event {event.id}"):
            await self._client.post("move", event)
        event.remove_query("destination")
        event.calendar_id = destination
        return True

    async def add(self, calendar_id: str, text: str, send_updates: Optional[str] = None) -> Event:
        """
        Create an event from free text, e.g. "Lunch with Ana tomorrow at noon".

        The text travels as a query parameter; the request has no body.
        """
        if not text:
            raise ValidationError("Quick add text cannot be empty")
        request = Event(calendar_id=calendar_id)
        request.set_query("text", text)
        _apply_send_updates(request, send_updates)
        logger.info("Quick-adding event: %s", sanitize_for_logging(text=text)['text'])

        async with not_found_as(CalendarNotFoundError, f"Calendar {calendar_id}"):
            response = await self._client.send("POST", request.url("quickAdd"))
        return self._adopt(response.decode(Event), calendar_id)

    async def import_event(self, event: Event) -> Event:
        """
        Import a private copy of an existing event (identified by iCalUID)
        into `event.calendar_id`.
        """
        if not event.ical_uid:
            raise ValidationError("Importing an event requires its iCalUID")
        if event.attachments:
            event.set_query("supportsAttachments", True)
        else:
            event.remove_query("supportsAttachments")
        logger.info("Importing event %s", event.ical_uid)

        async with not_found_as(CalendarNotFoundError, f"Calendar {event.calendar_id}"):
            response = await self._client.post("import", event)
        return self._adopt(response.decode(Event), event.calendar_id)

    async def instances(
            self,
            event: Event,
            start: Optional[datetime] = None,
            end: Optional[datetime] = None,
            **params
    ) -> List[Event]:
        """Every instance of a recurring event, optionally bounded in time."""
        request = EventInstances(calendar_id=event.calendar_id, event_id=event.id)
        _apply_time_range(request, start, end)
        for key, value in params.items():
            if value is not None:
                request.set_query(key, value)
        logger.info("Listing instances of event %s", event.id)
        return await self._collect(request, EventNotFoundError)

    @staticmethod
    def _adopt(event: Event, calendar_id: Optional[str]) -> Event:
        event.calendar_id = calendar_id
        return event


class CalendarListClient:
    """Operations on the authenticated user's calendar list."""

    def __init__(self, client: Client):
        self._client = client

    async def list(
            self,
            min_access_role: Optional[str] = "owner",
            show_hidden: Optional[bool] = None,
            show_deleted: Optional[bool] = None
    ) -> List[CalendarListItem]:
        """
        List calendar list entries, following every page.

        Args:
            min_access_role: Only calendars where the user has at least this
                role (freeBusyReader, reader, writer, owner). None for all.
            show_hidden: Include hidden entries.
            show_deleted: Include deleted entries.
        """
        request = CalendarList()
        if min_access_role is not None:
            validate_choice(min_access_role, VALID_ACCESS_ROLES, "access role")
            request.set_query("minAccessRole", min_access_role)
        if show_hidden is not None:
            request.set_query("showHidden", show_hidden)
        if show_deleted is not None:
            request.set_query("showDeleted", show_deleted)

        logger.info("Listing calendars (minAccessRole=%s)", min_access_role)
        items: List[CalendarListItem] = []
        while True:
            page = (await self._client.get(None, request)).decode(CalendarList)
            items.extend(page.items)
            if not page.next_page_token:
                logger.info("Found %d calendars", len(items))
                return items
            request.set_query("pageToken", page.next_page_token)

    async def get(self, calendar_id: str) -> CalendarListItem:
        async with not_found_as(CalendarNotFoundError, f"Calendar {calendar_id}"):
            response = await self._client.get(None, CalendarListItem(id=calendar_id))
        return response.decode(CalendarListItem)

    async def insert(self, item: CalendarListItem) -> CalendarListItem:
        """Subscribe the user to an existing calendar (`item.id`)."""
        if not item.id:
            raise ValidationError("Adding a calendar to the list requires its id")
        logger.info("Adding calendar %s to the calendar list", sanitize_for_logging(calendar_id=item.id)['calendar_id'])
        async with not_found_as(CalendarNotFoundError, f"Calendar {item.id}"):
            response = await self._client.post(INSERT_ACTION, item)
        return response.decode(CalendarListItem)

    async def update(self, item: CalendarListItem) -> CalendarListItem:
        _require_id(item, "calendar id")
        async with not_found_as(CalendarNotFoundError, f"Calendar {item.id}"):
            response = await self._client.put(None, item)
        return response.decode(CalendarListItem)

    async def patch(self, item: CalendarListItem) -> CalendarListItem:
        _require_id(item, "calendar id")
        async with not_found_as(CalendarNotFoundError, f"Calendar {item.id}"):
            response = await self._client.patch(None, item)
        return response.decode(CalendarListItem)

    async def delete(self, item: CalendarListItem) -> bool:
        """Remove the calendar from the user's list (the calendar itself stays)."""
        _require_id(item, "calendar id")
        async with not_found_as(CalendarNotFoundError, f"Calendar {item.id}"):
            await self._client.delete(None, item)
        return True


class CalendarClient:
    """Operations on calendars themselves (metadata, creation, deletion)."""

    def __init__(self, client: Client):
        self._client = client

    async def get(self, calendar_id: str) -> Calendar:
        async with not_found_as(CalendarNotFoundError, f"Calendar {calendar_id}"):
            response = await self._client.get(None, Calendar(id=calendar_id))
        return response.decode(Calendar)

    async def insert(self, calendar: Calendar) -> Calendar:
        """Create a secondary calendar; the server assigns the id."""
        if not calendar.summary:
            raise ValidationError("A new calendar needs a summary")
        logger.info("Creating calendar")
        response = await self._client.post(INSERT_ACTION, calendar)
        created = response.decode(Calendar)
        logger.info("Calendar created with ID: %s", sanitize_for_logging(calendar_id=created.id)['calendar_id'])
        return created

    async def update(self, calendar: Calendar) -> Calendar:
        _require_id(calendar, "calendar id")
        async with not_found_as(CalendarNotFoundError, f"Calendar {calendar.id}"):
            response = await self._client.put(None, calendar)
        return response.decode(Calendar)

    async def patch(self, calendar: Calendar) -> Calendar:
        _require_id(calendar, "calendar id")
        async with not_found_as(CalendarNotFoundError, f"Calendar {calendar.id}"):
            response = await self._client.patch(None, calendar)
        return response.decode(Calendar)

    async def delete(self, calendar: Calendar) -> bool:
        """Delete a secondary calendar. Use `clear` for the primary one."""
        _require_id(calendar, "calendar id")
        async with not_found_as(CalendarNotFoundError, f"Calendar {calendar.id}"):
            await self._client.delete(None, calendar)
        return True

    async def clear(self, calendar: Calendar) -> bool:
        """Delete every event of a primary calendar."""
        _require_id(calendar, "calendar id")
        async with not_found_as(CalendarNotFoundError, f"Calendar {calendar.id}"):
            await self._client.post("clear", calendar)
        return True
