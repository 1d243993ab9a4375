import asyncio
from datetime import datetime, date, timedelta
from typing import Dict, List, Optional, TYPE_CHECKING
import logging

from ...utils.datetime import convert_datetime_to_local_timezone, date_start, date_end, days_from_today, today_start
from .client import MAX_QUERY_LENGTH, MAX_RESULTS_LIMIT

if TYPE_CHECKING:
    from ...resources import Event
    from .client import EventClient

logger = logging.getLogger(__name__)

DEFAULT_CALENDAR_ID = "primary"


class EventQueryBuilder:
    """
    Builder pattern for constructing event list queries with a fluent API.
    Filters the API understands become query parameters of the list request;
    attendee and location filters run client-side on the result.

    Example usage:
        events = await (event_client.query()
            .limit(50)
            .in_date_range(start_date, end_date)
            .search("meeting")
            .in_calendar("work@company.com")
            .execute())
    """

    def __init__(self, event_client: "EventClient"):
        self._event_client = event_client
        self._max_results: Optional[int] = None
        self._start: Optional[datetime] = None
        self._end: Optional[datetime] = None
        self._query: Optional[str] = None
        self._calendar_id: str = DEFAULT_CALENDAR_ID
        self._single_events: Optional[bool] = None
        self._order_by: Optional[str] = None
        self._show_deleted: Optional[bool] = None
        self._attendee_filter: Optional[str] = None
        self._has_location_filter: Optional[bool] = None

    def limit(self, count: int) -> "EventQueryBuilder":
        """
        Set the maximum number of events to return.
        Args:
            count: Maximum number of events (1-2500)
        Returns:
            Self for method chaining
        """
        if count < 1 or count > MAX_RESULTS_LIMIT:
            raise ValueError(f"Limit must be between 1 and {MAX_RESULTS_LIMIT}")
        self._max_results = count
        return self

    def from_date(self, start: datetime) -> "EventQueryBuilder":
        self._start = start
        return self

    def to_date(self, end: datetime) -> "EventQueryBuilder":
        self._end = end
        return self

    def in_date_range(self, start: datetime, end: datetime) -> "EventQueryBuilder":
        """
        Set both start and end dates for the query.
        Args:
            start: Start datetime
            end: End datetime
        Returns:
            Self for method chaining
        """
        if convert_datetime_to_local_timezone(start) >= convert_datetime_to_local_timezone(end):
            raise ValueError("Start date must be before end date")
        self._start = start
        self._end = end
        return self

    def search(self, query: str) -> "EventQueryBuilder":
        """
        Add a free text search (the API's `q` parameter).
        """
        if len(query) > MAX_QUERY_LENGTH:
            raise ValueError(f"Query string cannot exceed {MAX_QUERY_LENGTH} characters")
        self._query = query
        return self

    def in_calendar(self, calendar_id: str) -> "EventQueryBuilder":
        self._calendar_id = calendar_id
        return self

    def single_events(self, expand: bool = True) -> "EventQueryBuilder":
        """Expand recurring events into their instances."""
        self._single_events = expand
        return self

    def order_by_start_time(self) -> "EventQueryBuilder":
        """Order by start time; implies single_events."""
        self._single_events = True
        self._order_by = "startTime"
        return self

    def order_by_updated(self) -> "EventQueryBuilder":
        self._order_by = "updated"
        return self

    def include_deleted(self) -> "EventQueryBuilder":
        self._show_deleted = True
        return self

    def by_attendee(self, email: str) -> "EventQueryBuilder":
        self._attendee_filter = email
        return self

    def with_location(self) -> "EventQueryBuilder":
        self._has_location_filter = True
        return self

    def without_location(self) -> "EventQueryBuilder":
        self._has_location_filter = False
        return self

    # Convenience date methods
    def today(self) -> "EventQueryBuilder":
        return self.in_date_range(today_start(), date_end(date.today()))

    def tomorrow(self) -> "EventQueryBuilder":
        tomorrow = date.today() + timedelta(days=1)
        return self.in_date_range(date_start(tomorrow), date_end(tomorrow))

    def this_week(self) -> "EventQueryBuilder":
        """
        Filter to events happening this week (Monday to Sunday).
        """
        today = date.today()
        monday = today - timedelta(days=today.weekday())
        sunday = monday + timedelta(days=6)
        return self.in_date_range(date_start(monday), date_end(sunday))

    def next_days(self, days: int) -> "EventQueryBuilder":
        """
        Filter to events happening in the next N days, starting today.
        """
        if days < 1:
            raise ValueError("Days must be positive")
        return self.in_date_range(days_from_today(0), days_from_today(days))

    def last_days(self, days: int) -> "EventQueryBuilder":
        if days < 1:
            raise ValueError("Days must be positive")
        return self.in_date_range(days_from_today(-days), date_end(date.today()))

    def _copy_for(self, calendar_id: str) -> "EventQueryBuilder":
        builder = EventQueryBuilder(self._event_client)
        builder.__dict__.update(self.__dict__)
        builder._calendar_id = calendar_id
        return builder

    def _apply_post_filters(self, events: List["Event"]) -> List["Event"]:
        """
        Apply client-side filters that can't be handled by the API.
        """
        filtered = events

        if self._attendee_filter:
            filtered = [event for event in filtered if event.has_attendee(self._attendee_filter)]

        if self._has_location_filter is not None:
            if self._has_location_filter:
                filtered = [event for event in filtered if event.location]
            else:
                filtered = [event for event in filtered if not event.location]

        return filtered

    async def execute(self) -> List["Event"]:
        """
        Execute the query and return the matching events.

        The limit applies to the final result. With attendee or location
        filters active the whole range is fetched before the limit is taken.

        Raises:
            ValueError: If query parameters are invalid
            GcalClientError: If the API call fails
        """
        logger.info("Executing event query with builder")

        has_post_filters = self._attendee_filter is not None or self._has_location_filter is not None
        events = await self._event_client.list(
            self._calendar_id,
            start=self._start,
            end=self._end,
            query=self._query,
            max_results=None if has_post_filters else self._max_results,
            single_events=self._single_events,
            order_by=self._order_by,
            show_deleted=self._show_deleted,
        )

        filtered_events = self._apply_post_filters(events)
        if self._max_results is not None:
            filtered_events = filtered_events[:self._max_results]

        logger.info("Builder query returned %d events (filtered from %d)",
                    len(filtered_events), len(events))
        return filtered_events

    async def count(self) -> int:
        events = await self.execute()
        return len(events)

    async def first(self) -> Optional["Event"]:
        events = await self.limit(1).execute()
        return events[0] if events else None

    async def exists(self) -> bool:
        return await self.first() is not None

    async def execute_multiple_calendars(self, calendar_ids: List[str]) -> Dict[str, List["Event"]]:
        """
        Run the same query against several calendars concurrently.
        Returns:
            Dictionary mapping calendar_id to list of events
        """
        logger.info("Executing builder query across %d calendars", len(calendar_ids))

        results = await asyncio.gather(
            *(self._copy_for(calendar_id).execute() for calendar_id in calendar_ids)
        )
        return dict(zip(calendar_ids, results))
