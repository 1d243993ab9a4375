import pytest

from src.gcal_client.exceptions import MissingIdentityError, URLConstructionError
from src.gcal_client.resources import Calendar, CalendarList, CalendarListItem, Event, EventInstances, Events
from src.gcal_client.sendable import BASE_URL, Sendable, path_segment, query_value


@pytest.mark.unit
class TestPathSegment:
    """Test cases for identifier encoding."""

    def test_plain_id_unchanged(self):
        assert path_segment("abc123") == "abc123"

    def test_at_sign_kept(self):
        assert path_segment("team@group.calendar.google.com") == "team@group.calendar.google.com"

    def test_reserved_characters_encoded(self):
        assert path_segment("en.usa#holiday@group.v.calendar.google.com") == \
            "en.usa%23holiday@group.v.calendar.google.com"
        assert path_segment("a/b?c") == "a%2Fb%3Fc"

    @pytest.mark.parametrize("value", [None, ""])
    def test_missing_identity(self, value):
        with pytest.raises(MissingIdentityError, match="calendar id"):
            path_segment(value, "calendar id")

    def test_query_value_booleans(self):
        assert query_value(True) == "true"
        assert query_value(False) == "false"
        assert query_value(25) == "25"


@pytest.mark.unit
class TestResourcePaths:
    """Paths are relative and never carry a query string."""

    def test_calendar_paths(self):
        assert Calendar().path("insert") == "calendars"
        assert Calendar(id="cal1").path() == "calendars/cal1"
        assert Calendar(id="cal1").path("clear") == "calendars/cal1/clear"
        assert Calendar(id="cal1").path("insert") == "calendars"

    def test_calendar_list_paths(self):
        assert CalendarList().path() == "users/me/calendarList"
        assert CalendarListItem(id="cal1").path() == "users/me/calendarList/cal1"
        assert CalendarListItem(id="cal1").path("insert") == "users/me/calendarList"

    def test_event_paths(self):
        event = Event(calendar_id="cal123", id="evt1")
        assert event.path() == "calendars/cal123/events/evt1"
        assert event.path("move") == "calendars/cal123/events/evt1/move"
        assert event.path("insert") == "calendars/cal123/events"
        assert event.path("quickAdd") == "calendars/cal123/events/quickAdd"
        assert event.path("import") == "calendars/cal123/events/import"

    def test_events_and_instances_paths(self):
        assert Events(calendar_id="cal123").path() == "calendars/cal123/events"
        instances = EventInstances(calendar_id="cal123", event_id="evt1")
        assert instances.path() == "calendars/cal123/events/evt1/instances"

    def test_event_without_calendar(self):
        with pytest.raises(MissingIdentityError):
            Event(id="evt1").path()

    @pytest.mark.parametrize("resource", [Event(calendar_id="cal123"), Calendar(), CalendarListItem()])
    def test_single_resource_without_id(self, resource):
        with pytest.raises(MissingIdentityError):
            resource.path()

    def test_action_on_event_without_id(self):
        with pytest.raises(MissingIdentityError, match="event id"):
            Event(calendar_id="cal123").path("move")

    def test_paths_never_carry_query(self):
        event = Event(calendar_id="cal123", id="evt1")
        event.set_query("sendUpdates", "all")
        for action in (None, "move", "insert", "quickAdd"):
            assert "?" not in event.path(action)


@pytest.mark.unit
class TestUrlComposition:
    """Test cases for Sendable.url."""

    def test_empty_query_is_base_plus_path(self):
        url = Event(calendar_id="cal123", id="evt1").url()
        assert str(url) == f"{BASE_URL}/calendars/cal123/events/evt1"
        assert url.query_string == ""

    def test_query_parameters_encoded(self):
        request = Events(calendar_id="cal123")
        request.set_query("timeMin", "2025-01-15T09:00:00+01:00")
        request.set_query("q", "team sync")
        url = request.url()

        assert url.path == "/calendar/v3/calendars/cal123/events"
        assert url.query["timeMin"] == "2025-01-15T09:00:00+01:00"
        assert url.query["q"] == "team sync"
        assert "%2B01%3A00" in url.raw_query_string

    def test_repeated_key_keeps_last_value(self):
        request = Events(calendar_id="cal123")
        request.set_query("maxResults", 10).set_query("maxResults", 50)
        url = request.url()
        assert url.query.getall("maxResults") == ["50"]

    def test_remove_and_clear_query(self):
        request = Events(calendar_id="cal123")
        request.set_query("a", "1").set_query("b", "2")
        request.remove_query("a")
        assert request.query() == {"b": "2"}
        request.clear_query()
        assert request.query() == {}

    def test_query_returns_copy(self):
        request = Events(calendar_id="cal123")
        request.set_query("a", "1")
        request.query()["a"] = "changed"
        assert request.query() == {"a": "1"}

    def test_calendar_id_encoded_in_url(self):
        url = Events(calendar_id="en.usa#holiday@group.v.calendar.google.com").url()
        assert url.raw_path.endswith("/calendars/en.usa%23holiday@group.v.calendar.google.com/events")
        assert url.fragment == ""

    def test_path_with_query_rejected(self):
        class Broken(Sendable):
            def path(self, action=None):
                return "calendars?x=1"

        with pytest.raises(URLConstructionError):
            Broken().url()

    def test_query_is_not_part_of_body(self):
        event = Event(calendar_id="cal123", summary="Standup")
        event.set_query("sendUpdates", "all")
        assert b"sendUpdates" not in event.body_bytes()
        assert b"cal123" not in event.body_bytes()
