import json
import pytest
from datetime import date, datetime, timezone

from src.gcal_client.exceptions import SerializationError
from src.gcal_client.resources import (
    ConferenceData, CreateConferenceRequest, ConferenceSolutionKey, Event, EventAttachment,
    EventAttendee, EventDateTime, EventPerson, Events, ExtendedProperties, ReminderOverride
)


@pytest.mark.unit
@pytest.mark.calendar
class TestEventDateTime:
    """Test cases for EventDateTime."""

    def test_from_datetime(self):
        value = datetime(2025, 1, 15, 9, 0, tzinfo=timezone.utc)
        dt = EventDateTime.from_datetime(value, "UTC")
        assert dt.to_dict() == {"dateTime": "2025-01-15T09:00:00+00:00", "timeZone": "UTC"}
        assert not dt.is_all_day()
        assert dt.to_datetime() == value

    def test_from_date(self):
        dt = EventDateTime.from_date(date(2025, 1, 15))
        assert dt.to_dict() == {"date": "2025-01-15"}
        assert dt.is_all_day()
        assert dt.to_datetime() == datetime(2025, 1, 15)

    def test_unparseable_value(self):
        assert EventDateTime(date="not-a-date").to_datetime() is None
        assert EventDateTime().to_datetime() is None


@pytest.mark.unit
@pytest.mark.calendar
class TestEventAttendee:
    """Test cases for the EventAttendee class."""

    def test_to_dict_full(self):
        attendee = EventAttendee(
            email="john@example.com",
            display_name="John Doe",
            response_status="accepted",
            appears_as_self=True
        )
        expected = {
            "email": "john@example.com",
            "displayName": "John Doe",
            "responseStatus": "accepted",
            "self": True
        }
        assert attendee.to_dict() == expected

    def test_invalid_response_status(self):
        with pytest.raises(ValueError, match="Invalid response status"):
            EventAttendee(email="john@example.com", response_status="maybe")


@pytest.mark.unit
@pytest.mark.calendar
class TestEvent:
    """Test cases for the Event resource."""

    def test_from_dict(self, sample_google_event):
        event = Event.from_dict(sample_google_event)

        assert event.id == "test_event_123"
        assert event.summary == "Test Meeting"
        assert event.status == "confirmed"
        assert event.ical_uid == "test_event_123@google.com"
        assert event.html_link == "https://calendar.google.com/event?eid=test123"
        assert isinstance(event.start, EventDateTime)
        assert event.start.time_zone == "America/New_York"
        assert isinstance(event.organizer, EventPerson)
        assert event.organizer.appears_as_self is True
        assert [a.email for a in event.attendees] == ["john@example.com", "jane@example.com"]
        assert event.reminders.overrides == [ReminderOverride(method="popup", minutes=10)]
        assert event.calendar_id is None

    def test_round_trip_keeps_set_fields(self, sample_google_event):
        event = Event.from_dict(sample_google_event)
        assert event.to_dict() == sample_google_event
        assert Event.from_json(event.to_json()) == event

    def test_unset_fields_omitted(self):
        event = Event(summary="Standup")
        assert event.to_dict() == {"kind": "calendar#event", "summary": "Standup"}

    def test_kind_default_on_read(self):
        event = Event.from_dict({"id": "abc"})
        assert event.kind == "calendar#event"

    def test_unknown_keys_ignored(self):
        event = Event.from_dict({"id": "abc", "someFutureField": {"x": 1}})
        assert event.id == "abc"

    def test_nested_camel_case(self):
        event = Event(
            calendar_id="primary",
            extended_properties=ExtendedProperties(private={"crmId": "42"}),
            conference_data=ConferenceData(
                create_request=CreateConferenceRequest(
                    request_id="req-1",
                    conference_solution_key=ConferenceSolutionKey(type="hangoutsMeet")
                )
            ),
            attachments=[EventAttachment(file_url="https://drive.google.com/file/1", title="Agenda")],
        )
        payload = json.loads(event.body_bytes())
        assert payload["extendedProperties"] == {"private": {"crmId": "42"}}
        assert payload["conferenceData"]["createRequest"]["conferenceSolutionKey"] == {"type": "hangoutsMeet"}
        assert payload["attachments"] == [{"fileUrl": "https://drive.google.com/file/1", "title": "Agenda"}]
        assert "calendarId" not in payload

    def test_invalid_status_rejected(self):
        with pytest.raises(ValueError, match="Invalid event status"):
            Event(status="done")

    def test_invalid_status_while_decoding(self):
        with pytest.raises(SerializationError):
            Event.from_dict({"id": "abc", "status": "done"})

    def test_wrong_type_while_decoding(self):
        with pytest.raises(SerializationError):
            Event.from_dict({"id": "abc", "attendees": "john@example.com"})
        with pytest.raises(SerializationError):
            Event.from_dict({"id": "abc", "sequence": "three"})

    def test_invalid_json(self):
        with pytest.raises(SerializationError):
            Event.from_json(b"{not json")

    def test_helpers(self, sample_google_event):
        event = Event.from_dict(sample_google_event)
        assert event.duration_minutes() == 60
        assert event.is_recurring()
        assert not event.is_all_day()
        assert event.get_attendee_emails() == ["john@example.com", "jane@example.com"]
        assert event.has_attendee("jane@example.com")
        assert not event.has_attendee("nobody@example.com")

    def test_duration_mixed_all_day_and_timed(self):
        event = Event(
            start=EventDateTime(date="2025-01-15"),
            end=EventDateTime(date_time="2025-01-15T10:00:00+00:00"),
        )
        assert event.duration_minutes() is None


@pytest.mark.unit
@pytest.mark.calendar
class TestEvents:
    """Test cases for the Events envelope."""

    def test_empty_items(self):
        page = Events.from_dict({"kind": "calendar#events", "items": []})
        assert page.items == []
        assert page.next_page_token is None

    def test_missing_items(self):
        assert Events.from_dict({"kind": "calendar#events"}).items == []

    def test_adopt_items(self, sample_events_page):
        page = Events.from_dict(sample_events_page(next_page_token="page-2"))
        page.calendar_id = "primary"
        items = page.adopt_items()
        assert page.next_page_token == "page-2"
        assert page.access_role == "owner"
        assert [event.calendar_id for event in items] == ["primary"]

    def test_access_role_none(self, sample_events_page):
        page = Events.from_dict(dict(sample_events_page(), accessRole="none"))
        assert page.access_role == "none"

    def test_invalid_access_role(self, sample_events_page):
        with pytest.raises(SerializationError, match="access role"):
            Events.from_json(json.dumps(dict(sample_events_page(), accessRole="admin")))
