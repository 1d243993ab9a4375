import json
import pytest
import sys
from pathlib import Path
from types import SimpleNamespace

from multidict import CIMultiDict

# Add the project root to the Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))


class FakeResponse:
    """Stands in for an aiohttp response used as an async context manager."""

    def __init__(self, status=200, body=b"", headers=None, url="https://www.googleapis.com/calendar/v3/"):
        if not isinstance(body, (bytes, str)):
            body = json.dumps(body)
        if isinstance(body, str):
            body = body.encode("utf-8")
        self.status = status
        self._body = body
        self.headers = CIMultiDict(headers or {})
        self.url = url

    async def read(self):
        return self._body

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return False


class FakeSession:
    """
    Records every request and answers from a queue of FakeResponses.
    An exception in the queue is raised instead of answering.
    """

    def __init__(self, *responses):
        self.responses = list(responses)
        self.requests = []
        self.closed = False

    def _answer(self, method, url, kwargs):
        self.requests.append(SimpleNamespace(
            method=method,
            url=url,
            headers=kwargs.get("headers") or {},
            data=kwargs.get("data"),
            auth=kwargs.get("auth"),
        ))
        answer = self.responses.pop(0)
        if isinstance(answer, BaseException):
            raise answer
        return answer

    def request(self, method, url, **kwargs):
        return self._answer(method, url, kwargs)

    def post(self, url, **kwargs):
        return self._answer("POST", url, kwargs)

    async def close(self):
        self.closed = True


@pytest.fixture
def fake_session_factory():
    return FakeSession


@pytest.fixture
def json_response():
    def make(body, status=200, headers=None):
        return FakeResponse(status=status, body=body, headers=headers)
    return make


@pytest.fixture
def sample_google_event():
    """Sample Google Calendar API event response."""
    return {
        "kind": "calendar#event",
        "id": "test_event_123",
        "status": "confirmed",
        "summary": "Test Meeting",
        "description": "A test meeting for unit testing",
        "location": "Test Room",
        "start": {"dateTime": "2025-01-15T09:00:00-05:00", "timeZone": "America/New_York"},
        "end": {"dateTime": "2025-01-15T10:00:00-05:00", "timeZone": "America/New_York"},
        "htmlLink": "https://calendar.google.com/event?eid=test123",
        "iCalUID": "test_event_123@google.com",
        "organizer": {"email": "owner@example.com", "self": True},
        "attendees": [
            {
                "email": "john@example.com",
                "displayName": "John Doe",
                "responseStatus": "accepted"
            },
            {
                "email": "jane@example.com",
                "displayName": "Jane Smith",
                "responseStatus": "tentative"
            }
        ],
        "recurrence": ["RRULE:FREQ=WEEKLY;BYDAY=MO"],
        "reminders": {"useDefault": False, "overrides": [{"method": "popup", "minutes": 10}]},
    }


@pytest.fixture
def sample_events_page(sample_google_event):
    def make(items=None, next_page_token=None):
        page = {
            "kind": "calendar#events",
            "summary": "owner@example.com",
            "timeZone": "America/New_York",
            "accessRole": "owner",
            "items": [sample_google_event] if items is None else items,
        }
        if next_page_token:
            page["nextPageToken"] = next_page_token
        return page
    return make


@pytest.fixture
def sample_calendar_list_entry():
    return {
        "kind": "calendar#calendarListEntry",
        "id": "team@group.calendar.google.com",
        "summary": "Team",
        "summaryOverride": "My Team",
        "timeZone": "Europe/Berlin",
        "accessRole": "owner",
        "primary": False,
        "defaultReminders": [{"method": "email", "minutes": 30}],
        "notificationSettings": {"notifications": [{"type": "eventCreation", "method": "email"}]},
    }
