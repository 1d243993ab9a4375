from .base import APIError, HTTPStatusError, ValidationError


class CalendarError(APIError):
    """Base exception for Calendar API errors."""
    pass


class EventNotFoundError(CalendarError, HTTPStatusError):
    """Raised when a calendar event is not found."""
    pass


class CalendarNotFoundError(CalendarError, HTTPStatusError):
    """Raised when a calendar is not found."""
    pass


class MissingIdentityError(ValidationError):
    """Raised when a resource lacks the id or calendar id its path needs."""
    pass


class URLConstructionError(ValidationError):
    """Raised when a request URL cannot be built from a resource."""
    pass
