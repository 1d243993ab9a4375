class GcalClientError(Exception):
    """Base exception for all calendar client errors."""
    pass


class AuthenticationError(GcalClientError):
    """Raised when authentication fails."""
    pass


class APIError(GcalClientError):
    """Raised when API calls fail."""
    pass


class HTTPStatusError(APIError):
    """Raised when the API answers with a non-success status."""

    def __init__(self, status: int, response=None, message: str = None):
        self.status = status
        self.response = response
        super().__init__(message or f"HTTP {status}")


class TransportError(APIError):
    """Raised when a request never produced a response."""
    pass


class ValidationError(GcalClientError):
    """Raised when input validation fails."""
    pass


class SerializationError(GcalClientError):
    """Raised when a resource cannot be encoded to or decoded from JSON."""
    pass
