from .base import AuthenticationError


class InvalidTokenError(AuthenticationError):
    """Raised when the API rejects the bearer token as invalid or expired."""

    def __init__(self, message: str = "invalid or expired access token", response=None):
        self.response = response
        super().__init__(message)


class OAuthError(AuthenticationError):
    """Raised when the OAuth code or refresh exchange fails."""
    pass
