from .oauth import (
    CALENDAR_SCOPE, TOKEN_URL, USER_URL,
    AccessToken, ClientParameters, OAuthState, OAuthListener,
    generate_state, build_authorization_url, request_access_token,
    refresh_access_token, oauth_listener, capture_access_token
)
from .credentials import (
    client_parameters_from_info, client_parameters_from_file, client_parameters_from_env,
    credentials_from_client_parameters, client_parameters_from_credentials
)

__all__ = [
    "CALENDAR_SCOPE",
    "TOKEN_URL",
    "USER_URL",
    "AccessToken",
    "ClientParameters",
    "OAuthState",
    "OAuthListener",
    "generate_state",
    "build_authorization_url",
    "request_access_token",
    "refresh_access_token",
    "oauth_listener",
    "capture_access_token",
    "client_parameters_from_info",
    "client_parameters_from_file",
    "client_parameters_from_env",
    "credentials_from_client_parameters",
    "client_parameters_from_credentials",
]
