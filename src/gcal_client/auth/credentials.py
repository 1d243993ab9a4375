import json
import os
from typing import Optional

from google.oauth2.credentials import Credentials

from .oauth import CALENDAR_SCOPE, TOKEN_URL, ClientParameters

CREDENTIALS_PATH = 'credentials.json'


def client_parameters_from_info(app_credentials: dict) -> ClientParameters:
    """
    Build client parameters from an OAuth client configuration.

    Args:
        app_credentials (dict): Contents of a credentials.json downloaded from
            the Google Cloud console, in "installed" or "web" format.

    Returns:
        ClientParameters without tokens.
    """
    if 'installed' in app_credentials:
        client_info = app_credentials['installed']
    elif 'web' in app_credentials:
        client_info = app_credentials['web']
    else:
        raise ValueError("Invalid credentials format - missing 'installed' or 'web' section")

    if not client_info.get('client_id') or not client_info.get('client_secret'):
        raise ValueError("Credentials must contain client_id and client_secret")

    redirect_uris = client_info.get('redirect_uris') or []
    return ClientParameters(
        client_id=client_info['client_id'],
        client_secret=client_info['client_secret'],
        redirect_url=redirect_uris[0] if redirect_uris else None,
    )


def client_parameters_from_file(path: Optional[str] = None) -> ClientParameters:
    """Load client parameters from a credentials.json file."""
    path = path or os.getenv('GOOGLE_CREDENTIALS_PATH') or CREDENTIALS_PATH
    if not os.path.exists(path):
        raise FileNotFoundError(f"Credentials file not found: {path}")

    with open(path, 'r') as f:
        return client_parameters_from_info(json.load(f))


def client_parameters_from_env() -> ClientParameters:
    """Read GCAL_CLIENT_ID, GCAL_CLIENT_SECRET and the optional GCAL_REDIRECT_URL."""
    client_id = os.getenv('GCAL_CLIENT_ID')
    client_secret = os.getenv('GCAL_CLIENT_SECRET')
    if not client_id or not client_secret:
        raise ValueError("GCAL_CLIENT_ID and GCAL_CLIENT_SECRET must be set")

    return ClientParameters(
        client_id=client_id,
        client_secret=client_secret,
        redirect_url=os.getenv('GCAL_REDIRECT_URL') or None,
    )


def credentials_from_client_parameters(params: ClientParameters) -> Credentials:
    """Wrap captured tokens as google-auth credentials, e.g. for storing with to_json()."""
    return Credentials(
        token=params.access_key,
        refresh_token=params.refresh_token,
        token_uri=TOKEN_URL,
        client_id=params.client_id,
        client_secret=params.client_secret,
        scopes=[CALENDAR_SCOPE],
        expiry=params.expires_at,
    )


def client_parameters_from_credentials(creds: Credentials) -> ClientParameters:
    return ClientParameters(
        client_id=creds.client_id or '',
        client_secret=creds.client_secret or '',
        access_key=creds.token,
        expires_at=creds.expiry,
        refresh_token=creds.refresh_token,
    )
