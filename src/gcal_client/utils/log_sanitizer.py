"""
Log sanitization utilities to keep credentials and PII out of log output.

Bearer tokens, refresh tokens and authorization codes must never reach a log
record verbatim; calendar ids are frequently email addresses and are reduced
to their domain.
"""

import re
from typing import List, Optional

EMAIL_PATTERN = re.compile(r'\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b')
SECRET_KEYS = ('token', 'access_key', 'access_token', 'refresh_token', 'code', 'client_secret', 'state')


def sanitize_email(email: str) -> str:
    """
    Sanitize email address for logging by showing only domain and length.

    Args:
        email: Email address to sanitize

    Returns:
        Sanitized email representation

    Example:
        "user@example.com" -> "***@example.com (16 chars)"
    """
    if not email or '@' not in email:
        return "[invalid-email]"

    _, domain = email.split('@', 1)
    return f"***@{domain} ({len(email)} chars)"


def sanitize_email_list(emails: List[str]) -> str:
    """
    Sanitize list of email addresses for logging.

    Args:
        emails: List of email addresses

    Returns:
        Sanitized representation of email list
    """
    if not emails:
        return "[]"

    domains = []
    for email in emails:
        if '@' in email:
            domains.append(email.split('@', 1)[1])

    return f"[{len(emails)} attendees from domains: {', '.join(sorted(set(domains)))}]"


def sanitize_token(token: Optional[str]) -> str:
    """
    Sanitize a secret (access token, refresh token, auth code) for logging.

    Only the length and the last four characters survive.
    """
    if not token:
        return "[no-token]"
    if len(token) <= 8:
        return f"[secret] ({len(token)} chars)"
    return f"[secret ...{token[-4:]}] ({len(token)} chars)"


def sanitize_calendar_id(calendar_id: Optional[str]) -> str:
    """Calendar ids are often the owner's address; keep only the domain part."""
    if not calendar_id:
        return "[no-calendar-id]"
    if '@' in calendar_id:
        return sanitize_email(calendar_id)
    return calendar_id


def sanitize_query(query: str, max_length: int = 30) -> str:
    """
    Sanitize free-text search or quick-add text for logging.

    Args:
        query: Text to sanitize
        max_length: Maximum length to show

    Returns:
        Sanitized query representation
    """
    if not query:
        return "[empty-query]"

    sanitized = EMAIL_PATTERN.sub('[EMAIL]', query)
    sanitized = re.sub(r'\b\d{3}[-.]?\d{3}[-.]?\d{4}\b', '[PHONE]', sanitized)

    if len(sanitized) > max_length:
        sanitized = sanitized[:max_length] + "..."

    return f"'{sanitized}' ({len(query)} chars)"


def sanitize_url(url: str) -> str:
    """Drop query-string values that may carry secrets or addresses."""
    if not url or '?' not in url:
        return url
    base, _, query = url.partition('?')
    keys = [pair.split('=', 1)[0] for pair in query.split('&') if pair]
    return f"{base}?[{', '.join(keys)}]"


def sanitize_for_logging(**kwargs) -> dict:
    """
    Sanitize multiple fields for logging in one call.

    Args:
        **kwargs: Fields to sanitize (calendar_id, token, query, attendees, etc.)

    Returns:
        Dictionary with sanitized values
    """
    sanitized = {}

    for key, value in kwargs.items():
        if key in SECRET_KEYS:
            sanitized[key] = sanitize_token(value)
        elif key in ('calendar_id', 'destination') and isinstance(value, str):
            sanitized[key] = sanitize_calendar_id(value)
        elif key in ('query', 'text'):
            sanitized[key] = sanitize_query(value) if value else None
        elif key == 'attendees' and isinstance(value, list):
            sanitized[key] = sanitize_email_list(value)
        elif key == 'url' and isinstance(value, str):
            sanitized[key] = sanitize_url(value)
        else:
            sanitized[key] = value

    return sanitized
