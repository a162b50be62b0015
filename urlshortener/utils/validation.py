"""Validation of client-supplied long URLs.

Checks run in a fixed order and the first failing check wins, so clients get
one actionable reason:

    1. non-empty
    2. minimum length (Limits.MIN_URL_LENGTH)
    3. not starting with an unsafe scheme (javascript:, data:, ...)
    4. absolute http(s) URL with a host
"""

from urllib.parse import urlparse

from urlshortener.constants import Limits, UNSAFE_URL_PREFIXES
from urlshortener.exceptions import ValidationError


def is_valid_link(url: str) -> bool:
    try:
        components = urlparse(url)
    except ValueError:
        return False
    return components.scheme in {'http', 'https'} and bool(components.netloc) and ' ' not in url


def is_malicious_url(url: str) -> bool:
    return url.strip().lower().startswith(UNSAFE_URL_PREFIXES)


def validate_url(url: str | None) -> str:
    """Validate a long URL before it becomes a link

    Args:
        url (str | None): candidate long URL from the request body

    Returns:
        str: the same URL, unchanged

    Raises:
        ValidationError: with a client-facing reason
    """
    if not url:
        raise ValidationError('URL cannot be empty')
    if not isinstance(url, str):
        raise ValidationError('Invalid URL format')
    if len(url) < Limits.MIN_URL_LENGTH:
        raise ValidationError(f'URL must be at least {Limits.MIN_URL_LENGTH} characters long')
    if is_malicious_url(url):
        raise ValidationError('URL contains malicious patterns')
    if not is_valid_link(url):
        raise ValidationError('Invalid URL format')
    return url
