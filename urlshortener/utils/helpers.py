"""Helper utilities for AWS lambda functions.

Functions:
    base_url() -> str
        Extract correct public base URL from API Gateway event
    get_short_url() -> str
        Get string representation of short URL for a given link id
    header() -> str
        Case-insensitive header lookup on an API Gateway event
    path_id() -> str
        Extract the link id from the request path
    detect_platform() -> Platform
        Derive the redirect source platform from request headers
    guarantee_500_response(handler) -> Callable
        Decorator: turn unexpected handler exceptions into HTTP 500 responses

Example:
    Typical usage inside a Lambda handler:

        >>> from urlshortener.utils.helpers import base_url
        >>> event = {
        ...     "requestContext": {
        ...         "domainName": "abc123.execute-api.us-east-1.amazonaws.com",
        ...         "stage": "Prod"
        ...     }
        ... }
        >>> base_url(event)
        'https://abc123.execute-api.us-east-1.amazonaws.com/Prod'

        >>> base_url({})
        'http://localhost:3000'
"""

import functools
import logging
from collections.abc import Callable

from urlshortener.constants import PLATFORM_USER_AGENTS, PLATFORM_REFERERS, UNKNOWN_INTERNAL_SERVER_ERROR
from urlshortener.models import Platform
from urlshortener.types import LambdaEvent, LambdaContext, LambdaResponse


logger = logging.getLogger(__name__)


def base_url(event: LambdaEvent) -> str:
    """Extract public base URL from API Gateway event

    If a custom domain is configured, the stage name is omitted.
    If using the default AWS execute-api domain, the stage name is included
    (unless it is the HTTP API `$default` stage).

    Args:
        event (dict): API Gateway event object passed to Lambda handler

    Returns:
        str: Base URL, e.g.:
             - "https://sho.rt"
             - "https://abc123.execute-api.us-east-1.amazonaws.com/Prod"
    """
    request_context = event.get('requestContext') or {}
    domain = request_context.get('domainName', '')
    stage = request_context.get('stage', '')

    if domain and 'execute-api' not in domain:
        # If the domain is a custom domain (no execute-api), skip stage
        return f'https://{domain}'
    elif domain and stage and stage != '$default':
        # Otherwise include the stage (for AWS default domains)
        return f'https://{domain}/{stage}'
    elif domain:
        return f'https://{domain}'
    else:
        # Fallback: local invocation (SAM CLI, tests, etc.)
        return 'http://localhost:3000'


def get_short_url(link_id: str, event: LambdaEvent) -> str:
    return f'{base_url(event).rstrip("/")}/{link_id}'


def header(event: LambdaEvent, name: str) -> str:
    """Return a request header value by case-insensitive name, '' if absent."""
    headers = event.get('headers') or {}
    wanted = name.lower()
    for key, value in headers.items():
        if key.lower() == wanted:
            return value or ''
    return ''


def path_id(event: LambdaEvent) -> str:
    """Return the link id addressed by a request: last `rawPath` segment, else `pathParameters.id`."""
    raw_path = event.get('rawPath')
    if raw_path:
        return raw_path.rsplit('/', 1)[-1]
    return (event.get('pathParameters') or {}).get('id') or ''


def detect_platform(event: LambdaEvent) -> Platform:
    """Determine the redirect source platform from request headers

    The User-Agent is checked first (in-app browsers identify themselves),
    then the Referer host. Anything else is `Platform.UNKNOWN`.

    Args:
        event (dict): API Gateway event object passed to Lambda handler

    Returns:
        Platform: detected platform

    Example:
        >>> detect_platform({'headers': {'user-agent': 'Mozilla/5.0 Instagram 300.0'}})
        <Platform.INSTAGRAM: 'Instagram'>
    """
    user_agent = header(event, 'user-agent').lower()
    for platform, pattern in PLATFORM_USER_AGENTS.items():
        if pattern in user_agent:
            return Platform(platform)

    referer = header(event, 'referer').lower()
    for platform, pattern in PLATFORM_REFERERS.items():
        if pattern in referer:
            return Platform(platform)

    return Platform.UNKNOWN


def guarantee_500_response(handler: Callable[[LambdaEvent, LambdaContext], LambdaResponse]) -> Callable:
    """Decorator: respond with HTTP 500 instead of crashing on unexpected errors

    Expected failures are handled inside each handler. Anything escaping the
    handler is logged with its traceback and converted into a plain 500.

    Example:
        >>> @guarantee_500_response
        ... def lambda_handler(event, context):
        ...     raise RuntimeError('boom')
        >>> lambda_handler({}, None)['statusCode']
        500
    """

    @functools.wraps(handler)
    def wrapper(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
        try:
            return handler(event, context)
        except Exception as error:
            logger.exception(
                'Unhandled exception in lambda handler. Responding with 500.',
                extra={'event': UNKNOWN_INTERNAL_SERVER_ERROR, 'error': error.__class__.__name__},
            )
            return {
                'statusCode': 500,
                'headers': {'Content-Type': 'text/plain'},
                'body': 'Internal Server Error',
            }

    return wrapper
