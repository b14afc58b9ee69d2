"""Helper utilities for AWS lambda functions.

Functions:
    utcnow() -> datetime
        Current time as an aware UTC datetime (default clock of the services)
    running_locally() -> bool
        True if lambda is running in local SAM, False otherwise
    base_url() -> str
        Extract correct public base URL from API Gateway event
    get_short_url() -> str
        Get string representation of short URL for a given shortcode
    header() -> str | None
        Case-insensitive lookup of the first present request header
    client_ip() -> str
        Extract the originating client address from API Gateway event
    require_environment(*names: str) -> Callable
        Decorator: Ensure required environment variables are present
    guarantee_500_response(handler) -> Callable
        Decorator: Turn unexpected handler failures into HTTP 500 responses

Example:
    Typical usage inside a Lambda handler:

        >>> from clicklinks.utils.helpers import base_url
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

import os
import json
import logging
import functools
from datetime import datetime, UTC
from typing import Any
from collections.abc import Callable

from clicklinks.utils.constants import APP_ENV_ENV, AWS_SAM_LOCAL_ENV, UNKNOWN_INTERNAL_SERVER_ERROR


logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(UTC)


def running_locally() -> bool:
    """Check if the lambda is running locally (APP_ENV=local or via sam local invoke)"""
    env = os.getenv(APP_ENV_ENV, '').lower()
    return env == 'local' or os.getenv(AWS_SAM_LOCAL_ENV) == 'true'


def base_url(event: dict[str, Any]) -> str:
    """Extract public base URL from API Gateway event

    Works seamlessly with both custom and default AWS API Gateway domains.
    If a custom domain is configured, the stage name is omitted.
    If using the default AWS execute-api domain, the stage name is included.

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
    elif domain:
        # Otherwise include the stage (for AWS default domains)
        return f'https://{domain}/{stage}'
    else:
        # Fallback: local invocation (SAM CLI, tests, etc.)
        return 'http://localhost:3000'


def get_short_url(shortcode: str, event: dict[str, Any]) -> str:
    """Get string representation of shortened URL"""
    return f'{base_url(event).rstrip("/")}/{shortcode}'


def header(event: dict[str, Any], *names: str) -> str | None:
    """Return the first non-empty header among `names` (case-insensitive)

    Example:
        >>> header({'headers': {'referer': 'https://a.com'}}, 'Referer', 'Referrer')
        'https://a.com'
    """
    headers = {str(k).lower(): v for k, v in (event.get('headers') or {}).items()}
    for name in names:
        value = headers.get(name.lower())
        if value:
            return value
    return None


def client_ip(event: dict[str, Any]) -> str:
    """Extract the originating client address from API Gateway event

    Prefers the first entry of X-Forwarded-For (the original client behind
    CloudFront/ALB proxies) and falls back to the API Gateway source IP.

    Returns:
        str: client address, or '' if none is present.
    """
    forwarded_for = header(event, 'X-Forwarded-For')
    if forwarded_for:
        first_hop = forwarded_for.split(',')[0].strip()
        if first_hop:
            return first_hop
    request_context = event.get('requestContext') or {}
    identity = request_context.get('identity') or {}
    http = request_context.get('http') or {}  # HTTP API (payload v2.0) events
    return identity.get('sourceIp') or http.get('sourceIp') or ''


def require_environment(*names: str) -> Callable:
    """Decorator ensuring required environment variables are present.

    Args:
        *names (str):
            Names of required environment variables.

    Raises:
        KeyError:
            If any required environment variable is missing or empty.

    Example:
        >>> @require_environment('APPCONFIG_APP_ID', 'APPCONFIG_ENV_ID')
        ... def my_function():
        ...     pass
        >>> my_function()
        KeyError: Missing required environment variables: 'APPCONFIG_APP_ID', 'APPCONFIG_ENV_ID'
    """

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            missing = [name for name in names if not os.environ.get(name)]
            if missing:
                missing_list = ', '.join(f"'{name}'" for name in missing)
                raise KeyError(f'Missing required environment variables: {missing_list}')
            return func(*args, **kwargs)

        return wrapper

    return decorator


def guarantee_500_response(handler: Callable) -> Callable:
    """Decorator: respond with HTTP 500 on any unexpected handler failure

    Expected outcomes (bad input, unknown links, ...) are handled inside the
    handlers. Anything escaping them (e.g. DataStoreError) is logged and turned
    into a generic 500 response. When running locally the original exception
    is re-raised to ease debugging.
    """

    @functools.wraps(handler)
    def wrapper(event: dict[str, Any], context: Any) -> dict[str, Any]:
        try:
            return handler(event, context)
        except Exception:
            if running_locally():
                raise
            logger.exception('Unhandled exception in lambda handler. Responding with 500.', extra={'event': UNKNOWN_INTERNAL_SERVER_ERROR})
            return {
                'statusCode': 500,
                'headers': {'Content-Type': 'application/json'},
                'body': json.dumps(
                    {
                        'message': 'Internal Server Error',
                        'error_code': UNKNOWN_INTERNAL_SERVER_ERROR,
                    }
                ),
            }

    return wrapper
