"""Helper utilities for request handlers.

Functions:
    get_short_url(shortcode, base_url, interstitial=False) -> str
        Get string representation of a short URL for a given shortcode
    require_environment(*names: str) -> Callable
        Decorator: Ensure required environment variables are present
    guarantee_500_response(handler) -> Callable
        Decorator: Turn unexpected handler exceptions into 500 responses

Example:
    >>> from lil.utils.helpers import get_short_url
    >>> get_short_url('abc12345', 'https://lil.example.com/')
    'https://lil.example.com/abc12345'
    >>> get_short_url('abc12345', 'https://lil.example.com', interstitial=True)
    'https://lil.example.com/p/abc12345'
"""

import os
import json
import logging
import functools
from collections.abc import Callable

from lil.constants import Shortcode, UNKNOWN_INTERNAL_SERVER_ERROR
from lil.exceptions import MissingEnvironmentVariableError
from lil.utils.runtime import running_locally


logger = logging.getLogger(__name__)


def get_short_url(shortcode: str, base_url: str, interstitial: bool = False) -> str:
    """Get string representation of a short URL

    Args:
        shortcode (str): shortcode
        base_url (str): public base URL of the service
        interstitial (bool): link to the confirmation page instead of the redirect

    Returns:
        str: short url string representation
    """
    base = base_url.rstrip('/')
    if interstitial:
        return f'{base}/{Shortcode.PAGE_REDIRECT_PREFIX}/{shortcode}'
    return f'{base}/{shortcode}'


def require_environment(*names: str) -> Callable:
    """Decorator ensuring required environment variables are present.

    Args:
        *names (str):
            Names of required environment variables.

    Raises:
        MissingEnvironmentVariableError:
            If any required environment variable is missing or empty.

    Example:
        >>> @require_environment('LIL_BASE_URL')
        ... def my_function():
        ...     pass
        >>> my_function()
        MissingEnvironmentVariableError: Missing required environment variables: 'LIL_BASE_URL'
    """

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            environ = kwargs.get('environ')
            if environ is None:
                environ = os.environ
            missing = [name for name in names if not environ.get(name)]
            if missing:
                missing_list = ', '.join(f"'{name}'" for name in missing)
                raise MissingEnvironmentVariableError(f'Missing required environment variables: {missing_list}')
            return func(*args, **kwargs)

        return wrapper

    return decorator


def guarantee_500_response(handler: Callable) -> Callable:
    """Decorator: respond with 500 when a handler raises an unexpected exception

    Locally the original exception is re-raised so it surfaces in the console.

    Args:
        handler (Callable[[dict, Any], dict]): request handler

    Returns:
        Callable[[dict, Any], dict]: handler which always returns a response
    """

    @functools.wraps(handler)
    def wrapper(event, context, *args, **kwargs):
        try:
            return handler(event, context, *args, **kwargs)
        except Exception:
            if running_locally():
                raise
            logger.exception(
                'Unhandled exception in request handler. Responding with 500.',
                extra={'handler': handler.__name__, 'event': UNKNOWN_INTERNAL_SERVER_ERROR},
            )
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
