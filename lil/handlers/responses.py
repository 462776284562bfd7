import json
import logging
import functools
from typing import Any
from collections.abc import Callable

from lil.dao.exceptions import DataStoreError
from lil.handlers.constants import DATA_STORE_UNAVAILABLE
from lil.types import HandlerResponse


logger = logging.getLogger(__name__)

JSON_HEADERS = {'Content-Type': 'application/json'}


def _error(status_code: int, base: str, message: str | None = None, error_code: str | None = None) -> HandlerResponse:
    body = {'message': base if not message else f'{base} ({message})'}
    if error_code:
        body['errorCode'] = error_code
    return {
        'statusCode': status_code,
        'headers': dict(JSON_HEADERS),
        'body': json.dumps(body),
    }


def response_json(status_code: int, body: dict[str, Any]) -> HandlerResponse:
    return {
        'statusCode': status_code,
        'headers': dict(JSON_HEADERS),
        'body': json.dumps(body),
    }


def response_204() -> HandlerResponse:
    return {
        'statusCode': 204,
        'headers': {},
        'body': '',
    }


def response_302(*, location: str) -> HandlerResponse:
    return {
        'statusCode': 302,
        'headers': {
            'Location': location,
            'Cache-Control': 'no-store',
        },
        'body': '',  # no body needed for redirects
    }


def response_html(body: str) -> HandlerResponse:
    return {
        'statusCode': 200,
        'headers': {'Content-Type': 'text/html; charset=utf-8'},
        'body': body,
    }


def response_400(message: str | None = None, error_code: str | None = None) -> HandlerResponse:
    return _error(400, 'Bad Request', message, error_code)


def response_404(message: str | None = None, error_code: str | None = None) -> HandlerResponse:
    return _error(404, 'Not Found', message, error_code)


def response_409(message: str | None = None, error_code: str | None = None) -> HandlerResponse:
    return _error(409, 'Conflict', message, error_code)


def response_503(message: str | None = None, error_code: str | None = None) -> HandlerResponse:
    return _error(503, 'Service Unavailable', message, error_code)


def unavailable_as_503(handler: Callable) -> Callable:
    """Decorator: respond with 503 when the data store is unreachable or timed out"""

    @functools.wraps(handler)
    def wrapper(event, context, *args, **kwargs):
        try:
            return handler(event, context, *args, **kwargs)
        except DataStoreError as e:
            logger.error(
                'Data store unavailable. Responding with 503.',
                extra={'handler': handler.__name__, 'event': DATA_STORE_UNAVAILABLE, 'reason': str(e)},
            )
            return response_503(error_code=DataStoreError.error_code)

    return wrapper
