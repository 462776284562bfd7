"""Handlers for the management routes under /api"""

import json
import logging
from typing import Any

from lil.app import get_app
from lil.dao.exceptions import InvalidCursorError, ShortLinkAlreadyExistsError, ShortLinkNotFoundError
from lil.exceptions import CreateExhaustedError, InvalidLimitError, ValidationError
from lil.models import ShortLinkModel
from lil.types import HandlerEvent, HandlerContext, HandlerResponse
from lil.handlers.constants import (
    MISSING_SHORTCODE,
    SHORT_LINK_NOT_FOUND,
    INVALID_JSON_BODY,
    INVALID_TTL,
    LINK_CREATED,
    LINK_DELETED,
)
from lil.handlers.responses import response_json, response_204, response_400, response_404, response_409, unavailable_as_503
from lil.utils.helpers import get_short_url, guarantee_500_response


logger = logging.getLogger(__name__)


def _shortcode(event: HandlerEvent) -> str | None:
    return (event.get('pathParameters') or {}).get('shortcode')


def _link_body(link: ShortLinkModel, base_url: str) -> dict[str, Any]:
    return {
        **link.to_dict(),
        'short_url': get_short_url(link.shortcode, base_url),
        'page_url': get_short_url(link.shortcode, base_url, interstitial=True),
    }


@guarantee_500_response
@unavailable_as_503
def get_link_handler(event: HandlerEvent, context: HandlerContext) -> HandlerResponse:
    """Return a short link record

    HTTP responses:
        200: JSON record
        400: Missing shortcode in path parameters
        404: Unknown or expired shortcode
        503: Data store unavailable
    """
    app = get_app()

    shortcode = _shortcode(event)
    if not shortcode:
        return response_400(message="missing 'shortcode' in path", error_code=MISSING_SHORTCODE)

    try:
        link = app.facade.get_link(shortcode)
    except ShortLinkNotFoundError:
        logger.info('Short link not found. Responding with 404.', extra={'shortcode': shortcode, 'event': SHORT_LINK_NOT_FOUND})
        return response_404(message=f"short link '{shortcode}' doesn't exist", error_code=SHORT_LINK_NOT_FOUND)

    return response_json(200, _link_body(link, app.settings.base_url))


@guarantee_500_response
@unavailable_as_503
def delete_link_handler(event: HandlerEvent, context: HandlerContext) -> HandlerResponse:
    """Delete a short link

    HTTP responses:
        204: Deleted
        400: Missing shortcode in path parameters
        404: Unknown shortcode (also on repeated deletes)
        503: Data store unavailable
    """
    app = get_app()

    shortcode = _shortcode(event)
    if not shortcode:
        return response_400(message="missing 'shortcode' in path", error_code=MISSING_SHORTCODE)

    try:
        app.facade.delete_link(shortcode)
    except ShortLinkNotFoundError:
        logger.info('Short link not found. Responding with 404.', extra={'shortcode': shortcode, 'event': SHORT_LINK_NOT_FOUND})
        return response_404(message=f"short link '{shortcode}' doesn't exist", error_code=SHORT_LINK_NOT_FOUND)

    logger.info('Short link deleted. Responding with 204.', extra={'shortcode': shortcode, 'event': LINK_DELETED})
    return response_204()


@guarantee_500_response
@unavailable_as_503
def search_links_handler(event: HandlerEvent, context: HandlerContext) -> HandlerResponse:
    """Return one page of short links

    Query string parameters:
        query: substring of shortcode or target URL (optional)
        cursor: next_cursor of the previous page (optional)
        limit: page size, clamped to the configured maximum (optional)

    HTTP responses:
        200: {"data": [...], "next_cursor": "..." | null}
        400: Invalid limit or cursor
        503: Data store unavailable
    """
    app = get_app()
    params = event.get('queryStringParameters') or {}

    limit = params.get('limit')
    if limit not in (None, ''):
        try:
            limit = int(limit)
        except ValueError:
            return response_400(message=f'invalid limit {limit!r}', error_code=InvalidLimitError.error_code)
    else:
        limit = None

    try:
        page = app.facade.search_links(query=params.get('query') or '', cursor=params.get('cursor') or None, limit=limit)
    except (InvalidLimitError, InvalidCursorError) as e:
        return response_400(message=str(e), error_code=e.error_code)

    body = page.to_dict()
    body['data'] = [_link_body(link, app.settings.base_url) for link in page.links]
    return response_json(200, body)


@guarantee_500_response
@unavailable_as_503
def create_link_handler(event: HandlerEvent, context: HandlerContext) -> HandlerResponse:
    """Create a short link

    Request body (JSON):
        target_url (str): destination URL (required)
        shortcode (str): custom shortcode (optional)
        ttl (int): lifetime in seconds (optional)

    HTTP responses:
        201: JSON record with short_url and page_url
        400: Invalid JSON, target URL, shortcode or ttl
        409: Custom shortcode taken, or no free shortcode could be generated
        503: Data store unavailable

    Example:
        >>> event = {'body': '{"target_url": "https://example.com/a", "shortcode": "abc12345"}'}
        >>> response = create_link_handler(event, None)
        >>> response['statusCode']
        201
    """
    app = get_app()

    try:
        request_body = json.loads(event.get('body') or '{}')
    except json.JSONDecodeError:
        return response_400(message='invalid JSON body', error_code=INVALID_JSON_BODY)
    if not isinstance(request_body, dict):
        return response_400(message='JSON body must be an object', error_code=INVALID_JSON_BODY)

    ttl = request_body.get('ttl')
    if ttl is not None and (isinstance(ttl, bool) or not isinstance(ttl, int)):
        return response_400(message="'ttl' must be an integer number of seconds", error_code=INVALID_TTL)

    try:
        link = app.facade.create_link(
            target=request_body.get('target_url') or '',
            shortcode=request_body.get('shortcode') or None,
            ttl=ttl,
        )
    except ValidationError as e:
        return response_400(message=str(e), error_code=e.error_code)
    except ShortLinkAlreadyExistsError as e:
        logger.info('Shortcode already taken. Responding with 409.', extra={'shortcode': request_body.get('shortcode')})
        return response_409(message=str(e), error_code=e.error_code)
    except CreateExhaustedError as e:
        logger.error('Shortcode generation exhausted its retry budget. Responding with 409.')
        return response_409(message=str(e), error_code=e.error_code)

    logger.info('Short link created. Responding with 201.', extra={'shortcode': link.shortcode, 'event': LINK_CREATED})
    return response_json(201, _link_body(link, app.settings.base_url))
