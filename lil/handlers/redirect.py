"""Handlers for the redirect routes: GET /{shortcode} and GET /p/{shortcode}"""

import logging

from lil.app import get_app
from lil.services import Hit
from lil.types import HandlerEvent, HandlerContext, HandlerResponse
from lil.handlers.templates import render_redirect_page
from lil.handlers.constants import MISSING_SHORTCODE, SHORT_LINK_NOT_FOUND, REDIRECT_SUCCESS, PAGE_REDIRECT_SUCCESS
from lil.handlers.responses import response_302, response_400, response_404, response_html, unavailable_as_503
from lil.utils.helpers import get_short_url, guarantee_500_response


logger = logging.getLogger(__name__)


def _shortcode(event: HandlerEvent) -> str | None:
    return (event.get('pathParameters') or {}).get('shortcode')


@guarantee_500_response
@unavailable_as_503
def redirect_handler(event: HandlerEvent, context: HandlerContext) -> HandlerResponse:
    """Redirect the client straight to the target URL

    HTTP responses:
        302: Successful redirect
            headers:
                Location: target URL destination
        400: Missing shortcode in path parameters
        404: Unknown or expired shortcode
        503: Data store unavailable

    Example:
        >>> response = redirect_handler({'pathParameters': {'shortcode': 'abc12345'}}, None)
        >>> response['statusCode'], response['headers']['Location']
        (302, 'https://example.com/a')
    """
    app = get_app()

    shortcode = _shortcode(event)
    if not shortcode:
        logger.info('Missing "shortcode" in path. Responding with 400.', extra={'event': MISSING_SHORTCODE})
        return response_400(message="missing 'shortcode' in path", error_code=MISSING_SHORTCODE)

    outcome = app.resolver.lookup(shortcode)
    if not isinstance(outcome, Hit):
        logger.info('Short link not found. Responding with 404.', extra={'shortcode': shortcode, 'event': SHORT_LINK_NOT_FOUND})
        short_url = get_short_url(shortcode, app.settings.base_url)
        return response_404(message=f"short url {short_url} doesn't exist", error_code=SHORT_LINK_NOT_FOUND)

    logger.info('Redirecting client to target URL. Responding with 302.', extra={'shortcode': shortcode, 'event': REDIRECT_SUCCESS})
    return response_302(location=outcome.target)


@guarantee_500_response
@unavailable_as_503
def page_redirect_handler(event: HandlerEvent, context: HandlerContext) -> HandlerResponse:
    """Render the interstitial page which links to the target URL

    HTTP responses:
        200: Confirmation page (text/html) referencing the target URL
        400: Missing shortcode in path parameters
        404: Unknown or expired shortcode
        503: Data store unavailable
    """
    app = get_app()

    shortcode = _shortcode(event)
    if not shortcode:
        logger.info('Missing "shortcode" in path. Responding with 400.', extra={'event': MISSING_SHORTCODE})
        return response_400(message="missing 'shortcode' in path", error_code=MISSING_SHORTCODE)

    outcome = app.resolver.lookup(shortcode, interstitial=True)
    if not isinstance(outcome, Hit):
        logger.info('Short link not found. Responding with 404.', extra={'shortcode': shortcode, 'event': SHORT_LINK_NOT_FOUND})
        short_url = get_short_url(shortcode, app.settings.base_url, interstitial=True)
        return response_404(message=f"short url {short_url} doesn't exist", error_code=SHORT_LINK_NOT_FOUND)

    logger.info('Rendering interstitial page. Responding with 200.', extra={'shortcode': shortcode, 'event': PAGE_REDIRECT_SUCCESS})
    return response_html(render_redirect_page(app.redirect_page, target=outcome.target, shortcode=shortcode))


def welcome_handler(event: HandlerEvent, context: HandlerContext) -> HandlerResponse:
    return {
        'statusCode': 200,
        'headers': {'Content-Type': 'text/plain; charset=utf-8'},
        'body': 'Welcome to lil.',
    }
