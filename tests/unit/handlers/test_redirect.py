"""Unit tests for the redirect handlers.

Test coverage includes:

1. GET /{shortcode}
   - 302 with Location for live links; 404 for missing, expired and malformed codes.
   - 400 when the path parameter is missing.

2. GET /p/{shortcode}
   - 200 HTML page referencing the target (escaped); 404 on miss.
   - Custom templates are used when configured.

3. Failure mapping
   - 503 when the data store is unavailable; 500 on unexpected errors.
"""

import json
from unittest.mock import MagicMock

from freezegun import freeze_time

from lil.app import create_app
from lil.constants import Datastore
from lil.dao.base import ShortLinkBaseDAO
from lil.dao.exceptions import DataStoreError
from lil.handlers import redirect
from lil.utils.config import Settings


def path_event(shortcode=None):
    return {'pathParameters': {'shortcode': shortcode} if shortcode is not None else None}


# -------------------------------
# 1. GET /{shortcode}
# -------------------------------


def test_redirect_hit(app):
    app.dao.insert('abc12345', 'https://example.com/a')

    response = redirect.redirect_handler(path_event('abc12345'), None)

    assert response['statusCode'] == 302
    assert response['headers']['Location'] == 'https://example.com/a'
    assert response['body'] == ''


def test_redirect_miss(app):
    response = redirect.redirect_handler(path_event('zzzzzzzz'), None)

    assert response['statusCode'] == 404
    body = json.loads(response['body'])
    assert body['errorCode'] == 'SHORT_LINK_NOT_FOUND'
    assert 'https://lil.test/zzzzzzzz' in body['message']


def test_redirect_malformed_code(app):
    assert redirect.redirect_handler(path_event('bad-code'), None)['statusCode'] == 404


@freeze_time('2025-10-15 12:00:00')
def test_redirect_expired(app):
    app.dao.insert('abc12345', 'https://example.com/a', ttl=0)
    assert redirect.redirect_handler(path_event('abc12345'), None)['statusCode'] == 404


def test_redirect_missing_path_parameter(app):
    response = redirect.redirect_handler(path_event(), None)

    assert response['statusCode'] == 400
    assert json.loads(response['body'])['errorCode'] == 'MISSING_SHORTCODE'


# -------------------------------
# 2. GET /p/{shortcode}
# -------------------------------


def test_page_redirect_hit(app):
    app.dao.insert('abc12345', 'https://example.com/a?x=1&y=<2>')

    response = redirect.page_redirect_handler(path_event('abc12345'), None)

    assert response['statusCode'] == 200
    assert response['headers']['Content-Type'].startswith('text/html')
    assert 'https://example.com/a?x=1&amp;y=&lt;2&gt;' in response['body']
    assert '<2>' not in response['body']
    assert 'abc12345' in response['body']


def test_page_redirect_miss(app):
    response = redirect.page_redirect_handler(path_event('zzzzzzzz'), None)

    assert response['statusCode'] == 404
    assert 'https://lil.test/p/zzzzzzzz' in json.loads(response['body'])['message']


def test_page_redirect_custom_template(tmp_path, monkeypatch):
    template = tmp_path / 'page.html'
    template.write_text('<a href="$target">$shortcode</a>', encoding='utf-8')
    app = create_app(Settings(base_url='https://lil.test', datastore=Datastore.MEMORY, redirect_template_path=str(template)))
    monkeypatch.setattr('lil.handlers.redirect.get_app', lambda: app)
    app.dao.insert('abc12345', 'https://example.com/a')

    response = redirect.page_redirect_handler(path_event('abc12345'), None)

    assert response['body'] == '<a href="https://example.com/a">abc12345</a>'


# -------------------------------
# 3. Failure mapping
# -------------------------------


def test_redirect_data_store_unavailable(settings, monkeypatch):
    dao = MagicMock(spec=ShortLinkBaseDAO)
    dao.get.side_effect = DataStoreError("Can't reach Redis at localhost:6379/0 (connection pool exhausted).")
    app = create_app(settings, dao=dao)
    monkeypatch.setattr('lil.handlers.redirect.get_app', lambda: app)

    response = redirect.redirect_handler(path_event('abc12345'), None)

    assert response['statusCode'] == 503
    assert json.loads(response['body'])['errorCode'] == 'dao:data_store_unavailable'


def test_redirect_unexpected_error(settings, monkeypatch):
    dao = MagicMock(spec=ShortLinkBaseDAO)
    dao.get.side_effect = RuntimeError('boom')
    app = create_app(settings, dao=dao)
    monkeypatch.setattr('lil.handlers.redirect.get_app', lambda: app)
    monkeypatch.setenv('LIL_ENV', 'prod')

    response = redirect.redirect_handler(path_event('abc12345'), None)

    assert response['statusCode'] == 500


def test_redirect_unexpected_error_without_app_env(settings, monkeypatch):
    dao = MagicMock(spec=ShortLinkBaseDAO)
    dao.get.side_effect = RuntimeError('boom')
    app = create_app(settings, dao=dao)
    monkeypatch.setattr('lil.handlers.redirect.get_app', lambda: app)
    monkeypatch.delenv('LIL_ENV', raising=False)

    response = redirect.redirect_handler(path_event('abc12345'), None)

    assert response['statusCode'] == 500
    assert json.loads(response['body'])['error_code'] == 'UNKNOWN_INTERNAL_SERVER_ERROR'


def test_welcome():
    response = redirect.welcome_handler({}, None)
    assert response['statusCode'] == 200
