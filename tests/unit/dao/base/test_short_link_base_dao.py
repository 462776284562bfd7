from datetime import datetime, timedelta, UTC

import pytest
from freezegun import freeze_time

from lil.dao.base import ShortLinkBaseDAO
from lil.exceptions import InvalidLimitError
from lil.models import ShortLinkModel


class DummyDAO(ShortLinkBaseDAO):
    search_default_limit = 20
    search_max_limit = 100

    def insert(self, shortcode, target, ttl=None):
        pass

    def get(self, shortcode):
        pass

    def delete(self, shortcode):
        pass

    def search(self, query='', cursor=None, limit=None):
        pass


def test_base_dao_is_abstract():
    with pytest.raises(TypeError):
        ShortLinkBaseDAO()


@pytest.mark.parametrize('limit, expected', [(None, 20), (1, 1), (100, 100), (101, 100), (10_000, 100)])
def test_clamp_limit(limit, expected):
    assert DummyDAO().clamp_limit(limit) == expected


@pytest.mark.parametrize('limit', [0, -1, True, 2.5, '10'])
def test_clamp_limit_rejects_invalid(limit):
    with pytest.raises(InvalidLimitError):
        DummyDAO().clamp_limit(limit)


@pytest.mark.parametrize(
    'query, expected',
    [('', True), ('ABC', True), ('example.COM', True), ('xyz', False)],
)
def test_matches(query, expected):
    link = ShortLinkModel(shortcode='abc12345', target='https://example.com/a')
    assert ShortLinkBaseDAO.matches(link, query) is expected


@freeze_time('2025-10-15 12:00:00')
def test_new_link():
    now = datetime(2025, 10, 15, 12, 0, tzinfo=UTC)

    assert ShortLinkBaseDAO.new_link('abc12345', 'https://example.com').expires_at is None
    assert ShortLinkBaseDAO.new_link('abc12345', 'https://example.com', ttl=30).expires_at == now + timedelta(seconds=30)
    assert ShortLinkBaseDAO.new_link('abc12345', 'https://example.com', ttl=0).is_expired()
