"""Unit tests for ManagementFacade.

Test coverage includes:

1. Custom shortcodes
   - Ensures valid codes are inserted once.
   - Ensures invalid codes and target URLs are rejected before touching the store.
   - Ensures collisions surface ShortLinkAlreadyExistsError without retrying.

2. Generated shortcodes
   - Ensures a collision triggers a retry with a fresh code.
   - Ensures CreateExhaustedError after the retry budget.
   - Ensures concurrent creates with a stuck generator have at most one winner.

3. Delegation
   - Ensures get, search and delete forward to the DAO.
"""

import threading
from unittest.mock import MagicMock

import pytest

from lil.dao.base import ShortLinkBaseDAO
from lil.dao.exceptions import ShortLinkAlreadyExistsError, ShortLinkNotFoundError
from lil.dao.memory import ShortLinkMemoryDAO
from lil.exceptions import CreateExhaustedError, InvalidShortcodeError, InvalidTargetURLError
from lil.models import SearchPage
from lil.services import ManagementFacade
from lil.utils.shortener import ShortcodeGenerator


@pytest.fixture
def dao():
    return ShortLinkMemoryDAO()


@pytest.fixture
def generator():
    return ShortcodeGenerator(length=8)


@pytest.fixture
def stuck_generator():
    """Generator which always returns the same shortcode."""
    _generator = MagicMock(spec=ShortcodeGenerator)
    _generator.generate.return_value = 'Xk7mQp2z'
    return _generator


@pytest.fixture
def facade(dao, generator):
    return ManagementFacade(dao, generator, create_retries=5)


def test_invalid_retry_budget(dao, generator):
    with pytest.raises(ValueError):
        ManagementFacade(dao, generator, create_retries=0)


# -------------------------------
# 1. Custom shortcodes
# -------------------------------


def test_create_with_custom_shortcode(facade, dao):
    link = facade.create_link('https://example.com/a', shortcode='abc12345')

    assert link.shortcode == 'abc12345'
    assert link.target == 'https://example.com/a'
    assert dao.get('abc12345') == link


def test_create_strips_target(facade):
    assert facade.create_link('  https://example.com/a ', shortcode='abc12345').target == 'https://example.com/a'


@pytest.mark.parametrize('shortcode', ['abc', 'abc-1234', 'api', 'p'])
def test_create_with_invalid_shortcode(generator, shortcode):
    dao = MagicMock(spec=ShortLinkBaseDAO)
    facade = ManagementFacade(dao, generator)

    with pytest.raises(InvalidShortcodeError):
        facade.create_link('https://example.com/a', shortcode=shortcode)
    dao.insert.assert_not_called()


@pytest.mark.parametrize('target', ['', 'example.com', 'ftp://example.com'])
def test_create_with_invalid_target(generator, target):
    dao = MagicMock(spec=ShortLinkBaseDAO)
    facade = ManagementFacade(dao, generator)

    with pytest.raises(InvalidTargetURLError):
        facade.create_link(target)
    dao.insert.assert_not_called()


def test_custom_shortcode_collision_is_not_retried(generator):
    dao = MagicMock(spec=ShortLinkBaseDAO)
    dao.insert.side_effect = ShortLinkAlreadyExistsError("Short link with code 'abc12345' already exists.")
    facade = ManagementFacade(dao, generator)

    with pytest.raises(ShortLinkAlreadyExistsError):
        facade.create_link('https://example.com/a', shortcode='abc12345')
    assert dao.insert.call_count == 1


def test_create_with_ttl(facade):
    link = facade.create_link('https://example.com/a', ttl=3600)
    assert link.expires_at is not None


# -------------------------------
# 2. Generated shortcodes
# -------------------------------


def test_create_generates_valid_shortcode(facade, generator):
    link = facade.create_link('https://example.com/a')
    assert generator.is_valid(link.shortcode)


def test_create_retries_after_collision(dao):
    dao.insert('Xk7mQp2z', 'https://example.com/taken')
    generator = MagicMock(spec=ShortcodeGenerator)
    generator.generate.side_effect = ['Xk7mQp2z', 'Xk7mQp2z', 'Ab3dEf4h']
    facade = ManagementFacade(dao, generator, create_retries=5)

    link = facade.create_link('https://example.com/a')

    assert link.shortcode == 'Ab3dEf4h'
    assert generator.generate.call_count == 3


def test_create_exhausted(dao, stuck_generator):
    dao.insert('Xk7mQp2z', 'https://example.com/taken')
    facade = ManagementFacade(dao, stuck_generator, create_retries=3)

    with pytest.raises(CreateExhaustedError, match='3 attempts'):
        facade.create_link('https://example.com/a')
    assert stuck_generator.generate.call_count == 3
    assert dao.get('Xk7mQp2z').target == 'https://example.com/taken'


def test_concurrent_creates_with_stuck_generator(dao, stuck_generator):
    facade = ManagementFacade(dao, stuck_generator, create_retries=5)
    barrier = threading.Barrier(6)
    outcomes = []
    lock = threading.Lock()

    def worker(i):
        barrier.wait()
        try:
            facade.create_link(f'https://example.com/{i}')
            outcome = 'created'
        except CreateExhaustedError:
            outcome = 'exhausted'
        with lock:
            outcomes.append(outcome)

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(6)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert outcomes.count('created') == 1
    assert outcomes.count('exhausted') == 5
    assert len(dao.search().links) == 1


# -------------------------------
# 3. Delegation
# -------------------------------


def test_get_and_delete(facade):
    facade.create_link('https://example.com/a', shortcode='abc12345')
    assert facade.get_link('abc12345').target == 'https://example.com/a'

    facade.delete_link('abc12345')
    with pytest.raises(ShortLinkNotFoundError):
        facade.get_link('abc12345')
    with pytest.raises(ShortLinkNotFoundError):
        facade.delete_link('abc12345')


def test_search_delegates(generator):
    dao = MagicMock(spec=ShortLinkBaseDAO)
    dao.search.return_value = SearchPage(links=[])
    facade = ManagementFacade(dao, generator)

    assert facade.search_links('example', cursor='2', limit=5) == SearchPage(links=[])
    dao.search.assert_called_once_with(query='example', cursor='2', limit=5)
