import pytest

from lil.app import create_app
from lil.constants import Datastore
from lil.utils.config import Settings


@pytest.fixture
def settings() -> Settings:
    return Settings(base_url='https://lil.test', datastore=Datastore.MEMORY, search_default_limit=2, search_max_limit=3)


@pytest.fixture
def app(settings, monkeypatch):
    """Application on the in-memory store, served to every handler module."""
    _app = create_app(settings)
    monkeypatch.setattr('lil.handlers.links.get_app', lambda: _app)
    monkeypatch.setattr('lil.handlers.redirect.get_app', lambda: _app)
    monkeypatch.setenv('LIL_ENV', 'test')
    return _app
