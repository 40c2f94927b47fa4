"""Pytest configuration and fixtures."""

import pytest
from httpx import ASGITransport, AsyncClient

from shortkey.common.logging_config import setup_logging
from shortkey.config import Config
from shortkey.service import URLShortenerService
from shortkey.shortcode import ShortKeyGenerator
from web_app import create_app

from doubles import BASE_URL, RecordingStore


@pytest.fixture
def logger():
    """Create test logger."""
    return setup_logging(level="DEBUG")


@pytest.fixture
def store(logger):
    """Create a recording in-memory store."""
    return RecordingStore(logger=logger)


@pytest.fixture
def generator():
    """Create short key generator."""
    return ShortKeyGenerator()


@pytest.fixture
def make_service(generator, logger):
    """Build a service around any store."""

    def _make(store, **kwargs):
        return URLShortenerService(
            store=store,
            base_url=BASE_URL,
            generator=generator,
            logger=logger,
            **kwargs,
        )

    return _make


@pytest.fixture
def service(store, make_service):
    """Create service instance over the recording store."""
    return make_service(store)


@pytest.fixture
def config():
    """Configuration that ignores any local .env file."""
    return Config(_env_file=None, database_url="memory://", base_url=BASE_URL)


@pytest.fixture
def make_client(config):
    """Build an HTTP client for an app wrapping the given service."""

    def _make(service):
        app = create_app(
            store_instance=service.store,
            service_instance=service,
            config=config,
        )
        return AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver")

    return _make


@pytest.fixture
async def client(service, make_client):
    """Create test client."""
    async with make_client(service) as ac:
        yield ac


@pytest.fixture
def sample_urls():
    """Sample URLs for testing."""
    return [
        "https://example.com/a",
        "https://github.com/user/repo",
        "https://stackoverflow.com/questions/123456",
    ]
