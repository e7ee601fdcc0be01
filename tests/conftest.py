"""Pytest configuration and fixtures."""

import pytest
from typing import AsyncGenerator

from httpx import AsyncClient, ASGITransport

from config import Config
from linkreg.database.memory import MemoryLinkStore
from linkreg.registry import LinkRegistry
from linkreg.shortcode import ShortCodeGenerator
from linkreg.common.logging_config import setup_logging
from web_app import create_app


@pytest.fixture
def logger():
    """Create test logger."""
    return setup_logging(level="DEBUG")


@pytest.fixture
async def store(logger) -> AsyncGenerator[MemoryLinkStore, None]:
    """Create in-memory store instance."""
    store = MemoryLinkStore(logger=logger)

    yield store

    await store.close()


@pytest.fixture
def short_code_generator():
    """Create short code generator."""
    return ShortCodeGenerator(default_length=6)


@pytest.fixture
def registry(store, short_code_generator, logger) -> LinkRegistry:
    """Create registry instance."""
    return LinkRegistry(
        store=store,
        code_generator=short_code_generator,
        logger=logger,
    )


@pytest.fixture
def app(registry):
    """Create test FastAPI app."""
    config = Config(
        database_url="memory://",
        base_url="http://testserver",
    )

    return create_app(registry=registry, config=config)


@pytest.fixture
async def client(app):
    """Create test client."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as ac:
        yield ac


@pytest.fixture
def sample_urls():
    """Sample URLs for testing."""
    return [
        "https://example.com/test",
        "https://github.com/user/repo",
        "https://stackoverflow.com/questions/123456",
    ]
