"""
Product API — Test Configuration (conftest.py)
===============================================

What:  Shared pytest fixtures for the entire test suite.
Why:   Every test gets its own app and store, so writes never leak between tests.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped):
    ├── test_settings: Settings with a known API key
    ├── store:         ProductStore seeded with the three sample products
    ├── app:           create_app(test_settings, store)
    ├── test_client:   HTTPX AsyncClient sending the valid x-api-key header
    └── anon_client:   HTTPX AsyncClient sending no x-api-key header
"""

import os

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

# Override settings for testing BEFORE any app imports
# Why: the module-level app in productapi.main is built on import
os.environ["API_KEY"] = "test-api-key"
os.environ["ENVIRONMENT"] = "production"
os.environ["LOG_LEVEL"] = "WARNING"

from productapi.config import Settings  # noqa: E402
from productapi.main import create_app  # noqa: E402
from productapi.services.product_store import ProductStore  # noqa: E402

TEST_API_KEY = "test-api-key"


@pytest.fixture
def test_settings():
    """Settings with a known API key and production-style error bodies."""
    return Settings(api_key=TEST_API_KEY, environment="production", seed_sample_data=True)


@pytest.fixture
def store():
    """Fresh store with Laptop (1), Smartphone (2) and Coffee Maker (3)."""
    return ProductStore.with_sample_data()


@pytest.fixture
def app(test_settings, store):
    return create_app(settings=test_settings, store=store)


@pytest.fixture
def sample_payload():
    """A valid create/update body."""
    return {
        "name": "Mouse",
        "description": "Wireless",
        "price": 20,
        "category": "electronics",
        "inStock": True,
    }


@pytest_asyncio.fixture
async def test_client(app):
    """
    Async HTTP client talking to the app in-process, authenticated.

    Usage:
        async def test_list(test_client):
            response = await test_client.get("/api/products")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(
        transport=transport,
        base_url="http://test",
        headers={"x-api-key": TEST_API_KEY},
    ) as client:
        yield client


@pytest_asyncio.fixture
async def anon_client(app):
    """Async HTTP client that sends no API key."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
