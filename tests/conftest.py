"""
Pytest configuration and fixtures.
"""
from contextlib import asynccontextmanager
from datetime import date, datetime
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest

from internal.domain.product import Product


class FakePool:
    """Connection provider that hands out a single mock connection."""

    def __init__(self, connection) -> None:
        self.connection = connection
        self.acquired = 0
        self.released = 0

    @asynccontextmanager
    async def acquire(self):
        self.acquired += 1
        try:
            yield self.connection
        finally:
            self.released += 1


@pytest.fixture
def mock_connection():
    """Mock asyncpg connection."""
    conn = MagicMock()
    conn.fetchval = AsyncMock()
    conn.fetch = AsyncMock(return_value=[])
    conn.fetchrow = AsyncMock(return_value=None)
    conn.execute = AsyncMock(return_value="UPDATE 1")
    return conn


@pytest.fixture
def fake_pool(mock_connection):
    """Fake pool wrapping the mock connection."""
    return FakePool(mock_connection)


@pytest.fixture
def product_data():
    """Sample product data for tests."""
    return {
        "name": "Milk",
        "producer": "Acme",
        "price": Decimal("1.99"),
        "expiration_date": date(2024, 1, 1),
    }


@pytest.fixture
def product(product_data):
    """Unsaved sample product."""
    return Product(**product_data)


@pytest.fixture
def product_row():
    """Database row for a stored product."""
    return {
        "id": 7,
        "name": "Cheese",
        "producer": "Dairy Co",
        "price": Decimal("12.50"),
        "expiration_date": date(2025, 6, 30),
        "creation_time": datetime(2024, 5, 1, 10, 30),
    }
