"""
ShiftMaster Backend — Test Configuration (conftest.py)
========================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixtures:
    fake_store:    In-memory DataStore with per-collection counts, delays and
                   failures; records calls, completions and cancellations
    fixed_now:     2024-06-12T09:00:00Z (a Wednesday)
    test_client:   HTTPX AsyncClient over the FastAPI app with the store and
                   clock dependencies overridden
"""

import asyncio
import os
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Union

# Must be set before shiftmaster.config is imported anywhere
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./test.db"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["REPORT_TIMEZONE"] = "UTC"
os.environ["WEEK_START_DAY"] = "0"

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from shiftmaster.services.data_store import DataStore, Filter


class FakeDataStore(DataStore):
    """
    DataStore double.

    counts:   collection → int, or collection → callable(filter) → int
    delays:   collection → seconds to sleep before answering
    failures: collection → exception instance to raise (after the delay)
    """

    def __init__(
        self,
        counts: Optional[Dict[str, Union[int, Callable[[Filter], int]]]] = None,
        delays: Optional[Dict[str, float]] = None,
        failures: Optional[Dict[str, BaseException]] = None,
    ):
        self.counts = counts or {}
        self.delays = delays or {}
        self.failures = failures or {}
        self.calls: List[tuple] = []
        self.completed: List[str] = []
        self.cancelled: List[str] = []

    async def count(self, collection: str, filter: Filter) -> int:
        self.calls.append((collection, filter))
        try:
            await asyncio.sleep(self.delays.get(collection, 0))
        except asyncio.CancelledError:
            self.cancelled.append(collection)
            raise

        if collection in self.failures:
            raise self.failures[collection]

        value: Any = self.counts.get(collection, 0)
        if callable(value):
            value = value(filter)
        self.completed.append(collection)
        return value


@pytest.fixture
def fake_store_class():
    return FakeDataStore


@pytest.fixture
def fake_store():
    return FakeDataStore()


@pytest.fixture
def fixed_now():
    """Wednesday 2024-06-12 09:00 UTC."""
    return datetime(2024, 6, 12, 9, 0, 0, tzinfo=timezone.utc)


@pytest_asyncio.fixture
async def test_client(fake_store, fixed_now):
    """
    HTTPX AsyncClient talking to the app through ASGITransport.

    The data store and clock dependencies are replaced with `fake_store` and
    `fixed_now`; tests may re-override them on app.dependency_overrides.
    """
    from shiftmaster.deps import get_clock, get_data_store
    from shiftmaster.main import app

    app.dependency_overrides[get_data_store] = lambda: fake_store
    app.dependency_overrides[get_clock] = lambda: fixed_now

    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()
