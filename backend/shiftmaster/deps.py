"""FastAPI dependencies shared by the route modules."""

from datetime import datetime, timezone

from shiftmaster.database import async_session_factory
from shiftmaster.services.data_store import DataStore, SQLAlchemyDataStore


def get_data_store() -> DataStore:
    """The reporting store over the application's session factory."""
    return SQLAlchemyDataStore(async_session_factory)


def get_clock() -> datetime:
    """Current time as an aware UTC timestamp. Overridden in tests."""
    return datetime.now(timezone.utc)
