"""
ShiftMaster Backend — SQLAlchemy Data Store Tests
===================================================

What we test:
    ✅ Every filter predicate against a real (SQLite) database
    ✅ Half-open range bounds on shift start times
    ✅ Unknown collections and fields raise instead of counting zero
    ✅ Driver errors surface as DatabaseError
    ✅ Offset timestamps are stored and compared as UTC instants
"""

from datetime import datetime, timedelta, timezone

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

from shiftmaster.database import Base, UTCDateTime
from shiftmaster.exceptions import DatabaseError
from shiftmaster.models import Shift, Team, TimeOffRequest, User
from shiftmaster.services.data_store import All, Equals, InRange, NotEquals, SQLAlchemyDataStore

UTC = timezone.utc


def _utc(*args) -> datetime:
    return datetime(*args, tzinfo=UTC)


@pytest_asyncio.fixture
async def session_factory(tmp_path):
    """File-backed SQLite database with the schema created and rows seeded."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'store.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    factory = async_sessionmaker(engine, expire_on_commit=False)
    async with factory() as session:
        team = Team(name="Front desk")
        session.add_all([team, Team(name="Kitchen")])
        await session.flush()

        session.add_all([
            User(email="admin@example.com", name="Ada", role="Admin"),
            User(email="mgr@example.com", name="Max", role="Manager", team_id=team.id),
            User(email="e1@example.com", name="Eve", team_id=team.id),
            User(email="e2@example.com", name="Eli", team_id=team.id),
        ])
        session.add_all([
            # Exactly on today's start: included
            Shift(start_time=_utc(2024, 6, 12, 0, 0), end_time=_utc(2024, 6, 12, 8, 0)),
            Shift(start_time=_utc(2024, 6, 12, 14, 0), end_time=_utc(2024, 6, 12, 22, 0)),
            Shift(start_time=_utc(2024, 6, 10, 6, 0), end_time=_utc(2024, 6, 10, 14, 0)),
            # Exactly on the week's end: excluded
            Shift(start_time=_utc(2024, 6, 17, 0, 0), end_time=_utc(2024, 6, 17, 8, 0)),
            Shift(start_time=_utc(2024, 6, 9, 23, 59), end_time=_utc(2024, 6, 10, 7, 59)),
        ])
        session.add_all([
            TimeOffRequest(start_date=_utc(2024, 7, 1), end_date=_utc(2024, 7, 5)),
            TimeOffRequest(start_date=_utc(2024, 7, 8), end_date=_utc(2024, 7, 9)),
            TimeOffRequest(start_date=_utc(2024, 5, 1), end_date=_utc(2024, 5, 2), status="approved"),
        ])
        await session.commit()

    yield factory

    await engine.dispose()


@pytest.fixture
def store(session_factory):
    return SQLAlchemyDataStore(session_factory)


class TestFilters:

    @pytest.mark.asyncio
    async def test_all(self, store):
        assert await store.count("teams", All()) == 2

    @pytest.mark.asyncio
    async def test_not_equals(self, store):
        assert await store.count("users", NotEquals("role", "Admin")) == 3

    @pytest.mark.asyncio
    async def test_equals(self, store):
        assert await store.count("timeoff_requests", Equals("status", "pending")) == 2

    @pytest.mark.asyncio
    async def test_in_range_today(self, store):
        today = InRange("start_time", _utc(2024, 6, 12), _utc(2024, 6, 13))

        assert await store.count("shifts", today) == 2

    @pytest.mark.asyncio
    async def test_in_range_week_is_half_open(self, store):
        week = InRange("start_time", _utc(2024, 6, 10), _utc(2024, 6, 17))

        assert await store.count("shifts", week) == 3

    @pytest.mark.asyncio
    async def test_empty_collection(self, store):
        assert await store.count("notifications", All()) == 0


class TestErrors:

    @pytest.mark.asyncio
    async def test_unknown_collection(self, store):
        with pytest.raises(ValueError, match="Unknown collection"):
            await store.count("rosters", All())

    @pytest.mark.asyncio
    async def test_unknown_field(self, store):
        with pytest.raises(ValueError, match="no field"):
            await store.count("users", Equals("department", "ops"))

    @pytest.mark.asyncio
    async def test_unsupported_filter(self, store):
        with pytest.raises(ValueError, match="Unsupported filter"):
            await store.count("users", "role = 'Admin'")

    @pytest.mark.asyncio
    async def test_driver_error_becomes_database_error(self, tmp_path):
        # Schema never created: every count hits "no such table"
        engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'empty.db'}")
        store = SQLAlchemyDataStore(async_sessionmaker(engine))
        try:
            with pytest.raises(DatabaseError) as exc:
                await store.count("teams", All())
            assert exc.value.context["collection"] == "teams"
        finally:
            await engine.dispose()


class TestUTCNormalisation:

    @pytest.mark.asyncio
    async def test_offset_timestamp_counted_by_instant(self, session_factory, store):
        # 01:00 on the 13th at +02:00 is 23:00 UTC on the 12th
        plus_two = timezone(timedelta(hours=2))
        async with session_factory() as session:
            session.add(Shift(
                start_time=datetime(2024, 6, 13, 1, 0, tzinfo=plus_two),
                end_time=datetime(2024, 6, 13, 9, 0, tzinfo=plus_two),
            ))
            await session.commit()

        today = InRange("start_time", _utc(2024, 6, 12), _utc(2024, 6, 13))

        assert await store.count("shifts", today) == 3

    @pytest.mark.asyncio
    async def test_offset_bounds_compare_as_utc(self, store):
        plus_two = timezone(timedelta(hours=2))
        today = InRange(
            "start_time",
            datetime(2024, 6, 12, 2, 0, tzinfo=plus_two),
            datetime(2024, 6, 13, 2, 0, tzinfo=plus_two),
        )

        assert await store.count("shifts", today) == 2

    @pytest.mark.asyncio
    async def test_values_read_back_as_utc(self, session_factory):
        minus_five = timezone(timedelta(hours=-5))
        async with session_factory() as session:
            shift = Shift(
                start_time=datetime(2024, 6, 12, 19, 0, tzinfo=minus_five),
                end_time=datetime(2024, 6, 13, 3, 0, tzinfo=minus_five),
            )
            session.add(shift)
            await session.commit()
            shift_id = shift.id

        async with session_factory() as session:
            stored = await session.get(Shift, shift_id)

        assert stored.start_time == _utc(2024, 6, 13, 0, 0)
        assert stored.start_time.utcoffset() == timedelta(0)

    def test_naive_value_rejected(self):
        with pytest.raises(ValueError, match="Naive datetime"):
            UTCDateTime().process_bind_param(datetime(2024, 6, 12, 9, 0), None)
