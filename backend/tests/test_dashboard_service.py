"""
ShiftMaster Backend — Dashboard Service Tests
===============================================

What we test:
    ✅ The five queries and their filters for a fixed clock
    ✅ End-to-end summary from a fake store
    ✅ Reporting settings (week start, timezone, hours per shift) flow through
    ✅ Errors propagate unchanged; invalid clocks never reach the store
"""

from datetime import datetime, timedelta, timezone

import pytest

from shiftmaster.config import Settings
from shiftmaster.exceptions import AggregateQueryFailedError, InvalidInputError
from shiftmaster.services.dashboard_service import DashboardService, build_dashboard_queries
from shiftmaster.services.data_store import All, Equals, InRange, NotEquals
from shiftmaster.services.reporting_windows import compute_boundaries

UTC = timezone.utc


def _settings(**overrides) -> Settings:
    return Settings(_env_file=None, **overrides)


def _shift_counter(week: int, today: int):
    """Answers shift counts by window length: 7-day ranges → week, else today."""

    def count(filter):
        assert isinstance(filter, InRange)
        return week if filter.end - filter.start == timedelta(days=7) else today

    return count


@pytest.fixture
def populated_store(fake_store_class):
    return fake_store_class(
        counts={
            "users": 42,
            "teams": 5,
            "shifts": _shift_counter(week=120, today=18),
            "timeoff_requests": 3,
        }
    )


class TestQueries:

    def test_dashboard_queries(self, fixed_now):
        queries = build_dashboard_queries(compute_boundaries(fixed_now))

        assert [(q.name, q.collection) for q in queries] == [
            ("users", "users"),
            ("teams", "teams"),
            ("shiftsThisWeek", "shifts"),
            ("todayShifts", "shifts"),
            ("pendingTimeOff", "timeoff_requests"),
        ]
        assert queries[0].filter == NotEquals("role", "Admin")
        assert queries[1].filter == All()
        assert queries[2].filter == InRange(
            "start_time",
            datetime(2024, 6, 10, tzinfo=UTC),
            datetime(2024, 6, 17, tzinfo=UTC),
        )
        assert queries[3].filter == InRange(
            "start_time",
            datetime(2024, 6, 12, tzinfo=UTC),
            datetime(2024, 6, 13, tzinfo=UTC),
        )
        assert queries[4].filter == Equals("status", "pending")


class TestGetStats:

    @pytest.mark.asyncio
    async def test_summary(self, populated_store, fixed_now):
        service = DashboardService(populated_store, _settings())

        summary = await service.get_stats(fixed_now)

        assert summary.total_employees == 42
        assert summary.total_teams == 5
        assert summary.shifts_this_week == 120
        assert summary.today_shifts == 18
        assert summary.pending_time_off_requests == 3
        assert summary.hours_scheduled == 960
        assert summary.estimated_fields == ["coverageRate"]
        assert len(populated_store.calls) == 5

    @pytest.mark.asyncio
    async def test_hours_per_shift_setting(self, populated_store, fixed_now):
        service = DashboardService(populated_store, _settings(hours_per_shift=6))

        summary = await service.get_stats(fixed_now)

        assert summary.hours_scheduled == 720

    @pytest.mark.asyncio
    async def test_week_start_setting(self, populated_store, fixed_now):
        service = DashboardService(populated_store, _settings(week_start_day="sunday"))

        await service.get_stats(fixed_now)

        week_filters = [
            f for c, f in populated_store.calls
            if c == "shifts" and f.end - f.start == timedelta(days=7)
        ]
        assert week_filters[0].start == datetime(2024, 6, 9, tzinfo=UTC)

    @pytest.mark.asyncio
    async def test_report_timezone_setting(self, populated_store):
        service = DashboardService(populated_store, _settings(report_timezone="America/New_York"))

        await service.get_stats(datetime(2024, 6, 12, 2, 0, tzinfo=UTC))

        today_filters = [
            f for c, f in populated_store.calls
            if c == "shifts" and f.end - f.start == timedelta(days=1)
        ]
        assert today_filters[0].start == datetime(2024, 6, 11, 4, 0, tzinfo=UTC)


class TestErrors:

    @pytest.mark.asyncio
    async def test_store_failure_propagates(self, fake_store_class, fixed_now):
        store = fake_store_class(failures={"teams": ConnectionError("down")})

        with pytest.raises(AggregateQueryFailedError) as exc:
            await DashboardService(store, _settings()).get_stats(fixed_now)
        assert exc.value.query_name == "teams"

    @pytest.mark.asyncio
    async def test_timeout_setting_applies(self, fake_store_class, fixed_now):
        store = fake_store_class(delays={"users": 5.0})
        service = DashboardService(store, _settings(aggregate_query_timeout=0.05))

        with pytest.raises(AggregateQueryFailedError) as exc:
            await service.get_stats(fixed_now)
        assert exc.value.timed_out is True

    @pytest.mark.asyncio
    async def test_naive_clock_never_reaches_store(self, fake_store):
        service = DashboardService(fake_store, _settings())

        with pytest.raises(InvalidInputError):
            await service.get_stats(datetime(2024, 6, 12, 9, 0))
        assert fake_store.calls == []
