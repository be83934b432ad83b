"""
ShiftMaster Backend — Dashboard Service
=========================================

What:  Computes the dashboard statistics served by GET /api/dashboard/stats.
How:   Window Calculator → five AggregateQuery values → Dispatcher (concurrent
       counts against the injected DataStore) → Summary Assembler.
Who:   Called by the dashboard route; the store and clock value are passed in.

Flow:
    ┌────────────┐    ┌──────────────┐    ┌──────────────┐    ┌───────────┐
    │ now (UTC)  │───▶│   Window     │───▶│  Dispatcher  │───▶│ Assembler │
    │ (caller)   │    │  Calculator  │    │  (5 counts)  │    │ (summary) │
    └────────────┘    └──────────────┘    └──────────────┘    └───────────┘

Errors propagate unchanged: InvalidInputError, AggregateQueryFailedError,
MissingAggregateError. Mapping them to HTTP responses is main.py's job.
"""

import logging
from datetime import datetime
from typing import List, Optional

from shiftmaster.config import Settings, settings as default_settings
from shiftmaster.schemas.dashboard import DashboardSummary
from shiftmaster.services.aggregate_dispatcher import AggregateQuery, AggregateQueryDispatcher
from shiftmaster.services.data_store import All, DataStore, Equals, InRange, NotEquals
from shiftmaster.services.reporting_windows import ReportingBoundaries, compute_boundaries
from shiftmaster.services.summary_assembler import (
    PENDING_TIME_OFF,
    SHIFTS_THIS_WEEK,
    TODAY_SHIFTS,
    TOTAL_EMPLOYEES,
    TOTAL_TEAMS,
    AssemblerConfig,
    assemble,
)

logger = logging.getLogger(__name__)


def build_dashboard_queries(boundaries: ReportingBoundaries) -> List[AggregateQuery]:
    """The five dashboard counts, with shift filters derived from `boundaries`."""
    return [
        AggregateQuery(TOTAL_EMPLOYEES, "users", NotEquals("role", "Admin")),
        AggregateQuery(TOTAL_TEAMS, "teams", All()),
        AggregateQuery(
            SHIFTS_THIS_WEEK,
            "shifts",
            InRange("start_time", boundaries.this_week.start, boundaries.this_week.end),
        ),
        AggregateQuery(
            TODAY_SHIFTS,
            "shifts",
            InRange("start_time", boundaries.today.start, boundaries.today.end),
        ),
        AggregateQuery(PENDING_TIME_OFF, "timeoff_requests", Equals("status", "pending")),
    ]


class DashboardService:
    """
    Stateless orchestrator for dashboard statistics.

    Args:
        store:    Count capability the queries run against.
        settings: Reporting timezone, week start, timeout and assembler values.
    """

    def __init__(self, store: DataStore, settings: Optional[Settings] = None):
        self.store = store
        self.settings = settings or default_settings
        self.dispatcher = AggregateQueryDispatcher(timeout=self.settings.aggregate_query_timeout)
        self.assembler_config = AssemblerConfig(
            hours_per_shift=self.settings.hours_per_shift,
            coverage_rate=self.settings.coverage_rate_placeholder,
        )

    async def get_stats(self, now: datetime) -> DashboardSummary:
        boundaries = compute_boundaries(
            now,
            week_start_day=self.settings.week_start_day,
            tz=self.settings.report_tz,
        )
        today_start, today_end = boundaries.today.isoformat()
        week_start, week_end = boundaries.this_week.isoformat()
        logger.debug(
            "Dashboard windows: today=[%s, %s) week=[%s, %s)",
            today_start,
            today_end,
            week_start,
            week_end,
        )

        results = await self.dispatcher.dispatch(build_dashboard_queries(boundaries), self.store)
        return assemble(results, self.assembler_config)
