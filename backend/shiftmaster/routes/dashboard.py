"""
ShiftMaster Backend — Dashboard Route
=======================================

What:  GET /api/dashboard/stats — headline numbers for the dashboard page.
How:   Resolves the store and the clock through dependencies, delegates to
       DashboardService, returns the camelCase DashboardSummary.
Who:   Called by the frontend dashboard on load.

Errors (handled globally in main.py):
    InvalidInputError          → 400
    AggregateQueryFailedError  → 500, generic message, no window details
    MissingAggregateError      → 500, generic message
"""

import logging
from datetime import datetime

from fastapi import APIRouter, Depends, Response

from shiftmaster.deps import get_clock, get_data_store
from shiftmaster.schemas.dashboard import DashboardSummary, ErrorResponse
from shiftmaster.services.dashboard_service import DashboardService
from shiftmaster.services.data_store import DataStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/dashboard", tags=["Dashboard"])


@router.get(
    "/stats",
    response_model=DashboardSummary,
    response_model_by_alias=True,
    responses={
        200: {"description": "Dashboard statistics", "model": DashboardSummary},
        400: {"description": "Invalid reporting input", "model": ErrorResponse},
        500: {"description": "Statistics unavailable", "model": ErrorResponse},
    },
    summary="Dashboard statistics",
    description=(
        "Counts employees, teams, this week's and today's shifts, and pending "
        "time-off requests. Fields listed in `estimatedFields` are placeholders."
    ),
)
async def get_dashboard_stats(
    response: Response,
    store: DataStore = Depends(get_data_store),
    now: datetime = Depends(get_clock),
) -> DashboardSummary:
    summary = await DashboardService(store).get_stats(now)

    # Recomputed per request; caches must not reuse it
    response.headers["Cache-Control"] = "no-store"
    return summary
