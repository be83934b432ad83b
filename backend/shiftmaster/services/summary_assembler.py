"""
ShiftMaster Backend — Dashboard Summary Assembler
===================================================

What:  Turns named aggregate results into the fixed-shape DashboardSummary.
How:   Looks each required result up by name, then applies the derived-field
       formulas. Pure: no I/O, same inputs give the same output.

Formulas:
    hoursScheduled = shiftsThisWeek × hours_per_shift
    coverageRate   = configured placeholder, always listed in estimatedFields

A missing result raises MissingAggregateError; it is never replaced by zero.
"""

from dataclasses import dataclass
from typing import Dict, Sequence, Union

from shiftmaster.exceptions import MissingAggregateError
from shiftmaster.schemas.dashboard import DashboardSummary
from shiftmaster.services.aggregate_dispatcher import AggregateResult

# Query names shared with DashboardService
TOTAL_EMPLOYEES = "users"
TOTAL_TEAMS = "teams"
SHIFTS_THIS_WEEK = "shiftsThisWeek"
TODAY_SHIFTS = "todayShifts"
PENDING_TIME_OFF = "pendingTimeOff"

REQUIRED_AGGREGATES = (
    TOTAL_EMPLOYEES,
    TOTAL_TEAMS,
    SHIFTS_THIS_WEEK,
    TODAY_SHIFTS,
    PENDING_TIME_OFF,
)


@dataclass(frozen=True)
class AssemblerConfig:
    hours_per_shift: float = 8
    # TODO: replace with shifts covered / shifts required once shifts carry a
    # required-headcount field.
    coverage_rate: float = 94


def _lookup(values: Dict[str, Union[int, float]], name: str) -> Union[int, float]:
    try:
        return values[name]
    except KeyError:
        raise MissingAggregateError(name) from None


def assemble(
    results: Sequence[AggregateResult],
    config: AssemblerConfig = AssemblerConfig(),
) -> DashboardSummary:
    """
    Build the dashboard summary from dispatcher results.

    Raises:
        MissingAggregateError: A required result name is absent.
    """
    values = {result.name: result.value for result in results}

    shifts_this_week = _lookup(values, SHIFTS_THIS_WEEK)

    return DashboardSummary(
        total_employees=_lookup(values, TOTAL_EMPLOYEES),
        total_teams=_lookup(values, TOTAL_TEAMS),
        shifts_this_week=shifts_this_week,
        today_shifts=_lookup(values, TODAY_SHIFTS),
        pending_time_off_requests=_lookup(values, PENDING_TIME_OFF),
        coverage_rate=config.coverage_rate,
        hours_scheduled=shifts_this_week * config.hours_per_shift,
        estimated_fields=["coverageRate"],
    )
