"""
ShiftMaster Backend — Pydantic Response Schemas
=================================================

What:  Pydantic models defining the API contract with the frontend.
How:   FastAPI serializes route return values through these models and
       generates the OpenAPI documentation from them.

Field naming:
    Python attributes are snake_case; the JSON the SPA consumes is camelCase
    (alias_generator=to_camel). Routes serialize by alias.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class DashboardSummary(BaseModel):
    """
    What:  Headline numbers for the dashboard landing page.
    Who:   Returned by GET /api/dashboard/stats.
    When:  Recomputed on every request; never persisted.

    Example:
        {
            "totalEmployees": 42,
            "totalTeams": 5,
            "shiftsThisWeek": 120,
            "todayShifts": 18,
            "pendingTimeOffRequests": 3,
            "coverageRate": 94.0,
            "hoursScheduled": 960.0,
            "estimatedFields": ["coverageRate"]
        }

    Fields listed in `estimatedFields` are placeholders, not measurements.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    total_employees: int = Field(description="Users whose role is not Admin")
    total_teams: int = Field(description="Number of teams")
    shifts_this_week: int = Field(description="Shifts starting in the current reporting week")
    today_shifts: int = Field(description="Shifts starting today")
    pending_time_off_requests: int = Field(description="Time-off requests awaiting a decision")
    coverage_rate: float = Field(description="Percentage of required shifts covered")
    hours_scheduled: float = Field(description="shiftsThisWeek × hours per shift")
    estimated_fields: List[str] = Field(
        default_factory=list,
        description="camelCase names of fields that are placeholders rather than measured",
    )


class ServiceInfoResponse(BaseModel):
    """Returned by GET / — identifies the running service."""

    status: str = Field(default="ok")
    name: str = Field(description="Service name")
    version: str = Field(description="Application version")
    timestamp: datetime = Field(description="Server time (UTC ISO 8601)")


class HealthResponse(BaseModel):
    """
    What:  Health check response showing service and dependency status.
    Who:   Returned by GET /health for monitoring and load balancer probes.
    """

    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")


class ErrorResponse(BaseModel):
    """
    Standardized error body for all API errors.

    Example:
        {
            "error": "internal_server_error",
            "message": "Dashboard statistics are temporarily unavailable.",
            "request_id": "a1b2c3d4"
        }
    """

    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")
