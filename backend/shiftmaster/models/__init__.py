"""ORM models. Importing this package registers every table on Base.metadata."""

from shiftmaster.models.scheduling import (
    Notification,
    Shift,
    Team,
    TimeOffRequest,
    User,
)

__all__ = ["Notification", "Shift", "Team", "TimeOffRequest", "User"]
