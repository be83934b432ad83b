"""
ShiftMaster Backend — Scheduling SQLAlchemy Models
====================================================

What:  ORM models for the collections the scheduling app stores.
How:   One table per collection; `__tablename__` is the collection name the
       reporting data store uses to resolve count queries.
Who:   Queried by the dashboard data store; created by Alembic.

Collections:
    users             people who can be scheduled (role: Admin, Manager, Employee)
    teams             groups of users
    shifts            a user's scheduled work period on a team
    timeoff_requests  leave requests (status: pending, approved, rejected)
    notifications     per-user messages

All timestamps are TIMESTAMP WITH TIME ZONE columns of type UTCDateTime:
any aware value is converted to UTC on write; naive values are rejected.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, ForeignKey, Index, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from shiftmaster.database import Base, UTCDateTime


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Team(Base):
    __tablename__ = "teams"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True, default=None)
    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime, nullable=False, default=_utcnow
    )

    def __repr__(self) -> str:
        return f"<Team(id={self.id}, name='{self.name}')>"


class User(Base):
    """
    A person in the organisation.

    The dashboard's "totalEmployees" counts every user whose role is not
    Admin; managers are employees for that purpose.
    """

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    name: Mapped[str] = mapped_column(String(120), nullable=False)

    # Values: Admin, Manager, Employee
    role: Mapped[str] = mapped_column(String(50), nullable=False, default="Employee")

    team_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("teams.id", ondelete="SET NULL"), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime, nullable=False, default=_utcnow
    )

    __table_args__ = (Index("idx_users_role", "role"),)

    def __repr__(self) -> str:
        return f"<User(id={self.id}, role='{self.role}')>"


class Shift(Base):
    """
    A scheduled work period.

    `start_time` drives both dashboard shift counts (today and this week),
    so it is indexed for range scans.
    """

    __tablename__ = "shifts"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=True
    )
    team_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("teams.id", ondelete="SET NULL"), nullable=True
    )
    start_time: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)
    end_time: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)
    title: Mapped[str | None] = mapped_column(String(120), nullable=True, default=None)
    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime, nullable=False, default=_utcnow
    )

    __table_args__ = (Index("idx_shifts_start_time", "start_time"),)

    def __repr__(self) -> str:
        return f"<Shift(id={self.id}, start_time='{self.start_time}')>"


class TimeOffRequest(Base):
    __tablename__ = "timeoff_requests"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=True
    )
    start_date: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)
    end_date: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)
    reason: Mapped[str | None] = mapped_column(Text, nullable=True, default=None)

    # Values: pending → approved | rejected
    status: Mapped[str] = mapped_column(String(50), nullable=False, default="pending")

    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime, nullable=False, default=_utcnow
    )

    __table_args__ = (Index("idx_timeoff_requests_status", "status"),)

    def __repr__(self) -> str:
        return f"<TimeOffRequest(id={self.id}, status='{self.status}')>"


class Notification(Base):
    __tablename__ = "notifications"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=True
    )
    message: Mapped[str] = mapped_column(Text, nullable=False)
    read: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime, nullable=False, default=_utcnow
    )

    def __repr__(self) -> str:
        return f"<Notification(id={self.id}, read={self.read})>"
