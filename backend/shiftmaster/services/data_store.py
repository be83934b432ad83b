"""
ShiftMaster Backend — Reporting Data Store
============================================

What:  The count capability the dashboard aggregates are issued against.
How:   `DataStore` is the abstract contract; `SQLAlchemyDataStore` is the
       production implementation over the async SQLAlchemy session factory.
Who:   Passed explicitly into AggregateQueryDispatcher (no module-level
       connection); tests pass a fake DataStore instead.

Filters:
    Filters are small immutable predicate values. The dispatcher never looks
    inside them; only the store translates them.

        All()                          every row
        Equals("status", "pending")    status = 'pending'
        NotEquals("role", "Admin")     role != 'Admin'
        InRange("start_time", s, e)    s <= start_time < e   (half-open)

    Timestamp columns are UTCDateTime, so InRange bounds with any offset
    are converted to UTC on bind and compared as instants.

Concurrency:
    Each count() opens its own session, so any number of counts may be in
    flight at once; the engine's pool bounds how many actually run.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Union

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from shiftmaster.database import Base
from shiftmaster.exceptions import DatabaseError
import shiftmaster.models  # noqa: F401  (registers every collection on Base)

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Filter Predicates
# ══════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class All:
    pass


@dataclass(frozen=True)
class Equals:
    field: str
    value: Any


@dataclass(frozen=True)
class NotEquals:
    field: str
    value: Any


@dataclass(frozen=True)
class InRange:
    """Half-open range predicate: start <= field < end."""

    field: str
    start: datetime
    end: datetime


Filter = Union[All, Equals, NotEquals, InRange]


# ══════════════════════════════════════════════════════════════════════════
# Store Contract
# ══════════════════════════════════════════════════════════════════════════

class DataStore(ABC):
    """
    Abstract count capability over named collections.

    Contract:
        - count() returns the number of records in `collection` matching
          `filter`.
        - Implementations raise on any failure (unreachable store, unknown
          collection or field); they never return a sentinel value.
        - Retry policy, if any, belongs to the implementation.
    """

    @abstractmethod
    async def count(self, collection: str, filter: Filter) -> int:
        ...


class SQLAlchemyDataStore(DataStore):
    """
    DataStore backed by the relational database.

    Collection names resolve to ORM models through their `__tablename__`;
    filter field names resolve to columns of that table.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    @staticmethod
    def _model_for(collection: str) -> type:
        for mapper in Base.registry.mappers:
            if mapper.class_.__tablename__ == collection:
                return mapper.class_
        raise ValueError(f"Unknown collection '{collection}'")

    @staticmethod
    def _column(model: type, field: str):
        column = model.__table__.columns.get(field)
        if column is None:
            raise ValueError(f"Collection '{model.__tablename__}' has no field '{field}'")
        return column

    def _where(self, model: type, filter: Filter) -> list:
        if isinstance(filter, All):
            return []
        if isinstance(filter, Equals):
            return [self._column(model, filter.field) == filter.value]
        if isinstance(filter, NotEquals):
            return [self._column(model, filter.field) != filter.value]
        if isinstance(filter, InRange):
            column = self._column(model, filter.field)
            return [column >= filter.start, column < filter.end]
        raise ValueError(f"Unsupported filter {filter!r}")

    async def count(self, collection: str, filter: Filter) -> int:
        model = self._model_for(collection)
        query = select(func.count()).select_from(model)
        clauses = self._where(model, filter)
        if clauses:
            query = query.where(*clauses)

        try:
            async with self._session_factory() as session:
                result = await session.execute(query)
                value = result.scalar_one()
        except SQLAlchemyError as e:
            raise DatabaseError(
                context={"collection": collection, "filter": repr(filter), "error": str(e)},
            ) from e

        logger.debug("count(%s, %r) = %d", collection, filter, value)
        return int(value)

