"""
ShiftMaster Backend — Aggregate Query Dispatcher
==================================================

What:  Issues a batch of independent count queries concurrently and gathers
       the results (scatter-gather).
How:   One task per query inside an asyncio.TaskGroup, each bounded by
       asyncio.timeout(). The TaskGroup cancels the remaining tasks as soon
       as one fails, and cancelling the caller cancels them all.
Who:   Used by DashboardService; the store is always passed in.

Guarantees:
    - Results come back in input order, whatever order queries finish in.
    - All-or-nothing: one failing query fails the whole batch with a single
      AggregateQueryFailedError naming that query; no partial list escapes.
    - A query exceeding the timeout fails with cause=TimeoutError.
    - No retries here. Transient store errors propagate immediately.
"""

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import List, Optional, Sequence, Union

from shiftmaster.exceptions import AggregateQueryFailedError
from shiftmaster.services.data_store import DataStore, Filter

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AggregateQuery:
    name: str
    collection: str
    filter: Filter


@dataclass(frozen=True)
class AggregateResult:
    name: str
    value: Union[int, float]


class AggregateQueryDispatcher:
    """
    Concurrent, fail-fast executor for AggregateQuery batches.

    Args:
        timeout: Seconds each query may take; None disables the bound.
    """

    def __init__(self, timeout: Optional[float] = None):
        self.timeout = timeout

    async def _run(self, query: AggregateQuery, store: DataStore) -> AggregateResult:
        start_time = time.perf_counter()
        try:
            async with asyncio.timeout(self.timeout):
                value = await store.count(query.collection, query.filter)
        except Exception as e:
            duration_ms = (time.perf_counter() - start_time) * 1000
            logger.warning(
                "Aggregate query '%s' on %s failed after %.0fms: %s",
                query.name,
                query.collection,
                duration_ms,
                type(e).__name__,
            )
            raise AggregateQueryFailedError(query_name=query.name, cause=e) from e

        logger.debug(
            "Aggregate query '%s' = %s (%.1fms)",
            query.name,
            value,
            (time.perf_counter() - start_time) * 1000,
        )
        return AggregateResult(name=query.name, value=value)

    async def dispatch(
        self,
        queries: Sequence[AggregateQuery],
        store: DataStore,
    ) -> List[AggregateResult]:
        """
        Run every query concurrently and return one result per query.

        Raises:
            ValueError: Two queries in the batch share a name.
            AggregateQueryFailedError: Any query failed or timed out. Only
                the first failure is raised; the rest of the batch is cancelled.
        """
        names = [query.name for query in queries]
        if len(set(names)) != len(names):
            duplicates = sorted({name for name in names if names.count(name) > 1})
            raise ValueError(f"Duplicate aggregate query names: {duplicates}")

        try:
            async with asyncio.TaskGroup() as group:
                tasks = [group.create_task(self._run(query, store)) for query in queries]
        except BaseExceptionGroup as errors:
            # Task errors are collected in the order the tasks failed.
            failures = [e for e in errors.exceptions if isinstance(e, AggregateQueryFailedError)]
            if not failures:
                raise
            raise failures[0]

        return [task.result() for task in tasks]
