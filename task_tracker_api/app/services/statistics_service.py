"""
Service layer for the summary report.

The summary counts users, tasks and completed tasks.  The three counts
are independent read-only queries, so they run concurrently in worker
threads, each on its own connection.  They do not share a snapshot:
under concurrent writes the numbers may disagree by the writes that
landed between the queries.  ``pending_tasks`` is derived from the
other two counts and is therefore always consistent with them.
"""

from __future__ import annotations

import asyncio
import logging

from task_tracker_api.app.core.db import get_connection, run_in_store
from task_tracker_api.app.schemas.statistics import StatsRead

logger = logging.getLogger(__name__)


def completion_rate(completed: int, total: int) -> int:
    """Return ``completed / total`` as a percentage rounded half up.

    Defined as 0 when ``total`` is 0.
    """
    if total <= 0:
        return 0
    return (completed * 200 + total) // (2 * total)


class StatisticsService:
    """Service providing aggregated statistics."""

    @staticmethod
    def _count(query: str) -> int:
        conn = get_connection()
        try:
            return conn.execute(query).fetchone()[0]
        finally:
            conn.close()

    @classmethod
    async def summary(cls) -> StatsRead:
        """Return fresh totals for users and tasks and the completion rate."""
        total_users, total_tasks, completed_tasks = await asyncio.gather(
            run_in_store("count users", cls._count, "SELECT COUNT(*) FROM users"),
            run_in_store("count tasks", cls._count, "SELECT COUNT(*) FROM tasks"),
            run_in_store(
                "count completed tasks", cls._count, "SELECT COUNT(*) FROM tasks WHERE completed = 1"
            ),
        )
        logger.debug(
            "Summary: users=%s tasks=%s completed=%s",
            total_users, total_tasks, completed_tasks,
        )
        return StatsRead(
            total_users=total_users,
            total_tasks=total_tasks,
            completed_tasks=completed_tasks,
            pending_tasks=total_tasks - completed_tasks,
            completion_rate=completion_rate(completed_tasks, total_tasks),
        )
