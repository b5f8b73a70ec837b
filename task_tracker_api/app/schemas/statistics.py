"""Pydantic model for the summary report."""

from .base import CamelModel


class StatsRead(CamelModel):
    """Aggregate counts over users and tasks.

    ``completion_rate`` is an integer percentage, 0 when there are no
    tasks.
    """

    total_users: int
    total_tasks: int
    completed_tasks: int
    pending_tasks: int
    completion_rate: int
