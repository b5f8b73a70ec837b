"""
Top-level router for version 1 of the API.

This router aggregates the domain routers.  Routes are mounted at the
root of the application (``/users``, ``/tasks``, ``/stats`` and the
``/`` discovery document).
"""

from fastapi import APIRouter

from .endpoints import info, statistics, tasks, users

router = APIRouter()

router.include_router(info.router, tags=["info"])
router.include_router(users.router, prefix="/users", tags=["users"])
router.include_router(tasks.router, prefix="/tasks", tags=["tasks"])
router.include_router(statistics.router, prefix="/stats", tags=["statistics"])
