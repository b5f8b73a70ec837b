"""
API endpoints for tasks.

Tasks can be listed with optional ``ownerId`` and ``completed`` query
filters.  Both filters may be combined; each returned task embeds a
reduced view of its owner.
"""

from typing import List, Optional

from fastapi import APIRouter, Query, status

from task_tracker_api.app.schemas.base import MessageResponse
from task_tracker_api.app.schemas.task import TaskCreate, TaskRead, TaskUpdate
from task_tracker_api.app.services.task_service import TaskFilter, TaskService, parse_completed

router = APIRouter()


@router.get("", response_model=List[TaskRead])
async def list_tasks(
    owner_id: Optional[int] = Query(
        None,
        alias="ownerId",
        description="Only return tasks owned by this user.",
    ),
    completed: Optional[str] = Query(
        None,
        description="Only return completed ('true') or pending ('false') tasks.",
    ),
) -> List[TaskRead]:
    """Return tasks matching the filters, newest first."""
    filters = TaskFilter(owner_id=owner_id, completed=parse_completed(completed))
    return await TaskService.list_tasks(filters)


@router.get("/{task_id}", response_model=TaskRead)
async def get_task(task_id: int) -> TaskRead:
    """Return a task by ID.  404 if missing."""
    return await TaskService.get_task(task_id)


@router.post("", response_model=TaskRead, status_code=status.HTTP_201_CREATED)
async def create_task(task: TaskCreate) -> TaskRead:
    """Create a task.

    ``title`` and ``ownerId`` are required and the owner must exist;
    otherwise HTTP 400 is returned and nothing is stored.
    """
    return await TaskService.create_task(task)


@router.put("/{task_id}", response_model=TaskRead)
async def update_task(task_id: int, task: TaskUpdate) -> TaskRead:
    """Update ``title``, ``description`` and/or ``completed``."""
    return await TaskService.update_task(task_id, task)


@router.delete("/{task_id}", response_model=MessageResponse)
async def delete_task(task_id: int) -> MessageResponse:
    """Delete a task by ID."""
    await TaskService.delete_task(task_id)
    return MessageResponse(message="Task deleted successfully")
