"""
User endpoints for API v1.

CRUD over users.  Failures are raised by ``UserService`` as
``ServiceError`` subclasses and turned into JSON error responses by
the application's exception handlers.
"""

from typing import List

from fastapi import APIRouter, status

from task_tracker_api.app.schemas.base import MessageResponse
from task_tracker_api.app.schemas.user import UserCreate, UserRead, UserUpdate
from task_tracker_api.app.services.user_service import UserService

router = APIRouter()


@router.get("", response_model=List[UserRead])
async def list_users() -> List[UserRead]:
    """Return all users with their tasks."""
    return await UserService.list_users()


@router.get("/{user_id}", response_model=UserRead)
async def get_user(user_id: int) -> UserRead:
    """Return one user with its tasks, newest first.  404 if missing."""
    return await UserService.get_user(user_id)


@router.post("", response_model=UserRead, status_code=status.HTTP_201_CREATED)
async def create_user(user: UserCreate) -> UserRead:
    """Create a user.

    ``name`` and ``email`` are required.  A duplicate e-mail is
    rejected with HTTP 400.
    """
    return await UserService.create_user(user)


@router.put("/{user_id}", response_model=UserRead)
async def update_user(user_id: int, user: UserUpdate) -> UserRead:
    """Update a user's ``name`` and/or ``email``."""
    return await UserService.update_user(user_id, user)


@router.delete("/{user_id}", response_model=MessageResponse)
async def delete_user(user_id: int) -> MessageResponse:
    """Delete a user.

    Refused with HTTP 400 while the user still owns tasks.
    """
    await UserService.delete_user(user_id)
    return MessageResponse(message="User deleted successfully")
