"""
Pydantic models for tasks.

A task is a work item owned by exactly one user.  Two read shapes
exist: ``UserTask`` is the plain record embedded in a user, and
``TaskRead`` adds a ``TaskOwner``, a reduced projection of the owning
user that only exposes ``id``, ``name`` and ``email``.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field

from .base import CamelModel


class TaskOwner(CamelModel):
    """Reduced, read-only view of the user owning a task."""

    id: int
    name: str
    email: str


class TaskCreate(CamelModel):
    """Schema for creating a task.

    ``title`` and ``owner_id`` are required; they are declared optional
    here so that a missing value is reported by the service with a
    readable message instead of a schema error.
    """

    title: Optional[str] = Field(None, examples=["Write spec"])
    description: Optional[str] = Field(None, examples=["First draft of the API spec"])
    owner_id: Optional[int] = Field(None, examples=[1])


class TaskUpdate(CamelModel):
    """Schema for updating a task.

    All fields are optional; only fields present in the request body are
    applied.  The owner of a task cannot be changed.
    """

    title: Optional[str] = None
    description: Optional[str] = None
    completed: Optional[bool] = None


class UserTask(CamelModel):
    """Task record as embedded in a user."""

    id: int
    title: str
    description: Optional[str] = None
    completed: bool = False
    created_at: datetime
    owner_id: int


class TaskRead(UserTask):
    """Schema for reading a task from the API."""

    owner: TaskOwner
