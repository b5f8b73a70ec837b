"""
Pydantic models for user data.

Defines schemas for creating, updating and reading users.  A user read
from the API carries the list of tasks it owns.
"""

from typing import List, Optional

from pydantic import Field

from .base import CamelModel
from .task import UserTask


class UserCreate(CamelModel):
    """Schema for registering a user.

    Both fields are required; validation happens in ``UserService`` so
    that a missing field yields the service's error message.
    """

    name: Optional[str] = Field(None, examples=["Ana"])
    email: Optional[str] = Field(None, examples=["ana@x.com"])


class UserUpdate(CamelModel):
    """Partial update of a user.  Omitted fields keep their value."""

    name: Optional[str] = None
    email: Optional[str] = None


class UserRead(CamelModel):
    """Schema for reading a user from the API."""

    id: int
    name: str
    email: str
    tasks: List[UserTask] = Field(default_factory=list)
