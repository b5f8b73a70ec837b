"""
Service for managing tasks.

A task is a work item owned by a user.  Every task must reference an
existing user when it is created: the service checks the owner first
to report a readable error, and the ``tasks.user_id`` foreign key
rejects the insert if the owner disappears between the check and the
insert.

Listings can be filtered by owner and by completion state.  Filters are
described by ``TaskFilter``; an unset filter puts no constraint on its
field and set filters are combined with AND.  Listings are always
ordered newest first.
"""

from __future__ import annotations

import logging
import sqlite3
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, List, Optional

from task_tracker_api.app.core.db import get_connection, is_storable_id, run_in_store
from task_tracker_api.app.core.errors import (
    InternalError,
    NotFoundError,
    ValidationError,
    is_foreign_key_violation,
)
from task_tracker_api.app.schemas.task import TaskCreate, TaskOwner, TaskRead, TaskUpdate

logger = logging.getLogger(__name__)

# Newest first.  ``id`` breaks ties between tasks created in the same
# microsecond so the order is total.
TASK_ORDER_BY = "ORDER BY t.created_at DESC, t.id DESC"

_SELECT_TASKS = """
    SELECT t.id, t.title, t.description, t.completed, t.user_id, t.created_at,
           u.name AS owner_name, u.email AS owner_email
    FROM tasks AS t
    JOIN users AS u ON u.id = t.user_id
"""


def utc_now() -> str:
    """Return the current UTC time as a fixed-width ISO string.

    Fixed width keeps lexical order equal to chronological order, which
    ``ORDER BY created_at`` relies on.
    """
    return datetime.now(timezone.utc).isoformat(timespec="microseconds")


def parse_completed(value: Optional[str]) -> Optional[bool]:
    """Parse the tri-state ``completed`` query parameter.

    ``None`` means the filter is unset.  ``"true"`` and ``"false"``
    (any case) map to booleans; anything else is rejected.
    """
    if value is None:
        return None
    normalized = value.strip().lower()
    if normalized == "true":
        return True
    if normalized == "false":
        return False
    raise ValidationError("completed must be 'true' or 'false'")


@dataclass(frozen=True)
class TaskFilter:
    """Optional equality filters for task listings."""

    owner_id: Optional[int] = None
    completed: Optional[bool] = None

    @property
    def matches_nothing(self) -> bool:
        """True when ``owner_id`` is outside the range any stored id can take."""
        return self.owner_id is not None and not is_storable_id(self.owner_id)

    def where_clause(self) -> tuple[str, list[Any]]:
        """Build a parameterized WHERE clause for the active filters.

        Returns an empty string when no filter is set.
        """
        clauses: list[str] = []
        params: list[Any] = []
        if self.owner_id is not None:
            clauses.append("t.user_id = ?")
            params.append(self.owner_id)
        if self.completed is not None:
            clauses.append("t.completed = ?")
            params.append(1 if self.completed else 0)
        where_sql = " WHERE " + " AND ".join(clauses) if clauses else ""
        return where_sql, params


class TaskService:
    """Service for creating, listing, updating and deleting tasks.

    The public coroutines run their queries in a worker thread through
    ``run_in_store``; the ``_``-prefixed methods hold the blocking
    bodies and each opens its own connection.
    """

    @classmethod
    async def list_tasks(cls, filters: Optional[TaskFilter] = None) -> List[TaskRead]:
        """Return tasks matching ``filters``, newest first.

        Each task embeds a reduced view of its owner.  Without filters
        all tasks are returned.
        """
        filters = filters or TaskFilter()
        if filters.matches_nothing:
            return []
        return await run_in_store("list tasks", cls._list_tasks, filters)

    @classmethod
    async def get_task(cls, task_id: int) -> TaskRead:
        """Retrieve a task by ID or raise ``NotFoundError``."""
        if not is_storable_id(task_id):
            raise NotFoundError("Task not found")
        return await run_in_store("get task", cls._get_task, task_id)

    @classmethod
    async def create_task(cls, data: TaskCreate) -> TaskRead:
        """Create a task for an existing user.

        Raises
        ------
        ValidationError
            If ``title`` or ``owner_id`` is missing, or if no user with
            ``owner_id`` exists.
        """
        if not data.title or not data.title.strip() or data.owner_id is None:
            raise ValidationError("Title and ownerId are required")
        if not is_storable_id(data.owner_id):
            raise ValidationError("User does not exist")
        return await run_in_store("create task", cls._create_task, data)

    @classmethod
    async def update_task(cls, task_id: int, data: TaskUpdate) -> TaskRead:
        """Apply a partial update to a task.

        Only fields present in ``data`` are written.  An explicit
        ``null`` description clears it; ``title`` and ``completed``
        cannot be cleared.
        """
        if not is_storable_id(task_id):
            raise NotFoundError("Task not found")
        return await run_in_store("update task", cls._update_task, task_id, data)

    @classmethod
    async def delete_task(cls, task_id: int) -> None:
        """Delete a task by ID or raise ``NotFoundError``."""
        if not is_storable_id(task_id):
            raise NotFoundError("Task not found")
        await run_in_store("delete task", cls._delete_task, task_id)

    @classmethod
    def _list_tasks(cls, filters: TaskFilter) -> List[TaskRead]:
        where_sql, params = filters.where_clause()
        conn = get_connection()
        try:
            rows = conn.execute(
                f"{_SELECT_TASKS}{where_sql} {TASK_ORDER_BY}",
                tuple(params),
            ).fetchall()
            return [cls._row_to_task_read(row) for row in rows]
        finally:
            conn.close()

    @classmethod
    def _get_task(cls, task_id: int) -> TaskRead:
        conn = get_connection()
        try:
            return cls._fetch_task(conn, task_id)
        finally:
            conn.close()

    @classmethod
    def _create_task(cls, data: TaskCreate) -> TaskRead:
        conn = get_connection()
        try:
            owner = conn.execute(
                "SELECT id FROM users WHERE id = ?",
                (data.owner_id,),
            ).fetchone()
            if not owner:
                raise ValidationError("User does not exist")
            now = utc_now()
            try:
                cursor = conn.execute(
                    """
                    INSERT INTO tasks (title, description, completed, user_id, created_at, updated_at)
                    VALUES (?, ?, 0, ?, ?, ?)
                    """,
                    (data.title, data.description, data.owner_id, now, now),
                )
            except sqlite3.IntegrityError as exc:
                # The owner was deleted after the existence check.
                if is_foreign_key_violation(exc):
                    raise ValidationError("User does not exist") from exc
                raise InternalError("Failed to create task") from exc
            task_id = cursor.lastrowid
            conn.commit()
            logger.info("Created task %s for user %s", task_id, data.owner_id)
            return cls._fetch_task(conn, task_id)
        finally:
            conn.close()

    @classmethod
    def _update_task(cls, task_id: int, data: TaskUpdate) -> TaskRead:
        updates = data.model_dump(exclude_unset=True)
        conn = get_connection()
        try:
            row = conn.execute("SELECT id FROM tasks WHERE id = ?", (task_id,)).fetchone()
            if not row:
                raise NotFoundError("Task not found")
            if "title" in updates and (updates["title"] is None or not updates["title"].strip()):
                raise ValidationError("Title cannot be empty")
            if "completed" in updates and updates["completed"] is None:
                raise ValidationError("completed must be true or false")
            if updates:
                fields = []
                values: list[Any] = []
                for key, value in updates.items():
                    fields.append(f"{key} = ?")
                    if isinstance(value, bool):
                        values.append(1 if value else 0)
                    else:
                        values.append(value)
                values.extend([utc_now(), task_id])
                conn.execute(
                    f"UPDATE tasks SET {', '.join(fields)}, updated_at = ? WHERE id = ?",
                    tuple(values),
                )
                conn.commit()
                logger.info("Updated task %s: %s", task_id, sorted(updates))
            return cls._fetch_task(conn, task_id)
        finally:
            conn.close()

    @staticmethod
    def _delete_task(task_id: int) -> None:
        conn = get_connection()
        try:
            cursor = conn.execute("DELETE FROM tasks WHERE id = ?", (task_id,))
            if cursor.rowcount == 0:
                raise NotFoundError("Task not found")
            conn.commit()
            logger.info("Deleted task %s", task_id)
        finally:
            conn.close()

    @classmethod
    def _fetch_task(cls, conn: sqlite3.Connection, task_id: int) -> TaskRead:
        row = conn.execute(f"{_SELECT_TASKS} WHERE t.id = ?", (task_id,)).fetchone()
        if not row:
            raise NotFoundError("Task not found")
        return cls._row_to_task_read(row)

    @staticmethod
    def _row_to_task_read(row: sqlite3.Row) -> TaskRead:
        """Convert a joined task/owner row to a ``TaskRead``."""
        return TaskRead(
            id=row["id"],
            title=row["title"],
            description=row["description"],
            completed=bool(row["completed"]),
            created_at=datetime.fromisoformat(row["created_at"]),
            owner_id=row["user_id"],
            owner=TaskOwner(
                id=row["user_id"],
                name=row["owner_name"],
                email=row["owner_email"],
            ),
        )
