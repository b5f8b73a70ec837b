"""
Business logic for users.

``UserService`` owns the ``users`` table.  E-mail addresses are unique
(enforced by a UNIQUE column), users are read together with the tasks
they own, and a user who still owns tasks cannot be deleted: the
``tasks.user_id`` foreign key rejects the delete and the service
reports it as a conflict instead of cascading or orphaning tasks.
"""

import logging
import sqlite3
from datetime import datetime
from typing import Dict, List, Optional

from task_tracker_api.app.core.db import get_connection, is_storable_id, run_in_store
from task_tracker_api.app.core.errors import (
    ConflictError,
    InternalError,
    NotFoundError,
    ValidationError,
    is_foreign_key_violation,
    is_unique_violation,
)
from task_tracker_api.app.schemas.task import UserTask
from task_tracker_api.app.schemas.user import UserCreate, UserRead, UserUpdate
from task_tracker_api.app.services.task_service import utc_now

logger = logging.getLogger(__name__)


class UserService:
    """Service for creating, reading, updating and deleting users.

    Queries run in a worker thread via ``run_in_store``; the blocking
    bodies are the ``_``-prefixed methods.
    """

    @classmethod
    async def list_users(cls) -> List[UserRead]:
        """Return all users, each with the tasks it owns."""
        return await run_in_store("list users", cls._list_users)

    @classmethod
    async def get_user(cls, user_id: int) -> UserRead:
        """Retrieve a user with its tasks, newest first.

        Raises ``NotFoundError`` if the user does not exist.
        """
        if not is_storable_id(user_id):
            raise NotFoundError("User not found")
        return await run_in_store("get user", cls._get_user, user_id)

    @classmethod
    async def create_user(cls, data: UserCreate) -> UserRead:
        """Create a new user.

        Raises
        ------
        ValidationError
            If ``name`` or ``email`` is missing or blank.
        ConflictError
            If another user already has the same e-mail.
        """
        name = (data.name or "").strip()
        email = (data.email or "").strip()
        if not name or not email:
            raise ValidationError("Name and email are required")
        logger.info("Registering user %s", email)
        return await run_in_store("create user", cls._create_user, name, email)

    @classmethod
    async def update_user(cls, user_id: int, data: UserUpdate) -> UserRead:
        """Update a user's name and/or e-mail.

        Only fields present in ``data`` are written; a present field must
        not be blank.  Returns the updated user with its tasks.
        """
        if not is_storable_id(user_id):
            raise NotFoundError("User not found")
        return await run_in_store("update user", cls._update_user, user_id, data)

    @classmethod
    async def delete_user(cls, user_id: int) -> None:
        """Delete a user.

        The user's tasks are not touched.  If any task still references
        the user the delete is refused with ``ConflictError``.
        """
        if not is_storable_id(user_id):
            raise NotFoundError("User not found")
        await run_in_store("delete user", cls._delete_user, user_id)

    @classmethod
    def _list_users(cls) -> List[UserRead]:
        conn = get_connection()
        try:
            rows = conn.execute("SELECT id, name, email FROM users ORDER BY id").fetchall()
            tasks_by_user = cls._load_tasks(conn)
            return [
                UserRead(
                    id=row["id"],
                    name=row["name"],
                    email=row["email"],
                    tasks=tasks_by_user.get(row["id"], []),
                )
                for row in rows
            ]
        finally:
            conn.close()

    @classmethod
    def _get_user(cls, user_id: int) -> UserRead:
        conn = get_connection()
        try:
            return cls._fetch_user(conn, user_id)
        finally:
            conn.close()

    @staticmethod
    def _create_user(name: str, email: str) -> UserRead:
        conn = get_connection()
        try:
            now = utc_now()
            try:
                cursor = conn.execute(
                    "INSERT INTO users (name, email, created_at, updated_at) VALUES (?, ?, ?, ?)",
                    (name, email, now, now),
                )
            except sqlite3.IntegrityError as exc:
                if is_unique_violation(exc):
                    raise ConflictError("Email already exists") from exc
                raise InternalError("Failed to create user") from exc
            user_id = cursor.lastrowid
            conn.commit()
            return UserRead(id=user_id, name=name, email=email, tasks=[])
        finally:
            conn.close()

    @classmethod
    def _update_user(cls, user_id: int, data: UserUpdate) -> UserRead:
        updates: Dict[str, str] = {}
        conn = get_connection()
        try:
            row = conn.execute("SELECT id FROM users WHERE id = ?", (user_id,)).fetchone()
            if not row:
                raise NotFoundError("User not found")
            for key, value in data.model_dump(exclude_unset=True).items():
                value = (value or "").strip()
                if not value:
                    raise ValidationError(f"{key.capitalize()} cannot be empty")
                updates[key] = value
            if updates:
                fields = [f"{key} = ?" for key in updates]
                values = list(updates.values()) + [utc_now(), user_id]
                try:
                    conn.execute(
                        f"UPDATE users SET {', '.join(fields)}, updated_at = ? WHERE id = ?",
                        tuple(values),
                    )
                except sqlite3.IntegrityError as exc:
                    if is_unique_violation(exc):
                        raise ConflictError("Email already exists") from exc
                    raise InternalError("Failed to update user") from exc
                conn.commit()
                logger.info("Updated user %s: %s", user_id, sorted(updates))
            return cls._fetch_user(conn, user_id)
        finally:
            conn.close()

    @staticmethod
    def _delete_user(user_id: int) -> None:
        conn = get_connection()
        try:
            try:
                cursor = conn.execute("DELETE FROM users WHERE id = ?", (user_id,))
            except sqlite3.IntegrityError as exc:
                if is_foreign_key_violation(exc):
                    raise ConflictError("User still has tasks; delete them first") from exc
                raise InternalError("Failed to delete user") from exc
            if cursor.rowcount == 0:
                raise NotFoundError("User not found")
            conn.commit()
            logger.info("Deleted user %s", user_id)
        finally:
            conn.close()

    @classmethod
    def _fetch_user(cls, conn: sqlite3.Connection, user_id: int) -> UserRead:
        row = conn.execute(
            "SELECT id, name, email FROM users WHERE id = ?",
            (user_id,),
        ).fetchone()
        if not row:
            raise NotFoundError("User not found")
        tasks = cls._load_tasks(conn, user_id).get(user_id, [])
        return UserRead(id=row["id"], name=row["name"], email=row["email"], tasks=tasks)

    @staticmethod
    def _load_tasks(
        conn: sqlite3.Connection, user_id: Optional[int] = None
    ) -> Dict[int, List[UserTask]]:
        """Load tasks grouped by owner, newest first within each owner."""
        query = "SELECT id, title, description, completed, user_id, created_at FROM tasks"
        params: tuple = ()
        if user_id is not None:
            query += " WHERE user_id = ?"
            params = (user_id,)
        query += " ORDER BY created_at DESC, id DESC"
        grouped: Dict[int, List[UserTask]] = {}
        for row in conn.execute(query, params).fetchall():
            grouped.setdefault(row["user_id"], []).append(
                UserTask(
                    id=row["id"],
                    title=row["title"],
                    description=row["description"],
                    completed=bool(row["completed"]),
                    created_at=datetime.fromisoformat(row["created_at"]),
                    owner_id=row["user_id"],
                )
            )
        return grouped
