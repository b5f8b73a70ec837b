"""Direct tests of the service layer and its integrity rules."""

import sqlite3

import pytest

from task_tracker_api.app.core.config import settings
from task_tracker_api.app.core.db import MAX_ID, get_connection, is_storable_id
from task_tracker_api.app.core.errors import (
    ConflictError,
    InternalError,
    NotFoundError,
    ValidationError,
)
from task_tracker_api.app.schemas.task import TaskCreate, TaskUpdate
from task_tracker_api.app.schemas.user import UserCreate, UserUpdate
from task_tracker_api.app.services import task_service
from task_tracker_api.app.services.statistics_service import StatisticsService
from task_tracker_api.app.services.task_service import TaskFilter, TaskService, parse_completed
from task_tracker_api.app.services.user_service import UserService


class TestParseCompleted:
    @pytest.mark.parametrize(
        "raw,expected",
        [(None, None), ("true", True), ("false", False), ("TRUE", True), (" False ", False)],
    )
    def test_valid_values(self, raw, expected) -> None:
        assert parse_completed(raw) is expected

    @pytest.mark.parametrize("raw", ["", "1", "yes", "maybe"])
    def test_invalid_values(self, raw: str) -> None:
        with pytest.raises(ValidationError):
            parse_completed(raw)


class TestTaskFilter:
    def test_no_filters(self) -> None:
        assert TaskFilter().where_clause() == ("", [])

    def test_owner_only(self) -> None:
        assert TaskFilter(owner_id=3).where_clause() == (" WHERE t.user_id = ?", [3])

    def test_completed_false_is_a_filter(self) -> None:
        assert TaskFilter(completed=False).where_clause() == (" WHERE t.completed = ?", [0])

    def test_conjunction(self) -> None:
        where_sql, params = TaskFilter(owner_id=1, completed=True).where_clause()

        assert where_sql == " WHERE t.user_id = ? AND t.completed = ?"
        assert params == [1, 1]

    def test_owner_outside_integer_range_matches_nothing(self) -> None:
        assert TaskFilter(owner_id=MAX_ID + 1).matches_nothing
        assert not TaskFilter(owner_id=MAX_ID).matches_nothing
        assert not TaskFilter(completed=True).matches_nothing


class TestStorableId:
    @pytest.mark.parametrize("value", [1, 0, -1, MAX_ID, -MAX_ID - 1])
    def test_inside_range(self, value: int) -> None:
        assert is_storable_id(value)

    @pytest.mark.parametrize("value", [MAX_ID + 1, -MAX_ID - 2, 2**70])
    def test_outside_range(self, value: int) -> None:
        assert not is_storable_id(value)


@pytest.mark.asyncio
class TestIntegrity:
    async def test_duplicate_email_conflicts(self, database: str) -> None:
        await UserService.create_user(UserCreate(name="Ana", email="ana@x.com"))

        with pytest.raises(ConflictError):
            await UserService.create_user(UserCreate(name="Ana 2", email="ana@x.com"))

        assert len(await UserService.list_users()) == 1

    async def test_unknown_owner_persists_nothing(self, database: str) -> None:
        with pytest.raises(ValidationError):
            await TaskService.create_task(TaskCreate(title="X", owner_id=999))

        assert await TaskService.list_tasks() == []

    async def test_store_enforces_task_owner(self, database: str) -> None:
        conn = get_connection()
        try:
            with pytest.raises(sqlite3.IntegrityError):
                conn.execute(
                    "INSERT INTO tasks (title, user_id, created_at, updated_at) VALUES ('x', 999, 'a', 'a')"
                )
        finally:
            conn.close()

    async def test_delete_owner_of_tasks_conflicts(self, database: str) -> None:
        user = await UserService.create_user(UserCreate(name="Ana", email="ana@x.com"))
        await TaskService.create_task(TaskCreate(title="X", owner_id=user.id))

        with pytest.raises(ConflictError):
            await UserService.delete_user(user.id)

        assert (await UserService.get_user(user.id)).tasks[0].title == "X"

    async def test_not_found_operations_change_nothing(self, database: str) -> None:
        user = await UserService.create_user(UserCreate(name="Ana", email="ana@x.com"))

        with pytest.raises(NotFoundError):
            await UserService.get_user(user.id + 1)
        with pytest.raises(NotFoundError):
            await UserService.update_user(user.id + 1, UserUpdate(name="Z"))
        with pytest.raises(NotFoundError):
            await UserService.delete_user(user.id + 1)
        with pytest.raises(NotFoundError):
            await TaskService.get_task(1)
        with pytest.raises(NotFoundError):
            await TaskService.update_task(1, TaskUpdate(completed=True))
        with pytest.raises(NotFoundError):
            await TaskService.delete_task(1)

        users = await UserService.list_users()
        assert [(u.id, u.name, u.email) for u in users] == [(user.id, "Ana", "ana@x.com")]

    async def test_created_at_never_changes(self, database: str) -> None:
        user = await UserService.create_user(UserCreate(name="Ana", email="ana@x.com"))
        task = await TaskService.create_task(TaskCreate(title="X", owner_id=user.id))

        updated = await TaskService.update_task(
            task.id, TaskUpdate(title="Y", description="d", completed=True)
        )

        assert updated.created_at == task.created_at
        assert (updated.title, updated.description, updated.completed) == ("Y", "d", True)

    async def test_empty_update_returns_current_state(self, database: str) -> None:
        user = await UserService.create_user(UserCreate(name="Ana", email="ana@x.com"))

        same = await UserService.update_user(user.id, UserUpdate())

        assert (same.name, same.email) == ("Ana", "ana@x.com")

    async def test_owner_deleted_before_insert_is_a_validation_error(
        self, database: str, monkeypatch
    ) -> None:
        user = await UserService.create_user(UserCreate(name="Ana", email="ana@x.com"))
        real_utc_now = task_service.utc_now

        def delete_owner_then_now() -> str:
            # Runs between the owner check and the INSERT.
            conn = get_connection()
            try:
                conn.execute("DELETE FROM users WHERE id = ?", (user.id,))
                conn.commit()
            finally:
                conn.close()
            return real_utc_now()

        monkeypatch.setattr(task_service, "utc_now", delete_owner_then_now)

        with pytest.raises(ValidationError, match="User does not exist"):
            await TaskService.create_task(TaskCreate(title="X", owner_id=user.id))

        assert await TaskService.list_tasks() == []
        assert await UserService.list_users() == []


@pytest.mark.asyncio
class TestOutOfRangeIds:
    BIG = 2**70

    async def test_users_are_not_found(self, database: str) -> None:
        with pytest.raises(NotFoundError):
            await UserService.get_user(self.BIG)
        with pytest.raises(NotFoundError):
            await UserService.update_user(self.BIG, UserUpdate(name="Z"))
        with pytest.raises(NotFoundError):
            await UserService.delete_user(-self.BIG)

    async def test_tasks_are_not_found(self, database: str) -> None:
        with pytest.raises(NotFoundError):
            await TaskService.get_task(self.BIG)
        with pytest.raises(NotFoundError):
            await TaskService.update_task(self.BIG, TaskUpdate(completed=True))
        with pytest.raises(NotFoundError):
            await TaskService.delete_task(self.BIG)

    async def test_owner_filter_matches_nothing(self, database: str) -> None:
        user = await UserService.create_user(UserCreate(name="Ana", email="ana@x.com"))
        await TaskService.create_task(TaskCreate(title="X", owner_id=user.id))

        assert await TaskService.list_tasks(TaskFilter(owner_id=self.BIG)) == []

    async def test_unknown_owner_on_create(self, database: str) -> None:
        with pytest.raises(ValidationError, match="User does not exist"):
            await TaskService.create_task(TaskCreate(title="X", owner_id=self.BIG))

        assert await TaskService.list_tasks() == []


@pytest.mark.asyncio
class TestStoreFailures:
    @pytest.fixture
    def unusable_store(self, tmp_path, monkeypatch) -> None:
        # A directory cannot be opened as a database file.
        monkeypatch.setattr(settings, "database_url", str(tmp_path))

    async def test_list_users_raises_internal_error(self, unusable_store) -> None:
        with pytest.raises(InternalError) as exc_info:
            await UserService.list_users()

        assert exc_info.value.status_code == 500
        assert isinstance(exc_info.value.__cause__, sqlite3.Error)

    async def test_list_tasks_raises_internal_error(self, unusable_store) -> None:
        with pytest.raises(InternalError, match="Failed to list tasks"):
            await TaskService.list_tasks()

    async def test_summary_raises_internal_error(self, unusable_store) -> None:
        with pytest.raises(InternalError):
            await StatisticsService.summary()
