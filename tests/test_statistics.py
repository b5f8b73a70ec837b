"""Tests for the summary report."""

import pytest
from fastapi.testclient import TestClient

from task_tracker_api.app.schemas.user import UserCreate
from task_tracker_api.app.services.statistics_service import StatisticsService, completion_rate
from task_tracker_api.app.services.user_service import UserService


class TestCompletionRate:
    @pytest.mark.parametrize(
        "completed,total,expected",
        [(0, 0, 0), (3, 10, 30), (0, 5, 0), (5, 5, 100), (1, 3, 33), (2, 3, 67), (1, 8, 13)],
    )
    def test_completion_rate(self, completed: int, total: int, expected: int) -> None:
        assert completion_rate(completed, total) == expected


class TestStatsEndpoint:
    def test_empty_database(self, client: TestClient) -> None:
        response = client.get("/stats")

        assert response.status_code == 200
        assert response.json() == {
            "totalUsers": 0,
            "totalTasks": 0,
            "completedTasks": 0,
            "pendingTasks": 0,
            "completionRate": 0,
        }

    def test_ten_tasks_three_completed(self, client: TestClient, user: dict) -> None:
        for i in range(10):
            task = client.post("/tasks", json={"title": f"t{i}", "ownerId": user["id"]}).json()
            if i < 3:
                client.put(f"/tasks/{task['id']}", json={"completed": True})

        stats = client.get("/stats").json()

        assert stats["totalTasks"] == 10
        assert stats["completedTasks"] == 3
        assert stats["pendingTasks"] == 7
        assert stats["completionRate"] == 30


class TestScenario:
    def test_create_complete_and_report(self, client: TestClient) -> None:
        created = client.post("/users", json={"name": "Ana", "email": "ana@x.com"})
        assert created.status_code == 201
        assert created.json() == {"id": 1, "name": "Ana", "email": "ana@x.com", "tasks": []}

        task = client.post("/tasks", json={"title": "Write spec", "ownerId": 1})
        assert task.status_code == 201
        assert task.json()["completed"] is False
        assert task.json()["owner"] == {"id": 1, "name": "Ana", "email": "ana@x.com"}

        assert client.get("/stats").json() == {
            "totalUsers": 1,
            "totalTasks": 1,
            "completedTasks": 0,
            "pendingTasks": 1,
            "completionRate": 0,
        }

        updated = client.put(f"/tasks/{task.json()['id']}", json={"completed": True})
        assert updated.status_code == 200
        assert updated.json()["completed"] is True

        assert client.get("/stats").json()["completionRate"] == 100


@pytest.mark.asyncio
async def test_summary_service_counts_users_without_tasks(database: str) -> None:
    await UserService.create_user(UserCreate(name="Ana", email="ana@x.com"))
    await UserService.create_user(UserCreate(name="Bo", email="bo@x.com"))

    stats = await StatisticsService.summary()

    assert stats.total_users == 2
    assert stats.total_tasks == 0
    assert stats.completion_rate == 0
