"""
Discovery endpoint.

``GET /`` returns a static description of every route so that a client
can find its way around the API without reading the OpenAPI document.
"""

from typing import Any, Dict

from fastapi import APIRouter

from task_tracker_api.app.core.config import settings

router = APIRouter()

ENDPOINTS: Dict[str, Dict[str, str]] = {
    "users": {
        "GET /users": "List all users",
        "GET /users/:id": "Get a user by ID",
        "POST /users": "Create a user",
        "PUT /users/:id": "Update a user",
        "DELETE /users/:id": "Delete a user",
    },
    "tasks": {
        "GET /tasks": "List all tasks (filters: ?ownerId=X&completed=true/false)",
        "GET /tasks/:id": "Get a task by ID",
        "POST /tasks": "Create a task",
        "PUT /tasks/:id": "Update a task",
        "DELETE /tasks/:id": "Delete a task",
    },
    "stats": {
        "GET /stats": "Get summary statistics",
    },
}


@router.get("/")
async def get_info() -> Dict[str, Any]:
    """Return the API name, version and the list of endpoints."""
    return {
        "message": settings.project_name,
        "version": settings.api_version,
        "endpoints": ENDPOINTS,
    }
