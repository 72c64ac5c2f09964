"""Tasks API router — owner-scoped CRUD.

All routes require an authenticated user; the resolved user's id is the
only owner the service will ever read or write for this request.
"""

from typing import Any, Optional

from fastapi import APIRouter, Body, Depends

from api.deps import get_current_user
from verticals.accounts.models.db_models import User
from verticals.tasks.service import TaskService, get_task_service

router = APIRouter()


@router.get("")
async def list_tasks(
    page: Optional[str] = None,
    limit: Optional[str] = None,
    sortBy: Optional[str] = None,
    sortOrder: Optional[str] = None,
    priority: Optional[str] = None,
    completed: Optional[str] = None,
    user: User = Depends(get_current_user),
    service: TaskService = Depends(get_task_service),
):
    """List the caller's tasks with filtering, sorting and pagination."""
    params = {
        "page": page,
        "limit": limit,
        "sortBy": sortBy,
        "sortOrder": sortOrder,
        "priority": priority,
        "completed": completed,
    }
    result = await service.list_tasks(user.id, params)
    return result.to_dict()


@router.get("/{task_id}")
async def get_task(
    task_id: str,
    user: User = Depends(get_current_user),
    service: TaskService = Depends(get_task_service),
):
    task = await service.get_task(user.id, task_id)
    return {"success": True, "task": task}


@router.post("", status_code=201)
async def create_task(
    payload: dict[str, Any] = Body(...),
    user: User = Depends(get_current_user),
    service: TaskService = Depends(get_task_service),
):
    """Create a task owned by the caller."""
    task = await service.create_task(user.id, payload)
    return {"success": True, "task": task}


@router.put("/{task_id}")
async def update_task(
    task_id: str,
    payload: dict[str, Any] = Body(...),
    user: User = Depends(get_current_user),
    service: TaskService = Depends(get_task_service),
):
    """Update any subset of a task's fields."""
    task = await service.update_task(user.id, task_id, payload)
    return {"success": True, "task": task}


@router.delete("/{task_id}")
async def delete_task(
    task_id: str,
    user: User = Depends(get_current_user),
    service: TaskService = Depends(get_task_service),
):
    await service.delete_task(user.id, task_id)
    return {"success": True, "message": "Task deleted successfully"}
